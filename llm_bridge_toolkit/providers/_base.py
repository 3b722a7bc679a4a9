"""BaseContentGenerator ABC: the contract every content generator fulfils."""

from __future__ import annotations

import abc
import asyncio
import logging
from typing import Any, AsyncGenerator, Optional

from ..conversion.converter import ModelConverter
from ..exceptions import UnsupportedFeatureError
from ..tokens import estimate_tokens
from ..types import CountTokensResponse, GenerateContentRequest, GenerateContentResponse

logger = logging.getLogger(__name__)


class BaseContentGenerator(abc.ABC):
    """Abstract base for content generators.

    A content generator accepts application-protocol requests and returns
    application-protocol responses, whatever wire format it speaks
    underneath.  Subclasses implement the two generation methods; token
    counting and embedding have shared defaults.
    """

    @abc.abstractmethod
    async def generate_content(
        self, request: GenerateContentRequest
    ) -> GenerateContentResponse:
        """Make a single non-streaming call and return the full response."""
        ...

    @abc.abstractmethod
    def generate_content_stream(
        self,
        request: GenerateContentRequest,
        signal: Optional[asyncio.Event] = None,
    ) -> AsyncGenerator[GenerateContentResponse, None]:
        """Stream a response as a sequence of partial responses.

        Text arrives as text-only responses, tool calls as one response
        holding every requested call, and usage as a final parts-less
        response.  Setting *signal* stops the stream.
        """
        ...

    async def count_tokens(self, request: GenerateContentRequest) -> CountTokensResponse:
        """Estimate the prompt size of *request*.

        The estimate comes from :func:`~llm_bridge_toolkit.tokens.estimate_tokens`
        over the translated messages and is an approximation only.
        """
        messages = ModelConverter.to_openai_messages(request)
        text = " ".join(
            m["content"] if isinstance(m.get("content"), str) else "" for m in messages
        )
        return CountTokensResponse(total_tokens=estimate_tokens(text))

    async def embed_content(self, request: Any) -> Any:
        raise UnsupportedFeatureError(
            f"{type(self).__name__} does not support embeddings."
        )
