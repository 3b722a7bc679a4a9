"""Content generator for any OpenAI-compatible Chat Completions endpoint."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncGenerator, Dict, Optional

from ..cancellation import iterate_until_cancelled
from ..config import BridgeConfig
from ..conversion.converter import ModelConverter, StreamReassembler
from ..conversion.tools import extract_tool_functions
from ..exceptions import ConfigurationError, LLMBridgeError, ProviderError
from ..types import GenerateContentRequest, GenerateContentResponse
from . import register_generator
from ._base import BaseContentGenerator

logger = logging.getLogger(__name__)


@register_generator("custom_llm")
class CustomLLMContentGenerator(BaseContentGenerator):
    """Drives a custom model provider through the ``openai`` SDK.

    Application requests are translated to Chat Completions messages,
    sent with the sampling settings from *config*, and the replies are
    translated back (streamed chunks through a :class:`StreamReassembler`).
    """

    def __init__(self, config: BridgeConfig) -> None:
        self.config = config.require_complete()
        self._async_client: Any = None  # Lazy-created

    def _get_client(self) -> Any:
        """Lazily import and create an ``AsyncOpenAI`` client."""
        if self._async_client is not None:
            return self._async_client

        try:
            from openai import AsyncOpenAI
        except ImportError:
            raise ConfigurationError(
                "Custom LLM endpoints require the 'openai' package. "
                "Install it with: pip install openai"
            )

        self._async_client = AsyncOpenAI(
            api_key=self.config.api_key,
            base_url=self.config.base_url,
            timeout=self.config.timeout,
            max_retries=self.config.max_retries,
        )
        return self._async_client

    # ------------------------------------------------------------------
    # Request building
    # ------------------------------------------------------------------

    def _build_request(
        self, request: GenerateContentRequest, *, stream: bool
    ) -> Dict[str, Any]:
        """Build the keyword arguments for ``client.chat.completions.create``."""
        payload: Dict[str, Any] = {
            "messages": ModelConverter.to_openai_messages(request),
            "model": self.config.model,
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
            "top_p": self.config.top_p,
            "stream": stream,
        }
        tools = extract_tool_functions(request.tools)
        if tools:
            payload["tools"] = tools
        if stream and self.config.include_usage:
            payload["stream_options"] = {"include_usage": True}
        return payload

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    async def generate_content(
        self, request: GenerateContentRequest
    ) -> GenerateContentResponse:
        """Make a single non-streaming Chat Completions call."""
        client = self._get_client()
        payload = self._build_request(request, stream=False)
        logger.info(
            "Sending %d messages to %s (provider=%s)",
            len(payload["messages"]),
            self.config.model,
            self.config.provider or "custom",
        )
        try:
            completion = await client.chat.completions.create(**payload)
        except Exception as e:
            raise ProviderError(f"Custom LLM API error: {e}") from e

        return ModelConverter.to_application_response(completion)

    async def generate_content_stream(
        self,
        request: GenerateContentRequest,
        signal: Optional[asyncio.Event] = None,
    ) -> AsyncGenerator[GenerateContentResponse, None]:
        """Stream a Chat Completions call as application responses.

        Stops after the usage response.  A tool-call flush or end marker
        does not stop the stream, so a trailing usage chunk still arrives.
        """
        client = self._get_client()
        payload = self._build_request(request, stream=True)
        logger.info(
            "Streaming %d messages to %s (provider=%s)",
            len(payload["messages"]),
            self.config.model,
            self.config.provider or "custom",
        )
        try:
            stream = await client.chat.completions.create(**payload)
        except Exception as e:
            raise ProviderError(f"Custom LLM API stream error: {e}") from e

        reassembler = StreamReassembler()
        try:
            async for chunk in iterate_until_cancelled(stream, signal):
                step = reassembler.process_chunk(chunk)
                if step.response is not None:
                    yield step.response
                if step.terminal and step.response.usage_metadata is not None:
                    break
        except LLMBridgeError:
            raise
        except Exception as e:
            raise ProviderError(f"Custom LLM API stream error: {e}") from e
        finally:
            close = getattr(stream, "close", None)
            if close is not None:
                await close()
