"""Scripted content generator for agent and session tests."""

from __future__ import annotations

import asyncio
from typing import Any, AsyncGenerator, List, Optional

from llm_bridge_toolkit.providers._base import BaseContentGenerator
from llm_bridge_toolkit.types import (
    Candidate,
    Content,
    FunctionCall,
    FunctionCallPart,
    GenerateContentRequest,
    GenerateContentResponse,
    TextPart,
    UsageMetadata,
)

WAIT_FOR_SIGNAL = object()


def text(value: str, thought: Optional[bool] = None) -> GenerateContentResponse:
    return _response([TextPart(text=value, thought=thought)])


def call(name: str, call_id: Optional[str] = None, **args: Any) -> GenerateContentResponse:
    return _response(
        [FunctionCallPart(function_call=FunctionCall(id=call_id, name=name, args=args))]
    )


def usage(prompt: int, completion: int) -> GenerateContentResponse:
    response = _response([])
    response.usage_metadata = UsageMetadata(
        prompt_token_count=prompt,
        candidates_token_count=completion,
        total_token_count=prompt + completion,
    )
    return response


def _response(parts) -> GenerateContentResponse:
    return GenerateContentResponse(
        candidates=[Candidate(content=Content(role="model", parts=parts))]
    )


class ScriptedGenerator(BaseContentGenerator):
    """Plays back one scripted turn per ``generate_content_stream`` call.

    A turn is a list of responses.  An exception in the list is raised at
    that point; ``WAIT_FOR_SIGNAL`` blocks until the caller's signal is set
    and then carries on with the rest of the turn.
    """

    def __init__(self, *turns: List[Any]) -> None:
        self.turns = list(turns)
        self.requests: List[GenerateContentRequest] = []

    async def generate_content(self, request: GenerateContentRequest) -> GenerateContentResponse:
        self.requests.append(request)
        parts = []
        for item in self.turns.pop(0):
            parts.extend(item.parts)
        return _response(parts)

    async def generate_content_stream(
        self,
        request: GenerateContentRequest,
        signal: Optional[asyncio.Event] = None,
    ) -> AsyncGenerator[GenerateContentResponse, None]:
        self.requests.append(request.model_copy(deep=True))
        for item in self.turns.pop(0):
            if item is WAIT_FOR_SIGNAL:
                await signal.wait()
                continue
            if isinstance(item, Exception):
                raise item
            yield item
