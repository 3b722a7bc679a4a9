"""Chat session: conversation history plus one streamed model turn at a time."""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncGenerator, List, Optional, Sequence
from uuid import uuid4

from ..conversion.contents import coerce_parts
from ..exceptions import LLMBridgeError
from ..providers._base import BaseContentGenerator
from ..tools.models import ToolCallRequest
from ..types import (
    ROLE_MODEL,
    ROLE_USER,
    Content,
    FunctionCallPart,
    GenerateContentRequest,
    Part,
    TextPart,
    Tool,
    UsageMetadata,
)
from .events import (
    ContentEvent,
    ErrorEvent,
    FinishedEvent,
    StreamEvent,
    ThoughtEvent,
    ToolCallRequestEvent,
    UserCancelledEvent,
)

logger = logging.getLogger(__name__)


def _merge_text_parts(parts: List[Part]) -> List[Part]:
    """Join runs of streamed text deltas into single parts, dropping thoughts."""
    merged: List[Part] = []
    for part in parts:
        if isinstance(part, TextPart):
            if part.thought:
                continue
            if merged and isinstance(merged[-1], TextPart):
                merged[-1] = TextPart(text=merged[-1].text + part.text)
                continue
        merged.append(part)
    return merged


class ChatSession:
    """Keeps the conversation and streams model turns from a content generator.

    Each call to :meth:`send_message_stream` appends the given parts as a
    user turn, streams the model's reply as :mod:`~llm_bridge_toolkit.agent.events`,
    and appends the reply to the history once the stream ends.
    """

    def __init__(
        self,
        generator: BaseContentGenerator,
        *,
        system_instruction: Optional[str] = None,
        tools: Optional[List[Tool]] = None,
        history: Optional[Sequence[Content]] = None,
    ) -> None:
        self.generator = generator
        self.system_instruction = system_instruction
        self.tools = tools
        self._history: List[Content] = list(history or [])

    @property
    def history(self) -> List[Content]:
        return list(self._history)

    def _record_model_turn(self, parts: List[Part]) -> None:
        merged = _merge_text_parts(parts)
        if merged:
            self._history.append(Content(role=ROLE_MODEL, parts=merged))

    @staticmethod
    def _event_for(part: Part) -> Optional[StreamEvent]:
        if isinstance(part, TextPart):
            if part.thought:
                subject, _, description = part.text.strip().partition("\n")
                return ThoughtEvent(subject=subject, description=description.strip())
            return ContentEvent(text=part.text)
        if isinstance(part, FunctionCallPart):
            call = part.function_call
            return ToolCallRequestEvent(
                ToolCallRequest(
                    call_id=call.id or "",
                    name=call.name,
                    args=dict(call.args),
                )
            )
        return None

    async def send_message_stream(
        self,
        parts: Sequence[object],
        signal: Optional[asyncio.Event] = None,
    ) -> AsyncGenerator[StreamEvent, None]:
        """Send *parts* as the next user turn and stream the reply as events.

        Generator failures end the turn with an :class:`ErrorEvent`; a set
        *signal* ends it with a :class:`UserCancelledEvent`.  Otherwise the
        turn ends with a :class:`FinishedEvent` carrying the usage, if any.
        """
        self._history.append(Content(role=ROLE_USER, parts=coerce_parts(list(parts))))
        request = GenerateContentRequest(
            contents=list(self._history),
            system_instruction=self.system_instruction,
            tools=self.tools,
        )

        model_parts: List[Part] = []
        usage: Optional[UsageMetadata] = None
        try:
            async for response in self.generator.generate_content_stream(request, signal):
                if response.usage_metadata is not None:
                    usage = response.usage_metadata
                for part in response.parts:
                    if isinstance(part, FunctionCallPart) and not part.function_call.id:
                        part = FunctionCallPart(
                            function_call=part.function_call.model_copy(
                                update={"id": f"call_{uuid4().hex[:12]}"}
                            )
                        )
                    model_parts.append(part)
                    event = self._event_for(part)
                    if event is not None:
                        yield event
        except LLMBridgeError as e:
            logger.error("Model turn failed: %s", e)
            self._record_model_turn(model_parts)
            yield ErrorEvent(message=str(e))
            return

        self._record_model_turn(model_parts)
        if signal is not None and signal.is_set():
            yield UserCancelledEvent()
            return
        yield FinishedEvent(usage=usage)
