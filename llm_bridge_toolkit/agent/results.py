"""Agent result log entries and the stream-event mapping that produces them."""

from __future__ import annotations

import json
import logging
import time
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..types import Part
from .events import (
    ContentEvent,
    ErrorEvent,
    StreamEvent,
    ThoughtEvent,
    ToolCallRequestEvent,
    UserCancelledEvent,
)

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class Thought(BaseModel):
    model_config = ConfigDict(frozen=True)

    summary: str
    details: Optional[str] = None


class ToolCallOutput(BaseModel):
    model_config = ConfigDict(frozen=True)

    llm_content: List[Part] = Field(default_factory=list)
    return_display: Optional[str] = None


class ToolCallRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    args: Dict[str, Any] = Field(default_factory=dict)
    result: Optional[ToolCallOutput] = None  # None for the model's request itself


class _Result(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: int = Field(default_factory=_now_ms)  # milliseconds since the epoch


class ContentResult(_Result):
    type: Literal["content"] = "content"
    content: str


class ThoughtResult(_Result):
    type: Literal["thought"] = "thought"
    thought: Thought


class ToolCallResult(_Result):
    type: Literal["tool_call"] = "tool_call"
    tool_call: ToolCallRecord


class ErrorResult(_Result):
    type: Literal["error"] = "error"
    error: str


class UserCancelledResult(_Result):
    type: Literal["user_cancelled"] = "user_cancelled"


AgentResult = Annotated[
    Union[ContentResult, ThoughtResult, ToolCallResult, ErrorResult, UserCancelledResult],
    Field(discriminator="type"),
]


def process_stream_event(event: StreamEvent) -> Optional[AgentResult]:
    """Map a session event to the log entry it produces, if any."""
    if isinstance(event, ContentEvent):
        return ContentResult(content=event.text)
    if isinstance(event, ThoughtEvent):
        return ThoughtResult(
            thought=Thought(summary=event.subject, details=event.description or None)
        )
    if isinstance(event, ToolCallRequestEvent):
        return ToolCallResult(
            tool_call=ToolCallRecord(name=event.request.name, args=event.request.args)
        )
    if isinstance(event, ErrorEvent):
        return ErrorResult(error=event.message)
    if isinstance(event, UserCancelledEvent):
        return UserCancelledResult()
    return None


def log_result(result: AgentResult) -> None:
    """Write one log entry to the module logger at INFO."""
    if isinstance(result, ContentResult):
        logger.info("content: %s", result.content)
    elif isinstance(result, ToolCallResult):
        logger.info(
            "=== execute tool ===\n%s",
            json.dumps(result.tool_call.model_dump(mode="json", by_alias=True), indent=2),
        )
    elif isinstance(result, ThoughtResult):
        logger.info("thought: %s", result.thought.summary)
    elif isinstance(result, ErrorResult):
        logger.info("error: %s", result.error)
    else:
        logger.info("user cancelled")
