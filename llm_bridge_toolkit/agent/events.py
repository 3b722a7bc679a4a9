"""Events a chat session yields while streaming one model turn."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from ..tools.models import ToolCallRequest
from ..types import UsageMetadata


@dataclass(frozen=True)
class ContentEvent:
    text: str


@dataclass(frozen=True)
class ThoughtEvent:
    subject: str
    description: str = ""


@dataclass(frozen=True)
class ToolCallRequestEvent:
    request: ToolCallRequest


@dataclass(frozen=True)
class ErrorEvent:
    message: str


@dataclass(frozen=True)
class UserCancelledEvent:
    pass


@dataclass(frozen=True)
class FinishedEvent:
    usage: Optional[UsageMetadata] = None


StreamEvent = Union[
    ContentEvent,
    ThoughtEvent,
    ToolCallRequestEvent,
    ErrorEvent,
    UserCancelledEvent,
    FinishedEvent,
]
