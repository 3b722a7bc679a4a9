from .events import (
    ContentEvent,
    ErrorEvent,
    FinishedEvent,
    StreamEvent,
    ThoughtEvent,
    ToolCallRequestEvent,
    UserCancelledEvent,
)
from .loop import Agent
from .results import (
    AgentResult,
    ContentResult,
    ErrorResult,
    ThoughtResult,
    ToolCallResult,
    UserCancelledResult,
    process_stream_event,
)
from .session import ChatSession

__all__ = [
    "Agent",
    "AgentResult",
    "ChatSession",
    "ContentEvent",
    "ContentResult",
    "ErrorEvent",
    "ErrorResult",
    "FinishedEvent",
    "StreamEvent",
    "ThoughtEvent",
    "ThoughtResult",
    "ToolCallRequestEvent",
    "ToolCallResult",
    "UserCancelledEvent",
    "UserCancelledResult",
    "process_stream_event",
]
