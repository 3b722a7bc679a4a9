from .models import (
    CompletedToolCall,
    ToolCallRequest,
    ToolCallResponse,
    ToolExecutionResult,
)
from .scheduler import FactoryToolScheduler, ToolScheduler
from .tool_factory import ToolFactory

__all__ = [
    "ToolFactory",
    "ToolScheduler",
    "FactoryToolScheduler",
    "CompletedToolCall",
    "ToolCallRequest",
    "ToolCallResponse",
    "ToolExecutionResult",
]
