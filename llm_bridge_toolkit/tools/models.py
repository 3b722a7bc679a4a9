# llm_bridge_toolkit/llm_bridge_toolkit/tools/models.py
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ..types import Part

ToolCallStatus = Literal["success", "error", "cancelled"]


class ToolExecutionResult(BaseModel):
    """Represents the outcome of a tool execution, separating LLM content from display output."""

    content: str  # The string handed back to the model
    display: Optional[str] = None  # Human-readable rendering for logs/UI
    error: Optional[str] = None  # Set when the tool failed


class ToolCallRequest(BaseModel):
    call_id: str  # Correlates the eventual function response with the call
    name: str
    args: Dict[str, Any] = Field(default_factory=dict)


class ToolCallResponse(BaseModel):
    call_id: str
    response_parts: List[Part] = Field(default_factory=list)  # Parts fed back to the model
    result_display: Optional[str] = None
    error: Optional[str] = None

    @field_validator("response_parts", mode="before")
    @classmethod
    def _wrap_parts(cls, value: Any) -> Any:
        # Schedulers may hand back a single part or bare strings.
        if value is None:
            return []
        if not isinstance(value, (list, tuple)):
            value = [value]
        return [{"text": v} if isinstance(v, str) else v for v in value]


class CompletedToolCall(BaseModel):
    """One finished entry of a scheduled batch."""

    request: ToolCallRequest
    status: ToolCallStatus
    response: ToolCallResponse
