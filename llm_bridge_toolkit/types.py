"""Application-protocol data models.

The application side speaks a multi-part conversational format: a
conversation is a list of :class:`Content` blocks, each holding an ordered
list of typed parts.  Models serialise with camelCase keys
(``functionCall``, ``inlineData``, ``usageMetadata``...) when dumped with
``by_alias=True`` and accept either spelling on input.

Usage::

    from llm_bridge_toolkit.types import Content, TextPart

    block = Content(role="user", parts=[TextPart(text="Hello")])
    block.model_dump(by_alias=True, exclude_none=True)
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictStr, model_validator
from pydantic.alias_generators import to_camel

ROLE_USER = "user"
ROLE_MODEL = "model"
ROLE_SYSTEM = "system"
ROLE_TOOL = "tool"


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Parts
# ---------------------------------------------------------------------------


class TextPart(_WireModel):
    text: StrictStr
    thought: Optional[bool] = None  # True for reasoning text, not answer text


class FunctionCall(_WireModel):
    id: Optional[StrictStr] = None
    name: StrictStr
    args: Dict[str, Any]


class FunctionCallPart(_WireModel):
    function_call: FunctionCall


class FunctionResponsePayload(_WireModel):
    output: Optional[StrictStr] = None
    error: Optional[StrictStr] = None

    @model_validator(mode="after")
    def _require_output_or_error(self) -> "FunctionResponsePayload":
        if self.output is None and self.error is None:
            raise ValueError("function response needs an 'output' or an 'error'")
        return self


class FunctionResponse(_WireModel):
    id: StrictStr
    name: StrictStr
    response: FunctionResponsePayload


class FunctionResponsePart(_WireModel):
    function_response: FunctionResponse


class InlineData(_WireModel):
    mime_type: StrictStr
    data: StrictStr


class InlineDataPart(_WireModel):
    inline_data: InlineData


Part = Union[TextPart, FunctionCallPart, FunctionResponsePart, InlineDataPart]


class Content(_WireModel):
    """One role-tagged turn of the conversation."""

    role: str = ROLE_USER
    parts: List[Part] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class FunctionDeclaration(_WireModel):
    name: str
    description: Optional[str] = None
    parameters: Optional[Dict[str, Any]] = None


class Tool(_WireModel):
    function_declarations: List[FunctionDeclaration] = Field(default_factory=list)


class GenerateContentRequest(_WireModel):
    """A generation request.

    Attributes:
        contents: Any shape accepted by
            :func:`~llm_bridge_toolkit.conversion.contents.normalize_contents`
            (string, part, content block, or a list of those).
        system_instruction: Top-level system prompt. ``None`` becomes ``""``
            on the upstream side.
        tools: Tool declarations offered to the model.
    """

    contents: Any = None
    system_instruction: Optional[str] = None
    tools: Optional[List[Tool]] = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class UsageMetadata(_WireModel):
    prompt_token_count: int = 0
    candidates_token_count: int = 0
    total_token_count: int = 0


class Candidate(_WireModel):
    content: Content
    index: int = 0
    safety_ratings: List[Any] = Field(default_factory=list)


class GenerateContentResponse(_WireModel):
    candidates: List[Candidate] = Field(default_factory=list)
    usage_metadata: Optional[UsageMetadata] = None

    @property
    def parts(self) -> List[Part]:
        """Parts of the first candidate (empty when there is none)."""
        if not self.candidates:
            return []
        return list(self.candidates[0].content.parts)

    @property
    def text(self) -> Optional[str]:
        """Concatenated answer text of the first candidate, or ``None``."""
        texts = [
            p.text for p in self.parts if isinstance(p, TextPart) and not p.thought
        ]
        return "".join(texts) if texts else None

    @property
    def function_calls(self) -> List[FunctionCall]:
        return [p.function_call for p in self.parts if isinstance(p, FunctionCallPart)]


class CountTokensResponse(_WireModel):
    total_tokens: int
