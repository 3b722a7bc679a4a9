"""Translation between application-protocol contents and Chat Completions.

Request side: :meth:`ModelConverter.to_openai_messages` flattens content
blocks into Chat Completions messages.  Response side:
:meth:`ModelConverter.to_application_response` handles complete responses
and :class:`StreamReassembler` handles streamed chunks, rebuilding tool
calls whose argument JSON arrives in fragments.

Upstream objects may be ``openai`` SDK models or plain dicts.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional
from uuid import uuid4

from ..exceptions import ConversionError
from ..types import (
    ROLE_MODEL,
    Candidate,
    Content,
    FunctionCall,
    FunctionCallPart,
    FunctionResponsePart,
    GenerateContentRequest,
    GenerateContentResponse,
    InlineDataPart,
    Part,
    TextPart,
    UsageMetadata,
)
from .contents import normalize_contents

logger = logging.getLogger(__name__)

FINISH_REASON_TOOL_CALLS = "tool_calls"


def _field(obj: Any, name: str, default: Any = None) -> Any:
    if obj is None:
        return default
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)


def _parse_arguments(name: str, raw: Any) -> Dict[str, Any]:
    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        raise ConversionError(
            f"Could not parse arguments of tool call '{name}': {e}. Args: {raw!r}"
        ) from e
    if not isinstance(parsed, dict):
        raise ConversionError(
            f"Arguments of tool call '{name}' are not a JSON object. "
            f"Type: {type(parsed).__name__}"
        )
    return parsed


def _model_response(parts: List[Part]) -> GenerateContentResponse:
    return GenerateContentResponse(
        candidates=[Candidate(content=Content(role=ROLE_MODEL, parts=parts))]
    )


def _usage_metadata(usage: Any) -> UsageMetadata:
    return UsageMetadata(
        prompt_token_count=_field(usage, "prompt_tokens") or 0,
        candidates_token_count=_field(usage, "completion_tokens") or 0,
        total_token_count=_field(usage, "total_tokens") or 0,
    )


@dataclass
class ToolCallData:
    """A streamed tool call being rebuilt from deltas."""

    name: str = ""
    arguments: str = ""  # JSON text, appended delta by delta


@dataclass(frozen=True)
class StreamStep:
    """Outcome of feeding one chunk to the reassembler."""

    response: Optional[GenerateContentResponse] = None
    terminal: bool = False


class ModelConverter:
    """Stateless conversions between the two protocols."""

    # ------------------------------------------------------------------
    # Application request -> Chat Completions messages
    # ------------------------------------------------------------------

    @classmethod
    def to_openai_messages(cls, request: GenerateContentRequest) -> List[Dict[str, Any]]:
        """Convert *request* into Chat Completions messages.

        The first message is always the system message (``""`` when the
        request has no system instruction).  Each content block then
        contributes, in this order: one message for its joined text, one
        ``tool`` message per function response (plus at most one image
        message), and one ``assistant`` message carrying its function calls.
        """
        messages: List[Dict[str, Any]] = [
            {"role": "system", "content": request.system_instruction or ""}
        ]
        for content in normalize_contents(request.contents):
            role = "assistant" if content.role == ROLE_MODEL else content.role
            parts = list(content.parts)
            cls._process_text_parts(parts, role, messages)
            cls._process_function_response_parts(parts, messages)
            cls._process_function_call_parts(parts, messages)
        return messages

    @staticmethod
    def _process_text_parts(
        parts: List[Part], role: str, messages: List[Dict[str, Any]]
    ) -> None:
        texts = [p.text for p in parts if isinstance(p, TextPart)]
        if texts:
            messages.append({"role": role, "content": "\n".join(texts)})

    @classmethod
    def _process_function_response_parts(
        cls, parts: List[Part], messages: List[Dict[str, Any]]
    ) -> None:
        responses = [p for p in parts if isinstance(p, FunctionResponsePart)]
        if not responses:
            return
        for part in responses:
            fr = part.function_response
            if fr.response.error:
                content = f"Error: {fr.response.error}"
            else:
                content = fr.response.output or ""
            messages.append({"role": "tool", "tool_call_id": fr.id, "content": content})
        cls._process_image_parts(parts, messages)

    @staticmethod
    def _process_image_parts(parts: List[Part], messages: List[Dict[str, Any]]) -> None:
        images = [
            p
            for p in parts
            if isinstance(p, InlineDataPart)
            and p.inline_data.mime_type.startswith("image/")
            and p.inline_data.data
        ]
        if not images:
            return
        if len(images) > 1:
            # TODO: send every image once multi-image tool results are confirmed wanted.
            logger.warning(
                "Only the first of %d images in a content block is forwarded.",
                len(images),
            )
        data = images[0].inline_data
        messages.append(
            {
                "role": "user",
                "content": [
                    {
                        "type": "image_url",
                        "image_url": {"url": f"data:{data.mime_type};base64,{data.data}"},
                    }
                ],
            }
        )

    @staticmethod
    def _process_function_call_parts(
        parts: List[Part], messages: List[Dict[str, Any]]
    ) -> None:
        calls = [p.function_call for p in parts if isinstance(p, FunctionCallPart)]
        if not calls:
            return
        messages.append(
            {
                "role": "assistant",
                "content": None,
                "tool_calls": [
                    {
                        "id": call.id or "",
                        "type": "function",
                        "function": {
                            "name": call.name,
                            "arguments": json.dumps(call.args),
                        },
                    }
                    for call in calls
                ],
            }
        )

    # ------------------------------------------------------------------
    # Chat Completions response -> application response
    # ------------------------------------------------------------------

    @staticmethod
    def to_application_response(completion: Any) -> GenerateContentResponse:
        """Convert a complete (non-streamed) chat completion.

        Raises:
            ConversionError: If the completion has no choices or a tool
                call's arguments are not a JSON object.
        """
        choices = _field(completion, "choices") or []
        if not choices:
            raise ConversionError("Upstream completion has no choices.")
        message = _field(choices[0], "message")
        text = _field(message, "content")
        tool_calls = _field(message, "tool_calls")

        parts: List[Part] = []
        if text:
            parts = [TextPart(text=text)]
        elif tool_calls:
            for tc in tool_calls:
                func = _field(tc, "function")
                name = _field(func, "name") or ""
                parts.append(
                    FunctionCallPart(
                        function_call=FunctionCall(
                            id=_field(tc, "id"),
                            name=name,
                            args=_parse_arguments(name, _field(func, "arguments")),
                        )
                    )
                )

        response = _model_response(parts)
        response.usage_metadata = _usage_metadata(_field(completion, "usage"))
        return response

    # ------------------------------------------------------------------
    # Stream responses
    # ------------------------------------------------------------------

    @staticmethod
    def to_stream_text_response(text: str) -> GenerateContentResponse:
        return _model_response([TextPart(text=text)])

    @staticmethod
    def to_stream_tool_calls_response(
        tool_calls: Dict[int, ToolCallData],
    ) -> GenerateContentResponse:
        """Flush accumulated tool calls into one response.

        Upstream-issued ids are not tracked while streaming, so every call
        gets a fresh ``call_<hex>`` id.
        """
        parts: List[Part] = []
        for index, data in tool_calls.items():
            if not data.name:
                raise ConversionError(f"Streamed tool call at index {index} has no name.")
            args = _parse_arguments(data.name, data.arguments) if data.arguments else {}
            parts.append(
                FunctionCallPart(
                    function_call=FunctionCall(
                        id=f"call_{uuid4().hex[:12]}", name=data.name, args=args
                    )
                )
            )
        return _model_response(parts)

    @staticmethod
    def to_stream_end_response() -> GenerateContentResponse:
        return _model_response([])

    @staticmethod
    def to_stream_usage_response(usage: Any) -> GenerateContentResponse:
        response = _model_response([])
        response.usage_metadata = _usage_metadata(usage)
        return response

    @staticmethod
    def update_tool_call_map(tool_calls: Dict[int, ToolCallData], delta: Any) -> None:
        """Merge one tool-call delta into *tool_calls*."""
        index = _field(delta, "index") or 0
        current = tool_calls.setdefault(index, ToolCallData())
        func = _field(delta, "function")
        name = _field(func, "name")
        if name:
            current.name = name
        arguments = _field(func, "arguments")
        if arguments:
            current.arguments += arguments
        logger.debug(
            "Tool call %d: name=%r, %d argument chars buffered",
            index,
            current.name,
            len(current.arguments),
        )

    @classmethod
    def process_stream_chunk(
        cls, chunk: Any, tool_calls: Dict[int, ToolCallData]
    ) -> StreamStep:
        """Apply one stream chunk to *tool_calls* and return what to emit.

        Rules, first match wins: usage (terminal), text delta, tool-call
        flush on ``finish_reason == "tool_calls"``, other finish reason
        (terminal).  Tool-call deltas are merged before the finish reason
        of the same chunk is looked at.
        """
        usage = _field(chunk, "usage")
        if usage is not None and _field(usage, "total_tokens"):
            return StreamStep(cls.to_stream_usage_response(usage), terminal=True)

        choices = _field(chunk, "choices") or []
        if not choices:
            return StreamStep()
        choice = choices[0]
        delta = _field(choice, "delta")

        text = _field(delta, "content")
        if text:
            return StreamStep(cls.to_stream_text_response(text))

        for tool_call in _field(delta, "tool_calls") or []:
            cls.update_tool_call_map(tool_calls, tool_call)

        finish_reason = _field(choice, "finish_reason")
        if finish_reason == FINISH_REASON_TOOL_CALLS and tool_calls:
            response = cls.to_stream_tool_calls_response(tool_calls)
            tool_calls.clear()
            return StreamStep(response)

        if finish_reason:
            return StreamStep(cls.to_stream_end_response(), terminal=True)

        return StreamStep()


class StreamReassembler:
    """Per-stream state machine feeding chunks through :class:`ModelConverter`."""

    def __init__(self) -> None:
        self.tool_calls: Dict[int, ToolCallData] = {}

    def process_chunk(self, chunk: Any) -> StreamStep:
        return ModelConverter.process_stream_chunk(chunk, self.tool_calls)
