"""Unit tests for part classification and content normalisation."""

from __future__ import annotations

import pytest

from llm_bridge_toolkit.conversion.contents import (
    coerce_part,
    coerce_parts,
    is_function_call,
    is_function_response,
    is_inline_data,
    is_text,
    normalize_contents,
)
from llm_bridge_toolkit.types import (
    Content,
    FunctionCall,
    FunctionCallPart,
    FunctionResponsePart,
    InlineDataPart,
    TextPart,
)


class TestClassifier:
    @pytest.mark.parametrize("value", [None, 42, "text", ["functionCall"], object()])
    def test_non_objects_are_never_fragments(self, value) -> None:
        assert is_function_call(value) is False
        assert is_function_response(value) is False
        assert is_inline_data(value) is False

    def test_function_call_needs_name_and_args(self) -> None:
        assert is_function_call({"functionCall": {"name": "search", "args": {}}})
        assert is_function_call({"function_call": {"name": "search", "args": {"q": 1}}})
        assert not is_function_call({"functionCall": {"name": "search"}})
        assert not is_function_call({"functionCall": {"name": 3, "args": {}}})
        assert not is_function_call({"functionCall": "search"})

    def test_function_response_needs_id_name_and_payload(self) -> None:
        base = {"id": "call_1", "name": "search"}
        assert is_function_response(
            {"functionResponse": {**base, "response": {"output": "ok"}}}
        )
        assert is_function_response(
            {"functionResponse": {**base, "response": {"error": "timeout"}}}
        )
        assert not is_function_response({"functionResponse": {**base, "response": {}}})
        assert not is_function_response(
            {"functionResponse": {"name": "search", "response": {"output": "ok"}}}
        )
        assert not is_function_response(
            {"functionResponse": {**base, "response": {"output": 5}}}
        )

    def test_typed_parts_are_recognised(self) -> None:
        call = FunctionCallPart(function_call=FunctionCall(name="f", args={}))
        assert is_function_call(call)
        assert not is_function_response(call)
        assert is_text(TextPart(text=""))

    def test_inline_data_accepts_either_spelling(self) -> None:
        assert is_inline_data({"inlineData": {"mimeType": "image/png", "data": "AAA"}})
        assert is_inline_data({"inline_data": {"mime_type": "image/png", "data": "AAA"}})
        assert not is_inline_data({"inlineData": {"mimeType": "image/png"}})


class TestCoercion:
    def test_string_becomes_text_part(self) -> None:
        assert coerce_part("hi") == TextPart(text="hi")

    def test_invalid_fragments_are_dropped(self) -> None:
        parts = coerce_parts(
            [
                {"text": "keep"},
                {"functionCall": {"name": "missing_args"}},
                {"unknown": True},
                7,
            ]
        )
        assert parts == [TextPart(text="keep")]

    def test_camel_case_fragments_become_typed_parts(self) -> None:
        part = coerce_part(
            {
                "functionResponse": {
                    "id": "call_1",
                    "name": "search",
                    "response": {"output": "cats"},
                }
            }
        )
        assert isinstance(part, FunctionResponsePart)
        assert part.function_response.response.output == "cats"

        image = coerce_part({"inlineData": {"mimeType": "image/png", "data": "AAA"}})
        assert isinstance(image, InlineDataPart)
        assert image.inline_data.mime_type == "image/png"


class TestNormalizeContents:
    def test_string(self) -> None:
        assert normalize_contents("hello") == [
            Content(role="user", parts=[TextPart(text="hello")])
        ]

    def test_single_block_keeps_role(self) -> None:
        blocks = normalize_contents({"role": "model", "parts": [{"text": "hi"}]})
        assert blocks == [Content(role="model", parts=[TextPart(text="hi")])]

    def test_block_without_role_defaults_to_user(self) -> None:
        assert normalize_contents({"parts": [{"text": "hi"}]})[0].role == "user"

    def test_bare_fragment_is_wrapped(self) -> None:
        blocks = normalize_contents({"functionCall": {"name": "f", "args": {}}})
        assert len(blocks) == 1
        assert blocks[0].role == "user"
        assert isinstance(blocks[0].parts[0], FunctionCallPart)

    def test_mixed_list_preserves_order_without_merging(self) -> None:
        typed = Content(role="model", parts=[TextPart(text="b")])
        blocks = normalize_contents(["a", typed, {"text": "c"}, "d"])
        assert [b.role for b in blocks] == ["user", "model", "user", "user"]
        assert [b.parts[0].text for b in blocks] == ["a", "b", "c", "d"]
        assert blocks[1] is typed

    def test_none_is_empty(self) -> None:
        assert normalize_contents(None) == []
