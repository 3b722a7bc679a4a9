"""Chunk builders and fakes shared by the stream tests."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional


def text_chunk(text: str, finish_reason: Optional[str] = None) -> Dict[str, Any]:
    return {"choices": [{"index": 0, "delta": {"content": text}, "finish_reason": finish_reason}]}


def tool_delta_chunk(
    index: int,
    name: Optional[str] = None,
    arguments: Optional[str] = None,
    finish_reason: Optional[str] = None,
) -> Dict[str, Any]:
    function: Dict[str, Any] = {}
    if name is not None:
        function["name"] = name
    if arguments is not None:
        function["arguments"] = arguments
    return {
        "choices": [
            {
                "index": 0,
                "delta": {"tool_calls": [{"index": index, "function": function}]},
                "finish_reason": finish_reason,
            }
        ]
    }


def finish_chunk(reason: str) -> Dict[str, Any]:
    return {"choices": [{"index": 0, "delta": {}, "finish_reason": reason}]}


def usage_chunk(prompt: int, completion: int) -> Dict[str, Any]:
    return {
        "choices": [],
        "usage": {
            "prompt_tokens": prompt,
            "completion_tokens": completion,
            "total_tokens": prompt + completion,
        },
    }


class FakeAsyncStream:
    """Async iterable over canned chunks, recording whether it was closed."""

    def __init__(self, chunks: Iterable[Any]) -> None:
        self._chunks: List[Any] = list(chunks)
        self.closed = False

    def __aiter__(self) -> "FakeAsyncStream":
        self._index = 0
        return self

    async def __anext__(self) -> Any:
        if self._index >= len(self._chunks):
            raise StopAsyncIteration
        chunk = self._chunks[self._index]
        self._index += 1
        return chunk

    async def close(self) -> None:
        self.closed = True
