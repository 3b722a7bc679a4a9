"""Tool declaration conversion for Chat Completions requests."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from ..types import Tool

# Schema keywords some OpenAI-compatible servers reject.
_DROPPED_SCHEMA_KEYS = frozenset({"minLength", "minItems"})


def _normalize_schema(obj: Any) -> Any:
    """Lower-case every string ``type`` value and drop unsupported keywords."""
    if isinstance(obj, list):
        return [_normalize_schema(item) for item in obj]
    if isinstance(obj, dict):
        normalized: Dict[str, Any] = {}
        for key, value in obj.items():
            if key in _DROPPED_SCHEMA_KEYS:
                continue
            if key == "type" and isinstance(value, str):
                normalized[key] = value.lower()
            else:
                normalized[key] = _normalize_schema(value)
        return normalized
    return obj


def extract_tool_functions(
    tools: Optional[Sequence[Tool]],
) -> Optional[List[Dict[str, Any]]]:
    """Convert function declarations into Chat Completions ``tools``.

    Returns ``None`` when *tools* is ``None``.
    """
    if tools is None:
        return None
    result: List[Dict[str, Any]] = []
    for tool in tools:
        for func in tool.function_declarations:
            result.append(
                {
                    "type": "function",
                    "function": {
                        "name": func.name or "",
                        "description": func.description or "",
                        "parameters": _normalize_schema(func.parameters) or {},
                    },
                }
            )
    return result
