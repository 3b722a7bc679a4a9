from .contents import (
    coerce_part,
    coerce_parts,
    is_function_call,
    is_function_response,
    is_inline_data,
    is_text,
    normalize_contents,
)
from .converter import ModelConverter, StreamReassembler, StreamStep, ToolCallData
from .tools import extract_tool_functions

__all__ = [
    "ModelConverter",
    "StreamReassembler",
    "StreamStep",
    "ToolCallData",
    "coerce_part",
    "coerce_parts",
    "extract_tool_functions",
    "is_function_call",
    "is_function_response",
    "is_inline_data",
    "is_text",
    "normalize_contents",
]
