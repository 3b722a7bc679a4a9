# llm_bridge_toolkit/llm_bridge_toolkit/__init__.py
import json
import logging
import re
from typing import Any

# Configure basic logging for the library
# Users can customize this further in their application
logging.getLogger(__name__).addHandler(logging.NullHandler())


# Expose key components for easy import
from .agent import Agent, ChatSession  # noqa: E402
from .config import AgentConfig, BridgeConfig  # noqa: E402
from .conversion import ModelConverter, StreamReassembler, normalize_contents  # noqa: E402
from .providers import BaseContentGenerator, create_content_generator  # noqa: E402
from .providers.custom_llm import CustomLLMContentGenerator  # noqa: E402
from .tokens import estimate_tokens  # noqa: E402
from .tools import FactoryToolScheduler, ToolFactory, ToolScheduler  # noqa: E402
from .exceptions import (  # noqa: E402
    LLMBridgeError,
    ConfigurationError,
    ConversionError,
    ProviderError,
    ToolError,
    UnsupportedFeatureError,
)

_module_logger = logging.getLogger(__name__)

# --- Utility functions ---

_THINK_TAGS = (("<think>", "</think>"), ("<thinking>", "</thinking>"))


def clean_json_string(text: str) -> str:
    """
    Removes invalid control characters (U+0000 to U+001F) from a string,
    which often cause issues when parsing JSON.
    """
    # Keep \t, \n, \r, \f, \b which are valid in JSON strings
    return re.sub(r"[\x00-\x08\x0B\x0E-\x1F]+", "", text)


def extract_answer(text: str) -> str:
    """
    Removes the first ``<think>...</think>`` (or ``<thinking>``) block that
    reasoning models prepend to their output and returns the rest.
    """
    for start, end in _THINK_TAGS:
        if start in text and end in text:
            before, _, rest = text.partition(start)
            _, _, after = rest.partition(end)
            return (before.strip() + " " + after.strip()).strip()
    return text


def extract_json_from_llm_output(output: str) -> Any:
    """
    Parses JSON out of a model reply.

    Tries, in order: the whole reply (after stripping a leading think
    block), then the span between the first ```` ```json ```` fence and the
    last ```` ``` ````.

    Returns:
        The parsed value, or None when no JSON could be recovered.
    """
    if output.strip().startswith("<think"):
        output = extract_answer(output)
    try:
        return json.loads(output)
    except json.JSONDecodeError:
        pass

    start = output.find("```json")
    end = output.rfind("```")
    if start == -1 or end <= start:
        _module_logger.warning("LLM output not in expected format: %s", output)
        return None
    try:
        return json.loads(clean_json_string(output[start + 7 : end]))
    except json.JSONDecodeError as e:
        _module_logger.warning("Failed to parse JSON from LLM output: %s", e)
        return None


__all__ = [
    "Agent",
    "AgentConfig",
    "BaseContentGenerator",
    "BridgeConfig",
    "ChatSession",
    "CustomLLMContentGenerator",
    "FactoryToolScheduler",
    "ModelConverter",
    "StreamReassembler",
    "ToolFactory",
    "ToolScheduler",
    "LLMBridgeError",
    "ConfigurationError",
    "ConversionError",
    "ProviderError",
    "ToolError",
    "UnsupportedFeatureError",
    "create_content_generator",
    "estimate_tokens",
    "normalize_contents",
    "clean_json_string",
    "extract_answer",
    "extract_json_from_llm_output",
]

try:
    from importlib.metadata import version

    __version__ = version("llm_bridge_toolkit")
except Exception:
    __version__ = "0.0.0-unknown"
