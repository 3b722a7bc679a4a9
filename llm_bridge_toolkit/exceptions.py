# llm_bridge_toolkit/llm_bridge_toolkit/exceptions.py


class LLMBridgeError(Exception):
    """Base exception class for the llm_bridge_toolkit library."""

    pass


class ConfigurationError(LLMBridgeError):
    """Exception raised for configuration errors (e.g., missing API key)."""

    pass


class ProviderError(LLMBridgeError):
    """Exception raised for errors originating from the upstream provider."""

    pass


class ConversionError(LLMBridgeError):
    """Exception raised when upstream data cannot be translated (e.g., bad tool-call JSON)."""

    pass


class ToolError(LLMBridgeError):
    """Exception raised for errors during tool execution."""

    pass


class UnsupportedFeatureError(LLMBridgeError):
    """Exception raised when a content generator does not support a requested feature."""

    pass
