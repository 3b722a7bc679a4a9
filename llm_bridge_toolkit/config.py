"""Explicit configuration objects.

Nothing in the library reads process-wide settings on its own.  Callers
build a :class:`BridgeConfig` (or an :class:`AgentConfig`) and pass it to
the component that needs it; :meth:`BridgeConfig.from_env` is available
for callers that do want environment/``.env`` driven configuration.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_AUTH_TYPE = "custom_llm"


class BridgeConfig(BaseModel):
    """Connection and sampling settings for an OpenAI-compatible endpoint.

    Attributes:
        api_key: Credential sent as the bearer token.
        base_url: Endpoint root, e.g. ``https://api.example.com/v1``.
        model: Upstream model name.
        provider: Free-form label of the upstream vendor, used in logs only.
        include_usage: Ask the server for a trailing usage chunk when streaming.
    """

    api_key: Optional[str] = None
    base_url: Optional[str] = None
    model: Optional[str] = None
    provider: Optional[str] = None
    temperature: float = 0.0
    max_tokens: int = 8192
    top_p: float = 1.0
    timeout: float = 180.0
    max_retries: int = 2
    include_usage: bool = True

    def require_complete(self) -> "BridgeConfig":
        """Raise :class:`ConfigurationError` unless model, key and endpoint are set."""
        missing = [
            name
            for name, value in (
                ("model", self.model),
                ("api_key", self.api_key),
                ("base_url", self.base_url),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(
                f"Custom LLM configuration is missing: {', '.join(missing)}."
            )
        return self

    @classmethod
    def from_env(
        cls, prefix: str = "CUSTOM_LLM_", dotenv_path: Optional[str] = None
    ) -> "BridgeConfig":
        """Build a config from ``<prefix>*`` environment variables.

        Reads ``API_KEY``, ``ENDPOINT``, ``MODEL_NAME``, ``PROVIDER``,
        ``TEMPERATURE``, ``MAX_TOKENS`` and ``TOP_P``.  A ``.env`` file is
        loaded first when *dotenv_path* is given or one exists in the
        current directory; variables already set in the environment win.
        """
        path = dotenv_path or os.path.join(os.getcwd(), ".env")
        if os.path.exists(path):
            load_dotenv(dotenv_path=path)
        elif dotenv_path:
            logger.warning("Could not find .env file at %s", dotenv_path)

        def _get(name: str) -> Optional[str]:
            return os.environ.get(f"{prefix}{name}") or None

        values = {
            "api_key": _get("API_KEY"),
            "base_url": _get("ENDPOINT"),
            "model": _get("MODEL_NAME"),
            "provider": _get("PROVIDER"),
            "temperature": _get("TEMPERATURE"),
            "max_tokens": _get("MAX_TOKENS"),
            "top_p": _get("TOP_P"),
        }
        try:
            return cls(**{k: v for k, v in values.items() if v is not None})
        except ValueError as e:
            raise ConfigurationError(f"Invalid {prefix}* environment value: {e}") from e


class AgentConfig(BaseModel):
    """Settings for :class:`~llm_bridge_toolkit.agent.Agent`.

    ``max_rounds`` caps the number of model turns in one run; ``None``
    runs until the model stops requesting tools.
    """

    model: Optional[str] = None
    endpoint: Optional[str] = None
    api_key: Optional[str] = None
    auth_type: str = DEFAULT_AUTH_TYPE
    provider: Optional[str] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    max_tokens: Optional[int] = None
    system_prompt: Optional[str] = None
    log: bool = False
    max_rounds: Optional[int] = None

    def to_bridge_config(self) -> BridgeConfig:
        """Validate credentials and build the matching :class:`BridgeConfig`."""
        if self.auth_type != DEFAULT_AUTH_TYPE:
            raise ConfigurationError(
                f"Unsupported auth type '{self.auth_type}'. "
                f"Only '{DEFAULT_AUTH_TYPE}' is available."
            )
        if not self.model or not self.api_key or not self.endpoint:
            raise ConfigurationError(
                "AgentConfig must include a model, api_key and endpoint."
            )
        return BridgeConfig(
            api_key=self.api_key,
            base_url=self.endpoint,
            model=self.model,
            provider=self.provider,
            temperature=self.temperature or 0.0,
            top_p=self.top_p or 1.0,
            max_tokens=self.max_tokens or 8096,
        )
