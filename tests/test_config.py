"""Unit tests for the explicit configuration objects."""

from __future__ import annotations

import pytest

from llm_bridge_toolkit.config import AgentConfig, BridgeConfig
from llm_bridge_toolkit.exceptions import ConfigurationError

_ENV_NAMES = (
    "API_KEY",
    "ENDPOINT",
    "MODEL_NAME",
    "PROVIDER",
    "TEMPERATURE",
    "MAX_TOKENS",
    "TOP_P",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    for name in _ENV_NAMES:
        # setenv first so teardown also removes values written by load_dotenv
        monkeypatch.setenv(f"CUSTOM_LLM_{name}", "")
        monkeypatch.delenv(f"CUSTOM_LLM_{name}")
    monkeypatch.chdir(tmp_path)
    return monkeypatch


def test_bridge_config_defaults() -> None:
    config = BridgeConfig()
    assert config.temperature == 0.0
    assert config.max_tokens == 8192
    assert config.top_p == 1.0
    assert config.include_usage is True


def test_require_complete_lists_missing_fields() -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        BridgeConfig(model="m").require_complete()
    assert "api_key" in str(excinfo.value)
    assert "base_url" in str(excinfo.value)
    assert "model" not in str(excinfo.value).split(":", 1)[1]


def test_from_env_reads_prefixed_variables(clean_env) -> None:
    clean_env.setenv("CUSTOM_LLM_API_KEY", "sk-env")
    clean_env.setenv("CUSTOM_LLM_ENDPOINT", "https://env.example.com/v1")
    clean_env.setenv("CUSTOM_LLM_MODEL_NAME", "env-model")
    clean_env.setenv("CUSTOM_LLM_TEMPERATURE", "0.7")
    clean_env.setenv("CUSTOM_LLM_MAX_TOKENS", "1024")

    config = BridgeConfig.from_env()

    assert config.api_key == "sk-env"
    assert config.base_url == "https://env.example.com/v1"
    assert config.model == "env-model"
    assert config.temperature == 0.7
    assert config.max_tokens == 1024
    assert config.top_p == 1.0


def test_from_env_loads_dotenv_file(clean_env, tmp_path) -> None:
    env_file = tmp_path / "bridge.env"
    env_file.write_text(
        "CUSTOM_LLM_API_KEY=sk-file\n"
        "CUSTOM_LLM_ENDPOINT=https://file.example.com/v1\n"
        "CUSTOM_LLM_MODEL_NAME=file-model\n"
    )
    config = BridgeConfig.from_env(dotenv_path=str(env_file))
    assert config.require_complete().model == "file-model"


def test_from_env_rejects_bad_numbers(clean_env) -> None:
    clean_env.setenv("CUSTOM_LLM_MAX_TOKENS", "lots")
    with pytest.raises(ConfigurationError, match="CUSTOM_LLM_"):
        BridgeConfig.from_env()


class TestAgentConfig:
    def test_to_bridge_config_defaults(self, agent_config: AgentConfig) -> None:
        bridge = agent_config.to_bridge_config()
        assert bridge.model == "test-model"
        assert bridge.base_url == "https://llm.example.com/v1"
        assert bridge.api_key == "sk-test"
        assert bridge.temperature == 0.0
        assert bridge.top_p == 1.0
        assert bridge.max_tokens == 8096

    def test_explicit_sampling_settings(self, agent_config: AgentConfig) -> None:
        config = agent_config.model_copy(update={"temperature": 0.3, "top_p": 0.9, "max_tokens": 512})
        bridge = config.to_bridge_config()
        assert (bridge.temperature, bridge.top_p, bridge.max_tokens) == (0.3, 0.9, 512)

    @pytest.mark.parametrize("missing", ["model", "api_key", "endpoint"])
    def test_missing_credentials(self, agent_config: AgentConfig, missing: str) -> None:
        config = agent_config.model_copy(update={missing: None})
        with pytest.raises(ConfigurationError):
            config.to_bridge_config()

    def test_unsupported_auth_type(self, agent_config: AgentConfig) -> None:
        config = agent_config.model_copy(update={"auth_type": "oauth"})
        with pytest.raises(ConfigurationError, match="oauth"):
            config.to_bridge_config()
