"""Pytest configuration for llm_bridge_toolkit tests."""

from __future__ import annotations

import os

import pytest

from llm_bridge_toolkit.config import AgentConfig, BridgeConfig

# Ensure pytest-asyncio is always available so async tests execute without
# requiring plugins to be explicitly enabled via command line options.
pytest_plugins = ("pytest_asyncio",)

_DEFAULT_TEST_MODEL = "qwen-plus"


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register custom command line options for pytest."""
    parser.addoption(
        "--custom-llm-test-model",
        action="store",
        default=os.environ.get("CUSTOM_LLM_TEST_MODEL", _DEFAULT_TEST_MODEL),
        dest="custom_llm_test_model",
        help=(
            "Model identifier to use for custom endpoint integration tests. "
            "Can also be provided through the CUSTOM_LLM_TEST_MODEL environment variable."
        ),
    )


@pytest.fixture(scope="session")
def custom_llm_test_model(pytestconfig: pytest.Config) -> str:
    """Return the model identifier used for integration tests."""
    return pytestconfig.getoption("custom_llm_test_model")


@pytest.fixture
def bridge_config() -> BridgeConfig:
    return BridgeConfig(
        api_key="sk-test",
        base_url="https://llm.example.com/v1",
        model="test-model",
        provider="example",
    )


@pytest.fixture
def agent_config() -> AgentConfig:
    return AgentConfig(
        model="test-model",
        endpoint="https://llm.example.com/v1",
        api_key="sk-test",
    )

