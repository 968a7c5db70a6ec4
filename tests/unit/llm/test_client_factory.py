# tests/unit/llm/test_client_factory.py — v1
"""Tests for llm/client_factory.py — provider registry and mock-mode switch."""

from __future__ import annotations

import pytest

from soilsense.config.settings import Settings
from soilsense.llm.adapters.anthropic_adapter import AnthropicAdapter
from soilsense.llm.adapters.openai_adapter import OpenAIAdapter
from soilsense.llm.client_factory import (
    UnsupportedProviderError,
    create_client_for,
    create_llm_client,
)


def _settings(**kwargs) -> Settings:
    kwargs.setdefault("openai_api_key", "")
    kwargs.setdefault("anthropic_api_key", "")
    return Settings(_env_file=None, **kwargs)


class TestCreateLLMClient:
    def test_openai(self):
        client = create_llm_client("openai", "gpt-4", _settings(openai_api_key="sk-test"))
        assert isinstance(client, OpenAIAdapter)
        assert client.provider_name == "openai"
        assert client.model_name == "gpt-4"

    def test_anthropic(self):
        client = create_llm_client("anthropic", "claude-sonnet-4-20250514", _settings())
        assert isinstance(client, AnthropicAdapter)
        assert client.model_name == "claude-sonnet-4-20250514"

    def test_unsupported(self):
        with pytest.raises(UnsupportedProviderError, match="Available"):
            create_llm_client("nope", "m")


class TestCreateClientFor:
    def test_no_key_means_mock_mode(self):
        assert create_client_for("analysis", _settings()) is None

    def test_key_present(self):
        client = create_client_for("analysis", _settings(openai_api_key="sk-test"))
        assert isinstance(client, OpenAIAdapter)

    def test_component_routed_to_other_provider(self):
        s = _settings(
            openai_api_key="sk-test",
            llm_detailed_recommendations="anthropic:claude-sonnet-4-20250514",
        )
        assert create_client_for("detailed_recommendations", s) is None
        assert isinstance(create_client_for("analysis", s), OpenAIAdapter)
