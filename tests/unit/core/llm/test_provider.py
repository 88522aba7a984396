"""Tests for analyst provider selection."""

from __future__ import annotations

import pytest

from wellsense.core.config.settings import Settings
from wellsense.core.llm.provider import (
    create_provider,
    has_usable_credential,
    resolve_analyst_provider,
)
from wellsense.core.llm.providers.anthropic import AnthropicProvider
from wellsense.core.llm.providers.mock import MockProvider
from wellsense.core.llm.providers.openai import OpenAIProvider

PLACEHOLDER = "sk-test-placeholder-key-for-development"


class TestHasUsableCredential:
    @pytest.mark.parametrize("key", ["", "   ", None, PLACEHOLDER, f"  {PLACEHOLDER} "])
    def test_unusable(self, key):
        assert has_usable_credential(key) is False

    def test_real_looking_key(self):
        assert has_usable_credential("sk-live-abc123") is True


class TestResolveAnalystProvider:
    def test_missing_key_means_no_analyst(self):
        assert resolve_analyst_provider() is None

    def test_placeholder_key_means_no_analyst(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", PLACEHOLDER)
        assert resolve_analyst_provider() is None

    def test_mock_setting_means_no_analyst(self, monkeypatch):
        monkeypatch.setenv("LLM_PROVIDER", "mock")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-live-abc123")
        assert resolve_analyst_provider() is None

    def test_openai_with_key(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-live-abc123")
        monkeypatch.setenv("OPENAI_MODEL", "mistral-large-latest")
        monkeypatch.setenv("OPENAI_BASE_URL", "https://api.mistral.ai/v1")
        provider = resolve_analyst_provider()
        assert isinstance(provider, OpenAIProvider)
        assert provider.model == "mistral-large-latest"

    def test_anthropic_with_key(self):
        settings = Settings(llm_provider="anthropic", anthropic_api_key="sk-ant-xyz")
        provider = resolve_analyst_provider(settings)
        assert isinstance(provider, AnthropicProvider)

    def test_settings_read_on_every_call(self, monkeypatch):
        assert resolve_analyst_provider() is None
        monkeypatch.setenv("OPENAI_API_KEY", "sk-live-abc123")
        assert resolve_analyst_provider() is not None


class TestCreateProvider:
    def test_mock(self):
        assert isinstance(create_provider("mock"), MockProvider)

    def test_openai_default_model(self):
        assert create_provider("openai", api_key="k").model == "gpt-4o"

    def test_unknown_provider_raises(self):
        with pytest.raises(ValueError, match="Unknown LLM provider"):
            create_provider("mistral-native")


class TestClientConfiguration:
    def test_sdk_retries_disabled(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-live-abc123")
        monkeypatch.setenv("ANALYST_TIMEOUT_SECONDS", "12.5")
        provider = resolve_analyst_provider()
        assert provider.client.max_retries == 0
        assert provider.client.timeout == 12.5

    def test_anthropic_sdk_retries_disabled(self):
        provider = create_provider("anthropic", api_key="sk-ant-xyz")
        assert provider.client.max_retries == 0
