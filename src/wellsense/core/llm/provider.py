"""LLM provider protocol and analyst selection."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from wellsense.core.config.settings import get_settings

if TYPE_CHECKING:
    from wellsense.core.config.settings import Settings

logger = logging.getLogger(__name__)

# Values shipped in example env files; treated the same as a missing key.
PLACEHOLDER_API_KEYS = frozenset({"sk-test-placeholder-key-for-development"})


@dataclass
class ProviderResponse:
    """Response from an LLM provider."""

    content: str
    input_tokens: int
    output_tokens: int
    model: str
    latency_ms: float


@runtime_checkable
class LLMProvider(Protocol):
    """Abstract interface for analyst LLM calls."""

    async def generate(
        self,
        system_message: str,
        user_message: str,
        max_tokens: int = 2000,
        temperature: float = 0.3,
    ) -> ProviderResponse: ...


def create_provider(
    provider_name: str,
    api_key: str = "",
    model: str = "",
    base_url: str = "",
    timeout: float = 60.0,
) -> LLMProvider:
    """Factory function to create an LLM provider by name.

    Args:
        provider_name: "openai", "anthropic", or "mock"
        api_key: API key for the provider.
        model: Model identifier override.
        base_url: Alternative endpoint for OpenAI-compatible services.
        timeout: Per-request timeout in seconds.

    Returns:
        An LLMProvider instance.
    """
    if provider_name == "openai":
        from wellsense.core.llm.providers.openai import OpenAIProvider

        return OpenAIProvider(
            api_key=api_key, model=model or "gpt-4o", base_url=base_url, timeout=timeout
        )
    elif provider_name == "anthropic":
        from wellsense.core.llm.providers.anthropic import AnthropicProvider

        return AnthropicProvider(
            api_key=api_key, model=model or "claude-sonnet-4-20250514", timeout=timeout
        )
    elif provider_name == "mock":
        from wellsense.core.llm.providers.mock import MockProvider

        return MockProvider()
    else:
        raise ValueError(f"Unknown LLM provider: {provider_name}")


def has_usable_credential(api_key: str | None) -> bool:
    """Whether an API key is present and not a known placeholder."""
    if not api_key or not api_key.strip():
        return False
    return api_key.strip() not in PLACEHOLDER_API_KEYS


def resolve_analyst_provider(settings: Settings | None = None) -> LLMProvider | None:
    """Build the analyst provider from current settings.

    Settings are read on every call so configuration changes apply to the
    next pipeline run. Returns None when no live analyst is configured
    (``llm_provider=mock``, missing key, or placeholder key).
    """
    settings = settings or get_settings()

    if settings.llm_provider == "mock":
        logger.info("Analyst provider set to mock; live analysis disabled")
        return None

    if settings.llm_provider == "openai":
        api_key = settings.openai_api_key
        model = settings.openai_model
        base_url = settings.openai_base_url
    elif settings.llm_provider == "anthropic":
        api_key = settings.anthropic_api_key
        model = settings.anthropic_model
        base_url = ""
    else:  # pragma: no cover
        raise ValueError(f"Unknown LLM provider: {settings.llm_provider!r}")

    if not has_usable_credential(api_key):
        logger.info(
            "No usable API key for analyst provider '%s'; live analysis disabled",
            settings.llm_provider,
        )
        return None

    return create_provider(
        provider_name=settings.llm_provider,
        api_key=api_key,
        model=model,
        base_url=base_url,
        timeout=settings.analyst_timeout_seconds,
    )
