"""LLM provider implementations."""

from wellsense.core.llm.providers.anthropic import AnthropicProvider
from wellsense.core.llm.providers.mock import MockProvider
from wellsense.core.llm.providers.openai import OpenAIProvider

__all__ = ["AnthropicProvider", "MockProvider", "OpenAIProvider"]
