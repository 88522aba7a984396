"""Analyst client: single completion call against the configured LLM provider."""

from __future__ import annotations

import logging

from wellsense.core.llm.provider import LLMProvider, ProviderResponse

logger = logging.getLogger(__name__)

ANALYST_TEMPERATURE = 0.3
ANALYST_MAX_TOKENS = 2000


class NoResponseError(Exception):
    """Raised when the analyst returns no completion text."""


class AnalystClient:
    """Sends one (system, user) message pair to the analyst and returns its text.

    Pure transport: no retries and no interpretation. Provider errors
    propagate unchanged to the caller.
    """

    def __init__(
        self,
        provider: LLMProvider,
        *,
        max_tokens: int = ANALYST_MAX_TOKENS,
        temperature: float = ANALYST_TEMPERATURE,
    ) -> None:
        self.provider = provider
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def complete(self, system_message: str, user_message: str) -> str:
        """Return the raw text of the analyst's reply.

        Raises:
            NoResponseError: If the provider returned empty content.
        """
        provider_response: ProviderResponse = await self.provider.generate(
            system_message=system_message,
            user_message=user_message,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )

        logger.info(
            "Analyst call: model=%s, tokens=%d+%d, latency=%.0fms",
            provider_response.model,
            provider_response.input_tokens,
            provider_response.output_tokens,
            provider_response.latency_ms,
        )

        if not provider_response.content or not provider_response.content.strip():
            raise NoResponseError("No response from AI service")
        return provider_response.content
