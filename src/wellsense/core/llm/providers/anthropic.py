"""Anthropic Messages API provider."""

from __future__ import annotations

import logging
import time

from wellsense.core.llm.provider import ProviderResponse

logger = logging.getLogger(__name__)


class AnthropicProvider:
    """Analyst backend for Claude models.

    Text blocks of the reply are concatenated; SDK-level retries are
    disabled so each call counts against the controller's budget.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-20250514",
        timeout: float = 60.0,
    ) -> None:
        import anthropic

        self.client = anthropic.AsyncAnthropic(api_key=api_key, timeout=timeout, max_retries=0)
        self.model = model

    async def generate(
        self,
        system_message: str,
        user_message: str,
        max_tokens: int = 2000,
        temperature: float = 0.3,
    ) -> ProviderResponse:
        started = time.monotonic()
        message = await self.client.messages.create(
            model=self.model,
            system=system_message,
            messages=[{"role": "user", "content": user_message}],
            max_tokens=max_tokens,
            temperature=temperature,
        )
        latency_ms = (time.monotonic() - started) * 1000

        text = "".join(
            block.text for block in message.content if getattr(block, "type", "") == "text"
        )
        if message.stop_reason == "max_tokens":
            logger.warning("Analyst reply truncated at %d tokens", max_tokens)

        return ProviderResponse(
            content=text,
            input_tokens=message.usage.input_tokens,
            output_tokens=message.usage.output_tokens,
            model=message.model or self.model,
            latency_ms=latency_ms,
        )
