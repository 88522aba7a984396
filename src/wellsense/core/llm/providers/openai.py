"""OpenAI chat completions provider (also serves OpenAI-compatible endpoints)."""

from __future__ import annotations

import logging
import time

from wellsense.core.llm.provider import ProviderResponse

logger = logging.getLogger(__name__)


class OpenAIProvider:
    """Analyst backend for OpenAI and OpenAI-compatible services (e.g. Mistral).

    SDK-level retries are disabled: the analysis controller owns the retry
    budget and must see every failed call.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        base_url: str = "",
        timeout: float = 60.0,
    ) -> None:
        import openai

        self.client = openai.AsyncOpenAI(
            api_key=api_key,
            base_url=base_url or None,
            timeout=timeout,
            max_retries=0,
        )
        self.model = model

    async def generate(
        self,
        system_message: str,
        user_message: str,
        max_tokens: int = 2000,
        temperature: float = 0.3,
    ) -> ProviderResponse:
        started = time.monotonic()
        completion = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_message},
                {"role": "user", "content": user_message},
            ],
            max_tokens=max_tokens,
            temperature=temperature,
        )
        latency_ms = (time.monotonic() - started) * 1000

        if not completion.choices:
            text = ""
        else:
            choice = completion.choices[0]
            text = choice.message.content or ""
            if choice.finish_reason == "length":
                logger.warning("Analyst reply truncated at %d tokens", max_tokens)

        usage = completion.usage
        return ProviderResponse(
            content=text,
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            model=completion.model or self.model,
            latency_ms=latency_ms,
        )
