"""Scripted LLM provider for tests and offline runs."""

from __future__ import annotations

from wellsense.core.llm.provider import ProviderResponse


class MockProvider:
    """Mock provider that replays scripted replies.

    ``responses`` are returned in order; the last one repeats once the
    script is exhausted. An ``error`` is raised on every call instead.
    """

    def __init__(
        self,
        response_content: str | list[str] = "Mock LLM response.",
        error: Exception | None = None,
    ) -> None:
        if isinstance(response_content, str):
            response_content = [response_content]
        self.responses = list(response_content)
        self.error = error
        self.system_messages: list[str] = []
        self.user_messages: list[str] = []
        self.call_count: int = 0

    @property
    def last_system_message(self) -> str:
        return self.system_messages[-1] if self.system_messages else ""

    @property
    def last_user_message(self) -> str:
        return self.user_messages[-1] if self.user_messages else ""

    async def generate(
        self,
        system_message: str,
        user_message: str,
        max_tokens: int = 2000,
        temperature: float = 0.3,
    ) -> ProviderResponse:
        self.system_messages.append(system_message)
        self.user_messages.append(user_message)
        self.call_count += 1
        if self.error is not None:
            raise self.error

        index = min(self.call_count - 1, len(self.responses) - 1)
        content = self.responses[index] if self.responses else ""
        return ProviderResponse(
            content=content,
            input_tokens=len(system_message.split()) + len(user_message.split()),
            output_tokens=len(content.split()),
            model="mock",
            latency_ms=0.0,
        )
