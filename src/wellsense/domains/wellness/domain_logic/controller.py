"""Retry/fallback controller for analyst calls.

State machine::

    NO_ANALYST    -> MOCK
    FIRST_ATTEMPT -> ACCEPT | RETRY_ATTEMPT
    RETRY_ATTEMPT -> ACCEPT | MOCK

ACCEPT and MOCK are terminal. At most two analyst calls are made per run,
strictly one after the other.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from wellsense.core.llm.client import AnalystClient
from wellsense.core.llm.system_prompt import ANALYST_SYSTEM_PROMPT, STRICT_JSON_SYSTEM_PROMPT
from wellsense.domains.wellness.domain_logic.mock_analysis import mock_analysis
from wellsense.domains.wellness.domain_logic.models import AnalysisResult
from wellsense.domains.wellness.domain_logic.reply_interpreter import interpret_reply

logger = logging.getLogger(__name__)


class AnalysisState(str, Enum):
    NO_ANALYST = "no_analyst"
    FIRST_ATTEMPT = "first_attempt"
    RETRY_ATTEMPT = "retry_attempt"
    ACCEPT = "accept"
    MOCK = "mock"


TERMINAL_STATES = frozenset({AnalysisState.ACCEPT, AnalysisState.MOCK})

# Next state when an attempt yields no usable result.
ON_FAILURE: dict[AnalysisState, AnalysisState] = {
    AnalysisState.NO_ANALYST: AnalysisState.MOCK,
    AnalysisState.FIRST_ATTEMPT: AnalysisState.RETRY_ATTEMPT,
    AnalysisState.RETRY_ATTEMPT: AnalysisState.MOCK,
}

ATTEMPT_SYSTEM_PROMPTS: dict[AnalysisState, str] = {
    AnalysisState.FIRST_ATTEMPT: ANALYST_SYSTEM_PROMPT,
    AnalysisState.RETRY_ATTEMPT: STRICT_JSON_SYSTEM_PROMPT,
}


@dataclass
class AnalysisOutcome:
    """Terminal result of one controller run."""

    result: AnalysisResult
    state: AnalysisState
    attempts: int

    @property
    def used_mock(self) -> bool:
        return self.state is AnalysisState.MOCK


class AnalysisController:
    """Runs the analyst with one stricter retry, falling back to the mock analysis.

    Usage::

        controller = AnalysisController(AnalystClient(provider))  # or None
        outcome = await controller.run(prompt)
    """

    def __init__(self, client: AnalystClient | None) -> None:
        self._client = client

    async def run(self, prompt: str) -> AnalysisOutcome:
        state = AnalysisState.FIRST_ATTEMPT if self._client is not None else AnalysisState.NO_ANALYST
        attempts = 0
        accepted: AnalysisResult | None = None

        while state not in TERMINAL_STATES:
            if state is AnalysisState.NO_ANALYST:
                logger.info("No analyst configured; using mock analysis")
                state = ON_FAILURE[state]
                continue

            attempts += 1
            accepted = await self._attempt(state, prompt)
            if accepted is not None:
                state = AnalysisState.ACCEPT
            else:
                state = ON_FAILURE[state]
                if state is AnalysisState.MOCK:
                    logger.warning(
                        "Analyst replies unusable after %d attempts; falling back to mock analysis",
                        attempts,
                    )

        if state is AnalysisState.ACCEPT and accepted is not None:
            logger.info(
                "Analyst result accepted after %d attempt(s): %d scores, %d insights",
                attempts,
                len(accepted.scores),
                len(accepted.insights),
            )
            return AnalysisOutcome(result=accepted, state=state, attempts=attempts)

        return AnalysisOutcome(result=mock_analysis(), state=AnalysisState.MOCK, attempts=attempts)

    async def _attempt(self, state: AnalysisState, prompt: str) -> AnalysisResult | None:
        """One analyst call plus interpretation; any failure yields None."""
        assert self._client is not None
        try:
            reply = await self._client.complete(ATTEMPT_SYSTEM_PROMPTS[state], prompt)
        except Exception as exc:
            # Transport, service and empty-reply errors are handled like bad replies.
            logger.warning("Analyst call failed during %s: %s: %s", state.value, type(exc).__name__, exc)
            return None
        return interpret_reply(reply)
