"""Wellness analysis pipeline: samples in, persisted scores and insights out.

Aggregator -> prompt -> analyst (retry/fallback) -> practice matching ->
persistence. Each run depends only on its samples and the analyst
configuration at call time.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from wellsense.core.config.settings import get_settings
from wellsense.core.llm.client import AnalystClient
from wellsense.core.llm.provider import LLMProvider, resolve_analyst_provider
from wellsense.core.storage.models import WellnessScore
from wellsense.core.storage.repository import WellnessRepository
from wellsense.domains.wellness.domain_logic.aggregator import summarize_samples
from wellsense.domains.wellness.domain_logic.controller import AnalysisController, AnalysisState
from wellsense.domains.wellness.domain_logic.models import InsightDraft, Sample
from wellsense.domains.wellness.domain_logic.persistence import PersistenceWriter
from wellsense.domains.wellness.domain_logic.practice_matcher import PracticeMatcher
from wellsense.domains.wellness.prompts.analysis_prompt import build_analysis_prompt

logger = logging.getLogger(__name__)


class WellnessProcessingError(Exception):
    """Raised when a pipeline run cannot complete (e.g. a storage failure)."""


@dataclass
class PipelineResult:
    """Persisted scores plus the insight drafts they were produced with."""

    scores: list[WellnessScore] = field(default_factory=list)
    insights: list[InsightDraft] = field(default_factory=list)
    analysis_state: AnalysisState = AnalysisState.MOCK
    analyst_calls: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "scores": [s.to_dict() for s in self.scores],
            "insights": [i.to_dict() for i in self.insights],
            "analysis_source": "mock" if self.analysis_state is AnalysisState.MOCK else "analyst",
        }


class WellnessPipeline:
    """Runs the full analysis for one user.

    Usage::

        pipeline = WellnessPipeline(repository)
        result = await pipeline.process_wellness_data(user_id, samples)
    """

    def __init__(
        self,
        repository: WellnessRepository,
        provider_resolver: Callable[[], LLMProvider | None] = resolve_analyst_provider,
    ) -> None:
        self._repo = repository
        self._resolve_provider = provider_resolver
        self._writer = PersistenceWriter(repository, PracticeMatcher(repository))

    def _analyst_client(self) -> AnalystClient | None:
        provider = self._resolve_provider()
        if provider is None:
            return None
        return AnalystClient(provider, max_tokens=get_settings().analyst_max_tokens)

    async def process_wellness_data(
        self,
        user_id: str,
        samples: Sequence[Sample],
        *,
        now: datetime | None = None,
    ) -> PipelineResult:
        """Analyse ``samples`` (newest first) and persist the outcome.

        Raises:
            WellnessProcessingError: If the run cannot complete. The original
                exception is chained as ``__cause__``.
        """
        logger.info("Processing wellness data for user %s with %d data points", user_id, len(samples))
        try:
            summary = summarize_samples(samples)
            logger.debug("Data summary: %s", {k: v.to_dict() for k, v in summary.items()})

            prompt = build_analysis_prompt(summary)
            outcome = await AnalysisController(self._analyst_client()).run(prompt)

            scores = self._writer.write(user_id, outcome.result, now=now)
        except Exception as exc:
            logger.exception("Wellness processing failed for user %s", user_id)
            raise WellnessProcessingError("Failed to process wellness data") from exc

        return PipelineResult(
            scores=scores,
            insights=outcome.result.insights,
            analysis_state=outcome.state,
            analyst_calls=outcome.attempts,
        )
