"""Persistence writer: stores analysis scores and insights for a user."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from wellsense.core.storage.models import Insight, WellnessScore
from wellsense.core.storage.repository import WellnessRepository
from wellsense.domains.wellness.domain_logic.models import AnalysisResult, InsightStatus
from wellsense.domains.wellness.domain_logic.practice_matcher import PracticeMatcher

logger = logging.getLogger(__name__)

SCORE_PERIOD = timedelta(hours=24)
INSIGHT_TTL = timedelta(days=7)


class PersistenceWriter:
    """Writes one row per score and one row per insight.

    The score window is the 24 hours before the run, independent of the
    data window that was analysed. Rows are committed one at a time; a
    failure part-way leaves earlier rows in place.
    """

    def __init__(self, repository: WellnessRepository, matcher: PracticeMatcher) -> None:
        self._repo = repository
        self._matcher = matcher

    def write(
        self,
        user_id: str,
        analysis: AnalysisResult,
        *,
        now: datetime | None = None,
    ) -> list[WellnessScore]:
        """Persist ``analysis`` for ``user_id``.

        Returns:
            The stored score records, with generated ids and timestamps.
        """
        now = now or datetime.now(timezone.utc)
        period_start = (now - SCORE_PERIOD).isoformat()
        period_end = now.isoformat()

        saved_scores: list[WellnessScore] = []
        for draft in analysis.scores:
            saved_scores.append(
                self._repo.save_wellness_score(
                    WellnessScore(
                        id="",
                        user_id=user_id,
                        score_type=draft.score_type.value,
                        score=draft.score,
                        confidence=draft.confidence,
                        period_start=period_start,
                        period_end=period_end,
                        factors=dict(draft.factors),
                        explanation=draft.explanation,
                        created_at=period_end,
                    )
                )
            )

        expires_at = (now + INSIGHT_TTL).isoformat()
        for draft in analysis.insights:
            practices = self._matcher.match(draft.practice_types)
            self._repo.save_insight(
                Insight(
                    id="",
                    user_id=user_id,
                    title=draft.title,
                    description=draft.description,
                    category=draft.category,
                    severity=draft.severity.value,
                    priority=draft.priority,
                    recommendations=list(draft.recommendations),
                    practice_ids=[p.id for p in practices],
                    evidence=dict(draft.evidence),
                    reasoning=draft.reasoning,
                    status=InsightStatus.ACTIVE.value,
                    expires_at=expires_at,
                    created_at=period_end,
                )
            )

        logger.info(
            "Persisted %d scores and %d insights for user %s",
            len(saved_scores),
            len(analysis.insights),
            user_id,
        )
        return saved_scores
