"""Reply interpreter: turns raw analyst text into a validated AnalysisResult.

Interpretation failure is an expected outcome: ``interpret_reply`` returns
None instead of raising, and the controller decides whether to retry or
fall back to the mock analysis.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from wellsense.core.llm.response import ReplyParseError, parse_json_reply
from wellsense.domains.wellness.domain_logic.models import (
    AnalysisResult,
    InsightDraft,
    ScoreDraft,
    ScoreType,
    Severity,
)

logger = logging.getLogger(__name__)

_SNIPPET_CHARS = 500


def interpret_reply(text: str) -> AnalysisResult | None:
    """Parse and validate an analyst reply.

    Returns:
        The validated result, or None if the reply could not be parsed or
        contains no usable score.
    """
    try:
        data = parse_json_reply(text)
    except ReplyParseError as exc:
        logger.warning("Unparseable analyst reply (%s). Snippet: %s", exc, (text or "")[:_SNIPPET_CHARS])
        return None

    if not isinstance(data, dict):
        logger.warning("Analyst reply is not a JSON object: %s", type(data).__name__)
        return None

    raw_scores = data.get("scores")
    raw_insights = data.get("insights")
    if not isinstance(raw_scores, list):
        raw_scores = []
    if not isinstance(raw_insights, list):
        raw_insights = []

    scores = [s for s in (_parse_score(item) for item in raw_scores) if s is not None]
    if not scores:
        logger.warning("Analyst reply rejected: no valid score entries")
        return None

    insights = [i for i in (_parse_insight(item) for item in raw_insights) if i is not None]
    return AnalysisResult(scores=scores, insights=insights)


# ---------------------------------------------------------------------------
# Item validation
# ---------------------------------------------------------------------------

def _number(val: Any) -> float | None:
    if isinstance(val, bool) or not isinstance(val, (int, float)):
        return None
    if math.isnan(val) or math.isinf(val):
        return None
    return float(val)


def _str_list(val: Any) -> list[str]:
    if not isinstance(val, list):
        return []
    return [str(v) for v in val if isinstance(v, (str, int, float)) and not isinstance(v, bool)]


def _parse_score(item: Any) -> ScoreDraft | None:
    if not isinstance(item, dict):
        return None

    try:
        score_type = ScoreType(str(item.get("type", "")).strip().lower())
    except ValueError:
        logger.warning("Dropping score with unrecognized type: %r", item.get("type"))
        return None

    score = _number(item.get("score"))
    if score is None or not 0 <= score <= 100:
        logger.warning("Dropping %s score with invalid value: %r", score_type.value, item.get("score"))
        return None

    confidence = _number(item.get("confidence"))
    if confidence is None or not 0 <= confidence <= 1:
        logger.warning(
            "Dropping %s score with invalid confidence: %r", score_type.value, item.get("confidence")
        )
        return None

    factors = item.get("factors")
    return ScoreDraft(
        score_type=score_type,
        score=score,
        confidence=confidence,
        factors=factors if isinstance(factors, dict) else {},
        explanation=str(item.get("explanation") or ""),
    )


def _parse_insight(item: Any) -> InsightDraft | None:
    if not isinstance(item, dict):
        return None

    title = str(item.get("title") or "").strip()
    if not title:
        logger.warning("Dropping insight without a title")
        return None

    try:
        severity = Severity(str(item.get("severity", "")).strip().lower())
    except ValueError:
        logger.warning("Dropping insight %r with unrecognized severity: %r", title, item.get("severity"))
        return None

    priority = _number(item.get("priority"))
    priority_int = 50 if priority is None else min(100, max(1, int(round(priority))))

    evidence = item.get("evidence")
    return InsightDraft(
        title=title,
        description=str(item.get("description") or ""),
        category=str(item.get("category") or "").strip().lower(),
        severity=severity,
        priority=priority_int,
        recommendations=_str_list(item.get("recommendations")),
        practice_types=_str_list(item.get("practiceTypes", item.get("practice_types"))),
        evidence=evidence if isinstance(evidence, dict) else {},
        reasoning=str(item.get("reasoning") or ""),
    )
