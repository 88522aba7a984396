"""MCP tools for wearable ingestion, wellness analysis, scores and insights.

These are thin collaborators of the analysis pipeline: they validate
parameters, query the data bank and hand newest-first samples to
``WellnessPipeline``.
"""

from __future__ import annotations

import json
import logging
import time
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

from fastmcp import Context, FastMCP

if TYPE_CHECKING:
    from wellsense.core.storage.repository import WellnessRepository

from wellsense.core.storage.models import StoredSample
from wellsense.domains.wellness.domain_logic.models import (
    InsightStatus,
    Sample,
    ScoreType,
)
from wellsense.domains.wellness.domain_logic.pipeline import WellnessPipeline, WellnessProcessingError

logger = logging.getLogger(__name__)

# Upper bound on samples handed to one analysis run.
MAX_PROCESSING_SAMPLES = 1000
DASHBOARD_SCORE_TYPES = (ScoreType.OVERALL, ScoreType.STRESS, ScoreType.SLEEP, ScoreType.ENERGY)
DASHBOARD_INSIGHTS = 5
RECENT_ACTIVITY_WINDOW = timedelta(hours=24)
_QUALITY_LEVELS = ("high", "medium", "low")


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def _parse_timestamp(value: str) -> str:
    """Normalize an ISO 8601 timestamp to UTC ISO format.

    Naive timestamps are taken as UTC.

    Raises:
        ValueError: If ``value`` is not ISO 8601.
    """
    parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc).isoformat()


def _error(message: str, **extra: Any) -> str:
    return json.dumps({"status": "error", "message": message, **extra})


def to_pipeline_sample(stored: StoredSample) -> Sample:
    """Convert a stored reading into the pipeline's input type."""
    return Sample(
        metric_type=stored.data_type,
        value=stored.value,
        timestamp=datetime.fromisoformat(stored.timestamp),
        raw_payload=stored.raw_data,
    )


def register_wellness_tools(
    mcp: FastMCP,
    repository: WellnessRepository,
    pipeline: WellnessPipeline,
) -> None:
    """Register wellness data and analysis tools on the MCP server."""

    @mcp.tool
    async def record_wearable_sample(
        ctx: Context,
        user_id: str,
        data_type: str,
        timestamp: str,
        raw_data: dict[str, Any] | None = None,
        value: float | None = None,
        unit: str | None = None,
        quality: str | None = None,
        provider: str = "manual",
        source: str | None = None,
        notes: str | None = None,
    ) -> str:
        """Store one wearable reading in the wellness data bank.

        Args:
            user_id: Owner of the reading.
            data_type: Metric type (heartrate, sleep, activity, hrv, stress, temperature, oxygen).
            timestamp: When the reading was taken (ISO 8601).
            raw_data: Vendor payload; stored encrypted.
            value: Numeric reading, if the device reports one.
            unit: Unit of measurement (e.g., 'bpm', 'hours', 'steps').
            quality: Reading quality: high | medium | low.
            provider: Device/vendor name (e.g., 'oura', 'garmin').
        """
        if not user_id.strip():
            return _error("user_id must not be empty")
        if not data_type.strip():
            return _error("data_type must not be empty")
        if quality is not None and quality not in _QUALITY_LEVELS:
            return _error("quality must be one of: high | medium | low")
        try:
            ts = _parse_timestamp(timestamp)
        except ValueError:
            return _error("timestamp must be ISO 8601", timestamp=timestamp)

        sample = StoredSample(
            id="",
            user_id=user_id,
            provider=provider,
            data_type=data_type.strip().lower(),
            timestamp=ts,
            value=value,
            unit=unit,
            quality=quality,
            source=source,
            notes=notes,
            raw_data=raw_data or {},
        )
        sid = repository.save_sample(sample)
        return json.dumps({
            "status": "saved",
            "sample_id": sid,
            "data_type": sample.data_type,
            "timestamp": ts,
        })

    @mcp.tool
    async def list_wearable_samples(
        ctx: Context,
        user_id: str,
        data_type: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> str:
        """List a user's wearable readings, newest first.

        Args:
            start_date: Only readings at or after this time (ISO 8601).
            end_date: Only readings at or before this time (ISO 8601).
        """
        try:
            since = _parse_timestamp(start_date) if start_date else None
            until = _parse_timestamp(end_date) if end_date else None
        except ValueError:
            return _error("start_date/end_date must be ISO 8601")

        samples = repository.get_samples(
            user_id, data_type=data_type, since=since, until=until, limit=limit, offset=offset
        )
        total = repository.count_samples(user_id, data_type=data_type, since=since, until=until)
        return json.dumps({
            "samples": [
                {
                    "id": s.id,
                    "provider": s.provider,
                    "data_type": s.data_type,
                    "timestamp": s.timestamp,
                    "value": s.value,
                    "unit": s.unit,
                    "quality": s.quality,
                    "source": s.source,
                }
                for s in samples
            ],
            "pagination": {"total": total, "limit": limit, "offset": offset},
        })

    @mcp.tool
    async def process_wellness_data(
        ctx: Context,
        user_id: str,
        days: int = 7,
    ) -> str:
        """Analyse recent wearable data and generate wellness scores and insights.

        Uses the user's readings from the last ``days`` days. Scores and
        insights are stored and returned.

        Args:
            user_id: Whose data to analyse.
            days: Size of the data window in days (default: 7).
        """
        if days < 1:
            return _error("days must be at least 1.")

        start_time = time.monotonic()
        since = (datetime.now(timezone.utc) - timedelta(days=days)).isoformat()
        stored = repository.get_samples(user_id, since=since, limit=MAX_PROCESSING_SAMPLES)
        if not stored:
            return _error("No recent wearable data found. Please sync your devices first.")

        try:
            result = await pipeline.process_wellness_data(
                user_id, [to_pipeline_sample(s) for s in stored]
            )
        except WellnessProcessingError as exc:
            return _error(str(exc), user_id=user_id)
        elapsed_ms = (time.monotonic() - start_time) * 1000

        return json.dumps({
            "status": "processed",
            **result.to_dict(),
            "processed_data_points": len(stored),
            "duration_ms": round(elapsed_ms, 1),
        })

    @mcp.tool
    async def get_wellness_scores(
        ctx: Context,
        user_id: str,
        score_type: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        limit: int = 50,
    ) -> str:
        """Score history for a user, most recent period first.

        Args:
            score_type: overall | stress | sleep | energy | recovery | focus | mood.
            start_date: Only periods ending at or after this time (ISO 8601).
            end_date: Only periods ending at or before this time (ISO 8601).
        """
        if score_type is not None:
            try:
                score_type = ScoreType(score_type.strip().lower()).value
            except ValueError:
                return _error(f"Unknown score_type: {score_type}")
        try:
            since = _parse_timestamp(start_date) if start_date else None
            until = _parse_timestamp(end_date) if end_date else None
        except ValueError:
            return _error("start_date/end_date must be ISO 8601")

        scores = repository.get_wellness_scores(
            user_id, score_type=score_type, since=since, until=until, limit=limit
        )
        return json.dumps({"scores": [s.to_dict() for s in scores]})

    @mcp.tool
    async def get_latest_wellness_scores(ctx: Context, user_id: str) -> str:
        """Most recent score for every score type the user has."""
        latest = repository.get_latest_scores(user_id, [t.value for t in ScoreType])
        return json.dumps({"scores": {k: v.to_dict() for k, v in latest.items()}})

    @mcp.tool
    async def list_insights(
        ctx: Context,
        user_id: str,
        status: str = "active",
        category: str | None = None,
        limit: int = 20,
    ) -> str:
        """List a user's insights, highest priority first.

        Args:
            status: active | dismissed | acted_upon (default: active).
            category: Optional insight category filter (e.g., 'stress', 'sleep').
        """
        try:
            status = InsightStatus(status.strip().lower()).value
        except ValueError:
            return _error("status must be one of: active | dismissed | acted_upon")

        insights = repository.list_insights(user_id, status=status, category=category, limit=limit)
        return json.dumps({"insights": [i.to_dict() for i in insights]})

    @mcp.tool
    async def update_insight_status(
        ctx: Context,
        user_id: str,
        insight_id: str,
        status: str,
    ) -> str:
        """Mark an insight as acted upon, dismissed, or active again.

        Args:
            insight_id: The insight to update; must belong to ``user_id``.
            status: active | dismissed | acted_upon.
        """
        try:
            new_status = InsightStatus(status.strip().lower())
        except ValueError:
            return _error("status must be one of: active | dismissed | acted_upon")

        updated = repository.update_insight_status(user_id, insight_id, new_status.value)
        if updated is None:
            return json.dumps({
                "status": "not_found",
                "insight_id": insight_id,
                "message": "Insight not found.",
            })
        return json.dumps({
            "status": "updated",
            "insight": {
                "id": updated.id,
                "title": updated.title,
                "status": updated.status,
                "acted_at": updated.acted_at,
                "dismissed_at": updated.dismissed_at,
                "updated_at": updated.updated_at,
            },
        })

    @mcp.tool
    async def get_wellness_dashboard(ctx: Context, user_id: str) -> str:
        """Wellness overview: latest core scores, top active insights, last-24h readings.

        Scores cover overall, stress, sleep and energy; score types with no
        history are null. Insights are the five highest-priority active ones.
        """
        latest = repository.get_latest_scores(user_id, [t.value for t in DASHBOARD_SCORE_TYPES])
        insights = repository.list_insights(
            user_id, status=InsightStatus.ACTIVE.value, limit=DASHBOARD_INSIGHTS
        )
        since = (datetime.now(timezone.utc) - RECENT_ACTIVITY_WINDOW).isoformat()
        recent = repository.count_samples_by_type(user_id, since=since)

        return json.dumps({
            "scores": {
                t.value: latest[t.value].to_dict() if t.value in latest else None
                for t in DASHBOARD_SCORE_TYPES
            },
            "insights": [
                {
                    "id": i.id,
                    "title": i.title,
                    "description": i.description,
                    "category": i.category,
                    "severity": i.severity,
                    "priority": i.priority,
                    "recommendations": i.recommendations,
                }
                for i in insights
            ],
            "recent_data": recent,
        })
