"""Wellness data repository: CRUD for samples, scores, insights and practices.

The repository mediates between the storage models and SQLite, using
FieldEncryptor for raw wearable payloads. Every write is committed on its
own; there is no cross-row transaction.
"""

from __future__ import annotations

import json
import logging
import uuid
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

from wellsense.core.storage.database import WellnessDatabase
from wellsense.core.storage.encryption import FieldEncryptor
from wellsense.core.storage.models import (
    Insight,
    Practice,
    StoredSample,
    WellnessScore,
)

logger = logging.getLogger(__name__)


class RepositoryError(Exception):
    """Raised when repository operations fail."""


def _dumps(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), default=str)


def _norm(value: str | None) -> str:
    """Normalize a filter value to the lower-case stored vocabulary."""
    return (value or "").strip().lower()


def _loads(text: str | None, default: Any) -> Any:
    if not text:
        return default
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        logger.warning("Corrupt JSON column ignored: %.80s", text)
        return default


class WellnessRepository:
    """CRUD repository for the wellness data bank.

    Usage::

        db = WellnessDatabase(":memory:")
        db.initialize()
        repo = WellnessRepository(db, FieldEncryptor(key))

        repo.save_sample(sample)
        recent = repo.get_samples(user_id, since="2026-01-01T00:00:00+00:00")
    """

    def __init__(self, database: WellnessDatabase, encryptor: FieldEncryptor) -> None:
        self._db = database
        self._enc = encryptor

    @staticmethod
    def _new_id() -> str:
        return str(uuid.uuid4())

    @staticmethod
    def _now_iso() -> str:
        return datetime.now(timezone.utc).isoformat()

    # ------------------------------------------------------------------
    # Wearable samples
    # ------------------------------------------------------------------

    def save_sample(self, sample: StoredSample) -> str:
        """Persist one wearable reading with its raw payload encrypted.

        Returns:
            The sample ID (generated if ``sample.id`` is empty).
        """
        conn = self._db.connection
        sid = sample.id or self._new_id()
        conn.execute(
            """INSERT INTO wearable_samples (
                id, user_id, provider, data_type, value, unit, quality,
                source, notes, raw_enc, timestamp, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                sid,
                sample.user_id,
                sample.provider,
                sample.data_type,
                sample.value,
                sample.unit,
                sample.quality,
                sample.source,
                sample.notes,
                self._enc.encrypt(sample.raw_data),
                sample.timestamp,
                sample.created_at or self._now_iso(),
            ),
        )
        conn.commit()
        logger.debug("Saved %s sample %s for user %s", sample.data_type, sid, sample.user_id)
        return sid

    def _sample_filters(
        self,
        user_id: str,
        data_type: str | None,
        since: str | None,
        until: str | None,
    ) -> tuple[str, list[Any]]:
        conditions = ["user_id = ?"]
        params: list[Any] = [user_id]
        if _norm(data_type):
            conditions.append("data_type = ?")
            params.append(_norm(data_type))
        if since:
            conditions.append("timestamp >= ?")
            params.append(since)
        if until:
            conditions.append("timestamp <= ?")
            params.append(until)
        return " AND ".join(conditions), params

    def get_samples(
        self,
        user_id: str,
        *,
        data_type: str | None = None,
        since: str | None = None,
        until: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[StoredSample]:
        """Query a user's samples, newest first.

        Args:
            since: ISO 8601 lower bound on the sample timestamp (inclusive).
            until: ISO 8601 upper bound on the sample timestamp (inclusive).
        """
        where, params = self._sample_filters(user_id, data_type, since, until)
        rows = self._db.connection.execute(
            f"SELECT * FROM wearable_samples WHERE {where} "
            "ORDER BY timestamp DESC, created_at DESC LIMIT ? OFFSET ?",
            [*params, limit, offset],
        ).fetchall()
        return [self._row_to_sample(row) for row in rows]

    def count_samples(
        self,
        user_id: str,
        *,
        data_type: str | None = None,
        since: str | None = None,
        until: str | None = None,
    ) -> int:
        where, params = self._sample_filters(user_id, data_type, since, until)
        row = self._db.connection.execute(
            f"SELECT COUNT(*) FROM wearable_samples WHERE {where}", params
        ).fetchone()
        return row[0]

    def count_samples_by_type(self, user_id: str, *, since: str | None = None) -> dict[str, int]:
        """Number of samples per data type, optionally since an ISO 8601 time."""
        where, params = self._sample_filters(user_id, None, since, None)
        rows = self._db.connection.execute(
            f"SELECT data_type, COUNT(*) AS n FROM wearable_samples WHERE {where} "
            "GROUP BY data_type ORDER BY data_type",
            params,
        ).fetchall()
        return {row["data_type"]: row["n"] for row in rows}

    def _row_to_sample(self, row: Any) -> StoredSample:
        return StoredSample(
            id=row["id"],
            user_id=row["user_id"],
            provider=row["provider"],
            data_type=row["data_type"],
            timestamp=row["timestamp"],
            value=row["value"],
            unit=row["unit"],
            quality=row["quality"],
            source=row["source"],
            notes=row["notes"],
            raw_data=self._enc.decrypt(row["raw_enc"]),
            created_at=row["created_at"],
        )

    # ------------------------------------------------------------------
    # Wellness scores
    # ------------------------------------------------------------------

    def save_wellness_score(self, score: WellnessScore) -> WellnessScore:
        """Insert a score row and return it with generated id/created_at."""
        score.id = score.id or self._new_id()
        score.created_at = score.created_at or self._now_iso()
        conn = self._db.connection
        conn.execute(
            """INSERT INTO wellness_scores (
                id, user_id, score_type, score, confidence,
                period_start, period_end, factors_json, explanation, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                score.id,
                score.user_id,
                score.score_type,
                score.score,
                score.confidence,
                score.period_start,
                score.period_end,
                _dumps(score.factors),
                score.explanation,
                score.created_at,
            ),
        )
        conn.commit()
        return score

    def get_wellness_scores(
        self,
        user_id: str,
        *,
        score_type: str | None = None,
        since: str | None = None,
        until: str | None = None,
        limit: int = 50,
    ) -> list[WellnessScore]:
        """Score history for a user, newest ``period_end`` first."""
        conditions = ["user_id = ?"]
        params: list[Any] = [user_id]
        if score_type:
            conditions.append("score_type = ?")
            params.append(score_type)
        if since:
            conditions.append("period_end >= ?")
            params.append(since)
        if until:
            conditions.append("period_end <= ?")
            params.append(until)

        rows = self._db.connection.execute(
            f"SELECT * FROM wellness_scores WHERE {' AND '.join(conditions)} "
            "ORDER BY period_end DESC, created_at DESC LIMIT ?",
            [*params, limit],
        ).fetchall()
        return [self._row_to_score(row) for row in rows]

    def get_latest_scores(self, user_id: str, score_types: Iterable[str]) -> dict[str, WellnessScore]:
        """Most recent score per requested type; types with no history are omitted."""
        latest: dict[str, WellnessScore] = {}
        for score_type in score_types:
            history = self.get_wellness_scores(user_id, score_type=score_type, limit=1)
            if history:
                latest[score_type] = history[0]
        return latest

    @staticmethod
    def _row_to_score(row: Any) -> WellnessScore:
        return WellnessScore(
            id=row["id"],
            user_id=row["user_id"],
            score_type=row["score_type"],
            score=row["score"],
            confidence=row["confidence"],
            period_start=row["period_start"],
            period_end=row["period_end"],
            factors=_loads(row["factors_json"], {}),
            explanation=row["explanation"] or "",
            created_at=row["created_at"],
        )

    # ------------------------------------------------------------------
    # Insights
    # ------------------------------------------------------------------

    def save_insight(self, insight: Insight) -> Insight:
        """Insert an insight row and return it with generated id/created_at."""
        insight.id = insight.id or self._new_id()
        insight.created_at = insight.created_at or self._now_iso()
        conn = self._db.connection
        conn.execute(
            """INSERT INTO insights (
                id, user_id, title, description, category, severity, priority,
                recommendations_json, practice_ids_json, evidence_json, reasoning,
                status, expires_at, acted_at, dismissed_at, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                insight.id,
                insight.user_id,
                insight.title,
                insight.description,
                insight.category,
                insight.severity,
                insight.priority,
                _dumps(insight.recommendations),
                _dumps(insight.practice_ids),
                _dumps(insight.evidence),
                insight.reasoning,
                insight.status,
                insight.expires_at,
                insight.acted_at,
                insight.dismissed_at,
                insight.created_at,
                insight.updated_at,
            ),
        )
        conn.commit()
        return insight

    def get_insight(self, user_id: str, insight_id: str) -> Insight | None:
        """Fetch an insight only if it belongs to ``user_id``."""
        row = self._db.connection.execute(
            "SELECT * FROM insights WHERE id = ? AND user_id = ?", (insight_id, user_id)
        ).fetchone()
        return self._row_to_insight(row) if row is not None else None

    def list_insights(
        self,
        user_id: str,
        *,
        status: str | None = "active",
        category: str | None = None,
        limit: int = 20,
    ) -> list[Insight]:
        """List a user's insights, highest priority first, then newest."""
        conditions = ["user_id = ?"]
        params: list[Any] = [user_id]
        if status:
            conditions.append("status = ?")
            params.append(status)
        if _norm(category):
            conditions.append("category = ?")
            params.append(_norm(category))

        rows = self._db.connection.execute(
            f"SELECT * FROM insights WHERE {' AND '.join(conditions)} "
            "ORDER BY priority DESC, created_at DESC LIMIT ?",
            [*params, limit],
        ).fetchall()
        return [self._row_to_insight(row) for row in rows]

    def update_insight_status(self, user_id: str, insight_id: str, status: str) -> Insight | None:
        """Transition an insight's status.

        ``acted_upon`` stamps ``acted_at``, ``dismissed`` stamps
        ``dismissed_at`` and ``active`` clears both. Returns the updated insight, or None if the user
        has no such insight.
        """
        if self.get_insight(user_id, insight_id) is None:
            return None

        now = self._now_iso()
        assignments = ["status = ?", "updated_at = ?"]
        params: list[Any] = [status, now]
        if status == "acted_upon":
            assignments.append("acted_at = ?")
            params.append(now)
        elif status == "dismissed":
            assignments.append("dismissed_at = ?")
            params.append(now)
        elif status == "active":
            assignments.extend(["acted_at = NULL", "dismissed_at = NULL"])

        conn = self._db.connection
        conn.execute(
            f"UPDATE insights SET {', '.join(assignments)} WHERE id = ? AND user_id = ?",
            [*params, insight_id, user_id],
        )
        conn.commit()
        logger.info("Insight %s status -> %s", insight_id, status)
        return self.get_insight(user_id, insight_id)

    @staticmethod
    def _row_to_insight(row: Any) -> Insight:
        return Insight(
            id=row["id"],
            user_id=row["user_id"],
            title=row["title"],
            description=row["description"] or "",
            category=row["category"] or "",
            severity=row["severity"],
            priority=row["priority"],
            recommendations=_loads(row["recommendations_json"], []),
            practice_ids=_loads(row["practice_ids_json"], []),
            evidence=_loads(row["evidence_json"], {}),
            reasoning=row["reasoning"] or "",
            status=row["status"],
            expires_at=row["expires_at"],
            acted_at=row["acted_at"],
            dismissed_at=row["dismissed_at"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    # ------------------------------------------------------------------
    # Practice catalog
    # ------------------------------------------------------------------

    def add_practice(self, practice: Practice) -> bool:
        """Insert a catalog practice unless its id already exists.

        Returns:
            True if a new row was inserted.
        """
        if not practice.id:
            raise RepositoryError("Practice id must not be empty")
        conn = self._db.connection
        cursor = conn.execute(
            """INSERT OR IGNORE INTO practices (
                id, title, description, category, duration_minutes,
                difficulty, tags_json, benefits_json, popularity
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                practice.id,
                practice.title,
                practice.description,
                practice.category,
                practice.duration_minutes,
                practice.difficulty,
                _dumps(practice.tags),
                _dumps(practice.benefits),
                practice.popularity,
            ),
        )
        conn.commit()
        return cursor.rowcount > 0

    def find_practices(self, terms: Iterable[str], *, limit: int = 3) -> list[Practice]:
        """Practices whose category equals, or whose tags contain, any term.

        Ordered by popularity, most popular first.
        """
        terms = list(dict.fromkeys(terms))
        if not terms:
            return []
        placeholders = ", ".join("?" for _ in terms)
        rows = self._db.connection.execute(
            f"""SELECT * FROM practices
                WHERE category IN ({placeholders})
                   OR EXISTS (
                       SELECT 1 FROM json_each(practices.tags_json)
                       WHERE json_each.value IN ({placeholders})
                   )
                ORDER BY popularity DESC, title ASC
                LIMIT ?""",
            [*terms, *terms, limit],
        ).fetchall()
        return [self._row_to_practice(row) for row in rows]

    def list_practices(
        self,
        *,
        category: str | None = None,
        difficulty: str | None = None,
        tag: str | None = None,
        limit: int = 20,
    ) -> list[Practice]:
        """Browse the catalog with optional filters, most popular first."""
        conditions: list[str] = []
        params: list[Any] = []
        if _norm(category):
            conditions.append("category = ?")
            params.append(_norm(category))
        if _norm(difficulty):
            conditions.append("difficulty = ?")
            params.append(_norm(difficulty))
        if _norm(tag):
            conditions.append(
                "EXISTS (SELECT 1 FROM json_each(practices.tags_json) WHERE json_each.value = ?)"
            )
            params.append(_norm(tag))

        query = "SELECT * FROM practices"
        if conditions:
            query += " WHERE " + " AND ".join(conditions)
        query += " ORDER BY popularity DESC, title ASC LIMIT ?"
        params.append(limit)

        rows = self._db.connection.execute(query, params).fetchall()
        return [self._row_to_practice(row) for row in rows]

    def get_practice(self, practice_id: str) -> Practice | None:
        row = self._db.connection.execute(
            "SELECT * FROM practices WHERE id = ?", (practice_id,)
        ).fetchone()
        return self._row_to_practice(row) if row is not None else None

    def get_practices_by_ids(self, practice_ids: Iterable[str]) -> list[Practice]:
        """Practices for ``practice_ids`` in first-seen order; unknown ids are skipped."""
        ids = list(dict.fromkeys(practice_ids))
        if not ids:
            return []
        placeholders = ", ".join("?" for _ in ids)
        rows = self._db.connection.execute(
            f"SELECT * FROM practices WHERE id IN ({placeholders})", ids
        ).fetchall()
        by_id = {row["id"]: self._row_to_practice(row) for row in rows}
        return [by_id[pid] for pid in ids if pid in by_id]

    def increment_practice_popularity(self, practice_id: str) -> None:
        conn = self._db.connection
        conn.execute(
            "UPDATE practices SET popularity = popularity + 1 WHERE id = ?", (practice_id,)
        )
        conn.commit()

    def count_practices(self) -> int:
        row = self._db.connection.execute("SELECT COUNT(*) FROM practices").fetchone()
        return row[0]

    @staticmethod
    def _row_to_practice(row: Any) -> Practice:
        return Practice(
            id=row["id"],
            title=row["title"],
            category=row["category"],
            description=row["description"] or "",
            duration_minutes=row["duration_minutes"],
            difficulty=row["difficulty"],
            tags=_loads(row["tags_json"], []),
            benefits=_loads(row["benefits_json"], []),
            popularity=row["popularity"],
        )
