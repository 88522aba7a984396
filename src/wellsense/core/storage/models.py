"""Data models for the wellness persistence layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class StoredSample:
    """A single ingested wearable reading.

    The raw device payload is stored encrypted; the numeric value and the
    metric type stay in clear for windowed queries.
    """

    id: str
    user_id: str
    provider: str
    data_type: str                         # 'heartrate', 'sleep', 'hrv', ...
    timestamp: str                         # ISO 8601, UTC
    value: float | None = None
    unit: str | None = None
    quality: str | None = None             # 'high' | 'medium' | 'low'
    source: str | None = None
    notes: str | None = None
    raw_data: dict[str, Any] = field(default_factory=dict)
    created_at: str = ""


@dataclass
class WellnessScore:
    """One persisted score. Never updated in place; history accumulates."""

    id: str
    user_id: str
    score_type: str
    score: float
    confidence: float
    period_start: str
    period_end: str
    factors: dict[str, Any] = field(default_factory=dict)
    explanation: str = ""
    created_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "score_type": self.score_type,
            "score": self.score,
            "confidence": self.confidence,
            "period_start": self.period_start,
            "period_end": self.period_end,
            "factors": self.factors,
            "explanation": self.explanation,
            "created_at": self.created_at,
        }


@dataclass
class Insight:
    """A persisted insight linked to suggested catalog practices."""

    id: str
    user_id: str
    title: str
    description: str
    category: str
    severity: str                          # 'low' | 'medium' | 'high'
    priority: int                          # 1-100
    recommendations: list[str] = field(default_factory=list)
    practice_ids: list[str] = field(default_factory=list)
    evidence: dict[str, Any] = field(default_factory=dict)
    reasoning: str = ""
    status: str = "active"                 # 'active' | 'dismissed' | 'acted_upon'
    expires_at: str | None = None
    acted_at: str | None = None
    dismissed_at: str | None = None
    created_at: str = ""
    updated_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "severity": self.severity,
            "priority": self.priority,
            "recommendations": self.recommendations,
            "practice_ids": self.practice_ids,
            "evidence": self.evidence,
            "reasoning": self.reasoning,
            "status": self.status,
            "expires_at": self.expires_at,
            "acted_at": self.acted_at,
            "dismissed_at": self.dismissed_at,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass
class Practice:
    """A wellness practice from the catalog."""

    id: str
    title: str
    category: str
    description: str = ""
    duration_minutes: int | None = None
    difficulty: str | None = None
    tags: list[str] = field(default_factory=list)
    benefits: list[str] = field(default_factory=list)
    popularity: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "description": self.description,
            "duration_minutes": self.duration_minutes,
            "difficulty": self.difficulty,
            "tags": self.tags,
            "benefits": self.benefits,
            "popularity": self.popularity,
        }
