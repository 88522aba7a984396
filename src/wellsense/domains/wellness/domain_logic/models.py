"""Wellness domain types: metric summaries, analysis drafts, closed vocabularies."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# Closed vocabularies
# ---------------------------------------------------------------------------

class MetricType(str, Enum):
    HEARTRATE = "heartrate"
    SLEEP = "sleep"
    ACTIVITY = "activity"
    HRV = "hrv"
    STRESS = "stress"
    TEMPERATURE = "temperature"
    OXYGEN = "oxygen"


class ScoreType(str, Enum):
    OVERALL = "overall"
    STRESS = "stress"
    SLEEP = "sleep"
    ENERGY = "energy"
    RECOVERY = "recovery"
    FOCUS = "focus"
    MOOD = "mood"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class InsightStatus(str, Enum):
    ACTIVE = "active"
    DISMISSED = "dismissed"
    ACTED_UPON = "acted_upon"


class Trend(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


# Metric order used for aggregation output and prompt rendering.
METRIC_TYPES: list[str] = [m.value for m in MetricType]


# ---------------------------------------------------------------------------
# Pipeline input
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Sample:
    """One timestamped wearable reading.

    ``value`` is whatever the device reported; non-numeric values are
    tolerated and simply excluded from numeric aggregates.
    """

    metric_type: str
    value: Any
    timestamp: datetime
    raw_payload: dict[str, Any] = field(default_factory=dict)


@dataclass
class MetricSummary:
    """Summary statistics for one metric type within the analysed window."""

    count: int
    average: float | None
    min: float | None
    max: float | None
    latest: float | None
    trend: Trend

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "average": self.average,
            "min": self.min,
            "max": self.max,
            "latest": self.latest,
            "trend": self.trend.value,
        }


# ---------------------------------------------------------------------------
# Analysis drafts (validated analyst reply or the mock analysis)
# ---------------------------------------------------------------------------

@dataclass
class ScoreDraft:
    score_type: ScoreType
    score: float                      # 0-100
    confidence: float                 # 0-1
    factors: dict[str, Any] = field(default_factory=dict)
    explanation: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.score_type.value,
            "score": self.score,
            "confidence": self.confidence,
            "factors": dict(self.factors),
            "explanation": self.explanation,
        }


@dataclass
class InsightDraft:
    title: str
    description: str
    category: str
    severity: Severity
    priority: int                     # 1-100
    recommendations: list[str] = field(default_factory=list)
    practice_types: list[str] = field(default_factory=list)
    evidence: dict[str, Any] = field(default_factory=dict)
    reasoning: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "severity": self.severity.value,
            "priority": self.priority,
            "recommendations": list(self.recommendations),
            "practiceTypes": list(self.practice_types),
            "evidence": dict(self.evidence),
            "reasoning": self.reasoning,
        }


@dataclass
class AnalysisResult:
    """Scores and insights produced by one analysis."""

    scores: list[ScoreDraft] = field(default_factory=list)
    insights: list[InsightDraft] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "scores": [s.to_dict() for s in self.scores],
            "insights": [i.to_dict() for i in self.insights],
        }
