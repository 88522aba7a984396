"""Shared test fixtures for WellSense tests."""

from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest

# ---------------------------------------------------------------------------
# Test hermeticity
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _force_hermetic_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LLM_PROVIDER", "openai")
    monkeypatch.setenv("OPENAI_API_KEY", "")
    monkeypatch.setenv("OPENAI_MODEL", "")
    monkeypatch.setenv("OPENAI_BASE_URL", "")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "")
    monkeypatch.setenv("ENCRYPTION_KEY", "")
    monkeypatch.setenv("DB_PATH", ":memory:")
    monkeypatch.setenv("SEED_PRACTICE_CATALOG", "true")
    monkeypatch.setenv("PRACTICE_CATALOG_PATH", "")

# Allow running tests without `pip install -e .` by making `src/` importable.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_SRC_DIR = _PROJECT_ROOT / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from wellsense.core.storage.models import Practice  # noqa: E402
from wellsense.domains.wellness.domain_logic.models import Sample  # noqa: E402

# ---------------------------------------------------------------------------
# Sample builders
# ---------------------------------------------------------------------------

_BASE_TIME = datetime(2026, 2, 1, 8, 0, tzinfo=timezone.utc)


def make_sample(
    metric_type: str,
    value: Any,
    *,
    hours_ago: int = 0,
    raw_payload: dict[str, Any] | None = None,
) -> Sample:
    """Create a pipeline Sample with a timestamp relative to a fixed base."""
    return Sample(
        metric_type=metric_type,
        value=value,
        timestamp=_BASE_TIME - timedelta(hours=hours_ago),
        raw_payload=raw_payload or {"source": "test", "value": value},
    )


def make_series(metric_type: str, values: list[Any]) -> list[Sample]:
    """Newest-first samples of one metric type, one hour apart."""
    return [make_sample(metric_type, v, hours_ago=i) for i, v in enumerate(values)]


# Demo dataset: 3 heartrate, 2 sleep, 2 activity, 2 hrv, 1 stress.
DEMO_READINGS: list[tuple[str, float]] = [
    ("heartrate", 72),
    ("heartrate", 68),
    ("heartrate", 75),
    ("sleep", 6.5),
    ("sleep", 7.2),
    ("activity", 8500),
    ("activity", 6200),
    ("hrv", 45),
    ("hrv", 38),
    ("stress", 42),
]


@pytest.fixture
def demo_samples() -> list[Sample]:
    """Ten newest-first samples across five metric types."""
    return [
        make_sample(metric, value, hours_ago=i * 4)
        for i, (metric, value) in enumerate(DEMO_READINGS)
    ]


# ---------------------------------------------------------------------------
# Analyst replies
# ---------------------------------------------------------------------------

VALID_REPLY = """{
  "scores": [
    {"type": "overall", "score": 81, "confidence": 0.7,
     "factors": {"sleep_quality": 0.6}, "explanation": "Solid baseline"},
    {"type": "recovery", "score": 64, "confidence": 0.6,
     "factors": {"hrv_trend": -0.2}, "explanation": "HRV slightly down"}
  ],
  "insights": [
    {"title": "Protect Your Recovery", "description": "HRV dipped midweek.",
     "category": "activity", "severity": "medium", "priority": 60,
     "recommendations": ["Add an easy day"], "practiceTypes": ["recovery"],
     "evidence": {"hrv_change": "-12%"}, "reasoning": "Lower HRV suggests fatigue"}
  ]
}"""


# ---------------------------------------------------------------------------
# In-memory storage fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def wellness_db():
    """Create an in-memory WellnessDatabase for testing."""
    from wellsense.core.storage.database import WellnessDatabase

    db = WellnessDatabase(":memory:")
    db.initialize()
    yield db
    db.close()


@pytest.fixture
def field_encryptor():
    """Create a FieldEncryptor with a fresh test key."""
    from wellsense.core.storage.encryption import FieldEncryptor

    return FieldEncryptor(FieldEncryptor.generate_key())


@pytest.fixture
def wellness_repository(wellness_db, field_encryptor):
    """Create a WellnessRepository backed by in-memory SQLite."""
    from wellsense.core.storage.repository import WellnessRepository

    return WellnessRepository(wellness_db, field_encryptor)


@pytest.fixture
def seeded_repository(wellness_repository):
    """Repository with the bundled practice catalog loaded."""
    from wellsense.domains.wellness.catalog import seed_practice_catalog

    seed_practice_catalog(wellness_repository)
    return wellness_repository


def make_practice(
    id: str,
    category: str,
    popularity: int,
    tags: list[str] | None = None,
) -> Practice:
    return Practice(
        id=id,
        title=f"Practice {id}",
        category=category,
        tags=tags or [],
        popularity=popularity,
    )


class FakeCatalog:
    """In-memory practice catalog that records every query."""

    def __init__(self, practices: list[Practice] | None = None) -> None:
        self.practices = practices or []
        self.queries: list[list[str]] = []

    def find_practices(self, terms, *, limit: int = 3) -> list[Practice]:
        terms = list(terms)
        self.queries.append(terms)
        hits = [
            p for p in self.practices
            if p.category in terms or any(t in p.tags for t in terms)
        ]
        return sorted(hits, key=lambda p: p.popularity, reverse=True)[:limit]
