"""Sample aggregation: per-metric summary statistics for the analyst prompt.

Samples arrive newest-first. For every recognized metric type present in
the input, the aggregator reports count, mean, min, max, latest value and
a coarse trend direction.
"""

from __future__ import annotations

import logging
import math
import statistics
from collections.abc import Iterable
from typing import Any

from wellsense.domains.wellness.domain_logic.models import (
    METRIC_TYPES,
    MetricSummary,
    Sample,
    Trend,
)

logger = logging.getLogger(__name__)

TREND_MIN_SAMPLES = 3
TREND_RECENT_WINDOW = 10
TREND_OLDER_GAP = 5
TREND_STABLE_THRESHOLD = 0.05


def _numeric(val: Any) -> float | None:
    """Return ``val`` as a float if it is a number other than NaN."""
    if val is None or isinstance(val, bool) or not isinstance(val, (int, float)):
        return None
    if math.isnan(val):
        return None
    return float(val)


def _numeric_values(samples: Iterable[Sample]) -> list[float]:
    return [v for v in (_numeric(s.value) for s in samples) if v is not None]


def compute_trend(samples: list[Sample]) -> Trend:
    """Classify the direction of a newest-first list of samples.

    ``recent`` is the first ``min(10, n)`` samples; ``older`` spans indices
    ``[max(0, n-10), n-5)``. An empty older window means there is not
    enough history and the trend is stable.
    """
    n = len(samples)
    if n < TREND_MIN_SAMPLES:
        return Trend.STABLE

    recent = samples[:min(TREND_RECENT_WINDOW, n)]
    older_start = max(0, n - TREND_RECENT_WINDOW)
    older_end = n - TREND_OLDER_GAP
    if older_end <= older_start:
        return Trend.STABLE
    older = samples[older_start:older_end]

    recent_values = _numeric_values(recent)
    older_values = _numeric_values(older)
    if not recent_values or not older_values:
        return Trend.STABLE

    recent_mean = statistics.fmean(recent_values)
    older_mean = statistics.fmean(older_values)
    if older_mean == 0:
        return Trend.STABLE

    change = (recent_mean - older_mean) / older_mean
    if abs(change) < TREND_STABLE_THRESHOLD:
        return Trend.STABLE
    return Trend.INCREASING if change > 0 else Trend.DECREASING


def summarize_metric(samples: list[Sample]) -> MetricSummary:
    """Summarize the samples of a single metric type (newest first)."""
    values = _numeric_values(samples)
    return MetricSummary(
        count=len(samples),
        average=statistics.fmean(values) if values else None,
        min=min(values) if values else None,
        max=max(values) if values else None,
        latest=_numeric(samples[0].value) if samples else None,
        trend=compute_trend(samples),
    )


def summarize_samples(samples: Iterable[Sample]) -> dict[str, MetricSummary]:
    """Group samples by metric type and summarize each recognized type.

    Metric types with no samples are omitted. Unrecognized types are
    ignored. Never raises on malformed values.
    """
    grouped: dict[str, list[Sample]] = {name: [] for name in METRIC_TYPES}
    ignored = 0
    for sample in samples:
        key = str(sample.metric_type or "").strip().lower()
        if key in grouped:
            grouped[key].append(sample)
        else:
            ignored += 1

    if ignored:
        logger.debug("Ignored %d samples with unrecognized metric types", ignored)

    return {
        name: summarize_metric(group)
        for name, group in grouped.items()
        if group
    }
