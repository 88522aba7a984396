"""Analysis prompt: renders metric summaries into the analyst request."""

from __future__ import annotations

import json

from wellsense.domains.wellness.domain_logic.models import METRIC_TYPES, MetricSummary


def build_analysis_prompt(summary: dict[str, MetricSummary]) -> str:
    """Render the aggregated summary followed by the analysis directives."""
    ordered = {
        name: summary[name].to_dict()
        for name in METRIC_TYPES
        if name in summary
    }
    return f"""\
Analyze this wearable data summary and provide wellness insights:

DATA SUMMARY:
{json.dumps(ordered, indent=2)}

Please analyze patterns in:
- Sleep quality and duration
- Heart rate variability (stress indicator)
- Activity levels and recovery
- Resting heart rate trends
- Overall physiological stress markers

Focus on identifying:
1. Current wellness state
2. Potential issues (stress, poor sleep, overtraining)
3. Positive trends to maintain
4. Actionable recommendations
5. Specific wellness practices that would help

Consider correlations between different metrics to provide holistic insights.
"""
