"""Fixed fallback analysis used when no live analyst result is available."""

from __future__ import annotations

from wellsense.domains.wellness.domain_logic.models import (
    AnalysisResult,
    InsightDraft,
    ScoreDraft,
    ScoreType,
    Severity,
)


def mock_analysis() -> AnalysisResult:
    """Return a fresh copy of the hand-authored mock analysis.

    Four scores (overall, stress, sleep, energy) and two insights (stress,
    sleep). Built on every call; callers never share mutable state.
    """
    return AnalysisResult(
        scores=[
            ScoreDraft(
                score_type=ScoreType.OVERALL,
                score=72,
                confidence=0.8,
                factors={"sleep_quality": 0.7, "stress_level": -0.4, "activity_level": 0.3},
                explanation="Good overall wellness with room for improvement in stress management",
            ),
            ScoreDraft(
                score_type=ScoreType.STRESS,
                score=65,
                confidence=0.85,
                factors={"hrv_variability": -0.5, "resting_heart_rate": -0.3},
                explanation="Elevated stress indicators detected",
            ),
            ScoreDraft(
                score_type=ScoreType.SLEEP,
                score=78,
                confidence=0.9,
                factors={"sleep_duration": 0.8, "sleep_quality": 0.6},
                explanation="Good sleep quality and duration",
            ),
            ScoreDraft(
                score_type=ScoreType.ENERGY,
                score=70,
                confidence=0.75,
                factors={"activity_level": 0.5, "recovery_metrics": 0.4},
                explanation="Moderate energy levels with good recovery",
            ),
        ],
        insights=[
            InsightDraft(
                title="Consider Mindfulness Practices",
                description=(
                    "Your wearable data shows elevated stress patterns. Mindfulness and "
                    "breathing exercises could help reduce stress levels."
                ),
                category="stress",
                severity=Severity.MEDIUM,
                priority=75,
                recommendations=[
                    "Try 10 minutes of deep breathing daily",
                    "Practice mindfulness meditation",
                    "Consider yoga for stress relief",
                ],
                practice_types=["meditation", "breathing", "yoga"],
                evidence={"hrv_drop": "15%", "elevated_rhr": "8bpm"},
                reasoning=(
                    "HRV and resting heart rate patterns indicate stress accumulation "
                    "that could benefit from mindfulness practices"
                ),
            ),
            InsightDraft(
                title="Sleep Quality Optimization",
                description=(
                    "Your sleep data looks good, but there may be opportunities to "
                    "optimize your sleep environment."
                ),
                category="sleep",
                severity=Severity.LOW,
                priority=45,
                recommendations=[
                    "Maintain consistent bedtime routine",
                    "Keep bedroom cool and dark",
                    "Avoid screens 1 hour before bed",
                ],
                practice_types=["sleep", "relaxation"],
                evidence={"sleep_efficiency": "87%", "deep_sleep_ratio": "18%"},
                reasoning="Sleep metrics are solid but could be enhanced with better pre-sleep routines",
            ),
        ],
    )
