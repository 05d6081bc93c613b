"""
Prediction Analyzer

Scores a prediction batch against the active routine. The resulting
PredictionAnalysis drives focus level, layout density and theme adaptation.
The analysis is recomputed for every batch and never cached.
"""

import logging
from typing import Sequence

from .launcher_models import ActionPrediction, FocusLevel, PredictionAnalysis, RoutineContext
from .routine_profiles import EXPECTED_BUCKETS, TOTAL_BUCKET_COUNT, classify_action

logger = logging.getLogger(__name__)

HIGH_CONFIDENCE_THRESHOLD = 0.8
MEDIUM_CONFIDENCE_THRESHOLD = 0.5


def _clamp_confidence(value: float) -> float:
    return min(1.0, max(0.0, float(value)))


def calculate_diversity(predictions: Sequence[ActionPrediction]) -> float:
    """Share of semantic buckets represented in the batch"""
    if not predictions:
        return 0.0
    buckets = {classify_action(p.action) for p in predictions}
    return len(buckets) / TOTAL_BUCKET_COUNT


def calculate_routine_alignment(
    predictions: Sequence[ActionPrediction],
    routine: RoutineContext
) -> float:
    """Fraction of predictions whose bucket the routine expects"""
    if not predictions:
        return 0.0
    expected = EXPECTED_BUCKETS[routine]
    aligned = sum(1 for p in predictions if classify_action(p.action) in expected)
    return aligned / len(predictions)


def compute_focus_level(average_confidence: float, routine_alignment: float) -> FocusLevel:
    # Both bounds are strict
    if average_confidence > 0.8 and routine_alignment > 0.7:
        return FocusLevel.HIGH
    if average_confidence > 0.6 and routine_alignment > 0.5:
        return FocusLevel.MEDIUM
    return FocusLevel.LOW


def should_change_layout(average_confidence: float, diversity: float) -> bool:
    return average_confidence > 0.8 or diversity < 0.3


def analyze_predictions(
    predictions: Sequence[ActionPrediction],
    routine: RoutineContext
) -> PredictionAnalysis:
    """
    Analyze a prediction batch for UI adaptation

    Args:
        predictions: Current prediction batch, possibly empty
        routine: Active routine context

    Returns:
        PredictionAnalysis for the batch. An empty batch yields a neutral
        analysis (zero confidence, LOW focus, no layout change).
    """
    if not predictions:
        return PredictionAnalysis(
            total_predictions=0,
            high_confidence_count=0,
            medium_confidence_count=0,
            low_confidence_count=0,
            average_confidence=0.0,
            diversity=0.0,
            routine_alignment=0.0,
            focus_level=FocusLevel.LOW,
            requires_layout_change=False,
        )

    confidences = [_clamp_confidence(p.confidence) for p in predictions]
    high = sum(1 for c in confidences if c >= HIGH_CONFIDENCE_THRESHOLD)
    medium = sum(
        1 for c in confidences
        if MEDIUM_CONFIDENCE_THRESHOLD <= c < HIGH_CONFIDENCE_THRESHOLD
    )
    low = len(confidences) - high - medium

    average_confidence = sum(confidences) / len(confidences)
    diversity = calculate_diversity(predictions)
    alignment = calculate_routine_alignment(predictions, routine)

    analysis = PredictionAnalysis(
        total_predictions=len(predictions),
        high_confidence_count=high,
        medium_confidence_count=medium,
        low_confidence_count=low,
        average_confidence=average_confidence,
        diversity=diversity,
        routine_alignment=alignment,
        focus_level=compute_focus_level(average_confidence, alignment),
        requires_layout_change=should_change_layout(average_confidence, diversity),
    )
    logger.debug(
        f"Analyzed {analysis.total_predictions} predictions for {routine.value}: "
        f"avg={average_confidence:.2f} diversity={diversity:.2f} "
        f"alignment={alignment:.2f} focus={analysis.focus_level.value}"
    )
    return analysis
