"""
Widget Planner

Selects the routine's widget set and prunes visibility by focus level.
Higher focus always yields fewer (or equal) visible widgets.
"""

from typing import Sequence, Tuple

from .launcher_models import ActionPrediction, FocusLevel, PredictionAnalysis, RoutineContext, WidgetConfig
from .routine_profiles import BASE_WIDGETS


def build_base_widgets(
    routine: RoutineContext,
    predictions: Sequence[ActionPrediction]
) -> Tuple[WidgetConfig, ...]:
    """Routine widget list with initial, prediction-dependent visibility"""
    count = len(predictions)
    return tuple(
        WidgetConfig(
            widget_type=slot.widget_type,
            priority=slot.priority,
            is_visible=count >= slot.min_predictions,
        )
        for slot in BASE_WIDGETS[routine]
    )


def apply_focus_level(widget: WidgetConfig, focus_level: FocusLevel) -> WidgetConfig:
    # Pruning never reveals a widget the base set hid
    if focus_level == FocusLevel.HIGH:
        visible = widget.is_visible and widget.priority <= 2
    elif focus_level == FocusLevel.MEDIUM:
        visible = widget.is_visible and widget.priority <= 3
    else:
        return widget
    return WidgetConfig(widget.widget_type, widget.priority, visible)


def plan_widgets(
    routine: RoutineContext,
    predictions: Sequence[ActionPrediction],
    analysis: PredictionAnalysis
) -> Tuple[WidgetConfig, ...]:
    """Widget set for the routine, pruned by the batch's focus level"""
    return tuple(
        apply_focus_level(widget, analysis.focus_level)
        for widget in build_base_widgets(routine, predictions)
    )
