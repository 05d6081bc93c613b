"""
UI State Generator

Composes the analyzer, card builder, widget planner, theme composer and app
grid ranker into one immutable UIState snapshot. Also provides the selective
update used on subsequent batches, which only replaces the parts of a
previous snapshot whose inputs changed meaningfully.
"""

import logging
from dataclasses import replace
from typing import Optional, Sequence

from .action_card_builder import (
    build_primary_actions, build_secondary_actions,
    select_primary_predictions, select_secondary_predictions
)
from .app_grid_ranker import build_app_grid
from .launcher_models import (
    ActionCard, ActionPrediction, App, FocusLevel, LayoutConfig,
    PredictionAnalysis, RoutineContext, UIState
)
from .prediction_analyzer import analyze_predictions
from .routine_profiles import (
    BASE_COLUMNS, BASE_SPACING, MAX_GRID_COLUMNS, MIN_GRID_COLUMNS, theme_name_for
)
from .theme_composer import compose_theme
from .widget_planner import plan_widgets

logger = logging.getLogger(__name__)

PRIMARY_CONFIDENCE_DELTA = 0.1
LAYOUT_CHANGE_TRANSITION_MS = 600
DEFAULT_TRANSITION_MS = 400


def calculate_grid_columns(routine: RoutineContext, focus_level: FocusLevel) -> int:
    columns = BASE_COLUMNS[routine]
    if focus_level == FocusLevel.HIGH:
        columns -= 1
    elif focus_level == FocusLevel.LOW:
        columns += 1
    return max(MIN_GRID_COLUMNS, min(MAX_GRID_COLUMNS, columns))


def calculate_adaptive_spacing(
    routine: RoutineContext,
    prediction_count: int,
    analysis: PredictionAnalysis
) -> float:
    """Base routine spacing scaled by content density and focus level"""
    if prediction_count > 4:
        density_factor = 0.8
    elif prediction_count < 2:
        density_factor = 1.2
    else:
        density_factor = 1.0

    focus_factor = {
        FocusLevel.HIGH: 1.3,
        FocusLevel.MEDIUM: 1.0,
        FocusLevel.LOW: 0.9,
    }[analysis.focus_level]

    return BASE_SPACING[routine] * density_factor * focus_factor


def generate_layout(
    routine: RoutineContext,
    predictions: Sequence[ActionPrediction],
    analysis: PredictionAnalysis
) -> LayoutConfig:
    return LayoutConfig(
        grid_columns=calculate_grid_columns(routine, analysis.focus_level),
        show_action_cards=bool(predictions) and analysis.average_confidence > 0.3,
        show_widgets=analysis.focus_level != FocusLevel.HIGH,
        adaptive_spacing=calculate_adaptive_spacing(routine, len(predictions), analysis),
        transition_duration_ms=(
            LAYOUT_CHANGE_TRANSITION_MS if analysis.requires_layout_change
            else DEFAULT_TRANSITION_MS
        ),
    )


def generate_ui_state(
    predictions: Sequence[ActionPrediction],
    routine: RoutineContext,
    catalog: Sequence[App]
) -> UIState:
    """
    Generate a complete launcher UI state.

    Args:
        predictions: Current prediction batch, possibly empty
        routine: Active routine context
        catalog: Installed apps with usage statistics

    Returns:
        A new UIState. Identical inputs always produce equal snapshots.
    """
    analysis = analyze_predictions(predictions, routine)
    return UIState(
        primary_actions=build_primary_actions(predictions, routine),
        secondary_actions=build_secondary_actions(predictions, routine),
        widgets=plan_widgets(routine, predictions, analysis),
        layout=generate_layout(routine, predictions, analysis),
        theme=compose_theme(routine, analysis),
        app_grid=build_app_grid(catalog, predictions, routine),
    )


def should_update_primary_actions(
    current: Sequence[ActionCard],
    predictions: Sequence[ActionPrediction]
) -> bool:
    """True when the top high-confidence set differs in size, text or confidence"""
    candidates = select_primary_predictions(predictions)
    if len(current) != len(candidates):
        return True
    return any(
        card.action != new.action
        or abs(card.confidence - new.confidence) > PRIMARY_CONFIDENCE_DELTA
        for card, new in zip(current, candidates)
    )


def should_update_secondary_actions(
    current: Sequence[ActionCard],
    predictions: Sequence[ActionPrediction]
) -> bool:
    candidates = select_secondary_predictions(predictions)
    if len(current) != len(candidates):
        return True
    return any(card.action != new.action for card, new in zip(current, candidates))


def has_significant_routine_change(current_theme_name: str, routine: RoutineContext) -> bool:
    """A routine switch shows up as a theme name the new routine would not produce"""
    return current_theme_name != theme_name_for(routine)


def generate_ui_update(
    current: UIState,
    predictions: Sequence[ActionPrediction],
    routine: RoutineContext,
    catalog: Sequence[App],
    analysis: Optional[PredictionAnalysis] = None
) -> UIState:
    """
    Derive the next snapshot from ``current`` with minimal visual churn.

    Action card lists are only replaced when their change predicate fires,
    layout only when the analysis asks for a layout change. Widgets and the
    app grid are always recomputed. The theme is carried over.
    """
    if analysis is None:
        analysis = analyze_predictions(predictions, routine)

    replace_primary = should_update_primary_actions(current.primary_actions, predictions)
    replace_secondary = should_update_secondary_actions(current.secondary_actions, predictions)

    logger.debug(
        f"Selective update: primary={'replace' if replace_primary else 'keep'} "
        f"secondary={'replace' if replace_secondary else 'keep'} "
        f"layout={'replace' if analysis.requires_layout_change else 'keep'}"
    )

    return replace(
        current,
        primary_actions=(
            build_primary_actions(predictions, routine) if replace_primary
            else current.primary_actions
        ),
        secondary_actions=(
            build_secondary_actions(predictions, routine) if replace_secondary
            else current.secondary_actions
        ),
        widgets=plan_widgets(routine, predictions, analysis),
        layout=(
            generate_layout(routine, predictions, analysis) if analysis.requires_layout_change
            else current.layout
        ),
        app_grid=build_app_grid(catalog, predictions, routine),
    )
