"""
Adaptive Launcher

Contextual UI-state derivation and incremental update engine for a
routine-aware home-screen launcher.
"""

from .launcher_models import (
    ActionBucket, ActionCard, ActionPrediction, App, AppGridConfig, FocusLevel,
    LayoutConfig, PredictionAnalysis, PredictionBatch, QuickAction, QuickActionType,
    RoutineContext, ThemeConfig, UIState, WidgetConfig, WidgetType
)
from .prediction_analyzer import analyze_predictions
from .ui_state_generator import generate_ui_state, generate_ui_update
from .incremental_updater import IncrementalUpdater, StateCell, UpdateDecision, UpdaterStats

__all__ = [
    "ActionBucket", "ActionCard", "ActionPrediction", "App", "AppGridConfig", "FocusLevel",
    "LayoutConfig", "PredictionAnalysis", "PredictionBatch", "QuickAction", "QuickActionType",
    "RoutineContext", "ThemeConfig", "UIState", "WidgetConfig", "WidgetType",
    "analyze_predictions", "generate_ui_state", "generate_ui_update",
    "IncrementalUpdater", "StateCell", "UpdateDecision", "UpdaterStats",
]
