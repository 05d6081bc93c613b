"""
Launcher Data Models

This module contains the core data models for the adaptive launcher surface,
including predictions, the app catalog entries, routine context, and the
immutable UI state snapshot handed to the renderer.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence, Tuple
from enum import Enum


class RoutineContext(Enum):
    """Time-of-day / activity context the launcher adapts to"""
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    WEEKEND = "weekend"
    CUSTOM = "custom"


class FocusLevel(Enum):
    """Focus level for UI density and emphasis"""
    HIGH = "high"      # minimal UI, high confidence predictions
    MEDIUM = "medium"  # balanced UI
    LOW = "low"        # full UI with diverse options


class ActionBucket(Enum):
    """Semantic buckets used to classify predicted actions"""
    WELLNESS = "wellness"
    PRODUCTIVITY = "productivity"
    COMMUNICATION = "communication"
    ENTERTAINMENT = "entertainment"
    SOCIAL = "social"
    GENERAL = "general"


class QuickActionType(Enum):
    """Kinds of one-tap actions attached to an action card"""
    LAUNCH_APP = "launch_app"
    START_TIMER = "start_timer"
    QUICK_JOIN = "quick_join"
    RESUME_CONTENT = "resume_content"
    START_ACTIVITY = "start_activity"


class WidgetType(Enum):
    """Widget types for different contexts"""
    TIME = "time"
    WELLNESS = "wellness"
    PRODUCTIVITY = "productivity"
    SCHEDULE = "schedule"
    NOTIFICATIONS = "notifications"


@dataclass(frozen=True)
class App:
    """An installed app as supplied by the catalog provider"""
    package_id: str
    display_name: str
    category: Optional[str] = None
    usage_count: int = 0
    last_used_at: Optional[datetime] = None


@dataclass(frozen=True)
class ActionPrediction:
    """A single predicted user action produced upstream"""
    action: str
    confidence: float
    associated_apps: Tuple[App, ...] = field(default_factory=tuple)
    reasoning: str = ""
    priority: int = 0

    def __post_init__(self):
        object.__setattr__(self, "associated_apps", tuple(self.associated_apps))


@dataclass(frozen=True)
class PredictionAnalysis:
    """Summary of a prediction batch scored against a routine"""
    total_predictions: int
    high_confidence_count: int
    medium_confidence_count: int
    low_confidence_count: int
    average_confidence: float
    diversity: float
    routine_alignment: float
    focus_level: FocusLevel
    requires_layout_change: bool


@dataclass(frozen=True)
class QuickAction:
    """One-tap action shown on an action card"""
    label: str
    action: QuickActionType
    data: str


@dataclass(frozen=True)
class ActionCard:
    """Rendered form of a prediction in the primary/secondary lists"""
    action: str
    apps: Tuple[App, ...]
    confidence: float
    quick_actions: Tuple[QuickAction, ...]
    visual_priority: int
    reasoning: str


@dataclass(frozen=True)
class WidgetConfig:
    widget_type: WidgetType
    priority: int
    is_visible: bool


@dataclass(frozen=True)
class LayoutConfig:
    grid_columns: int
    show_action_cards: bool
    show_widgets: bool
    adaptive_spacing: float
    transition_duration_ms: int


@dataclass(frozen=True)
class ThemeConfig:
    name: str
    hue: float
    saturation: float
    brightness: float
    card_elevation: float
    corner_radius: float


@dataclass(frozen=True)
class AppGridConfig:
    apps: Tuple[App, ...]
    highlight_predicted: bool = True
    animate_changes: bool = True
    group_by_category: bool = False


@dataclass(frozen=True)
class UIState:
    """
    Complete visual configuration of the launcher.

    Snapshots are never mutated; every accepted update produces a new value.
    """
    primary_actions: Tuple[ActionCard, ...]
    secondary_actions: Tuple[ActionCard, ...]
    widgets: Tuple[WidgetConfig, ...]
    layout: LayoutConfig
    theme: ThemeConfig
    app_grid: AppGridConfig


@dataclass(frozen=True)
class PredictionBatch:
    """A batch of predictions delivered to the updater together with its context"""
    predictions: Tuple[ActionPrediction, ...]
    routine: RoutineContext
    catalog: Optional[Tuple[App, ...]] = None

    def __post_init__(self):
        object.__setattr__(self, "predictions", tuple(self.predictions))
        if self.catalog is not None:
            object.__setattr__(self, "catalog", tuple(self.catalog))


def predicted_package_ids(predictions: Sequence[ActionPrediction]) -> frozenset:
    """Package ids referenced by any prediction in the batch"""
    return frozenset(
        app.package_id
        for prediction in predictions
        for app in prediction.associated_apps
    )
