"""
Routine Profiles

Configuration tables that drive the launcher generators. Every routine-specific
constant lives here as data so new keywords, buckets or routines can be added
without touching generator control flow.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Tuple

from .launcher_models import (
    ActionBucket, QuickAction, QuickActionType, RoutineContext, ThemeConfig, WidgetType
)


# Ordered: the first bucket whose keyword occurs in the action text wins.
BUCKET_KEYWORDS: List[Tuple[ActionBucket, Tuple[str, ...]]] = [
    (ActionBucket.WELLNESS, ("meditation", "wellness", "mindful", "workout", "fitness", "yoga")),
    (ActionBucket.PRODUCTIVITY, ("work", "productivity", "project", "documentation")),
    (ActionBucket.COMMUNICATION, ("meeting", "communication", "email", "call")),
    (ActionBucket.ENTERTAINMENT, ("entertainment", "watch", "music", "movie")),
    (ActionBucket.SOCIAL, ("social", "connect", "friend")),
]

TOTAL_BUCKET_COUNT = len(ActionBucket)

EXPECTED_BUCKETS: Dict[RoutineContext, FrozenSet[ActionBucket]] = {
    RoutineContext.MORNING: frozenset({
        ActionBucket.WELLNESS, ActionBucket.PRODUCTIVITY, ActionBucket.COMMUNICATION
    }),
    RoutineContext.AFTERNOON: frozenset({
        ActionBucket.PRODUCTIVITY, ActionBucket.COMMUNICATION
    }),
    RoutineContext.EVENING: frozenset({
        ActionBucket.ENTERTAINMENT, ActionBucket.SOCIAL
    }),
    RoutineContext.WEEKEND: frozenset({
        ActionBucket.ENTERTAINMENT, ActionBucket.SOCIAL, ActionBucket.WELLNESS
    }),
    RoutineContext.CUSTOM: frozenset({ActionBucket.GENERAL}),
}

# Buckets that earn a visual-priority boost on action cards
EMPHASIS_BUCKETS: Dict[RoutineContext, FrozenSet[ActionBucket]] = {
    RoutineContext.MORNING: frozenset({ActionBucket.WELLNESS, ActionBucket.PRODUCTIVITY}),
    RoutineContext.AFTERNOON: frozenset({ActionBucket.PRODUCTIVITY, ActionBucket.COMMUNICATION}),
    RoutineContext.EVENING: frozenset({ActionBucket.ENTERTAINMENT}),
    RoutineContext.WEEKEND: frozenset({ActionBucket.SOCIAL}),
    RoutineContext.CUSTOM: frozenset(),
}

ROUTINE_BOOST = 2


@dataclass(frozen=True)
class WidgetSlot:
    """Base widget entry; visible when the batch holds at least ``min_predictions``"""
    widget_type: WidgetType
    priority: int
    min_predictions: int = 0


BASE_WIDGETS: Dict[RoutineContext, Tuple[WidgetSlot, ...]] = {
    RoutineContext.MORNING: (
        WidgetSlot(WidgetType.TIME, 1),
        WidgetSlot(WidgetType.WELLNESS, 2),
        WidgetSlot(WidgetType.SCHEDULE, 3, min_predictions=1),
    ),
    RoutineContext.AFTERNOON: (
        WidgetSlot(WidgetType.PRODUCTIVITY, 1),
        WidgetSlot(WidgetType.TIME, 2),
        WidgetSlot(WidgetType.NOTIFICATIONS, 3, min_predictions=3),
    ),
    RoutineContext.EVENING: (
        WidgetSlot(WidgetType.TIME, 1),
        WidgetSlot(WidgetType.WELLNESS, 2),
        WidgetSlot(WidgetType.SCHEDULE, 3),
    ),
    RoutineContext.WEEKEND: (
        WidgetSlot(WidgetType.TIME, 1),
        WidgetSlot(WidgetType.WELLNESS, 2),
        WidgetSlot(WidgetType.PRODUCTIVITY, 3, min_predictions=1),
    ),
    RoutineContext.CUSTOM: (
        WidgetSlot(WidgetType.TIME, 1),
        WidgetSlot(WidgetType.NOTIFICATIONS, 2, min_predictions=1),
    ),
}

BASE_THEMES: Dict[RoutineContext, ThemeConfig] = {
    RoutineContext.MORNING: ThemeConfig(
        name="Morning Fresh", hue=200.0, saturation=0.6, brightness=0.9,
        card_elevation=4.0, corner_radius=16.0,
    ),
    RoutineContext.AFTERNOON: ThemeConfig(
        name="Productive Focus", hue=260.0, saturation=0.7, brightness=0.8,
        card_elevation=6.0, corner_radius=12.0,
    ),
    RoutineContext.EVENING: ThemeConfig(
        name="Evening Calm", hue=30.0, saturation=0.5, brightness=0.7,
        card_elevation=8.0, corner_radius=20.0,
    ),
    RoutineContext.WEEKEND: ThemeConfig(
        name="Weekend Leisure", hue=120.0, saturation=0.6, brightness=0.8,
        card_elevation=5.0, corner_radius=18.0,
    ),
    RoutineContext.CUSTOM: ThemeConfig(
        name="Custom", hue=0.0, saturation=0.5, brightness=0.8,
        card_elevation=4.0, corner_radius=16.0,
    ),
}

BASE_COLUMNS: Dict[RoutineContext, int] = {
    RoutineContext.MORNING: 3,
    RoutineContext.AFTERNOON: 4,
    RoutineContext.EVENING: 3,
    RoutineContext.WEEKEND: 4,
    RoutineContext.CUSTOM: 3,
}

MIN_GRID_COLUMNS = 2
MAX_GRID_COLUMNS = 5

BASE_SPACING: Dict[RoutineContext, float] = {
    RoutineContext.MORNING: 16.0,
    RoutineContext.AFTERNOON: 12.0,
    RoutineContext.EVENING: 18.0,
    RoutineContext.WEEKEND: 14.0,
    RoutineContext.CUSTOM: 16.0,
}

# App-grid weights per app category; unlisted categories weigh 0
CATEGORY_PRIORITIES: Dict[RoutineContext, Dict[str, float]] = {
    RoutineContext.MORNING: {
        "Health": 1.0, "Productivity": 0.9, "Email": 0.8, "News": 0.7, "Weather": 0.6,
    },
    RoutineContext.AFTERNOON: {
        "Work": 1.0, "Productivity": 0.9, "Professional": 0.8, "Communication": 0.7, "Browser": 0.6,
    },
    RoutineContext.EVENING: {
        "Entertainment": 1.0, "Social": 0.9, "Reading": 0.8, "Music": 0.7,
    },
    RoutineContext.WEEKEND: {
        "Entertainment": 1.0, "Social": 0.9, "Fitness": 0.8, "Reading": 0.7,
        "Games": 0.6, "Photography": 0.5,
    },
    RoutineContext.CUSTOM: {},
}

# Ordered keyword -> template table per routine; first match wins
QUICK_ACTION_TEMPLATES: Dict[RoutineContext, List[Tuple[Tuple[str, ...], QuickAction]]] = {
    RoutineContext.MORNING: [
        (("meditation",), QuickAction("Start 10min session", QuickActionType.START_TIMER, "600")),
        (("email",), QuickAction("Quick scan", QuickActionType.QUICK_JOIN, "email_scan")),
        (("plan",), QuickAction("Today's agenda", QuickActionType.START_ACTIVITY, "daily_planning")),
    ],
    RoutineContext.AFTERNOON: [
        (("meeting",), QuickAction("Join meeting", QuickActionType.QUICK_JOIN, "meeting")),
        (("work", "project"), QuickAction("Focus mode", QuickActionType.START_ACTIVITY, "focus_mode")),
        (("documentation",), QuickAction("New document", QuickActionType.START_ACTIVITY, "new_document")),
    ],
    RoutineContext.EVENING: [
        (("entertainment",), QuickAction("Continue watching", QuickActionType.RESUME_CONTENT, "last_watched")),
        (("music",), QuickAction("Evening playlist", QuickActionType.RESUME_CONTENT, "evening_playlist")),
        (("social",), QuickAction("Check messages", QuickActionType.QUICK_JOIN, "social_check")),
    ],
    RoutineContext.WEEKEND: [
        (("fitness",), QuickAction("Start workout", QuickActionType.START_ACTIVITY, "workout")),
        (("hobby",), QuickAction("Creative time", QuickActionType.START_ACTIVITY, "creative_session")),
        (("leisure",), QuickAction("Explore interests", QuickActionType.START_ACTIVITY, "leisure_exploration")),
    ],
    RoutineContext.CUSTOM: [],
}

CUSTOM_QUICK_START = QuickAction("Quick start", QuickActionType.START_ACTIVITY, "quick_start")
CUSTOM_QUICK_START_CONFIDENCE = 0.8


def classify_action(action: str) -> ActionBucket:
    """Map an action description onto its semantic bucket"""
    text = (action or "").lower()
    for bucket, keywords in BUCKET_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return bucket
    return ActionBucket.GENERAL


def match_quick_action(action: str, routine: RoutineContext) -> Optional[QuickAction]:
    """Return the first routine template whose keyword occurs in the action text"""
    text = (action or "").lower()
    for keywords, template in QUICK_ACTION_TEMPLATES.get(routine, []):
        if any(keyword in text for keyword in keywords):
            return template
    return None


def theme_name_for(routine: RoutineContext) -> str:
    return BASE_THEMES[routine].name
