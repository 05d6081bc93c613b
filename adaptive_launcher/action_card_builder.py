"""
Action Card Builder

Splits a prediction batch into primary and secondary action cards, computing
visual priority and per-routine quick actions for each card.
"""

import math
from typing import List, NamedTuple, Sequence, Tuple

from .launcher_models import ActionCard, ActionPrediction, QuickAction, QuickActionType, RoutineContext
from .routine_profiles import (
    CUSTOM_QUICK_START, CUSTOM_QUICK_START_CONFIDENCE, EMPHASIS_BUCKETS, ROUTINE_BOOST,
    classify_action, match_quick_action
)

PRIMARY_MIN_CONFIDENCE = 0.7
SECONDARY_MIN_CONFIDENCE = 0.4
MAX_PRIMARY_ACTIONS = 3
MAX_SECONDARY_ACTIONS = 4
MAX_QUICK_ACTIONS = 2


class ActionCardSet(NamedTuple):
    primary: Tuple[ActionCard, ...]
    secondary: Tuple[ActionCard, ...]


def _by_confidence(predictions: Sequence[ActionPrediction]) -> List[ActionPrediction]:
    # sorted() is stable, so equal confidences keep batch order
    return sorted(predictions, key=lambda p: p.confidence, reverse=True)


def select_primary_predictions(predictions: Sequence[ActionPrediction]) -> List[ActionPrediction]:
    """Top predictions with confidence >= 0.7, highest first"""
    eligible = [p for p in predictions if p.confidence >= PRIMARY_MIN_CONFIDENCE]
    return _by_confidence(eligible)[:MAX_PRIMARY_ACTIONS]


def select_secondary_predictions(predictions: Sequence[ActionPrediction]) -> List[ActionPrediction]:
    """Top predictions with 0.4 <= confidence < 0.7, highest first"""
    eligible = [
        p for p in predictions
        if SECONDARY_MIN_CONFIDENCE <= p.confidence < PRIMARY_MIN_CONFIDENCE
    ]
    return _by_confidence(eligible)[:MAX_SECONDARY_ACTIONS]


def calculate_visual_priority(prediction: ActionPrediction, routine: RoutineContext) -> int:
    """Card emphasis on a 1-10 scale; routine-emphasized buckets get a boost"""
    priority = math.floor(prediction.confidence * 10 + 0.5)
    if classify_action(prediction.action) in EMPHASIS_BUCKETS[routine]:
        priority += ROUTINE_BOOST
    return max(1, min(10, priority))


def generate_quick_actions(
    prediction: ActionPrediction,
    routine: RoutineContext
) -> Tuple[QuickAction, ...]:
    """
    Build up to two quick actions for a card.

    The first slot launches the prediction's leading app when it has one;
    the routine keyword table fills the rest.
    """
    actions: List[QuickAction] = []

    if prediction.associated_apps:
        app = prediction.associated_apps[0]
        actions.append(QuickAction(
            label=f"Open {app.display_name}",
            action=QuickActionType.LAUNCH_APP,
            data=app.package_id,
        ))

    if routine == RoutineContext.CUSTOM:
        if prediction.confidence > CUSTOM_QUICK_START_CONFIDENCE:
            actions.append(CUSTOM_QUICK_START)
    else:
        template = match_quick_action(prediction.action, routine)
        if template is not None:
            actions.append(template)

    return tuple(actions[:MAX_QUICK_ACTIONS])


def build_action_card(prediction: ActionPrediction, routine: RoutineContext) -> ActionCard:
    return ActionCard(
        action=prediction.action,
        apps=prediction.associated_apps,
        confidence=prediction.confidence,
        quick_actions=generate_quick_actions(prediction, routine),
        visual_priority=calculate_visual_priority(prediction, routine),
        reasoning=prediction.reasoning,
    )


def build_primary_actions(
    predictions: Sequence[ActionPrediction],
    routine: RoutineContext
) -> Tuple[ActionCard, ...]:
    return tuple(build_action_card(p, routine) for p in select_primary_predictions(predictions))


def build_secondary_actions(
    predictions: Sequence[ActionPrediction],
    routine: RoutineContext
) -> Tuple[ActionCard, ...]:
    return tuple(build_action_card(p, routine) for p in select_secondary_predictions(predictions))


def build_action_cards(
    predictions: Sequence[ActionPrediction],
    routine: RoutineContext
) -> ActionCardSet:
    """Split a batch into primary and secondary card lists"""
    return ActionCardSet(
        primary=build_primary_actions(predictions, routine),
        secondary=build_secondary_actions(predictions, routine),
    )
