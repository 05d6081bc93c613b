"""
App Grid Ranker

Orders the device app catalog for the home-screen grid. Ranking keys, in
order: predicted membership, routine category weight, usage count, recency,
then display name ascending.
"""

from datetime import datetime
from typing import AbstractSet, Optional, Sequence, Tuple

from .launcher_models import ActionPrediction, App, AppGridConfig, RoutineContext, predicted_package_ids
from .routine_profiles import CATEGORY_PRIORITIES


def category_priority(category: Optional[str], routine: RoutineContext) -> float:
    """Routine weight for an app category, 0 when unlisted"""
    if category is None:
        return 0.0
    return CATEGORY_PRIORITIES[routine].get(category, 0.0)


def _recency(last_used_at: Optional[datetime]) -> float:
    # Missing timestamps rank as the oldest
    if last_used_at is None:
        return float("-inf")
    return last_used_at.timestamp()


def rank_apps(
    catalog: Sequence[App],
    predicted_ids: AbstractSet[str],
    routine: RoutineContext
) -> Tuple[App, ...]:
    """
    Rank the catalog for display.

    Args:
        catalog: Apps supplied by the catalog provider (not modified)
        predicted_ids: Package ids referenced by the current predictions
        routine: Active routine context

    Returns:
        A permutation of the catalog in display order
    """
    def sort_key(app: App):
        return (
            -(1.0 if app.package_id in predicted_ids else 0.0),
            -category_priority(app.category, routine),
            -max(0, app.usage_count),
            -_recency(app.last_used_at),
            app.display_name,
        )

    return tuple(sorted(catalog, key=sort_key))


def build_app_grid(
    catalog: Sequence[App],
    predictions: Sequence[ActionPrediction],
    routine: RoutineContext
) -> AppGridConfig:
    return AppGridConfig(
        apps=rank_apps(catalog, predicted_package_ids(predictions), routine),
        highlight_predicted=True,
        animate_changes=True,
        group_by_category=routine == RoutineContext.AFTERNOON,
    )
