"""
Theme Composer

Derives the theme descriptor from the routine's base theme and the current
focus level.
"""

from .launcher_models import FocusLevel, PredictionAnalysis, RoutineContext, ThemeConfig
from .routine_profiles import BASE_THEMES


def _unit(value: float) -> float:
    return min(1.0, max(0.0, value))


def compose_theme(routine: RoutineContext, analysis: PredictionAnalysis) -> ThemeConfig:
    """
    Adapt the routine theme to the focus level.

    HIGH focus is calmer (less saturation, more elevation, softer corners);
    LOW focus is livelier and denser; MEDIUM keeps the base theme.
    """
    base = BASE_THEMES[routine]
    focus = analysis.focus_level

    if focus == FocusLevel.HIGH:
        saturation = base.saturation * 0.8
        elevation = base.card_elevation + 2.0
        radius = base.corner_radius + 4.0
    elif focus == FocusLevel.LOW:
        saturation = base.saturation * 1.2
        elevation = base.card_elevation - 1.0
        radius = base.corner_radius - 2.0
    else:
        return base

    return ThemeConfig(
        name=base.name,
        hue=base.hue % 360.0,
        saturation=_unit(saturation),
        brightness=_unit(base.brightness),
        card_elevation=elevation,
        corner_radius=radius,
    )
