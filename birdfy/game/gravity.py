# birdfy/game/gravity.py
from __future__ import annotations
from enum import Enum
from typing import Dict, Mapping, Union
from .config import GRAV_MIN, GRAV_MAX, GRAV_STEP


class Theme(Enum):
    NIGHT = "night"
    DAY = "day"
    LAVA = "lava"


# 1.0 = profile gravity unchanged
DEFAULT_THEME_GRAVITY: Dict[Theme, float] = {
    Theme.NIGHT: 1.0,
    Theme.DAY: 0.85,
    Theme.LAVA: 1.2,
}


def as_theme(key: Union[Theme, str]) -> Theme:
    if isinstance(key, Theme):
        return key
    return Theme[str(key).upper()]


def clamp_multiplier(value: float) -> float:
    """Clamp to [GRAV_MIN, GRAV_MAX] and round to one decimal."""
    v = min(GRAV_MAX, max(GRAV_MIN, float(value)))
    return round(v, 1)


def step_multiplier(table: Mapping[Theme, float], theme: Union[Theme, str], direction: int) -> Dict[Theme, float]:
    """Return a copy of `table` with `theme` moved one GRAV_STEP up (+1) or down (-1)."""
    theme = as_theme(theme)
    current = table.get(theme, DEFAULT_THEME_GRAVITY[theme])
    updated = dict(table)
    updated[theme] = clamp_multiplier(current + (GRAV_STEP if direction > 0 else -GRAV_STEP))
    return updated


def multiplier_for(table: Mapping[Theme, float], theme: Union[Theme, str]) -> float:
    theme = as_theme(theme)
    return clamp_multiplier(table.get(theme, DEFAULT_THEME_GRAVITY[theme]))
