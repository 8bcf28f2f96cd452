# birdfy/game/difficulty.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple, Union
from .config import (
    BIRD_H, PLAYFIELD_BOTTOM, GAP_MARGIN_TOP, GAP_MARGIN_BOTTOM
)


class Difficulty(Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True)
class DifficultyProfile:
    """
    Tunable constants for one difficulty, all expressed per tick:
    - gravity: downward acceleration added to velocity
    - lift: upward impulse used by a flap (negative = up)
    - gap: vertical clear space between the two columns
    - speed: horizontal scroll of obstacles
    - spawn_interval: ticks between two spawns
    """
    gravity: float
    lift: float
    gap: float
    speed: float
    spawn_interval: int

    def __post_init__(self):
        if self.gravity <= 0:
            raise ValueError(f"gravity must be > 0, got {self.gravity}")
        if self.lift >= 0:
            raise ValueError(f"lift must be < 0, got {self.lift}")
        if self.gap <= BIRD_H:
            raise ValueError(f"gap must exceed bird height {BIRD_H}, got {self.gap}")
        if self.speed <= 0:
            raise ValueError(f"speed must be > 0, got {self.speed}")
        if self.spawn_interval < 1:
            raise ValueError(f"spawn_interval must be >= 1, got {self.spawn_interval}")

    def gap_top_range(self) -> Tuple[float, float]:
        """(lo, hi) bounds for a freshly spawned obstacle's gap top."""
        return float(GAP_MARGIN_TOP), float(PLAYFIELD_BOTTOM - self.gap - GAP_MARGIN_BOTTOM)


PROFILES: Dict[Difficulty, DifficultyProfile] = {
    Difficulty.EASY:   DifficultyProfile(gravity=0.45, lift=-10.5, gap=230, speed=2.8, spawn_interval=125),
    Difficulty.MEDIUM: DifficultyProfile(gravity=0.60, lift=-11.5, gap=200, speed=3.2, spawn_interval=110),
    Difficulty.HARD:   DifficultyProfile(gravity=0.95, lift=-14.5, gap=155, speed=4.8, spawn_interval=80),
}


def _validate_profiles():
    for key, prof in PROFILES.items():
        lo, hi = prof.gap_top_range()
        if hi < lo:
            raise ValueError(f"{key.name}: empty gap range [{lo}, {hi}]")


_validate_profiles()


def as_difficulty(key: Union[Difficulty, str]) -> Difficulty:
    """Normalize an enum or a case-insensitive name. Unknown names raise KeyError."""
    if isinstance(key, Difficulty):
        return key
    return Difficulty[str(key).upper()]


def get_profile(key: Union[Difficulty, str]) -> DifficultyProfile:
    return PROFILES[as_difficulty(key)]
