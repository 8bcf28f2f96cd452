# birdfy/game/bird.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple
from .config import (
    BIRD_X, BIRD_W, BIRD_H, BIRD_INSET_X, BIRD_INSET_Y,
    VELOCITY_DAMPING, FLAP_CARRY, ROTATION_K, ROTATION_MIN, ROTATION_MAX
)


@dataclass
class Bird:
    """
    Bird at a fixed x; only the vertical axis is simulated.
    - y is the TOP of the sprite, growing downward
    - vy is in px/tick, negative = climbing
    """
    x: float
    y: float
    vy: float = 0.0

    @property
    def center(self) -> Tuple[float, float]:
        return self.x + BIRD_W / 2, self.y + BIRD_H / 2

    @property
    def rotation(self) -> float:
        """Display tilt in radians. Never read by physics or collision."""
        return min(ROTATION_MAX, max(ROTATION_MIN, self.vy * ROTATION_K))

    def hitbox(self) -> Tuple[float, float, float, float]:
        """Inset (left, top, right, bottom) used by the rect collision model."""
        return (
            self.x + BIRD_INSET_X,
            self.y + BIRD_INSET_Y,
            self.x + BIRD_W - BIRD_INSET_X,
            self.y + BIRD_H - BIRD_INSET_Y,
        )

    def integrate(self, gravity: float):
        """One tick under `gravity` (already scaled by the run's multiplier)."""
        self.vy = (self.vy + gravity) * VELOCITY_DAMPING
        self.y += self.vy

    def flap(self, lift: float):
        # blended impulse: rapid taps can't stack into an unbounded climb
        self.vy = self.vy * FLAP_CARRY + lift


def spawn_bird(playfield_bottom: float) -> Bird:
    """Bird centered vertically in the playfield, at rest."""
    return Bird(x=float(BIRD_X), y=playfield_bottom / 2 - BIRD_H / 2, vy=0.0)
