# birdfy/game/obstacles.py
from __future__ import annotations
import random
from dataclasses import dataclass
from typing import List, Optional
from .config import (
    WIDTH, PIPE_W, SPAWN_OFFSET_X, CULL_MARGIN_X
)
from .difficulty import DifficultyProfile


@dataclass
class Obstacle:
    """A pair of columns with a vertical gap between them."""
    x: float
    gap_top: float
    gap_size: float
    width: float = PIPE_W
    scored: bool = False

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def gap_bottom(self) -> float:
        return self.gap_top + self.gap_size


class ObstacleStream:
    """
    Insertion-ordered queue of obstacles scrolling left.
    Every operation walks the queue oldest-first, so a given seed always
    produces the same run.
    """
    def __init__(self, seed: Optional[int] = None):
        if seed is None:
            seed = random.randrange(0, 2**32 - 1)
        self.seed = seed
        self.rng = random.Random(seed)
        self.obstacles: List[Obstacle] = []

    def spawn(self, profile: DifficultyProfile) -> Obstacle:
        lo, hi = profile.gap_top_range()
        gap_top = self.rng.uniform(lo, hi)
        obstacle = Obstacle(x=float(WIDTH + SPAWN_OFFSET_X), gap_top=gap_top, gap_size=float(profile.gap))
        self.obstacles.append(obstacle)
        return obstacle

    def advance(self, profile: DifficultyProfile):
        for obstacle in self.obstacles:
            obstacle.x -= profile.speed

    def spawn_if_due(self, tick: int, profile: DifficultyProfile) -> Optional[Obstacle]:
        if tick % profile.spawn_interval == 0:
            return self.spawn(profile)
        return None

    def cull_offscreen(self) -> int:
        """Drop obstacles whose right edge is past the cull margin. Returns how many went."""
        before = len(self.obstacles)
        self.obstacles = [o for o in self.obstacles if o.right > -CULL_MARGIN_X]
        return before - len(self.obstacles)

    def update(self, tick: int, profile: DifficultyProfile):
        """Advance, spawn if due, cull: the per-tick order."""
        self.advance(profile)
        self.spawn_if_due(tick, profile)
        self.cull_offscreen()
