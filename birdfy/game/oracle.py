# birdfy/game/oracle.py
from __future__ import annotations
from enum import Enum
from typing import Iterable, Optional
from .config import (
    BIRD_RADIUS, PIPE_INSET_X, PLAYFIELD_BOTTOM
)
from .bird import Bird
from .obstacles import Obstacle


class Hitbox(Enum):
    RECT = "rect"       # inset rectangle
    CIRCLE = "circle"   # circle at the sprite centre


def check_score(bird: Bird, obstacles: Iterable[Obstacle]) -> int:
    """
    Mark every obstacle the bird has fully passed and return the points earned.
    An obstacle counts once: its `scored` flag only ever goes False -> True.
    """
    points = 0
    for obstacle in obstacles:
        if not obstacle.scored and obstacle.right < bird.x:
            obstacle.scored = True
            points += 1
    return points


def circle_rect_collide(cx: float, cy: float, radius: float,
                        left: float, top: float, right: float, bottom: float) -> bool:
    """Closest point of the rect to the circle centre, compared to the radius."""
    if right <= left or bottom <= top:
        return False
    nx = min(max(cx, left), right)
    ny = min(max(cy, top), bottom)
    dx, dy = cx - nx, cy - ny
    return dx * dx + dy * dy <= radius * radius


def _rect_model_cause(bird: Bird, obstacles: Iterable[Obstacle], floor_y: float) -> Optional[str]:
    left, top, right, bottom = bird.hitbox()

    if top < 0:
        return "ceiling"
    if bottom >= floor_y:
        return "floor"

    for o in obstacles:
        # horizontal overlap with the (inset) column
        if right > o.x + PIPE_INSET_X and left < o.right - PIPE_INSET_X:
            if top < o.gap_top or bottom > o.gap_bottom:
                return "pipe"
    return None


def _circle_model_cause(bird: Bird, obstacles: Iterable[Obstacle], floor_y: float) -> Optional[str]:
    cx, cy = bird.center
    r = BIRD_RADIUS

    if cy - r < 0:
        return "ceiling"
    if cy + r >= floor_y:
        return "floor"

    for o in obstacles:
        if circle_rect_collide(cx, cy, r, o.x, 0.0, o.right, o.gap_top):
            return "pipe"
        if circle_rect_collide(cx, cy, r, o.x, o.gap_bottom, o.right, floor_y):
            return "pipe"
    return None


def collision_cause(bird: Bird, obstacles: Iterable[Obstacle],
                    hitbox: Hitbox = Hitbox.RECT,
                    floor_y: float = PLAYFIELD_BOTTOM) -> Optional[str]:
    """Name what the bird touches first ("ceiling", "floor" or "pipe"), or None."""
    if hitbox is Hitbox.CIRCLE:
        return _circle_model_cause(bird, obstacles, floor_y)
    return _rect_model_cause(bird, obstacles, floor_y)


def check_collision(bird: Bird, obstacles: Iterable[Obstacle],
                    hitbox: Hitbox = Hitbox.RECT,
                    floor_y: float = PLAYFIELD_BOTTOM) -> bool:
    return collision_cause(bird, obstacles, hitbox, floor_y) is not None
