# birdfy/env/observations.py
from __future__ import annotations
from typing import List, Optional, Sequence
import numpy as np

from birdfy.game.config import WIDTH, PLAYFIELD_BOTTOM, BIRD_H
from birdfy.game.engine import ObstacleView, Snapshot

OBS_SIZE = 8
# velocity that maps to +/-1 (terminal fall speed on HARD is ~60 px/tick)
VY_NORM_PX: float = 20.0


def _clamp01(x: float) -> float:
    return 0.0 if x < 0.0 else (1.0 if x > 1.0 else x)


def _norm_y(y: float) -> float:
    return _clamp01(y / float(PLAYFIELD_BOTTOM))


def _norm_vy(vy: float) -> float:
    return max(-1.0, min(1.0, vy / VY_NORM_PX))


def upcoming(snapshot: Snapshot, count: int = 2) -> List[ObstacleView]:
    """The next `count` obstacles the bird has not cleared yet, nearest first."""
    ahead = [o for o in snapshot.obstacles if o.x + o.width >= snapshot.bird_x]
    return ahead[:count]


def _obstacle_feats(snapshot: Snapshot, o: Optional[ObstacleView]) -> List[float]:
    if o is None:
        # sentinel: far away, fully open
        return [1.0, 0.0, 1.0]
    dx = (o.x + o.width - snapshot.bird_x) / float(WIDTH)
    return [_clamp01(dx), _norm_y(o.gap_top), _norm_y(o.gap_top + o.gap_size)]


def build_observation(snapshot: Snapshot) -> np.ndarray:
    """
    Returns a fixed (8,) float32 vector:
      [ y_norm, vy_norm,
        dx@1, gap_top@1, gap_bottom@1,
        dx@2, gap_top@2, gap_bottom@2 ]
    - y_norm: bird centre over the playfield height, in [0,1]
    - vy_norm: velocity / VY_NORM_PX, clipped to [-1,1]
    - dx: distance from the bird to the obstacle's trailing edge over WIDTH
    - gap_top / gap_bottom: screen-space, normalized by the playfield height
    Missing obstacles use the sentinel (dx=1, top=0, bottom=1).
    """
    ahead: Sequence[Optional[ObstacleView]] = upcoming(snapshot, 2)
    ahead = list(ahead) + [None] * (2 - len(ahead))

    feats: List[float] = [
        _norm_y(snapshot.bird_y + BIRD_H / 2),
        _norm_vy(snapshot.bird_velocity),
    ]
    for o in ahead:
        feats.extend(_obstacle_feats(snapshot, o))
    return np.asarray(feats, dtype=np.float32)
