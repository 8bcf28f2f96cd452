# birdfy/tests/oracle_unit.py
"""Collision and scoring geometry, checked on hand-placed birds and columns."""
from birdfy.game.config import BIRD_X, PLAYFIELD_BOTTOM, BIRD_H
from birdfy.game.bird import Bird
from birdfy.game.obstacles import Obstacle
from birdfy.game.oracle import (
    Hitbox, check_collision, check_score, circle_rect_collide, collision_cause
)


def bird_at(y: float, vy: float = 0.0) -> Bird:
    return Bird(x=float(BIRD_X), y=y, vy=vy)


def overlapping_column(gap_top: float = 180.0, gap_size: float = 200.0) -> Obstacle:
    # column spans x in [70, 142]: squarely over the bird's hitbox [92, 122]
    return Obstacle(x=70.0, gap_top=gap_top, gap_size=gap_size)


# -------------------- Collision --------------------

def test_bird_inside_gap_is_safe():
    o = overlapping_column()
    assert not check_collision(bird_at(250.0), [o])     # hitbox 255..277


def test_bird_above_gap_top_hits():
    o = overlapping_column()
    assert check_collision(bird_at(170.0), [o])         # hitbox top 175 < 180
    assert collision_cause(bird_at(170.0), [o]) == "pipe"


def test_bird_below_gap_bottom_hits():
    o = overlapping_column()
    assert not check_collision(bird_at(350.0), [o])     # bottom 377 <= 380
    assert check_collision(bird_at(360.0), [o])         # bottom 387 > 380


def test_no_horizontal_overlap_no_hit():
    # inset column [21, 83] ends before the bird hitbox starts at 92
    o = Obstacle(x=16.0, gap_top=600.0, gap_size=100.0)
    assert not check_collision(bird_at(250.0), [o])


def test_ceiling_and_floor():
    assert collision_cause(bird_at(-6.0), []) == "ceiling"   # top -1
    assert not check_collision(bird_at(-5.0), [])            # top exactly 0
    floor_y = PLAYFIELD_BOTTOM - BIRD_H + 5                  # bottom exactly on the floor
    assert collision_cause(bird_at(floor_y), []) == "floor"
    assert not check_collision(bird_at(floor_y - 0.5), [])


def test_circle_model():
    assert circle_rect_collide(0, 0, 5, 3, 3, 10, 10)
    assert not circle_rect_collide(0, 0, 4, 3, 3, 10, 10)
    o = overlapping_column()
    # centre y = y + 16, radius 16
    assert not check_collision(bird_at(250.0), [o], hitbox=Hitbox.CIRCLE)
    assert check_collision(bird_at(170.0), [o], hitbox=Hitbox.CIRCLE)
    assert collision_cause(bird_at(-1.0), [], hitbox=Hitbox.CIRCLE) == "ceiling"


# -------------------- Scoring --------------------

def test_score_once_when_trailing_edge_passes():
    o = Obstacle(x=14.0, gap_top=180.0, gap_size=200.0)   # right edge 86, bird x 85
    b = bird_at(250.0)
    assert check_score(b, [o]) == 0
    o.x = 12.9                                           # right edge 84.9
    assert check_score(b, [o]) == 1
    assert o.scored
    for _ in range(5):
        o.x -= 3.2
        assert check_score(b, [o]) == 0
    assert o.scored


def test_score_counts_each_passed_obstacle():
    b = bird_at(250.0)
    obstacles = [
        Obstacle(x=-60.0, gap_top=180.0, gap_size=200.0),
        Obstacle(x=-10.0, gap_top=180.0, gap_size=200.0),
        Obstacle(x=200.0, gap_top=180.0, gap_size=200.0),
    ]
    assert check_score(b, obstacles) == 2
    assert [o.scored for o in obstacles] == [True, True, False]
    assert check_score(b, obstacles) == 0
