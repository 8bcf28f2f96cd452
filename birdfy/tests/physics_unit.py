# birdfy/tests/physics_unit.py
import math
import pytest

from birdfy.game.config import (
    BIRD_H, PLAYFIELD_BOTTOM, GAP_MARGIN_TOP, GAP_MARGIN_BOTTOM, WIDTH, SPAWN_OFFSET_X
)
from birdfy.game.bird import Bird, spawn_bird
from birdfy.game.difficulty import Difficulty, DifficultyProfile, PROFILES, get_profile
from birdfy.game.gravity import (
    DEFAULT_THEME_GRAVITY, Theme, clamp_multiplier, multiplier_for, step_multiplier
)
from birdfy.game.obstacles import Obstacle, ObstacleStream


# -------------------- Difficulty profiles --------------------

def test_profiles_cover_every_difficulty():
    assert set(PROFILES) == set(Difficulty)
    for prof in PROFILES.values():
        assert prof.gravity > 0 and prof.lift < 0 and prof.speed > 0
        assert prof.gap > BIRD_H
        lo, hi = prof.gap_top_range()
        assert lo <= hi


def test_get_profile_accepts_names_and_fails_fast():
    assert get_profile("medium") is PROFILES[Difficulty.MEDIUM]
    assert get_profile("HARD") is PROFILES[Difficulty.HARD]
    assert get_profile(Difficulty.EASY) is PROFILES[Difficulty.EASY]
    with pytest.raises(KeyError):
        get_profile("nightmare")


def test_invalid_profile_rejected():
    with pytest.raises(ValueError):
        DifficultyProfile(gravity=0.0, lift=-10, gap=200, speed=3, spawn_interval=100)
    with pytest.raises(ValueError):
        DifficultyProfile(gravity=0.5, lift=2.0, gap=200, speed=3, spawn_interval=100)
    with pytest.raises(ValueError):
        DifficultyProfile(gravity=0.5, lift=-10, gap=BIRD_H, speed=3, spawn_interval=100)


# -------------------- Gravity multiplier --------------------

def test_multiplier_clamped_to_bounds():
    assert clamp_multiplier(9.0) == 2.5
    assert clamp_multiplier(0.0) == 0.3
    assert clamp_multiplier(1.04) == 1.0


def test_step_multiplier_returns_new_table():
    table = dict(DEFAULT_THEME_GRAVITY)
    up = step_multiplier(table, Theme.NIGHT, +1)
    assert up[Theme.NIGHT] == 1.1
    assert table[Theme.NIGHT] == 1.0
    low = step_multiplier({Theme.NIGHT: 0.3}, "night", -1)
    assert low[Theme.NIGHT] == 0.3
    assert multiplier_for({}, Theme.LAVA) == 1.2


# -------------------- Bird kinematics --------------------

def test_integrate_applies_gravity_then_damping():
    b = Bird(x=85.0, y=100.0, vy=0.0)
    b.integrate(0.6)
    assert b.vy == pytest.approx(0.6 * 0.985)
    assert b.y == pytest.approx(100.0 + 0.6 * 0.985)


def test_flap_blends_current_velocity():
    b = Bird(x=85.0, y=100.0, vy=10.0)
    b.flap(-11.5)
    assert b.vy == pytest.approx(-8.0)


def test_rapid_flaps_stay_bounded():
    b = Bird(x=85.0, y=300.0)
    for _ in range(50):
        b.flap(-11.5)
    assert b.vy >= -11.5 / (1 - 0.35) - 1e-9


def test_rotation_is_clamped_and_cosmetic():
    b = Bird(x=85.0, y=300.0, vy=100.0)
    assert b.rotation == pytest.approx(math.pi / 4)
    hitbox = b.hitbox()
    b.vy = -100.0
    assert b.rotation == pytest.approx(-math.pi / 3)
    assert b.hitbox() == hitbox


def test_spawn_bird_centered():
    b = spawn_bird(PLAYFIELD_BOTTOM)
    assert b.y + BIRD_H / 2 == pytest.approx(PLAYFIELD_BOTTOM / 2)
    assert b.vy == 0.0


# -------------------- Obstacle stream --------------------

@pytest.mark.parametrize("difficulty", list(Difficulty))
def test_spawned_gaps_always_valid(difficulty):
    prof = get_profile(difficulty)
    stream = ObstacleStream(seed=2024)
    lo = GAP_MARGIN_TOP
    hi = PLAYFIELD_BOTTOM - prof.gap - GAP_MARGIN_BOTTOM
    for _ in range(2000):
        o = stream.spawn(prof)
        assert lo <= o.gap_top <= hi
        assert o.gap_size == prof.gap
        assert not o.scored


def test_spawn_advance_and_cadence():
    prof = get_profile("medium")
    stream = ObstacleStream(seed=7)
    o = stream.spawn(prof)
    assert o.x == WIDTH + SPAWN_OFFSET_X
    stream.advance(prof)
    assert o.x == pytest.approx(WIDTH + SPAWN_OFFSET_X - prof.speed)

    assert stream.spawn_if_due(0, prof) is not None
    assert stream.spawn_if_due(1, prof) is None
    assert stream.spawn_if_due(prof.spawn_interval, prof) is not None
    assert len(stream.obstacles) == 3


def test_cull_keeps_order_and_margin():
    stream = ObstacleStream(seed=1)
    stream.obstacles = [
        Obstacle(x=-113.0, gap_top=100, gap_size=200),
        Obstacle(x=-112.0, gap_top=100, gap_size=200),   # right edge exactly at -40
        Obstacle(x=-111.0, gap_top=100, gap_size=200),
        Obstacle(x=300.0, gap_top=100, gap_size=200),
    ]
    assert stream.cull_offscreen() == 2
    assert [o.x for o in stream.obstacles] == [-111.0, 300.0]


def test_same_seed_same_gaps():
    prof = get_profile("hard")
    a, b = ObstacleStream(seed=99), ObstacleStream(seed=99)
    assert [a.spawn(prof).gap_top for _ in range(20)] == [b.spawn(prof).gap_top for _ in range(20)]
