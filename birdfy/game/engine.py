# birdfy/game/engine.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple, Union

from .config import PLAYFIELD_BOTTOM
from .bird import Bird, spawn_bird
from .difficulty import Difficulty, DifficultyProfile, as_difficulty, get_profile
from .gravity import clamp_multiplier
from .obstacles import ObstacleStream
from .oracle import Hitbox, check_score, collision_cause

logger = logging.getLogger(__name__)


class RunState(Enum):
    MENU = "menu"
    ACTIVE = "active"
    CRASHED = "crashed"


class EventKind(Enum):
    STARTED = "started"
    FLAPPED = "flapped"
    SCORED = "scored"     # value = points (always 1 per event)
    CRASHED = "crashed"   # value = final score


@dataclass(frozen=True)
class EngineEvent:
    kind: EventKind
    value: Optional[int] = None


@dataclass(frozen=True)
class ObstacleView:
    x: float
    gap_top: float
    gap_size: float
    width: float
    scored: bool


@dataclass(frozen=True)
class Snapshot:
    """Read-only state handed to renderers and observers after each tick."""
    run_state: RunState
    tick: int
    bird_x: float
    bird_y: float
    bird_velocity: float
    bird_rotation: float
    obstacles: Tuple[ObstacleView, ...]
    score: int
    difficulty: Difficulty
    gravity_multiplier: float
    crash_cause: Optional[str] = None
    events: Tuple[EngineEvent, ...] = ()


EventHandler = Callable[[EngineEvent], None]


class Engine:
    """
    Per-tick flight simulation: Menu -> Active -> Crashed.

    The gravity multiplier is captured by reset() and stays fixed for the
    whole run; changing the setting only affects the next reset().
    """
    def __init__(self,
                 difficulty: Union[Difficulty, str] = Difficulty.MEDIUM,
                 gravity_multiplier: float = 1.0,
                 seed: Optional[int] = None,
                 hitbox: Hitbox = Hitbox.RECT):
        self.hitbox = hitbox
        self._handlers: List[EventHandler] = []
        self.reset(difficulty, gravity_multiplier, seed)

    # -------------------- Observers --------------------

    def subscribe(self, handler: EventHandler) -> Callable[[], None]:
        """Register `handler`; the returned callable unregisters it."""
        self._handlers.append(handler)

        def unsubscribe():
            if handler in self._handlers:
                self._handlers.remove(handler)
        return unsubscribe

    # -------------------- Core API --------------------

    @property
    def profile(self) -> DifficultyProfile:
        return self._profile

    @property
    def seed(self) -> int:
        return self.stream.seed

    def reset(self,
              difficulty: Union[Difficulty, str, None] = None,
              gravity_multiplier: Optional[float] = None,
              seed: Optional[int] = None) -> Snapshot:
        """
        Back to Menu with a fresh bird, an empty obstacle stream and score 0.
        Omitted arguments keep the previous run's values. A seed of None
        draws a fresh seed from the current stream (or a random one) and
        `seed` reports it.
        """
        if difficulty is not None:
            self.difficulty = as_difficulty(difficulty)
        if gravity_multiplier is not None:
            self.gravity_multiplier = clamp_multiplier(gravity_multiplier)
        self._profile = get_profile(self.difficulty)

        old_stream = getattr(self, "stream", None)
        if seed is None and old_stream is not None:
            # next layout seed comes from the previous stream, so retries vary
            seed = old_stream.rng.randrange(0, 2**32 - 1)
        self.stream = ObstacleStream(seed)

        self.bird: Bird = spawn_bird(PLAYFIELD_BOTTOM)
        self.state = RunState.MENU
        self.score = 0
        self.ticks = 0
        self.crash_cause: Optional[str] = None
        logger.debug("reset: difficulty=%s gravity x%.1f seed=%s",
                     self.difficulty.value, self.gravity_multiplier, self.stream.seed)
        return self.snapshot()

    def tick(self, flap_requested: bool = False) -> Snapshot:
        events: List[EngineEvent] = []
        flap_consumed = False

        if self.state is RunState.MENU and flap_requested:
            self.state = RunState.ACTIVE
            self.bird.flap(self._profile.lift)
            flap_consumed = True
            events.append(EngineEvent(EventKind.STARTED))

        if self.state is not RunState.ACTIVE:
            return self.snapshot()

        prof = self._profile

        # 1) kinematics
        self.bird.integrate(prof.gravity * self.gravity_multiplier)
        if flap_requested and not flap_consumed:
            self.bird.flap(prof.lift)
            events.append(EngineEvent(EventKind.FLAPPED))

        # 2) obstacles: advance, spawn, cull
        self.stream.update(self.ticks, prof)
        self.ticks += 1

        # 3) scoring
        points = check_score(self.bird, self.stream.obstacles)
        for _ in range(points):
            self.score += 1
            events.append(EngineEvent(EventKind.SCORED, 1))

        # 4) collision (terminal)
        cause = collision_cause(self.bird, self.stream.obstacles, self.hitbox)
        if cause is not None:
            self.state = RunState.CRASHED
            self.crash_cause = cause
            events.append(EngineEvent(EventKind.CRASHED, self.score))
            logger.debug("crashed into %s at tick %d, score %d", cause, self.ticks, self.score)

        snap = self.snapshot(tuple(events))
        # state is settled before anyone hears about it
        for event in events:
            for handler in list(self._handlers):
                handler(event)
        return snap

    def snapshot(self, events: Tuple[EngineEvent, ...] = ()) -> Snapshot:
        return Snapshot(
            run_state=self.state,
            tick=self.ticks,
            bird_x=self.bird.x,
            bird_y=self.bird.y,
            bird_velocity=self.bird.vy,
            bird_rotation=self.bird.rotation,
            obstacles=tuple(
                ObstacleView(o.x, o.gap_top, o.gap_size, o.width, o.scored)
                for o in self.stream.obstacles
            ),
            score=self.score,
            difficulty=self.difficulty,
            gravity_multiplier=self.gravity_multiplier,
            crash_cause=self.crash_cause,
            events=events,
        )
