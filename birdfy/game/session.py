# birdfy/game/session.py
from __future__ import annotations
import logging
from functools import partial
from typing import Callable, Dict, List, Optional, Union

from .controls import FlapBuffer
from .difficulty import Difficulty, as_difficulty
from .engine import Engine, EngineEvent, EventKind, RunState, Snapshot
from .gravity import Theme, as_theme, multiplier_for, step_multiplier
from .oracle import Hitbox
from .scores import HistoryPolicy
from . import storage

logger = logging.getLogger(__name__)


class Session:
    """
    One player's game: the engine plus the input buffer, score book and
    settings around it.

    Persistence never runs inside a tick. Writes are queued and go out on
    flush(), which the front-end calls between frames and reset() calls
    before starting the next run.
    """
    def __init__(self,
                 store: storage.KeyValueStore,
                 policy: HistoryPolicy = HistoryPolicy.RECENT,
                 seed: Optional[int] = None,
                 hitbox: Hitbox = Hitbox.RECT):
        self.store = store
        self.scores = storage.load_score_book(store, policy)
        self.gravity_table: Dict[Theme, float] = storage.load_gravity_table(store)
        self.difficulty: Difficulty = storage.load_difficulty(store)
        self.theme: Theme = storage.load_theme(store)
        self.custom_background: Optional[str] = storage.load_custom_background(store)
        self.flaps = FlapBuffer()
        self._pending: List[Callable[[], None]] = []

        self.engine = Engine(self.difficulty, self.gravity_multiplier, seed=seed, hitbox=hitbox)
        self._run_theme: Theme = self.theme
        self.engine.subscribe(self._on_event)

    # -------------------- Settings --------------------

    @property
    def gravity_multiplier(self) -> float:
        return multiplier_for(self.gravity_table, self.theme)

    def set_difficulty(self, difficulty: Union[Difficulty, str]):
        self.difficulty = as_difficulty(difficulty)
        self._queue(storage.save_selection, self.difficulty, self.theme)
        self._rearm_menu()

    def set_theme(self, theme: Union[Theme, str]):
        self.theme = as_theme(theme)
        self._queue(storage.save_selection, self.difficulty, self.theme)
        self._rearm_menu()

    def step_gravity(self, direction: int) -> float:
        """Nudge the current theme's multiplier one step; returns the new value."""
        self.gravity_table = step_multiplier(self.gravity_table, self.theme, direction)
        self._queue(storage.save_gravity_table, dict(self.gravity_table))
        self._rearm_menu()
        return self.gravity_multiplier

    def set_custom_background(self, uri: Optional[str]):
        self.custom_background = uri or None
        self._queue(storage.save_custom_background, self.custom_background)

    def clear_scores(self):
        self.scores.clear()
        self._queue(storage.save_score_book, self.scores)

    def _rearm_menu(self):
        # a run in progress keeps the values it started with
        if self.engine.state is RunState.MENU:
            self.engine.reset(self.difficulty, self.gravity_multiplier)
            self._run_theme = self.theme

    # -------------------- Loop --------------------

    def request_flap(self, now_ms: float):
        self.flaps.request(now_ms)

    def update(self, now_ms: float) -> Snapshot:
        return self.engine.tick(self.flaps.poll(now_ms))

    def reset(self) -> Snapshot:
        self.flush()
        self.flaps.clear()
        self._run_theme = self.theme
        return self.engine.reset(self.difficulty, self.gravity_multiplier)

    def _on_event(self, event: EngineEvent):
        if event.kind is EventKind.CRASHED:
            self.scores.record(event.value or 0, tag=self._run_theme.value)
            self._queue(storage.save_score_book, self.scores)

    # -------------------- Persistence --------------------

    def _queue(self, writer: Callable[..., None], *args):
        self._pending.append(partial(writer, self.store, *args))

    @property
    def pending_writes(self) -> int:
        return len(self._pending)

    def flush(self):
        pending, self._pending = self._pending, []
        for write in pending:
            try:
                write()
            except (OSError, TypeError, ValueError) as e:
                logger.warning("dropped a settings write: %s", e)
