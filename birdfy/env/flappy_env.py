# birdfy/env/flappy_env.py
from __future__ import annotations
from typing import Optional, Dict, Any
import numpy as np
import gymnasium as gym
import pygame

from birdfy.game.config import WIDTH, HEIGHT, FPS
from birdfy.game.difficulty import Difficulty
from birdfy.game.engine import Engine, RunState, Snapshot
from birdfy.game.gravity import Theme
from birdfy.game.oracle import Hitbox
from birdfy.game.game import draw_world
from birdfy.env.observations import build_observation, OBS_SIZE


class FlappyEnv(gym.Env):
    """
    Birdfy Gymnasium environment (vector observations).
    - One engine tick per simulated frame (60 per second).
    - Agent acts every `frame_skip` ticks (default 4) -> 15 decisions/sec.
    - reset() starts the run with an opening flap, so every episode is live.
    - Observation: shape (8,), float32 (see build_observation).
    """
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": FPS}

    def __init__(self,
                 render_mode: Optional[str] = None,
                 frame_skip: int = 4,
                 difficulty: Difficulty = Difficulty.MEDIUM,
                 gravity_multiplier: float = 1.0,
                 hitbox: Hitbox = Hitbox.RECT,
                 time_limit_seconds: Optional[float] = 60.0):
        super().__init__()
        assert frame_skip >= 1, "frame_skip must be >= 1"
        assert render_mode is None or render_mode in self.metadata["render_modes"]
        self.render_mode = render_mode
        self.frame_skip = int(frame_skip)
        self.difficulty = difficulty
        self.gravity_multiplier = gravity_multiplier
        self.hitbox = hitbox

        self.time_limit_decisions = None
        if time_limit_seconds is not None:
            self.time_limit_decisions = int(FPS * time_limit_seconds / self.frame_skip)

        # Actions: 0 = NOOP, 1 = FLAP
        self.action_space = gym.spaces.Discrete(2)

        low = np.array([0.0, -1.0] + [0.0, 0.0, 0.0] * 2, dtype=np.float32)
        high = np.array([1.0, 1.0] + [1.0, 1.0, 1.0] * 2, dtype=np.float32)
        assert low.shape == (OBS_SIZE,)
        self.observation_space = gym.spaces.Box(low=low, high=high, dtype=np.float32)

        # --- Runtime state ---
        self.engine: Optional[Engine] = None
        self.snapshot: Optional[Snapshot] = None
        self.timestep: int = 0
        self.current_seed: Optional[int] = None

        self.screen = None
        self.clock = None

    # -------------------- Core API --------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None):
        super().reset(seed=seed)

        # A given seed fixes the obstacle layout; None draws the next seed from the engine.
        level_seed = int(seed) if seed is not None else None
        if self.engine is None:
            self.engine = Engine(self.difficulty, self.gravity_multiplier, seed=level_seed, hitbox=self.hitbox)
        else:
            self.engine.reset(self.difficulty, self.gravity_multiplier, seed=level_seed)

        self.snapshot = self.engine.tick(flap_requested=True)
        self.timestep = 0
        self.current_seed = self.engine.seed

        obs = build_observation(self.snapshot)
        info = {"seed": self.current_seed, "score": self.snapshot.score}
        return obs, info

    def step(self, action: int):
        assert self.action_space.contains(action), f"Invalid action {action}"
        assert self.engine is not None, "call reset() before step()"

        snap = self.snapshot
        for i in range(self.frame_skip):
            snap = self.engine.tick(flap_requested=(action == 1 and i == 0))
            if snap.run_state is RunState.CRASHED:
                break
        gained = snap.score - self.snapshot.score
        self.snapshot = snap

        alive = snap.run_state is RunState.ACTIVE
        reward = (1.0 + 10.0 * gained) if alive else -1.0

        self.timestep += 1
        terminated = not alive
        truncated = bool(self.time_limit_decisions is not None
                         and self.timestep >= self.time_limit_decisions)

        obs = build_observation(snap)
        info = {
            "score": snap.score,
            "tick": snap.tick,
            "timestep": self.timestep,
            "seed": self.current_seed,
            "crash_cause": snap.crash_cause,
        }

        if self.render_mode == "human":
            self.render()

        return obs, float(reward), terminated, truncated, info

    # -------------------- Rendering --------------------

    def render(self):
        if self.render_mode is None or self.snapshot is None:
            return None

        if self.screen is None:
            pygame.init()
            if self.render_mode == "human":
                self.screen = pygame.display.set_mode((WIDTH, HEIGHT))
                pygame.display.set_caption("Birdfy - Gym Env")
            else:
                self.screen = pygame.Surface((WIDTH, HEIGHT))
            self.clock = pygame.time.Clock()

        if self.render_mode == "human":
            pygame.event.pump()

        draw_world(self.screen, self.snapshot, Theme.NIGHT)

        if self.render_mode == "human":
            pygame.display.flip()
            self.clock.tick(self.metadata["render_fps"])
            return None

        arr = pygame.surfarray.array3d(self.screen)  # (W, H, 3)
        return np.transpose(arr, (1, 0, 2))

    def close(self):
        if self.screen is not None:
            if self.render_mode == "human":
                pygame.display.quit()
            pygame.quit()
            self.screen = None
            self.clock = None
