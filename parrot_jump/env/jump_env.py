# parrot_jump/env/jump_env.py
from __future__ import annotations
from dataclasses import replace
from typing import Optional, Dict, Any
import numpy as np
import gymnasium as gym
import pygame

from parrot_jump.game.config import (
    SimConfig, COLOR_BG, COLOR_PLAT, COLOR_AVATAR, COLOR_DEAD
)
from parrot_jump.game.engine import Simulation, Snapshot
from parrot_jump.env.observations import build_observation, observation_bounds


class ParrotJumpEnv(gym.Env):
    """
    Parrot Jump Gymnasium environment (vector observations).
    - Simulation ticks at the config tick rate (60 Hz).
    - Agent acts every `frame_skip` ticks (default 4) -> 15 decisions/sec.
    - Actions: 0 = NOOP, 1 = JUMP (ignored unless grounded).
    - Reward: +1 per point scored, -1 on game over.
    """
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 60}

    def __init__(self,
                 render_mode: Optional[str] = None,
                 frame_skip: int = 4,
                 time_limit_seconds: Optional[float] = 60.0,
                 config: Optional[SimConfig] = None):
        super().__init__()
        assert frame_skip >= 1, "frame_skip must be >= 1"
        assert render_mode is None or render_mode in self.metadata["render_modes"]
        self.render_mode = render_mode
        self.frame_skip = int(frame_skip)
        self.cfg = (config or SimConfig()).validate()

        self.time_limit_decisions = None
        if time_limit_seconds is not None:
            self.time_limit_decisions = int(self.cfg.tick_rate * time_limit_seconds / self.frame_skip)

        self.action_space = gym.spaces.Discrete(2)
        low, high = observation_bounds(self.cfg.min_platforms)
        self.observation_space = gym.spaces.Box(low=low, high=high, dtype=np.float32)

        self.sim: Optional[Simulation] = None
        self.timestep: int = 0
        self.current_seed: Optional[int] = None

        self.screen = None
        self.canvas = None
        self.clock = None

    # -------------------- Core API --------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None):
        super().reset(seed=seed)

        # Explicit seed -> used as the level seed; otherwise drawn from np_random
        if seed is not None:
            level_seed = int(seed)
        else:
            level_seed = int(self.np_random.integers(0, 2**31 - 1))

        self.sim = Simulation(replace(self.cfg, seed=level_seed))
        self.sim.start()
        self.current_seed = level_seed
        self.timestep = 0

        snap = self.sim.snapshot()
        if self.render_mode == "human":
            self.render()
        return self._obs(snap), self._info(snap)

    def step(self, action: int):
        assert self.action_space.contains(action), f"Invalid action {action}"
        assert self.sim is not None, "call reset() first"

        if int(action) == 1:
            self.sim.submit_jump()

        score_before = self.sim.state.board.score
        snap = self.sim.snapshot()
        for _ in range(self.frame_skip):
            snap = self.sim.tick()
            if snap.is_game_over:
                break

        reward = float(snap.score - score_before)
        if snap.is_game_over:
            reward -= 1.0

        self.timestep += 1
        terminated = snap.is_game_over
        truncated = (self.time_limit_decisions is not None) and (self.timestep >= self.time_limit_decisions)

        if self.render_mode == "human":
            self.render()

        return self._obs(snap), reward, terminated, bool(truncated), self._info(snap)

    # -------------------- Helpers --------------------

    def _obs(self, snap: Snapshot) -> np.ndarray:
        return build_observation(snap, self.cfg)

    def _info(self, snap: Snapshot) -> Dict[str, Any]:
        return {
            "seed": self.current_seed,
            "timestep": self.timestep,
            "tick": snap.tick,
            "score": snap.score,
            "stage_index": snap.stage_index,
            "grounded": snap.avatar.grounded,
            "scroll_offset": snap.scroll_offset,
        }

    # -------------------- Rendering --------------------

    def draw(self, surf: pygame.Surface):
        """Plain-rectangle debug view of the current run."""
        assert self.sim is not None
        surf.fill(COLOR_BG)
        self.sim.state.platforms.draw(surf, self.sim.state.scroll_offset, COLOR_PLAT)
        color = COLOR_DEAD if self.sim.is_game_over else COLOR_AVATAR
        pygame.draw.rect(surf, color, self.sim.state.avatar.rect)

    def render(self):
        if self.render_mode is None or self.sim is None:
            return None

        size = (self.cfg.view_width, self.cfg.view_height)
        if self.render_mode == "human":
            if self.screen is None:
                pygame.init()
                self.screen = pygame.display.set_mode(size)
                pygame.display.set_caption("Parrot Jump")
                self.clock = pygame.time.Clock()
            # Pump the event queue so the OS doesn't think we're hung
            pygame.event.pump()
            self.draw(self.screen)
            pygame.display.flip()
            self.clock.tick(self.metadata["render_fps"])
            return None

        if self.canvas is None:
            self.canvas = pygame.Surface(size)
        self.draw(self.canvas)
        # (W, H, 3) -> (H, W, 3) uint8
        return np.transpose(pygame.surfarray.array3d(self.canvas), (1, 0, 2))

    def close(self):
        if self.screen is not None:
            pygame.display.quit()
            pygame.quit()
            self.screen = None
            self.clock = None
        self.canvas = None
