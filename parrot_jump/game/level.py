# parrot_jump/game/level.py
from __future__ import annotations
import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Tuple
import pygame
from .config import SimConfig

logger = logging.getLogger(__name__)

# Slot index (from the bottom) of the platform the avatar starts on
START_SLOT = 1


class InvariantError(RuntimeError):
    """The platform ladder lost a rung or doubled one up. Never expected at runtime."""


@dataclass
class Platform:
    x: float        # left edge, moved by drift
    y: float        # world y; on-screen y is y + scroll offset
    direction: int  # +1 right, -1 left

    @property
    def slot(self) -> float:
        """Stable identity: the creation-time world y, never mutated."""
        return self.y

    def screen_y(self, scroll_offset: float) -> float:
        return self.y + scroll_offset


class PlatformSet:
    """
    Owns the vertical ladder of drifting platforms.
    - Kept ordered bottom-up (index 0 = lowest world y on screen).
    - Recycled one-for-one: each platform that leaves the bottom of the view is
      replaced one gap above the current top, so the ladder never breaks.
    """
    def __init__(self, config: SimConfig, rng: random.Random):
        self.cfg = config
        self.rng = rng
        self.platforms: List[Platform] = []
        self.target_count = config.min_platforms

    def __len__(self) -> int:
        return len(self.platforms)

    def __iter__(self):
        return iter(self.platforms)

    @property
    def max_x(self) -> float:
        return float(self.cfg.view_width - self.cfg.platform_width)

    def _direction(self) -> int:
        return -1 if self.rng.random() < 0.5 else 1

    def _random_x(self) -> float:
        return self.rng.uniform(0.0, self.max_x)

    def _x_clear_of(self, neighbor: Platform) -> float:
        """Re-sample x until it does not overlap `neighbor` horizontally (bounded)."""
        w = self.cfg.platform_width
        for _ in range(self.cfg.spawn_retries):
            x = self._random_x()
            if abs(x - neighbor.x) >= w:
                return x
        # Retries exhausted: take the edge farthest from the neighbour
        x = 0.0 if neighbor.x >= self.max_x / 2 else self.max_x
        logger.debug("spawn retries exhausted, falling back to x=%.1f", x)
        return x

    # -------------------- Lifecycle --------------------

    def initialize(self, count: Optional[int] = None) -> List[Platform]:
        """
        Lay `count` platforms bottom-up at uniform spacing. The starting slot is
        centered under the avatar; every other platform is sampled clear of its
        neighbour on the starting platform's side.
        """
        n = self.target_count if count is None else int(count)
        if n < self.cfg.min_platforms:
            raise ValueError(f"count must be >= min_platforms ({self.cfg.min_platforms}), got {n}")
        self.target_count = n
        h, gap = self.cfg.view_height, self.cfg.platform_gap
        plats = [Platform(x=self.max_x / 2, y=h - (i + 1) * gap, direction=self._direction())
                 for i in range(n)]

        for i in range(START_SLOT - 1, -1, -1):
            plats[i].x = self._x_clear_of(plats[i + 1])
        for i in range(START_SLOT + 1, n):
            plats[i].x = self._x_clear_of(plats[i - 1])

        self.platforms = plats
        return plats

    @property
    def start_platform(self) -> Platform:
        return self.platforms[START_SLOT]

    def highest(self) -> Platform:
        return min(self.platforms, key=lambda p: p.y)

    def advance_drift(self):
        """Move every platform sideways; reflect off both view edges."""
        speed, hi = self.cfg.drift_speed, self.max_x
        for p in self.platforms:
            nx = p.x + p.direction * speed
            if nx < 0.0 or nx > hi:
                p.direction = -p.direction
                nx = p.x + p.direction * speed
            p.x = min(max(nx, 0.0), hi)

    def recycle(self, scroll_offset: float, view_height: Optional[float] = None) -> Tuple[List[Platform], List[Platform]]:
        """
        Drop platforms whose on-screen y is >= view_height and spawn one
        replacement per drop, each a full gap above the current top.
        Returns (removed, spawned).
        """
        if view_height is None:
            view_height = self.cfg.view_height
        if not self.platforms:
            return [], []

        top = self.highest()
        kept = [p for p in self.platforms if p.screen_y(scroll_offset) < view_height]
        removed = [p for p in self.platforms if p.screen_y(scroll_offset) >= view_height]
        self.platforms = kept

        spawned: List[Platform] = []
        while len(spawned) < len(removed) or len(self.platforms) < self.target_count:
            top = self._spawn_above(top)
            spawned.append(top)

        for p in removed:
            logger.debug("recycled platform slot=%.1f", p.slot)
        return removed, spawned

    def _spawn_above(self, top: Platform) -> Platform:
        if self.cfg.spawn_centered:
            x = self.max_x / 2
        else:
            x = self._x_clear_of(top)
        plat = Platform(x=x, y=top.y - self.cfg.platform_gap, direction=self._direction())
        self.platforms.append(plat)
        logger.debug("spawned platform slot=%.1f x=%.1f", plat.slot, plat.x)
        return plat

    def check_invariants(self):
        if len(self.platforms) < self.cfg.min_platforms:
            raise InvariantError(
                f"{len(self.platforms)} active platforms, expected at least {self.cfg.min_platforms}")
        slots = [p.slot for p in self.platforms]
        if len(set(slots)) != len(slots):
            raise InvariantError(f"duplicate platform slots: {sorted(slots)}")

    # -------------------- Views --------------------

    def screen_rects(self, scroll_offset: float) -> List[Tuple[float, float, int, int]]:
        """(x, y, w, h) per platform, already scroll-adjusted."""
        w, h = self.cfg.platform_width, self.cfg.platform_height
        return [(p.x, p.screen_y(scroll_offset), w, h) for p in self.platforms]

    def draw(self, surf: pygame.Surface, scroll_offset: float, color: Tuple[int, int, int]):
        for x, y, w, h in self.screen_rects(scroll_offset):
            pygame.draw.rect(surf, color, pygame.Rect(int(x), int(y), w, h))
