# parrot_jump/game/player.py
from __future__ import annotations
import pygame
from dataclasses import dataclass
from .level import Platform


@dataclass
class Avatar:
    """
    The jumping avatar. Its screen y never changes (the world scrolls instead):
    - vy > 0 means falling, vy < 0 means rising
    - grounded is recomputed every tick by the physics step
    """
    x: float
    y: float
    size: int
    vy: float = 0.0
    grounded: bool = False

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.size

    @property
    def bottom(self) -> float:
        return self.y + self.size

    @property
    def rect(self) -> pygame.Rect:
        return pygame.Rect(int(self.x), int(self.y), self.size, self.size)

    def can_jump(self) -> bool:
        return self.grounded

    def try_jump(self, impulse: float) -> bool:
        """Jump only if grounded. Returns True if performed."""
        if self.can_jump():
            self.vy = float(impulse)
            self.grounded = False
            return True
        return False

    def land_on(self, platform: Platform, platform_width: int):
        """Rest on `platform`, centered over it."""
        self.x = platform.x + platform_width / 2 - self.size / 2
        self.vy = 0.0
        self.grounded = True
