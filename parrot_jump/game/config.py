# parrot_jump/game/config.py
from __future__ import annotations
from dataclasses import dataclass

# --- Display ---
WIDTH = 400
HEIGHT = 600
FPS = 60                    # simulation ticks per second (fixed step)

# --- World / Physics (per tick, not per second) ---
GRAVITY = 0.6               # downward acceleration (px/tick^2)
JUMP_IMPULSE = -15.0        # velocity set on jump (negative = up)
MAX_CATCHUP_TICKS = 5       # driver clamp after stalls

# --- Avatar ---
AVATAR_SIZE = 30

# --- Platforms ---
PLATFORM_W = 60
PLATFORM_H = 15
PLATFORM_GAP = HEIGHT / 6   # vertical spacing between slots
DRIFT_SPEED = 2.0           # horizontal drift (px/tick)
MIN_PLATFORMS = 5
SPAWN_RETRIES = 64          # bounded re-sampling for non-overlapping x
SEED_DEFAULT = 12345

# --- Scoring ---
SCORE_THRESHOLD = 10        # points per stage advance
STAGE_COUNT = 6             # number of backgrounds to cycle through

# --- Colors (RGB, debug render only) ---
COLOR_BG = (135, 206, 235)
COLOR_PLAT = (34, 139, 34)
COLOR_AVATAR = (230, 60, 60)
COLOR_DEAD = (90, 90, 90)


class ConfigError(ValueError):
    """Raised at startup when the configuration cannot produce a playable run."""


@dataclass(frozen=True)
class SimConfig:
    view_width: int = WIDTH
    view_height: int = HEIGHT
    tick_rate: int = FPS
    gravity: float = GRAVITY
    jump_impulse: float = JUMP_IMPULSE
    avatar_size: int = AVATAR_SIZE
    platform_width: int = PLATFORM_W
    platform_height: int = PLATFORM_H
    platform_gap: float = PLATFORM_GAP
    drift_speed: float = DRIFT_SPEED
    min_platforms: int = MIN_PLATFORMS
    score_threshold: int = SCORE_THRESHOLD
    stage_count: int = STAGE_COUNT
    spawn_retries: int = SPAWN_RETRIES
    spawn_centered: bool = False
    seed: int | None = SEED_DEFAULT

    @property
    def avatar_y(self) -> float:
        """Fixed screen y (top edge) of the avatar: its bottom sits on the second slot."""
        return self.view_height - 2 * self.platform_gap - self.avatar_size

    @property
    def avatar_start_x(self) -> float:
        return self.view_width / 2 - self.avatar_size / 2

    @property
    def dt(self) -> float:
        return 1.0 / self.tick_rate

    def validate(self) -> "SimConfig":
        if self.view_width <= self.platform_width:
            raise ConfigError(
                f"view_width ({self.view_width}) must exceed platform_width ({self.platform_width})")
        for name in ("view_width", "view_height", "avatar_size", "platform_width",
                     "platform_height", "platform_gap", "tick_rate",
                     "score_threshold", "stage_count", "spawn_retries"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive, got {getattr(self, name)}")
        if self.min_platforms < 2:
            # the avatar starts on the second slot from the bottom
            raise ConfigError(f"min_platforms must be >= 2, got {self.min_platforms}")
        if self.gravity < 0 or self.drift_speed < 0:
            raise ConfigError("gravity and drift_speed must be non-negative")
        if self.jump_impulse >= 0:
            raise ConfigError(f"jump_impulse must be negative (upward), got {self.jump_impulse}")
        if self.avatar_size > self.view_width:
            raise ConfigError("avatar_size must fit inside view_width")
        if self.platform_gap <= self.platform_height:
            raise ConfigError(
                f"platform_gap ({self.platform_gap}) must exceed platform_height ({self.platform_height})")
        return self
