# parrot_jump/game/physics.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Optional
from .config import SimConfig
from .level import Platform
from .player import Avatar


@dataclass
class StepResult:
    scroll_offset: float            # committed offset after this tick
    support: Optional[Platform]     # platform the avatar rests on, if any
    landed: bool = False            # airborne -> grounded this tick
    jumped: bool = False


def resolve_support(avatar: Avatar,
                    platforms: Iterable[Platform],
                    candidate_offset: float,
                    cfg: SimConfig) -> Optional[Platform]:
    """
    Return the platform supporting the avatar under `candidate_offset`, or None.
    A platform supports when the avatar's bottom edge lies inside its thickness
    band, the horizontal spans overlap, and the avatar is not rising (vy >= 0).
    Platforms are tested in iteration order; the first match wins. PlatformSet
    keeps its list ordered bottom-up, which makes the choice deterministic.
    """
    if avatar.vy < 0:
        return None
    bottom = avatar.bottom
    for p in platforms:
        top = p.screen_y(candidate_offset)
        if not (top <= bottom <= top + cfg.platform_height):
            continue
        if avatar.left < p.x + cfg.platform_width and avatar.right > p.x:
            return p
    return None


def integrate_tick(avatar: Avatar,
                   platforms: Iterable[Platform],
                   scroll_offset: float,
                   cfg: SimConfig,
                   jump_requested: bool = False) -> StepResult:
    """
    Advance the avatar one fixed tick.

    A pending jump is applied first (only if grounded). Gravity then gives a
    candidate velocity and offset; if a platform supports the avatar under the
    candidate offset the world holds still and the avatar rests on it,
    otherwise both candidates are committed.
    """
    was_grounded = avatar.grounded
    jumped = avatar.try_jump(cfg.jump_impulse) if jump_requested else False

    vy_next = avatar.vy + cfg.gravity
    offset_next = scroll_offset - vy_next

    # Support test uses the pre-gravity velocity: a rising avatar passes through
    support = resolve_support(avatar, platforms, offset_next, cfg)
    if support is not None:
        avatar.land_on(support, cfg.platform_width)
        return StepResult(scroll_offset=scroll_offset, support=support,
                          landed=not was_grounded, jumped=jumped)

    avatar.vy = vy_next
    avatar.grounded = False
    return StepResult(scroll_offset=offset_next, support=None, jumped=jumped)
