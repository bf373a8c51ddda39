# parrot_jump/tests/test_physics.py
"""
Collision + integration tests on hand-built worlds (no RNG involved).

Usage (from repo root):
  pytest parrot_jump/tests/test_physics.py
"""

from __future__ import annotations

import pytest

from parrot_jump.game.config import SimConfig
from parrot_jump.game.level import Platform
from parrot_jump.game.physics import resolve_support, integrate_tick
from parrot_jump.game.player import Avatar

CFG = SimConfig()


def make_avatar(x: float = 185.0, vy: float = 0.0, grounded: bool = False) -> Avatar:
    return Avatar(x=x, y=CFG.avatar_y, size=CFG.avatar_size, vy=vy, grounded=grounded)


def floor_under(avatar: Avatar, x: float = 170.0) -> Platform:
    """Platform whose top sits exactly at the avatar's feet at offset 0."""
    return Platform(x=x, y=avatar.bottom, direction=1)


# ------------------------ Collision ------------------------

def test_support_inside_band():
    a = make_avatar()
    p = floor_under(a)
    assert resolve_support(a, [p], 0.0, CFG) is p
    # feet on the bottom face of the band still count
    assert resolve_support(a, [p], -CFG.platform_height, CFG) is p
    assert resolve_support(a, [p], -CFG.platform_height - 0.01, CFG) is None
    assert resolve_support(a, [p], 0.01, CFG) is None


def test_rising_avatar_passes_through():
    a = make_avatar(vy=-0.5)
    assert resolve_support(a, [floor_under(a)], 0.0, CFG) is None


def test_horizontal_overlap_is_strict():
    a = make_avatar(x=100.0)
    # platform right edge == avatar left edge: touching is not overlapping
    touching_left = Platform(x=100.0 - CFG.platform_width, y=a.bottom, direction=1)
    touching_right = Platform(x=a.right, y=a.bottom, direction=1)
    assert resolve_support(a, [touching_left, touching_right], 0.0, CFG) is None
    barely = Platform(x=a.right - 0.5, y=a.bottom, direction=1)
    assert resolve_support(a, [barely], 0.0, CFG) is barely


def test_first_platform_in_order_wins():
    a = make_avatar()
    p1 = floor_under(a, x=160.0)
    p2 = Platform(x=175.0, y=a.bottom - 5.0, direction=-1)
    assert resolve_support(a, [p1, p2], 0.0, CFG) is p1
    assert resolve_support(a, [p2, p1], 0.0, CFG) is p2


# ------------------------ Integration ------------------------

def test_landing_snaps_and_holds_offset():
    a = make_avatar(x=150.0, vy=3.0)
    p = Platform(x=160.0, y=a.bottom - 2.0, direction=1)
    step = integrate_tick(a, [p], 0.0, CFG)
    assert step.support is p and step.landed
    assert step.scroll_offset == 0.0, "world must not scroll on the landing tick"
    assert a.vy == 0.0 and a.grounded
    assert a.x == pytest.approx(p.x + CFG.platform_width / 2 - CFG.avatar_size / 2)


def test_rest_is_idempotent():
    a = make_avatar(grounded=True)
    p = floor_under(a)
    offset = 0.0
    for _ in range(200):
        step = integrate_tick(a, [p], offset, CFG)
        assert step.support is p
        assert not step.landed, "resting is not a new landing"
        assert step.scroll_offset == offset
        assert a.vy == 0.0
        offset = step.scroll_offset


def test_jump_then_ten_ticks():
    a = make_avatar(grounded=True)
    p = floor_under(a)
    offset = 0.0
    step = integrate_tick(a, [p], offset, CFG, jump_requested=True)
    assert step.jumped and step.support is None
    offsets = [step.scroll_offset]
    for _ in range(9):
        step = integrate_tick(a, [p], step.scroll_offset, CFG)
        offsets.append(step.scroll_offset)
    assert a.vy == pytest.approx(-15 + 10 * 0.6)
    expected = [sum(15 - 0.6 * k for k in range(1, n + 1)) for n in range(1, 11)]
    assert offsets == pytest.approx(expected)
    assert not a.grounded


def test_jump_ignored_while_airborne():
    a = make_avatar(vy=4.0, grounded=False)
    step = integrate_tick(a, [], 0.0, CFG, jump_requested=True)
    assert not step.jumped
    assert a.vy == pytest.approx(4.6)


def test_free_fall_scroll_strictly_decreases():
    a = make_avatar()
    offset = 0.0
    for _ in range(100):
        step = integrate_tick(a, [], offset, CFG)
        assert step.scroll_offset < offset
        offset = step.scroll_offset
