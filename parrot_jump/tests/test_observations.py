# parrot_jump/tests/test_observations.py
from __future__ import annotations

import numpy as np

from parrot_jump.env.observations import build_observation, observation_bounds
from parrot_jump.game.config import SimConfig
from parrot_jump.game.engine import Simulation, Snapshot, AvatarView, PlatformView

CFG = SimConfig()


def make_snapshot(platforms, vy=0.0, grounded=True) -> Snapshot:
    avatar = AvatarView(x=CFG.avatar_start_x, y=CFG.avatar_y, size=CFG.avatar_size,
                        vy=vy, grounded=grounded)
    return Snapshot(avatar=avatar, platforms=tuple(platforms), score=0, high_score=0,
                    stage_index=0, is_game_over=False, started=True, scroll_offset=0.0, tick=0)


def pv(x, y, direction=1) -> PlatformView:
    return PlatformView(x=x, y=y, width=CFG.platform_width, height=CFG.platform_height,
                        direction=direction, slot=y)


def test_shape_dtype_and_bounds():
    sim = Simulation()
    obs = build_observation(sim.start(), CFG)
    low, high = observation_bounds(CFG.min_platforms)
    assert isinstance(obs, np.ndarray) and obs.dtype == np.float32
    assert obs.shape == (3 + 3 * CFG.min_platforms,) == low.shape
    assert np.all(obs >= low) and np.all(obs <= high)
    assert obs[2] == 1.0, "starts grounded"


def test_platform_features_are_relative_and_ordered():
    feet = CFG.avatar_y + CFG.avatar_size
    plats = [pv(170.0, feet), pv(0.0, feet - 100.0, -1), pv(340.0, feet + 100.0)]
    obs = build_observation(make_snapshot(plats), CFG, n_platforms=3)
    rows = obs[3:].reshape(3, 3)
    # top to bottom: the one above, the one underfoot, the one below
    assert np.allclose(rows[:, 1], [-100.0 / CFG.view_height, 0.0, 100.0 / CFG.view_height])
    assert np.isclose(rows[1, 0], 0.0), "underfoot platform is centered"
    assert np.isclose(rows[0, 0], (30.0 - 200.0) / CFG.view_width)
    assert list(rows[:, 2]) == [-1.0, 1.0, 1.0]


def test_padding_and_clipping():
    feet = CFG.avatar_y + CFG.avatar_size
    snap = make_snapshot([pv(170.0, feet)], vy=99.0, grounded=False)
    obs = build_observation(snap, CFG, n_platforms=3)
    assert obs[1] == 1.0 and obs[2] == 0.0
    rows = obs[3:].reshape(3, 3)
    assert np.allclose(rows[1:], [[0.0, 1.0, 0.0], [0.0, 1.0, 0.0]])
