# parrot_jump/env/observations.py
from __future__ import annotations
from typing import Tuple
import numpy as np

from parrot_jump.game.config import SimConfig
from parrot_jump.game.engine import Snapshot

VY_NORM = 30.0          # |vy| mapped to 1.0 (about the speed at game over)
N_PLATFORM_FEATURES = 3  # dx, dy, direction


def observation_bounds(n_platforms: int) -> Tuple[np.ndarray, np.ndarray]:
    """Low/high arrays matching build_observation's layout."""
    low = np.array([0.0, -1.0, 0.0] + [-1.0, -1.0, -1.0] * n_platforms, dtype=np.float32)
    high = np.array([1.0, 1.0, 1.0] + [1.0, 1.0, 1.0] * n_platforms, dtype=np.float32)
    return low, high


def build_observation(snap: Snapshot, cfg: SimConfig, n_platforms: int | None = None) -> np.ndarray:
    """
    Vector observation of a snapshot, float32:
      [avatar_x_norm, vy_norm, grounded,
       (dx, dy, dir) for the n platforms nearest the avatar's feet, ordered top to bottom]
    dx: platform center minus avatar center, over view width
    dy: platform top minus avatar bottom, over view height
    Missing platforms are padded with (0, 1, 0): nothing, a full screen below.
    """
    n = cfg.min_platforms if n_platforms is None else int(n_platforms)
    a = snap.avatar
    span = max(1.0, cfg.view_width - a.size)
    x_norm = float(np.clip(a.x / span, 0.0, 1.0))
    vy_norm = float(np.clip(a.vy / VY_NORM, -1.0, 1.0))

    feet = a.y + a.size
    center = a.x + a.size / 2
    nearest = sorted(snap.platforms, key=lambda p: abs(p.y - feet))[:n]
    nearest.sort(key=lambda p: p.y)

    feats = []
    for p in nearest:
        dx = (p.x + p.width / 2 - center) / cfg.view_width
        dy = (p.y - feet) / cfg.view_height
        feats.extend([dx, dy, float(p.direction)])
    feats.extend([0.0, 1.0, 0.0] * (n - len(nearest)))

    obs = np.array([x_norm, vy_norm, 1.0 if a.grounded else 0.0] + feats, dtype=np.float32)
    low, high = observation_bounds(n)
    return np.clip(obs, low, high)
