# parrot_jump/tests/test_jump_env.py
"""
Tests for ParrotJumpEnv (Gymnasium environment) and the replay tooling.

Usage (from repo root):
  pytest parrot_jump/tests/test_jump_env.py
"""

from __future__ import annotations
from typing import List, Tuple

import numpy as np
from gymnasium.utils.env_checker import check_env

from experiments.replay import replay_headless
from experiments.sanity_rollout import tiny_heuristic_policy_init
from parrot_jump.env.jump_env import ParrotJumpEnv
from parrot_jump.game.config import SimConfig


def test_api_check():
    """Verify Gym API contract (spaces, step/reset signatures, types)."""
    env = ParrotJumpEnv(frame_skip=4)
    try:
        check_env(env, skip_render_check=True)
    finally:
        env.close()


def test_smoke_rollout():
    env = ParrotJumpEnv(frame_skip=4)
    try:
        obs, info = env.reset(seed=123)
        assert env.observation_space.contains(obs), "Initial observation not in space"
        assert info["seed"] == 123 and info["score"] == 0
        for t in range(300):
            a = env.action_space.sample()
            obs, r, term, trunc, info = env.step(a)
            assert isinstance(r, float), "Reward must be a float"
            assert env.observation_space.contains(obs), f"Step {t}: observation out of bounds"
            if term or trunc:
                break
    finally:
        env.close()


def test_determinism():
    """Same seed + same action sequence => identical obs/reward/terminal flags."""
    def rollout(seed_val: int, action_seq: List[int]) -> List[Tuple[np.ndarray, float, bool, bool]]:
        env = ParrotJumpEnv(frame_skip=4)
        traj = []
        try:
            env.reset(seed=seed_val)
            for a in action_seq:
                obs, r, term, trunc, _ = env.step(int(a))
                traj.append((obs.copy(), float(r), bool(term), bool(trunc)))
                if term or trunc:
                    break
        finally:
            env.close()
        return traj

    rng = np.random.RandomState(42)
    action_seq = [int(rng.randint(0, 2)) for _ in range(400)]
    t1 = rollout(77, action_seq)
    t2 = rollout(77, action_seq)
    assert len(t1) == len(t2)
    for (o1, r1, te1, tr1), (o2, r2, te2, tr2) in zip(t1, t2):
        assert np.array_equal(o1, o2)
        assert (r1, te1, tr1) == (r2, te2, tr2)


def test_game_over_reward_and_termination():
    env = ParrotJumpEnv(frame_skip=4, config=SimConfig(drift_speed=0.0))
    try:
        env.reset(seed=5)
        for p in env.sim.state.platforms:
            p.x = 0.0
        rewards = []
        term = False
        for _ in range(100):
            _, r, term, _, _ = env.step(0)
            rewards.append(r)
            if term:
                break
        assert term
        assert rewards[-1] == -1.0 and all(r == 0.0 for r in rewards[:-1])
    finally:
        env.close()


def test_time_limit_truncates():
    env = ParrotJumpEnv(frame_skip=6, time_limit_seconds=1.0)
    try:
        env.reset(seed=1)
        trunc = False
        steps = 0
        while not trunc:
            _, _, term, trunc, _ = env.step(0)   # resting never ends the run
            assert not term
            steps += 1
        assert steps == 10
    finally:
        env.close()


def test_rgb_array_render():
    env = ParrotJumpEnv(render_mode="rgb_array")
    try:
        env.reset(seed=3)
        frame = env.render()
        cfg = env.cfg
        assert frame.shape == (cfg.view_height, cfg.view_width, 3) and frame.dtype == np.uint8
        assert len(np.unique(frame.reshape(-1, 3), axis=0)) >= 3, "background, platforms, avatar"
    finally:
        env.close()


def test_replay_matches_recorded_run():
    policy = tiny_heuristic_policy_init()
    env = ParrotJumpEnv(frame_skip=4, time_limit_seconds=None)
    actions = []
    try:
        obs, _ = env.reset(seed=31)
        for _ in range(500):
            a = policy(obs)
            actions.append(a)
            obs, _, term, _, info = env.step(a)
            if term:
                break
    finally:
        env.close()
    traj = replay_headless(31, np.asarray(actions, dtype=np.int8), frame_skip=4)
    assert traj[-1][0] == info["tick"] and traj[-1][1] == info["score"]
