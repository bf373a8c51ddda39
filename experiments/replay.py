# experiments/replay.py
"""
Replay tool for ParrotJumpEnv — quick command cheat sheet

# Replay a HEURISTIC episode by seed (uses experiments/runs/traces/heuristic/<seed>_actions.npy)
python -m experiments.replay --policy heuristic --seed 105

# Replay by pointing directly to an actions file
python -m experiments.replay --trace experiments/runs/traces/random/112_actions.npy --frame-skip 4

# Headless: just print the outcome (no window)
python -m experiments.replay --policy heuristic --seed 105 --headless

# Controls during replay
SPACE = pause/resume
R     = restart episode
ESC   = quit

# Notes
- Deterministic: given the same seed, frame_skip, and action sequence, replay matches the original run.
- Expected trace layout from sanity rollouts: experiments/runs/traces/<policy>/<seed>_actions.npy
"""

from __future__ import annotations
import argparse
from pathlib import Path
from typing import List, Tuple

import numpy as np
import pygame

from parrot_jump.env.jump_env import ParrotJumpEnv

DEFAULT_OUT_DIR = "experiments/runs"


def _find_trace(out_dir: Path, policy: str, seed: int) -> Path:
    p = out_dir / "traces" / policy / f"{seed}_actions.npy"
    if not p.exists():
        raise FileNotFoundError(f"Trace not found: {p}")
    return p

def _read_meta(out_dir: Path, policy: str, seed: int) -> dict:
    meta_path = out_dir / "traces" / policy / f"{seed}_meta.txt"
    meta = {}
    if meta_path.exists():
        for line in meta_path.read_text(encoding="utf-8").splitlines():
            if "=" in line:
                k, v = line.split("=", 1)
                meta[k.strip()] = v.strip()
    return meta

def replay_headless(seed: int, actions: np.ndarray, frame_skip: int) -> List[Tuple[int, int, bool]]:
    """Step the recorded actions without a window. Returns [(tick, score, terminated), ...]."""
    env = ParrotJumpEnv(frame_skip=frame_skip, time_limit_seconds=None)
    out: List[Tuple[int, int, bool]] = []
    try:
        env.reset(seed=seed)
        for a in actions:
            _, _, term, trunc, info = env.step(int(a))
            out.append((int(info["tick"]), int(info["score"]), bool(term)))
            if term or trunc:
                break
    finally:
        env.close()
    return out

def _draw_hud(env: ParrotJumpEnv, step_idx: int, action: int):
    surf = pygame.display.get_surface()
    if surf is None or env.sim is None:
        return
    font = pygame.font.SysFont("jetbrainsmono", 16)
    snap = env.sim.snapshot()
    lines = [
        f"Step={step_idx}  Action={'JUMP' if action == 1 else 'NOOP'}",
        f"Score={snap.score}  Stage={snap.stage_index}  {'GAME OVER' if snap.is_game_over else ''}",
    ]
    for i, txt in enumerate(lines):
        surf.blit(font.render(txt, True, (20, 30, 40)), (10, 10 + i * 20))
    pygame.display.flip()

def replay_episode(seed: int, actions: np.ndarray, frame_skip: int):
    """
    Replays an episode on screen.
    Controls: SPACE pause/resume, R restart episode, ESC quit
    """
    env = ParrotJumpEnv(render_mode="human", frame_skip=frame_skip, time_limit_seconds=None)
    env.reset(seed=seed)
    paused = False
    step_idx = 0
    action = 0
    clock = pygame.time.Clock()

    try:
        running = True
        while running and step_idx < len(actions):
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_SPACE:
                        paused = not paused
                    elif event.key == pygame.K_r:
                        env.reset(seed=seed)
                        step_idx = 0
                        paused = False

            if paused:
                env.render()
                _draw_hud(env, step_idx, action)
                clock.tick(30)
                continue

            action = int(actions[step_idx])
            _, _, term, trunc, _ = env.step(action)
            _draw_hud(env, step_idx, action)
            step_idx += 1

            if term or trunc:
                pygame.time.delay(600)
                break
    finally:
        env.close()

def main():
    ap = argparse.ArgumentParser(description="Replay a recorded ParrotJumpEnv episode.")
    ap.add_argument("--seed", type=int, help="Episode seed")
    ap.add_argument("--policy", type=str, default="random",
                    help="Trace subfolder name, e.g. random / heuristic")
    ap.add_argument("--trace", type=str, default="",
                    help="Optional explicit path to a .npy action file")
    ap.add_argument("--out-dir", type=str, default=DEFAULT_OUT_DIR,
                    help="Base directory where experiments/runs live")
    ap.add_argument("--frame-skip", type=int, default=-1,
                    help="Override frame_skip. If <0, use meta or default=4")
    ap.add_argument("--headless", action="store_true", help="No window, print the outcome")
    args = ap.parse_args()

    out_dir = Path(args.out_dir)

    if args.trace:
        trace_path = Path(args.trace)
        if not trace_path.exists():
            raise FileNotFoundError(f"Trace file not found: {trace_path}")
        if args.seed is None:
            stem = trace_path.stem.split("_")[0]
            if not stem.lstrip("-").isdigit():
                raise SystemExit("Could not infer --seed from the trace file name")
            args.seed = int(stem)
    else:
        if args.seed is None:
            raise SystemExit("Please provide --seed or --trace")
        trace_path = _find_trace(out_dir, args.policy, args.seed)

    actions = np.load(trace_path)
    if actions.ndim != 1:
        raise ValueError(f"Expected 1D action array, got shape {actions.shape}")

    fs = args.frame_skip
    if fs < 0:
        fs = 4
        if not args.trace:
            meta = _read_meta(out_dir, args.policy, args.seed)
            if meta.get("frame_skip", "").isdigit():
                fs = int(meta["frame_skip"])

    print(f"Replaying seed={args.seed}  policy={args.policy}  steps={len(actions)}  frame_skip={fs}")
    if args.headless:
        traj = replay_headless(seed=args.seed, actions=actions, frame_skip=fs)
        tick, score, term = traj[-1] if traj else (0, 0, False)
        print(f"ticks={tick}  score={score}  game_over={term}")
    else:
        print("Controls: SPACE pause/resume | R restart | ESC quit")
        replay_episode(seed=args.seed, actions=actions, frame_skip=fs)

if __name__ == "__main__":
    main()
