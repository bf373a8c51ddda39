# parrot_jump/game/engine.py
from __future__ import annotations
import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from .config import SimConfig, MAX_CATCHUP_TICKS
from .events import Event, EventBus, EventType
from .level import PlatformSet
from .physics import integrate_tick
from .player import Avatar
from .scoring import Scoreboard

logger = logging.getLogger(__name__)


# -------------------- Read-only views --------------------

@dataclass(frozen=True)
class AvatarView:
    x: float
    y: float
    size: int
    vy: float
    grounded: bool


@dataclass(frozen=True)
class PlatformView:
    x: float
    y: float        # already scroll-adjusted
    width: int
    height: int
    direction: int
    slot: float


@dataclass(frozen=True)
class Snapshot:
    avatar: AvatarView
    platforms: Tuple[PlatformView, ...]
    score: int
    high_score: int
    stage_index: int
    is_game_over: bool
    started: bool
    scroll_offset: float
    tick: int


# -------------------- Run state --------------------

@dataclass
class RunState:
    """Everything one run mutates. Owned by Simulation, replaced whole on restart."""
    avatar: Avatar
    platforms: PlatformSet
    board: Scoreboard
    scroll_offset: float = 0.0
    game_over: bool = False
    pending_jump: bool = False
    tick: int = 0
    events: List[Event] = field(default_factory=list)


class Simulation:
    """
    Fixed-tick simulation of the endless jump game.

    Per tick, in order: physics (with collision), platform drift, recycle/spawn,
    scoring, game-over check. Nothing advances until start(); after game over
    tick() is a no-op until restart().
    """
    def __init__(self, config: Optional[SimConfig] = None, bus: Optional[EventBus] = None):
        self.cfg = (config or SimConfig()).validate()
        self.bus = bus or EventBus()
        self.started = False
        self.seed = self.cfg.seed if self.cfg.seed is not None else random.randrange(0, 2**32 - 1)
        self.state = self._new_run(self.seed, Scoreboard(self.cfg.score_threshold, self.cfg.stage_count))

    def _new_run(self, seed: int, board: Scoreboard) -> RunState:
        rng = random.Random(seed)
        plats = PlatformSet(self.cfg, rng)
        plats.initialize()
        avatar = Avatar(x=self.cfg.avatar_start_x, y=self.cfg.avatar_y, size=self.cfg.avatar_size)
        start = plats.start_platform
        avatar.land_on(start, self.cfg.platform_width)
        board = board.next_run(start_slot=start.slot)
        return RunState(avatar=avatar, platforms=plats, board=board)

    # -------------------- Commands --------------------

    def start(self) -> Snapshot:
        if not self.started:
            self.started = True
            logger.info("run started (seed=%s)", self.seed)
            self.bus.emit(Event(EventType.STARTED, tick=self.state.tick, data={"seed": self.seed}))
        return self.snapshot()

    def submit_jump(self):
        """Buffer a jump for the next tick. Ignored while airborne; never queued."""
        s = self.state
        if self.started and not s.game_over and s.avatar.grounded:
            s.pending_jump = True

    def restart(self, seed: Optional[int] = None) -> Snapshot:
        """Rebuild the whole run at once; the high score carries over."""
        if seed is not None:
            self.seed = int(seed)
        old = self.state
        old.board.finish_run()
        self.state = self._new_run(self.seed, old.board)
        self.started = True
        logger.info("run restarted (seed=%s, high score=%d)", self.seed, self.state.board.high_score)
        self.bus.emit(Event(EventType.RESTARTED, tick=0,
                            data={"seed": self.seed, "high_score": self.state.board.high_score}))
        return self.snapshot()

    def tick(self) -> Snapshot:
        s = self.state
        if not self.started or s.game_over:
            return self.snapshot()

        s.tick += 1
        jump, s.pending_jump = s.pending_jump, False

        # (a) physics + collision
        step = integrate_tick(s.avatar, s.platforms, s.scroll_offset, self.cfg, jump_requested=jump)
        s.scroll_offset = step.scroll_offset
        if step.jumped:
            s.events.append(Event(EventType.JUMPED, tick=s.tick))
        if step.landed:
            s.events.append(Event(EventType.LANDED, tick=s.tick,
                                  data={"slot": step.support.slot, "x": float(step.support.x)}))

        # (b) drift, (c) recycle/spawn
        s.platforms.advance_drift()
        s.platforms.recycle(s.scroll_offset, self.cfg.view_height)
        s.platforms.check_invariants()

        # (d) scoring
        update = s.board.record_landing(step.support)
        if update.scored:
            s.events.append(Event(EventType.SCORED, tick=s.tick, data={"score": s.board.score}))
        if update.stage_changed:
            s.events.append(Event(EventType.STAGE_CHANGED, tick=s.tick,
                                  data={"stage_index": s.board.stage_index}))

        # (e) terminal check
        if s.scroll_offset < -self.cfg.view_height:
            s.game_over = True
            s.board.finish_run()
            logger.info("game over at tick %d: score=%d high=%d", s.tick, s.board.score, s.board.high_score)
            s.events.append(Event(EventType.GAME_OVER, tick=s.tick,
                                  data={"score": s.board.score, "high_score": s.board.high_score}))

        self._flush_events()
        return self.snapshot()

    def _flush_events(self):
        events, self.state.events = self.state.events, []
        for ev in events:
            self.bus.emit(ev)

    # -------------------- Views --------------------

    @property
    def is_game_over(self) -> bool:
        return self.state.game_over

    def snapshot(self) -> Snapshot:
        s, cfg = self.state, self.cfg
        a = s.avatar
        plats = tuple(
            PlatformView(x=p.x, y=p.screen_y(s.scroll_offset),
                         width=cfg.platform_width, height=cfg.platform_height,
                         direction=p.direction, slot=p.slot)
            for p in s.platforms
        )
        return Snapshot(
            avatar=AvatarView(x=a.x, y=a.y, size=a.size, vy=a.vy, grounded=a.grounded),
            platforms=plats,
            score=s.board.score,
            high_score=s.board.high_score,
            stage_index=s.board.stage_index,
            is_game_over=s.game_over,
            started=self.started,
            scroll_offset=s.scroll_offset,
            tick=s.tick,
        )


class FixedStepDriver:
    """
    Turns wall-clock time into whole simulation ticks.
    Leftover time is carried to the next update; after a stall at most
    `max_steps` ticks are run and the rest of the backlog is dropped.
    """
    def __init__(self, sim: Simulation, max_steps: int = MAX_CATCHUP_TICKS):
        assert max_steps >= 1, "max_steps must be >= 1"
        self.sim = sim
        self.dt = sim.cfg.dt
        self.max_steps = int(max_steps)
        self._acc = 0.0

    def update(self, elapsed_s: float) -> int:
        self._acc += max(0.0, float(elapsed_s))
        steps = 0
        while self._acc + 1e-9 >= self.dt and steps < self.max_steps:
            self.sim.tick()
            self._acc -= self.dt
            steps += 1
        if steps == self.max_steps and self._acc + 1e-9 >= self.dt:
            self._acc = 0.0
        return steps
