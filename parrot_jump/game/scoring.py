# parrot_jump/game/scoring.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional
from .level import Platform

logger = logging.getLogger(__name__)


@dataclass
class ScoreUpdate:
    scored: bool = False
    stage_changed: bool = False


@dataclass
class Scoreboard:
    """Score, in-memory high score and the cosmetic stage index of one run."""
    threshold: int
    stage_count: int
    score: int = 0
    high_score: int = 0
    stage_index: int = 0
    last_landed: Optional[float] = None   # slot of the most recently landed platform

    def record_landing(self, platform: Optional[Platform]) -> ScoreUpdate:
        """+1 for a platform different from the last one landed on; resting re-scores nothing."""
        if platform is None or platform.slot == self.last_landed:
            return ScoreUpdate()
        self.last_landed = platform.slot
        self.score += 1
        update = ScoreUpdate(scored=True)
        if self.score % self.threshold == 0:
            self.stage_index = (self.stage_index + 1) % self.stage_count
            update.stage_changed = True
            logger.debug("stage -> %d at score %d", self.stage_index, self.score)
        return update

    def finish_run(self) -> int:
        self.high_score = max(self.high_score, self.score)
        return self.high_score

    def next_run(self, start_slot: Optional[float] = None) -> "Scoreboard":
        """Fresh board for the next run, carrying the high score over."""
        return Scoreboard(threshold=self.threshold, stage_count=self.stage_count,
                          high_score=max(self.high_score, self.score),
                          last_landed=start_slot)
