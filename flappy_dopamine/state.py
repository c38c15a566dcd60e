"""The single mutable record shared by the game loop and its collaborators."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .config import BASE_SPEED, DEFAULT_PLAYER_NAME
from .themes import ThemeSequencer


class Mode(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    OVER = "over"


@dataclass
class GameState:
    """Score, mode and timing for one game window.

    Theme indices and crossfade progress live on the sequencer; the
    properties below expose them under the names the HUD and tests use.
    """

    sequencer: ThemeSequencer
    mode: Mode = Mode.IDLE
    score: int = 0
    best: int = 0
    elapsed: float = 0.0
    speed: float = BASE_SPEED
    player_name: str = DEFAULT_PLAYER_NAME
    muted: bool = False
    last_timestamp: float | None = None
    needs_time_reset: bool = True
    notice: str | None = None
    notice_time: float = 0.0

    @property
    def theme_index(self) -> int:
        return self.sequencer.index

    @property
    def previous_theme_index(self) -> int:
        return self.sequencer.previous_index

    @property
    def transition_progress(self) -> float:
        return self.sequencer.progress

    @property
    def transition_duration(self) -> float:
        return self.sequencer.duration

    @property
    def last_theme_switch_score(self) -> int:
        return self.sequencer.last_switch_score
