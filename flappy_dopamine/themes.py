"""Theme descriptors and the milestone-driven theme sequencer.

A theme is a record of function values (drawing callbacks plus a particle hue
function) and an optional audio profile override. Themes never share mutable
state; the sequencer only stores indices into the theme list.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence

import pygame

from .config import GAMEOVER_TRANSITION, THEME_SWITCH_INTERVAL, THEME_TRANSITION
from .entities import Obstacle
from .utils import clamp, ease_in_out_cubic

logger = logging.getLogger(__name__)

BackgroundFn = Callable[[pygame.Surface, float, int, int], None]
ObstacleFn = Callable[[pygame.Surface, Obstacle, int, float, float], None]
AvatarFn = Callable[[pygame.Surface, float, float], None]
HueFn = Callable[[float, int], float]


@dataclass(frozen=True)
class Theme:
    id: str
    label: str
    emoji: str
    accent_color: str
    particle_hue: HueFn
    draw_background: BackgroundFn
    draw_obstacle: ObstacleFn
    draw_avatar: AvatarFn
    audio_profile: Mapping[str, Any] | None = None


class ThemeSequencer:
    """Tracks the active/previous theme and the crossfade between them.

    ``progress`` runs from 0 to 1 over ``duration`` seconds after every switch
    and never decreases within a transition.
    """

    def __init__(
        self,
        themes: Sequence[Theme],
        interval: int = THEME_SWITCH_INTERVAL,
        duration: float = THEME_TRANSITION,
    ) -> None:
        if not themes:
            raise ValueError("ThemeSequencer needs at least one theme")
        self.themes = list(themes)
        self.sequence = [t.id for t in self.themes]
        self.interval = max(1, int(interval))
        self.switch_duration = duration
        self._index = 0
        self._previous = 0
        self.progress = 1.0
        self.elapsed = 0.0
        self.duration = 1.0
        self.last_switch_score = 0

    @property
    def index(self) -> int:
        return self._index

    @index.setter
    def index(self, value: int) -> None:
        self._index = int(value) % len(self.themes)

    @property
    def previous_index(self) -> int:
        return self._previous

    @previous_index.setter
    def previous_index(self, value: int) -> None:
        self._previous = int(value) % len(self.themes)

    @property
    def current(self) -> Theme:
        return self.themes[self._index]

    @property
    def previous(self) -> Theme:
        return self.themes[self._previous]

    @property
    def eased(self) -> float:
        return ease_in_out_cubic(clamp(self.progress, 0.0, 1.0))

    @property
    def in_transition(self) -> bool:
        return self.progress < 1.0 and self._previous != self._index

    def _begin(self, duration: float) -> None:
        self.progress = 0.0
        self.elapsed = 0.0
        self.duration = duration

    def on_score(self, score: int) -> bool:
        """Advance to the next theme on milestone scores; True if a switch fired."""
        if score <= 0 or score % self.interval != 0 or score == self.last_switch_score:
            return False
        self._previous = self._index
        self._index = (self._index + 1) % len(self.themes)
        self._begin(self.switch_duration)
        self.last_switch_score = score
        logger.info("Theme switch at score %d: %s -> %s", score, self.previous.id, self.current.id)
        return True

    def force_reset(self, duration: float = GAMEOVER_TRANSITION) -> None:
        """Crossfade back to the first theme regardless of the current one."""
        self._previous = self._index
        self._index = 0
        self._begin(duration)
        self.last_switch_score = 0

    def settle(self) -> None:
        """Drop any running crossfade (used when a new run starts)."""
        self._previous = self._index
        self.progress = 1.0
        self.duration = 1.0

    def advance(self, dt: float) -> None:
        if self.progress >= 1.0:
            return
        duration = 0.001 if self.duration <= 0 else self.duration
        self.elapsed += max(0.0, dt)
        self.progress = 1.0 if self.elapsed >= duration else max(self.progress, self.elapsed / duration)
