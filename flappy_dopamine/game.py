"""The game state machine: modes, frame stepping and score bookkeeping.

``Game`` owns every simulation collaborator and calls out to the audio engine,
the score store and the leaderboard. It never touches the display; ``render``
draws into whatever surface it is handed.
"""

from __future__ import annotations

import logging
import random
from time import monotonic
from typing import Callable, Sequence

import pygame

from .audio import AudioEngine
from .compositor import Compositor
from .config import (
    BASE_SPEED,
    FLAP_IMPULSE,
    GAMEOVER_TIME_SCALE,
    GAMEOVER_TRANSITION,
    GRAVITY,
    MAX_FRAME_DT,
    MAX_VELOCITY,
    REFERENCE_HEIGHT,
    SPAWN_INTERVAL,
    TOAST_DURATION,
)
from .entities import Avatar, Metrics
from .leaderboard import Leaderboard
from .particles import ParticleEmitter
from .physics import ObstacleField, hits_bounds, obstacle_width_for, scroll_speed
from .share import build_share_url
from .state import GameState, Mode
from .storage import ScoreStore, sanitize_name
from .theme_catalog import THEMES
from .themes import Theme, ThemeSequencer

logger = logging.getLogger(__name__)


def metrics_for(width: int, height: int) -> Metrics:
    width, height = max(1, int(width)), max(1, int(height))
    return Metrics(width, height, height / REFERENCE_HEIGHT)


class Game:
    def __init__(
        self,
        metrics: Metrics,
        themes: Sequence[Theme] | None = None,
        store: ScoreStore | None = None,
        leaderboard: Leaderboard | None = None,
        audio: AudioEngine | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.metrics = metrics
        self.rng = rng or random.Random()
        self.store = store
        self.leaderboard = leaderboard or Leaderboard()
        self.audio = audio or AudioEngine(rng=self.rng)
        self.sequencer = ThemeSequencer(THEMES if themes is None else themes)
        self.state = GameState(self.sequencer, speed=BASE_SPEED * metrics.scale, muted=self.audio.muted)
        if store is not None:
            self.state.best = store.load_best()
            self.state.player_name = store.load_name()
        # Text being typed on the idle/over screens; committed on start
        self.name_draft = self.state.player_name

        self.avatar = Avatar(metrics)
        self.obstacles = ObstacleField(metrics, self.rng)
        self.particles = ParticleEmitter(lambda: self.sequencer.current, self.rng, clock or monotonic)
        self.compositor = Compositor(metrics)

    @property
    def mode(self) -> Mode:
        return self.state.mode

    @property
    def theme(self) -> Theme:
        return self.sequencer.current

    # Notices

    def notify(self, message: str) -> None:
        logger.info("%s", message)
        self.state.notice = message
        self.state.notice_time = TOAST_DURATION

    def _age_notice(self, dt: float) -> None:
        if self.state.notice is None:
            return
        self.state.notice_time -= dt
        if self.state.notice_time <= 0:
            self.state.notice = None
            self.state.notice_time = 0.0

    # Frame stepping

    def tick(self, timestamp: float) -> float:
        """Advance the simulation to ``timestamp`` (seconds); returns the dt used."""
        s = self.state
        if s.last_timestamp is None or s.needs_time_reset:
            s.last_timestamp = timestamp
            s.needs_time_reset = False
        dt = min(max(0.0, timestamp - s.last_timestamp), MAX_FRAME_DT)
        s.last_timestamp = timestamp
        s.elapsed += dt
        self._age_notice(dt)
        self.update(dt)
        return dt

    def update(self, dt: float) -> None:
        self.sequencer.advance(dt)
        s = self.state
        h = self.metrics.height
        scale = self.metrics.scale

        if s.mode == Mode.PAUSED:
            return
        if s.mode == Mode.IDLE:
            self.avatar.idle_bob(s.elapsed)
            self.particles.update(dt, h)
            return
        if s.mode == Mode.OVER:
            self.avatar.update(dt * GAMEOVER_TIME_SCALE, GRAVITY * scale, MAX_VELOCITY * scale)
            self.particles.update(dt, h)
            return

        s.speed = scroll_speed(s.score, scale)
        self.avatar.update(dt, GRAVITY * scale, MAX_VELOCITY * scale)
        self.obstacles.update(dt, s.speed, SPAWN_INTERVAL)
        self.particles.update(dt, h)

        if hits_bounds(self.avatar, self.metrics) or self.obstacles.check_collisions(self.avatar):
            self.end()
            return

        earned = self.obstacles.claim_scores(self.avatar.x)
        if earned:
            self.add_score(earned)

    # Actions

    def ensure_audio(self) -> None:
        """Build the audio graph on the first user action; afterwards only resume it."""
        if self.audio.active:
            self.audio.resume()
            return
        if self.audio.activate(self.theme, self.state.mode):
            self.audio.set_muted(self.state.muted)

    def primary_action(self) -> None:
        """Space, click or tap: start a run, flap, or leave the pause."""
        self.ensure_audio()
        mode = self.state.mode
        if mode in (Mode.IDLE, Mode.OVER):
            self.set_player_name(self.name_draft)
            self.start()
            self.flap()
        elif mode == Mode.RUNNING:
            self.flap()
        elif mode == Mode.PAUSED:
            self.resume()

    def flap(self) -> None:
        if self.state.mode != Mode.RUNNING:
            return
        scale = self.metrics.scale
        avatar = self.avatar
        avatar.flap(FLAP_IMPULSE * scale)
        self.particles.emit_flap(avatar.x - avatar.radius * 0.4, avatar.y + avatar.radius * 0.2, scale)
        self.audio.play_flap()

    def add_score(self, earned: int) -> None:
        s = self.state
        scale = self.metrics.scale
        self.particles.emit_score(self.avatar.x + 12 * scale, self.avatar.y - 8 * scale, scale, s.elapsed)
        self.audio.play_score()
        for _ in range(earned):
            s.score += 1
            if self.sequencer.on_score(s.score):
                theme = self.theme
                self.audio.set_theme(theme, immediate=True)
                self.notify(f"{theme.emoji} New theme: {theme.label}")

    def start(self) -> None:
        s = self.state
        s.mode = Mode.RUNNING
        s.needs_time_reset = True
        s.score = 0
        s.speed = BASE_SPEED * self.metrics.scale
        self.sequencer.settle()
        self.particles.clear()
        self.obstacles.reset(obstacle_width_for(self.metrics))
        self.avatar.start()
        self.audio.handle_mode_change(Mode.RUNNING)
        logger.debug("Run started for %s", s.player_name)

    def end(self) -> None:
        s = self.state
        if s.mode != Mode.RUNNING:
            return
        s.mode = Mode.OVER
        scale = self.metrics.scale
        self.particles.emit_score(
            self.avatar.x, min(self.avatar.y, self.metrics.height - 60 * scale), scale, s.elapsed
        )
        new_best = s.score > s.best
        if new_best:
            s.best = s.score
            if self.store is not None:
                self.store.save_best(s.best)
        logger.info("Run over: %s scored %d (best %d)", s.player_name, s.score, s.best)

        notice = self.leaderboard.record(s.player_name, s.score)
        self.audio.play_game_over()
        self.audio.handle_mode_change(Mode.OVER)
        if new_best:
            self.notify("New personal best!")
        if notice:
            self.notify(notice)

        self.sequencer.force_reset(GAMEOVER_TRANSITION)
        self.audio.set_theme(self.theme, immediate=True)

    def pause(self) -> None:
        if self.state.mode != Mode.RUNNING:
            return
        self.state.mode = Mode.PAUSED
        self.audio.handle_mode_change(Mode.PAUSED)

    def resume(self) -> None:
        if self.state.mode != Mode.PAUSED:
            return
        self.state.mode = Mode.RUNNING
        self.state.needs_time_reset = True
        self.audio.handle_mode_change(Mode.RUNNING)

    def toggle_pause(self) -> None:
        if self.state.mode == Mode.RUNNING:
            self.pause()
        elif self.state.mode == Mode.PAUSED:
            self.resume()

    def toggle_mute(self) -> None:
        s = self.state
        s.muted = not s.muted
        if not s.muted:
            self.ensure_audio()
        self.audio.set_muted(s.muted)
        self.notify("Audio muted" if s.muted else "Audio on")

    def set_player_name(self, name: str) -> None:
        cleaned = sanitize_name(name)
        self.name_draft = cleaned
        if cleaned == self.state.player_name:
            return
        self.state.player_name = cleaned
        if self.store is not None:
            self.store.save_name(cleaned)

    def share_url(self, origin: str | None = None) -> str:
        return build_share_url(self.state.player_name, self.state.score, self.state.best, origin)

    # Viewport

    def resize(self, width: int, height: int) -> None:
        fresh = metrics_for(width, height)
        # Metrics is shared with the avatar, the field and the compositor
        self.metrics.width = fresh.width
        self.metrics.height = fresh.height
        self.metrics.scale = fresh.scale
        self.avatar.reset()
        self.obstacles.reset(obstacle_width_for(self.metrics))
        self.compositor.resize(self.metrics)
        if self.state.mode == Mode.RUNNING:
            self.state.speed = scroll_speed(self.state.score, self.metrics.scale)

    def render(self, surface: pygame.Surface, time: float) -> None:
        self.compositor.draw(
            surface,
            self.sequencer,
            time,
            self.obstacles.items,
            self.obstacles.width,
            self.particles,
            self.avatar,
            paused=self.state.mode == Mode.PAUSED,
        )
