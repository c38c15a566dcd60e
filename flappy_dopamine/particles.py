"""Short-lived burst particles emitted on flap, score and game over."""

from __future__ import annotations

import math
import random
from time import monotonic
from typing import Callable

import pygame

from .config import (
    FLAP_BURST,
    FLAP_LIFE,
    PARTICLE_CULL_MARGIN,
    PARTICLE_DAMPING,
    SCORE_BURST,
    SCORE_LIFE,
)
from .entities import Particle
from .themes import Theme
from .utils import hsla, lerp


class ParticleEmitter:
    """Stateful particle pool driven by stateless emission parameters.

    Hue is sampled from the active theme at emission time and frozen on the
    particle, so a theme switch never recolors particles already in flight.
    """

    def __init__(
        self,
        get_theme: Callable[[], Theme],
        rng: random.Random | None = None,
        clock: Callable[[], float] = monotonic,
    ) -> None:
        self.get_theme = get_theme
        self.rng = rng or random.Random()
        self.clock = clock
        self.items: list[Particle] = []

    def clear(self) -> None:
        self.items = []

    def emit_flap(self, x: float, y: float, scale: float) -> None:
        theme = self.get_theme()
        now = self.clock()
        for i in range(FLAP_BURST):
            # Screen y grows downward: angles in [0, pi] push the puff below the avatar
            angle = self.rng.random() * math.pi
            speed = scale * lerp(90.0, 230.0, self.rng.random())
            self.items.append(
                Particle(
                    x=x,
                    y=y,
                    vx=math.cos(angle) * speed,
                    vy=math.sin(angle) * speed,
                    life=FLAP_LIFE,
                    size=lerp(5.0, 9.0, self.rng.random()) * scale,
                    hue=theme.particle_hue(now, i) % 360.0,
                )
            )

    def emit_score(self, x: float, y: float, scale: float, time: float) -> None:
        theme = self.get_theme()
        for i in range(SCORE_BURST):
            angle = (math.tau * i) / SCORE_BURST + self.rng.random() * 0.4
            speed = scale * lerp(130.0, 260.0, self.rng.random())
            self.items.append(
                Particle(
                    x=x,
                    y=y,
                    vx=math.cos(angle) * speed,
                    vy=math.sin(angle) * speed,
                    life=SCORE_LIFE,
                    size=lerp(6.0, 12.0, self.rng.random()) * scale,
                    hue=theme.particle_hue(time, i) % 360.0,
                )
            )

    def update(self, dt: float, height: float) -> None:
        alive: list[Particle] = []
        for p in self.items:
            p.age += dt
            if p.age >= p.life:
                continue
            p.x += p.vx * dt
            p.y += p.vy * dt
            # Per-step damping: decay depends on frame rate
            p.vx *= PARTICLE_DAMPING
            p.vy *= PARTICLE_DAMPING
            if p.y < height + PARTICLE_CULL_MARGIN:
                alive.append(p)
        self.items = alive

    def draw(self, surf: pygame.Surface) -> None:
        for p in self.items:
            w = max(2, int(p.size * 2))
            h = max(2, int(p.size * 2 * 0.62))
            s = pygame.Surface((w, h), pygame.SRCALPHA)
            pygame.draw.ellipse(s, hsla(p.hue, 90, 70, p.alpha), s.get_rect())
            surf.blit(s, (int(p.x - w / 2), int(p.y - h / 2)))
