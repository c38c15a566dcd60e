"""Frame composition: theme crossfades, accent auras and entity sprites.

The compositor never mutates game state. During a crossfade the previous
theme's background is drawn straight to the frame and the current one is drawn
into an offscreen layer blended on top with alpha ``eased``.
"""

from __future__ import annotations

import math
from functools import lru_cache
from typing import Iterable

import numpy as np
import pygame

from .config import OVERLAY_TINT
from .entities import Avatar, Metrics, Obstacle
from .particles import ParticleEmitter
from .themes import Theme, ThemeSequencer
from .utils import glow_surface, hex_to_rgb, scale_color


@lru_cache(maxsize=16)
def _band_surface(width: int, height: int, rgb: tuple[int, int, int]) -> pygame.Surface:
    """Horizontal band whose alpha peaks in the middle and fades to both ends."""
    width, height = max(2, width), max(1, height)
    surf = pygame.Surface((width, height), pygame.SRCALPHA)
    surf.fill((*rgb, 0))
    ramp = 1.0 - np.abs(np.linspace(-1.0, 1.0, width, dtype=np.float32))
    pixels = pygame.surfarray.pixels_alpha(surf)
    pixels[:, :] = (ramp * 255.0).astype(np.uint8)[:, np.newaxis]
    del pixels
    return surf


@lru_cache(maxsize=3)
def _aura_glow(size: int, rgb: tuple[int, int, int]) -> pygame.Surface:
    # Built at quarter resolution; the falloff is smooth enough to upscale
    return pygame.transform.smoothscale(glow_surface(max(2, size // 4), rgb, 1.0), (size, size))


def draw_aura(surface: pygame.Surface, time: float, width: int, height: int, color: str, intensity: float) -> None:
    """Soft accent-colored glow plus three slowly swaying light bands."""
    if intensity <= 0:
        return
    rgb = hex_to_rgb(color)
    size = int(max(width, height) * 1.3)
    glow = _aura_glow(size, rgb)
    glow.set_alpha(int(min(1.0, 0.12 * intensity * 2.0) * 255))
    surface.blit(glow, (int(width / 2 - size / 2), int(height * 0.45 - size / 2)))

    for i in range(3):
        band_height = int(height * (0.18 + i * 0.08))
        offset_y = height * 0.25 + i * 70 + math.sin(time * (0.9 + i * 0.15) + i) * 32
        angle = math.degrees(math.sin(time * 0.3 + i) * 0.18)
        band = pygame.transform.rotate(_band_surface(width * 2, band_height, rgb), angle)
        band.set_alpha(int(min(1.0, 0.16 * intensity) * 255))
        surface.blit(band, band.get_rect(center=(width // 2, int(offset_y))))


def draw_transition_overlay(
    surface: pygame.Surface,
    time: float,
    width: int,
    height: int,
    from_color: str,
    to_color: str,
    progress: float,
) -> None:
    """Additive rings of the outgoing accent and arcs of the incoming one."""
    layer = _ring_layer(width, height)
    layer.fill((0, 0, 0))
    centre = (width / 2, height / 2)
    fade_out = 0.4 * (1 - progress) * 0.2 * (1 - progress)
    fade_in = 0.45 * progress * 0.3 * progress
    from_rgb = scale_color(hex_to_rgb(from_color), fade_out)
    to_rgb = scale_color(hex_to_rgb(to_color), fade_in)
    for i in range(4):
        radius = width * (0.25 + i * 0.12) * (1 + 0.12 * math.sin(time * 1.4 + i))
        pygame.draw.circle(layer, from_rgb, centre, radius, 2 + i)
    for i in range(4):
        radius = width * (0.18 + i * 0.1)
        start = math.sin(time * 1.6 + i) * math.pi * 0.6
        rect = pygame.Rect(0, 0, int(radius * 2), int(radius * 2))
        rect.center = (int(centre[0]), int(centre[1]))
        pygame.draw.arc(layer, to_rgb, rect, start, start + math.pi * 1.2, int(1.5 + i))
    surface.blit(layer, (0, 0), special_flags=pygame.BLEND_RGB_ADD)


@lru_cache(maxsize=2)
def _ring_layer(width: int, height: int) -> pygame.Surface:
    return pygame.Surface((max(1, width), max(1, height)))


class Compositor:
    """Draws one frame of the scene for the active (and fading) theme."""

    def __init__(self, metrics: Metrics) -> None:
        self.metrics = metrics
        self._layer: pygame.Surface | None = None
        self._tint: pygame.Surface | None = None

    def resize(self, metrics: Metrics) -> None:
        self.metrics = metrics
        self._layer = None
        self._tint = None

    def _fade_layer(self) -> pygame.Surface:
        size = (self.metrics.width, self.metrics.height)
        if self._layer is None or self._layer.get_size() != size:
            self._layer = pygame.Surface(size)
        return self._layer

    def draw_backdrop(self, surface: pygame.Surface, sequencer: ThemeSequencer, time: float) -> None:
        w, h = self.metrics.width, self.metrics.height
        current = sequencer.current
        if sequencer.in_transition:
            previous = sequencer.previous
            eased = sequencer.eased
            previous.draw_background(surface, time, w, h)
            layer = self._fade_layer()
            current.draw_background(layer, time, w, h)
            layer.set_alpha(int(eased * 255))
            surface.blit(layer, (0, 0))
            draw_aura(surface, time - 0.3, w, h, previous.accent_color, (1 - eased) * 0.6)
            draw_aura(surface, time, w, h, current.accent_color, eased * 0.85)
            draw_transition_overlay(surface, time, w, h, previous.accent_color, current.accent_color, eased)
        else:
            current.draw_background(surface, time, w, h)
            draw_aura(surface, time, w, h, current.accent_color, 0.7)

    def draw_obstacles(
        self, surface: pygame.Surface, theme: Theme, obstacles: Iterable[Obstacle], width: float, time: float
    ) -> None:
        for obstacle in obstacles:
            theme.draw_obstacle(surface, obstacle, self.metrics.height, time, width)

    def draw_avatar(self, surface: pygame.Surface, theme: Theme, avatar: Avatar, time: float) -> None:
        size = int(avatar.radius * 4) + 4
        sprite = pygame.Surface((size, size), pygame.SRCALPHA)
        theme.draw_avatar(sprite, time, avatar.radius)
        # Positive rotation tilts the nose down on screen; pygame rotates counter-clockwise
        rotated = pygame.transform.rotate(sprite, -math.degrees(avatar.rotation))
        surface.blit(rotated, rotated.get_rect(center=(int(avatar.x), int(avatar.y))))

    def draw_pause_tint(self, surface: pygame.Surface) -> None:
        if self._tint is None:
            self._tint = pygame.Surface((self.metrics.width, self.metrics.height), pygame.SRCALPHA)
            self._tint.fill(OVERLAY_TINT)
        surface.blit(self._tint, (0, 0))

    def draw(
        self,
        surface: pygame.Surface,
        sequencer: ThemeSequencer,
        time: float,
        obstacles: Iterable[Obstacle],
        obstacle_width: float,
        particles: ParticleEmitter,
        avatar: Avatar,
        paused: bool = False,
    ) -> None:
        theme = sequencer.current
        self.draw_backdrop(surface, sequencer, time)
        self.draw_obstacles(surface, theme, obstacles, obstacle_width, time)
        particles.draw(surface)
        self.draw_avatar(surface, theme, avatar, time)
        if paused:
            self.draw_pause_tint(surface)
