"""The built-in visual and sonic themes, in play order.

Every theme draws with plain pygame primitives. Backgrounds fill the whole
target surface; obstacle callbacks draw both bars of one obstacle; avatar
callbacks draw onto a transparent surface whose centre is the avatar centre
(the compositor rotates and places it). Decorative positions come from fixed
seeds so the scenery does not flicker between frames.
"""

from __future__ import annotations

import math
import random
from functools import lru_cache

import pygame

from .entities import Obstacle
from .themes import Theme
from .utils import glow_surface, hsla, sky_gradient

_rng = random.Random(1337)
_STARS = [(_rng.random(), _rng.random(), _rng.random()) for _ in range(90)]
_EMBERS = [(_rng.random(), _rng.random(), _rng.random()) for _ in range(40)]
_FLAKES = [(_rng.random(), _rng.random(), _rng.random()) for _ in range(70)]
_PETALS = [(_rng.random(), _rng.random(), _rng.random()) for _ in range(36)]
_FIREFLIES = [(_rng.random(), _rng.random(), _rng.random()) for _ in range(24)]

_SKIES = {
    "dino": [(0.0, (247, 215, 154)), (0.5, (240, 168, 111)), (1.0, (91, 63, 43))],
    "cyber": [(0.0, (8, 3, 34)), (0.5, (17, 6, 56)), (1.0, (2, 31, 63))],
    "fire": [(0.0, (34, 1, 2)), (0.5, (74, 10, 5)), (1.0, (11, 2, 2))],
    "forest": [(0.0, (243, 247, 192)), (0.4, (155, 208, 143)), (1.0, (11, 75, 46))],
    "frozen": [(0.0, (10, 24, 69)), (0.4, (18, 60, 116)), (1.0, (208, 236, 255))],
    "cosmic": [(0.0, (5, 1, 24)), (0.5, (18, 3, 59)), (1.0, (3, 20, 40))],
    "pirate": [(0.0, (6, 27, 58)), (0.45, (12, 45, 85)), (1.0, (5, 11, 22))],
    "nocturne": [(0.0, (1, 1, 3)), (0.5, (6, 7, 18)), (1.0, (2, 1, 4))],
    "sakura": [(0.0, (45, 15, 77)), (0.4, (100, 42, 109)), (1.0, (244, 188, 214))],
}


@lru_cache(maxsize=32)
def _sky(theme_id: str, w: int, h: int) -> pygame.Surface:
    return sky_gradient((w, h), _SKIES[theme_id])


@lru_cache(maxsize=4)
def _overlay_surface(w: int, h: int) -> pygame.Surface:
    return pygame.Surface((max(1, w), max(1, h)), pygame.SRCALPHA)


def _overlay(w: int, h: int) -> pygame.Surface:
    """A cleared full-size scratch layer for translucent shapes."""
    layer = _overlay_surface(w, h)
    layer.fill((0, 0, 0, 0))
    return layer


def _glow(surf: pygame.Surface, x: float, y: float, radius: float, rgb: tuple[int, int, int], alpha: float) -> None:
    size = max(2, int(radius * 2))
    glow = glow_surface(size, rgb)
    glow.set_alpha(int(max(0.0, min(1.0, alpha)) * 255))
    surf.blit(glow, (int(x - size / 2), int(y - size / 2)))


def _bars(obstacle: Obstacle, h: int, width: float, inset: float = 0.0) -> tuple[pygame.Rect, pygame.Rect]:
    x = int(obstacle.x + inset)
    w = max(1, int(width - inset * 2))
    top = pygame.Rect(x, 0, w, max(0, int(obstacle.top)))
    bottom = pygame.Rect(x, int(obstacle.bottom), w, max(0, h - int(obstacle.bottom)))
    return top, bottom


def _centre(surf: pygame.Surface) -> tuple[float, float]:
    return surf.get_width() / 2.0, surf.get_height() / 2.0


def _ellipse(surf: pygame.Surface, color, cx: float, cy: float, rx: float, ry: float) -> None:
    pygame.draw.ellipse(surf, color, pygame.Rect(int(cx - rx), int(cy - ry), max(1, int(rx * 2)), max(1, int(ry * 2))))


# Neon ----------------------------------------------------------------------


def _neon_background(surf: pygame.Surface, time: float, w: int, h: int) -> None:
    t = time * 0.8
    stops = [
        (0.0, tuple(hsla(t * 60, 85, 55))[:3]),
        (0.5, tuple(hsla(t * 90 + 120, 80, 45))[:3]),
        (1.0, tuple(hsla(t * 120 + 240, 90, 35))[:3]),
    ]
    surf.blit(sky_gradient((w, h), stops), (0, 0))
    layer = _overlay(w, h)
    for i in range(6):
        amplitude = 40 + i * 14
        frequency = 0.006 + i * 0.002
        speed = 0.6 + i * 0.25
        offset = math.sin(t * speed + i * 0.8) * 100
        points = [
            (x, h / 2 + math.sin(x * frequency + t * speed) * amplitude + offset)
            for x in range(-100, w + 101, 18)
        ]
        pygame.draw.lines(layer, hsla(t * 80 + i * 60, 90, 65, 0.08 + i * 0.06), False, points, 8)
    surf.blit(layer, (0, 0))


def _neon_obstacle(surf: pygame.Surface, obstacle: Obstacle, h: int, time: float, width: float) -> None:
    base = time * 50 + obstacle.seed * 360
    top, bottom = _bars(obstacle, h, width)
    pygame.draw.rect(surf, hsla(base, 80, 62), top)
    pygame.draw.rect(surf, hsla(base + 60, 90, 45), bottom)
    strip = pygame.Surface((12, h), pygame.SRCALPHA)
    strip.fill(hsla(base, 90, 65, 0.25))
    surf.blit(strip, (int(obstacle.x) - 12, 0))


def _neon_avatar(surf: pygame.Surface, time: float, radius: float) -> None:
    cx, cy = _centre(surf)
    k = radius / 24.0
    hue = time * 120
    _ellipse(surf, hsla(hue + 120, 85, 50, 0.95), cx, cy, 24 * k, 24 * 0.82 * k)
    _ellipse(surf, hsla(hue, 90, 75, 0.95), cx, cy - 4 * k, 16 * k, 13 * k)
    _ellipse(surf, hsla(hue + 200, 80, 65, 0.85), cx - 10 * k, cy - 6 * k, 18 * k, 10 * k)
    beak = [(cx + 19 * k, cy - 6 * k), (cx + 34 * k, cy), (cx + 19 * k, cy + 8 * k)]
    pygame.draw.polygon(surf, hsla(hue + 40, 90, 65, 0.9), beak)
    pygame.draw.circle(surf, (255, 255, 255, 217), (cx + 5 * k, cy - 10 * k), 8 * k)
    pygame.draw.circle(surf, (30, 30, 30, 230), (cx + 12 * k, cy - 10 * k), 3 * k)


# Dino ----------------------------------------------------------------------


def _dino_background(surf: pygame.Surface, time: float, w: int, h: int) -> None:
    surf.blit(_sky("dino", w, h), (0, 0))
    _glow(surf, w * 0.65, h * 0.25 + math.sin(time * 0.6) * 12, 160, (255, 240, 200), 0.9)
    layer = _overlay(w, h)
    ridge = [(-160, h)]
    for x in range(-160, w + 161, 80):
        ridge.append((x, h * 0.7 + math.sin(time * 0.5 + x * 0.01) * 18 - (40 if x % 160 == 0 else 0)))
    ridge.append((w + 160, h))
    pygame.draw.polygon(layer, (120, 60, 30, 153), ridge)
    pygame.draw.polygon(layer, (70, 35, 18, 204), [(w * 0.2, h * 0.68), (w * 0.32, h * 0.42), (w * 0.44, h * 0.68)])
    for i in range(16):
        px = w * 0.32 + math.sin(time * 1.4 + i) * 18
        py = h * 0.42 - i * 14 - math.cos(time * 0.8 + i) * 6
        _ellipse(layer, (210, 120, 60, 64), px, py, 20 - i, 14 - i * 0.5)
    surf.blit(layer, (0, 0))


def _dino_obstacle(surf: pygame.Surface, obstacle: Obstacle, h: int, time: float, width: float) -> None:
    for rect in _bars(obstacle, h, width):
        pygame.draw.rect(surf, (73, 44, 16), rect)
    for rect in _bars(obstacle, h, width, inset=6):
        pygame.draw.rect(surf, (92, 58, 26), rect)
    x0, x1 = int(obstacle.x + 10), int(obstacle.x + width - 10)
    for y in list(range(18, int(obstacle.top) - 12, 26)) + list(range(int(obstacle.bottom) + 12, h - 18, 26)):
        pygame.draw.line(surf, (110, 76, 44), (x0, y), (x1, y - 4), 2)
    for rect in _bars(obstacle, h, width, inset=4):
        pygame.draw.rect(surf, (180, 150, 110), rect, 3)


def _dino_avatar(surf: pygame.Surface, time: float, radius: float) -> None:
    cx, cy = _centre(surf)
    k = radius / 24.0
    wing = math.sin(time * 9) * 12
    pygame.draw.polygon(surf, (90, 60, 35, 217), [(cx - 6 * k, cy + 6 * k), (cx - 2 * k, cy + 18 * k), (cx + 2 * k, cy + 6 * k)])
    pygame.draw.polygon(surf, (220, 140, 60, 230), [(cx - 30 * k, cy - 14 * k), (cx + 18 * k, cy - wing * k), (cx - 30 * k, cy + 14 * k)])
    _ellipse(surf, (225, 170, 110, 235), cx, cy, 26 * k, 18 * k)
    pygame.draw.circle(surf, (240, 220, 180, 242), (cx + 16 * k, cy - 4 * k), 6 * k)
    pygame.draw.circle(surf, (30, 25, 20, 242), (cx + 18 * k, cy - 4 * k), 3 * k)
    pygame.draw.polygon(surf, (220, 140, 60, 230), [(cx + 26 * k, cy - 2 * k), (cx + 38 * k, cy), (cx + 26 * k, cy + 2 * k)])


# Cyber ---------------------------------------------------------------------


def _cyber_background(surf: pygame.Surface, time: float, w: int, h: int) -> None:
    surf.blit(_sky("cyber", w, h), (0, 0))
    layer = _overlay(w, h)
    horizon = h * 0.55
    for i in range(14):
        depth = ((i + time * 0.8) % 14) / 14.0
        y = horizon + (h - horizon) * depth * depth
        pygame.draw.line(layer, (0, 255, 200, int(30 + 90 * depth)), (0, y), (w, y), 2)
    for i in range(-12, 13):
        pygame.draw.line(layer, (0, 200, 255, 70), (w / 2 + i * 24, horizon), (w / 2 + i * w * 0.12, h), 1)
    for i in range(5):
        y = (time * 120 + i * h / 5) % h
        pygame.draw.line(layer, (0, 255, 200, 40), (0, y), (w, y), 3)
    surf.blit(layer, (0, 0))


def _cyber_obstacle(surf: pygame.Surface, obstacle: Obstacle, h: int, time: float, width: float) -> None:
    pulse = 0.5 + 0.5 * math.sin(time * 6 + obstacle.seed * 10)
    for rect in _bars(obstacle, h, width):
        pygame.draw.rect(surf, (10, 14, 40), rect)
        pygame.draw.rect(surf, (0, int(160 + 95 * pulse), 230), rect, 3)
    for rect in _bars(obstacle, h, width, inset=width * 0.3):
        pygame.draw.rect(surf, (0, 120, 255), rect, 1)


def _cyber_avatar(surf: pygame.Surface, time: float, radius: float) -> None:
    cx, cy = _centre(surf)
    k = radius / 24.0
    _ellipse(surf, (0, 120, 255, 230), cx, cy, 25 * k, 19 * k)
    _ellipse(surf, (0, 255, 255, 230), cx + 2 * k, cy - 3 * k, 18 * k, 12 * k)
    visor = pygame.Rect(int(cx + 2 * k), int(cy - 9 * k), max(1, int(20 * k)), max(1, int(7 * k)))
    pygame.draw.rect(surf, (10, 10, 30, 240), visor, border_radius=max(1, int(3 * k)))
    blink = int(150 + 105 * (0.5 + 0.5 * math.sin(time * 10)))
    pygame.draw.line(surf, (255, 60, 200, blink), visor.midleft, visor.midright, max(1, int(2 * k)))
    pygame.draw.polygon(surf, (0, 200, 255, 200), [(cx - 22 * k, cy), (cx - 36 * k, cy - 10 * k), (cx - 30 * k, cy + 6 * k)])


# Fire ----------------------------------------------------------------------


def _fire_background(surf: pygame.Surface, time: float, w: int, h: int) -> None:
    surf.blit(_sky("fire", w, h), (0, 0))
    _glow(surf, w * 0.5, h * 1.05, w * 0.6, (255, 80, 30), 0.55 + 0.15 * math.sin(time * 2))
    layer = _overlay(w, h)
    for fx, fy, fs in _EMBERS:
        y = h - ((fy * h + time * (40 + fs * 80)) % (h + 40))
        x = fx * w + math.sin(time * 2 + fs * 12) * 20
        pygame.draw.circle(layer, (255, int(120 + fs * 100), 50, int(120 + fs * 100)), (x, y), 1.5 + fs * 2.5)
    surf.blit(layer, (0, 0))


def _fire_obstacle(surf: pygame.Surface, obstacle: Obstacle, h: int, time: float, width: float) -> None:
    for rect in _bars(obstacle, h, width):
        pygame.draw.rect(surf, (28, 6, 3), rect)
    glow = int(140 + 100 * (0.5 + 0.5 * math.sin(time * 4 + obstacle.seed * 8)))
    x = obstacle.x + width * (0.3 + obstacle.seed * 0.4)
    pygame.draw.line(surf, (255, glow // 2, 20), (x, 0), (x + 8, obstacle.top * 0.6), 3)
    pygame.draw.line(surf, (255, glow // 2, 20), (x - 6, h), (x + 4, obstacle.bottom + (h - obstacle.bottom) * 0.4), 3)
    pygame.draw.rect(surf, (255, glow, 60), pygame.Rect(int(obstacle.x), int(obstacle.top) - 6, int(width), 6))
    pygame.draw.rect(surf, (255, glow, 60), pygame.Rect(int(obstacle.x), int(obstacle.bottom), int(width), 6))


def _fire_avatar(surf: pygame.Surface, time: float, radius: float) -> None:
    cx, cy = _centre(surf)
    k = radius / 24.0
    flicker = math.sin(time * 14) * 4
    tail = [(cx - 18 * k, cy - 8 * k), (cx - (40 + flicker) * k, cy), (cx - 18 * k, cy + 10 * k)]
    pygame.draw.polygon(surf, (255, 120, 30, 200), tail)
    _ellipse(surf, (255, 70, 20, 242), cx, cy, 24 * k, 19 * k)
    _ellipse(surf, (255, 200, 60, 242), cx + 3 * k, cy - 3 * k, 16 * k, 12 * k)
    pygame.draw.circle(surf, (255, 250, 220, 240), (cx + 10 * k, cy - 7 * k), 5 * k)
    pygame.draw.circle(surf, (60, 10, 0, 240), (cx + 12 * k, cy - 7 * k), 2.5 * k)
    pygame.draw.polygon(surf, (255, 220, 120, 230), [(cx + 22 * k, cy - 3 * k), (cx + 32 * k, cy + 1 * k), (cx + 22 * k, cy + 5 * k)])


# Forest --------------------------------------------------------------------


def _forest_background(surf: pygame.Surface, time: float, w: int, h: int) -> None:
    surf.blit(_sky("forest", w, h), (0, 0))
    layer = _overlay(w, h)
    for layer_index, shade in enumerate(((40, 110, 70, 170), (20, 80, 50, 220)), start=1):
        spacing = 140 / layer_index
        drift = (time * 12 * layer_index) % spacing
        for i in range(int(w / spacing) + 3):
            x = i * spacing - drift
            top = h * (0.45 + 0.1 * layer_index) + math.sin(i * 1.7) * 20
            pygame.draw.polygon(layer, shade, [(x - 40, h), (x, top), (x + 40, h)])
    for fx, fy, fs in _FIREFLIES:
        x = fx * w + math.sin(time * (0.5 + fs) + fx * 10) * 30
        y = fy * h * 0.8 + math.cos(time * (0.7 + fs) + fy * 10) * 20
        pygame.draw.circle(layer, (255, 250, 170, int(120 + 120 * abs(math.sin(time * 3 + fs * 9)))), (x, y), 2 + fs * 2)
    surf.blit(layer, (0, 0))


def _forest_obstacle(surf: pygame.Surface, obstacle: Obstacle, h: int, time: float, width: float) -> None:
    for rect in _bars(obstacle, h, width, inset=width * 0.18):
        pygame.draw.rect(surf, (92, 62, 38), rect)
        pygame.draw.rect(surf, (70, 46, 28), rect, 3)
    sway = math.sin(time * 1.5 + obstacle.seed * 6) * 4
    cx = obstacle.x + width / 2 + sway
    for dy, r in ((0, 0.55), (-18, 0.45), (-32, 0.35)):
        pygame.draw.circle(surf, (46, 120, 60), (cx, obstacle.top + dy), width * r)
    for dy, r in ((0, 0.5), (16, 0.4)):
        pygame.draw.circle(surf, (60, 140, 72), (cx, obstacle.bottom + dy), width * r)


def _forest_avatar(surf: pygame.Surface, time: float, radius: float) -> None:
    cx, cy = _centre(surf)
    k = radius / 24.0
    wing = math.sin(time * 10) * 8
    _ellipse(surf, (80, 140, 70, 242), cx, cy, 24 * k, 20 * k)
    _ellipse(surf, (255, 245, 170, 242), cx + 4 * k, cy + 2 * k, 14 * k, 12 * k)
    pygame.draw.polygon(surf, (60, 110, 50, 230), [(cx - 6 * k, cy - 2 * k), (cx - 26 * k, cy - (10 + wing) * k), (cx - 18 * k, cy + 6 * k)])
    pygame.draw.circle(surf, (255, 255, 255, 230), (cx + 10 * k, cy - 8 * k), 5 * k)
    pygame.draw.circle(surf, (20, 30, 20, 240), (cx + 12 * k, cy - 8 * k), 2.5 * k)
    pygame.draw.polygon(surf, (240, 170, 60, 240), [(cx + 21 * k, cy - 4 * k), (cx + 31 * k, cy), (cx + 21 * k, cy + 3 * k)])


# Frozen --------------------------------------------------------------------


def _frozen_background(surf: pygame.Surface, time: float, w: int, h: int) -> None:
    surf.blit(_sky("frozen", w, h), (0, 0))
    layer = _overlay(w, h)
    for band in range(3):
        points = [
            (x, h * (0.22 + band * 0.07) + math.sin(x * 0.004 + time * (0.4 + band * 0.15)) * 40)
            for x in range(-20, w + 21, 24)
        ]
        pygame.draw.lines(layer, (120, 255, 255, 70 - band * 15), False, points, 26 - band * 6)
    for fx, fy, fs in _FLAKES:
        y = (fy * h + time * (20 + fs * 50)) % h
        x = (fx * w + math.sin(time + fs * 20) * 15) % w
        pygame.draw.circle(layer, (240, 250, 255, int(120 + fs * 120)), (x, y), 1 + fs * 2.5)
    surf.blit(layer, (0, 0))


def _frozen_obstacle(surf: pygame.Surface, obstacle: Obstacle, h: int, time: float, width: float) -> None:
    top, bottom = _bars(obstacle, h, width)
    pygame.draw.rect(surf, (120, 180, 255), top)
    pygame.draw.rect(surf, (120, 180, 255), bottom)
    for rect in _bars(obstacle, h, width, inset=width * 0.22):
        pygame.draw.rect(surf, (200, 235, 255), rect)
    tip = width / 2
    pygame.draw.polygon(
        surf,
        (200, 235, 255),
        [(obstacle.x, obstacle.top), (obstacle.x + tip, obstacle.top + 18), (obstacle.x + width, obstacle.top)],
    )
    pygame.draw.rect(surf, (40, 80, 140), top, 2)
    pygame.draw.rect(surf, (40, 80, 140), bottom, 2)


def _frozen_avatar(surf: pygame.Surface, time: float, radius: float) -> None:
    cx, cy = _centre(surf)
    k = radius / 24.0
    _ellipse(surf, (170, 215, 255, 242), cx, cy, 23 * k, 21 * k)
    _ellipse(surf, (235, 248, 255, 242), cx + 3 * k, cy + 3 * k, 14 * k, 13 * k)
    for dx in (4, 14):
        pygame.draw.circle(surf, (255, 255, 255, 240), (cx + dx * k, cy - 7 * k), 5 * k)
        pygame.draw.circle(surf, (20, 40, 80, 240), (cx + (dx + 1) * k, cy - 7 * k), 2.5 * k)
    pygame.draw.polygon(surf, (255, 190, 90, 240), [(cx + 7 * k, cy - 1 * k), (cx + 11 * k, cy + 6 * k), (cx + 13 * k, cy - 1 * k)])
    _glow(surf, cx, cy, 30 * k, (160, 230, 255), 0.25 + 0.1 * math.sin(time * 3))


# Cosmic --------------------------------------------------------------------


def _cosmic_background(surf: pygame.Surface, time: float, w: int, h: int) -> None:
    surf.blit(_sky("cosmic", w, h), (0, 0))
    for i in range(3):
        x = w * (0.2 + i * 0.3) + math.sin(time * 0.2 + i) * 60
        y = h * (0.3 + (i % 2) * 0.3) + math.cos(time * 0.15 + i) * 40
        _glow(surf, x, y, 220 + i * 40, (120 + i * 20, 60 + i * 10, 255), 0.35)
    layer = _overlay(w, h)
    for sx, sy, ss in _STARS:
        twinkle = 0.4 + 0.6 * abs(math.sin(time * (1 + ss * 2) + ss * 30))
        x = (sx * w - time * 8 * (0.5 + ss)) % w
        pygame.draw.circle(layer, (255, 255, 255, int(255 * twinkle)), (x, sy * h), 0.6 + ss * 1.6)
    surf.blit(layer, (0, 0))


def _cosmic_obstacle(surf: pygame.Surface, obstacle: Obstacle, h: int, time: float, width: float) -> None:
    for rect in _bars(obstacle, h, width):
        pygame.draw.rect(surf, (30, 16, 70), rect)
        pygame.draw.rect(surf, (120, 80, 255), rect, 3)
    for rect in _bars(obstacle, h, width, inset=width * 0.42):
        pygame.draw.rect(surf, (0, 255, 210), rect)
    _glow(surf, obstacle.x + width / 2, obstacle.top, width * 0.8, (150, 90, 255), 0.6)
    _glow(surf, obstacle.x + width / 2, obstacle.bottom, width * 0.8, (150, 90, 255), 0.6)


def _cosmic_avatar(surf: pygame.Surface, time: float, radius: float) -> None:
    cx, cy = _centre(surf)
    k = radius / 24.0
    _glow(surf, cx, cy, 34 * k, (150, 90, 255), 0.8)
    pygame.draw.circle(surf, (255, 230, 250, 242), (cx, cy), 16 * k)
    ring = pygame.Rect(int(cx - 28 * k), int(cy - 8 * k), max(1, int(56 * k)), max(1, int(16 * k)))
    pygame.draw.ellipse(surf, (0, 255, 210, 200), ring, max(1, int(2 * k)))
    orbit = time * 4
    pygame.draw.circle(surf, (255, 255, 255, 230), (cx + math.cos(orbit) * 26 * k, cy + math.sin(orbit) * 7 * k), 2.5 * k)
    pygame.draw.circle(surf, (40, 10, 80, 240), (cx + 6 * k, cy - 4 * k), 3 * k)


# Pirate --------------------------------------------------------------------


def _pirate_background(surf: pygame.Surface, time: float, w: int, h: int) -> None:
    surf.blit(_sky("pirate", w, h), (0, 0))
    _glow(surf, w * 0.78, h * 0.2, 120, (255, 255, 220), 0.95)
    pygame.draw.circle(surf, (250, 248, 220), (w * 0.78, h * 0.2), 34)
    sea_top = h * 0.68
    for i in range(4):
        points = [(0, h)]
        for x in range(0, w + 31, 30):
            points.append((x, sea_top + i * 22 + math.sin(x * 0.02 + time * (1.2 + i * 0.3)) * (8 - i)))
        points.append((w, h))
        pygame.draw.polygon(surf, (8 - i * 2, 41 - i * 6, 70 - i * 12), points)


def _pirate_obstacle(surf: pygame.Surface, obstacle: Obstacle, h: int, time: float, width: float) -> None:
    for rect in _bars(obstacle, h, width):
        pygame.draw.rect(surf, (44, 28, 18), rect)
        for i in range(1, 4):
            x = rect.x + rect.width * i / 4
            pygame.draw.line(surf, (32, 20, 12), (x, rect.top), (x, rect.bottom), 2)
        pygame.draw.rect(surf, (140, 110, 60), rect, 3)
    lantern = 0.5 + 0.5 * math.sin(time * 3 + obstacle.seed * 9)
    _glow(surf, obstacle.x + width / 2, obstacle.top - 10, 40, (255, 200, 90), 0.4 + 0.4 * lantern)


def _pirate_avatar(surf: pygame.Surface, time: float, radius: float) -> None:
    cx, cy = _centre(surf)
    k = radius / 24.0
    wing = math.sin(time * 11) * 9
    _ellipse(surf, (20, 60, 110, 242), cx, cy, 24 * k, 19 * k)
    _ellipse(surf, (60, 110, 180, 242), cx + 2 * k, cy - 2 * k, 17 * k, 13 * k)
    pygame.draw.polygon(surf, (230, 60, 50, 230), [(cx - 8 * k, cy), (cx - 28 * k, cy - (8 + wing) * k), (cx - 22 * k, cy + 8 * k)])
    pygame.draw.circle(surf, (255, 255, 255, 240), (cx + 10 * k, cy - 7 * k), 5 * k)
    pygame.draw.circle(surf, (10, 10, 10, 240), (cx + 11 * k, cy - 7 * k), 2.5 * k)
    pygame.draw.polygon(surf, (250, 200, 60, 240), [(cx + 20 * k, cy - 5 * k), (cx + 32 * k, cy + 2 * k), (cx + 20 * k, cy + 6 * k)])
    pygame.draw.line(surf, (10, 10, 10, 240), (cx + 2 * k, cy - 14 * k), (cx + 18 * k, cy - 4 * k), max(1, int(2 * k)))


# Nocturne ------------------------------------------------------------------


def _nocturne_background(surf: pygame.Surface, time: float, w: int, h: int) -> None:
    surf.blit(_sky("nocturne", w, h), (0, 0))
    for i in range(18):
        x = (i * 97 + 30) % w
        depth = 40 + (i * 53) % 110
        pygame.draw.polygon(surf, (14, 14, 22), [(x - 18, 0), (x, depth), (x + 18, 0)])
    for i in range(7):
        x = (i * 181 + 60) % w
        glow = 0.35 + 0.25 * math.sin(time * 1.6 + i)
        _glow(surf, x, h - 20, 60, (140, 118, 255), glow)
        pygame.draw.ellipse(surf, (120, 100, 230), pygame.Rect(int(x - 12), int(h - 30), 24, 12))


def _nocturne_obstacle(surf: pygame.Surface, obstacle: Obstacle, h: int, time: float, width: float) -> None:
    for rect in _bars(obstacle, h, width):
        pygame.draw.rect(surf, (10, 10, 16), rect)
        pygame.draw.rect(surf, (26, 26, 38), rect, 4)
    drip = (time * 40 + obstacle.seed * 200) % 60
    x = obstacle.x + width * (0.25 + obstacle.seed * 0.5)
    pygame.draw.circle(surf, (140, 118, 255), (x, obstacle.top + drip), 3)


def _nocturne_avatar(surf: pygame.Surface, time: float, radius: float) -> None:
    cx, cy = _centre(surf)
    k = radius / 24.0
    flap = math.sin(time * 12) * 10
    for side in (-1, 1):
        wing = [
            (cx, cy - 2 * k),
            (cx + side * 34 * k, cy - (12 + flap) * k),
            (cx + side * 26 * k, cy + 2 * k),
            (cx + side * 16 * k, cy - 2 * k),
            (cx + side * 8 * k, cy + 6 * k),
        ]
        pygame.draw.polygon(surf, (60, 30, 120, 235), wing)
    _ellipse(surf, (110, 70, 200, 242), cx, cy, 13 * k, 15 * k)
    for dx in (-4, 4):
        pygame.draw.circle(surf, (255, 230, 120, 240), (cx + dx * k, cy - 4 * k), 2.5 * k)
    for side in (-1, 1):
        pygame.draw.polygon(surf, (110, 70, 200, 242), [(cx + side * 4 * k, cy - 12 * k), (cx + side * 9 * k, cy - 22 * k), (cx + side * 10 * k, cy - 9 * k)])


# Sakura --------------------------------------------------------------------


def _sakura_background(surf: pygame.Surface, time: float, w: int, h: int) -> None:
    surf.blit(_sky("sakura", w, h), (0, 0))
    layer = _overlay(w, h)
    ribbon = [(x, h * 0.35 + math.sin(x * 0.005 + time * 0.6) * 60) for x in range(-20, w + 21, 20)]
    pygame.draw.lines(layer, (255, 190, 230, 70), False, ribbon, 40)
    for px, py, ps in _PETALS:
        y = (py * h + time * (30 + ps * 40)) % h
        x = (px * w + math.sin(time * 1.2 + ps * 10) * 40 - time * 20) % w
        _ellipse(layer, (255, 180, 220, int(150 + ps * 100)), x, y, 4 + ps * 3, 2 + ps * 2)
    surf.blit(layer, (0, 0))


def _sakura_obstacle(surf: pygame.Surface, obstacle: Obstacle, h: int, time: float, width: float) -> None:
    for rect in _bars(obstacle, h, width, inset=width * 0.15):
        pygame.draw.rect(surf, (100, 48, 78), rect)
        pygame.draw.rect(surf, (80, 34, 62), rect, 3)
    cx = obstacle.x + width / 2
    for i in range(5):
        angle = i * 1.256 + obstacle.seed * 6
        bx = cx + math.cos(angle) * width * 0.35
        pygame.draw.circle(surf, (255, 170, 215), (bx, obstacle.top + math.sin(angle) * 10), width * 0.22)
        pygame.draw.circle(surf, (255, 190, 225), (bx, obstacle.bottom - math.sin(angle) * 10), width * 0.2)


def _sakura_avatar(surf: pygame.Surface, time: float, radius: float) -> None:
    cx, cy = _centre(surf)
    k = radius / 24.0
    wing = math.sin(time * 9) * 8
    _ellipse(surf, (220, 130, 200, 242), cx, cy, 24 * k, 19 * k)
    _ellipse(surf, (255, 190, 225, 242), cx + 3 * k, cy - 2 * k, 16 * k, 12 * k)
    pygame.draw.polygon(surf, (255, 220, 240, 220), [(cx - 6 * k, cy), (cx - 26 * k, cy - (12 + wing) * k), (cx - 20 * k, cy + 8 * k)])
    pygame.draw.circle(surf, (255, 255, 255, 240), (cx + 10 * k, cy - 6 * k), 5 * k)
    pygame.draw.circle(surf, (60, 20, 50, 240), (cx + 11 * k, cy - 6 * k), 2.5 * k)
    pygame.draw.polygon(surf, (255, 150, 120, 240), [(cx + 21 * k, cy - 3 * k), (cx + 30 * k, cy + 1 * k), (cx + 21 * k, cy + 4 * k)])


# Sound ---------------------------------------------------------------------


def _voice(type: str, frequency: float, detune: float, sweep: tuple[float, float], vibrato: tuple[float, float],
           filter: tuple[str, float, float], pan_depth: float, pan_offset: float | None = None) -> dict:
    voice = {
        "type": type,
        "frequency": frequency,
        "detune": detune,
        "sweep_frequency": sweep[0],
        "sweep_depth": sweep[1],
        "vibrato_frequency": vibrato[0],
        "vibrato_depth": vibrato[1],
        "filter": {"type": filter[0], "frequency": filter[1], "q": filter[2]},
        "pan_depth": pan_depth,
    }
    if pan_offset is not None:
        voice["pan_offset"] = pan_offset
    return voice


NEON_SOUND = {
    "ambient": {
        "voices": [
            _voice("sawtooth", 96, -14, (0.05, 160), (0.9, 7.5), ("lowpass", 620, 12), 0.8),
            _voice("sawtooth", 162, 12, (0.04, 180), (1.1, 5.5), ("lowpass", 580, 10), 0.65, 0.35),
            _voice("triangle", 220, -6, (0.06, 190), (0.7, 8.5), ("bandpass", 720, 8), 0.7, -0.45),
        ],
        "levels": {"idle": 0.32, "running": 0.9, "gameover": 0.22},
    },
    "flap": {"type": "triangle", "start_freq": 360, "peak_freq": 920, "end_freq": 210, "attack": 0.018,
             "max_gain": 0.48, "filter_frequency": 760},
    "score": {"shimmer_gain": 0.28, "high_mid": 1020, "high_end": 1400, "high_mid_time": 0.1, "high_end_time": 0.22},
    "gameover": {"start_freq": 520, "end_freq": 160, "filter_start": 1500, "filter_end": 260, "noise_amount": 0.42},
}

DINO_SOUND = {
    "ambient": {
        "voices": [
            _voice("triangle", 96, -10, (0.03, 90), (0.6, 4.5), ("lowpass", 520, 10), 0.4, -0.3),
            _voice("sine", 148, 6, (0.028, 120), (0.7, 6.5), ("lowpass", 480, 8), 0.45, 0.2),
            _voice("triangle", 198, -10, (0.025, 100), (0.55, 5), ("bandpass", 420, 6), 0.35, 0.45),
        ],
        "levels": {"idle": 0.3, "running": 0.75, "gameover": 0.2},
        "transition_time": 1.2,
    },
    "flap": {"type": "sine", "start_freq": 280, "peak_freq": 520, "end_freq": 200, "filter_type": "bandpass",
             "filter_frequency": 540, "filter_q": 6, "attack": 0.025, "max_gain": 0.38, "decay": 0.45},
    "score": {"high_type": "sine", "high_start": 520, "high_mid": 680, "high_end": 880, "high_mid_time": 0.14,
              "high_end_time": 0.3, "low_type": "triangle", "low_start": 260, "low_end": 340, "shimmer_gain": 0.18,
              "delay_time": 0.28, "feedback_gain": 0.26, "release": 0.75},
    "gameover": {"type": "triangle", "start_freq": 420, "end_freq": 120, "filter_type": "lowpass",
                 "filter_start": 1100, "filter_end": 200, "attack": 0.05, "max_gain": 0.48, "release": 1.2,
                 "noise_amount": 0.32},
}

CYBER_SOUND = {
    "ambient": {
        "voices": [
            _voice("square", 128, -6, (0.08, 120), (1.6, 4.5), ("bandpass", 880, 9), 0.5, -0.4),
            _voice("square", 196, 8, (0.06, 160), (1.2, 5.5), ("bandpass", 760, 8), 0.6, 0.3),
            _voice("sawtooth", 288, 2, (0.07, 140), (1.4, 6.5), ("highpass", 420, 7), 0.45),
        ],
        "levels": {"idle": 0.28, "running": 1.0, "gameover": 0.24},
        "transition_time": 0.6,
    },
    "flap": {"type": "square", "start_freq": 420, "peak_freq": 980, "end_freq": 240, "filter_type": "highpass",
             "filter_frequency": 860, "filter_q": 11, "attack": 0.015, "max_gain": 0.42, "decay": 0.32},
    "score": {"high_type": "square", "low_type": "square", "high_start": 720, "high_mid": 1080, "high_end": 1560,
              "high_mid_time": 0.1, "high_end_time": 0.24, "low_start": 320, "low_end": 560, "shimmer_gain": 0.22,
              "delay_time": 0.16, "feedback_gain": 0.34},
    "gameover": {"type": "square", "start_freq": 640, "end_freq": 220, "filter_type": "bandpass",
                 "filter_start": 1800, "filter_end": 380, "attack": 0.03, "max_gain": 0.5, "release": 1.0,
                 "noise_amount": 0.28},
}

FIRE_SOUND = {
    "ambient": {
        "voices": [
            _voice("sawtooth", 160, -8, (0.06, 180), (1.2, 6.5), ("bandpass", 960, 12), 0.45),
            _voice("triangle", 220, 6, (0.05, 160), (1.0, 5.5), ("bandpass", 840, 10), 0.55, -0.3),
            _voice("sawtooth", 320, -12, (0.045, 140), (1.4, 7.5), ("highpass", 500, 9), 0.5, 0.35),
        ],
        "levels": {"idle": 0.32, "running": 0.92, "gameover": 0.26},
        "transition_time": 0.5,
    },
    "flap": {"type": "sawtooth", "start_freq": 520, "peak_freq": 980, "end_freq": 280, "attack": 0.015,
             "max_gain": 0.5, "filter_type": "highpass", "filter_frequency": 860, "filter_q": 10},
    "score": {"shimmer_gain": 0.3, "high_type": "sawtooth", "high_start": 820, "high_mid": 1160, "high_end": 1680,
              "high_mid_time": 0.08, "high_end_time": 0.22, "low_type": "triangle", "low_start": 340,
              "low_end": 520, "delay_time": 0.18, "feedback_gain": 0.36},
    "gameover": {"type": "sawtooth", "start_freq": 720, "end_freq": 200, "filter_type": "bandpass",
                 "filter_start": 2000, "filter_end": 320, "noise_amount": 0.35, "attack": 0.02, "max_gain": 0.58,
                 "release": 1.1},
}

FOREST_SOUND = {
    "ambient": {
        "voices": [
            _voice("sine", 86, -4, (0.03, 110), (0.5, 5.5), ("lowpass", 520, 9), 0.4, -0.35),
            _voice("triangle", 148, 6, (0.028, 140), (0.7, 6.5), ("lowpass", 480, 8), 0.45, 0.2),
            _voice("sine", 198, -10, (0.025, 100), (0.55, 5), ("bandpass", 420, 6), 0.35, 0.45),
        ],
        "levels": {"idle": 0.3, "running": 0.75, "gameover": 0.2},
        "transition_time": 1.2,
    },
    "flap": {"type": "sine", "start_freq": 280, "peak_freq": 520, "end_freq": 200, "filter_type": "bandpass",
             "filter_frequency": 540, "filter_q": 6, "attack": 0.025, "max_gain": 0.38, "decay": 0.45},
    "score": {"high_type": "sine", "high_start": 520, "high_mid": 680, "high_end": 880, "high_mid_time": 0.14,
              "high_end_time": 0.3, "low_type": "triangle", "low_start": 260, "low_end": 340, "shimmer_gain": 0.18,
              "delay_time": 0.28, "feedback_gain": 0.26, "release": 0.75},
    "gameover": {"type": "triangle", "start_freq": 420, "end_freq": 120, "filter_type": "lowpass",
                 "filter_start": 1100, "filter_end": 200, "attack": 0.05, "max_gain": 0.48, "release": 1.2,
                 "noise_amount": 0.32},
}

FROZEN_SOUND = {
    "ambient": {
        "voices": [
            _voice("sine", 142, -6, (0.02, 120), (0.5, 5), ("lowpass", 520, 11), 0.45),
            _voice("triangle", 188, 4, (0.024, 130), (0.6, 6), ("bandpass", 620, 9), 0.4, 0.35),
            _voice("sawtooth", 248, 12, (0.03, 150), (0.7, 7), ("highpass", 380, 7), 0.6),
        ],
        "levels": {"idle": 0.28, "running": 0.82, "gameover": 0.22},
        "transition_time": 1.0,
    },
    "flap": {"type": "triangle", "start_freq": 320, "peak_freq": 620, "end_freq": 210, "filter_type": "bandpass",
             "filter_frequency": 600, "filter_q": 7, "attack": 0.02, "max_gain": 0.4, "decay": 0.42},
    "score": {"high_type": "sine", "high_start": 620, "high_mid": 840, "high_end": 1120, "high_mid_time": 0.16,
              "high_end_time": 0.3, "low_type": "triangle", "low_start": 320, "low_end": 420, "shimmer_gain": 0.2,
              "delay_time": 0.2, "feedback_gain": 0.22, "release": 0.72},
    "gameover": {"type": "triangle", "start_freq": 520, "end_freq": 160, "filter_type": "lowpass",
                 "filter_start": 1200, "filter_end": 260, "attack": 0.04, "max_gain": 0.5, "release": 1.1,
                 "noise_amount": 0.28},
}

COSMIC_SOUND = {
    "ambient": {
        "voices": [
            _voice("sine", 102, -12, (0.018, 160), (0.35, 9), ("lowpass", 480, 14), 0.55, -0.5),
            _voice("triangle", 182, 4, (0.022, 150), (0.48, 8), ("bandpass", 520, 10), 0.6, 0.5),
            _voice("sawtooth", 260, 14, (0.03, 180), (0.42, 10), ("bandpass", 680, 12), 0.7),
        ],
        "levels": {"idle": 0.34, "running": 0.92, "gameover": 0.24},
        "transition_time": 1.4,
    },
    "flap": {"type": "sine", "start_freq": 340, "peak_freq": 760, "end_freq": 180, "filter_type": "bandpass",
             "filter_frequency": 680, "filter_q": 7, "attack": 0.02, "max_gain": 0.4, "decay": 0.5},
    "score": {"high_type": "triangle", "high_start": 780, "high_mid": 1120, "high_end": 1480, "high_mid_time": 0.12,
              "high_end_time": 0.26, "low_type": "sine", "low_start": 320, "low_end": 480, "shimmer_gain": 0.24,
              "delay_time": 0.22, "feedback_gain": 0.28, "release": 0.68},
    "gameover": {"type": "sawtooth", "start_freq": 620, "end_freq": 160, "filter_type": "lowpass",
                 "filter_start": 1600, "filter_end": 280, "attack": 0.05, "max_gain": 0.52, "release": 1.2,
                 "noise_amount": 0.22},
}

PIRATE_SOUND = {
    "ambient": {
        "voices": [
            _voice("sine", 126, -4, (0.028, 120), (0.5, 4.5), ("bandpass", 420, 9), 0.45, -0.4),
            _voice("triangle", 182, 6, (0.024, 140), (0.64, 5.5), ("lowpass", 520, 8), 0.5, 0.4),
            _voice("sawtooth", 248, 12, (0.03, 160), (0.58, 6), ("highpass", 360, 7), 0.55),
        ],
        "levels": {"idle": 0.32, "running": 0.84, "gameover": 0.24},
        "transition_time": 1.0,
    },
    "flap": {"type": "sine", "start_freq": 300, "peak_freq": 560, "end_freq": 200, "filter_type": "bandpass",
             "filter_frequency": 520, "filter_q": 6, "attack": 0.02, "max_gain": 0.42, "decay": 0.4},
    "score": {"high_type": "triangle", "high_start": 640, "high_mid": 920, "high_end": 1220, "high_mid_time": 0.12,
              "high_end_time": 0.24, "low_type": "sine", "low_start": 320, "low_end": 460, "shimmer_gain": 0.2,
              "delay_time": 0.18, "feedback_gain": 0.24, "release": 0.6},
    "gameover": {"type": "triangle", "start_freq": 420, "end_freq": 150, "filter_type": "lowpass",
                 "filter_start": 1000, "filter_end": 240, "attack": 0.05, "max_gain": 0.48, "release": 1.0,
                 "noise_amount": 0.26},
}

NOCTURNE_SOUND = {
    "ambient": {
        "voices": [
            _voice("triangle", 120, -6, (0.022, 110), (0.46, 5), ("bandpass", 420, 9), 0.45),
            _voice("sine", 168, 4, (0.02, 120), (0.5, 5.5), ("bandpass", 520, 8), 0.5, -0.4),
            _voice("sawtooth", 228, 10, (0.024, 140), (0.6, 6), ("bandpass", 680, 10), 0.55, 0.4),
        ],
        "levels": {"idle": 0.3, "running": 0.8, "gameover": 0.22},
        "transition_time": 1.1,
    },
    "flap": {"type": "triangle", "start_freq": 320, "peak_freq": 620, "end_freq": 190, "filter_type": "bandpass",
             "filter_frequency": 560, "filter_q": 7, "attack": 0.02, "max_gain": 0.42, "decay": 0.46},
    "score": {"high_type": "sine", "high_start": 540, "high_mid": 760, "high_end": 980, "high_mid_time": 0.1,
              "high_end_time": 0.22, "low_type": "triangle", "low_start": 280, "low_end": 360, "shimmer_gain": 0.18,
              "delay_time": 0.24, "feedback_gain": 0.28, "release": 0.7},
    "gameover": {"type": "sine", "start_freq": 480, "end_freq": 140, "filter_type": "lowpass",
                 "filter_start": 1200, "filter_end": 220, "attack": 0.04, "max_gain": 0.46, "release": 1.2,
                 "noise_amount": 0.2},
}

SAKURA_SOUND = {
    "ambient": {
        "voices": [
            _voice("sine", 138, -6, (0.026, 110), (0.52, 5), ("bandpass", 440, 9), 0.4, -0.4),
            _voice("triangle", 186, 4, (0.022, 120), (0.64, 5.2), ("bandpass", 560, 8), 0.48, 0.4),
            _voice("sine", 248, 10, (0.03, 150), (0.58, 6), ("lowpass", 620, 8), 0.5),
        ],
        "levels": {"idle": 0.32, "running": 0.86, "gameover": 0.24},
        "transition_time": 1.05,
    },
    "flap": {"type": "sine", "start_freq": 300, "peak_freq": 640, "end_freq": 220, "filter_type": "bandpass",
             "filter_frequency": 600, "filter_q": 7, "attack": 0.018, "max_gain": 0.44, "decay": 0.38},
    "score": {"high_type": "triangle", "high_start": 620, "high_mid": 820, "high_end": 1040, "high_mid_time": 0.12,
              "high_end_time": 0.26, "low_type": "sine", "low_start": 340, "low_end": 420, "shimmer_gain": 0.22,
              "delay_time": 0.18, "feedback_gain": 0.24, "release": 0.64},
    "gameover": {"type": "triangle", "start_freq": 480, "end_freq": 150, "filter_type": "lowpass",
                 "filter_start": 1200, "filter_end": 240, "attack": 0.03, "max_gain": 0.5, "release": 1.0,
                 "noise_amount": 0.24},
}


THEMES: list[Theme] = [
    Theme(
        id="neon",
        label="Néon Pulse",
        emoji="⚡",
        accent_color="#ff67ff",
        particle_hue=lambda t, i: (t * 90 + i * 45) % 360,
        draw_background=_neon_background,
        draw_obstacle=_neon_obstacle,
        draw_avatar=_neon_avatar,
        audio_profile=NEON_SOUND,
    ),
    Theme(
        id="dino",
        label="Crête Jurassique",
        emoji="🦕",
        accent_color="#ffb347",
        particle_hue=lambda t, i: (40 + math.sin(t * 3 + i) * 20 + i * 12) % 360,
        draw_background=_dino_background,
        draw_obstacle=_dino_obstacle,
        draw_avatar=_dino_avatar,
        audio_profile=DINO_SOUND,
    ),
    Theme(
        id="cyber",
        label="Cyber Rave",
        emoji="🪩",
        accent_color="#03e3ff",
        particle_hue=lambda t, i: (180 + math.sin(t * 6 + i) * 90 + i * 15) % 360,
        draw_background=_cyber_background,
        draw_obstacle=_cyber_obstacle,
        draw_avatar=_cyber_avatar,
        audio_profile=CYBER_SOUND,
    ),
    Theme(
        id="fire",
        label="Brasier Céleste",
        emoji="🔥",
        accent_color="#ff5c2f",
        particle_hue=lambda t, i: (20 + math.sin(t * 5 + i) * 40 + i * 25) % 360,
        draw_background=_fire_background,
        draw_obstacle=_fire_obstacle,
        draw_avatar=_fire_avatar,
        audio_profile=FIRE_SOUND,
    ),
    Theme(
        id="forest",
        label="Canopy Drift",
        emoji="🌿",
        accent_color="#68e691",
        particle_hue=lambda t, i: (110 + math.sin(t * 4 + i) * 30 + i * 8) % 360,
        draw_background=_forest_background,
        draw_obstacle=_forest_obstacle,
        draw_avatar=_forest_avatar,
        audio_profile=FOREST_SOUND,
    ),
    Theme(
        id="frozen",
        label="Rêve Gelé",
        emoji="❄️",
        accent_color="#9ddcff",
        particle_hue=lambda t, i: (200 + math.sin(t * 4 + i) * 25 + i * 10) % 360,
        draw_background=_frozen_background,
        draw_obstacle=_frozen_obstacle,
        draw_avatar=_frozen_avatar,
        audio_profile=FROZEN_SOUND,
    ),
    Theme(
        id="cosmic",
        label="Dérive Cosmique",
        emoji="🌌",
        accent_color="#b48fff",
        particle_hue=lambda t, i: (180 + math.sin(t * 5 + i) * 60 + i * 18) % 360,
        draw_background=_cosmic_background,
        draw_obstacle=_cosmic_obstacle,
        draw_avatar=_cosmic_avatar,
        audio_profile=COSMIC_SOUND,
    ),
    Theme(
        id="pirate",
        label="Marées Pirates",
        emoji="🏴‍☠️",
        accent_color="#37c5ff",
        particle_hue=lambda t, i: (205 + math.sin(t * 3 + i) * 35 + i * 18) % 360,
        draw_background=_pirate_background,
        draw_obstacle=_pirate_obstacle,
        draw_avatar=_pirate_avatar,
        audio_profile=PIRATE_SOUND,
    ),
    Theme(
        id="nocturne",
        label="Nocturne Souterrain",
        emoji="🌙",
        accent_color="#8c76ff",
        particle_hue=lambda t, i: (260 + math.sin(t * 2 + i) * 18 + i * 8) % 360,
        draw_background=_nocturne_background,
        draw_obstacle=_nocturne_obstacle,
        draw_avatar=_nocturne_avatar,
        audio_profile=NOCTURNE_SOUND,
    ),
    Theme(
        id="sakura",
        label="Sakura Mirage",
        emoji="🌸",
        accent_color="#ff9ad5",
        particle_hue=lambda t, i: (320 + math.sin(t * 2.4 + i) * 22 + i * 10) % 360,
        draw_background=_sakura_background,
        draw_obstacle=_sakura_obstacle,
        draw_avatar=_sakura_avatar,
        audio_profile=SAKURA_SOUND,
    ),
]
