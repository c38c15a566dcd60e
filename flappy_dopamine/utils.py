"""Math, collision and color helpers used across the game."""

from __future__ import annotations

from functools import lru_cache

import numpy as np
import pygame


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp a numeric value into the inclusive range [lo, hi]."""
    return max(lo, min(hi, value))


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def ease_in_out_cubic(t: float) -> float:
    """Cubic ease-in-out on [0, 1]; values outside are clamped."""
    if t <= 0.0:
        return 0.0
    if t >= 1.0:
        return 1.0
    if t < 0.5:
        return 4.0 * t * t * t
    return 1.0 - (-2.0 * t + 2.0) ** 3 / 2.0


def circle_rect_collision(
    cx: float,
    cy: float,
    r: float,
    rx: float,
    ry: float,
    rw: float,
    rh: float,
) -> bool:
    """True if the circle (cx, cy, r) overlaps the axis-aligned rect (rx, ry, rw, rh).

    Uses the closest point of the rectangle to the circle centre.
    """
    closest_x = clamp(cx, rx, rx + rw)
    closest_y = clamp(cy, ry, ry + rh)
    dx = cx - closest_x
    dy = cy - closest_y
    return dx * dx + dy * dy < r * r


def hex_to_rgb(value: str) -> tuple[int, int, int]:
    """Parse ``#rgb`` / ``#rrggbb`` into an RGB tuple (short input is zero padded)."""
    digits = value.replace("#", "").strip()
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    digits = digits.ljust(6, "0")[:6]
    num = int(digits, 16)
    return (num >> 16) & 255, (num >> 8) & 255, num & 255


def hsla(hue: float, saturation: float, lightness: float, alpha: float = 1.0) -> pygame.Color:
    """Build a pygame color from CSS-style HSL (hue in degrees, s/l in percent, alpha 0..1)."""
    color = pygame.Color(0, 0, 0, 0)
    color.hsla = (
        hue % 360.0,
        clamp(saturation, 0.0, 100.0),
        clamp(lightness, 0.0, 100.0),
        clamp(alpha, 0.0, 1.0) * 100.0,
    )
    return color


def scale_color(color: tuple[int, int, int], factor: float) -> tuple[int, int, int]:
    """Scale an RGB color by factor, clamped to [0,255]."""
    r, g, b = color
    return (
        int(clamp(r * factor, 0, 255)),
        int(clamp(g * factor, 0, 255)),
        int(clamp(b * factor, 0, 255)),
    )


def vertical_gradient(
    size: tuple[int, int],
    stops: list[tuple[float, tuple[int, int, int]]],
) -> pygame.Surface:
    """Vertical multi-stop gradient rendered with NumPy.

    Args:
        size: (width, height) of the surface.
        stops: (offset in [0,1], rgb) pairs sorted by offset.
    """
    w, h = max(1, size[0]), max(1, size[1])
    ys = np.linspace(0.0, 1.0, h, dtype=np.float32)
    offsets = np.array([s[0] for s in stops], dtype=np.float32)
    cols = np.array([s[1] for s in stops], dtype=np.float32)
    channels = [np.interp(ys, offsets, cols[:, i]) for i in range(3)]
    column = np.stack(channels, axis=-1).astype(np.uint8)  # (h, 3)
    rgb = np.broadcast_to(column[np.newaxis, :, :], (w, h, 3))
    surf = pygame.Surface((w, h))
    pygame.surfarray.blit_array(surf, np.ascontiguousarray(rgb))
    return surf


def radial_falloff_surface(size: int, power: float = 1.6) -> pygame.Surface:
    """White disc whose alpha falls off from the centre, tinted later with BLEND_RGBA_MULT."""
    size = max(2, size)
    x = np.linspace(-1.0, 1.0, size, dtype=np.float32)
    X, Y = np.meshgrid(x, x, indexing="ij")
    d = np.clip(np.sqrt(X * X + Y * Y), 0.0, 1.0)
    alpha = ((1.0 - d) ** power * 255.0).astype(np.uint8)
    surf = pygame.Surface((size, size), pygame.SRCALPHA)
    surf.fill((255, 255, 255, 0))
    pixels = pygame.surfarray.pixels_alpha(surf)
    pixels[:, :] = alpha
    del pixels  # release the surface lock
    return surf


@lru_cache(maxsize=64)
def glow_surface(size: int, rgb: tuple[int, int, int], power: float = 1.6) -> pygame.Surface:
    """Cached radial glow of diameter ``size`` tinted to ``rgb``.

    Shared between callers: set the surface alpha right before each blit.
    """
    surf = radial_falloff_surface(size, power)
    surf.fill((*rgb, 255), special_flags=pygame.BLEND_RGBA_MULT)
    return surf


def sky_gradient(size: tuple[int, int], stops: list[tuple[float, tuple[int, int, int]]]) -> pygame.Surface:
    """Full-size vertical gradient, built one pixel wide and stretched horizontally."""
    w, h = max(1, size[0]), max(1, size[1])
    return pygame.transform.scale(vertical_gradient((1, h), stops), (w, h))
