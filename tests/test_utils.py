import os

os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame
import pytest

from flappy_dopamine.utils import (
    circle_rect_collision,
    clamp,
    ease_in_out_cubic,
    glow_surface,
    hex_to_rgb,
    hsla,
    lerp,
    scale_color,
    sky_gradient,
    vertical_gradient,
)


def test_clamp_basic() -> None:
    assert clamp(5, 0, 10) == 5
    assert clamp(-1, 0, 10) == 0
    assert clamp(11, 0, 10) == 10


def test_lerp() -> None:
    assert lerp(2.0, 6.0, 0.25) == 3.0


def test_ease_in_out_cubic_shape() -> None:
    assert ease_in_out_cubic(-1.0) == 0.0
    assert ease_in_out_cubic(0.5) == pytest.approx(0.5)
    assert ease_in_out_cubic(2.0) == 1.0
    samples = [ease_in_out_cubic(i / 20) for i in range(21)]
    assert samples == sorted(samples)


def test_circle_rect_collision() -> None:
    # centre inside
    assert circle_rect_collision(5, 5, 1, 0, 0, 10, 10) is True
    # grazing an edge
    assert circle_rect_collision(10.5, 5, 1, 0, 0, 10, 10) is True
    # near a corner but outside the radius
    assert circle_rect_collision(11, 11, 1, 0, 0, 10, 10) is False
    assert circle_rect_collision(20, 5, 1, 0, 0, 10, 10) is False


def test_hex_to_rgb() -> None:
    assert hex_to_rgb("#ff67ff") == (255, 103, 255)
    assert hex_to_rgb("#0f8") == (0, 255, 136)


def test_hsla_wraps_hue_and_clamps_alpha() -> None:
    red = hsla(360.0, 100, 50, 2.0)
    assert (red.r, red.g, red.b, red.a) == (255, 0, 0, 255)


def test_scale_color_clamps() -> None:
    assert scale_color((200, 100, 10), 2.0) == (255, 200, 20)


def test_vertical_gradient_endpoints() -> None:
    surf = vertical_gradient((4, 11), [(0.0, (0, 0, 0)), (1.0, (200, 100, 50))])
    assert surf.get_at((2, 0))[:3] == (0, 0, 0)
    assert surf.get_at((2, 10))[:3] == (200, 100, 50)


def test_sky_gradient_size() -> None:
    surf = sky_gradient((64, 32), [(0.0, (10, 10, 10)), (1.0, (90, 90, 90))])
    assert surf.get_size() == (64, 32)


def test_glow_surface_is_cached_and_fades_out() -> None:
    glow = glow_surface(32, (255, 0, 0))
    assert glow is glow_surface(32, (255, 0, 0))
    assert glow.get_at((16, 16)).a > glow.get_at((0, 0)).a
    assert glow.get_flags() & pygame.SRCALPHA
