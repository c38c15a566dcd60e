import os

os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame
import pytest

from flappy_dopamine.audio_profile import merge_audio_profile
from flappy_dopamine.entities import Obstacle
from flappy_dopamine.theme_catalog import THEMES
from flappy_dopamine.themes import Theme, ThemeSequencer


def _noop(*args) -> None:
    pass


def make_themes(count: int) -> list[Theme]:
    return [
        Theme(
            id=f"t{i}",
            label=f"Theme {i}",
            emoji="*",
            accent_color="#123456",
            particle_hue=lambda t, n: 0.0,
            draw_background=_noop,
            draw_obstacle=_noop,
            draw_avatar=_noop,
        )
        for i in range(count)
    ]


def test_sequencer_needs_themes() -> None:
    with pytest.raises(ValueError):
        ThemeSequencer([])


def test_switches_only_on_new_milestones() -> None:
    seq = ThemeSequencer(make_themes(3), interval=2, duration=0.9)
    assert not seq.on_score(1)
    assert seq.on_score(2)
    assert seq.index == 1 and seq.previous_index == 0
    assert seq.progress == 0.0
    assert not seq.on_score(2)
    assert not seq.on_score(3)
    assert seq.on_score(4)
    assert seq.on_score(6)
    # Wraps modulo the theme count
    assert seq.index == 0
    assert seq.last_switch_score == 6


def test_zero_score_never_switches() -> None:
    seq = ThemeSequencer(make_themes(3), interval=2)
    assert not seq.on_score(0)
    assert seq.index == 0


def test_progress_is_monotonic_and_completes() -> None:
    seq = ThemeSequencer(make_themes(2), interval=1, duration=0.9)
    seq.on_score(1)
    seen = [seq.progress]
    for _ in range(60):
        seq.advance(1 / 60)
        seen.append(seq.progress)
    assert seen == sorted(seen)
    assert seq.progress == 1.0
    assert not seq.in_transition
    assert seq.eased == 1.0


def test_advance_ignores_negative_dt() -> None:
    seq = ThemeSequencer(make_themes(2), interval=1)
    seq.on_score(1)
    seq.advance(0.3)
    before = seq.progress
    seq.advance(-5.0)
    assert seq.progress == before


def test_force_reset_and_settle() -> None:
    seq = ThemeSequencer(make_themes(4), interval=1)
    seq.on_score(1)
    seq.on_score(2)
    seq.force_reset(0.85)
    assert seq.index == 0 and seq.previous_index == 2
    assert seq.duration == 0.85
    assert seq.last_switch_score == 0
    assert seq.in_transition
    seq.settle()
    assert not seq.in_transition
    assert seq.previous_index == seq.index


def test_index_setters_wrap() -> None:
    seq = ThemeSequencer(make_themes(3))
    seq.index = 7
    seq.previous_index = -1
    assert seq.index == 1
    assert seq.previous_index == 2


def test_catalog_ids_are_unique() -> None:
    ids = [theme.id for theme in THEMES]
    assert len(ids) == len(set(ids)) == 10
    assert ids[0] == "neon"


@pytest.mark.parametrize("theme", THEMES, ids=lambda t: t.id)
def test_catalog_theme_draws(theme: Theme) -> None:
    w, h = 240, 160
    surface = pygame.Surface((w, h))
    theme.draw_background(surface, 2.5, w, h)
    theme.draw_obstacle(surface, Obstacle(x=100, top=40, bottom=110, seed=0.3), h, 2.5, 50.0)
    sprite = pygame.Surface((80, 80), pygame.SRCALPHA)
    theme.draw_avatar(sprite, 2.5, 18.0)
    assert sprite.get_bounding_rect().width > 0
    for i in range(8):
        assert 0 <= theme.particle_hue(2.5, i) < 360


@pytest.mark.parametrize("theme", THEMES, ids=lambda t: t.id)
def test_catalog_profiles_are_valid(theme: Theme, caplog) -> None:
    with caplog.at_level("WARNING"):
        profile = merge_audio_profile(theme.audio_profile)
    assert profile.ambient.voices
    assert not caplog.records
