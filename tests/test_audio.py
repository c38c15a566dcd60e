import os

os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import numpy as np
import pygame
import pytest

from conftest import make_engine, render_seconds
from flappy_dopamine.audio import AudioEngine, AudioUnavailableError, MixerOutput
from flappy_dopamine.config import MASTER_LEVEL
from flappy_dopamine.state import Mode
from flappy_dopamine.theme_catalog import THEMES


def rms(x: np.ndarray) -> float:
    return float(np.sqrt(np.mean(np.square(x))))


def test_inactive_engine_ignores_triggers() -> None:
    engine, outputs = make_engine()
    assert not engine.active
    engine.play_flap()
    engine.play_score()
    engine.play_game_over()
    engine.set_theme(THEMES[1], immediate=True)
    engine.handle_mode_change(Mode.RUNNING)
    engine.pump()
    engine.dispose()
    assert outputs == []
    assert engine.mode == Mode.RUNNING


def test_unavailable_device_keeps_engine_inert() -> None:
    calls = []

    def broken():
        calls.append(1)
        raise AudioUnavailableError("no device")

    engine = AudioEngine(output_factory=broken)
    assert engine.activate(THEMES[0], Mode.IDLE) is False
    assert engine.activate(THEMES[0], Mode.IDLE) is False
    assert calls == [1]
    engine.play_flap()
    assert not engine.active


def test_activate_builds_audible_bed() -> None:
    engine, outputs = make_engine()
    assert engine.activate(THEMES[0], Mode.IDLE)
    assert len(outputs) == 1
    assert engine.bed is not None
    assert len(engine.context.active_sources) == len(engine.bed.sources) > 0
    assert engine.ambient_bus.gain.value_at(engine.context.current_time) == pytest.approx(
        engine.profile.ambient.levels.idle
    )
    out = render_seconds(engine, 1.0)
    assert rms(out) > 1e-4
    assert np.max(np.abs(out)) <= 1.0


def test_activate_is_idempotent() -> None:
    engine, outputs = make_engine()
    engine.activate(THEMES[0])
    context, bed = engine.context, engine.bed
    context.suspend()
    assert engine.activate(THEMES[0])
    assert engine.context is context
    assert engine.bed is bed
    assert context.state == "running"
    assert len(outputs) == 1


def test_muted_engine_is_silent_until_unmuted() -> None:
    engine, _ = make_engine(muted=True)
    engine.activate(THEMES[0])
    assert not render_seconds(engine, 0.25).any()
    engine.set_muted(False)
    assert engine.master.gain.value == MASTER_LEVEL
    assert rms(render_seconds(engine, 0.25)) > 1e-4


def test_theme_swap_replaces_bed_without_leaking_sources() -> None:
    engine, _ = make_engine()
    engine.activate(THEMES[0])
    old = engine.bed
    engine.set_theme(THEMES[3], immediate=True)
    assert engine.bed is not old
    assert old.disposed
    render_seconds(engine, 1.0)
    assert len(engine.context.active_sources) == len(engine.bed.sources)
    # Only the new bed still feeds the ambient bus
    assert engine.ambient_bus._inputs == engine.bed.voice_gains


def test_same_profile_keeps_bed() -> None:
    engine, _ = make_engine()
    engine.activate(THEMES[0])
    bed = engine.bed
    engine.set_theme(THEMES[0])
    assert engine.bed is bed


def test_unchanged_theme_keeps_level_ramp() -> None:
    engine, _ = make_engine()
    engine.activate(THEMES[0], Mode.IDLE)
    engine.handle_mode_change(Mode.RUNNING)
    render_seconds(engine, 0.1)
    bus = engine.ambient_bus.gain
    now = engine.context.current_time
    before = bus.value_at(now)
    engine.set_theme(THEMES[0], immediate=True)
    assert bus.value_at(now) == pytest.approx(before)

    # A real swap lands on the new level at once
    engine.set_theme(THEMES[3], immediate=True)
    assert bus.value_at(now) == pytest.approx(engine.profile.ambient.levels.running)


def test_mode_levels_follow_state() -> None:
    engine, _ = make_engine()
    engine.activate(THEMES[0], Mode.IDLE)
    levels = engine.profile.ambient.levels
    bus = engine.ambient_bus.gain

    engine.handle_mode_change(Mode.RUNNING, immediate=True)
    assert bus.value_at(engine.context.current_time) == pytest.approx(levels.running)

    engine.handle_mode_change(Mode.OVER)
    now = engine.context.current_time
    # Smoothed: no jump at the moment of the change
    assert bus.value_at(now) == pytest.approx(levels.running)
    render_seconds(engine, engine.profile.ambient.transition_time * 8)
    assert bus.value_at(engine.context.current_time) == pytest.approx(levels.gameover, abs=1e-3)

    engine.handle_mode_change(Mode.PAUSED, immediate=True)
    assert bus.value_at(engine.context.current_time) == pytest.approx(levels.idle)


@pytest.mark.parametrize("trigger", ["play_flap", "play_score", "play_game_over"])
def test_one_shots_release_everything(trigger: str) -> None:
    engine, _ = make_engine()
    engine.activate(THEMES[0])
    bed_sources = len(engine.context.active_sources)
    getattr(engine, trigger)()
    assert len(engine.context.active_sources) > bed_sources
    out = render_seconds(engine, 0.3)
    assert rms(out) > 1e-3
    render_seconds(engine, 3.0)
    assert len(engine.context.active_sources) == bed_sources
    assert engine.master._inputs == [engine.ambient_bus]


def test_pump_feeds_output() -> None:
    engine, outputs = make_engine()
    engine.pump()
    engine.activate(THEMES[0])
    engine.pump()
    assert len(outputs[0].blocks) == 1
    assert outputs[0].blocks[0].shape == (2, 256)


def test_dispose_closes_everything() -> None:
    engine, outputs = make_engine()
    engine.activate(THEMES[0])
    context = engine.context
    engine.dispose()
    assert context.state == "closed"
    assert outputs[0].closed
    assert not engine.active
    engine.play_score()
    engine.dispose()


def test_mixer_output_streams_or_reports_unavailable() -> None:
    try:
        output = MixerOutput(block=256)
    except AudioUnavailableError:
        pytest.skip("no mixer device")
    try:
        rendered = []

        def render(frames: int) -> np.ndarray:
            rendered.append(frames)
            return np.zeros((2, frames), dtype=np.float32)

        output.pump(render)
        assert rendered and all(n == 256 for n in rendered)
        output.close()
    finally:
        pygame.mixer.quit()
