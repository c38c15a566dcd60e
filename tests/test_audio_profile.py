import os

os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import logging

from flappy_dopamine.audio_profile import (
    DEFAULT_AUDIO_PROFILE,
    FilterSettings,
    deep_merge,
    merge_audio_profile,
)


def test_empty_override_gives_defaults() -> None:
    assert merge_audio_profile({}) == merge_audio_profile(None)
    profile = merge_audio_profile({})
    assert [v.frequency for v in profile.ambient.voices] == [96.0, 162.0, 224.0]
    assert profile.ambient.levels.running == 0.85
    assert profile.flap.peak_freq == 880.0
    assert profile.gameover.noise_amount == 0.4


def test_partial_override_keeps_remaining_defaults() -> None:
    profile = merge_audio_profile({"flap": {"max_gain": 0.2}, "ambient": {"levels": {"idle": 0.1}}})
    assert profile.flap.max_gain == 0.2
    assert profile.flap.start_freq == 360.0
    assert profile.ambient.levels.idle == 0.1
    assert profile.ambient.levels.running == 0.85
    assert len(profile.ambient.voices) == 3


def test_voice_list_replaces_defaults() -> None:
    profile = merge_audio_profile({"ambient": {"voices": [{"type": "sine", "frequency": 110}]}})
    assert len(profile.ambient.voices) == 1
    voice = profile.ambient.voices[0]
    assert voice.type == "sine"
    assert voice.frequency == 110.0
    # No filter of its own: inherits the ambient one
    assert voice.filter == FilterSettings("lowpass", 560.0, 12.0)


def test_empty_voice_list_keeps_defaults() -> None:
    profile = merge_audio_profile({"ambient": {"voices": []}})
    assert len(profile.ambient.voices) == 3


def test_invalid_values_fall_back_with_warnings(caplog) -> None:
    overrides = {
        "flap": {"type": "kazoo", "max_gain": "loud", "wobble": 3},
        "ambient": {"filter": {"type": "comb"}},
        "reverb": {"size": 2},
    }
    with caplog.at_level(logging.WARNING, logger="flappy_dopamine.audio_profile"):
        profile = merge_audio_profile(overrides)
    assert profile.flap.type == "triangle"
    assert profile.flap.max_gain == 0.45
    assert profile.ambient.filter.type == "lowpass"
    messages = " ".join(r.getMessage() for r in caplog.records)
    for fragment in ("kazoo", "loud", "wobble", "comb", "reverb"):
        assert fragment in messages


def test_optional_fields_accept_none() -> None:
    profile = merge_audio_profile({"score": {"high_mid": None}})
    assert profile.score.high_mid is None
    profile = merge_audio_profile({"flap": {"attack": None}})
    assert profile.flap.attack == 0.02


def test_deep_merge_does_not_mutate_inputs() -> None:
    base = {"a": {"b": 1, "c": [1, 2]}}
    merged = deep_merge(base, {"a": {"b": 2}})
    merged["a"]["c"].append(3)
    assert base == {"a": {"b": 1, "c": [1, 2]}}
    assert merged["a"]["b"] == 2
    assert DEFAULT_AUDIO_PROFILE["flap"]["max_gain"] == 0.45


def test_profiles_are_comparable() -> None:
    assert merge_audio_profile({"flap": {"decay": 0.5}}) != merge_audio_profile({})
