"""Audio profiles: the default sound design and per-theme overrides.

Themes describe their sound as a nested mapping. :func:`merge_audio_profile`
overlays such a mapping onto :data:`DEFAULT_AUDIO_PROFILE` and returns frozen
settings records, so the engine never has to deal with missing fields.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, fields
from typing import Any, Mapping

from .config import FLOOR_GAIN
from .synth import FILTER_TYPES, WAVEFORMS

logger = logging.getLogger(__name__)

DEFAULT_AUDIO_PROFILE: dict[str, Any] = {
    "ambient": {
        "voices": [
            {
                "type": "sawtooth",
                "frequency": 96.0,
                "detune": -14.0,
                "sweep_frequency": 0.05,
                "sweep_depth": 180.0,
                "vibrato_frequency": 0.9,
                "vibrato_depth": 7.2,
                "filter": {"type": "lowpass", "frequency": 560.0, "q": 12.0},
                "pan_depth": 0.75,
            },
            {
                "type": "sawtooth",
                "frequency": 162.0,
                "detune": 9.0,
                "sweep_frequency": 0.035,
                "sweep_depth": 150.0,
                "vibrato_frequency": 1.0,
                "vibrato_depth": 5.5,
                "filter": {"type": "lowpass", "frequency": 580.0, "q": 11.0},
                "pan_depth": 0.7,
            },
            {
                "type": "sawtooth",
                "frequency": 224.0,
                "detune": 16.0,
                "sweep_frequency": 0.045,
                "sweep_depth": 170.0,
                "vibrato_frequency": 0.95,
                "vibrato_depth": 8.4,
                "filter": {"type": "lowpass", "frequency": 600.0, "q": 12.0},
                "pan_depth": 0.7,
            },
        ],
        "filter": {"type": "lowpass", "frequency": 560.0, "q": 12.0},
        "levels": {"idle": 0.35, "running": 0.85, "gameover": 0.2},
        "transition_time": 0.9,
    },
    "flap": {
        "type": "triangle",
        "start_freq": 360.0,
        "peak_freq": 880.0,
        "end_freq": 220.0,
        "peak_time": 0.08,
        "end_time": 0.34,
        "filter_type": "bandpass",
        "filter_frequency": 720.0,
        "filter_q": 8.0,
        "attack": 0.02,
        "max_gain": 0.45,
        "decay": 0.4,
    },
    "score": {
        "high_type": "sine",
        "low_type": "triangle",
        "high_start": 640.0,
        "high_mid": 960.0,
        "high_end": 1280.0,
        "high_mid_time": 0.12,
        "high_end_time": 0.22,
        "low_start": 280.0,
        "low_end": 420.0,
        "low_end_time": 0.18,
        "shimmer_gain": 0.26,
        "delay_time": 0.24,
        "feedback_gain": 0.3,
        "attack": 0.02,
        "max_gain": 0.5,
        "release": 0.6,
    },
    "gameover": {
        "type": "sawtooth",
        "start_freq": 520.0,
        "end_freq": 140.0,
        "duration": 1.2,
        "filter_type": "lowpass",
        "filter_start": 1400.0,
        "filter_end": 220.0,
        "attack": 0.04,
        "max_gain": 0.55,
        "release": 1.1,
        "noise_amount": 0.4,
        "noise_duration": 0.6,
        "noise_decay": 0.5,
    },
}


@dataclass(frozen=True)
class FilterSettings:
    type: str = "lowpass"
    frequency: float = 560.0
    q: float = 12.0


@dataclass(frozen=True)
class VoiceSettings:
    """One ambient drone voice.

    ``None`` for the pan and gain fields means "inherit from the ambient
    section" (or, for ``pan_offset``, pick a random position per instance).
    """

    type: str = "sawtooth"
    frequency: float = 220.0
    detune: float = 0.0
    sweep_frequency: float = 0.0
    sweep_depth: float = 160.0
    vibrato_frequency: float = 0.0
    vibrato_depth: float = 6.0
    vibrato_variance: float = 0.35
    filter: FilterSettings = FilterSettings()
    pan_depth: float | None = None
    pan_offset: float | None = None
    pan_frequency: float | None = None
    gain: float | None = None


@dataclass(frozen=True)
class AmbientLevels:
    idle: float = 0.35
    running: float = 0.85
    gameover: float = 0.2


@dataclass(frozen=True)
class AmbientSettings:
    voices: tuple[VoiceSettings, ...] = ()
    filter: FilterSettings = FilterSettings()
    levels: AmbientLevels = AmbientLevels()
    transition_time: float = 0.9
    voice_gain: float | None = None
    pan_depth: float = 0.75
    pan_frequency: float = 0.03


@dataclass(frozen=True)
class FlapSettings:
    type: str = "triangle"
    start_freq: float = 360.0
    peak_freq: float = 880.0
    end_freq: float = 220.0
    peak_time: float = 0.08
    end_time: float = 0.34
    filter_type: str = "bandpass"
    filter_frequency: float = 720.0
    filter_q: float = 8.0
    attack: float = 0.02
    max_gain: float = 0.45
    decay: float = 0.4
    min_gain: float = FLOOR_GAIN
    end_gain: float = FLOOR_GAIN


@dataclass(frozen=True)
class ScoreSettings:
    high_type: str = "sine"
    low_type: str = "triangle"
    high_start: float = 640.0
    high_mid: float | None = 960.0
    high_end: float | None = 1280.0
    high_mid_time: float = 0.12
    high_end_time: float = 0.22
    low_start: float = 280.0
    low_end: float = 420.0
    low_end_time: float = 0.18
    shimmer_gain: float = 0.26
    delay_time: float = 0.24
    feedback_gain: float = 0.3
    attack: float = 0.02
    max_gain: float = 0.5
    release: float = 0.6
    min_gain: float = FLOOR_GAIN
    end_gain: float = FLOOR_GAIN


@dataclass(frozen=True)
class GameOverSettings:
    type: str = "sawtooth"
    start_freq: float = 520.0
    end_freq: float = 140.0
    duration: float = 1.2
    filter_type: str = "lowpass"
    filter_start: float = 1400.0
    filter_end: float = 220.0
    attack: float = 0.04
    max_gain: float = 0.55
    release: float = 1.1
    noise_amount: float = 0.0
    noise_duration: float = 0.6
    noise_decay: float = 0.5
    min_gain: float = FLOOR_GAIN
    end_gain: float = FLOOR_GAIN


@dataclass(frozen=True)
class AudioProfile:
    ambient: AmbientSettings
    flap: FlapSettings
    score: ScoreSettings
    gameover: GameOverSettings


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Overlay ``override`` onto ``base`` recursively.

    Nested mappings merge key by key; any other value (lists included) in
    ``override`` replaces the base value, except that an empty list keeps it.
    """
    merged = copy.deepcopy(dict(base))
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        elif isinstance(value, (list, tuple)) and not value and current is not None:
            continue
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _choices(cls: type, key: str) -> tuple[str, ...]:
    if key == "filter_type" or cls is FilterSettings:
        return FILTER_TYPES
    return WAVEFORMS


def _build(cls: type, data: Mapping[str, Any] | None, path: str, **nested: Any) -> Any:
    """Instantiate settings ``cls`` from ``data``, skipping unknown or invalid values."""
    data = data or {}
    known = {f.name: f for f in fields(cls)}
    kwargs: dict[str, Any] = dict(nested)
    for key, value in data.items():
        if key in nested:
            continue
        if key not in known:
            logger.warning("Ignoring unknown audio profile key %s.%s", path, key)
            continue
        default = known[key].default
        if isinstance(default, str):
            if value not in _choices(cls, key):
                logger.warning("Ignoring invalid %s.%s=%r", path, key, value)
                continue
            kwargs[key] = value
        elif value is None and "None" in str(known[key].type):
            kwargs[key] = None
        else:
            try:
                kwargs[key] = float(value)
            except (TypeError, ValueError):
                logger.warning("Ignoring non-numeric %s.%s=%r", path, key, value)
    return cls(**kwargs)


def _build_filter(data: Any, fallback: FilterSettings, path: str) -> FilterSettings:
    if not isinstance(data, Mapping):
        return fallback
    return _build(FilterSettings, data, path)


def merge_audio_profile(overrides: Mapping[str, Any] | None = None) -> AudioProfile:
    """Resolve a theme's profile override against the defaults.

    A non-empty ``ambient.voices`` list replaces the default voices wholesale;
    a voice without its own filter uses the ambient filter.
    """
    overrides = overrides or {}
    for key in overrides:
        if key not in DEFAULT_AUDIO_PROFILE:
            logger.warning("Ignoring unknown audio profile section %r", key)
    merged = deep_merge(DEFAULT_AUDIO_PROFILE, {k: v for k, v in overrides.items() if k in DEFAULT_AUDIO_PROFILE})

    amb = merged["ambient"]
    ambient_filter = _build_filter(amb.get("filter"), FilterSettings(), "ambient.filter")
    voices = tuple(
        _build(
            VoiceSettings,
            voice,
            f"ambient.voices[{i}]",
            filter=_build_filter(voice.get("filter"), ambient_filter, f"ambient.voices[{i}].filter"),
        )
        for i, voice in enumerate(amb.get("voices") or [])
        if isinstance(voice, Mapping)
    )
    ambient = _build(
        AmbientSettings,
        amb,
        "ambient",
        voices=voices,
        filter=ambient_filter,
        levels=_build(AmbientLevels, amb.get("levels"), "ambient.levels"),
    )
    return AudioProfile(
        ambient=ambient,
        flap=_build(FlapSettings, merged["flap"], "flap"),
        score=_build(ScoreSettings, merged["score"], "score"),
        gameover=_build(GameOverSettings, merged["gameover"], "gameover"),
    )
