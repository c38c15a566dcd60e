"""Procedural game audio: the ambient drone bed and one-shot effects.

Everything is synthesised with :mod:`flappy_dopamine.synth` and streamed to a
reserved pygame mixer channel. The engine stays inert until
:meth:`AudioEngine.activate` is called from a user action, and every trigger
is a silent no-op while it is inert or when no audio device is available.
"""

from __future__ import annotations

import logging
import random
from typing import Callable, Iterable, Protocol

import numpy as np
import pygame

from .audio_profile import AmbientSettings, AudioProfile, VoiceSettings, merge_audio_profile
from .config import FLOOR_GAIN, MASTER_LEVEL, OUTPUT_BLOCK, SAMPLE_RATE
from .state import Mode
from .synth import (
    AudioContext,
    AudioNode,
    AudioParam,
    BiquadFilterNode,
    DelayNode,
    GainNode,
    NoiseBurstNode,
    OscillatorNode,
    SourceNode,
    StereoPannerNode,
)
from .themes import Theme

logger = logging.getLogger(__name__)

BED_FADE = 0.2  # s, time constant of the voice fade on dispose
BED_TAIL = 0.35  # s, sources of a disposed bed stop this long after the fade starts
SHIMMER_TAIL = 1.0  # s of delay ring-out kept after the score voices stop


class AudioUnavailableError(RuntimeError):
    """No usable audio device."""


class AudioOutput(Protocol):
    sample_rate: int

    def pump(self, render: Callable[[int], np.ndarray]) -> None: ...

    def close(self) -> None: ...


class MixerOutput:
    """Streams rendered blocks to one reserved pygame mixer channel.

    ``pump`` keeps one block playing and one queued behind it, so the render
    clock stays at most two blocks ahead of what is heard.
    """

    def __init__(self, sample_rate: int = SAMPLE_RATE, block: int = OUTPUT_BLOCK) -> None:
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init(frequency=sample_rate, size=-16, channels=2, buffer=512)
            init = pygame.mixer.get_init()
        except pygame.error as exc:
            raise AudioUnavailableError(str(exc)) from exc
        if init is None:
            raise AudioUnavailableError("mixer failed to initialise")
        self.sample_rate, self._format, self._channels = init
        if self._format not in (-16, 32) or self._channels not in (1, 2):
            raise AudioUnavailableError(f"unsupported mixer format {init!r}")
        pygame.mixer.set_reserved(1)
        self.channel = pygame.mixer.Channel(0)
        self.block = block

    def _to_sound(self, samples: np.ndarray) -> pygame.mixer.Sound:
        data = np.clip(samples.T, -1.0, 1.0)
        if self._channels == 1:
            data = data.mean(axis=1)
        if self._format == -16:
            data = (data * 32767).astype(np.int16)
        else:
            data = data.astype(np.float32)
        return pygame.sndarray.make_sound(np.ascontiguousarray(data))

    def pump(self, render: Callable[[int], np.ndarray]) -> None:
        for _ in range(2):
            if self.channel.get_queue() is not None:
                return
            sound = self._to_sound(render(self.block))
            if self.channel.get_busy():
                self.channel.queue(sound)
            else:
                self.channel.play(sound)

    def close(self) -> None:
        self.channel.stop()


def _release_when_ended(
    context: AudioContext, sources: Iterable[SourceNode], nodes: Iterable[AudioNode], tail: float = 0.0
) -> None:
    """Disconnect ``nodes`` once every source in ``sources`` has ended (plus ``tail`` seconds)."""
    sources = list(sources)
    nodes = list(nodes)
    pending = [len(sources)]

    def release() -> None:
        for node in nodes:
            node.disconnect()

    def ended() -> None:
        pending[0] -= 1
        if pending[0] > 0:
            return
        if tail > 0:
            context.call_at(context.current_time + tail, release)
        else:
            release()

    for source in sources:
        source.on_ended.append(ended)


def _envelope(
    param: AudioParam, now: float, floor: float, peak: float, attack: float, end: float, release: float
) -> None:
    param.set_value_at_time(floor, now)
    param.linear_ramp_to_value_at_time(peak, now + attack)
    param.exponential_ramp_to_value_at_time(max(end, FLOOR_GAIN), now + release)


class AmbientBed:
    """The drone voices of one profile, owned as a unit.

    Per voice: oscillator -> filter -> panner -> voice gain -> ambient bus,
    with optional LFOs on the filter cutoff, the pitch and the pan position.
    """

    def __init__(self, context: AudioContext, settings: AmbientSettings, bus: AudioNode, rng: random.Random) -> None:
        self.context = context
        self.sources: list[SourceNode] = []
        self.nodes: list[AudioNode] = []
        self.voice_gains: list[GainNode] = []
        self.disposed = False
        count = len(settings.voices) or 1
        for voice in settings.voices:
            self._build_voice(voice, settings, bus, rng, count)

    def _lfo(self, frequency: float, depth: float, param: AudioParam) -> None:
        lfo = OscillatorNode(self.context, "sine", frequency)
        amount = GainNode(self.context, depth)
        lfo.connect(amount)
        amount.connect(param)
        lfo.start()
        self.sources.append(lfo)
        self.nodes.extend((lfo, amount))

    def _build_voice(
        self, voice: VoiceSettings, settings: AmbientSettings, bus: AudioNode, rng: random.Random, count: int
    ) -> None:
        ctx = self.context
        osc = OscillatorNode(ctx, voice.type, voice.frequency, voice.detune)
        filt = BiquadFilterNode(ctx, voice.filter.type, voice.filter.frequency, voice.filter.q)
        pan_offset = voice.pan_offset if voice.pan_offset is not None else -0.6 + rng.random() * 1.2
        panner = StereoPannerNode(ctx, pan_offset)
        gain = voice.gain if voice.gain is not None else settings.voice_gain
        voice_gain = GainNode(ctx, gain if gain is not None else 0.24 / count)

        osc.connect(filt)
        filt.connect(panner)
        panner.connect(voice_gain)
        voice_gain.connect(bus)
        self.nodes.extend((osc, filt, panner, voice_gain))
        self.voice_gains.append(voice_gain)

        if voice.sweep_frequency:
            self._lfo(voice.sweep_frequency, voice.sweep_depth, filt.frequency)
        if voice.vibrato_frequency:
            rate = voice.vibrato_frequency + (rng.random() - 0.5) * voice.vibrato_variance
            self._lfo(rate, voice.vibrato_depth, osc.frequency)
        pan_depth = voice.pan_depth if voice.pan_depth is not None else settings.pan_depth
        pan_frequency = voice.pan_frequency if voice.pan_frequency is not None else settings.pan_frequency
        if pan_depth > 0 and pan_frequency > 0:
            self._lfo(pan_frequency, pan_depth, panner.pan)

        osc.start()
        self.sources.append(osc)

    def dispose(self) -> None:
        """Fade the voices out, stop every source and drop the nodes once they ended."""
        if self.disposed:
            return
        self.disposed = True
        now = self.context.current_time
        for gain in self.voice_gains:
            gain.gain.cancel_scheduled_values(now)
            gain.gain.set_target_at_time(FLOOR_GAIN, now, BED_FADE)
        for source in self.sources:
            source.stop(now + BED_TAIL)
        _release_when_ended(self.context, self.sources, self.nodes)


class AudioEngine:
    def __init__(
        self,
        context_factory: Callable[[int], AudioContext] | None = None,
        output_factory: Callable[[], AudioOutput] | None = None,
        rng: random.Random | None = None,
        muted: bool = False,
    ) -> None:
        self._context_factory = context_factory or AudioContext
        self._output_factory = output_factory or MixerOutput
        self.rng = rng or random.Random()
        self.context: AudioContext | None = None
        self.output: AudioOutput | None = None
        self.master: GainNode | None = None
        self.ambient_bus: GainNode | None = None
        self.bed: AmbientBed | None = None
        self.profile: AudioProfile = merge_audio_profile()
        self.mode = Mode.IDLE
        self._muted = muted
        self._unavailable = False

    @property
    def active(self) -> bool:
        return self.context is not None and self.context.state != "closed"

    @property
    def muted(self) -> bool:
        return self._muted

    def activate(self, theme: Theme | None = None, mode: Mode | None = None) -> bool:
        """Create the audio graph on first use; later calls only resume it.

        Returns False (and stays inert) when no audio device is available.
        """
        if self.active:
            self.resume()
            return True
        if self._unavailable:
            return False
        try:
            self.output = self._output_factory()
        except AudioUnavailableError as exc:
            logger.warning("Audio unavailable, continuing without sound: %s", exc)
            self._unavailable = True
            return False

        self.context = self._context_factory(self.output.sample_rate)
        self.master = GainNode(self.context, 0.0 if self._muted else MASTER_LEVEL)
        self.master.connect(self.context.destination)
        self.ambient_bus = GainNode(self.context, 0.0)
        self.ambient_bus.connect(self.master)
        if theme is not None:
            self.profile = merge_audio_profile(theme.audio_profile)
        if mode is not None:
            self.mode = mode
        self._rebuild_bed()
        self._level(immediate=True)
        logger.info("Audio started at %d Hz", self.context.sample_rate)
        return True

    def set_theme(self, theme: Theme, immediate: bool = False) -> None:
        profile = merge_audio_profile(theme.audio_profile)
        changed = profile != self.profile
        self.profile = profile
        if not self.active:
            return
        if changed:
            self._rebuild_bed()
        # Unchanged profile: re-level smoothly
        self._level(immediate and changed)

    def resume(self) -> None:
        if self.active:
            self.context.resume()

    def handle_mode_change(self, mode: Mode, immediate: bool = False) -> None:
        self.mode = mode
        if self.active:
            self._level(immediate)

    def set_muted(self, muted: bool) -> None:
        self._muted = muted
        if self.master is not None:
            self.master.gain.value = 0.0 if muted else MASTER_LEVEL

    def _rebuild_bed(self) -> None:
        if self.bed is not None:
            self.bed.dispose()
        self.bed = AmbientBed(self.context, self.profile.ambient, self.ambient_bus, self.rng)

    def _level(self, immediate: bool) -> None:
        levels = self.profile.ambient.levels
        if self.mode == Mode.RUNNING:
            target = levels.running
        elif self.mode == Mode.OVER:
            target = levels.gameover
        else:
            target = levels.idle
        now = self.context.current_time
        param = self.ambient_bus.gain
        current = param.value_at(now)
        param.cancel_scheduled_values(now)
        if immediate:
            param.set_value_at_time(target, now)
        else:
            param.set_value_at_time(current, now)
            param.set_target_at_time(target, now, self.profile.ambient.transition_time)

    def play_flap(self) -> None:
        if not self.active:
            return
        ctx = self.context
        now = ctx.current_time
        s = self.profile.flap

        osc = OscillatorNode(ctx, s.type, s.start_freq)
        osc.frequency.set_value_at_time(s.start_freq, now)
        osc.frequency.exponential_ramp_to_value_at_time(max(s.peak_freq, 1.0), now + s.peak_time)
        osc.frequency.exponential_ramp_to_value_at_time(max(s.end_freq, 1.0), now + s.end_time)
        filt = BiquadFilterNode(ctx, s.filter_type, s.filter_frequency, s.filter_q)
        gain = GainNode(ctx, s.min_gain)
        _envelope(gain.gain, now, s.min_gain, s.max_gain, s.attack, s.end_gain, s.decay)

        osc.connect(filt)
        filt.connect(gain)
        gain.connect(self.master)
        osc.start(now)
        osc.stop(now + max(s.decay, 0.5))
        _release_when_ended(ctx, [osc], [osc, filt, gain])

    def play_score(self) -> None:
        if not self.active:
            return
        ctx = self.context
        now = ctx.current_time
        s = self.profile.score

        shimmer = GainNode(ctx, s.shimmer_gain)
        shimmer.connect(self.master)

        highs = OscillatorNode(ctx, s.high_type, s.high_start)
        highs.frequency.set_value_at_time(s.high_start, now)
        if s.high_mid:
            highs.frequency.linear_ramp_to_value_at_time(s.high_mid, now + s.high_mid_time)
        if s.high_end:
            highs.frequency.linear_ramp_to_value_at_time(s.high_end, now + s.high_end_time)
        lows = OscillatorNode(ctx, s.low_type, s.low_start)
        lows.frequency.set_value_at_time(s.low_start, now)
        lows.frequency.linear_ramp_to_value_at_time(s.low_end, now + s.low_end_time)

        gain = GainNode(ctx, s.min_gain)
        _envelope(gain.gain, now, s.min_gain, s.max_gain, s.attack, s.end_gain, s.release)
        delay = DelayNode(ctx, s.delay_time, s.feedback_gain)

        highs.connect(gain)
        lows.connect(gain)
        gain.connect(shimmer)
        gain.connect(delay)
        delay.connect(shimmer)

        stop = now + max(s.release, 0.5)
        for osc in (highs, lows):
            osc.start(now)
            osc.stop(stop)
        _release_when_ended(ctx, [highs, lows], [highs, lows, gain, delay, shimmer], tail=SHIMMER_TAIL)

    def play_game_over(self) -> None:
        if not self.active:
            return
        ctx = self.context
        now = ctx.current_time
        s = self.profile.gameover

        osc = OscillatorNode(ctx, s.type, s.start_freq)
        osc.frequency.set_value_at_time(s.start_freq, now)
        osc.frequency.exponential_ramp_to_value_at_time(max(s.end_freq, 1.0), now + s.duration)
        filt = BiquadFilterNode(ctx, s.filter_type, s.filter_start)
        filt.frequency.set_value_at_time(s.filter_start, now)
        filt.frequency.exponential_ramp_to_value_at_time(max(s.filter_end, 1.0), now + s.duration)
        gain = GainNode(ctx, s.min_gain)
        _envelope(gain.gain, now, s.min_gain, s.max_gain, s.attack, s.end_gain, s.release)

        osc.connect(filt)
        filt.connect(gain)
        gain.connect(self.master)
        osc.start(now)
        osc.stop(now + s.duration)
        _release_when_ended(ctx, [osc], [osc, filt, gain])

        if s.noise_amount:
            noise = NoiseBurstNode(ctx, s.noise_duration, seed=self.rng.getrandbits(32))
            noise_gain = GainNode(ctx, s.min_gain)
            _envelope(noise_gain.gain, now, s.min_gain, s.noise_amount, 0.02, s.end_gain, s.noise_decay)
            noise.connect(noise_gain)
            noise_gain.connect(self.master)
            noise.start(now)
            _release_when_ended(ctx, [noise], [noise, noise_gain])

    def pump(self) -> None:
        """Render audio ahead into the output; call once per frame."""
        if self.active and self.output is not None:
            self.output.pump(self.context.render)

    def dispose(self) -> None:
        if self.context is None:
            return
        if self.bed is not None:
            self.bed.dispose()
        self.master.disconnect()
        self.context.close()
        if self.output is not None:
            self.output.close()
        self.context = None
        self.output = None
        self.master = None
        self.ambient_bus = None
        self.bed = None
