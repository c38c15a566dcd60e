"""Procedural synthesis graph rendered with NumPy.

Sources, filters, gains and panners are nodes wired into a tree that ends at
``AudioContext.destination``. Node parameters (:class:`AudioParam`) carry
time-stamped automation (set / linear ramp / exponential ramp / target) and
can be modulated at audio rate by other nodes, so an LFO is just an
oscillator connected through a gain into a parameter.

The context renders the graph in fixed quanta. Oscillators, gains and panners
evaluate their parameters per sample; filter and delay parameters are read
once per quantum. Everything is mono until a panner or the destination turns
it into stereo, so signals are ``(channels, frames)`` arrays and mixing relies
on NumPy broadcasting.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import math
from dataclasses import dataclass, field
from typing import Callable, NamedTuple

import numpy as np
from scipy.signal import lfilter

from .config import RENDER_QUANTUM, SAMPLE_RATE

logger = logging.getLogger(__name__)

WAVEFORMS = ("sine", "square", "sawtooth", "triangle")
FILTER_TYPES = ("lowpass", "highpass", "bandpass", "notch")

_SET = "set"
_LINEAR = "linear"
_EXPONENTIAL = "exponential"
_TARGET = "target"


@dataclass
class Block:
    """One render quantum: ``frames`` samples starting at ``start`` seconds."""

    index: int
    start: float
    frames: int
    sample_rate: int
    times: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.times = self.start + np.arange(self.frames, dtype=np.float64) / self.sample_rate

    @property
    def end(self) -> float:
        return self.start + self.frames / self.sample_rate


class _Event(NamedTuple):
    kind: str
    time: float
    value: float
    tau: float = 0.0


def _evaluate(events: list[_Event], initial: float, times: np.ndarray) -> np.ndarray:
    """Paint the automation timeline over ``times``; later events overwrite from their start."""
    out = np.full(times.shape, initial, dtype=np.float64)
    t_prev, v_prev = 0.0, initial
    curve: tuple[float, float, float, float] | None = None  # (start, goal, tau, start value)
    for ev in events:
        if curve is not None and ev.kind in (_SET, _TARGET):
            s, goal, tau, v0 = curve
            v_prev = goal + (v0 - goal) * math.exp(-(ev.time - s) / tau)
        if ev.kind == _SET:
            out[times >= ev.time] = ev.value
            t_prev, v_prev, curve = ev.time, ev.value, None
        elif ev.kind in (_LINEAR, _EXPONENTIAL):
            if curve is not None:
                t_prev, v_prev = curve[0], curve[3]
            span = ev.time - t_prev
            if span > 0:
                seg = (times >= t_prev) & (times < ev.time)
                frac = (times[seg] - t_prev) / span
                if ev.kind == _LINEAR:
                    out[seg] = v_prev + (ev.value - v_prev) * frac
                elif v_prev * ev.value > 0:
                    out[seg] = v_prev * (ev.value / v_prev) ** frac
                else:
                    out[seg] = v_prev
            out[times >= ev.time] = ev.value
            t_prev, v_prev, curve = ev.time, ev.value, None
        else:
            seg = times >= ev.time
            out[seg] = ev.value + (v_prev - ev.value) * np.exp(-(times[seg] - ev.time) / ev.tau)
            curve = (ev.time, ev.value, ev.tau, v_prev)
            t_prev = ev.time
    return out


class AudioParam:
    """A schedulable, modulatable node parameter."""

    def __init__(
        self,
        context: "AudioContext",
        value: float,
        min_value: float = -math.inf,
        max_value: float = math.inf,
    ) -> None:
        self.context = context
        self._value = float(value)
        self.min_value = min_value
        self.max_value = max_value
        self._events: list[_Event] = []
        self._inputs: list[AudioNode] = []

    @property
    def value(self) -> float:
        return self._value

    @value.setter
    def value(self, value: float) -> None:
        self._value = float(value)
        self._events.clear()

    @property
    def scheduled(self) -> int:
        return len(self._events)

    def _insert(self, event: _Event) -> "AudioParam":
        idx = len(self._events)
        while idx > 0 and self._events[idx - 1].time > event.time:
            idx -= 1
        self._events.insert(idx, event)
        return self

    def set_value_at_time(self, value: float, when: float) -> "AudioParam":
        return self._insert(_Event(_SET, float(when), float(value)))

    def linear_ramp_to_value_at_time(self, value: float, when: float) -> "AudioParam":
        return self._insert(_Event(_LINEAR, float(when), float(value)))

    def exponential_ramp_to_value_at_time(self, value: float, when: float) -> "AudioParam":
        if value == 0:
            raise ValueError("exponential ramps cannot reach 0")
        return self._insert(_Event(_EXPONENTIAL, float(when), float(value)))

    def set_target_at_time(self, target: float, when: float, time_constant: float) -> "AudioParam":
        if time_constant <= 0:
            return self.set_value_at_time(target, when)
        return self._insert(_Event(_TARGET, float(when), float(target), float(time_constant)))

    def cancel_scheduled_values(self, when: float) -> "AudioParam":
        self._events = [e for e in self._events if e.time < when]
        return self

    def value_at(self, when: float) -> float:
        """Automation value (modulation excluded) at ``when`` seconds."""
        return float(_evaluate(self._events, self._value, np.array([when], dtype=np.float64))[0])

    def _compact(self, now: float) -> None:
        """Fold events that no longer influence values at or after ``now``."""
        events = self._events
        started = [i for i, e in enumerate(events) if e.time <= now]
        if not started:
            return
        i = started[-1]
        ev = events[i]
        if ev.kind == _TARGET:
            if i == len(events) - 1 and now - ev.time > 10.0 * ev.tau:
                self._value = ev.value
                self._events = []
            elif i > 0:
                start = _evaluate(events[:i], self._value, np.array([ev.time]))[0]
                self._events = [_Event(_SET, ev.time, float(start))] + events[i:]
        elif i == len(events) - 1:
            self._value = ev.value
            self._events = []
        else:
            self._events = [_Event(_SET, ev.time, ev.value)] + events[i + 1 :]

    def values(self, block: Block) -> np.ndarray:
        """Per-sample values for ``block``: automation plus connected modulators."""
        self._compact(block.start)
        if self._events:
            out = _evaluate(self._events, self._value, block.times)
        else:
            out = np.full(block.frames, self._value, dtype=np.float64)
        for node in list(self._inputs):
            out = out + node.pull(block).mean(axis=0)
        if self.min_value > -math.inf or self.max_value < math.inf:
            out = np.clip(out, self.min_value, self.max_value)
        return out


class AudioNode:
    """Base graph node: sums its inputs, processes them, caches the result per quantum."""

    def __init__(self, context: "AudioContext") -> None:
        self.context = context
        self._inputs: list[AudioNode] = []
        self._targets: list[AudioNode | AudioParam] = []
        self._block = -1
        self._output: np.ndarray | None = None

    def connect(self, target: "AudioNode | AudioParam") -> "AudioNode | AudioParam":
        if target.context is not self.context:
            raise ValueError("cannot connect nodes from different contexts")
        target._inputs.append(self)
        self._targets.append(target)
        return target

    def disconnect(self) -> None:
        for target in self._targets:
            if self in target._inputs:
                target._inputs.remove(self)
        self._targets.clear()

    @property
    def connected(self) -> bool:
        return bool(self._targets)

    def pull(self, block: Block) -> np.ndarray:
        if self._block != block.index:
            self._output = self.process(block, self._mix(block))
            self._block = block.index
        return self._output

    def _mix(self, block: Block) -> np.ndarray:
        acc = np.zeros((1, block.frames), dtype=np.float64)
        for node in list(self._inputs):
            acc = acc + node.pull(block)
        return acc

    def process(self, block: Block, x: np.ndarray) -> np.ndarray:
        return x


class GainNode(AudioNode):
    def __init__(self, context: "AudioContext", gain: float = 1.0) -> None:
        super().__init__(context)
        self.gain = AudioParam(context, gain)

    def process(self, block: Block, x: np.ndarray) -> np.ndarray:
        return x * self.gain.values(block)


class SourceNode(AudioNode):
    """A node that produces sound between ``start()`` and ``stop()``."""

    def __init__(self, context: "AudioContext") -> None:
        super().__init__(context)
        self.start_time: float | None = None
        self.stop_time = math.inf
        self.on_ended: list[Callable[[], None]] = []
        self.ended = False

    def start(self, when: float | None = None) -> None:
        if self.start_time is not None:
            raise RuntimeError("source already started")
        self.start_time = self.context.current_time if when is None else float(when)
        self.context._add_source(self)

    def stop(self, when: float | None = None) -> None:
        if self.start_time is None:
            raise RuntimeError("source stopped before start")
        when = self.context.current_time if when is None else float(when)
        self.stop_time = max(self.start_time, when)

    def _end(self) -> None:
        self.ended = True
        for callback in self.on_ended:
            callback()
        self.on_ended.clear()

    def process(self, block: Block, x: np.ndarray) -> np.ndarray:
        if self.start_time is None or block.end <= self.start_time or block.start >= self.stop_time:
            return np.zeros((1, block.frames), dtype=np.float64)
        mask = (block.times >= self.start_time) & (block.times < self.stop_time)
        return self.generate(block) * mask

    def generate(self, block: Block) -> np.ndarray:
        raise NotImplementedError


class OscillatorNode(SourceNode):
    def __init__(
        self,
        context: "AudioContext",
        type: str = "sine",
        frequency: float = 440.0,
        detune: float = 0.0,
    ) -> None:
        super().__init__(context)
        if type not in WAVEFORMS:
            raise ValueError(f"unknown waveform {type!r}")
        self.type = type
        nyquist = context.sample_rate / 2.0
        self.frequency = AudioParam(context, frequency, -nyquist, nyquist)
        self.detune = AudioParam(context, detune)
        self._phase = 0.0

    def generate(self, block: Block) -> np.ndarray:
        freq = self.frequency.values(block)
        if self.detune.value != 0 or self.detune.scheduled or self.detune._inputs:
            freq = freq * np.power(2.0, self.detune.values(block) / 1200.0)
        inc = freq / block.sample_rate
        acc = np.cumsum(inc)
        phase = (self._phase + acc - inc) % 1.0
        self._phase = float((self._phase + acc[-1]) % 1.0)
        if self.type == "sine":
            wave = np.sin(2.0 * np.pi * phase)
        elif self.type == "square":
            wave = np.where(phase < 0.5, 1.0, -1.0)
        elif self.type == "sawtooth":
            wave = 2.0 * phase - 1.0
        else:
            wave = 1.0 - 4.0 * np.abs((phase + 0.25) % 1.0 - 0.5)
        return wave[np.newaxis, :]


class NoiseBurstNode(SourceNode):
    """White noise with a linear fade to silence over ``duration`` seconds."""

    def __init__(self, context: "AudioContext", duration: float, seed: int | None = None) -> None:
        super().__init__(context)
        frames = max(1, int(context.sample_rate * duration))
        rng = np.random.default_rng(seed)
        fade = 1.0 - np.arange(frames, dtype=np.float64) / frames
        self.buffer = (rng.random(frames) * 2.0 - 1.0) * fade
        self.duration = frames / context.sample_rate

    def start(self, when: float | None = None) -> None:
        super().start(when)
        self.stop_time = self.start_time + self.duration

    def generate(self, block: Block) -> np.ndarray:
        idx = np.round((block.times - self.start_time) * block.sample_rate).astype(np.int64)
        valid = (idx >= 0) & (idx < len(self.buffer))
        out = np.zeros(block.frames, dtype=np.float64)
        out[valid] = self.buffer[idx[valid]]
        return out[np.newaxis, :]


def biquad_coefficients(
    kind: str, frequency: float, q: float, sample_rate: int
) -> tuple[np.ndarray, np.ndarray]:
    """RBJ cookbook biquad coefficients, normalised so ``a[0] == 1``.

    For lowpass/highpass ``q`` is a resonance in dB; for bandpass/notch it is
    the linear quality factor.
    """
    f0 = min(max(frequency, 10.0), sample_rate * 0.49)
    w0 = 2.0 * math.pi * f0 / sample_rate
    cos_w, sin_w = math.cos(w0), math.sin(w0)
    if kind in ("lowpass", "highpass"):
        alpha = sin_w / (2.0 * 10.0 ** (q / 20.0))
    else:
        alpha = sin_w / (2.0 * max(q, 1e-4))

    if kind == "lowpass":
        b = [(1 - cos_w) / 2, 1 - cos_w, (1 - cos_w) / 2]
    elif kind == "highpass":
        b = [(1 + cos_w) / 2, -(1 + cos_w), (1 + cos_w) / 2]
    elif kind == "bandpass":
        b = [alpha, 0.0, -alpha]
    elif kind == "notch":
        b = [1.0, -2.0 * cos_w, 1.0]
    else:
        raise ValueError(f"unknown filter type {kind!r}")
    a = [1 + alpha, -2 * cos_w, 1 - alpha]
    return np.array(b) / a[0], np.array(a) / a[0]


class BiquadFilterNode(AudioNode):
    def __init__(
        self,
        context: "AudioContext",
        type: str = "lowpass",
        frequency: float = 350.0,
        q: float = 1.0,
    ) -> None:
        super().__init__(context)
        if type not in FILTER_TYPES:
            raise ValueError(f"unknown filter type {type!r}")
        self.type = type
        self.frequency = AudioParam(context, frequency, 0.0, context.sample_rate / 2.0)
        self.q = AudioParam(context, q)
        self._zi: np.ndarray | None = None

    def process(self, block: Block, x: np.ndarray) -> np.ndarray:
        # Coefficients are k-rate: one set per quantum
        f0 = float(self.frequency.values(block)[0])
        q = float(self.q.values(block)[0])
        b, a = biquad_coefficients(self.type, f0, q, block.sample_rate)
        if self._zi is None or self._zi.shape[0] != x.shape[0]:
            self._zi = np.zeros((x.shape[0], 2), dtype=np.float64)
        y, self._zi = lfilter(b, a, x, axis=-1, zi=self._zi)
        return y


class StereoPannerNode(AudioNode):
    """Equal-power panner; input is folded to mono first."""

    def __init__(self, context: "AudioContext", pan: float = 0.0) -> None:
        super().__init__(context)
        self.pan = AudioParam(context, pan, -1.0, 1.0)

    def process(self, block: Block, x: np.ndarray) -> np.ndarray:
        mono = x.mean(axis=0)
        angle = (self.pan.values(block) + 1.0) * (np.pi / 4.0)
        return np.vstack((mono * np.cos(angle), mono * np.sin(angle)))


class DelayNode(AudioNode):
    """Stereo delay line whose output is fed back into its input.

    The delay is never shorter than one render quantum, so the samples read in
    a quantum were always written by an earlier one.
    """

    def __init__(
        self,
        context: "AudioContext",
        delay_time: float = 0.0,
        feedback: float = 0.0,
        max_delay: float = 1.0,
    ) -> None:
        super().__init__(context)
        self.delay_time = AudioParam(context, delay_time, 0.0, max_delay)
        self.feedback = AudioParam(context, feedback, -0.99, 0.99)
        length = int(max_delay * context.sample_rate) + 2 * context.quantum
        self._buffer = np.zeros((2, length), dtype=np.float64)
        self._write = 0

    def process(self, block: Block, x: np.ndarray) -> np.ndarray:
        n = block.frames
        length = self._buffer.shape[1]
        delay = int(round(float(self.delay_time.values(block)[0]) * block.sample_rate))
        delay = min(max(delay, self.context.quantum), length - self.context.quantum)
        fb = float(self.feedback.values(block)[0])
        write_idx = (self._write + np.arange(n)) % length
        read_idx = (write_idx - delay) % length
        y = self._buffer[:, read_idx]
        self._buffer[:, write_idx] = np.broadcast_to(x, (2, n)) + fb * y
        self._write = (self._write + n) % length
        return y


class DestinationNode(AudioNode):
    def process(self, block: Block, x: np.ndarray) -> np.ndarray:
        return np.broadcast_to(x, (2, block.frames))


class AudioContext:
    """Owns the audio clock, the destination node, live sources and clock timers.

    ``current_time`` only advances while blocks are rendered, so everything
    scheduled against it lines up with what the listener hears.
    """

    def __init__(self, sample_rate: int = SAMPLE_RATE, quantum: int = RENDER_QUANTUM) -> None:
        self.sample_rate = int(sample_rate)
        self.quantum = int(quantum)
        self.state = "running"
        self.destination = DestinationNode(self)
        self._frame = 0
        self._block_index = 0
        self._sources: list[SourceNode] = []
        self._timers: list[tuple[float, int, Callable[[], None]]] = []
        self._seq = itertools.count()

    @property
    def current_time(self) -> float:
        return self._frame / self.sample_rate

    @property
    def active_sources(self) -> tuple[SourceNode, ...]:
        return tuple(self._sources)

    def _add_source(self, source: SourceNode) -> None:
        self._sources.append(source)

    def call_at(self, when: float, callback: Callable[[], None]) -> None:
        """Run ``callback`` once the audio clock reaches ``when``."""
        heapq.heappush(self._timers, (float(when), next(self._seq), callback))

    def suspend(self) -> None:
        if self.state == "running":
            self.state = "suspended"

    def resume(self) -> None:
        if self.state == "suspended":
            self.state = "running"

    def close(self) -> None:
        self.state = "closed"
        for source in self._sources:
            source.on_ended.clear()
        self._sources.clear()
        self._timers.clear()
        self.destination._inputs.clear()

    def render(self, frames: int) -> np.ndarray:
        """Render ``frames`` stereo samples as a float32 array of shape (2, frames)."""
        if self.state == "closed":
            raise RuntimeError("audio context is closed")
        out = np.zeros((2, frames), dtype=np.float32)
        if self.state == "suspended":
            return out
        pos = 0
        while pos < frames:
            n = min(self.quantum, frames - pos)
            block = Block(self._block_index, self.current_time, n, self.sample_rate)
            out[:, pos : pos + n] = self.destination.pull(block)
            self._frame += n
            self._block_index += 1
            pos += n
            self._finish_block()
        return out

    def _finish_block(self) -> None:
        now = self.current_time
        finished = [s for s in self._sources if s.stop_time <= now]
        for source in finished:
            self._sources.remove(source)
            source._end()
        while self._timers and self._timers[0][0] <= now:
            _, _, callback = heapq.heappop(self._timers)
            callback()
