import os
import random

os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import numpy as np
import pytest

from flappy_dopamine.audio import AudioEngine

AUDIO_RATE = 8000


class FakeAudio:
    """Records engine calls instead of making sound."""

    def __init__(self, available: bool = True) -> None:
        self.available = available
        self.active = False
        self.muted = False
        self.calls: list[tuple] = []

    def activate(self, theme=None, mode=None) -> bool:
        self.calls.append(("activate", mode))
        self.active = self.available
        return self.available

    def resume(self) -> None:
        self.calls.append(("resume",))

    def set_theme(self, theme, immediate: bool = False) -> None:
        self.calls.append(("set_theme", theme.id, immediate))

    def handle_mode_change(self, mode, immediate: bool = False) -> None:
        self.calls.append(("mode", mode, immediate))

    def set_muted(self, muted: bool) -> None:
        self.muted = muted
        self.calls.append(("muted", muted))

    def play_flap(self) -> None:
        self.calls.append(("flap",))

    def play_score(self) -> None:
        self.calls.append(("score",))

    def play_game_over(self) -> None:
        self.calls.append(("gameover",))

    def pump(self) -> None:
        self.calls.append(("pump",))

    def dispose(self) -> None:
        self.calls.append(("dispose",))

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)


class FakeLeaderboard:
    def __init__(self, notice: str | None = None) -> None:
        self.notice = notice
        self.entries: list = []
        self.recorded: list[tuple[str, int]] = []

    def refresh(self) -> bool:
        return False

    def record(self, name: str, score: int) -> str | None:
        self.recorded.append((name, score))
        return self.notice


@pytest.fixture
def fake_audio() -> FakeAudio:
    return FakeAudio()


@pytest.fixture
def fake_leaderboard() -> FakeLeaderboard:
    return FakeLeaderboard()


class FakeOutput:
    """Stands in for the mixer: collects pumped blocks, plays nothing."""

    sample_rate = AUDIO_RATE

    def __init__(self) -> None:
        self.blocks: list[np.ndarray] = []
        self.closed = False

    def pump(self, render) -> None:
        self.blocks.append(render(256))

    def close(self) -> None:
        self.closed = True


def make_engine(muted: bool = False) -> tuple[AudioEngine, list[FakeOutput]]:
    outputs: list[FakeOutput] = []

    def factory() -> FakeOutput:
        outputs.append(FakeOutput())
        return outputs[-1]

    return AudioEngine(output_factory=factory, rng=random.Random(0), muted=muted), outputs


def render_seconds(engine: AudioEngine, seconds: float) -> np.ndarray:
    return engine.context.render(int(seconds * AUDIO_RATE))
