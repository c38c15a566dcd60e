import os

os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame
import pytest

from conftest import FakeAudio, FakeLeaderboard
from flappy_dopamine import app as app_module
from flappy_dopamine.app import App, FrameScheduler, SurfaceUnavailableError, build_parser, main
from flappy_dopamine.leaderboard import ScoreEntry
from flappy_dopamine.state import Mode
from flappy_dopamine.storage import ScoreStore


@pytest.fixture
def app(tmp_path):
    application = App(
        width=640,
        height=360,
        player_name="Tester",
        store=ScoreStore(tmp_path / "storage.json"),
        leaderboard=FakeLeaderboard(),
    )
    application.game.audio = FakeAudio()
    yield application
    pygame.quit()


def key(k: int) -> pygame.event.Event:
    return pygame.event.Event(pygame.KEYDOWN, key=k, mod=0, unicode="", scancode=0)


def test_parser_defaults() -> None:
    args = build_parser().parse_args([])
    assert (args.width, args.height) == (1280, 720)
    assert args.name is None and not args.muted
    args = build_parser().parse_args(["--name", "Zed", "--muted", "--width", "800"])
    assert (args.name, args.muted, args.width) == ("Zed", True, 800)


def test_app_uses_window_metrics(app) -> None:
    assert app.game.metrics.width == 640
    assert app.game.metrics.scale == pytest.approx(0.5)
    assert app.game.state.player_name == "Tester"


def test_keys_drive_the_game(app) -> None:
    app.handle_event(key(pygame.K_SPACE))
    assert app.game.mode == Mode.RUNNING
    app.handle_event(key(pygame.K_p))
    assert app.game.mode == Mode.PAUSED
    app.handle_event(pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(10, 10)))
    assert app.game.mode == Mode.RUNNING
    app.handle_event(key(pygame.K_m))
    assert app.game.state.muted


def test_name_editing(app) -> None:
    app.handle_event(key(pygame.K_TAB))
    assert app.editing_name
    for _ in range(len("Tester")):
        app.handle_event(key(pygame.K_BACKSPACE))
    app.handle_event(pygame.event.Event(pygame.TEXTINPUT, text="Ada Lovelace"))
    # Space goes into the name while editing
    assert app.game.mode == Mode.IDLE
    app.handle_event(key(pygame.K_RETURN))
    assert not app.editing_name
    assert app.game.state.player_name == "Ada Lovelace"


def test_escape_cancels_name_edit(app) -> None:
    app.handle_event(key(pygame.K_TAB))
    app.handle_event(pygame.event.Event(pygame.TEXTINPUT, text="xyz"))
    app.handle_event(key(pygame.K_ESCAPE))
    assert not app.editing_name
    assert app.game.name_draft == "Tester"


def test_escape_requests_quit(app) -> None:
    pygame.event.clear()
    app.handle_event(key(pygame.K_ESCAPE))
    assert any(e.type == pygame.QUIT for e in pygame.event.get())


def test_share_notifies(app, monkeypatch) -> None:
    opened = []
    monkeypatch.setattr(app_module.webbrowser, "open", lambda url: opened.append(url) or False)
    app.handle_event(key(pygame.K_s))
    assert opened and "Tester" in opened[0]
    assert app.game.state.notice == "Share link written to the log"


@pytest.mark.parametrize("mode", list(Mode))
def test_draw_every_screen(app, mode: Mode) -> None:
    app.game.leaderboard.entries = [ScoreEntry("Ada", 9, None)]
    app.game.notify("hello")
    app.game.state.mode = mode
    app.draw(1.0)


def test_resize_event(app) -> None:
    app.handle_event(pygame.event.Event(pygame.VIDEORESIZE, w=800, h=600, size=(800, 600)))
    assert app.game.metrics.width == app.screen.get_width()
    assert app.game.metrics.height == app.screen.get_height()


def test_main_exits_when_no_surface(monkeypatch) -> None:
    def fail(*args, **kwargs):
        raise SurfaceUnavailableError("no display")

    monkeypatch.setattr(app_module, "App", fail)
    assert main(["--width", "320", "--height", "200"]) == 1


def test_scheduler_runs_until_stopped() -> None:
    pygame.init()
    scheduler = FrameScheduler(fps=1000)
    seen = []

    def frame(now: float) -> None:
        seen.append(now)
        if len(seen) == 3:
            scheduler.stop()

    scheduler.run(frame)
    assert len(seen) == 3
    assert seen == sorted(seen)


def test_quit_event_stops_the_frame_loop(app) -> None:
    pygame.event.clear()
    pygame.event.post(pygame.event.Event(pygame.QUIT))
    app.scheduler.running = True
    app.frame(0.5)
    assert not app.scheduler.running
    assert app.game.audio.count("pump") == 0


def test_frame_ticks_and_pumps_audio(app) -> None:
    pygame.event.clear()
    app.frame(1.0)
    app.frame(1.016)
    assert app.game.audio.count("pump") == 2
