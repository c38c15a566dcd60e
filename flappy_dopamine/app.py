"""Window, input mapping, HUD and the command-line entry point."""

from __future__ import annotations

import argparse
import logging
import webbrowser
from pathlib import Path
from typing import Callable, Sequence

import pygame

from .audio import AudioEngine
from .config import FPS, TEXT_COLOR, TEXT_DIM, WINDOW_HEIGHT, WINDOW_WIDTH
from .game import Game, metrics_for
from .leaderboard import Leaderboard, ScoreService
from .state import Mode
from .storage import ScoreStore

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 24
HELP_TEXT = "Space / Click to flap  |  P pause  |  M mute  |  S share  |  Tab edit name  |  Esc quit"


class SurfaceUnavailableError(RuntimeError):
    """No drawing surface could be created; the game cannot start."""


class FrameScheduler:
    """Fixed-rate loop that hands each frame the current time in seconds."""

    def __init__(self, fps: int = FPS) -> None:
        self.fps = fps
        self.clock = pygame.time.Clock()
        self.running = False

    def stop(self) -> None:
        self.running = False

    def run(self, frame: Callable[[float], None]) -> None:
        self.running = True
        while self.running:
            self.clock.tick(self.fps)
            frame(pygame.time.get_ticks() / 1000.0)


class App:
    """Owns the display and drives ``Game`` once per frame."""

    def __init__(
        self,
        width: int = WINDOW_WIDTH,
        height: int = WINDOW_HEIGHT,
        player_name: str | None = None,
        muted: bool = False,
        store: ScoreStore | None = None,
        leaderboard: Leaderboard | None = None,
    ) -> None:
        pygame.init()
        try:
            self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE | pygame.DOUBLEBUF)
        except pygame.error as exc:
            pygame.quit()
            raise SurfaceUnavailableError(f"could not open a {width}x{height} window: {exc}") from exc
        pygame.display.set_caption("Flappy Dopamine")
        self.scheduler = FrameScheduler()
        self.font_big = pygame.font.SysFont(None, 72)
        self.font_medium = pygame.font.SysFont(None, 40)
        self.font_small = pygame.font.SysFont(None, 26)

        width, height = self.screen.get_size()
        self.game = Game(
            metrics_for(width, height),
            store=store,
            leaderboard=leaderboard,
            audio=AudioEngine(muted=muted),
        )
        if player_name is not None:
            self.game.set_player_name(player_name)
        self.editing_name = False

        if self.game.leaderboard.refresh():
            logger.info("Loaded %d leaderboard entries", len(self.game.leaderboard.entries))

    # Input

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.VIDEORESIZE:
            self.screen = pygame.display.get_surface()
            self.game.resize(*self.screen.get_size())
            return
        if self.editing_name:
            self._handle_name_input(event)
            return
        if event.type == pygame.KEYDOWN:
            if event.key in (pygame.K_SPACE, pygame.K_UP, pygame.K_w):
                self.game.primary_action()
            elif event.key == pygame.K_p:
                self.game.toggle_pause()
            elif event.key == pygame.K_m:
                self.game.toggle_mute()
            elif event.key == pygame.K_s:
                self.share()
            elif event.key == pygame.K_TAB and self.game.mode in (Mode.IDLE, Mode.OVER):
                self.editing_name = True
            elif event.key == pygame.K_ESCAPE:
                pygame.event.post(pygame.event.Event(pygame.QUIT))
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self.game.primary_action()

    def _handle_name_input(self, event: pygame.event.Event) -> None:
        game = self.game
        if event.type == pygame.TEXTINPUT:
            game.name_draft = (game.name_draft + event.text)[:NAME_MAX_LENGTH]
        elif event.type == pygame.KEYDOWN:
            if event.key in (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_TAB):
                game.set_player_name(game.name_draft)
                self.editing_name = False
            elif event.key == pygame.K_ESCAPE:
                game.name_draft = game.state.player_name
                self.editing_name = False
            elif event.key == pygame.K_BACKSPACE:
                game.name_draft = game.name_draft[:-1]

    def share(self) -> None:
        url = self.game.share_url()
        logger.info("Share link: %s", url)
        if webbrowser.open(url):
            self.game.notify("Share link opened")
        else:
            self.game.notify("Share link written to the log")

    # Drawing

    def _blit_text(self, font: pygame.font.Font, text: str, color, **anchor) -> pygame.Rect:
        rendered = font.render(text, True, color)
        rect = rendered.get_rect(**anchor)
        self.screen.blit(rendered, rect)
        return rect

    def draw_hud(self) -> None:
        game = self.game
        state = game.state
        w, h = self.screen.get_size()
        cx, cy = w // 2, h // 2

        if state.mode != Mode.IDLE:
            self._blit_text(self.font_big, str(state.score), TEXT_COLOR, midtop=(cx, 20))
        self._blit_text(self.font_small, f"Best: {state.best}", TEXT_DIM, topleft=(16, 16))
        self._blit_text(self.font_small, f"{game.theme.emoji} {game.theme.label}", TEXT_DIM, topleft=(16, 42))
        if state.muted:
            self._blit_text(self.font_small, "Muted", TEXT_DIM, topright=(w - 16, 16))

        if state.mode == Mode.IDLE:
            self._blit_text(self.font_big, "Flappy Dopamine", TEXT_COLOR, center=(cx, cy - 90))
            self._blit_text(self.font_medium, "Press Space or click to fly", TEXT_DIM, center=(cx, cy - 36))
            self._draw_name_field(cx, cy + 20)
        elif state.mode == Mode.PAUSED:
            self._blit_text(self.font_big, "Paused", TEXT_COLOR, center=(cx, cy - 30))
            self._blit_text(self.font_small, "P or Space to resume", TEXT_DIM, center=(cx, cy + 20))
        elif state.mode == Mode.OVER:
            self._blit_text(self.font_big, "Game Over", TEXT_COLOR, center=(cx, cy - 120))
            self._blit_text(
                self.font_medium, f"Score {state.score}   Best {state.best}", TEXT_DIM, center=(cx, cy - 66)
            )
            self._blit_text(self.font_small, "Space / Click to play again", TEXT_DIM, center=(cx, cy - 32))
            self._draw_name_field(cx, cy)
            self._draw_leaderboard(cx, cy + 40)

        if state.notice:
            self._blit_text(self.font_medium, state.notice, TEXT_COLOR, midbottom=(cx, h - 48))
        self._blit_text(self.font_small, HELP_TEXT, TEXT_DIM, midbottom=(cx, h - 12))

    def _draw_name_field(self, x: int, y: int) -> None:
        if self.editing_name:
            label = f"Name: {self.game.name_draft}_   (Enter to confirm)"
        else:
            label = f"Player: {self.game.state.player_name}   (Tab to edit)"
        self._blit_text(self.font_small, label, TEXT_DIM, center=(x, y))

    def _draw_leaderboard(self, x: int, y: int) -> None:
        entries = self.game.leaderboard.entries
        if not entries:
            return
        self._blit_text(self.font_small, "Top scores", TEXT_COLOR, midtop=(x, y))
        for rank, entry in enumerate(entries, start=1):
            line = f"{rank:>2}. {entry.name:<{NAME_MAX_LENGTH}} {entry.score:>5}"
            self._blit_text(self.font_small, line, TEXT_DIM, midtop=(x, y + rank * 22))

    def draw(self, time: float) -> None:
        self.game.render(self.screen, time)
        self.draw_hud()
        pygame.display.flip()

    # Loop

    def frame(self, now: float) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.scheduler.stop()
                return
            self.handle_event(event)
        self.game.tick(now)
        self.game.audio.pump()
        self.draw(now)

    def run(self) -> None:
        self.scheduler.run(self.frame)
        self.close()

    def close(self) -> None:
        self.game.audio.dispose()
        pygame.quit()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="flappy-dopamine", description="Flap through shifting neon worlds.")
    parser.add_argument("--name", help="player name shown on the leaderboard")
    parser.add_argument("--muted", action="store_true", help="start with sound off")
    parser.add_argument("--width", type=int, default=WINDOW_WIDTH, help="window width in pixels")
    parser.add_argument("--height", type=int, default=WINDOW_HEIGHT, help="window height in pixels")
    parser.add_argument("--storage", type=Path, help="path of the local score file")
    parser.add_argument("--log-level", default="INFO", help="logging level (DEBUG, INFO, WARNING...)")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        app = App(
            width=args.width,
            height=args.height,
            player_name=args.name,
            muted=args.muted,
            store=ScoreStore(args.storage),
            leaderboard=Leaderboard(ScoreService.from_env()),
        )
    except SurfaceUnavailableError as exc:
        logger.error("Cannot start: %s", exc)
        return 1
    app.run()
    return 0
