"""Remote high-score table over a PostgREST-style HTTP API.

``ScoreService`` is the thin ``requests`` client and raises
:class:`ScoreServiceError` on any failure. ``Leaderboard`` wraps it for the
game: it never raises, keeps the last good list and hands back a short notice
for the HUD when the service misbehaves.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import requests

from .config import HISTORY_LIMIT, REQUEST_TIMEOUT, SCORES_KEY_ENV, SCORES_URL_ENV
from .storage import sanitize_name

logger = logging.getLogger(__name__)

SAVE_FAILED_NOTICE = "Online save failed. Try again later."


class ScoreServiceError(RuntimeError):
    """The remote score service could not be reached or answered badly."""


@dataclass(frozen=True)
class ScoreEntry:
    name: str
    score: int
    played_at: datetime


def _parse_time(value: Any) -> datetime:
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            pass
    return datetime.now(timezone.utc)


def _entry(row: Any) -> ScoreEntry | None:
    if not isinstance(row, dict):
        return None
    score = row.get("score")
    if isinstance(score, bool) or not isinstance(score, (int, float)) or score < 0:
        return None
    return ScoreEntry(sanitize_name(row.get("player_name")), int(score), _parse_time(row.get("created_at")))


def _sort_key(entry: ScoreEntry) -> tuple[int, float]:
    played = entry.played_at
    if played.tzinfo is None:
        played = played.replace(tzinfo=timezone.utc)
    return entry.score, played.timestamp()


class ScoreService:
    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        session: requests.Session | None = None,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        if api_key:
            self.session.headers.update({"apikey": api_key, "Authorization": f"Bearer {api_key}"})

    @classmethod
    def from_env(cls) -> "ScoreService | None":
        url = os.environ.get(SCORES_URL_ENV)
        if not url:
            return None
        return cls(url, os.environ.get(SCORES_KEY_ENV))

    def submit(self, name: str, score: int) -> None:
        payload = {"player_name": sanitize_name(name), "score": int(score)}
        try:
            response = self.session.post(f"{self.base_url}/rpc/save_score", json=payload, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise ScoreServiceError(f"could not save score: {exc}") from exc

    def fetch_top(self, limit: int = HISTORY_LIMIT) -> list[ScoreEntry]:
        params = {
            "select": "player_name,score,created_at",
            "order": "score.desc,created_at.desc",
            "limit": str(limit),
        }
        try:
            response = self.session.get(f"{self.base_url}/score_entries", params=params, timeout=self.timeout)
            response.raise_for_status()
            rows = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise ScoreServiceError(f"could not load scores: {exc}") from exc
        if not isinstance(rows, list):
            raise ScoreServiceError("unexpected score list payload")
        entries = [e for e in (_entry(row) for row in rows) if e is not None]
        entries.sort(key=_sort_key, reverse=True)
        return entries[:limit]


class Leaderboard:
    """Last known top scores; a missing service makes every call a no-op."""

    def __init__(self, service: ScoreService | None = None, limit: int = HISTORY_LIMIT) -> None:
        self.service = service
        self.limit = limit
        self.entries: list[ScoreEntry] = []

    @property
    def enabled(self) -> bool:
        return self.service is not None

    def refresh(self) -> bool:
        if self.service is None:
            return False
        try:
            self.entries = self.service.fetch_top(self.limit)
        except ScoreServiceError as exc:
            logger.warning("Leaderboard refresh failed: %s", exc)
            return False
        return True

    def record(self, name: str, score: int) -> str | None:
        """Submit a finished run and reload the table; returns a notice on failure."""
        if self.service is None:
            return None
        try:
            self.service.submit(name, score)
        except ScoreServiceError as exc:
            logger.warning("Score submission failed: %s", exc)
            return SAVE_FAILED_NOTICE
        self.refresh()
        return None
