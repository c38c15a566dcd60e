"""Best score and player name, persisted as a small JSON key-value file.

Storage problems never interrupt play: unreadable or corrupt files yield
defaults and failed writes are logged and dropped.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any

from .config import BEST_SCORE_KEY, DEFAULT_PLAYER_NAME, PLAYER_NAME_KEY

logger = logging.getLogger(__name__)

DEFAULT_PATH = Path.home() / ".flappy_dopamine" / "storage.json"


def sanitize_name(name: Any) -> str:
    cleaned = name.strip() if isinstance(name, str) else ""
    return cleaned or DEFAULT_PLAYER_NAME


class ScoreStore:
    def __init__(self, path: Path | str | None = None) -> None:
        self.path = Path(path) if path is not None else DEFAULT_PATH
        self._data = self._read()

    def _read(self) -> dict[str, Any]:
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable storage file %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring storage file %s: expected an object", self.path)
            return {}
        return data

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(".tmp")
            with tmp.open("w", encoding="utf-8") as f:
                json.dump(self._data, f, ensure_ascii=False, indent=2)
            tmp.replace(self.path)
        except OSError as exc:
            logger.warning("Could not save %s to %s: %s", key, self.path, exc)

    def load_best(self) -> int:
        value = self.get(BEST_SCORE_KEY, 0)
        try:
            best = float(value)
        except (TypeError, ValueError):
            return 0
        if not math.isfinite(best) or best < 0:
            return 0
        return int(best)

    def save_best(self, best: int) -> None:
        self.set(BEST_SCORE_KEY, int(best))

    def load_name(self) -> str:
        return sanitize_name(self.get(PLAYER_NAME_KEY, ""))

    def save_name(self, name: str) -> None:
        self.set(PLAYER_NAME_KEY, sanitize_name(name))
