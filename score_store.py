# High-score persistence: one named integer in a small key-value store.
from __future__ import annotations

import json
import logging
import os
from typing import Protocol


logger = logging.getLogger(__name__)

HIGH_SCORE_KEY = "highScore"
DEFAULT_SCORES_PATH = os.path.join(os.path.expanduser("~"), ".namesnake", "scores.json")


class HighScoreStore(Protocol):
    def load(self) -> int: ...

    def save(self, value: int) -> None: ...


class MemoryHighScoreStore:
    """Process-local store, used for tests and when persistence is disabled."""
    def __init__(self, value: int = 0) -> None:
        self.value = value
        self.saves: list[int] = []

    def load(self) -> int:
        return self.value

    def save(self, value: int) -> None:
        self.value = value
        self.saves.append(value)


class JsonHighScoreStore:
    """JSON object on disk; only the high-score key is touched, other keys survive writes."""
    def __init__(self, path: str = DEFAULT_SCORES_PATH, key: str = HIGH_SCORE_KEY) -> None:
        self.path = path
        self.key = key

    def _read_all(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable score file %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring score file %s: expected a JSON object", self.path)
            return {}
        return data

    def load(self) -> int:
        raw = self._read_all().get(self.key, 0)
        try:
            value = int(raw)
        except (TypeError, ValueError):
            logger.warning("Ignoring non-integer %s=%r in %s", self.key, raw, self.path)
            return 0
        return max(0, value)

    def save(self, value: int) -> None:
        data = self._read_all()
        data[self.key] = int(value)
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
