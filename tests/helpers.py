"""Test doubles shared across the suite."""

from __future__ import annotations

import random

from config import RunConfig
from game_logic import GameSession, SnakeGame
from score_store import MemoryHighScoreStore


class RecordingNotifier:
    def __init__(self) -> None:
        self.scores: list[str] = []
        self.errors: list[str] = []
        self.warnings: list[str] = []
        self.game_overs: list[int] = []

    def show_score(self, text: str) -> None:
        self.scores.append(text)

    def invalid_name(self, message: str) -> None:
        self.errors.append(message)

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def game_over(self, score: int) -> None:
        self.game_overs.append(score)


class RecordingRenderer:
    def __init__(self) -> None:
        self.frames = 0

    def draw(self, session: GameSession) -> None:
        self.frames += 1


def fixed_obstacles(cells: frozenset = frozenset()):
    calls: list[str] = []

    def factory(text: str, config: RunConfig, rng: random.Random) -> frozenset:
        calls.append(text)
        return frozenset(cells)

    factory.calls = calls
    return factory


def make_game(
    config: RunConfig | None = None,
    obstacles: frozenset = frozenset(),
    store: MemoryHighScoreStore | None = None,
    seed: int = 0,
) -> SnakeGame:
    return SnakeGame(
        config or RunConfig(),
        store=store if store is not None else MemoryHighScoreStore(),
        rng=random.Random(seed),
        obstacle_factory=fixed_obstacles(obstacles),
    )
