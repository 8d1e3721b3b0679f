# Core Snake game state and rules, independent from GUI/timer code.
from __future__ import annotations

from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
import itertools
import random

from config import Cell, RunConfig, validate_config
from obstacles import generate_obstacles, random_color
from placement import place_food, spawn_snake
from score_store import HighScoreStore, MemoryHighScoreStore


ObstacleFactory = Callable[[str, RunConfig, random.Random], frozenset[Cell]]

# Unit vectors; scaled by the grid unit when applied.
DIRECTIONS = {
    "left": (-1, 0),
    "up": (0, -1),
    "right": (1, 0),
    "down": (0, 1),
}


class InvalidNameError(ValueError):
    """Raised for an empty or whitespace-only player name."""


class GamePhase(Enum):
    AWAITING_NAME = "awaiting_name"
    RUNNING = "running"
    GAME_OVER = "game_over"


class TickOutcome(Enum):
    MOVED = "moved"
    ATE = "ate"
    SELF_COLLISION = "self_collision"
    OBSTACLE_COLLISION = "obstacle_collision"


@dataclass(frozen=True)
class TickResult:
    outcome: TickOutcome
    speed_changed: bool = False

    @property
    def game_over(self) -> bool:
        return self.outcome in (TickOutcome.SELF_COLLISION, TickOutcome.OBSTACLE_COLLISION)


@dataclass
class GameSession:
    """Everything one session owns; handed to the renderer and controller by reference."""
    name: str = ""
    phase: GamePhase = GamePhase.AWAITING_NAME
    obstacles: frozenset[Cell] = frozenset()
    obstacle_color: str = "#000000"
    snake: deque[Cell] = field(default_factory=deque)    # ordered body, head at index 0
    direction: Cell = (0, 0)
    food: Cell | None = None                            # None = unplaced this cycle
    score: int = 0
    high_score: int = 0
    tick_interval: int = 150
    grace: bool = False
    epoch: int = 0                                      # bumped on every start/reset
    spawn_fell_back: bool = False


def validate_name(raw: str) -> str:
    name = raw.strip()
    if not name:
        raise InvalidNameError("Please enter a valid name.")
    return name


class SnakeGame:
    """State machine over a GameSession: start, tick, steer, grace expiry, reset."""
    def __init__(
        self,
        config: RunConfig | None = None,
        store: HighScoreStore | None = None,
        rng: random.Random | None = None,
        obstacle_factory: ObstacleFactory = generate_obstacles,
    ) -> None:
        self.config = validate_config(config or RunConfig())
        self.store = store if store is not None else MemoryHighScoreStore()
        self.rng = rng if rng is not None else random.Random(self.config.seed)
        self.obstacle_factory = obstacle_factory
        # High score is read once per process.
        self.session = GameSession(
            high_score=self.store.load(),
            tick_interval=self.config.initial_tick_ms,
        )

    def start(self, raw_name: str) -> GameSession:
        """AwaitingName -> Running. Invalid names raise before anything changes."""
        name = validate_name(raw_name)
        if self.session.phase is not GamePhase.AWAITING_NAME:
            raise RuntimeError("start() is only valid before the first run; use reset()")
        self.session.name = name
        self._new_run()
        return self.session

    def reset(self) -> GameSession:
        """GameOver -> Running with a freshly generated board."""
        if self.session.phase is GamePhase.AWAITING_NAME:
            raise RuntimeError("reset() needs a name; call start() first")
        if not self.config.carry_speed_across_resets:
            self.session.tick_interval = self.config.initial_tick_ms
        self._new_run()
        return self.session

    def _new_run(self) -> None:
        s = self.session
        s.obstacles = self.obstacle_factory(s.name, self.config, self.rng)
        spawn = spawn_snake(s.obstacles, self.config, self.rng)
        s.snake = deque(spawn.body)
        s.spawn_fell_back = spawn.fell_back
        s.direction = (self.config.grid_unit, 0)
        s.score = 0
        s.food = place_food(s.obstacles, s.snake, self.config, self.rng)
        s.obstacle_color = random_color(self.rng)
        s.grace = True
        s.epoch += 1
        s.phase = GamePhase.RUNNING

    def _wrap(self, x: int, y: int) -> Cell:
        g = self.config.grid_unit
        width = self.config.canvas_width
        height = self.config.canvas_height
        if x >= width:
            x = 0
        elif x < 0:
            x = width - g
        if y >= height:
            y = 0
        elif y < 0:
            y = height - g
        return x, y

    def next_head(self) -> Cell:
        head_x, head_y = self.session.snake[0]
        dx, dy = self.session.direction
        return self._wrap(head_x + dx, head_y + dy)

    def tick(self) -> TickResult:
        """Advance one step: move, collide, eat or trim the tail."""
        s = self.session
        if s.phase is not GamePhase.RUNNING:
            raise RuntimeError(f"tick() requires a running game, phase is {s.phase.value}")

        new_head = self.next_head()
        s.snake.appendleft(new_head)

        if new_head in itertools.islice(s.snake, 1, None):
            s.phase = GamePhase.GAME_OVER
            return TickResult(TickOutcome.SELF_COLLISION)

        # Obstacles only bite once the grace period is over.
        if not s.grace and new_head in s.obstacles:
            s.phase = GamePhase.GAME_OVER
            return TickResult(TickOutcome.OBSTACLE_COLLISION)

        if s.food is not None and new_head == s.food:
            s.score += 1
            self._record_high_score()
            s.food = place_food(s.obstacles, s.snake, self.config, self.rng)
            return TickResult(TickOutcome.ATE, speed_changed=self._ramp_speed())

        s.snake.pop()
        if s.food is None:
            s.food = place_food(s.obstacles, s.snake, self.config, self.rng)
        return TickResult(TickOutcome.MOVED)

    def _ramp_speed(self) -> bool:
        s = self.session
        if s.score % self.config.speed_ramp_divisor == 0 and s.tick_interval > self.config.min_tick_ms:
            s.tick_interval -= self.config.tick_step_ms
            return True
        return False

    def _record_high_score(self) -> None:
        s = self.session
        if s.score > s.high_score:
            s.high_score = s.score
            self.store.save(s.high_score)

    def change_direction(self, name: str) -> bool:
        """Steer; a turn onto the current axis (including a 180-degree reversal) is ignored."""
        if name not in DIRECTIONS:
            raise ValueError(f"Unknown direction: {name!r}")
        unit_x, unit_y = DIRECTIONS[name]
        g = self.config.grid_unit
        vector = (unit_x * g, unit_y * g)
        current_x, _ = self.session.direction
        if (vector[0] == 0) == (current_x == 0):
            return False
        self.session.direction = vector
        return True

    def end_grace(self, epoch: int) -> bool:
        """Grace timer callback; a timer armed in an earlier run is ignored."""
        s = self.session
        if epoch != s.epoch or s.phase is not GamePhase.RUNNING:
            return False
        s.grace = False
        return True

    def score_line(self) -> str:
        return f"Score: {self.session.score} | High Score: {self.session.high_score}"
