"""Tests for the game_logic state machine."""

from __future__ import annotations

from collections import deque

import pytest

from config import RunConfig
from game_logic import (
    GamePhase,
    InvalidNameError,
    TickOutcome,
    validate_name,
)
from helpers import make_game
from score_store import MemoryHighScoreStore


def place(game, body, direction=(20, 0), food=(400, 400)) -> None:
    """Put the snake in a known spot with food out of the way."""
    game.session.snake = deque(body)
    game.session.direction = direction
    game.session.food = food


class TestStart:
    @pytest.mark.parametrize("raw", ["", "   ", "\t\n"])
    def test_blank_names_rejected_without_state_change(self, raw: str) -> None:
        game = make_game()
        with pytest.raises(InvalidNameError):
            game.start(raw)
        assert game.session.phase is GamePhase.AWAITING_NAME
        assert game.session.epoch == 0
        assert game.obstacle_factory.calls == []

    def test_name_is_stripped(self) -> None:
        assert validate_name("  Ada ") == "Ada"

    def test_start_builds_a_running_board(self) -> None:
        obstacles = frozenset({(0, 0), (20, 0), (40, 0)})
        game = make_game(obstacles=obstacles)
        session = game.start(" AB ")

        assert session.name == "AB"
        assert session.phase is GamePhase.RUNNING
        assert session.grace is True
        assert session.epoch == 1
        assert session.direction == (20, 0)
        assert len(session.snake) == 3
        assert not set(session.snake) & obstacles
        assert session.food not in session.snake
        assert session.food not in obstacles
        assert game.obstacle_factory.calls == ["AB"]

    def test_tick_before_start_is_an_error(self) -> None:
        with pytest.raises(RuntimeError):
            make_game().tick()

    def test_high_score_read_from_store(self) -> None:
        game = make_game(store=MemoryHighScoreStore(7))
        assert game.session.high_score == 7
        assert game.score_line() == "Score: 0 | High Score: 7"


class TestDirection:
    def test_reverse_is_ignored_and_turns_accepted(self) -> None:
        game = make_game()
        game.start("A")
        assert game.session.direction == (20, 0)

        assert game.change_direction("left") is False
        assert game.session.direction == (20, 0)

        assert game.change_direction("up") is True
        assert game.session.direction == (0, -20)

        assert game.change_direction("left") is True
        assert game.session.direction == (-20, 0)

    def test_down_and_same_axis(self) -> None:
        game = make_game()
        game.start("A")
        assert game.change_direction("right") is False
        assert game.change_direction("down") is True
        assert game.change_direction("up") is False
        assert game.session.direction == (0, 20)

    def test_unknown_direction(self) -> None:
        game = make_game()
        game.start("A")
        with pytest.raises(ValueError):
            game.change_direction("north")


class TestMovement:
    @pytest.mark.parametrize(
        ("body", "direction", "expected"),
        [
            ([(780, 100), (760, 100), (740, 100)], (20, 0), (0, 100)),
            ([(0, 100), (20, 100), (40, 100)], (-20, 0), (780, 100)),
            ([(100, 0), (100, 20), (100, 40)], (0, -20), (100, 580)),
            ([(100, 580), (100, 560), (100, 540)], (0, 20), (100, 0)),
        ],
    )
    def test_wraparound_on_every_edge(self, body, direction, expected) -> None:
        game = make_game()
        game.start("A")
        place(game, body, direction)
        result = game.tick()
        assert result.outcome is TickOutcome.MOVED
        assert game.session.snake[0] == expected

    def test_plain_move_keeps_length(self) -> None:
        game = make_game()
        game.start("A")
        place(game, [(100, 100), (80, 100), (60, 100)])
        game.tick()
        assert list(game.session.snake) == [(120, 100), (100, 100), (80, 100)]

    def test_eating_grows_by_one_then_length_holds(self) -> None:
        game = make_game()
        game.start("A")
        place(game, [(100, 100), (80, 100), (60, 100)], food=(120, 100))

        result = game.tick()
        assert result.outcome is TickOutcome.ATE
        assert len(game.session.snake) == 4
        assert game.session.score == 1
        assert game.session.food not in game.session.snake

        game.session.food = (400, 400)
        assert game.tick().outcome is TickOutcome.MOVED
        assert len(game.session.snake) == 4

    def test_unplaced_food_is_retried_on_next_move(self) -> None:
        game = make_game()
        game.start("A")
        place(game, [(100, 100), (80, 100), (60, 100)], food=None)
        game.tick()
        assert game.session.food is not None
        assert game.session.food not in game.session.snake


class TestCollisions:
    def test_self_collision_ends_run_even_in_grace(self) -> None:
        game = make_game()
        game.start("A")
        body = [(100, 100), (120, 100), (120, 120), (100, 120), (80, 120)]
        place(game, body, direction=(0, 20))
        assert game.session.grace is True

        result = game.tick()
        assert result.outcome is TickOutcome.SELF_COLLISION
        assert result.game_over
        assert game.session.phase is GamePhase.GAME_OVER

    def test_obstacles_ignored_during_grace(self) -> None:
        game = make_game(obstacles=frozenset({(500, 500)}))
        game.start("A")
        place(game, [(480, 500), (460, 500), (440, 500)], food=(0, 0))
        assert game.tick().outcome is TickOutcome.MOVED
        assert game.session.snake[0] == (500, 500)

    def test_obstacle_collision_after_grace(self) -> None:
        game = make_game(obstacles=frozenset({(500, 500)}))
        game.start("A")
        assert game.end_grace(game.session.epoch) is True
        place(game, [(480, 500), (460, 500), (440, 500)], food=(0, 0))

        result = game.tick()
        assert result.outcome is TickOutcome.OBSTACLE_COLLISION
        assert game.session.phase is GamePhase.GAME_OVER

    def test_tick_after_game_over_is_an_error(self) -> None:
        game = make_game()
        game.start("A")
        place(game, [(100, 100), (120, 100), (120, 120), (100, 120), (80, 120)], direction=(0, 20))
        game.tick()
        with pytest.raises(RuntimeError):
            game.tick()


class TestSpeedRamp:
    def test_fifth_point_shortens_interval(self) -> None:
        game = make_game()
        game.start("A")
        game.session.score = 4
        place(game, [(100, 100), (80, 100), (60, 100)], food=(120, 100))

        result = game.tick()
        assert result.speed_changed is True
        assert game.session.score == 5
        assert game.session.tick_interval == 140

    def test_non_multiple_keeps_interval(self) -> None:
        game = make_game()
        game.start("A")
        game.session.score = 2
        place(game, [(100, 100), (80, 100), (60, 100)], food=(120, 100))
        assert game.tick().speed_changed is False
        assert game.session.tick_interval == 150

    def test_floor_is_respected(self) -> None:
        game = make_game()
        game.start("A")
        game.session.score = 9
        game.session.tick_interval = 50
        place(game, [(100, 100), (80, 100), (60, 100)], food=(120, 100))
        assert game.tick().speed_changed is False
        assert game.session.tick_interval == 50


class TestHighScore:
    def test_new_high_score_is_persisted(self) -> None:
        store = MemoryHighScoreStore(3)
        game = make_game(store=store)
        game.start("A")
        game.session.score = 3
        place(game, [(100, 100), (80, 100), (60, 100)], food=(120, 100))
        game.tick()

        assert game.session.high_score == 4
        assert store.saves == [4]
        assert game.score_line() == "Score: 4 | High Score: 4"

    def test_lower_score_does_not_write(self) -> None:
        store = MemoryHighScoreStore(10)
        game = make_game(store=store)
        game.start("A")
        place(game, [(100, 100), (80, 100), (60, 100)], food=(120, 100))
        game.tick()
        assert store.saves == []
        assert game.session.high_score == 10


class TestResetAndGrace:
    def _finish_run(self, game) -> None:
        place(game, [(100, 100), (120, 100), (120, 120), (100, 120), (80, 120)], direction=(0, 20))
        assert game.tick().game_over

    def test_reset_regenerates_and_bumps_epoch(self) -> None:
        game = make_game()
        game.start("AB")
        game.session.score = 3
        self._finish_run(game)

        session = game.reset()
        assert session.phase is GamePhase.RUNNING
        assert session.epoch == 2
        assert session.score == 0
        assert session.grace is True
        assert len(session.snake) == 3
        assert session.direction == (20, 0)
        assert game.obstacle_factory.calls == ["AB", "AB"]

    def test_reset_carries_speed_by_default(self) -> None:
        game = make_game()
        game.start("A")
        game.session.tick_interval = 130
        self._finish_run(game)
        assert game.reset().tick_interval == 130

    def test_reset_can_restore_initial_speed(self) -> None:
        game = make_game(RunConfig(carry_speed_across_resets=False))
        game.start("A")
        game.session.tick_interval = 130
        self._finish_run(game)
        assert game.reset().tick_interval == 150

    def test_reset_requires_a_name(self) -> None:
        with pytest.raises(RuntimeError):
            make_game().reset()

    def test_grace_from_previous_run_is_inert(self) -> None:
        game = make_game()
        game.start("A")
        old_epoch = game.session.epoch
        self._finish_run(game)
        game.reset()

        assert game.end_grace(old_epoch) is False
        assert game.session.grace is True
        assert game.end_grace(game.session.epoch) is True
        assert game.session.grace is False
