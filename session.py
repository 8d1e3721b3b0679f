# Session lifecycle: name intake, timers, ticks, game over and reset.
from __future__ import annotations

import logging
from typing import Protocol

from game_logic import GameSession, InvalidNameError, SnakeGame, TickOutcome, TickResult
from scheduler import Scheduler, TimerHandle


logger = logging.getLogger(__name__)

SPAWN_FALLBACK_MESSAGE = "Unable to find a safe starting position for the snake."


class Notifier(Protocol):
    """User-facing side effects the controller needs from its host."""
    def show_score(self, text: str) -> None: ...

    def invalid_name(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...

    def game_over(self, score: int) -> None: ...


class FrameSink(Protocol):
    def draw(self, session: GameSession) -> None: ...


class SessionController:
    """Wires scheduler ticks, grace expiry, and steering into a SnakeGame."""
    def __init__(
        self,
        game: SnakeGame,
        scheduler: Scheduler,
        notifier: Notifier,
        renderer: FrameSink | None = None,
    ) -> None:
        self.game = game
        self.scheduler = scheduler
        self.notifier = notifier
        self.renderer = renderer
        self.tick_timer: TimerHandle | None = None
        self.grace_timer: TimerHandle | None = None
        self.runs = 0

    def submit_name(self, raw_name: str) -> bool:
        """Start the first run; an invalid name is reported and changes nothing."""
        try:
            self.game.start(raw_name)
        except InvalidNameError as exc:
            self.notifier.invalid_name(str(exc))
            return False
        logger.info("Starting session for %r", self.game.session.name)
        self._begin_run()
        return True

    def change_direction(self, name: str) -> bool:
        return self.game.change_direction(name)

    def stop(self) -> None:
        """Cancel both timers so nothing fires into this session again."""
        if self.tick_timer is not None:
            self.tick_timer.cancel()
            self.tick_timer = None
        if self.grace_timer is not None:
            self.grace_timer.cancel()
            self.grace_timer = None

    def _begin_run(self) -> None:
        self.stop()
        session = self.game.session
        epoch = session.epoch
        self.runs += 1
        if session.spawn_fell_back:
            self.notifier.warn(SPAWN_FALLBACK_MESSAGE)
        self.notifier.show_score(self.game.score_line())
        self.grace_timer = self.scheduler.call_later(
            self.game.config.grace_period_ms, lambda: self._on_grace_elapsed(epoch)
        )
        self._arm_tick_timer(epoch)

    def _arm_tick_timer(self, epoch: int) -> None:
        if self.tick_timer is not None:
            self.tick_timer.cancel()
        self.tick_timer = self.scheduler.call_every(
            self.game.session.tick_interval, lambda: self._on_tick(epoch)
        )

    def _on_grace_elapsed(self, epoch: int) -> None:
        if self.game.end_grace(epoch):
            self.grace_timer = None

    def _on_tick(self, epoch: int) -> None:
        if epoch != self.game.session.epoch:
            return
        result = self.game.tick()
        if result.game_over:
            self._game_over(result)
            return
        if result.speed_changed:
            logger.debug("Tick interval now %d ms", self.game.session.tick_interval)
            self._arm_tick_timer(epoch)
        if result.outcome is TickOutcome.ATE:
            self.notifier.show_score(self.game.score_line())
        if self.renderer is not None:
            self.renderer.draw(self.game.session)

    def _game_over(self, result: TickResult) -> None:
        self.stop()
        score = self.game.session.score
        logger.info("Game over (%s) with score %d", result.outcome.value, score)
        self.notifier.game_over(score)
        self.game.reset()
        self._begin_run()
