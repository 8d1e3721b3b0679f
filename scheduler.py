# Cancellable one-shot and repeating timers: Tk-backed for the GUI, virtual clock for tests.
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
import heapq
import itertools
from typing import Any, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...

    @property
    def cancelled(self) -> bool: ...


class Scheduler(Protocol):
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle: ...

    def call_every(self, interval_ms: int, callback: Callable[[], None]) -> TimerHandle: ...


class _TkTimer:
    """One Tk `after` chain; repeating timers re-arm themselves before running the callback."""
    def __init__(self, root: Any, delay_ms: int, callback: Callable[[], None], repeat: bool) -> None:
        self.root = root
        self.delay_ms = delay_ms
        self.callback = callback
        self.repeat = repeat
        self._cancelled = False
        self.after_id: str | None = None
        self._arm()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def _arm(self) -> None:
        self.after_id = self.root.after(self.delay_ms, self._fire)

    def _fire(self) -> None:
        self.after_id = None
        if self._cancelled:
            return
        if self.repeat:
            self._arm()
        else:
            self._cancelled = True
        self.callback()

    def cancel(self) -> None:
        self._cancelled = True
        if self.after_id is not None:
            self.root.after_cancel(self.after_id)
            self.after_id = None


class TkScheduler:
    """Scheduler on top of a Tk widget's after/after_cancel."""
    def __init__(self, root: Any) -> None:
        self.root = root

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> _TkTimer:
        return _TkTimer(self.root, delay_ms, callback, repeat=False)

    def call_every(self, interval_ms: int, callback: Callable[[], None]) -> _TkTimer:
        return _TkTimer(self.root, interval_ms, callback, repeat=True)


@dataclass
class _ManualTimer:
    due: int
    interval: int | None
    callback: Callable[[], None]
    cancelled: bool = field(default=False)

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Deterministic virtual clock; time only moves on advance()."""
    def __init__(self) -> None:
        self.now = 0
        self._queue: list[tuple[int, int, _ManualTimer]] = []
        self._seq = itertools.count()

    def _push(self, timer: _ManualTimer) -> None:
        heapq.heappush(self._queue, (timer.due, next(self._seq), timer))

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> _ManualTimer:
        timer = _ManualTimer(self.now + delay_ms, None, callback)
        self._push(timer)
        return timer

    def call_every(self, interval_ms: int, callback: Callable[[], None]) -> _ManualTimer:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be > 0")
        timer = _ManualTimer(self.now + interval_ms, interval_ms, callback)
        self._push(timer)
        return timer

    def pending(self) -> int:
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)

    def advance(self, ms: int) -> int:
        """Run every callback due within the next `ms`; returns how many fired."""
        target = self.now + ms
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self.now = due
            if timer.interval is not None:
                timer.due = due + timer.interval
                self._push(timer)
            else:
                timer.cancelled = True
            timer.callback()
            fired += 1
        self.now = target
        return fired
