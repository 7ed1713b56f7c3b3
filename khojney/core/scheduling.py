"""Clock and timer abstraction used by the quiz session.

Architecture note:
    The session never sleeps or polls the wall clock itself. It receives a
    ``Scheduler`` and asks it for the current time and for delayed callbacks.
    The Qt client passes a ``QtScheduler`` (single-shot ``QTimer`` objects on
    the GUI thread); tests pass a ``ManualScheduler`` and move time forward
    explicitly, so countdowns and auto-advance run deterministically.
"""

from __future__ import annotations

import heapq
import itertools
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol


class ScheduledCall(Protocol):
    """Handle for a callback registered with a scheduler."""

    def cancel(self) -> None: ...

    @property
    def active(self) -> bool: ...


class Scheduler(Protocol):
    """Source of time and delayed callbacks."""

    def now(self) -> float: ...

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> ScheduledCall: ...


@dataclass(slots=True)
class ManualCall:
    """Callback queued on a ``ManualScheduler``."""

    due: float
    callback: Callable[[], None] = field(repr=False)
    cancelled: bool = False
    fired: bool = False

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)


class ManualScheduler:
    """Virtual clock that only moves when ``advance`` is called."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._queue: list[tuple[float, int, ManualCall]] = []
        self._counter = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> ManualCall:
        if delay_seconds < 0:
            raise ValueError("Delay must not be negative.")
        call = ManualCall(due=self._now + delay_seconds, callback=callback)
        heapq.heappush(self._queue, (call.due, next(self._counter), call))
        return call

    def advance(self, seconds: float) -> None:
        """Move time forward, firing every callback that becomes due in order."""
        if seconds < 0:
            raise ValueError("Cannot move time backwards.")
        target = self._now + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _, call = heapq.heappop(self._queue)
            self._now = due
            if call.cancelled:
                continue
            call.fired = True
            call.callback()
        self._now = target

    def pending_count(self) -> int:
        return sum(1 for _, _, call in self._queue if call.active)
