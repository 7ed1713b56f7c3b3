"""Per-question countdown driven by an injected scheduler."""

from __future__ import annotations

import logging
from collections.abc import Callable

from khojney.core.scheduling import ScheduledCall, Scheduler

logger = logging.getLogger(__name__)

_TICK_SECONDS = 1.0


class CountdownTimer:
    """Counts down whole seconds and fires a single expiry notification.

    Only one countdown is active at a time; ``start`` and ``reset`` cancel the
    previous one first.

    Tick deadlines are fixed when the countdown starts, so a slow tick
    handler delays one update but never stretches the whole budget.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        on_tick: Callable[[int], None] | None = None,
        on_expire: Callable[[], None] | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._on_tick = on_tick
        self._on_expire = on_expire
        self._remaining: int = 0
        self._budget: int = 0
        self._started_at: float = 0.0
        self._pending: ScheduledCall | None = None
        self._generation: int = 0

    @property
    def remaining_seconds(self) -> int:
        return self._remaining

    @property
    def is_running(self) -> bool:
        return self._pending is not None and self._pending.active

    def start(self, budget_seconds: int) -> None:
        if budget_seconds <= 0:
            raise ValueError("Countdown budget must be a positive number of seconds.")
        self.cancel()
        self._generation += 1
        self._budget = budget_seconds
        self._remaining = budget_seconds
        self._started_at = self._scheduler.now()
        self._schedule_tick(self._generation)

    def reset(self, budget_seconds: int) -> None:
        self.start(budget_seconds)

    def cancel(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        # Invalidate any tick that was already dequeued for the old countdown.
        self._generation += 1

    def _schedule_tick(self, generation: int) -> None:
        elapsed_ticks = self._budget - self._remaining
        due = self._started_at + (elapsed_ticks + 1) * _TICK_SECONDS
        delay = max(0.0, due - self._scheduler.now())
        self._pending = self._scheduler.call_later(delay, lambda: self._tick(generation))

    def _tick(self, generation: int) -> None:
        if generation != self._generation:
            return
        self._pending = None
        self._remaining = max(0, self._remaining - 1)
        if self._on_tick is not None:
            self._on_tick(self._remaining)
        if generation != self._generation:
            # on_tick cancelled or restarted the countdown
            return
        if self._remaining == 0:
            logger.debug("Countdown expired")
            if self._on_expire is not None:
                self._on_expire()
            return
        self._schedule_tick(generation)
