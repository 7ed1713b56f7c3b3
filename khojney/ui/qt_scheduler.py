"""Scheduler implementation backed by Qt single-shot timers."""

from __future__ import annotations

from collections.abc import Callable
import time

from PySide6.QtCore import QObject, QTimer


class QtScheduledCall:
    """Cancelable handle around a single-shot ``QTimer``."""

    def __init__(self, timer: QTimer) -> None:
        self._timer = timer
        self._done = False

    def cancel(self) -> None:
        if not self._done:
            self._timer.stop()
            self._timer.deleteLater()
            self._done = True

    @property
    def active(self) -> bool:
        return not self._done

    def _mark_fired(self) -> None:
        self._done = True
        self._timer.deleteLater()


class QtScheduler:
    """Runs session callbacks on the GUI thread's event loop."""

    def __init__(self, parent: QObject | None = None) -> None:
        self._parent = parent

    def now(self) -> float:
        return time.monotonic()

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> QtScheduledCall:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)
        call = QtScheduledCall(timer)

        def fire() -> None:
            if not call.active:
                return
            call._mark_fired()
            callback()

        timer.timeout.connect(fire)
        timer.start(max(0, int(delay_seconds * 1000)))
        return call
