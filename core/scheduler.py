"""Cancellable delayed calls and the debouncer built on them."""
from typing import Any, Callable, Optional, Protocol

from PySide6 import QtCore


class Handle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything that can run a callback once after a delay and let the caller cancel it."""

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> Handle: ...


class _TimerHandle:
    def __init__(self, timer: QtCore.QTimer):
        self._timer = timer

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer.deleteLater()
            self._timer = None


class QtScheduler:
    """
    Scheduler backed by single-shot QTimers on the UI thread.
    Each call gets its own timer so it can be cancelled on its own.
    """
    def __init__(self, parent: Optional[QtCore.QObject] = None):
        self.parent = parent

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> _TimerHandle:
        timer = QtCore.QTimer(self.parent)
        timer.setSingleShot(True)
        handle = _TimerHandle(timer)

        def fire():
            handle.cancel()
            callback()

        timer.timeout.connect(fire)
        timer.start(delay_ms)
        return handle


class Debouncer:
    """
    Delays a callback until no new trigger arrived for delay_ms.
    Each trigger cancels the pending call and schedules a fresh one, so only the
    last arguments are ever delivered.
    """
    def __init__(self, scheduler: Scheduler, delay_ms: int, callback: Callable[..., Any]):
        self.scheduler = scheduler
        self.delay_ms = delay_ms
        self.callback = callback
        self._pending: Optional[Handle] = None

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def trigger(self, *args: Any) -> None:
        self.cancel()

        def fire():
            self._pending = None
            self.callback(*args)

        self._pending = self.scheduler.call_later(self.delay_ms, fire)

    def cancel(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
