"""
How controllers run backend calls.
A runner takes the call plus two callbacks and guarantees at most one of them
fires with the result or the ApiError. The UI uses the thread-pool runner
from workers.api_worker; tests use run_sync.

A call may name an owner QObject. Once the owner is destroyed its callbacks
are dropped, so a late reply never reaches a page the user already left.
"""
import logging
from typing import Any, Callable, Optional, Protocol, Tuple

from PySide6 import QtCore

from core.exceptions import ApiError

logger = logging.getLogger(__name__)

Callback = Callable[[Any], None]


class Runner(Protocol):
    def __call__(self, fn: Callable[[], Any], on_done: Callback, on_error: Callable[[ApiError], None],
                 owner: Optional[QtCore.QObject] = None) -> None: ...


def as_api_error(exc: Exception) -> ApiError:
    """Wraps anything unexpected so callers only ever deal with ApiError."""
    if isinstance(exc, ApiError):
        return exc
    logger.exception("Unexpected error in backend call", exc_info=exc)
    return ApiError(str(exc) or exc.__class__.__name__)


def while_alive(owner: Optional[QtCore.QObject], on_done: Callback,
                on_error: Callable[[ApiError], None]) -> Tuple[Callback, Callable[[ApiError], None]]:
    """
    Wraps a call's two callbacks so neither fires once the owner has been destroyed.

    Args:
        owner: The QObject whose lifetime bounds the callbacks, or None for no bound.
        on_done: Receives the call's result.
        on_error: Receives the ApiError.
    """
    if owner is None:
        return on_done, on_error

    state = {"alive": True}
    name = type(owner).__name__

    def mark_gone(*_):
        state["alive"] = False

    owner.destroyed.connect(mark_gone)

    def guard(callback):
        def guarded(value: Any) -> None:
            if not state["alive"]:
                logger.debug("Dropping reply for destroyed %s", name)
                return
            owner.destroyed.disconnect(mark_gone)
            callback(value)
        return guarded

    return guard(on_done), guard(on_error)


def run_sync(fn: Callable[[], Any], on_done: Callback, on_error: Callable[[ApiError], None],
             owner: Optional[QtCore.QObject] = None) -> None:
    """Runs the call on the current thread."""
    on_done, on_error = while_alive(owner, on_done, on_error)
    try:
        result = fn()
    except Exception as e:
        on_error(as_api_error(e))
        return
    on_done(result)
