from typing import Any, Callable, Optional

from PySide6 import QtCore

from core.exceptions import ApiError
from core.tasks import as_api_error, while_alive


class WorkerSignals(QtCore.QObject):
    """
    Defines the signals available from a running worker thread.

    Attributes:
        finished (object): Emitted with the service call's return value.
        error (ApiError): Emitted with the failure if the call raises.
    """
    finished = QtCore.Signal(object)
    error = QtCore.Signal(object)


class ApiWorker(QtCore.QRunnable):
    """
    Background worker that runs one backend call.
    Keeps the UI responsive while httpx waits on the network.
    """
    def __init__(self, fn: Callable[[], Any]):
        super().__init__()
        self.fn = fn
        self.signals = WorkerSignals()

    @QtCore.Slot()
    def run(self) -> None:
        try:
            result = self.fn()
            self.signals.finished.emit(result)
        except Exception as e:
            self.signals.error.emit(as_api_error(e))


class _Relay(QtCore.QObject):
    """
    Lives on the UI thread, so worker signals connected to its slots are queued
    and the callbacks run on the UI thread.
    """
    done = QtCore.Signal(object)

    def __init__(self, on_done: Callable[[Any], None], on_error: Callable[[ApiError], None]):
        super().__init__()
        self.on_done = on_done
        self.on_error = on_error

    @QtCore.Slot(object)
    def finished(self, result: Any) -> None:
        self.done.emit(self)
        self.on_done(result)

    @QtCore.Slot(object)
    def failed(self, err: ApiError) -> None:
        self.done.emit(self)
        self.on_error(err)


class ThreadPoolRunner:
    """Runs backend calls on a QThreadPool and reports back on the UI thread."""

    def __init__(self, pool: Optional[QtCore.QThreadPool] = None):
        self.pool = pool or QtCore.QThreadPool.globalInstance()
        self._relays = set()

    def __call__(self, fn: Callable[[], Any], on_done: Callable[[Any], None],
                 on_error: Callable[[ApiError], None], owner: Optional[QtCore.QObject] = None) -> None:
        relay = _Relay(*while_alive(owner, on_done, on_error))
        # Keep the relay alive until the worker reports
        self._relays.add(relay)
        relay.done.connect(self._relays.discard)

        worker = ApiWorker(fn)
        worker.signals.finished.connect(relay.finished)
        worker.signals.error.connect(relay.failed)
        self.pool.start(worker)
