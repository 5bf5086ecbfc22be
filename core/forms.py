"""
Shared behaviour of the detail/edit screens (attendance, classes, staff, gyms).
One controller per open form. It owns the error map and decides whether a
submit reaches the backend at all.
"""
import logging
from typing import Any, Callable, Dict, Optional

from PySide6 import QtCore

from core.alerts import AlertStore
from core.exceptions import ApiError, NotFoundError
from core.routes import FormMode
from core.tasks import Runner, run_sync

logger = logging.getLogger(__name__)

DEFAULT_MESSAGES = {
    "created": "Record created successfully",
    "updated": "Record updated successfully",
    "not_found": "Record not found",
}


class FormController(QtCore.QObject):
    """
    Signals:
        errors_changed (dict): Field errors after validation, a server reply or clear_error().
        loaded (object): The fetched record in EDIT/VIEW mode.
        saved (object): The backend's reply after a successful create/update.
        busy_changed (bool): True while a call is in flight.
    """
    errors_changed = QtCore.Signal(dict)
    loaded = QtCore.Signal(object)
    saved = QtCore.Signal(object)
    busy_changed = QtCore.Signal(bool)

    def __init__(self, mode: FormMode, validator: Callable[[Dict[str, Any]], Dict[str, str]],
                 create: Callable[[Dict[str, Any]], Any],
                 update: Callable[[str, Dict[str, Any]], Any],
                 alerts: AlertStore,
                 record_id: Optional[str] = None,
                 messages: Optional[Dict[str, str]] = None,
                 navigate_to: Optional[Callable[[], None]] = None,
                 runner: Runner = run_sync,
                 parent: Optional[QtCore.QObject] = None):
        super().__init__(parent)
        self.mode = mode
        self.validator = validator
        self.create = create
        self.update = update
        self.alerts = alerts
        self.record_id = record_id
        self.messages = {**DEFAULT_MESSAGES, **(messages or {})}
        self.navigate_to = navigate_to
        self.runner = runner
        self.errors: Dict[str, str] = {}
        self.busy = False

    @property
    def read_only(self) -> bool:
        return self.mode == FormMode.VIEW

    def _set_errors(self, errors: Dict[str, str]) -> None:
        self.errors = errors
        self.errors_changed.emit(dict(self.errors))

    def _set_busy(self, busy: bool) -> None:
        self.busy = busy
        self.busy_changed.emit(busy)

    def clear_error(self, field: str) -> None:
        """Drops the error of a field the user just edited."""
        if field in self.errors:
            errors = dict(self.errors)
            del errors[field]
            self._set_errors(errors)

    # --- LOAD ---

    def load(self, fetch: Callable[[], Any]) -> None:
        """
        Fetches the record for EDIT/VIEW mode.
        A missing record posts an alert and sends the user back to the list.
        """
        def done(record):
            self._set_busy(False)
            self.loaded.emit(record)

        def failed(err: ApiError):
            self._set_busy(False)
            if isinstance(err, NotFoundError):
                self.alerts.set_alert(self.messages["not_found"], "error")
                if self.navigate_to:
                    self.navigate_to()
                return
            self.alerts.set_alert(err.message, "error")

        self._set_busy(True)
        self.runner(fetch, done, failed, owner=self)

    # --- SUBMIT ---

    def submit(self, data: Dict[str, Any]) -> bool:
        """
        Validates and sends the form.

        Args:
            data: Payload with backend field names.

        Returns:
            bool: True if a backend call was started. False when the form is
            read-only or validation failed (errors are then set).
        """
        if self.read_only:
            logger.debug("Submit ignored in view mode")
            return False

        errors = self.validator(data)
        self._set_errors(errors)
        if errors:
            return False

        if self.mode == FormMode.CREATE:
            call = lambda: self.create(data)
            message = self.messages["created"]
        else:
            call = lambda: self.update(self.record_id, data)
            message = self.messages["updated"]

        def done(result):
            self._set_busy(False)
            self.alerts.set_alert(message, "success")
            self.saved.emit(result)

        def failed(err: ApiError):
            self._set_busy(False)
            self.alerts.set_alert(err.message, "error")
            if err.field_errors:
                self._set_errors({**self.errors, **err.field_errors})

        self._set_busy(True)
        self.runner(call, done, failed, owner=self)
        return True
