"""
Application-wide alert bus.
Any page can post a transient message; the alert bar renders whatever is in
the store and removes entries when they time out or are closed.
"""
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from PySide6 import QtCore

import config
from core.scheduler import Scheduler

SET_ALERT = "SET_ALERT"
REMOVE_ALERT = "REMOVE_ALERT"

SEVERITIES = ("success", "info", "warning", "error")


@dataclass(frozen=True)
class Alert:
    id: str
    message: str
    severity: str = "info"


def normalize_severity(severity: Optional[str]) -> str:
    """Maps legacy names ('danger') onto the four supported severities."""
    severity = (severity or "info").lower()
    if severity == "danger":
        return "error"
    return severity if severity in SEVERITIES else "info"


def alert_reducer(state: Tuple[Alert, ...], action: Dict[str, Any]) -> Tuple[Alert, ...]:
    if action["type"] == SET_ALERT:
        return state + (action["payload"],)
    if action["type"] == REMOVE_ALERT:
        return tuple(a for a in state if a.id != action["payload"])
    return state


class AlertStore(QtCore.QObject):
    """
    Observable list of alerts.

    Signals:
        changed (tuple): Emitted with the new alert tuple after every dispatch.
    """
    changed = QtCore.Signal(object)

    def __init__(self, scheduler: Scheduler, parent: Optional[QtCore.QObject] = None):
        super().__init__(parent)
        self.scheduler = scheduler
        self.state: Tuple[Alert, ...] = ()

    @property
    def alerts(self) -> Tuple[Alert, ...]:
        return self.state

    def dispatch(self, action: Dict[str, Any]) -> None:
        new_state = alert_reducer(self.state, action)
        if new_state is not self.state:
            self.state = new_state
            self.changed.emit(self.state)

    def set_alert(self, message: str, severity: str = "info",
                  timeout_ms: Optional[int] = config.ALERT_TIMEOUT_MS) -> str:
        """
        Posts an alert.

        Args:
            message (str): Text shown to the user.
            severity (str): success, info, warning or error.
            timeout_ms (int, optional): Auto-dismiss delay. None keeps the alert until closed.

        Returns:
            str: The new alert's id.
        """
        alert_id = uuid.uuid4().hex
        self.dispatch({
            "type": SET_ALERT,
            "payload": Alert(alert_id, message, normalize_severity(severity)),
        })
        if timeout_ms is not None:
            self.scheduler.call_later(timeout_ms, lambda: self.remove_alert(alert_id))
        return alert_id

    def remove_alert(self, alert_id: str) -> None:
        if any(a.id == alert_id for a in self.state):
            self.dispatch({"type": REMOVE_ALERT, "payload": alert_id})
