from typing import Tuple

from PySide6 import QtWidgets, QtCore

from core.alerts import Alert, AlertStore

COLORS = {
    "success": "#2e7d32",
    "info": "#0288d1",
    "warning": "#ed6c02",
    "error": "#d32f2f",
}


class AlertBar(QtWidgets.QWidget):
    """
    Renders the alert store above the page content.
    Each alert gets its own row with a close button.
    """
    def __init__(self, alerts: AlertStore, parent=None):
        super().__init__(parent)
        self.alerts = alerts
        self.box = QtWidgets.QVBoxLayout(self)
        self.box.setContentsMargins(10, 5, 10, 0)
        self.box.setSpacing(4)
        self.alerts.changed.connect(self.render)
        self.render(self.alerts.alerts)

    def render(self, alerts: Tuple[Alert, ...]) -> None:
        while self.box.count():
            item = self.box.takeAt(0)
            if item.widget():
                item.widget().deleteLater()

        for alert in alerts:
            self.box.addWidget(self._row(alert))
        self.setVisible(bool(alerts))

    def _row(self, alert: Alert) -> QtWidgets.QWidget:
        row = QtWidgets.QFrame()
        row.setStyleSheet(f"background: {COLORS[alert.severity]}; border-radius: 4px;")
        h = QtWidgets.QHBoxLayout(row)
        h.setContentsMargins(12, 6, 6, 6)

        lbl = QtWidgets.QLabel(alert.message)
        lbl.setStyleSheet("color: white; font-weight: bold;")
        lbl.setWordWrap(True)
        h.addWidget(lbl, 1)

        close = QtWidgets.QPushButton("✕")
        close.setFixedSize(24, 24)
        close.setCursor(QtCore.Qt.PointingHandCursor)
        close.setStyleSheet("background: transparent; color: white; padding: 0;")
        close.clicked.connect(lambda checked=False, aid=alert.id: self.alerts.remove_alert(aid))
        h.addWidget(close)
        return row
