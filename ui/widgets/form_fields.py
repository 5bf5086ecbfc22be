from typing import Dict

from PySide6 import QtWidgets


class ErrorLabels:
    """
    Keeps one red label under each validated input.
    Field names are the backend's, so server errors land under the right input.
    """
    def __init__(self):
        self.labels: Dict[str, QtWidgets.QLabel] = {}

    def wrap(self, field: str, widget: QtWidgets.QWidget) -> QtWidgets.QWidget:
        box = QtWidgets.QWidget()
        v = QtWidgets.QVBoxLayout(box)
        v.setContentsMargins(0, 0, 0, 0)
        v.setSpacing(2)
        v.addWidget(widget)

        lbl = QtWidgets.QLabel()
        lbl.setProperty("error", True)
        lbl.hide()
        v.addWidget(lbl)
        self.labels[field] = lbl
        return box

    def show(self, errors: Dict[str, str]) -> None:
        for field, lbl in self.labels.items():
            message = errors.get(field, "")
            lbl.setText(message)
            lbl.setVisible(bool(message))

    def clear(self, field: str) -> None:
        if field in self.labels:
            self.labels[field].hide()
