from typing import Any, Dict, Optional

from PySide6 import QtWidgets, QtCore

from core.exceptions import ValidationError
from core.validators import ensure_valid, validate_shift
from models.staff import DAYS, Shift
from ui.widgets.form_fields import ErrorLabels


class ShiftDialog(QtWidgets.QDialog):
    """Add/edit one weekly shift. Validates locally; the caller sends it."""

    def __init__(self, shift: Optional[Shift] = None, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Edit Shift" if shift else "Add Shift")
        self.setModal(True)
        self.resize(360, 260)
        self.errors = ErrorLabels()

        form = QtWidgets.QFormLayout(self)
        self.day = QtWidgets.QComboBox()
        self.day.addItem("Select a day", "")
        for d in DAYS:
            self.day.addItem(d, d)
        self.day.currentIndexChanged.connect(lambda _: self.errors.clear("day"))

        self.start = QtWidgets.QTimeEdit(QtCore.QTime(9, 0))
        self.start.setDisplayFormat("HH:mm")
        self.end = QtWidgets.QTimeEdit(QtCore.QTime(17, 0))
        self.end.setDisplayFormat("HH:mm")
        self.location = QtWidgets.QLineEdit()

        form.addRow("Day *", self.errors.wrap("day", self.day))
        form.addRow("Start Time *", self.errors.wrap("startTime", self.start))
        form.addRow("End Time *", self.errors.wrap("endTime", self.end))
        form.addRow("Location", self.location)

        btns = QtWidgets.QDialogButtonBox(QtWidgets.QDialogButtonBox.Save | QtWidgets.QDialogButtonBox.Cancel)
        btns.accepted.connect(self.on_save)
        btns.rejected.connect(self.reject)
        form.addRow(btns)

        if shift:
            idx = next((i for i in range(self.day.count()) if str(self.day.itemData(i)).lower() == shift.day.lower()), 0)
            self.day.setCurrentIndex(idx)
            self.start.setTime(QtCore.QTime.fromString(shift.start_time, "HH:mm"))
            self.end.setTime(QtCore.QTime.fromString(shift.end_time, "HH:mm"))
            self.location.setText(shift.location)

    def payload(self) -> Dict[str, Any]:
        return {
            "day": self.day.currentData(),
            "startTime": self.start.time().toString("HH:mm"),
            "endTime": self.end.time().toString("HH:mm"),
            "location": self.location.text().strip(),
        }

    def on_save(self) -> None:
        try:
            ensure_valid(validate_shift, self.payload())
        except ValidationError as e:
            self.errors.show(e.errors)
            return
        self.accept()
