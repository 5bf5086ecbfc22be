from typing import Any, Dict, Optional

from PySide6 import QtWidgets, QtCore

from core.utils import to_iso, to_local
from core.exceptions import ValidationError
from core.validators import ensure_valid, validate_certification
from models.staff import Certification
from ui.widgets.form_fields import ErrorLabels


class CertificationDialog(QtWidgets.QDialog):
    """Add/edit one certification. Validates locally; the caller sends it."""

    def __init__(self, cert: Optional[Certification] = None, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Edit Certification" if cert else "Add Certification")
        self.setModal(True)
        self.resize(420, 360)
        self.errors = ErrorLabels()

        form = QtWidgets.QFormLayout(self)
        self.name = QtWidgets.QLineEdit()
        self.name.textEdited.connect(lambda _: self.errors.clear("name"))
        self.issued_by = QtWidgets.QLineEdit()

        self.has_issue = QtWidgets.QCheckBox()
        self.issue_date = QtWidgets.QDateEdit(QtCore.QDate.currentDate())
        self.issue_date.setCalendarPopup(True)
        self.has_expiry = QtWidgets.QCheckBox()
        self.expiry_date = QtWidgets.QDateEdit(QtCore.QDate.currentDate().addYears(1))
        self.expiry_date.setCalendarPopup(True)
        self.description = QtWidgets.QPlainTextEdit()
        self.description.setFixedHeight(70)

        form.addRow("Name *", self.errors.wrap("name", self.name))
        form.addRow("Issued By", self.issued_by)
        form.addRow("Issue Date", self._optional(self.has_issue, self.issue_date))
        form.addRow("Expiry Date", self._optional(self.has_expiry, self.expiry_date))
        form.addRow("Description", self.description)

        btns = QtWidgets.QDialogButtonBox(QtWidgets.QDialogButtonBox.Save | QtWidgets.QDialogButtonBox.Cancel)
        btns.accepted.connect(self.on_save)
        btns.rejected.connect(self.reject)
        form.addRow(btns)

        if cert:
            self.name.setText(cert.name)
            self.issued_by.setText(cert.issued_by)
            self.description.setPlainText(cert.description)
            if cert.issue_date:
                self.has_issue.setChecked(True)
                self.issue_date.setDate(QtCore.QDate(to_local(cert.issue_date).date()))
            if cert.expiry_date:
                self.has_expiry.setChecked(True)
                self.expiry_date.setDate(QtCore.QDate(to_local(cert.expiry_date).date()))

    @staticmethod
    def _optional(check: QtWidgets.QCheckBox, edit: QtWidgets.QDateEdit) -> QtWidgets.QWidget:
        w = QtWidgets.QWidget()
        h = QtWidgets.QHBoxLayout(w)
        h.setContentsMargins(0, 0, 0, 0)
        edit.setEnabled(check.isChecked())
        check.toggled.connect(edit.setEnabled)
        h.addWidget(check)
        h.addWidget(edit, 1)
        return w

    def payload(self) -> Dict[str, Any]:
        def date_value(check, edit):
            return to_iso(edit.dateTime().toPython()) if check.isChecked() else None

        return {
            "name": self.name.text().strip(),
            "issuedBy": self.issued_by.text().strip(),
            "issueDate": date_value(self.has_issue, self.issue_date),
            "expiryDate": date_value(self.has_expiry, self.expiry_date),
            "description": self.description.toPlainText().strip(),
        }

    def on_save(self) -> None:
        try:
            ensure_valid(validate_certification, self.payload())
        except ValidationError as e:
            self.errors.show(e.errors)
            return
        self.accept()
