"""
Certifications and schedule tabs of the staff screen.
Both edit sub-lists through their own endpoints and patch the list in place
with the item the backend returns, without reloading the staff member.
"""
from typing import Callable, List, Optional

from PySide6 import QtWidgets

from core.utils import format_date
from models.staff import Certification, Shift, sort_schedule
from services import staff_service
from ui.context import AppContext
from ui.dialogs.certification_dialog import CertificationDialog
from ui.dialogs.confirm_dialog import confirm
from ui.dialogs.shift_dialog import ShiftDialog


class SubListTab(QtWidgets.QWidget):
    columns: List[str] = []
    add_label = "Add"
    empty_text = "Nothing here yet"

    def __init__(self, ctx: AppContext, parent=None):
        super().__init__(parent)
        self.ctx = ctx
        self.staff_id: Optional[str] = None
        self.items: List = []
        self.editable = False

        layout = QtWidgets.QVBoxLayout(self)
        top = QtWidgets.QHBoxLayout()
        self.hint = QtWidgets.QLabel("Save the staff member first to manage this list.")
        top.addWidget(self.hint)
        top.addStretch()
        self.b_add = QtWidgets.QPushButton(f"➕ {self.add_label}")
        self.b_add.clicked.connect(lambda: self.open_dialog(None))
        top.addWidget(self.b_add)
        layout.addLayout(top)

        self.table = QtWidgets.QTableWidget()
        self.table.setColumnCount(len(self.columns) + 1)
        self.table.setHorizontalHeaderLabels(self.columns + ["Actions"])
        self.table.horizontalHeader().setSectionResizeMode(QtWidgets.QHeaderView.Stretch)
        self.table.setEditTriggers(QtWidgets.QAbstractItemView.NoEditTriggers)
        self.table.verticalHeader().setVisible(False)
        layout.addWidget(self.table)
        self.set_state(None, [], False)

    def set_state(self, staff_id: Optional[str], items: List, editable: bool) -> None:
        self.staff_id = staff_id
        self.items = list(items)
        self.editable = editable and staff_id is not None
        self.hint.setVisible(staff_id is None)
        self.b_add.setVisible(self.editable)
        self.render()

    def ordered(self) -> List:
        return self.items

    def row_values(self, item) -> List[str]:
        raise NotImplementedError

    def render(self) -> None:
        items = self.ordered()
        self.table.setRowCount(0)
        self.table.setRowCount(len(items))
        for i, item in enumerate(items):
            for j, value in enumerate(self.row_values(item)):
                self.table.setItem(i, j, QtWidgets.QTableWidgetItem(value))
            if self.editable:
                self.table.setCellWidget(i, len(self.columns), self._actions(item))

    def _actions(self, item) -> QtWidgets.QWidget:
        w = QtWidgets.QWidget()
        h = QtWidgets.QHBoxLayout(w)
        h.setContentsMargins(2, 2, 2, 2)
        b_edit = QtWidgets.QPushButton("Edit")
        b_edit.clicked.connect(lambda checked=False: self.open_dialog(item))
        b_del = QtWidgets.QPushButton("Delete")
        b_del.clicked.connect(lambda checked=False: self.delete(item))
        h.addWidget(b_edit)
        h.addWidget(b_del)
        return w

    def _run(self, call: Callable, on_done: Callable, message: str) -> None:
        def done(result):
            on_done(result)
            self.render()
            self.ctx.alerts.set_alert(message, "success")

        self.ctx.run(call, done, owner=self)

    def open_dialog(self, item) -> None:
        raise NotImplementedError

    def delete(self, item) -> None:
        raise NotImplementedError


class CertificationsTab(SubListTab):
    columns = ["Name", "Issued By", "Issue Date", "Expiry Date"]
    add_label = "Add Certification"

    def row_values(self, c: Certification) -> List[str]:
        return [c.name, c.issued_by or "N/A", format_date(c.issue_date), format_date(c.expiry_date)]

    def open_dialog(self, cert: Optional[Certification]) -> None:
        dlg = CertificationDialog(cert, self)
        if dlg.exec() != QtWidgets.QDialog.Accepted:
            return
        data, client, sid = dlg.payload(), self.ctx.client, self.staff_id

        if cert is None:
            self._run(lambda: staff_service.add_certification(client, sid, data),
                      lambda new: self.items.append(new), "Certification added successfully")
        else:
            def replace(updated):
                self.items = staff_service.replace_item(self.items, updated)
            self._run(lambda: staff_service.update_certification(client, sid, cert.id, data),
                      replace, "Certification updated successfully")

    def delete(self, cert: Certification) -> None:
        if not confirm(self, "Confirm Delete", "Are you sure you want to delete this certification?"):
            return
        client, sid = self.ctx.client, self.staff_id

        def remove(_):
            self.items = staff_service.remove_item(self.items, cert.id)
        self._run(lambda: staff_service.delete_certification(client, sid, cert.id),
                  remove, "Certification deleted successfully")


class ScheduleTab(SubListTab):
    columns = ["Day", "Start", "End", "Location"]
    add_label = "Add Shift"

    def ordered(self) -> List[Shift]:
        return sort_schedule(self.items)

    def row_values(self, s: Shift) -> List[str]:
        return [s.day.capitalize(), s.start_time, s.end_time, s.location or "N/A"]

    def open_dialog(self, shift: Optional[Shift]) -> None:
        dlg = ShiftDialog(shift, self)
        if dlg.exec() != QtWidgets.QDialog.Accepted:
            return
        data, client, sid = dlg.payload(), self.ctx.client, self.staff_id

        if shift is None:
            self._run(lambda: staff_service.add_shift(client, sid, data),
                      lambda new: self.items.append(new), "Shift added successfully")
        else:
            def replace(updated):
                self.items = staff_service.replace_item(self.items, updated)
            self._run(lambda: staff_service.update_shift(client, sid, shift.id, data),
                      replace, "Shift updated successfully")

    def delete(self, shift: Shift) -> None:
        if not confirm(self, "Confirm Delete", "Are you sure you want to delete this shift?"):
            return
        client, sid = self.ctx.client, self.staff_id

        def remove(_):
            self.items = staff_service.remove_item(self.items, shift.id)
        self._run(lambda: staff_service.delete_shift(client, sid, shift.id),
                  remove, "Shift deleted successfully")
