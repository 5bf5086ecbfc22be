from functools import partial
from typing import List

from PySide6 import QtWidgets, QtCore

from core.listing import AttendanceListController
from core.utils import format_date
from models.attendance import STATUS_CHECKED_IN, STATUS_CHECKED_OUT
from services import attendance_service
from ui.context import AppContext
from ui.widgets.list_page import Action, ListPage


class AttendancePage(ListPage):
    title = "⏱️ Attendance"
    resource = "attendance"
    columns = ["Member", "Check-in", "Check-out", "Duration", "Type"]
    search_placeholder = "Search by member name, email or phone"
    add_label = "Check In Member"

    def __init__(self, ctx: AppContext, parent=None):
        controller = AttendanceListController(
            loader=partial(attendance_service.list_attendance, ctx.client),
            deleter=partial(attendance_service.delete_attendance, ctx.client),
            checkout=partial(attendance_service.checkout, ctx.client),
            alerts=ctx.alerts,
            user=ctx.user,
            runner=ctx.runner,
        )
        super().__init__(ctx, controller, parent)

    def build_filters(self, bar: QtWidgets.QHBoxLayout) -> None:
        self.status = QtWidgets.QComboBox()
        self.status.addItem("All", "")
        self.status.addItem("Checked In", STATUS_CHECKED_IN)
        self.status.addItem("Checked Out", STATUS_CHECKED_OUT)
        self.status.currentIndexChanged.connect(
            lambda i: self.controller.set_filter("status", self.status.itemData(i)))
        bar.addWidget(self.status)

        self.use_date = QtWidgets.QCheckBox("On date")
        self.date = QtWidgets.QDateEdit(QtCore.QDate.currentDate())
        self.date.setCalendarPopup(True)
        self.date.setEnabled(False)
        self.use_date.toggled.connect(self.date.setEnabled)
        self.use_date.toggled.connect(lambda _: self.apply_date())
        self.date.dateChanged.connect(lambda _: self.apply_date())
        bar.addWidget(self.use_date)
        bar.addWidget(self.date)

    def apply_date(self) -> None:
        value = self.date.date().toString("yyyy-MM-dd") if self.use_date.isChecked() else ""
        self.controller.set_filter("date", value)

    def row_values(self, record) -> List[str]:
        return [
            record.member_name,
            format_date(record.check_in_time, include_time=True),
            format_date(record.check_out_time, include_time=True) if record.is_checked_out else "Not checked out",
            record.duration_label,
            record.type_label,
        ]

    def row_actions(self, record) -> List[Action]:
        actions = super().row_actions(record)
        if self.controller.can_modify and not record.is_checked_out:
            actions.insert(1, ("Check Out", lambda: self.controller.checkout(record)))
        return actions

    def describe(self, record) -> str:
        return f"the attendance record of {record.member_name}"
