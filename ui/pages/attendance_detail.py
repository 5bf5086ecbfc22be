import datetime
from functools import partial
from typing import Any, Dict, List

from PySide6 import QtWidgets, QtCore

from core.forms import FormController
from core.member_search import MemberSearch
from core.routes import Route
from core.utils import format_date, to_local
from core.validators import validate_attendance
from models.attendance import CLASS, FORM_TYPES, GYM, Attendance
from models.member import Member
from services import attendance_service, member_service
from ui.context import AppContext
from ui.widgets.detail_page import DetailPage

TYPE_LABELS = {GYM: "Gym", CLASS: "Class"}


class AttendanceDetailPage(DetailPage):
    resource = "attendance"
    singular = "Attendance Record"

    def __init__(self, ctx: AppContext, route: Route, parent=None):
        form = FormController(
            route.mode,
            validator=validate_attendance,
            create=partial(attendance_service.create_attendance, ctx.client),
            update=partial(attendance_service.update_attendance, ctx.client),
            alerts=ctx.alerts,
            record_id=route.record_id,
            messages={
                "created": "Member checked in successfully",
                "updated": "Attendance record updated successfully",
                "not_found": "Attendance record not found",
            },
            navigate_to=lambda: ctx.navigate("attendance"),
            runner=ctx.runner,
        )
        super().__init__(ctx, route, form, partial(attendance_service.delete_attendance, ctx.client), parent)
        self.member_search = MemberSearch(
            partial(member_service.search_members, ctx.client), ctx.scheduler, runner=ctx.runner, parent=self)

        self.member_search.results.connect(self.show_members)
        self.member_search.loading_changed.connect(lambda busy: self.member_box.setEnabled(not busy))
        if not form.read_only:
            self.member_search.term_changed("")
            self.ctx.run(partial(attendance_service.active_sessions, ctx.client), self.show_sessions, owner=self)

    def build_form(self, layout: QtWidgets.QVBoxLayout) -> None:
        grp = QtWidgets.QGroupBox("Attendance Details")
        form = QtWidgets.QFormLayout(grp)

        # --- MEMBER PICKER ---
        self.member_term = QtWidgets.QLineEdit()
        self.member_term.setPlaceholderText("Type a name, email or phone to search")
        self.member_term.textEdited.connect(
            lambda text: self.member_search.term_changed(text, self.member_box.currentData() is not None))
        self.member_box = QtWidgets.QComboBox()
        self.member_box.addItem("Select a member", None)
        self.member_box.currentIndexChanged.connect(self.field_edited("member"))
        picker = QtWidgets.QWidget()
        v = QtWidgets.QVBoxLayout(picker)
        v.setContentsMargins(0, 0, 0, 0)
        v.addWidget(self.member_term)
        v.addWidget(self.member_box)
        form.addRow("Member *", self.errors.wrap("member", picker))

        # --- TIMES ---
        now = QtCore.QDateTime.currentDateTime()
        self.check_in = QtWidgets.QDateTimeEdit(now)
        self.check_in.setCalendarPopup(True)
        self.check_in.setDisplayFormat("dd MMM yyyy  hh:mm AP")
        self.check_in.dateTimeChanged.connect(self.field_edited("checkInTime"))
        form.addRow("Check-in Time *", self.errors.wrap("checkInTime", self.check_in))

        self.has_check_out = QtWidgets.QCheckBox("Checked out")
        self.check_out = QtWidgets.QDateTimeEdit(now)
        self.check_out.setCalendarPopup(True)
        self.check_out.setDisplayFormat("dd MMM yyyy  hh:mm AP")
        self.check_out.setEnabled(False)
        self.has_check_out.toggled.connect(self.check_out.setEnabled)
        self.has_check_out.toggled.connect(self.field_edited("checkOutTime"))
        self.check_out.dateTimeChanged.connect(self.field_edited("checkOutTime"))
        out_row = QtWidgets.QWidget()
        h = QtWidgets.QHBoxLayout(out_row)
        h.setContentsMargins(0, 0, 0, 0)
        h.addWidget(self.has_check_out)
        h.addWidget(self.check_out, 1)
        form.addRow("Check-out Time", self.errors.wrap("checkOutTime", out_row))

        # --- TYPE & SESSION ---
        self.type_box = QtWidgets.QComboBox()
        for t in FORM_TYPES:
            self.type_box.addItem(TYPE_LABELS[t], t)
        self.type_box.currentIndexChanged.connect(self.field_edited("attendanceType"))
        self.type_box.currentIndexChanged.connect(lambda _: self.update_session_visibility())
        form.addRow("Attendance Type *", self.errors.wrap("attendanceType", self.type_box))

        self.session_box = QtWidgets.QComboBox()
        self.session_box.addItem("Select a class session", None)
        self.session_box.currentIndexChanged.connect(self.field_edited("classSession"))
        self.session_row = self.errors.wrap("classSession", self.session_box)
        self.session_label = QtWidgets.QLabel("Class Session *")
        form.addRow(self.session_label, self.session_row)

        self.notes = QtWidgets.QPlainTextEdit()
        self.notes.setFixedHeight(80)
        form.addRow("Notes", self.notes)
        layout.addWidget(grp)

        self.b_checkout = QtWidgets.QPushButton("⏹ Check Out Now")
        self.b_checkout.clicked.connect(self.on_checkout)
        self.b_checkout.hide()
        layout.addWidget(self.b_checkout, alignment=QtCore.Qt.AlignLeft)

        self.update_session_visibility()

    def update_session_visibility(self) -> None:
        is_class = self.type_box.currentData() == CLASS
        self.session_row.setVisible(is_class)
        self.session_label.setVisible(is_class)

    # --- LOOKUPS ---

    def show_members(self, members: List[Member]) -> None:
        selected = self.member_box.currentData()
        selected_text = self.member_box.currentText()
        self.member_box.blockSignals(True)
        self.member_box.clear()
        self.member_box.addItem("Select a member", None)
        for m in members:
            self.member_box.addItem(f"{m.full_name} ({m.email or m.phone})", m.id)
        # Keep the current choice even if the new results don't include it
        if selected and self.member_box.findData(selected) < 0:
            self.member_box.addItem(selected_text, selected)
        self.member_box.setCurrentIndex(max(self.member_box.findData(selected), 0))
        self.member_box.blockSignals(False)

    def show_sessions(self, sessions) -> None:
        current = self.session_box.currentData()
        for s in sessions:
            if self.session_box.findData(s.id) < 0:
                self.session_box.addItem(s.label, s.id)
        self.session_box.setCurrentIndex(max(self.session_box.findData(current), 0))

    # --- RECORD <-> INPUTS ---

    def fetch(self) -> Attendance:
        return attendance_service.get_attendance(self.ctx.client, self.route.record_id)

    def fill(self, record: Attendance) -> None:
        if record.member:
            label = record.member_name
            if self.member_box.findData(record.member) < 0:
                self.member_box.addItem(label, record.member)
            self.member_box.setCurrentIndex(self.member_box.findData(record.member))

        if record.check_in_time:
            self.check_in.setDateTime(QtCore.QDateTime(to_local(record.check_in_time)))
        self.has_check_out.setChecked(record.is_checked_out)
        if record.check_out_time:
            self.check_out.setDateTime(QtCore.QDateTime(to_local(record.check_out_time)))

        idx = self.type_box.findData(record.attendance_type)
        if idx < 0:
            # Types the form doesn't offer (e.g. personal training) are still shown as-is
            self.type_box.addItem(record.type_label, record.attendance_type)
            idx = self.type_box.count() - 1
        self.type_box.setCurrentIndex(idx)

        if record.class_session:
            if self.session_box.findData(record.class_session) < 0:
                label = f"{record.class_name or 'Class'}"
                self.session_box.addItem(label, record.class_session)
            self.session_box.setCurrentIndex(self.session_box.findData(record.class_session))

        self.notes.setPlainText(record.notes)
        self.b_checkout.setVisible(self.can_modify and not record.is_checked_out)
        self.title.setText(f"{self.title.text()} - {record.member_name}, {format_date(record.check_in_time)}")

    def payload(self) -> Dict[str, Any]:
        check_in: datetime.datetime = self.check_in.dateTime().toPython().astimezone()
        check_out = self.check_out.dateTime().toPython().astimezone() if self.has_check_out.isChecked() else None
        record = Attendance(
            id=self.route.record_id,
            member=self.member_box.currentData(),
            check_in_time=check_in,
            check_out_time=check_out,
            attendance_type=self.type_box.currentData(),
            class_session=self.session_box.currentData(),
            notes=self.notes.toPlainText().strip(),
        )
        return record.to_payload()

    def dispose(self) -> None:
        self.member_search.cancel()
        super().dispose()

    def on_checkout(self) -> None:
        if not self.can_modify:
            self.ctx.alerts.set_alert("You are not authorized to perform this action", "warning")
            return
        record_id = self.route.record_id

        def done(_):
            self.ctx.alerts.set_alert("Member checked out successfully", "success")
            self.ctx.navigate("attendance")

        self.ctx.run(lambda: attendance_service.checkout(self.ctx.client, record_id), done, owner=self)
