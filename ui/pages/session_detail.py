import datetime
from functools import partial
from typing import Any, Callable, Dict, List, Optional

from PySide6 import QtWidgets, QtCore

from core.forms import FormController
from core.member_search import MemberSearch
from core.routes import FormMode, Route
from core.utils import format_date, humanize, to_local
from core.validators import validate_session
from models.gym_class import SESSION_STATUSES, ClassSession, GymClass
from models.member import Member
from services import class_service, member_service, session_service
from ui.context import AppContext
from ui.dialogs.confirm_dialog import confirm
from ui.widgets.detail_page import DetailPage


class SessionDetailPage(DetailPage):
    """
    Schedules a class session and manages who is enrolled in it.
    Enrollment changes are sent right away; they are not part of Save.
    """
    resource = "sessions"
    singular = "Class Session"

    def __init__(self, ctx: AppContext, route: Route, parent=None):
        form = FormController(
            route.mode,
            validator=validate_session,
            create=partial(session_service.create_session, ctx.client),
            update=partial(session_service.update_session, ctx.client),
            alerts=ctx.alerts,
            record_id=route.record_id,
            messages={
                "created": "Class session created successfully",
                "updated": "Class session updated successfully",
                "not_found": "Class session not found",
            },
            navigate_to=lambda: ctx.navigate("sessions"),
            runner=ctx.runner,
        )
        super().__init__(ctx, route, form, partial(session_service.delete_session, ctx.client), parent)
        self.member_search = MemberSearch(
            partial(member_service.search_members, ctx.client), ctx.scheduler, runner=ctx.runner, parent=self)
        self.member_search.results.connect(self.show_members)

        if not form.read_only:
            self.ctx.run(lambda: class_service.list_classes(ctx.client).items, self.show_classes, owner=self)
            self.ctx.run(partial(class_service.list_instructors, ctx.client), self.show_instructors, owner=self)
        if self.can_enroll:
            self.member_search.term_changed("")

    @property
    def can_enroll(self) -> bool:
        return self.form.mode != FormMode.CREATE and self.can_modify

    def build_form(self, layout: QtWidgets.QVBoxLayout) -> None:
        self.classes: Dict[str, GymClass] = {}
        grp = QtWidgets.QGroupBox("Session Details")
        form = QtWidgets.QFormLayout(grp)

        self.class_box = QtWidgets.QComboBox()
        self.class_box.addItem("Select a class", None)
        self.class_box.currentIndexChanged.connect(self.field_edited("class"))
        self.class_box.currentIndexChanged.connect(lambda _: self.on_class_picked())
        form.addRow("Class *", self.errors.wrap("class", self.class_box))

        self.instructor = QtWidgets.QComboBox()
        self.instructor.addItem("Select an instructor", None)
        self.instructor.currentIndexChanged.connect(self.field_edited("instructor"))
        form.addRow("Instructor *", self.errors.wrap("instructor", self.instructor))

        now = QtCore.QDateTime.currentDateTime()
        self.start = QtWidgets.QDateTimeEdit(now)
        self.end = QtWidgets.QDateTimeEdit(now.addSecs(3600))
        for edit in (self.start, self.end):
            edit.setCalendarPopup(True)
            edit.setDisplayFormat("dd MMM yyyy  hh:mm AP")
        self.start.dateTimeChanged.connect(self.field_edited("startTime"))
        self.end.dateTimeChanged.connect(self.field_edited("endTime"))
        form.addRow("Start Time *", self.errors.wrap("startTime", self.start))
        form.addRow("End Time *", self.errors.wrap("endTime", self.end))

        self.room = QtWidgets.QLineEdit()
        self.room.textEdited.connect(self.field_edited("room"))
        form.addRow("Room *", self.errors.wrap("room", self.room))

        self.capacity = QtWidgets.QSpinBox()
        self.capacity.setRange(0, 500)
        self.capacity.setValue(20)
        self.capacity.valueChanged.connect(self.field_edited("maxCapacity"))
        form.addRow("Capacity *", self.errors.wrap("maxCapacity", self.capacity))

        self.status = QtWidgets.QComboBox()
        for s in SESSION_STATUSES:
            self.status.addItem(humanize(s), s)
        form.addRow("Status", self.status)

        self.notes = QtWidgets.QPlainTextEdit()
        self.notes.setFixedHeight(70)
        form.addRow("Notes", self.notes)
        layout.addWidget(grp)
        layout.addWidget(self._enrollment_box())

    def _enrollment_box(self) -> QtWidgets.QWidget:
        self.enrolled_grp = QtWidgets.QGroupBox("Enrolled Members")
        v = QtWidgets.QVBoxLayout(self.enrolled_grp)

        # --- ENROLL ---
        self.enroll_bar = QtWidgets.QWidget()
        h = QtWidgets.QHBoxLayout(self.enroll_bar)
        h.setContentsMargins(0, 0, 0, 0)
        self.enroll_term = QtWidgets.QLineEdit()
        self.enroll_term.setPlaceholderText("Search members to enroll")
        self.enroll_term.textEdited.connect(lambda text: self.member_search.term_changed(text))
        self.enroll_box = QtWidgets.QComboBox()
        self.enroll_box.addItem("Select a member", None)
        self.b_enroll = QtWidgets.QPushButton("➕ Enroll")
        self.b_enroll.clicked.connect(self.on_enroll)
        h.addWidget(self.enroll_term, 1)
        h.addWidget(self.enroll_box, 1)
        h.addWidget(self.b_enroll)
        v.addWidget(self.enroll_bar)

        self.enrolled = QtWidgets.QTableWidget(0, 4)
        self.enrolled.setHorizontalHeaderLabels(["Member", "Enrolled On", "Attended", "Actions"])
        self.enrolled.horizontalHeader().setSectionResizeMode(QtWidgets.QHeaderView.Stretch)
        self.enrolled.setEditTriggers(QtWidgets.QAbstractItemView.NoEditTriggers)
        self.enrolled.verticalHeader().setVisible(False)
        v.addWidget(self.enrolled)

        self.enrolled_grp.setVisible(self.form.mode != FormMode.CREATE)
        return self.enrolled_grp

    def set_read_only(self, read_only: bool) -> None:
        super().set_read_only(read_only)
        # Enrollment stays available while viewing
        self.enroll_bar.setVisible(self.can_enroll)
        self.enroll_term.setReadOnly(False)
        self.enroll_box.setEnabled(self.can_enroll)

    # --- LOOKUPS ---

    def show_classes(self, classes: List[GymClass]) -> None:
        current = self.class_box.currentData()
        self.class_box.blockSignals(True)
        for c in classes:
            self.classes[c.id] = c
            if self.class_box.findData(c.id) < 0:
                self.class_box.addItem(c.name, c.id)
        self.class_box.setCurrentIndex(max(self.class_box.findData(current), 0))
        self.class_box.blockSignals(False)

    def show_instructors(self, trainers) -> None:
        current = self.instructor.currentData()
        for t in trainers:
            if self.instructor.findData(t.id) < 0:
                self.instructor.addItem(t.full_name, t.id)
        self.instructor.setCurrentIndex(max(self.instructor.findData(current), 0))

    def show_members(self, members: List[Member]) -> None:
        self.enroll_box.clear()
        self.enroll_box.addItem("Select a member", None)
        for m in members:
            self.enroll_box.addItem(f"{m.full_name} ({m.email or m.phone})", m.id)

    def on_class_picked(self) -> None:
        """A new session takes the class's trainer, capacity and length."""
        gym_class: Optional[GymClass] = self.classes.get(self.class_box.currentData())
        if gym_class is None or self.form.mode != FormMode.CREATE:
            return
        if gym_class.instructor:
            if self.instructor.findData(gym_class.instructor) < 0:
                self.instructor.addItem(gym_class.instructor_name or "Instructor", gym_class.instructor)
            self.instructor.setCurrentIndex(self.instructor.findData(gym_class.instructor))
        if gym_class.capacity:
            self.capacity.setValue(gym_class.capacity)
        if gym_class.duration:
            self.end.setDateTime(self.start.dateTime().addSecs(gym_class.duration * 60))

    # --- ENROLLMENT ---

    def render_enrollments(self, session: ClassSession) -> None:
        self.enrolled.setRowCount(len(session.enrollments))
        for i, e in enumerate(session.enrollments):
            self.enrolled.setItem(i, 0, QtWidgets.QTableWidgetItem(e.member_name))
            self.enrolled.setItem(i, 1, QtWidgets.QTableWidgetItem(format_date(e.enrolled_at)))
            self.enrolled.setItem(i, 2, QtWidgets.QTableWidgetItem("Yes" if e.attended else "No"))
            self.enrolled.setCellWidget(i, 3, self._enrollment_actions(e))
        self.enrolled_grp.setTitle(f"Enrolled Members ({session.enrolled_count}/{session.max_capacity or '-'})")

    def _enrollment_actions(self, enrollment) -> QtWidgets.QWidget:
        w = QtWidgets.QWidget()
        h = QtWidgets.QHBoxLayout(w)
        h.setContentsMargins(2, 2, 2, 2)
        if not self.can_enroll:
            return w
        b_mark = QtWidgets.QPushButton("✖ Mark Absent" if enrollment.attended else "✔ Mark Attended")
        b_mark.clicked.connect(lambda checked=False, e=enrollment: self.on_mark(e.member, not e.attended))
        b_drop = QtWidgets.QPushButton("Unenroll")
        b_drop.clicked.connect(lambda checked=False, e=enrollment: self.on_unenroll(e.member, e.member_name))
        for b in (b_mark, b_drop):
            b.setStyleSheet("padding: 3px 8px; font-size: 11px;")
            h.addWidget(b)
        return w

    def _change(self, call: Callable[[], ClassSession], message: str) -> None:
        def done(session: ClassSession):
            self.record = session
            self.render_enrollments(session)
            self.ctx.alerts.set_alert(message, "success")

        self.ctx.run(call, done, owner=self)

    def on_enroll(self) -> None:
        member_id = self.enroll_box.currentData()
        session: Optional[ClassSession] = self.record
        if not self.can_enroll or session is None:
            return
        if member_id is None:
            self.ctx.alerts.set_alert("Select a member to enroll", "warning")
            return
        if session.is_enrolled(member_id):
            self.ctx.alerts.set_alert("Member is already enrolled in this session", "warning")
            return
        if session.is_full:
            self.ctx.alerts.set_alert("This session is full", "warning")
            return
        client, session_id = self.ctx.client, session.id
        self._change(lambda: session_service.enroll(client, session_id, member_id), "Member enrolled successfully")

    def on_unenroll(self, member_id: str, name: str) -> None:
        if not self.can_enroll or self.record is None:
            return
        if not confirm(self, "Unenroll Member", f"Remove {name} from this session?"):
            return
        client, session_id = self.ctx.client, self.record.id
        self._change(lambda: session_service.unenroll(client, session_id, member_id),
                     "Member unenrolled successfully")

    def on_mark(self, member_id: str, attended: bool) -> None:
        if not self.can_enroll or self.record is None:
            return
        client, session_id = self.ctx.client, self.record.id
        message = "Member marked as attended" if attended else "Member marked as absent"
        self._change(lambda: session_service.mark_attendance(client, session_id, member_id, attended), message)

    # --- RECORD <-> INPUTS ---

    def fetch(self) -> ClassSession:
        return session_service.get_session(self.ctx.client, self.route.record_id)

    def fill(self, s: ClassSession) -> None:
        self.class_box.blockSignals(True)
        if s.class_id and self.class_box.findData(s.class_id) < 0:
            self.class_box.addItem(s.class_name, s.class_id)
        self.class_box.setCurrentIndex(max(self.class_box.findData(s.class_id), 0))
        self.class_box.blockSignals(False)
        if s.instructor and self.instructor.findData(s.instructor) < 0:
            self.instructor.addItem(s.instructor_name or "Instructor", s.instructor)
        self.instructor.setCurrentIndex(max(self.instructor.findData(s.instructor), 0))

        if s.start_time:
            self.start.setDateTime(QtCore.QDateTime(to_local(s.start_time)))
        if s.end_time:
            self.end.setDateTime(QtCore.QDateTime(to_local(s.end_time)))
        self.room.setText(s.room)
        self.capacity.setValue(s.max_capacity or 0)
        self.status.setCurrentIndex(max(self.status.findData(s.status), 0))
        self.notes.setPlainText(s.notes)
        self.render_enrollments(s)
        self.title.setText(f"{self.title.text()} - {s.class_name}, {format_date(s.start_time)}")

    def payload(self) -> Dict[str, Any]:
        start: datetime.datetime = self.start.dateTime().toPython().astimezone()
        return ClassSession(
            id=self.route.record_id,
            class_name=self.class_box.currentText(),
            class_id=self.class_box.currentData(),
            instructor=self.instructor.currentData(),
            start_time=start,
            end_time=self.end.dateTime().toPython().astimezone(),
            room=self.room.text().strip(),
            max_capacity=self.capacity.value(),
            status=self.status.currentData(),
            notes=self.notes.toPlainText().strip(),
        ).to_payload()

    def dispose(self) -> None:
        self.member_search.cancel()
        super().dispose()

    def describe(self) -> str:
        return f"this {self.class_box.currentText()} session"
