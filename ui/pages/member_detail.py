import datetime
from functools import partial
from typing import Any, Dict, List, Optional

from PySide6 import QtWidgets, QtCore

from core.forms import FormController
from core.routes import FormMode, Route
from core.utils import capitalize_words, format_currency, format_date, to_local
from core.validators import validate_member
from models.member import GENDERS, MEMBER_STATUSES, MedicalInfo, Member
from models.membership import Membership
from models.staff import Address, EmergencyContact
from services import member_service, membership_service, payment_service
from services.member_service import CreatedMember
from ui.context import AppContext
from ui.widgets.detail_page import DetailPage


def _date_edit() -> QtWidgets.QDateEdit:
    edit = QtWidgets.QDateEdit(QtCore.QDate.currentDate())
    edit.setCalendarPopup(True)
    edit.setDisplayFormat("dd MMM yyyy")
    return edit


def _picked(edit: QtWidgets.QDateEdit) -> datetime.datetime:
    return datetime.datetime.combine(edit.date().toPython(), datetime.time()).astimezone()


class MemberDetailPage(DetailPage):
    """
    Create/edit/view a member, in tabs.
    On create, a custom fee turns into a one-off plan assigned to the new member.
    """
    resource = "members"
    singular = "Member"

    def __init__(self, ctx: AppContext, route: Route, parent=None):
        form = FormController(
            route.mode,
            validator=validate_member,
            create=lambda data: member_service.create_member(ctx.client, data, self.base_plan),
            update=partial(member_service.update_member, ctx.client),
            alerts=ctx.alerts,
            record_id=route.record_id,
            messages={
                "created": "Member created successfully",
                "updated": "Member updated successfully",
                "not_found": "Member not found",
            },
            navigate_to=lambda: ctx.navigate("members"),
            runner=ctx.runner,
        )
        super().__init__(ctx, route, form, partial(member_service.delete_member, ctx.client), parent)
        form.saved.connect(self.on_saved)

        if not form.read_only:
            self.ctx.run(partial(membership_service.active_memberships, ctx.client), self.show_plans, owner=self)
        if route.record_id:
            self.ctx.run(partial(payment_service.member_payments, ctx.client, route.record_id), self.show_payments,
                         lambda err: self.payments_empty.setText("Could not load payments"), owner=self)

    def build_form(self, layout: QtWidgets.QVBoxLayout) -> None:
        self.plans: Dict[str, Membership] = {}
        # Plan picked when the form was last sent; read off the UI thread
        self.base_plan: Optional[Membership] = None
        self.tabs = QtWidgets.QTabWidget()
        self.tabs.addTab(self._personal_tab(), "Personal Information")
        self.tabs.addTab(self._membership_tab(), "Membership")
        self.tabs.addTab(self._medical_tab(), "Medical Information")
        self.tabs.addTab(self._notes_tab(), "Notes")
        self.payments_index = self.tabs.addTab(self._payments_tab(), "Payments")
        self.tabs.setTabVisible(self.payments_index, self.route.record_id is not None)
        layout.addWidget(self.tabs)

    # --- TABS ---

    def _personal_tab(self) -> QtWidgets.QWidget:
        w = QtWidgets.QWidget()
        form = QtWidgets.QFormLayout(w)

        self.first_name = QtWidgets.QLineEdit()
        self.first_name.textEdited.connect(self.field_edited("firstName"))
        self.last_name = QtWidgets.QLineEdit()
        self.last_name.textEdited.connect(self.field_edited("lastName"))
        self.email = QtWidgets.QLineEdit()
        self.email.textEdited.connect(self.field_edited("email"))
        self.phone = QtWidgets.QLineEdit()
        self.phone.textEdited.connect(self.field_edited("phone"))
        form.addRow("First Name *", self.errors.wrap("firstName", self.first_name))
        form.addRow("Last Name *", self.errors.wrap("lastName", self.last_name))
        form.addRow("Email *", self.errors.wrap("email", self.email))
        form.addRow("Phone *", self.errors.wrap("phone", self.phone))

        self.has_dob = QtWidgets.QCheckBox("Known")
        self.dob = _date_edit()
        self.dob.setEnabled(False)
        self.has_dob.toggled.connect(self.dob.setEnabled)
        dob_row = QtWidgets.QWidget()
        h = QtWidgets.QHBoxLayout(dob_row)
        h.setContentsMargins(0, 0, 0, 0)
        h.addWidget(self.has_dob)
        h.addWidget(self.dob, 1)
        form.addRow("Date of Birth", dob_row)

        self.gender = QtWidgets.QComboBox()
        self.gender.addItem("Not specified", "")
        for g in GENDERS:
            self.gender.addItem(capitalize_words(g), g)
        form.addRow("Gender", self.gender)

        form.addRow(QtWidgets.QLabel("Address"))
        self.street = QtWidgets.QLineEdit()
        self.city = QtWidgets.QLineEdit()
        self.state = QtWidgets.QLineEdit()
        self.zip_code = QtWidgets.QLineEdit()
        self.country = QtWidgets.QLineEdit()
        form.addRow("Street", self.street)
        form.addRow("City", self.city)
        form.addRow("State", self.state)
        form.addRow("Zip Code", self.zip_code)
        form.addRow("Country", self.country)

        form.addRow(QtWidgets.QLabel("Emergency Contact"))
        self.ec_name = QtWidgets.QLineEdit()
        self.ec_relationship = QtWidgets.QLineEdit()
        self.ec_phone = QtWidgets.QLineEdit()
        form.addRow("Name", self.ec_name)
        form.addRow("Relationship", self.ec_relationship)
        form.addRow("Phone", self.ec_phone)
        return w

    def _membership_tab(self) -> QtWidgets.QWidget:
        w = QtWidgets.QWidget()
        form = QtWidgets.QFormLayout(w)

        self.plan = QtWidgets.QComboBox()
        self.plan.addItem("No plan", None)
        self.plan.currentIndexChanged.connect(lambda _: self.update_end_date())
        form.addRow("Membership Plan", self.plan)

        self.status = QtWidgets.QComboBox()
        for s in MEMBER_STATUSES:
            self.status.addItem(capitalize_words(s), s)
        form.addRow("Status", self.status)

        self.start_date = _date_edit()
        self.start_date.dateChanged.connect(lambda _: self.update_end_date())
        form.addRow("Start Date", self.start_date)

        self.end_date = _date_edit()
        self.end_date.dateChanged.connect(self.field_edited("endDate"))
        form.addRow("End Date", self.errors.wrap("endDate", self.end_date))

        self.custom_fee = QtWidgets.QDoubleSpinBox()
        self.custom_fee.setRange(0, 10_000_000)
        self.custom_fee.setDecimals(2)
        self.custom_fee.setPrefix("Rs. ")
        self.custom_fee.setSpecialValueText("Plan price")
        form.addRow("Custom Fee", self.custom_fee)
        hint = QtWidgets.QLabel("A custom fee on a new member creates a personal plan at that price.")
        hint.setProperty("muted", True)
        hint.setVisible(self.form.mode == FormMode.CREATE)
        form.addRow("", hint)
        return w

    def _medical_tab(self) -> QtWidgets.QWidget:
        w = QtWidgets.QWidget()
        form = QtWidgets.QFormLayout(w)
        self.conditions = QtWidgets.QPlainTextEdit()
        self.allergies = QtWidgets.QPlainTextEdit()
        self.medications = QtWidgets.QPlainTextEdit()
        for edit in (self.conditions, self.allergies, self.medications):
            edit.setFixedHeight(70)
        form.addRow("Medical Conditions", self.conditions)
        form.addRow("Allergies", self.allergies)
        form.addRow("Medications", self.medications)
        return w

    def _notes_tab(self) -> QtWidgets.QWidget:
        w = QtWidgets.QWidget()
        v = QtWidgets.QVBoxLayout(w)
        self.notes = QtWidgets.QPlainTextEdit()
        v.addWidget(self.notes)
        return w

    def _payments_tab(self) -> QtWidgets.QWidget:
        w = QtWidgets.QWidget()
        v = QtWidgets.QVBoxLayout(w)
        self.payments = QtWidgets.QTableWidget(0, 4)
        self.payments.setHorizontalHeaderLabels(["Date", "Invoice #", "Amount", "Status"])
        self.payments.horizontalHeader().setSectionResizeMode(QtWidgets.QHeaderView.Stretch)
        self.payments.setEditTriggers(QtWidgets.QAbstractItemView.NoEditTriggers)
        self.payments.verticalHeader().setVisible(False)
        v.addWidget(self.payments)
        self.payments_empty = QtWidgets.QLabel("Loading payments...")
        self.payments_empty.setProperty("muted", True)
        v.addWidget(self.payments_empty)
        return w

    # --- LOOKUPS ---

    def show_plans(self, plans: List[Membership]) -> None:
        current = self.plan.currentData()
        for p in plans:
            self.plans[p.id] = p
            if self.plan.findData(p.id) < 0:
                self.plan.addItem(p.label, p.id)
        self.plan.setCurrentIndex(max(self.plan.findData(current), 0))

    def show_payments(self, payments) -> None:
        self.payments.setRowCount(len(payments))
        for i, p in enumerate(payments):
            values = [format_date(p.payment_date), p.invoice_number or "N/A", format_currency(p.amount),
                      capitalize_words(p.payment_status)]
            for j, value in enumerate(values):
                self.payments.setItem(i, j, QtWidgets.QTableWidgetItem(value))
        self.payments_empty.setText("No payments recorded")
        self.payments_empty.setVisible(not payments)

    def update_end_date(self) -> None:
        """A plan's duration decides the end date while the member is being created."""
        plan = self.plans.get(self.plan.currentData())
        if plan is None or self.form.mode != FormMode.CREATE:
            return
        start = datetime.datetime.combine(self.start_date.date().toPython(), datetime.time())
        self.end_date.setDate(QtCore.QDate(plan.end_date(start).date()))

    # --- RECORD <-> INPUTS ---

    def fetch(self) -> Member:
        return member_service.get_member(self.ctx.client, self.route.record_id)

    def fill(self, m: Member) -> None:
        self.first_name.setText(m.first_name)
        self.last_name.setText(m.last_name)
        self.email.setText(m.email)
        self.phone.setText(m.phone)
        self.has_dob.setChecked(m.date_of_birth is not None)
        if m.date_of_birth:
            self.dob.setDate(QtCore.QDate(to_local(m.date_of_birth).date()))
        self.gender.setCurrentIndex(max(self.gender.findData(m.gender), 0))

        self.street.setText(m.address.street)
        self.city.setText(m.address.city)
        self.state.setText(m.address.state)
        self.zip_code.setText(m.address.zip_code)
        self.country.setText(m.address.country)
        self.ec_name.setText(m.emergency_contact.name)
        self.ec_relationship.setText(m.emergency_contact.relationship)
        self.ec_phone.setText(m.emergency_contact.phone)

        if m.membership_id and self.plan.findData(m.membership_id) < 0:
            self.plan.addItem(m.membership_type or "Plan", m.membership_id)
        self.plan.setCurrentIndex(max(self.plan.findData(m.membership_id), 0))
        self.status.setCurrentIndex(max(self.status.findData(m.status), 0))
        if m.start_date:
            self.start_date.setDate(QtCore.QDate(to_local(m.start_date).date()))
        if m.end_date:
            self.end_date.setDate(QtCore.QDate(to_local(m.end_date).date()))
        self.custom_fee.setValue(float(m.custom_fee or 0))

        self.conditions.setPlainText(m.medical.conditions)
        self.allergies.setPlainText(m.medical.allergies)
        self.medications.setPlainText(m.medical.medications)
        self.notes.setPlainText(m.notes)
        self.title.setText(f"{self.title.text()} - {m.full_name}")

    def payload(self) -> Dict[str, Any]:
        plan_id = self.plan.currentData()
        self.base_plan = self.plans.get(plan_id)
        member = Member(
            id=self.route.record_id,
            first_name=self.first_name.text().strip(),
            last_name=self.last_name.text().strip(),
            email=self.email.text().strip(),
            phone=self.phone.text().strip(),
            status=self.status.currentData(),
            membership_id=plan_id,
            custom_fee=self.custom_fee.value() or None,
            start_date=_picked(self.start_date),
            end_date=_picked(self.end_date),
            date_of_birth=_picked(self.dob) if self.has_dob.isChecked() else None,
            gender=self.gender.currentData(),
            address=Address(
                street=self.street.text().strip(),
                city=self.city.text().strip(),
                state=self.state.text().strip(),
                zip_code=self.zip_code.text().strip(),
                country=self.country.text().strip(),
            ),
            emergency_contact=EmergencyContact(
                name=self.ec_name.text().strip(),
                relationship=self.ec_relationship.text().strip(),
                phone=self.ec_phone.text().strip(),
            ),
            medical=MedicalInfo(
                conditions=self.conditions.toPlainText().strip(),
                allergies=self.allergies.toPlainText().strip(),
                medications=self.medications.toPlainText().strip(),
            ),
            notes=self.notes.toPlainText().strip(),
        )
        return member.to_payload()

    # --- SAVE ---

    def on_saved(self, result) -> None:
        if not isinstance(result, CreatedMember):
            return
        if result.custom_plan is not None:
            self.ctx.alerts.set_alert("Member created with custom membership plan", "success")
        elif result.custom_plan_error is not None:
            self.ctx.alerts.set_alert(
                "Member created but failed to create custom membership plan. Please create it manually.", "warning")

    def describe(self) -> str:
        name = f"{self.first_name.text()} {self.last_name.text()}".strip()
        return name or "this member"
