import dataclasses
from functools import partial
from typing import Any, Dict

from PySide6 import QtWidgets, QtCore

from core.forms import FormController
from core.routes import FormMode, Route
from core.utils import capitalize_words, to_local
from core.validators import validate_staff
from models.staff import PAYMENT_FREQUENCIES, POSITIONS, Address, EmergencyContact, Salary, Staff
from services import staff_service
from ui.context import AppContext
from ui.pages.staff_tabs import CertificationsTab, ScheduleTab
from ui.widgets.detail_page import DetailPage


class StaffDetailPage(DetailPage):
    resource = "staff"
    singular = "Staff Member"

    def __init__(self, ctx: AppContext, route: Route, parent=None):
        form = FormController(
            route.mode,
            validator=validate_staff,
            create=partial(staff_service.create_staff, ctx.client),
            update=partial(staff_service.update_staff, ctx.client),
            alerts=ctx.alerts,
            record_id=route.record_id,
            messages={
                "created": "Staff member created successfully",
                "updated": "Staff member updated successfully",
                "not_found": "Staff member not found",
            },
            navigate_to=lambda: ctx.navigate("staff"),
            runner=ctx.runner,
        )
        super().__init__(ctx, route, form, partial(staff_service.delete_staff, ctx.client), parent)

    def build_form(self, layout: QtWidgets.QVBoxLayout) -> None:
        # Working copy that holds the specializations being edited
        self.draft = Staff(id=None, first_name="", last_name="", email="", phone="", position="")
        self.tabs = QtWidgets.QTabWidget()
        self.tabs.addTab(self._personal_tab(), "Personal")
        self.certs_tab = CertificationsTab(self.ctx)
        self.tabs.addTab(self.certs_tab, "Certifications")
        self.schedule_tab = ScheduleTab(self.ctx)
        self.tabs.addTab(self.schedule_tab, "Schedule")
        self.tabs.addTab(self._address_tab(), "Address && Emergency")
        self.tabs.addTab(self._salary_tab(), "Salary")
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

        self.position = QtWidgets.QComboBox()
        self.position.addItem("Select a position", "")
        for p in POSITIONS:
            self.position.addItem(capitalize_words(p), p)
        self.position.currentIndexChanged.connect(self.field_edited("position"))

        self.hire_date = QtWidgets.QDateEdit(QtCore.QDate.currentDate())
        self.hire_date.setCalendarPopup(True)
        self.active = QtWidgets.QCheckBox("Active")
        self.active.setChecked(True)
        self.notes = QtWidgets.QPlainTextEdit()
        self.notes.setFixedHeight(70)

        form.addRow("First Name *", self.errors.wrap("firstName", self.first_name))
        form.addRow("Last Name *", self.errors.wrap("lastName", self.last_name))
        form.addRow("Email *", self.errors.wrap("email", self.email))
        form.addRow("Phone *", self.errors.wrap("phone", self.phone))
        form.addRow("Position *", self.errors.wrap("position", self.position))
        form.addRow("Hire Date", self.hire_date)
        form.addRow("", self.active)

        # Specializations
        spec_box = QtWidgets.QWidget()
        v = QtWidgets.QVBoxLayout(spec_box)
        v.setContentsMargins(0, 0, 0, 0)
        row = QtWidgets.QHBoxLayout()
        self.spec_input = QtWidgets.QLineEdit()
        self.spec_input.setPlaceholderText("e.g. Yoga, CrossFit")
        self.spec_input.returnPressed.connect(self.add_specialization)
        self.b_spec_add = QtWidgets.QPushButton("Add")
        self.b_spec_add.clicked.connect(self.add_specialization)
        row.addWidget(self.spec_input)
        row.addWidget(self.b_spec_add)
        v.addLayout(row)
        self.spec_list = QtWidgets.QListWidget()
        self.spec_list.setFixedHeight(90)
        self.spec_list.itemDoubleClicked.connect(lambda item: self.remove_specialization(self.spec_list.row(item)))
        v.addWidget(self.spec_list)
        form.addRow("Specializations", spec_box)
        form.addRow("Notes", self.notes)
        return w

    def _address_tab(self) -> QtWidgets.QWidget:
        w = QtWidgets.QWidget()
        form = QtWidgets.QFormLayout(w)
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

    def _salary_tab(self) -> QtWidgets.QWidget:
        w = QtWidgets.QWidget()
        form = QtWidgets.QFormLayout(w)
        self.salary = QtWidgets.QDoubleSpinBox()
        self.salary.setRange(0, 10_000_000)
        self.salary.setDecimals(2)
        self.frequency = QtWidgets.QComboBox()
        for f in PAYMENT_FREQUENCIES:
            self.frequency.addItem(capitalize_words(f), f)
        self.frequency.setCurrentIndex(self.frequency.findData("monthly"))
        form.addRow("Amount", self.salary)
        form.addRow("Payment Frequency", self.frequency)
        return w

    # --- SPECIALIZATIONS ---

    def add_specialization(self) -> None:
        if self.form.read_only:
            return
        if self.draft.add_specialization(self.spec_input.text()):
            self.spec_input.clear()
            self.render_specializations()

    def remove_specialization(self, index: int) -> None:
        if self.form.read_only:
            return
        self.draft.remove_specialization(index)
        self.render_specializations()

    def render_specializations(self) -> None:
        self.spec_list.clear()
        self.spec_list.addItems(self.draft.specializations)

    def set_read_only(self, read_only: bool) -> None:
        super().set_read_only(read_only)
        self.b_spec_add.setVisible(not read_only)
        self.spec_input.setVisible(not read_only)

    # --- RECORD <-> INPUTS ---

    def fetch(self) -> Staff:
        return staff_service.get_staff(self.ctx.client, self.route.record_id)

    def fill(self, s: Staff) -> None:
        self.draft = dataclasses.replace(s, specializations=list(s.specializations))
        self.first_name.setText(s.first_name)
        self.last_name.setText(s.last_name)
        self.email.setText(s.email)
        self.phone.setText(s.phone)
        self.position.setCurrentIndex(max(self.position.findData(s.position), 0))
        if s.hire_date:
            self.hire_date.setDate(QtCore.QDate(to_local(s.hire_date).date()))
        self.active.setChecked(s.is_active)
        self.notes.setPlainText(s.notes)
        self.render_specializations()

        self.street.setText(s.address.street)
        self.city.setText(s.address.city)
        self.state.setText(s.address.state)
        self.zip_code.setText(s.address.zip_code)
        self.country.setText(s.address.country)
        self.ec_name.setText(s.emergency_contact.name)
        self.ec_relationship.setText(s.emergency_contact.relationship)
        self.ec_phone.setText(s.emergency_contact.phone)
        self.salary.setValue(float(s.salary.amount or 0))
        self.frequency.setCurrentIndex(max(self.frequency.findData(s.salary.payment_frequency), 0))

        editable = self.form.mode == FormMode.EDIT and self.can_modify
        self.certs_tab.set_state(s.id, s.certifications, editable)
        self.schedule_tab.set_state(s.id, s.schedule, editable)
        self.title.setText(f"{self.title.text()} - {s.full_name}")

    def payload(self) -> Dict[str, Any]:
        staff = Staff(
            id=self.route.record_id,
            first_name=self.first_name.text().strip(),
            last_name=self.last_name.text().strip(),
            email=self.email.text().strip(),
            phone=self.phone.text().strip(),
            position=self.position.currentData(),
            specializations=list(self.draft.specializations),
            hire_date=self.hire_date.dateTime().toPython().astimezone(),
            is_active=self.active.isChecked(),
            notes=self.notes.toPlainText().strip(),
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
            salary=Salary(amount=self.salary.value() or None, payment_frequency=self.frequency.currentData()),
        )
        return staff.to_payload()

    def describe(self) -> str:
        return self.draft.full_name or "this staff member"
