from functools import partial
from typing import Any, Dict, List

from PySide6 import QtWidgets, QtCore

from core.forms import FormController
from core.member_search import MemberSearch
from core.routes import Route
from core.utils import capitalize_words, format_date, humanize, to_local
from core.validators import validate_payment
from models.member import Member
from models.membership import Membership
from models.payment import (
    FOR_MEMBERSHIP, FOR_PERSONAL_TRAINING, PAYMENT_METHODS, PAYMENT_PURPOSES, PAYMENT_STATUSES, Payment,
)
from services import class_service, member_service, membership_service, payment_service
from ui.context import AppContext
from ui.widgets.detail_page import DetailPage


class PaymentDetailPage(DetailPage):
    """
    Records or edits a payment.
    Picking a plan fills in its price; a trainer is only asked for on personal training payments.
    """
    resource = "payments"
    singular = "Payment"

    def __init__(self, ctx: AppContext, route: Route, parent=None):
        form = FormController(
            route.mode,
            validator=validate_payment,
            create=partial(payment_service.create_payment, ctx.client),
            update=partial(payment_service.update_payment, ctx.client),
            alerts=ctx.alerts,
            record_id=route.record_id,
            messages={
                "created": "Payment created successfully",
                "updated": "Payment updated successfully",
                "not_found": "Payment not found",
            },
            navigate_to=lambda: ctx.navigate("payments"),
            runner=ctx.runner,
        )
        super().__init__(ctx, route, form, partial(payment_service.delete_payment, ctx.client), parent)
        self.member_search = MemberSearch(
            partial(member_service.search_members, ctx.client), ctx.scheduler, runner=ctx.runner, parent=self)
        self.member_search.results.connect(self.show_members)
        self.member_search.loading_changed.connect(lambda busy: self.member_box.setEnabled(not busy))

        if not form.read_only:
            self.member_search.term_changed("")
            self.ctx.run(partial(membership_service.active_memberships, ctx.client), self.show_plans, owner=self)
            self.ctx.run(partial(class_service.list_instructors, ctx.client), self.show_trainers, owner=self)

    def build_form(self, layout: QtWidgets.QVBoxLayout) -> None:
        self.plans: Dict[str, Membership] = {}
        grp = QtWidgets.QGroupBox("Payment Details")
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

        # --- WHAT FOR ---
        self.purpose = QtWidgets.QComboBox()
        for p in PAYMENT_PURPOSES:
            self.purpose.addItem(humanize(p), p)
        self.purpose.currentIndexChanged.connect(lambda _: self.update_purpose_rows())
        form.addRow("Payment For", self.purpose)

        self.plan = QtWidgets.QComboBox()
        self.plan.addItem("Select a membership", None)
        self.plan.currentIndexChanged.connect(self.field_edited("membership"))
        self.plan.currentIndexChanged.connect(lambda _: self.on_plan_picked())
        self.plan_label = QtWidgets.QLabel("Membership *")
        self.plan_row = self.errors.wrap("membership", self.plan)
        form.addRow(self.plan_label, self.plan_row)

        self.staff = QtWidgets.QComboBox()
        self.staff.addItem("Select a trainer", None)
        self.staff.currentIndexChanged.connect(self.field_edited("staff"))
        self.staff_label = QtWidgets.QLabel("Trainer *")
        self.staff_row = self.errors.wrap("staff", self.staff)
        form.addRow(self.staff_label, self.staff_row)

        # --- AMOUNT ---
        self.amount = QtWidgets.QDoubleSpinBox()
        self.amount.setRange(0, 10_000_000)
        self.amount.setDecimals(2)
        self.amount.setPrefix("Rs. ")
        self.amount.valueChanged.connect(self.field_edited("amount"))
        form.addRow("Amount *", self.errors.wrap("amount", self.amount))

        self.method = QtWidgets.QComboBox()
        for m in PAYMENT_METHODS:
            self.method.addItem(humanize(m), m)
        self.method.currentIndexChanged.connect(self.field_edited("paymentMethod"))
        form.addRow("Payment Method *", self.errors.wrap("paymentMethod", self.method))

        self.date = QtWidgets.QDateTimeEdit(QtCore.QDateTime.currentDateTime())
        self.date.setCalendarPopup(True)
        self.date.setDisplayFormat("dd MMM yyyy  hh:mm AP")
        self.date.dateTimeChanged.connect(self.field_edited("paymentDate"))
        form.addRow("Payment Date *", self.errors.wrap("paymentDate", self.date))

        self.status = QtWidgets.QComboBox()
        for s in PAYMENT_STATUSES:
            self.status.addItem(capitalize_words(s), s)
        self.status.setCurrentIndex(self.status.findData("completed"))
        form.addRow("Status", self.status)

        self.transaction = QtWidgets.QLineEdit()
        form.addRow("Transaction ID", self.transaction)

        self.invoice = QtWidgets.QLabel("Assigned when saved")
        self.invoice.setProperty("muted", True)
        form.addRow("Invoice #", self.invoice)

        self.description = QtWidgets.QPlainTextEdit()
        self.description.setFixedHeight(70)
        form.addRow("Description", self.description)
        layout.addWidget(grp)

        self.update_purpose_rows()

    def update_purpose_rows(self) -> None:
        purpose = self.purpose.currentData()
        for w in (self.plan_label, self.plan_row):
            w.setVisible(purpose == FOR_MEMBERSHIP)
        for w in (self.staff_label, self.staff_row):
            w.setVisible(purpose == FOR_PERSONAL_TRAINING)

    def on_plan_picked(self) -> None:
        plan = self.plans.get(self.plan.currentData())
        if plan is None or self.form.read_only:
            return
        self.purpose.setCurrentIndex(self.purpose.findData(FOR_MEMBERSHIP))
        self.amount.setValue(float(plan.price or 0))

    # --- LOOKUPS ---

    def show_members(self, members: List[Member]) -> None:
        selected = self.member_box.currentData()
        selected_text = self.member_box.currentText()
        self.member_box.blockSignals(True)
        self.member_box.clear()
        self.member_box.addItem("Select a member", None)
        for m in members:
            self.member_box.addItem(f"{m.full_name} ({m.email or m.phone})", m.id)
        if selected and self.member_box.findData(selected) < 0:
            self.member_box.addItem(selected_text, selected)
        self.member_box.setCurrentIndex(max(self.member_box.findData(selected), 0))
        self.member_box.blockSignals(False)

    def show_plans(self, plans: List[Membership]) -> None:
        current = self.plan.currentData()
        self.plan.blockSignals(True)
        for p in plans:
            self.plans[p.id] = p
            if self.plan.findData(p.id) < 0:
                self.plan.addItem(p.label, p.id)
        self.plan.setCurrentIndex(max(self.plan.findData(current), 0))
        self.plan.blockSignals(False)

    def show_trainers(self, trainers) -> None:
        current = self.staff.currentData()
        for t in trainers:
            if self.staff.findData(t.id) < 0:
                self.staff.addItem(t.full_name, t.id)
        self.staff.setCurrentIndex(max(self.staff.findData(current), 0))

    # --- RECORD <-> INPUTS ---

    def fetch(self) -> Payment:
        return payment_service.get_payment(self.ctx.client, self.route.record_id)

    def fill(self, p: Payment) -> None:
        if p.member and self.member_box.findData(p.member) < 0:
            self.member_box.addItem(p.member_name, p.member)
        self.member_box.setCurrentIndex(max(self.member_box.findData(p.member), 0))

        self.plan.blockSignals(True)
        if p.membership and self.plan.findData(p.membership) < 0:
            self.plan.addItem(p.membership_name or "Membership", p.membership)
        self.plan.setCurrentIndex(max(self.plan.findData(p.membership), 0))
        self.plan.blockSignals(False)
        if p.staff and self.staff.findData(p.staff) < 0:
            self.staff.addItem(p.staff_name or "Trainer", p.staff)
        self.staff.setCurrentIndex(max(self.staff.findData(p.staff), 0))
        self.purpose.setCurrentIndex(max(self.purpose.findData(p.payment_for), 0))

        self.amount.setValue(float(p.amount or 0))
        self.method.setCurrentIndex(max(self.method.findData(p.payment_method), 0))
        if p.payment_date:
            self.date.setDateTime(QtCore.QDateTime(to_local(p.payment_date)))
        self.status.setCurrentIndex(max(self.status.findData(p.payment_status), 0))
        self.transaction.setText(p.transaction_id)
        self.invoice.setText(p.invoice_number or "N/A")
        self.description.setPlainText(p.description)
        self.title.setText(f"{self.title.text()} - {p.member_name}, {format_date(p.payment_date)}")

    def payload(self) -> Dict[str, Any]:
        purpose = self.purpose.currentData()
        return Payment(
            id=self.route.record_id,
            member=self.member_box.currentData(),
            amount=self.amount.value() or None,
            payment_method=self.method.currentData(),
            payment_date=self.date.dateTime().toPython().astimezone(),
            payment_status=self.status.currentData(),
            payment_for=purpose,
            membership=self.plan.currentData() if purpose == FOR_MEMBERSHIP else None,
            staff=self.staff.currentData(),
            transaction_id=self.transaction.text().strip(),
            description=self.description.toPlainText().strip(),
        ).to_payload()

    def dispose(self) -> None:
        self.member_search.cancel()
        super().dispose()

    def describe(self) -> str:
        return f"this payment from {self.member_box.currentText()}"
