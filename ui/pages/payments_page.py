import datetime
from functools import partial
from typing import List

from PySide6 import QtWidgets, QtCore

from core.listing import ListController
from core.utils import capitalize_words, format_currency, format_date, humanize
from models.payment import PAYMENT_STATUSES
from services import payment_service
from ui.context import AppContext
from ui.widgets.list_page import ListPage


class PaymentsPage(ListPage):
    title = "💳 Payments"
    resource = "payments"
    columns = ["Date", "Invoice #", "Member", "Payment For", "Staff", "Amount", "Method", "Status"]
    search_placeholder = "Search by member, invoice or transaction ID"
    add_label = "Record Payment"

    def __init__(self, ctx: AppContext, parent=None):
        controller = ListController(
            loader=partial(payment_service.list_payments, ctx.client),
            deleter=partial(payment_service.delete_payment, ctx.client),
            search_fields=lambda p: (p.member_name, p.invoice_number, p.transaction_id),
            alerts=ctx.alerts,
            user=ctx.user,
            messages={"deleted": "Payment deleted successfully", "load_error": "Error loading payments"},
            runner=ctx.runner,
        )
        super().__init__(ctx, controller, parent)

    def build_filters(self, bar: QtWidgets.QHBoxLayout) -> None:
        self.status = QtWidgets.QComboBox()
        self.status.addItem("All Statuses", "")
        for s in PAYMENT_STATUSES:
            self.status.addItem(capitalize_words(s), s)
        self.status.currentIndexChanged.connect(
            lambda i: self.controller.set_filter("payment_status", self.status.itemData(i)))
        bar.addWidget(self.status)

        self.period = QtWidgets.QComboBox()
        for preset in payment_service.DATE_PRESETS:
            self.period.addItem("All Time" if preset == "all" else humanize(preset), preset)
        self.period.currentIndexChanged.connect(lambda _: self.on_period())
        bar.addWidget(self.period)

        # --- CUSTOM RANGE ---
        today = QtCore.QDate.currentDate()
        self.range_from = QtWidgets.QDateEdit(today.addDays(-30))
        self.range_to = QtWidgets.QDateEdit(today)
        self.b_apply = QtWidgets.QPushButton("Apply")
        self.b_apply.clicked.connect(self.on_period)
        for w in (self.range_from, self.range_to):
            w.setCalendarPopup(True)
            w.setDisplayFormat("dd MMM yyyy")
        for w in (self.range_from, self.range_to, self.b_apply):
            w.hide()
            bar.addWidget(w)

    def on_period(self) -> None:
        preset = self.period.currentData()
        custom = preset == "custom"
        for w in (self.range_from, self.range_to, self.b_apply):
            w.setVisible(custom)

        if custom:
            span = self.range_from.date().toPython(), self.range_to.date().toPython()
        else:
            span = payment_service.preset_range(preset, datetime.date.today())

        if span is None:
            self.controller.use_loader(partial(payment_service.list_payments, self.ctx.client))
            return
        start, end = span
        if end < start:
            self.ctx.alerts.set_alert("End date must be after start date", "warning")
            return
        self.controller.use_loader(lambda *_: payment_service.payments_in_range(self.ctx.client, start, end))

    def row_values(self, p) -> List[str]:
        return [
            format_date(p.payment_date),
            p.invoice_number or "N/A",
            p.member_name,
            p.membership_name or p.purpose_label,
            p.staff_name or "-",
            format_currency(p.amount),
            p.method_label,
            capitalize_words(p.payment_status),
        ]

    def describe(self, p) -> str:
        return f"the payment {p.invoice_number or ''} from {p.member_name}".replace("  ", " ")
