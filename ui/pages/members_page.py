from functools import partial
from typing import List

from PySide6 import QtWidgets

from core.listing import MemberListController
from core.utils import capitalize_words, format_date, format_phone
from models.member import MEMBER_STATUSES
from services import member_service
from ui.context import AppContext
from ui.widgets.list_page import ListPage

FEES_DUE = "fees-due"


class MembersPage(ListPage):
    title = "👤 Members"
    resource = "members"
    columns = ["Name", "Email", "Phone", "Membership", "Status", "End Date"]
    search_placeholder = "Search by name, email or phone"
    add_label = "Add Member"

    def __init__(self, ctx: AppContext, parent=None):
        controller = MemberListController(
            loader=partial(member_service.list_members, ctx.client),
            fees_due_loader=partial(member_service.fees_due, ctx.client),
            deleter=partial(member_service.delete_member, ctx.client),
            alerts=ctx.alerts,
            user=ctx.user,
            remote_search=partial(member_service.find_members, ctx.client),
            runner=ctx.runner,
        )
        super().__init__(ctx, controller, parent)

    def build_filters(self, bar: QtWidgets.QHBoxLayout) -> None:
        self.status = QtWidgets.QComboBox()
        self.status.addItem("All Statuses", "")
        for s in MEMBER_STATUSES:
            self.status.addItem(capitalize_words(s), s)
        self.status.currentIndexChanged.connect(self.on_status)
        bar.addWidget(self.status)

        self.b_fees = QtWidgets.QPushButton("💰 Show Fees Due")
        self.b_fees.setCheckable(True)
        self.b_fees.toggled.connect(self.on_fees_due)
        bar.addWidget(self.b_fees)

        b_search = QtWidgets.QPushButton("🔍 Search")
        b_search.clicked.connect(self.controller.search_on_server)
        self.search.returnPressed.connect(self.controller.search_on_server)
        bar.addWidget(b_search)

    # --- FILTERS ---

    def on_status(self, index: int) -> None:
        status = self.status.itemData(index)
        if status and self.b_fees.isChecked():
            self._set_fees_button(False)
        self.controller.set_status(status)

    def on_fees_due(self, on: bool) -> None:
        self._set_fees_button(on)
        self.status.blockSignals(True)
        self.status.setCurrentIndex(0)
        self.status.blockSignals(False)
        self.controller.show_fees_due(on)

    def _set_fees_button(self, on: bool) -> None:
        self.b_fees.blockSignals(True)
        self.b_fees.setChecked(on)
        self.b_fees.setText("✖ Clear Fees Due Filter" if on else "💰 Show Fees Due")
        self.b_fees.blockSignals(False)

    def apply_query(self, query: str) -> None:
        """Opens the list on a preset view; 'fees-due' is the only one."""
        if query == FEES_DUE and not self.controller.fees_due:
            self.b_fees.setChecked(True)

    # --- ROWS ---

    def row_values(self, m) -> List[str]:
        name = m.full_name
        if m.due_label:
            name = f"{name}  [{m.due_label}]"
        return [
            name,
            m.email,
            format_phone(m.phone),
            m.membership_type or "None",
            capitalize_words(m.status),
            format_date(m.end_date),
        ]

    def describe(self, m) -> str:
        return m.full_name
