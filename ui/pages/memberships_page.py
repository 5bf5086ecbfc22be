from functools import partial
from typing import List

from PySide6 import QtWidgets

from core.listing import ListController
from core.utils import format_currency
from services import membership_service
from ui.context import AppContext
from ui.widgets.list_page import ListPage


class MembershipsPage(ListPage):
    title = "🎫 Memberships"
    resource = "memberships"
    columns = ["Name", "Price", "Duration", "Classes", "PT Sessions", "Status"]
    search_placeholder = "Search by name"
    add_label = "Add Membership"

    def __init__(self, ctx: AppContext, parent=None):
        controller = ListController(
            loader=partial(membership_service.list_memberships, ctx.client),
            deleter=partial(membership_service.delete_membership, ctx.client),
            search_fields=lambda m: (m.name,),
            alerts=ctx.alerts,
            user=ctx.user,
            messages={"deleted": "Membership deleted successfully", "load_error": "Error loading memberships"},
            runner=ctx.runner,
        )
        super().__init__(ctx, controller, parent)

    def build_filters(self, bar: QtWidgets.QHBoxLayout) -> None:
        self.status = QtWidgets.QComboBox()
        self.status.addItem("All", "")
        self.status.addItem("Active", True)
        self.status.addItem("Inactive", False)
        self.status.currentIndexChanged.connect(
            lambda i: self.controller.set_filter("is_active", self.status.itemData(i)))
        bar.addWidget(self.status)

    def row_values(self, m) -> List[str]:
        return [
            m.name,
            format_currency(m.price),
            m.duration_label,
            str(m.classes_included),
            str(m.personal_training_included),
            "Active" if m.is_active else "Inactive",
        ]

    def describe(self, m) -> str:
        return f"the membership '{m.name}'"
