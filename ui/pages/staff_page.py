from functools import partial
from typing import List

from PySide6 import QtWidgets

from core.listing import ListController
from core.utils import capitalize_words, format_phone
from models.staff import POSITIONS
from services import staff_service
from ui.context import AppContext
from ui.widgets.list_page import ListPage


class StaffPage(ListPage):
    title = "👥 Staff"
    resource = "staff"
    columns = ["Name", "Email", "Phone", "Position", "Status"]
    search_placeholder = "Search by name, email or position"
    add_label = "Add Staff Member"

    def __init__(self, ctx: AppContext, parent=None):
        controller = ListController(
            loader=partial(staff_service.list_staff, ctx.client),
            deleter=partial(staff_service.delete_staff, ctx.client),
            search_fields=lambda s: (s.full_name, s.email, s.position),
            alerts=ctx.alerts,
            user=ctx.user,
            messages={"deleted": "Staff member deleted successfully", "load_error": "Error loading staff"},
            remote_search=partial(staff_service.search_staff, ctx.client),
            runner=ctx.runner,
        )
        super().__init__(ctx, controller, parent)

    def build_filters(self, bar: QtWidgets.QHBoxLayout) -> None:
        self.position = QtWidgets.QComboBox()
        self.position.addItem("All Positions", "")
        for p in POSITIONS:
            self.position.addItem(capitalize_words(p), p)
        self.position.currentIndexChanged.connect(
            lambda i: self.controller.set_filter("position", self.position.itemData(i)))
        bar.addWidget(self.position)

        b_search = QtWidgets.QPushButton("🔍 Search")
        b_search.clicked.connect(self.controller.search_on_server)
        self.search.returnPressed.connect(self.controller.search_on_server)
        bar.addWidget(b_search)

    def row_values(self, s) -> List[str]:
        return [
            s.full_name,
            s.email,
            format_phone(s.phone),
            capitalize_words(s.position),
            "Active" if s.is_active else "Inactive",
        ]

    def describe(self, s) -> str:
        return s.full_name
