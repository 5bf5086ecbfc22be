from functools import partial
from typing import List

from PySide6 import QtWidgets

from core.listing import ListController
from core.utils import humanize
from services import class_service
from ui.context import AppContext
from ui.widgets.list_page import ListPage


class ClassesPage(ListPage):
    title = "🏋️ Classes"
    resource = "classes"
    columns = ["Name", "Category", "Instructor", "Duration", "Capacity", "Difficulty", "Status"]
    search_placeholder = "Search by name, description or instructor"
    add_label = "Add Class"

    def __init__(self, ctx: AppContext, parent=None):
        controller = ListController(
            loader=partial(class_service.list_classes, ctx.client),
            deleter=partial(class_service.delete_class, ctx.client),
            search_fields=lambda c: (c.name, c.description, c.instructor_name),
            alerts=ctx.alerts,
            user=ctx.user,
            messages={"deleted": "Class deleted successfully", "load_error": "Error loading classes"},
            runner=ctx.runner,
        )
        super().__init__(ctx, controller, parent)
        controller.changed.connect(self.refresh_categories)

    def build_filters(self, bar: QtWidgets.QHBoxLayout) -> None:
        self.category = QtWidgets.QComboBox()
        self.category.addItem("All Categories", "")
        self.category.currentIndexChanged.connect(
            lambda i: self.controller.set_filter("category", self.category.itemData(i)))
        bar.addWidget(self.category)

    def refresh_categories(self) -> None:
        """Offers only the categories present in the loaded classes."""
        current = self.category.currentData()
        self.category.blockSignals(True)
        self.category.clear()
        self.category.addItem("All Categories", "")
        for cat in class_service.categories_of(self.controller.records):
            self.category.addItem(humanize(cat), cat)
        idx = self.category.findData(current)
        self.category.setCurrentIndex(max(idx, 0))
        self.category.blockSignals(False)

    def row_values(self, c) -> List[str]:
        return [
            c.name,
            humanize(c.category),
            c.instructor_name or "Not assigned",
            f"{c.duration} min" if c.duration else "N/A",
            str(c.capacity or "N/A"),
            humanize(c.difficulty),
            "Active" if c.is_active else "Inactive",
        ]

    def describe(self, c) -> str:
        return f"the class '{c.name}'"
