from functools import partial
from typing import List

from PySide6 import QtWidgets

from core.listing import ListController
from core.utils import format_date, humanize
from models.gym_class import SESSION_STATUSES
from services import session_service
from ui.context import AppContext
from ui.widgets.list_page import ListPage


class SessionsPage(ListPage):
    title = "📅 Class Sessions"
    resource = "sessions"
    columns = ["Class", "Instructor", "Start", "End", "Room", "Enrolled", "Status"]
    search_placeholder = "Search by class, instructor or room"
    add_label = "Schedule Session"

    def __init__(self, ctx: AppContext, parent=None):
        controller = ListController(
            loader=partial(session_service.list_sessions, ctx.client),
            deleter=partial(session_service.delete_session, ctx.client),
            search_fields=lambda s: (s.class_name, s.instructor_name, s.room),
            alerts=ctx.alerts,
            user=ctx.user,
            messages={"deleted": "Class session deleted successfully", "load_error": "Error loading class sessions"},
            runner=ctx.runner,
        )
        super().__init__(ctx, controller, parent)

    def build_filters(self, bar: QtWidgets.QHBoxLayout) -> None:
        self.status = QtWidgets.QComboBox()
        self.status.addItem("All Statuses", "")
        for s in SESSION_STATUSES:
            self.status.addItem(humanize(s), s)
        self.status.currentIndexChanged.connect(
            lambda i: self.controller.set_filter("status", self.status.itemData(i)))
        bar.addWidget(self.status)

    def row_values(self, s) -> List[str]:
        return [
            s.class_name,
            s.instructor_name or "Not assigned",
            format_date(s.start_time, include_time=True),
            format_date(s.end_time, include_time=True),
            s.room or "N/A",
            f"{s.enrolled_count}/{s.max_capacity or '-'}",
            s.status_label(),
        ]

    def describe(self, s) -> str:
        return f"the {s.class_name} session on {format_date(s.start_time)}"
