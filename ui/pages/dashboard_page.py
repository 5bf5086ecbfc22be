import datetime
from typing import List, Optional, Tuple

from PySide6 import QtWidgets, QtCore

from core.exceptions import ApiError
from core.utils import format_currency, format_date
from models.dashboard import Dashboard
from services import dashboard_service
from ui.context import AppContext

# (route, label) of the quick action buttons
QUICK_ACTIONS: List[Tuple[str, str]] = [
    ("members/new", "➕ Add Member"),
    ("attendance/new", "⏱️ Check In"),
    ("payments/new", "💳 Record Payment"),
    ("sessions/new", "📅 Schedule Session"),
    ("members", "👤 View Members"),
    ("classes", "🏋️ View Classes"),
]


class StatCard(QtWidgets.QFrame):
    """One headline figure. Clickable cards navigate somewhere."""
    clicked = QtCore.Signal()

    def __init__(self, title: str, parent=None):
        super().__init__(parent)
        self.setFrameShape(QtWidgets.QFrame.StyledPanel)
        self.setMinimumHeight(90)
        v = QtWidgets.QVBoxLayout(self)
        lbl = QtWidgets.QLabel(title)
        lbl.setStyleSheet("font-size: 12px;")
        self.value = QtWidgets.QLabel("-")
        self.value.setStyleSheet("font-size: 24px; font-weight: bold;")
        v.addWidget(lbl)
        v.addWidget(self.value)

    def set_value(self, text: str) -> None:
        self.value.setText(text)

    def mousePressEvent(self, event) -> None:
        super().mousePressEvent(event)
        self.clicked.emit()


class DashboardPage(QtWidgets.QWidget):
    """Home screen: headline stats, quick actions, newest members and today's sessions."""

    def __init__(self, ctx: AppContext, parent=None):
        super().__init__(parent)
        self.ctx = ctx
        self.dashboard: Optional[Dashboard] = None
        self.init_ui()

    def init_ui(self) -> None:
        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(20, 15, 20, 15)

        # --- HEADER ---
        header = QtWidgets.QHBoxLayout()
        lbl = QtWidgets.QLabel("🏠 Dashboard")
        lbl.setStyleSheet("font-size: 22px; font-weight: bold;")
        header.addWidget(lbl)
        header.addStretch()
        b_refresh = QtWidgets.QPushButton("🔄 Refresh")
        b_refresh.clicked.connect(self.load)
        header.addWidget(b_refresh)
        layout.addLayout(header)

        # --- STATS ---
        grid = QtWidgets.QGridLayout()
        self.cards = {
            "active_members": StatCard("Active Members"),
            "total_revenue": StatCard("Total Revenue"),
            "active_classes": StatCard("Active Classes"),
            "check_ins_today": StatCard("Check-ins Today"),
            "upcoming_sessions": StatCard("Upcoming Sessions"),
            "membership_growth": StatCard("Membership Growth"),
            "fees_due_count": StatCard("Fees Due"),
            "monthly_expenses": StatCard("Monthly Expenses"),
        }
        for i, card in enumerate(self.cards.values()):
            grid.addWidget(card, i // 4, i % 4)
        self.cards["fees_due_count"].setCursor(QtCore.Qt.PointingHandCursor)
        self.cards["fees_due_count"].clicked.connect(lambda: self.ctx.navigate("members?fees-due"))
        layout.addLayout(grid)

        # --- QUICK ACTIONS ---
        actions = QtWidgets.QHBoxLayout()
        for path, label in QUICK_ACTIONS:
            b = QtWidgets.QPushButton(label)
            b.setCursor(QtCore.Qt.PointingHandCursor)
            b.clicked.connect(lambda checked=False, p=path: self.ctx.navigate(p))
            actions.addWidget(b)
        layout.addLayout(actions)

        # --- LISTS ---
        lists = QtWidgets.QHBoxLayout()
        self.recent = self._table("Recent Members", ["Name", "Joined", "Plan"], lists)
        self.sessions = self._table("Today's Sessions", ["Class", "Time", "Instructor", "Enrolled"], lists)
        layout.addLayout(lists, 1)

    def _table(self, title: str, columns: List[str], into: QtWidgets.QHBoxLayout) -> QtWidgets.QTableWidget:
        grp = QtWidgets.QGroupBox(title)
        v = QtWidgets.QVBoxLayout(grp)
        table = QtWidgets.QTableWidget(0, len(columns))
        table.setHorizontalHeaderLabels(columns)
        table.horizontalHeader().setSectionResizeMode(QtWidgets.QHeaderView.Stretch)
        table.setEditTriggers(QtWidgets.QAbstractItemView.NoEditTriggers)
        table.verticalHeader().setVisible(False)
        v.addWidget(table)
        into.addWidget(grp)
        return table

    # --- DATA ---

    def load(self) -> None:
        def failed(err: ApiError):
            self.ctx.alerts.set_alert("Error loading dashboard data. Please try again.", "error")

        client, today = self.ctx.client, datetime.date.today()
        self.ctx.run(lambda: dashboard_service.load_dashboard(client, today), self.show_dashboard, failed, owner=self)

    def show_dashboard(self, dashboard: Dashboard) -> None:
        self.dashboard = dashboard
        s = dashboard.stats
        self.cards["active_members"].set_value(str(s.active_members))
        self.cards["total_revenue"].set_value(format_currency(s.total_revenue))
        self.cards["active_classes"].set_value(str(s.active_classes))
        self.cards["check_ins_today"].set_value(str(s.check_ins_today))
        self.cards["upcoming_sessions"].set_value(str(s.upcoming_sessions))
        self.cards["membership_growth"].set_value(s.growth_label)
        self.cards["fees_due_count"].set_value(str(s.fees_due_count))
        self.cards["monthly_expenses"].set_value(format_currency(s.monthly_expenses))

        self.recent.setRowCount(len(dashboard.recent_members))
        for i, m in enumerate(dashboard.recent_members):
            for j, value in enumerate([m.name, format_date(m.joined), m.plan]):
                self.recent.setItem(i, j, QtWidgets.QTableWidgetItem(value))

        self.sessions.setRowCount(len(dashboard.todays_sessions))
        for i, session in enumerate(dashboard.todays_sessions):
            time = format_date(session.start_time, include_time=True).split(", ")[-1]
            values = [session.class_name, time, session.instructor_name or "Not assigned",
                      f"{session.enrolled_count}/{session.max_capacity or '-'}"]
            for j, value in enumerate(values):
                self.sessions.setItem(i, j, QtWidgets.QTableWidgetItem(value))

    def showEvent(self, event) -> None:
        super().showEvent(event)
        self.load()
