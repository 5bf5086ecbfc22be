import logging
from functools import partial
from typing import Callable, Dict, List, Optional, Tuple

from PySide6 import QtWidgets, QtCore

import config
from core.alerts import AlertStore
from core.api_client import ApiClient
from core.exceptions import ApiError
from core.logger import setup_logger
from core.routes import FormMode, Route, parse_route
from core.scheduler import QtScheduler
from core.settings_store import SettingsStore
from core.storage import LocalStore
from core.theme import ThemeStore, stylesheet
from models.user import User
from services import auth_service, settings_service
from ui.context import AppContext
from ui.dialogs.confirm_dialog import confirm
from ui.dialogs.login_dialog import LoginDialog
from ui.pages.attendance_detail import AttendanceDetailPage
from ui.pages.attendance_page import AttendancePage
from ui.pages.class_detail import ClassDetailPage
from ui.pages.classes_page import ClassesPage
from ui.pages.dashboard_page import DashboardPage
from ui.pages.gyms_page import GymsPage
from ui.pages.member_detail import MemberDetailPage
from ui.pages.members_page import MembersPage
from ui.pages.membership_detail import MembershipDetailPage
from ui.pages.memberships_page import MembershipsPage
from ui.pages.payment_detail import PaymentDetailPage
from ui.pages.payments_page import PaymentsPage
from ui.pages.reports_page import ReportsPage
from ui.pages.session_detail import SessionDetailPage
from ui.pages.sessions_page import SessionsPage
from ui.pages.settings_page import SettingsPage
from ui.pages.staff_detail import StaffDetailPage
from ui.pages.staff_page import StaffPage
from ui.widgets.alert_bar import AlertBar
from workers.api_worker import ThreadPoolRunner

logger = logging.getLogger(__name__)

HOME = "dashboard"

# Sidebar entries: (route, label, superadmin only)
NAV: List[Tuple[str, str, bool]] = [
    ("dashboard", "🏠 Dashboard", False),
    ("members", "👤 Members", False),
    ("memberships", "🎫 Memberships", False),
    ("payments", "💳 Payments", False),
    ("attendance", "⏱️ Attendance", False),
    ("classes", "🏋️ Classes", False),
    ("sessions", "📅 Sessions", False),
    ("staff", "🧑‍💼 Staff", False),
    ("gyms", "🏢 Gyms", True),
    ("reports", "📊 Reports", False),
    ("settings", "⚙️ Settings", False),
]

LIST_PAGES: Dict[str, Callable[[AppContext], QtWidgets.QWidget]] = {
    "dashboard": DashboardPage,
    "members": MembersPage,
    "memberships": MembershipsPage,
    "payments": PaymentsPage,
    "attendance": AttendancePage,
    "classes": ClassesPage,
    "sessions": SessionsPage,
    "staff": StaffPage,
    "gyms": GymsPage,
    "reports": ReportsPage,
    "settings": SettingsPage,
}

DETAIL_PAGES = {
    "members": MemberDetailPage,
    "memberships": MembershipDetailPage,
    "payments": PaymentDetailPage,
    "attendance": AttendanceDetailPage,
    "classes": ClassDetailPage,
    "sessions": SessionDetailPage,
    "staff": StaffDetailPage,
}


class MainWindow(QtWidgets.QMainWindow):
    """
    Sidebar navigation, the alert bar and one page at a time.
    List pages are built once and kept; detail pages are rebuilt per route.
    """
    logout_signal = QtCore.Signal()

    def __init__(self, ctx: AppContext):
        super().__init__()
        self.ctx = ctx
        self.setWindowTitle(f"💪 {config.APP_NAME}")
        self.resize(1400, 900)

        self.lists: Dict[str, QtWidgets.QWidget] = {}
        self.detail: Optional[QtWidgets.QWidget] = None
        self.current: Optional[Route] = None
        self.nav_buttons: Dict[str, QtWidgets.QPushButton] = {}

        self.init_ui()
        ctx.navigate = self.navigate

    def init_ui(self) -> None:
        cw = QtWidgets.QWidget()
        self.setCentralWidget(cw)
        layout = QtWidgets.QHBoxLayout(cw)
        layout.setContentsMargins(0, 0, 0, 0)

        # --- SIDEBAR ---
        sidebar = QtWidgets.QVBoxLayout()
        sidebar.setContentsMargins(10, 10, 10, 10)
        head = QtWidgets.QLabel(f"💪 {config.APP_NAME}")
        head.setStyleSheet("font-size: 18px; font-weight: bold;")
        sidebar.addWidget(head)
        user = self.ctx.user
        if user:
            who = QtWidgets.QLabel(f"{user.name} ({user.role.value})")
            who.setStyleSheet("font-size: 12px;")
            sidebar.addWidget(who)
        sidebar.addSpacing(10)

        for path, label, superadmin_only in NAV:
            if superadmin_only and not (user and user.is_superadmin):
                continue
            b = QtWidgets.QPushButton(label)
            b.setMinimumHeight(40)
            b.setCursor(QtCore.Qt.PointingHandCursor)
            b.setCheckable(True)
            b.setProperty("flat", True)
            b.clicked.connect(lambda checked=False, p=path: self.navigate(p))
            sidebar.addWidget(b)
            self.nav_buttons[path] = b

        sidebar.addStretch()
        self.b_out = QtWidgets.QPushButton("🚪 Logout")
        self.b_out.clicked.connect(self.logout)
        sidebar.addWidget(self.b_out)

        sw = QtWidgets.QWidget()
        sw.setLayout(sidebar)
        sw.setMaximumWidth(230)
        layout.addWidget(sw)

        # --- CONTENT AREA ---
        content = QtWidgets.QVBoxLayout()
        content.setContentsMargins(0, 0, 0, 0)
        content.addWidget(AlertBar(self.ctx.alerts))
        self.stacked = QtWidgets.QStackedWidget()
        content.addWidget(self.stacked, 1)
        layout.addLayout(content, 1)

    # --- NAVIGATION ---

    def navigate(self, path: str) -> None:
        try:
            route = parse_route(path)
        except ValueError:
            logger.warning("Ignoring unknown route %r", path)
            return

        if route.resource not in LIST_PAGES:
            logger.warning("No page for %r", path)
            return

        if not route.is_list:
            if route.resource not in DETAIL_PAGES:
                route = route.parent
            elif route.mode != FormMode.VIEW and not (self.ctx.user and self.ctx.user.can_modify):
                self.ctx.alerts.set_alert("You don't have permission to modify records", "warning")
                route = route.parent

        logger.debug("Navigating to %s", route)
        self.current = route
        self._drop_detail()
        if route.is_list:
            page = self._list_page(route.resource)
            if route.query and hasattr(page, "apply_query"):
                page.apply_query(route.query)
            self.stacked.setCurrentWidget(page)
        else:
            self.detail = DETAIL_PAGES[route.resource](self.ctx, route)
            self.stacked.addWidget(self.detail)
            self.stacked.setCurrentWidget(self.detail)

        for p, b in self.nav_buttons.items():
            b.setChecked(p == route.resource)

    def _list_page(self, resource: str) -> QtWidgets.QWidget:
        if resource not in self.lists:
            page = LIST_PAGES[resource](self.ctx)
            self.lists[resource] = page
            self.stacked.addWidget(page)
        return self.lists[resource]

    def _drop_detail(self) -> None:
        if self.detail is not None:
            self.detail.dispose()
            self.stacked.removeWidget(self.detail)
            self.detail.deleteLater()
            self.detail = None

    def logout(self) -> None:
        if confirm(self, "Logout", "Are you sure you want to log out?"):
            self.logout_signal.emit()


class GymApp(QtWidgets.QApplication):
    """
    The application object and composition root.
    1. Builds the HTTP client and the shared stores.
    2. Restores the saved session or shows the login dialog.
    3. Opens the main window and restarts the flow on logout.
    """
    def __init__(self, args: List[str]):
        super().__init__(args)
        self.setApplicationName(config.APP_NAME)
        setup_logger(level=config.LOG_LEVEL)

        scheduler = QtScheduler(self)
        local_store = LocalStore(config.STORAGE_FILE)
        self.ctx = AppContext(
            client=ApiClient(config.API_URL, timeout=config.REQUEST_TIMEOUT),
            local_store=local_store,
            alerts=AlertStore(scheduler, self),
            theme=ThemeStore(local_store, self),
            settings=SettingsStore(self),
            scheduler=scheduler,
            runner=ThreadPoolRunner(),
        )
        self.main_window: Optional[MainWindow] = None

        self.ctx.theme.changed.connect(self.restyle)
        self.restyle(self.ctx.theme.state)
        self.aboutToQuit.connect(self.ctx.client.close)

    def restyle(self, state) -> None:
        self.setStyleSheet(stylesheet(state))

    def start(self) -> bool:
        """
        Shows the first screen.

        Returns:
            bool: False if the user closed the login dialog.
        """
        user: Optional[User] = None
        try:
            user = auth_service.restore_session(self.ctx.client, self.ctx.local_store)
        except ApiError as e:
            logger.warning("Could not restore session: %s", e.message)

        if user is None:
            user = self.show_login()
            if user is None:
                return False

        self.open_main(user)
        return True

    def show_login(self) -> Optional[User]:
        dlg = LoginDialog(self.ctx)
        if dlg.exec() != QtWidgets.QDialog.Accepted:
            return None
        return dlg.user

    def open_main(self, user: User) -> None:
        logger.info("Logged in as %s (%s)", user.email, user.role.value)
        self.ctx.user = user
        self.main_window = MainWindow(self.ctx)
        self.main_window.logout_signal.connect(self.on_logout)
        self.main_window.navigate(HOME)
        self.main_window.show()

        # Backend appearance settings override the locally saved theme
        self.ctx.run(partial(settings_service.get_settings, self.ctx.client), self.on_settings,
                     lambda err: logger.warning("Could not load settings: %s", err.message))

    def on_settings(self, grouped) -> None:
        self.ctx.settings.loaded(grouped)
        self.ctx.theme.apply_settings(grouped)

    def on_logout(self) -> None:
        """Closes the current window and re-opens the login screen."""
        auth_service.logout(self.ctx.client, self.ctx.local_store)
        self.ctx.user = None
        if self.main_window:
            self.main_window.close()
            self.main_window.deleteLater()
            self.main_window = None

        user = self.show_login()
        if user is None:
            self.quit()
            return
        self.open_main(user)
