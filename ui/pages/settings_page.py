import logging
from functools import partial
from typing import Any, Dict, List

from PySide6 import QtWidgets, QtGui, QtCore

from core.exceptions import ApiError
from core.settings_store import SettingsState
from core.utils import capitalize_words
from models.setting import Setting
from services import settings_service
from ui.context import AppContext
from ui.widgets.setting_item import SettingItem

logger = logging.getLogger(__name__)


class SettingsPage(QtWidgets.QWidget):
    """
    Settings grouped into one tab per category, plus the appearance controls.
    An empty backend offers to create the default settings.
    """
    def __init__(self, ctx: AppContext, parent=None):
        super().__init__(parent)
        self.ctx = ctx
        self.init_ui()

        ctx.settings.changed.connect(self.render)
        ctx.theme.changed.connect(lambda _: self.sync_appearance())

    def init_ui(self) -> None:
        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(20, 15, 20, 15)

        header = QtWidgets.QHBoxLayout()
        lbl = QtWidgets.QLabel("Settings")
        lbl.setStyleSheet("font-size: 22px; font-weight: bold;")
        header.addWidget(lbl)
        header.addStretch()
        b_refresh = QtWidgets.QPushButton("🔄 Refresh")
        b_refresh.clicked.connect(self.load)
        header.addWidget(b_refresh)
        layout.addLayout(header)

        # --- APPEARANCE ---
        grp = QtWidgets.QGroupBox("Appearance")
        form = QtWidgets.QFormLayout(grp)
        self.dark_mode = QtWidgets.QCheckBox("Dark mode")
        self.dark_mode.setChecked(self.ctx.theme.state.is_dark)
        self.dark_mode.toggled.connect(self.toggle_dark_mode)
        form.addRow("Theme", self.dark_mode)

        self.b_primary = QtWidgets.QPushButton()
        self.b_primary.clicked.connect(lambda: self.pick_color("primaryColor"))
        self.b_secondary = QtWidgets.QPushButton()
        self.b_secondary.clicked.connect(lambda: self.pick_color("secondaryColor"))
        form.addRow("Primary Color", self.b_primary)
        form.addRow("Secondary Color", self.b_secondary)
        layout.addWidget(grp)

        # --- EMPTY STATE ---
        self.empty = QtWidgets.QWidget()
        v = QtWidgets.QVBoxLayout(self.empty)
        msg = QtWidgets.QLabel("No settings found. Initialize the default settings to get started.")
        msg.setAlignment(QtCore.Qt.AlignCenter)
        v.addWidget(msg)
        self.b_init = QtWidgets.QPushButton("⚙️ Initialize Settings")
        self.b_init.clicked.connect(self.initialize)
        v.addWidget(self.b_init, alignment=QtCore.Qt.AlignCenter)
        self.empty.hide()
        layout.addWidget(self.empty)

        self.tabs = QtWidgets.QTabWidget()
        layout.addWidget(self.tabs, 1)

        self.error = QtWidgets.QLabel()
        self.error.setProperty("error", True)
        self.error.hide()
        layout.addWidget(self.error)

        self.sync_appearance()

    @property
    def editable(self) -> bool:
        return bool(self.ctx.user and self.ctx.user.can_modify)

    # --- BACKEND ---

    def load(self) -> None:
        store = self.ctx.settings
        store.set_loading()

        def done(grouped: Dict[str, List[Setting]]):
            store.loaded(grouped)
            self.ctx.theme.apply_settings(grouped)

        self.ctx.run(partial(settings_service.get_settings, self.ctx.client), done, self.on_error)

    def initialize(self) -> None:
        store = self.ctx.settings
        store.set_loading()

        def done(grouped: Dict[str, List[Setting]]):
            store.initialized()
            store.loaded(grouped)
            self.ctx.theme.apply_settings(grouped)
            self.ctx.alerts.set_alert("Settings initialized successfully", "success")

        self.ctx.run(partial(settings_service.initialize_settings, self.ctx.client), done, self.on_error)

    def save_setting(self, setting: Setting, value: Any) -> None:
        def done(updated: Setting):
            self.ctx.settings.updated(updated)
            self.ctx.alerts.set_alert(f"{setting.label} updated successfully", "success")

        self.ctx.run(partial(settings_service.update_setting, self.ctx.client, setting.key, value),
                     done, self.on_error)

    def on_error(self, err: ApiError) -> None:
        self.ctx.settings.failed(err.message)
        self.ctx.alerts.set_alert(err.message, "error")

    # --- APPEARANCE ---

    def toggle_dark_mode(self, enabled: bool) -> None:
        if enabled == self.ctx.theme.state.is_dark:
            return

        def sync(flag: bool) -> None:
            # The toggle never waits on the backend; failures are only logged.
            self.ctx.runner(
                partial(settings_service.sync_dark_mode, self.ctx.client, flag),
                self.ctx.settings.updated,
                lambda err: logger.warning("Could not update darkMode in database: %s", err.message),
            )

        try:
            self.ctx.theme.set_dark_mode(enabled, sync if self.ctx.user else None)
        except OSError as e:
            self.ctx.alerts.set_alert(f"Could not save theme preference: {e}", "error")
            self.sync_appearance()

    def pick_color(self, key: str) -> None:
        state = self.ctx.theme.state
        current = state.primary_color if key == "primaryColor" else state.secondary_color
        color = QtWidgets.QColorDialog.getColor(QtGui.QColor(current), self, "Pick a colour")
        if not color.isValid():
            return
        value = color.name()
        if key == "primaryColor":
            self.ctx.theme.set_primary_color(value)
        else:
            self.ctx.theme.set_secondary_color(value)

        if self.editable and self.ctx.settings.find(key) is not None:
            self.ctx.run(partial(settings_service.update_setting, self.ctx.client, key, value),
                         self.ctx.settings.updated)

    def sync_appearance(self) -> None:
        state = self.ctx.theme.state
        self.dark_mode.blockSignals(True)
        self.dark_mode.setChecked(state.is_dark)
        self.dark_mode.blockSignals(False)
        for button, color in ((self.b_primary, state.primary_color), (self.b_secondary, state.secondary_color)):
            button.setText(color)
            button.setStyleSheet(f"background: {color};")

    # --- RENDERING ---

    def render(self, state: SettingsState) -> None:
        self.error.setText(state.error or "")
        self.error.setVisible(bool(state.error))
        self.setCursor(QtCore.Qt.BusyCursor if state.loading else QtCore.Qt.ArrowCursor)
        if state.loading:
            return

        current = self.tabs.currentIndex()
        self.tabs.clear()
        grouped = state.settings or {}
        self.empty.setVisible(state.settings is not None and not any(grouped.values()))
        self.b_init.setVisible(self.editable)

        for category, items in grouped.items():
            if not items:
                continue
            page = QtWidgets.QWidget()
            v = QtWidgets.QVBoxLayout(page)
            for s in items:
                v.addWidget(SettingItem(s, self.save_setting, self.editable))
            v.addStretch()
            scroll = QtWidgets.QScrollArea()
            scroll.setWidgetResizable(True)
            scroll.setWidget(page)
            self.tabs.addTab(scroll, capitalize_words(category))
        if 0 <= current < self.tabs.count():
            self.tabs.setCurrentIndex(current)

    def showEvent(self, event) -> None:
        super().showEvent(event)
        self.load()
