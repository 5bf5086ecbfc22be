"""
Theme store: light/dark mode plus the two accent colours.

The mode is kept in three places. The in-memory state drives the UI, the
local storage file survives restarts, and the backend 'darkMode' setting is
synced on a best-effort basis. Backend settings win when they are loaded.
"""
import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from PySide6 import QtCore

import config
from core.exceptions import ApiError
from core.storage import LocalStore

logger = logging.getLogger(__name__)

SET_THEME_MODE = "SET_THEME_MODE"
SET_PRIMARY_COLOR = "SET_PRIMARY_COLOR"
SET_SECONDARY_COLOR = "SET_SECONDARY_COLOR"
THEME_LOADED = "THEME_LOADED"

LIGHT = "light"
DARK = "dark"


@dataclass(frozen=True)
class ThemeState:
    mode: str = config.DEFAULT_THEME_MODE
    primary_color: str = config.DEFAULT_PRIMARY_COLOR
    secondary_color: str = config.DEFAULT_SECONDARY_COLOR
    loaded: bool = False

    @property
    def is_dark(self) -> bool:
        return self.mode == DARK


def theme_reducer(state: ThemeState, action: Dict[str, Any]) -> ThemeState:
    kind = action["type"]
    if kind == SET_THEME_MODE:
        return dataclasses.replace(state, mode=action["payload"])
    if kind == SET_PRIMARY_COLOR:
        return dataclasses.replace(state, primary_color=action["payload"])
    if kind == SET_SECONDARY_COLOR:
        return dataclasses.replace(state, secondary_color=action["payload"])
    if kind == THEME_LOADED:
        return dataclasses.replace(state, loaded=True)
    return state


class ThemeStore(QtCore.QObject):
    """
    Observable theme state.

    Signals:
        changed (ThemeState): Emitted after every state change.
    """
    changed = QtCore.Signal(object)

    def __init__(self, local_store: LocalStore, parent: Optional[QtCore.QObject] = None):
        super().__init__(parent)
        self.local_store = local_store
        self.state = ThemeState()

        saved = local_store.get_dark_mode()
        if saved is not None:
            self.state = theme_reducer(self.state, {"type": SET_THEME_MODE, "payload": DARK if saved else LIGHT})

    def dispatch(self, action: Dict[str, Any]) -> None:
        new_state = theme_reducer(self.state, action)
        if new_state != self.state:
            self.state = new_state
            self.changed.emit(self.state)

    def set_theme_mode(self, mode: str) -> None:
        self.dispatch({"type": SET_THEME_MODE, "payload": mode})

    def set_primary_color(self, color: str) -> None:
        self.dispatch({"type": SET_PRIMARY_COLOR, "payload": color})

    def set_secondary_color(self, color: str) -> None:
        self.dispatch({"type": SET_SECONDARY_COLOR, "payload": color})

    def set_dark_mode(self, enabled: bool, sync: Optional[Callable[[bool], Any]] = None) -> None:
        """
        Switches light/dark mode.
        The local file is written and the UI restyled before the backend is
        contacted, so a failing sync never blocks or reverts the toggle.

        Args:
            enabled (bool): True for dark mode.
            sync (callable, optional): Pushes the flag to the backend settings resource.

        Raises:
            OSError: If the flag cannot be saved locally. The mode is reverted first.
        """
        previous = self.state.mode
        self.set_theme_mode(DARK if enabled else LIGHT)
        try:
            self.local_store.set_dark_mode(enabled)
        except OSError:
            self.set_theme_mode(previous)
            raise

        if sync is None:
            return
        try:
            sync(enabled)
        except ApiError as e:
            logger.warning("Could not update darkMode in database, local storage is kept: %s", e.message)

    def apply_settings(self, grouped: Optional[Dict[str, List[Any]]]) -> None:
        """
        Applies appearance settings loaded from the backend.
        Backend values override (and are written back to) local storage.

        Args:
            grouped: Settings grouped by category, as returned by settings_service.get_settings().
        """
        if not grouped or "appearance" not in grouped:
            return

        by_key = {s.key: s for s in grouped["appearance"]}
        dark = by_key.get("darkMode")
        if dark is not None:
            enabled = bool(dark.value)
            self.set_theme_mode(DARK if enabled else LIGHT)
            try:
                self.local_store.set_dark_mode(enabled)
            except OSError as e:
                logger.warning("Could not save dark mode locally: %s", e)

        primary = by_key.get("primaryColor")
        if primary is not None and primary.value:
            self.set_primary_color(str(primary.value))

        secondary = by_key.get("secondaryColor")
        if secondary is not None and secondary.value:
            self.set_secondary_color(str(secondary.value))

        self.dispatch({"type": THEME_LOADED})


def palette(state: ThemeState) -> Dict[str, str]:
    """Resolves the colours every widget stylesheet is built from."""
    dark = state.is_dark
    return {
        "background": "#121212" if dark else "#f5f5f5",
        "paper": "#1e1e1e" if dark else "#ffffff",
        "text": "#ffffff" if dark else "#212121",
        "muted": "#aaaaaa" if dark else "#666666",
        "border": "#333333" if dark else "#cccccc",
        "scrollbar": "#6b6b6b" if dark else "#959595",
        "primary": state.primary_color,
        "secondary": state.secondary_color,
    }


def stylesheet(state: ThemeState) -> str:
    """Builds the application-wide Qt stylesheet for the given theme."""
    p = palette(state)
    return f"""
        QMainWindow, QDialog, QWidget {{ background: {p['background']}; color: {p['text']}; font-family: 'Segoe UI'; }}
        QLabel {{ background: transparent; }}
        QGroupBox, QTabWidget::pane, QTableWidget {{ background: {p['paper']}; border: 1px solid {p['border']}; border-radius: 6px; }}
        QGroupBox {{ margin-top: 10px; padding-top: 15px; font-weight: bold; }}
        QGroupBox::title {{ subcontrol-origin: margin; left: 10px; padding: 0 5px; }}
        QLineEdit, QComboBox, QSpinBox, QDoubleSpinBox, QDateEdit, QDateTimeEdit, QTimeEdit, QTextEdit, QPlainTextEdit {{
            background: {p['paper']}; color: {p['text']}; border: 1px solid {p['border']};
            border-radius: 4px; padding: 6px;
        }}
        QLineEdit:focus, QComboBox:focus, QPlainTextEdit:focus {{ border: 1px solid {p['primary']}; }}
        QPushButton {{ background: {p['primary']}; color: #ffffff; border: none; border-radius: 6px; padding: 8px 14px; font-weight: bold; }}
        QPushButton:hover {{ background: {p['secondary']}; }}
        QPushButton:disabled {{ background: {p['border']}; color: {p['muted']}; }}
        QPushButton[flat="true"] {{ background: transparent; color: {p['text']}; text-align: left; }}
        QPushButton[flat="true"]:hover {{ background: {p['border']}; }}
        QHeaderView::section {{ background: {p['border']}; color: {p['text']}; padding: 5px; border: none; }}
        QTableWidget {{ gridline-color: {p['border']}; }}
        QTabBar::tab {{ background: {p['paper']}; color: {p['muted']}; padding: 8px 16px; }}
        QTabBar::tab:selected {{ color: {p['primary']}; border-bottom: 2px solid {p['primary']}; }}
        QScrollBar:vertical {{ background: {p['background']}; width: 8px; }}
        QScrollBar::handle:vertical {{ background: {p['scrollbar']}; border-radius: 4px; min-height: 24px; }}
        QLabel[error="true"] {{ color: #f44336; font-size: 12px; }}
    """
