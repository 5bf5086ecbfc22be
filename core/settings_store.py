import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from PySide6 import QtCore

from models.setting import Setting

logger = logging.getLogger(__name__)

GET_SETTINGS = "GET_SETTINGS"
UPDATE_SETTING = "UPDATE_SETTING"
INITIALIZE_SETTINGS = "INITIALIZE_SETTINGS"
SET_SETTINGS_LOADING = "SET_SETTINGS_LOADING"
SETTINGS_ERROR = "SETTINGS_ERROR"
CLEAR_SETTINGS_ERROR = "CLEAR_SETTINGS_ERROR"


@dataclass(frozen=True)
class SettingsState:
    settings: Optional[Dict[str, List[Setting]]] = None
    current_setting: Optional[Setting] = None
    loading: bool = False
    error: Optional[str] = None
    initialized: bool = False


def _find_category(settings: Optional[Dict[str, List[Setting]]], key: str) -> Optional[str]:
    for category, items in (settings or {}).items():
        if any(s.key == key for s in items):
            return category
    return None


def settings_reducer(state: SettingsState, action: Dict[str, Any]) -> SettingsState:
    kind = action["type"]
    payload = action.get("payload")

    if kind == GET_SETTINGS:
        return dataclasses.replace(state, settings=payload, loading=False, error=None)

    if kind == UPDATE_SETTING:
        setting: Setting = payload
        category = _find_category(state.settings, setting.key) or setting.category
        if not state.settings or category not in state.settings:
            logger.error("Settings or category %s not found in state", category)
            return dataclasses.replace(state, current_setting=setting, loading=False, error=None)

        setting = dataclasses.replace(setting, category=category)
        updated = dict(state.settings)
        updated[category] = [setting if s.key == setting.key else s for s in updated[category]]
        return dataclasses.replace(state, settings=updated, current_setting=setting, loading=False, error=None)

    if kind == INITIALIZE_SETTINGS:
        return dataclasses.replace(state, initialized=True, loading=False, error=None)
    if kind == SET_SETTINGS_LOADING:
        return dataclasses.replace(state, loading=True)
    if kind == SETTINGS_ERROR:
        return dataclasses.replace(state, error=payload, loading=False)
    if kind == CLEAR_SETTINGS_ERROR:
        return dataclasses.replace(state, error=None)
    return state


class SettingsStore(QtCore.QObject):
    """
    Observable copy of the backend settings, grouped by category.

    Signals:
        changed (SettingsState): Emitted after every state change.
    """
    changed = QtCore.Signal(object)

    def __init__(self, parent: Optional[QtCore.QObject] = None):
        super().__init__(parent)
        self.state = SettingsState()

    @property
    def settings(self) -> Optional[Dict[str, List[Setting]]]:
        return self.state.settings

    def dispatch(self, action: Dict[str, Any]) -> None:
        new_state = settings_reducer(self.state, action)
        if new_state != self.state:
            self.state = new_state
            self.changed.emit(self.state)

    def set_loading(self) -> None:
        self.dispatch({"type": SET_SETTINGS_LOADING})

    def loaded(self, grouped: Dict[str, List[Setting]]) -> None:
        self.dispatch({"type": GET_SETTINGS, "payload": grouped})

    def updated(self, setting: Setting) -> None:
        self.dispatch({"type": UPDATE_SETTING, "payload": setting})

    def initialized(self) -> None:
        self.dispatch({"type": INITIALIZE_SETTINGS})

    def failed(self, message: str) -> None:
        self.dispatch({"type": SETTINGS_ERROR, "payload": message})

    def clear_error(self) -> None:
        self.dispatch({"type": CLEAR_SETTINGS_ERROR})

    def find(self, key: str) -> Optional[Setting]:
        for items in (self.settings or {}).values():
            for s in items:
                if s.key == key:
                    return s
        return None
