import pytest

from core.exceptions import ApiError
from core.theme import DARK, LIGHT, SET_PRIMARY_COLOR, THEME_LOADED, ThemeState, ThemeStore, stylesheet, theme_reducer
from models.setting import Setting, SettingType


def test_defaults():
    state = ThemeState()
    assert state.mode == DARK
    assert state.primary_color == "#1976d2"
    assert state.secondary_color == "#dc004e"
    assert state.loaded is False


def test_reducer_is_pure():
    state = ThemeState()
    new = theme_reducer(state, {"type": SET_PRIMARY_COLOR, "payload": "#ff0000"})
    assert new.primary_color == "#ff0000"
    assert state.primary_color == "#1976d2"
    assert theme_reducer(new, {"type": THEME_LOADED}).loaded is True


def test_store_starts_from_saved_flag(local_store):
    local_store.set_dark_mode(False)
    assert ThemeStore(local_store).state.mode == LIGHT


def test_store_uses_default_without_saved_flag(local_store):
    assert ThemeStore(local_store).state.mode == DARK


def test_toggle_applies_and_persists(local_store):
    store = ThemeStore(local_store)
    seen = []
    store.changed.connect(seen.append)

    store.set_dark_mode(False)

    assert store.state.mode == LIGHT
    assert seen[-1].mode == LIGHT
    assert local_store.get_dark_mode() is False


def test_toggle_survives_failing_backend_sync(local_store):
    store = ThemeStore(local_store)
    calls = []

    def sync(enabled):
        calls.append(enabled)
        raise ApiError("Network error")

    store.set_dark_mode(False, sync)

    assert calls == [False]
    assert store.state.mode == LIGHT
    assert local_store.get_dark_mode() is False


def test_theme_is_updated_before_sync_runs(local_store):
    store = ThemeStore(local_store)
    modes = []
    store.set_dark_mode(False, lambda enabled: modes.append(store.state.mode))
    assert modes == [LIGHT]


def test_local_write_failure_reverts_and_raises(local_store, monkeypatch):
    store = ThemeStore(local_store)

    def broken(enabled):
        raise OSError("read-only file system")

    monkeypatch.setattr(local_store, "set_dark_mode", broken)
    sync_calls = []
    with pytest.raises(OSError):
        store.set_dark_mode(False, sync_calls.append)

    assert store.state.mode == DARK
    assert sync_calls == []


def _appearance(**values):
    kinds = {"darkMode": SettingType.BOOLEAN}
    return {"appearance": [
        Setting(key=k, value=v, type=kinds.get(k, SettingType.STRING), category="appearance")
        for k, v in values.items()
    ]}


def test_backend_settings_override_local(local_store):
    local_store.set_dark_mode(True)
    store = ThemeStore(local_store)

    store.apply_settings(_appearance(darkMode=False, primaryColor="#00ff00", secondaryColor="#0000ff"))

    assert store.state == ThemeState(mode=LIGHT, primary_color="#00ff00", secondary_color="#0000ff", loaded=True)
    assert local_store.get_dark_mode() is False


def test_missing_appearance_changes_nothing(local_store):
    store = ThemeStore(local_store)
    store.apply_settings({"general": []})
    store.apply_settings(None)
    assert store.state == ThemeState()


def test_stylesheet_follows_mode_and_colors():
    dark = stylesheet(ThemeState(mode=DARK, primary_color="#123456"))
    light = stylesheet(ThemeState(mode=LIGHT))
    assert "#121212" in dark and "#1e1e1e" in dark
    assert "#123456" in dark
    assert "#f5f5f5" in light and "#121212" not in light
