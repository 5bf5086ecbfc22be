import pytest

from core.settings_store import (
    CLEAR_SETTINGS_ERROR, GET_SETTINGS, INITIALIZE_SETTINGS, SET_SETTINGS_LOADING, SETTINGS_ERROR, UPDATE_SETTING,
    SettingsState, SettingsStore, settings_reducer,
)
from models.setting import Setting, SettingType, display_value, group_settings, parse_input


def setting(key, value, kind=SettingType.STRING, category="general"):
    return Setting(key=key, value=value, type=kind, label=key, category=category)


# --- TAGGED VALUES ---

@pytest.mark.parametrize("kind, value, shown", [
    (SettingType.BOOLEAN, True, "Enabled"),
    (SettingType.BOOLEAN, False, "Disabled"),
    (SettingType.NUMBER, 30.0, "30"),
    (SettingType.NUMBER, 2.5, "2.5"),
    (SettingType.STRING, "SOLID GYM", "SOLID GYM"),
    (SettingType.STRING, None, ""),
    (SettingType.ARRAY, ["cash", "card"], '[\n  "cash",\n  "card"\n]'),
    (SettingType.OBJECT, {"a": 1}, '{\n  "a": 1\n}'),
])
def test_display_depends_on_type(kind, value, shown):
    assert display_value(setting("k", value, kind)) == shown


def test_parse_boolean():
    assert parse_input(SettingType.BOOLEAN, True) is True
    assert parse_input(SettingType.BOOLEAN, "false") is False
    with pytest.raises(ValueError):
        parse_input(SettingType.BOOLEAN, "maybe")


def test_parse_number():
    assert parse_input(SettingType.NUMBER, "30") == 30
    assert parse_input(SettingType.NUMBER, "2.5") == 2.5
    assert parse_input(SettingType.NUMBER, 7.0) == 7.0
    with pytest.raises(ValueError):
        parse_input(SettingType.NUMBER, "thirty")
    with pytest.raises(ValueError):
        parse_input(SettingType.NUMBER, True)


def test_parse_json_object_and_array():
    assert parse_input(SettingType.OBJECT, '{"open": "06:00"}') == {"open": "06:00"}
    assert parse_input(SettingType.ARRAY, '["cash"]') == ["cash"]


@pytest.mark.parametrize("kind, raw", [
    (SettingType.OBJECT, "{not json"),
    (SettingType.OBJECT, "[1, 2]"),
    (SettingType.ARRAY, '{"a": 1}'),
    (SettingType.ARRAY, ""),
])
def test_wrong_json_is_rejected(kind, raw):
    with pytest.raises(ValueError):
        parse_input(kind, raw)


def test_unknown_type_falls_back_to_string():
    s = Setting.from_api({"key": "x", "value": 5, "type": "color"})
    assert s.type == SettingType.STRING
    assert s.display == "5"


def test_group_settings_accepts_grouped_and_flat():
    grouped = group_settings({"general": [{"key": "gymName", "value": "SOLID"}], "meta": "ignored"})
    assert list(grouped) == ["general"]
    assert grouped["general"][0].label == "gymName"

    flat = group_settings([
        {"key": "darkMode", "value": True, "type": "boolean", "category": "appearance"},
        {"key": "currency", "value": "PKR", "category": "billing"},
        {"key": "taxRate", "value": 5, "type": "number", "category": "billing"},
    ])
    assert sorted(flat) == ["appearance", "billing"]
    assert [s.key for s in flat["billing"]] == ["currency", "taxRate"]


# --- REDUCER ---

def loaded_state():
    return SettingsState(settings={
        "appearance": [setting("darkMode", True, SettingType.BOOLEAN, "appearance")],
        "general": [setting("gymName", "SOLID")],
    })


def test_update_replaces_by_key_in_its_category():
    reply = setting("darkMode", False, SettingType.BOOLEAN, "general")  # backend omitted the category
    state = settings_reducer(loaded_state(), {"type": UPDATE_SETTING, "payload": reply})

    assert state.settings["appearance"][0].value is False
    assert state.settings["appearance"][0].category == "appearance"
    assert state.settings["general"] == loaded_state().settings["general"]
    assert state.current_setting.key == "darkMode"


def test_update_of_unknown_setting_only_records_it():
    before = loaded_state()
    reply = setting("newKey", 1, SettingType.NUMBER, "system")
    state = settings_reducer(before, {"type": UPDATE_SETTING, "payload": reply})
    assert state.settings == before.settings
    assert state.current_setting == reply


def test_update_without_loaded_settings():
    state = settings_reducer(SettingsState(), {"type": UPDATE_SETTING, "payload": setting("x", 1)})
    assert state.settings is None
    assert state.current_setting.key == "x"


def test_loading_error_and_initialize_flow():
    state = settings_reducer(SettingsState(), {"type": SET_SETTINGS_LOADING})
    assert state.loading
    state = settings_reducer(state, {"type": SETTINGS_ERROR, "payload": "Server error: 500"})
    assert state.error == "Server error: 500" and not state.loading
    state = settings_reducer(state, {"type": CLEAR_SETTINGS_ERROR})
    assert state.error is None
    state = settings_reducer(state, {"type": INITIALIZE_SETTINGS})
    assert state.initialized
    state = settings_reducer(state, {"type": GET_SETTINGS, "payload": {"general": []}})
    assert state.settings == {"general": []}


def test_store_emits_and_finds():
    store = SettingsStore()
    seen = []
    store.changed.connect(seen.append)

    store.loaded(loaded_state().settings)
    store.updated(setting("gymName", "IRON", category="general"))

    assert store.find("gymName").value == "IRON"
    assert store.find("missing") is None
    assert len(seen) == 2
