import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional


class SettingType(str, Enum):
    """Discriminator for what a setting's value holds."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "SettingType":
        try:
            return cls(raw or "string")
        except ValueError:
            return cls.STRING


CATEGORIES = ("general", "notifications", "billing", "appearance", "system")


@dataclass
class Setting:
    """
    A single key/value setting. 'type' tells how 'value' must be shown and edited.
    """
    key: str
    value: Any
    type: SettingType = SettingType.STRING
    label: str = ""
    description: str = ""
    category: str = "general"
    is_public: bool = False
    id: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Setting":
        return cls(
            id=data.get("_id") or data.get("id"),
            key=data["key"],
            value=data.get("value"),
            type=SettingType.parse(data.get("type")),
            label=data.get("label") or data["key"],
            description=data.get("description", ""),
            category=data.get("category", "general"),
            is_public=bool(data.get("isPublic", False)),
        )

    def to_payload(self) -> Dict[str, Any]:
        return {"value": self.value}

    @property
    def display(self) -> str:
        return display_value(self)


# --- PER-TYPE HANDLERS ---

def _display_bool(value: Any) -> str:
    return "Enabled" if value else "Disabled"


def _display_json(value: Any) -> str:
    return json.dumps(value, indent=2)


def _display_number(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


_DISPLAY: Dict[SettingType, Callable[[Any], str]] = {
    SettingType.STRING: lambda v: "" if v is None else str(v),
    SettingType.NUMBER: _display_number,
    SettingType.BOOLEAN: _display_bool,
    SettingType.OBJECT: _display_json,
    SettingType.ARRAY: _display_json,
}


def _parse_bool(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in ("true", "1", "yes", "on", "enabled"):
        return True
    if text in ("false", "0", "no", "off", "disabled", ""):
        return False
    raise ValueError(f"'{raw}' is not a boolean")


def _parse_number(raw: Any) -> float:
    if isinstance(raw, bool):
        raise ValueError("Expected a number")
    if isinstance(raw, (int, float)):
        return raw
    text = str(raw).strip()
    try:
        number = float(text)
    except ValueError:
        raise ValueError(f"'{raw}' is not a number")
    return int(number) if number.is_integer() and "." not in text else number


def _json_parser(expected: type, name: str) -> Callable[[Any], Any]:
    def parse(raw: Any) -> Any:
        if isinstance(raw, expected):
            return raw
        try:
            value = json.loads(raw)
        except (TypeError, ValueError):
            raise ValueError(f"Value must be valid JSON ({name})")
        if not isinstance(value, expected):
            raise ValueError(f"Value must be a JSON {name}")
        return value
    return parse


_PARSE: Dict[SettingType, Callable[[Any], Any]] = {
    SettingType.STRING: lambda raw: "" if raw is None else str(raw),
    SettingType.NUMBER: _parse_number,
    SettingType.BOOLEAN: _parse_bool,
    SettingType.OBJECT: _json_parser(dict, "object"),
    SettingType.ARRAY: _json_parser(list, "array"),
}


def display_value(setting: Setting) -> str:
    """Renders a setting's value for read-only display, based on its type."""
    return _DISPLAY[setting.type](setting.value)


def parse_input(setting_type: SettingType, raw: Any) -> Any:
    """
    Converts user input into a value of the setting's type.

    Raises:
        ValueError: If the input does not fit the type (e.g. invalid JSON for an object).
    """
    return _PARSE[setting_type](raw)


def group_settings(payload: Any) -> Dict[str, List[Setting]]:
    """
    Builds {category: [Setting, ...]} from the backend response.
    The backend already groups by category, but a flat list is accepted too.
    """
    grouped: Dict[str, List[Setting]] = {}
    if isinstance(payload, dict):
        for category, items in payload.items():
            if isinstance(items, list):
                grouped[category] = [Setting.from_api(i) for i in items]
    elif isinstance(payload, list):
        for item in payload:
            s = Setting.from_api(item)
            grouped.setdefault(s.category, []).append(s)
    return grouped
