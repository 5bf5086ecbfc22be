import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class LocalStore:
    """
    Small durable key/value store kept as a hidden JSON file in the user's home.
    Holds the login token and the dark mode flag between runs.
    """
    def __init__(self, path: Path):
        self.path = Path(path)
        self._data: Dict[str, Any] = self._read()

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            content = self.path.read_text(encoding="utf-8").strip()
            data = json.loads(content) if content else {}
            return data if isinstance(data, dict) else {}
        except (OSError, ValueError) as e:
            # A corrupt file is treated as empty; it is rewritten on the next save
            logger.warning("Ignoring unreadable storage file %s: %s", self.path, e)
            return {}

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data, indent=2), encoding="utf-8")

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """
        Stores a value and flushes to disk immediately.

        Raises:
            OSError: If the file cannot be written.
        """
        self._data[key] = value
        self._write()

    def remove(self, key: str) -> None:
        if key in self._data:
            del self._data[key]
            self._write()

    # --- TYPED HELPERS ---

    def get_token(self) -> Optional[str]:
        return self.get("token")

    def set_token(self, token: Optional[str]) -> None:
        if token:
            self.set("token", token)
        else:
            self.remove("token")

    def get_dark_mode(self) -> Optional[bool]:
        """Returns the saved flag, or None if the user never chose one."""
        value = self.get("darkMode")
        if value is None:
            return None
        return value is True or str(value).lower() == "true"

    def set_dark_mode(self, enabled: bool) -> None:
        self.set("darkMode", bool(enabled))
