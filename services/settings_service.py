"""Backend settings, grouped by category."""
import logging
from typing import Any, Dict, List

from core.api_client import ApiClient
from models.setting import Setting, group_settings

logger = logging.getLogger(__name__)


def get_settings(client: ApiClient) -> Dict[str, List[Setting]]:
    return group_settings(client.get("/api/settings"))


def update_setting(client: ApiClient, key: str, value: Any) -> Setting:
    """
    Saves one setting.

    Returns:
        Setting: The stored setting as the backend echoes it.
    """
    return Setting.from_api(client.put(f"/api/settings/{key}", {"value": value}))


def initialize_settings(client: ApiClient) -> Dict[str, List[Setting]]:
    """Creates the default settings on the backend, then re-reads them."""
    client.post("/api/settings/initialize")
    logger.info("Default settings initialized")
    return get_settings(client)


def sync_dark_mode(client: ApiClient, enabled: bool) -> Setting:
    return update_setting(client, "darkMode", bool(enabled))
