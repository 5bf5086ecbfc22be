from dataclasses import dataclass
from typing import Callable, Optional

from core.alerts import AlertStore
from core.api_client import ApiClient
from core.scheduler import Scheduler
from core.settings_store import SettingsStore
from core.storage import LocalStore
from core.tasks import Runner
from core.theme import ThemeStore
from models.user import User


@dataclass
class AppContext:
    """
    Everything a page needs, built once by the application and handed down.
    Pages never reach for globals; they get the stores from here.
    """
    client: ApiClient
    local_store: LocalStore
    alerts: AlertStore
    theme: ThemeStore
    settings: SettingsStore
    scheduler: Scheduler
    runner: Runner
    user: Optional[User] = None
    navigate: Callable[[str], None] = lambda path: None

    def run(self, fn, on_done, on_error=None, owner=None) -> None:
        """
        Runs a backend call off the UI thread; failures become an error alert unless handled.
        Pass the calling page as owner so replies arriving after it is gone are dropped.
        """
        self.runner(fn, on_done, on_error or (lambda err: self.alerts.set_alert(err.message, "error")), owner=owner)
