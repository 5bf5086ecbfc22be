import json
import os
from typing import Any, Callable, Dict, List, Optional, Tuple

# Widgets are built without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import httpx
import pytest
from PySide6 import QtCore, QtWidgets

from core.alerts import AlertStore
from core.api_client import ApiClient
from core.settings_store import SettingsStore
from core.storage import LocalStore
from core.tasks import run_sync
from core.theme import ThemeStore
from models.user import Role, User
from ui.context import AppContext


@pytest.fixture(scope="session", autouse=True)
def qt_app():
    """Pages and dialogs are real widgets, so a QApplication is needed."""
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    yield app


def destroy(obj: QtCore.QObject) -> None:
    """Deletes a QObject the way the main window drops a page."""
    obj.deleteLater()
    QtCore.QCoreApplication.sendPostedEvents(None, QtCore.QEvent.DeferredDelete)


# --- SCHEDULER ---

class FakeHandle:
    def __init__(self, due: int, callback: Callable[[], None]):
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Virtual clock: callbacks fire only when the test advances time."""

    def __init__(self):
        self.now = 0
        self.handles: List[FakeHandle] = []

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> FakeHandle:
        handle = FakeHandle(self.now + delay_ms, callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> List[FakeHandle]:
        return [h for h in self.handles if not h.cancelled and not h.fired]

    def advance(self, ms: int) -> None:
        self.now += ms
        for h in sorted(self.pending, key=lambda h: h.due):
            if h.due <= self.now and not h.cancelled:
                h.fired = True
                h.callback()


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def alerts(scheduler) -> AlertStore:
    return AlertStore(scheduler)


# --- HTTP ---

class FakeBackend:
    """
    Routes (method, path) to canned JSON replies and records every request.
    Unknown routes answer 404 like the real backend.
    """
    def __init__(self):
        self.routes: Dict[Tuple[str, str], Tuple[int, Any]] = {}
        self.requests: List[httpx.Request] = []

    def on(self, method: str, path: str, body: Any = None, status: int = 200) -> None:
        self.routes[(method, path)] = (status, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self.routes:
            return httpx.Response(404, json={"msg": "Not found"})
        status, body = self.routes[key]
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def body(self, index: int = -1) -> Optional[Any]:
        content = self.requests[index].content
        return json.loads(content) if content else None

    def paths(self) -> List[str]:
        return [r.url.path for r in self.requests]


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def client(backend) -> ApiClient:
    api = ApiClient("http://gym.test", transport=httpx.MockTransport(backend.handler))
    yield api
    api.close()


@pytest.fixture
def local_store(tmp_path) -> LocalStore:
    return LocalStore(tmp_path / "client.json")


# --- USERS ---

def make_user(role: Role) -> User:
    return User(id=f"{role.value}-1", name=role.value.title(), email=f"{role.value}@gym.test", role=role)


@pytest.fixture
def admin() -> User:
    return make_user(Role.ADMIN)


@pytest.fixture
def staff_user() -> User:
    return make_user(Role.STAFF)


def messages(store: AlertStore) -> List[Tuple[str, str]]:
    return [(a.message, a.severity) for a in store.alerts]


# --- PAGES ---

class HeldPool:
    """Stands in for QThreadPool: workers wait until the test runs them on this thread."""

    def __init__(self):
        self.workers = []

    def start(self, worker) -> None:
        self.workers.append(worker)

    def run_all(self) -> None:
        workers, self.workers = self.workers, []
        for w in workers:
            w.run()


def make_ctx(client: ApiClient, local_store: LocalStore, alerts: AlertStore, scheduler, user: Optional[User],
             runner=run_sync) -> AppContext:
    ctx = AppContext(
        client=client,
        local_store=local_store,
        alerts=alerts,
        theme=ThemeStore(local_store),
        settings=SettingsStore(),
        scheduler=scheduler,
        runner=runner,
        user=user,
    )
    ctx.visited = []
    ctx.navigate = ctx.visited.append
    return ctx
