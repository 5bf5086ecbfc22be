"""
Shared behaviour of the resource list screens.

Every list fetches a page of records, filters it client-side with a free-text
term, paginates (on the server or locally) and exposes role-gated actions.
Any mutation is followed by a full reload.
"""
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from PySide6 import QtCore

import config
from core.alerts import AlertStore
from core.api_client import Page
from core.exceptions import ApiError
from core.tasks import Runner, run_sync
from models.user import MODIFY_ROLES, Role, User

logger = logging.getLogger(__name__)

DEFAULT_MESSAGES = {
    "deleted": "Record deleted successfully",
    "load_error": None,  # None shows the backend's message
    "forbidden": "You are not authorized to perform this action",
}

Loader = Callable[[int, int, Dict[str, Any]], Page]


def matches(term: str, fields: Iterable[Optional[str]]) -> bool:
    """Case-insensitive substring match against any of the fields. A blank term matches everything."""
    term = (term or "").strip().lower()
    if not term:
        return True
    return any(term in (f or "").lower() for f in fields)


class ListController(QtCore.QObject):
    """
    State and actions of one list screen.

    Signals:
        changed (): Records, filters or pagination changed; re-render the table.
        pending_delete_changed (object): The record awaiting confirmation, or None.
        loading_changed (bool): True while a fetch or mutation is in flight.
    """
    changed = QtCore.Signal()
    pending_delete_changed = QtCore.Signal(object)
    loading_changed = QtCore.Signal(bool)

    def __init__(self, loader: Loader,
                 deleter: Optional[Callable[[str], Any]],
                 search_fields: Callable[[Any], Sequence[Optional[str]]],
                 alerts: AlertStore,
                 user: Optional[User] = None,
                 server_paginated: bool = False,
                 modify_roles: Sequence[Role] = MODIFY_ROLES,
                 messages: Optional[Dict[str, Optional[str]]] = None,
                 remote_search: Optional[Callable[[str], List[Any]]] = None,
                 runner: Runner = run_sync,
                 parent: Optional[QtCore.QObject] = None):
        super().__init__(parent)
        self.loader = loader
        self.deleter = deleter
        self.search_fields = search_fields
        self.alerts = alerts
        self.user = user
        self.server_paginated = server_paginated
        self.modify_roles = tuple(modify_roles)
        self.messages = {**DEFAULT_MESSAGES, **(messages or {})}
        self.remote_search = remote_search
        self.runner = runner

        self.records: List[Any] = []
        self.total_count = 0
        self.page = 0
        self.rows_per_page = config.DEFAULT_ROWS_PER_PAGE
        self.search_term = ""
        self.filters: Dict[str, Any] = {}
        # The term the backend searched for while its results are on screen
        self.server_term: Optional[str] = None
        self.pending_delete: Optional[Any] = None
        self.loading = False

    # --- FETCH ---

    def _set_loading(self, loading: bool) -> None:
        self.loading = loading
        self.loading_changed.emit(loading)

    def load(self) -> None:
        """
        Fetches records. On failure the previous records stay on screen.
        Server-paginated lists send the page and the equality filters along.
        """
        loader, page, rows, filters = self.loader, self.page, self.rows_per_page, dict(self.filters)
        if not self.server_paginated:
            filters = {}

        def done(result: Page):
            self._set_loading(False)
            self.records = list(result.items)
            self.server_term = None
            self.total_count = result.total
            self.changed.emit()

        def failed(err: ApiError):
            self._set_loading(False)
            self.alerts.set_alert(self.messages["load_error"] or err.message, "error")

        self._set_loading(True)
        self.runner(lambda: loader(page, rows, filters), done, failed, owner=self)

    def use_loader(self, loader: Loader) -> None:
        """Swaps the data source (e.g. a date range or a fee filter) and reloads from the first page."""
        self.loader = loader
        self.page = 0
        self.load()

    def search_on_server(self) -> None:
        """
        Replaces the records with the backend's search results for the current term.
        Falls back to a plain reload when the term is blank or no remote search exists.
        """
        term = self.search_term.strip()
        if not term or self.remote_search is None:
            self.load()
            return

        def done(items):
            self._set_loading(False)
            self.records = list(items)
            self.total_count = len(self.records)
            self.server_term = term
            self.page = 0
            self.changed.emit()

        def failed(err: ApiError):
            self._set_loading(False)
            self.alerts.set_alert(err.message, "error")

        self._set_loading(True)
        self.runner(lambda: self.remote_search(term), done, failed, owner=self)

    # --- FILTERING & PAGINATION ---

    def set_search(self, term: str) -> None:
        self.search_term = term or ""
        if not self.server_paginated:
            self.page = 0
        self.changed.emit()

    def set_filter(self, key: str, value: Any) -> None:
        """Sets an equality filter (blank clears it) and goes back to the first page."""
        if value is None or value == "":
            self.filters.pop(key, None)
        else:
            self.filters[key] = value
        self.page = 0
        if self.server_paginated:
            self.load()
        else:
            self.changed.emit()

    def set_page(self, page: int) -> None:
        self.page = max(0, page)
        if self.server_paginated:
            self.load()
        else:
            self.changed.emit()

    def set_rows_per_page(self, rows: int) -> None:
        self.rows_per_page = rows
        self.page = 0
        if self.server_paginated:
            self.load()
        else:
            self.changed.emit()

    def _matches_filters(self, record: Any) -> bool:
        for key, value in self.filters.items():
            if getattr(record, key, None) != value:
                return False
        return True

    @property
    def filtered_records(self) -> List[Any]:
        records = self.records
        if not self.server_paginated and self.filters:
            records = [r for r in records if self._matches_filters(r)]
        if self.server_term is not None and self.search_term.strip() == self.server_term:
            # The backend already matched these, possibly on fields not searched here
            return list(records)
        return [r for r in records if matches(self.search_term, self.search_fields(r))]

    @property
    def pages_locally(self) -> bool:
        """True when every record is on hand, so slicing and counting happen here."""
        if not self.server_paginated or self.server_term is not None:
            return True
        # A backend that ignores page/limit answers with every record
        return len(self.records) > self.rows_per_page or len(self.records) >= self.total_count

    @property
    def visible_records(self) -> List[Any]:
        records = self.filtered_records
        if not self.pages_locally:
            return records
        start = self.page * self.rows_per_page
        return records[start:start + self.rows_per_page]

    @property
    def total(self) -> int:
        if self.pages_locally:
            return len(self.filtered_records)
        return self.total_count

    # --- ROLE-GATED ACTIONS ---

    @property
    def can_modify(self) -> bool:
        return self.user is not None and self.user.has_role(self.modify_roles)

    def _allowed(self) -> bool:
        if self.can_modify:
            return True
        self.alerts.set_alert(self.messages["forbidden"], "warning")
        return False

    def request_delete(self, record: Any) -> bool:
        """Stores the record until the user confirms. Nothing is sent yet."""
        if not self._allowed():
            return False
        self.pending_delete = record
        self.pending_delete_changed.emit(record)
        return True

    def cancel_delete(self) -> None:
        self.pending_delete = None
        self.pending_delete_changed.emit(None)

    def confirm_delete(self) -> None:
        record = self.pending_delete
        if record is None or self.deleter is None:
            return
        self.pending_delete = None
        self.pending_delete_changed.emit(None)
        self.mutate(lambda: self.deleter(record.id), self.messages["deleted"])

    def mutate(self, call: Callable[[], Any], success_message: str) -> bool:
        """
        Runs any mutating call, then reloads the whole list.

        Returns:
            bool: False if the user's role may not modify this list.
        """
        if not self._allowed():
            return False

        def done(_):
            self._set_loading(False)
            self.alerts.set_alert(success_message, "success")
            self.load()

        def failed(err: ApiError):
            self._set_loading(False)
            self.alerts.set_alert(err.message, "error")

        self._set_loading(True)
        self.runner(call, done, failed, owner=self)
        return True


class AttendanceListController(ListController):
    """Attendance list: server-paginated, filterable by status and date, with check-out."""

    def __init__(self, loader: Loader, deleter: Callable[[str], Any],
                 checkout: Callable[[str], Any], alerts: AlertStore, **kwargs):
        kwargs.setdefault("server_paginated", True)
        kwargs.setdefault("messages", {
            "deleted": "Attendance record deleted successfully",
            "load_error": "Error loading attendance records",
        })
        super().__init__(loader, deleter, AttendanceListController.record_fields, alerts, **kwargs)
        self.checkout_fn = checkout

    @staticmethod
    def record_fields(record) -> Sequence[Optional[str]]:
        member = record.member_info
        if member is None:
            return ()
        return (member.full_name, member.email, member.phone)

    def checkout(self, record) -> bool:
        if not self._allowed():
            return False
        if record.is_checked_out:
            self.alerts.set_alert("Member is already checked out", "warning")
            return False
        return self.mutate(lambda: self.checkout_fn(record.id), "Member checked out successfully")


class MemberListController(ListController):
    """
    Member list: a status filter, a fees-due view and backend search.
    The fees-due view and the status filter exclude each other.
    """

    def __init__(self, loader: Loader, fees_due_loader: Loader, deleter: Callable[[str], Any],
                 alerts: AlertStore, **kwargs):
        kwargs.setdefault("messages", {"deleted": "Member deleted successfully", "load_error": "Error loading members"})
        super().__init__(loader, deleter, MemberListController.record_fields, alerts, **kwargs)
        self.all_loader = loader
        self.fees_due_loader = fees_due_loader
        self.fees_due = False

    @staticmethod
    def record_fields(member) -> Sequence[Optional[str]]:
        return (member.full_name, member.email, member.phone)

    def show_fees_due(self, on: bool) -> None:
        self.fees_due = on
        self.filters.pop("status", None)
        self.use_loader(self.fees_due_loader if on else self.all_loader)

    def set_status(self, status: Optional[str]) -> None:
        if self.fees_due and status:
            self.fees_due = False
            self.filters["status"] = status
            self.use_loader(self.all_loader)
            return
        self.set_filter("status", status)
