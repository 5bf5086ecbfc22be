"""Debounced member lookup behind the member pickers of the record forms."""
import logging
from typing import Callable, List, Optional

from PySide6 import QtCore

import config
from core.exceptions import ApiError
from core.scheduler import Debouncer, Scheduler
from core.tasks import Runner, run_sync
from models.member import Member

logger = logging.getLogger(__name__)


class MemberSearch(QtCore.QObject):
    """
    Every keystroke restarts the debounce timer; only the last term is fetched.

    Signals:
        results (list): Members matching the latest term.
        loading_changed (bool): True while a lookup is in flight.
    """
    results = QtCore.Signal(list)
    loading_changed = QtCore.Signal(bool)

    def __init__(self, search: Callable[[str, bool], List[Member]], scheduler: Scheduler,
                 delay_ms: int = config.SEARCH_DEBOUNCE_MS, runner: Runner = run_sync,
                 parent: Optional[QtCore.QObject] = None):
        super().__init__(parent)
        self.search = search
        self.runner = runner
        self.debouncer = debouncer = Debouncer(scheduler, delay_ms, self._fetch)
        # Timers belong to the application; stop ours when this search goes away
        self.destroyed.connect(lambda *_: debouncer.cancel())

    def term_changed(self, term: str, has_selection: bool = False) -> None:
        self.debouncer.trigger(term, has_selection)

    def cancel(self) -> None:
        self.debouncer.cancel()

    def _fetch(self, term: str, has_selection: bool) -> None:
        def done(members):
            self.loading_changed.emit(False)
            self.results.emit(list(members))

        def failed(err: ApiError):
            # The picker just keeps its previous options
            self.loading_changed.emit(False)
            logger.error("Error searching members: %s", err.message)

        self.loading_changed.emit(True)
        self.runner(lambda: self.search(term, has_selection), done, failed, owner=self)
