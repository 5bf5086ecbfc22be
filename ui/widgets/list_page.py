from typing import Any, Callable, List, Optional, Tuple

from PySide6 import QtWidgets, QtCore

import config
from core.listing import ListController
from ui.context import AppContext
from ui.dialogs.confirm_dialog import confirm_delete

Action = Tuple[str, Callable[[], None]]


class ListPage(QtWidgets.QWidget):
    """
    Common layout of every resource list: title and add button, search and
    filter bar, table with per-row actions, pagination footer.
    Subclasses fill in the columns, the row values and any extra filters.
    """
    title = ""
    resource = ""  # route prefix, e.g. 'attendance'
    columns: List[str] = []
    search_placeholder = "Search..."
    add_label = "Add"

    def __init__(self, ctx: AppContext, controller: ListController, parent=None):
        super().__init__(parent)
        self.ctx = ctx
        self.controller = controller
        controller.setParent(self)

        self.init_ui()

        controller.changed.connect(self.render)
        controller.pending_delete_changed.connect(self.on_pending_delete)
        controller.loading_changed.connect(self.on_loading)

    def init_ui(self) -> None:
        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(20, 15, 20, 15)

        # --- HEADER ---
        header = QtWidgets.QHBoxLayout()
        lbl = QtWidgets.QLabel(self.title)
        lbl.setStyleSheet("font-size: 22px; font-weight: bold;")
        header.addWidget(lbl)
        header.addStretch()

        self.b_add = QtWidgets.QPushButton(f"➕ {self.add_label}")
        self.b_add.setCursor(QtCore.Qt.PointingHandCursor)
        self.b_add.clicked.connect(self.on_add)
        self.b_add.setVisible(self.controller.can_modify)
        header.addWidget(self.b_add)
        layout.addLayout(header)

        # --- FILTER BAR ---
        bar = QtWidgets.QHBoxLayout()
        self.search = QtWidgets.QLineEdit()
        self.search.setPlaceholderText(self.search_placeholder)
        self.search.setClearButtonEnabled(True)
        self.search.textChanged.connect(self.controller.set_search)
        bar.addWidget(self.search, 2)
        self.build_filters(bar)

        b_refresh = QtWidgets.QPushButton("🔄 Refresh")
        b_refresh.clicked.connect(self.controller.load)
        bar.addWidget(b_refresh)
        layout.addLayout(bar)

        # --- TABLE ---
        self.table = QtWidgets.QTableWidget()
        self.table.setColumnCount(len(self.columns) + 1)
        self.table.setHorizontalHeaderLabels(self.columns + ["Actions"])
        self.table.horizontalHeader().setSectionResizeMode(QtWidgets.QHeaderView.Stretch)
        self.table.setEditTriggers(QtWidgets.QAbstractItemView.NoEditTriggers)
        self.table.setSelectionBehavior(QtWidgets.QAbstractItemView.SelectRows)
        self.table.verticalHeader().setVisible(False)
        layout.addWidget(self.table, 1)

        self.empty = QtWidgets.QLabel("No records found")
        self.empty.setAlignment(QtCore.Qt.AlignCenter)
        self.empty.setProperty("muted", True)
        layout.addWidget(self.empty)

        # --- PAGINATION ---
        footer = QtWidgets.QHBoxLayout()
        footer.addStretch()
        footer.addWidget(QtWidgets.QLabel("Rows per page:"))
        self.rows = QtWidgets.QComboBox()
        for n in config.ROWS_PER_PAGE_OPTIONS:
            self.rows.addItem(str(n), n)
        self.rows.setCurrentIndex(self.rows.findData(self.controller.rows_per_page))
        self.rows.currentIndexChanged.connect(lambda i: self.controller.set_rows_per_page(self.rows.itemData(i)))
        footer.addWidget(self.rows)

        self.range_lbl = QtWidgets.QLabel()
        footer.addWidget(self.range_lbl)

        self.b_prev = QtWidgets.QPushButton("◀")
        self.b_prev.setFixedWidth(40)
        self.b_prev.clicked.connect(lambda: self.controller.set_page(self.controller.page - 1))
        self.b_next = QtWidgets.QPushButton("▶")
        self.b_next.setFixedWidth(40)
        self.b_next.clicked.connect(lambda: self.controller.set_page(self.controller.page + 1))
        footer.addWidget(self.b_prev)
        footer.addWidget(self.b_next)
        layout.addLayout(footer)

    # --- HOOKS ---

    def build_filters(self, bar: QtWidgets.QHBoxLayout) -> None:
        """Adds resource-specific filter widgets next to the search box."""

    def row_values(self, record: Any) -> List[str]:
        raise NotImplementedError

    def describe(self, record: Any) -> str:
        return "this record"

    def row_actions(self, record: Any) -> List[Action]:
        actions: List[Action] = [("View", lambda: self.ctx.navigate(f"{self.resource}/{record.id}"))]
        if self.controller.can_modify:
            actions.append(("Edit", lambda: self.ctx.navigate(f"{self.resource}/{record.id}/edit")))
            actions.append(("Delete", lambda: self.controller.request_delete(record)))
        return actions

    def on_add(self) -> None:
        self.ctx.navigate(f"{self.resource}/new")

    # --- RENDERING ---

    def render(self) -> None:
        records = self.controller.visible_records
        self.table.setRowCount(0)
        self.table.setRowCount(len(records))

        for i, record in enumerate(records):
            for j, value in enumerate(self.row_values(record)):
                self.table.setItem(i, j, QtWidgets.QTableWidgetItem(value))
            self.table.setCellWidget(i, len(self.columns), self._actions_cell(record))

        self.empty.setVisible(not records)
        self.b_add.setVisible(self.controller.can_modify)

        total = self.controller.total
        rpp = self.controller.rows_per_page
        page = self.controller.page
        start = page * rpp + 1 if total else 0
        end = min((page + 1) * rpp, total)
        self.range_lbl.setText(f"{start}–{end} of {total}")
        self.b_prev.setEnabled(page > 0)
        self.b_next.setEnabled(end < total)

    def _actions_cell(self, record: Any) -> QtWidgets.QWidget:
        w = QtWidgets.QWidget()
        h = QtWidgets.QHBoxLayout(w)
        h.setContentsMargins(2, 2, 2, 2)
        for text, fn in self.row_actions(record):
            b = QtWidgets.QPushButton(text)
            b.setCursor(QtCore.Qt.PointingHandCursor)
            b.setStyleSheet("padding: 3px 8px; font-size: 11px;")
            b.clicked.connect(lambda checked=False, f=fn: f())
            h.addWidget(b)
        return w

    def on_pending_delete(self, record: Optional[Any]) -> None:
        if record is None:
            return
        if confirm_delete(self, self.describe(record)):
            self.controller.confirm_delete()
        else:
            self.controller.cancel_delete()

    def on_loading(self, loading: bool) -> None:
        self.table.setEnabled(not loading)

    def showEvent(self, event) -> None:
        super().showEvent(event)
        self.controller.load()
