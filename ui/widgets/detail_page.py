from typing import Any, Callable, Dict, Optional

from PySide6 import QtWidgets, QtCore

from core.forms import FormController
from core.routes import FormMode, Route
from ui.context import AppContext
from ui.dialogs.confirm_dialog import confirm_delete
from ui.widgets.form_fields import ErrorLabels


class DetailPage(QtWidgets.QWidget):
    """
    Common frame of the create/edit/view screens.
    Subclasses add their inputs in build_form() and translate between the
    inputs and the backend payload in fill() and payload().
    """
    resource = ""
    singular = "Record"

    def __init__(self, ctx: AppContext, route: Route, form: FormController,
                 deleter: Optional[Callable[[str], Any]] = None, parent=None):
        super().__init__(parent)
        self.ctx = ctx
        self.route = route
        self.form = form
        # The form dies with the page, and so do its pending replies
        form.setParent(self)
        self.deleter = deleter
        self.record: Optional[Any] = None
        self.errors = ErrorLabels()

        self.init_ui()
        self.set_read_only(form.read_only)

        form.errors_changed.connect(self.errors.show)
        form.loaded.connect(self._on_loaded)
        form.saved.connect(lambda _: self.ctx.navigate(self.resource))
        form.busy_changed.connect(self.on_busy)

        if route.record_id:
            form.load(self.fetch)

    @property
    def can_modify(self) -> bool:
        return bool(self.ctx.user and self.ctx.user.can_modify)

    def init_ui(self) -> None:
        outer = QtWidgets.QVBoxLayout(self)
        outer.setContentsMargins(20, 15, 20, 15)

        # --- HEADER ---
        header = QtWidgets.QHBoxLayout()
        b_back = QtWidgets.QPushButton("◀ Back")
        b_back.clicked.connect(lambda: self.ctx.navigate(self.resource))
        header.addWidget(b_back)

        prefix = {FormMode.CREATE: "New ", FormMode.EDIT: "Edit "}.get(self.form.mode, "")
        self.title = QtWidgets.QLabel(f"{prefix}{self.singular}")
        self.title.setStyleSheet("font-size: 22px; font-weight: bold;")
        header.addWidget(self.title)
        header.addStretch()

        self.b_edit = QtWidgets.QPushButton("✏️ Edit")
        self.b_edit.clicked.connect(lambda: self.ctx.navigate(f"{self.resource}/{self.route.record_id}/edit"))
        self.b_edit.setVisible(self.form.mode == FormMode.VIEW and self.can_modify)
        header.addWidget(self.b_edit)

        self.b_delete = QtWidgets.QPushButton("🗑️ Delete")
        self.b_delete.setStyleSheet("background: #d32f2f;")
        self.b_delete.clicked.connect(self.on_delete)
        self.b_delete.setVisible(self.form.mode != FormMode.CREATE and self.can_modify and self.deleter is not None)
        header.addWidget(self.b_delete)
        outer.addLayout(header)

        # --- BODY ---
        scroll = QtWidgets.QScrollArea()
        scroll.setWidgetResizable(True)
        body = QtWidgets.QWidget()
        self.body_layout = QtWidgets.QVBoxLayout(body)
        self.build_form(self.body_layout)
        self.body_layout.addStretch()
        scroll.setWidget(body)
        outer.addWidget(scroll, 1)

        # --- FOOTER ---
        footer = QtWidgets.QHBoxLayout()
        footer.addStretch()
        self.b_cancel = QtWidgets.QPushButton("Cancel")
        self.b_cancel.clicked.connect(lambda: self.ctx.navigate(self.resource))
        self.b_save = QtWidgets.QPushButton("💾 Save")
        self.b_save.clicked.connect(self.on_save)
        footer.addWidget(self.b_cancel)
        footer.addWidget(self.b_save)
        self.b_cancel.setVisible(not self.form.read_only)
        self.b_save.setVisible(not self.form.read_only)
        outer.addLayout(footer)

    # --- HOOKS ---

    def build_form(self, layout: QtWidgets.QVBoxLayout) -> None:
        raise NotImplementedError

    def fetch(self) -> Any:
        raise NotImplementedError

    def fill(self, record: Any) -> None:
        raise NotImplementedError

    def payload(self) -> Dict[str, Any]:
        raise NotImplementedError

    def set_read_only(self, read_only: bool) -> None:
        """Disables every input in the body."""
        for w in self.findChildren(QtWidgets.QWidget):
            if isinstance(w, (QtWidgets.QLineEdit, QtWidgets.QPlainTextEdit)):
                w.setReadOnly(read_only)
            elif isinstance(w, (QtWidgets.QComboBox, QtWidgets.QAbstractSpinBox, QtWidgets.QCheckBox)):
                w.setEnabled(not read_only)

    def describe(self) -> str:
        return f"this {self.singular.lower()}"

    def dispose(self) -> None:
        """Called before the page is dropped. Late form replies no longer reach it."""
        self.form.blockSignals(True)

    # --- ACTIONS ---

    def _on_loaded(self, record: Any) -> None:
        self.record = record
        self.fill(record)
        self.set_read_only(self.form.read_only)

    def on_save(self) -> None:
        self.form.submit(self.payload())

    def on_busy(self, busy: bool) -> None:
        self.b_save.setEnabled(not busy)
        self.setCursor(QtCore.Qt.BusyCursor if busy else QtCore.Qt.ArrowCursor)

    def on_delete(self) -> None:
        if not confirm_delete(self, self.describe()):
            return
        record_id = self.route.record_id

        def done(_):
            self.ctx.alerts.set_alert(f"{self.singular} deleted successfully", "success")
            self.ctx.navigate(self.resource)

        self.ctx.run(lambda: self.deleter(record_id), done, owner=self)

    def field_edited(self, field: str) -> Callable[..., None]:
        """Slot factory: clears a field's error as soon as the user touches it."""
        return lambda *_: self.form.clear_error(field)
