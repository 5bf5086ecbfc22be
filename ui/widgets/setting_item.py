from typing import Any, Callable

from PySide6 import QtWidgets, QtCore

from models.setting import Setting, SettingType, display_value, parse_input


class SettingItem(QtWidgets.QFrame):
    """
    One row of the settings screen: label, description, and an editor chosen
    by the setting's type. Save hands the parsed value to on_save.
    """
    def __init__(self, setting: Setting, on_save: Callable[[Setting, Any], None],
                 editable: bool = True, parent=None):
        super().__init__(parent)
        self.setting = setting
        self.on_save = on_save
        self.editable = editable
        self.init_ui()

    def init_ui(self) -> None:
        layout = QtWidgets.QHBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)

        info = QtWidgets.QVBoxLayout()
        lbl = QtWidgets.QLabel(self.setting.label)
        lbl.setStyleSheet("font-weight: bold;")
        info.addWidget(lbl)
        if self.setting.description:
            desc = QtWidgets.QLabel(self.setting.description)
            desc.setWordWrap(True)
            desc.setStyleSheet("font-size: 12px; color: gray;")
            info.addWidget(desc)
        self.error = QtWidgets.QLabel()
        self.error.setProperty("error", True)
        self.error.hide()
        info.addWidget(self.error)
        layout.addLayout(info, 2)

        self.editor = self._make_editor()
        self.editor.setEnabled(self.editable)
        layout.addWidget(self.editor, 2)

        self.b_save = QtWidgets.QPushButton("💾 Save")
        self.b_save.clicked.connect(self.save)
        self.b_save.setVisible(self.editable)
        layout.addWidget(self.b_save, alignment=QtCore.Qt.AlignTop)

    def _make_editor(self) -> QtWidgets.QWidget:
        kind = self.setting.type
        if kind == SettingType.BOOLEAN:
            w = QtWidgets.QCheckBox(display_value(self.setting))
            w.setChecked(bool(self.setting.value))
            w.toggled.connect(lambda on: w.setText("Enabled" if on else "Disabled"))
            return w
        if kind == SettingType.NUMBER:
            w = QtWidgets.QDoubleSpinBox()
            w.setRange(-1e9, 1e9)
            w.setDecimals(2)
            w.setValue(float(self.setting.value or 0))
            return w
        if kind in (SettingType.OBJECT, SettingType.ARRAY):
            w = QtWidgets.QPlainTextEdit(display_value(self.setting))
            w.setFixedHeight(110)
            return w
        return QtWidgets.QLineEdit(display_value(self.setting))

    def raw_value(self) -> Any:
        kind = self.setting.type
        if kind == SettingType.BOOLEAN:
            return self.editor.isChecked()
        if kind == SettingType.NUMBER:
            return self.editor.value()
        if kind in (SettingType.OBJECT, SettingType.ARRAY):
            return self.editor.toPlainText()
        return self.editor.text()

    def save(self) -> None:
        try:
            value = parse_input(self.setting.type, self.raw_value())
        except ValueError as e:
            self.error.setText(str(e))
            self.error.show()
            return
        self.error.hide()
        self.on_save(self.setting, value)
