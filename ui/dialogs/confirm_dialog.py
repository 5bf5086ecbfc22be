from PySide6 import QtWidgets


def confirm(parent: QtWidgets.QWidget, title: str, text: str) -> bool:
    """Yes/No question. Returns True only for an explicit Yes."""
    answer = QtWidgets.QMessageBox.question(
        parent, title, text,
        QtWidgets.QMessageBox.Yes | QtWidgets.QMessageBox.No,
        QtWidgets.QMessageBox.No,
    )
    return answer == QtWidgets.QMessageBox.Yes


def confirm_delete(parent: QtWidgets.QWidget, what: str) -> bool:
    return confirm(parent, "Confirm Delete", f"Are you sure you want to delete {what}? This action cannot be undone.")
