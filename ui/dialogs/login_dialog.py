from typing import Optional

from PySide6 import QtWidgets, QtCore

import config
from core.exceptions import ApiError
from models.user import User
from services import auth_service
from ui.context import AppContext


class LoginDialog(QtWidgets.QDialog):
    """
    The login dialog shown when there is no valid saved session.
    Accepts once the backend returns a token and the user behind it.
    """
    def __init__(self, ctx: AppContext, parent=None):
        super().__init__(parent)
        self.ctx = ctx
        self.setWindowTitle(f"Login - {config.APP_NAME}")
        self.setModal(True)
        self.setFixedSize(480, 420)

        self.user: Optional[User] = None

        self.init_ui()
        self.apply_style()

    def init_ui(self) -> None:
        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(30, 30, 30, 30)
        layout.setSpacing(15)

        # --- TITLE ---
        title_label = QtWidgets.QLabel(f"💪 {config.APP_NAME}")
        title_label.setAlignment(QtCore.Qt.AlignCenter)
        title_label.setStyleSheet("font-size: 30px; font-weight: bold; color: #ffcc00; margin-bottom: 10px;")
        layout.addWidget(title_label)

        subtitle = QtWidgets.QLabel("🔐 Sign in to continue")
        subtitle.setAlignment(QtCore.Qt.AlignCenter)
        subtitle.setStyleSheet("font-size: 16px; margin-bottom: 15px;")
        layout.addWidget(subtitle)

        # --- FORM ---
        form_layout = QtWidgets.QFormLayout()
        form_layout.setVerticalSpacing(15)

        self.email = QtWidgets.QLineEdit()
        self.email.setPlaceholderText("Enter email")
        self.email.setMinimumHeight(40)

        self.passwd = QtWidgets.QLineEdit()
        self.passwd.setPlaceholderText("Enter password")
        self.passwd.setEchoMode(QtWidgets.QLineEdit.Password)
        self.passwd.setMinimumHeight(40)
        self.passwd.returnPressed.connect(self.do_login)

        form_layout.addRow(QtWidgets.QLabel("Email:"), self.email)
        form_layout.addRow(QtWidgets.QLabel("Password:"), self.passwd)
        layout.addLayout(form_layout)

        self.lbl_error = QtWidgets.QLabel()
        self.lbl_error.setStyleSheet("color: #f44336;")
        self.lbl_error.setWordWrap(True)
        self.lbl_error.hide()
        layout.addWidget(self.lbl_error)

        self.btn_login = QtWidgets.QPushButton("🔐 Login")
        self.btn_login.setFixedHeight(45)
        self.btn_login.setCursor(QtCore.Qt.PointingHandCursor)
        self.btn_login.clicked.connect(self.do_login)
        layout.addWidget(self.btn_login)

        layout.addStretch()

        # --- EXIT BUTTON ---
        exit_layout = QtWidgets.QHBoxLayout()
        exit_layout.addStretch()
        self.btn_exit = QtWidgets.QPushButton("🚪 Exit")
        self.btn_exit.setFixedSize(120, 40)
        self.btn_exit.clicked.connect(self.reject)
        exit_layout.addWidget(self.btn_exit)
        exit_layout.addStretch()
        layout.addLayout(exit_layout)

    def apply_style(self) -> None:
        self.setStyleSheet("""
            QDialog { background: #0c0c0c; color: #ffffff; font-family: 'Segoe UI'; }
            QLabel { color: #ffffff; font-size: 14px; }
            QLineEdit {
                background: #1b1b1b; color: #ffffff; border: 1px solid #333;
                border-radius: 6px; padding: 8px; font-size: 14px;
            }
            QLineEdit:focus { border: 1px solid #ffcc00; }
            QPushButton {
                background: #1976d2; color: #ffffff; border-radius: 8px;
                font-weight: bold; font-size: 15px; border: none;
            }
            QPushButton:hover { background: #1565c0; }
            QPushButton:disabled { background: #333; color: #777; }
        """)

    def do_login(self) -> None:
        email = self.email.text().strip()
        passwd = self.passwd.text()
        if not email or not passwd:
            self.show_error("Please enter your email and password.")
            return

        self.btn_login.setEnabled(False)
        self.lbl_error.hide()
        client, store = self.ctx.client, self.ctx.local_store
        self.ctx.runner(lambda: auth_service.login(client, store, email, passwd), self.on_success, self.on_failure)

    def on_success(self, user: User) -> None:
        self.user = user
        self.accept()

    def on_failure(self, err: ApiError) -> None:
        self.btn_login.setEnabled(True)
        self.show_error(err.message or "Invalid email or password.")

    def show_error(self, message: str) -> None:
        self.lbl_error.setText(message)
        self.lbl_error.show()
