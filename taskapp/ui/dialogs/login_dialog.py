# Rev 0.2.0
from __future__ import annotations
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QDialog, QDialogButtonBox, QFormLayout, QLabel, QLineEdit, QPushButton, QVBoxLayout, QWidget
)

from taskapp.models.entities import User
from taskapp.ui.dialogs.register_dialog import RegisterDialog


class LoginDialog(QDialog):
    """E-mail + password. On accept, user() returns the authenticated User."""

    def __init__(self, context, parent: QWidget | None = None):
        super().__init__(parent)
        self.setWindowTitle("TaskApp - Logowanie")
        self._ctx = context
        self._user: Optional[User] = None

        self._email = QLineEdit()
        self._email.setPlaceholderText("email@firma.pl")
        self._password = QLineEdit()
        self._password.setEchoMode(QLineEdit.Password)
        self._error = QLabel("")
        self._error.setStyleSheet("color: #c0392b;")

        form = QFormLayout()
        form.addRow("Email:", self._email)
        form.addRow("Hasło:", self._password)

        self._btns = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        self._btns.button(QDialogButtonBox.Ok).setText("Zaloguj")
        self._btns.accepted.connect(self._try_login)
        self._btns.rejected.connect(self.reject)

        btn_register = QPushButton("Załóż konto")
        btn_register.setFlat(True)
        btn_register.clicked.connect(self._open_register)

        root = QVBoxLayout(self)
        root.addLayout(form)
        root.addWidget(self._error)
        root.addWidget(self._btns)
        root.addWidget(btn_register, alignment=Qt.AlignRight)

        self._email.textChanged.connect(self._update_ok)
        self._password.textChanged.connect(self._update_ok)
        self._update_ok()

    def _update_ok(self) -> None:
        ok = bool(self._email.text().strip()) and bool(self._password.text())
        self._btns.button(QDialogButtonBox.Ok).setEnabled(ok)

    def _try_login(self) -> None:
        user = self._ctx.auth.authenticate(self._email.text().strip(), self._password.text())
        if user is None:
            self._error.setText("Nieprawidłowy email lub hasło.")
            self._password.clear()
            return
        self._user = user
        self.accept()

    def _open_register(self) -> None:
        dlg = RegisterDialog(self._ctx.register, self)
        if dlg.exec() == QDialog.Accepted:
            self._email.setText(dlg.email())
            self._password.setFocus()

    def user(self) -> Optional[User]:
        return self._user
