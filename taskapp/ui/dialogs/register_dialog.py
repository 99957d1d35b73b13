# Rev 0.2.0
from __future__ import annotations

from PySide6.QtWidgets import (
    QDialog, QDialogButtonBox, QFormLayout, QLabel, QLineEdit, QMessageBox, QVBoxLayout, QWidget
)


class RegisterDialog(QDialog):
    """Self-registration. The confirm button stays disabled until the form validates."""

    def __init__(self, register_service, parent: QWidget | None = None):
        super().__init__(parent)
        self.setWindowTitle("Rejestracja")
        self._service = register_service

        self._first = QLineEdit()
        self._last = QLineEdit()
        self._email = QLineEdit()
        self._password = QLineEdit()
        self._password.setEchoMode(QLineEdit.Password)
        self._confirm = QLineEdit()
        self._confirm.setEchoMode(QLineEdit.Password)
        self._hint = QLineEdit()
        self._hint.setPlaceholderText("Opcjonalna podpowiedź do hasła")
        self._problem = QLabel("")
        self._problem.setWordWrap(True)
        self._problem.setStyleSheet("color: #c0392b;")

        form = QFormLayout()
        form.addRow("Imię:", self._first)
        form.addRow("Nazwisko:", self._last)
        form.addRow("Email:", self._email)
        form.addRow("Hasło:", self._password)
        form.addRow("Powtórz hasło:", self._confirm)
        form.addRow("Podpowiedź:", self._hint)

        self._btns = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        self._btns.button(QDialogButtonBox.Ok).setText("Zarejestruj")
        self._btns.accepted.connect(self._submit)
        self._btns.rejected.connect(self.reject)

        root = QVBoxLayout(self)
        root.addLayout(form)
        root.addWidget(self._problem)
        root.addWidget(self._btns)

        for w in (self._first, self._last, self._email, self._password, self._confirm):
            w.textChanged.connect(self._revalidate)
        self._revalidate()

    def _fields(self):
        return (self._first.text().strip(), self._last.text().strip(), self._email.text().strip(),
                self._password.text(), self._confirm.text())

    def _revalidate(self) -> None:
        problem = self._service.check(*self._fields())
        self._problem.setText(problem or "")
        self._btns.button(QDialogButtonBox.Ok).setEnabled(problem is None)

    def _submit(self) -> None:
        result = self._service.register(*self._fields(), password_hint=self._hint.text().strip())
        if not result.success:
            QMessageBox.warning(self, "Rejestracja", result.message)
            return
        QMessageBox.information(self, "Rejestracja", result.message)
        self.accept()

    def email(self) -> str:
        return self._email.text().strip()
