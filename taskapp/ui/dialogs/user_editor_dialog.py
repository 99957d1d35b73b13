# Rev 0.2.0
from __future__ import annotations
from typing import Dict, Optional

from PySide6.QtWidgets import (
    QComboBox, QDialog, QDialogButtonBox, QFormLayout, QLabel, QLineEdit, QVBoxLayout, QWidget
)

from taskapp.models.entities import User
from taskapp.models.types import ROLE_EMPLOYEE
from taskapp.services.auth_service import hash_password
from taskapp.services.validation import has_special_char, is_capitalized, is_valid_email
from taskapp.ui.window_mode import lock_dialog_fixed


class UserEditorDialog(QDialog):
    """Administrator form for a user account. In edit mode an empty password keeps the current one."""

    def __init__(self, parent: QWidget | None = None, *, roles: Dict[int, str], groups: Dict[int, str],
                 user: Optional[User] = None):
        super().__init__(parent)
        self._orig = user
        self.setWindowTitle("Edytuj użytkownika" if user else "Nowy użytkownik")

        self._first = QLineEdit(user.name if user else "")
        self._last = QLineEdit(user.last_name if user else "")
        self._email = QLineEdit(user.email if user else "")
        self._password = QLineEdit()
        self._password.setEchoMode(QLineEdit.Password)
        if user:
            self._password.setPlaceholderText("Pozostaw puste, aby nie zmieniać")

        self._cmb_role = QComboBox()
        for rid, name in roles.items():
            self._cmb_role.addItem(name, rid)
        self._cmb_group = QComboBox()
        for gid, name in groups.items():
            self._cmb_group.addItem(name, gid)
        role_id = user.role_id if user else ROLE_EMPLOYEE
        self._cmb_role.setCurrentIndex(max(0, self._cmb_role.findData(role_id)))
        if user:
            self._cmb_group.setCurrentIndex(max(0, self._cmb_group.findData(user.group_id)))

        self._problem = QLabel("")
        self._problem.setStyleSheet("color: #c0392b;")

        form = QFormLayout()
        form.addRow("Imię:", self._first)
        form.addRow("Nazwisko:", self._last)
        form.addRow("Email:", self._email)
        form.addRow("Hasło:", self._password)
        form.addRow("Rola:", self._cmb_role)
        form.addRow("Grupa:", self._cmb_group)

        self._btns = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        self._btns.accepted.connect(self.accept)
        self._btns.rejected.connect(self.reject)

        root = QVBoxLayout(self)
        root.addLayout(form)
        root.addWidget(self._problem)
        root.addWidget(self._btns)
        lock_dialog_fixed(self, width_ratio=0.35, height_ratio=0.45)

        for w in (self._first, self._last, self._email, self._password):
            w.textChanged.connect(self._revalidate)
        self._revalidate()

    def _revalidate(self) -> None:
        first, last = self._first.text().strip(), self._last.text().strip()
        problem = ""
        if not (is_capitalized(first) and is_capitalized(last)):
            problem = "Imię i nazwisko muszą zaczynać się wielką literą."
        elif not is_valid_email(self._email.text().strip()):
            problem = "Niepoprawny adres email."
        elif self._orig is None and not self._password.text():
            problem = "Hasło jest wymagane."
        elif self._password.text() and not has_special_char(self._password.text()):
            problem = "Hasło musi zawierać przynajmniej jeden znak specjalny!"
        self._problem.setText(problem)
        self._btns.button(QDialogButtonBox.Ok).setEnabled(not problem)

    def user(self) -> User:
        raw = self._password.text()
        return User(
            id=self._orig.id if self._orig else None,
            name=self._first.text().strip(),
            last_name=self._last.text().strip(),
            email=self._email.text().strip(),
            role_id=int(self._cmb_role.currentData()),
            group_id=int(self._cmb_group.currentData() or 1),
            password=hash_password(raw) if raw else None,
            password_hint=self._orig.password_hint if self._orig else "",
        )
