# Rev 0.2.0
from __future__ import annotations

import sqlite3

from PySide6.QtWidgets import (
    QDialog, QHBoxLayout, QHeaderView, QInputDialog, QLineEdit, QMessageBox, QPushButton,
    QTableWidget, QTableWidgetItem, QVBoxLayout, QWidget
)

from taskapp.ui.dialogs.user_editor_dialog import UserEditorDialog
from taskapp.utils.logging_setup import get_logger

log = get_logger("ui.users")


class UsersView(QWidget):
    """Administrator-only account management."""

    def __init__(self, context, session, parent=None):
        super().__init__(parent)
        self._ctx = context
        self._session = session
        self._rows = []

        self._table = QTableWidget(0, 5)
        self._table.setHorizontalHeaderLabels(["ID", "Imię i nazwisko", "Email", "Rola", "Grupa"])
        self._table.setEditTriggers(QTableWidget.NoEditTriggers)
        self._table.setSelectionBehavior(QTableWidget.SelectRows)
        self._table.setSelectionMode(QTableWidget.SingleSelection)
        self._table.verticalHeader().setVisible(False)
        self._table.horizontalHeader().setSectionResizeMode(2, QHeaderView.Stretch)

        self._btn_new = QPushButton("Dodaj")
        self._btn_edit = QPushButton("Edytuj")
        self._btn_delete = QPushButton("Usuń")
        self._btn_password = QPushButton("Resetuj hasło")
        bar = QHBoxLayout()
        for b in (self._btn_new, self._btn_edit, self._btn_delete, self._btn_password):
            bar.addWidget(b)
        bar.addStretch(1)

        root = QVBoxLayout(self)
        root.addLayout(bar)
        root.addWidget(self._table, 1)

        self._btn_new.clicked.connect(self._on_new)
        self._btn_edit.clicked.connect(self._on_edit)
        self._btn_delete.clicked.connect(self._on_delete)
        self._btn_password.clicked.connect(self._on_password)
        self.reload()

    def reload(self) -> None:
        roles = self._ctx.users.roles_map()
        groups = self._ctx.users.groups_map()
        self._rows = self._ctx.users.list_users()
        self._table.setRowCount(len(self._rows))
        for r, u in enumerate(self._rows):
            values = [str(u.id), u.full_name, u.email, roles.get(u.role_id, "?"), groups.get(u.group_id, "?")]
            for c, v in enumerate(values):
                self._table.setItem(r, c, QTableWidgetItem(v))

    def _selected(self):
        rows = self._table.selectionModel().selectedRows()
        return self._rows[rows[0].row()] if rows else None

    def _dialog(self, user=None) -> UserEditorDialog:
        return UserEditorDialog(self, roles=self._ctx.users.roles_map(),
                                groups=self._ctx.users.groups_map(), user=user)

    def _on_new(self) -> None:
        dlg = self._dialog()
        if dlg.exec() != QDialog.Accepted:
            return
        user = dlg.user()

        def _save():
            self._ctx.users.insert_user(user)
            self._ctx.activity.log_user_management(self._session.user_id, "create", user.id, user.email)

        self._write(_save)

    def _on_edit(self) -> None:
        current = self._selected()
        if current is None:
            return
        dlg = self._dialog(current)
        if dlg.exec() != QDialog.Accepted:
            return
        user = dlg.user()

        def _save():
            self._ctx.users.update_user(user)
            details = f"rola: {current.role_id} -> {user.role_id}" if current.role_id != user.role_id else ""
            self._ctx.activity.log_user_management(self._session.user_id, "update", user.id, details)

        self._write(_save)

    def _on_delete(self) -> None:
        user = self._selected()
        if user is None:
            return
        if user.id == self._session.user_id:
            QMessageBox.warning(self, "Użytkownicy", "Nie można usunąć własnego konta.")
            return
        if QMessageBox.question(self, "Usuń użytkownika", f"Usunąć konto {user.email}?") != QMessageBox.Yes:
            return

        def _delete():
            self._ctx.users.delete_user(user.id)
            self._ctx.activity.log_user_management(self._session.user_id, "delete", user.id, user.email)

        self._write(_delete)

    def _on_password(self) -> None:
        user = self._selected()
        if user is None:
            return
        new, ok = QInputDialog.getText(self, "Resetuj hasło", f"Nowe hasło dla {user.email}:",
                                       QLineEdit.Password)
        if not ok:
            return
        try:
            self._ctx.passwords.change_password(self._session, user.id, new, new)
        except (ValueError, PermissionError) as e:
            QMessageBox.warning(self, "Resetuj hasło", str(e))
            return
        QMessageBox.information(self, "Resetuj hasło", "Hasło zostało zmienione.")

    def _write(self, fn) -> None:
        try:
            fn()
        except sqlite3.IntegrityError:
            QMessageBox.warning(self, "Użytkownicy", "Email jest już zajęty.")
        except sqlite3.Error as e:
            log.exception("User write failed")
            QMessageBox.critical(self, "Użytkownicy", str(e))
        self.reload()
