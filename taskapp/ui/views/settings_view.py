# Rev 0.2.0
from __future__ import annotations

import sqlite3

from PySide6.QtCore import Signal
from PySide6.QtWidgets import (
    QComboBox, QFormLayout, QGroupBox, QLabel, QLineEdit, QMessageBox, QPushButton, QVBoxLayout, QWidget
)

from taskapp.models.types import THEMES
from taskapp.ui.navigation import entries_for_role
from taskapp.utils.logging_setup import get_logger

log = get_logger("ui.settings")


class SettingsView(QWidget):
    themeChanged = Signal(str)

    def __init__(self, context, session, parent=None):
        super().__init__(parent)
        self._ctx = context
        self._session = session
        current = context.settings.get_settings(session.user_id)

        # ---- preferences
        self._cmb_theme = QComboBox()
        self._cmb_theme.addItems(list(THEMES))
        self._cmb_view = QComboBox()
        for e in entries_for_role(session.role_id):
            self._cmb_view.addItem(e.label, e.key)
        if current is not None:
            self._cmb_theme.setCurrentText(current.theme or THEMES[0])
            ix = self._cmb_view.findData(current.default_view)
            if ix >= 0:
                self._cmb_view.setCurrentIndex(ix)
        self._btn_save = QPushButton("Zapisz ustawienia")

        prefs = QGroupBox("Preferencje")
        pform = QFormLayout(prefs)
        pform.addRow("Motyw:", self._cmb_theme)
        pform.addRow("Widok domyślny:", self._cmb_view)
        pform.addRow(self._btn_save)

        # ---- password
        self._pw_new = QLineEdit()
        self._pw_new.setEchoMode(QLineEdit.Password)
        self._pw_confirm = QLineEdit()
        self._pw_confirm.setEchoMode(QLineEdit.Password)
        self._btn_password = QPushButton("Zmień hasło")
        last = current.last_password_change if current and current.last_password_change else "nigdy"

        pw = QGroupBox("Hasło")
        wform = QFormLayout(pw)
        wform.addRow("Nowe hasło:", self._pw_new)
        wform.addRow("Powtórz hasło:", self._pw_confirm)
        wform.addRow(QLabel(f"Ostatnia zmiana: {last}"))
        wform.addRow(self._btn_password)

        root = QVBoxLayout(self)
        root.addWidget(QLabel(f"Zalogowano jako: {session.user.full_name} ({session.role_name})"))
        root.addWidget(prefs)
        root.addWidget(pw)
        root.addStretch(1)

        self._btn_save.clicked.connect(self._save_prefs)
        self._btn_password.clicked.connect(self._change_password)

    def _save_prefs(self) -> None:
        uid = self._session.user_id
        theme = self._cmb_theme.currentText()
        try:
            self._ctx.settings.update_theme(uid, theme)
            self._ctx.settings.update_default_view(uid, self._cmb_view.currentData())
        except (sqlite3.Error, ValueError) as e:
            log.exception("Saving settings failed for user %s", uid)
            QMessageBox.critical(self, "Ustawienia", str(e))
            return
        self.themeChanged.emit(theme)
        QMessageBox.information(self, "Ustawienia", "Ustawienia zapisane.")

    def _change_password(self) -> None:
        try:
            ok = self._ctx.passwords.change_password(
                self._session, self._session.user_id, self._pw_new.text(), self._pw_confirm.text())
        except (ValueError, PermissionError) as e:
            QMessageBox.warning(self, "Hasło", str(e))
            return
        self._pw_new.clear()
        self._pw_confirm.clear()
        if ok:
            QMessageBox.information(self, "Hasło", "Hasło zostało zmienione.")
