# Rev 0.2.0
from __future__ import annotations

from PySide6.QtWidgets import (
    QFileDialog, QGroupBox, QHBoxLayout, QLabel, QMessageBox, QPlainTextEdit, QPushButton,
    QVBoxLayout, QWidget
)

from taskapp.utils.paths import BACKUPS_DIR
from taskapp.viewmodels.system_viewmodel import SystemViewModel


class SystemView(QWidget):
    """Database maintenance for administrators: backup, restore, optimize, integrity check."""

    def __init__(self, context, session, parent=None):
        super().__init__(parent)
        self._ctx = context
        self._vm = SystemViewModel(context.maintenance, context.activity, session)

        info = QLabel(f"Baza danych: {context.db_path}")
        info.setWordWrap(True)

        self._btn_backup = QPushButton("Utwórz kopię zapasową")
        self._btn_restore = QPushButton("Przywróć z kopii")
        self._btn_optimize = QPushButton("Optymalizuj bazę")
        self._btn_check = QPushButton("Sprawdź integralność")
        self._buttons = (self._btn_backup, self._btn_restore, self._btn_optimize, self._btn_check)

        box = QGroupBox("Konserwacja")
        row = QHBoxLayout(box)
        for b in self._buttons:
            row.addWidget(b)

        self._output = QPlainTextEdit()
        self._output.setReadOnly(True)

        root = QVBoxLayout(self)
        root.addWidget(info)
        root.addWidget(box)
        root.addWidget(self._output, 1)

        self._btn_backup.clicked.connect(self._on_backup)
        self._btn_restore.clicked.connect(self._on_restore)
        self._btn_optimize.clicked.connect(self._vm.optimize)
        self._btn_check.clicked.connect(self._vm.integrity_check)

        self._vm.busyChanged.connect(self._set_busy)
        self._vm.actionFinished.connect(lambda _a, msg: self._output.appendPlainText(msg))
        self._vm.actionFailed.connect(self._on_failed)

    def _set_busy(self, busy: bool) -> None:
        for b in self._buttons:
            b.setEnabled(not busy)

    def _on_backup(self) -> None:
        directory = QFileDialog.getExistingDirectory(self, "Katalog kopii", str(BACKUPS_DIR))
        if directory:
            self._vm.backup(directory)

    def _on_restore(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Wybierz kopię", str(BACKUPS_DIR), "SQLite (*.db)")
        if not path:
            return
        answer = QMessageBox.question(self, "Przywróć", "Bieżące dane zostaną zastąpione. Kontynuować?")
        if answer == QMessageBox.Yes:
            self._vm.restore(path)

    def _on_failed(self, action: str, message: str) -> None:
        self._output.appendPlainText(f"[{action}] {message}")
        QMessageBox.critical(self, "System", message)
