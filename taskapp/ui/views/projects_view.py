# Rev 0.2.0
from __future__ import annotations

import sqlite3

from PySide6.QtWidgets import (
    QDialog, QHBoxLayout, QHeaderView, QMessageBox, QPushButton, QTableWidget, QTableWidgetItem,
    QVBoxLayout, QWidget
)

from taskapp.ui.dialogs.project_editor_dialog import ProjectEditorDialog
from taskapp.utils.logging_setup import get_logger

log = get_logger("ui.projects")


class ProjectsView(QWidget):
    """Project list. Administrators see everything; managers see and edit their own projects."""

    def __init__(self, context, session, parent=None):
        super().__init__(parent)
        self._ctx = context
        self._session = session
        self._rows = []

        self._table = QTableWidget(0, 5)
        self._table.setHorizontalHeaderLabels(["ID", "Nazwa", "Kierownik", "Początek", "Koniec"])
        self._table.setEditTriggers(QTableWidget.NoEditTriggers)
        self._table.setSelectionBehavior(QTableWidget.SelectRows)
        self._table.setSelectionMode(QTableWidget.SingleSelection)
        self._table.verticalHeader().setVisible(False)
        self._table.horizontalHeader().setSectionResizeMode(1, QHeaderView.Stretch)

        self._btn_new = QPushButton("Nowy projekt")
        self._btn_edit = QPushButton("Edytuj")
        self._btn_delete = QPushButton("Usuń")
        bar = QHBoxLayout()
        for b in (self._btn_new, self._btn_edit, self._btn_delete):
            bar.addWidget(b)
        bar.addStretch(1)

        root = QVBoxLayout(self)
        root.addLayout(bar)
        root.addWidget(self._table, 1)

        self._btn_new.clicked.connect(self._on_new)
        self._btn_edit.clicked.connect(self._on_edit)
        self._btn_delete.clicked.connect(self._on_delete)
        self._table.itemDoubleClicked.connect(lambda _i: self._on_edit())
        self.reload()

    def reload(self) -> None:
        if self._session.is_admin:
            self._rows = self._ctx.projects.list_projects()
        else:
            self._rows = self._ctx.projects.list_projects_for_manager(self._session.user_id)
        managers = {u.id: u.full_name for u in self._ctx.users.list_managers()}
        self._table.setRowCount(len(self._rows))
        for r, p in enumerate(self._rows):
            values = [
                str(p.id), p.name, managers.get(p.manager_id, "—"),
                p.start_date.isoformat() if p.start_date else "",
                p.end_date.isoformat() if p.end_date else "",
            ]
            for c, v in enumerate(values):
                self._table.setItem(r, c, QTableWidgetItem(v))

    def _selected(self):
        rows = self._table.selectionModel().selectedRows()
        return self._rows[rows[0].row()] if rows else None

    def _dialog(self, project=None) -> ProjectEditorDialog:
        return ProjectEditorDialog(
            self,
            managers=self._ctx.users.list_managers(),
            project=project,
            manager_locked=not self._session.is_admin,
        )

    def _on_new(self) -> None:
        dlg = self._dialog()
        if dlg.exec() != QDialog.Accepted:
            return
        project = dlg.project()
        if not self._session.is_admin:
            project.manager_id = self._session.user_id
        self._write(lambda: self._ctx.projects.insert_project(project))

    def _on_edit(self) -> None:
        project = self._selected()
        if project is None:
            return
        dlg = self._dialog(project)
        if dlg.exec() == QDialog.Accepted:
            edited = dlg.project()
            if not self._session.is_admin:
                edited.manager_id = project.manager_id
            self._write(lambda: self._ctx.projects.update_project(edited))

    def _on_delete(self) -> None:
        project = self._selected()
        if project is None:
            return
        answer = QMessageBox.question(
            self, "Usuń projekt",
            f"Usunąć projekt „{project.name}” razem z zespołami i zadaniami?",
        )
        if answer == QMessageBox.Yes:
            self._write(lambda: self._ctx.projects.delete_project(project.id))

    def _write(self, fn) -> None:
        try:
            fn()
        except sqlite3.Error as e:
            log.exception("Project write failed")
            self._ctx.activity.log_system_error(self._session.user_id, e, "Błąd zapisu projektu")
            QMessageBox.critical(self, "Projekty", str(e))
        self.reload()
