# taskapp/ui/views/tasks_view.py
# Rev 0.2.0: task table, status/search filters, history panel below
from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QComboBox, QDialog, QHBoxLayout, QHeaderView, QInputDialog, QLineEdit, QMessageBox,
    QPushButton, QSplitter, QTableWidget, QTableWidgetItem, QVBoxLayout, QWidget
)

from taskapp.models.types import TASK_STATUSES
from taskapp.services.errors import TaskAppError
from taskapp.ui.dialogs.task_editor_dialog import TaskEditorDialog
from taskapp.ui.panels.history_panel import HistoryPanel
from taskapp.viewmodels.tasks_viewmodel import TasksViewModel

_COLUMNS = ["ID", "Tytuł", "Zespół", "Status", "Priorytet", "Przypisany", "Termin"]


class TasksView(QWidget):
    def __init__(self, context, session, parent=None):
        super().__init__(parent)
        self._ctx = context
        self._session = session
        self._can_manage = not session.is_employee
        self._vm = TasksViewModel(context.task_service, session)

        # ---------- Controls ----------
        self._cmb_status = QComboBox()
        self._cmb_status.addItem("Wszystkie statusy", None)
        for s in TASK_STATUSES:
            self._cmb_status.addItem(s, s)
        self._search = QLineEdit()
        self._search.setPlaceholderText("Szukaj po tytule…")

        self._btn_new = QPushButton("Nowe zadanie")
        self._btn_edit = QPushButton("Edytuj")
        self._btn_delete = QPushButton("Usuń")
        self._cmb_set_status = QComboBox()
        self._cmb_set_status.addItems(list(TASK_STATUSES))
        self._btn_set_status = QPushButton("Zmień status")
        self._btn_comment = QPushButton("Komentarz")
        for b in (self._btn_new, self._btn_edit, self._btn_delete):
            b.setVisible(self._can_manage)

        # ---------- Table ----------
        self._table = QTableWidget(0, len(_COLUMNS))
        self._table.setHorizontalHeaderLabels(_COLUMNS)
        self._table.setEditTriggers(QTableWidget.NoEditTriggers)
        self._table.setSelectionBehavior(QTableWidget.SelectRows)
        self._table.setSelectionMode(QTableWidget.SingleSelection)
        self._table.setAlternatingRowColors(True)
        self._table.verticalHeader().setVisible(False)
        hdr = self._table.horizontalHeader()
        hdr.setSectionResizeMode(QHeaderView.ResizeToContents)
        hdr.setSectionResizeMode(1, QHeaderView.Stretch)

        self._history = HistoryPanel(self)

        top_bar = QHBoxLayout()
        top_bar.addWidget(self._cmb_status)
        top_bar.addWidget(self._search, 1)
        top_bar.addWidget(self._btn_new)
        top_bar.addWidget(self._btn_edit)
        top_bar.addWidget(self._btn_delete)
        top_bar.addWidget(self._cmb_set_status)
        top_bar.addWidget(self._btn_set_status)
        top_bar.addWidget(self._btn_comment)

        top_holder = QWidget(self)
        top_layout = QVBoxLayout(top_holder)
        top_layout.setContentsMargins(0, 0, 0, 0)
        top_layout.addLayout(top_bar)
        top_layout.addWidget(self._table, 1)

        self._split = QSplitter(Qt.Vertical, self)
        self._split.addWidget(top_holder)
        self._split.addWidget(self._history)
        self._split.setStretchFactor(0, 3)
        self._split.setStretchFactor(1, 2)

        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.addWidget(self._split, 1)

        # ---------- Wiring ----------
        self._cmb_status.currentIndexChanged.connect(self._apply_filters)
        self._search.textChanged.connect(self._apply_filters)
        self._btn_new.clicked.connect(self._on_new)
        self._btn_edit.clicked.connect(self._on_edit)
        self._table.itemDoubleClicked.connect(lambda _item: self._on_edit())
        self._btn_delete.clicked.connect(self._on_delete)
        self._btn_set_status.clicked.connect(self._on_set_status)
        self._btn_comment.clicked.connect(self._on_comment)
        self._table.itemSelectionChanged.connect(self._on_selection_changed)

        self._vm.tasksReloaded.connect(self._render)
        self._vm.failed.connect(lambda msg: QMessageBox.critical(self, "Zadania", msg))
        self._vm.reload()

    # ---------- Rendering ----------
    def _render(self, rows: list) -> None:
        self._table.setRowCount(len(rows))
        for r, t in enumerate(rows):
            values = [
                str(t.id), t.title, t.team_name or "—", t.status, t.priority,
                t.assigned_email or "Nie przypisano",
                t.end_date.isoformat() if t.end_date else "",
            ]
            for c, v in enumerate(values):
                self._table.setItem(r, c, QTableWidgetItem(v))
        self._on_selection_changed()

    def _selected(self):
        rows = self._table.selectionModel().selectedRows()
        return self._vm.task_at(rows[0].row()) if rows else None

    def _on_selection_changed(self) -> None:
        task = self._selected()
        has = task is not None
        for b in (self._btn_edit, self._btn_delete, self._btn_set_status, self._btn_comment):
            b.setEnabled(has)
        if has:
            self._cmb_set_status.setCurrentText(task.status)
            self._history.set_activities(self._ctx.activities.list_activities_detailed(task_id=task.id))
        else:
            self._history.set_activities([])

    def _apply_filters(self, *_args) -> None:
        self._vm.set_filters(self._cmb_status.currentData(), self._search.text())
        self._vm.reload()

    # ---------- Commands ----------
    def _editor(self, task=None) -> TaskEditorDialog:
        if self._session.is_admin:
            projects = self._ctx.projects.list_projects()
            teams = self._ctx.teams.list_teams()
            users = self._ctx.users.list_users()
        else:
            vis = self._ctx.visibility.for_session(self._session)
            projects, teams, users = vis.projects, vis.teams, vis.users
        return TaskEditorDialog(self, projects=projects, teams=teams, users=users, task=task)

    def _on_new(self) -> None:
        try:
            dlg = self._editor()
        except TaskAppError as e:
            QMessageBox.warning(self, "Zadania", str(e))
            return
        if dlg.exec() == QDialog.Accepted:
            self._vm.create_task(dlg.task())

    def _on_edit(self) -> None:
        task = self._selected()
        if task is None or not self._can_manage:
            return
        dlg = self._editor(task)
        if dlg.exec() == QDialog.Accepted:
            self._vm.save_task(dlg.task())

    def _on_delete(self) -> None:
        task = self._selected()
        if task is None:
            return
        answer = QMessageBox.question(self, "Usuń zadanie", f"Usunąć zadanie „{task.title}”?")
        if answer == QMessageBox.Yes:
            self._vm.delete_task(task.id)

    def _on_set_status(self) -> None:
        task = self._selected()
        if task is not None:
            self._vm.change_status(task.id, self._cmb_set_status.currentText())

    def _on_comment(self) -> None:
        task = self._selected()
        if task is None:
            return
        text, ok = QInputDialog.getMultiLineText(self, "Komentarz", f"Komentarz do „{task.title}”:")
        if ok and text.strip():
            self._vm.comment(task.id, text)
