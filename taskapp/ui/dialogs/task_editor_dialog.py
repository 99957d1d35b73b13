# taskapp/ui/dialogs/task_editor_dialog.py
# Rev 0.2.0
from __future__ import annotations
from datetime import date
from typing import List, Optional

from PySide6.QtCore import QDate, Qt
from PySide6.QtWidgets import (
    QComboBox, QDateEdit, QDialog, QDialogButtonBox, QFormLayout, QLabel, QLineEdit,
    QTextEdit, QVBoxLayout, QWidget
)

from taskapp.models.entities import Project, Task, Team, User
from taskapp.models.types import TASK_PRIORITIES, TASK_STATUSES
from taskapp.services.validation import date_range_ok
from taskapp.ui.window_mode import lock_dialog_fixed


def _qdate(d: Optional[date]) -> QDate:
    d = d or date.today()
    return QDate(d.year, d.month, d.day)


class TaskEditorDialog(QDialog):
    """
    Create/edit a task. task() returns the edited Task (id preserved in edit mode).
    Team and assignee lists follow the selected project.
    """

    def __init__(
        self,
        parent: QWidget | None = None,
        *,
        projects: List[Project],
        teams: List[Team],
        users: List[User],
        task: Optional[Task] = None,
    ):
        super().__init__(parent)
        self._orig = task
        self._teams = teams
        self.setWindowTitle("Edytuj zadanie" if task else "Nowe zadanie")

        self._title = QLineEdit(task.title if task else "")
        self._desc = QTextEdit()
        self._desc.setAcceptRichText(False)
        self._desc.setPlainText(task.description if task else "")

        self._cmb_project = QComboBox()
        for p in projects:
            self._cmb_project.addItem(p.name, p.id)
        self._cmb_team = QComboBox()
        self._cmb_user = QComboBox()
        self._cmb_user.addItem("(nieprzypisane)", None)
        for u in users:
            self._cmb_user.addItem(f"{u.full_name} ({u.email})", u.id)

        self._cmb_status = QComboBox()
        self._cmb_status.addItems(list(TASK_STATUSES))
        self._cmb_priority = QComboBox()
        self._cmb_priority.addItems(list(TASK_PRIORITIES))

        self._start = QDateEdit(_qdate(task.start_date if task else None))
        self._start.setCalendarPopup(True)
        self._end = QDateEdit(_qdate(task.end_date if task else None))
        self._end.setCalendarPopup(True)
        self._problem = QLabel("")
        self._problem.setStyleSheet("color: #c0392b;")

        if task:
            self._select(self._cmb_project, task.project_id)
            self._cmb_status.setCurrentText(task.status)
            self._cmb_priority.setCurrentText(task.priority)
        self._reload_teams()
        if task:
            self._select(self._cmb_team, task.team_id)
            self._select(self._cmb_user, task.assigned_to)

        form = QFormLayout()
        form.addRow("Tytuł:", self._title)
        form.addRow("Opis:", self._desc)
        form.addRow(QLabel("<hr/>"))
        form.addRow("Projekt:", self._cmb_project)
        form.addRow("Zespół:", self._cmb_team)
        form.addRow("Przypisany do:", self._cmb_user)
        form.addRow("Status:", self._cmb_status)
        form.addRow("Priorytet:", self._cmb_priority)
        form.addRow("Data rozpoczęcia:", self._start)
        form.addRow("Data zakończenia:", self._end)

        self._btns = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        self._btns.accepted.connect(self.accept)
        self._btns.rejected.connect(self.reject)

        root = QVBoxLayout(self)
        root.addLayout(form)
        root.addWidget(self._problem)
        root.addWidget(self._btns)
        lock_dialog_fixed(self, width_ratio=0.45, height_ratio=0.7)

        self._cmb_project.currentIndexChanged.connect(self._reload_teams)
        self._title.textChanged.connect(self._revalidate)
        self._start.dateChanged.connect(self._revalidate)
        self._end.dateChanged.connect(self._revalidate)
        self._revalidate()
        self._title.setFocus(Qt.OtherFocusReason)

    @staticmethod
    def _select(combo: QComboBox, value) -> None:
        ix = combo.findData(value)
        if ix >= 0:
            combo.setCurrentIndex(ix)

    def _reload_teams(self) -> None:
        project_id = self._cmb_project.currentData()
        self._cmb_team.clear()
        self._cmb_team.addItem("(brak zespołu)", None)
        for t in self._teams:
            if t.project_id == project_id:
                self._cmb_team.addItem(t.name, t.id)

    def _revalidate(self) -> None:
        problem = ""
        if not self._title.text().strip():
            problem = "Tytuł jest wymagany."
        elif self._cmb_project.currentData() is None:
            problem = "Wybierz projekt."
        elif not date_range_ok(self._start.date().toPython(), self._end.date().toPython()):
            problem = "Data zakończenia nie może być wcześniejsza niż data rozpoczęcia."
        self._problem.setText(problem)
        self._btns.button(QDialogButtonBox.Ok).setEnabled(not problem)

    def task(self) -> Task:
        return Task(
            id=self._orig.id if self._orig else None,
            project_id=int(self._cmb_project.currentData()),
            team_id=self._cmb_team.currentData(),
            title=self._title.text().strip(),
            description=self._desc.toPlainText().strip(),
            status=self._cmb_status.currentText(),
            priority=self._cmb_priority.currentText(),
            start_date=self._start.date().toPython(),
            end_date=self._end.date().toPython(),
            assigned_to=self._cmb_user.currentData(),
        )
