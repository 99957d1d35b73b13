# Rev 0.2.0
from __future__ import annotations
from datetime import date
from typing import List, Optional

from PySide6.QtCore import QDate
from PySide6.QtWidgets import (
    QComboBox, QDateEdit, QDialog, QDialogButtonBox, QFormLayout, QLabel, QLineEdit,
    QTextEdit, QVBoxLayout, QWidget
)

from taskapp.models.entities import Project, User
from taskapp.services.validation import date_range_ok
from taskapp.ui.window_mode import lock_dialog_fixed


class ProjectEditorDialog(QDialog):
    """Name, description, date range and manager. Managers editing their own project cannot reassign it."""

    def __init__(self, parent: QWidget | None = None, *, managers: List[User],
                 project: Optional[Project] = None, manager_locked: bool = False):
        super().__init__(parent)
        self._orig = project
        self.setWindowTitle("Edytuj projekt" if project else "Nowy projekt")

        self._name = QLineEdit(project.name if project else "")
        self._desc = QTextEdit()
        self._desc.setAcceptRichText(False)
        self._desc.setPlainText(project.description if project else "")

        today = date.today()
        start = project.start_date if project and project.start_date else today
        end = project.end_date if project and project.end_date else today
        self._start = QDateEdit(QDate(start.year, start.month, start.day))
        self._start.setCalendarPopup(True)
        self._end = QDateEdit(QDate(end.year, end.month, end.day))
        self._end.setCalendarPopup(True)

        self._cmb_manager = QComboBox()
        self._cmb_manager.addItem("(brak)", None)
        for m in managers:
            self._cmb_manager.addItem(m.full_name, m.id)
        if project:
            ix = self._cmb_manager.findData(project.manager_id)
            if ix >= 0:
                self._cmb_manager.setCurrentIndex(ix)
        self._cmb_manager.setEnabled(not manager_locked)

        self._problem = QLabel("")
        self._problem.setStyleSheet("color: #c0392b;")

        form = QFormLayout()
        form.addRow("Nazwa:", self._name)
        form.addRow("Opis:", self._desc)
        form.addRow("Data rozpoczęcia:", self._start)
        form.addRow("Data zakończenia:", self._end)
        form.addRow("Kierownik:", self._cmb_manager)

        self._btns = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        self._btns.accepted.connect(self.accept)
        self._btns.rejected.connect(self.reject)

        root = QVBoxLayout(self)
        root.addLayout(form)
        root.addWidget(self._problem)
        root.addWidget(self._btns)
        lock_dialog_fixed(self, width_ratio=0.4, height_ratio=0.5)

        self._name.textChanged.connect(self._revalidate)
        self._start.dateChanged.connect(self._revalidate)
        self._end.dateChanged.connect(self._revalidate)
        self._revalidate()

    def _revalidate(self) -> None:
        problem = ""
        if not self._name.text().strip():
            problem = "Nazwa projektu jest wymagana."
        elif not date_range_ok(self._start.date().toPython(), self._end.date().toPython()):
            problem = "Data zakończenia nie może być wcześniejsza niż data rozpoczęcia."
        self._problem.setText(problem)
        self._btns.button(QDialogButtonBox.Ok).setEnabled(not problem)

    def project(self) -> Project:
        return Project(
            id=self._orig.id if self._orig else None,
            name=self._name.text().strip(),
            description=self._desc.toPlainText().strip(),
            start_date=self._start.date().toPython(),
            end_date=self._end.date().toPython(),
            manager_id=self._cmb_manager.currentData(),
        )
