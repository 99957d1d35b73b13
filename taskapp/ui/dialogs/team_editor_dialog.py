# Rev 0.2.0
from __future__ import annotations
from typing import List, Optional, Set, Tuple

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QComboBox, QDialog, QDialogButtonBox, QFormLayout, QHeaderView, QLabel, QLineEdit,
    QTableWidget, QTableWidgetItem, QVBoxLayout, QWidget
)

from taskapp.models.entities import Project, Team, User
from taskapp.services.validation import single_leader_ok
from taskapp.ui.window_mode import lock_dialog_fixed


class TeamEditorDialog(QDialog):
    """
    Team name, owning project and roster. Each user row has a "member" and a
    "leader" checkbox; more than one leader disables OK.
    """

    def __init__(self, parent: QWidget | None = None, *, projects: List[Project], users: List[User],
                 team: Optional[Team] = None, member_ids: Set[int] = frozenset(),
                 leader_id: Optional[int] = None):
        super().__init__(parent)
        self._orig = team
        self._users = users
        self.setWindowTitle("Edytuj zespół" if team else "Nowy zespół")

        self._name = QLineEdit(team.name if team else "")
        self._cmb_project = QComboBox()
        for p in projects:
            self._cmb_project.addItem(p.name, p.id)
        if team:
            ix = self._cmb_project.findData(team.project_id)
            if ix >= 0:
                self._cmb_project.setCurrentIndex(ix)

        self._tbl = QTableWidget(len(users), 3, self)
        self._tbl.setHorizontalHeaderLabels(["Użytkownik", "Członek", "Lider"])
        self._tbl.verticalHeader().setVisible(False)
        h = self._tbl.horizontalHeader()
        h.setSectionResizeMode(0, QHeaderView.Stretch)
        h.setSectionResizeMode(1, QHeaderView.ResizeToContents)
        h.setSectionResizeMode(2, QHeaderView.ResizeToContents)
        for row, u in enumerate(users):
            name = QTableWidgetItem(f"{u.full_name} ({u.email})")
            name.setFlags(name.flags() & ~Qt.ItemIsEditable)
            self._tbl.setItem(row, 0, name)
            for col, checked in ((1, u.id in member_ids), (2, u.id == leader_id)):
                box = QTableWidgetItem()
                box.setFlags(Qt.ItemIsUserCheckable | Qt.ItemIsEnabled)
                box.setCheckState(Qt.Checked if checked else Qt.Unchecked)
                self._tbl.setItem(row, col, box)

        self._problem = QLabel("")
        self._problem.setStyleSheet("color: #c0392b;")

        form = QFormLayout()
        form.addRow("Nazwa:", self._name)
        form.addRow("Projekt:", self._cmb_project)

        self._btns = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        self._btns.accepted.connect(self.accept)
        self._btns.rejected.connect(self.reject)

        root = QVBoxLayout(self)
        root.addLayout(form)
        root.addWidget(self._tbl, 1)
        root.addWidget(self._problem)
        root.addWidget(self._btns)
        lock_dialog_fixed(self, width_ratio=0.45, height_ratio=0.7)

        self._name.textChanged.connect(self._revalidate)
        self._tbl.itemChanged.connect(self._revalidate)
        self._revalidate()

    def _checked(self, row: int, col: int) -> bool:
        item = self._tbl.item(row, col)
        return item is not None and item.checkState() == Qt.Checked

    def _revalidate(self, *_args) -> None:
        problem = ""
        if not self._name.text().strip():
            problem = "Nazwa zespołu jest wymagana."
        elif not single_leader_ok(self._checked(r, 2) for r in range(self._tbl.rowCount())):
            problem = "Zespół może mieć tylko jednego lidera."
        self._problem.setText(problem)
        self._btns.button(QDialogButtonBox.Ok).setEnabled(not problem)

    def team(self) -> Team:
        return Team(
            id=self._orig.id if self._orig else None,
            name=self._name.text().strip(),
            project_id=self._cmb_project.currentData(),
        )

    def members(self) -> List[Tuple[int, bool]]:
        """(user_id, is_leader); a ticked leader counts as a member."""
        out = []
        for row, u in enumerate(self._users):
            leader = self._checked(row, 2)
            if leader or self._checked(row, 1):
                out.append((u.id, leader))
        return out
