# Rev 0.2.0
from __future__ import annotations

import sqlite3

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QDialog, QHBoxLayout, QLabel, QListWidget, QListWidgetItem, QMessageBox, QPushButton,
    QSplitter, QVBoxLayout, QWidget
)

from taskapp.models.types import ROLE_EMPLOYEE, ROLE_TEAM_LEADER
from taskapp.ui.dialogs.team_editor_dialog import TeamEditorDialog
from taskapp.utils.logging_setup import get_logger

log = get_logger("ui.teams")


class TeamsView(QWidget):
    def __init__(self, context, session, parent=None):
        super().__init__(parent)
        self._ctx = context
        self._session = session
        self._can_edit = session.is_admin or session.is_manager
        self._teams = []

        self._lst_teams = QListWidget()
        self._lst_members = QListWidget()
        self._lbl_project = QLabel("")

        self._btn_new = QPushButton("Nowy zespół")
        self._btn_edit = QPushButton("Edytuj")
        self._btn_delete = QPushButton("Usuń")
        bar = QHBoxLayout()
        for b in (self._btn_new, self._btn_edit, self._btn_delete):
            b.setVisible(self._can_edit)
            bar.addWidget(b)
        bar.addStretch(1)

        right = QWidget()
        rlay = QVBoxLayout(right)
        rlay.setContentsMargins(0, 0, 0, 0)
        rlay.addWidget(self._lbl_project)
        rlay.addWidget(QLabel("Członkowie:"))
        rlay.addWidget(self._lst_members, 1)

        split = QSplitter(Qt.Horizontal, self)
        split.addWidget(self._lst_teams)
        split.addWidget(right)
        split.setStretchFactor(1, 2)

        root = QVBoxLayout(self)
        root.addLayout(bar)
        root.addWidget(split, 1)

        self._lst_teams.currentRowChanged.connect(self._show_team)
        self._btn_new.clicked.connect(self._on_new)
        self._btn_edit.clicked.connect(self._on_edit)
        self._btn_delete.clicked.connect(self._on_delete)
        self.reload()

    # ---- data
    def reload(self) -> None:
        if self._session.is_admin:
            self._teams = self._ctx.teams.list_teams()
        elif self._session.is_manager:
            self._teams = self._ctx.teams.list_teams_for_manager(self._session.user_id)
        else:
            self._teams = self._ctx.teams.list_teams_led_by(self._session.user_id)
        self._lst_teams.clear()
        for t in self._teams:
            self._lst_teams.addItem(t.name)
        if self._teams:
            self._lst_teams.setCurrentRow(0)
        else:
            self._show_team(-1)

    def _current(self):
        row = self._lst_teams.currentRow()
        return self._teams[row] if 0 <= row < len(self._teams) else None

    def _show_team(self, _row: int) -> None:
        self._lst_members.clear()
        team = self._current()
        self._btn_edit.setEnabled(team is not None)
        self._btn_delete.setEnabled(team is not None)
        if team is None:
            self._lbl_project.setText("")
            return
        project = self._ctx.projects.project_name(team.project_id) if team.project_id else None
        self._lbl_project.setText(f"Projekt: {project or 'Brak projektu'}")
        for u in self._ctx.teams.team_members(team.id):
            leader = " (Lider)" if self._ctx.teams.is_team_leader(team.id, u.id) else ""
            item = QListWidgetItem(f"{u.full_name} ({u.email}){leader}")
            item.setData(Qt.UserRole, u.id)
            self._lst_members.addItem(item)

    # ---- commands
    def _projects(self):
        if self._session.is_admin:
            return self._ctx.projects.list_projects()
        return self._ctx.projects.list_projects_for_manager(self._session.user_id)

    def _candidates(self):
        users = self._ctx.users.list_users()
        if self._session.is_admin:
            return users
        return [u for u in users if u.role_id in (ROLE_TEAM_LEADER, ROLE_EMPLOYEE)]

    def _on_new(self) -> None:
        dlg = TeamEditorDialog(self, projects=self._projects(), users=self._candidates())
        if dlg.exec() != QDialog.Accepted:
            return
        team, members = dlg.team(), dlg.members()

        def _save():
            team.id = self._ctx.teams.insert_team(team)
            self._ctx.teams.set_members(team.id, members)
            self._ctx.activity.log_team_management(
                self._session.user_id, "create", team.id, f"{team.name}, członków: {len(members)}")

        self._write(_save)

    def _on_edit(self) -> None:
        team = self._current()
        if team is None:
            return
        members = self._ctx.teams.team_members(team.id)
        leader = next((u.id for u in members if self._ctx.teams.is_team_leader(team.id, u.id)), None)
        dlg = TeamEditorDialog(self, projects=self._projects(), users=self._candidates(), team=team,
                               member_ids={u.id for u in members}, leader_id=leader)
        if dlg.exec() != QDialog.Accepted:
            return
        edited, roster = dlg.team(), dlg.members()

        def _save():
            self._ctx.teams.update_team(edited)
            self._ctx.teams.set_members(edited.id, roster)
            self._ctx.activity.log_team_management(
                self._session.user_id, "update", edited.id, f"{edited.name}, członków: {len(roster)}")

        self._write(_save)

    def _on_delete(self) -> None:
        team = self._current()
        if team is None:
            return
        if QMessageBox.question(self, "Usuń zespół", f"Usunąć zespół „{team.name}”?") != QMessageBox.Yes:
            return

        def _delete():
            self._ctx.teams.delete_team(team.id)
            self._ctx.activity.log_team_management(self._session.user_id, "delete", team.id, team.name)

        self._write(_delete)

    def _write(self, fn) -> None:
        try:
            fn()
        except sqlite3.Error as e:
            log.exception("Team write failed")
            QMessageBox.critical(self, "Zespoły", str(e))
        self.reload()
