# Rev 0.2.0
"""
Role-scoped visibility for reports.

VisibilityFilter.for_session() resolves which teams, projects and users a
session may include in a report. Visibility.restrict_*() intersects a UI
selection with that authorized set; anything outside it is dropped.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from taskapp.models.entities import Project, Team, User
from taskapp.models.types import ROLE_EMPLOYEE, ROLE_TEAM_LEADER
from taskapp.services.errors import ReportPermissionError
from taskapp.services.session import Session
from taskapp.utils.logging_setup import get_logger

log = get_logger("services.visibility")


@dataclass
class Visibility:
    teams: List[Team] = field(default_factory=list)
    projects: List[Project] = field(default_factory=list)
    users: List[User] = field(default_factory=list)

    def restrict_teams(self, selected: Optional[Iterable[int]]) -> List[Team]:
        return _restrict("team", self.teams, selected)

    def restrict_projects(self, selected: Optional[Iterable[int]]) -> List[Project]:
        return _restrict("project", self.projects, selected)

    def restrict_users(self, selected: Optional[Iterable[int]]) -> List[User]:
        return _restrict("user", self.users, selected)


def _restrict(kind: str, allowed: list, selected: Optional[Iterable[int]]) -> list:
    if not selected:
        return list(allowed)
    wanted = {int(i) for i in selected}
    allowed_ids = {e.id for e in allowed}
    dropped = sorted(wanted - allowed_ids)
    if dropped:
        log.warning("Dropping %s ids outside the authorized set: %s", kind, dropped)
    # authorized order wins over selection order
    return [e for e in allowed if e.id in wanted]


class VisibilityFilter:
    def __init__(self, projects, teams, users):
        self._projects = projects
        self._teams = teams
        self._users = users

    def for_session(self, session: Session) -> Visibility:
        if session.is_admin:
            return Visibility(
                teams=self._teams.list_teams(),
                projects=self._projects.list_projects(),
                users=self._users.list_users(),
            )

        if session.is_manager:
            projects = self._projects.list_projects_for_manager(session.user_id)
            project_ids = {p.id for p in projects}
            teams = [t for t in self._teams.list_teams() if t.project_id in project_ids]
            users = self._members_of(teams, (ROLE_TEAM_LEADER, ROLE_EMPLOYEE))
            return Visibility(teams=teams, projects=projects, users=users)

        if session.is_team_leader:
            teams = [
                t for t in self._teams.list_teams()
                if self._teams.is_team_leader(t.id, session.user_id)
            ]
            owner_ids = {t.project_id for t in teams}
            projects = [p for p in self._projects.list_projects() if p.id in owner_ids]
            users = self._members_of(teams, (ROLE_EMPLOYEE,))
            return Visibility(teams=teams, projects=projects, users=users)

        raise ReportPermissionError(f"Rola '{session.role_name}' nie może generować raportów")

    def _members_of(self, teams: List[Team], roles) -> List[User]:
        member_ids = set()
        for team in teams:
            member_ids.update(u.id for u in self._teams.team_members(team.id) if u.role_id in roles)
        return [u for u in self._users.list_users() if u.id in member_ids]
