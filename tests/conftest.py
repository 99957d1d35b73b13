# Rev 0.2.0

"""Pytest fixtures for taskapp (Rev 0.2.0)"""
from __future__ import annotations
from datetime import date, datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskapp.models.entities import Project, Team, User
from taskapp.models.types import (
    ROLE_ADMIN, ROLE_EMPLOYEE, ROLE_MANAGER, ROLE_TEAM_LEADER,
    STATUS_DONE, STATUS_IN_PROGRESS, STATUS_NEW,
)
from taskapp.repositories.db import Database
from taskapp.repositories.sqlite_activity_repository import SQLiteActivityRepository
from taskapp.repositories.sqlite_project_repository import SQLiteProjectRepository
from taskapp.repositories.sqlite_report_repository import SQLiteReportRepository
from taskapp.repositories.sqlite_settings_repository import SQLiteSettingsRepository
from taskapp.repositories.sqlite_task_repository import SQLiteTaskRepository
from taskapp.repositories.sqlite_team_repository import SQLiteTeamRepository
from taskapp.repositories.sqlite_user_repository import SQLiteUserRepository
from taskapp.services.activity_service import ActivityService
from taskapp.services.auth_service import hash_password
from taskapp.services.reports.builder import ReportBuilder
from taskapp.services.visibility import VisibilityFilter

FIXED_NOW = datetime(2025, 3, 14, 9, 30, 0)
PASSWORD = "Sekret!1"


@pytest.fixture()
def db(tmp_path: Path):
    database = Database(path=str(tmp_path / "test.db"))
    try:
        database.run_migrations()
        yield database
    finally:
        database.close()


@pytest.fixture()
def db_conn(db):
    return db.conn


@pytest.fixture()
def repos(db):
    return SimpleNamespace(
        users=SQLiteUserRepository(db),
        settings=SQLiteSettingsRepository(db),
        projects=SQLiteProjectRepository(db),
        teams=SQLiteTeamRepository(db),
        tasks=SQLiteTaskRepository(db),
        activities=SQLiteActivityRepository(db),
        reports=SQLiteReportRepository(db),
    )


def _user(repos, name, last, email, role, group=1) -> User:
    u = User(id=None, name=name, last_name=last, email=email, role_id=role, group_id=group,
             password=hash_password(PASSWORD))
    repos.users.insert_user(u)
    return u


@pytest.fixture()
def world(repos):
    """
    Two managers with one project each.
      Alpha (manager m1): team Red  -> leader l1, employees e1, e2; tasks 1 Nowe, 2 W toku, 1 Zakończone
      Beta  (manager m2): team Blue -> leader l2, employee e3;     task  1 Nowe
    m3 is a manager without projects.
    """
    w = SimpleNamespace()
    w.admin = _user(repos, "Ada", "Admin", "admin@example.com", ROLE_ADMIN)
    w.m1 = _user(repos, "Marek", "Manager", "m1@example.com", ROLE_MANAGER)
    w.m2 = _user(repos, "Maria", "Manager", "m2@example.com", ROLE_MANAGER)
    w.m3 = _user(repos, "Mikołaj", "Bezprojektu", "m3@example.com", ROLE_MANAGER)
    w.l1 = _user(repos, "Leon", "Lider", "l1@example.com", ROLE_TEAM_LEADER, group=2)
    w.l2 = _user(repos, "Lena", "Liderka", "l2@example.com", ROLE_TEAM_LEADER, group=3)
    w.e1 = _user(repos, "Ewa", "Pracownik", "e1@example.com", ROLE_EMPLOYEE, group=2)
    w.e2 = _user(repos, "Emil", "Pracownik", "e2@example.com", ROLE_EMPLOYEE, group=3)
    w.e3 = _user(repos, "Eryk", "Pracownik", "e3@example.com", ROLE_EMPLOYEE, group=2)

    w.alpha = Project(id=None, name="Alpha", description="Pierwszy", start_date=date(2025, 1, 1),
                      end_date=date(2025, 6, 30), manager_id=w.m1.id)
    w.beta = Project(id=None, name="Beta", description="Drugi", start_date=date(2025, 7, 1),
                     end_date=date(2025, 12, 31), manager_id=w.m2.id)
    repos.projects.insert_project(w.alpha)
    repos.projects.insert_project(w.beta)

    w.red = Team(id=None, name="Red", project_id=w.alpha.id)
    w.blue = Team(id=None, name="Blue", project_id=w.beta.id)
    repos.teams.insert_team(w.red)
    repos.teams.insert_team(w.blue)
    repos.teams.set_members(w.red.id, [(w.l1.id, True), (w.e1.id, False), (w.e2.id, False)])
    repos.teams.set_members(w.blue.id, [(w.l2.id, True), (w.e3.id, False)])

    def task(project, team, title, status, assignee=None):
        return repos.tasks.create_task(project_id=project.id, team_id=team.id, title=title,
                                       status=status, assigned_to=assignee)

    w.t_new = task(w.alpha, w.red, "Projekt UI", STATUS_NEW, w.e1.id)
    w.t_prog1 = task(w.alpha, w.red, "Backend", STATUS_IN_PROGRESS, w.e1.id)
    w.t_prog2 = task(w.alpha, w.red, "Baza danych", STATUS_IN_PROGRESS, w.e2.id)
    w.t_done = task(w.alpha, w.red, "Specyfikacja", STATUS_DONE, w.e2.id)
    w.t_blue = task(w.beta, w.blue, "Migracja", STATUS_NEW, w.e3.id)
    return w


@pytest.fixture()
def visibility(repos):
    return VisibilityFilter(repos.projects, repos.teams, repos.users)


@pytest.fixture()
def activity(repos):
    return ActivityService(repos.activities)


@pytest.fixture()
def builder(repos, visibility, activity):
    return ReportBuilder(visibility, repos.projects, repos.teams, repos.tasks, repos.users,
                         clock=lambda: FIXED_NOW, activities=activity)

