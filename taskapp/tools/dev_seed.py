# Rev 0.2.0
"""
Developer seed: one administrator, two managers, team leaders, employees,
projects, teams and tasks in various states. Skips everything when the
database already has users.

Usage:
    python -m taskapp.tools.dev_seed [--db PATH]

Every seeded account uses the password "Haslo!123".
"""
from __future__ import annotations

import argparse
import sys
from datetime import date, timedelta
from pathlib import Path
from typing import Dict, Optional

from taskapp.models.entities import Project, Team, User
from taskapp.models.types import (
    PRIORITY_HIGH, PRIORITY_LOW, PRIORITY_MEDIUM, ROLE_ADMIN, ROLE_EMPLOYEE, ROLE_MANAGER,
    ROLE_TEAM_LEADER, STATUS_DONE, STATUS_IN_PROGRESS, STATUS_NEW,
)
from taskapp.repositories.db import Database
from taskapp.repositories.sqlite_project_repository import SQLiteProjectRepository
from taskapp.repositories.sqlite_task_repository import SQLiteTaskRepository
from taskapp.repositories.sqlite_team_repository import SQLiteTeamRepository
from taskapp.repositories.sqlite_user_repository import SQLiteUserRepository
from taskapp.services.auth_service import hash_password
from taskapp.utils.paths import DB_PATH

SEED_PASSWORD = "Haslo!123"

_USERS = [
    ("Anna", "Admin", "admin@taskapp.local", ROLE_ADMIN, 1),
    ("Marek", "Nowak", "marek.nowak@taskapp.local", ROLE_MANAGER, 1),
    ("Ewa", "Kowalska", "ewa.kowalska@taskapp.local", ROLE_MANAGER, 1),
    ("Tomasz", "Wiśniewski", "tomasz.w@taskapp.local", ROLE_TEAM_LEADER, 2),
    ("Katarzyna", "Lewandowska", "kasia.l@taskapp.local", ROLE_TEAM_LEADER, 3),
    ("Piotr", "Zieliński", "piotr.z@taskapp.local", ROLE_EMPLOYEE, 2),
    ("Magda", "Wójcik", "magda.w@taskapp.local", ROLE_EMPLOYEE, 2),
    ("Jan", "Kamiński", "jan.k@taskapp.local", ROLE_EMPLOYEE, 3),
    ("Ola", "Dąbrowska", "ola.d@taskapp.local", ROLE_EMPLOYEE, 4),
]


def seed(db: Database, today: Optional[date] = None) -> Dict[str, int]:
    users = SQLiteUserRepository(db)
    if users.list_users():
        return {"users": 0, "projects": 0, "teams": 0, "tasks": 0}
    projects = SQLiteProjectRepository(db)
    teams = SQLiteTeamRepository(db)
    tasks = SQLiteTaskRepository(db)
    today = today or date.today()

    ids = {}
    for name, last, email, role, group in _USERS:
        u = User(id=None, name=name, last_name=last, email=email, role_id=role, group_id=group,
                 password=hash_password(SEED_PASSWORD))
        ids[email.split("@")[0]] = users.insert_user(u)

    p1 = projects.insert_project(Project(
        id=None, name="Portal klienta", description="Nowy portal samoobsługowy.",
        start_date=today - timedelta(days=30), end_date=today + timedelta(days=60),
        manager_id=ids["marek.nowak"]))
    p2 = projects.insert_project(Project(
        id=None, name="Migracja CRM", description="Przeniesienie danych do nowego CRM.",
        start_date=today - timedelta(days=10), end_date=today + timedelta(days=90),
        manager_id=ids["ewa.kowalska"]))

    t1 = teams.insert_team(Team(id=None, name="Frontend", project_id=p1))
    t2 = teams.insert_team(Team(id=None, name="Backend", project_id=p1))
    t3 = teams.insert_team(Team(id=None, name="Dane", project_id=p2))
    teams.set_members(t1, [(ids["tomasz.w"], True), (ids["piotr.z"], False), (ids["magda.w"], False)])
    teams.set_members(t2, [(ids["kasia.l"], True), (ids["jan.k"], False)])
    teams.set_members(t3, [(ids["kasia.l"], True), (ids["ola.d"], False)])

    rows = [
        (p1, t1, "Makiety ekranów", STATUS_DONE, PRIORITY_HIGH, ids["piotr.z"]),
        (p1, t1, "Formularz logowania", STATUS_IN_PROGRESS, PRIORITY_HIGH, ids["magda.w"]),
        (p1, t1, "Testy dostępności", STATUS_NEW, PRIORITY_LOW, None),
        (p1, t2, "API zamówień", STATUS_IN_PROGRESS, PRIORITY_MEDIUM, ids["jan.k"]),
        (p1, t2, "Kolejka powiadomień", STATUS_NEW, PRIORITY_MEDIUM, ids["jan.k"]),
        (p2, t3, "Mapowanie pól", STATUS_DONE, PRIORITY_MEDIUM, ids["ola.d"]),
        (p2, t3, "Import kontaktów", STATUS_NEW, PRIORITY_HIGH, ids["ola.d"]),
    ]
    for i, (project_id, team_id, title, status, priority, assignee) in enumerate(rows):
        tasks.create_task(
            project_id=project_id, team_id=team_id, title=title, description="",
            status=status, priority=priority,
            start_date=today - timedelta(days=7 - i), end_date=today + timedelta(days=7 + i),
            assigned_to=assignee,
        )
    return {"users": len(_USERS), "projects": 2, "teams": 3, "tasks": len(rows)}


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="taskapp-seed", description="Fill a demo dataset")
    p.add_argument("--db", type=Path, default=DB_PATH, help=f"Path to SQLite DB (default: {DB_PATH})")
    ns = p.parse_args(sys.argv[1:] if argv is None else argv)

    db = Database(ns.db)
    try:
        db.run_migrations()
        counts = seed(db)
    finally:
        db.close()
    if not counts["users"]:
        print("ℹ️  Database already has users; nothing seeded.")
        return 0
    print("=== Seeded ===")
    for k, v in counts.items():
        print(f"{k}: {v}")
    print(f"Login: admin@taskapp.local / {SEED_PASSWORD}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
