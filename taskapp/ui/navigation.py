# Rev 0.2.0
"""
Role -> navigation registry for the dashboard shell.
Pure Python so it can be used (and tested) without a QApplication.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from taskapp.models.types import ROLE_ADMIN, ROLE_EMPLOYEE, ROLE_MANAGER, ROLE_TEAM_LEADER


@dataclass(frozen=True)
class NavEntry:
    key: str
    label: str


USERS = NavEntry("users", "Użytkownicy")
TEAMS = NavEntry("teams", "Zespoły")
PROJECTS = NavEntry("projects", "Projekty")
TASKS = NavEntry("tasks", "Zadania")
MY_TASKS = NavEntry("tasks", "Moje zadania")
REPORTS = NavEntry("reports", "Raporty")
ACTIVITY = NavEntry("activity", "Aktywności")
SYSTEM = NavEntry("system", "System")
SETTINGS = NavEntry("settings", "Ustawienia")

_REGISTRY: Dict[int, Tuple[NavEntry, ...]] = {
    ROLE_ADMIN: (USERS, TEAMS, PROJECTS, TASKS, REPORTS, ACTIVITY, SYSTEM, SETTINGS),
    ROLE_MANAGER: (PROJECTS, TEAMS, TASKS, REPORTS, SETTINGS),
    ROLE_TEAM_LEADER: (TASKS, TEAMS, REPORTS, SETTINGS),
    ROLE_EMPLOYEE: (MY_TASKS, SETTINGS),
}


def entries_for_role(role_id: int) -> List[NavEntry]:
    """Ordered navigation for a role; unknown roles only get settings."""
    return list(_REGISTRY.get(role_id, (SETTINGS,)))


def initial_key(role_id: int, default_view: Optional[str]) -> str:
    """The page to open first: the user's saved default_view when it is reachable."""
    entries = entries_for_role(role_id)
    keys = [e.key for e in entries]
    if default_view:
        wanted = default_view.strip().lower()
        for e in entries:
            if wanted in (e.key, e.label.lower()):
                return e.key
    return keys[0]
