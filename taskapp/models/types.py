# taskapp type definitions
# Rev 0.2.0

from __future__ import annotations
from typing import Literal

# Role ids as stored in roles.id
ROLE_ADMIN = 1
ROLE_MANAGER = 2
ROLE_TEAM_LEADER = 3
ROLE_EMPLOYEE = 4

ROLE_NAMES = {
    ROLE_ADMIN: "Administrator",
    ROLE_MANAGER: "Kierownik",
    ROLE_TEAM_LEADER: "Team Lider",
    ROLE_EMPLOYEE: "Pracownik",
}

# Task vocabularies (CHECK-constrained in the schema)
STATUS_NEW = "Nowe"
STATUS_IN_PROGRESS = "W toku"
STATUS_DONE = "Zakończone"
TASK_STATUSES = (STATUS_NEW, STATUS_IN_PROGRESS, STATUS_DONE)

PRIORITY_LOW = "Niskie"
PRIORITY_MEDIUM = "Średnie"
PRIORITY_HIGH = "Wysokie"
TASK_PRIORITIES = (PRIORITY_LOW, PRIORITY_MEDIUM, PRIORITY_HIGH)

THEMES = ("Light", "Dark")

ActivityType = Literal[
    "CREATE", "STATUS", "ASSIGN", "UPDATE", "COMMENT",
    "PASSWORD", "LOGIN", "LOGOUT", "USER_MANAGEMENT", "TEAM_MANAGEMENT",
    "REPORT", "CONFIG", "ERROR", "SYSTEM",
]
