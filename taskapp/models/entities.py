# Rev 0.2.0
"""Lightweight entities aligned with schema 0001 (users/teams/projects/tasks/activities)"""
from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping, Optional

from .types import ROLE_EMPLOYEE, STATUS_NEW, PRIORITY_MEDIUM


def _parse_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


@dataclass
class User:
    id: int | None
    name: str
    last_name: str
    email: str
    role_id: int = ROLE_EMPLOYEE
    group_id: int = 1
    password: Optional[str] = None    # sha-256 hex, never shown
    password_hint: str = ""
    theme: str = "Light"
    default_view: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.name} {self.last_name}"

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "User":
        keys = row.keys()
        return cls(
            id=row["id"],
            name=row["name"],
            last_name=row["last_name"],
            email=row["email"],
            role_id=int(row["role_id"]),
            group_id=int(row["group_id"]) if "group_id" in keys and row["group_id"] is not None else 1,
            password=row["password"] if "password" in keys else None,
            password_hint=(row["password_hint"] or "") if "password_hint" in keys else "",
            theme=(row["theme"] or "Light") if "theme" in keys else "Light",
            default_view=row["default_view"] if "default_view" in keys else None,
        )


@dataclass
class Role:
    id: int
    role_name: str
    permissions: Optional[str] = None


@dataclass
class Settings:
    id: int | None
    user_id: int
    theme: str = "Light"
    default_view: Optional[str] = None
    last_password_change: Optional[str] = None


@dataclass
class Project:
    id: int | None
    name: str
    description: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    manager_id: Optional[int] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Project":
        return cls(
            id=row["id"],
            name=row["project_name"],
            description=row["description"] or "",
            start_date=_parse_date(row["start_date"]),
            end_date=_parse_date(row["end_date"]),
            manager_id=row["manager_id"],
        )


@dataclass
class Team:
    id: int | None
    name: str
    project_id: Optional[int] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Team":
        return cls(id=row["id"], name=row["team_name"], project_id=row["project_id"])


@dataclass
class TeamMember:
    team_id: int
    user_id: int
    is_leader: bool = False


@dataclass
class Task:
    id: int | None
    project_id: int
    team_id: Optional[int]
    title: str
    description: str = ""
    status: str = STATUS_NEW
    priority: str = PRIORITY_MEDIUM
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    assigned_to: Optional[int] = None
    assigned_email: Optional[str] = None
    team_name: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Task":
        keys = row.keys()
        return cls(
            id=row["id"],
            project_id=row["project_id"],
            team_id=row["team_id"],
            title=row["title"],
            description=row["description"] or "",
            status=row["status"],
            priority=row["priority"],
            start_date=_parse_date(row["start_date"]),
            end_date=_parse_date(row["end_date"]),
            assigned_to=row["assigned_id"] if "assigned_id" in keys else None,
            assigned_email=row["assigned_email"] if "assigned_email" in keys else None,
            team_name=row["team_name"] if "team_name" in keys else None,
        )


@dataclass
class TaskActivity:
    id: int | None
    task_id: Optional[int]
    user_id: Optional[int]
    activity_type: str
    description: str
    created_at: Optional[str] = None
    # filled by detailed listings
    task_title: Optional[str] = None
    user_name: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "TaskActivity":
        keys = row.keys()
        user_name = None
        if "user_name" in keys and row["user_name"] is not None:
            user_name = f"{row['user_name']} {row['user_last_name'] or ''}".strip()
        return cls(
            id=row["id"],
            task_id=row["task_id"],
            user_id=row["user_id"],
            activity_type=row["activity_type"],
            description=row["description"],
            created_at=row["created_at"],
            task_title=row["task_title"] if "task_title" in keys else None,
            user_name=user_name,
        )


@dataclass
class ReportRecord:
    id: int | None
    report_name: str
    report_type: str
    report_scope: Optional[str] = None
    created_by: Optional[int] = None
    created_at: Optional[str] = None
    exported_file: Optional[str] = None
