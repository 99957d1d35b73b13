# Rev 0.2.0
from __future__ import annotations

from dataclasses import dataclass

from taskapp.models.entities import User
from taskapp.models.types import (
    ROLE_ADMIN,
    ROLE_EMPLOYEE,
    ROLE_MANAGER,
    ROLE_NAMES,
    ROLE_TEAM_LEADER,
)


@dataclass(frozen=True)
class Session:
    """The logged-in user. Handed to every call that depends on who is asking."""
    user: User

    @property
    def user_id(self) -> int:
        return int(self.user.id)

    @property
    def role_id(self) -> int:
        return int(self.user.role_id)

    @property
    def role_name(self) -> str:
        return ROLE_NAMES.get(self.role_id, f"Nieznana ({self.role_id})")

    @property
    def is_admin(self) -> bool:
        return self.role_id == ROLE_ADMIN

    @property
    def is_manager(self) -> bool:
        return self.role_id == ROLE_MANAGER

    @property
    def is_team_leader(self) -> bool:
        return self.role_id == ROLE_TEAM_LEADER

    @property
    def is_employee(self) -> bool:
        return self.role_id == ROLE_EMPLOYEE
