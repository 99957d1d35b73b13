# Rev 0.2.0
# taskapp – SQLiteUserRepository
from __future__ import annotations

from typing import Dict, List, Optional

from taskapp.models.entities import User
from taskapp.models.types import ROLE_MANAGER
from .base import SQLiteRepository


_USER_SELECT = """
    SELECT u.id, u.name, u.last_name, u.email, u.password, u.password_hint,
           u.role_id, u.group_id, s.theme, s.default_view
    FROM users u
    LEFT JOIN settings s ON s.user_id = u.id
"""


class SQLiteUserRepository(SQLiteRepository):
    """
    Users plus the small lookup tables hanging off them (roles, user_groups).
    Rows are joined with settings so theme/default_view come along.
    """

    # ---------- queries ----------

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        row = self._fetch_one(_USER_SELECT + " WHERE u.id = ?", (user_id,))
        return User.from_row(row) if row else None

    def get_user_by_email(self, email: str) -> Optional[User]:
        row = self._fetch_one(_USER_SELECT + " WHERE lower(u.email) = lower(?)", (email,))
        return User.from_row(row) if row else None

    def list_users(self) -> List[User]:
        return [User.from_row(r) for r in self._fetch_all(_USER_SELECT + " ORDER BY u.id")]

    def list_managers(self) -> List[User]:
        rows = self._fetch_all(_USER_SELECT + " WHERE u.role_id = ? ORDER BY u.last_name, u.name", (ROLE_MANAGER,))
        return [User.from_row(r) for r in rows]

    def roles_map(self) -> Dict[int, str]:
        rows = self._fetch_all("SELECT id, role_name FROM roles ORDER BY id")
        return {int(r["id"]): r["role_name"] for r in rows}

    def groups_map(self) -> Dict[int, str]:
        rows = self._fetch_all("SELECT id, group_name FROM user_groups ORDER BY id")
        return {int(r["id"]): r["group_name"] for r in rows}

    def group_names(self) -> List[str]:
        rows = self._fetch_all("SELECT DISTINCT group_name FROM user_groups ORDER BY group_name")
        return [r["group_name"] for r in rows]

    def user_ids_in_group(self, group_name: str) -> List[int]:
        rows = self._fetch_all(
            """
            SELECT u.id FROM users u
            JOIN user_groups g ON g.id = u.group_id
            WHERE g.group_name = ?
            ORDER BY u.id
            """,
            (group_name,),
        )
        return [int(r["id"]) for r in rows]

    # ---------- mutations ----------

    def insert_user(self, user: User) -> int:
        cur = self._execute(
            """
            INSERT INTO users(name, last_name, email, password, password_hint, role_id, group_id)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (user.name, user.last_name, user.email, user.password or "",
             user.password_hint or "", user.role_id, user.group_id),
        )
        user.id = int(cur.lastrowid)
        return user.id

    def update_user(self, user: User) -> bool:
        """Updates identity/role/group; password only when user.password is set."""
        sets = ["name = ?", "last_name = ?", "email = ?", "role_id = ?", "group_id = ?", "password_hint = ?"]
        params: list = [user.name, user.last_name, user.email, user.role_id, user.group_id, user.password_hint or ""]
        if user.password:
            sets.append("password = ?")
            params.append(user.password)
        params.append(user.id)
        cur = self._execute(f"UPDATE users SET {', '.join(sets)} WHERE id = ?", tuple(params))
        return cur.rowcount > 0

    def update_password(self, user_id: int, password_hash: str) -> bool:
        cur = self._execute("UPDATE users SET password = ? WHERE id = ?", (password_hash, user_id))
        return cur.rowcount > 0

    def delete_user(self, user_id: int) -> bool:
        # settings/team_members/assignments go via ON DELETE CASCADE
        cur = self._execute("DELETE FROM users WHERE id = ?", (user_id,))
        return cur.rowcount > 0
