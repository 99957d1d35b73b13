# Rev 0.2.0
# taskapp – SQLiteTeamRepository
from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from taskapp.models.entities import Team, User
from .base import SQLiteRepository


class SQLiteTeamRepository(SQLiteRepository):
    """
    Teams and their membership (team_members with the is_leader flag).
    A second leader for the same team fails with sqlite3.IntegrityError
    (partial unique index ux_team_members_single_leader).
    """

    # ---------- teams ----------

    def list_teams(self) -> List[Team]:
        rows = self._fetch_all("SELECT id, team_name, project_id FROM teams ORDER BY id")
        return [Team.from_row(r) for r in rows]

    def list_teams_for_manager(self, manager_id: int) -> List[Team]:
        rows = self._fetch_all(
            """
            SELECT t.id, t.team_name, t.project_id
            FROM teams t
            JOIN projects p ON p.id = t.project_id
            WHERE p.manager_id = ?
            ORDER BY t.id
            """,
            (manager_id,),
        )
        return [Team.from_row(r) for r in rows]

    def list_teams_led_by(self, user_id: int) -> List[Team]:
        rows = self._fetch_all(
            """
            SELECT t.id, t.team_name, t.project_id
            FROM teams t
            JOIN team_members m ON m.team_id = t.id
            WHERE m.user_id = ? AND m.is_leader = 1
            ORDER BY t.id
            """,
            (user_id,),
        )
        return [Team.from_row(r) for r in rows]

    def get_team(self, team_id: int) -> Optional[Team]:
        row = self._fetch_one("SELECT id, team_name, project_id FROM teams WHERE id = ?", (team_id,))
        return Team.from_row(row) if row else None

    def team_name(self, team_id: int) -> Optional[str]:
        return self._scalar("SELECT team_name FROM teams WHERE id = ?", (team_id,))

    def insert_team(self, team: Team) -> int:
        cur = self._execute(
            "INSERT INTO teams(team_name, project_id) VALUES (?, ?)",
            (team.name, team.project_id),
        )
        team.id = int(cur.lastrowid)
        return team.id

    def update_team(self, team: Team) -> bool:
        cur = self._execute(
            "UPDATE teams SET team_name = ?, project_id = ? WHERE id = ?",
            (team.name, team.project_id, team.id),
        )
        return cur.rowcount > 0

    def delete_team(self, team_id: int) -> bool:
        cur = self._execute("DELETE FROM teams WHERE id = ?", (team_id,))
        return cur.rowcount > 0

    # ---------- membership ----------

    def team_members(self, team_id: int) -> List[User]:
        rows = self._fetch_all(
            """
            SELECT u.id, u.name, u.last_name, u.email, u.role_id, u.group_id
            FROM team_members m
            JOIN users u ON u.id = m.user_id
            WHERE m.team_id = ?
            ORDER BY u.id
            """,
            (team_id,),
        )
        return [User.from_row(r) for r in rows]

    def add_member(self, team_id: int, user_id: int, is_leader: bool = False) -> None:
        self._execute(
            """
            INSERT INTO team_members(team_id, user_id, is_leader) VALUES (?, ?, ?)
            ON CONFLICT(team_id, user_id) DO UPDATE SET is_leader = excluded.is_leader
            """,
            (team_id, user_id, 1 if is_leader else 0),
        )

    def remove_member(self, team_id: int, user_id: int) -> bool:
        cur = self._execute(
            "DELETE FROM team_members WHERE team_id = ? AND user_id = ?",
            (team_id, user_id),
        )
        return cur.rowcount > 0

    def set_members(self, team_id: int, members: Iterable[Tuple[int, bool]]) -> None:
        """Replaces the whole roster atomically; members are (user_id, is_leader) pairs."""
        with self._tx() as con:
            con.execute("DELETE FROM team_members WHERE team_id = ?", (team_id,))
            con.executemany(
                "INSERT INTO team_members(team_id, user_id, is_leader) VALUES (?, ?, ?)",
                [(team_id, uid, 1 if leader else 0) for uid, leader in members],
            )

    def is_team_leader(self, team_id: int, user_id: int) -> bool:
        hit = self._scalar(
            "SELECT 1 FROM team_members WHERE team_id = ? AND user_id = ? AND is_leader = 1",
            (team_id, user_id),
        )
        return hit is not None

    def team_id_for_user(self, user_id: int) -> Optional[int]:
        """First team (lowest id) the user belongs to."""
        return self._scalar(
            "SELECT team_id FROM team_members WHERE user_id = ? ORDER BY team_id LIMIT 1",
            (user_id,),
        )

    def team_ids_for_user(self, user_id: int) -> List[int]:
        rows = self._fetch_all(
            "SELECT team_id FROM team_members WHERE user_id = ? ORDER BY team_id",
            (user_id,),
        )
        return [int(r["team_id"]) for r in rows]

    def team_ids_led_by(self, user_id: int) -> List[int]:
        rows = self._fetch_all(
            "SELECT team_id FROM team_members WHERE user_id = ? AND is_leader = 1 ORDER BY team_id",
            (user_id,),
        )
        return [int(r["team_id"]) for r in rows]
