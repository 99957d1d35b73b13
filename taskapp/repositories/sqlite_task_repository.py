# Rev 0.2.0
from __future__ import annotations

from typing import List, Optional

from taskapp.models.entities import Task
from taskapp.models.types import PRIORITY_MEDIUM, STATUS_NEW
from .base import SQLiteRepository


_TASK_SELECT = """
    SELECT t.id, t.project_id, t.team_id, t.title, t.description, t.status, t.priority,
           t.start_date, t.end_date,
           a.user_id AS assigned_id, u.email AS assigned_email, tm.team_name AS team_name
    FROM tasks t
    LEFT JOIN task_assignments a ON a.task_id = t.id
    LEFT JOIN users u ON u.id = a.user_id
    LEFT JOIN teams tm ON tm.id = t.team_id
"""


def _iso(d) -> Optional[str]:
    return d.isoformat() if d else None


class SQLiteTaskRepository(SQLiteRepository):
    """
    Task CRUD + filtered listing.
    The current assignee lives in task_assignments (one row per task);
    listings join it back as assigned_id/assigned_email.
    Activity logging is done by TaskService, not here.
    """

    # -------------------------
    # CRUD
    # -------------------------
    def create_task(
        self,
        *,
        project_id: int,
        title: str,
        team_id: Optional[int] = None,
        description: Optional[str] = None,
        status: str = STATUS_NEW,
        priority: str = PRIORITY_MEDIUM,
        start_date=None,
        end_date=None,
        assigned_to: Optional[int] = None,
    ) -> int:
        with self._tx() as con:
            cur = con.execute(
                """
                INSERT INTO tasks(project_id, team_id, title, description, status, priority,
                                  start_date, end_date)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (project_id, team_id, title, description or "", status, priority,
                 _iso(start_date), _iso(end_date)),
            )
            task_id = int(cur.lastrowid)
            if assigned_to is not None:
                con.execute(
                    "INSERT INTO task_assignments(task_id, user_id) VALUES (?, ?)",
                    (task_id, assigned_to),
                )
        return task_id

    def get_task(self, task_id: int) -> Optional[Task]:
        row = self._fetch_one(_TASK_SELECT + " WHERE t.id = ?", (task_id,))
        return Task.from_row(row) if row else None

    def update_task(self, task: Task) -> bool:
        """Writes title/description/status/priority/team/dates; assignment is separate."""
        cur = self._execute(
            """
            UPDATE tasks
               SET team_id = ?, title = ?, description = ?, status = ?, priority = ?,
                   start_date = ?, end_date = ?
             WHERE id = ?
            """,
            (task.team_id, task.title, task.description or "", task.status, task.priority,
             _iso(task.start_date), _iso(task.end_date), task.id),
        )
        return cur.rowcount > 0

    def update_status(self, task_id: int, status: str) -> bool:
        cur = self._execute("UPDATE tasks SET status = ? WHERE id = ?", (status, task_id))
        return cur.rowcount > 0

    def assign_task(self, task_id: int, user_id: Optional[int]) -> None:
        if user_id is None:
            self._execute("DELETE FROM task_assignments WHERE task_id = ?", (task_id,))
            return
        self._execute(
            "INSERT OR REPLACE INTO task_assignments(task_id, user_id) VALUES (?, ?)",
            (task_id, user_id),
        )

    def assigned_user_id(self, task_id: int) -> Optional[int]:
        return self._scalar("SELECT user_id FROM task_assignments WHERE task_id = ?", (task_id,))

    def delete_task(self, task_id: int) -> bool:
        # assignments + activities cascade
        cur = self._execute("DELETE FROM tasks WHERE id = ?", (task_id,))
        return cur.rowcount > 0

    # -------------------------
    # Listings
    # -------------------------
    def list_tasks(self) -> List[Task]:
        return [Task.from_row(r) for r in self._fetch_all(_TASK_SELECT + " ORDER BY t.id")]

    def list_tasks_by_project(self, project_id: int) -> List[Task]:
        rows = self._fetch_all(_TASK_SELECT + " WHERE t.project_id = ? ORDER BY t.id", (project_id,))
        return [Task.from_row(r) for r in rows]

    def list_tasks_by_team(self, team_id: int) -> List[Task]:
        rows = self._fetch_all(_TASK_SELECT + " WHERE t.team_id = ? ORDER BY t.id", (team_id,))
        return [Task.from_row(r) for r in rows]

    def list_tasks_for_user(self, user_id: int) -> List[Task]:
        rows = self._fetch_all(_TASK_SELECT + " WHERE a.user_id = ? ORDER BY t.id", (user_id,))
        return [Task.from_row(r) for r in rows]

    def list_tasks_for_leader(self, leader_id: int) -> List[Task]:
        """Tasks of every team the user leads."""
        rows = self._fetch_all(
            _TASK_SELECT
            + """
            WHERE t.team_id IN (
                SELECT team_id FROM team_members WHERE user_id = ? AND is_leader = 1
            )
            ORDER BY t.id
            """,
            (leader_id,),
        )
        return [Task.from_row(r) for r in rows]

    def list_tasks_for_manager(self, manager_id: int) -> List[Task]:
        """Tasks of every project the user manages."""
        rows = self._fetch_all(
            _TASK_SELECT
            + """
            WHERE t.project_id IN (SELECT id FROM projects WHERE manager_id = ?)
            ORDER BY t.id
            """,
            (manager_id,),
        )
        return [Task.from_row(r) for r in rows]
