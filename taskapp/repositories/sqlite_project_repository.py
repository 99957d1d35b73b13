# Rev 0.2.0
# taskapp – SQLiteProjectRepository
from __future__ import annotations
from typing import List, Optional

from taskapp.models.entities import Project
from .base import SQLiteRepository


_PROJECT_COLS = "id, project_name, description, start_date, end_date, manager_id"


class SQLiteProjectRepository(SQLiteRepository):
    """
    Project repository.
    Listings keep insertion (id) order; reports rely on that order.
    """

    # ---------- public API ----------

    def list_projects(self) -> List[Project]:
        rows = self._fetch_all(f"SELECT {_PROJECT_COLS} FROM projects ORDER BY id")
        return [Project.from_row(r) for r in rows]

    def list_projects_for_manager(self, manager_id: int) -> List[Project]:
        rows = self._fetch_all(
            f"SELECT {_PROJECT_COLS} FROM projects WHERE manager_id = ? ORDER BY id",
            (manager_id,),
        )
        return [Project.from_row(r) for r in rows]

    def get_project(self, project_id: int) -> Optional[Project]:
        row = self._fetch_one(f"SELECT {_PROJECT_COLS} FROM projects WHERE id = ?", (project_id,))
        return Project.from_row(row) if row else None

    def project_name(self, project_id: int) -> Optional[str]:
        return self._scalar("SELECT project_name FROM projects WHERE id = ?", (project_id,))

    # ---------- mutations ----------

    def insert_project(self, project: Project) -> int:
        cur = self._execute(
            """
            INSERT INTO projects(project_name, description, start_date, end_date, manager_id)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                project.name,
                project.description or "",
                project.start_date.isoformat() if project.start_date else None,
                project.end_date.isoformat() if project.end_date else None,
                project.manager_id,
            ),
        )
        project.id = int(cur.lastrowid)
        return project.id

    def update_project(self, project: Project) -> bool:
        cur = self._execute(
            """
            UPDATE projects
               SET project_name = ?, description = ?, start_date = ?, end_date = ?, manager_id = ?
             WHERE id = ?
            """,
            (
                project.name,
                project.description or "",
                project.start_date.isoformat() if project.start_date else None,
                project.end_date.isoformat() if project.end_date else None,
                project.manager_id,
                project.id,
            ),
        )
        return cur.rowcount > 0

    def delete_project(self, project_id: int) -> bool:
        """Removes the project with its tasks, assignments, activities, teams and memberships."""
        with self._tx() as con:
            con.execute(
                "DELETE FROM team_members WHERE team_id IN (SELECT id FROM teams WHERE project_id = ?)",
                (project_id,),
            )
            con.execute("DELETE FROM tasks WHERE project_id = ?", (project_id,))
            con.execute("DELETE FROM teams WHERE project_id = ?", (project_id,))
            cur = con.execute("DELETE FROM projects WHERE id = ?", (project_id,))
            return cur.rowcount > 0
