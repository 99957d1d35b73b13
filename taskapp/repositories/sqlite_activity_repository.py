# Rev 0.2.0
from __future__ import annotations

from datetime import date, timedelta
from typing import List, Optional

from taskapp.models.entities import TaskActivity
from .base import SQLiteRepository


class SQLiteActivityRepository(SQLiteRepository):
    """
    Append-only audit log. No update/delete here;
    the schema trigger rejects UPDATE and rows only leave via task cascade.
    """

    def insert_activity(
        self,
        *,
        activity_type: str,
        description: str,
        task_id: Optional[int] = None,
        user_id: Optional[int] = None,
    ) -> int:
        cur = self._execute(
            """
            INSERT INTO task_activities(task_id, user_id, activity_type, description)
            VALUES (?, ?, ?, ?)
            """,
            (task_id, user_id, activity_type, description),
        )
        return int(cur.lastrowid)

    def list_activities(
        self,
        *,
        task_id: Optional[int] = None,
        user_id: Optional[int] = None,
        activity_type: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> List[TaskActivity]:
        """Newest first. end_date is inclusive (whole day)."""
        sql, params = self._filtered(
            """
            SELECT a.id, a.task_id, a.user_id, a.activity_type, a.description, a.created_at
            FROM task_activities a
            """,
            task_id, user_id, activity_type, start_date, end_date, limit,
        )
        return [TaskActivity.from_row(r) for r in self._fetch_all(sql, params)]

    def list_activities_detailed(
        self,
        *,
        task_id: Optional[int] = None,
        user_id: Optional[int] = None,
        activity_type: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> List[TaskActivity]:
        sql, params = self._filtered(
            """
            SELECT a.id, a.task_id, a.user_id, a.activity_type, a.description, a.created_at,
                   t.title AS task_title, u.name AS user_name, u.last_name AS user_last_name
            FROM task_activities a
            LEFT JOIN tasks t ON t.id = a.task_id
            LEFT JOIN users u ON u.id = a.user_id
            """,
            task_id, user_id, activity_type, start_date, end_date, limit,
        )
        return [TaskActivity.from_row(r) for r in self._fetch_all(sql, params)]

    # -------------------------
    # helpers
    # -------------------------
    @staticmethod
    def _filtered(base_sql, task_id, user_id, activity_type, start_date, end_date, limit):
        where, params = [], []
        if task_id is not None:
            where.append("a.task_id = ?")
            params.append(task_id)
        if user_id is not None:
            where.append("a.user_id = ?")
            params.append(user_id)
        if activity_type:
            where.append("a.activity_type = ?")
            params.append(activity_type)
        if start_date is not None:
            where.append("a.created_at >= ?")
            params.append(start_date.isoformat())
        if end_date is not None:
            where.append("a.created_at < ?")
            params.append((end_date + timedelta(days=1)).isoformat())

        sql = base_sql
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY a.created_at DESC, a.id DESC"
        if limit:
            sql += " LIMIT ?"
            params.append(int(limit))
        return sql, tuple(params)
