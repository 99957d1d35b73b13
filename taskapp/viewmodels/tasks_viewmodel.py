# Rev 0.2.0
from __future__ import annotations

import sqlite3
from typing import List, Optional

from PySide6.QtCore import QObject, Signal

from taskapp.models.entities import Task
from taskapp.services.session import Session
from taskapp.utils.logging_setup import get_logger

log = get_logger("viewmodels.tasks")


class TasksViewModel(QObject):
    tasksReloaded = Signal(list)
    failed = Signal(str)

    def __init__(self, task_service, session: Session):
        super().__init__()
        self._service = task_service
        self._session = session
        self._status: Optional[str] = None
        self._search: Optional[str] = None
        self._rows: List[Task] = []

    # ---- filters
    def set_filters(self, status: Optional[str] = None, search: Optional[str] = None) -> None:
        self._status, self._search = status, (search or "").strip().lower() or None

    # ---- queries
    def reload(self) -> None:
        rows = self._service.tasks_for(self._session)
        if self._status:
            rows = [t for t in rows if t.status == self._status]
        if self._search:
            rows = [t for t in rows if self._search in t.title.lower()]
        self._rows = rows
        self.tasksReloaded.emit(rows)

    def task_at(self, row: int) -> Optional[Task]:
        return self._rows[row] if 0 <= row < len(self._rows) else None

    # ---- commands
    def create_task(self, task: Task) -> Optional[int]:
        return self._run(lambda: self._service.create(self._session, task))

    def save_task(self, task: Task) -> bool:
        return bool(self._run(lambda: self._service.edit(self._session, task)))

    def change_status(self, task_id: int, status: str) -> bool:
        return bool(self._run(lambda: self._service.change_status(self._session, task_id, status)))

    def comment(self, task_id: int, text: str) -> bool:
        return bool(self._run(lambda: self._service.comment(self._session, task_id, text)))

    def delete_task(self, task_id: int) -> bool:
        return bool(self._run(lambda: self._service.delete(self._session, task_id)))

    def _run(self, fn):
        try:
            result = fn()
        except (sqlite3.Error, ValueError) as e:
            log.exception("Task command failed")
            self.failed.emit(str(e))
            result = None
        self.reload()
        return result
