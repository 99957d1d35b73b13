# Rev 0.2.0
from __future__ import annotations

from typing import List, Optional

from taskapp.models.entities import Task
from taskapp.models.types import TASK_PRIORITIES, TASK_STATUSES
from taskapp.services.session import Session
from taskapp.utils.logging_setup import get_logger

log = get_logger("services.task")

_TRACKED_FIELDS = ("title", "description", "priority", "team_id", "start_date", "end_date")


class TaskService:
    """Task writes paired with their activity entries."""

    def __init__(self, tasks, activity):
        self._tasks = tasks
        self._activity = activity

    def tasks_for(self, session: Session) -> List[Task]:
        if session.is_admin:
            return self._tasks.list_tasks()
        if session.is_manager:
            return self._tasks.list_tasks_for_manager(session.user_id)
        if session.is_team_leader:
            return self._tasks.list_tasks_for_leader(session.user_id)
        return self._tasks.list_tasks_for_user(session.user_id)

    def create(self, session: Session, task: Task) -> int:
        self._check_vocab(task.status, task.priority)
        task.id = self._tasks.create_task(
            project_id=task.project_id, team_id=task.team_id, title=task.title,
            description=task.description, status=task.status, priority=task.priority,
            start_date=task.start_date, end_date=task.end_date, assigned_to=task.assigned_to,
        )
        self._activity.log_task_creation(task.id, session.user_id, task.title, task.assigned_to)
        log.info("Task %s created by %s", task.id, session.user_id)
        return task.id

    def edit(self, session: Session, task: Task) -> bool:
        before = self._tasks.get_task(task.id)
        if before is None:
            return False
        self._check_vocab(task.status, task.priority)
        if not self._tasks.update_task(task):
            return False
        for field in _TRACKED_FIELDS:
            old, new = getattr(before, field), getattr(task, field)
            if old != new:
                self._activity.log_task_update(task.id, session.user_id, task.title, field, old, new)
        if before.status != task.status:
            self._activity.log_status_change(task.id, session.user_id, task.title, before.status, task.status)
        if before.assigned_to != task.assigned_to:
            self.reassign(session, task.id, task.assigned_to)
        return True

    def change_status(self, session: Session, task_id: int, new_status: str) -> bool:
        task = self._tasks.get_task(task_id)
        if task is None:
            return False
        self._check_vocab(new_status, task.priority)
        if task.status == new_status:
            return True
        self._tasks.update_status(task_id, new_status)
        self._activity.log_status_change(task_id, session.user_id, task.title, task.status, new_status)
        return True

    def reassign(self, session: Session, task_id: int, user_id: Optional[int]) -> bool:
        task = self._tasks.get_task(task_id)
        if task is None:
            return False
        old = self._tasks.assigned_user_id(task_id)
        if old == user_id:
            return True
        self._tasks.assign_task(task_id, user_id)
        self._activity.log_assignment(task_id, session.user_id, task.title, old, user_id)
        return True

    def comment(self, session: Session, task_id: int, text: str) -> bool:
        task = self._tasks.get_task(task_id)
        if task is None or not text.strip():
            return False
        return self._activity.log_task_comment(task_id, session.user_id, task.title, text.strip())

    def delete(self, session: Session, task_id: int) -> bool:
        ok = self._tasks.delete_task(task_id)
        if ok:
            log.info("Task %s deleted by %s", task_id, session.user_id)
        return ok

    @staticmethod
    def _check_vocab(status: str, priority: str) -> None:
        if status not in TASK_STATUSES:
            raise ValueError(f"Nieznany status: {status}")
        if priority not in TASK_PRIORITIES:
            raise ValueError(f"Nieznany priorytet: {priority}")
