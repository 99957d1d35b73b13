# tests/test_task_service.py
from __future__ import annotations

from dataclasses import replace

import pytest

from taskapp.models.entities import Task
from taskapp.models.types import PRIORITY_HIGH, STATUS_DONE, STATUS_IN_PROGRESS
from taskapp.services.session import Session
from taskapp.services.task_service import TaskService


@pytest.fixture()
def svc(repos, activity):
    return TaskService(repos.tasks, activity)


def _types(repos, task_id):
    return sorted(a.activity_type for a in repos.activities.list_activities(task_id=task_id))


def test_tasks_for_each_role(svc, world):
    assert len(svc.tasks_for(Session(world.admin))) == 5
    assert {t.id for t in svc.tasks_for(Session(world.l2))} == {world.t_blue}
    assert {t.id for t in svc.tasks_for(Session(world.e1))} == {world.t_new, world.t_prog1}


def test_manager_sees_every_task_of_own_projects(svc, world):
    mine = svc.tasks_for(Session(world.m1))
    assert [t.id for t in mine] == [world.t_new, world.t_prog1, world.t_prog2, world.t_done]
    assert all(t.project_id == world.alpha.id for t in mine)
    assert [t.id for t in svc.tasks_for(Session(world.m2))] == [world.t_blue]
    assert svc.tasks_for(Session(world.m3)) == []


def test_create_logs_creation(svc, repos, world):
    task = Task(id=None, project_id=world.beta.id, team_id=world.blue.id, title="Raport SLA",
                assigned_to=world.e3.id)
    task_id = svc.create(Session(world.l2), task)
    assert task.id == task_id
    assert repos.tasks.get_task(task_id).assigned_to == world.e3.id
    assert _types(repos, task_id) == ["CREATE"]


def test_create_rejects_unknown_status(svc, world):
    task = Task(id=None, project_id=world.beta.id, team_id=None, title="x", status="Gotowe")
    with pytest.raises(ValueError):
        svc.create(Session(world.admin), task)


def test_edit_logs_each_change(svc, repos, world):
    before = repos.tasks.get_task(world.t_new)
    edited = replace(before, status=STATUS_IN_PROGRESS, priority=PRIORITY_HIGH, assigned_to=world.e2.id)
    assert svc.edit(Session(world.l1), edited)

    after = repos.tasks.get_task(world.t_new)
    assert (after.status, after.priority, after.assigned_to) == (STATUS_IN_PROGRESS, PRIORITY_HIGH, world.e2.id)
    assert _types(repos, world.t_new) == ["ASSIGN", "STATUS", "UPDATE"]
    (update,) = repos.activities.list_activities(task_id=world.t_new, activity_type="UPDATE")
    assert 'pole "priority"' in update.description


def test_edit_missing_task(svc, world):
    ghost = Task(id=9999, project_id=world.alpha.id, team_id=None, title="ghost")
    assert svc.edit(Session(world.admin), ghost) is False


def test_change_status_only_logs_real_changes(svc, repos, world):
    session = Session(world.e1)
    assert svc.change_status(session, world.t_prog1, STATUS_IN_PROGRESS)
    assert _types(repos, world.t_prog1) == []
    assert svc.change_status(session, world.t_prog1, STATUS_DONE)
    assert repos.tasks.get_task(world.t_prog1).status == STATUS_DONE
    assert _types(repos, world.t_prog1) == ["STATUS"]


def test_reassign_and_comment(svc, repos, world):
    session = Session(world.l1)
    assert svc.reassign(session, world.t_done, world.e1.id)
    assert svc.reassign(session, world.t_done, world.e1.id)
    assert _types(repos, world.t_done) == ["ASSIGN"]
    assert not svc.comment(session, world.t_done, "   ")
    assert svc.comment(session, world.t_done, " ok ")
    assert _types(repos, world.t_done) == ["ASSIGN", "COMMENT"]


def test_delete(svc, repos, world):
    assert svc.delete(Session(world.admin), world.t_blue)
    assert repos.tasks.get_task(world.t_blue) is None
    assert not svc.delete(Session(world.admin), world.t_blue)
