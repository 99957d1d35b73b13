# tests/test_visibility.py
from __future__ import annotations

import pytest

from taskapp.models.types import ROLE_EMPLOYEE, ROLE_TEAM_LEADER
from taskapp.services.errors import ReportPermissionError
from taskapp.services.session import Session


def test_admin_sees_everything(visibility, world):
    vis = visibility.for_session(Session(world.admin))
    assert [p.name for p in vis.projects] == ["Alpha", "Beta"]
    assert [t.name for t in vis.teams] == ["Red", "Blue"]
    assert len(vis.users) == 9


def test_manager_scope_is_own_projects(visibility, repos, world):
    vis = visibility.for_session(Session(world.m1))
    assert all(p.manager_id == world.m1.id for p in vis.projects)
    assert [t.name for t in vis.teams] == ["Red"]
    # only leaders and employees of the manager's teams
    assert [u.id for u in vis.users] == [world.l1.id, world.e1.id, world.e2.id]
    assert all(u.role_id in (ROLE_TEAM_LEADER, ROLE_EMPLOYEE) for u in vis.users)


def test_manager_without_projects_sees_nothing(visibility, world):
    vis = visibility.for_session(Session(world.m3))
    assert vis.projects == [] and vis.teams == [] and vis.users == []


def test_leader_scope_is_led_teams(visibility, repos, world):
    vis = visibility.for_session(Session(world.l2))
    assert all(repos.teams.is_team_leader(t.id, world.l2.id) for t in vis.teams)
    assert [p.name for p in vis.projects] == ["Beta"]
    assert [u.id for u in vis.users] == [world.e3.id]


def test_employee_cannot_resolve_visibility(visibility, world):
    with pytest.raises(ReportPermissionError):
        visibility.for_session(Session(world.e1))


def test_restrict_keeps_authorized_order_and_drops_the_rest(visibility, world):
    vis = visibility.for_session(Session(world.m1))
    assert vis.restrict_teams([]) == vis.teams
    assert vis.restrict_teams(None) == vis.teams
    assert vis.restrict_teams([world.blue.id]) == []
    assert [t.id for t in vis.restrict_teams([world.blue.id, world.red.id])] == [world.red.id]

    admin = visibility.for_session(Session(world.admin))
    picked = admin.restrict_projects([world.beta.id, world.alpha.id])
    assert [p.id for p in picked] == [world.alpha.id, world.beta.id]
    assert [u.id for u in admin.restrict_users([world.e2.id])] == [world.e2.id]
