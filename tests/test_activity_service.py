# tests/test_activity_service.py
from __future__ import annotations

import sqlite3

from taskapp.services.activity_service import ActivityService


class _BrokenRepo:
    def insert_activity(self, **kwargs):
        raise sqlite3.OperationalError("database is locked")


def _last(repos, activity_type):
    rows = repos.activities.list_activities(activity_type=activity_type)
    assert rows, f"no {activity_type} entry"
    return rows[0]


def test_task_event_descriptions(activity, repos, world):
    activity.log_task_creation(world.t_new, world.l1.id, "Projekt UI", world.e1.id)
    assert _last(repos, "CREATE").description == (
        f'Utworzono zadanie "Projekt UI" i przypisano do użytkownika ID: {world.e1.id}'
    )

    activity.log_status_change(world.t_new, world.e1.id, "Projekt UI", "Nowe", "W toku")
    entry = _last(repos, "STATUS")
    assert entry.description == 'Zmieniono status zadania "Projekt UI" z "Nowe" na "W toku"'
    assert entry.task_id == world.t_new

    activity.log_task_comment(world.t_new, world.e1.id, "Projekt UI", "gotowe do review")
    assert _last(repos, "COMMENT").description == 'Dodano komentarz do zadania "Projekt UI": gotowe do review'


def test_assignment_wording_depends_on_previous_assignee(activity, repos, world):
    activity.log_assignment(world.t_new, world.l1.id, "Projekt UI", None, world.e2.id)
    assert _last(repos, "ASSIGN").description == f'Przypisano zadanie "Projekt UI" do użytkownika ID: {world.e2.id}'

    activity.log_assignment(world.t_new, world.l1.id, "Projekt UI", world.e2.id, world.e1.id)
    assert _last(repos, "ASSIGN").description == (
        f'Zmieniono przypisanie zadania "Projekt UI" z użytkownika ID: {world.e2.id} '
        f'na użytkownika ID: {world.e1.id}'
    )


def test_management_entries(activity, repos, world):
    activity.log_user_management(world.admin.id, "create", world.e3.id)
    assert _last(repos, "USER_MANAGEMENT").description == (
        f"Administrator ID: {world.admin.id} wykonał akcję 'create' na użytkowniku ID: {world.e3.id}."
    )
    activity.log_team_management(world.m1.id, "update", world.red.id, "3 członków")
    assert _last(repos, "TEAM_MANAGEMENT").description.endswith("na zespole ID: %d. 3 członków" % world.red.id)
    activity.log_config_change(world.admin.id, "theme", "Light", "Dark")
    assert "z 'Light' na 'Dark'" in _last(repos, "CONFIG").description


def test_system_error_includes_trace(activity, repos, world):
    try:
        raise ValueError("zły format")
    except ValueError as e:
        assert activity.log_system_error(world.admin.id, e)
    desc = _last(repos, "ERROR").description
    assert desc.startswith("Błąd typu 'ValueError': zły format")
    assert "Stack trace:" in desc


def test_system_error_from_plain_message(activity, repos):
    assert activity.log_system_error(None, "IOError", "brak dysku")
    assert _last(repos, "ERROR").description == "Błąd typu 'IOError': brak dysku"


def test_audit_failure_does_not_raise():
    assert ActivityService(_BrokenRepo()).log_login(1) is False
