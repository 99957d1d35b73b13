# tests/test_navigation.py
from __future__ import annotations

import pytest

from taskapp.models.types import ROLE_ADMIN, ROLE_EMPLOYEE, ROLE_MANAGER, ROLE_TEAM_LEADER
from taskapp.ui.navigation import entries_for_role, initial_key


@pytest.mark.parametrize(
    "role, keys",
    [
        (ROLE_ADMIN, ["users", "teams", "projects", "tasks", "reports", "activity", "system", "settings"]),
        (ROLE_MANAGER, ["projects", "teams", "tasks", "reports", "settings"]),
        (ROLE_TEAM_LEADER, ["tasks", "teams", "reports", "settings"]),
        (ROLE_EMPLOYEE, ["tasks", "settings"]),
        (99, ["settings"]),
    ],
)
def test_entries_per_role(role, keys):
    assert [e.key for e in entries_for_role(role)] == keys


def test_employee_sees_my_tasks_label():
    assert entries_for_role(ROLE_EMPLOYEE)[0].label == "Moje zadania"


def test_initial_key_uses_saved_view_when_reachable():
    assert initial_key(ROLE_ADMIN, "reports") == "reports"
    assert initial_key(ROLE_ADMIN, " Raporty ") == "reports"
    assert initial_key(ROLE_TEAM_LEADER, "teams") == "teams"


def test_initial_key_falls_back_to_first_entry():
    assert initial_key(ROLE_MANAGER, "system") == "projects"
    assert initial_key(ROLE_EMPLOYEE, None) == "tasks"
    assert initial_key(ROLE_EMPLOYEE, "") == "tasks"
