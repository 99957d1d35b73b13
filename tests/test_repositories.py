# tests/test_repositories.py
# Integration tests for the SQLite repositories against the real migrations

from __future__ import annotations

import sqlite3
from datetime import date, timedelta

import pytest

from taskapp.models.entities import Settings, Team, User
from taskapp.models.types import ROLE_EMPLOYEE, STATUS_DONE
from taskapp.repositories.db import Database


def test_migrations_are_recorded_once(db):
    assert db.applied() == {"0001_schema.sql", "0002_seed_reference.sql"}
    assert db.pending() == []
    assert db.run_migrations() == []


def test_reference_data_seeded(repos):
    roles = repos.users.roles_map()
    assert roles == {1: "Administrator", 2: "Kierownik", 3: "Team Lider", 4: "Pracownik"}
    assert "Domyślna" in repos.users.group_names()


def test_foreign_keys_enabled(db_conn):
    (on,) = db_conn.execute("PRAGMA foreign_keys").fetchone()
    assert on == 1


# ---------- users / settings ----------

def test_get_user_by_email_is_case_insensitive(repos, world):
    u = repos.users.get_user_by_email("E1@Example.com")
    assert u is not None and u.id == world.e1.id
    assert repos.users.get_user_by_email("nobody@example.com") is None


def test_duplicate_email_rejected(repos, world):
    dup = User(id=None, name="X", last_name="Y", email="e1@example.com", password="h")
    with pytest.raises(sqlite3.IntegrityError):
        repos.users.insert_user(dup)


def test_update_user_keeps_password_when_not_given(repos, world):
    before = repos.users.get_user_by_id(world.e1.id).password
    edited = User(id=world.e1.id, name="Ewa", last_name="Nowa", email="e1@example.com",
                  role_id=ROLE_EMPLOYEE, group_id=2)
    assert repos.users.update_user(edited)
    after = repos.users.get_user_by_id(world.e1.id)
    assert after.last_name == "Nowa"
    assert after.password == before


def test_user_ids_in_group(repos, world):
    assert repos.users.user_ids_in_group("Programiści") == [world.l1.id, world.e1.id, world.e3.id]


def test_settings_upsert_and_theme(repos, world):
    assert repos.settings.get_settings(world.e1.id) is None
    repos.settings.upsert_settings(Settings(id=None, user_id=world.e1.id, theme="Dark", default_view="tasks"))
    repos.settings.update_theme(world.e1.id, "Light")
    s = repos.settings.get_settings(world.e1.id)
    assert (s.theme, s.default_view) == ("Light", "tasks")
    # settings flow into the joined user row
    assert repos.users.get_user_by_id(world.e1.id).default_view == "tasks"


def test_update_default_view_requires_value(repos, world):
    with pytest.raises(ValueError):
        repos.settings.update_default_view(world.e1.id, None)


def test_touch_password_change_sets_timestamp(repos, world):
    repos.settings.touch_password_change(world.e2.id)
    assert repos.settings.get_settings(world.e2.id).last_password_change


# ---------- projects / teams ----------

def test_projects_for_manager(repos, world):
    assert [p.name for p in repos.projects.list_projects_for_manager(world.m1.id)] == ["Alpha"]
    assert repos.projects.list_projects_for_manager(world.m3.id) == []
    assert repos.projects.get_project(world.alpha.id).start_date == date(2025, 1, 1)


def test_delete_project_cascades(repos, world):
    assert repos.projects.delete_project(world.alpha.id)
    assert repos.teams.get_team(world.red.id) is None
    assert repos.tasks.list_tasks_by_project(world.alpha.id) == []
    assert repos.teams.get_team(world.blue.id) is not None


def test_team_leadership_queries(repos, world):
    assert repos.teams.is_team_leader(world.red.id, world.l1.id)
    assert not repos.teams.is_team_leader(world.red.id, world.e1.id)
    assert repos.teams.team_ids_led_by(world.l1.id) == [world.red.id]
    assert [t.name for t in repos.teams.list_teams_led_by(world.l2.id)] == ["Blue"]
    assert [t.name for t in repos.teams.list_teams_for_manager(world.m1.id)] == ["Red"]
    assert repos.teams.team_id_for_user(world.e3.id) == world.blue.id
    assert repos.teams.team_id_for_user(world.admin.id) is None


def test_second_leader_in_team_is_rejected(repos, world):
    with pytest.raises(sqlite3.IntegrityError):
        repos.teams.add_member(world.red.id, world.e1.id, is_leader=True)


def test_set_members_rolls_back_on_two_leaders(repos, world):
    with pytest.raises(sqlite3.IntegrityError):
        repos.teams.set_members(world.red.id, [(world.e1.id, True), (world.e2.id, True)])
    # roster unchanged
    assert {u.id for u in repos.teams.team_members(world.red.id)} == {world.l1.id, world.e1.id, world.e2.id}


def test_add_and_remove_member(repos, world):
    extra = Team(id=None, name="Green", project_id=world.alpha.id)
    repos.teams.insert_team(extra)
    repos.teams.add_member(extra.id, world.e1.id)
    assert repos.teams.team_ids_for_user(world.e1.id) == [world.red.id, extra.id]
    assert repos.teams.remove_member(extra.id, world.e1.id)
    assert not repos.teams.remove_member(extra.id, world.e1.id)


# ---------- tasks ----------

def test_task_listing_joins_assignment_and_team(repos, world):
    t = repos.tasks.get_task(world.t_new)
    assert t.assigned_to == world.e1.id
    assert t.assigned_email == "e1@example.com"
    assert t.team_name == "Red"


def test_reassign_and_unassign(repos, world):
    repos.tasks.assign_task(world.t_new, world.e2.id)
    assert repos.tasks.assigned_user_id(world.t_new) == world.e2.id
    repos.tasks.assign_task(world.t_new, None)
    assert repos.tasks.assigned_user_id(world.t_new) is None


def test_status_vocabulary_enforced(repos, world):
    with pytest.raises(sqlite3.IntegrityError):
        repos.tasks.update_status(world.t_new, "Gotowe")
    assert repos.tasks.update_status(world.t_new, STATUS_DONE)


def test_tasks_for_user_and_leader(repos, world):
    mine = {t.id for t in repos.tasks.list_tasks_for_user(world.e2.id)}
    assert mine == {world.t_prog2, world.t_done}
    led = {t.id for t in repos.tasks.list_tasks_for_leader(world.l1.id)}
    assert led == {world.t_new, world.t_prog1, world.t_prog2, world.t_done}


# ---------- activities / reports ----------

def test_activity_log_is_append_only(repos, world, db_conn):
    aid = repos.activities.insert_activity(activity_type="LOGIN", description="x", user_id=world.e1.id)
    with pytest.raises(sqlite3.IntegrityError):
        db_conn.execute("UPDATE task_activities SET description = 'y' WHERE id = ?", (aid,))


def test_activity_filters_and_order(repos, world):
    first = repos.activities.insert_activity(activity_type="STATUS", description="a", task_id=world.t_new,
                                             user_id=world.l1.id)
    second = repos.activities.insert_activity(activity_type="COMMENT", description="b", task_id=world.t_new,
                                              user_id=world.e1.id)
    rows = repos.activities.list_activities(task_id=world.t_new)
    assert [a.id for a in rows] == [second, first]
    only_status = repos.activities.list_activities(activity_type="STATUS")
    assert [a.id for a in only_status] == [first]
    detailed = repos.activities.list_activities_detailed(user_id=world.e1.id)
    assert detailed[0].task_title == "Projekt UI"
    assert detailed[0].user_name == "Ewa Pracownik"
    assert len(repos.activities.list_activities(limit=1)) == 1


def test_activity_date_range_is_inclusive(repos, world):
    repos.activities.insert_activity(activity_type="LOGIN", description="today", user_id=world.e1.id)
    # created_at is UTC; widen by a day on each side so local midnight never matters
    today = date.today()
    rows = repos.activities.list_activities(start_date=today - timedelta(days=1), end_date=today + timedelta(days=1))
    assert len(rows) == 1
    assert repos.activities.list_activities(end_date=date(2000, 1, 1)) == []


def test_report_records(repos, world):
    rid = repos.reports.insert_report(report_name="Raport: X", report_type="TEAM_TASKS",
                                      created_by=world.l1.id, exported_file="/tmp/x.pdf")
    rows = repos.reports.list_reports(created_by=world.l1.id)
    assert [r.id for r in rows] == [rid]
    assert repos.reports.list_reports(created_by=world.l2.id) == []


def test_failed_migration_is_rolled_back(tmp_path):
    mig = tmp_path / "migrations"
    mig.mkdir()
    (mig / "0001_ok.sql").write_text("CREATE TABLE a (id INTEGER PRIMARY KEY);", encoding="utf-8")
    (mig / "0002_bad.sql").write_text(
        "CREATE TABLE b (id INTEGER PRIMARY KEY);\nINSERT INTO missing_table VALUES (1);", encoding="utf-8"
    )
    with Database(tmp_path / "m.db") as database:
        with pytest.raises(sqlite3.OperationalError):
            database.run_migrations(mig)
        assert database.applied() == {"0001_ok.sql"}
        tables = {r[0] for r in database.conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")}
        assert "a" in tables and "b" not in tables
        assert database.journal_mode() == "wal"


def test_tasks_for_manager_follow_project_ownership(repos, world):
    assert [t.title for t in repos.tasks.list_tasks_for_manager(world.m2.id)] == ["Migracja"]
    repos.projects.delete_project(world.beta.id)
    assert repos.tasks.list_tasks_for_manager(world.m2.id) == []
