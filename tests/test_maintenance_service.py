# tests/test_maintenance_service.py
from __future__ import annotations

import sqlite3
from contextlib import closing

import pytest

from taskapp.models.entities import User
from taskapp.repositories.db import Database
from taskapp.services.errors import MaintenanceError
from taskapp.services.maintenance_service import MaintenanceService

from conftest import FIXED_NOW


@pytest.fixture()
def maintenance(db):
    return MaintenanceService(db, clock=lambda: FIXED_NOW)


def test_backup_writes_timestamped_copy(maintenance, world, tmp_path):
    target = maintenance.backup(tmp_path / "backups")
    assert target.name == "taskapp_backup_20250314_093000.db"
    assert target.is_file() and target.stat().st_size > 0


def test_restore_brings_back_backup_state(maintenance, repos, world, tmp_path):
    target = maintenance.backup(tmp_path / "backups")
    repos.users.insert_user(User(id=None, name="Nowy", last_name="Po", email="late@example.com", password="x"))
    assert repos.users.get_user_by_email("late@example.com") is not None

    maintenance.restore(target)
    assert repos.users.get_user_by_email("late@example.com") is None
    assert repos.users.get_user_by_email("e1@example.com") is not None


def test_restore_missing_file(maintenance, tmp_path):
    with pytest.raises(MaintenanceError):
        maintenance.restore(tmp_path / "missing.db")


def test_optimize_and_integrity(maintenance, world):
    maintenance.optimize()
    assert maintenance.integrity_check() == []


def test_maintenance_uses_its_own_connection(maintenance, db_conn, world, tmp_path):
    # an open write transaction on the UI connection stays invisible to backups
    db_conn.execute("BEGIN")
    db_conn.execute("INSERT INTO users(name, last_name, email, password) VALUES ('Szkic', 'Tx', 'draft@example.com', 'x')")
    try:
        assert maintenance.integrity_check() == []
        target = maintenance.backup(tmp_path / "backups")
    finally:
        db_conn.rollback()

    with closing(sqlite3.connect(str(target))) as con:
        (drafts,) = con.execute("SELECT COUNT(*) FROM users WHERE email = ?", ("draft@example.com",)).fetchone()
        (employees,) = con.execute("SELECT COUNT(*) FROM users WHERE email = ?", ("e1@example.com",)).fetchone()
    assert (drafts, employees) == (0, 1)


def test_in_memory_database_has_no_side_connection():
    with Database(path=":memory:") as mem:
        with pytest.raises(ValueError):
            mem.open_connection()
