# tests/test_migrate_tool.py
# Smoke tests for the command-line tools in taskapp/tools
from __future__ import annotations

from datetime import date

from taskapp.repositories.db import Database
from taskapp.repositories.sqlite_user_repository import SQLiteUserRepository
from taskapp.tools import dev_seed, migrate


def test_up_then_verify(tmp_path, capsys):
    db_path = tmp_path / "app.db"
    assert migrate.main(["up", "--db", str(db_path)]) == 0
    out = capsys.readouterr().out
    assert "Applied migration: 0001_schema.sql" in out

    assert migrate.main(["up", "--db", str(db_path)]) == 0
    assert "already up to date" in capsys.readouterr().out

    assert migrate.main(["verify", "--db", str(db_path)]) == 0
    assert "Verification passed" in capsys.readouterr().out


def test_status_lists_applied(tmp_path, capsys):
    db_path = tmp_path / "app.db"
    migrate.main(["up", "--db", str(db_path)])
    capsys.readouterr()
    assert migrate.main(["status", "--db", str(db_path)]) == 0
    out = capsys.readouterr().out
    assert "Applied count: 2" in out
    assert "Pending count: 0" in out


def test_verify_missing_db(tmp_path):
    assert migrate.main(["verify", "--db", str(tmp_path / "none.db")]) == 1


def test_rebuild_with_seed(tmp_path, capsys):
    db_path = tmp_path / "app.db"
    migrate.main(["up", "--db", str(db_path)])
    assert migrate.main(["rebuild", "--db", str(db_path), "--seed"]) == 0
    assert "Rebuild complete" in capsys.readouterr().out

    db = Database(db_path)
    try:
        assert len(SQLiteUserRepository(db).list_users()) == len(dev_seed._USERS)
    finally:
        db.close()


def test_seed_is_idempotent(db):
    counts = dev_seed.seed(db, today=date(2025, 3, 14))
    assert counts == {"users": 9, "projects": 2, "teams": 3, "tasks": 7}
    admin = SQLiteUserRepository(db).get_user_by_email("admin@taskapp.local")
    assert admin is not None and admin.role_id == 1
    assert dev_seed.seed(db) == {"users": 0, "projects": 0, "teams": 0, "tasks": 0}
