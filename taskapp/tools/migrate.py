# File: taskapp/tools/migrate.py
# Usage examples:
#   python -m taskapp.tools.migrate up
#   python -m taskapp.tools.migrate status
#   python -m taskapp.tools.migrate rebuild --seed
#   python -m taskapp.tools.migrate verify --db /path/to/taskapp.db
#
# Notes:
# - DB path defaults to env TASKAPP_DB or the XDG data dir
# - Applies taskapp/migrations/*.sql in lexicographic order via Database.run_migrations
# - --seed fills the demo dataset from taskapp.tools.dev_seed

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from taskapp.repositories.db import Database
from taskapp.utils.paths import DB_PATH, MIGRATIONS_DIR

REQUIRED_TABLES = [
    "roles",
    "user_groups",
    "users",
    "settings",
    "projects",
    "teams",
    "team_members",
    "tasks",
    "task_assignments",
    "task_activities",
    "reports",
    "schema_migrations",
]
REQUIRED_TRIGGERS = ["trg_task_activities_no_update"]
REQUIRED_INDEXES = ["ux_team_members_single_leader"]


def _seed(db: Database) -> None:
    from taskapp.tools.dev_seed import seed

    counts = seed(db)
    print("→ Seeded: " + ", ".join(f"{k}={v}" for k, v in counts.items()))


def cmd_status(db_path: Path, migrations_dir: Path) -> int:
    db = Database(db_path)
    try:
        applied = sorted(db.applied())
        pending = [p.name for p in db.pending(migrations_dir)]
        print(f"DB: {db_path}")
        print(f"Migrations dir: {migrations_dir}")
        print(f"Applied count: {len(applied)}")
        for name in applied:
            print(f"  ✔ {name}")
        print(f"Pending count: {len(pending)}")
        for name in pending:
            print(f"  ⧗ {name}")
        return 0
    finally:
        db.close()


def cmd_up(db_path: Path, migrations_dir: Path, seed: bool) -> int:
    db = Database(db_path)
    try:
        applied = db.run_migrations(migrations_dir)
        for name in applied:
            print(f"→ Applied migration: {name}")
        if applied:
            print("✓ Database is up to date.")
        else:
            print("✓ No changes. Database already up to date.")
        if seed:
            _seed(db)
        return 0
    finally:
        db.close()


def cmd_rebuild(db_path: Path, migrations_dir: Path, seed: bool) -> int:
    # Drop DB file (and WAL side files) and rebuild from migrations
    for suffix in ("", "-wal", "-shm"):
        p = Path(f"{db_path}{suffix}")
        if p.exists():
            print(f"⟲ Rebuilding: removing {p}")
            p.unlink()
    rc = cmd_up(db_path, migrations_dir, seed)
    if rc == 0:
        print("✓ Rebuild complete.")
    return rc


def cmd_verify(db_path: Path) -> int:
    if not db_path.exists():
        print(f"❌ Database not found: {db_path}")
        return 1
    db = Database(db_path)
    try:
        objects = {
            (r["type"], r["name"])
            for r in db.conn.execute("SELECT type, name FROM sqlite_master WHERE name NOT LIKE 'sqlite_%'")
        }
        missing = [t for t in REQUIRED_TABLES if ("table", t) not in objects]
        if missing:
            print("❌ Missing tables:", ", ".join(missing))
            return 2
        trig_missing = [t for t in REQUIRED_TRIGGERS if ("trigger", t) not in objects]
        if trig_missing:
            print("❌ Missing triggers:", ", ".join(trig_missing))
            return 3
        idx_missing = [i for i in REQUIRED_INDEXES if ("index", i) not in objects]
        if idx_missing:
            print("❌ Missing indexes:", ", ".join(idx_missing))
            return 4

        mode = db.journal_mode()
        if mode != "wal":
            print(f"❌ journal_mode is not WAL (got {mode})")
            return 5

        print("✓ Verification passed.")
        return 0
    finally:
        db.close()


def parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="taskapp-migrate", description="SQLite migration runner for taskapp")
    sub = p.add_subparsers(dest="cmd", required=True)

    def add_common(sp: argparse.ArgumentParser):
        sp.add_argument("--db", type=Path, default=DB_PATH, help=f"Path to SQLite DB (default: {DB_PATH})")
        sp.add_argument("--migrations-dir", type=Path, default=MIGRATIONS_DIR,
                        help=f"Migrations directory (default: {MIGRATIONS_DIR})")

    s_up = sub.add_parser("up", help="Run pending migrations")
    add_common(s_up)
    s_up.add_argument("--seed", action="store_true", help="Fill the demo dataset after applying")

    s_rebuild = sub.add_parser("rebuild", help="Drop and recreate DB from migrations")
    add_common(s_rebuild)
    s_rebuild.add_argument("--seed", action="store_true", help="Fill the demo dataset after rebuild")

    s_status = sub.add_parser("status", help="Show applied and pending migrations")
    add_common(s_status)

    s_verify = sub.add_parser("verify", help="Lightweight structural verification")
    s_verify.add_argument("--db", type=Path, default=DB_PATH, help=f"Path to SQLite DB (default: {DB_PATH})")

    return p.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    ns = parse_args(sys.argv[1:] if argv is None else argv)
    if ns.cmd == "status":
        return cmd_status(ns.db, ns.migrations_dir)
    if ns.cmd == "up":
        return cmd_up(ns.db, ns.migrations_dir, ns.seed)
    if ns.cmd == "rebuild":
        return cmd_rebuild(ns.db, ns.migrations_dir, ns.seed)
    if ns.cmd == "verify":
        return cmd_verify(ns.db)
    raise SystemExit(1)


if __name__ == "__main__":
    raise SystemExit(main())
