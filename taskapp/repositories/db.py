# Rev 0.2.0

"""SQLite connection & migration runner (Rev 0.2.0)
- one shared autocommit connection; repositories open explicit transactions
- WAL journal, foreign_keys=ON, rows as sqlite3.Row
- migrations: taskapp/migrations/*.sql, lexical order, each file applied
  atomically together with its schema_migrations row
"""
from __future__ import annotations
import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from taskapp.utils.paths import DB_PATH, MIGRATIONS_DIR


log = logging.getLogger("taskapp.db")

_MEMORY = ":memory:"


class Database:
    def __init__(self, path: Path | str = DB_PATH) -> None:
        self.path = Path(path)
        in_memory = str(path) == _MEMORY
        if not in_memory:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(_MEMORY if in_memory else str(self.path),
                                    isolation_level=None, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA foreign_keys=ON;")
        if not in_memory:
            self.conn.execute("PRAGMA journal_mode=WAL;")
        self.conn.execute(
            "CREATE TABLE IF NOT EXISTS schema_migrations (filename TEXT PRIMARY KEY, applied_at TEXT NOT NULL)"
        )
        log.info("SQLite open %s (journal=%s)", self.path, self.journal_mode())

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self.conn.close()

    # ---------- pragmas / side connections ----------

    def journal_mode(self) -> str:
        (mode,) = self.conn.execute("PRAGMA journal_mode;").fetchone()
        return str(mode).lower()

    def open_connection(self, timeout: float = 5.0) -> sqlite3.Connection:
        """A separate autocommit connection to the same file, for work off the UI thread."""
        if str(self.path) == _MEMORY:
            raise ValueError("an in-memory database cannot be shared between connections")
        con = sqlite3.connect(str(self.path), timeout=timeout, isolation_level=None)
        con.execute("PRAGMA foreign_keys=ON;")
        return con

    # ---------- migrations ----------

    def applied(self) -> set[str]:
        rows = self.conn.execute("SELECT filename FROM schema_migrations").fetchall()
        return {r[0] for r in rows}

    def pending(self, migrations_dir: Path = MIGRATIONS_DIR) -> list[Path]:
        done = self.applied()
        return [p for p in sorted(Path(migrations_dir).glob("*.sql")) if p.name not in done]

    def _apply_one(self, migration: Path) -> None:
        stamp = datetime.now(timezone.utc).isoformat()
        script = (
            "BEGIN;\n"
            f"{migration.read_text(encoding='utf-8')}\n"
            f"INSERT INTO schema_migrations(filename, applied_at) VALUES ('{migration.name}', '{stamp}');\n"
            "COMMIT;"
        )
        try:
            self.conn.executescript(script)
        except sqlite3.Error:
            if self.conn.in_transaction:
                self.conn.rollback()
            log.exception("Migration %s failed; rolled back", migration.name)
            raise

    def run_migrations(self, migrations_dir: Path = MIGRATIONS_DIR) -> list[str]:
        """Apply what is pending; returns the applied file names."""
        todo = self.pending(migrations_dir)
        for migration in todo:
            self._apply_one(migration)
            log.info("Applied migration %s", migration.name)
        return [m.name for m in todo]
