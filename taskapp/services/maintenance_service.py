# Rev 0.2.0
"""
Database maintenance for the admin system view.

The UI runs these calls on a QThreadPool worker, so every call opens its own
connection to the database file (Database.open_connection) and closes it
when done; the UI thread's shared connection is never touched from here.
SQLite file locking serializes the two. backup()/restore() use sqlite3's
online backup API.
"""
from __future__ import annotations

import sqlite3
from contextlib import closing
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

from taskapp.services.errors import MaintenanceError
from taskapp.utils.logging_setup import get_logger
from taskapp.utils.paths import BACKUPS_DIR

log = get_logger("services.maintenance")


class MaintenanceService:
    def __init__(self, db, clock: Optional[Callable[[], datetime]] = None):
        self._db = db
        self._clock = clock or datetime.now

    def _connect(self) -> closing:
        return closing(self._db.open_connection())

    def backup(self, dest_dir: Path | str = BACKUPS_DIR) -> Path:
        dest_dir = Path(dest_dir)
        target = dest_dir / f"taskapp_backup_{self._clock().strftime('%Y%m%d_%H%M%S')}.db"
        try:
            dest_dir.mkdir(parents=True, exist_ok=True)
            with self._connect() as con, closing(sqlite3.connect(str(target))) as out:
                con.execute("PRAGMA wal_checkpoint(PASSIVE);")
                con.backup(out)
        except (OSError, sqlite3.Error) as e:
            log.exception("Backup to %s failed", target)
            raise MaintenanceError(f"Kopia zapasowa nie powiodła się: {e}") from e
        log.info("Backup written: %s", target)
        return target

    def restore(self, backup_file: Path | str) -> None:
        """Overwrite the database file with a backup; open views should reload afterwards."""
        backup_file = Path(backup_file)
        if not backup_file.is_file():
            raise MaintenanceError(f"Plik kopii zapasowej nie istnieje: {backup_file}")
        try:
            with closing(sqlite3.connect(str(backup_file))) as src, self._connect() as con:
                src.backup(con)
        except sqlite3.Error as e:
            log.exception("Restore from %s failed", backup_file)
            raise MaintenanceError(f"Przywracanie nie powiodło się: {e}") from e
        log.info("Database restored from %s", backup_file)

    def optimize(self) -> None:
        try:
            with self._connect() as con:
                con.execute("VACUUM")
                con.execute("ANALYZE")
        except sqlite3.Error as e:
            log.exception("Optimize failed")
            raise MaintenanceError(f"Optymalizacja nie powiodła się: {e}") from e
        log.info("Database optimized (VACUUM + ANALYZE)")

    def integrity_check(self) -> List[str]:
        """Problems reported by PRAGMA integrity_check; empty when the database is fine."""
        try:
            with self._connect() as con:
                rows = con.execute("PRAGMA integrity_check").fetchall()
        except sqlite3.Error as e:
            raise MaintenanceError(f"Sprawdzenie integralności nie powiodło się: {e}") from e
        problems = [r[0] for r in rows if r[0] != "ok"]
        if problems:
            log.warning("Integrity check found %d problem(s)", len(problems))
        return problems
