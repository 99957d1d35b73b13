# Rev 0.2.0
# taskapp – shared plumbing for the SQLite repositories
from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Union


class SQLiteRepository:
    """
    Base for the SQLite*Repository classes.

    Accepts a raw sqlite3.Connection, or a wrapper exposing `.conn`
    (repositories.db.Database) or `.connect()`.
    """

    def __init__(self, db_or_conn: Union[sqlite3.Connection, Any]):
        self._db_or_conn = db_or_conn
        self._tx_depth = 0

    # -------------------------
    # Connection handling
    # -------------------------
    def _conn(self) -> sqlite3.Connection:
        c = None
        if isinstance(self._db_or_conn, sqlite3.Connection):
            c = self._db_or_conn
        elif hasattr(self._db_or_conn, "conn") and isinstance(self._db_or_conn.conn, sqlite3.Connection):
            c = self._db_or_conn.conn
        elif hasattr(self._db_or_conn, "connect"):
            maybe = self._db_or_conn.connect()
            if isinstance(maybe, sqlite3.Connection):
                c = maybe
        if c is None:
            raise RuntimeError(
                f"{type(self).__name__}: could not obtain sqlite3.Connection "
                "(expected .conn or .connect() on wrapper, or a raw Connection)."
            )
        return c

    @contextmanager
    def _tx(self) -> Iterator[sqlite3.Connection]:
        """Explicit transaction; nested calls join the outer one."""
        con = self._conn()
        if self._tx_depth:
            self._tx_depth += 1
            try:
                yield con
            finally:
                self._tx_depth -= 1
            return
        if con.in_transaction:
            con.commit()
        con.execute("BEGIN")
        self._tx_depth = 1
        try:
            yield con
        except BaseException:
            con.rollback()
            raise
        else:
            con.commit()
        finally:
            self._tx_depth = 0

    def _execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        con = self._conn()
        cur = con.execute(sql, params)
        # connections not opened in autocommit mode hold an implicit transaction
        if not self._tx_depth and con.isolation_level is not None and con.in_transaction:
            con.commit()
        return cur

    def _fetch_all(self, sql: str, params: tuple = ()) -> List[Dict[str, Any]]:
        cur = self._conn().execute(sql, params)
        cols = [d[0] for d in cur.description]
        return [{cols[i]: row[i] for i in range(len(cols))} for row in cur.fetchall()]

    def _fetch_one(self, sql: str, params: tuple = ()) -> Optional[Dict[str, Any]]:
        rows = self._fetch_all(sql, params)
        return rows[0] if rows else None

    def _scalar(self, sql: str, params: tuple = ()) -> Any:
        row = self._conn().execute(sql, params).fetchone()
        return row[0] if row else None
