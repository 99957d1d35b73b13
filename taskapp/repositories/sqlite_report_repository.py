# Rev 0.2.0
from __future__ import annotations

from typing import List, Optional

from taskapp.models.entities import ReportRecord
from .base import SQLiteRepository


class SQLiteReportRepository(SQLiteRepository):
    """Export history (one row per written PDF)."""

    def insert_report(
        self,
        *,
        report_name: str,
        report_type: str,
        report_scope: Optional[str] = None,
        created_by: Optional[int] = None,
        exported_file: Optional[str] = None,
    ) -> int:
        cur = self._execute(
            """
            INSERT INTO reports(report_name, report_type, report_scope, created_by, exported_file)
            VALUES (?, ?, ?, ?, ?)
            """,
            (report_name, report_type, report_scope, created_by, exported_file),
        )
        return int(cur.lastrowid)

    def list_reports(self, created_by: Optional[int] = None) -> List[ReportRecord]:
        cols = "id, report_name, report_type, report_scope, created_by, created_at, exported_file"
        if created_by is None:
            rows = self._fetch_all(f"SELECT {cols} FROM reports ORDER BY id DESC")
        else:
            rows = self._fetch_all(
                f"SELECT {cols} FROM reports WHERE created_by = ? ORDER BY id DESC",
                (created_by,),
            )
        return [ReportRecord(**r) for r in rows]
