# Rev 0.2.0
from __future__ import annotations

from pathlib import Path
from typing import Optional

from PySide6.QtCore import QObject, Signal

from taskapp.services.errors import TaskAppError
from taskapp.services.reports.builder import ReportBuilder
from taskapp.services.reports.model import Report, ReportKind, ReportOptions
from taskapp.services.reports.pdf import ReportExporter
from taskapp.services.reports.text import render_text
from taskapp.services.session import Session
from taskapp.utils.logging_setup import get_logger

log = get_logger("viewmodels.reports")


class ReportsViewModel(QObject):
    """Runs report generation on the UI thread and keeps the last good report for export."""
    reportReady = Signal(str)
    failed = Signal(str)

    def __init__(self, builder: ReportBuilder, exporter: ReportExporter, session: Session):
        super().__init__()
        self._builder = builder
        self._exporter = exporter
        self._session = session
        self._report: Optional[Report] = None

    @property
    def current_report(self) -> Optional[Report]:
        return self._report

    @property
    def can_export(self) -> bool:
        return self._report is not None

    def generate(self, kind: ReportKind, options: Optional[ReportOptions] = None) -> Optional[str]:
        # a failed run discards whatever was there before
        self._report = None
        try:
            report = self._builder.build(self._session, kind, options)
        except TaskAppError as e:
            log.warning("Report %s not generated: %s", kind.name, e)
            self.failed.emit(str(e))
            return None
        self._report = report
        text = render_text(report)
        self.reportReady.emit(text)
        return text

    def save_pdf(self, directory: Path | str) -> Path:
        if self._report is None:
            raise TaskAppError("Najpierw wygeneruj raport")
        return self._exporter.export(self._report, directory, created_by=self._session.user_id)
