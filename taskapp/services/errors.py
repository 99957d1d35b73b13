# Rev 0.2.0
"""Application error types surfaced to the UI."""
from __future__ import annotations


class TaskAppError(Exception):
    """Base for errors the UI reports to the user."""


class ReportPermissionError(TaskAppError):
    """The session's role may not generate the requested report."""


class ReportOptionsError(TaskAppError, ValueError):
    pass


class ReportGenerationError(TaskAppError):
    """A persistence error aborted report aggregation."""


class ReportExportError(TaskAppError):
    pass


class MaintenanceError(TaskAppError):
    pass
