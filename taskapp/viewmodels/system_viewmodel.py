# Rev 0.2.0
from __future__ import annotations

from pathlib import Path
from typing import Callable

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal, Slot

from taskapp.services.errors import MaintenanceError
from taskapp.services.maintenance_service import MaintenanceService
from taskapp.utils.logging_setup import get_logger

log = get_logger("viewmodels.system")


class _WorkerSignals(QObject):
    finished = Signal(str, str)     # action, message
    failed = Signal(str, str)


class _MaintenanceJob(QRunnable):
    def __init__(self, action: str, fn: Callable[[], str]):
        super().__init__()
        self.action = action
        self.fn = fn
        self.signals = _WorkerSignals()

    @Slot()
    def run(self) -> None:
        try:
            message = self.fn()
        except MaintenanceError as e:
            self.signals.failed.emit(self.action, str(e))
            return
        except Exception as e:
            # anything else still has to release the busy state
            log.exception("Maintenance action %s crashed", self.action)
            self.signals.failed.emit(self.action, f"{type(e).__name__}: {e}")
            return
        self.signals.finished.emit(self.action, message)


class SystemViewModel(QObject):
    """
    Maintenance actions off the UI thread. Results come back through
    queued signals, so slots connected here run on the UI thread.
    """
    busyChanged = Signal(bool)
    actionFinished = Signal(str, str)
    actionFailed = Signal(str, str)

    def __init__(self, maintenance: MaintenanceService, activity, session, pool: QThreadPool | None = None):
        super().__init__()
        self._maintenance = maintenance
        self._activity = activity
        self._session = session
        self._pool = pool or QThreadPool.globalInstance()
        self._running = 0

    def backup(self, dest_dir: Path | str) -> None:
        self._submit("backup", lambda: f"Kopia zapisana: {self._maintenance.backup(dest_dir)}")

    def restore(self, backup_file: Path | str) -> None:
        def _do() -> str:
            self._maintenance.restore(backup_file)
            return f"Przywrócono z: {backup_file}"
        self._submit("restore", _do)

    def optimize(self) -> None:
        def _do() -> str:
            self._maintenance.optimize()
            return "Baza danych zoptymalizowana"
        self._submit("optimize", _do)

    def integrity_check(self) -> None:
        def _do() -> str:
            problems = self._maintenance.integrity_check()
            return "Integralność: OK" if not problems else "Problemy:\n" + "\n".join(problems)
        self._submit("integrity_check", _do)

    # ---- internals
    def _submit(self, action: str, fn: Callable[[], str]) -> None:
        job = _MaintenanceJob(action, fn)
        job.signals.finished.connect(self._on_finished)
        job.signals.failed.connect(self._on_failed)
        self._running += 1
        self.busyChanged.emit(True)
        log.info("Maintenance action %s started by user %s", action, self._session.user_id)
        self._pool.start(job)

    def _done(self) -> None:
        self._running = max(0, self._running - 1)
        if not self._running:
            self.busyChanged.emit(False)

    @Slot(str, str)
    def _on_finished(self, action: str, message: str) -> None:
        self._done()
        self._activity.log_config_change(self._session.user_id, f"maintenance.{action}", "", "ok")
        self.actionFinished.emit(action, message)

    @Slot(str, str)
    def _on_failed(self, action: str, message: str) -> None:
        self._done()
        self._activity.log_system_error(self._session.user_id, "MaintenanceError", message)
        self.actionFailed.emit(action, message)
