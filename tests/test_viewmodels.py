# tests/test_viewmodels.py
# QObject view-models only; no widgets, so no QApplication is needed
from __future__ import annotations

from datetime import date

import pytest

from taskapp.services.errors import TaskAppError
from taskapp.services.reports.model import ReportKind, ReportOptions
from taskapp.services.reports.pdf import ReportExporter
from taskapp.services.session import Session
from taskapp.services.task_service import TaskService
from taskapp.viewmodels.reports_viewmodel import ReportsViewModel
from taskapp.viewmodels.system_viewmodel import SystemViewModel
from taskapp.viewmodels.tasks_viewmodel import TasksViewModel

from conftest import FIXED_NOW


@pytest.fixture()
def vm_for(builder, repos):
    def make(user):
        exporter = ReportExporter(reports=repos.reports, clock=lambda: FIXED_NOW)
        return ReportsViewModel(builder, exporter, Session(user))
    return make


def test_generate_emits_text(vm_for, world):
    vm = vm_for(world.l1)
    got = []
    vm.reportReady.connect(got.append)
    text = vm.generate(ReportKind.TEAM_TASKS)
    assert got == [text]
    assert text.startswith("RAPORT: ZADANIA ZESPOŁU")
    assert vm.can_export


def test_failed_generation_clears_previous_report(vm_for, world):
    vm = vm_for(world.l1)
    errors = []
    vm.failed.connect(errors.append)
    vm.generate(ReportKind.TEAM_TASKS)
    assert vm.generate(ReportKind.SYSTEM_USERS) is None
    assert errors and "wymaga roli administratora" in errors[0]
    assert not vm.can_export
    with pytest.raises(TaskAppError):
        vm.save_pdf("/tmp")


def test_invalid_options_reported_as_failure(vm_for, world):
    vm = vm_for(world.admin)
    errors = []
    vm.failed.connect(errors.append)
    opts = ReportOptions(start_date=date(2025, 2, 1), end_date=date(2025, 1, 1))
    assert vm.generate(ReportKind.PROJECT_OVERVIEW, opts) is None
    assert errors == ["Data początkowa nie może być późniejsza niż data końcowa"]


def test_save_pdf_records_export(vm_for, repos, world, tmp_path):
    vm = vm_for(world.admin)
    vm.generate(ReportKind.TEAM_STRUCTURE)
    path = vm.save_pdf(tmp_path)
    assert path.is_file()
    (record,) = repos.reports.list_reports(created_by=world.admin.id)
    assert record.report_type == "TEAM_STRUCTURE"


def test_tasks_viewmodel_filters_and_reports_failures(repos, activity, world):
    vm = TasksViewModel(TaskService(repos.tasks, activity), Session(world.l1))
    batches, errors = [], []
    vm.tasksReloaded.connect(batches.append)
    vm.failed.connect(errors.append)

    vm.set_filters(status="W toku", search="  BAZA ")
    vm.reload()
    assert [t.title for t in batches[-1]] == ["Baza danych"]
    assert vm.task_at(0).id == world.t_prog2
    assert vm.task_at(5) is None

    assert vm.change_status(world.t_prog2, "Gotowe") is False
    assert errors and "Nieznany status" in errors[0]


def test_database_failure_discards_previous_report(vm_for, db_conn, world):
    vm = vm_for(world.admin)
    errors = []
    vm.failed.connect(errors.append)
    assert vm.generate(ReportKind.PROJECT_OVERVIEW) is not None
    assert vm.current_report is not None

    db_conn.execute("DROP TABLE task_assignments")
    assert vm.generate(ReportKind.PROJECT_OVERVIEW) is None
    assert len(errors) == 1 and errors[0].startswith("Błąd generowania raportu")
    assert vm.current_report is None
    assert not vm.can_export


class _InlinePool:
    """Runs jobs on the calling thread."""
    def start(self, job):
        job.run()


class _BrokenMaintenance:
    def optimize(self):
        raise RuntimeError("disk gone")


def test_crashing_maintenance_job_releases_busy_state(activity, repos, world):
    vm = SystemViewModel(_BrokenMaintenance(), activity, Session(world.admin), pool=_InlinePool())
    busy, failed = [], []
    vm.busyChanged.connect(busy.append)
    vm.actionFailed.connect(lambda action, msg: failed.append((action, msg)))

    vm.optimize()

    assert busy == [True, False]
    assert failed == [("optimize", "RuntimeError: disk gone")]
    rows = repos.activities.list_activities(activity_type="ERROR")
    assert len(rows) == 1
