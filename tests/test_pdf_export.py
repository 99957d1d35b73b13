# tests/test_pdf_export.py
from __future__ import annotations

import re

import pytest

from taskapp.services.errors import ReportExportError
from taskapp.services.reports.model import ReportKind, ReportOptions, UserRow, UserTable
from taskapp.services.reports.pdf import PdfReportRenderer, ReportExporter, export_filename, user_table_columns
from taskapp.services.session import Session

from conftest import FIXED_NOW


def test_export_filename_pattern():
    name = export_filename(ReportKind.PROJECT_OVERVIEW, FIXED_NOW)
    assert name == "raport_przegląd_projektów_20250314_093000.pdf"
    assert re.fullmatch(r"raport_\S+_\d{8}_\d{6}\.pdf", export_filename(ReportKind.TEAM_TASKS, FIXED_NOW))


def test_renderer_writes_pdf(builder, world, tmp_path):
    report = builder.build(Session(world.admin), ReportKind.SYSTEM_USERS)
    out = PdfReportRenderer().render(report, tmp_path / "users.pdf")
    assert out.read_bytes().startswith(b"%PDF")


def test_empty_report_still_renders(builder, world, tmp_path):
    report = builder.build(Session(world.m3), ReportKind.PROJECT_OVERVIEW)
    assert report.is_empty
    out = PdfReportRenderer().render(report, tmp_path / "empty.pdf")
    assert out.stat().st_size > 0


def test_exporter_records_report(builder, repos, world, tmp_path):
    report = builder.build(Session(world.l1), ReportKind.TEAM_TASKS, ReportOptions(selected_user_id=world.e1.id))
    exporter = ReportExporter(reports=repos.reports, clock=lambda: FIXED_NOW)
    path = exporter.export(report, tmp_path, created_by=world.l1.id)

    assert path.parent == tmp_path
    assert path.name == "raport_zadania_zespołu_20250314_093000.pdf"
    assert path.read_bytes()[:4] == b"%PDF"

    (record,) = repos.reports.list_reports(created_by=world.l1.id)
    assert record.report_type == "TEAM_TASKS"
    assert record.report_name == "Raport: Zadania Zespołu"
    assert record.exported_file == str(path)
    assert "Użytkownik: Ewa Pracownik" in record.report_scope


def test_export_to_missing_directory_fails(builder, repos, world, tmp_path):
    report = builder.build(Session(world.admin), ReportKind.TEAM_STRUCTURE)
    exporter = ReportExporter(reports=repos.reports, clock=lambda: FIXED_NOW)
    with pytest.raises(ReportExportError):
        exporter.export(report, tmp_path / "nope", created_by=world.admin.id)
    assert repos.reports.list_reports() == []


def test_user_table_columns_follow_flags():
    rows = [UserRow(name="Ewa Pracownik", email="e1@example.com", teams=["Red"], group="Programiści")]
    assert user_table_columns(UserTable(rows)) == ["Użytkownik", "Email", "Zespół"]
    assert user_table_columns(UserTable(rows, show_teams=False)) == ["Użytkownik", "Email"]
    assert user_table_columns(UserTable(rows, show_teams=False, show_group=True)) == ["Użytkownik", "Email", "Grupa"]


def test_users_report_without_team_column_renders(builder, world, tmp_path):
    report = builder.build(Session(world.admin), ReportKind.SYSTEM_USERS,
                           ReportOptions(show_members=False, selected_group="Testerzy"))
    table = report.sections[0].blocks[0]
    assert user_table_columns(table) == ["Użytkownik", "Email", "Grupa"]
    out = PdfReportRenderer().render(report, tmp_path / "no_teams.pdf")
    assert out.read_bytes().startswith(b"%PDF")
