# Rev 0.2.0
# taskapp – Reports view: kind + filters on the left, rendered text on the right
from __future__ import annotations

from PySide6.QtCore import QDate, Qt
from PySide6.QtGui import QFont
from PySide6.QtWidgets import (
    QCheckBox, QComboBox, QDateEdit, QFileDialog, QFormLayout, QGroupBox, QHBoxLayout,
    QListWidget, QListWidgetItem, QMessageBox, QPlainTextEdit, QPushButton, QVBoxLayout, QWidget
)

from taskapp.services.errors import ReportExportError, TaskAppError
from taskapp.services.reports.model import ReportKind, ReportOptions
from taskapp.utils.config import save_settings
from taskapp.utils.logging_setup import get_logger
from taskapp.viewmodels.reports_viewmodel import ReportsViewModel

log = get_logger("ui.reports")


def _kinds_for(session):
    if session.is_team_leader:
        return [ReportKind.TEAM_MEMBERS, ReportKind.TEAM_TASKS]
    return [ReportKind.TEAM_STRUCTURE, ReportKind.SYSTEM_USERS, ReportKind.PROJECT_OVERVIEW]


class ReportsView(QWidget):
    def __init__(self, context, session, parent=None):
        super().__init__(parent)
        self._ctx = context
        self._session = session
        self._vm = ReportsViewModel(context.report_builder, context.exporter, session)
        self._vm.reportReady.connect(self._on_ready)
        self._vm.failed.connect(self._on_failed)

        # ---- filters
        self._cmb_kind = QComboBox()
        for kind in _kinds_for(session):
            self._cmb_kind.addItem(kind.title, kind)

        self._lst_teams = QListWidget()
        self._lst_teams.setSelectionMode(QListWidget.MultiSelection)
        self._lst_projects = QListWidget()
        self._lst_projects.setSelectionMode(QListWidget.MultiSelection)
        self._cmb_user = QComboBox()
        self._cmb_group = QComboBox()

        self._chk_from = QCheckBox("Od:")
        self._date_from = QDateEdit(QDate.currentDate().addMonths(-1))
        self._date_from.setCalendarPopup(True)
        self._chk_to = QCheckBox("Do:")
        self._date_to = QDateEdit(QDate.currentDate())
        self._date_to.setCalendarPopup(True)

        self._chk_members = QCheckBox("Pokaż członków")
        self._chk_tasks = QCheckBox("Pokaż zadania")
        self._chk_stats = QCheckBox("Pokaż statystyki")
        self._chk_admins = QCheckBox("Administratorzy")
        self._chk_managers = QCheckBox("Kierownicy")
        self._chk_leaders = QCheckBox("Team liderzy")
        self._chk_users = QCheckBox("Pracownicy")
        for chk in (self._chk_members, self._chk_tasks, self._chk_stats, self._chk_admins,
                    self._chk_managers, self._chk_leaders, self._chk_users):
            chk.setChecked(True)
        if not session.is_admin:
            self._chk_admins.setChecked(False)
            self._chk_managers.setChecked(False)
            self._chk_admins.setEnabled(False)
            self._chk_managers.setEnabled(False)

        form = QFormLayout()
        form.addRow("Typ raportu:", self._cmb_kind)
        form.addRow("Zespoły:", self._lst_teams)
        form.addRow("Projekty:", self._lst_projects)
        form.addRow("Użytkownik:", self._cmb_user)
        form.addRow("Grupa:", self._cmb_group)
        dates = QHBoxLayout()
        dates.addWidget(self._chk_from)
        dates.addWidget(self._date_from)
        dates.addWidget(self._chk_to)
        dates.addWidget(self._date_to)
        form.addRow("Zakres dat:", dates)

        flags = QVBoxLayout()
        for chk in (self._chk_members, self._chk_tasks, self._chk_stats):
            flags.addWidget(chk)
        types_box = QGroupBox("Typy użytkowników")
        types = QVBoxLayout(types_box)
        for chk in (self._chk_admins, self._chk_managers, self._chk_leaders, self._chk_users):
            types.addWidget(chk)

        self._btn_generate = QPushButton("Generuj raport")
        self._btn_generate.clicked.connect(self._generate)
        self._btn_pdf = QPushButton("Zapisz jako PDF")
        self._btn_pdf.setEnabled(False)
        self._btn_pdf.clicked.connect(self._save_pdf)

        left = QVBoxLayout()
        left.addLayout(form)
        left.addLayout(flags)
        left.addWidget(types_box)
        left.addStretch(1)
        left.addWidget(self._btn_generate)
        left.addWidget(self._btn_pdf)

        self._text = QPlainTextEdit()
        self._text.setReadOnly(True)
        self._text.setFont(QFont("Monospace", 10))

        root = QHBoxLayout(self)
        left_w = QWidget()
        left_w.setLayout(left)
        left_w.setMaximumWidth(380)
        root.addWidget(left_w)
        root.addWidget(self._text, 1)

        self._cmb_kind.currentIndexChanged.connect(self._sync_enabled)
        self._load_choices()
        self._sync_enabled()

    # -------------------- data --------------------

    def _load_choices(self) -> None:
        try:
            vis = self._ctx.visibility.for_session(self._session)
            groups = self._ctx.users.group_names()
        except TaskAppError as e:
            self._on_failed(str(e))
            return
        for t in vis.teams:
            item = QListWidgetItem(t.name)
            item.setData(Qt.UserRole, t.id)
            self._lst_teams.addItem(item)
        for p in vis.projects:
            item = QListWidgetItem(p.name)
            item.setData(Qt.UserRole, p.id)
            self._lst_projects.addItem(item)
        self._cmb_user.addItem("Wszyscy", None)
        for u in vis.users:
            self._cmb_user.addItem(u.full_name, u.id)
        self._cmb_group.addItem("Wszystkie grupy", None)
        for g in groups:
            self._cmb_group.addItem(g, g)

    def _sync_enabled(self) -> None:
        kind = self._cmb_kind.currentData()
        self._lst_teams.setEnabled(kind in (ReportKind.TEAM_STRUCTURE, ReportKind.TEAM_MEMBERS, ReportKind.TEAM_TASKS))
        self._lst_projects.setEnabled(kind is ReportKind.PROJECT_OVERVIEW)
        self._cmb_user.setEnabled(kind in (ReportKind.TEAM_MEMBERS, ReportKind.TEAM_TASKS))
        self._cmb_group.setEnabled(kind in (ReportKind.SYSTEM_USERS, ReportKind.TEAM_MEMBERS))
        for w in (self._chk_from, self._date_from, self._chk_to, self._date_to):
            w.setEnabled(kind is ReportKind.PROJECT_OVERVIEW)

    def _options(self) -> ReportOptions:
        return ReportOptions(
            selected_team_ids=[i.data(Qt.UserRole) for i in self._lst_teams.selectedItems()],
            selected_project_ids=[i.data(Qt.UserRole) for i in self._lst_projects.selectedItems()],
            selected_user_id=self._cmb_user.currentData(),
            selected_group=self._cmb_group.currentData(),
            start_date=self._date_from.date().toPython() if self._chk_from.isChecked() else None,
            end_date=self._date_to.date().toPython() if self._chk_to.isChecked() else None,
            show_tasks=self._chk_tasks.isChecked(),
            show_members=self._chk_members.isChecked(),
            show_statistics=self._chk_stats.isChecked(),
            show_admins=self._chk_admins.isChecked(),
            show_managers=self._chk_managers.isChecked(),
            show_team_leaders=self._chk_leaders.isChecked(),
            show_users=self._chk_users.isChecked(),
        )

    # -------------------- actions --------------------

    def _generate(self) -> None:
        self._vm.generate(self._cmb_kind.currentData(), self._options())

    def _on_ready(self, text: str) -> None:
        self._text.setPlainText(text)
        self._btn_pdf.setEnabled(True)

    def _on_failed(self, message: str) -> None:
        self._text.clear()
        self._btn_pdf.setEnabled(False)
        QMessageBox.critical(self, "Błąd generowania raportu", message)

    def _save_pdf(self) -> None:
        reports_cfg = self._ctx.config.setdefault("reports", {})
        start_dir = reports_cfg.get("last_directory", "")
        directory = QFileDialog.getExistingDirectory(self, "Wybierz katalog", start_dir)
        if not directory:
            return
        try:
            path = self._vm.save_pdf(directory)
        except ReportExportError as e:
            QMessageBox.critical(self, "Błąd zapisu PDF", str(e))
            return
        reports_cfg["last_directory"] = directory
        try:
            save_settings(self._ctx.config)
        except OSError:
            log.warning("Could not persist last report directory", exc_info=True)
        QMessageBox.information(self, "Raport zapisany", f"Zapisano: {path}")
