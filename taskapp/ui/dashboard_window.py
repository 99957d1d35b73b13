# Rev 0.2.0
# taskapp – Dashboard shell: role-driven navigation on the left, one page per entry
from __future__ import annotations

from typing import Callable, Dict

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QApplication, QHBoxLayout, QLabel, QListWidget, QListWidgetItem, QMainWindow, QPushButton,
    QStackedWidget, QVBoxLayout, QWidget
)

from taskapp.services.session import Session
from taskapp.ui.diagnostics_dock import DiagnosticsDock
from taskapp.ui.navigation import entries_for_role, initial_key
from taskapp.ui.theme import apply_theme
from taskapp.ui.views.activity_view import ActivityView
from taskapp.ui.views.projects_view import ProjectsView
from taskapp.ui.views.reports_view import ReportsView
from taskapp.ui.views.settings_view import SettingsView
from taskapp.ui.views.system_view import SystemView
from taskapp.ui.views.tasks_view import TasksView
from taskapp.ui.views.teams_view import TeamsView
from taskapp.ui.views.users_view import UsersView
from taskapp.ui.window_mode import apply_window_settings, window_settings
from taskapp.utils.config import save_settings
from taskapp.utils.logging_setup import get_logger

log = get_logger("ui.dashboard")

_PAGES: Dict[str, Callable] = {
    "users": UsersView,
    "teams": TeamsView,
    "projects": ProjectsView,
    "tasks": TasksView,
    "reports": ReportsView,
    "activity": ActivityView,
    "system": SystemView,
    "settings": SettingsView,
}


class DashboardWindow(QMainWindow):
    """Pages are built lazily the first time their navigation entry is selected."""
    closed = Signal(bool)    # True when closed through "Wyloguj"

    def __init__(self, context, session: Session, parent=None):
        super().__init__(parent)
        self._ctx = context
        self._session = session
        self._pages: Dict[str, QWidget] = {}
        self._logging_out = False
        self.setWindowTitle(f"TaskApp - {session.role_name}")

        self._nav = QListWidget()
        self._nav.setFixedWidth(200)
        for entry in entries_for_role(session.role_id):
            item = QListWidgetItem(entry.label)
            item.setData(Qt.UserRole, entry.key)
            self._nav.addItem(item)
        self._stack = QStackedWidget()

        btn_logout = QPushButton("Wyloguj")
        btn_logout.clicked.connect(self._logout)
        left = QVBoxLayout()
        left.addWidget(QLabel(session.user.full_name))
        left.addWidget(self._nav, 1)
        left.addWidget(btn_logout)

        central = QWidget(self)
        root = QHBoxLayout(central)
        root.addLayout(left)
        root.addWidget(self._stack, 1)
        self.setCentralWidget(central)

        ui_cfg = context.config.setdefault("ui", {})
        self._diag = DiagnosticsDock(self)
        self.addDockWidget(Qt.BottomDockWidgetArea, self._diag)
        self._diag.setVisible(bool(ui_cfg.get("diagnostics_dock_visible", False)))
        self.menuBar().addAction(self._diag.toggleViewAction())

        self._nav.currentItemChanged.connect(self._on_nav)
        settings = context.settings.get_settings(session.user_id)
        apply_theme(QApplication.instance(), settings.theme if settings else "Light")
        self.show_page(initial_key(session.role_id, settings.default_view if settings else None))
        apply_window_settings(self, ui_cfg.get("window", {}))

    # ---- navigation
    def show_page(self, key: str) -> None:
        for row in range(self._nav.count()):
            if self._nav.item(row).data(Qt.UserRole) == key:
                self._nav.setCurrentRow(row)
                return

    def _on_nav(self, current: QListWidgetItem, _previous=None) -> None:
        if current is None:
            return
        key = current.data(Qt.UserRole)
        page = self._pages.get(key)
        if page is None:
            page = _PAGES[key](self._ctx, self._session, self)
            if key == "settings":
                page.themeChanged.connect(lambda t: apply_theme(QApplication.instance(), t))
            self._pages[key] = page
            self._stack.addWidget(page)
            log.debug("Built page %s", key)
        self._stack.setCurrentWidget(page)

    # ---- lifecycle
    def _logout(self) -> None:
        self._logging_out = True
        self.close()

    def closeEvent(self, ev):
        ui_cfg = self._ctx.config.setdefault("ui", {})
        ui_cfg["window"] = window_settings(self)
        ui_cfg["diagnostics_dock_visible"] = self._diag.isVisible()
        try:
            save_settings(self._ctx.config)
        except OSError:
            log.warning("Could not save window settings", exc_info=True)
        self._ctx.auth.logout(self._session)
        super().closeEvent(ev)
        self.closed.emit(self._logging_out)
