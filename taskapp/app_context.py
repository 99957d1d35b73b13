# taskapp application context
# Rev 0.2.0

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

from .utils.logging_setup import get_logger
from .repositories.db import Database
from .repositories.sqlite_activity_repository import SQLiteActivityRepository
from .repositories.sqlite_project_repository import SQLiteProjectRepository
from .repositories.sqlite_report_repository import SQLiteReportRepository
from .repositories.sqlite_settings_repository import SQLiteSettingsRepository
from .repositories.sqlite_task_repository import SQLiteTaskRepository
from .repositories.sqlite_team_repository import SQLiteTeamRepository
from .repositories.sqlite_user_repository import SQLiteUserRepository
from .services.activity_service import ActivityService
from .services.auth_service import AuthService, PasswordChangeService, RegisterService
from .services.maintenance_service import MaintenanceService
from .services.reports.builder import ReportBuilder
from .services.reports.pdf import PdfReportRenderer, ReportExporter
from .services.task_service import TaskService
from .services.visibility import VisibilityFilter


@dataclass
class AppContext:
    """Central container for shared app resources."""
    db_path: Path
    db: Database
    users: SQLiteUserRepository
    settings: SQLiteSettingsRepository
    projects: SQLiteProjectRepository
    teams: SQLiteTeamRepository
    tasks: SQLiteTaskRepository
    activities: SQLiteActivityRepository
    reports: SQLiteReportRepository
    activity: ActivityService
    auth: AuthService
    register: RegisterService
    passwords: PasswordChangeService
    task_service: TaskService
    maintenance: MaintenanceService
    visibility: VisibilityFilter
    report_builder: ReportBuilder
    exporter: ReportExporter
    config: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(cls, db_path: Path | str, config: Dict[str, Any] | None = None) -> "AppContext":
        """Open the DB, apply migrations, wire repositories and services."""
        log = get_logger("AppContext")
        db = Database(db_path)
        db.run_migrations()

        users = SQLiteUserRepository(db)
        settings = SQLiteSettingsRepository(db)
        projects = SQLiteProjectRepository(db)
        teams = SQLiteTeamRepository(db)
        tasks = SQLiteTaskRepository(db)
        activities = SQLiteActivityRepository(db)
        reports = SQLiteReportRepository(db)

        activity = ActivityService(activities)
        visibility = VisibilityFilter(projects, teams, users)
        ctx = cls(
            db_path=Path(db_path),
            db=db,
            users=users,
            settings=settings,
            projects=projects,
            teams=teams,
            tasks=tasks,
            activities=activities,
            reports=reports,
            activity=activity,
            auth=AuthService(users, activity),
            register=RegisterService(users),
            passwords=PasswordChangeService(users, settings, activity),
            task_service=TaskService(tasks, activity),
            maintenance=MaintenanceService(db),
            visibility=visibility,
            report_builder=ReportBuilder(visibility, projects, teams, tasks, users, activities=activity),
            exporter=ReportExporter(PdfReportRenderer(), reports),
            config=config or {},
        )
        log.info("AppContext initialized with DB=%s", db_path)
        return ctx

    def close(self) -> None:
        self.db.close()
