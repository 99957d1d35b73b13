# Rev 0.2.0
"""
ReportBuilder: walks the visible entities for a session and assembles a Report.

Entity order is repository order (by id). The users report is the one
exception: it is stably sorted by role id and grouped per role.
"""
from __future__ import annotations

import sqlite3
from datetime import datetime
from typing import Callable, List, Optional

from taskapp.models.entities import Project, Task, Team, User
from taskapp.models.types import ROLE_ADMIN, ROLE_EMPLOYEE, ROLE_MANAGER, ROLE_TEAM_LEADER
from taskapp.services.errors import ReportGenerationError, ReportPermissionError
from taskapp.services.session import Session
from taskapp.services.visibility import Visibility, VisibilityFilter
from taskapp.utils.logging_setup import get_logger
from .model import (
    BulletList,
    KeyValue,
    Note,
    Report,
    ReportKind,
    ReportOptions,
    Section,
    StatsBlock,
    TaskRow,
    TaskStats,
    TaskTable,
    UserRow,
    UserTable,
)

log = get_logger("services.reports")

NOT_ASSIGNED = "Brak przypisania"
ALL_GROUPS = "Wszystkie grupy"
NO_TEAMS_TEXT = "Brak zespołów spełniających kryteria raportu."
NO_PROJECTS_TEXT = "Brak projektów spełniających kryteria raportu."
NOT_A_LEADER_TEXT = "Nie jesteś liderem żadnego zespołu lub brak zespołów spełniających kryteria."

_USER_TYPE_LABELS = (
    (ROLE_ADMIN, "show_admins", "Administratorzy"),
    (ROLE_MANAGER, "show_managers", "Kierownicy"),
    (ROLE_TEAM_LEADER, "show_team_leaders", "Team liderzy"),
    (ROLE_EMPLOYEE, "show_users", "Pracownicy"),
)


def _yes_no(flag: bool) -> str:
    return "Tak" if flag else "Nie"


def _task_row(task: Task, assignee: Optional[str] = None) -> TaskRow:
    return TaskRow(title=task.title, status=task.status, priority=task.priority, assignee=assignee)


def _user_line(user: User) -> str:
    return f"{user.name} {user.last_name} ({user.email})"


class ReportBuilder:
    def __init__(
        self,
        visibility_filter: VisibilityFilter,
        projects,
        teams,
        tasks,
        users,
        clock: Optional[Callable[[], datetime]] = None,
        activities=None,
    ):
        self._visibility = visibility_filter
        self._projects = projects
        self._teams = teams
        self._tasks = tasks
        self._users = users
        self._clock = clock or datetime.now
        self._activities = activities

    # ---------- public API ----------

    def build(self, session: Session, kind: ReportKind, options: Optional[ReportOptions] = None) -> Report:
        options = options or ReportOptions()
        options.validate()
        self._check_role(session, kind)
        try:
            visibility = self._visibility.for_session(session)
            report = Report(kind=kind, generated_at=self._clock())
            if kind is ReportKind.TEAM_STRUCTURE:
                self._team_structure(report, visibility, options)
            elif kind is ReportKind.SYSTEM_USERS:
                self._system_users(report, session, visibility, options)
            elif kind is ReportKind.PROJECT_OVERVIEW:
                self._project_overview(report, visibility, options)
            elif kind is ReportKind.TEAM_MEMBERS:
                self._team_members(report, visibility, options)
            else:
                self._team_tasks(report, visibility, options)
        except sqlite3.Error as e:
            log.exception("Report %s failed for user %s", kind.name, session.user_id)
            raise ReportGenerationError(f"Błąd generowania raportu: {e}") from e

        log.info("Report %s built for user %s: %d section(s)", kind.name, session.user_id, len(report.sections))
        if self._activities is not None:
            self._activities.log_report_generation(session.user_id, kind.title, "; ".join(report.filters))
        return report

    # ---------- helpers ----------

    @staticmethod
    def _check_role(session: Session, kind: ReportKind) -> None:
        if kind.for_team_leader and not session.is_team_leader:
            raise ReportPermissionError(f"Raport '{kind.title}' jest dostępny tylko dla team liderów")
        if not kind.for_team_leader and not (session.is_admin or session.is_manager):
            raise ReportPermissionError(f"Raport '{kind.title}' wymaga roli administratora lub kierownika")

    def _project_name(self, project_id: Optional[int]) -> str:
        if project_id is None:
            return NOT_ASSIGNED
        return self._projects.project_name(project_id) or NOT_ASSIGNED

    def _user_name(self, user_id: Optional[int]) -> Optional[str]:
        if user_id is None:
            return None
        user = self._users.get_user_by_id(user_id)
        return user.full_name if user else None

    # ---------- Struktura Zespołów ----------

    def _team_structure(self, report: Report, vis: Visibility, opts: ReportOptions) -> None:
        teams = vis.restrict_teams(opts.selected_team_ids)
        if opts.selected_team_ids:
            report.filters.append("Wybrane zespoły: " + ", ".join(t.name for t in teams))
        else:
            report.filters.append("Wszystkie zespoły")
        report.filters.append(f"Pokaż członków zespołów: {_yes_no(opts.show_members)}")
        report.filters.append(f"Pokaż zadania zespołów: {_yes_no(opts.show_tasks)}")

        if not teams:
            report.empty_text = NO_TEAMS_TEXT
            return

        for team in teams:
            section = Section(heading=f"ZESPÓŁ: {team.name} (ID: {team.id})")
            section.add(KeyValue("Projekt", self._project_name(team.project_id)))

            if opts.show_members:
                members = self._teams.team_members(team.id)
                section.add(KeyValue("Liczba członków", str(len(members))))
                if members:
                    section.add(Note(""))
                    section.add(BulletList("CZŁONKOWIE ZESPOŁU", [_user_line(m) for m in members]))
                else:
                    section.add(Note("Brak członków zespołu."))

            if opts.show_tasks:
                tasks = self._tasks.list_tasks_by_team(team.id)
                section.add(Note(""))
                section.add(TaskTable(
                    heading=f"ZADANIA ZESPOŁU ({len(tasks)})",
                    rows=[_task_row(t) for t in tasks],
                    empty_text="Brak zadań przypisanych do zespołu.",
                ))
            report.sections.append(section)

    # ---------- Użytkownicy Systemu ----------

    def _system_users(self, report: Report, session: Session, vis: Visibility, opts: ReportOptions) -> None:
        group = opts.selected_group if opts.selected_group and opts.selected_group != ALL_GROUPS else None
        wanted_roles = {role for role, flag, _ in _USER_TYPE_LABELS if getattr(opts, flag)}
        if session.is_manager:
            # managers never see admins/managers
            wanted_roles &= {ROLE_TEAM_LEADER, ROLE_EMPLOYEE}

        in_group = set(self._users.user_ids_in_group(group)) if group else None
        users = [
            u for u in vis.users
            if u.role_id in wanted_roles and (in_group is None or u.id in in_group)
        ]
        users.sort(key=lambda u: u.role_id)

        if session.is_manager:
            report.filters.append("Tylko użytkownicy z moich projektów")
        if group:
            report.filters.append(f"Grupa: {group}")
        labels = [label for _, flag, label in _USER_TYPE_LABELS if getattr(opts, flag)]
        report.filters.append("Typy użytkowników: " + ", ".join(labels))
        report.filters.append(f"Pokaż przynależność do zespołów: {_yes_no(opts.show_members)}")

        visible_team_ids = None if session.is_admin else {t.id for t in vis.teams}
        roles = self._users.roles_map()
        section: Optional[Section] = None
        for user in users:
            if section is None or section.heading != self._role_heading(roles, user.role_id):
                section = Section(heading=self._role_heading(roles, user.role_id), kind="role")
                section.add(UserTable(rows=[], show_teams=opts.show_members, show_group=group is not None))
                report.sections.append(section)
            row = UserRow(name=user.full_name, email=user.email, group=group)
            if opts.show_members:
                row.teams = self._team_names_for(user, visible_team_ids)
            section.blocks[0].rows.append(row)

    @staticmethod
    def _role_heading(roles, role_id: int) -> str:
        return "ROLA: " + roles.get(role_id, f"Nieznana ({role_id})")

    def _team_names_for(self, user: User, visible_team_ids) -> List[str]:
        if user.role_id == ROLE_TEAM_LEADER:
            team_ids = self._teams.team_ids_led_by(user.id)
        else:
            team_ids = self._teams.team_ids_for_user(user.id)
        if visible_team_ids is not None:
            team_ids = [tid for tid in team_ids if tid in visible_team_ids]
        names = [self._teams.team_name(tid) or NOT_ASSIGNED for tid in team_ids]
        return names or [NOT_ASSIGNED]

    # ---------- Przegląd Projektów ----------

    def _project_overview(self, report: Report, vis: Visibility, opts: ReportOptions) -> None:
        projects: List[Project] = [
            p for p in vis.restrict_projects(opts.selected_project_ids)
            if (opts.start_date is None or p.end_date is None or p.end_date >= opts.start_date)
            and (opts.end_date is None or p.start_date is None or p.start_date <= opts.end_date)
        ]

        if opts.start_date:
            report.filters.append(f"Data początkowa: {opts.start_date.isoformat()}")
        if opts.end_date:
            report.filters.append(f"Data końcowa: {opts.end_date.isoformat()}")
        report.filters.append(f"Pokaż zadania projektów: {_yes_no(opts.show_tasks)}")
        report.filters.append(f"Pokaż statystyki projektów: {_yes_no(opts.show_statistics)}")
        report.preamble.append(KeyValue("Liczba projektów", str(len(projects))))
        report.preamble.append(Note(""))

        if not projects:
            report.empty_text = NO_PROJECTS_TEXT
            return

        for project in projects:
            section = Section(heading=f"PROJEKT: {project.name} (ID: {project.id})")
            section.add(KeyValue("Opis", project.description or ""))
            section.add(KeyValue("Data rozpoczęcia", project.start_date.isoformat() if project.start_date else ""))
            section.add(KeyValue("Data zakończenia", project.end_date.isoformat() if project.end_date else ""))
            section.add(KeyValue("Kierownik", self._user_name(project.manager_id) or NOT_ASSIGNED))

            project_teams: List[Team] = [t for t in vis.teams if t.project_id == project.id]
            section.add(KeyValue("Liczba zespołów", str(len(project_teams))))
            if project_teams:
                section.add(BulletList("Zespoły", [t.name for t in project_teams]))

            tasks = self._tasks.list_tasks_by_project(project.id)
            if opts.show_tasks:
                section.add(KeyValue("Liczba zadań", str(len(tasks))))
                section.add(TaskTable(heading=None, rows=[_task_row(t) for t in tasks]))
            if opts.show_statistics:
                section.add(StatsBlock("Statystyki zadań", TaskStats.from_tasks(tasks)))
            report.sections.append(section)

    # ---------- team leader: Członkowie Zespołu ----------

    def _leader_filters(self, report: Report, vis: Visibility, opts: ReportOptions):
        teams = vis.restrict_teams(opts.selected_team_ids)
        if opts.selected_team_ids:
            report.filters.append("Wybrane zespoły: " + ", ".join(t.name for t in teams))
        selected_user = None
        if opts.selected_user_id is not None:
            allowed = vis.restrict_users([opts.selected_user_id])
            selected_user = allowed[0] if allowed else None
        return teams, selected_user

    @staticmethod
    def _selected_user_ids(opts: ReportOptions, selected_user: Optional[User]):
        if opts.selected_user_id is None:
            return None
        # an unauthorized selection matches nobody
        return {selected_user.id} if selected_user else set()

    def _team_members(self, report: Report, vis: Visibility, opts: ReportOptions) -> None:
        teams, selected_user = self._leader_filters(report, vis, opts)
        group = opts.selected_group if opts.selected_group and opts.selected_group != ALL_GROUPS else None
        if group:
            report.filters.append(f"Grupa: {group}")
        if selected_user:
            report.filters.append(f"Użytkownik: {selected_user.full_name}")
        report.filters.append(f"Pokaż członków zespołów: {_yes_no(opts.show_members)}")

        if not teams:
            report.empty_text = NOT_A_LEADER_TEXT
            return

        only_ids = self._selected_user_ids(opts, selected_user)
        in_group = set(self._users.user_ids_in_group(group)) if group else None
        for team in teams:
            section = Section(heading=f"ZESPÓŁ: {team.name} (ID: {team.id})")
            section.add(KeyValue("Projekt", self._project_name(team.project_id)))
            section.add(Note(""))
            if opts.show_members:
                members = [
                    m for m in self._teams.team_members(team.id)
                    if m.role_id == ROLE_EMPLOYEE
                    and (in_group is None or m.id in in_group)
                    and (only_ids is None or m.id in only_ids)
                ]
                section.add(KeyValue("Liczba członków", str(len(members))))
                if members:
                    section.add(Note(""))
                    section.add(BulletList("CZŁONKOWIE ZESPOŁU", [_user_line(m) for m in members]))
                else:
                    section.add(Note("Brak członków zespołu spełniających kryteria."))
            report.sections.append(section)

    # ---------- team leader: Zadania Zespołu ----------

    def _team_tasks(self, report: Report, vis: Visibility, opts: ReportOptions) -> None:
        teams, selected_user = self._leader_filters(report, vis, opts)
        if selected_user:
            report.filters.append(f"Użytkownik: {selected_user.full_name}")
        report.filters.append(f"Pokaż zadania: {_yes_no(opts.show_tasks)}")
        report.filters.append(f"Pokaż statystyki: {_yes_no(opts.show_statistics)}")

        if not teams:
            report.empty_text = NOT_A_LEADER_TEXT
            return

        only_ids = self._selected_user_ids(opts, selected_user)
        for team in teams:
            section = Section(heading=f"ZESPÓŁ: {team.name} (ID: {team.id})")
            section.add(KeyValue("Projekt", self._project_name(team.project_id)))
            section.add(Note(""))

            tasks = self._tasks.list_tasks_by_team(team.id)
            if only_ids is not None:
                tasks = [t for t in tasks if t.assigned_to in only_ids]

            heading = f"ZADANIA ZESPOŁU ({len(tasks)})"
            if not tasks:
                section.add(TaskTable(heading, [], "Brak zadań przypisanych do zespołu spełniających kryteria."))
                report.sections.append(section)
                continue

            rows = []
            if opts.show_tasks:
                for t in tasks:
                    assignee = self._user_name(t.assigned_to) if selected_user else None
                    rows.append(_task_row(t, assignee))
            section.add(TaskTable(heading, rows))
            if opts.show_statistics:
                section.add(Note(""))
                section.add(StatsBlock("PODSUMOWANIE STATUSÓW", TaskStats.from_tasks(tasks), empty_text=None))
            report.sections.append(section)
