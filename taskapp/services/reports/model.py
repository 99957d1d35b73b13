# Rev 0.2.0
"""
Structured report model.

A Report is an ordered list of Sections, each holding typed blocks. The text
renderer and the PDF renderer both walk this model; neither parses the other's
output.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from taskapp.models.entities import Task
from taskapp.models.types import STATUS_DONE, STATUS_IN_PROGRESS, STATUS_NEW
from taskapp.services.errors import ReportOptionsError


class ReportKind(Enum):
    TEAM_STRUCTURE = "Struktura Zespołów"
    SYSTEM_USERS = "Użytkownicy Systemu"
    PROJECT_OVERVIEW = "Przegląd Projektów"
    TEAM_MEMBERS = "Członkowie Zespołu"
    TEAM_TASKS = "Zadania Zespołu"

    @property
    def title(self) -> str:
        return self.value

    @property
    def for_team_leader(self) -> bool:
        return self in (ReportKind.TEAM_MEMBERS, ReportKind.TEAM_TASKS)


@dataclass
class ReportOptions:
    selected_team_ids: List[int] = field(default_factory=list)
    selected_project_ids: List[int] = field(default_factory=list)
    selected_user_id: Optional[int] = None
    selected_group: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    show_tasks: bool = True
    show_members: bool = True
    show_statistics: bool = True
    show_admins: bool = True
    show_managers: bool = True
    show_team_leaders: bool = True
    show_users: bool = True

    def validate(self) -> None:
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ReportOptionsError("Data początkowa nie może być późniejsza niż data końcowa")


@dataclass(frozen=True)
class TaskStats:
    total: int
    new: int
    in_progress: int
    done: int

    @classmethod
    def from_tasks(cls, tasks: Iterable[Task]) -> "TaskStats":
        new = in_progress = done = total = 0
        for t in tasks:
            total += 1
            status = (t.status or "").casefold()
            if status == STATUS_NEW.casefold():
                new += 1
            elif status == STATUS_IN_PROGRESS.casefold():
                in_progress += 1
            elif status == STATUS_DONE.casefold():
                done += 1
        return cls(total=total, new=new, in_progress=in_progress, done=done)

    @property
    def completion_percentage(self) -> Optional[float]:
        if self.total == 0:
            return None
        return self.done / self.total * 100

    def percentage_text(self) -> Optional[str]:
        pct = self.completion_percentage
        return None if pct is None else f"{pct:.2f}%"


# ---------- blocks ----------

@dataclass
class KeyValue:
    key: str
    value: str


@dataclass
class BulletList:
    heading: Optional[str]
    items: List[str]
    empty_text: Optional[str] = None


@dataclass
class TaskRow:
    title: str
    status: str
    priority: str
    assignee: Optional[str] = None


@dataclass
class TaskTable:
    heading: str
    rows: List[TaskRow]
    empty_text: str = ""


@dataclass
class UserRow:
    name: str
    email: str
    teams: List[str] = field(default_factory=list)
    group: Optional[str] = None


@dataclass
class UserTable:
    rows: List[UserRow]
    show_teams: bool = True
    show_group: bool = False


@dataclass
class StatsBlock:
    heading: str
    stats: TaskStats
    empty_text: Optional[str] = "Brak danych do obliczenia statystyk."


@dataclass
class Note:
    text: str


Block = Union[KeyValue, BulletList, TaskTable, UserTable, StatsBlock, Note]


@dataclass
class Section:
    """One entity block. Sections with kind 'role' group users; others are entity headers."""
    heading: str
    blocks: List[Block] = field(default_factory=list)
    kind: str = "entity"

    def add(self, block: Block) -> "Section":
        self.blocks.append(block)
        return self


@dataclass
class Report:
    kind: ReportKind
    generated_at: datetime
    filters: List[str] = field(default_factory=list)
    preamble: List[Block] = field(default_factory=list)
    sections: List[Section] = field(default_factory=list)
    empty_text: Optional[str] = None

    @property
    def title(self) -> str:
        return self.kind.title

    @property
    def is_empty(self) -> bool:
        return not self.sections

    def section_headings(self) -> Sequence[str]:
        return [s.heading for s in self.sections]

    def filter_pairs(self) -> List[Tuple[str, str]]:
        """Filter lines split on the first ': ' (lines without one map to '')."""
        out = []
        for line in self.filters:
            key, sep, value = line.partition(": ")
            out.append((key, value) if sep else (line, ""))
        return out
