# Rev 0.2.0
"""Plain-text rendering of a Report (what the reports view shows)."""
from __future__ import annotations

from typing import List

from .model import (
    BulletList,
    KeyValue,
    Note,
    Report,
    StatsBlock,
    TaskTable,
    UserTable,
)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _render_block(block, out: List[str]) -> None:
    if isinstance(block, KeyValue):
        out.append(f"{block.key}: {block.value}\n")
    elif isinstance(block, Note):
        out.append(f"{block.text}\n")
    elif isinstance(block, BulletList):
        if not block.items:
            if block.empty_text:
                out.append(f"{block.empty_text}\n")
            return
        if block.heading:
            out.append(f"{block.heading}:\n")
        out.extend(f"- {item}\n" for item in block.items)
    elif isinstance(block, TaskTable):
        if block.heading:
            out.append(f"{block.heading}:\n")
        if not block.rows and block.empty_text:
            out.append(f"{block.empty_text}\n")
        for row in block.rows:
            out.append(f"- {row.title} (Status: {row.status}, Priorytet: {row.priority})\n")
            if row.assignee:
                out.append(f"  Przypisane do: {row.assignee}\n")
    elif isinstance(block, UserTable):
        for row in block.rows:
            out.append(f"- {row.name} ({row.email})\n")
            if block.show_teams:
                out.extend(f"  Zespół: {team}\n" for team in row.teams)
            if block.show_group and row.group:
                out.append(f"  Grupa: {row.group}\n")
    elif isinstance(block, StatsBlock):
        out.append(f"{block.heading}:\n")
        stats = block.stats
        if stats.total == 0 and block.empty_text:
            out.append(f"{block.empty_text}\n")
            return
        out.append(f"- Nowe: {stats.new}\n")
        out.append(f"- W toku: {stats.in_progress}\n")
        out.append(f"- Zakończone: {stats.done}\n")
        pct = stats.percentage_text()
        if pct is not None:
            out.append(f"- Procent ukończenia: {pct}\n")
    else:
        raise TypeError(f"Unknown report block: {type(block).__name__}")


def render_text(report: Report) -> str:
    out: List[str] = [
        f"RAPORT: {report.title.upper()}\n",
        f"Data wygenerowania: {report.generated_at.strftime(TIMESTAMP_FORMAT)}\n\n",
        "Zastosowane filtry:\n",
    ]
    out.extend(f"- {line}\n" for line in report.filters)
    out.append("\n")

    for block in report.preamble:
        _render_block(block, out)

    if report.is_empty and report.empty_text:
        out.append(f"{report.empty_text}\n")

    for section in report.sections:
        if section.kind == "role":
            out.append(f"\n=== {section.heading} ===\n")
            for block in section.blocks:
                _render_block(block, out)
        else:
            out.append(f"=== {section.heading} ===\n")
            for block in section.blocks:
                _render_block(block, out)
            out.append("\n\n")
    return "".join(out)
