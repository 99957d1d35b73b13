# tests/test_diagnostics.py
from __future__ import annotations

from taskapp.ui.diagnostics_dock import filter_lines, tail

LOG = [
    "2025-03-14 09:30:00 | INFO | taskapp.db | SQLite open x\n",
    "2025-03-14 09:30:01 | ERROR | taskapp.services.reports | Report TEAM_TASKS failed\n",
    "Traceback (most recent call last):\n",
    "sqlite3.OperationalError: database is locked\n",
    "2025-03-14 09:30:02 | DEBUG | taskapp.services.activity | LOGIN: x\n",
    "2025-03-14 09:30:03 | WARNING | taskapp.services.visibility | Dropping team ids\n",
]


def test_filter_keeps_tracebacks_with_their_record():
    got = filter_lines(LOG, "ERROR")
    assert got == LOG[1:4]


def test_filter_debug_keeps_everything():
    assert filter_lines(LOG) == LOG


def test_tail_limits_and_filters(tmp_path):
    p = tmp_path / "taskapp.log"
    p.write_text("".join(LOG), encoding="utf-8")
    assert tail(p, max_lines=1, min_level="INFO") == LOG[-1]
    assert tail(tmp_path / "none.log") == "(brak pliku logu)"
