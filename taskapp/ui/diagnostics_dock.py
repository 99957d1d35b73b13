# taskapp/ui/diagnostics_dock.py
# Rev 0.2.0: log tail for admins, filterable by minimum level
from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QTextCursor
from PySide6.QtWidgets import (
    QCheckBox, QComboBox, QDockWidget, QHBoxLayout, QLabel, QPlainTextEdit, QPushButton,
    QVBoxLayout, QWidget,
)

from taskapp.utils.logging_setup import log_file

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _level_of(line: str) -> Optional[str]:
    # "<asctime> | LEVEL | name | message"; continuation lines have no level
    parts = line.split(" | ", 2)
    if len(parts) >= 2 and parts[1].strip() in LEVELS:
        return parts[1].strip()
    return None


def filter_lines(lines: List[str], min_level: str = "DEBUG") -> List[str]:
    """Keep records at or above min_level; tracebacks follow the record they belong to."""
    floor = LEVELS.index(min_level)
    out, keep = [], True
    for line in lines:
        level = _level_of(line)
        if level is not None:
            keep = LEVELS.index(level) >= floor
        if keep:
            out.append(line)
    return out


def tail(path: Path, max_lines: int = 500, min_level: str = "DEBUG") -> str:
    try:
        with path.open("r", encoding="utf-8", errors="replace") as f:
            lines = f.readlines()
    except FileNotFoundError:
        return "(brak pliku logu)"
    except OSError as e:
        return f"(błąd odczytu logu: {e})"
    return "".join(filter_lines(lines, min_level)[-max_lines:])


class DiagnosticsDock(QDockWidget):
    def __init__(self, parent=None, path: Path | None = None):
        super().__init__("Diagnostyka", parent)
        self.setObjectName("DiagnosticsDock")
        self.setAllowedAreas(Qt.BottomDockWidgetArea | Qt.TopDockWidgetArea)
        self.log_file = Path(path) if path else log_file()

        body = QWidget()
        root = QVBoxLayout(body)
        bar = QHBoxLayout()
        bar.addWidget(QLabel(f"Plik: {self.log_file}"), 1)
        bar.addWidget(QLabel("Poziom:"))
        self.cmb_level = QComboBox()
        self.cmb_level.addItems(LEVELS)
        self.cmb_level.setCurrentText("INFO")
        bar.addWidget(self.cmb_level)
        self.chk_auto = QCheckBox("Auto-odświeżanie")
        self.chk_auto.setChecked(True)
        bar.addWidget(self.chk_auto)
        btn_reload = QPushButton("Odśwież")
        bar.addWidget(btn_reload)
        root.addLayout(bar)

        self.view = QPlainTextEdit()
        self.view.setReadOnly(True)
        self.view.setLineWrapMode(QPlainTextEdit.NoWrap)
        root.addWidget(self.view, 1)
        self.setWidget(body)

        self._timer = QTimer(self)
        self._timer.setInterval(1500)
        self._timer.timeout.connect(self.reload)

        btn_reload.clicked.connect(self.reload)
        self.cmb_level.currentTextChanged.connect(lambda _: self.reload())
        self.chk_auto.toggled.connect(self._set_auto)
        self.visibilityChanged.connect(self._on_visibility)

        self._set_auto(True)
        self.reload()

    def _set_auto(self, on: bool) -> None:
        if on and self.isVisible():
            self._timer.start()
        else:
            self._timer.stop()

    def _on_visibility(self, visible: bool) -> None:
        # no polling while the dock is hidden
        self._set_auto(visible and self.chk_auto.isChecked())

    def reload(self) -> None:
        self.view.setPlainText(tail(self.log_file, min_level=self.cmb_level.currentText()))
        self.view.moveCursor(QTextCursor.End)
