# Rev 0.2.0
from __future__ import annotations

from PySide6.QtWidgets import QApplication

_DARK_QSS = """
QWidget { background-color: #1E1E2F; color: #E6E6F0; }
QLineEdit, QPlainTextEdit, QTextEdit, QComboBox, QDateEdit, QSpinBox, QListWidget, QTableWidget {
    background-color: #2A2A3D; border: 1px solid #3C3C55;
}
QHeaderView::section { background-color: #2A2A3D; color: #E6E6F0; padding: 4px; }
QPushButton { background-color: #007BFF; color: white; border-radius: 4px; padding: 4px 10px; }
QPushButton:disabled { background-color: #3C3C55; color: #8888A0; }
QFrame#HistoryCard { border: 1px solid #3C3C55; border-radius: 6px; }
"""

_LIGHT_QSS = """
QFrame#HistoryCard { border: 1px solid #D0D0DA; border-radius: 6px; }
QLabel#HistoryBadge { background-color: #F0F0F5; border-radius: 6px; padding: 2px 6px; }
"""


def apply_theme(app: QApplication, theme: str) -> None:
    app.setStyleSheet(_DARK_QSS if theme == "Dark" else _LIGHT_QSS)
