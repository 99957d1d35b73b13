# Rev 0.2.0: task activity cards, newest first
from __future__ import annotations
from typing import List

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout, QLabel, QScrollArea, QFrame, QSizePolicy

from taskapp.models.entities import TaskActivity


class HistoryPanel(QWidget):
    _BADGES = {
        "CREATE": "utworzenie",
        "STATUS": "status",
        "ASSIGN": "przypisanie",
        "UPDATE": "edycja",
        "COMMENT": "komentarz",
    }

    def __init__(self, parent=None):
        super().__init__(parent)

        self._title = QLabel("Historia")
        self._title.setObjectName("HistoryPanelTitle")
        self._title.setSizePolicy(QSizePolicy.Preferred, QSizePolicy.Fixed)

        self._list_layout = QVBoxLayout()
        self._list_layout.setContentsMargins(12, 8, 12, 12)
        self._list_layout.setSpacing(8)

        body = QWidget()
        body.setObjectName("HistoryPanelBody")
        body.setLayout(self._list_layout)

        self._scroll = QScrollArea()
        self._scroll.setWidgetResizable(True)
        self._scroll.setWidget(body)

        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.addWidget(self._title)
        root.addWidget(self._scroll, 1)

        self.set_activities([])

    # ---- Public API
    def set_activities(self, activities: List[TaskActivity]) -> None:
        self._clear()
        if not activities:
            self._list_layout.addWidget(self._empty_state())
        for a in activities:
            self._list_layout.addWidget(self._make_card(a))
        self._list_layout.addStretch(1)

    # ---- Internals
    def _clear(self) -> None:
        while (item := self._list_layout.takeAt(0)):
            w = item.widget()
            if w:
                w.deleteLater()

    def _empty_state(self) -> QWidget:
        box = QFrame()
        box.setFrameShape(QFrame.StyledPanel)
        lay = QVBoxLayout(box)
        lbl = QLabel("Brak historii dla wybranego zadania.")
        lbl.setAlignment(Qt.AlignCenter)
        lbl.setObjectName("HistoryEmpty")
        lay.addWidget(lbl)
        return box

    def _make_card(self, a: TaskActivity) -> QWidget:
        card = QFrame()
        card.setObjectName("HistoryCard")
        card.setFrameShape(QFrame.StyledPanel)
        card.setProperty("historyReason", a.activity_type.lower())

        outer = QVBoxLayout(card)
        outer.setContentsMargins(12, 8, 12, 8)
        outer.setSpacing(6)

        row1 = QHBoxLayout()
        who = f" · {a.user_name}" if a.user_name else ""
        ts_lbl = QLabel(f"{a.created_at or ''}{who}")
        ts_lbl.setObjectName("HistoryTimestamp")
        badge = QLabel(self._BADGES.get(a.activity_type, a.activity_type.lower()))
        badge.setObjectName("HistoryBadge")
        badge.setMargin(4)
        badge.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Fixed)
        row1.addWidget(ts_lbl, 1)
        row1.addWidget(badge, 0, Qt.AlignRight)
        outer.addLayout(row1)

        text = QLabel(a.description)
        text.setWordWrap(True)
        text.setObjectName("HistorySummary")
        outer.addWidget(text)
        return card
