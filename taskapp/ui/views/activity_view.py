# Rev 0.2.0: administrator activity log browser
from __future__ import annotations

from typing import get_args

from PySide6.QtCore import QDate
from PySide6.QtWidgets import (
    QCheckBox, QComboBox, QDateEdit, QHBoxLayout, QHeaderView, QPushButton, QSpinBox,
    QTableWidget, QTableWidgetItem, QVBoxLayout, QWidget
)

from taskapp.models.types import ActivityType

_COLUMNS = ["Data", "Typ", "Użytkownik", "Zadanie", "Opis"]


class ActivityView(QWidget):
    def __init__(self, context, session, parent=None):
        super().__init__(parent)
        self._ctx = context
        self._session = session

        self._cmb_type = QComboBox()
        self._cmb_type.addItem("Wszystkie typy", None)
        for t in get_args(ActivityType):
            self._cmb_type.addItem(t, t)
        self._cmb_user = QComboBox()
        self._cmb_user.addItem("Wszyscy użytkownicy", None)
        for u in context.users.list_users():
            self._cmb_user.addItem(u.full_name, u.id)

        self._chk_range = QCheckBox("Zakres dat")
        self._date_from = QDateEdit(QDate.currentDate().addDays(-7))
        self._date_from.setCalendarPopup(True)
        self._date_to = QDateEdit(QDate.currentDate())
        self._date_to.setCalendarPopup(True)
        self._limit = QSpinBox()
        self._limit.setRange(10, 10000)
        self._limit.setValue(500)
        self._btn_refresh = QPushButton("Odśwież")

        bar = QHBoxLayout()
        for w in (self._cmb_type, self._cmb_user, self._chk_range, self._date_from, self._date_to,
                  self._limit, self._btn_refresh):
            bar.addWidget(w)
        bar.addStretch(1)

        self._table = QTableWidget(0, len(_COLUMNS))
        self._table.setHorizontalHeaderLabels(_COLUMNS)
        self._table.setEditTriggers(QTableWidget.NoEditTriggers)
        self._table.verticalHeader().setVisible(False)
        hdr = self._table.horizontalHeader()
        hdr.setSectionResizeMode(QHeaderView.ResizeToContents)
        hdr.setSectionResizeMode(4, QHeaderView.Stretch)
        self._table.setWordWrap(True)

        root = QVBoxLayout(self)
        root.addLayout(bar)
        root.addWidget(self._table, 1)

        self._btn_refresh.clicked.connect(self.reload)
        self._cmb_type.currentIndexChanged.connect(self.reload)
        self._cmb_user.currentIndexChanged.connect(self.reload)
        self.reload()

    def reload(self) -> None:
        ranged = self._chk_range.isChecked()
        rows = self._ctx.activities.list_activities_detailed(
            activity_type=self._cmb_type.currentData(),
            user_id=self._cmb_user.currentData(),
            start_date=self._date_from.date().toPython() if ranged else None,
            end_date=self._date_to.date().toPython() if ranged else None,
            limit=self._limit.value(),
        )
        self._table.setRowCount(len(rows))
        for r, a in enumerate(rows):
            values = [a.created_at or "", a.activity_type, a.user_name or "System", a.task_title or "", a.description]
            for c, v in enumerate(values):
                self._table.setItem(r, c, QTableWidgetItem(v))
