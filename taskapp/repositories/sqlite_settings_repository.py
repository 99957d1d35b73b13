# Rev 0.2.0
from __future__ import annotations

from typing import Optional

from taskapp.models.entities import Settings
from .base import SQLiteRepository


class SQLiteSettingsRepository(SQLiteRepository):
    """Per-user preferences (theme, default view, last password change)."""

    def get_settings(self, user_id: int) -> Optional[Settings]:
        row = self._fetch_one(
            "SELECT id, user_id, theme, default_view, last_password_change FROM settings WHERE user_id = ?",
            (user_id,),
        )
        return Settings(**row) if row else None

    def upsert_settings(self, settings: Settings) -> None:
        self._execute(
            """
            INSERT INTO settings(user_id, theme, default_view)
            VALUES (?, ?, ?)
            ON CONFLICT(user_id) DO UPDATE SET theme = excluded.theme,
                                               default_view = excluded.default_view
            """,
            (settings.user_id, settings.theme, settings.default_view),
        )

    def update_theme(self, user_id: int, theme: str) -> None:
        self._execute(
            """
            INSERT INTO settings(user_id, theme) VALUES (?, ?)
            ON CONFLICT(user_id) DO UPDATE SET theme = excluded.theme
            """,
            (user_id, theme),
        )

    def update_default_view(self, user_id: int, default_view: str) -> None:
        if default_view is None:
            raise ValueError("default_view required")
        self._execute(
            """
            INSERT INTO settings(user_id, default_view) VALUES (?, ?)
            ON CONFLICT(user_id) DO UPDATE SET default_view = excluded.default_view
            """,
            (user_id, default_view),
        )

    def touch_password_change(self, user_id: int) -> None:
        self._execute(
            """
            INSERT INTO settings(user_id, last_password_change) VALUES (?, datetime('now'))
            ON CONFLICT(user_id) DO UPDATE SET last_password_change = datetime('now')
            """,
            (user_id,),
        )
