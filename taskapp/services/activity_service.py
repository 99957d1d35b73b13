# Rev 0.2.0
"""
ActivityService: writes audit entries (task_activities) with the standard
Polish descriptions used across the app.
"""
from __future__ import annotations

import sqlite3
import traceback
from typing import Optional

from taskapp.utils.logging_setup import get_logger

log = get_logger("services.activity")


class ActivityService:
    def __init__(self, activities):
        self._repo = activities

    def _log(self, activity_type: str, description: str, *, task_id: Optional[int] = None,
             user_id: Optional[int] = None) -> bool:
        try:
            self._repo.insert_activity(
                activity_type=activity_type, description=description,
                task_id=task_id, user_id=user_id,
            )
        except sqlite3.Error:
            # audit failures never break the action that triggered them
            log.exception("Could not record %s activity", activity_type)
            return False
        log.debug("%s: %s", activity_type, description)
        return True

    # ---------- task events ----------

    def log_task_creation(self, task_id: int, user_id: int, title: str, assigned_to: Optional[int]) -> bool:
        desc = f'Utworzono zadanie "{title}" i przypisano do użytkownika ID: {assigned_to}'
        return self._log("CREATE", desc, task_id=task_id, user_id=user_id)

    def log_status_change(self, task_id: int, user_id: int, title: str, old_status: str, new_status: str) -> bool:
        desc = f'Zmieniono status zadania "{title}" z "{old_status}" na "{new_status}"'
        return self._log("STATUS", desc, task_id=task_id, user_id=user_id)

    def log_assignment(self, task_id: int, user_id: int, title: str,
                       old_assignee: Optional[int], new_assignee: Optional[int]) -> bool:
        if old_assignee:
            desc = (f'Zmieniono przypisanie zadania "{title}" z użytkownika ID: {old_assignee} '
                    f'na użytkownika ID: {new_assignee}')
        else:
            desc = f'Przypisano zadanie "{title}" do użytkownika ID: {new_assignee}'
        return self._log("ASSIGN", desc, task_id=task_id, user_id=user_id)

    def log_task_update(self, task_id: int, user_id: int, title: str, field: str,
                        old_value: object, new_value: object) -> bool:
        desc = f'Zaktualizowano pole "{field}" zadania "{title}" z "{old_value}" na "{new_value}"'
        return self._log("UPDATE", desc, task_id=task_id, user_id=user_id)

    def log_task_comment(self, task_id: int, user_id: int, title: str, comment: str) -> bool:
        return self._log("COMMENT", f'Dodano komentarz do zadania "{title}": {comment}',
                         task_id=task_id, user_id=user_id)

    # ---------- account / system events ----------

    def log_login(self, user_id: int) -> bool:
        return self._log("LOGIN", f"Użytkownik ID: {user_id} zalogował się do systemu", user_id=user_id)

    def log_logout(self, user_id: int) -> bool:
        return self._log("LOGOUT", f"Użytkownik ID: {user_id} wylogował się z systemu", user_id=user_id)

    def log_password_change(self, actor_id: int, target_user_id: int) -> bool:
        if actor_id != target_user_id:
            desc = f"Administrator zresetował hasło dla użytkownika ID: {target_user_id}"
        else:
            desc = f"Użytkownik ID: {target_user_id} zmienił swoje hasło"
        return self._log("PASSWORD", desc, user_id=actor_id)

    def log_user_management(self, admin_id: int, action: str, target_user_id: int, details: str = "") -> bool:
        desc = f"Administrator ID: {admin_id} wykonał akcję '{action}' na użytkowniku ID: {target_user_id}. {details}"
        return self._log("USER_MANAGEMENT", desc.rstrip(), user_id=admin_id)

    def log_team_management(self, user_id: int, action: str, team_id: int, details: str = "") -> bool:
        desc = f"Użytkownik ID: {user_id} wykonał akcję '{action}' na zespole ID: {team_id}. {details}"
        return self._log("TEAM_MANAGEMENT", desc.rstrip(), user_id=user_id)

    def log_report_generation(self, user_id: int, report_type: str, details: str = "") -> bool:
        desc = f"Użytkownik ID: {user_id} wygenerował raport typu '{report_type}'. {details}"
        return self._log("REPORT", desc.rstrip(), user_id=user_id)

    def log_config_change(self, admin_id: int, setting: str, old_value: object, new_value: object) -> bool:
        desc = f"Administrator ID: {admin_id} zmienił ustawienie '{setting}' z '{old_value}' na '{new_value}'"
        return self._log("CONFIG", desc, user_id=admin_id)

    def log_system_error(self, user_id: Optional[int], error: BaseException | str,
                         message: Optional[str] = None) -> bool:
        if isinstance(error, BaseException):
            err_type = type(error).__name__
            message = message or str(error)
            trace = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        else:
            err_type, trace = str(error), None
        desc = f"Błąd typu '{err_type}': {message or ''}"
        if trace and error.__traceback__ is not None:
            desc += f"\nStack trace: {trace}"
        return self._log("ERROR", desc, user_id=user_id)
