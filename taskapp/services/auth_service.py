# Rev 0.2.0
"""Login, registration and password changes."""
from __future__ import annotations

import hashlib
import sqlite3
from dataclasses import dataclass
from typing import Optional

from taskapp.models.entities import User
from taskapp.models.types import ROLE_TEAM_LEADER
from taskapp.services.session import Session
from taskapp.services.validation import has_special_char, is_capitalized, is_valid_email
from taskapp.utils.logging_setup import get_logger

log = get_logger("services.auth")

DEFAULT_GROUP_ID = 1


def hash_password(password: str) -> str:
    """SHA-256 hex digest, as stored in users.password."""
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


class AuthService:
    def __init__(self, users, activity=None):
        self._users = users
        self._activity = activity

    def authenticate(self, email: str, password: str) -> Optional[User]:
        if not email or not password:
            return None
        user = self._users.get_user_by_email(email.strip())
        if user is None or user.password != hash_password(password):
            log.info("Failed login for %s", email)
            return None
        log.info("User %s logged in", user.id)
        if self._activity is not None:
            self._activity.log_login(user.id)
        return user

    def logout(self, session: Session) -> None:
        if self._activity is not None:
            self._activity.log_logout(session.user_id)
        log.info("User %s logged out", session.user_id)


@dataclass(frozen=True)
class RegistrationResult:
    success: bool
    message: str


class RegisterService:
    def __init__(self, users):
        self._users = users

    @staticmethod
    def check(first_name: str, last_name: str, email: str, password: str, confirm: str) -> Optional[str]:
        """First validation message that applies, or None when the form is valid."""
        if not is_capitalized(first_name):
            return "Imię musi zaczynać się od wielkiej litery!"
        if not is_capitalized(last_name):
            return "Nazwisko musi zaczynać się od wielkiej litery!"
        if not is_valid_email(email):
            return "Email musi zawierać znak '@' z co najmniej dwoma znakami przed i po nim!"
        if not has_special_char(password):
            return "Hasło musi zawierać przynajmniej jeden znak specjalny!"
        if password != confirm:
            return "Hasła nie są takie same!"
        return None

    def register(self, first_name: str, last_name: str, email: str, password: str, confirm: str,
                 password_hint: str = "") -> RegistrationResult:
        problem = self.check(first_name, last_name, email, password, confirm)
        if problem:
            return RegistrationResult(False, problem)

        user = User(
            id=None, name=first_name, last_name=last_name, email=email,
            role_id=ROLE_TEAM_LEADER, group_id=DEFAULT_GROUP_ID,
            password=hash_password(password), password_hint=password_hint,
        )
        try:
            self._users.insert_user(user)
        except sqlite3.IntegrityError:
            log.info("Registration rejected for %s (duplicate email)", email)
            return RegistrationResult(False, "Rejestracja nie powiodła się! Sprawdź, czy email nie jest już zajęty.")
        log.info("Registered user %s", user.id)
        return RegistrationResult(True, "Rejestracja udana!")


class PasswordChangeService:
    def __init__(self, users, settings=None, activity=None):
        self._users = users
        self._settings = settings
        self._activity = activity

    @staticmethod
    def validate_and_hash(new_password: str, confirm: str) -> str:
        if not new_password:
            raise ValueError("Pole hasła nie może być puste!")
        if new_password != confirm:
            raise ValueError("Hasła nie są takie same!")
        return hash_password(new_password)

    def change_password(self, session: Session, user_id: int, new_password: str, confirm: str) -> bool:
        if user_id != session.user_id and not session.is_admin:
            raise PermissionError("Tylko administrator może zmieniać hasła innych użytkowników")
        hashed = self.validate_and_hash(new_password, confirm)
        if not self._users.update_password(user_id, hashed):
            return False
        if self._settings is not None:
            self._settings.touch_password_change(user_id)
        if self._activity is not None:
            self._activity.log_password_change(session.user_id, user_id)
        return True
