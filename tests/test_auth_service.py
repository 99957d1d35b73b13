# tests/test_auth_service.py
from __future__ import annotations

import pytest

from taskapp.models.types import ROLE_TEAM_LEADER
from taskapp.services.auth_service import (
    AuthService,
    PasswordChangeService,
    RegisterService,
    hash_password,
)
from taskapp.services.session import Session

from conftest import PASSWORD


@pytest.fixture()
def auth(repos, activity):
    return AuthService(repos.users, activity)


@pytest.fixture()
def passwords(repos, activity):
    return PasswordChangeService(repos.users, repos.settings, activity)


def test_hash_is_sha256_hex():
    h = hash_password("abc")
    assert h == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"


@pytest.mark.parametrize(
    "form, message",
    [
        (("jan", "Kowalski", "jan@example.com", "a!b", "a!b"), "Imię musi zaczynać się od wielkiej litery!"),
        (("Jan", "kowalski", "jan@example.com", "a!b", "a!b"), "Nazwisko musi zaczynać się od wielkiej litery!"),
        (("Jan", "Kowalski", "j@x", "a!b", "a!b"),
         "Email musi zawierać znak '@' z co najmniej dwoma znakami przed i po nim!"),
        (("Jan", "Kowalski", "jan@example.com", "abc123", "abc123"),
         "Hasło musi zawierać przynajmniej jeden znak specjalny!"),
        (("Jan", "Kowalski", "jan@example.com", "a!b", "a!c"), "Hasła nie są takie same!"),
    ],
)
def test_registration_validation_messages(repos, form, message):
    result = RegisterService(repos.users).register(*form)
    assert not result.success
    assert result.message == message
    assert repos.users.get_user_by_email(form[2]) is None


def test_registration_creates_team_leader(repos):
    result = RegisterService(repos.users).register("Jan", "Kowalski", "jan@example.com", "Tajne!1", "Tajne!1")
    assert result.success and result.message == "Rejestracja udana!"
    user = repos.users.get_user_by_email("jan@example.com")
    assert user.role_id == ROLE_TEAM_LEADER
    assert user.password == hash_password("Tajne!1")


def test_registration_duplicate_email(repos, world):
    result = RegisterService(repos.users).register("Ewa", "Inna", "e1@example.com", "Tajne!1", "Tajne!1")
    assert not result.success
    assert "email nie jest już zajęty" in result.message


def test_authenticate_and_login_activity(auth, repos, world):
    assert auth.authenticate("e1@example.com", "wrong") is None
    assert auth.authenticate("", PASSWORD) is None
    user = auth.authenticate("  e1@example.com ", PASSWORD)
    assert user is not None and user.id == world.e1.id
    (entry,) = repos.activities.list_activities(activity_type="LOGIN")
    assert entry.user_id == world.e1.id


def test_logout_is_logged(auth, repos, world):
    auth.logout(Session(world.e2))
    (entry,) = repos.activities.list_activities(activity_type="LOGOUT")
    assert entry.description == f"Użytkownik ID: {world.e2.id} wylogował się z systemu"


def test_user_changes_own_password(passwords, auth, repos, world):
    assert passwords.change_password(Session(world.e1), world.e1.id, "Nowe!haslo", "Nowe!haslo")
    assert auth.authenticate("e1@example.com", "Nowe!haslo") is not None
    assert repos.settings.get_settings(world.e1.id).last_password_change
    (entry,) = repos.activities.list_activities(activity_type="PASSWORD")
    assert entry.description == f"Użytkownik ID: {world.e1.id} zmienił swoje hasło"


def test_admin_resets_someone_elses_password(passwords, repos, world):
    assert passwords.change_password(Session(world.admin), world.e2.id, "Reset!1", "Reset!1")
    (entry,) = repos.activities.list_activities(activity_type="PASSWORD")
    assert entry.user_id == world.admin.id
    assert entry.description == f"Administrator zresetował hasło dla użytkownika ID: {world.e2.id}"


def test_non_admin_cannot_change_other_password(passwords, world):
    with pytest.raises(PermissionError):
        passwords.change_password(Session(world.m1), world.e1.id, "X!1", "X!1")


@pytest.mark.parametrize("new, confirm", [("", ""), ("Abc!1", "Abc!2")])
def test_password_change_validation(passwords, world, new, confirm):
    with pytest.raises(ValueError):
        passwords.change_password(Session(world.e1), world.e1.id, new, confirm)
