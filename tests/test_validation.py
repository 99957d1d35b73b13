# tests/test_validation.py
from __future__ import annotations

from datetime import date

import pytest

from taskapp.services.validation import (
    date_range_ok,
    has_special_char,
    is_capitalized,
    is_valid_email,
    single_leader_ok,
)


@pytest.mark.parametrize(
    "email, ok",
    [("ab@cd", True), ("jan.kowalski@firma.pl", True), ("a@cd", False), ("ab@c", False), ("abcd", False), ("", False), (None, False)],
)
def test_email_rule(email, ok):
    assert is_valid_email(email) is ok


def test_capitalized():
    assert is_capitalized("Łukasz")
    assert not is_capitalized("łukasz")
    assert not is_capitalized("")


def test_special_char():
    assert has_special_char("abc!")
    assert has_special_char("hasło")  # non-ASCII letters count as special
    assert not has_special_char("Abc123")
    assert not has_special_char(None)


def test_date_range():
    assert date_range_ok(None, date(2025, 1, 1))
    assert date_range_ok(date(2025, 1, 1), date(2025, 1, 1))
    assert not date_range_ok(date(2025, 1, 2), date(2025, 1, 1))


def test_single_leader():
    assert single_leader_ok([])
    assert single_leader_ok([False, True, False])
    assert not single_leader_ok([True, True])
