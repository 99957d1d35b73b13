# Rev 0.2.0
"""Form checks used by dialogs to enable/disable their confirm buttons."""
from __future__ import annotations

import re
from datetime import date
from typing import Iterable, Optional

_EMAIL_RE = re.compile(r"^.{2,}@.{2,}$")
_SPECIAL_RE = re.compile(r"[^A-Za-z0-9]")


def is_valid_email(email: Optional[str]) -> bool:
    return bool(email) and _EMAIL_RE.match(email) is not None


def is_capitalized(text: Optional[str]) -> bool:
    return bool(text) and text[0].isupper()


def has_special_char(password: Optional[str]) -> bool:
    return bool(password) and _SPECIAL_RE.search(password) is not None


def date_range_ok(start: Optional[date], end: Optional[date]) -> bool:
    """Open-ended ranges are fine; otherwise start must not be after end."""
    if start is None or end is None:
        return True
    return start <= end


def single_leader_ok(leader_flags: Iterable[bool]) -> bool:
    return sum(1 for flag in leader_flags if flag) <= 1
