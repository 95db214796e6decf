"""Request payload coercion.

Each helper returns a clean Python value or raises ValidationFailure, so
handlers can stay linear.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime

from errors import ValidationFailure


_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def parse_date(value, field: str, required: bool = True) -> date | None:
    """Accepts 'YYYY-MM-DD' or an ISO datetime ('...T...Z'); keeps the calendar date only."""
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            raise ValidationFailure(f"{field} is required")
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    s = str(value).strip()
    if s.endswith("Z"):
        s = s[:-1]
    try:
        if "T" in s:
            return datetime.fromisoformat(s).date()
        return date.fromisoformat(s)
    except ValueError:
        raise ValidationFailure(f"{field} must be an ISO date (YYYY-MM-DD)")


def parse_number(value, field: str, positive: bool = False, allow_negative: bool = True) -> float:
    if value is None or isinstance(value, bool):
        raise ValidationFailure(f"{field} is required")
    try:
        num = float(value)
    except (TypeError, ValueError):
        raise ValidationFailure(f"{field} must be a number")
    if not math.isfinite(num):
        raise ValidationFailure(f"{field} must be a finite number")
    if positive and num <= 0:
        raise ValidationFailure(f"{field} must be > 0")
    if not allow_negative and num < 0:
        raise ValidationFailure(f"{field} must be >= 0")
    return num


def parse_int(value, field: str, positive: bool = False, allow_negative: bool = True) -> int:
    num = parse_number(value, field, positive=positive, allow_negative=allow_negative)
    if num != int(num):
        raise ValidationFailure(f"{field} must be an integer")
    return int(num)


def parse_choice(value, field: str, choices, required: bool = True) -> str | None:
    if value is None or value == "":
        if required:
            raise ValidationFailure(f"{field} is required")
        return None
    if value not in choices:
        raise ValidationFailure(f"Invalid {field}: {value}. Expected one of: {', '.join(choices)}")
    return value


def parse_text(value, field: str, required: bool = True, min_length: int = 1) -> str | None:
    s = (value or "").strip() if isinstance(value, str) or value is None else str(value).strip()
    if not s:
        if required:
            raise ValidationFailure(f"{field} is required")
        return None
    if len(s) < min_length:
        raise ValidationFailure(f"{field} must be at least {min_length} characters")
    return s


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email or ""))
