"""Pure input checks.

Every check is total: it never raises and returns a ``Check`` saying whether
the value passed and, if not, why. ``first_failure`` and ``ensure`` turn a
sequence of checks into a single ValidationError.
"""

import re
from dataclasses import dataclass

from .errors import ValidationError

# Patterns are applied with fullmatch, so a trailing newline never passes
EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)
TIME_PATTERN = re.compile(r"([0-1][0-9]|2[0-3]):[0-5][0-9]", re.ASCII)

# Integer columns are 32-bit signed on every supported store
MAX_INTEGER = 2**31 - 1


@dataclass(frozen=True)
class Check:
    ok: bool
    reason: str | None = None
    details: object = None


PASSED = Check(ok=True)


def is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def check_required(record, fields) -> Check:
    """Fail when any of ``fields`` is absent, null or an empty string."""
    record = record if isinstance(record, dict) else {}
    missing = [name for name in fields if is_blank(record.get(name))]
    if missing:
        return Check(
            ok=False,
            reason=f"Missing required fields: {', '.join(fields)}",
            details={"missing_fields": missing},
        )
    return PASSED


def check_string(value, field) -> Check:
    if isinstance(value, str):
        return PASSED
    return Check(ok=False, reason=f"{field} must be a string")


def check_email(value) -> Check:
    if isinstance(value, str) and EMAIL_PATTERN.fullmatch(value):
        return PASSED
    return Check(ok=False, reason="Invalid email format")


def check_date(value) -> Check:
    # Shape only: 2024-02-31 passes
    if isinstance(value, str) and DATE_PATTERN.fullmatch(value):
        return PASSED
    return Check(ok=False, reason="Invalid date format. Expected YYYY-MM-DD")


def check_time(value) -> Check:
    if isinstance(value, str) and TIME_PATTERN.fullmatch(value):
        return PASSED
    return Check(ok=False, reason="Invalid time format. Expected HH:MM (24-hour format)")


def check_choice(value, allowed, field="status") -> Check:
    if value in allowed:
        return PASSED
    return Check(
        ok=False,
        reason=f"Invalid {field}. Must be one of: {', '.join(allowed)}",
        details={"allowed": list(allowed)},
    )


def check_positive_int(value, field) -> Check:
    number = parse_identifier(value)
    if number is not None and number > 0:
        return PASSED
    return Check(ok=False, reason=f"{field} must be a positive whole number")


def parse_identifier(value) -> int | None:
    """Return ``value`` as a non-negative integer the store can hold, or None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.strip()
        if not (text.isascii() and text.isdecimal()):
            return None
        value = int(text)
    if isinstance(value, int) and 0 <= value <= MAX_INTEGER:
        return value
    return None


def first_failure(*checks) -> Check | None:
    for check in checks:
        if not check.ok:
            return check
    return None


def ensure(*checks) -> None:
    """Raise a ValidationError for the first failing check."""
    failure = first_failure(*checks)
    if failure is not None:
        raise ValidationError(failure.reason, details=failure.details)
