"""
Taco Cloud - Shared Helpers
=============================
Pure utility functions with NO database or module dependencies.
"""

import re
from datetime import datetime, timezone
from typing import Optional


def now_utc() -> datetime:
    """Returns current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def card_digits(number: str) -> str:
    """Strip the spaces and dashes people type between card digit groups."""
    return re.sub(r"[\s-]", "", number or "")


def is_valid_card_number(number: str) -> bool:
    """Luhn checksum over the digits of a card number (spaces and dashes allowed)."""
    digits = card_digits(number)
    if not digits.isdigit() or not 12 <= len(digits) <= 19:
        return False
    total = 0
    for i, ch in enumerate(reversed(digits)):
        d = int(ch)
        if i % 2 == 1:
            d *= 2
            if d > 9:
                d -= 9
        total += d
    return total % 10 == 0


_CC_EXPIRATION = re.compile(r"^(0[1-9]|1[0-2])/([1-9][0-9])$")


def is_valid_cc_expiration(value: str) -> bool:
    """MM/YY, e.g. 04/27."""
    return bool(_CC_EXPIRATION.match((value or "").strip()))


def format_datetime(value, fmt: str = "%Y-%m-%d %H:%M") -> str:
    """Jinja filter: render a datetime, blank for None."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        return as_utc(value).strftime(fmt)
    return str(value)


def mask_card(number: str) -> str:
    """Jinja filter: show only the last four card digits."""
    digits = re.sub(r"\D", "", number or "")
    if len(digits) < 4:
        return "****"
    return "**** " + digits[-4:]
