"""Numeric and date helpers shared by the statistics services."""

from __future__ import annotations

import math
import unicodedata
from datetime import date, datetime, tzinfo
from decimal import Decimal
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

RATING_MIN = 0.0
RATING_MAX = 20.0

MONTHS_FR = (
    "janvier",
    "février",
    "mars",
    "avril",
    "mai",
    "juin",
    "juillet",
    "août",
    "septembre",
    "octobre",
    "novembre",
    "décembre",
)


def to_finite(value: Any) -> Optional[float]:
    """Coerce a raw numeric field to a finite float, or None when unusable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    elif not isinstance(value, (int, float, Decimal)):
        return None
    try:
        number = float(value)
    except (OverflowError, ValueError):
        return None
    return number if math.isfinite(number) else None


def clamp_rating(value: float) -> float:
    return min(RATING_MAX, max(RATING_MIN, value))


def usable_rating(value: Any) -> Optional[float]:
    number = to_finite(value)
    return None if number is None else clamp_rating(number)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def round1(value: float) -> float:
    """Round to one decimal, halves rounded up (towards +inf), like Math.round."""
    return math.floor(value * 10 + 0.5) / 10


def positive_covers(value: Any) -> Optional[int]:
    number = to_finite(value)
    if number is None or number <= 0 or not number.is_integer():
        return None
    return int(number)


def resolve_zone(name: Optional[str]) -> Optional[tzinfo]:
    """Return the configured zone, or None for the process-local zone."""
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"unknown timezone: {name}") from exc


def parse_timestamp(value: Any, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """Parse a timestamp into an aware datetime expressed in ``tz`` (local when None).

    Naive values are read as wall-clock time in that zone; a date-only string
    is midnight of that calendar day in the zone, not UTC midnight. Returns None for
    anything that does not parse.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text[-1] in "zZ":
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    try:
        if tz is None:
            return parsed.astimezone()
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=tz)
        return parsed.astimezone(tz)
    except (OverflowError, OSError, ValueError):
        return None


def year_of(value: Any, tz: Optional[tzinfo] = None) -> Optional[int]:
    parsed = parse_timestamp(value, tz)
    return parsed.year if parsed else None


def month_label(year: int, month: int) -> str:
    return f"{MONTHS_FR[month - 1]} {year}"


def normalize_label(text: Any) -> str:
    """Accent- and case-insensitive form used to match tag labels."""
    decomposed = unicodedata.normalize("NFD", str(text or ""))
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.lower().strip()


def clean_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def name_sort_key(name: Any) -> tuple[str, str]:
    text = clean_text(name)
    return (normalize_label(text), text)
