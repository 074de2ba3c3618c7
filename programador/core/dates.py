from datetime import date, datetime, timedelta
from typing import Iterator, Optional, Tuple


WEEKDAY_NAMES = {
    1: "Lunes",
    2: "Martes",
    3: "Miércoles",
    4: "Jueves",
    5: "Viernes",
    6: "Sábado",
    7: "Domingo",
}

WEEKDAY_BY_NAME = {name: number for number, name in WEEKDAY_NAMES.items()}


def weekday_label(value: date) -> str:
    return WEEKDAY_NAMES[value.isoweekday()]


def start_of_week(value: date) -> date:
    """Monday of the week containing ``value``."""
    return value - timedelta(days=value.weekday())


def daterange(start: date, end: date) -> Iterator[date]:
    """Every date from start to end, both inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def iter_weeks(start: date, end: date) -> Iterator[Tuple[date, date]]:
    """
    Monday-aligned weeks intersecting [start, end].

    Yields (monday, sunday) pairs; the first Monday may precede ``start``
    and the last Sunday may follow ``end``.
    """
    monday = start_of_week(start)
    while monday <= end:
        yield monday, monday + timedelta(days=6)
        monday += timedelta(days=7)


def parse_date_only(value) -> Optional[date]:
    """
    Parse a calendar date from a date, datetime or ISO string.

    Strings longer than ``YYYY-MM-DD`` are truncated, so timestamps such as
    ``2025-01-10T05:00:00Z`` resolve to their date part. Returns None for
    anything that is not a valid date.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raw = str(value).strip()
    if not raw:
        return None
    try:
        return date.fromisoformat(raw[:10])
    except ValueError:
        return None


def hm_to_minutes(value: str) -> int:
    """``"09:15"`` -> 555. Malformed parts count as zero."""
    if not isinstance(value, str):
        return 0
    parts = value.strip().split(":")
    try:
        hours = int(parts[0]) if parts[0] else 0
        minutes = int(parts[1]) if len(parts) > 1 and parts[1] else 0
    except ValueError:
        return 0
    return hours * 60 + minutes


def minutes_to_hm(minutes: int) -> str:
    """555 -> ``"09:15"``."""
    if minutes is None or minutes < 0:
        return "00:00"
    total = int(round(minutes))
    return f"{total // 60:02d}:{total % 60:02d}"
