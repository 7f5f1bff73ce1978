from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterator

import pytz

from ..core.exceptions import ValidationError

DEFAULT_TIMEZONE = "America/New_York"

_local_tz = pytz.timezone(DEFAULT_TIMEZONE)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def require_iso_date(value, field_name: str) -> date:
    """Like ``parse_iso_date`` but raises ``ValidationError`` with the field name."""
    if isinstance(value, date):
        return value
    try:
        return parse_iso_date(str(value or "").strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be a date in YYYY-MM-DD format")


def set_local_timezone(name: str) -> None:
    """Set the business timezone used by ``now_local`` (``SCHEDULER_TIMEZONE``)."""
    global _local_tz
    _local_tz = pytz.timezone(name)


def local_timezone():
    return _local_tz


def now_local() -> datetime:
    """Current wall-clock time in the business timezone.

    Naive, like the DATETIME columns it is compared with. Wrapped so tests can patch it.
    """
    return datetime.now(_local_tz).replace(tzinfo=None)


def today_local() -> date:
    return now_local().date()


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from ``start`` to ``end`` inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def ranges_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    return a_start <= b_end and a_end >= b_start
