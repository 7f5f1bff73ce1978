"""Business-day and winter-requirement arithmetic for PTO.

Everything here is pure: callers pass the holidays and requests in, so the
functions are easy to exercise without a database.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from ..common.datetime_utils import iter_days
from ..core.constants import DEFAULT_REQUIRED_WINTER_DAYS, WINTER_MONTHS
from ..core.enums import PtoStatus
from .model import CompanyPolicy, PtoRequest, WinterStatus


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def is_holiday(day: date, holidays: Iterable[date]) -> bool:
    return day in set(holidays)


def company_holidays(policy: Optional[CompanyPolicy]) -> frozenset[date]:
    if policy is None:
        return frozenset()
    return frozenset(h.day for h in policy.holidays)


def count_business_days(start: date, end: date, holidays: Iterable[date] = ()) -> int:
    """Inclusive count of days in ``start..end`` that are neither weekend nor holiday."""
    closed = frozenset(holidays)
    return sum(1 for day in iter_days(start, end) if not is_weekend(day) and day not in closed)


def count_weekdays(start: date, end: date) -> int:
    return count_business_days(start, end)


def is_winter_month(day: date) -> bool:
    return day.month in WINTER_MONTHS


def has_winter_days(start: date, end: date) -> bool:
    return any(is_winter_month(day) for day in iter_days(start, end))


def winter_days_in_request(request: PtoRequest, *, year: Optional[int] = None) -> float:
    """Winter days one request contributes.

    A single-day request counts its recorded ``days`` (so a half day stays a half);
    longer requests count every calendar day that falls in a winter month. With
    ``year`` only days dated in that year count, so a request spanning New Year
    is split between the two years.
    """

    def counts(day: date) -> bool:
        return is_winter_month(day) and (year is None or day.year == year)

    if request.start_date == request.end_date:
        return float(request.days) if counts(request.start_date) else 0.0
    return float(sum(1 for day in iter_days(request.start_date, request.end_date) if counts(day)))


def winter_days_used(requests: Iterable[PtoRequest], *, year: Optional[int] = None) -> float:
    total = 0.0
    for request in requests:
        if request.status != PtoStatus.APPROVED or request.is_exempt:
            continue
        total += winter_days_in_request(request, year=year)
    return total


def has_met_winter_requirement(
    requests: Iterable[PtoRequest],
    *,
    year: Optional[int] = None,
    required: float = DEFAULT_REQUIRED_WINTER_DAYS,
) -> bool:
    return winter_days_used(requests, year=year) >= required


def winter_requirement_status(
    requests: Iterable[PtoRequest],
    *,
    year: int,
    required: float = DEFAULT_REQUIRED_WINTER_DAYS,
) -> WinterStatus:
    used = winter_days_used(requests, year=year)
    return WinterStatus(
        required=required,
        used=used,
        remaining=max(0.0, required - used),
        is_met=used >= required,
    )


def winter_warning(start: date, end: date, status: WinterStatus) -> Optional[str]:
    """Warning shown when a request skips winter while the requirement is still open."""
    if status.is_met or status.remaining <= 0:
        return None
    if has_winter_days(start, end):
        return None
    return (
        f"You have {_fmt_days(status.remaining)} winter PTO days remaining to use "
        f"(required: {_fmt_days(status.required)} days in Jan, Feb, or Dec)"
    )


def _fmt_days(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"
