from __future__ import annotations

from datetime import date

from src.hr_ops.hr_ops.core.enums import PtoStatus, PtoType
from src.hr_ops.hr_ops.pto.calendar_rules import (
    count_business_days,
    has_met_winter_requirement,
    winter_days_used,
    winter_requirement_status,
    winter_warning,
)
from src.hr_ops.hr_ops.pto.model import PtoRequest


def _req(rid, start, end, days, *, status=PtoStatus.APPROVED, is_exempt=False):
    return PtoRequest(
        request_id=rid,
        employee_id=1,
        start_date=start,
        end_date=end,
        days=days,
        pto_type=PtoType.VACATION,
        reason="trip",
        status=status,
        is_exempt=is_exempt,
    )


def test_business_days_skip_weekends_and_holidays():
    # Mon 2026-01-05 .. Sun 2026-01-11
    assert count_business_days(date(2026, 1, 5), date(2026, 1, 11)) == 5
    assert count_business_days(date(2026, 1, 5), date(2026, 1, 11), [date(2026, 1, 6)]) == 4
    assert count_business_days(date(2026, 1, 10), date(2026, 1, 11)) == 0


def test_business_days_of_reversed_range_is_zero():
    # Fri 2026-03-06 back to Mon 2026-03-02
    assert count_business_days(date(2026, 3, 6), date(2026, 3, 2)) == 0
    assert count_business_days(date(2026, 3, 6), date(2026, 3, 2), [date(2026, 3, 3)]) == 0


def test_request_spanning_new_year_is_split_between_years():
    requests = [_req(1, date(2026, 12, 20), date(2027, 1, 5), 11)]

    assert winter_days_used(requests, year=2026) == 12
    assert winter_days_used(requests, year=2027) == 5


def test_single_day_request_counts_recorded_days():
    requests = [_req(1, date(2026, 2, 3), date(2026, 2, 3), 0.5)]

    assert winter_days_used(requests, year=2026) == 0.5


def test_exempt_and_unapproved_requests_do_not_count():
    requests = [
        _req(1, date(2026, 1, 5), date(2026, 1, 9), 5, is_exempt=True),
        _req(2, date(2026, 2, 2), date(2026, 2, 6), 5, status=PtoStatus.PENDING),
        _req(3, date(2026, 6, 1), date(2026, 6, 5), 5),
    ]

    assert winter_days_used(requests, year=2026) == 0
    assert not has_met_winter_requirement(requests, year=2026)


def test_requirement_met_with_five_winter_days():
    requests = [_req(1, date(2026, 1, 5), date(2026, 1, 9), 5)]

    status = winter_requirement_status(requests, year=2026, required=5)

    assert status.is_met
    assert status.remaining == 0


def test_warning_only_for_non_winter_request_while_requirement_open():
    status = winter_requirement_status([], year=2026, required=5)

    assert winter_warning(date(2026, 6, 1), date(2026, 6, 5), status) == (
        "You have 5 winter PTO days remaining to use (required: 5 days in Jan, Feb, or Dec)"
    )
    assert winter_warning(date(2026, 12, 1), date(2026, 12, 2), status) is None

    met = winter_requirement_status([_req(1, date(2026, 1, 5), date(2026, 1, 9), 5)], year=2026)
    assert winter_warning(date(2026, 6, 1), date(2026, 6, 5), met) is None
