from __future__ import annotations

import time
from datetime import date, datetime

import pytest
import pytz

from src.hr_ops.hr_ops.common import datetime_utils
from src.hr_ops.hr_ops.common.datetime_utils import (
    DEFAULT_TIMEZONE,
    iter_days,
    local_timezone,
    now_local,
    ranges_overlap,
    set_local_timezone,
    today_local,
)


@pytest.fixture()
def utc_host(monkeypatch):
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv("TZ", "UTC")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.fixture(autouse=True)
def restore_timezone():
    yield
    set_local_timezone(DEFAULT_TIMEZONE)


def test_now_local_follows_business_timezone_on_utc_host(utc_host):
    eastern = pytz.timezone("America/New_York")

    local = now_local()
    expected = datetime.now(eastern).replace(tzinfo=None)

    assert local.tzinfo is None
    assert abs((expected - local).total_seconds()) < 60
    assert today_local() == datetime.now(eastern).date()


def test_set_local_timezone_switches_clock(utc_host):
    set_local_timezone("Asia/Tokyo")

    expected = datetime.now(pytz.timezone("Asia/Tokyo")).replace(tzinfo=None)

    assert local_timezone().zone == "Asia/Tokyo"
    assert abs((expected - now_local()).total_seconds()) < 60


def test_default_zone_is_new_york():
    assert datetime_utils.local_timezone().zone == DEFAULT_TIMEZONE == "America/New_York"


def test_iter_days_and_overlap():
    assert list(iter_days(date(2026, 1, 30), date(2026, 2, 1))) == [
        date(2026, 1, 30),
        date(2026, 1, 31),
        date(2026, 2, 1),
    ]
    assert list(iter_days(date(2026, 2, 2), date(2026, 2, 1))) == []
    assert ranges_overlap(date(2026, 3, 1), date(2026, 3, 5), date(2026, 3, 5), date(2026, 3, 9))
    assert not ranges_overlap(date(2026, 3, 1), date(2026, 3, 4), date(2026, 3, 5), date(2026, 3, 9))
