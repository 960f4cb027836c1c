"""
Shared pytest fixtures for icalcli tests.

Time is frozen to Wednesday 2026-02-18 10:00 in America/New_York so that
relative inputs ("today 09:45") and list periods are deterministic.
"""

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest
from freezegun import freeze_time

from icalcli.command import DateInterpreter
from icalcli.config import IcalConfig
from icalcli.store import CalendarStore

TZ_NAME = "America/New_York"
FROZEN_UTC = "2026-02-18 15:00:00"


@pytest.fixture
def tz():
    return ZoneInfo(TZ_NAME)


@pytest.fixture
def frozen_time():
    """
    Freeze time for the duration of the test.

    Usage:
        def test_something(frozen_time):
            frozen_time.tick(delta=timedelta(hours=2))
    """
    with freeze_time(FROZEN_UTC) as frozen:
        yield frozen


@pytest.fixture
def interpreter(tz, frozen_time):
    return DateInterpreter(tz)


@pytest.fixture
def calendar_dir(tmp_path):
    return tmp_path / "calendars"


@pytest.fixture
def store(calendar_dir, tz):
    return CalendarStore(calendar_dir, tz)


@pytest.fixture
def config(calendar_dir, tz):
    return IcalConfig(calendar_dir=calendar_dir, tz=tz, tzid=TZ_NAME, log_level=30)


@pytest.fixture
def local(tz):
    """Build an aware datetime in the test timezone."""

    def _local(*args):
        return datetime(*args, tzinfo=tz)

    return _local


@pytest.fixture
def day_window(local):
    def _window(year, month, day, days=1):
        start = local(year, month, day)
        return start, start + timedelta(days=days)

    return _window
