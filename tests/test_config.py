import logging
from datetime import timedelta
from zoneinfo import ZoneInfo

import pytest

from icalcli.config import load_config, resolve_timezone
from icalcli.errors import ConfigError, IcalError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("ICAL_CALENDAR_DIR", "ICAL_TZ", "ICAL_LOG_LEVEL", "XDG_CONFIG_HOME"):
        monkeypatch.delenv(name, raising=False)


def test_load_config_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("ICAL_CALENDAR_DIR", str(tmp_path / "cals"))
    monkeypatch.setenv("ICAL_TZ", "Europe/Berlin")
    monkeypatch.setenv("ICAL_LOG_LEVEL", "debug")

    config = load_config()

    assert config.calendar_dir == (tmp_path / "cals").resolve()
    assert config.tz == ZoneInfo("Europe/Berlin")
    assert config.tzid == "Europe/Berlin"
    assert config.log_level == logging.DEBUG


def test_default_calendar_dir_follows_xdg(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    monkeypatch.setenv("ICAL_TZ", "UTC")
    assert load_config().calendar_dir == (tmp_path / "icalcli" / "calendars").resolve()


def test_unknown_log_level_falls_back_to_warning(monkeypatch):
    monkeypatch.setenv("ICAL_TZ", "UTC")
    monkeypatch.setenv("ICAL_LOG_LEVEL", "chatty")
    assert load_config().log_level == logging.WARNING


def test_invalid_timezone(monkeypatch):
    monkeypatch.setenv("ICAL_TZ", "Mars/Olympus")
    with pytest.raises(ConfigError) as excinfo:
        load_config()
    assert excinfo.value.message.startswith("Invalid timezone 'Mars/Olympus'")
    assert excinfo.value.code == "CONFIG_ERROR"
    assert isinstance(excinfo.value, IcalError)


def test_fixed_offset_timezone():
    tz, tzid = resolve_timezone("UTC+05:30")
    assert tzid == "UTC+05:30"
    assert tz.utcoffset(None) == timedelta(hours=5, minutes=30)

    tz, _ = resolve_timezone("UTC-0200")
    assert tz.utcoffset(None) == timedelta(hours=-2)
