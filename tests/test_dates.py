from datetime import datetime, timedelta, timezone

import pytest

from icalcli.command.dates import is_date_only, parse_hour_minute


def test_today_time(interpreter, local):
    assert interpreter.interpret("today 09:45") == local(2026, 2, 18, 9, 45)


def test_tomorrow_time(interpreter, local):
    parsed = interpreter.interpret("tomorrow 07:15")
    assert parsed == local(2026, 2, 19, 7, 15)
    assert (parsed.date() - interpreter.today()).days == 1


def test_relative_is_case_insensitive_and_trimmed(interpreter, local):
    assert interpreter.interpret("  TOMORROW   9:05 ") == local(2026, 2, 19, 9, 5)


@pytest.mark.parametrize(
    "raw",
    [
        "today 99:99",
        "today 24:00",
        "today 10:60",
        "today",
        "today 10:00 extra",
        "yesterday 10:00",
        "today 10",
        "today ten:30",
    ],
)
def test_rejects_invalid_relative_input(interpreter, raw):
    assert interpreter.interpret(raw) is None


def test_iso_with_zulu(interpreter):
    assert interpreter.interpret("2026-02-20T14:00:00Z") == datetime(2026, 2, 20, 14, tzinfo=timezone.utc)


def test_iso_with_fractional_seconds_and_offset(interpreter):
    parsed = interpreter.interpret("2026-02-20T14:00:00.250+01:00")
    assert parsed == datetime(2026, 2, 20, 13, 0, 0, 250000, tzinfo=timezone.utc)


def test_iso_date_only_is_local_midnight(interpreter, local):
    assert interpreter.interpret("2026-02-20") == local(2026, 2, 20)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("2026-02-20 14:00", (2026, 2, 20, 14, 0)),
        ("2026-02-20 14:00:30", (2026, 2, 20, 14, 0, 30)),
        ("2026-02-20T14:00", (2026, 2, 20, 14, 0)),
        ("2026-02-22T10:00:00", (2026, 2, 22, 10, 0)),
        ("  2026-02-20 14:00  ", (2026, 2, 20, 14, 0)),
    ],
)
def test_local_patterns(interpreter, local, raw, expected):
    assert interpreter.interpret(raw) == local(*expected)


@pytest.mark.parametrize(
    "raw",
    ["2026-2-20 14:00", "2026-02-30", "2026-02-20 25:00", "next friday", "", "20260220T1400"],
)
def test_unparseable(interpreter, raw):
    assert interpreter.interpret(raw) is None


def test_local_inputs_preserve_order(interpreter):
    start = interpreter.interpret("2026-02-22 10:00")
    end = interpreter.interpret("2026-02-22 10:10")
    assert start < end

    iso_start = interpreter.interpret("2026-02-22T10:00:00")
    iso_end = interpreter.interpret("2026-02-22T10:30:00")
    assert iso_start < iso_end


def test_iso_and_local_agree_on_same_instant(interpreter):
    assert interpreter.interpret("2026-02-20T19:00:00Z") == interpreter.interpret("2026-02-20 14:00")


@pytest.mark.parametrize("raw", ["today 09:45", "2026-02-20T14:00:00Z", "2026-07-04 18:30:15"])
def test_reinterpreting_formatted_output_is_stable(interpreter, raw):
    value = interpreter.interpret(raw)
    local_value = value.astimezone(interpreter.tz)
    for formatted in (
        value.isoformat(),
        local_value.strftime("%Y-%m-%d %H:%M:%S"),
        local_value.strftime("%Y-%m-%dT%H:%M:%S"),
    ):
        assert interpreter.interpret(formatted) == value


def test_relative_follows_the_clock(interpreter, local, frozen_time):
    frozen_time.tick(delta=timedelta(days=3))
    assert interpreter.interpret("today 08:00") == local(2026, 2, 21, 8, 0)


@pytest.mark.parametrize(
    "raw, expected",
    [("2026-02-20", True), ("  2026-02-20 ", True), ("2026-02-20 10:00", False), ("20260220", False), ("today", False)],
)
def test_is_date_only(raw, expected):
    assert is_date_only(raw) is expected


def test_parse_hour_minute():
    assert parse_hour_minute("09:45") == (9, 45)
    assert parse_hour_minute("23:59") == (23, 59)
    assert parse_hour_minute("99:99") is None
    assert parse_hour_minute("9:5") is None
