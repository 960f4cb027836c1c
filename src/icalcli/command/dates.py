"""Date/time interpretation for command-line values.

Inputs are tried against an ordered list of attempts (relative day
shorthand, ISO 8601, local date-time patterns); the first attempt that
produces a value wins. Every attempt returns ``None`` instead of raising so
one failing form never hides a later one.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Callable, Optional

from .constants import LOCAL_DATETIME_FORMATS, RELATIVE_DAY_OFFSETS

logger = logging.getLogger(__name__)

_DATE_ONLY_RE = re.compile(r"\d{4}-\d{2}-\d{2}")
_HOUR_MINUTE_RE = re.compile(r"(\d{1,2}):(\d{2})")
_OFFSET = r"(?:Z|[+-]\d{2}:?\d{2})"

ISO_DATETIME_FORMATS = (
    (re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{1,6}" + _OFFSET), "%Y-%m-%dT%H:%M:%S.%f%z"),
    (re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}" + _OFFSET), "%Y-%m-%dT%H:%M:%S%z"),
)

_LOCAL_FORMATS = tuple((re.compile(pattern), fmt) for pattern, fmt in LOCAL_DATETIME_FORMATS)


def is_date_only(raw: str) -> bool:
    return _DATE_ONLY_RE.fullmatch(raw.strip()) is not None


def parse_hour_minute(value: str) -> Optional[tuple[int, int]]:
    match = _HOUR_MINUTE_RE.fullmatch(value)
    if not match:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None
    return hour, minute


def _strptime(value: str, pattern: re.Pattern[str], fmt: str) -> Optional[datetime]:
    if pattern.fullmatch(value) is None:
        return None
    try:
        return datetime.strptime(value, fmt)
    except ValueError:
        return None


class DateInterpreter:
    def __init__(self, tz: tzinfo) -> None:
        self.tz = tz
        self._attempts: tuple[Callable[[str], Optional[datetime]], ...] = (
            self._relative,
            self._iso_datetime,
            self._iso_date,
            self._local_datetime,
        )

    def interpret(self, raw: str) -> Optional[datetime]:
        value = raw.strip()
        for attempt in self._attempts:
            parsed = attempt(value)
            if parsed is not None:
                logger.debug("Interpreted %r as %s via %s", value, parsed.isoformat(), attempt.__name__)
                return parsed
        return None

    def today(self) -> date:
        return datetime.now(self.tz).date()

    def start_of_day(self, day: date) -> datetime:
        return datetime.combine(day, time.min, tzinfo=self.tz)

    def _relative(self, value: str) -> Optional[datetime]:
        parts = value.split()
        if len(parts) != 2:
            return None
        offset = RELATIVE_DAY_OFFSETS.get(parts[0].lower())
        if offset is None:
            return None
        hour_minute = parse_hour_minute(parts[1])
        if hour_minute is None:
            return None
        hour, minute = hour_minute
        target_day = self.today() + timedelta(days=offset)
        return datetime.combine(target_day, time(hour, minute), tzinfo=self.tz)

    def _iso_datetime(self, value: str) -> Optional[datetime]:
        for pattern, fmt in ISO_DATETIME_FORMATS:
            parsed = _strptime(value, pattern, fmt)
            if parsed is not None:
                return parsed
        return None

    def _iso_date(self, value: str) -> Optional[datetime]:
        parsed = _strptime(value, _DATE_ONLY_RE, "%Y-%m-%d")
        if parsed is None:
            return None
        return self.start_of_day(parsed.date())

    def _local_datetime(self, value: str) -> Optional[datetime]:
        for pattern, fmt in _LOCAL_FORMATS:
            parsed = _strptime(value, pattern, fmt)
            if parsed is not None:
                return parsed.replace(tzinfo=self.tz)
        return None
