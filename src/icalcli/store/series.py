"""Grouping of VEVENT components into series and occurrence expansion."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Iterator, Optional

from dateutil.rrule import rrule, rrulestr
from icalendar import Calendar, Event, vRecur

from .constants import OCCURRENCE_SEPARATOR, OCCURRENCE_STAMP_FORMAT

_STAMP_RE = re.compile(r"\d{8}T\d{6}Z")


@dataclass(frozen=True)
class Occurrence:
    component: Event
    key: datetime
    start: datetime
    end: datetime


@dataclass
class Series:
    uid: str
    master: Optional[Event] = None
    overrides: dict[datetime, Event] = field(default_factory=dict)

    @property
    def has_rule(self) -> bool:
        return self.master is not None and self.master.get("rrule") is not None

    @property
    def recurring(self) -> bool:
        return self.has_rule or bool(self.overrides)

    def components(self) -> list[Event]:
        items = [self.master] if self.master is not None else []
        return items + list(self.overrides.values())


def is_all_day_value(value: date | datetime) -> bool:
    return isinstance(value, date) and not isinstance(value, datetime)


def to_local(value: date | datetime, tz: tzinfo) -> datetime:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=tz)
        return value.astimezone(tz)
    return datetime.combine(value, time.min, tzinfo=tz)


def occurrence_key(value: date | datetime, tz: tzinfo) -> datetime:
    return to_local(value, tz).astimezone(timezone.utc)


def occurrence_id(uid: str, key: datetime) -> str:
    return f"{uid}{OCCURRENCE_SEPARATOR}{key.astimezone(timezone.utc).strftime(OCCURRENCE_STAMP_FORMAT)}"


def split_event_id(event_id: str) -> tuple[str, Optional[datetime]]:
    uid, separator, stamp = event_id.rpartition(OCCURRENCE_SEPARATOR)
    if not separator or not uid or not _STAMP_RE.fullmatch(stamp):
        return event_id, None
    key = datetime.strptime(stamp, OCCURRENCE_STAMP_FORMAT).replace(tzinfo=timezone.utc)
    return uid, key


def group_series(calendar: Calendar, tz: tzinfo) -> dict[str, Series]:
    grouped: dict[str, Series] = {}
    for component in calendar.walk("VEVENT"):
        uid = str(component.get("uid", ""))
        series = grouped.setdefault(uid, Series(uid=uid))
        recurrence_id = component.get("recurrence-id")
        if recurrence_id is None:
            series.master = component
        else:
            series.overrides[occurrence_key(recurrence_id.dt, tz)] = component
    return grouped


def component_times(component: Event, tz: tzinfo) -> tuple[datetime, datetime, bool]:
    start_prop = component.get("dtstart")
    if start_prop is None:
        raise ValueError("Event is missing DTSTART")
    raw_start = start_prop.dt
    all_day = is_all_day_value(raw_start)
    start = to_local(raw_start, tz)

    end_prop = component.get("dtend")
    duration_prop = component.get("duration")
    if end_prop is not None:
        end = to_local(end_prop.dt, tz)
    elif duration_prop is not None:
        end = start + duration_prop.dt
    elif all_day:
        end = to_local(raw_start + timedelta(days=1), tz)
    else:
        end = start
    return start, end, all_day


def _until_utc(value: date | datetime, tz: tzinfo) -> datetime:
    if is_all_day_value(value):
        return datetime.combine(value, time(23, 59, 59), tzinfo=tz).astimezone(timezone.utc)
    return to_local(value, tz).astimezone(timezone.utc)


def recurrence_rule(component: Event, dtstart: datetime, tz: tzinfo) -> rrule:
    recur = vRecur(component["rrule"])
    until = recur.get("UNTIL")
    if until:
        value = until[0] if isinstance(until, list) else until
        recur["UNTIL"] = [_until_utc(value, tz)]
    return rrulestr(recur.to_ical().decode("utf-8"), dtstart=dtstart)


def excluded_keys(component: Event, tz: tzinfo) -> set[datetime]:
    keys: set[datetime] = set()
    exdates = component.get("exdate")
    if exdates is None:
        return keys
    if not isinstance(exdates, list):
        exdates = [exdates]
    for entry in exdates:
        for value in entry.dts:
            keys.add(occurrence_key(value.dt, tz))
    return keys


def _overlaps(start: datetime, end: datetime, window_start: datetime, window_end: datetime) -> bool:
    return start < window_end and (end > window_start or start >= window_start)


def _override_occurrence(key: datetime, component: Event, tz: tzinfo) -> Occurrence:
    start, end, _ = component_times(component, tz)
    return Occurrence(component=component, key=key, start=start, end=end)


def expand(
    series: Series,
    tz: tzinfo,
    window_start: datetime,
    window_end: datetime,
) -> Iterator[Occurrence]:
    """Yield every occurrence of ``series`` overlapping ``[window_start, window_end)``."""
    for key, component in series.overrides.items():
        occurrence = _override_occurrence(key, component, tz)
        if _overlaps(occurrence.start, occurrence.end, window_start, window_end):
            yield occurrence

    master = series.master
    if master is None:
        return
    start, end, _ = component_times(master, tz)
    if not series.has_rule:
        if _overlaps(start, end, window_start, window_end):
            yield Occurrence(component=master, key=occurrence_key(start, tz), start=start, end=end)
        return

    duration = end - start
    excluded = excluded_keys(master, tz)
    rule = recurrence_rule(master, start, tz)
    for occurrence_start in rule.between(window_start - duration, window_end, inc=True):
        key = occurrence_key(occurrence_start, tz)
        if key in excluded or key in series.overrides:
            continue
        local_start = to_local(occurrence_start, tz)
        local_end = local_start + duration
        if _overlaps(local_start, local_end, window_start, window_end):
            yield Occurrence(component=master, key=key, start=local_start, end=local_end)


def first_key(series: Series, tz: tzinfo) -> Optional[datetime]:
    """Key of the earliest occurrence still present in the series."""
    candidates = sorted(series.overrides)[:1]
    master = series.master
    if master is not None:
        start, _, _ = component_times(master, tz)
        if not series.has_rule:
            candidates.append(occurrence_key(start, tz))
        else:
            excluded = excluded_keys(master, tz)
            for value in recurrence_rule(master, start, tz):
                key = occurrence_key(value, tz)
                if key not in excluded:
                    candidates.append(key)
                    break
    return min(candidates) if candidates else None


def occurrence_at(series: Series, key: datetime, tz: tzinfo) -> Optional[Occurrence]:
    if key in series.overrides:
        return _override_occurrence(key, series.overrides[key], tz)

    master = series.master
    if master is None:
        return None
    start, end, _ = component_times(master, tz)
    if not series.has_rule:
        if occurrence_key(start, tz) == key:
            return Occurrence(component=master, key=key, start=start, end=end)
        return None
    if key in excluded_keys(master, tz):
        return None

    local = key.astimezone(tz)
    rule = recurrence_rule(master, start, tz)
    for candidate in rule.between(local - timedelta(seconds=1), local + timedelta(seconds=1), inc=True):
        if occurrence_key(candidate, tz) == key:
            local_start = to_local(candidate, tz)
            return Occurrence(component=master, key=key, start=local_start, end=local_start + (end - start))
    return None
