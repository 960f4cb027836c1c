"""Calendar store backed by a directory of .ics files."""

from __future__ import annotations

import logging
import os
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from pathlib import Path
from typing import Optional
from uuid import uuid4
from zoneinfo import ZoneInfo

from icalendar import Calendar, Event, Timezone

from ..command.recurrence import EffectiveSpan, RecurrenceRule
from .constants import CALENDAR_GLOB, DEFAULT_CALENDAR_FILENAME, DEFAULT_CALENDAR_NAME, PROD_ID
from .errors import CalendarNotFoundError, EventNotFoundError, StoreFileError, StoreValidationError
from .models import CalendarInfo, EventChanges, EventDraft, EventInfo, event_sort_key
from .series import (
    Occurrence,
    Series,
    excluded_keys,
    expand,
    first_key,
    group_series,
    is_all_day_value,
    occurrence_at,
    occurrence_id,
    split_event_id,
)

logger = logging.getLogger(__name__)


def _ensure_parent_dir(path: Path) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise StoreFileError("Unable to create calendar directory", path=str(path)) from exc


def _load_calendar(path: Path) -> Calendar:
    if not path.exists():
        raise StoreFileError("Calendar file not found", path=str(path))
    if path.is_dir():
        raise StoreFileError("Calendar path is a directory", path=str(path))
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise StoreFileError("Unable to read calendar file", path=str(path)) from exc
    try:
        return Calendar.from_ical(data)
    except Exception as exc:
        raise StoreValidationError(f"Invalid calendar file format: {path.name}") from exc


def _save_calendar(path: Path, calendar: Calendar) -> None:
    _ensure_parent_dir(path)
    try:
        path.write_bytes(calendar.to_ical())
    except OSError as exc:
        raise StoreFileError("Unable to write calendar file", path=str(path)) from exc
    logger.debug("Saved calendar %s", path)


def _calendar_name(calendar: Calendar, path: Path) -> str:
    name = calendar.get("x-wr-calname")
    return str(name).strip() if name and str(name).strip() else path.stem


def _text(component: Event, key: str) -> Optional[str]:
    value = component.get(key)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _replace(component: Event, key: str, value: object) -> None:
    if key in component:
        del component[key]
    component.add(key, value)


def _copy_event(component: Event) -> Event:
    return Event.from_ical(component.to_ical())


class CalendarStore:
    def __init__(self, directory: Path, tz: tzinfo) -> None:
        self.directory = directory
        self.tz = tz

    # -- calendars -------------------------------------------------------

    def calendars(self) -> list[CalendarInfo]:
        if not self.directory.is_dir():
            return []
        calendars = []
        for path in sorted(self.directory.glob(CALENDAR_GLOB)):
            calendar = _load_calendar(path)
            calendars.append(
                CalendarInfo(name=_calendar_name(calendar, path), path=path, writable=os.access(path, os.W_OK))
            )
        return calendars

    def create_calendar(self, name: str = DEFAULT_CALENDAR_NAME, filename: str = DEFAULT_CALENDAR_FILENAME) -> CalendarInfo:
        path = self.directory / filename
        if path.exists():
            raise StoreFileError("Calendar file already exists", path=str(path))
        _save_calendar(path, self._build_calendar(name))
        logger.debug("Created calendar %r at %s", name, path)
        return CalendarInfo(name=name, path=path, writable=True)

    def writable_calendar(self, name: Optional[str] = None) -> CalendarInfo:
        calendars = self.calendars()
        if not calendars:
            calendars = [self.create_calendar()]

        writable = [calendar for calendar in calendars if calendar.writable]
        if not writable:
            raise CalendarNotFoundError("No writable calendars found.")

        wanted = (name or "").strip()
        if not wanted:
            return writable[0]
        for calendar in writable:
            if calendar.name.casefold() == wanted.casefold():
                return calendar

        available = ", ".join(calendar.name for calendar in writable)
        raise CalendarNotFoundError(f"Calendar not found: {wanted}. Writable calendars: {available}", name=wanted)

    def _build_calendar(self, name: str) -> Calendar:
        calendar = Calendar()
        calendar.add("prodid", PROD_ID)
        calendar.add("version", "2.0")
        calendar.add("calscale", "GREGORIAN")
        calendar.add("x-wr-calname", name)
        if isinstance(self.tz, ZoneInfo):
            calendar.add("x-wr-timezone", self.tz.key)
            try:
                calendar.add_component(Timezone.from_tzinfo(self.tz, tzid=self.tz.key))
            except ValueError:
                logger.debug("Could not embed VTIMEZONE for %s", self.tz.key)
        return calendar

    # -- reads -----------------------------------------------------------

    def _loaded(self) -> list[tuple[CalendarInfo, Calendar]]:
        return [(info, _load_calendar(info.path)) for info in self.calendars()]

    def _event_info(self, calendar: CalendarInfo, series: Series, occurrence: Occurrence) -> EventInfo:
        component = occurrence.component
        recurring = series.recurring
        return EventInfo(
            event_id=occurrence_id(series.uid, occurrence.key) if recurring else series.uid,
            uid=series.uid,
            calendar=calendar.name,
            title=str(component.get("summary", "")),
            start=occurrence.start,
            end=occurrence.end,
            all_day=is_all_day_value(component["dtstart"].dt),
            location=_text(component, "location"),
            notes=_text(component, "description"),
            url=_text(component, "url"),
            recurring=recurring,
            occurrence=occurrence.key.astimezone(self.tz) if recurring else None,
            source=calendar.path,
        )

    def _find_series(self, uid: str) -> Optional[tuple[CalendarInfo, Calendar, Series]]:
        for info, calendar in self._loaded():
            series = group_series(calendar, self.tz).get(uid)
            if series is not None:
                return info, calendar, series
        return None

    def event(self, event_id: str) -> Optional[EventInfo]:
        uid, key = split_event_id(event_id.strip())
        found = self._find_series(uid)
        if found is None:
            return None
        info, _, series = found
        if key is None:
            key = first_key(series, self.tz)
            if key is None:
                return None
        occurrence = occurrence_at(series, key, self.tz)
        if occurrence is None:
            return None
        return self._event_info(info, series, occurrence)

    def get_event(self, event_id: str) -> EventInfo:
        event = self.event(event_id)
        if event is None:
            raise EventNotFoundError(f"Event not found for id: {event_id}", event_id=event_id)
        return event

    def events_between(self, start: datetime, end: datetime) -> list[EventInfo]:
        events: list[EventInfo] = []
        for info, calendar in self._loaded():
            for series in group_series(calendar, self.tz).values():
                for occurrence in expand(series, self.tz, start, end):
                    events.append(self._event_info(info, series, occurrence))
        events.sort(key=event_sort_key)
        logger.debug("Found %d event(s) between %s and %s", len(events), start.isoformat(), end.isoformat())
        return events

    def is_recurring(self, event: EventInfo) -> bool:
        return event.recurring

    # -- writes ----------------------------------------------------------

    def _stored_datetime(self, value: datetime) -> datetime:
        if isinstance(self.tz, ZoneInfo):
            return value.astimezone(self.tz)
        return value.astimezone(timezone.utc)

    def _occurrence_value(self, key: datetime, all_day: bool) -> date | datetime:
        local = key.astimezone(self.tz)
        return local.date() if all_day else self._stored_datetime(local)

    def _set_times(self, component: Event, start: datetime, end: datetime, all_day: bool) -> None:
        if all_day:
            _replace(component, "dtstart", start.astimezone(self.tz).date())
            _replace(component, "dtend", end.astimezone(self.tz).date())
        else:
            _replace(component, "dtstart", self._stored_datetime(start))
            _replace(component, "dtend", self._stored_datetime(end))
        if "duration" in component:
            del component["duration"]

    def _set_rule(self, component: Event, rule: Optional[RecurrenceRule], all_day: bool) -> None:
        for key in ("rrule", "exdate", "rdate"):
            if key in component:
                del component[key]
        if rule is not None:
            component.add("rrule", rule.to_ical(all_day=all_day))

    def _truncate(self, series: Series, key: datetime) -> None:
        """End the series just before the occurrence at ``key``."""
        master = series.master
        if master is None:
            return
        recur = master["rrule"]
        all_day = is_all_day_value(master["dtstart"].dt)
        last = key - timedelta(seconds=1)
        recur["UNTIL"] = [last.astimezone(self.tz).date() if all_day else last.astimezone(timezone.utc)]
        if "COUNT" in recur:
            del recur["COUNT"]
        logger.debug("Truncated series %s before %s", series.uid, key.isoformat())

    def _apply_fields(self, component: Event, changes: EventChanges) -> None:
        if changes.title is not None:
            _replace(component, "summary", changes.title)
        if changes.location is not None:
            _replace(component, "location", changes.location)
        if changes.clear_location and "location" in component:
            del component["location"]
        if changes.notes is not None:
            _replace(component, "description", changes.notes)
        if changes.clear_notes and "description" in component:
            del component["description"]
        self._set_times(component, changes.start, changes.end, changes.all_day)
        _replace(component, "dtstamp", datetime.now(tz=timezone.utc))

    def create_event(self, calendar: CalendarInfo, draft: EventDraft) -> EventInfo:
        ical = _load_calendar(calendar.path)
        event = Event()
        uid = str(uuid4())
        event.add("uid", uid)
        event.add("summary", draft.title)
        self._set_times(event, draft.start, draft.end, draft.all_day)
        event.add("dtstamp", datetime.now(tz=timezone.utc))
        if draft.location is not None:
            event.add("location", draft.location)
        if draft.notes is not None:
            event.add("description", draft.notes)
        if draft.rule is not None:
            event.add("rrule", draft.rule.to_ical(all_day=draft.all_day))

        ical.add_component(event)
        _save_calendar(calendar.path, ical)
        logger.debug("Created event %s in %s", uid, calendar.name)
        return self.get_event(uid)

    def remove_event(self, event: EventInfo, span: EffectiveSpan) -> None:
        found = self._find_series(event.uid)
        if found is None:
            raise EventNotFoundError(f"Event not found for id: {event.event_id}", event_id=event.event_id)
        info, ical, series = found
        key = event.occurrence.astimezone(timezone.utc) if event.occurrence is not None else None
        start_key = first_key(series, self.tz)

        if not series.recurring or key is None or (span is EffectiveSpan.FUTURE_EVENTS and key <= start_key):
            for component in series.components():
                ical.subcomponents.remove(component)
            logger.debug("Removed event %s", event.uid)
        elif span is EffectiveSpan.THIS_EVENT:
            override = series.overrides.get(key)
            if override is not None:
                ical.subcomponents.remove(override)
            if series.master is not None:
                all_day = is_all_day_value(series.master["dtstart"].dt)
                series.master.add("exdate", self._occurrence_value(key, all_day))
            logger.debug("Excluded occurrence %s of %s", key.isoformat(), event.uid)
        else:
            for override_key, override in list(series.overrides.items()):
                if override_key >= key:
                    ical.subcomponents.remove(override)
            self._truncate(series, key)

        _save_calendar(info.path, ical)

    def update_event(self, event: EventInfo, changes: EventChanges, span: EffectiveSpan) -> EventInfo:
        found = self._find_series(event.uid)
        if found is None:
            raise EventNotFoundError(f"Event not found for id: {event.event_id}", event_id=event.event_id)
        info, ical, series = found
        key = event.occurrence.astimezone(timezone.utc) if event.occurrence is not None else None
        start_key = first_key(series, self.tz)
        target = changes.calendar if changes.calendar is not None else info

        if not series.recurring or key is None or (span is EffectiveSpan.FUTURE_EVENTS and key <= start_key):
            return self._update_whole(info, ical, series, changes, target)
        if span is EffectiveSpan.THIS_EVENT:
            return self._update_occurrence(info, ical, series, key, changes)
        return self._split_series(info, ical, series, key, changes, target)

    def _update_whole(
        self,
        info: CalendarInfo,
        ical: Calendar,
        series: Series,
        changes: EventChanges,
        target: CalendarInfo,
    ) -> EventInfo:
        component = series.master if series.master is not None else series.components()[0]
        original_rule = component.get("rrule")
        self._apply_fields(component, changes)
        if changes.clear_rule:
            self._set_rule(component, None, changes.all_day)
        elif changes.rule is not None:
            self._set_rule(component, changes.rule, changes.all_day)
        elif original_rule is not None:
            # UNTIL must keep the value type of DTSTART.
            self._retype_until(component, changes.all_day)

        if target.path != info.path:
            target_ical = _load_calendar(target.path)
            for item in series.components():
                ical.subcomponents.remove(item)
                target_ical.add_component(item)
            _save_calendar(info.path, ical)
            _save_calendar(target.path, target_ical)
            logger.debug("Moved event %s from %s to %s", series.uid, info.name, target.name)
        else:
            _save_calendar(info.path, ical)
        return self.get_event(series.uid)

    def _retype_until(self, component: Event, all_day: bool) -> None:
        recur = component["rrule"]
        until = recur.get("UNTIL")
        if not until:
            return
        value = until[0] if isinstance(until, list) else until
        if all_day and isinstance(value, datetime):
            recur["UNTIL"] = [value.astimezone(self.tz).date()]
        elif not all_day and not isinstance(value, datetime):
            end_of_day = datetime.combine(value, time(23, 59, 59), tzinfo=self.tz)
            recur["UNTIL"] = [end_of_day.astimezone(timezone.utc)]

    def _update_occurrence(
        self,
        info: CalendarInfo,
        ical: Calendar,
        series: Series,
        key: datetime,
        changes: EventChanges,
    ) -> EventInfo:
        if changes.changes_recurrence:
            raise StoreValidationError("Recurrence changes apply to the whole series. Use --all-future.")
        if changes.calendar is not None and changes.calendar.path != info.path:
            raise StoreValidationError("Cannot move a single occurrence to another calendar. Use --all-future.")

        override = series.overrides.get(key)
        if override is None:
            if series.master is None:
                raise EventNotFoundError(f"Event not found for id: {series.uid}", event_id=series.uid)
            override = _copy_event(series.master)
            self._set_rule(override, None, changes.all_day)
            master_all_day = is_all_day_value(series.master["dtstart"].dt)
            override.add("recurrence-id", self._occurrence_value(key, master_all_day))
            ical.add_component(override)
        self._apply_fields(override, changes)
        _save_calendar(info.path, ical)
        logger.debug("Updated occurrence %s of %s", key.isoformat(), series.uid)
        return self.get_event(occurrence_id(series.uid, key))

    def _split_series(
        self,
        info: CalendarInfo,
        ical: Calendar,
        series: Series,
        key: datetime,
        changes: EventChanges,
        target: CalendarInfo,
    ) -> EventInfo:
        source = series.overrides.get(key) or series.master
        if source is None:
            raise EventNotFoundError(f"Event not found for id: {series.uid}", event_id=series.uid)
        original_rule = series.master.get("rrule") if series.master is not None else None
        later_exclusions = (
            sorted(excluded for excluded in excluded_keys(series.master, self.tz) if excluded >= key)
            if series.master is not None
            else []
        )

        follower = _copy_event(source)
        for prop in ("uid", "recurrence-id"):
            if prop in follower:
                del follower[prop]
        uid = str(uuid4())
        follower.add("uid", uid)
        self._apply_fields(follower, changes)

        if changes.clear_rule:
            self._set_rule(follower, None, changes.all_day)
        elif changes.rule is not None:
            self._set_rule(follower, changes.rule, changes.all_day)
        elif original_rule is not None:
            self._set_rule(follower, None, changes.all_day)
            follower.add("rrule", dict(original_rule))
            if "COUNT" in follower["rrule"]:
                del follower["rrule"]["COUNT"]
            self._retype_until(follower, changes.all_day)
            for excluded in later_exclusions:
                follower.add("exdate", self._occurrence_value(excluded, changes.all_day))

        for override_key, override in list(series.overrides.items()):
            if override_key >= key:
                ical.subcomponents.remove(override)
        self._truncate(series, key)

        if target.path != info.path:
            target_ical = _load_calendar(target.path)
            target_ical.add_component(follower)
            _save_calendar(target.path, target_ical)
        else:
            ical.add_component(follower)
        _save_calendar(info.path, ical)
        logger.debug("Split series %s at %s into %s", series.uid, key.isoformat(), uid)
        return self.get_event(uid)
