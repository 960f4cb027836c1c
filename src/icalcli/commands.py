"""Execution of validated commands against the calendar store."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from .command import (
    AddIntent,
    AllDayTransition,
    ById,
    ClearRecurrence,
    Command,
    DateInterpreter,
    EditIntent,
    ListCommand,
    ListPeriod,
    RemoveIntent,
    SetRecurrence,
    build_rule,
    resolve_span,
)
from .command.errors import InterpretationError, SemanticError, unparseable
from .render import render_events
from .store import CalendarStore, EventChanges, EventDraft, EventInfo, EventNotFoundError, StoreValidationError

logger = logging.getLogger(__name__)


def period_range(period: ListPeriod, interpreter: DateInterpreter) -> tuple[datetime, datetime]:
    today = interpreter.today()
    if period is ListPeriod.TODAY:
        first_day, days = today, 1
    elif period is ListPeriod.TOMORROW:
        first_day, days = today + timedelta(days=1), 1
    else:
        first_day, days = today - timedelta(days=today.weekday()), 7
    return interpreter.start_of_day(first_day), interpreter.start_of_day(first_day + timedelta(days=days))


def _interpret(interpreter: DateInterpreter, option: str, raw: str) -> datetime:
    parsed = interpreter.interpret(raw)
    if parsed is None:
        raise unparseable(option, raw)
    return parsed


def normalize_times(
    start: datetime,
    end: datetime,
    all_day: bool,
    interpreter: DateInterpreter,
) -> tuple[datetime, datetime]:
    if not all_day:
        if end <= start:
            raise SemanticError("--end must be after --start", options=("--start", "--end"))
        return start, end

    start_day = start.astimezone(interpreter.tz).date()
    end_day = end.astimezone(interpreter.tz).date()
    if end_day <= start_day:
        try:
            end_day = start_day + timedelta(days=1)
        except OverflowError as exc:
            raise InterpretationError("Could not normalize all-day event dates.") from exc
    return interpreter.start_of_day(start_day), interpreter.start_of_day(end_day)


def list_events(store: CalendarStore, command: ListCommand, interpreter: DateInterpreter) -> list[EventInfo]:
    start, end = period_range(command.period, interpreter)
    return store.events_between(start, end)


def add_event(store: CalendarStore, intent: AddIntent, interpreter: DateInterpreter) -> EventInfo:
    raw_start = _interpret(interpreter, "--start", intent.start)
    raw_end = _interpret(interpreter, "--end", intent.end)
    start, end = normalize_times(raw_start, raw_end, intent.all_day, interpreter)
    rule = build_rule(intent.recurrence, interpreter) if intent.recurrence is not None else None
    calendar = store.writable_calendar(intent.calendar_name)

    draft = EventDraft(
        title=intent.title,
        start=start,
        end=end,
        all_day=intent.all_day,
        location=intent.location,
        notes=intent.notes,
        rule=rule,
    )
    return store.create_event(calendar, draft)


def find_event(store: CalendarStore, intent: RemoveIntent, interpreter: DateInterpreter) -> EventInfo:
    selector = intent.selector
    if isinstance(selector, ById):
        return store.get_event(selector.event_id)

    start = _interpret(interpreter, "--start", selector.start)
    day = start.astimezone(interpreter.tz).date()
    candidates = store.events_between(
        interpreter.start_of_day(day),
        interpreter.start_of_day(day + timedelta(days=1)),
    )

    title = selector.title.casefold()
    calendar = selector.calendar_name.casefold() if selector.calendar_name else None
    matches = [
        event
        for event in candidates
        if event.display_title.casefold() == title
        and abs((event.start - start).total_seconds()) < 1
        and (calendar is None or event.calendar.casefold() == calendar)
    ]

    if not matches:
        raise EventNotFoundError("No matching event found for title/start selector.")
    if len(matches) > 1:
        raise StoreValidationError(
            f"Multiple matching events found ({len(matches)}). Use --id to remove a specific event."
        )
    return matches[0]


def remove_event(store: CalendarStore, intent: RemoveIntent, interpreter: DateInterpreter) -> EventInfo:
    event = find_event(store, intent, interpreter)
    span = resolve_span(store.is_recurring(event), intent.span)
    logger.debug("Removing %s with span %s", event.event_id, span.value)
    store.remove_event(event, span)
    return event


def edit_event(store: CalendarStore, intent: EditIntent, interpreter: DateInterpreter) -> EventInfo:
    event = store.get_event(intent.event_id)
    span = resolve_span(store.is_recurring(event), intent.span)

    start = _interpret(interpreter, "--start", intent.start) if intent.start is not None else event.start
    end = _interpret(interpreter, "--end", intent.end) if intent.end is not None else event.end

    all_day = event.all_day
    if intent.all_day_transition is AllDayTransition.MAKE_ALL_DAY:
        all_day = True
    elif intent.all_day_transition is AllDayTransition.MAKE_TIMED:
        all_day = False
    start, end = normalize_times(start, end, all_day, interpreter)

    update = intent.recurrence_update
    rule = build_rule(update.spec, interpreter) if isinstance(update, SetRecurrence) else None
    calendar = store.writable_calendar(intent.calendar_name) if intent.calendar_name is not None else None

    changes = EventChanges(
        start=start,
        end=end,
        all_day=all_day,
        title=intent.title,
        calendar=calendar,
        location=intent.location,
        notes=intent.notes,
        clear_location=intent.clear_location,
        clear_notes=intent.clear_notes,
        rule=rule,
        clear_rule=isinstance(update, ClearRecurrence),
    )
    logger.debug("Updating %s with span %s", event.event_id, span.value)
    return store.update_event(event, changes, span)


def execute(command: Command, store: CalendarStore, interpreter: DateInterpreter) -> str:
    """Run ``command`` and return the text to print on success."""
    if isinstance(command, ListCommand):
        return render_events(list_events(store, command, interpreter))
    if isinstance(command, AddIntent):
        created = add_event(store, command, interpreter)
        return f"Event created.\nID: {created.event_id}"
    if isinstance(command, RemoveIntent):
        remove_event(store, command, interpreter)
        return "Event removed."
    if isinstance(command, EditIntent):
        updated = edit_event(store, command, interpreter)
        return f"Event updated.\nID: {updated.event_id}"
    raise TypeError(f"Unsupported command: {command!r}")
