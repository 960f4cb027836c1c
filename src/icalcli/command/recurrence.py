"""Recurrence rule construction and recurring-span resolution."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Any, Optional

from .dates import DateInterpreter, is_date_only
from .errors import InterpretationError, SemanticError, unparseable
from .models import RecurrencePattern, RecurrenceSpec, SpanSelection

logger = logging.getLogger(__name__)

RECURRENCE_END_OPTION = "--recurrence-end"

FREQUENCIES = {
    RecurrencePattern.DAILY: "DAILY",
    RecurrencePattern.WEEKLY: "WEEKLY",
    RecurrencePattern.MONTHLY: "MONTHLY",
    RecurrencePattern.YEARLY: "YEARLY",
}


class EffectiveSpan(str, Enum):
    THIS_EVENT = "this-event"
    FUTURE_EVENTS = "future-events"


@dataclass(frozen=True)
class RecurrenceRule:
    frequency: str
    interval: int = 1
    until: Optional[datetime] = None

    def to_ical(self, all_day: bool = False) -> dict[str, Any]:
        """Return the mapping ``icalendar`` expects for an RRULE property.

        UNTIL is written as a UTC date-time for timed events and as a local
        date for all-day events, matching the type of DTSTART.
        """
        rule: dict[str, Any] = {"freq": self.frequency, "interval": self.interval}
        if self.until is not None:
            until: date | datetime = self.until.date() if all_day else self.until.astimezone(timezone.utc)
            rule["until"] = until
        return rule


def recurrence_end(end_input: str, interpreter: DateInterpreter) -> datetime:
    parsed = interpreter.interpret(end_input)
    if parsed is None:
        raise unparseable(RECURRENCE_END_OPTION, end_input)
    if not is_date_only(end_input):
        return parsed

    # A bare date includes the whole day: last second before the next midnight.
    try:
        next_day = interpreter.start_of_day(parsed.date() + timedelta(days=1))
    except OverflowError as exc:
        raise InterpretationError(
            f"Could not normalize {RECURRENCE_END_OPTION} value: {end_input}",
            option=RECURRENCE_END_OPTION,
            value=end_input,
        ) from exc
    return next_day - timedelta(seconds=1)


def build_rule(spec: RecurrenceSpec, interpreter: DateInterpreter) -> RecurrenceRule:
    until = recurrence_end(spec.end_input, interpreter) if spec.end_input else None
    rule = RecurrenceRule(frequency=FREQUENCIES[spec.pattern], interval=1, until=until)
    logger.debug("Built recurrence rule %s", rule)
    return rule


def resolve_span(is_recurring: bool, selection: SpanSelection) -> EffectiveSpan:
    """Decide how far a change reaches once the target's recurrence is known.

    Non-recurring targets always resolve to the single event. A recurring
    target requires an explicit selection; ``AUTOMATIC`` is rejected rather
    than guessed.
    """
    if not is_recurring:
        return EffectiveSpan.THIS_EVENT
    if selection is SpanSelection.THIS_ONLY:
        return EffectiveSpan.THIS_EVENT
    if selection is SpanSelection.ALL_FUTURE:
        return EffectiveSpan.FUTURE_EVENTS
    raise SemanticError("Event is recurring. Use --this-only or --all-future.", options=("--this-only", "--all-future"))
