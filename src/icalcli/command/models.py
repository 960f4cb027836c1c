"""Validated command values produced by the grammar."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class ListPeriod(str, Enum):
    TODAY = "today"
    TOMORROW = "tomorrow"
    WEEK = "week"


class RecurrencePattern(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class SpanSelection(str, Enum):
    """How a change applies when the target belongs to a recurring series."""

    AUTOMATIC = "automatic"
    THIS_ONLY = "this-only"
    ALL_FUTURE = "all-future"


class AllDayTransition(str, Enum):
    NONE = "none"
    MAKE_ALL_DAY = "make-all-day"
    MAKE_TIMED = "make-timed"


@dataclass(frozen=True)
class RecurrenceSpec:
    pattern: RecurrencePattern
    end_input: Optional[str] = None


@dataclass(frozen=True)
class SetRecurrence:
    spec: RecurrenceSpec


@dataclass(frozen=True)
class ClearRecurrence:
    pass


RecurrenceUpdate = Union[SetRecurrence, ClearRecurrence, None]


@dataclass(frozen=True)
class ById:
    event_id: str


@dataclass(frozen=True)
class ByTitleAndStart:
    title: str
    start: str
    calendar_name: Optional[str] = None


Selector = Union[ById, ByTitleAndStart]


@dataclass(frozen=True)
class ListCommand:
    period: ListPeriod


@dataclass(frozen=True)
class AddIntent:
    title: str
    start: str
    end: str
    calendar_name: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    all_day: bool = False
    recurrence: Optional[RecurrenceSpec] = None


@dataclass(frozen=True)
class RemoveIntent:
    selector: Selector
    span: SpanSelection = SpanSelection.AUTOMATIC


@dataclass(frozen=True)
class EditIntent:
    event_id: str
    title: Optional[str] = None
    start: Optional[str] = None
    end: Optional[str] = None
    calendar_name: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    all_day_transition: AllDayTransition = AllDayTransition.NONE
    clear_location: bool = False
    clear_notes: bool = False
    recurrence_update: RecurrenceUpdate = None
    span: SpanSelection = SpanSelection.AUTOMATIC

    @property
    def has_changes(self) -> bool:
        return any(
            (
                self.title is not None,
                self.start is not None,
                self.end is not None,
                self.calendar_name is not None,
                self.location is not None,
                self.notes is not None,
                self.all_day_transition is not AllDayTransition.NONE,
                self.clear_location,
                self.clear_notes,
                self.recurrence_update is not None,
            )
        )


Command = Union[ListCommand, AddIntent, RemoveIntent, EditIntent]


@dataclass(frozen=True)
class Parsed:
    command: Command


@dataclass(frozen=True)
class ParseFailure:
    message: str


ParseResult = Union[Parsed, ParseFailure]
