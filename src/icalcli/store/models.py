"""Value types exchanged with the calendar store."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..command.recurrence import RecurrenceRule
from .constants import NO_TITLE


@dataclass(frozen=True)
class CalendarInfo:
    name: str
    path: Path
    writable: bool


@dataclass(frozen=True)
class EventInfo:
    event_id: str
    uid: str
    calendar: str
    title: str
    start: datetime
    end: datetime
    all_day: bool
    location: Optional[str] = None
    notes: Optional[str] = None
    url: Optional[str] = None
    recurring: bool = False
    occurrence: Optional[datetime] = None
    source: Optional[Path] = field(default=None, compare=False, repr=False)

    @property
    def display_title(self) -> str:
        return self.title.strip() or NO_TITLE


@dataclass(frozen=True)
class EventDraft:
    title: str
    start: datetime
    end: datetime
    all_day: bool = False
    location: Optional[str] = None
    notes: Optional[str] = None
    rule: Optional[RecurrenceRule] = None


@dataclass(frozen=True)
class EventChanges:
    start: datetime
    end: datetime
    all_day: bool
    title: Optional[str] = None
    calendar: Optional[CalendarInfo] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    clear_location: bool = False
    clear_notes: bool = False
    rule: Optional[RecurrenceRule] = None
    clear_rule: bool = False

    @property
    def changes_recurrence(self) -> bool:
        return self.rule is not None or self.clear_rule


def event_sort_key(info: EventInfo) -> tuple[bool, datetime, datetime, str]:
    return (not info.all_day, info.start, info.end, info.display_title.casefold())
