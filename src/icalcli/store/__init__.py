"""iCalendar-file calendar store."""

from .calendar import CalendarStore
from .errors import (
    CalendarNotFoundError,
    EventNotFoundError,
    StoreError,
    StoreFileError,
    StoreValidationError,
)
from .models import CalendarInfo, EventChanges, EventDraft, EventInfo, event_sort_key

__all__ = [
    "CalendarStore",
    "CalendarNotFoundError",
    "EventNotFoundError",
    "StoreError",
    "StoreFileError",
    "StoreValidationError",
    "CalendarInfo",
    "EventChanges",
    "EventDraft",
    "EventInfo",
    "event_sort_key",
]
