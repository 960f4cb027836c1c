"""Constants for the ical command grammar."""

from __future__ import annotations

PROGRAM_NAME = "ical"
OPTION_PREFIX = "--"

LIST_COMMANDS = ("today", "tomorrow", "week")

RECURRENCE_PATTERNS = ("daily", "weekly", "monthly", "yearly")

# Options that take no value; everything else consumes the following words.
FLAG_OPTIONS = frozenset(
    {
        "--all-day",
        "--timed",
        "--clear-location",
        "--clear-notes",
        "--clear-recurrence",
        "--this-only",
        "--all-future",
    }
)

ADD_OPTIONS = frozenset(
    {
        "--title",
        "--start",
        "--end",
        "--calendar",
        "--location",
        "--notes",
        "--all-day",
        "--recurrence",
        "--recurrence-end",
    }
)

REMOVE_OPTIONS = frozenset(
    {
        "--id",
        "--title",
        "--start",
        "--calendar",
        "--this-only",
        "--all-future",
    }
)

EDIT_OPTIONS = frozenset(
    {
        "--id",
        "--title",
        "--start",
        "--end",
        "--calendar",
        "--location",
        "--notes",
        "--all-day",
        "--timed",
        "--clear-location",
        "--clear-notes",
        "--recurrence",
        "--recurrence-end",
        "--clear-recurrence",
        "--this-only",
        "--all-future",
    }
)

RELATIVE_DAY_OFFSETS = {
    "today": 0,
    "tomorrow": 1,
}

# Tried in order after ISO 8601; all interpreted in the local timezone.
LOCAL_DATETIME_FORMATS = (
    (r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}", "%Y-%m-%dT%H:%M"),
    (r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}", "%Y-%m-%dT%H:%M:%S"),
    (r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}", "%Y-%m-%d %H:%M"),
    (r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}", "%Y-%m-%d %H:%M:%S"),
)
