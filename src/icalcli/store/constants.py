"""Constants for the iCalendar-backed calendar store."""

from __future__ import annotations

PROD_ID = "-//icalcli//ical CLI//EN"
DEFAULT_CALENDAR_NAME = "Calendar"
DEFAULT_CALENDAR_FILENAME = "calendar.ics"
CALENDAR_GLOB = "*.ics"

# Occurrence ids look like "<uid>::20260220T140000Z".
OCCURRENCE_SEPARATOR = "::"
OCCURRENCE_STAMP_FORMAT = "%Y%m%dT%H%M%SZ"

NO_TITLE = "(No Title)"
