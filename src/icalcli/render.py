"""Plain-text rendering of event listings."""

from __future__ import annotations

from typing import Sequence

from .command.tokens import non_empty
from .store.models import EventInfo

TIME_FORMAT = "%H:%M"


def _location_line(event: EventInfo) -> str | None:
    location = non_empty(event.location)
    url = non_empty(event.url)
    if location and url:
        return f"Location: {location} ({url})"
    if location:
        return f"Location: {location}"
    if url:
        return f"Location: {url}"
    return None


def render_event(event: EventInfo) -> list[str]:
    if event.all_day:
        lines = [f"ALL DAY  {event.display_title}"]
    else:
        start = event.start.strftime(TIME_FORMAT)
        end = event.end.strftime(TIME_FORMAT)
        lines = [f"{start} - {end}  {event.display_title}"]

    calendar = non_empty(event.calendar)
    if calendar:
        lines.append(f"Calendar: {calendar}")
    location = _location_line(event)
    if location:
        lines.append(location)
    notes = non_empty((event.notes or "").replace("\n", " "))
    if notes:
        lines.append(f"Notes: {notes}")
    return lines


def render_events(events: Sequence[EventInfo]) -> str:
    """Render events (already sorted by the store) separated by blank lines."""
    if not events:
        return "No events."
    return "\n\n".join("\n".join(render_event(event)) for event in events)
