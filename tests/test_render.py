from icalcli.render import render_event, render_events
from icalcli.store import EventInfo


def make_event(local, **overrides):
    values = dict(
        event_id="abc",
        uid="abc",
        calendar="Work",
        title="Review",
        start=local(2026, 2, 18, 9, 5),
        end=local(2026, 2, 18, 10, 0),
        all_day=False,
    )
    values.update(overrides)
    return EventInfo(**values)


def test_timed_event(local):
    assert render_event(make_event(local)) == ["09:05 - 10:00  Review", "Calendar: Work"]


def test_all_day_event(local):
    event = make_event(local, all_day=True, start=local(2026, 2, 18), end=local(2026, 2, 19))
    assert render_event(event)[0] == "ALL DAY  Review"


def test_blank_title(local):
    assert render_event(make_event(local, title="  "))[0] == "09:05 - 10:00  (No Title)"


def test_location_and_url(local):
    assert render_event(make_event(local, location="Room 4", url="https://meet.example"))[2] == (
        "Location: Room 4 (https://meet.example)"
    )
    assert render_event(make_event(local, url="https://meet.example"))[2] == "Location: https://meet.example"


def test_notes_are_flattened(local):
    lines = render_event(make_event(local, notes="line one\nline two"))
    assert lines[-1] == "Notes: line one line two"


def test_blank_optional_lines_are_skipped(local):
    assert render_event(make_event(local, calendar=" ", location=" ", notes="\n")) == ["09:05 - 10:00  Review"]


def test_events_are_separated_by_blank_lines(local):
    first = make_event(local, title="One", calendar="")
    second = make_event(local, title="Two", calendar="")
    assert render_events([first, second]) == "09:05 - 10:00  One\n\n09:05 - 10:00  Two"


def test_no_events():
    assert render_events([]) == "No events."
