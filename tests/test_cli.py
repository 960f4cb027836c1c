import pytest
from typer.testing import CliRunner

from icalcli.cli import app, format_error_for_user, run
from icalcli.command import USAGE_TEXT, SemanticError
from icalcli.errors import ConfigError

TZ_NAME = "America/New_York"

runner = CliRunner()


@pytest.fixture
def invoke(calendar_dir, frozen_time):
    env = {"ICAL_CALENDAR_DIR": str(calendar_dir), "ICAL_TZ": TZ_NAME, "ICAL_LOG_LEVEL": "WARNING"}

    def _invoke(*words):
        return runner.invoke(app, list(words), env=env)

    return _invoke


def test_no_arguments_prints_usage(invoke):
    result = invoke()
    assert result.exit_code == 1
    assert "Usage:" in result.output


def test_unknown_command(invoke):
    result = invoke("agenda")
    assert result.exit_code == 1
    assert "Unknown command: agenda" in result.output


def test_add_list_remove(invoke, calendar_dir):
    result = invoke("add", "--title", "Meeting", "with", "Luke", "--start", "today", "14:00", "--end", "today", "15:00")
    assert result.exit_code == 0, result.output
    assert result.output.startswith("Event created.\nID: ")
    assert (calendar_dir / "calendar.ics").exists()

    result = invoke("today")
    assert result.exit_code == 0
    assert result.output == "14:00 - 15:00  Meeting with Luke\nCalendar: Calendar\n"

    result = invoke("remove", "--title", "Meeting", "with", "Luke", "--start", "today", "14:00")
    assert result.exit_code == 0
    assert result.output == "Event removed.\n"

    assert invoke("today").output == "No events.\n"


def test_edit_by_id(invoke):
    created = invoke("add", "--title", "Call", "--start", "tomorrow", "09:00", "--end", "tomorrow", "09:30")
    event_id = created.output.strip().split("ID: ")[1]

    result = invoke("edit", "--id", event_id, "--location", "Zoom")
    assert result.exit_code == 0
    assert result.output == f"Event updated.\nID: {event_id}\n"
    assert "Location: Zoom" in invoke("tomorrow").output


def test_grammar_error_exit_code(invoke):
    result = invoke("edit", "--id", "abc")
    assert result.exit_code == 1
    assert "No changes provided." in result.output


def test_execution_error_exit_code(invoke):
    result = invoke("add", "--title", "x", "--start", "whenever", "--end", "today", "10:00")
    assert result.exit_code == 1
    assert "Could not parse --start value: whenever" in result.output


def test_invalid_timezone(calendar_dir):
    result = runner.invoke(app, ["today"], env={"ICAL_CALENDAR_DIR": str(calendar_dir), "ICAL_TZ": "Mars/Olympus"})
    assert result.exit_code == 1
    assert "Configuration Error: Invalid timezone 'Mars/Olympus'" in result.output


def test_run_writes_errors_to_stderr(config, frozen_time, capsys):
    assert run(["ical", "week", "extra"], config) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == f"Unexpected arguments for 'week'.\n\n{USAGE_TEXT}\n"


def test_run_writes_listing_to_stdout(config, frozen_time, capsys):
    assert run(["ical", "week"], config) == 0
    captured = capsys.readouterr()
    assert captured.out == "No events.\n"
    assert captured.err == ""


def test_parse_failure_does_not_touch_the_store(config, calendar_dir, capsys):
    assert run(["ical", "add", "--title", "x"], config) == 1
    assert not calendar_dir.exists()


@pytest.mark.parametrize(
    "error, expected",
    [
        (ConfigError("bad"), "Configuration Error: bad"),
        (SemanticError("No changes provided."), "No changes provided."),
        (RuntimeError("boom"), "Error: boom"),
    ],
)
def test_format_error_for_user(error, expected):
    assert format_error_for_user(error) == expected
