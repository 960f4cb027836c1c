"""Usage text shown with every command-line error."""

from __future__ import annotations

USAGE_TEXT = """Usage:
  ical today
  ical tomorrow
  ical week
  ical add --title <text> --start <datetime> --end <datetime> [--calendar <name>] [--location <text>] [--notes <text>] [--all-day] [--recurrence <daily|weekly|monthly|yearly>] [--recurrence-end <date>]
  ical remove (--id <event-id> | --title <text> --start <datetime> [--calendar <name>]) [--this-only|--all-future]
  ical edit --id <event-id> [--title <text>] [--start <datetime>] [--end <datetime>] [--calendar <name>] [--location <text>] [--notes <text>] [--all-day|--timed] [--clear-location] [--clear-notes] [--recurrence <daily|weekly|monthly|yearly>] [--recurrence-end <date>] [--clear-recurrence] [--this-only|--all-future]

Datetime formats:
  ISO 8601 (2026-02-20T14:00:00Z, 2026-02-20)
  "YYYY-MM-DD HH:MM[:SS]" or "YYYY-MM-DDTHH:MM[:SS]"
  "today HH:MM"
  "tomorrow HH:MM\""""


def with_usage(message: str) -> str:
    return f"{message}\n\n{USAGE_TEXT}"
