"""Per-subcommand grammar: option dispatch plus cross-field validation."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from .constants import ADD_OPTIONS, EDIT_OPTIONS, LIST_COMMANDS, RECURRENCE_PATTERNS, REMOVE_OPTIONS
from .errors import CommandError, InterpretationError, SemanticError, TokenError
from .models import (
    AddIntent,
    AllDayTransition,
    ById,
    ByTitleAndStart,
    ClearRecurrence,
    Command,
    EditIntent,
    ListCommand,
    ListPeriod,
    ParseFailure,
    ParseResult,
    Parsed,
    RecurrencePattern,
    RecurrenceSpec,
    RecurrenceUpdate,
    RemoveIntent,
    SetRecurrence,
    SpanSelection,
)
from .tokens import OptionValues, non_empty, read_options
from .usage import USAGE_TEXT, with_usage

logger = logging.getLogger(__name__)


def conflicts(options: OptionValues, first: str, second: str) -> bool:
    return options.has(first) and options.has(second)


def ensure_exclusive(options: OptionValues, first: str, second: str, message: Optional[str] = None) -> None:
    if conflicts(options, first, second):
        raise SemanticError(message or f"Use either {first} or {second}, not both.", options=(first, second))


def ensure_recurrence_end_has_pattern(options: OptionValues) -> None:
    if options.has("--recurrence-end") and not options.has("--recurrence"):
        raise SemanticError("--recurrence-end requires --recurrence.", options=("--recurrence-end",))


def required_value(options: OptionValues, name: str) -> str:
    value = non_empty(options.get(name))
    if value is None:
        raise SemanticError(f"Missing required option: {name}", options=(name,))
    return value


def strict_value(options: OptionValues, name: str) -> Optional[str]:
    """Return the trimmed value of ``name``; a blank value counts as missing."""
    if not options.has(name):
        return None
    value = non_empty(options.get(name))
    if value is None:
        raise TokenError(f"Missing value for {name}", token=name)
    return value


def parse_recurrence_pattern(value: str) -> RecurrencePattern:
    if value not in RECURRENCE_PATTERNS:
        raise InterpretationError(f"Unknown recurrence pattern: {value}", option="--recurrence", value=value)
    return RecurrencePattern(value)


def recurrence_spec(options: OptionValues, strict: bool = False) -> Optional[RecurrenceSpec]:
    ensure_recurrence_end_has_pattern(options)
    if strict:
        raw_pattern = strict_value(options, "--recurrence")
        end_input = strict_value(options, "--recurrence-end")
    else:
        raw_pattern = non_empty(options.get("--recurrence"))
        end_input = non_empty(options.get("--recurrence-end"))

    if raw_pattern is None:
        if end_input is not None:
            raise SemanticError("--recurrence-end requires --recurrence.", options=("--recurrence-end",))
        return None
    return RecurrenceSpec(pattern=parse_recurrence_pattern(raw_pattern), end_input=end_input)


def span_selection(options: OptionValues) -> SpanSelection:
    ensure_exclusive(options, "--this-only", "--all-future")
    if options.flag("--this-only"):
        return SpanSelection.THIS_ONLY
    if options.flag("--all-future"):
        return SpanSelection.ALL_FUTURE
    return SpanSelection.AUTOMATIC


def parse_add(arguments: Sequence[str]) -> AddIntent:
    options = read_options(arguments, ADD_OPTIONS)
    title = required_value(options, "--title")
    start = required_value(options, "--start")
    end = required_value(options, "--end")
    return AddIntent(
        title=title,
        start=start,
        end=end,
        calendar_name=non_empty(options.get("--calendar")),
        location=non_empty(options.get("--location")),
        notes=non_empty(options.get("--notes")),
        all_day=options.flag("--all-day"),
        recurrence=recurrence_spec(options),
    )


def parse_remove(arguments: Sequence[str]) -> RemoveIntent:
    options = read_options(arguments, REMOVE_OPTIONS)
    event_id = strict_value(options, "--id")
    title = strict_value(options, "--title")
    start = strict_value(options, "--start")
    calendar_name = strict_value(options, "--calendar")

    if event_id is not None:
        if title is not None or start is not None or calendar_name is not None:
            raise SemanticError(
                "Use either --id or --title/--start selector, not both.",
                options=("--id", "--title", "--start", "--calendar"),
            )
        return RemoveIntent(selector=ById(event_id), span=span_selection(options))

    if title is None and start is None:
        raise SemanticError("Missing selector. Use --id or --title with --start.", options=("--id", "--title"))
    if title is None:
        raise SemanticError("Missing required option: --title", options=("--title",))
    if start is None:
        raise SemanticError("Missing required option: --start", options=("--start",))

    return RemoveIntent(
        selector=ByTitleAndStart(title=title, start=start, calendar_name=calendar_name),
        span=span_selection(options),
    )


def _all_day_transition(options: OptionValues) -> AllDayTransition:
    ensure_exclusive(options, "--all-day", "--timed", "--all-day and --timed cannot be used together.")
    if options.flag("--all-day"):
        return AllDayTransition.MAKE_ALL_DAY
    if options.flag("--timed"):
        return AllDayTransition.MAKE_TIMED
    return AllDayTransition.NONE


def _recurrence_update(options: OptionValues) -> RecurrenceUpdate:
    ensure_exclusive(options, "--recurrence", "--clear-recurrence")
    if options.flag("--clear-recurrence"):
        ensure_recurrence_end_has_pattern(options)
        return ClearRecurrence()
    spec = recurrence_spec(options, strict=True)
    return SetRecurrence(spec) if spec is not None else None


def parse_edit(arguments: Sequence[str]) -> EditIntent:
    options = read_options(arguments, EDIT_OPTIONS)
    event_id = strict_value(options, "--id")
    if event_id is None:
        raise SemanticError("Missing required option: --id", options=("--id",))

    all_day_transition = _all_day_transition(options)
    ensure_exclusive(options, "--location", "--clear-location")
    ensure_exclusive(options, "--notes", "--clear-notes")
    recurrence_update = _recurrence_update(options)

    intent = EditIntent(
        event_id=event_id,
        title=strict_value(options, "--title"),
        start=strict_value(options, "--start"),
        end=strict_value(options, "--end"),
        calendar_name=strict_value(options, "--calendar"),
        location=strict_value(options, "--location"),
        notes=strict_value(options, "--notes"),
        all_day_transition=all_day_transition,
        clear_location=options.flag("--clear-location"),
        clear_notes=options.flag("--clear-notes"),
        recurrence_update=recurrence_update,
        span=span_selection(options),
    )
    if not intent.has_changes:
        raise SemanticError("No changes provided.")
    return intent


_BUILDERS: dict[str, Callable[[Sequence[str]], Command]] = {
    "add": parse_add,
    "remove": parse_remove,
    "edit": parse_edit,
}


def parse_arguments(arguments: Sequence[str]) -> ParseResult:
    """Turn a full argument vector (program name first) into a validated command.

    Never raises: every problem comes back as a :class:`ParseFailure` whose
    message is followed by the usage text.
    """
    if len(arguments) < 2:
        return ParseFailure(USAGE_TEXT)

    subcommand = arguments[1]
    remaining = list(arguments[2:])

    if subcommand in LIST_COMMANDS:
        if remaining:
            return ParseFailure(with_usage(f"Unexpected arguments for '{subcommand}'."))
        return Parsed(ListCommand(ListPeriod(subcommand)))

    builder = _BUILDERS.get(subcommand)
    if builder is None:
        return ParseFailure(with_usage(f"Unknown command: {subcommand}"))

    try:
        command = builder(remaining)
    except CommandError as exc:
        logger.debug("Rejected %s arguments (%s): %s", subcommand, exc.code, exc.message)
        return ParseFailure(with_usage(exc.message))

    logger.debug("Parsed %s command: %s", subcommand, command)
    return Parsed(command)
