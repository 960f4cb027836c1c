"""Command interpretation: tokens, dates, grammar and recurrence."""

from .dates import DateInterpreter, is_date_only
from .errors import CommandError, InterpretationError, SemanticError, TokenError
from .grammar import parse_arguments
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
    RemoveIntent,
    SetRecurrence,
    SpanSelection,
)
from .recurrence import EffectiveSpan, RecurrenceRule, build_rule, resolve_span
from .tokens import non_empty, read_options
from .usage import USAGE_TEXT

__all__ = [
    "DateInterpreter",
    "is_date_only",
    "CommandError",
    "InterpretationError",
    "SemanticError",
    "TokenError",
    "parse_arguments",
    "AddIntent",
    "AllDayTransition",
    "ById",
    "ByTitleAndStart",
    "ClearRecurrence",
    "Command",
    "EditIntent",
    "ListCommand",
    "ListPeriod",
    "ParseFailure",
    "ParseResult",
    "Parsed",
    "RecurrencePattern",
    "RecurrenceSpec",
    "RemoveIntent",
    "SetRecurrence",
    "SpanSelection",
    "EffectiveSpan",
    "RecurrenceRule",
    "build_rule",
    "resolve_span",
    "non_empty",
    "read_options",
    "USAGE_TEXT",
]
