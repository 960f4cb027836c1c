"""Error types for command parsing and interpretation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class CommandError(Exception):
    message: str
    code: str = "COMMAND_ERROR"
    details: Any | None = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


class TokenError(CommandError):
    def __init__(self, message: str, token: str | None = None) -> None:
        super().__init__(message, code="TOKEN_ERROR", details={"token": token})
        self.token = token


class SemanticError(CommandError):
    def __init__(self, message: str, options: tuple[str, ...] = ()) -> None:
        super().__init__(message, code="SEMANTIC_ERROR", details={"options": options})
        self.options = options


class InterpretationError(CommandError):
    def __init__(self, message: str, option: str | None = None, value: str | None = None) -> None:
        super().__init__(message, code="INTERPRETATION_ERROR", details={"option": option, "value": value})
        self.option = option
        self.value = value


def unparseable(option: str, value: str) -> InterpretationError:
    return InterpretationError(f"Could not parse {option} value: {value}", option=option, value=value)
