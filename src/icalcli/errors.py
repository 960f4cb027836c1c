"""Top-level error types for the ical CLI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class IcalError(Exception):
    message: str
    code: str = "ICAL_ERROR"
    details: Any | None = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


class ConfigError(IcalError):
    def __init__(self, message: str, details: Any | None = None) -> None:
        super().__init__(message, code="CONFIG_ERROR", details=details)
