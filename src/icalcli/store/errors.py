"""Error types for calendar store operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class StoreError(Exception):
    message: str
    code: str = "STORE_ERROR"
    details: Any | None = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


class StoreValidationError(StoreError):
    def __init__(self, message: str, field: str | None = None, value: Any | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR", details={"field": field, "value": value})
        self.field = field
        self.value = value


class StoreFileError(StoreError):
    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message, code="FILE_ERROR", details={"path": path})
        self.path = path


class EventNotFoundError(StoreError):
    def __init__(self, message: str, event_id: str | None = None) -> None:
        super().__init__(message, code="NOT_FOUND", details={"event_id": event_id})
        self.event_id = event_id


class CalendarNotFoundError(StoreError):
    def __init__(self, message: str, name: str | None = None) -> None:
        super().__init__(message, code="CALENDAR_NOT_FOUND", details={"name": name})
        self.name = name
