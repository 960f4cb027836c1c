"""Token reader: splits raw arguments into options and multi-word values."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from .constants import FLAG_OPTIONS, OPTION_PREFIX
from .errors import TokenError


def non_empty(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None


def is_option(token: str) -> bool:
    return token.startswith(OPTION_PREFIX)


@dataclass(frozen=True)
class OptionValues:
    values: dict[str, str] = field(default_factory=dict)
    flags: frozenset[str] = frozenset()

    def get(self, name: str) -> Optional[str]:
        return self.values.get(name)

    def flag(self, name: str) -> bool:
        return name in self.flags

    def has(self, name: str) -> bool:
        return name in self.values or name in self.flags


def collect_value(arguments: Sequence[str], index: int) -> tuple[Optional[str], int]:
    """Join every token from ``index`` up to the next option with single spaces."""
    chunks: list[str] = []
    while index < len(arguments) and not is_option(arguments[index]):
        chunks.append(arguments[index])
        index += 1
    if not chunks:
        return None, index
    return " ".join(chunks), index


def read_options(arguments: Sequence[str], allowed: frozenset[str]) -> OptionValues:
    values: dict[str, str] = {}
    flags: set[str] = set()

    index = 0
    while index < len(arguments):
        token = arguments[index]
        if not is_option(token):
            raise TokenError(f"Unexpected argument: {token}", token=token)
        if token not in allowed:
            raise TokenError(f"Unknown option: {token}", token=token)
        if token in values or token in flags:
            raise TokenError(f"Duplicate option: {token}", token=token)

        if token in FLAG_OPTIONS:
            flags.add(token)
            index += 1
            continue

        value, index = collect_value(arguments, index + 1)
        if value is None:
            raise TokenError(f"Missing value for {token}", token=token)
        values[token] = value

    return OptionValues(values=values, flags=frozenset(flags))
