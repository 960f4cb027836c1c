"""Configuration loader for the ical CLI."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import ConfigError

logger = logging.getLogger(__name__)

APP_DIRNAME = "icalcli"
CALENDARS_DIRNAME = "calendars"
DEFAULT_LOG_LEVEL = "WARNING"

_UTC_OFFSET_RE = re.compile(r"^UTC([+-])(\d{2}):?(\d{2})$")


@dataclass(frozen=True)
class IcalConfig:
    calendar_dir: Path
    tz: tzinfo
    tzid: str
    log_level: int


def default_calendar_dir() -> Path:
    config_home = os.environ.get("XDG_CONFIG_HOME")
    base_dir = Path(config_home).expanduser() if config_home else Path.home() / ".config"
    return base_dir / APP_DIRNAME / CALENDARS_DIRNAME


def resolve_calendar_dir(path: Optional[Path]) -> Path:
    resolved = (path or default_calendar_dir()).expanduser()
    return resolved.resolve()


def _format_utc_offset(offset: timedelta) -> str:
    total_seconds = int(offset.total_seconds())
    sign = "+" if total_seconds >= 0 else "-"
    total_seconds = abs(total_seconds)
    hours, remainder = divmod(total_seconds, 3600)
    minutes = remainder // 60
    return f"UTC{sign}{hours:02d}:{minutes:02d}"


def _tz_name_from_path(path: Path) -> Optional[str]:
    try:
        resolved = path.resolve()
    except OSError:
        return None
    marker = "/zoneinfo/"
    resolved_str = resolved.as_posix()
    if marker in resolved_str:
        return resolved_str.split(marker, 1)[1]
    return None


def _detect_tz_name() -> Optional[str]:
    env_tz = os.environ.get("TZ", "").strip().lstrip(":")
    if env_tz and ("/" in env_tz or env_tz == "UTC"):
        return env_tz

    timezone_file = Path("/etc/timezone")
    if timezone_file.exists():
        try:
            content = timezone_file.read_text(encoding="utf-8").strip()
        except OSError:
            content = ""
        if content:
            return content

    localtime = Path("/etc/localtime")
    if localtime.exists():
        derived = _tz_name_from_path(localtime)
        if derived:
            return derived
    return None


@lru_cache(maxsize=1)
def system_timezone() -> tuple[tzinfo, str]:
    tz_name = _detect_tz_name()
    if tz_name:
        try:
            return ZoneInfo(tz_name), tz_name
        except (ZoneInfoNotFoundError, ValueError):
            logger.debug("Ignoring unknown system timezone %r", tz_name)

    now = datetime.now().astimezone()
    offset = now.utcoffset() or timedelta()
    tzid = _format_utc_offset(offset)
    return timezone(offset, name=tzid), tzid


def resolve_timezone(tzid: Optional[str]) -> tuple[tzinfo, str]:
    if tzid is None:
        return system_timezone()
    tzid = tzid.strip()
    if not tzid:
        return system_timezone()
    match = _UTC_OFFSET_RE.match(tzid)
    if match:
        sign, hours, minutes = match.groups()
        offset = timedelta(hours=int(hours), minutes=int(minutes))
        if sign == "-":
            offset = -offset
        return timezone(offset, name=tzid), tzid
    try:
        return ZoneInfo(tzid), tzid
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Invalid timezone '{tzid}'") from exc


def _resolve_log_level(name: Optional[str]) -> int:
    value = (name or DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(value)
    if isinstance(level, int):
        return level
    return logging.getLevelName(DEFAULT_LOG_LEVEL)


def load_config() -> IcalConfig:
    calendar_dir = os.getenv("ICAL_CALENDAR_DIR")
    try:
        tz, tzid = resolve_timezone(os.getenv("ICAL_TZ"))
    except ValueError as exc:
        raise ConfigError(f"{exc}. Set ICAL_TZ to an IANA name like Europe/Berlin or UTC+02:00.") from exc
    return IcalConfig(
        calendar_dir=resolve_calendar_dir(Path(calendar_dir) if calendar_dir else None),
        tz=tz,
        tzid=tzid,
        log_level=_resolve_log_level(os.getenv("ICAL_LOG_LEVEL")),
    )
