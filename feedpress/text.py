"""Date and string formatting helpers for templates."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})"
)
_SPACED = re.compile(
    r"(\d{4})-(\d{2})-(\d{2}) (\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?(Z?)"
)


def _build(match: re.Match) -> datetime | None:
    year, month, day, hour, minute, second, fraction, zone = match.groups()
    micro = int((fraction or "")[:6].ljust(6, "0"))
    if not zone or zone == "Z":
        tz = timezone.utc
    else:
        hours, minutes = int(zone[1:3]), int(zone[4:6])
        if hours > 23 or minutes > 59:
            return None
        sign = 1 if zone[0] == "+" else -1
        tz = timezone(sign * timedelta(hours=hours, minutes=minutes))
    try:
        return datetime(int(year), int(month), int(day), int(hour),
                        int(minute), int(second), micro, tzinfo=tz)
    except ValueError:
        return None


def _parse_rfc3339(text: str) -> datetime | None:
    match = _RFC3339.fullmatch(text)
    return _build(match) if match else None


def _parse_any(text: str) -> datetime | None:
    parsed = _parse_rfc3339(text)
    if parsed is not None:
        return parsed
    match = _SPACED.fullmatch(text)
    return _build(match) if match else None


def _short(moment: datetime) -> str:
    return f"{_MONTHS[moment.month - 1]} {moment.day}, {moment.year:04d}"


def _clock(moment: datetime) -> str:
    suffix = "PM" if moment.hour >= 12 else "AM"
    return f"{moment.hour % 12 or 12}:{moment.minute:02d} {suffix}"


def format_date(date_str: str) -> str:
    """Format a timestamp as 'Jan 2, 2006 at 3:04 PM'; unparsable input is returned as is."""
    if not date_str:
        return ""
    moment = _parse_any(date_str)
    if moment is None:
        return date_str
    return f"{_short(moment)} at {_clock(moment)}"


def _plural(count: int, unit: str) -> str:
    if count == 1:
        return f"1 {unit} ago"
    return f"{count} {unit}s ago"


def format_relative_date(date_str: str, now: datetime | None = None) -> str:
    """Describe an RFC 3339 timestamp relative to ``now`` (an aware datetime)."""
    if not date_str:
        return ""
    moment = _parse_rfc3339(date_str)
    if moment is None:
        return date_str
    current = now if now is not None else datetime.now(timezone.utc)
    seconds = (current - moment).total_seconds()
    hours = seconds / 3600
    if seconds < 60:
        return "just now"
    if seconds < 3600:
        return _plural(int(seconds / 60), "minute")
    if hours < 24:
        return _plural(int(hours), "hour")
    if hours < 7 * 24:
        return _plural(int(hours / 24), "day")
    if hours < 30 * 24:
        return _plural(int(hours / (24 * 7)), "week")
    return _short(moment)


def format_short_date(date_str: str) -> str:
    """Format an RFC 3339 timestamp as 'Jan 2, 2006'."""
    if not date_str:
        return ""
    moment = _parse_rfc3339(date_str)
    return date_str if moment is None else _short(moment)


def format_time(date_str: str) -> str:
    """Format an RFC 3339 timestamp as '3:04 PM'."""
    if not date_str:
        return ""
    moment = _parse_rfc3339(date_str)
    return date_str if moment is None else _clock(moment)


def truncate_string(s: str, max_len: int) -> str:
    """Shorten ``s`` to ``max_len`` characters, ending with '...' when cut."""
    if len(s) <= max_len:
        return s
    if max_len < 3:
        raise ValueError("max_len must be at least 3 to truncate")
    return s[: max_len - 3] + "..."