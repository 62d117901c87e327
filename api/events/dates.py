"""
Event start dates.

Events store their start as text in the local format used by the catalog
frontend: "D. M. YYYY HH:MM", e.g. "15. 3. 2024 09:00".
"""

from __future__ import annotations

from datetime import datetime


class MalformedDateError(ValueError):
    pass


def _strip_separator(token: str) -> str:
    # "15." -> "15"
    if token and not token[-1].isdecimal():
        return token[:-1]
    return token


def _to_int(token: str, *, part: str, raw: str) -> int:
    if not token.isdecimal():
        raise MalformedDateError(f"Invalid {part} in event date {raw!r}.")
    return int(token)


def parse_event_date(raw: str) -> datetime:
    """
    Parse "D. M. YYYY HH:MM" into a naive datetime.

    Raises MalformedDateError when a token is missing, non-numeric or the
    values do not form a real calendar timestamp.
    """
    if not isinstance(raw, str):
        raise MalformedDateError(f"Event date must be a string, got {type(raw).__name__}.")

    tokens = raw.split()
    if len(tokens) != 4:
        raise MalformedDateError(f"Expected 'D. M. YYYY HH:MM', got {raw!r}.")

    day_token, month_token, year_token, time_token = tokens
    hour_token, sep, minute_token = time_token.partition(":")
    if not sep:
        raise MalformedDateError(f"Missing HH:MM time in event date {raw!r}.")

    day = _to_int(_strip_separator(day_token), part="day", raw=raw)
    month = _to_int(_strip_separator(month_token), part="month", raw=raw)
    year = _to_int(year_token, part="year", raw=raw)
    hour = _to_int(hour_token, part="hour", raw=raw)
    minute = _to_int(minute_token, part="minute", raw=raw)

    try:
        return datetime(year, month, day, hour, minute)
    except ValueError as e:
        raise MalformedDateError(f"Event date {raw!r} is not a valid timestamp.") from e
