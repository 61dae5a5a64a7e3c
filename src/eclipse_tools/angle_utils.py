"""Coordinate and duration parsing/formatting for NASA path-table values."""

from __future__ import annotations

import re

from eclipse_tools.constants import SECONDS_PER_MINUTE

_COORD_RE = re.compile(r'^(\d+)\s+(\d+\.?\d*)\s*([NSEW]?)$', re.IGNORECASE)
_DURATION_RE = re.compile(r'^(\d+)m(\d+\.?\d*)s$')


def parse_coordinate(string: str | None) -> float | None:
    """Parse a degrees/minutes coordinate with hemisphere letter.

    Accepts "42 54.5N" or "002 05.1W". South and west are negative; a missing
    hemisphere letter is treated as north/east.

    Parameters:
        string: Coordinate text, or '-' / empty for "not defined".

    Returns:
        Signed decimal degrees, or None when undefined or unparseable.
    """
    if string is None:
        return None
    s = string.strip()
    if not s or s == '-':
        return None
    match = _COORD_RE.match(s)
    if match is None:
        return None
    value = int(match.group(1)) + float(match.group(2)) / 60.0
    if match.group(3).upper() in ('S', 'W'):
        value = -value
    return value


def parse_duration(string: str | None) -> float | None:
    """Parse a path-table duration like "01m34.3s" to seconds (None on failure)."""
    if string is None:
        return None
    match = _DURATION_RE.match(string.strip())
    if match is None:
        return None
    return int(match.group(1)) * SECONDS_PER_MINUTE + float(match.group(2))


def format_duration(seconds: float) -> str:
    """Format a duration as minutes and tenths of seconds, e.g. "1m 34.3s".

    Parameters:
        seconds: Non-negative duration in seconds.

    Returns:
        Formatted string.
    """
    tenths = int(round(seconds * 10.0))
    mins, rem = divmod(tenths, 600)
    return f'{mins}m {rem / 10.0:.1f}s'


def format_latlon(lat: float, lon: float, ndecimal: int = 2) -> str:
    """Format a point with hemisphere letters, e.g. "43.36°N, 5.85°W"."""
    ns = 'N' if lat >= 0 else 'S'
    ew = 'E' if lon >= 0 else 'W'
    return f'{abs(lat):.{ndecimal}f}°{ns}, {abs(lon):.{ndecimal}f}°{ew}'
