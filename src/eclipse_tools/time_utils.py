"""Time conversion for Besselian hour offsets, using rms-julian calendar arithmetic."""

from __future__ import annotations

import re

import julian

from eclipse_tools.constants import SECONDS_PER_DAY, SECONDS_PER_HOUR
from eclipse_tools.models import BesselianElements

_DATE_RE = re.compile(r'^\s*(\d{4})-(\d{1,2})-(\d{1,2})\s*$')

# Timestamps carry tenths of a second.
_TENTHS_PER_DAY = int(SECONDS_PER_DAY * 10)


def parse_date(string: str) -> tuple[int, int, int]:
    """Parse a YYYY-MM-DD date string.

    Parameters:
        string: Calendar date.

    Returns:
        (year, month, day).

    Raises:
        ValueError: If the string is not a YYYY-MM-DD date.
    """
    match = _DATE_RE.match(string or '')
    if match is None:
        raise ValueError(f'Invalid eclipse date {string!r}; expected YYYY-MM-DD')
    year, month, day = (int(g) for g in match.groups())
    if not 1 <= month <= 12 or not 1 <= day <= 31:
        raise ValueError(f'Invalid eclipse date {string!r}; expected YYYY-MM-DD')
    return (year, month, day)


def day_from_ymd(year: int, month: int, day: int) -> int:
    """Convert calendar date to days since J2000.

    Parameters:
        year, month, day: Calendar date.

    Returns:
        Days since J2000.
    """
    return int(julian.day_from_ymd(year, month, day))


def ymd_from_day(day: int) -> tuple[int, int, int]:
    """Convert day since J2000 to calendar date (year, month, day)."""
    y, m, d = julian.ymd_from_day(day)
    return (int(y), int(m), int(d))


def hms_from_sec(sec: float) -> tuple[int, int, float]:
    """Convert seconds within day to (hour, minute, second)."""
    h, m, s = julian.hms_from_sec(sec)
    return (int(h), int(m), float(s))


def ut_seconds(t: float, elements: BesselianElements) -> float:
    """UT seconds from midnight of the eclipse date for a Besselian offset.

    TDT = t0 + t hours; UT = TDT - deltaT. May be negative or exceed one day
    when the offset crosses midnight.

    Parameters:
        t: Hours relative to t0.
        elements: Eclipse elements (t0, delta_t).

    Returns:
        UT seconds relative to 00:00 of elements.date.
    """
    return (elements.t0 + t) * SECONDS_PER_HOUR - elements.delta_t


def hours_to_iso(t: float, elements: BesselianElements) -> str:
    """Format a Besselian time offset as an ISO-8601 UTC timestamp.

    The instant is rounded to 0.1 s; day boundaries roll the calendar date.

    Parameters:
        t: Hours relative to t0 (TDT).
        elements: Eclipse elements supplying date, t0 and deltaT.

    Returns:
        Timestamp like '2026-08-12T18:27:31.4Z'.
    """
    base_day = day_from_ymd(*parse_date(elements.date))
    tenths = int(round(ut_seconds(t, elements) * 10.0))
    day_offset, tenths_of_day = divmod(tenths, _TENTHS_PER_DAY)
    year, month, day = ymd_from_day(base_day + day_offset)
    hour, minute, second = hms_from_sec(tenths_of_day / 10.0)
    return f'{year:04d}-{month:02d}-{day:02d}T{hour:02d}:{minute:02d}:{second:04.1f}Z'
