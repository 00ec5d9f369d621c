from __future__ import annotations

import re
from re import Pattern
from typing import Optional, Tuple

from .errors import MalformedTimeCode

# Accepted chapter start formats, tried in order; the first match wins.
# Each entry carries the multiplier that turns its fractional digits into ms.
TIME_CODE_FORMATS: Tuple[Tuple[str, Pattern[str], int], ...] = (
    ("HH:MM:SS.mmm", re.compile(r"(\d{1,2}):(\d{2}):(\d{2})\.(\d{3})", re.ASCII), 1),
    ("HH:MM:SS.m", re.compile(r"(\d{1,2}):(\d{2}):(\d{2})\.(\d)", re.ASCII), 100),
    ("HH:MM:SS", re.compile(r"(\d{1,2}):(\d{2}):(\d{2})()", re.ASCII), 0),
)

MS_PER_HOUR = 3_600_000
MS_PER_MINUTE = 60_000
MS_PER_SECOND = 1_000


def parse_time_code(text: str) -> int:
    """Return the millisecond offset described by a chapter time code.

    Only the clock magnitude matters: hours 0-23, minutes and seconds 0-59.
    Raises MalformedTimeCode when no accepted format matches.
    """
    for _name, pattern, fraction_scale in TIME_CODE_FORMATS:
        millis = _match(pattern, fraction_scale, text)
        if millis is not None:
            return millis
    raise MalformedTimeCode(text)


def _match(pattern: Pattern[str], fraction_scale: int, text: str) -> Optional[int]:
    match = pattern.fullmatch(text)
    if not match:
        return None
    hours, minutes, seconds = (int(group) for group in match.group(1, 2, 3))
    if hours > 23 or minutes > 59 or seconds > 59:
        return None
    fraction = int(match.group(4) or 0) * fraction_scale
    return hours * MS_PER_HOUR + minutes * MS_PER_MINUTE + seconds * MS_PER_SECOND + fraction


def format_millis(millis: int) -> str:
    """
    >>> format_millis(3_723_004)
    '01:02:03.004'
    """
    hours, rest = divmod(millis, MS_PER_HOUR)
    minutes, rest = divmod(rest, MS_PER_MINUTE)
    seconds, fraction = divmod(rest, MS_PER_SECOND)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{fraction:03d}"
