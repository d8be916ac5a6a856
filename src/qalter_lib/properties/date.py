# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Conversion of `[[[[CC]YY]MM]DD]hhmm[.SS]` date specifications to epoch time.
"""

import calendar
from datetime import datetime

from qalter_lib.core.logger import get_logger

logger = get_logger(__name__)


def convert_date(text: str, now: datetime | None = None) -> int:
    """
    Convert a PBS date specification to the number of seconds since the epoch.

    The date is interpreted in local time. Omitted leading fields are taken
    from the current date. If the resulting time lies in the past,
    the smallest omitted unit is advanced: `hhmm` moves to the next day,
    `DDhhmm` to the next month and `MMDDhhmm` to the next year.

    Args:
        text (str): The date specification.
        now (datetime | None): Reference local time. Defaults to the current time.

    Returns:
        int: Epoch seconds, or -1 if the specification is malformed.
    """
    now = now or datetime.now()

    datestr, _, seconds = text.partition(".")
    second = 0
    if seconds or "." in text:
        if len(seconds) != 2 or not seconds.isdigit():
            return -1
        second = int(seconds)
        if second > 59:
            return -1

    if not datestr.isdigit() or len(datestr) not in (4, 6, 8, 10, 12):
        return -1

    year, month, day = now.year, now.month, now.day
    rest = datestr

    if len(rest) == 12:
        year = int(rest[:4])
        rest = rest[4:]
    elif len(rest) == 10:
        yy = int(rest[:2])
        year = yy + 2000 if yy < 69 else yy + 1900
        rest = rest[2:]

    if len(rest) == 8:
        month = int(rest[:2])
        if not 1 <= month <= 12:
            return -1
        rest = rest[2:]

    if len(rest) == 6:
        day = int(rest[:2])
        if not 1 <= day <= 31:
            return -1
        rest = rest[2:]

    hour, minute = int(rest[:2]), int(rest[2:])
    if hour > 23 or minute > 59:
        return -1

    try:
        when = datetime(year, month, day, hour, minute, second)
    except ValueError:
        # day does not exist in the given month
        return -1

    if when < now:
        when = _roll_forward(when, len(datestr))
        if when is None:
            return -1

    logger.debug(f"Date '{text}' converted to {when}.")
    return int(when.timestamp())


def _roll_forward(when: datetime, length: int) -> datetime | None:
    """Advance the first omitted unit of a date lying in the past."""
    try:
        match length:
            case 4:
                return datetime.fromordinal(when.toordinal() + 1).replace(
                    hour=when.hour, minute=when.minute, second=when.second
                )
            case 6:
                year, month = (
                    (when.year + 1, 1) if when.month == 12 else (when.year, when.month + 1)
                )
                if when.day > calendar.monthrange(year, month)[1]:
                    return None
                return when.replace(year=year, month=month)
            case 8:
                return when.replace(year=when.year + 1)
    except ValueError:
        # 29th of February in a non-leap year
        return None

    # fully specified dates are kept as they are
    return when
