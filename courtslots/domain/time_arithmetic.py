"""
Clock arithmetic shared by slot generation and pricing.

All interval math runs on minute offsets. A venue day whose close is at or
before its open extends past midnight; such a day is laid onto one
monotonically increasing timeline and only wrapped back to a clock value
when formatted.
"""

import re
from dataclasses import dataclass
from typing import Tuple

import pendulum
from pendulum import DateTime

from .exceptions import ValidationError

MINUTES_PER_DAY = 1440

_CLOCK_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


def time_to_minutes(value: str, allow_end_of_day: bool = False) -> int:
    """
    Convert an ``HH:MM`` (or ``HH:MM:SS``) clock string to minute-of-day.

    With ``allow_end_of_day`` the SQL ``TIME`` end of day ``24:00`` is read
    as 1440; it is only meaningful as the end of a range.
    """
    match = _CLOCK_PATTERN.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise ValidationError(f"Invalid time '{value}', expected HH:MM")

    hours, minutes = int(match.group(1)), int(match.group(2))
    seconds = int(match.group(3) or 0)

    if allow_end_of_day and hours == 24 and minutes == 0 and seconds == 0:
        return MINUTES_PER_DAY
    if hours > 23 or minutes > 59 or seconds > 59:
        raise ValidationError(f"Invalid time '{value}', expected HH:MM")

    return hours * 60 + minutes


def minutes_to_time(minutes: int) -> str:
    """Format a minute offset as ``HH:MM``, wrapping modulo one day."""
    minutes %= MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


@dataclass(frozen=True)
class DayWindow:
    """
    Opening window of one venue day on the absolute timeline.

    ``close`` exceeds 1440 when the window crosses midnight.
    """
    open: int
    close: int

    @classmethod
    def from_clock(cls, open_time: str, close_time: str) -> "DayWindow":
        open_minutes = time_to_minutes(open_time)
        close_minutes = time_to_minutes(close_time)

        if close_minutes <= open_minutes:
            close_minutes += MINUTES_PER_DAY

        return cls(open=open_minutes, close=close_minutes)

    @property
    def crosses_midnight(self) -> bool:
        return self.close > MINUTES_PER_DAY

    def normalize(self, start: int, end: int) -> Tuple[int, int]:
        """
        Map a clock interval onto this window's timeline.

        Only applies in crossing mode: values before the opening time are
        taken to belong to the early hours after midnight.
        """
        if self.crosses_midnight:
            if start < self.open:
                start += MINUTES_PER_DAY
            if end <= self.open:
                end += MINUTES_PER_DAY
        return start, end

    def normalize_clock(self, start_time: str, end_time: str) -> Tuple[int, int]:
        return self.normalize(time_to_minutes(start_time), time_to_minutes(end_time))


WEEKDAY_NAMES = (
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
)


def parse_date(value: str, tz: str = "UTC") -> DateTime:
    """
    Parse a ``YYYY-MM-DD`` booking date as a venue-local calendar day.

    The date is interpreted in the venue's own timezone, so the weekday never
    shifts the way it does when a bare date is read as a UTC instant.
    """
    if not value or not isinstance(value, str):
        raise ValidationError("Please provide a date (YYYY-MM-DD)")

    try:
        return pendulum.from_format(value.strip(), "YYYY-MM-DD", tz=tz).start_of("day")
    except ValueError as exc:
        raise ValidationError(f"Invalid date '{value}', expected YYYY-MM-DD") from exc


def weekday_index(day: DateTime) -> int:
    """Return the weekday with 0 = Sunday through 6 = Saturday."""
    return day.isoweekday() % 7


def weekday_name(day: DateTime) -> str:
    return WEEKDAY_NAMES[weekday_index(day)]
