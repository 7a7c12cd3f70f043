"""
Enumeration of bookable start times within a venue day.
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .exceptions import ValidationError
from .models import Court, Interval, Slot
from .money import round_half_up
from .time_arithmetic import DayWindow, minutes_to_time

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MINUTES = 60
DEFAULT_STEP_MINUTES = 30

# Standard durations with a dedicated court rate; everything else is prorated
DURATION_TIERS: Dict[int, str] = {
    60: "price_per_hour",
    90: "price_per_hour_90",
    120: "price_per_hour_120",
}

OUTSIDE_HOURS = "outside_opening_hours"
CONFLICT = "conflict"

PriceFunction = Callable[[int, int], float]


def validate_duration(duration) -> int:
    """Coerce a requested duration to a positive number of minutes."""
    # Query strings arrive as text
    if isinstance(duration, str) and duration.strip().lstrip("-").isdigit():
        duration = int(duration.strip())

    if isinstance(duration, bool) or not isinstance(duration, int):
        raise ValidationError(f"Duration must be a whole number of minutes, got {duration!r}")

    minutes = duration
    if minutes <= 0:
        raise ValidationError(f"Duration must be greater than zero, got {minutes}")
    return minutes


def quick_price(court: Court, duration: int) -> float:
    """
    Estimate a slot price from the court's flat and tiered rates.

    A defined tier for the exact duration wins; otherwise the hourly rate
    is prorated. Rounded to two decimals.
    """
    tier_field = DURATION_TIERS.get(duration)
    tier_price = getattr(court, tier_field) if tier_field else None

    if tier_price:
        return round_half_up(float(tier_price), 2)

    hourly = float(court.price_per_hour or 0)
    return round_half_up((hourly / 60) * duration, 2)


class SlotGenerator:
    """
    Steps candidate start times across an opening window and keeps the ones
    that collide with no booking or blocked interval.
    """

    def __init__(self, step_minutes: int = DEFAULT_STEP_MINUTES):
        if step_minutes <= 0:
            raise ValidationError(f"Slot step must be positive, got {step_minutes}")
        self.step_minutes = step_minutes

    def generate(
        self,
        open_time: str,
        close_time: str,
        court: Court,
        duration: int = DEFAULT_DURATION_MINUTES,
        bookings: Sequence[Interval] = (),
        blocked: Sequence[Interval] = (),
        price_fn: Optional[PriceFunction] = None,
    ) -> List[Slot]:
        """
        List the available slots of one venue day.

        Args:
            open_time: Opening clock time (HH:MM)
            close_time: Closing clock time; at or before open means after midnight
            court: Court whose rates give the quick price
            duration: Requested slot length in minutes
            bookings: Active bookings of the day
            blocked: Blocked intervals of the day
            price_fn: Optional exact pricer taking absolute start/end minutes;
                replaces the quick tier price when given

        Returns:
            Slots in chronological order, times wrapped to the clock
        """
        duration = validate_duration(duration)
        window = DayWindow.from_clock(open_time, close_time)
        conflicts = self._normalize_conflicts(window, list(bookings) + list(blocked))

        slots: List[Slot] = []
        rejected = 0

        for start in range(window.open, window.close - duration + 1, self.step_minutes):
            end = start + duration

            if self._collides(start, end, conflicts):
                rejected += 1
                continue

            price = price_fn(start, end) if price_fn else quick_price(court, duration)
            slots.append(
                Slot(
                    start_time=minutes_to_time(start),
                    end_time=minutes_to_time(end),
                    duration=duration,
                    price=price,
                )
            )

        logger.debug(
            "Window %s-%s: %d slot(s) of %d min available, %d rejected",
            open_time,
            close_time,
            len(slots),
            duration,
            rejected,
        )
        return slots

    def check_start(
        self,
        open_time: str,
        close_time: str,
        start_time: str,
        duration: int = DEFAULT_DURATION_MINUTES,
        bookings: Sequence[Interval] = (),
        blocked: Sequence[Interval] = (),
    ) -> Tuple[Optional[str], Optional[Tuple[int, int]]]:
        """
        Check one fixed start time, which need not sit on the step grid.

        Returns (reason, interval): reason is None when the start is bookable,
        interval holds its absolute minutes when it fits the window.
        """
        duration = validate_duration(duration)
        window = DayWindow.from_clock(open_time, close_time)
        start, _ = window.normalize_clock(start_time, start_time)
        end = start + duration

        if start < window.open or end > window.close:
            return OUTSIDE_HOURS, None

        conflicts = self._normalize_conflicts(window, list(bookings) + list(blocked))
        if self._collides(start, end, conflicts):
            return CONFLICT, (start, end)

        return None, (start, end)

    @staticmethod
    def _normalize_conflicts(
        window: DayWindow, intervals: Sequence[Interval]
    ) -> List[Tuple[int, int]]:
        """Lay every conflicting interval onto the window's timeline."""
        return [
            window.normalize_clock(interval.start_time, interval.end_time)
            for interval in intervals
        ]

    @staticmethod
    def _collides(start: int, end: int, conflicts: Sequence[Tuple[int, int]]) -> bool:
        """Half-open overlap test against every conflicting interval."""
        return any(start < other_end and end > other_start for other_start, other_end in conflicts)
