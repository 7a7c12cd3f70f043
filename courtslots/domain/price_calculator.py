"""
Itemized pricing of a booking interval across priority-ranked schedules.

This is pure domain logic: the caller supplies the court and its schedules,
nothing here touches storage.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from .exceptions import ValidationError
from .models import BreakdownLine, Court, PriceQuote, PriceSchedule
from .money import round_half_up
from .schedule_resolver import ScheduleResolver
from .time_arithmetic import MINUTES_PER_DAY, minutes_to_time, time_to_minutes

logger = logging.getLogger(__name__)

BASE_PRICE_LABEL = "Precio base"


class PriceBreakdownCalculator:
    """
    Computes the exact cost of ``[start, end)`` for one court and weekday.

    Algorithm:
    1. Put a cursor on the booking start
    2. Resolve the winning schedule at the cursor (or the base price)
    3. Cut the segment at the next point where the winner can change
    4. Charge the per-minute rate (``price_per_hour / 60``) for the segment
    5. Merge the segment into the previous line when both share a rate source
    6. Round the total once, to a whole currency unit

    The cursor moves by segment, so the loop runs once per schedule
    boundary rather than once per minute.
    """

    def __init__(
        self,
        court: Court,
        schedules: Iterable[PriceSchedule],
        weekday: int,
        base_label: str = BASE_PRICE_LABEL,
    ):
        self.court = court
        self.resolver = ScheduleResolver(schedules, weekday)
        self.base_label = base_label

    @property
    def has_schedules(self) -> bool:
        return bool(self.resolver)

    def calculate_clock(self, start_time: str, end_time: str) -> PriceQuote:
        """
        Price a booking given as clock strings.

        An end at or before the start is read as the next day (the booking
        crosses midnight); an identical start and end is rejected.
        """
        start = time_to_minutes(start_time)
        end = time_to_minutes(end_time)

        if start == end:
            raise ValidationError(
                f"Booking {start_time}-{end_time} must end after it starts"
            )
        if end < start:
            end += MINUTES_PER_DAY

        return self.calculate(start, end)

    def calculate(self, start: int, end: int) -> PriceQuote:
        """
        Price ``[start, end)`` given as absolute minutes.

        ``end`` may run past 1440; minutes after midnight are priced by the
        clock ranges of the same weekday's schedules.
        """
        if end <= start:
            raise ValidationError(f"Booking end ({end}) must be after its start ({start})")

        breakdown: List[BreakdownLine] = []
        last_key: Tuple[bool, Optional[str]] = (False, None)
        total = 0.0
        cursor = start

        while cursor < end:
            schedule, segment_end = self._next_segment(cursor, end)
            minutes = segment_end - cursor

            if schedule is not None:
                key = (True, schedule.id)
                price_per_hour = float(schedule.price_per_hour)
            else:
                key = (False, None)
                price_per_hour = float(self.court.price_per_hour or 0)

            amount = price_per_hour * minutes / 60
            total += amount

            if breakdown and key == last_key:
                line = breakdown[-1]
                line.minutes += minutes
                line.amount += amount
                line.end_time = minutes_to_time(segment_end)
            else:
                breakdown.append(
                    BreakdownLine(
                        schedule_id=schedule.id if schedule is not None else None,
                        schedule_name=schedule.name if schedule is not None else self.base_label,
                        start_time=minutes_to_time(cursor),
                        end_time=minutes_to_time(segment_end),
                        minutes=minutes,
                        price_per_hour=price_per_hour,
                        amount=amount,
                    )
                )
                last_key = key

            logger.debug(
                "Segment %s-%s priced at %s/h (%s)",
                minutes_to_time(cursor),
                minutes_to_time(segment_end),
                price_per_hour,
                schedule.name if schedule is not None else self.base_label,
            )
            cursor = segment_end

        return PriceQuote(total_price=round_half_up(total), breakdown=breakdown)

    def _next_segment(self, cursor: int, end: int) -> Tuple[Optional[PriceSchedule], int]:
        """
        Resolve the rate source at the cursor and where its segment stops.
        """
        day_offset = cursor - cursor % MINUTES_PER_DAY
        clock = cursor - day_offset
        schedule = self.resolver.resolve(clock)

        if schedule is not None:
            # The winner's own end is always among the boundaries
            limit = self.resolver.next_boundary(clock)
        else:
            limit = self.resolver.next_start(clock)

        if limit is None:
            limit = MINUTES_PER_DAY

        return schedule, min(day_offset + limit, end)
