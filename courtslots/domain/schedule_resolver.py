"""
Resolution of the price schedule in force at a given clock minute.
"""

import logging
from typing import Iterable, List, Optional

from .models import PriceSchedule

logger = logging.getLogger(__name__)


class ScheduleResolver:
    """
    Picks the winning schedule for a weekday and minute.

    Only active schedules that apply on the weekday are considered. Among
    those covering a minute the highest priority wins; equal priorities are
    settled by the earliest start time.
    """

    def __init__(self, schedules: Iterable[PriceSchedule], weekday: int):
        self.weekday = weekday
        self.schedules: List[PriceSchedule] = sorted(
            (s for s in schedules if s.applies_on(weekday)),
            key=lambda s: (-s.priority, s.start_minute),
        )
        logger.debug(
            "%d schedule(s) apply on weekday %d", len(self.schedules), weekday
        )

    def __bool__(self) -> bool:
        return bool(self.schedules)

    def resolve(self, minute: int) -> Optional[PriceSchedule]:
        """
        Return the schedule covering a minute-of-day, or None for base price.
        """
        # Already ordered by rank, so the first hit wins
        for schedule in self.schedules:
            if schedule.covers(minute):
                return schedule
        return None

    def next_start(self, minute: int) -> Optional[int]:
        """Nearest schedule start strictly after a minute-of-day."""
        starts = [s.start_minute for s in self.schedules if s.start_minute > minute]
        return min(starts) if starts else None

    def next_boundary(self, minute: int) -> Optional[int]:
        """
        Nearest schedule start or end strictly after a minute-of-day.

        The winning schedule can only change at one of these points.
        """
        boundaries = [
            point
            for s in self.schedules
            for point in (s.start_minute, s.end_minute)
            if point > minute
        ]
        return min(boundaries) if boundaries else None
