"""
Domain layer - Pure availability and pricing logic without external dependencies.
"""

from .exceptions import (
    AmbiguousScheduleError,
    CourtSlotsError,
    NotFoundError,
    SnapshotError,
    ValidationError,
)
from .models import (
    AvailabilityResult,
    BreakdownLine,
    Court,
    DateCheck,
    DayHours,
    Interval,
    PriceQuote,
    PriceSchedule,
    Slot,
)
from .price_calculator import PriceBreakdownCalculator
from .schedule_resolver import ScheduleResolver
from .slot_generator import SlotGenerator

__all__ = [
    "AmbiguousScheduleError",
    "AvailabilityResult",
    "BreakdownLine",
    "Court",
    "CourtSlotsError",
    "DateCheck",
    "DayHours",
    "Interval",
    "NotFoundError",
    "PriceBreakdownCalculator",
    "PriceQuote",
    "PriceSchedule",
    "ScheduleResolver",
    "Slot",
    "SlotGenerator",
    "SnapshotError",
    "ValidationError",
]
