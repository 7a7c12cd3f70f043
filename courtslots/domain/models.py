"""
Domain models for courts, price schedules, slots and price quotes.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .exceptions import AmbiguousScheduleError, ValidationError
from .time_arithmetic import time_to_minutes

ALL_DAYS: Tuple[int, ...] = (0, 1, 2, 3, 4, 5, 6)


@dataclass(frozen=True)
class Court:
    """
    Pricing snapshot of a court.

    The 90 and 120 minute tiers are optional; a missing tier is prorated
    from ``price_per_hour``.
    """
    id: str
    name: str
    price_per_hour: float = 0.0
    price_per_hour_90: Optional[float] = None
    price_per_hour_120: Optional[float] = None
    is_active: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "pricePerHour": self.price_per_hour,
            "pricePerHour90": self.price_per_hour_90,
            "pricePerHour120": self.price_per_hour_120,
        }


@dataclass(frozen=True)
class Interval:
    """
    A booked or blocked clock interval, half-open ``[start_time, end_time)``.
    """
    start_time: str
    end_time: str

    def __post_init__(self):
        # Fail early on malformed clock values
        time_to_minutes(self.start_time)
        time_to_minutes(self.end_time)


@dataclass(frozen=True)
class PriceSchedule:
    """
    A day-of-week and time-range scoped override of a court's hourly rate.

    Invariant: start_time must be before end_time within one day, where an
    end of ``24:00`` closes the schedule at midnight. Schedules that wrap
    past midnight are rejected rather than guessed at.
    """
    id: str
    name: str
    start_time: str
    end_time: str
    price_per_hour: float
    days_of_week: Tuple[int, ...] = ALL_DAYS
    priority: int = 0
    is_active: bool = True

    def __post_init__(self):
        if self.start_minute >= self.end_minute:
            raise AmbiguousScheduleError(
                f"Schedule '{self.name}' starts at {self.start_time} but ends at "
                f"{self.end_time}; schedules must start before they end within one day"
            )

        invalid_days = [day for day in self.days_of_week if day not in ALL_DAYS]
        if invalid_days:
            raise ValidationError(f"days_of_week must be between 0 and 6, got {invalid_days}")

        object.__setattr__(self, "days_of_week", tuple(self.days_of_week))

    @property
    def start_minute(self) -> int:
        return time_to_minutes(self.start_time)

    @property
    def end_minute(self) -> int:
        return time_to_minutes(self.end_time, allow_end_of_day=True)

    def applies_on(self, weekday: int) -> bool:
        """Check if the schedule is active on a weekday (0 = Sunday)."""
        return self.is_active and weekday in self.days_of_week

    def covers(self, minute: int) -> bool:
        """Check if a minute-of-day falls within ``[start, end)``."""
        return self.start_minute <= minute < self.end_minute


@dataclass(frozen=True)
class DayHours:
    """Opening hours of one weekday."""
    open: str = "08:00"
    close: str = "22:00"
    closed: bool = False


@dataclass
class Slot:
    """
    A bookable candidate interval of the requested duration.
    """
    start_time: str
    end_time: str
    duration: int
    price: float
    available: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "startTime": self.start_time,
            "endTime": self.end_time,
            "duration": self.duration,
            "price": self.price,
            "available": self.available,
        }


@dataclass
class BreakdownLine:
    """
    One schedule-priced (or base-priced) portion of a booking.

    ``amount`` keeps full precision; only the quote total is rounded.
    """
    schedule_id: Optional[str]
    schedule_name: str
    start_time: str
    end_time: str
    minutes: int
    price_per_hour: float
    amount: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scheduleId": self.schedule_id,
            "scheduleName": self.schedule_name,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "minutes": self.minutes,
            "pricePerHour": self.price_per_hour,
            "amount": self.amount,
        }


@dataclass
class PriceQuote:
    """Itemized cost of one booking interval."""
    total_price: int
    breakdown: List[BreakdownLine] = field(default_factory=list)

    @property
    def total_minutes(self) -> int:
        return sum(line.minutes for line in self.breakdown)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalPrice": self.total_price,
            "breakdown": [line.to_dict() for line in self.breakdown],
        }


@dataclass
class AvailabilityResult:
    """
    Answer to an availability request.

    A closed day carries an explanatory message and no court.
    """
    available_slots: List[Slot] = field(default_factory=list)
    court: Optional[Court] = None
    message: Optional[str] = None

    @property
    def is_closed(self) -> bool:
        return self.court is None and self.message is not None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "availableSlots": [slot.to_dict() for slot in self.available_slots],
        }
        if self.court is not None:
            payload["court"] = self.court.to_dict()
        if self.message is not None:
            payload["message"] = self.message
        return payload


@dataclass
class DateCheck:
    """Availability of one fixed start time on one date."""
    date: str
    available: bool
    reason: Optional[str] = None
    price: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "available": self.available,
            "reason": self.reason,
            "price": self.price,
        }
