"""
Application service answering availability and price questions for a court.

The service fetches a court's snapshot through a repository adapter and
delegates the actual work to the domain-level ``SlotGenerator`` and
``PriceBreakdownCalculator``. It only reads; conflict freedom at booking
time is enforced by the persistence layer's uniqueness constraint.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List, Optional, Protocol, Sequence, Tuple

from pendulum import DateTime

from ..domain.exceptions import NotFoundError
from ..domain.models import (
    AvailabilityResult,
    Court,
    DateCheck,
    DayHours,
    Interval,
    PriceQuote,
    PriceSchedule,
)
from ..domain.price_calculator import BASE_PRICE_LABEL, PriceBreakdownCalculator
from ..domain.slot_generator import (
    DEFAULT_DURATION_MINUTES,
    SlotGenerator,
    quick_price,
    validate_duration,
)
from ..domain.time_arithmetic import parse_date, weekday_index, weekday_name

if TYPE_CHECKING:
    from ..config import AppConfig

logger = logging.getLogger(__name__)

DEFAULT_ACTIVE_STATUSES: Tuple[str, ...] = ("pending", "confirmed")
CLOSED_MESSAGE = "Court is closed on this day"
CLOSED = "closed"


class VenueRepository(Protocol):
    """Protocol describing the read access the service needs."""

    def get_court(self, court_id: str) -> Optional[Court]:
        """Return the court, or None when it does not exist."""

    def get_opening_hours(self, court_id: str) -> Dict[str, DayHours]:
        """Return the court's venue opening hours keyed by weekday name."""

    def get_closed_dates(self, court_id: str) -> Sequence[str]:
        """Return ``YYYY-MM-DD`` dates on which the venue is closed."""

    def get_bookings(
        self, court_id: str, date: str, statuses: Sequence[str]
    ) -> List[Interval]:
        """Return bookings of a court and date whose status is in ``statuses``."""

    def get_blocked_slots(self, court_id: str, date: str) -> List[Interval]:
        """Return blocked intervals of a court and date."""

    def get_price_schedules(self, court_id: str) -> List[PriceSchedule]:
        """Return every price schedule of a court, active or not."""


class AvailabilityService:
    """
    Orchestrates snapshot retrieval, slot generation and pricing.

    Every call is a pure function of what the repository returns, so one
    instance can serve concurrent requests.
    """

    def __init__(
        self,
        repository: VenueRepository,
        slot_generator: Optional[SlotGenerator] = None,
        *,
        timezone: str = "UTC",
        active_statuses: Sequence[str] = DEFAULT_ACTIVE_STATUSES,
        base_label: str = BASE_PRICE_LABEL,
        closed_message: str = CLOSED_MESSAGE,
    ) -> None:
        self._repository = repository
        self._slot_generator = slot_generator or SlotGenerator()
        self.timezone = timezone
        self.active_statuses = tuple(active_statuses)
        self.base_label = base_label
        self.closed_message = closed_message

    @classmethod
    def from_config(cls, repository: VenueRepository, config: AppConfig) -> AvailabilityService:
        """Build a service from an ``AppConfig``."""
        return cls(
            repository,
            SlotGenerator(step_minutes=config.defaults.slot_step_minutes),
            timezone=config.timezone,
            active_statuses=config.active_booking_statuses,
            base_label=config.base_price_label,
            closed_message=config.closed_message,
        )

    def get_availability(
        self,
        court_id: str,
        date: str,
        duration: int = DEFAULT_DURATION_MINUTES,
    ) -> AvailabilityResult:
        """
        List the bookable slots of a court on a date.

        Slots are priced exactly through the court's schedules when any
        apply on that weekday, and by the quick tier estimate otherwise.
        """
        day = parse_date(date, self.timezone)
        duration = validate_duration(duration)
        court = self._get_court(court_id)
        date_key = day.to_date_string()

        hours = self._opening_hours_for(court_id, day)
        if hours is None:
            logger.info("Court %s is closed on %s", court_id, date_key)
            return AvailabilityResult(available_slots=[], message=self.closed_message)

        bookings, blocked = self._conflicts_for(court_id, date_key)
        calculator = self._calculator_for(court, day)

        slots = self._slot_generator.generate(
            open_time=hours.open,
            close_time=hours.close,
            court=court,
            duration=duration,
            bookings=bookings,
            blocked=blocked,
            price_fn=self._exact_price_fn(calculator),
        )

        logger.debug(
            "Court %s on %s: %d slot(s) of %d min", court_id, date_key, len(slots), duration
        )
        return AvailabilityResult(available_slots=slots, court=court)

    def calculate_price(
        self,
        court_id: str,
        date: str,
        start_time: str,
        end_time: str,
    ) -> PriceQuote:
        """Itemize the cost of a booking interval on a date."""
        day = parse_date(date, self.timezone)
        court = self._get_court(court_id)
        calculator = self._calculator_for(court, day)
        return calculator.calculate_clock(start_time, end_time)

    def check_dates(
        self,
        court_id: str,
        dates: Sequence[str],
        start_time: str,
        duration: int = DEFAULT_DURATION_MINUTES,
    ) -> List[DateCheck]:
        """
        Check one start time on several dates, e.g. before a weekly series.

        Each date reports whether the start is bookable, why not, or the
        price it would cost.
        """
        duration = validate_duration(duration)
        court = self._get_court(court_id)
        days = [parse_date(date, self.timezone) for date in dates]
        results: List[DateCheck] = []

        for day in days:
            date_key = day.to_date_string()
            hours = self._opening_hours_for(court_id, day)

            if hours is None:
                results.append(DateCheck(date=date_key, available=False, reason=CLOSED))
                continue

            bookings, blocked = self._conflicts_for(court_id, date_key)
            reason, interval = self._slot_generator.check_start(
                open_time=hours.open,
                close_time=hours.close,
                start_time=start_time,
                duration=duration,
                bookings=bookings,
                blocked=blocked,
            )

            if reason is not None:
                results.append(DateCheck(date=date_key, available=False, reason=reason))
                continue

            calculator = self._calculator_for(court, day)
            price_fn = self._exact_price_fn(calculator)
            price = price_fn(*interval) if price_fn else quick_price(court, duration)
            results.append(DateCheck(date=date_key, available=True, price=price))

        return results

    def _get_court(self, court_id: str) -> Court:
        court = self._repository.get_court(court_id)
        if court is None or not court.is_active:
            logger.warning("Court %s not found", court_id)
            raise NotFoundError(f"Court '{court_id}' does not exist")
        return court

    def _opening_hours_for(self, court_id: str, day: DateTime) -> Optional[DayHours]:
        """
        Opening hours of a venue day, or None when the venue is closed.

        A date listed as closed, a weekday flagged closed and a weekday
        without configured hours all count as closed.
        """
        if day.to_date_string() in set(self._repository.get_closed_dates(court_id)):
            return None

        hours = self._repository.get_opening_hours(court_id).get(weekday_name(day))
        if hours is None or hours.closed:
            return None
        return hours

    def _conflicts_for(self, court_id: str, date_key: str) -> Tuple[List[Interval], List[Interval]]:
        bookings = self._repository.get_bookings(court_id, date_key, self.active_statuses)
        blocked = self._repository.get_blocked_slots(court_id, date_key)
        return bookings, blocked

    def _calculator_for(self, court: Court, day: DateTime) -> PriceBreakdownCalculator:
        return PriceBreakdownCalculator(
            court=court,
            schedules=self._repository.get_price_schedules(court.id),
            weekday=weekday_index(day),
            base_label=self.base_label,
        )

    @staticmethod
    def _exact_price_fn(calculator: PriceBreakdownCalculator):
        """Schedule-based pricer, or None so callers use the quick estimate."""
        if not calculator.has_schedules:
            return None
        return lambda start, end: calculator.calculate(start, end).total_price
