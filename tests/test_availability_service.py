"""
Tests for the AvailabilityService orchestration layer.
"""

from typing import Dict, List, Optional, Sequence

import pytest

from courtslots.domain.exceptions import NotFoundError, ValidationError
from courtslots.domain.models import Court, DayHours, Interval, PriceSchedule
from courtslots.domain.slot_generator import CONFLICT, OUTSIDE_HOURS
from courtslots.services.availability import CLOSED, AvailabilityService

WEEK = {
    "monday": DayHours(open="08:00", close="22:00"),
    "tuesday": DayHours(open="08:00", close="22:00"),
    "wednesday": DayHours(open="08:00", close="22:00"),
    "thursday": DayHours(open="08:00", close="22:00"),
    "friday": DayHours(open="20:00", close="02:00"),
    "saturday": DayHours(open="09:00", close="20:00"),
    "sunday": DayHours(closed=True),
}

# 2024-11-25 is a Monday
MONDAY = "2024-11-25"
FRIDAY = "2024-11-29"
SUNDAY = "2024-11-24"


class StubRepository:
    """Minimal stub matching the VenueRepository protocol."""

    def __init__(
        self,
        courts: List[Court],
        opening_hours: Optional[Dict[str, DayHours]] = None,
        bookings: Optional[List[dict]] = None,
        blocked: Optional[List[dict]] = None,
        schedules: Optional[List[PriceSchedule]] = None,
        closed_dates: Sequence[str] = (),
    ):
        self.courts = {court.id: court for court in courts}
        self.opening_hours = WEEK if opening_hours is None else opening_hours
        self.bookings = bookings or []
        self.blocked = blocked or []
        self.schedules = schedules or []
        self.closed_dates = list(closed_dates)
        self.calls: List[tuple] = []

    def get_court(self, court_id):
        return self.courts.get(court_id)

    def get_opening_hours(self, court_id):
        return self.opening_hours

    def get_closed_dates(self, court_id):
        return self.closed_dates

    def get_bookings(self, court_id, date, statuses):
        self.calls.append(("bookings", court_id, date, tuple(statuses)))
        return [
            Interval(start_time=b["start"], end_time=b["end"])
            for b in self.bookings
            if b["date"] == date and b.get("status", "confirmed") in statuses
        ]

    def get_blocked_slots(self, court_id, date):
        self.calls.append(("blocked", court_id, date))
        return [Interval(start_time=b["start"], end_time=b["end"]) for b in self.blocked if b["date"] == date]

    def get_price_schedules(self, court_id):
        return self.schedules


def _court(**overrides) -> Court:
    values = dict(id="c1", name="Court 1", price_per_hour=12.0, price_per_hour_90=17.0, price_per_hour_120=22.0)
    values.update(overrides)
    return Court(**values)


def _build_service(**repository_kwargs) -> AvailabilityService:
    repository_kwargs.setdefault("courts", [_court()])
    return AvailabilityService(StubRepository(**repository_kwargs), timezone="America/Argentina/Buenos_Aires")


class TestGetAvailability:
    """Tests for AvailabilityService.get_availability."""

    def test_open_day_without_bookings(self):
        service = _build_service()

        result = service.get_availability("c1", MONDAY, 60)

        assert result.court.id == "c1"
        assert result.message is None
        assert (result.available_slots[0].start_time, result.available_slots[-1].start_time) == ("08:00", "21:00")
        assert result.available_slots[0].price == 12.0

    def test_only_active_bookings_conflict(self):
        service = _build_service(
            bookings=[
                {"date": MONDAY, "start": "10:00", "end": "11:00", "status": "confirmed"},
                {"date": MONDAY, "start": "14:00", "end": "15:00", "status": "cancelled"},
                {"date": "2024-11-26", "start": "16:00", "end": "17:00", "status": "pending"},
            ]
        )

        starts = [slot.start_time for slot in service.get_availability("c1", MONDAY, 60).available_slots]

        assert "10:00" not in starts
        assert "14:00" in starts
        assert "16:00" in starts

    def test_blocked_slots_conflict(self):
        service = _build_service(blocked=[{"date": MONDAY, "start": "08:00", "end": "12:00"}])

        result = service.get_availability("c1", MONDAY, 60)

        assert result.available_slots[0].start_time == "12:00"

    def test_closed_weekday(self):
        service = _build_service()

        result = service.get_availability("c1", SUNDAY, 60)

        assert result.available_slots == []
        assert result.message == "Court is closed on this day"
        assert result.is_closed

    def test_weekday_without_hours_is_closed(self):
        service = _build_service(opening_hours={"monday": WEEK["monday"]})

        assert service.get_availability("c1", "2024-11-26", 60).is_closed

    def test_closed_date(self):
        service = _build_service(closed_dates=[MONDAY])

        assert service.get_availability("c1", MONDAY, 60).is_closed

    def test_closed_day_loads_no_conflicts(self):
        repository = StubRepository(courts=[_court()])
        service = AvailabilityService(repository)

        service.get_availability("c1", SUNDAY, 60)

        assert repository.calls == []

    def test_window_crossing_midnight(self):
        service = _build_service(bookings=[{"date": FRIDAY, "start": "01:00", "end": "01:30"}])

        starts = [slot.start_time for slot in service.get_availability("c1", FRIDAY, 30).available_slots]

        assert "00:30" in starts
        assert "01:00" not in starts
        assert starts[-1] == "01:30"

    def test_schedules_price_every_slot(self):
        schedules = [
            PriceSchedule(id="day", name="Day", start_time="08:00", end_time="20:00", price_per_hour=10),
            PriceSchedule(id="peak", name="Peak", start_time="18:00", end_time="22:00", price_per_hour=20, priority=5),
        ]
        service = _build_service(schedules=schedules)

        slots = {slot.start_time: slot.price for slot in service.get_availability("c1", MONDAY, 60).available_slots}

        assert slots["08:00"] == 10
        assert slots["17:30"] == 15
        assert slots["21:00"] == 20

    def test_schedule_ending_at_midnight_prices_late_slots(self):
        """Friday 20:00-02:00 with a night rate until 24:00."""
        night = PriceSchedule(id="night", name="Night", start_time="18:00", end_time="24:00", price_per_hour=30)
        service = _build_service(schedules=[night])

        slots = {slot.start_time: slot.price for slot in service.get_availability("c1", FRIDAY, 60).available_slots}

        assert slots["23:00"] == 30
        assert slots["23:30"] == 21
        assert slots["00:00"] == 12

    def test_schedules_for_other_weekdays_keep_tier_price(self):
        weekend = PriceSchedule(
            id="we", name="Weekend", start_time="08:00", end_time="20:00",
            price_per_hour=30, days_of_week=(0, 6),
        )
        service = _build_service(schedules=[weekend])

        slots = service.get_availability("c1", MONDAY, 90).available_slots

        assert {slot.price for slot in slots} == {17.0}

    def test_unknown_court(self):
        service = _build_service()

        with pytest.raises(NotFoundError):
            service.get_availability("missing", MONDAY, 60)

    def test_inactive_court_is_not_found(self):
        service = _build_service(courts=[_court(is_active=False)])

        with pytest.raises(NotFoundError):
            service.get_availability("c1", MONDAY, 60)

    @pytest.mark.parametrize("date, duration", [("", 60), ("25/11/2024", 60), (MONDAY, 0), (MONDAY, -60)])
    def test_invalid_input(self, date, duration):
        service = _build_service()

        with pytest.raises(ValidationError):
            service.get_availability("c1", date, duration)

    def test_configured_statuses_are_passed_to_repository(self):
        repository = StubRepository(courts=[_court()])
        service = AvailabilityService(repository, active_statuses=["confirmed"])

        service.get_availability("c1", MONDAY, 60)

        assert ("bookings", "c1", MONDAY, ("confirmed",)) in repository.calls


class TestCalculatePrice:
    """Tests for AvailabilityService.calculate_price."""

    def test_priority_breakdown(self):
        schedules = [
            PriceSchedule(id="a", name="A", start_time="08:00", end_time="20:00", price_per_hour=10),
            PriceSchedule(id="b", name="B", start_time="18:00", end_time="22:00", price_per_hour=20, priority=5),
        ]
        service = _build_service(schedules=schedules)

        quote = service.calculate_price("c1", MONDAY, "17:00", "19:00")

        assert quote.to_dict() == {
            "totalPrice": 30,
            "breakdown": [
                {
                    "scheduleId": "a", "scheduleName": "A", "startTime": "17:00", "endTime": "18:00",
                    "minutes": 60, "pricePerHour": 10.0, "amount": 10.0,
                },
                {
                    "scheduleId": "b", "scheduleName": "B", "startTime": "18:00", "endTime": "19:00",
                    "minutes": 60, "pricePerHour": 20.0, "amount": 20.0,
                },
            ],
        }

    def test_base_price_label_is_configurable(self):
        service = AvailabilityService(StubRepository(courts=[_court()]), base_label="Base rate")

        quote = service.calculate_price("c1", MONDAY, "10:00", "11:00")

        assert quote.breakdown[0].schedule_name == "Base rate"
        assert quote.total_price == 12

    def test_unknown_court(self):
        with pytest.raises(NotFoundError):
            _build_service().calculate_price("missing", MONDAY, "10:00", "11:00")


class TestCheckDates:
    """Tests for AvailabilityService.check_dates."""

    def test_mixed_results(self):
        service = _build_service(
            bookings=[{"date": "2024-11-26", "start": "18:00", "end": "19:00"}],
        )

        checks = service.check_dates("c1", [MONDAY, "2024-11-26", SUNDAY, "2024-11-30"], "18:30", 60)

        assert [(c.date, c.available, c.reason) for c in checks] == [
            (MONDAY, True, None),
            ("2024-11-26", False, CONFLICT),
            (SUNDAY, False, CLOSED),
            ("2024-11-30", True, None),
        ]
        assert checks[0].price == 12.0

    def test_start_outside_hours(self):
        checks = _build_service().check_dates("c1", ["2024-11-30"], "19:30", 60)

        assert checks[0].reason == OUTSIDE_HOURS

    def test_schedule_price(self):
        schedules = [PriceSchedule(id="p", name="Peak", start_time="18:00", end_time="22:00", price_per_hour=20)]
        service = _build_service(schedules=schedules)

        checks = service.check_dates("c1", [MONDAY], "18:30", 90)

        assert checks[0].price == 30

    def test_invalid_date_fails_before_any_lookup(self):
        repository = StubRepository(courts=[_court()])
        service = AvailabilityService(repository)

        with pytest.raises(ValidationError):
            service.check_dates("c1", [MONDAY, "not-a-date"], "10:00", 60)

        assert repository.calls == []
