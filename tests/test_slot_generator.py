"""
Tests for slot generator.
"""

import pytest

from courtslots.domain.exceptions import ValidationError
from courtslots.domain.models import Court, Interval
from courtslots.domain.slot_generator import (
    CONFLICT,
    OUTSIDE_HOURS,
    SlotGenerator,
    quick_price,
    validate_duration,
)
from courtslots.domain.time_arithmetic import DayWindow


@pytest.fixture
def court():
    return Court(
        id="c1",
        name="Court 1",
        price_per_hour=12.0,
        price_per_hour_90=17.0,
        price_per_hour_120=22.0,
    )


@pytest.fixture
def generator():
    return SlotGenerator()


class TestQuickPrice:
    """Tests for the tiered quick price."""

    @pytest.mark.parametrize("duration, expected", [(60, 12.0), (90, 17.0), (120, 22.0)])
    def test_tier_price_for_standard_durations(self, court, duration, expected):
        assert quick_price(court, duration) == expected

    @pytest.mark.parametrize("duration", [30, 45, 150, 180])
    def test_other_durations_are_prorated(self, court, duration):
        assert quick_price(court, duration) == round(12.0 / 60 * duration, 2)

    def test_missing_tier_falls_back_to_proration(self):
        court = Court(id="c2", name="Court 2", price_per_hour=9.0)

        assert quick_price(court, 90) == 13.5
        assert quick_price(court, 120) == 18.0

    def test_proration_rounds_to_cents(self):
        court = Court(id="c3", name="Court 3", price_per_hour=10.0)

        assert quick_price(court, 50) == 8.33
        assert quick_price(court, 35) == 5.83


class TestValidateDuration:
    """Tests for duration validation."""

    def test_accepts_int_and_numeric_text(self):
        assert validate_duration(90) == 90
        assert validate_duration(" 120 ") == 120

    @pytest.mark.parametrize("value", [0, -30, "-30", "abc", None, 60.5, True])
    def test_rejects_invalid_values(self, value):
        with pytest.raises(ValidationError):
            validate_duration(value)


class TestSlotGenerator:
    """Tests for SlotGenerator."""

    def test_full_day_without_bookings(self, generator, court):
        """08:00-22:00 with no bookings yields 08:00 first and 21:00 last."""
        slots = generator.generate("08:00", "22:00", court, duration=60)

        assert (slots[0].start_time, slots[0].end_time) == ("08:00", "09:00")
        assert (slots[-1].start_time, slots[-1].end_time) == ("21:00", "22:00")
        assert len(slots) == 27
        assert all(slot.available and slot.duration == 60 and slot.price == 12.0 for slot in slots)

    def test_booking_excludes_overlapping_candidates(self, generator, court):
        bookings = [Interval(start_time="10:00", end_time="11:00")]

        starts = [slot.start_time for slot in generator.generate("08:00", "22:00", court, 60, bookings)]

        assert "09:00" in starts
        assert "09:30" not in starts
        assert "10:00" not in starts
        assert "10:30" not in starts
        assert "11:00" in starts

    def test_blocked_intervals_are_conflicts(self, generator, court):
        blocked = [Interval(start_time="12:00", end_time="13:00")]

        starts = [slot.start_time for slot in generator.generate("08:00", "22:00", court, 90, blocked=blocked)]

        assert "10:30" in starts
        assert "11:00" not in starts
        assert "12:30" not in starts
        assert "13:00" in starts

    def test_duration_longer_than_window(self, generator, court):
        assert generator.generate("08:00", "09:30", court, duration=120) == []

    def test_window_crossing_midnight(self, generator, court):
        """20:00-02:00 with a 01:00-01:30 booking after midnight."""
        bookings = [Interval(start_time="01:00", end_time="01:30")]

        slots = generator.generate("20:00", "02:00", court, duration=30, bookings=bookings)
        starts = [slot.start_time for slot in slots]

        assert starts[0] == "20:00"
        assert "00:00" in starts
        assert "00:30" in starts
        assert "01:00" not in starts
        assert starts[-1] == "01:30"
        assert slots[-1].end_time == "02:00"

    def test_booking_spanning_midnight(self, generator, court):
        bookings = [Interval(start_time="23:30", end_time="00:30")]

        starts = [slot.start_time for slot in generator.generate("20:00", "02:00", court, 60, bookings)]

        assert "22:30" in starts
        assert "23:00" not in starts
        assert "00:00" not in starts
        assert "00:30" in starts

    def test_no_slot_overlaps_any_conflict(self, generator, court):
        bookings = [
            Interval(start_time="09:15", end_time="10:45"),
            Interval(start_time="18:00", end_time="19:00"),
            Interval(start_time="00:10", end_time="00:40"),
        ]
        blocked = [Interval(start_time="13:00", end_time="14:30")]
        window = DayWindow.from_clock("08:00", "01:30")

        for duration in (30, 60, 90, 120):
            slots = generator.generate("08:00", "01:30", court, duration, bookings, blocked)
            for slot in slots:
                start, _ = window.normalize_clock(slot.start_time, slot.start_time)
                end = start + slot.duration
                for other in bookings + blocked:
                    other_start, other_end = window.normalize_clock(other.start_time, other.end_time)
                    assert not (start < other_end and end > other_start)

    def test_identical_inputs_give_identical_slots(self, generator, court):
        bookings = [Interval(start_time="10:00", end_time="11:00")]

        first = generator.generate("08:00", "22:00", court, 90, bookings)
        second = generator.generate("08:00", "22:00", court, 90, bookings)

        assert first == second

    def test_price_function_replaces_quick_price(self, generator, court):
        calls = []

        def exact_price(start, end):
            calls.append((start, end))
            return 99.0

        slots = generator.generate("20:00", "22:00", court, 60, price_fn=exact_price)

        assert [slot.price for slot in slots] == [99.0, 99.0, 99.0]
        assert calls == [(1200, 1260), (1230, 1290), (1260, 1320)]

    def test_custom_step(self, court):
        slots = SlotGenerator(step_minutes=60).generate("08:00", "12:00", court, 60)

        assert [slot.start_time for slot in slots] == ["08:00", "09:00", "10:00", "11:00"]

    def test_invalid_duration_raises(self, generator, court):
        with pytest.raises(ValidationError):
            generator.generate("08:00", "22:00", court, duration=0)


class TestCheckStart:
    """Tests for checking one fixed start time."""

    def test_free_start_off_the_grid(self, generator):
        reason, interval = generator.check_start("08:00", "22:00", "10:15", 60)

        assert reason is None
        assert interval == (615, 675)

    def test_conflicting_start(self, generator):
        bookings = [Interval(start_time="10:00", end_time="11:00")]

        reason, _ = generator.check_start("08:00", "22:00", "10:30", 60, bookings)

        assert reason == CONFLICT

    def test_start_outside_hours(self, generator):
        assert generator.check_start("08:00", "22:00", "07:30", 60)[0] == OUTSIDE_HOURS
        assert generator.check_start("08:00", "22:00", "21:30", 60)[0] == OUTSIDE_HOURS

    def test_start_after_midnight(self, generator):
        reason, interval = generator.check_start("20:00", "02:00", "01:00", 60)

        assert reason is None
        assert interval == (1500, 1560)
