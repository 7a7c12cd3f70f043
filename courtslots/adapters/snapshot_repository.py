"""
Venue snapshot repository backed by a JSON or YAML export.

The surrounding booking system owns the data; this adapter reads an export of
it (camelCase keys, as the CRUD API emits them) and serves the read-only
``VenueRepository`` protocol to the availability service.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from ..domain.exceptions import SnapshotError
from ..domain.models import ALL_DAYS, Court, DayHours, Interval, PriceSchedule

logger = logging.getLogger(__name__)

SAMPLE_SNAPSHOT_PATH = Path(__file__).parent / "sample_venue.json"


class _Record(BaseModel):
    """Base for snapshot records: camelCase aliases, ids coerced to text."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


class DayHoursRecord(_Record):
    open: str = "08:00"
    close: str = "22:00"
    closed: bool = False


class PriceScheduleRecord(_Record):
    id: str
    name: str
    start_time: str
    end_time: str
    price_per_hour: float
    days_of_week: List[int] = Field(default_factory=lambda: list(ALL_DAYS))
    priority: int = 0
    is_active: bool = True

    def to_domain(self) -> PriceSchedule:
        return PriceSchedule(
            id=self.id,
            name=self.name,
            start_time=self.start_time,
            end_time=self.end_time,
            price_per_hour=self.price_per_hour,
            days_of_week=tuple(self.days_of_week),
            priority=self.priority,
            is_active=self.is_active,
        )


class CourtRecord(_Record):
    id: str
    name: str
    price_per_hour: float = 0.0
    price_per_hour90: Optional[float] = None
    price_per_hour120: Optional[float] = None
    is_active: bool = True
    price_schedules: List[PriceScheduleRecord] = Field(default_factory=list)

    def to_domain(self) -> Court:
        return Court(
            id=self.id,
            name=self.name,
            price_per_hour=self.price_per_hour,
            price_per_hour_90=self.price_per_hour90,
            price_per_hour_120=self.price_per_hour120,
            is_active=self.is_active,
        )


class EstablishmentRecord(_Record):
    id: str
    name: str = ""
    opening_hours: Dict[str, DayHoursRecord] = Field(default_factory=dict)
    closed_dates: List[str] = Field(default_factory=list)
    courts: List[CourtRecord] = Field(default_factory=list)


class BookingRecord(_Record):
    court_id: str
    date: str
    start_time: str
    end_time: str
    status: str = "confirmed"


class BlockedSlotRecord(_Record):
    court_id: str
    date: str
    start_time: str
    end_time: str
    is_blocked: bool = True


class VenueSnapshot(_Record):
    """Root of a snapshot file."""
    establishments: List[EstablishmentRecord] = Field(default_factory=list)
    bookings: List[BookingRecord] = Field(default_factory=list)
    blocked_slots: List[BlockedSlotRecord] = Field(default_factory=list)


class JsonSnapshotRepository:
    """
    In-memory repository over a venue snapshot.

    Implements ``VenueRepository``; lookups are plain list scans, which is
    plenty for a single venue's export.
    """

    def __init__(self, snapshot: VenueSnapshot):
        self.snapshot = snapshot
        self._courts: Dict[str, CourtRecord] = {}
        self._establishments: Dict[str, EstablishmentRecord] = {}

        for establishment in snapshot.establishments:
            for court in establishment.courts:
                self._courts[court.id] = court
                self._establishments[court.id] = establishment

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JsonSnapshotRepository":
        try:
            return cls(VenueSnapshot.model_validate(data))
        except PydanticValidationError as exc:
            raise SnapshotError(f"Invalid venue snapshot: {exc}") from exc

    @classmethod
    def load(cls, path: Path) -> "JsonSnapshotRepository":
        """
        Load a snapshot from a ``.json`` or ``.yaml``/``.yml`` file.

        Raises:
            SnapshotError: If the file is missing or cannot be parsed
        """
        if not path.exists():
            raise SnapshotError(f"Snapshot file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                if path.suffix.lower() in (".yaml", ".yml"):
                    data = yaml.safe_load(f) or {}
                else:
                    data = json.load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise SnapshotError(f"Could not parse snapshot {path}: {exc}") from exc

        if not isinstance(data, dict):
            raise SnapshotError("Snapshot file must contain a mapping at the root level.")

        logger.debug("Loaded venue snapshot from %s", path)
        return cls.from_dict(data)

    @classmethod
    def sample(cls) -> "JsonSnapshotRepository":
        """Repository over the bundled sample venue."""
        return cls.load(SAMPLE_SNAPSHOT_PATH)

    def list_courts(self) -> List[Court]:
        return [court.to_domain() for court in self._courts.values()]

    def get_court(self, court_id: str) -> Optional[Court]:
        court = self._courts.get(str(court_id))
        return court.to_domain() if court else None

    def get_opening_hours(self, court_id: str) -> Dict[str, DayHours]:
        establishment = self._establishments.get(str(court_id))
        if establishment is None:
            return {}
        return {
            day.lower(): DayHours(open=hours.open, close=hours.close, closed=hours.closed)
            for day, hours in establishment.opening_hours.items()
        }

    def get_closed_dates(self, court_id: str) -> Sequence[str]:
        establishment = self._establishments.get(str(court_id))
        return list(establishment.closed_dates) if establishment else []

    def get_bookings(
        self, court_id: str, date: str, statuses: Sequence[str]
    ) -> List[Interval]:
        return [
            Interval(start_time=booking.start_time, end_time=booking.end_time)
            for booking in self.snapshot.bookings
            if booking.court_id == str(court_id)
            and booking.date == date
            and booking.status.lower() in statuses
        ]

    def get_blocked_slots(self, court_id: str, date: str) -> List[Interval]:
        return [
            Interval(start_time=slot.start_time, end_time=slot.end_time)
            for slot in self.snapshot.blocked_slots
            if slot.court_id == str(court_id) and slot.date == date and slot.is_blocked
        ]

    def get_price_schedules(self, court_id: str) -> List[PriceSchedule]:
        court = self._courts.get(str(court_id))
        if court is None:
            return []

        inactive = sum(1 for record in court.price_schedules if not record.is_active)
        if inactive:
            logger.debug("Court %s has %d inactive schedule(s)", court_id, inactive)

        # Converted per call so one ambiguous schedule only fails its own court
        return [record.to_domain() for record in court.price_schedules]
