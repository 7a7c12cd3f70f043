"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability import AvailabilityService, VenueRepository

__all__ = ["AvailabilityService", "VenueRepository"]
