"""
Adapters layer - Venue snapshot access.
"""

from .snapshot_repository import JsonSnapshotRepository, VenueSnapshot

__all__ = ["JsonSnapshotRepository", "VenueSnapshot"]
