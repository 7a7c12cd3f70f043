"""
Domain-specific exception hierarchy for the court availability engine.
"""


class CourtSlotsError(Exception):
    """Base class for all application-level errors."""


class ValidationError(CourtSlotsError, ValueError):
    """Raised when a date, time or duration input is missing or malformed."""


class AmbiguousScheduleError(ValidationError):
    """Raised for a price schedule whose start is not before its end."""


class NotFoundError(CourtSlotsError):
    """Raised when the requested court does not exist or is inactive."""


class SnapshotError(CourtSlotsError):
    """Raised when venue snapshot data cannot be loaded or parsed."""
