"""
Domain-specific exception hierarchy for the booking application.
"""


class EoliaError(Exception):
    """Base class for all application-level errors."""


class InvalidDurationError(EoliaError, ValueError):
    """Raised when an appointment duration is not a positive number of minutes."""


class UnknownMotifError(EoliaError, ValueError):
    """Raised when a booking references a motif that is not configured."""


class RepositoryError(EoliaError):
    """Raised when practitioner or appointment data cannot be fetched or stored."""


class PractitionerNotFoundError(RepositoryError):
    """Raised when no practitioner matches the requested username."""


class SlotUnavailableError(EoliaError):
    """Raised when the chosen slot is no longer offered at booking time."""
