"""
Booking error taxonomy.

Every error carries a human-readable message that is returned verbatim to the
caller. The HTTP status used by the API layer is attached as ``status_code``.
"""


class BookingError(Exception):
    """Base class for booking lifecycle errors."""

    status_code = 400

    def __init__(self, message: str, **details):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(BookingError):
    """Client-fixable problem with a draft or a resource definition."""

    status_code = 400


class ConflictError(BookingError):
    """Selected resource is no longer free for the requested interval."""

    status_code = 409


class TransitionError(BookingError):
    """Status or payment change that is not legal from the current state."""

    status_code = 409


class NotFoundError(BookingError):
    """Referenced booking or resource does not exist."""

    status_code = 404
