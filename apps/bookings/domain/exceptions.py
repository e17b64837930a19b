"""Errors raised by the booking admission and lifecycle engine."""

from shared.domain.exceptions import BusinessRuleViolation, ConflictError, NotFoundError


class BookingNotFound(NotFoundError):
    """Booking not found."""

    code = "booking_not_found"


class PackageNotFound(NotFoundError):
    """Travel package not found."""

    code = "package_not_found"


class UserNotFound(NotFoundError):
    """User not found."""

    code = "user_not_found"


class PackageUnavailable(BusinessRuleViolation):
    """Travel package is not available for booking."""

    code = "package_unavailable"


class CapacityExceeded(BusinessRuleViolation):
    """Not enough space available for this package."""

    code = "capacity_exceeded"


class InvalidTransition(ConflictError):
    """Status change is not allowed from the current state."""

    code = "invalid_transition"


class AlreadyCancelled(ConflictError):
    """Booking is already cancelled."""

    code = "already_cancelled"


class CapacityReleaseError(ConflictError):
    """Release would drive committed capacity below zero."""

    code = "capacity_release_error"


class InvalidBookingRequest(BusinessRuleViolation):
    """Booking request carries invalid values."""

    code = "invalid_request"
