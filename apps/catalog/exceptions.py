"""Errors raised by catalog operations."""

from shared.domain.exceptions import ConflictError, NotFoundError


class DestinationNotFound(NotFoundError):
    """Destination not found."""

    code = "destination_not_found"


class PackageInUse(ConflictError):
    """Package still has bookings and cannot be removed."""

    code = "package_in_use"


class DestinationInUse(ConflictError):
    """Destination still has packages and cannot be removed."""

    code = "destination_in_use"
