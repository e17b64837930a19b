"""Catalog write operations that reach across into bookings.

Foreign keys from packages to destinations and from bookings to packages are
PROTECT, so removing catalog entries always goes through these functions:
bookings are deleted one by one through the booking lifecycle handlers
(releasing their capacity and emitting BookingDeleted) before the package row
itself is removed. The package row is locked (or its capacity guard held)
while its bookings are enumerated, so no admission can slip in between.
"""

from __future__ import annotations

import structlog
from django.db import transaction  # type: ignore
from django.db.models import ProtectedError  # type: ignore

from apps.bookings.application.command_handlers import delete_booking
from apps.bookings.domain.exceptions import PackageNotFound
from apps.bookings.services import CapacityLedger

from .exceptions import DestinationInUse, DestinationNotFound, PackageInUse
from .models import Destination, TravelPackage

logger = structlog.get_logger(__name__)


def get_destination(destination_id) -> Destination:
    try:
        return Destination.objects.get(pk=destination_id)
    except (Destination.DoesNotExist, ValueError, TypeError):
        raise DestinationNotFound(f"Destination {destination_id} not found", destination_id=destination_id)


def get_package(package_id) -> TravelPackage:
    try:
        return TravelPackage.objects.select_related("destination").get(pk=package_id)
    except (TravelPackage.DoesNotExist, ValueError, TypeError):
        raise PackageNotFound(f"Travel package {package_id} not found", package_id=package_id)


def package_availability(package_id) -> int:
    """Free seats on the package, as the capacity ledger sees them."""
    return CapacityLedger().available_space(get_package(package_id).pk)


def delete_package(package_id) -> int:
    """
    Delete a package and all of its bookings.

    Returns the number of bookings deleted.
    """
    package = get_package(package_id)
    ledger = CapacityLedger()
    with ledger.guard(package.pk):
        with transaction.atomic():
            ledger.get_package(package.pk, lock=True)
            booking_ids = list(package.bookings.values_list("id", flat=True))
            for booking_id in booking_ids:
                delete_booking(booking_id)
            try:
                package.delete()
            except ProtectedError:
                raise PackageInUse(
                    f"Travel package {package.pk} received new bookings while being deleted",
                    package_id=package.pk,
                )
    logger.info("package_deleted", package_id=package_id, bookings_deleted=len(booking_ids))
    return len(booking_ids)


@transaction.atomic
def delete_destination(destination_id) -> int:
    """
    Delete a destination, its packages and their bookings.

    Returns the number of packages deleted.
    """
    destination = get_destination(destination_id)
    package_ids = list(destination.packages.values_list("id", flat=True))
    for package_id in package_ids:
        delete_package(package_id)
    try:
        destination.delete()
    except ProtectedError:
        raise DestinationInUse(
            f"Destination {destination.pk} received new packages while being deleted",
            destination_id=destination.pk,
        )
    logger.info("destination_deleted", destination_id=destination_id, packages_deleted=len(package_ids))
    return len(package_ids)


def toggle_package_status(package_id) -> TravelPackage:
    package = get_package(package_id)
    package.is_active = not package.is_active
    package.save(update_fields=["is_active", "updated_at"])
    logger.info("package_status_toggled", package_id=package.pk, is_active=package.is_active)
    return package


def toggle_destination_status(destination_id) -> Destination:
    destination = get_destination(destination_id)
    destination.is_active = not destination.is_active
    destination.save(update_fields=["is_active", "updated_at"])
    logger.info("destination_status_toggled", destination_id=destination.pk, is_active=destination.is_active)
    return destination
