"""Package capacity ledger.

The ledger is the only place that decides whether participants may be
committed against a travel package. Committed capacity is always derived from
the package's capacity-holding bookings, so the ledger never writes; it
checks under the package lock and the caller writes the booking row in the
same transaction.

Locking: the package row is locked with ``SELECT ... FOR UPDATE`` when the
backend supports row locks. SQLite does not, so admissions to one package are
serialized by an in-process lock instead (see ``CapacityLedger.guard``).
"""

from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from typing import Callable, Optional, TypeVar

import structlog
from django.conf import settings  # type: ignore
from django.db import OperationalError, connections, transaction  # type: ignore
from django.db.models import Sum  # type: ignore

from apps.bookings.domain.capacity import PackageCapacity, Reservation
from apps.bookings.domain.exceptions import CapacityReleaseError, PackageNotFound

logger = structlog.get_logger(__name__)

T = TypeVar("T")

_package_locks: dict[int, threading.RLock] = {}
_registry_lock = threading.Lock()


def package_lock(package_id: int) -> threading.RLock:
    """Return the process-wide (re-entrant) lock for one package."""
    with _registry_lock:
        lock = _package_locks.get(package_id)
        if lock is None:
            lock = _package_locks[package_id] = threading.RLock()
        return lock


class CapacityLedger:
    """Capacity check-and-commit for travel packages."""

    def __init__(self, using: Optional[str] = None):
        self.using = using or "default"

    @property
    def supports_row_locks(self) -> bool:
        return connections[self.using].features.has_select_for_update

    @contextmanager
    def guard(self, package_id: int):
        """
        Serialize capacity work on one package for the enclosed block

        Enter it before the transaction that writes the booking and leave it
        after the commit. With row locks available this is a no-op and the
        ``select_for_update`` in ``try_reserve``/``release`` does the work.
        """
        if self.supports_row_locks:
            yield
            return
        with package_lock(package_id):
            yield

    def get_package(self, package_id: int, lock: bool = False):
        from apps.catalog.models import TravelPackage

        queryset = TravelPackage.objects.using(self.using)
        if lock and self.supports_row_locks and connections[self.using].in_atomic_block:
            queryset = queryset.select_for_update()
        try:
            return queryset.get(pk=package_id)
        except TravelPackage.DoesNotExist:
            raise PackageNotFound(f"Travel package {package_id} not found", package_id=package_id)

    def committed(self, package_id: int, exclude_booking_id: Optional[int] = None) -> int:
        from apps.bookings.models import Booking

        queryset = Booking.objects.using(self.using).for_package(package_id).holding_capacity()
        if exclude_booking_id is not None:
            queryset = queryset.exclude(pk=exclude_booking_id)
        return queryset.aggregate(total=Sum("participants"))["total"] or 0

    def snapshot(self, package_id: int, *, lock: bool = False,
                 exclude_booking_id: Optional[int] = None) -> PackageCapacity:
        package = self.get_package(package_id, lock=lock)
        return PackageCapacity(
            package_id=package.pk,
            max_participants=package.max_participants,
            committed=self.committed(package.pk, exclude_booking_id),
        )

    def available_space(self, package_id: int) -> int:
        """Free seats on the package (clamped at zero)."""
        return self.snapshot(package_id).available

    def try_reserve(self, package_id: int, participants: int,
                    exclude_booking_id: Optional[int] = None) -> Reservation:
        """
        Check that participants fit the package and return a Reservation

        Must run inside the transaction that writes the booking row, within
        ``guard(package_id)``. ``exclude_booking_id`` leaves one booking out of
        the committed sum, so resizing a booking only has to fit its new size.
        Raises CapacityExceeded without side effects when it does not fit.
        """
        if not connections[self.using].in_atomic_block:
            raise RuntimeError("try_reserve must be called inside a transaction")
        capacity = self.snapshot(package_id, lock=True, exclude_booking_id=exclude_booking_id)
        reservation = capacity.admit(participants)
        logger.info(
            "capacity_reserved",
            package_id=package_id,
            participants=participants,
            available_before=reservation.available_before,
            available_after=reservation.available_after,
            excluded_booking_id=exclude_booking_id,
        )
        return reservation

    def release(self, package_id: int, participants: int) -> int:
        """
        Check that participants are committed on the package

        Called before the booking stops holding capacity, so its own seats
        are still in the committed sum. Returns the free seats once the
        caller's change is applied.
        """
        capacity = self.snapshot(package_id, lock=True)
        try:
            available = capacity.release(participants)
        except CapacityReleaseError:
            logger.error(
                "capacity_release_failed",
                package_id=package_id,
                participants=participants,
                committed=capacity.committed,
            )
            raise
        logger.info(
            "capacity_released",
            package_id=package_id,
            participants=participants,
            available_after=available,
        )
        return available


def run_with_retry(operation: Callable[[], T], *, using: Optional[str] = None,
                   max_attempts: Optional[int] = None, delay: Optional[float] = None) -> T:
    """
    Run a self-contained transactional operation, retrying on OperationalError

    Lock timeouts and "database is locked" errors abort the whole transaction,
    so a retry is only safe when ``operation`` owns it. Inside an outer
    atomic block the operation runs once and errors propagate.
    """
    if transaction.get_connection(using or "default").in_atomic_block:
        return operation()

    if max_attempts is None:
        max_attempts = getattr(settings, "BOOKING_ADMISSION_MAX_ATTEMPTS", 3)
    if delay is None:
        delay = getattr(settings, "BOOKING_ADMISSION_RETRY_DELAY", 0.05)

    max_attempts = max(int(max_attempts), 1)
    for attempt in range(1, max_attempts + 1):
        try:
            return operation()
        except OperationalError as exc:
            if attempt >= max_attempts:
                logger.error("admission_retries_exhausted", attempts=attempt, error=str(exc))
                raise
            logger.warning("admission_retry", attempt=attempt, error=str(exc))
            time.sleep(delay * attempt)
    raise AssertionError("unreachable")
