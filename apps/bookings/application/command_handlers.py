"""
Booking Command Handlers

These are the use cases for the booking domain.
They orchestrate domain operations within transactions.

Commands:
- CreateBookingCommand: Admit a new booking against a package
- UpdateBookingCommand: Change participants and/or special requests
- ChangeBookingStatusCommand: Move a booking along the status FSM
- ChangePaymentStatusCommand: Move a booking along the payment FSM
- CancelBookingCommand: Cancel a booking and release its capacity
- DeleteBookingCommand: Remove a booking, releasing capacity if it held any

Every handler that touches capacity follows the same shape:
1. Enter the ledger guard for the package (in-process lock without row locks)
2. Start the unit of work (transaction.atomic)
3. Load the booking/package with SELECT FOR UPDATE where supported
4. Check capacity in the ledger, apply the change to the aggregate
5. Save, collect events, commit; events are published after commit
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import structlog
from django.conf import settings
from django.contrib.auth import get_user_model

from shared.application.uow import DjangoUnitOfWork
from shared.domain.value_objects import Money
from apps.bookings.domain.entities import Booking, BookingStatus, PaymentStatus
from apps.bookings.domain.events import BookingDeleted
from apps.bookings.domain.exceptions import (
    InvalidBookingRequest,
    InvalidTransition,
    PackageUnavailable,
    UserNotFound,
)
from apps.bookings.domain.references import ReferenceGenerator
from apps.bookings.repositories import DjangoBookingRepository
from apps.bookings.services import CapacityLedger, run_with_retry

logger = structlog.get_logger(__name__)


# ===== Commands =====

@dataclass
class CreateBookingCommand:
    """
    Command to create a new booking

    This is the only way a booking comes into existence.
    """
    user_id: int
    package_id: int
    participants: int
    special_requests: str = ''
    booking_date: Optional[datetime] = None


@dataclass
class UpdateBookingCommand:
    """Command to resize a booking or change its special requests"""
    booking_id: int
    participants: Optional[int] = None
    special_requests: Optional[str] = None


@dataclass
class ChangeBookingStatusCommand:
    booking_id: int
    status: str


@dataclass
class ChangePaymentStatusCommand:
    booking_id: int
    payment_status: str


@dataclass
class CancelBookingCommand:
    booking_id: int


@dataclass
class DeleteBookingCommand:
    booking_id: int


def _positive_participants(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidBookingRequest(
            "Participants must be a positive integer",
            participants=value,
        )
    return value


def _parse_status(enum_cls, value):
    try:
        return enum_cls(value.upper() if isinstance(value, str) else value)
    except ValueError:
        raise InvalidBookingRequest(
            f"Unknown {enum_cls.__name__} value: {value}",
            value=value,
        )


def _unit_price(package) -> Money:
    try:
        return Money(package.price, package.currency)
    except ValueError:
        raise PackageUnavailable(
            f"Travel package {package.pk} has no valid price",
            package_id=package.pk,
            currency=package.currency,
        )


# ===== Command Handlers =====

class _BookingHandler:
    def __init__(self, booking_repo=None, ledger=None):
        self.booking_repo = booking_repo or DjangoBookingRepository()
        self.ledger = ledger or CapacityLedger()

    def _release_if_held(self, booking: Booking, was_holding: bool):
        if was_holding and not booking.holds_capacity:
            self.ledger.release(booking.package_id, booking.participants)


class CreateBookingHandler(_BookingHandler):
    """
    Handler for CreateBooking command

    Admission is check-and-commit: the capacity check and the booking insert
    share one transaction, and the package stays locked until it commits, so
    two concurrent requests can never both see the same free seats.
    """

    def __init__(self, booking_repo=None, ledger=None, reference_generator=None):
        super().__init__(booking_repo, ledger)
        self.reference_generator = reference_generator or ReferenceGenerator(
            prefix=getattr(settings, "BOOKING_REFERENCE_PREFIX", "BK"),
        )

    def handle(self, command: CreateBookingCommand) -> Booking:
        """
        Handle booking creation

        Returns: Created Booking aggregate (PENDING/PENDING)

        Raises:
            PackageNotFound, PackageUnavailable, CapacityExceeded, UserNotFound
        """
        participants = _positive_participants(command.participants)
        logger.info(
            "booking_create_requested",
            package_id=command.package_id,
            user_id=command.user_id,
            participants=participants,
        )

        booking = run_with_retry(lambda: self._admit(command, participants))

        logger.info(
            "booking_created",
            booking_id=booking.id,
            reference=booking.reference,
            package_id=booking.package_id,
            participants=booking.participants,
            total_price=str(booking.total_price.amount),
            currency=booking.currency,
        )
        return booking

    def _admit(self, command: CreateBookingCommand, participants: int) -> Booking:
        with self.ledger.guard(command.package_id):
            with DjangoUnitOfWork() as uow:
                package = self.ledger.get_package(command.package_id)
                if not package.is_active:
                    raise PackageUnavailable(
                        f"Travel package {package.pk} is not available for booking",
                        package_id=package.pk,
                    )
                unit_price = _unit_price(package)

                self.ledger.try_reserve(package.pk, participants)

                user_model = get_user_model()
                if not user_model.objects.filter(pk=command.user_id).exists():
                    raise UserNotFound(f"User {command.user_id} not found", user_id=command.user_id)

                reference = self.reference_generator.generate(self.booking_repo.reference_exists)
                booking = Booking.admit(
                    reference=reference,
                    user_id=command.user_id,
                    package_id=package.pk,
                    participants=participants,
                    unit_price=unit_price,
                    special_requests=command.special_requests,
                    booking_date=command.booking_date,
                )

                self.booking_repo.save(booking)
                uow.collect_events(booking)
        return booking


class UpdateBookingHandler(_BookingHandler):
    """
    Handler for UpdateBooking command

    A larger participant count is admitted again with the booking's own seats
    left out of the committed sum. Any participant change reprices the booking
    from the package's current unit price.
    """

    def handle(self, command: UpdateBookingCommand) -> Booking:
        if command.participants is not None:
            _positive_participants(command.participants)
        package_id = self.booking_repo.get(command.booking_id).package_id

        def _update():
            with self.ledger.guard(package_id):
                with DjangoUnitOfWork() as uow:
                    booking = self.booking_repo.get(command.booking_id, lock=True)
                    if not booking.is_modifiable:
                        raise InvalidTransition(
                            f"Booking {booking.reference} is {booking.status.value} and can no longer be modified",
                            booking_id=booking.id,
                            current=booking.status.value,
                        )

                    if command.participants is not None and command.participants != booking.participants:
                        package = self.ledger.get_package(booking.package_id)
                        if command.participants > booking.participants:
                            self.ledger.try_reserve(
                                booking.package_id,
                                command.participants,
                                exclude_booking_id=booking.id,
                            )
                        booking.resize(command.participants, _unit_price(package))

                    if command.special_requests is not None:
                        booking.update_special_requests(command.special_requests)

                    self.booking_repo.save(booking)
                    uow.collect_events(booking)
            return booking

        booking = run_with_retry(_update)
        logger.info(
            "booking_updated",
            booking_id=booking.id,
            participants=booking.participants,
            total_price=str(booking.total_price.amount),
        )
        return booking


class ChangeBookingStatusHandler(_BookingHandler):
    """
    Handler for ChangeBookingStatus command

    Moving to CANCELLED releases the booking's seats before the new status
    is written.
    """

    def handle(self, command: ChangeBookingStatusCommand) -> Booking:
        target = _parse_status(BookingStatus, command.status)
        package_id = self.booking_repo.get(command.booking_id).package_id

        with self.ledger.guard(package_id):
            with DjangoUnitOfWork() as uow:
                booking = self.booking_repo.get(command.booking_id, lock=True)
                was_holding = booking.holds_capacity
                previous = booking.change_status(target)
                self._release_if_held(booking, was_holding)
                self.booking_repo.save(booking)
                uow.collect_events(booking)

        logger.info(
            "booking_status_changed",
            booking_id=booking.id,
            previous_status=previous.value,
            status=booking.status.value,
        )
        return booking


class ChangePaymentStatusHandler(_BookingHandler):
    """
    Handler for ChangePaymentStatus command

    PENDING -> PAID on a PENDING booking also confirms it. Both statuses
    hold capacity, so no ledger work is needed.
    """

    def handle(self, command: ChangePaymentStatusCommand) -> Booking:
        target = _parse_status(PaymentStatus, command.payment_status)

        with DjangoUnitOfWork() as uow:
            booking = self.booking_repo.get(command.booking_id, lock=True)
            previous = booking.change_payment_status(target)
            self.booking_repo.save(booking)
            uow.collect_events(booking)

        logger.info(
            "booking_payment_status_changed",
            booking_id=booking.id,
            previous_payment_status=previous.value,
            payment_status=booking.payment_status.value,
            status=booking.status.value,
        )
        return booking


class CancelBookingHandler(_BookingHandler):
    """Handler for cancelling a booking and releasing its seats"""

    def handle(self, command: CancelBookingCommand) -> Booking:
        package_id = self.booking_repo.get(command.booking_id).package_id

        with self.ledger.guard(package_id):
            with DjangoUnitOfWork() as uow:
                booking = self.booking_repo.get(command.booking_id, lock=True)
                was_holding = booking.holds_capacity
                booking.cancel()
                self._release_if_held(booking, was_holding)
                self.booking_repo.save(booking)
                uow.collect_events(booking)

        logger.info(
            "booking_cancelled",
            booking_id=booking.id,
            reference=booking.reference,
            released_participants=booking.participants if was_holding else 0,
        )
        return booking


class DeleteBookingHandler(_BookingHandler):
    """Handler for hard-deleting a booking in any state"""

    def handle(self, command: DeleteBookingCommand) -> Booking:
        package_id = self.booking_repo.get(command.booking_id).package_id

        with self.ledger.guard(package_id):
            with DjangoUnitOfWork() as uow:
                booking = self.booking_repo.get(command.booking_id, lock=True)
                released = 0
                if booking.holds_capacity:
                    self.ledger.release(booking.package_id, booking.participants)
                    released = booking.participants
                self.booking_repo.delete(booking)
                booking.add_event(BookingDeleted(
                    aggregate_id=booking.id,
                    reference=booking.reference,
                    package_id=booking.package_id,
                    released_participants=released,
                ))
                uow.collect_events(booking)

        logger.info(
            "booking_deleted",
            booking_id=booking.id,
            reference=booking.reference,
            released_participants=released,
        )
        return booking


# ===== Entry points =====

def create_booking(user_id, package_id, participants, special_requests='', booking_date=None) -> Booking:
    return CreateBookingHandler().handle(CreateBookingCommand(
        user_id=user_id,
        package_id=package_id,
        participants=participants,
        special_requests=special_requests or '',
        booking_date=booking_date,
    ))


def update_booking(booking_id, participants=None, special_requests=None) -> Booking:
    return UpdateBookingHandler().handle(UpdateBookingCommand(
        booking_id=booking_id,
        participants=participants,
        special_requests=special_requests,
    ))


def update_booking_status(booking_id, status) -> Booking:
    return ChangeBookingStatusHandler().handle(ChangeBookingStatusCommand(booking_id, status))


def update_payment_status(booking_id, payment_status) -> Booking:
    return ChangePaymentStatusHandler().handle(ChangePaymentStatusCommand(booking_id, payment_status))


def cancel_booking(booking_id) -> Booking:
    return CancelBookingHandler().handle(CancelBookingCommand(booking_id))


def delete_booking(booking_id) -> Booking:
    return DeleteBookingHandler().handle(DeleteBookingCommand(booking_id))
