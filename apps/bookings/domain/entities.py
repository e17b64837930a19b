"""
Booking Domain Entities

Core business entities for the booking domain:
- BookingStatus: FSM states for the booking lifecycle
- PaymentStatus: FSM states for payment tracking
- Booking: aggregate root enforcing both state machines and their cross-effect
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import FrozenSet, Mapping

from shared.domain.base import Aggregate, utcnow
from shared.domain.value_objects import Money

from apps.bookings.domain.exceptions import AlreadyCancelled, InvalidTransition


class BookingStatus(str, Enum):
    """
    Booking Status Finite State Machine

    State transitions:
    - PENDING -> CONFIRMED (confirmed directly, or payment succeeded)
    - PENDING -> CANCELLED
    - CONFIRMED -> CANCELLED
    - CONFIRMED -> COMPLETED (trip finished)
    CANCELLED and COMPLETED are terminal.
    """
    PENDING = 'PENDING'
    CONFIRMED = 'CONFIRMED'
    CANCELLED = 'CANCELLED'
    COMPLETED = 'COMPLETED'

    @classmethod
    def choices(cls):
        return [(member.value, member.value.title()) for member in cls]

    @property
    def is_terminal(self) -> bool:
        return not BOOKING_TRANSITIONS[self]

    @property
    def holds_capacity(self) -> bool:
        return self in CAPACITY_HOLDING_STATUSES


class PaymentStatus(str, Enum):
    """
    Payment Status Finite State Machine

    State transitions:
    - PENDING -> PAID
    - PENDING -> FAILED
    - PAID -> REFUNDED
    - FAILED -> PENDING (retry)
    REFUNDED is terminal.
    """
    PENDING = 'PENDING'
    PAID = 'PAID'
    REFUNDED = 'REFUNDED'
    FAILED = 'FAILED'

    @classmethod
    def choices(cls):
        return [(member.value, member.value.title()) for member in cls]

    @property
    def is_terminal(self) -> bool:
        return not PAYMENT_TRANSITIONS[self]


BOOKING_TRANSITIONS: Mapping[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.CANCELLED, BookingStatus.COMPLETED}),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.COMPLETED: frozenset(),
}

PAYMENT_TRANSITIONS: Mapping[PaymentStatus, FrozenSet[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.PAID, PaymentStatus.FAILED}),
    PaymentStatus.PAID: frozenset({PaymentStatus.REFUNDED}),
    PaymentStatus.FAILED: frozenset({PaymentStatus.PENDING}),
    PaymentStatus.REFUNDED: frozenset(),
}

# A booking occupies its seats from admission until it is cancelled or deleted.
CAPACITY_HOLDING_STATUSES: FrozenSet[BookingStatus] = frozenset({
    BookingStatus.PENDING,
    BookingStatus.CONFIRMED,
    BookingStatus.COMPLETED,
})


def can_transition(current: BookingStatus, target: BookingStatus) -> bool:
    return BookingStatus(target) in BOOKING_TRANSITIONS[BookingStatus(current)]


def can_transition_payment(current: PaymentStatus, target: PaymentStatus) -> bool:
    return PaymentStatus(target) in PAYMENT_TRANSITIONS[PaymentStatus(current)]


@dataclass(eq=False)
class Booking(Aggregate):
    """
    Booking Aggregate Root

    A user's reservation of a number of participant slots on a travel package.

    Key invariants:
    - participants is a positive integer
    - total_price = package unit price x participants, fixed when the
      participant count is set
    - reference is assigned once and never changes
    - status and payment_status only move along their transition tables
    """

    reference: str
    user_id: int
    package_id: int
    participants: int
    total_price: Money
    special_requests: str = ''
    status: BookingStatus = BookingStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    booking_date: datetime = field(default_factory=utcnow)

    def __post_init__(self):
        self.status = BookingStatus(self.status)
        self.payment_status = PaymentStatus(self.payment_status)
        if isinstance(self.participants, bool) or not isinstance(self.participants, int):
            raise ValueError("Participants must be an integer")
        if self.participants < 1:
            raise ValueError("Participants must be at least 1")
        if not self.reference:
            raise ValueError("Booking reference is required")
        if not self.total_price.is_positive:
            raise ValueError("Total price must be positive")

    @classmethod
    def admit(
        cls,
        *,
        reference: str,
        user_id: int,
        package_id: int,
        participants: int,
        unit_price: Money,
        special_requests: str = '',
        booking_date: datetime | None = None,
    ) -> 'Booking':
        """Create a new PENDING/PENDING booking priced from the package unit price"""
        from apps.bookings.domain.events import BookingCreated

        booking = cls(
            reference=reference,
            user_id=user_id,
            package_id=package_id,
            participants=participants,
            total_price=price_for(unit_price, participants),
            special_requests=special_requests or '',
            booking_date=booking_date or utcnow(),
        )
        booking.add_event(BookingCreated(
            reference=reference,
            package_id=package_id,
            user_id=user_id,
            participants=participants,
            total_price=booking.total_price,
        ))
        return booking

    @property
    def currency(self) -> str:
        return self.total_price.currency

    @property
    def holds_capacity(self) -> bool:
        return self.status.holds_capacity

    @property
    def is_modifiable(self) -> bool:
        return not self.status.is_terminal

    def change_status(self, target: BookingStatus) -> BookingStatus:
        """
        Move the booking status along the FSM

        Returns the previous status.
        Raises InvalidTransition for moves outside the transition table.
        """
        target = BookingStatus(target)
        previous = self.status
        if not can_transition(previous, target):
            raise InvalidTransition(
                f"Cannot change booking {self.reference} from {previous.value} to {target.value}",
                booking_id=self.id,
                current=previous.value,
                target=target.value,
            )

        from apps.bookings.domain.events import BookingCancelled, BookingStatusChanged

        self.status = target
        self.touch()
        if target is BookingStatus.CANCELLED:
            self.add_event(BookingCancelled(
                aggregate_id=self.id,
                reference=self.reference,
                package_id=self.package_id,
                participants=self.participants,
                previous_status=previous.value,
            ))
        else:
            self.add_event(BookingStatusChanged(
                aggregate_id=self.id,
                reference=self.reference,
                previous_status=previous.value,
                status=target.value,
            ))
        return previous

    def cancel(self) -> BookingStatus:
        """Cancel the booking (PENDING/CONFIRMED -> CANCELLED)"""
        if self.status is BookingStatus.CANCELLED:
            raise AlreadyCancelled(
                f"Booking {self.reference} is already cancelled",
                booking_id=self.id,
            )
        return self.change_status(BookingStatus.CANCELLED)

    def change_payment_status(self, target: PaymentStatus) -> PaymentStatus:
        """
        Move the payment status along the FSM

        Marking a PENDING booking as PAID also confirms it; no other
        transition has side effects on the booking status.
        Returns the previous payment status.
        """
        target = PaymentStatus(target)
        previous = self.payment_status
        if not can_transition_payment(previous, target):
            raise InvalidTransition(
                f"Cannot change payment of booking {self.reference} "
                f"from {previous.value} to {target.value}",
                booking_id=self.id,
                current=previous.value,
                target=target.value,
            )

        from apps.bookings.domain.events import PaymentStatusChanged

        self.payment_status = target
        self.touch()
        self.add_event(PaymentStatusChanged(
            aggregate_id=self.id,
            reference=self.reference,
            previous_status=previous.value,
            status=target.value,
        ))

        if target is PaymentStatus.PAID and self.status is BookingStatus.PENDING:
            self.change_status(BookingStatus.CONFIRMED)
        return previous

    def resize(self, participants: int, unit_price: Money) -> int:
        """
        Change the participant count and reprice from the current unit price

        Capacity for an increase must already have been reserved by the caller.
        Returns the participant delta.
        """
        if not self.is_modifiable:
            raise InvalidTransition(
                f"Booking {self.reference} is {self.status.value} and can no longer be modified",
                booking_id=self.id,
                current=self.status.value,
            )
        if isinstance(participants, bool) or not isinstance(participants, int) or participants < 1:
            raise ValueError("Participants must be a positive integer")

        delta = participants - self.participants
        if delta == 0:
            return 0

        from apps.bookings.domain.events import BookingUpdated

        previous = self.participants
        self.participants = participants
        self.total_price = price_for(unit_price, participants)
        self.touch()
        self.add_event(BookingUpdated(
            aggregate_id=self.id,
            reference=self.reference,
            previous_participants=previous,
            participants=participants,
            total_price=self.total_price,
        ))
        return delta

    def update_special_requests(self, special_requests: str | None):
        if not self.is_modifiable:
            raise InvalidTransition(
                f"Booking {self.reference} is {self.status.value} and can no longer be modified",
                booking_id=self.id,
                current=self.status.value,
            )
        self.special_requests = special_requests or ''
        self.touch()

    def __str__(self):
        return f"Booking {self.reference} ({self.status.value}/{self.payment_status.value})"

    def __repr__(self):
        return (
            f"Booking(id={self.id}, reference={self.reference}, "
            f"status={self.status.value}, payment_status={self.payment_status.value}, "
            f"participants={self.participants})"
        )


def price_for(unit_price: Money, participants: int) -> Money:
    """Total price = unit price x participants, in the unit price currency"""
    return (unit_price * participants).quantized()
