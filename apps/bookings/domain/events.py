"""
Booking Domain Events

Events that represent things that have happened in the booking domain.
These are published after successful transaction commits.
"""

from dataclasses import dataclass

from shared.domain.base import DomainEvent
from shared.domain.value_objects import Money


@dataclass(kw_only=True)
class BookingCreated(DomainEvent):
    """
    Event: A booking was admitted against a package (PENDING/PENDING)

    Participants are committed against the package capacity from here on.
    """
    reference: str
    package_id: int
    user_id: int
    participants: int
    total_price: Money

    def to_dict(self) -> dict:
        return {
            **super().to_dict(),
            'reference': self.reference,
            'package_id': self.package_id,
            'user_id': self.user_id,
            'participants': self.participants,
            'total_price': str(self.total_price.amount),
            'currency': self.total_price.currency,
        }


@dataclass(kw_only=True)
class BookingUpdated(DomainEvent):
    """Event: Participant count changed and the booking was repriced"""
    reference: str
    previous_participants: int
    participants: int
    total_price: Money

    def to_dict(self) -> dict:
        return {
            **super().to_dict(),
            'reference': self.reference,
            'previous_participants': self.previous_participants,
            'participants': self.participants,
            'total_price': str(self.total_price.amount),
            'currency': self.total_price.currency,
        }


@dataclass(kw_only=True)
class BookingStatusChanged(DomainEvent):
    """Event: Booking moved along the status FSM (other than to CANCELLED)"""
    reference: str
    previous_status: str
    status: str

    def to_dict(self) -> dict:
        return {
            **super().to_dict(),
            'reference': self.reference,
            'previous_status': self.previous_status,
            'status': self.status,
        }


@dataclass(kw_only=True)
class PaymentStatusChanged(DomainEvent):
    """
    Event: Payment status moved along the payment FSM

    A PENDING -> PAID move on a PENDING booking is followed by a
    BookingStatusChanged to CONFIRMED.
    """
    reference: str
    previous_status: str
    status: str

    def to_dict(self) -> dict:
        return {
            **super().to_dict(),
            'reference': self.reference,
            'previous_status': self.previous_status,
            'status': self.status,
        }


@dataclass(kw_only=True)
class BookingCancelled(DomainEvent):
    """
    Event: Booking was cancelled

    Its participants were released back to the package.
    """
    reference: str
    package_id: int
    participants: int
    previous_status: str  # Status before cancellation

    def to_dict(self) -> dict:
        return {
            **super().to_dict(),
            'reference': self.reference,
            'package_id': self.package_id,
            'participants': self.participants,
            'previous_status': self.previous_status,
        }


@dataclass(kw_only=True)
class BookingDeleted(DomainEvent):
    """Event: Booking was removed; released_participants is 0 if it held no capacity"""
    reference: str
    package_id: int
    released_participants: int

    def to_dict(self) -> dict:
        return {
            **super().to_dict(),
            'reference': self.reference,
            'package_id': self.package_id,
            'released_participants': self.released_participants,
        }
