"""Domain event handlers for bookings.

Every booking event published after commit is written to the
``apps.bookings.audit`` logger, one structured line per event.
"""

from __future__ import annotations

import structlog

from shared.application.message_bus import message_bus
from shared.domain.base import DomainEvent

from .domain.events import (
    BookingCancelled,
    BookingCreated,
    BookingDeleted,
    BookingStatusChanged,
    BookingUpdated,
    PaymentStatusChanged,
)

audit_logger = structlog.get_logger("apps.bookings.audit")

AUDITED_EVENTS = (
    BookingCreated,
    BookingUpdated,
    BookingStatusChanged,
    PaymentStatusChanged,
    BookingCancelled,
    BookingDeleted,
)


def audit_booking_event(event: DomainEvent) -> None:
    payload = event.to_dict()
    audit_logger.info("booking_event", **payload)


def register_audit_handlers() -> None:
    for event_type in AUDITED_EVENTS:
        message_bus.register_event_handler(event_type, audit_booking_event)
