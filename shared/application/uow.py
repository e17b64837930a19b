"""
Unit of Work Pattern

Wraps a database transaction and holds the domain events raised while it is
open. Events reach the message bus only after the outermost transaction has
committed; a rollback discards them.
"""

from typing import Callable, List, Optional
import logging

from django.db import transaction

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)

Publisher = Callable[[List[DomainEvent]], None]


class DjangoUnitOfWork:
    """
    Django implementation of Unit of Work

    Usage:
        with DjangoUnitOfWork() as uow:
            booking = booking_repo.get(booking_id, lock=True)
            booking.change_status(BookingStatus.CONFIRMED)
            booking_repo.save(booking)
            uow.collect_events(booking)
        # transaction committed, events published

    Nested units of work join the enclosing transaction (savepoints), and their
    events are published together with it.
    """

    def __init__(self, publisher: Optional[Publisher] = None, using: Optional[str] = None):
        self._events: List[DomainEvent] = []
        self._atomic = None
        self._publisher = publisher
        self._using = using

    def __enter__(self):
        self._atomic = transaction.atomic(using=self._using)
        self._atomic.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
        finally:
            self._atomic.__exit__(exc_type, exc_val, exc_tb)
            self._atomic = None
        return False

    def commit(self):
        """
        Schedule publication of the collected events

        transaction.on_commit() runs the callback once the outermost atomic
        block commits, or drops it if that block rolls back.
        """
        events = self._events.copy()
        self._events.clear()
        logger.debug("Committing unit of work with %d events", len(events))
        if events:
            transaction.on_commit(lambda: self._publish(events), using=self._using)

    def rollback(self):
        if self._events:
            logger.warning("Rolling back unit of work, discarding %d events", len(self._events))
        self._events.clear()

    def collect_events(self, aggregate):
        """Move pending events from an aggregate root into this unit of work"""
        new_events = aggregate.pull_events()
        if not new_events:
            return
        self._events.extend(new_events)
        logger.debug(
            "Collected %d events from %s (id=%s)",
            len(new_events), aggregate.__class__.__name__, aggregate.id,
        )

    def _publish(self, events: List[DomainEvent]):
        if self._publisher is not None:
            publish = self._publisher
        else:
            from shared.application.message_bus import message_bus
            publish = message_bus.publish_events

        logger.info("Publishing %d domain events after commit", len(events))
        try:
            publish(events)
        except Exception:
            # The transaction is already committed; publication failures are
            # reported and left to monitoring.
            logger.exception("Error publishing domain events")
