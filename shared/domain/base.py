"""
Domain building blocks used by the booking engine.

Entities carry the database primary key as identity, value objects compare
by value, and aggregates queue domain events that the unit of work publishes
once the transaction has committed. All timestamps are timezone-aware UTC.
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List
from uuid import UUID, uuid4


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(kw_only=True)
class Entity(ABC):
    """
    Base class for all entities

    Entities have unique identity and are mutable.
    Two entities are equal if their IDs are equal. The identity is the
    database primary key, so it stays None until the entity is first saved;
    unsaved entities are only equal to themselves.
    """
    id: int | None = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return False
        if self.id is None or other.id is None:
            return self is other
        return self.id == other.id

    def __hash__(self):
        return hash(self.id) if self.id is not None else id(self)

    def touch(self):
        """Advance updated_at, never moving it before created_at"""
        self.updated_at = max(utcnow(), self.created_at)


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects

    Value objects are immutable and have no identity.
    Two value objects are equal if all their attributes are equal.
    """
    pass


@dataclass(eq=False)
class Aggregate(Entity):
    """
    Aggregate root

    The booking aggregate is the unit that is loaded, changed and saved in
    one transaction. Events raised while it changes stay pending on the
    aggregate until a unit of work takes them.
    """
    _events: List['DomainEvent'] = field(default_factory=list, repr=False, init=False)

    def add_event(self, event: 'DomainEvent'):
        self._events.append(event)

    def clear_events(self):
        self._events.clear()

    def pull_events(self) -> List['DomainEvent']:
        """Return the pending events and forget them"""
        pending, self._events = self._events, []
        return pending

    @property
    def events(self) -> List['DomainEvent']:
        """Pending events (a copy)"""
        return self._events.copy()


@dataclass(kw_only=True)
class DomainEvent:
    """
    Something that happened to an aggregate

    aggregate_id is the primary key of the aggregate, filled in on its first
    save when the event was raised before the row existed.
    """
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=utcnow)
    aggregate_id: int | None = None

    def to_dict(self) -> dict:
        return {
            'event_id': str(self.event_id),
            'event_type': self.__class__.__name__,
            'occurred_at': self.occurred_at.isoformat(),
            'aggregate_id': self.aggregate_id,
        }
