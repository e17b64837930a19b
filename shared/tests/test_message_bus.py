"""Tests for the message bus and the unit of work."""

from __future__ import annotations

from dataclasses import dataclass

from django.test import TestCase

from shared.application.message_bus import MessageBus
from shared.application.uow import DjangoUnitOfWork
from shared.domain.base import Aggregate, DomainEvent


@dataclass(kw_only=True)
class ThingHappened(DomainEvent):
    name: str = ""


@dataclass(kw_only=True)
class SpecialThingHappened(ThingHappened):
    pass


@dataclass(eq=False)
class Thing(Aggregate):
    name: str = ""


class MessageBusTests(TestCase):
    def test_handlers_fan_out_and_receive_subclasses(self) -> None:
        bus = MessageBus()
        seen: list[tuple[str, str]] = []
        bus.register_event_handler(ThingHappened, lambda e: seen.append(("base", e.name)))
        bus.register_event_handler(SpecialThingHappened, lambda e: seen.append(("special", e.name)))

        bus.publish_events([SpecialThingHappened(name="x"), ThingHappened(name="y")])

        self.assertEqual(seen, [("special", "x"), ("base", "x"), ("base", "y")])

    def test_failing_handler_does_not_stop_the_others(self) -> None:
        bus = MessageBus()
        seen: list[str] = []

        def broken(event):
            raise RuntimeError("boom")

        bus.register_event_handler(ThingHappened, broken)
        bus.register_event_handler(ThingHappened, lambda e: seen.append(e.name))

        bus.publish_events([ThingHappened(name="ok")])

        self.assertEqual(seen, ["ok"])

    def test_registering_twice_keeps_one_handler(self) -> None:
        bus = MessageBus()
        seen: list[str] = []

        def handler(event):
            seen.append(event.name)

        bus.register_event_handler(ThingHappened, handler)
        bus.register_event_handler(ThingHappened, handler)
        bus.publish_events([ThingHappened(name="once")])

        self.assertEqual(seen, ["once"])


class UnitOfWorkTests(TestCase):
    def test_events_are_published_after_commit(self) -> None:
        published: list[DomainEvent] = []
        thing = Thing(name="a")
        thing.add_event(ThingHappened(name="a"))

        with self.captureOnCommitCallbacks(execute=True):
            with DjangoUnitOfWork(publisher=published.extend) as uow:
                uow.collect_events(thing)
                self.assertEqual(published, [])

        self.assertEqual([e.name for e in published], ["a"])
        self.assertEqual(thing.events, [])

    def test_rollback_discards_events(self) -> None:
        published: list[DomainEvent] = []
        thing = Thing(name="b")
        thing.add_event(ThingHappened(name="b"))

        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            with self.assertRaises(ValueError):
                with DjangoUnitOfWork(publisher=published.extend) as uow:
                    uow.collect_events(thing)
                    raise ValueError("abort")

        self.assertEqual(callbacks, [])
        self.assertEqual(published, [])
