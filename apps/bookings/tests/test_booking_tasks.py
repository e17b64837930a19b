"""Tests for booking periodic tasks and audit event handlers."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from unittest import mock

from django.test import TestCase

from shared.application.message_bus import message_bus
from shared.domain.value_objects import Money

from apps.bookings import handlers
from apps.bookings.application.command_handlers import (
    cancel_booking,
    create_booking,
    delete_booking,
    update_booking_status,
)
from apps.bookings.domain.events import BookingCreated, BookingDeleted
from apps.bookings.domain.exceptions import PackageUnavailable
from apps.bookings.models import Booking
from apps.bookings.tasks import complete_finished_bookings
from apps.catalog.models import Destination, TravelPackage
from apps.users.models import CustomUser


class BookingTaskTestCase(TestCase):
    def setUp(self) -> None:
        self.user = CustomUser.objects.create_user(
            username="auditor",
            email="auditor@example.com",
            password="AuditPass123",
        )
        self.destination = Destination.objects.create(
            name="Cusco",
            country="Peru",
            city="Cusco",
            price=Decimal("750.00"),
        )

    def make_package(self, start: date, days: int = 3) -> TravelPackage:
        return TravelPackage.objects.create(
            name=f"Inca Trail {start.isoformat()}",
            destination=self.destination,
            start_date=start,
            end_date=start + timedelta(days=days),
            price=Decimal("400.00"),
            max_participants=10,
        )


class CompleteFinishedBookingsTests(BookingTaskTestCase):
    def test_completes_confirmed_bookings_of_finished_trips(self) -> None:
        finished = self.make_package(date.today() - timedelta(days=10))
        upcoming = self.make_package(date.today() + timedelta(days=10))
        done = create_booking(self.user.pk, finished.pk, 2)
        update_booking_status(done.id, "CONFIRMED")
        still_pending = create_booking(self.user.pk, finished.pk, 1)
        future = create_booking(self.user.pk, upcoming.pk, 1)
        update_booking_status(future.id, "CONFIRMED")

        result = complete_finished_bookings.apply().get()

        self.assertEqual(result, {"completed": 1, "failed": 0})
        self.assertEqual(Booking.objects.get(pk=done.id).status, "COMPLETED")
        self.assertEqual(Booking.objects.get(pk=still_pending.id).status, "PENDING")
        self.assertEqual(Booking.objects.get(pk=future.id).status, "CONFIRMED")

    def test_nothing_to_do(self) -> None:
        self.assertEqual(complete_finished_bookings(), {"completed": 0, "failed": 0})


class AuditHandlerTests(BookingTaskTestCase):
    def test_audit_handlers_are_registered(self) -> None:
        for event_type in handlers.AUDITED_EVENTS:
            registered = message_bus._event_handlers.get(event_type, [])
            self.assertIn(handlers.audit_booking_event, registered)

    def test_lifecycle_events_are_audited_after_commit(self) -> None:
        package = self.make_package(date.today() + timedelta(days=5))

        with mock.patch.object(handlers, "audit_logger") as audit_logger:
            with self.captureOnCommitCallbacks(execute=True):
                booking = create_booking(self.user.pk, package.pk, 2, special_requests="Late check-in")
            with self.captureOnCommitCallbacks(execute=True):
                cancel_booking(booking.id)
            with self.captureOnCommitCallbacks(execute=True):
                delete_booking(booking.id)

        events = [call.kwargs for call in audit_logger.info.call_args_list]
        self.assertEqual(
            [e["event_type"] for e in events],
            ["BookingCreated", "BookingCancelled", "BookingDeleted"],
        )
        self.assertTrue(all(e["aggregate_id"] == booking.id for e in events))
        self.assertEqual(events[0]["reference"], booking.reference)
        self.assertEqual(events[2]["released_participants"], 0)

    def test_rolled_back_admission_is_not_audited(self) -> None:
        package = self.make_package(date.today() + timedelta(days=5))
        package.is_active = False
        package.save()

        with mock.patch.object(handlers, "audit_logger") as audit_logger:
            with self.captureOnCommitCallbacks(execute=True) as callbacks:
                with self.assertRaises(PackageUnavailable):
                    create_booking(self.user.pk, package.pk, 1)

        self.assertEqual(callbacks, [])
        audit_logger.info.assert_not_called()

    def test_event_payloads_serialize(self) -> None:
        created = BookingCreated(
            reference="BK1",
            package_id=1,
            user_id=2,
            participants=3,
            total_price=Money(Decimal("900.00"), "EUR"),
        )
        deleted = BookingDeleted(reference="BK1", package_id=1, released_participants=3)

        self.assertEqual(created.to_dict()["event_type"], "BookingCreated")
        self.assertEqual(created.to_dict()["total_price"], "900.00")
        self.assertEqual(deleted.to_dict()["released_participants"], 3)
