"""Concurrent admissions against one package."""

from __future__ import annotations

import threading
from datetime import date, timedelta
from decimal import Decimal

from django.db import connection
from django.test import TransactionTestCase

from apps.bookings.application.command_handlers import create_booking
from apps.bookings.domain.exceptions import CapacityExceeded
from apps.bookings.models import Booking
from apps.bookings.services import CapacityLedger
from apps.catalog.models import Destination, TravelPackage
from apps.users.models import CustomUser


class ConcurrentAdmissionTests(TransactionTestCase):
    def setUp(self) -> None:
        self.users = [
            CustomUser.objects.create_user(
                username=f"racer{i}",
                email=f"racer{i}@example.com",
                password="RacerPass123",
            )
            for i in range(4)
        ]
        destination = Destination.objects.create(
            name="Kyoto",
            country="Japan",
            city="Kyoto",
            price=Decimal("900.00"),
        )
        start = date.today() + timedelta(days=10)
        self.package = TravelPackage.objects.create(
            name="Kyoto Temples",
            destination=destination,
            start_date=start,
            end_date=start + timedelta(days=4),
            price=Decimal("300.00"),
            max_participants=5,
        )

    def _race(self, calls):
        barrier = threading.Barrier(len(calls))
        outcomes: list[object] = [None] * len(calls)

        def run(index, call):
            try:
                barrier.wait()
                outcomes[index] = call()
            except Exception as exc:  # collected and asserted by the test
                outcomes[index] = exc
            finally:
                connection.close()

        threads = [threading.Thread(target=run, args=(i, call)) for i, call in enumerate(calls)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)
        return outcomes

    def test_only_one_of_two_competing_admissions_succeeds(self) -> None:
        outcomes = self._race([
            lambda: create_booking(self.users[0].pk, self.package.pk, 3),
            lambda: create_booking(self.users[1].pk, self.package.pk, 3),
        ])

        failures = [o for o in outcomes if isinstance(o, Exception)]
        self.assertEqual(len(failures), 1, outcomes)
        self.assertIsInstance(failures[0], CapacityExceeded)
        self.assertEqual(Booking.objects.count(), 1)
        self.assertEqual(CapacityLedger().available_space(self.package.pk), 2)

    def test_parallel_admissions_never_overbook(self) -> None:
        outcomes = self._race([
            (lambda user=user: create_booking(user.pk, self.package.pk, 2))
            for user in self.users
        ])

        admitted = [o for o in outcomes if not isinstance(o, Exception)]
        rejected = [o for o in outcomes if isinstance(o, Exception)]
        self.assertEqual(len(admitted), 2)
        self.assertTrue(all(isinstance(o, CapacityExceeded) for o in rejected), rejected)
        self.assertEqual(CapacityLedger().committed(self.package.pk), 4)
