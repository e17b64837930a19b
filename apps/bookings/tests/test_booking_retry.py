"""Tests for retrying admissions that hit transient database errors."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from unittest import mock

from django.db import OperationalError, transaction
from django.test import SimpleTestCase, TestCase, TransactionTestCase, override_settings

from apps.bookings.application.command_handlers import create_booking
from apps.bookings.models import Booking
from apps.bookings.services import CapacityLedger, run_with_retry
from apps.catalog.models import Destination, TravelPackage
from apps.users.models import CustomUser


class FlakyOperation:
    """Fails with "database is locked" a given number of times, then succeeds."""

    def __init__(self, failures: int):
        self.failures = failures
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise OperationalError("database is locked")
        return "admitted"


class RunWithRetryTests(SimpleTestCase):
    def test_succeeds_after_transient_failures_with_growing_delay(self) -> None:
        operation = FlakyOperation(failures=2)

        with mock.patch("apps.bookings.services.time.sleep") as sleep:
            result = run_with_retry(operation, max_attempts=3, delay=0.5)

        self.assertEqual(result, "admitted")
        self.assertEqual(operation.calls, 3)
        self.assertEqual(sleep.call_args_list, [mock.call(0.5), mock.call(1.0)])

    def test_reraises_once_attempts_are_exhausted(self) -> None:
        operation = FlakyOperation(failures=5)

        with mock.patch("apps.bookings.services.time.sleep") as sleep:
            with self.assertRaises(OperationalError):
                run_with_retry(operation, max_attempts=3, delay=0)

        self.assertEqual(operation.calls, 3)
        self.assertEqual(sleep.call_count, 2)

    @override_settings(BOOKING_ADMISSION_MAX_ATTEMPTS=2, BOOKING_ADMISSION_RETRY_DELAY=0)
    def test_attempts_default_to_settings(self) -> None:
        operation = FlakyOperation(failures=5)

        with self.assertRaises(OperationalError):
            run_with_retry(operation)

        self.assertEqual(operation.calls, 2)

    def test_other_errors_are_not_retried(self) -> None:
        operation = mock.Mock(side_effect=ValueError("boom"))

        with self.assertRaises(ValueError):
            run_with_retry(operation, max_attempts=3, delay=0)

        self.assertEqual(operation.call_count, 1)


class RunWithRetryInTransactionTests(TestCase):
    def test_runs_once_inside_outer_transaction(self) -> None:
        operation = FlakyOperation(failures=1)

        with transaction.atomic():
            with self.assertRaises(OperationalError):
                run_with_retry(operation, max_attempts=3, delay=0)

        self.assertEqual(operation.calls, 1)


class AdmissionRetryTests(TransactionTestCase):
    def setUp(self) -> None:
        self.user = CustomUser.objects.create_user(
            username="retrier",
            email="retrier@example.com",
            password="RetryPass123",
        )
        destination = Destination.objects.create(
            name="Porto",
            country="Portugal",
            city="Porto",
            price=Decimal("450.00"),
        )
        start = date.today() + timedelta(days=15)
        self.package = TravelPackage.objects.create(
            name="Douro Valley",
            destination=destination,
            start_date=start,
            end_date=start + timedelta(days=3),
            price=Decimal("300.00"),
            max_participants=4,
        )

    def test_locked_database_during_admission_is_retried(self) -> None:
        original = CapacityLedger.try_reserve
        calls = []

        def locked_once(ledger, *args, **kwargs):
            calls.append(args)
            if len(calls) == 1:
                raise OperationalError("database is locked")
            return original(ledger, *args, **kwargs)

        with mock.patch.object(CapacityLedger, "try_reserve", autospec=True, side_effect=locked_once):
            booking = create_booking(self.user.pk, self.package.pk, 2)

        self.assertEqual(len(calls), 2)
        self.assertEqual(Booking.objects.count(), 1)
        self.assertEqual(Booking.objects.get().booking_reference, booking.reference)
        self.assertEqual(CapacityLedger().available_space(self.package.pk), 2)

    def test_persistent_lock_gives_up_without_a_booking(self) -> None:
        with mock.patch.object(
            CapacityLedger,
            "try_reserve",
            autospec=True,
            side_effect=OperationalError("database is locked"),
        ) as try_reserve:
            with self.assertRaises(OperationalError):
                create_booking(self.user.pk, self.package.pk, 2)

        self.assertEqual(try_reserve.call_count, 3)
        self.assertFalse(Booking.objects.exists())
