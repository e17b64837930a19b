"""Tests for cascading catalog deletes."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from unittest import mock

from django.test import TestCase

from apps.bookings.application.command_handlers import create_booking, delete_booking
from apps.bookings.models import Booking
from apps.bookings.services import CapacityLedger
from apps.catalog import services
from apps.catalog.exceptions import DestinationInUse, PackageInUse
from apps.catalog.models import Destination, TravelPackage
from apps.users.models import CustomUser


class CatalogServiceTestCase(TestCase):
    def setUp(self) -> None:
        self.user = CustomUser.objects.create_user(
            username="curator",
            email="curator@example.com",
            password="CuratePass123",
        )
        self.destination = Destination.objects.create(
            name="Seville",
            country="Spain",
            city="Seville",
            price=Decimal("600.00"),
        )
        self.package = self.make_package("Andalusian Nights")

    def make_package(self, name: str) -> TravelPackage:
        start = date.today() + timedelta(days=40)
        return TravelPackage.objects.create(
            name=name,
            destination=self.destination,
            start_date=start,
            end_date=start + timedelta(days=4),
            price=Decimal("350.00"),
            max_participants=6,
        )


class DeletePackageTests(CatalogServiceTestCase):
    def test_package_is_locked_while_bookings_are_removed(self) -> None:
        create_booking(self.user.pk, self.package.pk, 2)

        with mock.patch.object(
            CapacityLedger, "guard", autospec=True, side_effect=CapacityLedger.guard
        ) as guard, mock.patch.object(
            CapacityLedger, "get_package", autospec=True, side_effect=CapacityLedger.get_package
        ) as get_package:
            deleted = services.delete_package(self.package.pk)

        self.assertEqual(deleted, 1)
        self.assertEqual(guard.call_args_list[0], mock.call(mock.ANY, self.package.pk))
        self.assertEqual(get_package.call_args_list[0], mock.call(mock.ANY, self.package.pk, lock=True))
        self.assertFalse(TravelPackage.objects.filter(pk=self.package.pk).exists())

    def test_booking_admitted_mid_delete_aborts_the_delete(self) -> None:
        create_booking(self.user.pk, self.package.pk, 2)

        def delete_then_admit(booking_id):
            booking = delete_booking(booking_id)
            create_booking(self.user.pk, self.package.pk, 1)
            return booking

        with mock.patch.object(services, "delete_booking", side_effect=delete_then_admit):
            with self.assertRaises(PackageInUse) as raised:
                services.delete_package(self.package.pk)

        self.assertEqual(raised.exception.context["package_id"], self.package.pk)
        self.assertTrue(TravelPackage.objects.filter(pk=self.package.pk).exists())
        self.assertEqual(list(Booking.objects.values_list("participants", flat=True)), [2])


class DeleteDestinationTests(CatalogServiceTestCase):
    def test_package_added_mid_delete_aborts_the_delete(self) -> None:
        real_delete_package = services.delete_package

        def delete_then_add(package_id):
            deleted = real_delete_package(package_id)
            self.make_package("Late Addition")
            return deleted

        with mock.patch.object(services, "delete_package", side_effect=delete_then_add):
            with self.assertRaises(DestinationInUse):
                services.delete_destination(self.destination.pk)

        self.assertTrue(Destination.objects.filter(pk=self.destination.pk).exists())
        self.assertEqual(
            list(TravelPackage.objects.values_list("name", flat=True)),
            ["Andalusian Nights"],
        )
