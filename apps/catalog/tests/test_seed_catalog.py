"""Tests for the seed_catalog management command."""

from __future__ import annotations

from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from apps.catalog.models import Destination, TravelPackage
from apps.users.models import CustomUser


class SeedCatalogCommandTests(TestCase):
    def test_seeds_empty_tables(self) -> None:
        out = StringIO()

        call_command("seed_catalog", stdout=out)

        self.assertEqual(CustomUser.objects.count(), 2)
        self.assertTrue(CustomUser.objects.get(username="admin").is_admin)
        self.assertEqual(Destination.objects.count(), 5)
        self.assertEqual(TravelPackage.objects.count(), 5)
        package = TravelPackage.objects.get(name="Tokyo Cultural Experience")
        self.assertEqual(package.destination.name, "Tokyo")
        self.assertGreater(package.end_date, package.start_date)
        self.assertIn("Created 5 travel packages", out.getvalue())

    def test_is_idempotent(self) -> None:
        call_command("seed_catalog", stdout=StringIO())
        out = StringIO()

        call_command("seed_catalog", stdout=out)

        self.assertEqual(Destination.objects.count(), 5)
        self.assertEqual(TravelPackage.objects.count(), 5)
        self.assertIn("already present", out.getvalue())
