"""Integration tests for booking API endpoints."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.catalog.models import Destination, TravelPackage
from apps.users.models import CustomUser


class BookingAPITests(APITestCase):
    """Covers admission, lifecycle endpoints and error responses."""

    def setUp(self) -> None:
        self.traveler = CustomUser.objects.create_user(
            username="traveler",
            email="traveler@example.com",
            password="TravelPass123",
        )
        self.other = CustomUser.objects.create_user(
            username="other",
            email="other@example.com",
            password="OtherPass123",
        )
        self.destination = Destination.objects.create(
            name="Reykjavik",
            country="Iceland",
            city="Reykjavik",
            price=Decimal("1100.00"),
        )
        start = date.today() + timedelta(days=14)
        self.package = TravelPackage.objects.create(
            name="Northern Lights",
            destination=self.destination,
            start_date=start,
            end_date=start + timedelta(days=6),
            price=Decimal("200.00"),
            currency="USD",
            max_participants=5,
        )
        self.list_url = reverse("booking-list")

    def _payload(self, participants: int, user=None) -> dict[str, object]:
        return {
            "user_id": (user or self.traveler).pk,
            "package_id": self.package.pk,
            "participants": participants,
            "special_requests": "Aisle seats",
        }

    def _create(self, participants: int, user=None):
        response = self.client.post(self.list_url, self._payload(participants, user), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        return response.data

    def test_create_booking(self) -> None:
        data = self._create(3)

        self.assertEqual(data["participants"], 3)
        self.assertEqual(Decimal(data["total_price"]), Decimal("600.00"))
        self.assertEqual(data["currency"], "USD")
        self.assertEqual(data["booking_status"], "PENDING")
        self.assertEqual(data["payment_status"], "PENDING")
        self.assertEqual(data["package_name"], "Northern Lights")
        self.assertTrue(data["booking_reference"].startswith("BK"))
        self.assertEqual(Booking.objects.count(), 1)

    def test_capacity_exceeded_is_bad_request(self) -> None:
        self._create(3)

        response = self.client.post(self.list_url, self._payload(3, self.other), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "capacity_exceeded")
        self.assertIn("detail", response.data)
        self.assertEqual(Booking.objects.count(), 1)

    def test_unknown_package_is_not_found(self) -> None:
        payload = self._payload(1)
        payload["package_id"] = 987654

        response = self.client.post(self.list_url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"], "package_not_found")

    def test_inactive_package_is_bad_request(self) -> None:
        self.package.is_active = False
        self.package.save()

        response = self.client.post(self.list_url, self._payload(1), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "package_unavailable")

    def test_invalid_participants_is_validation_error(self) -> None:
        response = self.client.post(self.list_url, self._payload(0), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("participants", response.data)

    def test_retrieve_and_missing_booking(self) -> None:
        data = self._create(1)

        found = self.client.get(reverse("booking-detail", args=[data["id"]]))
        missing = self.client.get(reverse("booking-detail", args=[999999]))

        self.assertEqual(found.status_code, status.HTTP_200_OK)
        self.assertEqual(found.data["booking_reference"], data["booking_reference"])
        self.assertEqual(missing.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(missing.data["error"], "booking_not_found")

    def test_update_booking(self) -> None:
        data = self._create(2)

        response = self.client.put(
            reverse("booking-detail", args=[data["id"]]),
            {"participants": 4},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["participants"], 4)
        self.assertEqual(Decimal(response.data["total_price"]), Decimal("800.00"))

    def test_update_requires_a_field(self) -> None:
        data = self._create(2)

        response = self.client.patch(reverse("booking-detail", args=[data["id"]]), {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_status_change_and_invalid_transition(self) -> None:
        data = self._create(2)
        url = reverse("booking-change-status", args=[data["id"]])

        confirmed = self.client.patch(url, {"status": "confirmed"}, format="json")
        invalid = self.client.patch(url, {"status": "PENDING"}, format="json")

        self.assertEqual(confirmed.status_code, status.HTTP_200_OK, confirmed.data)
        self.assertEqual(confirmed.data["booking_status"], "CONFIRMED")
        self.assertEqual(invalid.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(invalid.data["error"], "invalid_transition")

    def test_status_accepts_query_parameter(self) -> None:
        data = self._create(2)
        url = reverse("booking-change-status", args=[data["id"]])

        response = self.client.patch(f"{url}?status=CANCELLED")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["booking_status"], "CANCELLED")

    def test_payment_paid_confirms_booking(self) -> None:
        data = self._create(2)

        response = self.client.patch(
            reverse("booking-change-payment-status", args=[data["id"]]),
            {"payment_status": "PAID"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["payment_status"], "PAID")
        self.assertEqual(response.data["booking_status"], "CONFIRMED")

    def test_cancel_twice_is_conflict(self) -> None:
        data = self._create(5)
        url = reverse("booking-cancel", args=[data["id"]])

        first = self.client.patch(url)
        second = self.client.post(url)

        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertEqual(first.data["booking_status"], "CANCELLED")
        self.assertEqual(second.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(second.data["error"], "already_cancelled")
        self._create(5, self.other)

    def test_delete_booking(self) -> None:
        data = self._create(5)

        response = self.client.delete(reverse("booking-detail", args=[data["id"]]))

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Booking.objects.exists())
        self._create(5, self.other)

    def test_lookup_by_reference(self) -> None:
        data = self._create(1)

        found = self.client.get(reverse("booking-by-reference", args=[data["booking_reference"]]))
        missing = self.client.get(reverse("booking-by-reference", args=["BKNOPE"]))

        self.assertEqual(found.status_code, status.HTTP_200_OK)
        self.assertEqual(found.data["id"], data["id"])
        self.assertEqual(missing.status_code, status.HTTP_404_NOT_FOUND)

    def test_lists_by_status_and_payment_status(self) -> None:
        first = self._create(1)
        self._create(1, self.other)
        self.client.patch(reverse("booking-change-status", args=[first["id"]]), {"status": "CONFIRMED"}, format="json")

        confirmed = self.client.get(reverse("booking-by-status", args=["confirmed"]))
        pending_payment = self.client.get(reverse("booking-by-payment-status", args=["PENDING"]))
        unknown = self.client.get(reverse("booking-by-status", args=["ARCHIVED"]))

        self.assertEqual([b["id"] for b in confirmed.data], [first["id"]])
        self.assertEqual(len(pending_payment.data), 2)
        self.assertEqual(unknown.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(unknown.data["error"], "invalid_request")

    def test_user_bookings(self) -> None:
        first = self._create(1)
        self._create(1)
        self._create(1, self.other)
        self.client.patch(reverse("booking-change-status", args=[first["id"]]), {"status": "CONFIRMED"}, format="json")

        mine = self.client.get(reverse("booking-for-user", args=[self.traveler.pk]))
        confirmed = self.client.get(reverse("booking-confirmed-for-user", args=[self.traveler.pk]))

        self.assertEqual(len(mine.data), 2)
        self.assertEqual([b["id"] for b in confirmed.data], [first["id"]])

    def test_date_range(self) -> None:
        today = timezone.now().date()
        self._create(1)
        self.client.post(
            self.list_url,
            {**self._payload(1, self.other), "booking_date": (timezone.now() - timedelta(days=10)).isoformat()},
            format="json",
        )
        url = reverse("booking-date-range")

        response = self.client.get(url, {"start": str(today), "end": str(today)})
        missing = self.client.get(url, {"start": str(today)})
        reversed_range = self.client.get(url, {"start": str(today), "end": str(today - timedelta(days=1))})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(missing.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(reversed_range.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_filters(self) -> None:
        self._create(1)
        self._create(2, self.other)

        response = self.client.get(self.list_url, {"user": self.other.pk})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([b["participants"] for b in response.data], [2])
