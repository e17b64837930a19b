"""Booking persistence model.

Rows are written only through ``apps.bookings.repositories`` by the command
handlers; the domain aggregate in ``apps.bookings.domain.entities`` owns the
state machines.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.db.models import Q  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.bookings.domain.entities import (
    CAPACITY_HOLDING_STATUSES,
    BookingStatus,
    PaymentStatus,
)


class BookingQuerySet(models.QuerySet):
    def for_user(self, user_id):
        return self.filter(user_id=user_id)

    def for_package(self, package_id):
        return self.filter(package_id=package_id)

    def with_status(self, status):
        return self.filter(status=BookingStatus(status).value)

    def with_payment_status(self, payment_status):
        return self.filter(payment_status=PaymentStatus(payment_status).value)

    def booked_between(self, start, end):
        """Inclusive on both ends."""
        return self.filter(booking_date__gte=start, booking_date__lte=end)

    def confirmed_for_user(self, user_id):
        return self.for_user(user_id).with_status(BookingStatus.CONFIRMED)

    def holding_capacity(self):
        return self.filter(status__in=[status.value for status in CAPACITY_HOLDING_STATUSES])


class Booking(models.Model):
    """A user's reservation of participant slots on a travel package."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    package = models.ForeignKey(
        "catalog.TravelPackage",
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    participants = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    total_price = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
        help_text=_("Package unit price x participants, fixed when the participant count is set."),
    )
    currency = models.CharField(max_length=3, default="USD")
    status = models.CharField(
        max_length=20,
        choices=BookingStatus.choices(),
        default=BookingStatus.PENDING.value,
    )
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices(),
        default=PaymentStatus.PENDING.value,
    )
    special_requests = models.TextField(blank=True)
    booking_reference = models.CharField(max_length=32, unique=True, editable=False)
    booking_date = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = BookingQuerySet.as_manager()

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-booking_date", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(participants__gt=0),
                name="booking_positive_participants",
            ),
            models.CheckConstraint(
                condition=Q(total_price__gt=0),
                name="booking_positive_price",
            ),
        ]
        indexes = [
            models.Index(fields=["package", "status"], name="booking_package_status_idx"),
            models.Index(fields=["user", "status"], name="booking_user_status_idx"),
            models.Index(fields=["payment_status"], name="booking_payment_status_idx"),
            models.Index(fields=["booking_date"], name="booking_date_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking {self.booking_reference} for package {self.package_id}"

    @property
    def holds_capacity(self) -> bool:
        return BookingStatus(self.status).holds_capacity
