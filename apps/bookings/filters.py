"""FilterSet definitions for booking listing."""

from __future__ import annotations

import django_filters  # type: ignore

from .domain.entities import BookingStatus, PaymentStatus
from .models import Booking


class BookingFilterSet(django_filters.FilterSet):
    """Filters for GET /api/bookings/."""

    user = django_filters.NumberFilter(field_name="user_id", lookup_expr="exact")
    package = django_filters.NumberFilter(field_name="package_id", lookup_expr="exact")
    booking_status = django_filters.ChoiceFilter(
        field_name="status",
        choices=BookingStatus.choices(),
    )
    payment_status = django_filters.ChoiceFilter(
        field_name="payment_status",
        choices=PaymentStatus.choices(),
    )
    booked_from = django_filters.DateTimeFilter(field_name="booking_date", lookup_expr="gte")
    booked_to = django_filters.DateTimeFilter(field_name="booking_date", lookup_expr="lte")

    class Meta:
        model = Booking
        fields = [
            "user",
            "package",
            "booking_status",
            "payment_status",
        ]
