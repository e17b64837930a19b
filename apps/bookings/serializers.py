"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .domain.entities import BookingStatus, PaymentStatus
from .models import Booking


class BookingSerializer(serializers.ModelSerializer):
    """Booking as returned by every booking endpoint."""

    user_id = serializers.ReadOnlyField()
    package_id = serializers.ReadOnlyField()
    package_name = serializers.ReadOnlyField(source="package.name")
    booking_status = serializers.ReadOnlyField(source="status")

    class Meta:
        model = Booking
        fields = [
            "id",
            "user_id",
            "package_id",
            "package_name",
            "participants",
            "total_price",
            "currency",
            "booking_status",
            "payment_status",
            "special_requests",
            "booking_reference",
            "booking_date",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class BookingCreateSerializer(serializers.Serializer):
    """Input for admitting a new booking."""

    user_id = serializers.IntegerField(min_value=1)
    package_id = serializers.IntegerField(min_value=1)
    participants = serializers.IntegerField(min_value=1)
    special_requests = serializers.CharField(required=False, allow_blank=True, default="")
    booking_date = serializers.DateTimeField(required=False, allow_null=True, default=None)


class BookingUpdateSerializer(serializers.Serializer):
    """Input for resizing a booking or changing its special requests."""

    participants = serializers.IntegerField(min_value=1, required=False)
    special_requests = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):  # type: ignore
        if not attrs:
            raise serializers.ValidationError("Provide participants and/or special_requests.")
        return attrs


class BookingStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[s.value for s in BookingStatus])

    def to_internal_value(self, data):  # type: ignore
        if isinstance(data, dict) and isinstance(data.get("status"), str):
            data = {**data, "status": data["status"].upper()}
        return super().to_internal_value(data)


class PaymentStatusSerializer(serializers.Serializer):
    payment_status = serializers.ChoiceField(choices=[s.value for s in PaymentStatus])

    def to_internal_value(self, data):  # type: ignore
        if isinstance(data, dict) and isinstance(data.get("payment_status"), str):
            data = {**data, "payment_status": data["payment_status"].upper()}
        return super().to_internal_value(data)
