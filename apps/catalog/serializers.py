"""Serializers for the catalog domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.bookings.services import CapacityLedger

from .models import Destination, TravelPackage


class CurrencyCodeMixin:
    """Accepts lowercase currency codes by normalising them before field validation."""

    def to_internal_value(self, data):  # type: ignore
        currency = data.get("currency") if hasattr(data, "get") else None
        if isinstance(currency, str):
            data = data.copy()
            data["currency"] = currency.strip().upper()
        return super().to_internal_value(data)  # type: ignore


class DestinationSerializer(CurrencyCodeMixin, serializers.ModelSerializer):
    class Meta:
        model = Destination
        fields = [
            "id",
            "name",
            "country",
            "city",
            "description",
            "image_url",
            "price",
            "currency",
            "best_time_to_visit",
            "climate",
            "popular_attractions",
            "is_featured",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]


class TravelPackageSerializer(CurrencyCodeMixin, serializers.ModelSerializer):
    """Package with its destination summary and the seats still free."""

    destination_name = serializers.ReadOnlyField(source="destination.name")
    destination_country = serializers.ReadOnlyField(source="destination.country")
    available_space = serializers.SerializerMethodField()

    class Meta:
        model = TravelPackage
        fields = [
            "id",
            "name",
            "description",
            "destination",
            "destination_name",
            "destination_country",
            "start_date",
            "end_date",
            "price",
            "currency",
            "max_participants",
            "available_space",
            "package_type",
            "includes",
            "excludes",
            "itinerary",
            "is_featured",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def get_available_space(self, obj: TravelPackage) -> int:
        free_space = getattr(obj, "free_space", None)
        if free_space is not None:
            return free_space
        return CapacityLedger().available_space(obj.pk)

    def validate(self, attrs):  # type: ignore
        start_date = attrs.get("start_date", getattr(self.instance, "start_date", None))
        end_date = attrs.get("end_date", getattr(self.instance, "end_date", None))
        if start_date and end_date and end_date < start_date:
            raise serializers.ValidationError({"end_date": "End date must not be before the start date."})
        return attrs
