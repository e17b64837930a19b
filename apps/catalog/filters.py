"""FilterSet definitions for catalog listing."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Destination, TravelPackage


class DestinationFilterSet(django_filters.FilterSet):
    country = django_filters.CharFilter(field_name="country", lookup_expr="icontains")
    city = django_filters.CharFilter(field_name="city", lookup_expr="icontains")
    min_price = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price", lookup_expr="lte")
    featured = django_filters.BooleanFilter(field_name="is_featured")

    class Meta:
        model = Destination
        fields = ["country", "city"]


class TravelPackageFilterSet(django_filters.FilterSet):
    destination = django_filters.NumberFilter(field_name="destination_id", lookup_expr="exact")
    package_type = django_filters.ChoiceFilter(choices=TravelPackage.PackageType.choices)
    min_price = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price", lookup_expr="lte")
    featured = django_filters.BooleanFilter(field_name="is_featured")

    class Meta:
        model = TravelPackage
        fields = ["destination", "package_type"]
