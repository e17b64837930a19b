"""Catalog API views."""

from __future__ import annotations

from rest_framework import serializers, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from . import services
from .filters import DestinationFilterSet, TravelPackageFilterSet
from .models import Destination, TravelPackage
from .serializers import DestinationSerializer, TravelPackageSerializer


def _search_term(request) -> str:
    term = (request.query_params.get("q") or "").strip()
    if not term:
        raise serializers.ValidationError({"q": "Search term is required."})
    return term


class DestinationViewSet(viewsets.ModelViewSet):
    """Destinations; listings show active ones only."""

    queryset = Destination.objects.all()
    serializer_class = DestinationSerializer
    filterset_class = DestinationFilterSet
    lookup_value_regex = r"[0-9]+"

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        if self.action == "list":
            return qs.active()
        return qs

    def get_object(self):  # type: ignore
        return services.get_destination(self.kwargs[self.lookup_field])

    def perform_destroy(self, instance):  # type: ignore
        services.delete_destination(instance.pk)

    @action(detail=False, methods=["get"])
    def featured(self, request):  # type: ignore
        queryset = self.filter_queryset(Destination.objects.featured())
        return Response(self.get_serializer(queryset, many=True).data)

    @action(detail=False, methods=["get"])
    def search(self, request):  # type: ignore
        queryset = Destination.objects.search(_search_term(request))
        return Response(self.get_serializer(queryset, many=True).data)

    @action(detail=True, methods=["patch"], url_path="toggle-status")
    def toggle_status(self, request, pk=None):  # type: ignore
        destination = services.toggle_destination_status(pk)
        return Response(self.get_serializer(destination).data)


class TravelPackageViewSet(viewsets.ModelViewSet):
    """Travel packages with their free seats; listings show active ones only."""

    queryset = TravelPackage.objects.select_related("destination").with_capacity()
    serializer_class = TravelPackageSerializer
    filterset_class = TravelPackageFilterSet
    lookup_value_regex = r"[0-9]+"

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        if self.action == "list":
            return qs.active()
        return qs

    def get_object(self):  # type: ignore
        package = self.get_queryset().filter(pk=self.kwargs[self.lookup_field]).first()
        if package is None:
            return services.get_package(self.kwargs[self.lookup_field])
        return package

    def perform_update(self, serializer):  # type: ignore
        package = serializer.save()
        # Drop the capacity annotation computed before the update
        serializer.instance = services.get_package(package.pk)

    def perform_destroy(self, instance):  # type: ignore
        services.delete_package(instance.pk)

    def _packages(self, queryset):
        queryset = queryset.select_related("destination").with_capacity()
        return Response(self.get_serializer(queryset, many=True).data)

    @action(detail=False, methods=["get"])
    def featured(self, request):  # type: ignore
        return self._packages(TravelPackage.objects.featured())

    @action(detail=False, methods=["get"])
    def search(self, request):  # type: ignore
        return self._packages(TravelPackage.objects.search(_search_term(request)))

    @action(detail=False, methods=["get"])
    def available(self, request):  # type: ignore
        value = request.query_params.get("start_date")
        if not value:
            raise serializers.ValidationError({"start_date": "This query parameter is required."})
        try:
            start_date = serializers.DateField().to_internal_value(value)
        except serializers.ValidationError as exc:
            raise serializers.ValidationError({"start_date": exc.detail})
        return self._packages(TravelPackage.objects.starting_from(start_date))

    @action(detail=False, methods=["get"], url_path="available-space")
    def available_space(self, request):  # type: ignore
        queryset = TravelPackage.objects.with_space().select_related("destination")
        return Response(self.get_serializer(queryset, many=True).data)

    @action(detail=True, methods=["patch"], url_path="toggle-status")
    def toggle_status(self, request, pk=None):  # type: ignore
        package = services.toggle_package_status(pk)
        return Response(self.get_serializer(package).data)

    @action(detail=True, methods=["get"])
    def availability(self, request, pk=None):  # type: ignore
        package = services.get_package(pk)
        return Response(
            {
                "package_id": package.pk,
                "max_participants": package.max_participants,
                "available_space": services.package_availability(package.pk),
            },
            status=status.HTTP_200_OK,
        )
