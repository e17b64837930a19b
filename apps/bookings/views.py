"""API views for the booking domain.

Writes go through the command handlers in
``apps.bookings.application.command_handlers``; reads go through
``apps.bookings.selectors``. Domain errors are turned into responses by
``shared.infrastructure.exception_handler``.
"""

from __future__ import annotations

from django.utils.dateparse import parse_date, parse_datetime  # type: ignore
from rest_framework import mixins, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from . import selectors
from .application import command_handlers
from .domain.exceptions import InvalidBookingRequest
from .filters import BookingFilterSet
from .serializers import (
    BookingCreateSerializer,
    BookingSerializer,
    BookingStatusSerializer,
    BookingUpdateSerializer,
    PaymentStatusSerializer,
)


def _parse_moment(value, name):
    if not value:
        raise InvalidBookingRequest(f"Query parameter '{name}' is required", parameter=name)
    try:
        parsed = parse_date(value) or parse_datetime(value)
    except ValueError:
        parsed = None
    if parsed is None:
        raise InvalidBookingRequest(f"Query parameter '{name}' is not a valid date: {value}", parameter=name)
    return parsed


class BookingViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Viewset for admitting bookings and managing their lifecycle."""

    queryset = selectors.all_bookings()
    serializer_class = BookingSerializer
    filterset_class = BookingFilterSet
    lookup_value_regex = r"[0-9]+"

    def get_object(self):  # type: ignore
        return selectors.booking_by_id(self.kwargs[self.lookup_field])

    def _respond(self, booking_id, status_code=status.HTTP_200_OK):
        booking = selectors.booking_by_id(booking_id)
        return Response(self.get_serializer(booking).data, status=status_code)

    def _list(self, queryset):
        return Response(self.get_serializer(queryset, many=True).data)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = command_handlers.create_booking(**serializer.validated_data)
        return self._respond(booking.id, status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):  # type: ignore
        serializer = BookingUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = command_handlers.update_booking(
            int(self.kwargs[self.lookup_field]),
            participants=serializer.validated_data.get("participants"),
            special_requests=serializer.validated_data.get("special_requests"),
        )
        return self._respond(booking.id)

    def partial_update(self, request, *args, **kwargs):  # type: ignore
        return self.update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):  # type: ignore
        command_handlers.delete_booking(int(self.kwargs[self.lookup_field]))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["patch"], url_path="status")
    def change_status(self, request, pk=None):  # type: ignore
        data = request.data or {"status": request.query_params.get("status")}
        serializer = BookingStatusSerializer(data=data)
        serializer.is_valid(raise_exception=True)
        booking = command_handlers.update_booking_status(int(pk), serializer.validated_data["status"])
        return self._respond(booking.id)

    @action(detail=True, methods=["patch"], url_path="payment-status")
    def change_payment_status(self, request, pk=None):  # type: ignore
        data = request.data or {"payment_status": request.query_params.get("payment_status")}
        serializer = PaymentStatusSerializer(data=data)
        serializer.is_valid(raise_exception=True)
        booking = command_handlers.update_payment_status(int(pk), serializer.validated_data["payment_status"])
        return self._respond(booking.id)

    @action(detail=True, methods=["patch", "post"])
    def cancel(self, request, pk=None):  # type: ignore
        booking = command_handlers.cancel_booking(int(pk))
        return self._respond(booking.id)

    @action(detail=False, methods=["get"], url_path=r"reference/(?P<reference>[^/.]+)")
    def by_reference(self, request, reference=None):  # type: ignore
        booking = selectors.booking_by_reference(reference)
        return Response(self.get_serializer(booking).data)

    @action(detail=False, methods=["get"], url_path=r"status/(?P<booking_status>[^/.]+)")
    def by_status(self, request, booking_status=None):  # type: ignore
        return self._list(selectors.bookings_with_status(booking_status))

    @action(detail=False, methods=["get"], url_path=r"payment-status/(?P<payment_status>[^/.]+)")
    def by_payment_status(self, request, payment_status=None):  # type: ignore
        return self._list(selectors.bookings_with_payment_status(payment_status))

    @action(detail=False, methods=["get"], url_path="date-range")
    def date_range(self, request):  # type: ignore
        start = _parse_moment(request.query_params.get("start"), "start")
        end = _parse_moment(request.query_params.get("end"), "end")
        return self._list(selectors.bookings_booked_between(start, end))

    @action(detail=False, methods=["get"], url_path=r"user/(?P<user_id>[0-9]+)")
    def for_user(self, request, user_id=None):  # type: ignore
        return self._list(selectors.bookings_for_user(user_id))

    @action(detail=False, methods=["get"], url_path=r"user/(?P<user_id>[0-9]+)/confirmed")
    def confirmed_for_user(self, request, user_id=None):  # type: ignore
        return self._list(selectors.confirmed_bookings_for_user(user_id))
