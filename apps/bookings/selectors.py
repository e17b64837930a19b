"""Read-side lookups over bookings.

Selectors return model instances and querysets for the API layer; they never
change state.
"""

from __future__ import annotations

from datetime import date, datetime, time

from django.utils import timezone  # type: ignore

from shared.domain.value_objects import Period

from apps.bookings.domain.entities import BookingStatus, PaymentStatus
from apps.bookings.domain.exceptions import BookingNotFound, InvalidBookingRequest
from apps.bookings.models import Booking


def _bookings():
    return Booking.objects.select_related("package", "user")


def all_bookings():
    return _bookings().all()


def booking_by_id(booking_id) -> Booking:
    try:
        return _bookings().get(pk=booking_id)
    except (Booking.DoesNotExist, ValueError, TypeError):
        raise BookingNotFound(f"Booking {booking_id} not found", booking_id=booking_id)


def booking_by_reference(reference: str) -> Booking:
    try:
        return _bookings().get(booking_reference=reference)
    except Booking.DoesNotExist:
        raise BookingNotFound(f"Booking {reference} not found", reference=reference)


def bookings_for_user(user_id):
    return _bookings().for_user(user_id)


def confirmed_bookings_for_user(user_id):
    return _bookings().confirmed_for_user(user_id)


def bookings_with_status(status):
    try:
        status = BookingStatus(str(status).upper())
    except ValueError:
        raise InvalidBookingRequest(f"Unknown booking status: {status}", value=status)
    return _bookings().with_status(status)


def bookings_with_payment_status(payment_status):
    try:
        payment_status = PaymentStatus(str(payment_status).upper())
    except ValueError:
        raise InvalidBookingRequest(f"Unknown payment status: {payment_status}", value=payment_status)
    return _bookings().with_payment_status(payment_status)


def _as_datetime(value, end_of_day: bool = False) -> datetime:
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, date):
        moment = datetime.combine(value, time.max if end_of_day else time.min)
    else:
        raise InvalidBookingRequest(f"Invalid date: {value}", value=value)
    if timezone.is_naive(moment):
        moment = timezone.make_aware(moment)
    return moment


def bookings_booked_between(start, end):
    """
    Bookings whose booking_date lies in [start, end]

    Plain dates cover whole days: a date end includes that day.
    """
    start = _as_datetime(start)
    end = _as_datetime(end, end_of_day=True)
    try:
        period = Period(start, end)
    except ValueError as exc:
        raise InvalidBookingRequest(str(exc), start=str(start), end=str(end))
    return _bookings().booked_between(period.start, period.end)
