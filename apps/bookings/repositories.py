"""
Booking Repository

Maps the Booking aggregate to the ``apps.bookings.models.Booking`` table.
Command handlers load and save aggregates only through this class.
"""

from typing import Optional

from django.db import connections
from django.utils import timezone

from shared.domain.value_objects import Money

from apps.bookings.domain.entities import Booking
from apps.bookings.domain.exceptions import BookingNotFound
from apps.bookings.models import Booking as BookingModel


class DjangoBookingRepository:
    """Booking aggregate persistence on the Django ORM"""

    def __init__(self, using: Optional[str] = None):
        self.using = using or "default"

    def _queryset(self, lock: bool = False):
        queryset = BookingModel.objects.using(self.using)
        connection = connections[self.using]
        if lock and connection.features.has_select_for_update and connection.in_atomic_block:
            queryset = queryset.select_for_update()
        return queryset

    def get(self, booking_id: int, lock: bool = False) -> Booking:
        """
        Load a booking aggregate

        lock=True takes a row lock when the backend supports it; call it
        inside the unit of work that saves the booking.
        """
        try:
            model = self._queryset(lock).get(pk=booking_id)
        except (BookingModel.DoesNotExist, ValueError, TypeError):
            raise BookingNotFound(f"Booking {booking_id} not found", booking_id=booking_id)
        return self.to_domain(model)

    def get_by_reference(self, reference: str) -> Booking:
        try:
            model = self._queryset().get(booking_reference=reference)
        except BookingModel.DoesNotExist:
            raise BookingNotFound(f"Booking {reference} not found", reference=reference)
        return self.to_domain(model)

    def reference_exists(self, reference: str) -> bool:
        return self._queryset().filter(booking_reference=reference).exists()

    def save(self, booking: Booking) -> Booking:
        """
        Insert or update the booking row

        A first save assigns the database id, which is copied onto the
        events the aggregate raised before it had one.
        """
        fields = {
            'user_id': booking.user_id,
            'package_id': booking.package_id,
            'participants': booking.participants,
            'total_price': booking.total_price.amount,
            'currency': booking.total_price.currency,
            'status': booking.status.value,
            'payment_status': booking.payment_status.value,
            'special_requests': booking.special_requests,
            'booking_date': booking.booking_date,
        }

        if booking.id is None:
            model = BookingModel(booking_reference=booking.reference, **fields)
            model.save(using=self.using)
            booking.id = model.pk
            booking.created_at = model.created_at
            booking.updated_at = model.updated_at
            for event in booking.events:
                if event.aggregate_id is None:
                    event.aggregate_id = model.pk
            return booking

        now = timezone.now()
        updated = self._queryset().filter(pk=booking.id).update(updated_at=now, **fields)
        if not updated:
            raise BookingNotFound(f"Booking {booking.id} not found", booking_id=booking.id)
        booking.updated_at = now
        return booking

    def delete(self, booking: Booking):
        deleted, _ = self._queryset().filter(pk=booking.id).delete()
        if not deleted:
            raise BookingNotFound(f"Booking {booking.id} not found", booking_id=booking.id)

    @staticmethod
    def to_domain(model: BookingModel) -> Booking:
        return Booking(
            id=model.pk,
            reference=model.booking_reference,
            user_id=model.user_id,
            package_id=model.package_id,
            participants=model.participants,
            total_price=Money(model.total_price, model.currency),
            special_requests=model.special_requests,
            status=model.status,
            payment_status=model.payment_status,
            booking_date=model.booking_date,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
