"""Celery tasks for the booking domain."""

from __future__ import annotations

import structlog
from celery import shared_task  # type: ignore
from django.utils import timezone  # type: ignore

from shared.domain.exceptions import DomainError

from .application.command_handlers import update_booking_status
from .domain.entities import BookingStatus
from .models import Booking

logger = structlog.get_logger(__name__)


# ============================================================================
# PERIODIC TASKS (run by Celery Beat)
# ============================================================================

@shared_task(name="bookings.complete_finished_bookings")
def complete_finished_bookings() -> dict[str, int]:
    """
    Complete bookings whose trip is over.

    CONFIRMED bookings on packages whose end_date is before today move to
    COMPLETED through the lifecycle handlers, so each change is audited like
    any other status change.

    Runs hourly.

    Returns:
        dict: {"completed": number of completed bookings, "failed": number of failures}
    """
    today = timezone.localdate()
    completed_count = 0
    failed_count = 0

    booking_ids = list(
        Booking.objects.filter(
            status=BookingStatus.CONFIRMED.value,
            package__end_date__lt=today,
        ).values_list("id", flat=True)
    )

    for booking_id in booking_ids:
        try:
            update_booking_status(booking_id, BookingStatus.COMPLETED)
        except DomainError as exc:
            # Cancelled or deleted since it was selected
            failed_count += 1
            logger.warning("booking_completion_skipped", booking_id=booking_id, error=exc.message)
            continue
        completed_count += 1

    if completed_count:
        logger.info("bookings_completed", completed=completed_count)

    return {"completed": completed_count, "failed": failed_count}
