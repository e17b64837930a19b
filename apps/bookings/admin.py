"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "booking_reference",
        "package",
        "user",
        "participants",
        "status",
        "payment_status",
        "total_price",
        "currency",
        "booking_date",
    )
    list_filter = ("status", "payment_status", "currency", "booking_date")
    search_fields = ("booking_reference", "package__name", "user__username", "user__email")
    list_select_related = ("package", "user")
    # Status, participants and price change only through the command handlers
    readonly_fields = (
        "booking_reference",
        "user",
        "package",
        "participants",
        "total_price",
        "currency",
        "status",
        "payment_status",
        "booking_date",
        "created_at",
        "updated_at",
    )

    def has_add_permission(self, request):  # type: ignore
        return False
