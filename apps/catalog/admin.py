"""Admin registrations for the catalog."""

from __future__ import annotations

from django.contrib import admin

from .models import Destination, TravelPackage


class TravelPackageInline(admin.TabularInline):
    model = TravelPackage
    extra = 0
    fields = ("name", "start_date", "end_date", "price", "currency", "max_participants", "is_active")
    show_change_link = True


@admin.register(Destination)
class DestinationAdmin(admin.ModelAdmin):
    list_display = ("name", "city", "country", "price", "currency", "is_featured", "is_active")
    list_filter = ("country", "is_featured", "is_active")
    search_fields = ("name", "city", "country")
    inlines = [TravelPackageInline]


@admin.register(TravelPackage)
class TravelPackageAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "destination",
        "package_type",
        "start_date",
        "end_date",
        "price",
        "currency",
        "max_participants",
        "is_featured",
        "is_active",
    )
    list_filter = ("package_type", "is_featured", "is_active", "destination__country")
    search_fields = ("name", "destination__name", "destination__country")
    list_select_related = ("destination",)
    date_hierarchy = "start_date"
