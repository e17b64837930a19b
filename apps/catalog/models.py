"""Catalog models: destinations and the travel packages sold for them.

A package's committed capacity is never stored on the package row. It is the
sum of participants over the package's capacity-holding bookings, computed by
``TravelPackageQuerySet.with_capacity()``.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator, RegexValidator  # type: ignore
from django.db import models  # type: ignore
from django.db.models import F, Q, Sum, Value  # type: ignore
from django.db.models.functions import Coalesce, Greatest  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.bookings.domain.entities import CAPACITY_HOLDING_STATUSES

MAX_PACKAGE_PARTICIPANTS = 1000

CURRENCY_VALIDATOR = RegexValidator(
    regex=r"^[A-Z]{3}$",
    message=_("Currency must be a three-letter ISO 4217 code."),
)


class DestinationQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)

    def featured(self):
        return self.active().filter(is_featured=True)

    def in_price_range(self, min_price=None, max_price=None):
        qs = self.active()
        if min_price is not None:
            qs = qs.filter(price__gte=min_price)
        if max_price is not None:
            qs = qs.filter(price__lte=max_price)
        return qs

    def search(self, term: str):
        return self.active().filter(
            Q(name__icontains=term) | Q(country__icontains=term) | Q(city__icontains=term)
        )


class Destination(models.Model):
    """Travel destination (a city in a country) packages are sold for."""

    name = models.CharField(max_length=255)
    country = models.CharField(max_length=100)
    city = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    image_url = models.URLField(max_length=500, blank=True)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
        help_text=_("Indicative price shown in listings."),
    )
    currency = models.CharField(max_length=3, default="USD", validators=[CURRENCY_VALIDATOR])
    best_time_to_visit = models.CharField(max_length=255, blank=True)
    climate = models.CharField(max_length=255, blank=True)
    popular_attractions = models.TextField(blank=True)
    is_featured = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = DestinationQuerySet.as_manager()

    class Meta:
        verbose_name = _("Destination")
        verbose_name_plural = _("Destinations")
        ordering = ["name"]
        indexes = [
            models.Index(fields=["country", "city"], name="destination_location_idx"),
            models.Index(fields=["is_active", "is_featured"], name="destination_listing_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.city}, {self.country})"


class TravelPackageQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)

    def featured(self):
        return self.active().filter(is_featured=True)

    def with_capacity(self):
        """Annotate committed participants and the free seats left."""
        committed = Coalesce(
            Sum(
                "bookings__participants",
                filter=Q(bookings__status__in=[status.value for status in CAPACITY_HOLDING_STATUSES]),
            ),
            Value(0),
        )
        return self.annotate(committed_participants=committed).annotate(
            free_space=Greatest(F("max_participants") - F("committed_participants"), Value(0)),
        )

    def with_space(self):
        return self.active().with_capacity().filter(committed_participants__lt=F("max_participants"))

    def starting_from(self, start_date):
        return self.active().filter(start_date__gte=start_date)

    def in_price_range(self, min_price=None, max_price=None):
        qs = self.active()
        if min_price is not None:
            qs = qs.filter(price__gte=min_price)
        if max_price is not None:
            qs = qs.filter(price__lte=max_price)
        return qs

    def search(self, term: str):
        return self.active().filter(
            Q(name__icontains=term)
            | Q(destination__name__icontains=term)
            | Q(destination__country__icontains=term)
        )


class TravelPackage(models.Model):
    """Dated trip to a destination with a fixed participant capacity."""

    class PackageType(models.TextChoices):
        BUDGET = "BUDGET", _("Budget")
        STANDARD = "STANDARD", _("Standard")
        LUXURY = "LUXURY", _("Luxury")
        PREMIUM = "PREMIUM", _("Premium")

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    destination = models.ForeignKey(
        Destination,
        on_delete=models.PROTECT,
        related_name="packages",
    )
    start_date = models.DateField()
    end_date = models.DateField()
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
        help_text=_("Unit price per participant."),
    )
    currency = models.CharField(max_length=3, default="USD", validators=[CURRENCY_VALIDATOR])
    max_participants = models.PositiveIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(MAX_PACKAGE_PARTICIPANTS)],
    )
    package_type = models.CharField(
        max_length=20,
        choices=PackageType.choices,
        default=PackageType.STANDARD,
    )
    includes = models.TextField(blank=True)
    excludes = models.TextField(blank=True)
    itinerary = models.TextField(blank=True)
    is_featured = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TravelPackageQuerySet.as_manager()

    class Meta:
        verbose_name = _("Travel package")
        verbose_name_plural = _("Travel packages")
        ordering = ["start_date", "name"]
        constraints = [
            models.CheckConstraint(
                condition=Q(end_date__gte=F("start_date")),
                name="package_valid_dates",
            ),
            models.CheckConstraint(
                condition=Q(price__gt=0),
                name="package_positive_price",
            ),
            models.CheckConstraint(
                condition=Q(max_participants__gt=0),
                name="package_positive_capacity",
            ),
            models.CheckConstraint(
                condition=Q(max_participants__lte=MAX_PACKAGE_PARTICIPANTS),
                name="package_capacity_limit",
            ),
        ]
        indexes = [
            models.Index(fields=["destination", "is_active"], name="package_destination_idx"),
            models.Index(fields=["start_date"], name="package_start_date_idx"),
            models.Index(fields=["package_type"], name="package_type_idx"),
        ]

    def __str__(self) -> str:
        return self.name
