import django.core.validators
import django.db.models.deletion
from decimal import Decimal
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Destination",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("country", models.CharField(max_length=100)),
                ("city", models.CharField(max_length=100)),
                ("description", models.TextField(blank=True)),
                ("image_url", models.URLField(blank=True, max_length=500)),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Indicative price shown in listings.",
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.01"))],
                    ),
                ),
                ("currency", models.CharField(default="USD", max_length=3)),
                ("best_time_to_visit", models.CharField(blank=True, max_length=255)),
                ("climate", models.CharField(blank=True, max_length=255)),
                ("popular_attractions", models.TextField(blank=True)),
                ("is_featured", models.BooleanField(default=False)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Destination",
                "verbose_name_plural": "Destinations",
                "ordering": ["name"],
                "indexes": [
                    models.Index(fields=["country", "city"], name="destination_location_idx"),
                    models.Index(fields=["is_active", "is_featured"], name="destination_listing_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="TravelPackage",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                ("start_date", models.DateField()),
                ("end_date", models.DateField()),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Unit price per participant.",
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.01"))],
                    ),
                ),
                ("currency", models.CharField(default="USD", max_length=3)),
                (
                    "max_participants",
                    models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)]),
                ),
                (
                    "package_type",
                    models.CharField(
                        choices=[
                            ("BUDGET", "Budget"),
                            ("STANDARD", "Standard"),
                            ("LUXURY", "Luxury"),
                            ("PREMIUM", "Premium"),
                        ],
                        default="STANDARD",
                        max_length=20,
                    ),
                ),
                ("includes", models.TextField(blank=True)),
                ("excludes", models.TextField(blank=True)),
                ("itinerary", models.TextField(blank=True)),
                ("is_featured", models.BooleanField(default=False)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "destination",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="packages",
                        to="catalog.destination",
                    ),
                ),
            ],
            options={
                "verbose_name": "Travel package",
                "verbose_name_plural": "Travel packages",
                "ordering": ["start_date", "name"],
                "indexes": [
                    models.Index(fields=["destination", "is_active"], name="package_destination_idx"),
                    models.Index(fields=["start_date"], name="package_start_date_idx"),
                    models.Index(fields=["package_type"], name="package_type_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("end_date__gte", models.F("start_date"))),
                        name="package_valid_dates",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("price__gt", 0)),
                        name="package_positive_price",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("max_participants__gt", 0)),
                        name="package_positive_capacity",
                    ),
                ],
            },
        ),
    ]
