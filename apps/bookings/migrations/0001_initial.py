import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("catalog", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("participants", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                (
                    "total_price",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Package unit price x participants, fixed when the participant count is set.",
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.01"))],
                    ),
                ),
                ("currency", models.CharField(default="USD", max_length=3)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending"),
                            ("CONFIRMED", "Confirmed"),
                            ("CANCELLED", "Cancelled"),
                            ("COMPLETED", "Completed"),
                        ],
                        default="PENDING",
                        max_length=20,
                    ),
                ),
                (
                    "payment_status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending"),
                            ("PAID", "Paid"),
                            ("REFUNDED", "Refunded"),
                            ("FAILED", "Failed"),
                        ],
                        default="PENDING",
                        max_length=20,
                    ),
                ),
                ("special_requests", models.TextField(blank=True)),
                ("booking_reference", models.CharField(editable=False, max_length=32, unique=True)),
                ("booking_date", models.DateTimeField(default=django.utils.timezone.now)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "package",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="bookings",
                        to="catalog.travelpackage",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bookings",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Booking",
                "verbose_name_plural": "Bookings",
                "ordering": ["-booking_date", "-id"],
                "indexes": [
                    models.Index(fields=["package", "status"], name="booking_package_status_idx"),
                    models.Index(fields=["user", "status"], name="booking_user_status_idx"),
                    models.Index(fields=["payment_status"], name="booking_payment_status_idx"),
                    models.Index(fields=["booking_date"], name="booking_date_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("participants__gt", 0)),
                        name="booking_positive_participants",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("total_price__gt", 0)),
                        name="booking_positive_price",
                    ),
                ],
            },
        ),
    ]
