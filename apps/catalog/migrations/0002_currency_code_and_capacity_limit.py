import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("catalog", "0001_initial"),
    ]

    operations = [
        migrations.AlterField(
            model_name="destination",
            name="currency",
            field=models.CharField(
                default="USD",
                max_length=3,
                validators=[
                    django.core.validators.RegexValidator(
                        message="Currency must be a three-letter ISO 4217 code.",
                        regex="^[A-Z]{3}$",
                    )
                ],
            ),
        ),
        migrations.AlterField(
            model_name="travelpackage",
            name="currency",
            field=models.CharField(
                default="USD",
                max_length=3,
                validators=[
                    django.core.validators.RegexValidator(
                        message="Currency must be a three-letter ISO 4217 code.",
                        regex="^[A-Z]{3}$",
                    )
                ],
            ),
        ),
        migrations.AlterField(
            model_name="travelpackage",
            name="max_participants",
            field=models.PositiveIntegerField(
                validators=[
                    django.core.validators.MinValueValidator(1),
                    django.core.validators.MaxValueValidator(1000),
                ],
            ),
        ),
        migrations.AddConstraint(
            model_name="travelpackage",
            constraint=models.CheckConstraint(
                condition=models.Q(("max_participants__lte", 1000)),
                name="package_capacity_limit",
            ),
        ),
    ]
