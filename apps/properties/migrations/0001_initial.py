import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="BusinessUnit",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=150)),
                ("display_name", models.CharField(max_length=200)),
                ("slug", models.SlugField(max_length=160, unique=True)),
                ("description", models.TextField(blank=True)),
                ("short_description", models.CharField(blank=True, max_length=300)),
                (
                    "property_type",
                    models.CharField(
                        choices=[
                            ("hotel", "Hotel"),
                            ("resort", "Resort"),
                            ("villa", "Villa"),
                            ("apartment", "Serviced apartment"),
                            ("boutique", "Boutique hotel"),
                        ],
                        default="hotel",
                        max_length=20,
                    ),
                ),
                ("address", models.CharField(blank=True, max_length=300)),
                ("city", models.CharField(max_length=100)),
                ("state", models.CharField(blank=True, max_length=100)),
                ("country", models.CharField(default="Philippines", max_length=100)),
                ("primary_currency", models.CharField(default="PHP", max_length=3)),
                (
                    "tax_rate",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Government tax, percent of the room subtotal.",
                        max_digits=5,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0")),
                            django.core.validators.MaxValueValidator(Decimal("100")),
                        ],
                    ),
                ),
                (
                    "service_fee_rate",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Service fee, percent of the room subtotal.",
                        max_digits=5,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0")),
                            django.core.validators.MaxValueValidator(Decimal("100")),
                        ],
                    ),
                ),
                ("is_active", models.BooleanField(default=True)),
                ("is_published", models.BooleanField(default=True)),
                ("sort_order", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Business unit",
                "verbose_name_plural": "Business units",
                "ordering": ["sort_order", "name"],
            },
        ),
        migrations.CreateModel(
            name="RoomType",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=120)),
                ("display_name", models.CharField(blank=True, max_length=150)),
                ("description", models.TextField(blank=True)),
                (
                    "base_rate",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Nightly rate in the unit's primary currency.",
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                    ),
                ),
                ("max_occupancy", models.PositiveSmallIntegerField(default=2)),
                ("max_adults", models.PositiveSmallIntegerField(default=2)),
                ("max_children", models.PositiveSmallIntegerField(default=0)),
                ("is_active", models.BooleanField(default=True)),
                ("sort_order", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "business_unit",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="room_types",
                        to="properties.businessunit",
                    ),
                ),
            ],
            options={
                "verbose_name": "Room type",
                "verbose_name_plural": "Room types",
                "ordering": ["business_unit", "sort_order", "name"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("business_unit", "name"),
                        name="room_type_unique_name_per_unit",
                    )
                ],
            },
        ),
    ]
