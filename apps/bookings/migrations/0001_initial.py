import uuid
from decimal import Decimal

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("properties", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Guest",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("first_name", models.CharField(max_length=100)),
                ("last_name", models.CharField(max_length=100)),
                ("email", models.EmailField(max_length=254)),
                ("phone", models.CharField(blank=True, max_length=40)),
                (
                    "source",
                    models.CharField(
                        choices=[
                            ("WEBSITE", "Website"),
                            ("WALK_IN", "Walk-in"),
                            ("PHONE", "Phone"),
                            ("EMAIL", "Email"),
                            ("TRAVEL_AGENT", "Travel agent"),
                        ],
                        default="WEBSITE",
                        max_length=20,
                    ),
                ),
                ("notes", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "business_unit",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="guests",
                        to="properties.businessunit",
                    ),
                ),
            ],
            options={
                "verbose_name": "Guest",
                "verbose_name_plural": "Guests",
                "ordering": ["last_name", "first_name"],
                "constraints": [
                    models.UniqueConstraint(fields=("business_unit", "email"), name="guest_unique_email_per_unit"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Reservation",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("confirmation_number", models.CharField(editable=False, max_length=40, unique=True)),
                ("check_in_date", models.DateTimeField()),
                ("check_out_date", models.DateTimeField()),
                ("adults", models.PositiveSmallIntegerField(default=1)),
                ("children", models.PositiveSmallIntegerField(default=0)),
                ("nights", models.PositiveSmallIntegerField(default=1)),
                ("subtotal", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("taxes", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("service_fee", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("total_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("currency", models.CharField(default="PHP", max_length=3)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending"),
                            ("CONFIRMED", "Confirmed"),
                            ("CHECKED_IN", "Checked in"),
                            ("CHECKED_OUT", "Checked out"),
                            ("CANCELLED", "Cancelled"),
                            ("NO_SHOW", "No show"),
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
                            ("AWAITING_PAYMENT_METHOD", "Awaiting payment method"),
                            ("PAID", "Paid"),
                            ("FAILED", "Failed"),
                            ("REFUNDED", "Refunded"),
                        ],
                        default="PENDING",
                        max_length=32,
                    ),
                ),
                (
                    "source",
                    models.CharField(
                        choices=[
                            ("WEBSITE", "Website"),
                            ("WALK_IN", "Walk-in"),
                            ("PHONE", "Phone"),
                            ("EMAIL", "Email"),
                            ("TRAVEL_AGENT", "Travel agent"),
                        ],
                        default="WEBSITE",
                        max_length=20,
                    ),
                ),
                ("payment_provider", models.CharField(blank=True, max_length=30)),
                (
                    "payment_intent_id",
                    models.CharField(
                        blank=True,
                        help_text="Identifier of the payment record opened for this reservation.",
                        max_length=64,
                    ),
                ),
                ("special_requests", models.TextField(blank=True)),
                ("guest_notes", models.TextField(blank=True)),
                ("internal_notes", models.TextField(blank=True)),
                ("cancellation_reason", models.CharField(blank=True, max_length=255)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "business_unit",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="reservations",
                        to="properties.businessunit",
                    ),
                ),
                (
                    "guest",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="reservations",
                        to="bookings.guest",
                    ),
                ),
            ],
            options={
                "verbose_name": "Reservation",
                "verbose_name_plural": "Reservations",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["business_unit", "check_in_date"], name="reservation_unit_checkin_idx"),
                    models.Index(fields=["status"], name="reservation_status_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("check_out_date__gt", models.F("check_in_date"))),
                        name="reservation_valid_dates",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ReservationRoom",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("base_rate", models.DecimalField(decimal_places=2, max_digits=10)),
                ("nights", models.PositiveSmallIntegerField()),
                ("adults", models.PositiveSmallIntegerField(default=1)),
                ("children", models.PositiveSmallIntegerField(default=0)),
                ("room_subtotal", models.DecimalField(decimal_places=2, max_digits=12)),
                ("total_amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "reservation",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="rooms",
                        to="bookings.reservation",
                    ),
                ),
                (
                    "room_type",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="reservation_rooms",
                        to="properties.roomtype",
                    ),
                ),
            ],
            options={
                "verbose_name": "Reservation room",
                "verbose_name_plural": "Reservation rooms",
                "ordering": ["created_at"],
            },
        ),
    ]
