import uuid
from decimal import Decimal

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("bookings", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Payment",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("currency", models.CharField(default="PHP", max_length=3)),
                (
                    "method",
                    models.CharField(
                        choices=[
                            ("CARD", "Card"),
                            ("GCASH", "GCash"),
                            ("PAYMAYA", "Maya"),
                            ("GRAB_PAY", "GrabPay"),
                            ("BILLEASE", "BillEase"),
                            ("ONLINE_BANKING", "Online banking"),
                            ("BANK_TRANSFER", "Bank transfer"),
                            ("CASH", "Cash"),
                        ],
                        default="CARD",
                        max_length=20,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending"),
                            ("PROCESSING", "Processing"),
                            ("PAID", "Paid"),
                            ("FAILED", "Failed"),
                            ("CANCELLED", "Cancelled"),
                            ("REFUNDED", "Refunded"),
                        ],
                        default="PENDING",
                        max_length=20,
                    ),
                ),
                (
                    "provider",
                    models.CharField(
                        choices=[("PAYMONGO", "PayMongo"), ("MANUAL", "Manual")],
                        default="PAYMONGO",
                        max_length=20,
                    ),
                ),
                (
                    "provider_payment_id",
                    models.CharField(
                        blank=True,
                        db_index=True,
                        help_text="Checkout session id issued by the provider.",
                        max_length=100,
                    ),
                ),
                ("room_total", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("taxes_total", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("fees_total", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("guest_name", models.CharField(blank=True, max_length=200)),
                ("guest_email", models.EmailField(blank=True, max_length=254)),
                ("guest_phone", models.CharField(blank=True, max_length=40)),
                ("is_deposit_payment", models.BooleanField(default=False)),
                ("provider_metadata", models.JSONField(blank=True, default=dict)),
                ("failure_code", models.CharField(blank=True, max_length=100)),
                ("failure_message", models.CharField(blank=True, max_length=500)),
                ("refunded_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("refund_reason", models.CharField(blank=True, max_length=255)),
                ("refunded_at", models.DateTimeField(blank=True, null=True)),
                ("processed_at", models.DateTimeField(blank=True, null=True)),
                ("notes", models.TextField(blank=True)),
                ("internal_notes", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "reservation",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="payments",
                        to="bookings.reservation",
                    ),
                ),
            ],
            options={
                "verbose_name": "Payment",
                "verbose_name_plural": "Payments",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="PaymentLineItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "item_type",
                    models.CharField(
                        choices=[
                            ("ROOM", "Room"),
                            ("TAX", "Tax"),
                            ("FEE", "Fee"),
                            ("ADDON", "Add-on"),
                            ("DISCOUNT", "Discount"),
                        ],
                        max_length=20,
                    ),
                ),
                ("item_id", models.CharField(blank=True, max_length=64)),
                ("item_name", models.CharField(max_length=200)),
                ("description", models.CharField(blank=True, max_length=500)),
                ("unit_price", models.DecimalField(decimal_places=2, max_digits=12)),
                ("quantity", models.PositiveIntegerField(default=1)),
                ("total_amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("tax_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("valid_from", models.DateTimeField(blank=True, null=True)),
                ("valid_to", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "payment",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="line_items",
                        to="finances.payment",
                    ),
                ),
            ],
            options={
                "verbose_name": "Payment line item",
                "verbose_name_plural": "Payment line items",
                "ordering": ["created_at", "id"],
            },
        ),
        migrations.CreateModel(
            name="CheckoutSession",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("session_id", models.CharField(max_length=100, unique=True)),
                ("url", models.URLField(max_length=500)),
                ("currency", models.CharField(default="PHP", max_length=3)),
                ("line_items", models.JSONField(blank=True, default=list)),
                ("success_url", models.URLField(blank=True, max_length=500)),
                ("cancel_url", models.URLField(blank=True, max_length=500)),
                ("customer_email", models.EmailField(blank=True, max_length=254)),
                ("billing_details", models.JSONField(blank=True, null=True)),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("completed", "Completed"), ("expired", "Expired")],
                        default="active",
                        max_length=20,
                    ),
                ),
                ("expires_at", models.DateTimeField(blank=True, null=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("metadata", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "payment",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="checkout_sessions",
                        to="finances.payment",
                    ),
                ),
            ],
            options={
                "verbose_name": "Checkout session",
                "verbose_name_plural": "Checkout sessions",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status", "expires_at"], name="checkout_status_expiry_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="PaymentTransaction",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("event", models.CharField(max_length=80)),
                ("event_id", models.CharField(blank=True, max_length=100, null=True, unique=True)),
                ("payload", models.JSONField(default=dict)),
                ("status", models.CharField(blank=True, max_length=20)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "payment",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="transactions",
                        to="finances.payment",
                    ),
                ),
            ],
            options={
                "verbose_name": "Payment transaction",
                "verbose_name_plural": "Payment transactions",
                "ordering": ["-created_at"],
            },
        ),
    ]
