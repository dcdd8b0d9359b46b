"""Financial domain models: payments, line items and checkout sessions."""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Payment(models.Model):
    """Payment collected (or expected) for a reservation."""

    class Status(models.TextChoices):
        PENDING = "PENDING", _("Pending")
        PROCESSING = "PROCESSING", _("Processing")
        PAID = "PAID", _("Paid")
        FAILED = "FAILED", _("Failed")
        CANCELLED = "CANCELLED", _("Cancelled")
        REFUNDED = "REFUNDED", _("Refunded")

    class Method(models.TextChoices):
        CARD = "CARD", _("Card")
        GCASH = "GCASH", _("GCash")
        PAYMAYA = "PAYMAYA", _("Maya")
        GRAB_PAY = "GRAB_PAY", _("GrabPay")
        BILLEASE = "BILLEASE", _("BillEase")
        ONLINE_BANKING = "ONLINE_BANKING", _("Online banking")
        BANK_TRANSFER = "BANK_TRANSFER", _("Bank transfer")
        CASH = "CASH", _("Cash")

    class Provider(models.TextChoices):
        PAYMONGO = "PAYMONGO", _("PayMongo")
        MANUAL = "MANUAL", _("Manual")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    reservation = models.ForeignKey(
        "bookings.Reservation",
        on_delete=models.CASCADE,
        related_name="payments",
    )
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=3, default="PHP")
    method = models.CharField(max_length=20, choices=Method.choices, default=Method.CARD)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    provider = models.CharField(max_length=20, choices=Provider.choices, default=Provider.PAYMONGO)
    provider_payment_id = models.CharField(
        max_length=100,
        blank=True,
        db_index=True,
        help_text=_("Checkout session id issued by the provider."),
    )
    room_total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    taxes_total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    fees_total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    guest_name = models.CharField(max_length=200, blank=True)
    guest_email = models.EmailField(blank=True)
    guest_phone = models.CharField(max_length=40, blank=True)
    is_deposit_payment = models.BooleanField(default=False)
    provider_metadata = models.JSONField(default=dict, blank=True)
    failure_code = models.CharField(max_length=100, blank=True)
    failure_message = models.CharField(max_length=500, blank=True)
    refunded_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    refund_reason = models.CharField(max_length=255, blank=True)
    refunded_at = models.DateTimeField(null=True, blank=True)
    processed_at = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True)
    internal_notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Payment")
        verbose_name_plural = _("Payments")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"Payment {self.id} for {self.reservation_id} ({self.status})"

    def mark_paid(self, *, method: str | None = None, metadata: dict | None = None) -> None:
        self.status = self.Status.PAID
        if method:
            self.method = method
        if metadata:
            self.provider_metadata = {**self.provider_metadata, **metadata}
        self.processed_at = timezone.now()
        self.save(update_fields=["status", "method", "provider_metadata", "processed_at", "updated_at"])

    def mark_failed(self, code: str = "", message: str = "") -> None:
        self.status = self.Status.FAILED
        self.failure_code = code[:100]
        self.failure_message = message[:500]
        self.save(update_fields=["status", "failure_code", "failure_message", "updated_at"])

    def mark_refunded(self, amount: Decimal | None = None, reason: str = "") -> None:
        self.status = self.Status.REFUNDED
        self.refunded_amount = self.amount if amount is None else amount
        self.refund_reason = reason[:255]
        self.refunded_at = timezone.now()
        self.save(
            update_fields=["status", "refunded_amount", "refund_reason", "refunded_at", "updated_at"]
        )


class PaymentLineItem(models.Model):
    """Priced row of a payment (room nights, tax, fee)."""

    class ItemType(models.TextChoices):
        ROOM = "ROOM", _("Room")
        TAX = "TAX", _("Tax")
        FEE = "FEE", _("Fee")
        ADDON = "ADDON", _("Add-on")
        DISCOUNT = "DISCOUNT", _("Discount")

    payment = models.ForeignKey(
        Payment,
        on_delete=models.CASCADE,
        related_name="line_items",
    )
    item_type = models.CharField(max_length=20, choices=ItemType.choices)
    item_id = models.CharField(max_length=64, blank=True)
    item_name = models.CharField(max_length=200)
    description = models.CharField(max_length=500, blank=True)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    quantity = models.PositiveIntegerField(default=1)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    tax_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    valid_from = models.DateTimeField(null=True, blank=True)
    valid_to = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Payment line item")
        verbose_name_plural = _("Payment line items")
        ordering = ["created_at", "id"]

    def __str__(self) -> str:
        return f"{self.item_type}: {self.item_name} ({self.total_amount})"


class CheckoutSession(models.Model):
    """Provider-hosted checkout page opened for a payment."""

    class Status(models.TextChoices):
        ACTIVE = "active", _("Active")
        COMPLETED = "completed", _("Completed")
        EXPIRED = "expired", _("Expired")

    payment = models.ForeignKey(
        Payment,
        on_delete=models.CASCADE,
        related_name="checkout_sessions",
    )
    session_id = models.CharField(max_length=100, unique=True)
    url = models.URLField(max_length=500)
    currency = models.CharField(max_length=3, default="PHP")
    line_items = models.JSONField(default=list, blank=True)
    success_url = models.URLField(max_length=500, blank=True)
    cancel_url = models.URLField(max_length=500, blank=True)
    customer_email = models.EmailField(blank=True)
    billing_details = models.JSONField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ACTIVE)
    expires_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Checkout session")
        verbose_name_plural = _("Checkout sessions")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "expires_at"], name="checkout_status_expiry_idx"),
        ]

    def __str__(self) -> str:
        return f"Checkout {self.session_id} ({self.status})"


class PaymentTransaction(models.Model):
    """Log of provider interactions (webhook deliveries, refunds)."""

    payment = models.ForeignKey(
        Payment,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="transactions",
    )
    event = models.CharField(max_length=80)
    event_id = models.CharField(max_length=100, unique=True, null=True, blank=True)
    payload = models.JSONField(default=dict)
    status = models.CharField(max_length=20, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Payment transaction")
        verbose_name_plural = _("Payment transactions")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.event} for payment {self.payment_id}"
