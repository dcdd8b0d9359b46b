"""Booking domain models for the Tropicana Hotels platform."""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Guest(models.Model):
    """Guest profile, one per (business unit, email)."""

    class Source(models.TextChoices):
        WEBSITE = "WEBSITE", _("Website")
        WALK_IN = "WALK_IN", _("Walk-in")
        PHONE = "PHONE", _("Phone")
        EMAIL = "EMAIL", _("Email")
        TRAVEL_AGENT = "TRAVEL_AGENT", _("Travel agent")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    business_unit = models.ForeignKey(
        "properties.BusinessUnit",
        on_delete=models.CASCADE,
        related_name="guests",
    )
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    email = models.EmailField()
    phone = models.CharField(max_length=40, blank=True)
    source = models.CharField(max_length=20, choices=Source.choices, default=Source.WEBSITE)
    vip_status = models.BooleanField(default=False)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Guest")
        verbose_name_plural = _("Guests")
        ordering = ["last_name", "first_name"]
        constraints = [
            models.UniqueConstraint(
                fields=["business_unit", "email"],
                name="guest_unique_email_per_unit",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.full_name} <{self.email}>"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Reservation(models.Model):
    """Guest booking at a business unit."""

    class Status(models.TextChoices):
        PENDING = "PENDING", _("Pending")
        CONFIRMED = "CONFIRMED", _("Confirmed")
        CHECKED_IN = "CHECKED_IN", _("Checked in")
        CHECKED_OUT = "CHECKED_OUT", _("Checked out")
        CANCELLED = "CANCELLED", _("Cancelled")
        NO_SHOW = "NO_SHOW", _("No show")

    class PaymentStatus(models.TextChoices):
        PENDING = "PENDING", _("Pending")
        AWAITING_PAYMENT_METHOD = "AWAITING_PAYMENT_METHOD", _("Awaiting payment method")
        PAID = "PAID", _("Paid")
        FAILED = "FAILED", _("Failed")
        REFUNDED = "REFUNDED", _("Refunded")

    class Source(models.TextChoices):
        WEBSITE = "WEBSITE", _("Website")
        WALK_IN = "WALK_IN", _("Walk-in")
        PHONE = "PHONE", _("Phone")
        EMAIL = "EMAIL", _("Email")
        TRAVEL_AGENT = "TRAVEL_AGENT", _("Travel agent")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    business_unit = models.ForeignKey(
        "properties.BusinessUnit",
        on_delete=models.PROTECT,
        related_name="reservations",
    )
    guest = models.ForeignKey(
        Guest,
        on_delete=models.PROTECT,
        related_name="reservations",
    )
    confirmation_number = models.CharField(max_length=40, unique=True, editable=False)
    check_in_date = models.DateTimeField()
    check_out_date = models.DateTimeField()
    adults = models.PositiveSmallIntegerField(default=1)
    children = models.PositiveSmallIntegerField(default=0)
    nights = models.PositiveSmallIntegerField(default=1)
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    taxes = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    service_fee = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=3, default="PHP")
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    payment_status = models.CharField(
        max_length=32,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    source = models.CharField(max_length=20, choices=Source.choices, default=Source.WEBSITE)
    payment_provider = models.CharField(max_length=30, blank=True)
    payment_intent_id = models.CharField(
        max_length=64,
        blank=True,
        help_text=_("Identifier of the payment record opened for this reservation."),
    )
    special_requests = models.TextField(blank=True)
    guest_notes = models.TextField(blank=True)
    internal_notes = models.TextField(blank=True)
    cancellation_reason = models.CharField(max_length=255, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Reservation")
        verbose_name_plural = _("Reservations")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(check_out_date__gt=models.F("check_in_date")),
                name="reservation_valid_dates",
            ),
        ]
        indexes = [
            models.Index(fields=["business_unit", "check_in_date"], name="reservation_unit_checkin_idx"),
            models.Index(fields=["status"], name="reservation_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Reservation {self.confirmation_number} ({self.status})"

    def confirm(self) -> None:
        self.status = self.Status.CONFIRMED
        self.save(update_fields=["status", "updated_at"])

    def cancel(self, reason: str = "") -> None:
        self.status = self.Status.CANCELLED
        self.cancellation_reason = reason[:255]
        self.cancelled_at = timezone.now()
        self.save(update_fields=["status", "cancellation_reason", "cancelled_at", "updated_at"])

    def mark_paid(self) -> None:
        self.payment_status = self.PaymentStatus.PAID
        if self.status == self.Status.PENDING:
            self.status = self.Status.CONFIRMED
        self.save(update_fields=["payment_status", "status", "updated_at"])


class ReservationRoom(models.Model):
    """Room type booked within a reservation, priced at booking time."""

    reservation = models.ForeignKey(
        Reservation,
        on_delete=models.CASCADE,
        related_name="rooms",
    )
    room_type = models.ForeignKey(
        "properties.RoomType",
        on_delete=models.PROTECT,
        related_name="reservation_rooms",
    )
    base_rate = models.DecimalField(max_digits=10, decimal_places=2)
    nights = models.PositiveSmallIntegerField()
    adults = models.PositiveSmallIntegerField(default=1)
    children = models.PositiveSmallIntegerField(default=0)
    room_subtotal = models.DecimalField(max_digits=12, decimal_places=2)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Reservation room")
        verbose_name_plural = _("Reservation rooms")
        ordering = ["created_at"]

    def __str__(self) -> str:
        return f"{self.room_type} x {self.nights} nights"
