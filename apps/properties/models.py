"""Property domain models for the Tropicana Hotels platform.

A business unit is one hotel property of the group. Each unit sells
categories of rooms (room types) at a nightly base rate; taxes and service
fees are configured per unit as percentages of the room subtotal.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.text import slugify  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

PERCENT_VALIDATORS = [MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))]


class BusinessUnitQuerySet(models.QuerySet):
    def bookable(self):
        return self.filter(is_active=True)

    def public(self):
        return self.filter(is_active=True, is_published=True)


class BusinessUnit(models.Model):
    """Hotel property of the group."""

    class PropertyType(models.TextChoices):
        HOTEL = "hotel", _("Hotel")
        RESORT = "resort", _("Resort")
        VILLA = "villa", _("Villa")
        APARTMENT = "apartment", _("Serviced apartment")
        BOUTIQUE = "boutique", _("Boutique hotel")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=150)
    display_name = models.CharField(max_length=200)
    slug = models.SlugField(max_length=160, unique=True)
    description = models.TextField(blank=True)
    short_description = models.CharField(max_length=300, blank=True)
    property_type = models.CharField(
        max_length=20,
        choices=PropertyType.choices,
        default=PropertyType.HOTEL,
    )
    address = models.CharField(max_length=300, blank=True)
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100, blank=True)
    country = models.CharField(max_length=100, default="Philippines")
    primary_currency = models.CharField(max_length=3, default="PHP")
    tax_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        validators=PERCENT_VALIDATORS,
        help_text=_("Government tax, percent of the room subtotal."),
    )
    service_fee_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        validators=PERCENT_VALIDATORS,
        help_text=_("Service fee, percent of the room subtotal."),
    )
    is_active = models.BooleanField(default=True)
    is_published = models.BooleanField(default=True)
    sort_order = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = BusinessUnitQuerySet.as_manager()

    class Meta:
        verbose_name = _("Business unit")
        verbose_name_plural = _("Business units")
        ordering = ["sort_order", "name"]

    def __str__(self) -> str:
        return self.display_name or self.name

    def save(self, *args, **kwargs):  # type: ignore
        if not self.slug:
            self.slug = slugify(self.name)[:160]
        if not self.display_name:
            self.display_name = self.name
        super().save(*args, **kwargs)


class RoomTypeQuerySet(models.QuerySet):
    def bookable(self):
        return self.filter(is_active=True, business_unit__is_active=True)


class RoomType(models.Model):
    """Category of rooms sold by a business unit (not a physical room)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    business_unit = models.ForeignKey(
        BusinessUnit,
        on_delete=models.CASCADE,
        related_name="room_types",
    )
    name = models.CharField(max_length=120)
    display_name = models.CharField(max_length=150, blank=True)
    description = models.TextField(blank=True)
    base_rate = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
        help_text=_("Nightly rate in the unit's primary currency."),
    )
    max_occupancy = models.PositiveSmallIntegerField(default=2)
    max_adults = models.PositiveSmallIntegerField(default=2)
    max_children = models.PositiveSmallIntegerField(default=0)
    is_active = models.BooleanField(default=True)
    sort_order = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = RoomTypeQuerySet.as_manager()

    class Meta:
        verbose_name = _("Room type")
        verbose_name_plural = _("Room types")
        ordering = ["business_unit", "sort_order", "name"]
        constraints = [
            models.UniqueConstraint(
                fields=["business_unit", "name"],
                name="room_type_unique_name_per_unit",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.display_name or self.name} ({self.business_unit})"
