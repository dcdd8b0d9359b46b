"""FilterSet definitions for payments."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Payment


class PaymentFilterSet(django_filters.FilterSet):
    business_unit = django_filters.UUIDFilter(field_name="reservation__business_unit")

    class Meta:
        model = Payment
        fields = ["business_unit", "status", "method", "provider", "reservation"]
