"""FilterSet definitions for the hotel catalogue."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import BusinessUnit, RoomType


class BusinessUnitFilterSet(django_filters.FilterSet):
    city = django_filters.CharFilter(field_name="city", lookup_expr="icontains")
    country = django_filters.CharFilter(field_name="country", lookup_expr="iexact")

    class Meta:
        model = BusinessUnit
        fields = ["city", "country", "property_type", "is_active"]


class RoomTypeFilterSet(django_filters.FilterSet):
    """Room types of one unit, optionally only those fitting a party size."""

    guests = django_filters.NumberFilter(field_name="max_occupancy", lookup_expr="gte")
    rate_max = django_filters.NumberFilter(field_name="base_rate", lookup_expr="lte")

    class Meta:
        model = RoomType
        fields = ["business_unit", "is_active"]
