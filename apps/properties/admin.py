"""Admin registrations for properties domain."""

from __future__ import annotations

from django.contrib import admin

from .models import BusinessUnit, RoomType


class RoomTypeInline(admin.TabularInline):
    model = RoomType
    extra = 0
    fields = ("name", "base_rate", "max_occupancy", "max_adults", "max_children", "is_active")


@admin.register(BusinessUnit)
class BusinessUnitAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "city",
        "property_type",
        "primary_currency",
        "tax_rate",
        "service_fee_rate",
        "is_active",
        "is_published",
    )
    list_filter = ("property_type", "is_active", "is_published", "country")
    search_fields = ("name", "display_name", "city", "slug")
    prepopulated_fields = {"slug": ("name",)}
    readonly_fields = ("created_at", "updated_at")
    inlines = [RoomTypeInline]


@admin.register(RoomType)
class RoomTypeAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "business_unit",
        "base_rate",
        "max_occupancy",
        "max_adults",
        "max_children",
        "is_active",
    )
    list_filter = ("is_active", "business_unit")
    search_fields = ("name", "display_name", "business_unit__name")
    readonly_fields = ("created_at", "updated_at")
