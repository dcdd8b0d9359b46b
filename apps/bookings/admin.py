"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Guest, Reservation, ReservationRoom


class ReservationRoomInline(admin.TabularInline):
    model = ReservationRoom
    extra = 0
    fields = ("room_type", "base_rate", "nights", "adults", "children", "total_amount")
    readonly_fields = fields


@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    list_display = (
        "confirmation_number",
        "business_unit",
        "guest",
        "status",
        "payment_status",
        "check_in_date",
        "check_out_date",
        "total_amount",
        "created_at",
    )
    list_filter = ("status", "payment_status", "source", "business_unit", "check_in_date")
    search_fields = ("confirmation_number", "guest__email", "guest__last_name")
    readonly_fields = (
        "confirmation_number",
        "subtotal",
        "taxes",
        "service_fee",
        "total_amount",
        "payment_intent_id",
        "cancelled_at",
        "created_at",
        "updated_at",
    )
    inlines = [ReservationRoomInline]


@admin.register(Guest)
class GuestAdmin(admin.ModelAdmin):
    list_display = ("last_name", "first_name", "email", "phone", "business_unit", "source", "vip_status", "created_at")
    list_filter = ("source", "vip_status", "business_unit")
    search_fields = ("first_name", "last_name", "email", "phone")
