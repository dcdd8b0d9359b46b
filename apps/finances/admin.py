"""Admin registrations for payments."""

from __future__ import annotations

from django.contrib import admin

from .models import CheckoutSession, Payment, PaymentLineItem, PaymentTransaction


class PaymentLineItemInline(admin.TabularInline):
    model = PaymentLineItem
    extra = 0
    fields = ("item_type", "item_name", "unit_price", "quantity", "total_amount")
    readonly_fields = fields


class CheckoutSessionInline(admin.TabularInline):
    model = CheckoutSession
    extra = 0
    fields = ("session_id", "status", "expires_at", "completed_at")
    readonly_fields = fields


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "reservation",
        "amount",
        "currency",
        "method",
        "status",
        "provider",
        "processed_at",
        "created_at",
    )
    list_filter = ("status", "method", "provider")
    search_fields = ("reservation__confirmation_number", "guest_email", "provider_payment_id")
    readonly_fields = ("created_at", "updated_at", "processed_at", "refunded_at", "provider_metadata")
    inlines = [PaymentLineItemInline, CheckoutSessionInline]


@admin.register(PaymentTransaction)
class PaymentTransactionAdmin(admin.ModelAdmin):
    list_display = ("event", "event_id", "payment", "status", "created_at")
    list_filter = ("event", "status")
    search_fields = ("event_id",)
    readonly_fields = ("payment", "event", "event_id", "payload", "status", "created_at")
