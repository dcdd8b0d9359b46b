"""Serializers for the finance domain (payments)."""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers  # type: ignore

from .models import CheckoutSession, Payment, PaymentLineItem, PaymentTransaction


class PaymentTransactionSerializer(serializers.ModelSerializer):
    class Meta:
        model = PaymentTransaction
        fields = ["id", "event", "event_id", "status", "created_at"]
        read_only_fields = fields


class PaymentLineItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = PaymentLineItem
        fields = [
            "id",
            "item_type",
            "item_id",
            "item_name",
            "description",
            "unit_price",
            "quantity",
            "total_amount",
            "tax_amount",
            "valid_from",
            "valid_to",
        ]
        read_only_fields = fields


class CheckoutSessionSerializer(serializers.ModelSerializer):
    class Meta:
        model = CheckoutSession
        fields = [
            "id",
            "session_id",
            "url",
            "currency",
            "status",
            "expires_at",
            "completed_at",
            "created_at",
        ]
        read_only_fields = fields


class PaymentSerializer(serializers.ModelSerializer):
    """Staff view of a payment with its line items and checkout sessions."""

    confirmation_number = serializers.CharField(
        source="reservation.confirmation_number",
        read_only=True,
    )
    business_unit = serializers.UUIDField(source="reservation.business_unit_id", read_only=True)
    line_items = PaymentLineItemSerializer(many=True, read_only=True)
    checkout_sessions = CheckoutSessionSerializer(many=True, read_only=True)
    transactions = PaymentTransactionSerializer(many=True, read_only=True)

    class Meta:
        model = Payment
        fields = [
            "id",
            "reservation",
            "confirmation_number",
            "business_unit",
            "amount",
            "currency",
            "method",
            "status",
            "provider",
            "provider_payment_id",
            "room_total",
            "taxes_total",
            "fees_total",
            "guest_name",
            "guest_email",
            "guest_phone",
            "is_deposit_payment",
            "failure_code",
            "failure_message",
            "refunded_amount",
            "refund_reason",
            "refunded_at",
            "processed_at",
            "notes",
            "internal_notes",
            "created_at",
            "updated_at",
            "line_items",
            "checkout_sessions",
            "transactions",
        ]
        read_only_fields = fields


class PaymentStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Payment.Status.choices)
    notes = serializers.CharField(max_length=2000, required=False, allow_blank=True)


class PaymentRefundSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=255)
    amount = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        required=False,
        min_value=Decimal("0.01"),
    )
