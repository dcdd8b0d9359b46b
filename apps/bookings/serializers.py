"""Serializers for the booking domain."""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers  # type: ignore

from .models import Guest, Reservation, ReservationRoom
from .services import BookingRequest


def flatten_errors(errors, prefix: str = "") -> list[str]:
    """Turn DRF error dicts into ``"field: message"`` strings."""

    messages: list[str] = []
    if isinstance(errors, dict):
        for field, value in errors.items():
            name = f"{prefix}.{field}" if prefix else str(field)
            messages.extend(flatten_errors(value, name))
    elif isinstance(errors, (list, tuple)):
        for value in errors:
            messages.extend(flatten_errors(value, prefix))
    else:
        messages.append(f"{prefix}: {errors}" if prefix else str(errors))
    return messages


class PriceQuerySerializer(serializers.Serializer):
    business_unit_id = serializers.UUIDField()
    room_type_id = serializers.UUIDField()
    check_in_date = serializers.DateTimeField()
    check_out_date = serializers.DateTimeField()


class BookingCreateSerializer(serializers.Serializer):
    """Booking funnel request: guest details, stay and client-side price."""

    first_name = serializers.CharField(max_length=100)
    last_name = serializers.CharField(max_length=100)
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=40, required=False, allow_blank=True, default="")
    check_in_date = serializers.DateTimeField()
    check_out_date = serializers.DateTimeField()
    adults = serializers.IntegerField(min_value=1)
    children = serializers.IntegerField(min_value=0)
    nights = serializers.IntegerField(min_value=1)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.01"))
    business_unit_id = serializers.UUIDField()
    room_type_id = serializers.UUIDField()
    special_requests = serializers.CharField(required=False, allow_blank=True, default="")
    guest_notes = serializers.CharField(required=False, allow_blank=True, default="")

    def to_booking_request(self) -> BookingRequest:
        return BookingRequest(**self.validated_data)


class ReservationRoomSerializer(serializers.ModelSerializer):
    room_type_name = serializers.ReadOnlyField(source="room_type.name")

    class Meta:
        model = ReservationRoom
        fields = [
            "id",
            "room_type",
            "room_type_name",
            "base_rate",
            "nights",
            "adults",
            "children",
            "room_subtotal",
            "total_amount",
        ]
        read_only_fields = fields


class GuestSerializer(serializers.ModelSerializer):
    full_name = serializers.ReadOnlyField()

    class Meta:
        model = Guest
        fields = [
            "id",
            "business_unit",
            "first_name",
            "last_name",
            "full_name",
            "email",
            "phone",
            "source",
            "vip_status",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "full_name", "created_at", "updated_at"]


class ReservationSerializer(serializers.ModelSerializer):
    """Staff view of a reservation."""

    business_unit_name = serializers.ReadOnlyField(source="business_unit.name")
    guest = GuestSerializer(read_only=True)
    rooms = ReservationRoomSerializer(many=True, read_only=True)

    class Meta:
        model = Reservation
        fields = [
            "id",
            "confirmation_number",
            "business_unit",
            "business_unit_name",
            "guest",
            "check_in_date",
            "check_out_date",
            "adults",
            "children",
            "nights",
            "subtotal",
            "taxes",
            "service_fee",
            "total_amount",
            "currency",
            "status",
            "payment_status",
            "source",
            "payment_provider",
            "payment_intent_id",
            "special_requests",
            "guest_notes",
            "internal_notes",
            "cancellation_reason",
            "cancelled_at",
            "rooms",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ReservationLookupSerializer(serializers.ModelSerializer):
    """Guest-facing summary shown on the booking result page."""

    business_unit_name = serializers.ReadOnlyField(source="business_unit.display_name")
    guest_name = serializers.ReadOnlyField(source="guest.full_name")
    rooms = ReservationRoomSerializer(many=True, read_only=True)

    class Meta:
        model = Reservation
        fields = [
            "confirmation_number",
            "business_unit_name",
            "guest_name",
            "check_in_date",
            "check_out_date",
            "adults",
            "children",
            "nights",
            "subtotal",
            "taxes",
            "service_fee",
            "total_amount",
            "currency",
            "status",
            "payment_status",
            "rooms",
        ]
        read_only_fields = fields


class ReservationCancelSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")


class ReservationStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Reservation.Status.choices)
    internal_notes = serializers.CharField(required=False, allow_blank=True)
