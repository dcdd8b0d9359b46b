"""Serializers for the hotel catalogue."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import BusinessUnit, RoomType


class RoomTypeSerializer(serializers.ModelSerializer):
    class Meta:
        model = RoomType
        fields = [
            "id",
            "business_unit",
            "name",
            "display_name",
            "description",
            "base_rate",
            "max_occupancy",
            "max_adults",
            "max_children",
            "is_active",
            "sort_order",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate(self, attrs):  # type: ignore
        max_occupancy = attrs.get("max_occupancy", getattr(self.instance, "max_occupancy", None))
        max_adults = attrs.get("max_adults", getattr(self.instance, "max_adults", None))
        if max_occupancy is not None and max_adults is not None and max_adults > max_occupancy:
            raise serializers.ValidationError(
                {"max_adults": "Cannot exceed the maximum occupancy of the room type."}
            )
        return attrs


class BusinessUnitSerializer(serializers.ModelSerializer):
    """Hotel property with its active room types."""

    room_types = serializers.SerializerMethodField()

    class Meta:
        model = BusinessUnit
        fields = [
            "id",
            "name",
            "display_name",
            "slug",
            "description",
            "short_description",
            "property_type",
            "address",
            "city",
            "state",
            "country",
            "primary_currency",
            "tax_rate",
            "service_fee_rate",
            "is_active",
            "is_published",
            "sort_order",
            "room_types",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "room_types", "created_at", "updated_at"]
        extra_kwargs = {
            "slug": {"required": False},
            "display_name": {"required": False},
        }

    def get_room_types(self, obj: BusinessUnit):  # type: ignore
        room_types = [room_type for room_type in obj.room_types.all() if room_type.is_active]
        return RoomTypeSerializer(room_types, many=True).data
