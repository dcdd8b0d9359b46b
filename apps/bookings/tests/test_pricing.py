"""Tests for server-side pricing and the price calculation endpoint."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal

import pytest
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.pricing import PricingError, count_nights, quote_stay
from apps.properties.models import BusinessUnit, RoomType


def _unit(tax_rate=None, service_fee_rate=None, currency="PHP"):
    return BusinessUnit(
        name="Dolores Tropicana Resort",
        tax_rate=tax_rate,
        service_fee_rate=service_fee_rate,
        primary_currency=currency,
    )


def test_count_nights_rounds_partial_days_up() -> None:
    check_in = datetime(2026, 12, 1, 14, 0, tzinfo=dt_timezone.utc)
    assert count_nights(check_in, check_in + timedelta(days=2)) == 2
    assert count_nights(check_in, check_in + timedelta(days=2, hours=1)) == 3
    assert count_nights(check_in, check_in) == 0


def test_quote_components_are_rounded_and_summed() -> None:
    room_type = RoomType(name="Deluxe", base_rate=Decimal("3333.33"))
    quote = quote_stay(_unit(Decimal("12.00"), Decimal("10.00")), room_type, 3)

    assert quote.subtotal == Decimal("9999.99")
    assert quote.taxes == Decimal("1200.00")
    assert quote.service_fee == Decimal("1000.00")
    assert quote.total_amount == quote.subtotal + quote.taxes + quote.service_fee
    assert quote.unit_price == Decimal("3333.33")


def test_quote_without_rates_has_no_taxes_or_fees() -> None:
    room_type = RoomType(name="Standard", base_rate=Decimal("2500.00"))
    quote = quote_stay(_unit(), room_type, 2)

    assert quote.taxes == Decimal("0.00")
    assert quote.service_fee == Decimal("0.00")
    assert quote.total_amount == Decimal("5000.00")
    assert quote.currency == "PHP"


def test_quote_rejects_empty_stay() -> None:
    room_type = RoomType(name="Standard", base_rate=Decimal("2500.00"))
    with pytest.raises(PricingError):
        quote_stay(_unit(), room_type, 0)


class PricingCalculateAPITests(APITestCase):
    def setUp(self) -> None:
        self.unit = BusinessUnit.objects.create(
            name="Dolores Lake Resort",
            city="Tanay",
            tax_rate=Decimal("12.00"),
            service_fee_rate=Decimal("5.00"),
        )
        self.room_type = RoomType.objects.create(
            business_unit=self.unit,
            name="Deluxe",
            base_rate=Decimal("4500.00"),
            max_occupancy=4,
        )
        self.url = reverse("pricing-calculate")
        self.check_in = datetime(2026, 12, 20, 14, 0, tzinfo=dt_timezone.utc)

    def _params(self, **overrides) -> dict[str, str]:
        params = {
            "business_unit_id": str(self.unit.id),
            "room_type_id": str(self.room_type.id),
            "check_in_date": self.check_in.isoformat(),
            "check_out_date": (self.check_in + timedelta(days=2)).isoformat(),
        }
        params.update(overrides)
        return params

    def test_calculates_price(self) -> None:
        response = self.client.get(self.url, self._params())

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(
            response.data,
            {
                "subtotal": "9000.00",
                "taxes": "1080.00",
                "service_fee": "450.00",
                "total_amount": "10530.00",
                "nights": 2,
                "currency": "PHP",
            },
        )

    def test_invalid_input(self) -> None:
        response = self.client.get(self.url, self._params(business_unit_id="not-a-uuid"))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {"error": "Invalid input data"})

    def test_unknown_business_unit(self) -> None:
        response = self.client.get(
            self.url,
            self._params(business_unit_id="00000000-0000-0000-0000-000000000000"),
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {"error": "Business unit not found"})

    def test_unknown_room_type(self) -> None:
        response = self.client.get(
            self.url,
            self._params(room_type_id="00000000-0000-0000-0000-000000000000"),
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {"error": "Room type not found"})

    def test_room_type_of_another_business_unit(self) -> None:
        other = BusinessUnit.objects.create(name="Dolores Farm Resort", city="Tanay")
        cabin = RoomType.objects.create(business_unit=other, name="Cabin", base_rate=Decimal("3000.00"))

        response = self.client.get(self.url, self._params(room_type_id=str(cabin.id)))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {"error": "Room type not found"})

    def test_check_out_before_check_in(self) -> None:
        response = self.client.get(
            self.url,
            self._params(check_out_date=(self.check_in - timedelta(days=1)).isoformat()),
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {"error": "Check-out date must be after check-in date"})
