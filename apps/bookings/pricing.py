"""Server-side room pricing.

Prices are always recomputed from the database so that amounts sent by the
booking funnel are never trusted:

    subtotal     = base rate x nights
    taxes        = subtotal x tax rate / 100
    service fee  = subtotal x service fee rate / 100
    total        = subtotal + taxes + service fee

Each component is rounded half-up to centavos and the total is the sum of the
rounded components, so the parts stored on a reservation always add up.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

from django.conf import settings  # type: ignore

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from apps.properties.models import BusinessUnit, RoomType

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
SECONDS_PER_NIGHT = 24 * 60 * 60


class PricingError(ValueError):
    """Raised when a stay cannot be priced."""


def to_money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def count_nights(check_in: datetime, check_out: datetime) -> int:
    """Nights between two instants; partial days count as a full night."""

    seconds = (check_out - check_in).total_seconds()
    return math.ceil(seconds / SECONDS_PER_NIGHT)


def percent_of(amount: Decimal, rate) -> Decimal:
    if not rate:
        return ZERO
    return to_money(amount * Decimal(str(rate)) / Decimal("100"))


@dataclass(frozen=True)
class PriceQuote:
    nights: int
    base_rate: Decimal
    subtotal: Decimal
    taxes: Decimal
    service_fee: Decimal
    total_amount: Decimal
    currency: str

    @property
    def unit_price(self) -> Decimal:
        return to_money(self.subtotal / self.nights)

    def as_dict(self) -> dict[str, str | int]:
        return {
            "subtotal": str(self.subtotal),
            "taxes": str(self.taxes),
            "service_fee": str(self.service_fee),
            "total_amount": str(self.total_amount),
            "nights": self.nights,
            "currency": self.currency,
        }


def room_subtotal(base_rate, nights: int) -> Decimal:
    return to_money(Decimal(str(base_rate)) * nights)


def quote_stay(business_unit: "BusinessUnit", room_type: "RoomType", nights: int) -> PriceQuote:
    """Price `nights` nights of `room_type` at `business_unit`."""

    if nights <= 0:
        raise PricingError("Check-out date must be after check-in date")

    subtotal = room_subtotal(room_type.base_rate, nights)
    taxes = percent_of(subtotal, business_unit.tax_rate)
    service_fee = percent_of(subtotal, business_unit.service_fee_rate)
    return PriceQuote(
        nights=nights,
        base_rate=to_money(room_type.base_rate),
        subtotal=subtotal,
        taxes=taxes,
        service_fee=service_fee,
        total_amount=subtotal + taxes + service_fee,
        currency=business_unit.primary_currency or settings.BOOKING_DEFAULT_CURRENCY,
    )


def quote_dates(
    business_unit: "BusinessUnit",
    room_type: "RoomType",
    check_in: datetime,
    check_out: datetime,
) -> PriceQuote:
    return quote_stay(business_unit, room_type, count_nights(check_in, check_out))
