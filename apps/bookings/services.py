"""Domain services for booking workflows."""

from __future__ import annotations

import logging
import secrets
import string
import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any

from django.conf import settings  # type: ignore
from django.db import transaction  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore
from django.utils import timezone  # type: ignore

from apps.finances import services as payment_services
from apps.finances.paymongo import PayMongoClient, PayMongoError, get_client
from apps.properties.models import BusinessUnit, RoomType

from .models import Guest, Reservation, ReservationRoom
from .pricing import PriceQuote, count_nights, quote_stay

logger = logging.getLogger(__name__)

BASE36_ALPHABET = string.digits + string.ascii_uppercase

PRICE_MISMATCH_DETAILS = "The price provided is invalid. Please refresh the page and try again."


class BookingError(Exception):
    """Booking request rejected; carries the API error body and HTTP status."""

    def __init__(self, error: str, details: str = "", status_code: int = 400):
        super().__init__(f"{error}: {details}" if details else error)
        self.error = error
        self.details = details
        self.status_code = status_code

    def as_dict(self) -> dict[str, str]:
        body = {"error": self.error}
        if self.details:
            body["details"] = self.details
        return body


@dataclass
class BookingRequest:
    first_name: str
    last_name: str
    email: str
    check_in_date: datetime
    check_out_date: datetime
    adults: int
    children: int
    nights: int
    subtotal: Decimal
    business_unit_id: Any
    room_type_id: Any
    phone: str = ""
    special_requests: str = ""
    guest_notes: str = ""


@dataclass
class BookingResult:
    reservation: Reservation
    checkout_url: str
    payment_session_id: str

    def as_dict(self) -> dict[str, str]:
        return {
            "reservation_id": str(self.reservation.id),
            "confirmation_number": self.reservation.confirmation_number,
            "checkout_url": self.checkout_url,
            "payment_session_id": self.payment_session_id,
        }


def _to_base36(value: int) -> str:
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(BASE36_ALPHABET[remainder])
    return "".join(reversed(digits)) or "0"


def generate_confirmation_number() -> str:
    """``RES-<epoch millis in base36>-<5 random base36 chars>``."""

    timestamp = _to_base36(int(time.time() * 1000))
    random_part = "".join(secrets.choice(BASE36_ALPHABET) for _ in range(5))
    return f"RES-{timestamp}-{random_part}"


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


# ============================================================================
# VALIDATION
# ============================================================================

def get_bookable_business_unit(business_unit_id) -> BusinessUnit:
    business_unit = BusinessUnit.objects.bookable().filter(pk=business_unit_id).first()
    if business_unit is None:
        raise BookingError("Invalid or inactive property", "The selected property is not available for booking.")
    return business_unit


def get_bookable_room_type(business_unit: BusinessUnit, room_type_id) -> RoomType:
    room_type = RoomType.objects.filter(
        pk=room_type_id,
        business_unit=business_unit,
        is_active=True,
    ).first()
    if room_type is None:
        raise BookingError("Invalid room type", "The selected room type is not available at this property.")
    return room_type


def check_occupancy(room_type: RoomType, adults: int, children: int) -> None:
    if adults + children > room_type.max_occupancy:
        raise BookingError(
            "Occupancy exceeded",
            f"Maximum {room_type.max_occupancy} guests allowed for this room type",
        )
    if adults > room_type.max_adults:
        raise BookingError(
            "Too many adults",
            f"Maximum {room_type.max_adults} adults allowed for this room type",
        )
    if children > room_type.max_children:
        raise BookingError(
            "Too many children",
            f"Maximum {room_type.max_children} children allowed for this room type",
        )


def check_stay_length(request: BookingRequest) -> int:
    nights = count_nights(request.check_in_date, request.check_out_date)
    if nights <= 0:
        raise BookingError("Invalid stay length", "Check-out date must be after check-in date")
    if nights != request.nights:
        raise BookingError(
            "Invalid stay length",
            f"The selected dates cover {nights} nights but {request.nights} were requested.",
        )
    return nights


def check_price(request: BookingRequest, quote: PriceQuote) -> None:
    if quote.subtotal != request.subtotal:
        logger.warning(
            f"Price mismatch for room type {request.room_type_id}: "
            f"client subtotal {request.subtotal}, server subtotal {quote.subtotal}"
        )
        raise BookingError("Price validation failed", PRICE_MISMATCH_DETAILS)


# ============================================================================
# CREATION
# ============================================================================

def upsert_guest(
    business_unit: BusinessUnit,
    *,
    first_name: str,
    last_name: str,
    email: str,
    phone: str = "",
) -> Guest:
    """Find the guest by (business unit, email) and refresh their details, or create them."""

    guest = _lock_queryset_if_possible(
        Guest.objects.filter(business_unit=business_unit, email__iexact=email)
    ).first()
    if guest is None:
        return Guest.objects.create(
            business_unit=business_unit,
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone=phone,
            source=Guest.Source.WEBSITE,
        )

    guest.first_name = first_name
    guest.last_name = last_name
    if phone:
        guest.phone = phone
    guest.save(update_fields=["first_name", "last_name", "phone", "updated_at"])
    return guest


@transaction.atomic
def create_reservation(
    request: BookingRequest,
    business_unit: BusinessUnit,
    room_type: RoomType,
    quote: PriceQuote,
) -> Reservation:
    """Create the guest (or refresh it), the reservation and its room row."""

    guest = upsert_guest(
        business_unit,
        first_name=request.first_name,
        last_name=request.last_name,
        email=request.email,
        phone=request.phone,
    )
    reservation = Reservation.objects.create(
        business_unit=business_unit,
        guest=guest,
        confirmation_number=generate_confirmation_number(),
        check_in_date=request.check_in_date,
        check_out_date=request.check_out_date,
        adults=request.adults,
        children=request.children,
        nights=quote.nights,
        subtotal=quote.subtotal,
        taxes=quote.taxes,
        service_fee=quote.service_fee,
        total_amount=quote.total_amount,
        currency=quote.currency,
        status=Reservation.Status.PENDING,
        payment_status=Reservation.PaymentStatus.PENDING,
        source=Reservation.Source.WEBSITE,
        special_requests=request.special_requests,
        guest_notes=request.guest_notes,
    )
    ReservationRoom.objects.create(
        reservation=reservation,
        room_type=room_type,
        base_rate=quote.base_rate,
        nights=quote.nights,
        adults=request.adults,
        children=request.children,
        room_subtotal=quote.subtotal,
        total_amount=quote.total_amount,
    )
    logger.info(
        f"Reservation {reservation.confirmation_number} created for {guest.email} "
        f"at {business_unit.name}: {quote.total_amount} {quote.currency}"
    )
    return reservation


def create_reservation_with_payment(
    request: BookingRequest,
    *,
    client: PayMongoClient | None = None,
) -> BookingResult:
    """
    Validate and price a booking, create the reservation and open a
    PayMongo checkout session for it.

    The reservation is committed before the gateway is called; when the
    gateway fails it stays PENDING until the expiry task cancels it.
    """

    business_unit = get_bookable_business_unit(request.business_unit_id)
    room_type = get_bookable_room_type(business_unit, request.room_type_id)
    check_occupancy(room_type, request.adults, request.children)
    nights = check_stay_length(request)
    quote = quote_stay(business_unit, room_type, nights)
    check_price(request, quote)

    reservation = create_reservation(request, business_unit, room_type, quote)

    attributes = payment_services.build_checkout_session_attributes(
        reservation,
        room_type,
        quote,
        first_name=request.first_name,
        last_name=request.last_name,
        email=request.email,
        phone=request.phone,
    )
    client = client or get_client()
    try:
        session = client.create_checkout_session(attributes)
    except PayMongoError as exc:
        logger.error(f"Checkout session failed for reservation {reservation.confirmation_number}: {exc}")
        raise BookingError("Failed to create reservation", str(exc), status_code=500) from exc

    payment_services.record_checkout_payment(reservation, room_type, quote, attributes, session)
    return BookingResult(
        reservation=reservation,
        checkout_url=session["attributes"]["checkout_url"],
        payment_session_id=session["id"],
    )


# ============================================================================
# STAFF ACTIONS
# ============================================================================

class ReservationStateError(Exception):
    """Raised when a reservation cannot move to the requested state."""


def confirm_reservation(reservation: Reservation) -> Reservation:
    if reservation.status != Reservation.Status.PENDING:
        raise ReservationStateError("Only pending reservations can be confirmed.")
    reservation.confirm()
    logger.info(f"Reservation {reservation.confirmation_number} confirmed")
    return reservation


@transaction.atomic
def cancel_reservation(reservation: Reservation, reason: str = "") -> Reservation:
    """Cancel a reservation and close any checkout session still open for it."""

    reservation = _lock_queryset_if_possible(Reservation.objects.filter(pk=reservation.pk)).get()
    if reservation.status in (
        Reservation.Status.CANCELLED,
        Reservation.Status.CHECKED_OUT,
        Reservation.Status.NO_SHOW,
    ):
        raise ReservationStateError(f"Reservation is already {reservation.get_status_display().lower()}.")
    reservation.cancel(reason)
    payment_services.close_checkout_sessions(reservation)
    logger.info(f"Reservation {reservation.confirmation_number} cancelled: {reason or 'no reason given'}")
    return reservation


def update_reservation_status(
    reservation: Reservation,
    status: str,
    *,
    internal_notes: str | None = None,
) -> Reservation:
    reservation.status = status
    update_fields = ["status", "updated_at"]
    if status == Reservation.Status.CANCELLED and reservation.cancelled_at is None:
        reservation.cancelled_at = timezone.now()
        update_fields.append("cancelled_at")
    if internal_notes is not None:
        reservation.internal_notes = internal_notes
        update_fields.append("internal_notes")
    reservation.save(update_fields=update_fields)
    logger.info(f"Reservation {reservation.confirmation_number} status set to {status}")
    return reservation


@transaction.atomic
def toggle_guest_vip_status(guest: Guest) -> Guest:
    guest = _lock_queryset_if_possible(Guest.objects.filter(pk=guest.pk)).get()
    guest.vip_status = not guest.vip_status
    guest.save(update_fields=["vip_status", "updated_at"])
    logger.info(f"Guest {guest.email} VIP status set to {guest.vip_status}")
    return guest


def find_reservation(confirmation_number: str) -> Reservation | None:
    return (
        Reservation.objects.select_related("business_unit", "guest")
        .prefetch_related("rooms__room_type")
        .filter(confirmation_number__iexact=confirmation_number.strip())
        .first()
    )


def expire_abandoned_reservations(now=None) -> int:
    """Cancel pending reservations that never reached the payment gateway."""

    now = now or timezone.now()
    cutoff = now - timedelta(hours=settings.CHECKOUT_SESSION_TTL_HOURS)
    expired = 0
    abandoned = Reservation.objects.filter(
        status=Reservation.Status.PENDING,
        payment_status=Reservation.PaymentStatus.PENDING,
        created_at__lte=cutoff,
    )
    for reservation_id in list(abandoned.values_list("pk", flat=True)):
        with transaction.atomic():
            reservation = _lock_queryset_if_possible(abandoned.filter(pk=reservation_id)).first()
            if reservation is None:
                continue
            reservation.cancel("Payment was never started")
            expired += 1
            logger.info(f"Reservation {reservation.confirmation_number} abandoned before payment")
    return expired
