"""Payment services: checkout sessions, webhook reconciliation, refunds."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from django.conf import settings  # type: ignore
from django.core.exceptions import ValidationError  # type: ignore
from django.db import IntegrityError, transaction  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings.models import Reservation

from .models import CheckoutSession, Payment, PaymentLineItem, PaymentTransaction
from .paymongo import PayMongoClient, PayMongoError, from_centavos, get_client, to_centavos

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from apps.bookings.pricing import PriceQuote
    from apps.properties.models import RoomType

logger = logging.getLogger(__name__)

PAYMENT_METHOD_MAP = {
    "card": Payment.Method.CARD,
    "gcash": Payment.Method.GCASH,
    "paymaya": Payment.Method.PAYMAYA,
    "grab_pay": Payment.Method.GRAB_PAY,
    "billease": Payment.Method.BILLEASE,
    "dob": Payment.Method.ONLINE_BANKING,
    "dob_ubp": Payment.Method.ONLINE_BANKING,
    "brankas_bdo": Payment.Method.ONLINE_BANKING,
    "brankas_landbank": Payment.Method.ONLINE_BANKING,
    "brankas_metrobank": Payment.Method.ONLINE_BANKING,
}


class PaymentActionError(Exception):
    """Raised when a staff action is not allowed for a payment."""


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    return singular if count == 1 else (plural or f"{singular}s")


def success_url(session_id: str) -> str:
    return f"{settings.SITE_URL}/booking/success?session_id={session_id}"


def cancel_url(session_id: str) -> str:
    return f"{settings.SITE_URL}/booking/cancel?session_id={session_id}"


# ============================================================================
# CHECKOUT
# ============================================================================

def build_checkout_session_attributes(
    reservation: Reservation,
    room_type: "RoomType",
    quote: "PriceQuote",
    *,
    first_name: str,
    last_name: str,
    email: str,
    phone: str = "",
) -> dict[str, Any]:
    """Attributes of the PayMongo checkout session for a new reservation."""

    business_unit = reservation.business_unit
    guest_name = f"{first_name} {last_name}"
    nights_label = f"{reservation.nights} {pluralize(reservation.nights, 'night')}"

    billing: dict[str, str] = {"name": guest_name, "email": email}
    if phone:
        billing["phone"] = phone

    return {
        "send_email_receipt": True,
        "show_description": True,
        "show_line_items": True,
        "line_items": [
            {
                "currency": reservation.currency,
                "amount": to_centavos(quote.total_amount),
                "description": f"{business_unit.name} - {nights_label}",
                "name": f"Booking Ref. ({reservation.confirmation_number})",
                "quantity": 1,
            }
        ],
        "payment_method_types": list(settings.PAYMONGO_PAYMENT_METHOD_TYPES),
        "customer_email": email,
        "billing": billing,
        "description": f"Reservation {reservation.confirmation_number} - {business_unit.name}",
        "reference_number": reservation.confirmation_number,
        "success_url": f"{settings.SITE_URL}/booking/success",
        "cancel_url": f"{settings.SITE_URL}/booking/cancel",
        "metadata": {
            "reservation_id": str(reservation.id),
            "confirmation_number": reservation.confirmation_number,
            "business_unit_id": str(business_unit.id),
            "guest_id": str(reservation.guest_id),
            "guest_name": guest_name,
            "check_in": reservation.check_in_date.isoformat(),
            "check_out": reservation.check_out_date.isoformat(),
            "adults": str(reservation.adults),
            "children": str(reservation.children),
            "nights": str(reservation.nights),
            "room_type_id": str(room_type.id),
        },
    }


def _guests_label(adults: int, children: int) -> str:
    label = f"{adults} {pluralize(adults, 'adult')}"
    if children > 0:
        label += f" and {children} {pluralize(children, 'child', 'children')}"
    return label


@transaction.atomic
def record_checkout_payment(
    reservation: Reservation,
    room_type: "RoomType",
    quote: "PriceQuote",
    attributes: dict[str, Any],
    session: dict[str, Any],
) -> Payment:
    """Persist the payment, its line items and the checkout session."""

    session_id = session["id"]
    session_attributes = session.get("attributes") or {}
    payment_intent = session_attributes.get("payment_intent") or {}
    billing = attributes.get("billing") or {}
    nights_label = f"{reservation.nights} {pluralize(reservation.nights, 'night')}"

    payment = Payment.objects.create(
        reservation=reservation,
        amount=quote.total_amount,
        currency=reservation.currency,
        method=Payment.Method.CARD,
        status=Payment.Status.PENDING,
        provider=Payment.Provider.PAYMONGO,
        provider_payment_id=session_id,
        room_total=quote.subtotal,
        taxes_total=quote.taxes,
        fees_total=quote.service_fee,
        guest_name=billing.get("name", ""),
        guest_email=attributes.get("customer_email", ""),
        guest_phone=billing.get("phone", ""),
        is_deposit_payment=True,
        provider_metadata={
            "checkout_session_id": session_id,
            "payment_intent_id": payment_intent.get("id", "") if isinstance(payment_intent, dict) else "",
            "livemode": bool(session_attributes.get("livemode", False)),
        },
    )

    CheckoutSession.objects.create(
        payment=payment,
        session_id=session_id,
        url=session_attributes["checkout_url"],
        currency=reservation.currency,
        line_items=attributes.get("line_items", []),
        success_url=success_url(session_id),
        cancel_url=cancel_url(session_id),
        customer_email=attributes.get("customer_email", ""),
        billing_details=billing or None,
        status=CheckoutSession.Status.ACTIVE,
        expires_at=timezone.now() + timedelta(hours=settings.CHECKOUT_SESSION_TTL_HOURS),
        metadata=attributes.get("metadata", {}),
    )

    line_items = [
        PaymentLineItem(
            payment=payment,
            item_type=PaymentLineItem.ItemType.ROOM,
            item_id=str(room_type.id),
            item_name=f"{room_type.name} - {nights_label}",
            description=f"Room booking for {_guests_label(reservation.adults, reservation.children)}",
            unit_price=quote.unit_price,
            quantity=reservation.nights,
            total_amount=quote.subtotal,
            valid_from=reservation.check_in_date,
            valid_to=reservation.check_out_date,
        )
    ]
    if quote.taxes > 0:
        line_items.append(
            PaymentLineItem(
                payment=payment,
                item_type=PaymentLineItem.ItemType.TAX,
                item_name="Government Tax",
                description="Required government taxes and fees",
                unit_price=quote.taxes,
                quantity=1,
                total_amount=quote.taxes,
                tax_amount=quote.taxes,
            )
        )
    if quote.service_fee > 0:
        line_items.append(
            PaymentLineItem(
                payment=payment,
                item_type=PaymentLineItem.ItemType.FEE,
                item_name="Service Fee",
                description="Hotel service fee",
                unit_price=quote.service_fee,
                quantity=1,
                total_amount=quote.service_fee,
            )
        )
    PaymentLineItem.objects.bulk_create(line_items)

    reservation.payment_intent_id = str(payment.id)
    reservation.payment_provider = Payment.Provider.PAYMONGO
    reservation.payment_status = Reservation.PaymentStatus.AWAITING_PAYMENT_METHOD
    reservation.save(update_fields=["payment_intent_id", "payment_provider", "payment_status", "updated_at"])

    logger.info(
        f"Payment {payment.id} opened for reservation {reservation.confirmation_number} "
        f"(session {session_id}, {payment.amount} {payment.currency})"
    )
    return payment


# ============================================================================
# WEBHOOKS
# ============================================================================

@dataclass
class WebhookOutcome:
    handled: bool
    message: str
    payment: Payment | None = None


def _payment_method(value: str | None) -> str | None:
    if not value:
        return None
    return PAYMENT_METHOD_MAP.get(value.lower())


def _provider_payment_summary(resource: dict[str, Any]) -> dict[str, Any]:
    attributes = resource.get("attributes") or {}
    source = attributes.get("source") or {}
    return {
        "paymongo_payment_id": resource.get("id", ""),
        "payment_intent_id": attributes.get("payment_intent_id") or "",
        "source_type": source.get("type", ""),
        "amount_paid": str(from_centavos(attributes.get("amount"))),
    }


def _settle_payment(payment: Payment, *, method: str | None, metadata: dict[str, Any]) -> None:
    if payment.status != Payment.Status.PAID:
        payment.mark_paid(method=method, metadata=metadata)
    reservation = payment.reservation
    if reservation.status not in (Reservation.Status.PENDING, Reservation.Status.CONFIRMED):
        logger.warning(
            f"Payment {payment.id} settled for reservation {reservation.confirmation_number} "
            f"in status {reservation.status}; manual follow-up required"
        )
    if reservation.payment_status != Reservation.PaymentStatus.PAID:
        reservation.mark_paid()


def _handle_checkout_paid(resource: dict[str, Any]) -> WebhookOutcome:
    session_id = resource.get("id")
    attributes = resource.get("attributes") or {}
    session = (
        CheckoutSession.objects.select_for_update()
        .select_related("payment__reservation")
        .filter(session_id=session_id)
        .first()
    )
    if session is None:
        logger.warning(f"PayMongo webhook for unknown checkout session {session_id}")
        return WebhookOutcome(False, "Event ignored")

    payments = attributes.get("payments") or []
    metadata: dict[str, Any] = {}
    if payments:
        metadata.update(_provider_payment_summary(payments[0]))
    payment_intent = attributes.get("payment_intent") or {}
    if isinstance(payment_intent, dict) and payment_intent.get("id"):
        metadata["payment_intent_id"] = payment_intent["id"]
    method = _payment_method(attributes.get("payment_method_used") or metadata.get("source_type"))

    if session.status != CheckoutSession.Status.COMPLETED:
        session.status = CheckoutSession.Status.COMPLETED
        session.completed_at = timezone.now()
        session.save(update_fields=["status", "completed_at", "updated_at"])

    _settle_payment(session.payment, method=method, metadata=metadata)
    logger.info(f"Checkout session {session_id} paid for payment {session.payment_id}")
    return WebhookOutcome(True, "Payment recorded", session.payment)


def _find_payment_for_resource(resource: dict[str, Any]) -> Payment | None:
    attributes = resource.get("attributes") or {}
    qs = Payment.objects.select_for_update().select_related("reservation")

    payment_intent_id = attributes.get("payment_intent_id")
    if payment_intent_id:
        payment = qs.filter(provider_metadata__payment_intent_id=payment_intent_id).first()
        if payment is not None:
            return payment

    if resource.get("id"):
        payment = qs.filter(provider_metadata__paymongo_payment_id=resource["id"]).first()
        if payment is not None:
            return payment

    reservation_id = (attributes.get("metadata") or {}).get("reservation_id")
    if reservation_id:
        try:
            return qs.filter(reservation_id=reservation_id).order_by("-created_at").first()
        except ValidationError:
            return None
    return None


def _handle_payment_event(event_type: str, resource: dict[str, Any]) -> WebhookOutcome:
    payment = _find_payment_for_resource(resource)
    if payment is None:
        logger.warning(f"PayMongo {event_type} for unknown payment {resource.get('id')}")
        return WebhookOutcome(False, "Event ignored")

    attributes = resource.get("attributes") or {}
    summary = _provider_payment_summary(resource)
    reservation = payment.reservation

    if event_type == "payment.paid":
        method = _payment_method(summary.get("source_type"))
        _settle_payment(payment, method=method, metadata=summary)
        return WebhookOutcome(True, "Payment recorded", payment)

    if event_type == "payment.failed":
        if payment.status == Payment.Status.PAID:
            return WebhookOutcome(False, "Payment already settled", payment)
        payment.provider_metadata = {**payment.provider_metadata, **summary}
        payment.save(update_fields=["provider_metadata", "updated_at"])
        payment.mark_failed(
            code=str(attributes.get("failed_code") or ""),
            message=str(attributes.get("failed_message") or ""),
        )
        reservation.payment_status = Reservation.PaymentStatus.FAILED
        reservation.save(update_fields=["payment_status", "updated_at"])
        logger.info(f"Payment {payment.id} failed: {payment.failure_code} {payment.failure_message}")
        return WebhookOutcome(True, "Payment failure recorded", payment)

    # payment.refunded
    refunds = attributes.get("refunds") or []
    refunded = sum(
        (from_centavos((refund.get("attributes") or {}).get("amount")) for refund in refunds),
        Decimal("0.00"),
    )
    payment.mark_refunded(refunded or None, reason=payment.refund_reason or "Refunded at provider")
    reservation.payment_status = Reservation.PaymentStatus.REFUNDED
    reservation.save(update_fields=["payment_status", "updated_at"])
    return WebhookOutcome(True, "Refund recorded", payment)


WEBHOOK_HANDLERS = {
    "checkout_session.payment.paid": lambda event_type, resource: _handle_checkout_paid(resource),
    "payment.paid": _handle_payment_event,
    "payment.failed": _handle_payment_event,
    "payment.refunded": _handle_payment_event,
}


def process_webhook_event(event: dict[str, Any]) -> WebhookOutcome:
    """
    Apply a PayMongo webhook event.

    Events are recorded in PaymentTransaction keyed by the provider event id;
    a redelivered event is acknowledged without touching any state.
    """

    data = event.get("data") or {}
    attributes = data.get("attributes") or {}
    event_id = data.get("id") or None
    event_type = attributes.get("type")
    resource = attributes.get("data") or {}

    if not event_type:
        raise ValueError("Event type is required")

    handler = WEBHOOK_HANDLERS.get(event_type)
    if handler is None:
        logger.info(f"Ignoring PayMongo event {event_type} ({event_id})")
        return WebhookOutcome(False, "Event ignored")

    try:
        with transaction.atomic():
            if event_id and PaymentTransaction.objects.filter(event_id=event_id).exists():
                logger.info(f"PayMongo event {event_id} already processed")
                return WebhookOutcome(False, "Event already processed")

            outcome = handler(event_type, resource)
            PaymentTransaction.objects.create(
                payment=outcome.payment,
                event=event_type,
                event_id=event_id,
                payload=event,
                status=outcome.payment.status if outcome.payment else "ignored",
            )
    except IntegrityError:
        # Concurrent delivery of the same event id won the insert
        logger.info(f"PayMongo event {event_id} processed concurrently")
        return WebhookOutcome(False, "Event already processed")
    return outcome


# ============================================================================
# STAFF ACTIONS
# ============================================================================

def set_payment_status(payment: Payment, status: str, *, notes: str = "") -> Payment:
    payment.status = status
    payment.processed_at = timezone.now() if status == Payment.Status.PAID else None
    update_fields = ["status", "processed_at", "updated_at"]
    if notes:
        payment.internal_notes = notes
        update_fields.append("internal_notes")
    payment.save(update_fields=update_fields)
    logger.info(f"Payment {payment.id} status set to {status}")
    return payment


@transaction.atomic
def refund_payment(
    payment: Payment,
    *,
    reason: str = "",
    amount: Decimal | None = None,
    client: PayMongoClient | None = None,
) -> Payment:
    """Refund a paid payment, at the provider too when it was captured there."""

    if payment.status != Payment.Status.PAID:
        raise PaymentActionError("Only paid payments can be refunded.")
    refund_amount = payment.amount if amount is None else amount
    if refund_amount <= 0 or refund_amount > payment.amount:
        raise PaymentActionError("Refund amount must be positive and not exceed the payment amount.")

    provider_refund: dict[str, Any] = {}
    paymongo_payment_id = payment.provider_metadata.get("paymongo_payment_id")
    if payment.provider == Payment.Provider.PAYMONGO and paymongo_payment_id:
        client = client or get_client()
        try:
            provider_refund = client.create_refund(
                paymongo_payment_id,
                refund_amount,
                notes=reason,
            )
        except PayMongoError as exc:
            raise PaymentActionError(f"Refund rejected by PayMongo: {exc}") from exc

    payment.mark_refunded(refund_amount, reason=reason)
    reservation = payment.reservation
    reservation.payment_status = Reservation.PaymentStatus.REFUNDED
    reservation.save(update_fields=["payment_status", "updated_at"])
    PaymentTransaction.objects.create(
        payment=payment,
        event="refund.created",
        event_id=provider_refund.get("id") or None,
        payload=provider_refund or {"amount": str(refund_amount), "reason": reason},
        status=payment.status,
    )
    logger.info(f"Payment {payment.id} refunded: {refund_amount} {payment.currency}")
    return payment


# ============================================================================
# EXPIRY
# ============================================================================

def _cancel_pending_payment(payment_id) -> None:
    payment = Payment.objects.select_for_update().filter(pk=payment_id, status=Payment.Status.PENDING).first()
    if payment is not None:
        payment.status = Payment.Status.CANCELLED
        payment.save(update_fields=["status", "updated_at"])


def close_checkout_sessions(reservation: Reservation, *, client: PayMongoClient | None = None) -> int:
    """Expire open checkout sessions of a reservation and cancel their payments."""

    session_ids = list(
        CheckoutSession.objects.filter(
            payment__reservation=reservation,
            status=CheckoutSession.Status.ACTIVE,
        ).values_list("pk", flat=True)
    )
    closed = 0
    for session_id in session_ids:
        with transaction.atomic():
            session = (
                CheckoutSession.objects.select_for_update()
                .filter(pk=session_id, status=CheckoutSession.Status.ACTIVE)
                .first()
            )
            if session is None:
                continue
            if not session.session_id.startswith("cs_emulated_"):
                client = client or get_client()
                try:
                    client.expire_checkout_session(session.session_id)
                except PayMongoError as exc:
                    logger.warning(f"Could not expire checkout session {session.session_id}: {exc}")
            session.status = CheckoutSession.Status.EXPIRED
            session.save(update_fields=["status", "updated_at"])
            _cancel_pending_payment(session.payment_id)
            closed += 1
    return closed


def expire_stale_checkout_sessions(now=None) -> int:
    """Expire unpaid checkout sessions past their deadline."""

    now = now or timezone.now()
    expired = 0
    stale_ids = list(
        CheckoutSession.objects.filter(
            status=CheckoutSession.Status.ACTIVE,
            expires_at__lte=now,
        ).values_list("pk", flat=True)
    )
    for session_pk in stale_ids:
        with transaction.atomic():
            # A paid webhook may have completed the session since it was listed
            session = (
                CheckoutSession.objects.select_for_update()
                .filter(pk=session_pk, status=CheckoutSession.Status.ACTIVE)
                .first()
            )
            if session is None:
                continue
            session.status = CheckoutSession.Status.EXPIRED
            session.save(update_fields=["status", "updated_at"])
            _cancel_pending_payment(session.payment_id)

            reservation_id = (
                Payment.objects.filter(pk=session.payment_id).values_list("reservation_id", flat=True).first()
            )
            reservation = (
                Reservation.objects.select_for_update()
                .filter(pk=reservation_id, status=Reservation.Status.PENDING)
                .exclude(payment_status=Reservation.PaymentStatus.PAID)
                .first()
            )
            if reservation is not None:
                reservation.cancel("Payment window expired")
            expired += 1
            logger.info(f"Checkout session {session.session_id} expired (payment {session.payment_id})")
    return expired
