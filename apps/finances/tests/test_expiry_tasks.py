"""Tests for the periodic expiry tasks."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

import pytest
from django.db import transaction
from django.utils import timezone

from apps.bookings import services as booking_services
from apps.bookings.models import Guest, Reservation
from apps.bookings.services import generate_confirmation_number
from apps.bookings.tasks import expire_abandoned_reservations
from apps.finances import services
from apps.finances.models import CheckoutSession, Payment
from apps.finances.tasks import expire_checkout_sessions
from apps.properties.models import BusinessUnit


@pytest.fixture
def guest() -> Guest:
    unit = BusinessUnit.objects.create(name="Dolores Lake Resort", city="Tanay")
    return Guest.objects.create(
        business_unit=unit,
        first_name="Maria",
        last_name="Clara",
        email="maria.clara@example.com",
    )


def make_reservation(guest: Guest, **fields) -> Reservation:
    check_in = timezone.now() + timedelta(days=3)
    defaults = {
        "business_unit": guest.business_unit,
        "guest": guest,
        "confirmation_number": generate_confirmation_number(),
        "check_in_date": check_in,
        "check_out_date": check_in + timedelta(days=1),
        "nights": 1,
        "subtotal": Decimal("5000.00"),
        "total_amount": Decimal("5000.00"),
    }
    defaults.update(fields)
    return Reservation.objects.create(**defaults)


def open_session(reservation: Reservation, session_id: str, expires_at) -> CheckoutSession:
    payment = Payment.objects.create(reservation=reservation, amount=reservation.total_amount)
    return CheckoutSession.objects.create(
        payment=payment,
        session_id=session_id,
        url=f"https://checkout.paymongo.com/{session_id}",
        expires_at=expires_at,
    )


@pytest.mark.django_db
def test_expired_checkout_session_cancels_reservation(guest: Guest) -> None:
    reservation = make_reservation(
        guest,
        payment_status=Reservation.PaymentStatus.AWAITING_PAYMENT_METHOD,
    )
    stale = open_session(reservation, "cs_stale", timezone.now() - timedelta(minutes=1))
    fresh_reservation = make_reservation(guest)
    fresh = open_session(fresh_reservation, "cs_fresh", timezone.now() + timedelta(hours=1))

    result = expire_checkout_sessions()

    assert result == {"expired": 1}
    stale.refresh_from_db()
    fresh.refresh_from_db()
    reservation.refresh_from_db()
    assert stale.status == CheckoutSession.Status.EXPIRED
    assert stale.payment.status == Payment.Status.CANCELLED
    assert reservation.status == Reservation.Status.CANCELLED
    assert reservation.cancellation_reason == "Payment window expired"
    assert fresh.status == CheckoutSession.Status.ACTIVE


@pytest.mark.django_db
def test_expired_session_keeps_paid_reservation(guest: Guest) -> None:
    reservation = make_reservation(
        guest,
        status=Reservation.Status.CONFIRMED,
        payment_status=Reservation.PaymentStatus.PAID,
    )
    open_session(reservation, "cs_paid", timezone.now() - timedelta(minutes=5))

    expire_checkout_sessions()

    reservation.refresh_from_db()
    assert reservation.status == Reservation.Status.CONFIRMED


@pytest.mark.django_db
def test_abandoned_reservations_are_cancelled(guest: Guest) -> None:
    abandoned = make_reservation(guest)
    Reservation.objects.filter(pk=abandoned.pk).update(created_at=timezone.now() - timedelta(hours=25))
    recent = make_reservation(guest)
    awaiting = make_reservation(guest, payment_status=Reservation.PaymentStatus.AWAITING_PAYMENT_METHOD)
    Reservation.objects.filter(pk=awaiting.pk).update(created_at=timezone.now() - timedelta(hours=25))

    result = expire_abandoned_reservations()

    assert result == {"expired": 1}
    abandoned.refresh_from_db()
    recent.refresh_from_db()
    awaiting.refresh_from_db()
    assert abandoned.status == Reservation.Status.CANCELLED
    assert recent.status == Reservation.Status.PENDING
    assert awaiting.status == Reservation.Status.PENDING


class BeforeFirstAtomic:
    """Stands in for a services module's ``transaction``; runs a callback before the first block."""

    def __init__(self, callback) -> None:
        self.callback = callback

    def atomic(self, *args, **kwargs):
        if self.callback is not None:
            callback, self.callback = self.callback, None
            callback()
        return transaction.atomic(*args, **kwargs)

    def __getattr__(self, name):
        return getattr(transaction, name)


def paid_checkout_event(session_id: str) -> dict:
    return {
        "data": {
            "id": f"evt_{session_id}",
            "type": "event",
            "attributes": {
                "type": "checkout_session.payment.paid",
                "data": {
                    "id": session_id,
                    "type": "checkout_session",
                    "attributes": {"payments": [], "payment_method_used": "gcash"},
                },
            },
        }
    }


@pytest.mark.django_db
def test_session_paid_while_sweep_runs_stays_paid(guest: Guest, monkeypatch) -> None:
    reservation = make_reservation(
        guest,
        payment_status=Reservation.PaymentStatus.AWAITING_PAYMENT_METHOD,
    )
    session = open_session(reservation, "cs_race", timezone.now() - timedelta(minutes=1))
    event = paid_checkout_event("cs_race")
    monkeypatch.setattr(
        services,
        "transaction",
        BeforeFirstAtomic(lambda: services.process_webhook_event(event)),
    )

    expired = services.expire_stale_checkout_sessions()

    assert expired == 0
    session.refresh_from_db()
    reservation.refresh_from_db()
    assert session.status == CheckoutSession.Status.COMPLETED
    assert session.payment.status == Payment.Status.PAID
    assert reservation.status == Reservation.Status.CONFIRMED
    assert reservation.payment_status == Reservation.PaymentStatus.PAID


@pytest.mark.django_db
def test_reservation_paid_while_abandoned_sweep_runs_is_kept(guest: Guest, monkeypatch) -> None:
    reservation = make_reservation(guest)
    Reservation.objects.filter(pk=reservation.pk).update(created_at=timezone.now() - timedelta(hours=25))
    monkeypatch.setattr(
        booking_services,
        "transaction",
        BeforeFirstAtomic(lambda: Reservation.objects.get(pk=reservation.pk).mark_paid()),
    )

    assert booking_services.expire_abandoned_reservations() == 0
    reservation.refresh_from_db()
    assert reservation.status == Reservation.Status.CONFIRMED
    assert reservation.payment_status == Reservation.PaymentStatus.PAID
