"""Tests for staff payment management."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from unittest.mock import MagicMock, patch

from django.contrib.auth import get_user_model
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Guest, Reservation
from apps.bookings.services import generate_confirmation_number
from apps.finances.models import Payment, PaymentTransaction
from apps.finances.paymongo import PayMongoError
from apps.properties.models import BusinessUnit

User = get_user_model()


class PaymentAdminAPITests(APITestCase):
    def setUp(self) -> None:
        self.unit = BusinessUnit.objects.create(name="Dolores Lake Resort", city="Tanay")
        self.other_unit = BusinessUnit.objects.create(name="Dolores Farm Resort", city="Tanay")
        self.payment = self._payment(self.unit, "lake@example.com", status=Payment.Status.PAID)
        self.other_payment = self._payment(self.other_unit, "farm@example.com")
        self.staff = User.objects.create_user(username="cashier", password="StrongPass123", is_staff=True)
        self.client.force_authenticate(self.staff)

    def _payment(self, unit: BusinessUnit, email: str, **fields) -> Payment:
        guest = Guest.objects.create(business_unit=unit, first_name="Test", last_name="Guest", email=email)
        check_in = timezone.now() + timedelta(days=5)
        reservation = Reservation.objects.create(
            business_unit=unit,
            guest=guest,
            confirmation_number=generate_confirmation_number(),
            check_in_date=check_in,
            check_out_date=check_in + timedelta(days=1),
            nights=1,
            subtotal=Decimal("4000.00"),
            total_amount=Decimal("4000.00"),
        )
        return Payment.objects.create(reservation=reservation, amount=Decimal("4000.00"), **fields)

    def test_anonymous_cannot_list_payments(self) -> None:
        self.client.force_authenticate(None)
        response = self.client.get(reverse("payment-list"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_list_filtered_by_business_unit_and_status(self) -> None:
        response = self.client.get(reverse("payment-list"), {"business_unit": str(self.unit.id)})
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual([row["id"] for row in response.data], [str(self.payment.id)])

        response = self.client.get(reverse("payment-list"), {"status": "PENDING"})
        self.assertEqual([row["id"] for row in response.data], [str(self.other_payment.id)])

    def test_invalid_business_unit_filter_is_rejected(self) -> None:
        response = self.client.get(reverse("payment-list"), {"business_unit": "not-a-uuid"})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("business_unit", response.data)

    def test_set_status_manages_processed_at(self) -> None:
        url = reverse("payment-set-status", args=[self.other_payment.id])

        response = self.client.post(url, {"status": "PAID"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.other_payment.refresh_from_db()
        self.assertIsNotNone(self.other_payment.processed_at)

        self.client.post(url, {"status": "FAILED", "notes": "Chargeback"}, format="json")
        self.other_payment.refresh_from_db()
        self.assertEqual(self.other_payment.status, Payment.Status.FAILED)
        self.assertIsNone(self.other_payment.processed_at)
        self.assertEqual(self.other_payment.internal_notes, "Chargeback")

    def test_manual_refund_defaults_to_full_amount(self) -> None:
        response = self.client.post(
            reverse("payment-refund", args=[self.payment.id]),
            {"reason": "Typhoon closure"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.payment.refresh_from_db()
        self.assertEqual(self.payment.status, Payment.Status.REFUNDED)
        self.assertEqual(self.payment.refunded_amount, Decimal("4000.00"))
        self.assertEqual(self.payment.refund_reason, "Typhoon closure")
        self.assertIsNotNone(self.payment.refunded_at)
        self.assertEqual(self.payment.reservation.payment_status, Reservation.PaymentStatus.REFUNDED)
        self.assertEqual(PaymentTransaction.objects.get().event, "refund.created")

    def test_refund_is_requested_from_paymongo(self) -> None:
        self.payment.provider_metadata = {"paymongo_payment_id": "pay_123"}
        self.payment.save()
        client = MagicMock()
        client.create_refund.return_value = {"id": "ref_123", "attributes": {"status": "pending"}}

        with patch("apps.finances.services.get_client", return_value=client):
            response = self.client.post(
                reverse("payment-refund", args=[self.payment.id]),
                {"reason": "Guest request", "amount": "1500.00"},
                format="json",
            )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        client.create_refund.assert_called_once_with("pay_123", Decimal("1500.00"), notes="Guest request")
        self.payment.refresh_from_db()
        self.assertEqual(self.payment.refunded_amount, Decimal("1500.00"))
        self.assertEqual(PaymentTransaction.objects.get().event_id, "ref_123")

    def test_refund_rejected_by_gateway(self) -> None:
        self.payment.provider_metadata = {"paymongo_payment_id": "pay_123"}
        self.payment.save()
        client = MagicMock()
        client.create_refund.side_effect = PayMongoError("PayMongo error 400: refund exceeds amount")

        with patch("apps.finances.services.get_client", return_value=client):
            response = self.client.post(
                reverse("payment-refund", args=[self.payment.id]),
                {"reason": "Guest request"},
                format="json",
            )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.payment.refresh_from_db()
        self.assertEqual(self.payment.status, Payment.Status.PAID)

    def test_unpaid_payment_cannot_be_refunded(self) -> None:
        response = self.client.post(
            reverse("payment-refund", args=[self.other_payment.id]),
            {"reason": "Guest request"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
