"""Tests for staff reservation management and the public lookup."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Guest, Reservation, ReservationRoom
from apps.bookings.services import generate_confirmation_number
from apps.finances.models import CheckoutSession, Payment
from apps.properties.models import BusinessUnit, RoomType

User = get_user_model()


class ReservationAdminAPITests(APITestCase):
    def setUp(self) -> None:
        self.unit = BusinessUnit.objects.create(name="Dolores Lake Resort", city="Tanay")
        self.other_unit = BusinessUnit.objects.create(name="Dolores Farm Resort", city="Tanay")
        self.room_type = RoomType.objects.create(
            business_unit=self.unit,
            name="Deluxe",
            base_rate=Decimal("5000.00"),
        )
        self.guest = Guest.objects.create(
            business_unit=self.unit,
            first_name="Jose",
            last_name="Rizal",
            email="jose@example.com",
        )
        self.reservation = self._reservation(self.unit, self.guest)
        other_guest = Guest.objects.create(
            business_unit=self.other_unit,
            first_name="Andres",
            last_name="Bonifacio",
            email="andres@example.com",
        )
        self.other_reservation = self._reservation(self.other_unit, other_guest)
        self.staff = User.objects.create_user(username="manager", password="StrongPass123", is_staff=True)
        self.guest_user = User.objects.create_user(username="visitor", password="StrongPass123")

    def _reservation(self, unit: BusinessUnit, guest: Guest) -> Reservation:
        check_in = timezone.now() + timedelta(days=7)
        reservation = Reservation.objects.create(
            business_unit=unit,
            guest=guest,
            confirmation_number=generate_confirmation_number(),
            check_in_date=check_in,
            check_out_date=check_in + timedelta(days=2),
            adults=2,
            nights=2,
            subtotal=Decimal("10000.00"),
            total_amount=Decimal("10000.00"),
        )
        if unit == self.unit:
            ReservationRoom.objects.create(
                reservation=reservation,
                room_type=self.room_type,
                base_rate=Decimal("5000.00"),
                nights=2,
                adults=2,
                room_subtotal=Decimal("10000.00"),
                total_amount=Decimal("10000.00"),
            )
        return reservation

    def test_list_requires_staff(self) -> None:
        self.client.force_authenticate(self.guest_user)
        response = self.client.get(reverse("reservation-list"))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_list_filtered_by_business_unit(self) -> None:
        self.client.force_authenticate(self.staff)
        response = self.client.get(reverse("reservation-list"), {"business_unit": str(self.unit.id)})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]["confirmation_number"], self.reservation.confirmation_number)
        self.assertEqual(response.data[0]["guest"]["full_name"], "Jose Rizal")

    def test_confirm(self) -> None:
        self.client.force_authenticate(self.staff)
        response = self.client.post(reverse("reservation-confirm", args=[self.reservation.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.reservation.refresh_from_db()
        self.assertEqual(self.reservation.status, Reservation.Status.CONFIRMED)

        again = self.client.post(reverse("reservation-confirm", args=[self.reservation.id]))
        self.assertEqual(again.status_code, status.HTTP_400_BAD_REQUEST)

    def test_cancel_closes_open_checkout_session(self) -> None:
        payment = Payment.objects.create(reservation=self.reservation, amount=Decimal("10000.00"))
        session = CheckoutSession.objects.create(
            payment=payment,
            session_id="cs_open_1",
            url="https://checkout.paymongo.com/cs_open_1",
            expires_at=timezone.now() + timedelta(hours=24),
        )
        self.client.force_authenticate(self.staff)

        with patch("apps.finances.services.get_client") as get_client:
            response = self.client.post(
                reverse("reservation-cancel", args=[self.reservation.id]),
                {"reason": "Guest changed plans"},
                format="json",
            )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        get_client.return_value.expire_checkout_session.assert_called_once_with("cs_open_1")
        self.reservation.refresh_from_db()
        session.refresh_from_db()
        payment.refresh_from_db()
        self.assertEqual(self.reservation.status, Reservation.Status.CANCELLED)
        self.assertEqual(self.reservation.cancellation_reason, "Guest changed plans")
        self.assertIsNotNone(self.reservation.cancelled_at)
        self.assertEqual(session.status, CheckoutSession.Status.EXPIRED)
        self.assertEqual(payment.status, Payment.Status.CANCELLED)

    def test_set_status_with_internal_notes(self) -> None:
        self.client.force_authenticate(self.staff)
        response = self.client.post(
            reverse("reservation-set-status", args=[self.reservation.id]),
            {"status": "CHECKED_IN", "internal_notes": "Early arrival"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.reservation.refresh_from_db()
        self.assertEqual(self.reservation.status, Reservation.Status.CHECKED_IN)
        self.assertEqual(self.reservation.internal_notes, "Early arrival")

    def test_guests_filtered_by_business_unit(self) -> None:
        self.client.force_authenticate(self.staff)
        response = self.client.get(reverse("guest-list"), {"business_unit": str(self.other_unit.id)})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual([guest["email"] for guest in response.data], ["andres@example.com"])

    def test_toggle_guest_vip_status(self) -> None:
        self.client.force_authenticate(self.staff)
        url = reverse("guest-toggle-vip", args=[self.guest.id])

        response = self.client.post(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertTrue(response.data["vip_status"])

        response = self.client.get(reverse("guest-list"), {"vip_status": "true"})
        self.assertEqual([guest["email"] for guest in response.data], ["jose@example.com"])

        self.client.post(url)
        self.guest.refresh_from_db()
        self.assertFalse(self.guest.vip_status)

    def test_toggle_vip_requires_staff(self) -> None:
        self.client.force_authenticate(self.guest_user)
        response = self.client.post(reverse("guest-toggle-vip", args=[self.guest.id]))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.guest.refresh_from_db()
        self.assertFalse(self.guest.vip_status)

    def test_public_lookup_by_confirmation_number(self) -> None:
        url = reverse("reservation-lookup", args=[self.reservation.confirmation_number.lower()])
        response = self.client.get(url)

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["confirmation_number"], self.reservation.confirmation_number)
        self.assertEqual(response.data["guest_name"], "Jose Rizal")
        self.assertNotIn("internal_notes", response.data)
        self.assertEqual(response.data["rooms"][0]["room_type_name"], "Deluxe")

    def test_public_lookup_unknown(self) -> None:
        response = self.client.get(reverse("reservation-lookup", args=["RES-UNKNOWN-00000"]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
