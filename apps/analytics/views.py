"""API views for analytics.

Front-desk counters for the staff dashboard: today's arrivals and
departures, reservations waiting for action and collected revenue.
"""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from rest_framework import serializers  # type: ignore
from rest_framework.permissions import IsAdminUser  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.bookings.models import Reservation
from apps.bookings.pricing import to_money
from apps.finances.models import Payment


class CountsQuerySerializer(serializers.Serializer):
    business_unit = serializers.UUIDField(required=False)


class ReservationCountsView(APIView):
    """Reservation counters for today, optionally scoped to one business unit."""

    permission_classes = [IsAdminUser]

    def get(self, request, format=None):  # type: ignore
        reservation_qs = Reservation.objects.all()
        payment_qs = Payment.objects.filter(status=Payment.Status.PAID)

        query = CountsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        business_unit = query.validated_data.get("business_unit")
        if business_unit:
            reservation_qs = reservation_qs.filter(business_unit_id=business_unit)
            payment_qs = payment_qs.filter(reservation__business_unit_id=business_unit)

        today = timezone.localdate()
        today_check_ins = reservation_qs.filter(
            check_in_date__date=today,
            status__in=[Reservation.Status.CONFIRMED, Reservation.Status.CHECKED_IN],
        ).count()
        today_check_outs = (
            reservation_qs.filter(check_out_date__date=today)
            .exclude(status__in=[Reservation.Status.CANCELLED, Reservation.Status.NO_SHOW])
            .count()
        )
        pending = reservation_qs.filter(status=Reservation.Status.PENDING).count()
        revenue = to_money(payment_qs.aggregate(total=models.Sum("amount")).get("total") or 0)

        return Response(
            {
                "date": today.isoformat(),
                "today_check_ins": today_check_ins,
                "today_check_outs": today_check_outs,
                "pending_reservations": pending,
                "total_reservations": reservation_qs.count(),
                "revenue": str(revenue),
            }
        )
