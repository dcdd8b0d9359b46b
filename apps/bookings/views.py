"""API views for the booking domain."""

from __future__ import annotations

import logging

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import filters, mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.throttling import ScopedRateThrottle  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.properties.models import BusinessUnit, RoomType

from .models import Guest, Reservation
from .pricing import PricingError, quote_dates
from .serializers import (
    BookingCreateSerializer,
    GuestSerializer,
    PriceQuerySerializer,
    ReservationCancelSerializer,
    ReservationLookupSerializer,
    ReservationSerializer,
    ReservationStatusSerializer,
    flatten_errors,
)
from .services import (
    BookingError,
    ReservationStateError,
    cancel_reservation,
    confirm_reservation,
    create_reservation_with_payment,
    find_reservation,
    toggle_guest_vip_status,
    update_reservation_status,
)

logger = logging.getLogger(__name__)


class PricingCalculateView(APIView):
    """Quote a stay: subtotal, taxes, service fee and total."""

    permission_classes = [permissions.AllowAny]

    def get(self, request, *args, **kwargs):  # type: ignore
        serializer = PriceQuerySerializer(data=request.query_params)
        if not serializer.is_valid():
            return Response({"error": "Invalid input data"}, status=status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data

        try:
            business_unit = BusinessUnit.objects.filter(pk=data["business_unit_id"]).first()
            if business_unit is None:
                return Response({"error": "Business unit not found"}, status=status.HTTP_404_NOT_FOUND)
            room_type = RoomType.objects.filter(
                pk=data["room_type_id"],
                business_unit=business_unit,
            ).first()
            if room_type is None:
                return Response({"error": "Room type not found"}, status=status.HTTP_404_NOT_FOUND)

            quote = quote_dates(business_unit, room_type, data["check_in_date"], data["check_out_date"])
        except PricingError as exc:
            return Response({"error": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except Exception:
            logger.exception("Price calculation failed")
            return Response({"error": "Internal server error"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response(quote.as_dict())


class CreateWithPaymentView(APIView):
    """Create a reservation and open a PayMongo checkout session for it."""

    permission_classes = [permissions.AllowAny]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "booking"

    def post(self, request, *args, **kwargs):  # type: ignore
        serializer = BookingCreateSerializer(data=request.data)
        if not serializer.is_valid():
            details = "Invalid data: " + ", ".join(flatten_errors(serializer.errors))
            return Response(
                {"error": "Validation failed", "details": details},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            result = create_reservation_with_payment(serializer.to_booking_request())
        except BookingError as exc:
            return Response(exc.as_dict(), status=exc.status_code)
        except Exception as exc:
            logger.exception("Reservation with payment failed")
            return Response(
                {"error": "Failed to create reservation", "details": str(exc) or "Unknown error"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        return Response(result.as_dict(), status=status.HTTP_200_OK)


class ReservationLookupView(APIView):
    """Public reservation summary by confirmation number."""

    permission_classes = [permissions.AllowAny]

    def get(self, request, confirmation_number: str, *args, **kwargs):  # type: ignore
        reservation = find_reservation(confirmation_number)
        if reservation is None:
            return Response({"error": "Reservation not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(ReservationLookupSerializer(reservation).data)


class ReservationViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """Staff management of reservations."""

    queryset = (
        Reservation.objects.select_related("business_unit", "guest")
        .prefetch_related("rooms__room_type")
        .all()
    )
    serializer_class = ReservationSerializer
    permission_classes = [permissions.IsAdminUser]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = {
        "business_unit": ["exact"],
        "status": ["exact"],
        "payment_status": ["exact"],
        "check_in_date": ["gte", "lte"],
    }
    search_fields = ["confirmation_number", "guest__email", "guest__last_name"]
    ordering_fields = ["created_at", "check_in_date", "total_amount"]

    @action(detail=True, methods=["post"])
    def confirm(self, request, pk=None):  # type: ignore
        reservation: Reservation = self.get_object()  # type: ignore
        try:
            confirm_reservation(reservation)
        except ReservationStateError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(ReservationSerializer(reservation).data)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        reservation: Reservation = self.get_object()  # type: ignore
        serializer = ReservationCancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            reservation = cancel_reservation(reservation, serializer.validated_data["reason"])
        except ReservationStateError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(ReservationSerializer(reservation).data)

    @action(detail=True, methods=["post"], url_path="set-status")
    def set_status(self, request, pk=None):  # type: ignore
        reservation: Reservation = self.get_object()  # type: ignore
        serializer = ReservationStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        update_reservation_status(
            reservation,
            serializer.validated_data["status"],
            internal_notes=serializer.validated_data.get("internal_notes"),
        )
        return Response(ReservationSerializer(reservation).data)


class GuestViewSet(viewsets.ModelViewSet):
    """Staff management of guest profiles."""

    queryset = Guest.objects.select_related("business_unit").all()
    serializer_class = GuestSerializer
    permission_classes = [permissions.IsAdminUser]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = ["business_unit", "source", "vip_status"]
    search_fields = ["first_name", "last_name", "email", "phone"]

    @action(detail=True, methods=["post"], url_path="toggle-vip")
    def toggle_vip(self, request, pk=None):  # type: ignore
        guest = toggle_guest_vip_status(self.get_object())
        return Response(GuestSerializer(guest).data)
