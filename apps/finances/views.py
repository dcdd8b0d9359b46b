"""API views for payments.

Payments are opened by the booking funnel and settled by PayMongo webhooks.
Staff can browse them, override their status and issue refunds.
"""

from __future__ import annotations

import json
import logging

from django.conf import settings  # type: ignore
from django.http import JsonResponse  # type: ignore
from django.utils.decorators import method_decorator  # type: ignore
from django.views.decorators.csrf import csrf_exempt  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import filters, mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from .filters import PaymentFilterSet
from .models import Payment
from .paymongo import SIGNATURE_HEADER, verify_webhook_signature
from .serializers import PaymentRefundSerializer, PaymentSerializer, PaymentStatusSerializer
from .services import PaymentActionError, process_webhook_event, refund_payment, set_payment_status

logger = logging.getLogger(__name__)


class PaymentViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """Staff access to payments."""

    queryset = (
        Payment.objects.select_related("reservation")
        .prefetch_related("line_items", "checkout_sessions", "transactions")
        .all()
    )
    serializer_class = PaymentSerializer
    permission_classes = [permissions.IsAdminUser]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = PaymentFilterSet
    search_fields = ["reservation__confirmation_number", "guest_email", "guest_name", "provider_payment_id"]
    ordering_fields = ["created_at", "amount", "processed_at"]

    @action(detail=True, methods=["post"], url_path="set-status")
    def set_status(self, request, pk=None):  # type: ignore
        payment = self.get_object()
        serializer = PaymentStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        set_payment_status(
            payment,
            serializer.validated_data["status"],
            notes=serializer.validated_data.get("notes", ""),
        )
        return Response(PaymentSerializer(payment).data)

    @action(detail=True, methods=["post"])
    def refund(self, request, pk=None):  # type: ignore
        payment = self.get_object()
        serializer = PaymentRefundSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            refund_payment(
                payment,
                reason=serializer.validated_data["reason"],
                amount=serializer.validated_data.get("amount"),
            )
        except PaymentActionError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        payment.refresh_from_db()
        return Response(PaymentSerializer(payment).data)


@method_decorator(csrf_exempt, name="dispatch")
class PayMongoWebhookView(APIView):
    """
    Receive PayMongo webhook events.

    The raw request body is verified against the ``Paymongo-Signature``
    header before it is parsed; events are applied idempotently.
    """

    authentication_classes: list = []
    permission_classes = [permissions.AllowAny]

    def post(self, request, *args, **kwargs):  # type: ignore
        raw_body = request.body
        signature = request.headers.get(SIGNATURE_HEADER)
        if not verify_webhook_signature(raw_body, signature, settings.PAYMONGO_WEBHOOK_SECRET):
            logger.error("PayMongo webhook rejected: invalid signature")
            return JsonResponse({"status": "error", "message": "Invalid signature"}, status=403)

        try:
            event = json.loads(raw_body)
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.error("PayMongo webhook: invalid JSON")
            return JsonResponse({"status": "error", "message": "Invalid JSON"}, status=400)
        if not isinstance(event, dict):
            return JsonResponse({"status": "error", "message": "Invalid JSON"}, status=400)

        try:
            outcome = process_webhook_event(event)
        except ValueError as exc:
            logger.error(f"PayMongo webhook: {exc}")
            return JsonResponse({"status": "error", "message": str(exc)}, status=400)

        return JsonResponse({"status": "success", "message": outcome.message}, status=200)
