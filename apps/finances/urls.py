"""URL routing for the finance domain."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import SimpleRouter  # type: ignore

from .views import PaymentViewSet, PayMongoWebhookView

router = SimpleRouter()
router.register(r"", PaymentViewSet, basename="payment")

urlpatterns = [
    path("webhooks/paymongo/", PayMongoWebhookView.as_view(), name="paymongo-webhook"),
    path("", include(router.urls)),
]
