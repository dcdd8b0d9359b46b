"""URL routing for the booking domain."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import SimpleRouter  # type: ignore

from .views import (
    CreateWithPaymentView,
    GuestViewSet,
    PricingCalculateView,
    ReservationLookupView,
    ReservationViewSet,
)

router = SimpleRouter()
router.register(r"reservations", ReservationViewSet, basename="reservation")
router.register(r"guests", GuestViewSet, basename="guest")

urlpatterns = [
    path("pricing/calculate/", PricingCalculateView.as_view(), name="pricing-calculate"),
    path("booking/create-with-payment/", CreateWithPaymentView.as_view(), name="booking-create-with-payment"),
    path(
        "reservations/lookup/<str:confirmation_number>/",
        ReservationLookupView.as_view(),
        name="reservation-lookup",
    ),
    path("", include(router.urls)),
]
