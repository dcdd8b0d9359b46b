"""URL routing for the hotel catalogue."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import BusinessUnitViewSet, RoomTypeViewSet

router = DefaultRouter()
router.register(r"properties", BusinessUnitViewSet, basename="business-unit")
router.register(r"room-types", RoomTypeViewSet, basename="room-type")

urlpatterns = [
    path("", include(router.urls)),
]
