"""Hotel catalogue API views."""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import permissions, viewsets  # type: ignore
from rest_framework.filters import OrderingFilter, SearchFilter  # type: ignore

from .filters import BusinessUnitFilterSet, RoomTypeFilterSet
from .models import BusinessUnit, RoomType
from .serializers import BusinessUnitSerializer, RoomTypeSerializer


class IsStaffOrReadOnly(permissions.BasePermission):
    """Anyone may browse the catalogue; only staff may change it."""

    def has_permission(self, request, view):  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        return bool(request.user and request.user.is_staff)


class BusinessUnitViewSet(viewsets.ModelViewSet):
    """Viewset for hotel properties."""

    queryset = BusinessUnit.objects.prefetch_related("room_types")
    serializer_class = BusinessUnitSerializer
    permission_classes = [IsStaffOrReadOnly]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_class = BusinessUnitFilterSet
    search_fields = ["name", "display_name", "city"]
    ordering_fields = ["sort_order", "name", "created_at"]

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        if getattr(self.request.user, "is_staff", False):
            return qs
        return qs.public()


class RoomTypeViewSet(viewsets.ModelViewSet):
    """Viewset for room types; filter by `business_unit` for one property."""

    queryset = RoomType.objects.select_related("business_unit")
    serializer_class = RoomTypeSerializer
    permission_classes = [IsStaffOrReadOnly]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = RoomTypeFilterSet
    ordering_fields = ["sort_order", "base_rate", "name"]

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        if getattr(self.request.user, "is_staff", False):
            return qs
        return qs.bookable()
