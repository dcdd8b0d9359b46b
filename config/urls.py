"""URL configuration for the Tropicana Hotels platform.

The `urlpatterns` list routes URLs to views. It includes the Django admin,
JWT token endpoints for staff, the public booking funnel and the
application‑level routers provided by each app.
"""
from django.contrib import admin  # type: ignore
from django.urls import path, include  # type: ignore
from drf_spectacular.views import SpectacularAPIView  # type: ignore
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView  # type: ignore

# API versioning. v1 is our initial version; future versions can be added here.

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/auth/token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('api/v1/auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('api/v1/schema/', SpectacularAPIView.as_view(), name='schema'),
    # Application URLs
    path('api/v1/', include('apps.properties.urls')),
    path('api/v1/', include('apps.bookings.urls')),
    path('api/v1/payments/', include('apps.finances.urls')),
    path('api/v1/analytics/', include('apps.analytics.urls')),
]
