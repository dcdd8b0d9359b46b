"""URL routing for analytics endpoints."""

from django.urls import path  # type: ignore

from .views import ReservationCountsView


urlpatterns = [
    # Do not prefix with 'analytics/' here; the namespace is defined in config.urls
    path('reservations/', ReservationCountsView.as_view(), name='analytics-reservations'),
]
