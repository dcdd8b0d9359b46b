import os

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("tropicana")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Expire checkout sessions the guest never paid
    "expire-checkout-sessions": {
        "task": "finances.expire_checkout_sessions",
        "schedule": crontab(minute="*/15"),
        "options": {"expires": 600},
    },
    # Cancel reservations that never reached the payment gateway
    "expire-abandoned-reservations": {
        "task": "bookings.expire_abandoned_reservations",
        "schedule": crontab(minute=30),
    },
}
