"""Celery tasks for the booking domain."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from .services import expire_abandoned_reservations as expire_abandoned

logger = logging.getLogger(__name__)


# ============================================================================
# PERIODIC TASKS (run by Celery Beat)
# ============================================================================

@shared_task(name="bookings.expire_abandoned_reservations")
def expire_abandoned_reservations() -> dict[str, int]:
    """
    Cancel reservations abandoned before payment.

    Pending reservations whose payment never reached the gateway (for
    example when opening the checkout session failed) are cancelled once
    they are older than the checkout session lifetime.

    Runs hourly via Celery Beat.

    Returns:
        dict: {"expired": number of cancelled reservations}
    """
    expired = expire_abandoned()
    if expired:
        logger.info(f"Cancelled {expired} abandoned reservations")
    return {"expired": expired}
