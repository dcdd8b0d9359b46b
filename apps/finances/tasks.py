"""Celery tasks for the finance domain."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from .services import expire_stale_checkout_sessions

logger = logging.getLogger(__name__)


@shared_task(name="finances.expire_checkout_sessions")
def expire_checkout_sessions() -> dict[str, int]:
    """
    Expire unpaid checkout sessions.

    Active sessions past ``expires_at`` are marked expired, their pending
    payment is cancelled and a reservation still waiting for payment is
    cancelled with reason "Payment window expired".

    Runs every 15 minutes via Celery Beat.
    """
    expired = expire_stale_checkout_sessions()
    if expired:
        logger.info(f"Expired {expired} checkout sessions")
    return {"expired": expired}
