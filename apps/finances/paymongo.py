"""
PayMongo payment gateway integration.

Thin client over the PayMongo REST API (https://developers.paymongo.com):
checkout sessions, refunds and webhook signature verification. Requests are
authenticated with HTTP basic auth using the secret key as user name.

When no secret key is configured and PAYMONGO_EMULATE is enabled (the
default in development settings) checkout sessions are emulated locally so
that the booking funnel can be exercised without gateway credentials.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import time
import uuid
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

import requests
from django.conf import settings  # type: ignore

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "Paymongo-Signature"


class PayMongoError(Exception):
    """Raised when the gateway rejects a request or cannot be reached."""

    def __init__(self, message: str, *, status_code: int | None = None, errors: list | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.errors = errors or []


def to_centavos(amount: Decimal) -> int:
    """Amounts are sent to PayMongo as integers in the smallest currency unit."""

    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_centavos(amount: int | str | None) -> Decimal:
    if amount in (None, ""):
        return Decimal("0.00")
    return (Decimal(str(amount)) / 100).quantize(Decimal("0.01"))


class PayMongoClient:
    def __init__(
        self,
        secret_key: str | None = None,
        *,
        base_url: str | None = None,
        timeout: int | None = None,
        session: requests.Session | None = None,
    ):
        self.secret_key = settings.PAYMONGO_SECRET_KEY if secret_key is None else secret_key
        self.base_url = (base_url or settings.PAYMONGO_API_BASE_URL).rstrip("/") + "/"
        self.timeout = timeout or settings.PAYMONGO_TIMEOUT_SECONDS
        self.session = session or requests.Session()

    @property
    def emulated(self) -> bool:
        return not self.secret_key and bool(settings.PAYMONGO_EMULATE)

    def _ensure_configured(self) -> None:
        if not self.secret_key:
            raise PayMongoError("PayMongo secret key is not configured")

    def _request(self, method: str, path: str, payload: dict | None = None) -> dict[str, Any]:
        url = f"{self.base_url}{path.lstrip('/')}"
        try:
            response = self.session.request(
                method,
                url,
                json=payload,
                auth=(self.secret_key, ""),
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as exc:
            logger.error(f"PayMongo request {method} {path} failed: {exc}")
            raise PayMongoError(f"Could not reach PayMongo: {exc}") from exc

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code >= 400:
            errors = (body.get("errors") or []) if isinstance(body, dict) else []
            detail = "; ".join(
                str(error.get("detail", "")) for error in errors if isinstance(error, dict)
            ) or response.reason or "unknown error"
            logger.error(f"PayMongo {method} {path} returned {response.status_code}: {detail}")
            raise PayMongoError(
                f"PayMongo error {response.status_code}: {detail}",
                status_code=response.status_code,
                errors=errors,
            )
        return body

    # ------------------------------------------------------------------
    # Checkout sessions
    # ------------------------------------------------------------------

    def create_checkout_session(self, attributes: dict[str, Any]) -> dict[str, Any]:
        """Create a hosted checkout page; returns the `data` resource."""

        if self.emulated:
            return self._emulated_checkout_session(attributes)
        self._ensure_configured()
        body = self._request("POST", "checkout_sessions", {"data": {"attributes": attributes}})
        data = body.get("data") or {}
        if not data.get("id") or not data.get("attributes", {}).get("checkout_url"):
            raise PayMongoError("PayMongo returned an incomplete checkout session")
        logger.info(f"PayMongo checkout session {data['id']} created")
        return data

    def retrieve_checkout_session(self, session_id: str) -> dict[str, Any]:
        self._ensure_configured()
        return self._request("GET", f"checkout_sessions/{session_id}").get("data") or {}

    def expire_checkout_session(self, session_id: str) -> dict[str, Any]:
        if self.emulated:
            return {"id": session_id, "attributes": {"status": "expired"}}
        self._ensure_configured()
        return self._request("POST", f"checkout_sessions/{session_id}/expire").get("data") or {}

    # ------------------------------------------------------------------
    # Refunds
    # ------------------------------------------------------------------

    def create_refund(
        self,
        payment_id: str,
        amount: Decimal,
        *,
        reason: str = "requested_by_customer",
        notes: str = "",
    ) -> dict[str, Any]:
        self._ensure_configured()
        attributes: dict[str, Any] = {
            "amount": to_centavos(amount),
            "payment_id": payment_id,
            "reason": reason,
        }
        if notes:
            attributes["notes"] = notes[:255]
        return self._request("POST", "refunds", {"data": {"attributes": attributes}}).get("data") or {}

    def _emulated_checkout_session(self, attributes: dict[str, Any]) -> dict[str, Any]:
        session_id = f"cs_emulated_{uuid.uuid4().hex[:24]}"
        logger.warning(
            "Using emulated PayMongo checkout session (no secret key configured)"
        )
        return {
            "id": session_id,
            "type": "checkout_session",
            "attributes": {
                **attributes,
                "checkout_url": f"{settings.SITE_URL}/booking/emulated-checkout?session_id={session_id}",
                "status": "active",
                "livemode": False,
                "payment_intent": None,
                "payments": [],
            },
        }


def get_client() -> PayMongoClient:
    return PayMongoClient()


def verify_webhook_signature(
    raw_body: bytes,
    header: str | None,
    secret: str,
    *,
    tolerance: int | None = None,
    now: float | None = None,
) -> bool:
    """
    Verify a `Paymongo-Signature` header.

    The header looks like ``t=1496734173,te=<hex>,li=<hex>``: ``te`` carries
    the test mode signature and ``li`` the live mode one. Each is the hex
    HMAC-SHA256 of ``"<t>.<raw body>"`` keyed with the webhook secret.
    """

    if not header or not secret:
        return False

    parts: dict[str, str] = {}
    for item in header.split(","):
        key, _, value = item.strip().partition("=")
        if key and value:
            parts[key] = value

    timestamp = parts.get("t")
    if not timestamp:
        return False
    try:
        issued_at = int(timestamp)
    except ValueError:
        return False

    if tolerance is None:
        tolerance = settings.PAYMONGO_WEBHOOK_TOLERANCE_SECONDS
    current = time.time() if now is None else now
    if tolerance and abs(current - issued_at) > tolerance:
        return False

    signed_payload = timestamp.encode("utf-8") + b"." + raw_body
    expected = hmac.new(secret.encode("utf-8"), signed_payload, hashlib.sha256).hexdigest()
    candidates = [parts[key] for key in ("te", "li") if parts.get(key)]
    return any(hmac.compare_digest(expected, candidate) for candidate in candidates)
