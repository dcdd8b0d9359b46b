"""Tests for the PayMongo HTTP client and webhook signatures."""

from __future__ import annotations

import hashlib
import hmac
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
import requests
from django.test import override_settings

from apps.finances.paymongo import (
    PayMongoClient,
    PayMongoError,
    from_centavos,
    to_centavos,
    verify_webhook_signature,
)

SECRET = "whsk_test_suite"


def sign(body: bytes, timestamp: int, secret: str = SECRET) -> str:
    return hmac.new(secret.encode(), f"{timestamp}.".encode() + body, hashlib.sha256).hexdigest()


def fake_response(status_code: int, body: dict | None = None, reason: str = "") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.reason = reason
    if body is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = body
    return response


def test_centavo_conversion() -> None:
    assert to_centavos(Decimal("12200.00")) == 1220000
    assert to_centavos(Decimal("0.005")) == 1
    assert from_centavos(1220050) == Decimal("12200.50")
    assert from_centavos(None) == Decimal("0.00")


def test_create_checkout_session_posts_attributes() -> None:
    session = MagicMock()
    session.request.return_value = fake_response(
        200,
        {"data": {"id": "cs_1", "attributes": {"checkout_url": "https://checkout.paymongo.com/cs_1"}}},
    )
    client = PayMongoClient("sk_test_key", base_url="https://api.paymongo.com/v1", session=session)

    data = client.create_checkout_session({"line_items": []})

    assert data["id"] == "cs_1"
    args, kwargs = session.request.call_args
    assert args == ("POST", "https://api.paymongo.com/v1/checkout_sessions")
    assert kwargs["json"] == {"data": {"attributes": {"line_items": []}}}
    assert kwargs["auth"] == ("sk_test_key", "")
    assert kwargs["timeout"] == 30


def test_retrieve_checkout_session() -> None:
    session = MagicMock()
    session.request.return_value = fake_response(
        200,
        {"data": {"id": "cs_1", "attributes": {"status": "active", "payments": []}}},
    )
    client = PayMongoClient("sk_test_key", base_url="https://api.paymongo.com/v1", session=session)

    data = client.retrieve_checkout_session("cs_1")

    assert data["attributes"]["status"] == "active"
    args, kwargs = session.request.call_args
    assert args == ("GET", "https://api.paymongo.com/v1/checkout_sessions/cs_1")
    assert kwargs["json"] is None


def test_gateway_errors_are_raised() -> None:
    session = MagicMock()
    session.request.return_value = fake_response(
        400,
        {"errors": [{"code": "parameter_invalid", "detail": "amount is invalid"}]},
    )
    client = PayMongoClient("sk_test_key", session=session)

    with pytest.raises(PayMongoError) as excinfo:
        client.create_checkout_session({})

    assert excinfo.value.status_code == 400
    assert "amount is invalid" in str(excinfo.value)


def test_network_errors_are_wrapped() -> None:
    session = MagicMock()
    session.request.side_effect = requests.exceptions.ConnectTimeout("timed out")
    client = PayMongoClient("sk_test_key", session=session)

    with pytest.raises(PayMongoError, match="Could not reach PayMongo"):
        client.create_refund("pay_1", Decimal("100.00"))


def test_incomplete_session_is_rejected() -> None:
    session = MagicMock()
    session.request.return_value = fake_response(200, {"data": {"id": "cs_1", "attributes": {}}})
    client = PayMongoClient("sk_test_key", session=session)

    with pytest.raises(PayMongoError, match="incomplete"):
        client.create_checkout_session({})


@override_settings(PAYMONGO_EMULATE=True)
def test_emulated_session_without_secret_key() -> None:
    session = MagicMock()
    client = PayMongoClient("", session=session)

    data = client.create_checkout_session({"reference_number": "RES-1"})

    assert data["id"].startswith("cs_emulated_")
    assert "session_id=" in data["attributes"]["checkout_url"]
    session.request.assert_not_called()


@override_settings(PAYMONGO_EMULATE=False)
def test_missing_secret_key_without_emulation() -> None:
    with pytest.raises(PayMongoError, match="not configured"):
        PayMongoClient("", session=MagicMock()).create_checkout_session({})


def test_signature_accepts_test_and_live_modes() -> None:
    body = b'{"data": {}}'
    signature = sign(body, 1700000000)

    assert verify_webhook_signature(body, f"t=1700000000,te={signature},li=", SECRET, now=1700000010)
    assert verify_webhook_signature(body, f"t=1700000000,te=,li={signature}", SECRET, now=1700000010)


def test_signature_rejections() -> None:
    body = b'{"data": {}}'
    signature = sign(body, 1700000000)

    assert not verify_webhook_signature(body, None, SECRET)
    assert not verify_webhook_signature(body, f"te={signature}", SECRET)
    assert not verify_webhook_signature(b'{"data": 1}', f"t=1700000000,te={signature}", SECRET, now=1700000000)
    assert not verify_webhook_signature(body, f"t=1700000000,te={signature}", "other", now=1700000000)
    assert not verify_webhook_signature(
        body,
        f"t=1700000000,te={signature}",
        SECRET,
        tolerance=300,
        now=1700000000 + 301,
    )
