"""Testes da verificação de x-signature do Mercado Pago."""

from __future__ import annotations

import hashlib
import hmac
import logging

import pytest

from api.connectors.mercadopago.webhook import (
    InvalidSignatureError,
    authenticate_payment_webhook,
    build_manifest,
    verify_payment_signature,
)

SECRET = "segredo-webhook"


def _sign(payment_id: str, request_id: str, ts: str, secret: str = SECRET) -> str:
    manifest = f"id:{payment_id.lower()};request-id:{request_id};ts:{ts};"
    digest = hmac.new(secret.encode(), manifest.encode(), hashlib.sha256).hexdigest()
    return f"ts={ts},v1={digest}"


def test_manifest_lowercases_payment_id() -> None:
    assert build_manifest("ABC123", "req-1", "1700") == "id:abc123;request-id:req-1;ts:1700;"


def test_valid_signature_is_accepted() -> None:
    header = _sign("123456", "req-1", "1704908010")

    result = verify_payment_signature(header, "req-1", "123456", SECRET)

    assert result.valid is True
    assert result.skipped is False


def test_alphanumeric_id_signed_in_lowercase() -> None:
    header = _sign("AbC9", "req-1", "1704908010")

    result = verify_payment_signature(header, "req-1", "AbC9", SECRET)

    assert result.valid is True


def test_header_parts_in_any_order_with_spaces() -> None:
    header = _sign("123", "req-1", "99")
    ts_part, v1_part = header.split(",")

    result = verify_payment_signature(f" {v1_part} , {ts_part} ", "req-1", "123", SECRET)

    assert result.valid is True


@pytest.mark.parametrize(
    ("header", "request_id", "payment_id", "expected_error"),
    [
        (None, "req-1", "123", "missing_signature"),
        ("ts=1,v1=abc", None, "123", "missing_request_id"),
        ("v1=abc", "req-1", "123", "malformed_signature"),
        ("ts=1", "req-1", "123", "malformed_signature"),
        ("garbage", "req-1", "123", "malformed_signature"),
        ("ts=1,v1=abc", "req-1", None, "missing_payment_id"),
        ("ts=1,v1=deadbeef", "req-1", "123", "signature_mismatch"),
    ],
)
def test_invalid_signatures(
    header: str | None,
    request_id: str | None,
    payment_id: str | None,
    expected_error: str,
) -> None:
    result = verify_payment_signature(header, request_id, payment_id, SECRET)

    assert result.valid is False
    assert result.error == expected_error


def test_signature_from_other_secret_is_rejected() -> None:
    header = _sign("123", "req-1", "99", secret="outro")

    result = verify_payment_signature(header, "req-1", "123", SECRET)

    assert result.error == "signature_mismatch"


def test_signature_for_other_payment_is_rejected() -> None:
    header = _sign("999", "req-1", "99")

    result = verify_payment_signature(header, "req-1", "123", SECRET)

    assert result.valid is False


def test_missing_secret_skips_verification(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        result = verify_payment_signature(None, None, None, "")

    assert result.valid is True
    assert result.skipped is True
    assert any(r.getMessage() == "payment_signature_check_disabled" for r in caplog.records)


def test_authenticate_reads_data_id_from_query() -> None:
    headers = {"x-signature": _sign("555", "req-9", "10"), "x-request-id": "req-9"}

    result = authenticate_payment_webhook({"data.id": "555", "type": "payment"}, headers, SECRET)

    assert result.valid is True


def test_authenticate_raises_on_mismatch() -> None:
    headers = {"x-signature": _sign("555", "req-9", "10"), "x-request-id": "req-9"}

    with pytest.raises(InvalidSignatureError, match="signature_mismatch"):
        authenticate_payment_webhook({"data.id": "556"}, headers, SECRET)
