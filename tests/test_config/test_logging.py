"""Testes de config.logging: handler do serviço, correlation_id e mascaramento de PII."""

from __future__ import annotations

import io
import json
import logging
from collections.abc import Iterator

import pytest
from pythonjsonlogger.json import JsonFormatter

from app.bootstrap import initialize_test_app
from config.logging import (
    CorrelationIdFilter,
    PiiRedactionFilter,
    configure_logging,
    create_text_formatter,
    log_fallback,
    redact_text,
)
from config.logging.config import QUIET_LOGGERS
from config.logging.filters import REDACTED


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


def _record(msg: str = "payment_webhook_processed", **extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="app.use_cases.orders.reconcile_payment",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def _json_line(**extra: object) -> dict[str, object]:
    """Formata um record pelo handler instalado e devolve o JSON."""
    configure_logging(service_name="checkout_pedidos", correlation_id_getter=lambda: "req-42")
    handler = logging.getLogger().handlers[0]
    stream = io.StringIO()
    handler.setStream(stream)  # type: ignore[attr-defined]
    handler.handle(_record(**extra))
    return json.loads(stream.getvalue())


class TestConfigureLogging:
    """Instalação do handler do serviço."""

    @pytest.mark.parametrize("level", ["debug", "INFO", "Warning"])
    def test_accepts_levels_case_insensitively(self, level: str) -> None:
        configure_logging(level=level)
        assert logging.getLogger().level == getattr(logging, level.upper())

    def test_rejects_unknown_level(self) -> None:
        with pytest.raises(ValueError, match="Nível de log inválido"):
            configure_logging(level="VERBOSE")

    def test_single_handler_with_both_filters(self) -> None:
        configure_logging()
        configure_logging()

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        kinds = {type(f) for f in handlers[0].filters}
        assert kinds == {CorrelationIdFilter, PiiRedactionFilter}

    def test_noisy_libraries_are_quieted(self) -> None:
        configure_logging(level="DEBUG")

        for name in QUIET_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_initialize_test_app_uses_text_output(self) -> None:
        initialize_test_app()

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert not isinstance(root.handlers[0].formatter, JsonFormatter)


class TestCorrelationIdFilter:
    def test_uses_getter_and_service(self) -> None:
        record = _record()
        CorrelationIdFilter("checkout_pedidos", lambda: "req-1").filter(record)

        assert record.correlation_id == "req-1"
        assert record.service == "checkout_pedidos"

    def test_explicit_correlation_id_wins(self) -> None:
        record = _record(correlation_id="from-extra")
        CorrelationIdFilter("checkout_pedidos", lambda: "req-1").filter(record)

        assert record.correlation_id == "from-extra"

    def test_without_getter_is_empty(self) -> None:
        record = _record()
        CorrelationIdFilter("checkout_pedidos").filter(record)

        assert record.correlation_id == ""


class TestPiiRedaction:
    def test_customer_fields_are_redacted(self) -> None:
        record = _record(
            order_id=7,
            customer_email="cliente@example.com",
            cpf="12345678909",
            phone="11987654321",
            bcc=["ops@example.com"],
        )

        assert PiiRedactionFilter().filter(record) is True
        assert record.customer_email == REDACTED
        assert record.cpf == REDACTED
        assert record.phone == REDACTED
        assert record.bcc == REDACTED
        assert record.order_id == 7

    def test_nested_carrier_payload_is_redacted(self) -> None:
        payload = {
            "service": 2,
            "to": {
                "name": "Maria Souza",
                "email": "cliente@example.com",
                "phone": "11987654321",
                "document": "12345678909",
                "postal_code": "01001000",
            },
            "options": {"tags": [{"tag": "Pedido #7"}]},
        }
        record = _record("carrier_booking_failed", request_payload=payload)

        PiiRedactionFilter().filter(record)

        to = record.request_payload["to"]
        assert to["email"] == REDACTED
        assert to["phone"] == REDACTED
        assert to["document"] == REDACTED
        assert to["postal_code"] == REDACTED
        assert record.request_payload["service"] == 2
        assert record.request_payload["options"] == {"tags": [{"tag": "Pedido #7"}]}
        assert payload["to"]["email"] == "cliente@example.com"

    def test_emails_and_formatted_cpf_inside_error_text(self) -> None:
        text = "550 mailbox cliente@example.com unavailable (cpf 123.456.789-09)"

        assert redact_text(text) == f"550 mailbox c***@example.com unavailable (cpf {REDACTED})"

    def test_payment_ids_and_order_fields_are_kept(self) -> None:
        record = _record(payment_id="12345678901", status_code=404, reason="unknown_order")

        PiiRedactionFilter().filter(record)

        assert record.payment_id == "12345678901"
        assert record.status_code == 404
        assert record.reason == "unknown_order"

    def test_message_and_standard_attributes_are_untouched(self) -> None:
        record = _record("email_send_failed")

        PiiRedactionFilter().filter(record)

        assert record.getMessage() == "email_send_failed"
        assert record.name == "app.use_cases.orders.reconcile_payment"


class TestJsonOutput:
    def test_required_fields_renamed(self) -> None:
        line = _json_line(order_id=3)

        assert line["level"] == "INFO"
        assert line["logger"] == "app.use_cases.orders.reconcile_payment"
        assert line["message"] == "payment_webhook_processed"
        assert line["correlation_id"] == "req-42"
        assert line["service"] == "checkout_pedidos"
        assert line["order_id"] == 3

    def test_pii_never_reaches_output(self) -> None:
        line = _json_line(customer_email="cliente@example.com", error="to cliente@example.com")

        assert "cliente@example.com" not in json.dumps(line)
        assert line["customer_email"] == REDACTED
        assert line["error"] == "to c***@example.com"


def test_text_formatter_shows_service_and_correlation() -> None:
    record = _record("postal_source_unavailable", correlation_id="req-9", service="checkout_pedidos")

    output = create_text_formatter().format(record)

    assert "[checkout_pedidos] [req-9]" in output
    assert output.endswith("reconcile_payment: postal_source_unavailable")


def test_log_fallback_fields(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("app.services.postal_lookup")

    with caplog.at_level(logging.INFO, logger="app.services.postal_lookup"):
        log_fallback(logger, "postal_lookup", reason="viacep_unavailable", elapsed_ms=12.5)

    record = caplog.records[-1]
    assert record.getMessage() == "Fallback applied for postal_lookup"
    assert record.fallback_used is True
    assert record.component == "postal_lookup"
    assert record.reason == "viacep_unavailable"
    assert record.elapsed_ms == 12.5
