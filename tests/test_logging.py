"""Tests for JSON-lines logging (artha_kernel/logging_config.py)."""

import json
import logging
from datetime import datetime, timezone
from decimal import Decimal
from io import StringIO

import pytest

from artha_kernel.domain.values import TaxType
from artha_kernel.exceptions import InvalidNPWPError, NegativeAmountError
from artha_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _fresh_logging():
    reset_logging()
    yield
    reset_logging()
    configure_logging(level=logging.DEBUG)


@pytest.fixture
def json_lines():
    """Configure logging into a buffer; returns a reader for the parsed lines."""
    buffer = StringIO()
    handler = logging.StreamHandler(buffer)
    handler.setFormatter(StructuredFormatter())

    def install(level=logging.INFO):
        configure_logging(handler=handler, level=level)

    def lines():
        return [json.loads(raw) for raw in buffer.getvalue().splitlines() if raw]

    lines.install = install
    return lines


class TestStructuredFormatter:

    def test_fixed_keys(self, json_lines):
        json_lines.install()
        get_logger("engines.period").info("trends_computed")

        entry = json_lines()[0]
        assert entry["message"] == "trends_computed"
        assert entry["level"] == "INFO"
        assert entry["logger"] == "artha.engines.period"
        assert datetime.fromisoformat(entry["ts"]).tzinfo is not None

    def test_extra_fields_flattened(self, json_lines):
        json_lines.install()
        get_logger("engines.dashboard").info(
            "revenue_series_built", extra={"months": 6, "first_month": "2023-10"},
        )

        entry = json_lines()[0]
        assert entry["months"] == 6
        assert entry["first_month"] == "2023-10"

    def test_domain_values_serialized(self, json_lines):
        json_lines.install()
        get_logger("engines.tax").info("invoice_tax_calculated", extra={
            "gross_amount": Decimal("1020408.16"),
            "computed_at": datetime(2024, 3, 1, tzinfo=timezone.utc),
            "tax_type": TaxType.PPH23,
            "modes": ("include", "exclude"),
        })

        entry = json_lines()[0]
        assert entry["gross_amount"] == "1020408.16"
        assert entry["computed_at"] == "2024-03-01T00:00:00+00:00"
        assert entry["tax_type"] == "pph23"
        assert entry["modes"] == ["include", "exclude"]

    def test_extra_cannot_shadow_fixed_keys(self, json_lines):
        json_lines.install()
        get_logger("x").info("real_message", extra={"logger": "spoofed", "level_hint": 1})

        entry = json_lines()[0]
        assert entry["logger"] == "artha.x"
        assert entry["level_hint"] == 1

    def test_context_fields_merged(self, json_lines):
        json_lines.install()
        LogContext.set(correlation_id="dash-42", actor_id="user-7")
        get_logger("services.dashboard").info("stats_requested")

        entry = json_lines()[0]
        assert entry["correlation_id"] == "dash-42"
        assert entry["actor_id"] == "user-7"
        assert "request_id" not in entry

    def test_no_context_keys_without_context(self, json_lines):
        json_lines.install()
        get_logger("x").info("plain")

        entry = json_lines()[0]
        assert not {"correlation_id", "actor_id", "request_id"} & set(entry)

    def test_input_error_details(self, json_lines):
        json_lines.install()
        try:
            raise NegativeAmountError("amount", "-5")
        except NegativeAmountError:
            get_logger("ingestion.records").error("row_rejected", exc_info=True)

        entry = json_lines()[0]
        assert entry["exc_type"] == "NegativeAmountError"
        assert entry["exc_code"] == "NEGATIVE_AMOUNT"
        assert entry["exc_field"] == "amount"
        assert entry["exc_value"] == "-5"
        assert entry["exc_reason"] == "amount cannot be negative"
        assert "Traceback" in entry["traceback"]

    def test_npwp_error_digit_count(self, json_lines):
        json_lines.install()
        try:
            raise InvalidNPWPError("123", 3)
        except InvalidNPWPError:
            get_logger("engines.npwp").warning("npwp_rejected", exc_info=True)

        entry = json_lines()[0]
        assert entry["exc_code"] == "INVALID_NPWP"
        assert entry["exc_digit_count"] == 3

    def test_plain_exception_has_no_code(self, json_lines):
        json_lines.install()
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            get_logger("x").exception("unexpected")

        entry = json_lines()[0]
        assert entry["exc_type"] == "RuntimeError"
        assert entry["exc_message"] == "boom"
        assert "exc_code" not in entry

    def test_level_threshold(self, json_lines):
        json_lines.install(level=logging.INFO)
        log = get_logger("x")
        log.debug("hidden")
        log.info("shown")
        log.warning("also_shown")

        assert [e["message"] for e in json_lines()] == ["shown", "also_shown"]


class TestLogContext:

    def test_set_only_updates_given_fields(self):
        LogContext.set(correlation_id="c1", actor_id="u1")
        LogContext.set(actor_id="u2")
        assert LogContext.get_all() == {"correlation_id": "c1", "actor_id": "u2"}

    def test_clear(self):
        LogContext.set(request_id="r1")
        LogContext.clear()
        assert LogContext.get_all() == {}

    def test_bind_overrides_then_restores(self):
        LogContext.set(correlation_id="outer")
        with LogContext.bind(correlation_id="inner", request_id="r9"):
            assert LogContext.get_all() == {"correlation_id": "inner", "request_id": "r9"}
        assert LogContext.get_all() == {"correlation_id": "outer"}

    def test_bind_ignores_none(self):
        LogContext.set(actor_id="u1")
        with LogContext.bind(actor_id=None):
            assert LogContext.get_all() == {"actor_id": "u1"}

    def test_bind_rejects_unknown_field(self):
        with pytest.raises(TypeError):
            LogContext.bind(tenant="acme")


class TestConfigureLogging:

    def test_second_call_is_ignored(self):
        configure_logging(handler=logging.NullHandler())
        configure_logging(handler=logging.NullHandler())
        root = logging.getLogger("artha")
        assert len(root.handlers) == 1
        assert root.propagate is False

    def test_logger_names(self):
        assert get_logger("engines.tax").name == "artha.engines.tax"

    def test_nested_logger_reaches_handler(self, json_lines):
        json_lines.install(level=logging.DEBUG)
        get_logger("ingestion.adapters.csv").debug("probe_started")

        entry = json_lines()[0]
        assert entry["logger"] == "artha.ingestion.adapters.csv"

    def test_reset_restores_defaults(self):
        configure_logging(handler=logging.NullHandler(), level=logging.DEBUG)
        reset_logging()
        root = logging.getLogger("artha")
        assert root.handlers == []
        assert root.level == logging.WARNING
        assert root.propagate is True

    def test_reconfigure_after_reset(self, json_lines):
        configure_logging(handler=logging.NullHandler())
        reset_logging()
        json_lines.install()
        get_logger("x").info("after_reset")
        assert json_lines()[0]["message"] == "after_reset"
