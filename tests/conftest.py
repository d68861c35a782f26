"""
Pytest fixtures for the Artha core test suite.

Provides:
- Structured logging configured for the session
- Captured JSON log records
- Deterministic clocks
- Record builders for invoices and proposals
"""

import json
import logging
from datetime import datetime, timezone
from decimal import Decimal
from io import StringIO

import pytest

from artha_config import clear_config_cache
from artha_kernel.domain.clock import DeterministicClock
from artha_kernel.domain.records import InvoiceRecord, ProposalRecord
from artha_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture(autouse=True)
def _clear_config_cache():
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def captured_logs():
    """
    Capture artha logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            calculate_invoice_tax(...)
            logs = captured_logs()
            assert any(r["message"] == "invoice_tax_calculated" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("artha")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Clock fixtures
# =============================================================================

# Mid-March, so the previous month is February of the same year
NOW = datetime(2024, 3, 15, 9, 30, 0)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def deterministic_clock():
    """A clock fixed at NOW (naive, local wall time)."""
    return DeterministicClock(NOW)


@pytest.fixture
def utc_clock():
    return DeterministicClock(datetime(2024, 3, 15, 9, 30, 0, tzinfo=timezone.utc))


# =============================================================================
# Record builders
# =============================================================================


def make_invoice(created_at, amount, status="paid", **kwargs) -> InvoiceRecord:
    return InvoiceRecord(
        created_at=created_at,
        amount=Decimal(str(amount)),
        status=status,
        **kwargs,
    )


def make_proposal(created_at, amount, status="sent", **kwargs) -> ProposalRecord:
    return ProposalRecord(
        created_at=created_at,
        amount=Decimal(str(amount)),
        status=status,
        **kwargs,
    )


@pytest.fixture
def invoice():
    return make_invoice


@pytest.fixture
def proposal():
    return make_proposal
