"""
Pure domain layer.

This module contains immutable value objects and vocabularies with NO
dependencies on:
- Database or data service clients
- Time/clock (except the Clock abstraction itself)
- I/O

All domain objects are immutable and deterministic.
"""

from artha_kernel.domain.clock import (
    Clock,
    DeterministicClock,
    SystemClock,
)
from artha_kernel.domain.currency import CurrencyInfo, CurrencyRegistry
from artha_kernel.domain.records import (
    ACCEPTED_STATUSES,
    ACTIVE_STATUSES,
    AWAITING_STATUSES,
    OUTSTANDING_STATUSES,
    OVERDUE_STATUSES,
    PIPELINE_STATUSES,
    REVENUE_STATUSES,
    FinancialRecord,
    InvoiceRecord,
    InvoiceStatus,
    ProposalRecord,
    ProposalStatus,
)
from artha_kernel.domain.values import (
    TaxMode,
    TaxType,
    coerce_enum,
    to_amount,
    to_date,
    to_datetime,
)

__all__ = [
    "ACCEPTED_STATUSES",
    "ACTIVE_STATUSES",
    "AWAITING_STATUSES",
    "OUTSTANDING_STATUSES",
    "OVERDUE_STATUSES",
    "PIPELINE_STATUSES",
    "REVENUE_STATUSES",
    "Clock",
    "CurrencyInfo",
    "CurrencyRegistry",
    "DeterministicClock",
    "FinancialRecord",
    "InvoiceRecord",
    "InvoiceStatus",
    "ProposalRecord",
    "ProposalStatus",
    "SystemClock",
    "TaxMode",
    "TaxType",
    "coerce_enum",
    "to_amount",
    "to_date",
    "to_datetime",
]
