"""
Records -- invoices and proposals as the aggregation engines see them.

Responsibility:
    Immutable, self-validating record types for the two kinds of timestamped
    financial documents, and the explicit mapping tables that say which
    statuses count toward which metric.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - amount >= 0, Decimal.
    - created_at is a datetime.
    - status belongs to the vocabulary of the record kind.

Failure modes:
    - InvalidInputError subclasses on construction with bad values.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from decimal import Decimal
from enum import Enum

from artha_kernel.domain.values import (
    TaxType,
    coerce_enum,
    to_amount,
    to_date,
    to_datetime,
)


class InvoiceStatus(str, Enum):
    """Invoice lifecycle status."""

    DRAFT = "draft"
    PENDING = "pending"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"


class ProposalStatus(str, Enum):
    """Proposal lifecycle status."""

    DRAFT = "draft"
    SENT = "sent"
    APPROVED = "approved"
    REJECTED = "rejected"


# Which statuses count toward which metric
REVENUE_STATUSES: frozenset[InvoiceStatus] = frozenset({InvoiceStatus.PAID})
OUTSTANDING_STATUSES: frozenset[InvoiceStatus] = frozenset({
    InvoiceStatus.PENDING,
    InvoiceStatus.SENT,
})
OVERDUE_STATUSES: frozenset[InvoiceStatus] = frozenset({InvoiceStatus.OVERDUE})
PIPELINE_STATUSES: frozenset[ProposalStatus] = frozenset(
    s for s in ProposalStatus if s is not ProposalStatus.REJECTED
)
ACCEPTED_STATUSES: frozenset[ProposalStatus] = frozenset({ProposalStatus.APPROVED})
ACTIVE_STATUSES: frozenset[ProposalStatus] = frozenset(
    s for s in ProposalStatus if s is not ProposalStatus.DRAFT
)
AWAITING_STATUSES: frozenset[ProposalStatus] = frozenset({ProposalStatus.SENT})


@dataclass(frozen=True, kw_only=True)
class FinancialRecord:
    """
    A timestamped amount.

    Contract:
        Base shape shared by invoices and proposals. Values are coerced on
        construction (ISO strings to datetime, numbers to Decimal), so a
        record that exists is well-formed.
    """

    created_at: datetime
    amount: Decimal
    record_id: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "created_at", to_datetime(self.created_at, "created_at"))
        object.__setattr__(self, "amount", to_amount(self.amount, "amount"))


@dataclass(frozen=True, kw_only=True)
class InvoiceRecord(FinancialRecord):
    """An invoice. Only ``paid`` invoices count as revenue."""

    status: InvoiceStatus
    invoice_number: str | None = None
    due_date: date | None = None
    issue_date: date | None = None
    tax_type: TaxType = TaxType.NONE
    pph_amount: Decimal = Decimal("0")

    def __post_init__(self) -> None:
        super().__post_init__()
        object.__setattr__(self, "status", coerce_enum(InvoiceStatus, self.status, "status"))
        object.__setattr__(self, "tax_type", coerce_enum(TaxType, self.tax_type, "tax_type"))
        object.__setattr__(self, "pph_amount", to_amount(self.pph_amount, "pph_amount"))
        object.__setattr__(self, "due_date", to_date(self.due_date, "due_date"))
        object.__setattr__(self, "issue_date", to_date(self.issue_date, "issue_date"))

    @property
    def is_revenue(self) -> bool:
        return self.status in REVENUE_STATUSES

    @property
    def is_outstanding(self) -> bool:
        return self.status in OUTSTANDING_STATUSES

    @property
    def is_overdue(self) -> bool:
        return self.status in OVERDUE_STATUSES

    @property
    def tax_date(self) -> date:
        """Date the invoice falls on for tax reporting (issue date, else creation)."""
        return self.tax_date_in(None)

    def tax_date_in(self, tz: tzinfo | None) -> date:
        """
        ``tax_date`` with an aware ``created_at`` read in ``tz``.

        ``issue_date`` is already a calendar date and is used as is.  With
        ``tz=None`` the creation day is taken in the timestamp's own zone.
        """
        if self.issue_date is not None:
            return self.issue_date
        created = self.created_at
        if tz is not None and created.tzinfo is not None:
            created = created.astimezone(tz)
        return created.date()


@dataclass(frozen=True, kw_only=True)
class ProposalRecord(FinancialRecord):
    """A proposal. Everything except ``rejected`` is pipeline value."""

    status: ProposalStatus
    title: str | None = None
    client_name: str | None = None

    def __post_init__(self) -> None:
        super().__post_init__()
        object.__setattr__(self, "status", coerce_enum(ProposalStatus, self.status, "status"))

    @property
    def in_pipeline(self) -> bool:
        return self.status in PIPELINE_STATUSES

    @property
    def is_accepted(self) -> bool:
        return self.status in ACCEPTED_STATUSES

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    @property
    def is_awaiting(self) -> bool:
        return self.status in AWAITING_STATUSES
