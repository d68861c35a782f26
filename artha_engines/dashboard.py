"""
Module: artha_engines.dashboard
Responsibility:
    All-time dashboard statistics, the monthly revenue chart series and the
    proposals-page summary.  Month-over-month figures are delegated to
    artha_engines.period so the two views share one aggregation.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - ``now`` is always a parameter.
    - Status membership comes from the mapping tables in
      artha_kernel.domain.records, never from string comparison.
    - The revenue series always has exactly ``months`` entries, oldest
      first, and crosses year boundaries.

Failure modes:
    - InvalidInputError for a non-datetime ``now`` or ``months < 1``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal

from artha_engines.period import (
    INVOICE_METRICS,
    PROPOSAL_METRICS,
    PeriodTrends,
    acceptance_rate,
    add_months,
    align_to,
    compute_trends,
    month_start,
    month_window,
    round_percent,
)
from artha_engines.tracer import traced_engine
from artha_kernel.domain.records import InvoiceRecord, ProposalRecord
from artha_kernel.exceptions import InvalidInputError
from artha_kernel.logging_config import get_logger

logger = get_logger("engines.dashboard")

DEADLINE_HORIZON = timedelta(days=7)
NEW_PROPOSAL_WINDOW = timedelta(days=7)

_MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
               "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


@dataclass(frozen=True)
class DashboardStats:
    """All-time totals plus the current month-over-month comparison."""

    total_revenue: Decimal
    pending_invoices: int
    pending_amount: Decimal
    overdue_invoices: int
    overdue_amount: Decimal
    active_proposals: int
    total_proposals: int
    accepted_proposals: int
    pipeline_value: Decimal
    sent_proposals: int
    acceptance_rate: int  # rounded percent
    upcoming_deadlines: int
    period: PeriodTrends

    @property
    def revenue_trend(self) -> int:
        return self.period.trends["revenue"]

    @property
    def pipeline_trend(self) -> int:
        return self.period.trends["pipeline"]

    @property
    def acceptance_trend(self) -> int:
        return self.period.trends["acceptance_rate"]

    @property
    def proposals_trend(self) -> int:
        """Trend of proposals sent and awaiting an answer."""
        return self.period.trends["sent_count"]


@dataclass(frozen=True)
class MonthlyRevenue:
    """One point of the revenue chart."""

    year: int
    month: int
    revenue: Decimal

    @property
    def label(self) -> str:
        return _MONTH_ABBR[self.month - 1]


@dataclass(frozen=True)
class ProposalStats:
    """Summary shown on the proposals page."""

    pipeline_value: Decimal
    pipeline_trend: int
    acceptance_rate: int
    acceptance_trend: int
    active_count: int
    new_this_week: int


def _check_now(now: object) -> datetime:
    if not isinstance(now, datetime):
        raise InvalidInputError("now", now, "must be a datetime")
    return now


def count_upcoming_deadlines(invoices: Sequence[InvoiceRecord], now: datetime) -> int:
    """Unpaid invoices due between today and seven days from now, inclusive."""
    today = now.date()
    horizon = (now + DEADLINE_HORIZON).date()
    return sum(
        1 for inv in invoices
        if inv.due_date is not None
        and not inv.is_revenue
        and today <= inv.due_date <= horizon
    )


@traced_engine("dashboard", "1.0", fingerprint_fields=("now",))
def compute_dashboard_stats(
    invoices: Sequence[InvoiceRecord],
    proposals: Sequence[ProposalRecord],
    now: datetime,
) -> DashboardStats:
    """
    Dashboard headline figures.

    All-time figures cover every record; the embedded ``period`` holds the
    current vs previous month comparison of both record kinds.  Pending
    means sent or pending; overdue invoices are counted separately.
    """
    now = _check_now(now)
    invoices = list(invoices)
    proposals = list(proposals)

    paid = [inv for inv in invoices if inv.is_revenue]
    outstanding = [inv for inv in invoices if inv.is_outstanding]
    overdue = [inv for inv in invoices if inv.is_overdue]
    accepted = sum(1 for p in proposals if p.is_accepted)

    period = compute_trends(
        [*invoices, *proposals], now, INVOICE_METRICS + PROPOSAL_METRICS
    )

    stats = DashboardStats(
        total_revenue=sum((inv.amount for inv in paid), Decimal("0")),
        pending_invoices=len(outstanding),
        pending_amount=sum((inv.amount for inv in outstanding), Decimal("0")),
        overdue_invoices=len(overdue),
        overdue_amount=sum((inv.amount for inv in overdue), Decimal("0")),
        active_proposals=sum(1 for p in proposals if p.is_active),
        total_proposals=len(proposals),
        accepted_proposals=accepted,
        pipeline_value=sum((p.amount for p in proposals if p.in_pipeline), Decimal("0")),
        sent_proposals=sum(1 for p in proposals if p.is_awaiting),
        acceptance_rate=round_percent(acceptance_rate(proposals)),
        upcoming_deadlines=count_upcoming_deadlines(invoices, now),
        period=period,
    )

    logger.info("dashboard_stats_computed", extra={
        "invoice_count": len(invoices),
        "proposal_count": len(proposals),
        "upcoming_deadlines": stats.upcoming_deadlines,
    })
    return stats


def revenue_series(
    invoices: Sequence[InvoiceRecord],
    now: datetime,
    months: int = 6,
) -> list[MonthlyRevenue]:
    """
    Paid revenue per calendar month for the ``months`` months ending with
    ``now``'s month, oldest first.  Months without revenue are 0.
    """
    now = _check_now(now)
    if months < 1:
        raise InvalidInputError("months", months, "must be at least 1")

    first = add_months(month_start(now), -(months - 1))
    end = month_window(now).end
    totals: dict[tuple[int, int], Decimal] = {}
    for inv in invoices:
        if not inv.is_revenue:
            continue
        ts = align_to(inv.created_at, now)
        if first <= ts < end:
            key = (ts.year, ts.month)
            totals[key] = totals.get(key, Decimal("0")) + inv.amount

    series = []
    for offset in range(months):
        start = add_months(first, offset)
        series.append(MonthlyRevenue(
            year=start.year,
            month=start.month,
            revenue=totals.get((start.year, start.month), Decimal("0")),
        ))
    return series


@traced_engine("dashboard.proposals", "1.0", fingerprint_fields=("now",))
def proposal_stats(proposals: Sequence[ProposalRecord], now: datetime) -> ProposalStats:
    """
    Proposals-page summary.

    ``pipeline_value`` counts every proposal that has left draft (rejected
    ones included), matching the page's "active" definition.  The pipeline
    trend uses the month-over-month non-rejected pipeline.
    """
    now = _check_now(now)
    proposals = list(proposals)
    active = [p for p in proposals if p.is_active]
    week_ago = now - NEW_PROPOSAL_WINDOW
    new_this_week = sum(
        1 for p in proposals if week_ago < align_to(p.created_at, now) <= now
    )
    period = compute_trends(proposals, now, PROPOSAL_METRICS)

    return ProposalStats(
        pipeline_value=sum((p.amount for p in active), Decimal("0")),
        pipeline_trend=period.trends["pipeline"],
        acceptance_rate=round_percent(acceptance_rate(proposals)),
        acceptance_trend=period.trends["acceptance_rate"],
        active_count=len(active),
        new_this_week=new_this_week,
    )
