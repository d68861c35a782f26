"""
Module: artha_engines.period
Responsibility:
    Month-over-month aggregation.  Classifies timestamped invoices and
    proposals into "current calendar month" and "previous calendar month"
    buckets relative to an explicit ``now``, computes each tracked metric
    per bucket, and derives a percentage trend per metric.  The dashboard
    and the proposals view both use this engine.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import artha_kernel.

Invariants enforced:
    - Purity: no clock access; ``now`` is a parameter.
    - Each record lands in at most one bucket.
    - Decimal-only arithmetic; trends are plain ints.
    - A zero previous value yields a 0 % trend, never an error.

Failure modes:
    - InvalidInputError when ``now`` is not a datetime or a record is not
      a FinancialRecord.

Usage:
    from datetime import datetime
    from artha_engines.period import compute_trends

    result = compute_trends(records, now=datetime(2024, 3, 15, 9, 30))
    result.current["revenue"]      # Decimal
    result.trends["revenue"]       # int percent
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import ROUND_FLOOR, Decimal

from artha_engines.tracer import traced_engine
from artha_kernel.domain.records import (
    FinancialRecord,
    InvoiceRecord,
    ProposalRecord,
)
from artha_kernel.exceptions import InvalidInputError
from artha_kernel.logging_config import get_logger

logger = get_logger("engines.period")

_HUNDRED = Decimal("100")
_HALF = Decimal("0.5")


# ---------------------------------------------------------------------------
# Calendar helpers
# ---------------------------------------------------------------------------


def month_start(ts: datetime) -> datetime:
    """Midnight on the first day of ``ts``'s month, same tzinfo."""
    return ts.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def add_months(start: datetime, months: int) -> datetime:
    """Shift a month-start datetime by ``months`` calendar months."""
    years, month_index = divmod(start.month - 1 + months, 12)
    return start.replace(year=start.year + years, month=month_index + 1)


def align_to(ts: datetime, now: datetime) -> datetime:
    """
    Make ``ts`` comparable with ``now``.

    Naive timestamps are read in ``now``'s zone and aware ones are
    converted to it, so ``ts.year``/``ts.month`` name the calendar month
    the user sees.  When ``now`` itself is naive, aware timestamps are
    converted to UTC and made naive.
    """
    if now.tzinfo is None:
        if ts.tzinfo is None:
            return ts
        return ts.astimezone(timezone.utc).replace(tzinfo=None)
    if ts.tzinfo is None:
        return ts.replace(tzinfo=now.tzinfo)
    return ts.astimezone(now.tzinfo)


@dataclass(frozen=True)
class MonthWindow:
    """Half-open calendar month ``[start, end)``."""

    start: datetime
    end: datetime

    def contains(self, ts: datetime) -> bool:
        return self.start <= ts < self.end

    @property
    def label(self) -> str:
        """``YYYY-MM`` of the window."""
        return f"{self.start.year:04d}-{self.start.month:02d}"


def month_window(now: datetime, offset: int = 0) -> MonthWindow:
    """Calendar month containing ``now`` shifted by ``offset`` months."""
    start = add_months(month_start(now), offset)
    return MonthWindow(start=start, end=add_months(start, 1))


# ---------------------------------------------------------------------------
# Partition
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MonthPartition:
    """
    Records split into the current and previous calendar month.

    Guarantees:
        - ``current`` and ``previous`` are disjoint.
        - Records outside both windows are counted in ``excluded_count``
          and appear in neither tuple.
    """

    current_window: MonthWindow
    previous_window: MonthWindow
    current: tuple[FinancialRecord, ...]
    previous: tuple[FinancialRecord, ...]
    excluded_count: int = 0


def _check_now(now: object) -> datetime:
    if not isinstance(now, datetime):
        raise InvalidInputError("now", now, "must be a datetime")
    return now


def partition_by_month(
    records: Iterable[FinancialRecord],
    now: datetime,
) -> MonthPartition:
    """
    Split records into current-month and previous-month buckets.

    The previous window runs from the first day of last month up to, but
    excluding, the first day of this month, so the whole last day of the
    previous month is included.  Records older than that, or dated in a
    later calendar month than ``now``, fall in neither bucket.
    """
    now = _check_now(now)
    current_window = month_window(now, 0)
    previous_window = month_window(now, -1)

    current: list[FinancialRecord] = []
    previous: list[FinancialRecord] = []
    excluded = 0
    for record in records:
        if not isinstance(record, FinancialRecord):
            raise InvalidInputError("records", record, "expected a FinancialRecord")
        ts = align_to(record.created_at, now)
        if current_window.contains(ts):
            current.append(record)
        elif previous_window.contains(ts):
            previous.append(record)
        else:
            excluded += 1

    return MonthPartition(
        current_window=current_window,
        previous_window=previous_window,
        current=tuple(current),
        previous=tuple(previous),
        excluded_count=excluded,
    )


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Metric:
    """A named figure computed from one bucket of records."""

    name: str
    compute: Callable[[Sequence[FinancialRecord]], Decimal]
    description: str = ""


def _invoices(records: Sequence[FinancialRecord]) -> list[InvoiceRecord]:
    return [r for r in records if isinstance(r, InvoiceRecord)]


def _proposals(records: Sequence[FinancialRecord]) -> list[ProposalRecord]:
    return [r for r in records if isinstance(r, ProposalRecord)]


def _revenue(records: Sequence[FinancialRecord]) -> Decimal:
    return sum((r.amount for r in _invoices(records) if r.is_revenue), Decimal("0"))


def _pipeline(records: Sequence[FinancialRecord]) -> Decimal:
    return sum((r.amount for r in _proposals(records) if r.in_pipeline), Decimal("0"))


def acceptance_rate(proposals: Sequence[FinancialRecord]) -> Decimal:
    """Approved proposals as a percentage of all proposals (0 when none)."""
    props = _proposals(proposals)
    if not props:
        return Decimal("0")
    accepted = sum(1 for p in props if p.is_accepted)
    return Decimal(accepted) / Decimal(len(props)) * _HUNDRED


def _sent_count(records: Sequence[FinancialRecord]) -> Decimal:
    return Decimal(sum(1 for p in _proposals(records) if p.is_awaiting))


def _invoice_count(records: Sequence[FinancialRecord]) -> Decimal:
    return Decimal(len(_invoices(records)))


def _proposal_count(records: Sequence[FinancialRecord]) -> Decimal:
    return Decimal(len(_proposals(records)))


REVENUE = Metric("revenue", _revenue, "Sum of paid invoice amounts")
PIPELINE = Metric("pipeline", _pipeline, "Sum of proposal amounts not rejected")
ACCEPTANCE_RATE = Metric("acceptance_rate", acceptance_rate, "Approved / total proposals, percent")
SENT_COUNT = Metric("sent_count", _sent_count, "Proposals sent and awaiting an answer")
INVOICE_COUNT = Metric("invoice_count", _invoice_count, "Invoices created")
PROPOSAL_COUNT = Metric("proposal_count", _proposal_count, "Proposals created")

INVOICE_METRICS: tuple[Metric, ...] = (REVENUE, INVOICE_COUNT)
PROPOSAL_METRICS: tuple[Metric, ...] = (PIPELINE, ACCEPTANCE_RATE, SENT_COUNT, PROPOSAL_COUNT)
STANDARD_METRICS: tuple[Metric, ...] = INVOICE_METRICS + PROPOSAL_METRICS


@dataclass(frozen=True)
class PeriodMetrics:
    """Metric values for one bucket."""

    values: dict[str, Decimal] = field(default_factory=dict)
    record_count: int = 0

    def __getitem__(self, name: str) -> Decimal:
        return self.values[name]

    def get(self, name: str, default: Decimal = Decimal("0")) -> Decimal:
        return self.values.get(name, default)


def evaluate_metrics(
    records: Sequence[FinancialRecord],
    metrics: Sequence[Metric],
) -> PeriodMetrics:
    """Compute every metric over one bucket."""
    return PeriodMetrics(
        values={m.name: m.compute(records) for m in metrics},
        record_count=len(records),
    )


# ---------------------------------------------------------------------------
# Trend
# ---------------------------------------------------------------------------


def round_percent(value: Decimal) -> int:
    """Round to an int with halves toward positive infinity (2.5 -> 3, -2.5 -> -2)."""
    return int((value + _HALF).to_integral_value(rounding=ROUND_FLOOR))


def calculate_trend(current: Decimal | int | float, previous: Decimal | int | float) -> int:
    """
    Percentage change from ``previous`` to ``current``, rounded to an int.

    A zero previous value yields 0 regardless of ``current``.
    """
    cur = current if isinstance(current, Decimal) else Decimal(str(current))
    prev = previous if isinstance(previous, Decimal) else Decimal(str(previous))
    if prev == 0:
        return 0
    return round_percent((cur - prev) / prev * _HUNDRED)


@dataclass(frozen=True)
class PeriodTrends:
    """
    Month-over-month comparison.

    Guarantees:
        - ``trends`` has one entry per metric in ``current``.
        - ``trends[m] == calculate_trend(current[m], previous[m])``.
    """

    now: datetime
    current_window: MonthWindow
    previous_window: MonthWindow
    current: PeriodMetrics
    previous: PeriodMetrics
    trends: dict[str, int] = field(default_factory=dict)

    def trend(self, name: str) -> int:
        return self.trends[name]


@traced_engine("period", "1.0", fingerprint_fields=("now",))
def compute_trends(
    records: Iterable[FinancialRecord],
    now: datetime,
    metrics: Sequence[Metric] | None = None,
) -> PeriodTrends:
    """
    Compute current/previous month metrics and their trends.

    Args:
        records: Complete set of invoices and/or proposals. Not mutated.
        now: Moment of computation; month boundaries follow its zone.
        metrics: Metrics to track (default: STANDARD_METRICS).

    Returns:
        PeriodTrends with both buckets' values and an int trend per metric.
    """
    if metrics is None:
        metrics = STANDARD_METRICS

    partition = partition_by_month(records, now)
    current = evaluate_metrics(partition.current, metrics)
    previous = evaluate_metrics(partition.previous, metrics)
    trends = {m.name: calculate_trend(current[m.name], previous[m.name]) for m in metrics}

    logger.debug("period_trends_computed", extra={
        "current_month": partition.current_window.label,
        "previous_month": partition.previous_window.label,
        "current_count": current.record_count,
        "previous_count": previous.record_count,
        "excluded_count": partition.excluded_count,
        "trends": trends,
    })

    return PeriodTrends(
        now=now,
        current_window=partition.current_window,
        previous_window=partition.previous_window,
        current=current,
        previous=previous,
        trends=trends,
    )
