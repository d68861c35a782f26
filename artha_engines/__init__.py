"""
Module: artha_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.  This is the import surface for artha_services
    and the CLI.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import artha_kernel, artha_config.schema and sibling engines.
    MUST NOT import artha_services or artha_ingestion.

Invariants enforced:
    - Purity: engines never read the clock; ``now`` is always a parameter.
    - Decimal-only arithmetic for amounts.
    - Determinism: identical inputs always produce identical outputs.

Audit relevance:
    Public entry points are wrapped with ``@traced_engine`` and emit
    ARTHA_ENGINE_TRACE log records.

Usage:
    from artha_engines import compute_trends, calculate_invoice_tax
    from artha_engines import format_npwp, build_tax_summary
"""

from artha_engines.dashboard import (
    DashboardStats,
    MonthlyRevenue,
    ProposalStats,
    compute_dashboard_stats,
    count_upcoming_deadlines,
    proposal_stats,
    revenue_series,
)
from artha_engines.npwp import (
    NPWP_LENGTH,
    format_npwp,
    normalize_npwp,
    strip_non_digits,
    validate_npwp,
)
from artha_engines.period import (
    INVOICE_METRICS,
    PROPOSAL_METRICS,
    STANDARD_METRICS,
    Metric,
    MonthPartition,
    MonthWindow,
    PeriodMetrics,
    PeriodTrends,
    calculate_trend,
    compute_trends,
    partition_by_month,
    round_percent,
)
from artha_engines.report import MonthlyReport, build_monthly_report, render_csv
from artha_engines.tax import (
    PPh21Result,
    TaxBracketLine,
    TaxCalculator,
    TaxComputationResult,
    calculate_invoice_tax,
    calculate_pph21,
    calculate_pph23,
)
from artha_engines.tax_summary import (
    TaxPeriodSummary,
    TaxYearSummary,
    build_tax_summary,
)
from artha_engines.tracer import compute_input_fingerprint, traced_engine

__all__ = [
    "INVOICE_METRICS",
    "NPWP_LENGTH",
    "PROPOSAL_METRICS",
    "STANDARD_METRICS",
    "DashboardStats",
    "Metric",
    "MonthPartition",
    "MonthWindow",
    "MonthlyReport",
    "MonthlyRevenue",
    "PPh21Result",
    "PeriodMetrics",
    "PeriodTrends",
    "ProposalStats",
    "TaxBracketLine",
    "TaxCalculator",
    "TaxComputationResult",
    "TaxPeriodSummary",
    "TaxYearSummary",
    "build_monthly_report",
    "build_tax_summary",
    "calculate_invoice_tax",
    "calculate_pph21",
    "calculate_pph23",
    "calculate_trend",
    "compute_dashboard_stats",
    "compute_input_fingerprint",
    "compute_trends",
    "count_upcoming_deadlines",
    "format_npwp",
    "normalize_npwp",
    "partition_by_month",
    "proposal_stats",
    "render_csv",
    "revenue_series",
    "round_percent",
    "strip_non_digits",
    "traced_engine",
    "validate_npwp",
]
