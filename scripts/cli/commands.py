"""Subcommand handlers. Each returns a process exit code."""

import sys
from datetime import datetime

from artha_config import get_tax_rate_config
from artha_engines.npwp import format_npwp, validate_npwp
from artha_engines.report import render_csv
from artha_ingestion import parse_invoice, parse_proposal
from artha_kernel.domain.clock import DeterministicClock, SystemClock
from artha_kernel.domain.values import to_datetime
from artha_services import DashboardService, TaxService
from scripts.cli.util import dump_json, fmt_amount, load_records


def _clock(now: str | None):
    if now is None:
        return SystemClock()
    return DeterministicClock(to_datetime(now, "now"))


def cmd_tax(args) -> int:
    config = get_tax_rate_config(args.rates)
    service = TaxService(config=config)
    result = service.calculate(
        args.amount,
        args.type,
        args.mode,
        has_npwp=not args.no_npwp,
        rounded=not args.exact,
    )
    if args.json:
        print(dump_json(result))
        return 0

    if not result.is_applicable:
        print("  No withholding tax applies.")
        print(f"  Amount: {fmt_amount(result.gross_amount)}")
        return 0
    print(f"  Tax type: {result.tax_type.value.upper()}  mode: {result.mode.value}"
          f"  NPWP: {'yes' if result.has_npwp else 'no'}")
    print(f"  DPP:      {fmt_amount(result.dpp)}")
    print(f"  Rate:     {result.tax_rate.normalize():f}%")
    print(f"  Tax:      {fmt_amount(result.tax_amount)}")
    print(f"  Net:      {fmt_amount(result.net_amount)}")
    print(f"  Gross:    {fmt_amount(result.gross_amount)}")
    return 0


def cmd_npwp(args) -> int:
    formatted = format_npwp(args.value)
    valid = validate_npwp(args.value)
    print(f"  {formatted}  ({'valid' if valid else 'invalid'})")
    return 0 if valid else 1


def cmd_trends(args) -> int:
    invoices = load_records(args.invoices, parse_invoice, args.skip_invalid)
    proposals = load_records(args.proposals, parse_proposal, args.skip_invalid)
    service = DashboardService(_clock(args.now))

    if args.report:
        _, text = service.export_report_csv(invoices, proposals)
        sys.stdout.write(text)
        return 0

    stats = service.stats(invoices, proposals)
    if args.json:
        print(dump_json(stats))
        return 0

    period = stats.period
    print(f"  {period.current_window.label} vs {period.previous_window.label}")
    for name, trend in period.trends.items():
        current = period.current[name]
        previous = period.previous[name]
        print(f"  {name:<16} {fmt_amount(current):>16} {fmt_amount(previous):>16} {trend:+d}%")
    print()
    print(f"  Total revenue:      {fmt_amount(stats.total_revenue)}")
    print(f"  Pipeline value:     {fmt_amount(stats.pipeline_value)}")
    print(f"  Acceptance rate:    {stats.acceptance_rate}%")
    print(f"  Pending invoices:   {stats.pending_invoices} ({fmt_amount(stats.pending_amount)})")
    print(f"  Overdue invoices:   {stats.overdue_invoices} ({fmt_amount(stats.overdue_amount)})")
    print(f"  Upcoming deadlines: {stats.upcoming_deadlines}")
    return 0


def cmd_summary(args) -> int:
    invoices = load_records(args.invoices, parse_invoice, args.skip_invalid)
    service = TaxService(_clock(args.now))
    summary = service.summary(invoices, args.year)
    if args.json:
        print(dump_json(summary))
        return 0

    annual = summary.annual
    print(f"  Tax year {summary.year}: {summary.paid_invoices} paid of {summary.total_invoices} invoices")
    print(f"  {'Month':<6} {'Gross':>16} {'PPh 21':>14} {'PPh 23':>14} {'Net':>16}")
    for row in summary.months:
        if row.invoice_count == 0:
            continue
        print(f"  {row.tax_month:<6} {fmt_amount(row.total_gross_income):>16}"
              f" {fmt_amount(row.total_pph21_paid):>14} {fmt_amount(row.total_pph23_withheld):>14}"
              f" {fmt_amount(row.total_net_income):>16}")
    print(f"  {'Year':<6} {fmt_amount(annual.total_gross_income):>16}"
          f" {fmt_amount(annual.total_pph21_paid):>14} {fmt_amount(annual.total_pph23_withheld):>14}"
          f" {fmt_amount(annual.total_net_income):>16}")
    print(f"  Total tax: {fmt_amount(summary.total_tax)}")
    return 0
