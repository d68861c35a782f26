"""CLI entry point: argument parsing and subcommand dispatch."""

import argparse
import logging
import sys
from pathlib import Path

from artha_kernel.exceptions import ArthaError
from artha_kernel.logging_config import configure_logging
from scripts.cli.commands import cmd_npwp, cmd_summary, cmd_tax, cmd_trends


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="artha",
        description="Artha calculation core: withholding tax, NPWP, dashboard trends.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  artha tax 1000000 --type pph23 --mode exclude\n"
            "  artha tax 1040000 --type pph23 --mode include --no-npwp\n"
            "  artha npwp 012345678901234\n"
            "  artha trends --invoices invoices.json --proposals proposals.json\n"
            "  artha summary --invoices invoices.csv --year 2024\n"
        ),
    )
    parser.add_argument(
        "--log-level", default="WARNING",
        help="Log level for structured logs on stderr (default: WARNING)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    tax = sub.add_parser("tax", help="Calculate PPh 21 / PPh 23 for an amount")
    tax.add_argument("amount", help="Invoice amount (gross in include mode)")
    tax.add_argument("--type", default="pph23", choices=["pph21", "pph23", "none"])
    tax.add_argument("--mode", default="exclude", choices=["include", "exclude"])
    tax.add_argument("--no-npwp", action="store_true", help="Earner has no NPWP")
    tax.add_argument("--rates", type=Path, default=None, help="Rate table YAML file")
    tax.add_argument("--exact", action="store_true", help="Do not round to whole Rupiah")
    tax.add_argument("--json", action="store_true")
    tax.set_defaults(handler=cmd_tax)

    npwp = sub.add_parser("npwp", help="Format and validate an NPWP")
    npwp.add_argument("value")
    npwp.set_defaults(handler=cmd_npwp)

    trends = sub.add_parser("trends", help="Dashboard statistics from exported records")
    trends.add_argument("--invoices", type=Path, help="Invoices export (.json, .jsonl, .csv)")
    trends.add_argument("--proposals", type=Path, help="Proposals export (.json, .jsonl, .csv)")
    trends.add_argument("--now", help="ISO-8601 timestamp to compute as of (default: now)")
    trends.add_argument("--report", action="store_true", help="Print the monthly CSV report")
    trends.add_argument("--skip-invalid", action="store_true", help="Skip rows that fail validation")
    trends.add_argument("--json", action="store_true")
    trends.set_defaults(handler=cmd_trends)

    summary = sub.add_parser("summary", help="Annual tax recap from exported invoices")
    summary.add_argument("--invoices", type=Path, required=True)
    summary.add_argument("--year", type=int, default=None, help="Tax year (default: current)")
    summary.add_argument("--now", help=argparse.SUPPRESS)
    summary.add_argument("--skip-invalid", action="store_true")
    summary.add_argument("--json", action="store_true")
    summary.set_defaults(handler=cmd_summary)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.getLevelName(str(args.log_level).upper())
    configure_logging(level=level if isinstance(level, int) else logging.WARNING)

    try:
        return args.handler(args)
    except ArthaError as exc:
        print(f"  ERROR: {exc}", file=sys.stderr)
        return 2
    except OSError as exc:
        print(f"  ERROR: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
