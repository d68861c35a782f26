"""CLI utilities: amount formatting, record loading, JSON output."""

import json
from dataclasses import asdict, is_dataclass
from decimal import Decimal
from pathlib import Path

from artha_ingestion import CsvSourceAdapter, JsonSourceAdapter, parse_records


def fmt_amount(v) -> str:
    """Format an amount for display (e.g. 1,234,567)."""
    d = Decimal(str(v))
    if d == d.to_integral_value():
        return f"{d:,.0f}"
    return f"{d:,.2f}"


def read_rows(path: Path):
    """Stream row dicts from a .csv, .jsonl or .json export."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return CsvSourceAdapter().read(path, {})
    if suffix == ".jsonl":
        return JsonSourceAdapter().read(path, {"format": "jsonl"})
    return JsonSourceAdapter().read(path, {})


def load_records(path: Path | None, parser, skip_invalid: bool) -> tuple:
    """Parse an export into records; an absent path yields no records."""
    if path is None:
        return ()
    result = parse_records(read_rows(path), parser, on_error="skip" if skip_invalid else "raise")
    return result.records


def dump_json(obj) -> str:
    """Serialize dataclasses/Decimals/dates for --json output."""
    if is_dataclass(obj) and not isinstance(obj, type):
        obj = asdict(obj)
    return json.dumps(obj, indent=2, default=str)
