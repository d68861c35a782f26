"""
artha_ingestion -- boundary between exported/raw rows and the engines.

Adapters read rows from files; ``parse_records`` turns them into typed
records, rejecting or skipping rows that fail validation.

Usage:
    from pathlib import Path
    from artha_ingestion import JsonSourceAdapter, parse_invoice, parse_records

    rows = JsonSourceAdapter().read(Path("invoices.json"), {})
    result = parse_records(rows, parse_invoice, on_error="skip")
"""

from artha_ingestion.adapters import (
    CsvSourceAdapter,
    JsonSourceAdapter,
    SourceAdapter,
    SourceProbe,
)
from artha_ingestion.records import (
    IngestionResult,
    RowError,
    parse_invoice,
    parse_proposal,
    parse_records,
)

__all__ = [
    "CsvSourceAdapter",
    "IngestionResult",
    "JsonSourceAdapter",
    "RowError",
    "SourceAdapter",
    "SourceProbe",
    "parse_invoice",
    "parse_proposal",
    "parse_records",
]
