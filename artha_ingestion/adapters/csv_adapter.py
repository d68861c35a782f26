"""
CSV source adapter.

Uses csv.DictReader.  Options: delimiter, encoding.  Handles a BOM via
utf-8-sig when the encoding is utf-8 (spreadsheet exports carry one).
Empty cells come back as None so optional fields read as missing.
"""

from __future__ import annotations

import csv
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from artha_ingestion.adapters.base import SAMPLE_SIZE, SourceProbe


def _get_encoding(options: dict[str, Any]) -> str:
    enc = options.get("encoding", "utf-8")
    if enc.lower() == "utf-8":
        return "utf-8-sig"  # Strip BOM if present
    return enc


def _clean(row: dict[str, Any]) -> dict[str, Any]:
    return {
        str(k).strip().lower(): (v if v not in ("", None) else None)
        for k, v in row.items()
        if k is not None
    }


class CsvSourceAdapter:
    """Read CSV exports as one dict per row."""

    def read(self, source_path: Path, options: dict[str, Any] | None = None) -> Iterator[dict[str, Any]]:
        options = options or {}
        delimiter = options.get("delimiter", ",")
        with Path(source_path).open("r", encoding=_get_encoding(options), newline="") as f:
            for row in csv.DictReader(f, delimiter=delimiter):
                yield _clean(row)

    def probe(self, source_path: Path, options: dict[str, Any] | None = None) -> SourceProbe:
        options = options or {}
        encoding = _get_encoding(options)
        delimiter = options.get("delimiter", ",")
        with Path(source_path).open("r", encoding=encoding, newline="") as f:
            reader = csv.DictReader(f, delimiter=delimiter)
            columns = tuple(reader.fieldnames or ())
            sample: list[dict[str, Any]] = []
            count = 0
            for row in reader:
                count += 1
                if len(sample) < SAMPLE_SIZE:
                    sample.append(_clean(row))

        return SourceProbe(
            row_count=count,
            columns=columns,
            sample_rows=tuple(sample),
            encoding=encoding,
            detected_delimiter=delimiter,
        )
