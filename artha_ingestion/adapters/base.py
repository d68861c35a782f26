"""
What every export reader provides.

Invoices and proposals leave the data service as CSV (spreadsheet
download) or JSON (API dump).  A reader turns one such file into plain
row dicts with lower-cased keys; parse_invoice / parse_proposal then do
the typing.  Readers touch the filesystem and nothing else.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

SAMPLE_SIZE = 5


@dataclass(frozen=True)
class SourceProbe:
    """
    A first look at an export before it is ingested.

    ``sample_rows`` holds at most SAMPLE_SIZE rows, already key-normalized.
    ``detected_delimiter`` is None for formats without one.
    """

    row_count: int
    columns: tuple[str, ...]
    sample_rows: tuple[dict[str, Any], ...]
    encoding: str | None = None
    detected_delimiter: str | None = None


@runtime_checkable
class SourceAdapter(Protocol):

    def read(self, source_path: Path, options: dict[str, Any]) -> Iterator[dict[str, Any]]:
        """Stream rows lazily; the file stays open until the iterator is exhausted."""
        ...

    def probe(self, source_path: Path, options: dict[str, Any]) -> SourceProbe:
        ...
