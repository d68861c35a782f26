"""
JSON source adapter.

Reads what the data API returns: either a JSON array of row objects, or
JSON Lines with one object per line (``format="jsonl"``).  API dumps often
wrap the rows, e.g. ``{"data": {"invoices": [...]}}``; ``json_path``
("data.invoices") points at the array.  Non-object entries are ignored.
Nested objects such as ``clients`` are passed through untouched.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from artha_ingestion.adapters.base import SAMPLE_SIZE, SourceProbe


def _resolve(document: Any, json_path: str) -> Any:
    """Walk ``json_path`` through objects (by key) and arrays (by index)."""
    node = document
    for step in filter(None, (s.strip() for s in json_path.split("."))):
        if isinstance(node, dict):
            if step not in node:
                return None
            node = node[step]
        elif isinstance(node, list) and step.isdigit() and int(step) < len(node):
            node = node[int(step)]
        else:
            return None
    return node


def _lower_keys(obj: dict[str, Any]) -> dict[str, Any]:
    return {key.strip().lower(): value for key, value in obj.items() if isinstance(key, str)}


class JsonSourceAdapter:
    """Rows from a JSON array or JSON Lines export."""

    def _entries(self, source_path: Path, options: dict[str, Any]) -> Iterator[Any]:
        encoding = options.get("encoding", "utf-8")
        with Path(source_path).open("r", encoding=encoding) as fh:
            if options.get("format", "array") == "jsonl":
                yield from (json.loads(line) for line in fh if line.strip())
                return
            document = json.load(fh)

        json_path = options.get("json_path")
        rows = _resolve(document, json_path) if json_path else document
        if isinstance(rows, list):
            yield from rows

    def read(self, source_path: Path, options: dict[str, Any] | None = None) -> Iterator[dict[str, Any]]:
        for entry in self._entries(source_path, options or {}):
            if isinstance(entry, dict):
                yield _lower_keys(entry)

    def probe(self, source_path: Path, options: dict[str, Any] | None = None) -> SourceProbe:
        """Counts every entry; ``columns`` is the sorted union over the sample rows."""
        options = options or {}
        total = 0
        sample: list[dict[str, Any]] = []
        for entry in self._entries(source_path, options):
            total += 1
            if isinstance(entry, dict) and len(sample) < SAMPLE_SIZE:
                sample.append(_lower_keys(entry))

        return SourceProbe(
            row_count=total,
            columns=tuple(sorted({key for row in sample for key in row})),
            sample_rows=tuple(sample),
            encoding=options.get("encoding", "utf-8"),
        )
