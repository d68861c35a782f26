"""Source adapters for exported rows (file I/O only)."""

from artha_ingestion.adapters.base import SourceAdapter, SourceProbe
from artha_ingestion.adapters.csv_adapter import CsvSourceAdapter
from artha_ingestion.adapters.json_adapter import JsonSourceAdapter

__all__ = [
    "CsvSourceAdapter",
    "JsonSourceAdapter",
    "SourceAdapter",
    "SourceProbe",
]
