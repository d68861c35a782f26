"""Tests for the CSV and JSON source adapters."""

import json

from artha_ingestion.adapters import (
    CsvSourceAdapter,
    JsonSourceAdapter,
    SourceAdapter,
    SourceProbe,
)


class TestCsvSourceAdapter:

    def test_read_yields_dicts(self, tmp_path):
        path = tmp_path / "invoices.csv"
        path.write_text("id,total,status\n1,1000,paid\n2,2500,sent\n")
        rows = list(CsvSourceAdapter().read(path, {}))
        assert rows == [
            {"id": "1", "total": "1000", "status": "paid"},
            {"id": "2", "total": "2500", "status": "sent"},
        ]

    def test_keys_lowercased_and_blank_cells_none(self, tmp_path):
        path = tmp_path / "invoices.csv"
        path.write_text("Total , Due_Date\n1000,\n")
        assert list(CsvSourceAdapter().read(path)) == [{"total": "1000", "due_date": None}]

    def test_bom_stripped(self, tmp_path):
        path = tmp_path / "export.csv"
        path.write_bytes("\ufefftotal,status\n5,paid\n".encode("utf-8"))
        rows = list(CsvSourceAdapter().read(path, {"encoding": "utf-8"}))
        assert rows == [{"total": "5", "status": "paid"}]

    def test_custom_delimiter(self, tmp_path):
        path = tmp_path / "semi.csv"
        path.write_text("a;b\n1;2\n")
        assert list(CsvSourceAdapter().read(path, {"delimiter": ";"})) == [{"a": "1", "b": "2"}]

    def test_probe(self, tmp_path):
        path = tmp_path / "many.csv"
        path.write_text("x,y\n" + "".join(f"{i},{i}\n" for i in range(7)))
        probe = CsvSourceAdapter().probe(path, {})
        assert isinstance(probe, SourceProbe)
        assert probe.row_count == 7
        assert probe.columns == ("x", "y")
        assert len(probe.sample_rows) == 5
        assert probe.encoding == "utf-8-sig"
        assert probe.detected_delimiter == ","

    def test_satisfies_protocol(self):
        assert isinstance(CsvSourceAdapter(), SourceAdapter)


class TestJsonSourceAdapter:

    def test_read_array(self, tmp_path):
        path = tmp_path / "rows.json"
        path.write_text(json.dumps([{"Total": 1}, {"total": 2}, "not a row"]))
        assert list(JsonSourceAdapter().read(path, {})) == [{"total": 1}, {"total": 2}]

    def test_read_jsonl(self, tmp_path):
        path = tmp_path / "rows.jsonl"
        path.write_text('{"total": 1}\n\n{"total": 2}\n')
        rows = list(JsonSourceAdapter().read(path, {"format": "jsonl"}))
        assert rows == [{"total": 1}, {"total": 2}]

    def test_json_path(self, tmp_path):
        path = tmp_path / "nested.json"
        path.write_text(json.dumps({"data": {"invoices": [{"id": "a"}]}}))
        rows = list(JsonSourceAdapter().read(path, {"json_path": "data.invoices"}))
        assert rows == [{"id": "a"}]

    def test_missing_json_path_yields_nothing(self, tmp_path):
        path = tmp_path / "nested.json"
        path.write_text(json.dumps({"data": {}}))
        assert list(JsonSourceAdapter().read(path, {"json_path": "data.invoices"})) == []

    def test_nested_client_kept(self, tmp_path):
        path = tmp_path / "proposals.json"
        path.write_text(json.dumps([{"title": "Logo", "clients": {"name": "PT Maju"}}]))
        row = next(JsonSourceAdapter().read(path))
        assert row["clients"] == {"name": "PT Maju"}

    def test_probe(self, tmp_path):
        path = tmp_path / "rows.json"
        path.write_text(json.dumps([{"b": 1}, {"a": 2}, {"a": 3}]))
        probe = JsonSourceAdapter().probe(path, {})
        assert probe.row_count == 3
        assert probe.columns == ("a", "b")
        assert probe.detected_delimiter is None

    def test_satisfies_protocol(self):
        assert isinstance(JsonSourceAdapter(), SourceAdapter)
