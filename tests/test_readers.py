"""
Tests for the bundled resource openers (lines, CSV rows, YAML documents).
"""

import csv

import pytest
from cflow.errors import ResourceError
from cflow.model import MissingPolicy, OpenOptions
from cflow.readers import (
    RecordStream,
    close_resource,
    open_csv_rows,
    open_lines,
    open_yaml_documents,
    read_record,
)
from cflow.readers import streams
from cflow.scanning import ResourceScan, do_resource


class TestOpeners:
    """Test opener behavior and the missing-resource policy."""

    @pytest.mark.parametrize("opener", [open_lines, open_csv_rows, open_yaml_documents])
    def test_missing_tolerated(self, tmp_path, opener):
        options = OpenOptions(if_missing=MissingPolicy.IGNORE)
        assert opener(tmp_path / "absent", options) is None

    @pytest.mark.parametrize("opener", [open_lines, open_csv_rows, open_yaml_documents])
    def test_missing_raises(self, tmp_path, opener):
        with pytest.raises(ResourceError):
            opener(tmp_path / "absent", OpenOptions())

    def test_directory_is_not_tolerated(self, tmp_path):
        """Only absence is tolerated; other open failures still raise."""
        with pytest.raises(ResourceError):
            open_lines(tmp_path, OpenOptions(if_missing=MissingPolicy.IGNORE))

    def test_read_record_and_close(self, tmp_path):
        path = tmp_path / "a.txt"
        path.write_text("x\n", encoding="utf-8")
        stream = open_lines(path, OpenOptions())
        eof = object()
        assert isinstance(stream, RecordStream)
        assert read_record(stream, eof) == "x"
        assert read_record(stream, eof) is eof
        close_resource(stream)
        assert stream.closed

    @pytest.mark.parametrize("opener", [open_lines, open_csv_rows, open_yaml_documents])
    def test_unknown_encoding_raises(self, tmp_path, opener):
        """An encoding Python does not know is an open failure, not a LookupError."""
        path = tmp_path / "a.txt"
        path.write_text("x\n", encoding="utf-8")
        with pytest.raises(ResourceError) as excinfo:
            opener(path, OpenOptions(encoding="utf-9"))
        assert isinstance(excinfo.value.__cause__, LookupError)
        assert excinfo.value.path == str(path)

    def test_unknown_encoding_through_do_resource(self, tmp_path):
        path = tmp_path / "a.txt"
        path.write_text("x\n", encoding="utf-8")
        with pytest.raises(ResourceError):
            do_resource(path, lambda line: None, options=OpenOptions(encoding="utf-9"))


class TestCsvRows:
    """Test CSV row scanning."""

    def test_rows_as_dicts(self, tmp_path):
        path = tmp_path / "people.csv"
        path.write_text('name,age\nada,36\n"grace, rear admiral",85\n', encoding="utf-8")
        rows = []
        do_resource(path, rows.append, opener=open_csv_rows)
        assert rows == [
            {"name": "ada", "age": "36"},
            {"name": "grace, rear admiral", "age": "85"},
        ]

    def test_header_only(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("name,age\n", encoding="utf-8")
        assert do_resource(path, lambda row: None, opener=open_csv_rows) == 0

    def test_unknown_dialect_closes_handle(self, tmp_path, monkeypatch):
        """A dialect csv does not know raises ResourceError and closes the file."""
        path = tmp_path / "a.csv"
        path.write_text("name\nada\n", encoding="utf-8")
        handles = []

        def recording_open_file(*args, **kwargs):
            handle = streams.open_file(*args, **kwargs)
            handles.append(handle)
            return handle

        monkeypatch.setattr("cflow.readers.text.open_file", recording_open_file)
        with pytest.raises(ResourceError) as excinfo:
            do_resource(path, lambda row: None, opener=open_csv_rows,
                        options=OpenOptions(csv_dialect="nope"))
        assert isinstance(excinfo.value.__cause__, csv.Error)
        assert len(handles) == 1
        assert handles[0].closed


class TestYamlDocuments:
    """Test YAML document scanning."""

    def test_one_record_per_document(self, tmp_path):
        path = tmp_path / "events.yaml"
        path.write_text("id: 1\n---\nid: 2\n---\n[a, b]\n", encoding="utf-8")
        docs = []
        do_resource(path, docs.append, opener=open_yaml_documents)
        assert docs == [{"id": 1}, {"id": 2}, ["a", "b"]]

    def test_malformed_yaml_raises_resource_error(self, tmp_path):
        """Parse failures surface as ResourceError, and the file is still closed."""
        path = tmp_path / "bad.yaml"
        path.write_text("id: 1\n---\nkey: [unclosed\n", encoding="utf-8")
        docs = []
        scan = ResourceScan(path, opener=open_yaml_documents)
        with pytest.raises(ResourceError):
            with scan:
                for doc in scan:
                    docs.append(doc)
        assert scan.released
