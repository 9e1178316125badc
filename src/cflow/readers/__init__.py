"""Resource openers and readers for cflow resource scans (lines, CSV, YAML)."""

from .streams import RecordStream, close_resource, open_file, read_record
from .text import open_csv_rows, open_lines
from .yaml_docs import open_yaml_documents

__all__ = [
    "RecordStream",
    "close_resource",
    "open_file",
    "read_record",
    "open_lines",
    "open_csv_rows",
    "open_yaml_documents",
]
