"""
Text openers: one record per line, or one dict per CSV row.

CSV rows are read with csv.DictReader, so the first row is the header
and every record maps column name to cell text.
"""

from __future__ import annotations

import csv
from typing import IO, Iterator, Optional

from cflow.errors import ResourceError
from cflow.model import OpenOptions
from .streams import PathLike, RecordStream, open_file


def _lines(handle: IO) -> Iterator[str]:
    for line in handle:
        yield line[:-1] if line.endswith("\n") else line


def open_lines(path: PathLike, options: OpenOptions) -> Optional[RecordStream]:
    """Open a text file whose records are its lines (newline stripped)."""
    handle = open_file(path, options)
    if handle is None:
        return None
    return RecordStream(path, handle, _lines(handle),
                        read_errors=(OSError, UnicodeDecodeError))


def open_csv_rows(path: PathLike, options: OpenOptions) -> Optional[RecordStream]:
    """Open a CSV file whose records are header-keyed dicts."""
    handle = open_file(path, options, newline="")
    if handle is None:
        return None
    try:
        reader = csv.DictReader(handle, dialect=options.csv_dialect)
    except (csv.Error, TypeError) as exc:
        handle.close()
        raise ResourceError(f"Cannot read {path} as CSV: {exc}", path=str(path)) from exc
    return RecordStream(path, handle, iter(reader),
                        read_errors=(OSError, UnicodeDecodeError, csv.Error))
