"""
Sequence and Resource Scanning.

Two forms of forward iteration:

    Indexed scan
        scan_sequence / do_sequence walk seq[start:end] without copying,
        optionally with the index of each position.

    Resource scan
        ResourceScan opens an external resource, reads records one at a
        time until the eof sentinel, and releases the resource exactly
        once whether the loop completes, is aborted, or the body raises.

            with ResourceScan("events.log") as scan:
                for line in scan:
                    if line == "END":
                        break
                    handle(line)

        do_resource is the callback form of the same loop.

ARCHITECTURAL RULE:
    End-of-data and aborts are ordinary control flow.
    Body failures are never swallowed; they propagate after release.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterator, Optional, Sequence

from cflow.errors import ResourceError, UsageError
from cflow.model import OpenOptions, ScanControl
from cflow.readers import close_resource, open_lines, read_record
from cflow.readers.streams import PathLike

logger = logging.getLogger(__name__)

Opener = Callable[[PathLike, OpenOptions], Any]
Reader = Callable[[Any, Any], Any]
Release = Callable[[Any], None]


# =========================================================================
# INDEXED SCAN
# =========================================================================

def scan_sequence(seq: Sequence, start: int = 0, end: Optional[int] = None,
                  with_index: bool = False) -> Iterator[Any]:
    """
    Iterate seq over [start, end).

    Args:
        seq: any finite indexable sequence
        start: first index (default 0)
        end: index after the last one (default len(seq))
        with_index: yield (index, value) pairs instead of values

    Raises:
        UsageError: unless 0 <= start <= end <= len(seq)
    """
    length = len(seq)
    if end is None:
        end = length
    for label, bound in (("start", start), ("end", end)):
        if not isinstance(bound, int) or isinstance(bound, bool):
            raise UsageError(f"Scan {label} must be an integer, got {bound!r}")
    if not 0 <= start <= end <= length:
        raise UsageError(f"Invalid scan bounds [{start}, {end}) for sequence of length {length}")
    return _indexed(seq, start, end, with_index)


def _indexed(seq: Sequence, start: int, end: int, with_index: bool) -> Iterator[Any]:
    for index in range(start, end):
        yield (index, seq[index]) if with_index else seq[index]


def do_sequence(seq: Sequence, body: Callable[..., Any], start: int = 0,
                end: Optional[int] = None, with_index: bool = False) -> int:
    """
    Call body(value), or body(index, value), for each position.

    The body may return ScanControl.STOP to end the scan early.

    Returns:
        Number of positions handed to body
    """
    visited = 0
    for item in scan_sequence(seq, start, end, with_index):
        visited += 1
        control = body(*item) if with_index else body(item)
        if control is ScanControl.STOP:
            break
    return visited


# =========================================================================
# RESOURCE SCAN
# =========================================================================

class ResourceScan:
    """
    Scoped scan over the records of an external resource.

    Properties:
        path: resource location handed to the opener
        opener: open(path, options) -> resource | None
        reader: read_one(resource, eof) -> record | eof
        release: called exactly once with the resource on scope exit
        options: OpenOptions, including the missing-resource policy
        count: number of records delivered so far
        aborted: whether abort() was called

    A scan is single-use and may only be iterated inside its with-block.
    """

    def __init__(self, path: PathLike, opener: Opener = open_lines,
                 reader: Reader = read_record, options: Optional[OpenOptions] = None,
                 release: Release = close_resource):
        self.path = path
        self.opener = opener
        self.reader = reader
        self.release = release
        self.options = options if options is not None else OpenOptions()
        self.count = 0
        self.aborted = False
        self._eof = object()
        self._resource = None
        self._entered = False
        self._exited = False
        self._released = False

    @property
    def missing(self) -> bool:
        """True when the resource was absent and the policy tolerated it."""
        return self._entered and self._resource is None

    @property
    def released(self) -> bool:
        return self._released

    def __enter__(self) -> "ResourceScan":
        if self._entered:
            raise UsageError("A ResourceScan can only be entered once")
        self._entered = True

        resource = self.opener(self.path, self.options)
        if resource is None:
            if not self.options.tolerates_missing:
                raise ResourceError(f"Resource not available: {self.path}", path=str(self.path))
            logger.debug("Scan of %s skipped: resource absent", self.path)
        else:
            logger.debug("Opened %s for scanning", self.path)
        self._resource = resource
        return self

    def __iter__(self) -> Iterator[Any]:
        if not self._entered or self._exited:
            raise UsageError("Iterate a ResourceScan inside its with-block")
        return self._records()

    def _records(self) -> Iterator[Any]:
        while not self.aborted and not self._released and self._resource is not None:
            record = self.reader(self._resource, self._eof)
            if record is self._eof:
                return
            self.count += 1
            yield record

    def abort(self) -> None:
        """Stop the scan; no further records are read."""
        if not self.aborted:
            logger.debug("Scan of %s aborted after %d record(s)", self.path, self.count)
        self.aborted = True

    def __exit__(self, exc_type, exc, tb) -> bool:
        self._exited = True
        self._release()
        return False

    def _release(self) -> None:
        if self._released or self._resource is None:
            return
        self._released = True
        logger.debug("Releasing %s after %d record(s)", self.path, self.count)
        self.release(self._resource)


def scan_resource(path: PathLike, opener: Opener = open_lines, reader: Reader = read_record,
                  options: Optional[OpenOptions] = None,
                  release: Release = close_resource) -> ResourceScan:
    """Build a ResourceScan; use it as a context manager."""
    return ResourceScan(path, opener=opener, reader=reader, options=options, release=release)


def do_resource(path: PathLike, body: Callable[[Any], Any], opener: Opener = open_lines,
                reader: Reader = read_record, options: Optional[OpenOptions] = None,
                release: Release = close_resource) -> int:
    """
    Call body(record) for each record of a resource.

    The body may return ScanControl.STOP to abort the scan. The resource
    is released before this function returns or raises.

    Returns:
        Number of records handed to body
    """
    with ResourceScan(path, opener=opener, reader=reader, options=options, release=release) as scan:
        for record in scan:
            if body(record) is ScanControl.STOP:
                scan.abort()
    return scan.count


__all__ = [
    "scan_sequence",
    "do_sequence",
    "ResourceScan",
    "scan_resource",
    "do_resource",
]
