"""
Record streams: the resource type produced by the bundled openers.

Resource contract used by ResourceScan:
    open(path, options) -> resource | None
    read_one(resource, eof) -> record | eof

A RecordStream pairs an open file handle with an iterator of records
parsed from it. read_record() and close_resource() are the read_one and
release halves of the contract for every bundled opener.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, Any, Iterator, Optional, Tuple, Type, Union

from cflow.errors import ResourceError
from cflow.model import OpenOptions

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class RecordStream:
    """
    An open handle plus the records parsed from it.

    Properties:
        path: where the records come from
        handle: underlying file object (closed by close())
        records: iterator of parsed records
        read_errors: exception types wrapped in ResourceError when raised
                     while reading
    """

    def __init__(self, path: PathLike, handle: IO, records: Iterator[Any],
                 read_errors: Tuple[Type[BaseException], ...] = (OSError,)):
        self.path = str(path)
        self.handle = handle
        self.records = records
        self.read_errors = read_errors

    @property
    def closed(self) -> bool:
        return self.handle.closed

    def next_record(self, eof: Any) -> Any:
        try:
            return next(self.records, eof)
        except self.read_errors as exc:
            raise ResourceError(f"Failed to read {self.path}: {exc}", path=self.path) from exc

    def close(self) -> None:
        self.handle.close()


def open_file(path: PathLike, options: OpenOptions, newline: Optional[str] = None) -> Optional[IO]:
    """
    Open a text file under the options' missing-resource policy.

    Returns:
        the file object, or None if the file does not exist and the
        policy tolerates absence

    Raises:
        ResourceError: if the file is missing under MissingPolicy.ERROR,
            or cannot be opened for any other reason
    """
    if newline is None:
        newline = options.newline
    try:
        return open(path, "r", encoding=options.encoding, newline=newline)
    except FileNotFoundError as exc:
        if options.tolerates_missing:
            logger.debug("Resource %s is missing; policy tolerates absence", path)
            return None
        raise ResourceError(f"Resource not found: {path}", path=str(path)) from exc
    except OSError as exc:
        raise ResourceError(f"Cannot open {path}: {exc}", path=str(path)) from exc
    except LookupError as exc:
        raise ResourceError(f"Cannot open {path}: unknown encoding {options.encoding!r}",
                            path=str(path)) from exc


def read_record(resource: RecordStream, eof: Any) -> Any:
    """read_one half of the resource contract."""
    return resource.next_record(eof)


def close_resource(resource: Any) -> None:
    """Release half of the resource contract: calls resource.close()."""
    resource.close()
