"""
Worked examples composing the cflow combinators.

Small, realistic programs used as documentation and as integration tests:
    - multiplication_table: nested inclusive ranges + accumulator
    - lower_triangle: dependent range bounds
    - word_index: resource scan + lookup branching
    - contact_email: sequential short-circuit binding
"""
from typing import Any, Dict, List, Mapping, Optional, Tuple

from cflow.accumulate import collect
from cflow.binding import when_let_star
from cflow.lookup import if_found, lookup_key
from cflow.model import OpenOptions, Range
from cflow.ranges import for_range, for_range_inclusive
from cflow.readers import open_lines
from cflow.scanning import ResourceScan, scan_sequence


def multiplication_table(size: int = 3) -> List[Tuple[int, int, int]]:
    """(i, j, i * j) for 1 <= i, j <= size, row by row."""
    return collect(lambda push: for_range_inclusive(
        [("i", 1, size), ("j", 1, size)],
        lambda i, j: push((i, j, i * j)),
    ))


def lower_triangle(size: int) -> List[Tuple[int, int]]:
    """Index pairs (row, col) with col < row, using a dependent inner bound."""
    return collect(lambda push: for_range(
        [Range("row", 0, size), Range("col", 0, lambda row: row)],
        lambda row, col: push((row, col)),
    ))


def word_index(path: str, options: Optional[OpenOptions] = None) -> Dict[str, List[int]]:
    """
    Map each lower-cased word of a text file to the line numbers it occurs on.

    Lines are numbered from 1. A word repeated on one line is recorded once
    for that line. A missing file yields an empty index when the options
    tolerate absence.
    """
    index: Dict[str, List[int]] = {}

    def record(word: str, line_no: int) -> None:
        def seen(lines: List[int]) -> None:
            if lines[-1] != line_no:
                lines.append(line_no)

        def first_sighting() -> None:
            index[word] = [line_no]

        if_found(lookup_key(index, word), seen, first_sighting)

    with ResourceScan(path, opener=open_lines, options=options) as scan:
        for line in scan:
            words = line.lower().split()
            for word in scan_sequence(words):
                record(word, scan.count)
    return index


def contact_email(directory: Mapping[str, Mapping[str, Any]], name: str) -> Optional[str]:
    """
    Return "Name <email>" for a directory entry, or None.

    Short-circuits when the person is unknown or has no email on file.
    """
    return when_let_star(
        [("person", lambda scope: directory.get(name)),
         ("email", lambda scope: scope.person.get("email"))],
        lambda person, email: f"{person.get('display_name', name)} <{email}>",
    )
