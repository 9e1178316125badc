"""
Accumulators: collect values pushed from procedural code.

    collect(lambda push: [push(x) for x in data if x > 0])

Two buffer shapes:
    - a plain ordered list (collect, Accumulator)
    - a pre-sized growable vector with an optional element type
      (collect_vector, VectorBuffer)

ARCHITECTURAL RULE:
    The push capability belongs to one scope. Once collect() returns or
    the with-block exits, the capability is revoked and any further call
    raises UsageError.
"""

from __future__ import annotations

import logging
from contextlib import ExitStack
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple, Type, Union

from cflow.errors import UsageError

logger = logging.getLogger(__name__)

ElementType = Union[Type, Tuple[Type, ...]]


class VectorBuffer:
    """
    Growable indexable buffer with a fill pointer.

    Storage is allocated up front (capacity slots) and doubled when full,
    so appends are amortized O(1). Only the first len(buffer) slots are
    visible.
    """

    def __init__(self, element_type: Optional[ElementType] = None, capacity: int = 16):
        if not isinstance(capacity, int) or isinstance(capacity, bool) or capacity < 1:
            raise UsageError(f"Buffer capacity must be a positive integer, got {capacity!r}")
        self.element_type = element_type
        self._slots: List[Any] = [None] * capacity
        self._fill = 0

    @property
    def capacity(self) -> int:
        return len(self._slots)

    def append(self, item: Any) -> Any:
        if self.element_type is not None and not isinstance(item, self.element_type):
            raise UsageError(
                f"Buffer holds {_type_label(self.element_type)}, got {type(item).__name__}"
            )
        if self._fill == len(self._slots):
            self._slots.extend([None] * len(self._slots))
        self._slots[self._fill] = item
        self._fill += 1
        return item

    def __len__(self) -> int:
        return self._fill

    def __getitem__(self, index):
        return self.to_list()[index] if isinstance(index, slice) else self._slots[self._check(index)]

    def __iter__(self) -> Iterator[Any]:
        for i in range(self._fill):
            yield self._slots[i]

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, VectorBuffer):
            return self.to_list() == other.to_list()
        if isinstance(other, (list, tuple)):
            return self.to_list() == list(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"VectorBuffer({self.to_list()!r}, capacity={self.capacity})"

    def _check(self, index: int) -> int:
        if index < 0:
            index += self._fill
        if not 0 <= index < self._fill:
            raise IndexError("VectorBuffer index out of range")
        return index

    def to_list(self) -> List[Any]:
        return self._slots[:self._fill]


def _type_label(element_type: ElementType) -> str:
    if isinstance(element_type, tuple):
        return " | ".join(t.__name__ for t in element_type)
    return element_type.__name__


class Accumulator:
    """
    Scoped collector exposing a single push capability.

    Usage as a context manager:

        acc = Accumulator()
        with acc as push:
            for row in rows:
                if row.ok:
                    push(row.id)
        ids = acc.items

    Properties:
        items: collected values (available after the scope closes)
        open: whether push may still be called
    """

    def __init__(self, buffer: Optional[Union[list, VectorBuffer]] = None):
        self._buffer = buffer if buffer is not None else []
        self._open = False
        self._closed = False

    @property
    def open(self) -> bool:
        return self._open

    @property
    def items(self) -> Union[list, VectorBuffer]:
        return self._buffer

    def push(self, item: Any) -> Any:
        """Append item and return it unchanged."""
        if not self._open:
            raise UsageError("push called outside the scope of its accumulator")
        self._buffer.append(item)
        return item

    def __enter__(self) -> Callable[[Any], Any]:
        if self._closed:
            raise UsageError("Accumulator scopes cannot be reopened")
        self._open = True
        return self.push

    def __exit__(self, exc_type, exc, tb) -> bool:
        self._open = False
        self._closed = True
        logger.debug("Accumulator closed with %d item(s)", len(self._buffer))
        return False


def collect(body: Callable[[Callable[[Any], Any]], Any]) -> List[Any]:
    """
    Run body(push) and return every pushed item in push order.

    Example:
        >>> collect(lambda push: [push(n) for n in (1, 2, 3)])
        [1, 2, 3]
    """
    accumulator = Accumulator()
    with accumulator as push:
        body(push)
    return accumulator.items


def collect_vector(body: Callable[[Callable[[Any], Any]], Any],
                   element_type: Optional[ElementType] = None,
                   capacity: int = 16) -> VectorBuffer:
    """
    Like collect, but gathers into a VectorBuffer.

    Args:
        body: receives the push capability
        element_type: type (or tuple of types) every item must match
        capacity: initial number of slots
    """
    accumulator = Accumulator(VectorBuffer(element_type=element_type, capacity=capacity))
    with accumulator as push:
        body(push)
    return accumulator.items


def collect_many(names: Sequence[str], body: Callable[..., Any]) -> Dict[str, List[Any]]:
    """
    Several named collectors in one scope.

    body receives one push capability per name, as keyword arguments.

    Example:
        collect_many(["evens", "odds"],
                     lambda evens, odds: [(evens if n % 2 == 0 else odds)(n)
                                          for n in range(5)])
        # {"evens": [0, 2, 4], "odds": [1, 3]}
    """
    names = list(names)
    if not names:
        raise UsageError("collect_many needs at least one collector name")
    for name in names:
        if not isinstance(name, str) or not name.isidentifier():
            raise UsageError(f"Collector name must be an identifier, got {name!r}")
    if len(names) != len(set(names)):
        raise UsageError(f"Duplicate collector names: {names}")

    accumulators = {name: Accumulator() for name in names}
    with ExitStack() as stack:
        pushes = {name: stack.enter_context(acc) for name, acc in accumulators.items()}
        body(**pushes)
    return {name: acc.items for name, acc in accumulators.items()}


__all__ = [
    "Accumulator",
    "VectorBuffer",
    "collect",
    "collect_vector",
    "collect_many",
]
