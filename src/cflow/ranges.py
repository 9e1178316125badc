"""
Range Iteration: directional, nested numeric loops.

A range list such as

    [("i", 0, 3), ("j", 10, 0, -5)]

drives the equivalent of

    for i in 0, 1, 2:
        for j in 10, 5:
            body(i=i, j=j)

Direction and termination come from one pure helper, range_direction(),
shared by the exclusive ([start, stop)) and inclusive ([start, stop])
variants.

IMPORTANT:
    All structural validation (empty list, zero step, duplicate names)
    happens when the range list is normalized, before the body ever runs.
"""

from __future__ import annotations

import logging
import operator
from numbers import Real
from typing import Any, Callable, Dict, Iterable, Iterator, Tuple, Union

from cflow.errors import UsageError
from cflow.model import Range

logger = logging.getLogger(__name__)

Comparator = Callable[[Real, Real], bool]
RangeSpec = Union[Range, Tuple[Any, ...]]


def range_direction(start: Real, stop: Real, step: Real | None = None,
                    inclusive: bool = False) -> Tuple[Real, Comparator]:
    """
    Infer the signed step and continuation test for one range.

    Args:
        start: first value
        stop: bound value
        step: explicit step (sign fixes direction) or None
        inclusive: whether a value equal to stop is still visited

    Returns:
        (signed_step, comparator) where comparator(value, stop) is True
        while iteration should continue.

    Raises:
        UsageError: if step is zero
    """
    if step is not None:
        if step == 0:
            raise UsageError("Range step must not be zero")
        ascending = step > 0
        signed_step = step
    else:
        ascending = start <= stop
        signed_step = 1 if ascending else -1

    if ascending:
        comparator = operator.le if inclusive else operator.lt
    else:
        comparator = operator.ge if inclusive else operator.gt
    return signed_step, comparator


def _coerce_range(spec: RangeSpec) -> Range:
    if isinstance(spec, Range):
        return spec
    if isinstance(spec, tuple) and len(spec) in (3, 4):
        return Range(*spec)
    raise UsageError(f"Range must be a Range or a (name, start, stop[, step]) tuple, got {spec!r}")


def normalize_ranges(ranges: Union[RangeSpec, Iterable[RangeSpec]]) -> Tuple[Range, ...]:
    """
    Turn user input into a validated tuple of Range objects.

    A single Range (or a single tuple whose first item is a name) is
    accepted in place of a list.
    """
    if isinstance(ranges, Range) or (isinstance(ranges, tuple) and ranges and isinstance(ranges[0], str)):
        ranges = [ranges]

    try:
        specs = tuple(_coerce_range(spec) for spec in ranges)
    except TypeError:
        raise UsageError(f"Expected a list of ranges, got {ranges!r}") from None

    if not specs:
        raise UsageError("Range list is empty")

    names = [spec.name for spec in specs]
    if len(names) != len(set(names)):
        duplicates = sorted({name for name in names if names.count(name) > 1})
        raise UsageError(f"Duplicate range names: {duplicates}")

    return specs


def _resolve_bound(spec: Range, label: str, bound: Any, outer: Dict[str, Real]) -> Real:
    if not callable(bound):
        return bound
    value = bound(**outer)
    if not isinstance(value, Real) or isinstance(value, bool):
        raise UsageError(f"Range '{spec.name}' computed a non-numeric {label}: {value!r}")
    return value


def _axis(spec: Range, outer: Dict[str, Real], inclusive: bool) -> Iterator[Real]:
    start = _resolve_bound(spec, "start", spec.start, outer)
    stop = _resolve_bound(spec, "stop", spec.stop, outer)
    signed_step, comparator = range_direction(start, stop, spec.step, inclusive)

    logger.debug("Entering range %s: start=%r stop=%r step=%r inclusive=%s",
                 spec.name, start, stop, signed_step, inclusive)

    # Values are start + k * step, never a running sum.
    count = 0
    value = start
    while comparator(value, stop):
        yield value
        count += 1
        value = start + count * signed_step


def iter_range(spec: RangeSpec, inclusive: bool = False) -> Iterator[Real]:
    """Iterate the values of a single range."""
    (single,) = normalize_ranges([spec])
    return _axis(single, {}, inclusive)


def iter_ranges(ranges: Union[RangeSpec, Iterable[RangeSpec]],
                inclusive: bool = False) -> Iterator[Tuple[Real, ...]]:
    """
    Iterate every combination of nested ranges, outer range slowest.

    Yields one tuple per combination, values in declaration order.
    Dependent bounds receive the current outer values as keyword args.
    """
    specs = normalize_ranges(ranges)
    return _walk(specs, 0, {}, inclusive)


def _walk(specs: Tuple[Range, ...], depth: int, outer: Dict[str, Real],
          inclusive: bool) -> Iterator[Tuple[Real, ...]]:
    spec = specs[depth]
    last = depth + 1 == len(specs)
    for value in _axis(spec, outer, inclusive):
        current = dict(outer)
        current[spec.name] = value
        if last:
            yield tuple(current.values())
        else:
            yield from _walk(specs, depth + 1, current, inclusive)


def for_range(ranges: Union[RangeSpec, Iterable[RangeSpec]],
              body: Callable[..., Any], inclusive: bool = False) -> None:
    """
    Run body once per combination of nested exclusive ranges.

    The body receives each range's current value as a keyword argument
    named after the range.

    Example:
        for_range([("i", 0, 2), ("j", 0, 2)], lambda i, j: print(i, j))
        # 0 0 / 0 1 / 1 0 / 1 1
    """
    specs = normalize_ranges(ranges)
    names = [spec.name for spec in specs]
    for values in _walk(specs, 0, {}, inclusive):
        body(**dict(zip(names, values)))


def for_range_inclusive(ranges: Union[RangeSpec, Iterable[RangeSpec]],
                        body: Callable[..., Any]) -> None:
    """Like for_range, but each stop value is visited when hit exactly."""
    for_range(ranges, body, inclusive=True)


__all__ = [
    "range_direction",
    "normalize_ranges",
    "iter_range",
    "iter_ranges",
    "for_range",
    "for_range_inclusive",
]
