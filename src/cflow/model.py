"""
Core Data Model for cflow

Defines the plain data structures every combinator consumes:
    - Ranges (one numeric loop axis)
    - Bindings (name/initializer pairs and their evaluated values)
    - Lookup results (explicit value/found pairs)
    - Resource options (how a scanned resource is opened)

ARCHITECTURAL RULE:
    These objects:
        - Hold structure and perform structural validation only
        - Never evaluate initializers or touch resources
        - Live for a single combinator call
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from numbers import Real
from typing import Any, Callable, Dict, Iterator, NamedTuple, Optional, Tuple, Union

from cflow.errors import UsageError


Bound = Union[Real, Callable[..., Real]]


class Direction(Enum):
    """Direction in which a range advances."""

    ASCENDING = "ascending"
    DESCENDING = "descending"


@dataclass(frozen=True)
class Range:
    """
    One axis of a (possibly nested) numeric loop.

    Properties:
        name:
            Keyword under which the current value is handed to the body.
            Must be a valid Python identifier.

        start:
            First value. Either a number, or a callable receiving the
            current values of all enclosing ranges as keyword arguments.

        stop:
            Bound. Excluded by the exclusive variant, included (when hit
            exactly) by the inclusive variant. Number or callable, as above.

        step:
            Optional explicit step. Its sign fixes the direction.
            Zero is rejected at construction.

    Example:
        Range("i", 0, 6, 2)      -> 0, 2, 4
        Range("j", 10, 7)        -> 10, 9, 8
        Range("k", 0, lambda i: i)  (triangular inner loop)
    """

    name: str
    start: Bound
    stop: Bound
    step: Optional[Real] = None

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name.isidentifier():
            raise UsageError(f"Range name must be an identifier, got {self.name!r}")
        for label, bound in (("start", self.start), ("stop", self.stop)):
            if not callable(bound) and not _is_number(bound):
                raise UsageError(f"Range '{self.name}' has non-numeric {label}: {bound!r}")
        if self.step is not None:
            if not _is_number(self.step):
                raise UsageError(f"Range '{self.name}' has non-numeric step: {self.step!r}")
            if self.step == 0:
                raise UsageError(f"Range '{self.name}' has a zero step")

    @property
    def has_dependent_bounds(self) -> bool:
        """True when start or stop must be computed from enclosing ranges."""
        return callable(self.start) or callable(self.stop)

    @property
    def direction(self) -> Optional[Direction]:
        """
        Direction of travel, or None when it depends on enclosing ranges.

        An explicit step decides on its own. Otherwise equal bounds count
        as ascending.
        """
        if self.step is not None:
            return Direction.ASCENDING if self.step > 0 else Direction.DESCENDING
        if self.has_dependent_bounds:
            return None
        return Direction.ASCENDING if self.start <= self.stop else Direction.DESCENDING

    def values(self, inclusive: bool = False) -> Iterator[Real]:
        """Iterate this range on its own (bounds must not be dependent)."""
        from cflow.ranges import iter_range

        return iter_range(self, inclusive=inclusive)


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


class Binding(NamedTuple):
    """A single (name, initializer) pair. The initializer is deferred."""

    name: str
    initializer: Callable[..., Any]


@dataclass(frozen=True)
class BindingList:
    """
    Ordered list of bindings with unique names.

    Evaluation order is always left-to-right. The visibility mode
    (parallel or sequential) is chosen by the combinator, not here.

    Accepted input shapes (see BindingList.of):
        - a single pair:        ("a", lambda: 1)
        - a list of pairs:      [("a", f), ("b", g)]
        - an ordered mapping:   {"a": f, "b": g}
    """

    bindings: Tuple[Binding, ...] = field(default_factory=tuple)

    def __post_init__(self):
        seen = set()
        for binding in self.bindings:
            if not isinstance(binding.name, str) or not binding.name.isidentifier():
                raise UsageError(f"Binding name must be an identifier, got {binding.name!r}")
            if binding.name in RESERVED_BINDING_NAMES:
                raise UsageError(
                    f"Binding name '{binding.name}' is reserved: scope.{binding.name} is a Bindings method"
                )
            if not callable(binding.initializer):
                raise UsageError(f"Initializer for '{binding.name}' is not callable")
            if binding.name in seen:
                raise UsageError(f"Duplicate binding name: '{binding.name}'")
            seen.add(binding.name)

    @classmethod
    def of(cls, spec: Any) -> "BindingList":
        if isinstance(spec, BindingList):
            return spec
        if isinstance(spec, Mapping):
            pairs = list(spec.items())
        elif isinstance(spec, tuple) and len(spec) == 2 and isinstance(spec[0], str):
            pairs = [spec]
        elif isinstance(spec, Iterable) and not isinstance(spec, (str, bytes)):
            pairs = list(spec)
        else:
            raise UsageError(f"Cannot build a binding list from {spec!r}")

        bindings = []
        for pair in pairs:
            if not isinstance(pair, tuple) or len(pair) != 2:
                raise UsageError(f"Binding must be a (name, initializer) pair, got {pair!r}")
            bindings.append(Binding(*pair))
        return cls(tuple(bindings))

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(b.name for b in self.bindings)

    def __iter__(self) -> Iterator[Binding]:
        return iter(self.bindings)

    def __len__(self) -> int:
        return len(self.bindings)


class Bindings(Mapping):
    """
    Read-only view of names bound so far.

    Supports both mapping access (scope["a"]) and attribute access
    (scope.a). Sequential initializers receive one of these. Names in
    RESERVED_BINDING_NAMES are refused by BindingList, since attribute
    access to them finds the Mapping methods.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        object.__setattr__(self, "_values", dict(values or {}))

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __getattr__(self, name: str) -> Any:
        try:
            return self._values[name]
        except KeyError:
            raise AttributeError(f"No binding named '{name}'") from None

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Bindings are read-only")

    def __repr__(self) -> str:
        return f"Bindings({self._values!r})"

    def extend(self, name: str, value: Any) -> "Bindings":
        """Return a new view with one more name bound."""
        values = dict(self._values)
        values[name] = value
        return Bindings(values)

    def as_dict(self) -> Dict[str, Any]:
        return dict(self._values)


# Names that scope.<name> would resolve to a Bindings method instead of a value.
RESERVED_BINDING_NAMES = frozenset(name for name in dir(Bindings) if not name.startswith("_"))


class LookupResult(NamedTuple):
    """
    Explicit (value, found) pair produced by a lookup.

    IMPORTANT:
        When found is False, value carries no meaning.
        A found value may itself be falsy (0, False, "", None).
    """

    value: Any
    found: bool

    @classmethod
    def hit(cls, value: Any) -> "LookupResult":
        return cls(value, True)

    @classmethod
    def miss(cls) -> "LookupResult":
        return cls(None, False)

    @classmethod
    def coerce(cls, result: Any) -> "LookupResult":
        """Accept a LookupResult or any (value, found) 2-tuple."""
        if isinstance(result, LookupResult):
            return result
        if isinstance(result, tuple) and len(result) == 2:
            return cls(result[0], bool(result[1]))
        raise UsageError(f"Lookup must produce a (value, found) pair, got {result!r}")


class MissingPolicy(Enum):
    """What a resource scan does when the resource does not exist."""

    ERROR = "error"
    IGNORE = "ignore"


@dataclass(frozen=True)
class OpenOptions:
    """
    Options handed to a resource opener.

    Properties:
        if_missing: MissingPolicy.ERROR raises ResourceError,
                    MissingPolicy.IGNORE yields zero records
        encoding: text encoding for file-backed resources
        newline: passed through to open()
        csv_dialect: dialect name for CSV readers
    """

    if_missing: MissingPolicy = MissingPolicy.ERROR
    encoding: str = "utf-8"
    newline: Optional[str] = None
    csv_dialect: str = "excel"

    @property
    def tolerates_missing(self) -> bool:
        return self.if_missing is MissingPolicy.IGNORE


class ScanControl(Enum):
    """Values a scan body may return to steer the scan."""

    CONTINUE = "continue"
    STOP = "stop"
