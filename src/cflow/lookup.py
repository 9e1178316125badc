"""
Lookup Binding: branch on an explicit found flag.

Unlike when_let/if_let, which react to an empty value, these combinators
react only to LookupResult.found. A lookup that legitimately finds 0,
False, "" or None still takes the success path.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional, Sequence

from cflow.model import LookupResult

logger = logging.getLogger(__name__)

_MISSING = object()


def _resolve(lookup: Any) -> LookupResult:
    if callable(lookup) and not isinstance(lookup, tuple):
        lookup = lookup()
    return LookupResult.coerce(lookup)


def when_found(lookup: Any, body: Callable[[Any], Any]) -> Any:
    """
    Run body(value) only if the lookup found something.

    Args:
        lookup: a LookupResult, a (value, found) tuple, or a zero-argument
            callable returning one
        body: receives the found value

    Returns:
        body's result, or None when nothing was found
    """
    result = _resolve(lookup)
    if not result.found:
        logger.debug("Lookup missed; skipping body")
        return None
    return body(result.value)


def if_found(lookup: Any, then: Callable[[Any], Any],
             else_: Optional[Callable[[], Any]] = None) -> Any:
    """Run then(value) if found, else else_() with nothing bound."""
    result = _resolve(lookup)
    if result.found:
        return then(result.value)
    logger.debug("Lookup missed; taking else branch")
    return else_() if else_ is not None else None


# =========================================================================
# Adapters producing LookupResult
# =========================================================================

def lookup_key(mapping: Mapping, key: Any) -> LookupResult:
    """Dictionary lookup; found is decided by membership, not by the value."""
    value = mapping.get(key, _MISSING)
    if value is _MISSING:
        return LookupResult.miss()
    return LookupResult.hit(value)


def lookup_attr(obj: Any, name: str) -> LookupResult:
    value = getattr(obj, name, _MISSING)
    if value is _MISSING:
        return LookupResult.miss()
    return LookupResult.hit(value)


def lookup_index(seq: Sequence, index: int) -> LookupResult:
    """Sequence lookup. Negative indices count from the end, as in Python."""
    if -len(seq) <= index < len(seq):
        return LookupResult.hit(seq[index])
    return LookupResult.miss()


__all__ = [
    "when_found",
    "if_found",
    "lookup_key",
    "lookup_attr",
    "lookup_index",
]
