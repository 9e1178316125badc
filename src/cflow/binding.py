"""
Short-Circuit Binding: when_let / if_let and their sequential variants.

Evaluates an ordered BindingList left-to-right and stops at the first
initializer whose result is empty. Nothing after that point is evaluated.

Visibility modes:
    parallel   (when_let, if_let)
        Initializers are zero-argument callables. They see only what their
        closures captured before the construct began.

    sequential (when_let_star, if_let_star)
        Each initializer receives a read-only Bindings view of the names
        already bound earlier in the same list.

Both modes evaluate strictly left-to-right. They differ only in what an
initializer can see.

ARCHITECTURAL RULE:
    A short-circuit is a normal outcome. It returns the empty sentinel
    (None) or runs the else branch. It never raises.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from cflow.model import BindingList, Bindings

logger = logging.getLogger(__name__)

EmptyTest = Callable[[Any], bool]


def is_none(value: Any) -> bool:
    """Default empty test: only None counts as empty."""
    return value is None


def is_falsy(value: Any) -> bool:
    """Python truthiness: None, False, 0, "" and empty containers count as empty."""
    return not value


def evaluate_bindings(bindings: Any, sequential: bool = False,
                      is_empty: EmptyTest = is_none) -> Optional[Bindings]:
    """
    Evaluate a binding list.

    Args:
        bindings: anything BindingList.of accepts
        sequential: pass earlier bindings to each initializer
        is_empty: predicate deciding which results short-circuit

    Returns:
        Bindings with every name bound, or None if an initializer
        produced an empty value.

    Raises:
        UsageError: if the binding list is malformed (before any
            initializer runs)
    """
    binding_list = BindingList.of(bindings)
    scope = Bindings()

    for binding in binding_list:
        if sequential:
            value = binding.initializer(scope)
        else:
            value = binding.initializer()

        if is_empty(value):
            logger.debug("Short-circuit on binding '%s' (%d of %d)",
                         binding.name, len(scope) + 1, len(binding_list))
            return None
        scope = scope.extend(binding.name, value)

    return scope


def when_let(bindings: Any, body: Callable[..., Any],
             is_empty: EmptyTest = is_none) -> Any:
    """
    Run body(**bindings) if every initializer produces a non-empty value.

    Returns body's result, or None when short-circuited.

    Example:
        when_let([("user", lambda: find_user(uid)),
                  ("email", lambda: user_email(uid))],
                 lambda user, email: send(user, email))
    """
    scope = evaluate_bindings(bindings, sequential=False, is_empty=is_empty)
    if scope is None:
        return None
    return body(**scope)


def when_let_star(bindings: Any, body: Callable[..., Any],
                  is_empty: EmptyTest = is_none) -> Any:
    """Sequential when_let: each initializer receives the earlier bindings."""
    scope = evaluate_bindings(bindings, sequential=True, is_empty=is_empty)
    if scope is None:
        return None
    return body(**scope)


def if_let(bindings: Any, then: Callable[..., Any],
           else_: Optional[Callable[[], Any]] = None,
           is_empty: EmptyTest = is_none) -> Any:
    """
    Run then(**bindings) on success, else_() on short-circuit.

    else_ is called with no arguments: none of the attempted bindings
    are visible, including the ones that succeeded before the failure.
    A missing else_ yields None.
    """
    scope = evaluate_bindings(bindings, sequential=False, is_empty=is_empty)
    return _branch(scope, then, else_)


def if_let_star(bindings: Any, then: Callable[..., Any],
                else_: Optional[Callable[[], Any]] = None,
                is_empty: EmptyTest = is_none) -> Any:
    """Sequential if_let: each initializer receives the earlier bindings."""
    scope = evaluate_bindings(bindings, sequential=True, is_empty=is_empty)
    return _branch(scope, then, else_)


def _branch(scope: Optional[Bindings], then: Callable[..., Any],
            else_: Optional[Callable[[], Any]]) -> Any:
    if scope is None:
        return else_() if else_ is not None else None
    return then(**scope)


__all__ = [
    "is_none",
    "is_falsy",
    "evaluate_bindings",
    "when_let",
    "when_let_star",
    "if_let",
    "if_let_star",
]
