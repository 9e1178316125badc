"""
Tests for short-circuit binding (when_let / if_let).

Tests verify:
    - Left-to-right evaluation and short-circuit on the first empty value
    - Later initializers are never evaluated after a short-circuit
    - Parallel vs. sequential visibility
    - The else branch sees none of the attempted bindings
    - Choice of empty test
"""

import pytest
from cflow.binding import (
    evaluate_bindings,
    if_let,
    if_let_star,
    is_falsy,
    is_none,
    when_let,
    when_let_star,
)
from cflow.errors import UsageError


class Tracker:
    """Records which initializers ran, in order."""

    def __init__(self):
        self.calls = []

    def parallel(self, name, value):
        def initializer():
            self.calls.append(name)
            return value
        return name, initializer

    def sequential(self, name, value):
        def initializer(scope):
            self.calls.append(name)
            return value
        return name, initializer


class TestEvaluateBindings:
    """Test the shared evaluation routine."""

    def test_all_bound(self):
        scope = evaluate_bindings([("a", lambda: 1), ("b", lambda: 2)])
        assert dict(scope) == {"a": 1, "b": 2}

    def test_short_circuit_returns_none(self):
        assert evaluate_bindings([("a", lambda: 1), ("b", lambda: None)]) is None

    def test_empty_list_binds_nothing(self):
        """No bindings means nothing can short-circuit."""
        assert dict(evaluate_bindings([])) == {}

    def test_duplicate_names_fail_before_evaluation(self):
        """Malformed lists are rejected before any initializer runs."""
        tracker = Tracker()
        with pytest.raises(UsageError):
            evaluate_bindings([tracker.parallel("a", 1), tracker.parallel("a", 2)])
        assert tracker.calls == []


class TestShortCircuit:
    """(a=1, b=empty, c=3): c is never evaluated, in either mode."""

    @pytest.mark.parametrize("combinator", [when_let, if_let])
    def test_parallel(self, combinator):
        tracker = Tracker()
        bindings = [tracker.parallel("a", 1), tracker.parallel("b", None), tracker.parallel("c", 3)]
        result = combinator(bindings, lambda a, b, c: "body")
        assert result is None
        assert tracker.calls == ["a", "b"]

    @pytest.mark.parametrize("combinator", [when_let_star, if_let_star])
    def test_sequential(self, combinator):
        tracker = Tracker()
        bindings = [tracker.sequential("a", 1), tracker.sequential("b", None), tracker.sequential("c", 3)]
        result = combinator(bindings, lambda a, b, c: "body")
        assert result is None
        assert tracker.calls == ["a", "b"]

    def test_parallel_evaluates_left_to_right(self):
        """Parallel mode still evaluates in declaration order."""
        tracker = Tracker()
        when_let([tracker.parallel(n, n) for n in ("x", "y", "z")], lambda x, y, z: None)
        assert tracker.calls == ["x", "y", "z"]

    def test_short_circuit_is_silent(self):
        """A short-circuit is a normal result, not an exception."""
        assert when_let(("a", lambda: None), lambda a: a) is None


class TestWhenLet:
    """Test the when form."""

    def test_body_receives_bindings(self):
        result = when_let([("a", lambda: 2), ("b", lambda: 3)], lambda a, b: a * b)
        assert result == 6

    def test_body_not_run_on_short_circuit(self):
        ran = []
        when_let(("a", lambda: None), lambda a: ran.append(a))
        assert ran == []

    def test_single_pair(self):
        assert when_let(("name", lambda: "ada"), lambda name: name.upper()) == "ADA"

    def test_falsy_values_bind_by_default(self):
        """Only None is empty unless another test is chosen."""
        assert when_let([("zero", lambda: 0), ("flag", lambda: False)],
                        lambda zero, flag: (zero, flag)) == (0, False)

    def test_falsy_empty_test(self):
        """With is_falsy, 0 short-circuits."""
        assert when_let(("zero", lambda: 0), lambda zero: "ran", is_empty=is_falsy) is None

    def test_body_failure_propagates(self):
        def body(a):
            raise ValueError("bad")

        with pytest.raises(ValueError):
            when_let(("a", lambda: 1), body)


class TestSequentialVisibility:
    """Test what initializers can see."""

    def test_star_sees_earlier_bindings(self):
        """Sequential initializers receive earlier names."""
        result = when_let_star(
            [("a", lambda scope: 2), ("b", lambda scope: scope.a + 1), ("c", lambda scope: scope["b"] * 10)],
            lambda a, b, c: (a, b, c),
        )
        assert result == (2, 3, 30)

    def test_star_scope_holds_only_earlier_names(self):
        """The scope seen by an initializer excludes itself and later names."""
        seen = []

        def capture(scope):
            seen.append(sorted(scope))
            return len(seen)

        when_let_star([("a", capture), ("b", capture), ("c", capture)], lambda a, b, c: None)
        assert seen == [[], ["a"], ["a", "b"]]

    def test_parallel_initializers_take_no_arguments(self):
        """Parallel initializers see only their closures."""
        outer = 10
        assert when_let([("a", lambda: outer), ("b", lambda: outer + 1)],
                        lambda a, b: a + b) == 21

    def test_star_short_circuit_after_dependent_lookup(self):
        table = {"alice": {"email": None}}
        result = when_let_star(
            [("user", lambda scope: table.get("alice")),
             ("email", lambda scope: scope.user["email"])],
            lambda user, email: email,
        )
        assert result is None


class TestIfLet:
    """Test the if form."""

    def test_then_branch(self):
        result = if_let([("a", lambda: 1), ("b", lambda: 2)],
                        lambda a, b: a + b, lambda: "else")
        assert result == 3

    def test_else_sees_no_bindings(self):
        """Middle binding empty: else runs with zero attempted names in scope."""
        received = []

        def else_(*args, **kwargs):
            received.append((args, kwargs))
            return "else"

        result = if_let([("a", lambda: 1), ("b", lambda: None), ("c", lambda: 3)],
                        lambda a, b, c: "then", else_)
        assert result == "else"
        assert received == [((), {})]

    def test_star_else_sees_no_bindings(self):
        received = []

        def else_(*args, **kwargs):
            received.append((args, kwargs))

        if_let_star([("a", lambda s: 1), ("b", lambda s: None)], lambda a, b: None, else_)
        assert received == [((), {})]

    def test_missing_else_returns_none(self):
        assert if_let(("a", lambda: None), lambda a: "then") is None

    def test_then_not_run_on_short_circuit(self):
        ran = []
        if_let(("a", lambda: None), lambda a: ran.append("then"), lambda: ran.append("else"))
        assert ran == ["else"]

    def test_is_none_helper(self):
        assert is_none(None)
        assert not is_none(0)
        assert is_falsy(0)
        assert is_falsy("")
