"""
Tests for lookup binding (when_found / if_found).

The key property: branching follows the found flag, never the value's
truthiness.
"""

import pytest
from cflow.errors import UsageError
from cflow.lookup import if_found, lookup_attr, lookup_index, lookup_key, when_found
from cflow.model import LookupResult


class TestIfFound:
    """Test the if-found form."""

    def test_found_false_value_takes_then(self):
        """(value=False, found=True) runs then with False bound."""
        result = if_found((False, True), lambda value: ("then", value), lambda: "else")
        assert result == ("then", False)

    @pytest.mark.parametrize("value", [0, "", None, [], False])
    def test_found_falsy_values(self, value):
        assert if_found(LookupResult.hit(value), lambda v: "then", lambda: "else") == "then"

    def test_not_found_takes_else(self):
        assert if_found(LookupResult.miss(), lambda v: "then", lambda: "else") == "else"

    def test_not_found_ignores_value(self):
        """A truthy value with found=False is still a miss."""
        assert if_found(("junk", False), lambda v: "then", lambda: "else") == "else"

    def test_missing_else(self):
        assert if_found(LookupResult.miss(), lambda v: "then") is None

    def test_callable_lookup(self):
        """A zero-argument callable is invoked to produce the result."""
        assert if_found(lambda: (5, True), lambda v: v * 2) == 10


class TestWhenFound:
    """Test the when-found form."""

    def test_runs_body_when_found(self):
        assert when_found(LookupResult.hit(3), lambda v: v + 1) == 4

    def test_skips_body_when_missing(self):
        ran = []
        assert when_found(LookupResult.miss(), lambda v: ran.append(v)) is None
        assert ran == []

    def test_found_zero(self):
        assert when_found((0, True), lambda v: "found") == "found"

    def test_bad_lookup_shape(self):
        with pytest.raises(UsageError):
            when_found(lambda: 42, lambda v: v)


class TestAdapters:
    """Test the LookupResult adapters."""

    def test_lookup_key_present_with_none(self):
        """Membership decides found, even for a stored None."""
        assert lookup_key({"a": None}, "a") == (None, True)

    def test_lookup_key_absent(self):
        assert lookup_key({}, "a").found is False

    def test_lookup_attr(self):
        class Point:
            x = 0

        assert lookup_attr(Point(), "x") == (0, True)
        assert lookup_attr(Point(), "y").found is False

    def test_lookup_index(self):
        seq = [10, 20]
        assert lookup_index(seq, 1) == (20, True)
        assert lookup_index(seq, -1) == (20, True)
        assert lookup_index(seq, 2).found is False
        assert lookup_index(seq, -3).found is False

    def test_if_found_with_dict(self):
        counts = {"apples": 0}
        assert if_found(lookup_key(counts, "apples"), lambda n: n + 1, lambda: -1) == 1
        assert if_found(lookup_key(counts, "pears"), lambda n: n + 1, lambda: -1) == -1
