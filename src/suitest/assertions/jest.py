"""Jest-style matchers on top of the core assertion primitives.

Each matcher is reachable under its snake_case name and its Jest name,
e.g. ``expect(x).to_equal(y)`` or ``expect(x).toEqual(y)``. Python has a
single null value, so the undefined and null matchers both test for None.
"""

from typing import Any

from suitest.assertions.base import AssertionResult, MatcherPlugin, matcher
from suitest.assertions.core import contains, deep_equal, is_nan, strict_equal


class JestAssertions(MatcherPlugin):
    """Jest compatibility layer."""

    name = "jest"

    @matcher("to_equal", "toEqual")
    def to_equal(self, actual: Any, expected: Any) -> AssertionResult:
        return AssertionResult(
            passed=deep_equal(actual, expected),
            message=f"expected {actual!r} to deeply equal {expected!r}",
            negated_message=f"expected {actual!r} to not deeply equal {expected!r}",
            actual=actual,
            expected=expected,
        )

    @matcher("to_strict_equal", "toStrictEqual")
    def to_strict_equal(self, actual: Any, expected: Any) -> AssertionResult:
        return AssertionResult(
            passed=strict_equal(actual, expected),
            message=f"expected {actual!r} to strictly equal {expected!r}",
            negated_message=f"expected {actual!r} to not strictly equal {expected!r}",
            actual=actual,
            expected=expected,
        )

    @matcher("to_be", "toBe")
    def to_be(self, actual: Any, expected: Any) -> AssertionResult:
        return AssertionResult(
            passed=strict_equal(actual, expected),
            message=f"expected {actual!r} to be {expected!r}",
            negated_message=f"expected {actual!r} not to be {expected!r}",
            actual=actual,
            expected=expected,
        )

    @matcher("to_contain", "toContain")
    def to_contain(self, actual: Any, item: Any) -> AssertionResult:
        return AssertionResult(
            passed=contains(actual, item),
            message=f"expected {actual!r} to contain {item!r}",
            negated_message=f"expected {actual!r} to not contain {item!r}",
            actual=actual,
            expected=item,
        )

    @matcher("to_be_truthy", "toBeTruthy")
    def to_be_truthy(self, actual: Any) -> AssertionResult:
        return AssertionResult(
            passed=bool(actual),
            message=f"expected {actual!r} to be truthy",
            negated_message=f"expected {actual!r} to not be truthy",
            actual=actual,
        )

    @matcher("to_be_falsy", "toBeFalsy")
    def to_be_falsy(self, actual: Any) -> AssertionResult:
        return AssertionResult(
            passed=not actual,
            message=f"expected {actual!r} to be falsy",
            negated_message=f"expected {actual!r} to not be falsy",
            actual=actual,
        )

    @matcher("to_be_nan", "toBeNaN")
    def to_be_nan(self, actual: Any) -> AssertionResult:
        return AssertionResult(
            passed=is_nan(actual),
            message=f"expected {actual!r} to be NaN",
            negated_message=f"expected {actual!r} not to be NaN",
            actual=actual,
        )

    @matcher("to_be_undefined", "toBeUndefined", "to_be_null", "toBeNull", "to_be_none")
    def to_be_none(self, actual: Any) -> AssertionResult:
        return AssertionResult(
            passed=actual is None,
            message=f"expected {actual!r} to be None",
            negated_message="expected value not to be None",
            actual=actual,
        )

    @matcher("to_be_defined", "toBeDefined")
    def to_be_defined(self, actual: Any) -> AssertionResult:
        return AssertionResult(
            passed=actual is not None,
            message="expected value to be defined",
            negated_message=f"expected {actual!r} to be None",
            actual=actual,
        )
