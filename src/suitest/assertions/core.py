"""Built-in assertion primitives.

The Jest-compatible and spy plugins are expressed in terms of these.
"""

import cmath
import math
from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Optional

from suitest.assertions.base import AssertionResult, MatcherPlugin, matcher

_PRIMITIVES = (bool, int, float, complex, str, bytes, type(None))


def is_nan(value: Any) -> bool:
    if isinstance(value, float):
        return math.isnan(value)
    if isinstance(value, complex):
        return cmath.isnan(value)
    if isinstance(value, Decimal):
        return value.is_nan()
    return False


def _fields(obj: Any) -> Optional[dict[str, Any]]:
    """Instance state of a user-defined object without its own __eq__, else None."""
    cls = type(obj)
    if cls.__module__ == "builtins" or cls.__eq__ is not object.__eq__:
        return None

    fields = dict(vars(obj)) if hasattr(obj, "__dict__") else {}
    for klass in cls.__mro__:
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for slot in slots:
            if slot in ("__dict__", "__weakref__"):
                continue
            if slot.startswith("__") and not slot.endswith("__"):
                slot = f"_{klass.__name__.lstrip('_')}{slot}"
            if hasattr(obj, slot):
                fields[slot] = getattr(obj, slot)
    return fields


def deep_equal(a: Any, b: Any, _seen: Optional[set[tuple[int, int]]] = None) -> bool:
    """Structural equality: containers element-wise, plain objects by attributes.

    A pair of objects already under comparison counts as equal, so
    self-referencing structures terminate.
    """
    if a is b:
        return True
    if is_nan(a) and is_nan(b):
        return True

    if _seen is None:
        _seen = set()
    pair = (id(a), id(b))
    if pair in _seen:
        return True

    if isinstance(a, Mapping) and isinstance(b, Mapping):
        _seen.add(pair)
        return a.keys() == b.keys() and all(deep_equal(a[k], b[k], _seen) for k in a)

    if isinstance(a, (list, tuple)) and isinstance(b, (list, tuple)):
        if type(a) is not type(b) or len(a) != len(b):
            return False
        _seen.add(pair)
        return all(deep_equal(x, y, _seen) for x, y in zip(a, b))

    if type(a) is type(b):
        fields_a = _fields(a)
        if fields_a is not None:
            fields_b = _fields(b)
            _seen.add(pair)
            return fields_a.keys() == fields_b.keys() and all(
                deep_equal(fields_a[k], fields_b[k], _seen) for k in fields_a
            )

    return bool(a == b)


def strict_equal(a: Any, b: Any) -> bool:
    """Same object, or equal primitive values of the same type."""
    if a is b:
        return True
    return type(a) is type(b) and isinstance(a, _PRIMITIVES) and a == b


def contains(container: Any, item: Any) -> bool:
    """Membership; a mapping contains another mapping when it is a superset."""
    if isinstance(container, Mapping) and isinstance(item, Mapping):
        return all(k in container and deep_equal(container[k], v) for k, v in item.items())
    if isinstance(container, (str, bytes)):
        return isinstance(item, type(container)) and item in container
    try:
        elements = iter(container)
    except TypeError:
        return False
    return any(deep_equal(element, item) for element in elements)

class CoreAssertions(MatcherPlugin):
    """Assertions available on every expect() value."""

    name = "core"

    @matcher("equal")
    def equal(self, actual: Any, expected: Any) -> AssertionResult:
        return AssertionResult(
            passed=strict_equal(actual, expected),
            message=f"expected {actual!r} to equal {expected!r}",
            negated_message=f"expected {actual!r} to not equal {expected!r}",
            actual=actual,
            expected=expected,
        )

    @matcher("eql")
    def eql(self, actual: Any, expected: Any) -> AssertionResult:
        return AssertionResult(
            passed=deep_equal(actual, expected),
            message=f"expected {actual!r} to deeply equal {expected!r}",
            negated_message=f"expected {actual!r} to not deeply equal {expected!r}",
            actual=actual,
            expected=expected,
        )

    @matcher("include", "contain")
    def include(self, actual: Any, item: Any) -> AssertionResult:
        return AssertionResult(
            passed=contains(actual, item),
            message=f"expected {actual!r} to include {item!r}",
            negated_message=f"expected {actual!r} to not include {item!r}",
            actual=actual,
            expected=item,
        )

    @matcher("ok")
    def ok(self, actual: Any) -> AssertionResult:
        return AssertionResult(
            passed=bool(actual),
            message=f"expected {actual!r} to be truthy",
            negated_message=f"expected {actual!r} to be falsy",
            actual=actual,
        )

    @matcher("nan")
    def nan(self, actual: Any) -> AssertionResult:
        return AssertionResult(
            passed=is_nan(actual),
            message=f"expected {actual!r} to be NaN",
            negated_message=f"expected {actual!r} not to be NaN",
            actual=actual,
        )

    @matcher("none")
    def none(self, actual: Any) -> AssertionResult:
        return AssertionResult(
            passed=actual is None,
            message=f"expected {actual!r} to be None",
            negated_message="expected value not to be None",
            actual=actual,
        )

    @matcher("instance_of")
    def instance_of(self, actual: Any, cls: type) -> AssertionResult:
        return AssertionResult(
            passed=isinstance(actual, cls),
            message=f"expected {actual!r} to be an instance of {cls.__name__}",
            negated_message=f"expected {actual!r} not to be an instance of {cls.__name__}",
            actual=actual,
            expected=cls,
        )
