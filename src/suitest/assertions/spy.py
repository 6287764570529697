"""Assertions about unittest.mock objects and spies."""

from typing import Any, Callable, Optional
from unittest.mock import DEFAULT, MagicMock, NonCallableMock, call

from suitest.assertions.base import AssertionResult, MatcherPlugin, matcher

_MISSING = object()


def spy(fn: Optional[Callable] = None, name: Optional[str] = None) -> MagicMock:
    """Create a mock that calls through to fn and records results.

    Besides the usual mock bookkeeping, the spy keeps ``spy_returns`` and
    ``spy_exceptions`` lists so returned/thrown assertions can be made.
    """
    mock = MagicMock(name=name or getattr(fn, "__name__", "spy"))
    mock.spy_returns = []
    mock.spy_exceptions = []

    def side_effect(*args: Any, **kwargs: Any) -> Any:
        if fn is None:
            mock.spy_returns.append(mock.return_value)
            return DEFAULT
        try:
            value = fn(*args, **kwargs)
        except Exception as e:
            mock.spy_exceptions.append(e)
            raise
        mock.spy_returns.append(value)
        return value

    mock.side_effect = side_effect
    return mock


def _require_mock(actual: Any) -> NonCallableMock:
    if not isinstance(actual, NonCallableMock):
        raise TypeError(f"{actual!r} is not a mock or spy")
    return actual


def _require_spy(actual: Any, what: str) -> MagicMock:
    mock = _require_mock(actual)
    if not isinstance(getattr(mock, what, None), list):
        raise TypeError(f"{actual!r} was not created with suitest.spy()")
    return mock


def _format_call(args: tuple, kwargs: dict) -> str:
    return repr(call(*args, **kwargs))[4:]


class SpyAssertions(MatcherPlugin):
    """Spy and mock matchers, in Jest and sinon-chai flavours."""

    name = "spy"

    @matcher("to_have_been_called", "toHaveBeenCalled", "called")
    def called(self, actual: Any) -> AssertionResult:
        mock = _require_mock(actual)
        return AssertionResult(
            passed=mock.call_count > 0,
            message=f"expected {mock!r} to have been called",
            negated_message=f"expected {mock!r} not to have been called, "
            f"but it was called {mock.call_count} times",
            actual=mock.call_count,
        )

    @matcher("to_have_been_called_once", "called_once")
    def called_once(self, actual: Any) -> AssertionResult:
        mock = _require_mock(actual)
        return AssertionResult(
            passed=mock.call_count == 1,
            message=f"expected {mock!r} to have been called once, "
            f"but it was called {mock.call_count} times",
            negated_message=f"expected {mock!r} not to have been called exactly once",
            actual=mock.call_count,
            expected=1,
        )

    @matcher("to_have_been_called_times", "toHaveBeenCalledTimes", "call_count")
    def called_times(self, actual: Any, times: int) -> AssertionResult:
        mock = _require_mock(actual)
        return AssertionResult(
            passed=mock.call_count == times,
            message=f"expected {mock!r} to have been called {times} times, "
            f"but it was called {mock.call_count} times",
            negated_message=f"expected {mock!r} not to have been called {times} times",
            actual=mock.call_count,
            expected=times,
        )

    @matcher("to_have_been_called_with", "toHaveBeenCalledWith", "called_with")
    def called_with(self, actual: Any, *args: Any, **kwargs: Any) -> AssertionResult:
        mock = _require_mock(actual)
        expected = call(*args, **kwargs)
        return AssertionResult(
            passed=expected in mock.call_args_list,
            message=f"expected {mock!r} to have been called with {_format_call(args, kwargs)}, "
            f"calls were {mock.call_args_list!r}",
            negated_message=f"expected {mock!r} not to have been called with "
            f"{_format_call(args, kwargs)}",
            actual=mock.call_args_list,
            expected=expected,
        )

    @matcher("to_have_been_last_called_with", "toHaveBeenLastCalledWith")
    def last_called_with(self, actual: Any, *args: Any, **kwargs: Any) -> AssertionResult:
        mock = _require_mock(actual)
        expected = call(*args, **kwargs)
        return AssertionResult(
            passed=mock.call_args == expected,
            message=f"expected {mock!r} to have been last called with "
            f"{_format_call(args, kwargs)}, last call was {mock.call_args!r}",
            negated_message=f"expected {mock!r} not to have been last called with "
            f"{_format_call(args, kwargs)}",
            actual=mock.call_args,
            expected=expected,
        )

    @matcher("to_have_returned", "toHaveReturned", "returned")
    def returned(self, actual: Any, value: Any = _MISSING) -> AssertionResult:
        mock = _require_spy(actual, "spy_returns")
        if value is _MISSING:
            passed = bool(mock.spy_returns)
            description = "to have returned"
        else:
            passed = value in mock.spy_returns
            description = f"to have returned {value!r}"
        return AssertionResult(
            passed=passed,
            message=f"expected {mock!r} {description}, returns were {mock.spy_returns!r}",
            negated_message=f"expected {mock!r} not {description}",
            actual=list(mock.spy_returns),
            expected=None if value is _MISSING else value,
        )

    @matcher("to_have_thrown", "toHaveThrown", "threw")
    def threw(self, actual: Any, exc_type: Optional[type] = None) -> AssertionResult:
        mock = _require_spy(actual, "spy_exceptions")
        if exc_type is None:
            passed = bool(mock.spy_exceptions)
            description = "to have thrown"
        else:
            passed = any(isinstance(e, exc_type) for e in mock.spy_exceptions)
            description = f"to have thrown {exc_type.__name__}"
        return AssertionResult(
            passed=passed,
            message=f"expected {mock!r} {description}",
            negated_message=f"expected {mock!r} not {description}",
            actual=list(mock.spy_exceptions),
            expected=exc_type,
        )
