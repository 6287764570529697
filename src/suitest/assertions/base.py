"""Assertion plugin interface and the expect() entry point."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Optional

from suitest.errors import AssertionFailure

logger = logging.getLogger(__name__)


@dataclass
class AssertionResult:
    """Outcome of checking one assertion.

    Attributes:
        passed: Whether the positive form of the assertion holds
        message: Failure message for the positive form
        negated_message: Failure message for the negated form (expect(x).not_...)
        actual: The value under test
        expected: The value it was compared against, if any
    """

    passed: bool
    message: str
    negated_message: str
    actual: Any = None
    expected: Any = None


class AssertionPlugin(ABC):
    """A set of named assertions that expect() can dispatch to."""

    name: str = "plugin"

    @abstractmethod
    def supports(self, method_name: str) -> bool:
        """Check whether this plugin provides the named assertion."""
        pass

    @abstractmethod
    def check(self, method_name: str, actual: Any, *args: Any, **kwargs: Any) -> AssertionResult:
        """Evaluate the named assertion against the actual value."""
        pass


def matcher(*names: str) -> Callable:
    """Mark a MatcherPlugin method as the implementation of the given names."""

    def decorator(fn: Callable) -> Callable:
        fn._matcher_names = names
        return fn

    return decorator


class MatcherPlugin(AssertionPlugin):
    """Plugin whose assertions are the methods decorated with @matcher."""

    def __init__(self) -> None:
        self._matchers: dict[str, Callable[..., AssertionResult]] = {}
        for attr in dir(type(self)):
            names = getattr(getattr(type(self), attr, None), "_matcher_names", ())
            for method_name in names:
                self._matchers[method_name] = getattr(self, attr)

    @property
    def method_names(self) -> list[str]:
        return sorted(self._matchers)

    def supports(self, method_name: str) -> bool:
        return method_name in self._matchers

    def check(self, method_name: str, actual: Any, *args: Any, **kwargs: Any) -> AssertionResult:
        return self._matchers[method_name](actual, *args, **kwargs)


class AssertionRegistry:
    """The plugins expect() dispatches to. Later plugins take precedence."""

    def __init__(self, plugins: Optional[list[AssertionPlugin]] = None):
        self._plugins: list[AssertionPlugin] = list(plugins or [])

    @property
    def plugins(self) -> list[AssertionPlugin]:
        return list(self._plugins)

    def use(self, plugin: AssertionPlugin) -> AssertionPlugin:
        """Install a plugin. A second plugin of the same type is ignored."""
        for installed in self._plugins:
            if type(installed) is type(plugin):
                logger.debug("Assertion plugin %s already installed", plugin.name)
                return installed
        self._plugins.append(plugin)
        logger.debug("Installed assertion plugin %s", plugin.name)
        return plugin

    def resolve(self, method_name: str) -> Optional[AssertionPlugin]:
        for plugin in reversed(self._plugins):
            if plugin.supports(method_name):
                return plugin
        return None


class Expectation:
    """Wraps a value; attribute access dispatches to installed assertions."""

    def __init__(self, actual: Any, registry: AssertionRegistry, negated: bool = False):
        self.actual = actual
        self._registry = registry
        self._negated = negated

    @property
    def not_(self) -> "Expectation":
        return Expectation(self.actual, self._registry, not self._negated)

    def __getattr__(self, method_name: str) -> Callable[..., "Expectation"]:
        if method_name.startswith("_"):
            raise AttributeError(method_name)

        plugin = self._registry.resolve(method_name)
        if plugin is None:
            raise AttributeError(f"No assertion named {method_name!r} is installed")

        def assertion(*args: Any, **kwargs: Any) -> "Expectation":
            result = plugin.check(method_name, self.actual, *args, **kwargs)
            if result.passed == self._negated:
                message = result.negated_message if self._negated else result.message
                raise AssertionFailure(message, actual=result.actual, expected=result.expected)
            return self

        assertion.__name__ = method_name
        return assertion
