"""Assertions: expect() and the plugins it dispatches to."""

import importlib
from pathlib import Path
from typing import Any

from suitest.assertions.base import (
    AssertionPlugin,
    AssertionRegistry,
    AssertionResult,
    Expectation,
    MatcherPlugin,
    matcher,
)
from suitest.assertions.core import CoreAssertions
from suitest.assertions.jest import JestAssertions
from suitest.assertions.spy import SpyAssertions, spy

registry = AssertionRegistry([CoreAssertions()])


def expect(actual: Any) -> Expectation:
    """Start an assertion about a value, e.g. expect(x).to_equal(y)."""
    return Expectation(actual, registry)


def load_plugin(path: str, root_dir: Path, update_snapshot: bool) -> AssertionPlugin:
    """Build an external plugin from a 'module:attribute' factory path.

    The factory is called with root_dir and update_snapshot keyword
    arguments and must return an AssertionPlugin.
    """
    module_name, _, attribute = path.partition(":")
    target: Any = importlib.import_module(module_name)
    for part in attribute.split("."):
        target = getattr(target, part)

    plugin = target(root_dir=root_dir, update_snapshot=update_snapshot)
    if not isinstance(plugin, AssertionPlugin):
        raise TypeError(f"Plugin factory {path} returned {plugin!r}, not an AssertionPlugin")
    return plugin


__all__ = [
    "AssertionPlugin",
    "AssertionRegistry",
    "AssertionResult",
    "CoreAssertions",
    "Expectation",
    "JestAssertions",
    "MatcherPlugin",
    "SpyAssertions",
    "expect",
    "load_plugin",
    "matcher",
    "registry",
    "spy",
]
