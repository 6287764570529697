"""
suitest - a small async test runner built around suites and tasks.

This package provides:
- A declaration API (suite, test, hooks) used inside test files
- A collection and execution engine with only/skip/todo modes
- A reporter interface for observing the run
- A pluggable expect() assertion layer
"""

__version__ = "0.1.0"
__author__ = "suitest Team"

from suitest.assertions import expect, spy
from suitest.core.collector import (
    after_all,
    after_each,
    after_file,
    after_suite,
    before_all,
    before_each,
    before_file,
    before_suite,
    describe,
    it,
    suite,
    test,
)

__all__ = [
    "suite",
    "describe",
    "test",
    "it",
    "before_all",
    "after_all",
    "before_file",
    "after_file",
    "before_suite",
    "after_suite",
    "before_each",
    "after_each",
    "expect",
    "spy",
]
