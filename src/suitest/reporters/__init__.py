"""Reporters observing a run."""

from suitest.reporters.base import Reporter

__all__ = ["Reporter"]
