"""Core collection and execution functionality."""

from suitest.core.runner import Runner, run
from suitest.core.collector import CollectionContext
from suitest.core.discovery import discover_files

__all__ = ["Runner", "run", "CollectionContext", "discover_files"]
