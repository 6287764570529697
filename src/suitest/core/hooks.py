"""Lifecycle hooks fired around files, suites and tasks."""

import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Callable

logger = logging.getLogger(__name__)

HookFn = Callable[..., Any]


class Hook:
    """An ordered list of callbacks fired at one lifecycle point."""

    def __init__(self, name: str):
        self.name = name
        self._callbacks: list[HookFn] = []

    def __len__(self) -> int:
        return len(self._callbacks)

    def __repr__(self) -> str:
        return f"Hook({self.name!r}, callbacks={len(self._callbacks)})"

    @property
    def callbacks(self) -> list[HookFn]:
        return list(self._callbacks)

    def on(self, fn: HookFn) -> HookFn:
        """Register a callback. Returns it so this can be used as a decorator."""
        self._callbacks.append(fn)
        return fn

    async def fire(self, *args: Any) -> None:
        """Call every callback in registration order, awaiting each one.

        Exceptions raised by a callback are not caught here.
        """
        if self._callbacks:
            logger.debug("Firing %s (%d callbacks)", self.name, len(self._callbacks))
        for fn in self._callbacks:
            result = fn(*args)
            if inspect.isawaitable(result):
                await result


@dataclass
class HookRegistry:
    """The hooks of one run: before/after for all, file, suite and each task."""

    before_all: Hook = field(default_factory=lambda: Hook("before_all"))
    after_all: Hook = field(default_factory=lambda: Hook("after_all"))
    before_file: Hook = field(default_factory=lambda: Hook("before_file"))
    after_file: Hook = field(default_factory=lambda: Hook("after_file"))
    before_suite: Hook = field(default_factory=lambda: Hook("before_suite"))
    after_suite: Hook = field(default_factory=lambda: Hook("after_suite"))
    before_each: Hook = field(default_factory=lambda: Hook("before_each"))
    after_each: Hook = field(default_factory=lambda: Hook("after_each"))
