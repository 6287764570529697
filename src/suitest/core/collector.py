"""Collection of suites and tasks declared by test files.

Test files declare their suites, tasks and hooks at import time:

    from suitest import suite, test, before_each, expect

    @test("adds")
    def _():
        expect(1 + 1).to_be(2)

    @suite("strings")
    def _():
        @test.only("upper")
        def _():
            expect("a".upper()).to_equal("A")

        test.todo("lower")

The declarations land in the CollectionContext that the runner creates for
the file and activates while the file is loaded and its suites collected.
"""

import hashlib
import importlib.util
import inspect
import logging
import re
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Iterator, Optional

from suitest.core.hooks import HookFn, HookRegistry
from suitest.core.models import File, RunMode, Suite, Task, TaskFn
from suitest.errors import CollectionError

logger = logging.getLogger(__name__)

_active_context: ContextVar[Optional["CollectionContext"]] = ContextVar(
    "suitest_collection_context", default=None
)


@dataclass
class TaskDeclaration:
    """A task as declared, before its suite is collected."""

    name: str
    mode: RunMode
    fn: Optional[TaskFn] = None


class SuiteCollector:
    """Gathers the task declarations of one suite until it is collected."""

    def __init__(
        self,
        name: str,
        mode: RunMode = RunMode.RUN,
        factory: Optional[Callable[[], Any]] = None,
    ):
        self.name = name
        self.mode = mode
        self.factory = factory
        self.declarations: list[TaskDeclaration] = []
        self.test = TaskDeclarer(target=self)

    def __repr__(self) -> str:
        return f"SuiteCollector({self.name!r}, mode={self.mode.value})"

    def __call__(self, factory: Callable[[], Any]) -> "SuiteCollector":
        # Decorator form: @suite("name") def _(): ...
        self.factory = factory
        return self

    def declare(self, name: str, mode: RunMode, fn: Optional[TaskFn]) -> TaskDeclaration:
        """Queue a task declaration on this suite."""
        declaration = TaskDeclaration(name=name, mode=mode, fn=fn)
        self.declarations.append(declaration)
        return declaration

    def clear(self) -> None:
        self.declarations = []

    async def collect(self, file: File) -> Suite:
        """Run the suite factory and build the Suite with its tasks."""
        if self.factory is not None:
            result = self.factory()
            if inspect.isawaitable(result):
                await result

        suite = Suite(name=self.name, mode=self.mode, file=file)
        for declaration in self.declarations:
            if declaration.fn is None and declaration.mode != RunMode.TODO:
                raise CollectionError(f"Task {declaration.name!r} has no body")
            suite.tasks.append(
                Task(
                    name=declaration.name,
                    mode=declaration.mode,
                    fn=declaration.fn,
                    suite=suite,
                )
            )
        return suite


class CollectionContext:
    """Suites and hooks registered while one test file is loaded."""

    def __init__(self, hooks: Optional[HookRegistry] = None):
        self.hooks = hooks if hooks is not None else HookRegistry()
        self.default_suite = SuiteCollector("")
        self.suites: list[SuiteCollector] = []
        self.current_suite = self.default_suite

    def clear(self) -> None:
        """Forget every suite and task declared so far. Hooks are kept."""
        self.default_suite.clear()
        self.default_suite.factory = None
        self.suites = []
        self.current_suite = self.default_suite

    @property
    def collectors(self) -> list[SuiteCollector]:
        return [self.default_suite, *self.suites]

    @contextmanager
    def activate(self) -> Iterator["CollectionContext"]:
        """Make this the context the declaration API writes to."""
        token = _active_context.set(self)
        try:
            yield self
        finally:
            _active_context.reset(token)


def active_context() -> CollectionContext:
    """Return the context of the file being collected."""
    context = _active_context.get()
    if context is None:
        raise CollectionError(
            "suite(), test() and hooks can only be used while a test file is being collected"
        )
    return context


@contextmanager
def importable_from(directory: str) -> Iterator[None]:
    """Let a test file import the modules that sit next to it."""
    added = directory not in sys.path
    if added:
        sys.path.insert(0, directory)
    try:
        yield
    finally:
        if added and directory in sys.path:
            sys.path.remove(directory)


def load_module(filepath: str) -> ModuleType:
    """Import a test file by path so its declarations run.

    The module stays registered in sys.modules until unload_module().
    """
    path = Path(filepath)
    digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:10]
    stem = re.sub(r"\W", "_", path.stem)
    module_name = f"suitest_file_{stem}_{digest}"

    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise CollectionError(f"Cannot load test file: {filepath}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        with importable_from(str(path.resolve().parent)):
            spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise

    logger.debug("Loaded %s as %s", filepath, module_name)
    return module


def unload_module(module: ModuleType) -> None:
    """Drop a loaded test file from sys.modules once it has been collected."""
    if sys.modules.get(module.__name__) is module:
        del sys.modules[module.__name__]


class TaskDeclarer:
    """Callable behind test(), test.skip(), test.only() and test.todo()."""

    def __init__(self, mode: RunMode = RunMode.RUN, target: Optional[SuiteCollector] = None):
        self.mode = mode
        self._target = target

    def _suite(self) -> SuiteCollector:
        if self._target is not None:
            return self._target
        return active_context().current_suite

    def __call__(self, name: Any, fn: Optional[TaskFn] = None) -> Callable:
        # Bare decorator form: @test def test_name(): ...
        if callable(name) and fn is None:
            body = name
            self._suite().declare(body.__name__, self.mode, body)
            return body

        if fn is not None and not callable(fn):
            raise CollectionError(f"Task {name!r}: body must be callable")

        if self.mode == RunMode.TODO:
            declaration = self._suite().declare(name, self.mode, fn)

            def attach(body: TaskFn) -> TaskFn:
                declaration.fn = body
                return body

            return attach

        if fn is not None:
            self._suite().declare(name, self.mode, fn)
            return fn

        def decorator(body: TaskFn) -> TaskFn:
            self._suite().declare(name, self.mode, body)
            return body

        return decorator

    @property
    def skip(self) -> "TaskDeclarer":
        return TaskDeclarer(RunMode.SKIP, self._target)

    @property
    def only(self) -> "TaskDeclarer":
        return TaskDeclarer(RunMode.ONLY, self._target)

    @property
    def todo(self) -> "TaskDeclarer":
        return TaskDeclarer(RunMode.TODO, self._target)


class SuiteDeclarer:
    """Callable behind suite(), suite.skip(), suite.only() and suite.todo()."""

    def __init__(self, mode: RunMode = RunMode.RUN):
        self.mode = mode

    def __call__(self, name: str, factory: Optional[Callable[[], Any]] = None) -> SuiteCollector:
        context = active_context()
        if context.current_suite is not context.default_suite:
            raise CollectionError(
                f"Suite {name!r} declared inside suite {context.current_suite.name!r}; "
                "nested suites are not supported"
            )
        collector = SuiteCollector(name, self.mode, factory)
        context.suites.append(collector)
        return collector

    @property
    def skip(self) -> "SuiteDeclarer":
        return SuiteDeclarer(RunMode.SKIP)

    @property
    def only(self) -> "SuiteDeclarer":
        return SuiteDeclarer(RunMode.ONLY)

    @property
    def todo(self) -> "SuiteDeclarer":
        return SuiteDeclarer(RunMode.TODO)


suite = SuiteDeclarer()
describe = suite
test = TaskDeclarer()
it = test


def before_all(fn: HookFn) -> HookFn:
    return active_context().hooks.before_all.on(fn)


def after_all(fn: HookFn) -> HookFn:
    return active_context().hooks.after_all.on(fn)


def before_file(fn: HookFn) -> HookFn:
    return active_context().hooks.before_file.on(fn)


def after_file(fn: HookFn) -> HookFn:
    return active_context().hooks.after_file.on(fn)


def before_suite(fn: HookFn) -> HookFn:
    return active_context().hooks.before_suite.on(fn)


def after_suite(fn: HookFn) -> HookFn:
    return active_context().hooks.after_suite.on(fn)


def before_each(fn: HookFn) -> HookFn:
    return active_context().hooks.before_each.on(fn)


def after_each(fn: HookFn) -> HookFn:
    return active_context().hooks.after_each.on(fn)
