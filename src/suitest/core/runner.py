"""Test collection and execution orchestration."""

import inspect
import logging
import time
from pathlib import Path
from typing import Optional

from suitest.assertions import AssertionRegistry, JestAssertions, SpyAssertions, load_plugin
from suitest.assertions import registry as default_assertions
from suitest.config import RunnerConfig
from suitest.core.collector import CollectionContext, importable_from, load_module, unload_module
from suitest.core.discovery import discover_files, filter_by_name
from suitest.core.hooks import HookRegistry
from suitest.core.models import (
    File,
    RunContext,
    RunMode,
    SkipReason,
    Task,
    TaskStatus,
    is_only_mode,
)
from suitest.errors import NoTestFilesError, TaskStateError
from suitest.reporters.base import Reporter

logger = logging.getLogger(__name__)


class Runner:
    """Collects test files, then runs their suites and tasks one at a time."""

    def __init__(
        self,
        config: RunnerConfig,
        reporter: Optional[Reporter] = None,
        assertions: Optional[AssertionRegistry] = None,
    ):
        """Initialize the runner.

        Args:
            config: Run configuration
            reporter: Observer of the run (default: a reporter that ignores everything)
            assertions: Registry expect() dispatches to (default: the global one)
        """
        self.config = config
        self.reporter = reporter or Reporter()
        self.assertions = assertions if assertions is not None else default_assertions
        self.hooks = HookRegistry()

        self.context: Optional[RunContext] = None

    def install_plugins(self) -> None:
        """Install the assertion plugins before any test file is loaded."""
        root = self.config.root_path
        self.assertions.use(SpyAssertions())
        self.assertions.use(JestAssertions())
        for path in self.config.plugins:
            self.assertions.use(load_plugin(path, root, self.config.update_snapshot))

    def find_files(self) -> list[str]:
        """Discover test files and apply the name filters.

        Raises:
            NoTestFilesError: If no file is left
        """
        root = self.config.root_path
        paths = discover_files(self.config.includes, cwd=root, ignore=self.config.excludes)
        paths = filter_by_name(paths, self.config.name_filters)
        if not paths:
            raise NoTestFilesError(f"No test files found in {root}")
        return paths

    async def collect_files(self, paths: list[str]) -> list[File]:
        """Load each file and collect its suites.

        A file that fails to load or collect keeps the suites collected so
        far, records the error and does not stop the other files.
        """
        result: list[File] = []

        for filepath in paths:
            file = File(filepath=filepath)
            context = CollectionContext(self.hooks)
            module = None

            with context.activate(), importable_from(str(Path(filepath).resolve().parent)):
                try:
                    module = load_module(filepath)
                    for collector in context.collectors:
                        context.current_suite = collector
                        file.suites.append(await collector.collect(file))
                    file.collected = True
                except Exception as e:
                    file.error = e
                    file.collected = False
                    logger.error("Failed to collect %s: %s", filepath, e)
                finally:
                    if module is not None:
                        unload_module(module)

            result.append(file)

        return result

    async def run_task(self, task: Task, ctx: RunContext) -> None:
        """Resolve a task's mode and run its body if it should run."""
        if task.status is not None:
            raise TaskStateError(f"Task {task.full_name!r} already has status {task.status.value}")

        reporter = ctx.reporter

        task.status = TaskStatus.RUN
        await reporter.on_task_begin(task, ctx)
        await self.hooks.before_each.fire(task)

        suite_mode = task.suite.mode if task.suite is not None else RunMode.RUN

        if suite_mode == RunMode.SKIP or task.mode == RunMode.SKIP:
            task.status = TaskStatus.SKIP
            task.skip_reason = SkipReason.DECLARED
        elif ctx.mode == "only" and suite_mode != RunMode.ONLY and task.mode != RunMode.ONLY:
            task.status = TaskStatus.SKIP
            task.skip_reason = SkipReason.ONLY
        elif suite_mode == RunMode.TODO or task.mode == RunMode.TODO:
            task.status = TaskStatus.TODO
        else:
            start_time = time.perf_counter()
            try:
                result = task.fn()
                if inspect.isawaitable(result):
                    await result
                task.status = TaskStatus.PASS
            except Exception as e:
                task.status = TaskStatus.FAIL
                task.error = e
                logger.debug("Task %s failed: %r", task.full_name, e)
            task.duration_ms = int((time.perf_counter() - start_time) * 1000)

        await self.hooks.after_each.fire(task)
        await reporter.on_task_end(task, ctx)

    async def run_file(self, file: File, ctx: RunContext) -> None:
        """Run every suite of a file in declaration order."""
        reporter = ctx.reporter

        await reporter.on_file_begin(file, ctx)
        await self.hooks.before_file.fire(file)

        for suite in file.suites:
            await reporter.on_suite_begin(suite, ctx)
            await self.hooks.before_suite.fire(suite)

            for task in suite.tasks:
                await self.run_task(task, ctx)

            await self.hooks.after_suite.fire(suite)
            await reporter.on_suite_end(suite, ctx)

        await self.hooks.after_file.fire(file)
        await reporter.on_file_end(file, ctx)

    async def run(self) -> int:
        """Discover, collect and run all test files.

        Returns:
            Process exit code: 0 if every file collected and no task failed
        """
        self.install_plugins()

        try:
            paths = self.find_files()
        except NoTestFilesError as e:
            logger.error("%s", e)
            return 1

        await self.reporter.on_start(self.config)

        files = await self.collect_files(paths)

        ctx = RunContext(
            files=files,
            mode="only" if is_only_mode(files) else "all",
            config=self.config,
            reporter=self.reporter,
        )
        self.context = ctx
        logger.info("Collected %d files, %d tasks (mode: %s)", len(files), len(ctx.tasks), ctx.mode)

        await self.reporter.on_collected(ctx)
        await self.hooks.before_all.fire()

        for file in files:
            await self.run_file(file, ctx)

        await self.hooks.after_all.fire()
        await self.reporter.on_finished(ctx)

        return ctx.exit_code


async def run(config: RunnerConfig, reporter: Optional[Reporter] = None) -> int:
    """Run the test files selected by config. Returns the exit code."""
    return await Runner(config, reporter).run()
