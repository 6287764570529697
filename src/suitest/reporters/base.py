"""Reporter interface."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from suitest.config import RunnerConfig
    from suitest.core.models import File, RunContext, Suite, Task


class Reporter:
    """Passive observer of a run.

    Every callback is a coroutine that does nothing by default; subclasses
    override the ones they care about. Reporters never influence control
    flow, but exceptions they raise are not caught by the runner.
    """

    async def on_start(self, config: "RunnerConfig") -> None:
        pass

    async def on_collected(self, ctx: "RunContext") -> None:
        pass

    async def on_file_begin(self, file: "File", ctx: "RunContext") -> None:
        pass

    async def on_file_end(self, file: "File", ctx: "RunContext") -> None:
        pass

    async def on_suite_begin(self, suite: "Suite", ctx: "RunContext") -> None:
        pass

    async def on_suite_end(self, suite: "Suite", ctx: "RunContext") -> None:
        pass

    async def on_task_begin(self, task: "Task", ctx: "RunContext") -> None:
        pass

    async def on_task_end(self, task: "Task", ctx: "RunContext") -> None:
        pass

    async def on_finished(self, ctx: "RunContext") -> None:
        pass
