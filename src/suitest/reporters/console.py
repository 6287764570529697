"""Console reporter built on rich."""

import os
import traceback
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from suitest import __version__
from suitest.config import RunnerConfig
from suitest.core.models import File, RunContext, Suite, Task, TaskStatus
from suitest.reporters.base import Reporter

STATUS_MARKS = {
    TaskStatus.PASS: "[green]✓[/green]",
    TaskStatus.FAIL: "[red]✗[/red]",
    TaskStatus.SKIP: "[yellow]↓[/yellow]",
    TaskStatus.TODO: "[blue]…[/blue]",
}


class ConsoleReporter(Reporter):
    """Prints progress per task and a summary at the end."""

    def __init__(self, console: Optional[Console] = None, verbose: bool = False):
        self.console = console or Console()
        self.verbose = verbose
        self._root: Optional[str] = None

    def _relative(self, filepath: str) -> str:
        if self._root is None:
            return filepath
        try:
            return os.path.relpath(filepath, self._root)
        except ValueError:
            return filepath

    async def on_start(self, config: RunnerConfig) -> None:
        self._root = str(config.root_path)
        self.console.print(
            Panel.fit(
                "[bold blue]suitest[/bold blue] - suite and task runner",
                subtitle=f"v{__version__}",
            )
        )

    async def on_collected(self, ctx: RunContext) -> None:
        if self.verbose:
            self.console.print(
                f"[dim]Collected {len(ctx.files)} files, {len(ctx.tasks)} tasks[/dim]"
            )
        if ctx.mode == "only":
            self.console.print("[yellow]Running only tasks marked with only[/yellow]")

    async def on_file_begin(self, file: File, ctx: RunContext) -> None:
        self.console.print(f"\n[bold]{escape(self._relative(file.filepath))}[/bold]")
        if file.error is not None:
            self.console.print(f"  [red]Failed to collect:[/red] {escape(repr(file.error))}")

    async def on_suite_begin(self, suite: Suite, ctx: RunContext) -> None:
        if suite.name:
            self.console.print(f"  {escape(suite.name)}")

    async def on_task_end(self, task: Task, ctx: RunContext) -> None:
        indent = "    " if task.suite is not None and task.suite.name else "  "
        mark = STATUS_MARKS.get(task.status, " ")
        line = f"{indent}{mark} {escape(task.name)}"
        if task.status == TaskStatus.TODO:
            line += " [dim](todo)[/dim]"
        elif task.status == TaskStatus.PASS and self.verbose:
            line += f" [dim]{task.duration_ms}ms[/dim]"
        self.console.print(line)

    async def on_finished(self, ctx: RunContext) -> None:
        failed_files = [f for f in ctx.files if f.error is not None]
        failed_tasks = [t for t in ctx.tasks if t.status == TaskStatus.FAIL]

        for file in failed_files:
            self.console.print(f"\n[red bold]FAIL[/red bold] {escape(self._relative(file.filepath))}")
            self.console.print(self._format_error(file.error), markup=False, highlight=False)

        for task in failed_tasks:
            location = self._relative(task.suite.file.filepath) if task.suite and task.suite.file else ""
            self.console.print(f"\n[red bold]FAIL[/red bold] {escape(location)} > {escape(task.full_name)}")
            self.console.print(self._format_error(task.error), markup=False, highlight=False)

        self._display_summary(ctx)

    def _format_error(self, error: Optional[BaseException]) -> str:
        if error is None:
            return ""
        if self.verbose:
            return "".join(traceback.format_exception(type(error), error, error.__traceback__))
        return "".join(traceback.format_exception_only(type(error), error)).rstrip()

    def _display_summary(self, ctx: RunContext) -> None:
        table = Table(show_header=False, box=None)
        table.add_column("Metric", style="bold")
        table.add_column("Value", justify="right")

        table.add_row("Files", str(len(ctx.files)))
        table.add_row("Tasks", str(len(ctx.tasks)))
        table.add_row("Passed", f"[green]{ctx.count(TaskStatus.PASS)}[/green]")
        table.add_row("Failed", f"[red]{ctx.count(TaskStatus.FAIL)}[/red]")
        table.add_row("Skipped", f"[yellow]{ctx.count(TaskStatus.SKIP)}[/yellow]")
        table.add_row("Todo", f"[blue]{ctx.count(TaskStatus.TODO)}[/blue]")

        self.console.print()
        self.console.print(table)

        if ctx.has_failures:
            self.console.print("\n[red]Some tests failed![/red]")
        else:
            self.console.print("\n[green]All tests passed![/green]")
