"""Command-line interface for suitest."""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from suitest import __version__
from suitest.config import RunnerConfig, create_example_config, get_default_config


console = Console()


def setup_logging(verbose: bool) -> None:
    """Route suitest's log records through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def load_config(config_path: Optional[str]) -> RunnerConfig:
    """Load the config file given, the nearest one found, or the defaults."""
    if config_path:
        return RunnerConfig.from_file(config_path)
    try:
        return RunnerConfig.find_and_load()
    except FileNotFoundError:
        return get_default_config()


@click.group()
@click.version_option(version=__version__, prog_name="suitest")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=False),
    help="Path to configuration file (default: nearest suitest.json)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def main(ctx: click.Context, config: Optional[str], verbose: bool) -> None:
    """suitest - collect and run suites of async-friendly tests."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config
    setup_logging(verbose)


@main.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default="suitest.json",
    help="Output path for configuration file",
)
@click.option("--force", "-f", is_flag=True, help="Overwrite existing configuration")
def init(output: str, force: bool) -> None:
    """Initialize a new suitest configuration file."""
    output_path = Path(output)
    if output_path.exists() and not force:
        console.print(f"[yellow]Configuration file already exists:[/yellow] {output_path}")
        console.print("Use --force to overwrite")
        sys.exit(1)

    try:
        create_example_config(output_path)
        console.print(f"[green]Created configuration file:[/green] {output_path}")
    except Exception as e:
        console.print(f"[red]Error creating configuration:[/red] {e}")
        sys.exit(1)


@main.command()
@click.argument("filters", nargs=-1)
@click.option("--root", "-r", type=click.Path(file_okay=False), help="Root directory to search")
@click.option("--include", "includes", multiple=True, help="Glob of test files (repeatable)")
@click.option("--exclude", "excludes", multiple=True, help="Glob of paths to ignore (repeatable)")
@click.option("--update", "-u", is_flag=True, help="Update snapshots")
@click.option(
    "--report/--no-report",
    default=None,
    help="Write an HTML report after the run (default: from config)",
)
@click.pass_context
def run(
    ctx: click.Context,
    filters: tuple[str, ...],
    root: Optional[str],
    includes: tuple[str, ...],
    excludes: tuple[str, ...],
    update: bool,
    report: Optional[bool],
) -> None:
    """Run test files, optionally only those whose path contains FILTERS."""
    verbose = ctx.obj.get("verbose", False)

    try:
        config = load_config(ctx.obj.get("config_path"))
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if root:
        config.root_dir = str(Path(root).resolve())
    if includes:
        config.includes = list(includes)
    if excludes:
        config.excludes = list(excludes)
    if filters:
        config.name_filters = list(filters)
    if update:
        config.update_snapshot = True
    if report is not None:
        config.report.enabled = report

    from suitest.core.runner import Runner
    from suitest.reporters.console import ConsoleReporter

    runner = Runner(config, ConsoleReporter(console=console, verbose=verbose))

    try:
        exit_code = asyncio.run(runner.run())
    except Exception as e:
        console.print(f"[red]Error running tests:[/red] {e!r}")
        sys.exit(1)

    if runner.context is not None and config.report.enabled:
        from suitest.report.generator import ReportGenerator

        try:
            report_path = ReportGenerator(config).generate(runner.context)
            console.print(f"[green]Report generated:[/green] {report_path}")
        except Exception as e:
            console.print(f"[red]Error generating report:[/red] {e}")

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
