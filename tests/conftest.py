"""Shared fixtures for suitest tests."""

import sys
import textwrap
import types
from pathlib import Path

import pytest

from suitest.config import RunnerConfig
from suitest.reporters.base import Reporter


class RecordingReporter(Reporter):
    """Reporter that records every callback as a tuple."""

    def __init__(self):
        self.events: list[tuple] = []

    async def on_start(self, config):
        self.events.append(("start",))

    async def on_collected(self, ctx):
        self.events.append(("collected", len(ctx.files)))

    async def on_file_begin(self, file, ctx):
        self.events.append(("file_begin", Path(file.filepath).name))

    async def on_file_end(self, file, ctx):
        self.events.append(("file_end", Path(file.filepath).name))

    async def on_suite_begin(self, suite, ctx):
        self.events.append(("suite_begin", suite.name))

    async def on_suite_end(self, suite, ctx):
        self.events.append(("suite_end", suite.name))

    async def on_task_begin(self, task, ctx):
        self.events.append(("task_begin", task.name))

    async def on_task_end(self, task, ctx):
        self.events.append(("task_end", task.name, task.status.value))

    async def on_finished(self, ctx):
        self.events.append(("finished",))

    def names(self, kind: str) -> list:
        return [e[1] for e in self.events if e[0] == kind]


@pytest.fixture
def reporter():
    """Create a recording reporter."""
    return RecordingReporter()


@pytest.fixture
def probe(monkeypatch):
    """A module test files can import to record what happened."""
    module = types.ModuleType("suitest_probe")
    module.events = []
    monkeypatch.setitem(sys.modules, "suitest_probe", module)
    return module


@pytest.fixture
def write_test_file(tmp_path):
    """Write a test file under tmp_path and return its path."""

    def write(name: str, source: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source))
        return path

    return write


@pytest.fixture
def config(tmp_path):
    """Create a configuration rooted at tmp_path."""
    return RunnerConfig(root_dir=str(tmp_path))
