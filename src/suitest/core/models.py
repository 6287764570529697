"""Data models for collected files, suites and tasks."""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional, Union

if TYPE_CHECKING:
    from suitest.config import RunnerConfig
    from suitest.reporters.base import Reporter


TaskFn = Callable[[], Union[None, Awaitable[None]]]


class RunMode(str, Enum):
    """Declared intent of a suite or task."""

    RUN = "run"
    SKIP = "skip"
    ONLY = "only"
    TODO = "todo"


class TaskStatus(str, Enum):
    """Runtime status of a task."""

    RUN = "run"
    SKIP = "skip"
    TODO = "todo"
    PASS = "pass"
    FAIL = "fail"

    @property
    def is_terminal(self) -> bool:
        return self is not TaskStatus.RUN


class SkipReason(str, Enum):
    """Why a task ended with status skip."""

    DECLARED = "declared"
    ONLY = "only"


@dataclass(eq=False)
class Task:
    """A single test case."""

    name: str
    mode: RunMode = RunMode.RUN
    fn: Optional[TaskFn] = None
    suite: Optional["Suite"] = field(default=None, repr=False)
    status: Optional[TaskStatus] = None
    error: Optional[BaseException] = None
    skip_reason: Optional[SkipReason] = None
    duration_ms: int = 0

    @property
    def full_name(self) -> str:
        """Name prefixed with the enclosing suite name, if any."""
        if self.suite is not None and self.suite.name:
            return f"{self.suite.name} > {self.name}"
        return self.name

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "full_name": self.full_name,
            "mode": self.mode.value,
            "status": self.status.value if self.status else None,
            "skip_reason": self.skip_reason.value if self.skip_reason else None,
            "error": repr(self.error) if self.error is not None else None,
            "duration_ms": self.duration_ms,
        }


@dataclass(eq=False)
class Suite:
    """A named group of tasks declared in one file."""

    name: str
    mode: RunMode = RunMode.RUN
    tasks: list[Task] = field(default_factory=list)
    file: Optional["File"] = field(default=None, repr=False)

    @property
    def requests_only(self) -> bool:
        """True when the suite or any of its tasks is marked only."""
        return self.mode == RunMode.ONLY or any(t.mode == RunMode.ONLY for t in self.tasks)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "mode": self.mode.value,
            "tasks": [t.to_dict() for t in self.tasks],
        }


@dataclass(eq=False)
class File:
    """A test file and the suites collected from it."""

    filepath: str
    suites: list[Suite] = field(default_factory=list)
    collected: bool = False
    error: Optional[BaseException] = None

    @property
    def tasks(self) -> list[Task]:
        return [t for s in self.suites for t in s.tasks]

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "filepath": self.filepath,
            "collected": self.collected,
            "error": repr(self.error) if self.error is not None else None,
            "suites": [s.to_dict() for s in self.suites],
        }


@dataclass
class RunContext:
    """State shared by every step of one run."""

    files: list[File]
    mode: str
    config: "RunnerConfig"
    reporter: "Reporter"

    @property
    def tasks(self) -> list[Task]:
        return [t for f in self.files for t in f.tasks]

    def count(self, status: TaskStatus) -> int:
        """Number of tasks that ended with the given status."""
        return sum(1 for t in self.tasks if t.status == status)

    @property
    def has_failures(self) -> bool:
        return any(f.error is not None for f in self.files) or self.count(TaskStatus.FAIL) > 0

    @property
    def exit_code(self) -> int:
        return 1 if self.has_failures else 0


def is_only_mode(files: list[File]) -> bool:
    """Check whether any suite in any file requested exclusive execution."""
    return any(suite.requests_only for file in files for suite in file.suites)
