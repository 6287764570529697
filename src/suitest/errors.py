"""Error types raised by suitest."""

from typing import Any


class SuitestError(Exception):
    """Base class for suitest errors."""

    pass


class CollectionError(SuitestError):
    """Raised when the declaration API is misused while collecting a file."""

    pass


class NoTestFilesError(SuitestError):
    """Raised when discovery and name filtering leave no test files."""

    pass


class TaskStateError(SuitestError):
    """Raised when a task that already finished is run again."""

    pass


class AssertionFailure(AssertionError):
    """Raised by expect() when an assertion does not hold."""

    def __init__(self, message: str, actual: Any = None, expected: Any = None):
        super().__init__(message)
        self.message = message
        self.actual = actual
        self.expected = expected
