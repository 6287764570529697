"""Test file discovery."""

import fnmatch
import logging
from pathlib import Path
from typing import Iterable, Optional, Sequence

logger = logging.getLogger(__name__)

DEFAULT_INCLUDES = ["**/*.test.py", "**/*.spec.py"]
DEFAULT_EXCLUDES = [
    "**/.venv/**",
    "**/venv/**",
    "**/node_modules/**",
    "**/__pycache__/**",
    "**/.git/**",
    "**/dist/**",
]


def _is_ignored(relative: str, ignore: Sequence[str]) -> bool:
    # Leading slash lets "**/dir/**" also match "dir/..." at the root.
    candidate = "/" + relative
    return any(fnmatch.fnmatch(candidate, pattern) or fnmatch.fnmatch(relative, pattern) for pattern in ignore)


def discover_files(
    includes: Sequence[str],
    cwd: Optional[Path | str] = None,
    ignore: Optional[Sequence[str]] = None,
) -> list[str]:
    """Find test files matching the include patterns.

    Args:
        includes: Glob patterns relative to cwd (e.g. "**/*.test.py")
        cwd: Directory to search from (default: current directory)
        ignore: Glob patterns of paths to leave out

    Returns:
        Absolute file paths, in include-pattern order, sorted within each
        pattern and without duplicates. May be empty.
    """
    root = Path(cwd) if cwd is not None else Path.cwd()
    root = root.resolve()
    ignore = list(ignore or [])

    found: list[str] = []
    seen: set[str] = set()

    for pattern in includes:
        for path in sorted(root.glob(pattern)):
            if not path.is_file():
                continue
            relative = path.relative_to(root).as_posix()
            if _is_ignored(relative, ignore):
                continue
            absolute = str(path)
            if absolute not in seen:
                seen.add(absolute)
                found.append(absolute)

    logger.debug("Discovered %d test files under %s", len(found), root)
    return found


def filter_by_name(paths: Iterable[str], name_filters: Optional[Sequence[str]]) -> list[str]:
    """Keep the paths containing at least one of the filters as a substring."""
    paths = list(paths)
    if not name_filters:
        return paths
    return [p for p in paths if any(f in p for f in name_filters)]
