"""Infrastructure: locate the project root.

The project root is the nearest directory, starting at the given path
and walking upward, that contains a ``package.json``.
"""

from __future__ import annotations

from pathlib import Path

from expokit.exceptions import ProjectRootNotFoundError

PROJECT_ROOT_MARKER: str = "package.json"


def find_up_project_root(start: Path) -> Path | None:
    """Return the nearest ancestor of *start* holding a ``package.json``."""
    current = start.resolve()
    if current.is_file():
        current = current.parent
    for directory in (current, *current.parents):
        if (directory / PROJECT_ROOT_MARKER).is_file():
            return directory
    return None


def find_up_project_root_or_assert(start: Path) -> Path:
    """Like :func:`find_up_project_root` but raise when nothing is found."""
    root = find_up_project_root(start)
    if root is None:
        raise ProjectRootNotFoundError(
            f"Project root directory not found (working directory: {start})",
            hint="Run this command from inside a project that has a package.json.",
        )
    return root
