"""Infrastructure: npm and yarn backends for adding packages.

These classes satisfy :class:`~expokit.core.protocols.PackageManager`
structurally.  They are the only place in the codebase that spawns the
package-manager process; a failing process is re-raised as
:class:`~expokit.exceptions.PackageManagerError` carrying the child's
exit code.

Rules
-----
* Executable lookup via :func:`shutil.which` only.
* The backend is picked once per command by :func:`create_for_project`.
* No ``print()`` — the child process writes to the inherited stdio.
"""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
from collections.abc import Sequence
from pathlib import Path

from expokit.exceptions import PackageManagerError, PackageManagerNotFoundError

logger = logging.getLogger(__name__)

YARN_LOCKFILE: str = "yarn.lock"


class _NodePackageManager:
    """Shared process handling for the concrete backends."""

    name: str = ""
    install_hint: str = ""

    def __init__(self, project_root: Path) -> None:
        self.project_root: Path = project_root

    def _add_command(self, specifiers: Sequence[str], extra_args: Sequence[str]) -> list[str]:
        raise NotImplementedError

    def _executable(self) -> str:
        found = shutil.which(self.name)
        if found is None:
            raise PackageManagerNotFoundError(
                f"{self.name} is not installed or not on PATH.",
                hint=self.install_hint,
            )
        return found

    def run(self, args: Sequence[str]) -> None:
        """Run the backend with *args* inside the project root.

        Raises
        ------
        PackageManagerError
            If the process exits with a non-zero status.
        """
        command = [self._executable(), *args]
        logger.debug("Running %s in %s", shlex.join(command), self.project_root)
        try:
            completed = subprocess.run(command, cwd=self.project_root, check=False)
        except OSError as exc:
            raise PackageManagerNotFoundError(
                f"Failed to start {self.name}: {exc}",
                hint=self.install_hint,
            ) from exc
        if completed.returncode != 0:
            raise PackageManagerError(
                f"{self.name} {' '.join(args[:1])} exited with code {completed.returncode}.",
                exit_code=completed.returncode,
            )

    def add(self, specifiers: Sequence[str], extra_args: Sequence[str] = ()) -> None:
        self.run(self._add_command(specifiers, extra_args))


class NpmPackageManager(_NodePackageManager):
    """npm backend: ``npm install --save <specifiers>``."""

    name = "npm"
    install_hint = "Install Node.js, which ships npm: https://nodejs.org/"

    def _add_command(self, specifiers: Sequence[str], extra_args: Sequence[str]) -> list[str]:
        return ["install", "--save", *specifiers, *extra_args]


class YarnPackageManager(_NodePackageManager):
    """Yarn backend: ``yarn add <specifiers>``."""

    name = "yarn"
    install_hint = "Install yarn with: npm install --global yarn"

    def _add_command(self, specifiers: Sequence[str], extra_args: Sequence[str]) -> list[str]:
        return ["add", *specifiers, *extra_args]


def is_using_yarn(project_root: Path) -> bool:
    """Whether the project is managed by yarn (a ``yarn.lock`` is present)."""
    return (project_root / YARN_LOCKFILE).is_file()


def create_for_project(
    project_root: Path,
    *,
    npm: bool = False,
    yarn: bool = False,
) -> NpmPackageManager | YarnPackageManager:
    """Pick the backend for *project_root*.

    Explicit flags win; otherwise a ``yarn.lock`` selects yarn and
    everything else uses npm.
    """
    if npm:
        return NpmPackageManager(project_root)
    if yarn or is_using_yarn(project_root):
        return YarnPackageManager(project_root)
    return NpmPackageManager(project_root)
