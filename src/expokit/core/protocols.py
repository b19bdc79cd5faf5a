"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — preserving the dependency inversion principle.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol


class PackageManager(Protocol):
    """Contract for package-manager backends (npm, yarn).

    A handle is bound to one project root and chosen once per command.
    """

    name: str
    """Identifying name shown to the user (``"npm"``, ``"yarn"``)."""

    def add(self, specifiers: Sequence[str], extra_args: Sequence[str] = ()) -> None:
        """Add *specifiers* to the project's dependencies.

        Parameters
        ----------
        specifiers:
            Package specifiers such as ``"expo-camera@~13.4.2"``.
        extra_args:
            Arguments appended verbatim to the backend command line.

        Raises
        ------
        PackageManagerError
            When the backend process exits with a non-zero status.
        """
        ...  # pragma: no cover


class ModuleVersionProvider(Protocol):
    """Contract for looking up SDK-pinned and installed package versions."""

    def bundled_native_modules(self, sdk_version: str) -> dict[str, str]:
        """Return the ``name → npm range`` map pinned by *sdk_version*.

        Raises
        ------
        DependencyResolutionError
            When the map is unavailable.
        """
        ...  # pragma: no cover

    def installed_version(self, package_name: str) -> str | None:
        """Return the installed version of *package_name*, or ``None``."""
        ...  # pragma: no cover
