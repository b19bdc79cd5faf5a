"""Custom exception hierarchy for expokit.

All exceptions that cross layer boundaries must inherit from
:class:`ExpokitError`.  Raw OS, subprocess, JSON and cryptography
exceptions must NEVER propagate beyond the infrastructure layer — they
must be caught and re-raised as a typed subclass defined here.

Hierarchy
---------
ExpokitError
├── ProjectRootNotFoundError
├── ConfigError
│   └── ConfigPluginError
├── DependencyResolutionError
├── PackageManagerError
│   └── PackageManagerNotFoundError
├── CodeSigningError
└── EnvironmentError
"""

from __future__ import annotations


class ExpokitError(Exception):
    """Base exception for all expokit errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    is_plugin_error: bool = False
    """Whether the config-plugin step may downgrade this error to a warning."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Project discovery -----------------------------------------------------

class ProjectRootNotFoundError(ExpokitError):
    """Raised when no ``package.json`` exists in the cwd or any parent."""


# --- Project configuration -------------------------------------------------

class ConfigError(ExpokitError):
    """Raised when the app config or ``package.json`` cannot be used."""


class ConfigPluginError(ConfigError):
    """Raised when a config plugin cannot be resolved or is malformed.

    This is the only error kind the plugin auto-configuration step
    treats as recoverable.
    """

    is_plugin_error = True


# --- Dependency versioning -------------------------------------------------

class DependencyResolutionError(ExpokitError):
    """Raised when SDK-compatible versions cannot be determined."""


# --- Package manager -------------------------------------------------------

class PackageManagerError(ExpokitError):
    """Raised when the package-manager process exits unsuccessfully.

    ``exit_code`` is the child's exit status and becomes the exit status
    of the whole command.
    """

    def __init__(
        self,
        message: str,
        *,
        exit_code: int = 1,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.exit_code: int = exit_code


class PackageManagerNotFoundError(PackageManagerError):
    """Raised when the selected package manager is not on PATH."""


# --- Code signing ----------------------------------------------------------

class CodeSigningError(ExpokitError):
    """Raised when keys or certificates are missing, invalid or mismatched."""


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(ExpokitError):
    """Raised when a required runtime dependency is not available."""
