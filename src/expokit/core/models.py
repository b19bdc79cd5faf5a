"""Domain models for expokit.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access.  They carry zero I/O and are passed
stage to stage through a single command invocation; nothing here is
persisted.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path
from typing import Any


# ---------------------------------------------------------------------------
# Command options
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class InstallOptions:
    """Operation mode for the ``install`` command."""

    check: bool = False
    """Audit installed versions and exit non-zero when any are outdated."""

    fix: bool = False
    """Audit and install corrected versions without prompting."""

    npm: bool = False
    """Force the npm backend."""

    yarn: bool = False
    """Force the yarn backend."""

    @property
    def audit(self) -> bool:
        return self.check or self.fix


# ---------------------------------------------------------------------------
# Package references
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class PackageReference:
    """A package specifier split into its name and optional version/tag."""

    name: str
    """Bare package name, including any ``@scope/`` prefix."""

    spec: str | None
    """Version, range or dist-tag after the separating ``@``."""

    @property
    def raw(self) -> str:
        if self.spec is None:
            return self.name
        return f"{self.name}@{self.spec}"


@dataclass(frozen=True, slots=True)
class DependencyViolation:
    """An installed package whose version falls outside the SDK range."""

    package_name: str
    expected_version_or_range: str
    actual_version: str


@dataclass(frozen=True, slots=True)
class VersionedInstallSet:
    """Specifiers ready for the package manager plus a readable summary."""

    packages: tuple[str, ...]
    """Resolved specifiers, e.g. ``("expo-camera@~13.4.2", "left-pad")``."""

    messages: tuple[str, ...]
    """Summary fragments, e.g. ``("1 SDK 49.0.0 compatible native module",)``."""


# ---------------------------------------------------------------------------
# Project configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ProjectConfig:
    """The app config (``exp``) and ``package.json`` (``pkg``) of a project."""

    exp: dict[str, Any]
    pkg: dict[str, Any]
    static_config_path: Path | None = None
    dynamic_config_path: Path | None = None

    @property
    def sdk_version(self) -> str | None:
        value = self.exp.get("sdkVersion")
        return str(value) if value else None


@dataclass(frozen=True, slots=True)
class ConfigModification:
    """Outcome of writing changes into the app config."""

    success: bool
    message: str
    config_path: Path | None = None


@dataclass(frozen=True, slots=True)
class PluginAutoConfigResult:
    """What the config-plugin auto-wiring step did."""

    added: tuple[str, ...] = ()
    modification: ConfigModification | None = None
    candidates: tuple[str, ...] = ()
    """Bare package names that were considered."""
    pending: tuple[str, ...] = ()
    """Packages with a config plugin that still need a plugins entry."""


# ---------------------------------------------------------------------------
# Fix confirmation
# ---------------------------------------------------------------------------

class FixDecision(enum.Enum):
    """How the install command reacts to outdated dependencies."""

    PROCEED = "proceed"
    ASK = "ask"
    DECLINE = "decline"


# ---------------------------------------------------------------------------
# Code signing
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class CodeSigningPaths:
    """Resolved locations of the code-signing key and certificate files."""

    private_key: Path
    public_key: Path
    certificate: Path
