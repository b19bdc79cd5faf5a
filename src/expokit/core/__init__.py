"""Core / service layer — pure business logic and data transformations.

Rules
-----
* No ``print()`` calls.
* No filesystem, network or subprocess I/O.
* No imports from ``cli`` or ``infra``.
"""

from expokit.core.dependency_service import DependencyService
from expokit.core.fix_policy import should_proceed
from expokit.core.models import (
    DependencyViolation,
    FixDecision,
    InstallOptions,
    PackageReference,
    ProjectConfig,
    VersionedInstallSet,
)
from expokit.core.protocols import ModuleVersionProvider, PackageManager

__all__: list[str] = [
    "DependencyService",
    "DependencyViolation",
    "FixDecision",
    "InstallOptions",
    "ModuleVersionProvider",
    "PackageManager",
    "PackageReference",
    "ProjectConfig",
    "VersionedInstallSet",
    "should_proceed",
]
