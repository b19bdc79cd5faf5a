"""Infrastructure layer — external system integration.

This layer wraps all interaction with the filesystem, the npm/yarn
processes and ``cryptography``.  Every raw third-party exception must be
caught here and re-raised as a :class:`~expokit.exceptions.ExpokitError`
subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from expokit.infra.node_modules import NodeModulesVersionProvider
from expokit.infra.package_managers import (
    NpmPackageManager,
    YarnPackageManager,
    create_for_project,
)
from expokit.infra.project_config import get_config, modify_config
from expokit.infra.project_root import find_up_project_root, find_up_project_root_or_assert

__all__: list[str] = [
    "NodeModulesVersionProvider",
    "NpmPackageManager",
    "YarnPackageManager",
    "create_for_project",
    "find_up_project_root",
    "find_up_project_root_or_assert",
    "get_config",
    "modify_config",
]
