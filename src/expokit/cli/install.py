"""``expokit install`` — SDK-compatible install, check and fix.

Flow
----
1. Locate the project root from the working directory.
2. Pick the package manager once (flags, else ``yarn.lock``, else npm).
3. Load the app config without resolving plugins; they may not be
   installed yet.
4. ``--check`` / ``--fix``: audit installed versions.  Up to date exits
   0.  Outdated packages are fixed when ``--fix`` is given or the user
   confirms; otherwise the command exits 1 without installing.
5. Install: version the packages for the SDK, add them, then try to wire
   their config plugins into the app config.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from expokit.cli import exit_codes
from expokit.cli.console import console
from expokit.core.dependency_service import DependencyService
from expokit.core.fix_policy import should_proceed
from expokit.core.models import DependencyViolation, FixDecision, InstallOptions
from expokit.core.package_spec import bare_package_names
from expokit.core.protocols import PackageManager
from expokit.exceptions import ExpokitError
from expokit.infra.config_plugins import auto_add_config_plugins
from expokit.infra.node_modules import NodeModulesVersionProvider
from expokit.infra.package_managers import create_for_project
from expokit.infra.project_config import get_config
from expokit.infra.project_root import find_up_project_root_or_assert
from expokit.utils.env import is_ci

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------

def log_incorrect_dependencies(violations: Sequence[DependencyViolation]) -> None:
    """Print the outdated packages and how to fix them."""
    console.print(
        "[yellow]Some dependencies are incompatible with the installed expo package version:[/yellow]"
    )
    for violation in violations:
        console.print(
            f"  [bold]{violation.package_name}[/bold] - "
            f"expected version: {violation.expected_version_or_range} - "
            f"actual version installed: {violation.actual_version}"
        )
    console.print(
        "[yellow]Your project may not work correctly until you install the correct "
        "versions of the packages.[/yellow]\n"
        "Fix with: [bold]expokit install --fix[/bold]"
    )


# ---------------------------------------------------------------------------
# Confirmation
# ---------------------------------------------------------------------------

def confirm_fix(*, forced: bool, unattended: bool) -> bool:
    """Resolve whether outdated dependencies get installed."""
    decision = should_proceed(forced=forced, unattended=unattended)
    if decision is FixDecision.ASK:
        from expokit.cli.confirm_prompt import confirm

        return confirm("Fix dependencies?")
    return decision is FixDecision.PROCEED


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

def apply_plugins(project_root: Path, packages: Sequence[str]) -> None:
    """Add config plugins for *packages*, downgrading plugin errors to warnings.

    Raises
    ------
    ExpokitError
        Any error not flagged ``is_plugin_error``.
    """
    try:
        config = get_config(project_root, skip_sdk_version_requirement=True, skip_plugins=True)
        result = auto_add_config_plugins(project_root, config.exp, bare_package_names(packages))
    except ExpokitError as exc:
        if not exc.is_plugin_error:
            raise
        console.warn(f"Skipping config plugin check: {exc}")
        return

    for name in result.added:
        console.print(f"[green]Adding config plugin:[/green] {name}")

    modification = result.modification
    if modification is not None and not modification.success:
        plugins = ", ".join(f'"{name}"' for name in result.pending)
        console.warn(
            f"{modification.message}\n"
            f"Add the following to the plugins array of your app config: [{plugins}]"
        )


def install_packages(
    project_root: Path,
    *,
    packages: Sequence[str],
    package_manager: PackageManager,
    sdk_version: str,
    package_manager_arguments: Sequence[str] = (),
    dependency_service: DependencyService | None = None,
) -> None:
    """Version *packages* for *sdk_version* and install them.

    Raises
    ------
    DependencyResolutionError
        If the SDK's version map is unavailable.
    PackageManagerError
        If the package manager fails.
    """
    service = dependency_service or DependencyService(NodeModulesVersionProvider(project_root))
    versioning = service.get_versioned_packages(packages, sdk_version)

    console.print(
        f"Installing {' and '.join(versioning.messages)} using {package_manager.name}."
    )
    package_manager.add(versioning.packages, package_manager_arguments)

    apply_plugins(project_root, versioning.packages)


def install(
    packages: Sequence[str],
    options: InstallOptions,
    package_manager_arguments: Sequence[str] = (),
    *,
    cwd: Path | None = None,
) -> int:
    """Run the install command and return its exit code.

    Parameters
    ----------
    packages:
        Requested specifiers, e.g. ``["expo-camera", "left-pad@1.3.0"]``.
    options:
        Mode flags.
    package_manager_arguments:
        Passed verbatim to the package manager.
    cwd:
        Directory the project root is searched from; defaults to the
        process working directory.
    """
    project_root = find_up_project_root_or_assert(cwd or Path.cwd())
    logger.debug("Project root: %s", project_root)

    package_manager = create_for_project(project_root, npm=options.npm, yarn=options.yarn)
    config = get_config(project_root, skip_plugins=True)
    # get_config enforces the SDK version requirement.
    sdk_version = str(config.exp["sdkVersion"])
    dependency_service = DependencyService(NodeModulesVersionProvider(project_root))

    if options.audit:
        violations = dependency_service.get_versioned_dependencies(config, packages)
        if not violations:
            console.print("[bold green]Dependencies are up to date[/bold green]")
            return exit_codes.SUCCESS

        log_incorrect_dependencies(violations)

        if not confirm_fix(forced=options.fix, unattended=is_ci()):
            console.print("[bold red]Found outdated dependencies[/bold red]")
            return exit_codes.GENERAL_ERROR

        # Names only: versions are resolved again for the SDK.
        fixed = [violation.package_name for violation in violations]
        logger.debug("Installing fixed dependencies: %s", fixed)
        packages = fixed

    install_packages(
        project_root,
        packages=packages,
        package_manager=package_manager,
        sdk_version=sdk_version,
        package_manager_arguments=package_manager_arguments,
        dependency_service=dependency_service,
    )
    return exit_codes.SUCCESS
