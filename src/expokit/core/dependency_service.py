"""Core dependency service — SDK-compatible versioning and auditing.

This service depends on a
:class:`~expokit.core.protocols.ModuleVersionProvider` injected at
construction time, keeping the core free of filesystem access.  It is
responsible for:

* Turning bare package names into SDK-pinned specifiers.
* Finding installed packages whose version falls outside the range the
  SDK pins.

Guarantees
----------
* No ``print()``, no filesystem access.
* Packages the SDK does not pin are never versioned or reported.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from semantic_version import NpmSpec, Version

from expokit.core.models import DependencyViolation, ProjectConfig, VersionedInstallSet
from expokit.core.package_spec import parse_package_reference
from expokit.core.protocols import ModuleVersionProvider
from expokit.exceptions import DependencyResolutionError

logger = logging.getLogger(__name__)


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def version_satisfies(version: str, npm_range: str) -> bool | None:
    """Whether *version* falls inside *npm_range*.

    Returns ``None`` when either side cannot be parsed (git URLs, file
    paths, dist-tags), meaning "cannot tell".
    """
    try:
        spec = NpmSpec(npm_range)
    except ValueError:
        return None
    try:
        parsed = Version(version)
    except ValueError:
        try:
            parsed = Version.coerce(version)
        except ValueError:
            return None
    return spec.match(parsed)


class DependencyService:
    """Stateless service that versions and audits project dependencies.

    Parameters
    ----------
    provider:
        Any object satisfying the :class:`ModuleVersionProvider` protocol.
    """

    def __init__(self, provider: ModuleVersionProvider) -> None:
        self._provider: ModuleVersionProvider = provider

    # ------------------------------------------------------------------
    # Versioning
    # ------------------------------------------------------------------

    def get_versioned_packages(
        self,
        packages: Sequence[str],
        sdk_version: str,
    ) -> VersionedInstallSet:
        """Resolve *packages* against the versions pinned by *sdk_version*.

        A package with an explicit version or tag is kept verbatim.  A
        bare name the SDK pins becomes ``name@range``.  Everything else
        is passed through unchanged.
        """
        bundled = self._provider.bundled_native_modules(sdk_version)

        native: list[str] = []
        others: list[str] = []
        for raw in packages:
            ref = parse_package_reference(raw)
            if ref.spec is None and ref.name in bundled:
                native.append(f"{ref.name}@{bundled[ref.name]}")
            else:
                others.append(ref.raw)

        messages: list[str] = []
        if native:
            messages.append(
                _plural(len(native), f"SDK {sdk_version} compatible native module")
            )
        if others:
            messages.append(_plural(len(others), "other package"))

        return VersionedInstallSet(packages=tuple(native + others), messages=tuple(messages))

    # ------------------------------------------------------------------
    # Auditing
    # ------------------------------------------------------------------

    def get_versioned_dependencies(
        self,
        config: ProjectConfig,
        packages: Sequence[str] = (),
    ) -> list[DependencyViolation]:
        """Return installed packages whose versions violate the SDK ranges.

        When *packages* is empty every dependency declared in
        ``package.json`` is checked.

        Raises
        ------
        DependencyResolutionError
            If the config carries no SDK version.
        """
        sdk_version = config.sdk_version
        if sdk_version is None:
            raise DependencyResolutionError(
                "Cannot check dependencies without an Expo SDK version.",
                hint='Set "sdkVersion" in app.json or install the expo package.',
            )

        bundled = self._provider.bundled_native_modules(sdk_version)
        names = (
            [parse_package_reference(raw).name for raw in packages]
            if packages
            else _declared_dependencies(config)
        )

        violations: list[DependencyViolation] = []
        for name in _unique(names):
            expected = bundled.get(name)
            if expected is None:
                continue
            actual = self._provider.installed_version(name)
            if actual is None:
                logger.debug("Skipping %s: not installed", name)
                continue
            if version_satisfies(actual, expected) is False:
                violations.append(
                    DependencyViolation(
                        package_name=name,
                        expected_version_or_range=expected,
                        actual_version=actual,
                    )
                )
        return violations


def _declared_dependencies(config: ProjectConfig) -> list[str]:
    names: list[str] = []
    for key in ("dependencies", "devDependencies"):
        section = config.pkg.get(key) or {}
        if isinstance(section, dict):
            names.extend(section)
    return names


def _unique(names: Iterable[str]) -> list[str]:
    seen: list[str] = []
    for name in names:
        if name and name not in seen:
            seen.append(name)
    return seen
