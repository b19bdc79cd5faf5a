"""Infrastructure: read package metadata from ``node_modules``.

Implements :class:`~expokit.core.protocols.ModuleVersionProvider` on
top of the installed ``expo`` package's ``bundledNativeModules.json``
and each dependency's own ``package.json``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from expokit.exceptions import ConfigError, DependencyResolutionError

logger = logging.getLogger(__name__)

BUNDLED_NATIVE_MODULES_FILE: str = "bundledNativeModules.json"
PLUGIN_ENTRY_FILE: str = "app.plugin.js"


def read_json_file(path: Path) -> Any:
    """Load JSON from *path*, mapping failures to :class:`ConfigError`."""
    try:
        with path.open(encoding="utf-8") as handle:
            return json.load(handle)
    except json.JSONDecodeError as exc:
        raise ConfigError(
            f"Failed to parse {path}: {exc}",
            hint="Fix the JSON syntax error and try again.",
        ) from exc
    except OSError as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc


def package_dir(project_root: Path, package_name: str) -> Path:
    return project_root / "node_modules" / package_name


def read_installed_package_json(project_root: Path, package_name: str) -> dict[str, Any] | None:
    """Return the installed ``package.json`` of *package_name*, or ``None``."""
    path = package_dir(project_root, package_name) / "package.json"
    if not path.is_file():
        return None
    data = read_json_file(path)
    return data if isinstance(data, dict) else None


def plugin_entry_point(project_root: Path, module: str) -> Path | None:
    """Locate the config plugin file for *module*.

    Relative references (``./plugins/withThing.js``) resolve against the
    project root.  Package references resolve to the package's
    ``app.plugin.js``.
    """
    if module.startswith((".", "/")):
        candidate = (project_root / module).resolve()
        return candidate if candidate.is_file() else None
    candidate = package_dir(project_root, module) / PLUGIN_ENTRY_FILE
    return candidate if candidate.is_file() else None


class NodeModulesVersionProvider:
    """Concrete :class:`ModuleVersionProvider` backed by ``node_modules``.

    This class satisfies the protocol structurally — no explicit
    inheritance required.
    """

    def __init__(self, project_root: Path) -> None:
        self._project_root: Path = project_root
        self._bundled: dict[str, str] | None = None

    def bundled_native_modules(self, sdk_version: str) -> dict[str, str]:
        """Return the SDK-pinned version map shipped with ``expo``.

        Raises
        ------
        DependencyResolutionError
            If ``expo`` is not installed or its map is unreadable.
        """
        if self._bundled is not None:
            return self._bundled

        path = package_dir(self._project_root, "expo") / BUNDLED_NATIVE_MODULES_FILE
        if not path.is_file():
            raise DependencyResolutionError(
                f"Unable to find the SDK {sdk_version} compatible versions list at {path}.",
                hint="Install the project's dependencies (npm install or yarn) and try again.",
            )
        try:
            data = read_json_file(path)
        except ConfigError as exc:
            raise DependencyResolutionError(str(exc), hint=exc.hint) from exc
        if not isinstance(data, dict):
            raise DependencyResolutionError(f"{path} does not contain a JSON object.")

        self._bundled = {str(name): str(version) for name, version in data.items()}
        logger.debug("Loaded %d bundled native modules from %s", len(self._bundled), path)
        return self._bundled

    def installed_version(self, package_name: str) -> str | None:
        pkg = read_installed_package_json(self._project_root, package_name)
        if pkg is None:
            return None
        version = pkg.get("version")
        return str(version) if version else None
