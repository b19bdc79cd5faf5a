"""Infrastructure: read and write the project's app config.

Static configs (``app.json``, ``app.config.json``) are read and written
directly.  Dynamic configs (``app.config.js`` and friends) cannot be
evaluated here; their presence is recorded so that writes can be
refused with manual instructions instead.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from expokit.core.models import ConfigModification, ProjectConfig
from expokit.core.plugins import configured_plugin_names
from expokit.exceptions import ConfigError, ConfigPluginError
from expokit.infra.node_modules import (
    plugin_entry_point,
    read_installed_package_json,
    read_json_file,
)

logger = logging.getLogger(__name__)

STATIC_CONFIG_FILES: tuple[str, ...] = ("app.json", "app.config.json")
DYNAMIC_CONFIG_FILES: tuple[str, ...] = (
    "app.config.ts",
    "app.config.js",
    "app.config.mjs",
    "app.config.cjs",
)


def _first_existing(project_root: Path, names: tuple[str, ...]) -> Path | None:
    for name in names:
        candidate = project_root / name
        if candidate.is_file():
            return candidate
    return None


def _split_static_config(raw: Any, path: Path) -> tuple[dict[str, Any], bool]:
    """Return the ``expo`` object and whether it was nested under ``"expo"``."""
    if not isinstance(raw, dict):
        raise ConfigError(f"{path} must contain a JSON object.")
    if "expo" in raw:
        exp = raw["expo"]
        if not isinstance(exp, dict):
            raise ConfigError(f'The "expo" key in {path} must be an object.')
        return exp, True
    return raw, False


def _installed_sdk_version(project_root: Path) -> str | None:
    pkg = read_installed_package_json(project_root, "expo")
    if not pkg or not pkg.get("version"):
        return None
    major = str(pkg["version"]).split(".", 1)[0]
    return f"{major}.0.0" if major.isdigit() else None


def _assert_plugins_resolvable(project_root: Path, exp: Mapping[str, Any]) -> None:
    for name in configured_plugin_names(exp.get("plugins")):
        if plugin_entry_point(project_root, name) is None:
            raise ConfigPluginError(
                f'Failed to resolve plugin for module "{name}"',
                hint=f"Install {name} or remove it from the plugins array.",
            )


def get_config(
    project_root: Path,
    *,
    skip_sdk_version_requirement: bool = False,
    skip_plugins: bool = False,
) -> ProjectConfig:
    """Load the app config and ``package.json`` for *project_root*.

    Parameters
    ----------
    skip_sdk_version_requirement:
        Do not fail when no SDK version can be determined.
    skip_plugins:
        Do not resolve the modules named in the ``plugins`` array.
        Plugins may not be installed yet while dependencies are being
        installed.

    Raises
    ------
    ConfigError
        If a config file is unreadable or the SDK version is missing.
    ConfigPluginError
        If plugins are resolved and one of them is missing or malformed.
    """
    pkg_path = project_root / "package.json"
    pkg = read_json_file(pkg_path)
    if not isinstance(pkg, dict):
        raise ConfigError(f"{pkg_path} must contain a JSON object.")

    static_path = _first_existing(project_root, STATIC_CONFIG_FILES)
    dynamic_path = _first_existing(project_root, DYNAMIC_CONFIG_FILES)

    exp: dict[str, Any] = {}
    if static_path is not None:
        exp, _ = _split_static_config(read_json_file(static_path), static_path)
        exp = dict(exp)
    if dynamic_path is not None:
        logger.debug("Dynamic config %s is not evaluated", dynamic_path)

    exp.setdefault("name", pkg.get("name"))
    exp.setdefault("version", pkg.get("version", "1.0.0"))

    if not exp.get("sdkVersion"):
        sdk_version = _installed_sdk_version(project_root)
        if sdk_version is not None:
            exp["sdkVersion"] = sdk_version
        elif not skip_sdk_version_requirement:
            raise ConfigError(
                "Cannot determine which native SDK version your project uses "
                "because the module `expo` is not installed.",
                hint="Install the expo package in the project, or set sdkVersion in app.json.",
            )

    if not skip_plugins:
        _assert_plugins_resolvable(project_root, exp)

    return ProjectConfig(
        exp=exp,
        pkg=pkg,
        static_config_path=static_path,
        dynamic_config_path=dynamic_path,
    )


def modify_config(project_root: Path, modifications: Mapping[str, Any]) -> ConfigModification:
    """Merge *modifications* into the top level of the static app config.

    Creates ``app.json`` when no config exists.  Refuses to write when
    the project uses a dynamic config.

    Raises
    ------
    ConfigError
        If the static config cannot be read or written.
    """
    dynamic_path = _first_existing(project_root, DYNAMIC_CONFIG_FILES)
    if dynamic_path is not None:
        return ConfigModification(
            success=False,
            message=f"Cannot automatically write to dynamic config at: {dynamic_path.name}",
            config_path=dynamic_path,
        )

    static_path = _first_existing(project_root, STATIC_CONFIG_FILES)
    if static_path is None:
        static_path = project_root / STATIC_CONFIG_FILES[0]
        raw: dict[str, Any] = {"expo": {}}
    else:
        loaded = read_json_file(static_path)
        if not isinstance(loaded, dict):
            raise ConfigError(f"{static_path} must contain a JSON object.")
        raw = loaded

    exp, nested = _split_static_config(raw, static_path)
    exp.update(modifications)
    if nested:
        raw["expo"] = exp

    try:
        static_path.write_text(json.dumps(raw, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to write {static_path}: {exc}") from exc

    logger.debug("Wrote %s to %s", sorted(modifications), static_path)
    return ConfigModification(
        success=True,
        message=f"Updated {static_path.name}",
        config_path=static_path,
    )
