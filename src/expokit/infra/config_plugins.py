"""Infrastructure: add config plugins for newly installed packages.

A package ships a config plugin when it has an ``app.plugin.js`` at its
root.  Matching packages are appended to the ``plugins`` array of the
static app config.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from expokit.core.models import PluginAutoConfigResult
from expokit.core.plugins import plugin_candidates
from expokit.infra.node_modules import plugin_entry_point
from expokit.infra.project_config import modify_config

logger = logging.getLogger(__name__)


def packages_with_config_plugins(project_root: Path, packages: Sequence[str]) -> list[str]:
    """Return the entries of *packages* that ship a config plugin."""
    found: list[str] = []
    for name in packages:
        if plugin_entry_point(project_root, name) is not None:
            found.append(name)
        else:
            logger.debug("No config plugin in %s", name)
    return found


def auto_add_config_plugins(
    project_root: Path,
    exp: Mapping[str, Any],
    packages: Sequence[str],
) -> PluginAutoConfigResult:
    """Append plugins for *packages* to the app config.

    Raises
    ------
    ConfigPluginError
        If the existing ``plugins`` array is malformed.
    ConfigError
        If the static config cannot be written.
    """
    existing = exp.get("plugins")
    candidates = plugin_candidates(packages, existing)
    to_add = packages_with_config_plugins(project_root, candidates)
    if not to_add:
        return PluginAutoConfigResult(candidates=tuple(candidates))

    plugins = [*(existing or []), *to_add]
    modification = modify_config(project_root, {"plugins": plugins})
    added = tuple(to_add) if modification.success else ()
    return PluginAutoConfigResult(
        added=added,
        modification=modification,
        candidates=tuple(candidates),
        pending=() if modification.success else tuple(to_add),
    )
