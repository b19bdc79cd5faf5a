"""Pure helpers for the ``plugins`` array of an app config.

An entry is either a module name (``"expo-camera"``) or a
``[name, props]`` pair.  Anything else is a malformed entry.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from expokit.exceptions import ConfigPluginError

AUTO_PLUGINS: frozenset[str] = frozenset(
    {
        "expo-ads-admob",
        "expo-apple-authentication",
        "expo-av",
        "expo-background-fetch",
        "expo-barcode-scanner",
        "expo-brightness",
        "expo-calendar",
        "expo-camera",
        "expo-cellular",
        "expo-contacts",
        "expo-dev-client",
        "expo-dev-launcher",
        "expo-dev-menu",
        "expo-document-picker",
        "expo-file-system",
        "expo-image-picker",
        "expo-local-authentication",
        "expo-location",
        "expo-media-library",
        "expo-navigation-bar",
        "expo-notifications",
        "expo-screen-orientation",
        "expo-sensors",
        "expo-splash-screen",
        "expo-system-ui",
        "expo-task-manager",
        "expo-updates",
    }
)
"""Packages whose plugins are applied automatically during prebuild."""


def plugin_entry_name(entry: Any) -> str:
    """Return the module name referenced by one ``plugins`` entry.

    Raises
    ------
    ConfigPluginError
        If *entry* is not a string or a ``[name, props]`` pair whose
        name is a non-empty string.
    """
    if isinstance(entry, str):
        name = entry
    elif isinstance(entry, Sequence) and 1 <= len(entry) <= 2:
        name = entry[0]
    else:
        raise ConfigPluginError(
            f"Plugin is an unexpected type: {entry!r}",
            hint='Use "module-name" or ["module-name", { ...props }] in the plugins array.',
        )
    if not isinstance(name, str) or not name.strip():
        raise ConfigPluginError(
            f"Plugin name must be a non-empty string, got: {name!r}",
        )
    return name.strip()


def configured_plugin_names(plugins: Iterable[Any] | None) -> list[str]:
    """Module names of every entry in a ``plugins`` array."""
    if plugins is None:
        return []
    if isinstance(plugins, (str, bytes)) or not isinstance(plugins, Iterable):
        raise ConfigPluginError(
            f"The app config plugins value must be an array, got: {plugins!r}",
        )
    return [plugin_entry_name(entry) for entry in plugins]


def plugin_candidates(packages: Iterable[str], plugins: Iterable[Any] | None) -> list[str]:
    """Filter *packages* down to those that may need a plugin entry.

    Packages already listed in *plugins* and packages applied
    automatically are dropped.  Order is preserved and duplicates are
    removed.
    """
    existing = set(configured_plugin_names(plugins))
    candidates: list[str] = []
    for name in packages:
        if name in existing or name in AUTO_PLUGINS or name in candidates:
            continue
        candidates.append(name)
    return candidates
