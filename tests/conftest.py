"""Shared pytest fixtures and configuration for the expokit test suite.

Guidelines
----------
* No internet access in any test.
* npm / yarn are never spawned — package managers are mocked at the
  infra boundary.
* Projects are laid out on disk under ``tmp_path``.
* Tests must not depend on OS state (``CI`` is cleared per test).
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

BUNDLED_49: dict[str, str] = {
    "expo-camera": "~13.4.2",
    "expo-image-picker": "~14.3.2",
    "react-native-reanimated": "~3.3.0",
    "react-native-maps": "1.7.1",
}


def write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


def read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


ProjectFactory = Callable[..., Path]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CI", raising=False)
    monkeypatch.delenv("EXPO_DEBUG", raising=False)


@pytest.fixture
def make_project(tmp_path: Path) -> ProjectFactory:
    """Create an Expo project on disk.

    Keyword arguments
    -----------------
    app_config:
        Content of ``app.json`` (``None`` to omit it).
    dependencies:
        ``package.json`` dependencies.
    installed:
        ``name → version`` written to ``node_modules/<name>/package.json``.
    expo_version:
        Version of the installed ``expo`` package (``None`` to omit it).
    bundled:
        Content of ``bundledNativeModules.json``.
    plugins:
        Package names that get an ``app.plugin.js``.
    """

    def _make(
        *,
        app_config: dict[str, Any] | None = None,
        dependencies: dict[str, str] | None = None,
        installed: dict[str, str] | None = None,
        expo_version: str | None = "49.0.6",
        bundled: dict[str, str] | None = None,
        plugins: tuple[str, ...] = (),
    ) -> Path:
        root = tmp_path / "project"
        root.mkdir(exist_ok=True)
        write_json(
            root / "package.json",
            {"name": "demo-app", "version": "1.0.0", "dependencies": dependencies or {}},
        )
        if app_config is not None:
            write_json(root / "app.json", app_config)
        if expo_version is not None:
            expo_dir = root / "node_modules" / "expo"
            write_json(expo_dir / "package.json", {"name": "expo", "version": expo_version})
            write_json(
                expo_dir / "bundledNativeModules.json",
                BUNDLED_49 if bundled is None else bundled,
            )
        for name, version in (installed or {}).items():
            write_json(root / "node_modules" / name / "package.json", {"name": name, "version": version})
        for name in plugins:
            plugin = root / "node_modules" / name / "app.plugin.js"
            plugin.parent.mkdir(parents=True, exist_ok=True)
            plugin.write_text("module.exports = (config) => config;\n", encoding="utf-8")
        return root

    return _make
