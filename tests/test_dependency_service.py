"""Tests for SDK versioning and the dependency audit (core/dependency_service.py).

The :class:`ModuleVersionProvider` is mocked — no ``node_modules`` on disk
except in the provider tests at the bottom.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from expokit.core.dependency_service import DependencyService, version_satisfies
from expokit.core.models import DependencyViolation, ProjectConfig
from expokit.exceptions import DependencyResolutionError
from expokit.infra.node_modules import NodeModulesVersionProvider

from conftest import BUNDLED_49, ProjectFactory, write_json


def _provider(installed: dict[str, str] | None = None) -> MagicMock:
    provider = MagicMock()
    provider.bundled_native_modules.return_value = dict(BUNDLED_49)
    provider.installed_version.side_effect = lambda name: (installed or {}).get(name)
    return provider


def _config(**overrides: Any) -> ProjectConfig:
    defaults: dict[str, Any] = {
        "exp": {"name": "demo", "sdkVersion": "49.0.0"},
        "pkg": {"dependencies": {}},
    }
    defaults.update(overrides)
    return ProjectConfig(**defaults)


# ---------------------------------------------------------------------------
# version_satisfies
# ---------------------------------------------------------------------------

class TestVersionSatisfies:
    @pytest.mark.parametrize(
        ("version", "npm_range", "expected"),
        [
            ("13.4.5", "~13.4.2", True),
            ("13.5.0", "~13.4.2", False),
            ("1.7.1", "1.7.1", True),
            ("1.8.0", "1.7.1", False),
            ("3.9.0", "^3.3.0", True),
            ("4.0.0", "^3.3.0", False),
        ],
    )
    def test_ranges(self, version: str, npm_range: str, expected: bool) -> None:
        assert version_satisfies(version, npm_range) is expected

    def test_unparsable_range_is_unknown(self) -> None:
        assert version_satisfies("1.0.0", "github:user/repo") is None


# ---------------------------------------------------------------------------
# get_versioned_packages
# ---------------------------------------------------------------------------

class TestGetVersionedPackages:
    def test_other_package_passes_through(self) -> None:
        svc = DependencyService(_provider())
        result = svc.get_versioned_packages(["left-pad"], "49.0.0")

        assert result.packages == ("left-pad",)
        assert result.messages == ("1 other package",)

    def test_bundled_module_gets_sdk_range(self) -> None:
        svc = DependencyService(_provider())
        result = svc.get_versioned_packages(["expo-camera", "left-pad", "uuid"], "49.0.0")

        assert result.packages == ("expo-camera@~13.4.2", "left-pad", "uuid")
        assert result.messages == (
            "1 SDK 49.0.0 compatible native module",
            "2 other packages",
        )

    def test_explicit_version_is_kept(self) -> None:
        svc = DependencyService(_provider())
        result = svc.get_versioned_packages(["expo-camera@13.0.0"], "49.0.0")

        assert result.packages == ("expo-camera@13.0.0",)
        assert result.messages == ("1 other package",)

    def test_plural_native_modules(self) -> None:
        svc = DependencyService(_provider())
        result = svc.get_versioned_packages(["expo-camera", "react-native-maps"], "49.0.0")
        assert result.messages == ("2 SDK 49.0.0 compatible native modules",)


# ---------------------------------------------------------------------------
# get_versioned_dependencies
# ---------------------------------------------------------------------------

class TestGetVersionedDependencies:
    def test_no_violations(self) -> None:
        svc = DependencyService(_provider({"expo-camera": "13.4.4"}))
        assert svc.get_versioned_dependencies(_config(), ["expo-camera"]) == []

    def test_reports_outdated_package(self) -> None:
        svc = DependencyService(_provider({"expo-camera": "12.0.0"}))
        result = svc.get_versioned_dependencies(_config(), ["expo-camera@latest"])

        assert result == [
            DependencyViolation(
                package_name="expo-camera",
                expected_version_or_range="~13.4.2",
                actual_version="12.0.0",
            )
        ]

    def test_unpinned_and_missing_packages_are_ignored(self) -> None:
        svc = DependencyService(_provider({"left-pad": "0.0.1"}))
        assert svc.get_versioned_dependencies(_config(), ["left-pad", "react-native-maps"]) == []

    def test_defaults_to_declared_dependencies(self) -> None:
        config = _config(
            pkg={
                "dependencies": {"expo-camera": "^12.0.0", "left-pad": "*"},
                "devDependencies": {"react-native-maps": "1.0.0"},
            }
        )
        svc = DependencyService(
            _provider({"expo-camera": "12.0.0", "react-native-maps": "1.0.0", "left-pad": "1.3.0"})
        )
        result = svc.get_versioned_dependencies(config)
        assert [v.package_name for v in result] == ["expo-camera", "react-native-maps"]

    def test_missing_sdk_version_raises(self) -> None:
        svc = DependencyService(_provider())
        with pytest.raises(DependencyResolutionError, match="SDK version"):
            svc.get_versioned_dependencies(_config(exp={"name": "demo"}), ["expo-camera"])


# ---------------------------------------------------------------------------
# NodeModulesVersionProvider
# ---------------------------------------------------------------------------

class TestNodeModulesVersionProvider:
    def test_reads_bundled_map_and_installed_version(self, make_project: ProjectFactory) -> None:
        root = make_project(installed={"expo-camera": "13.4.2"})
        provider = NodeModulesVersionProvider(root)

        assert provider.bundled_native_modules("49.0.0") == BUNDLED_49
        assert provider.installed_version("expo-camera") == "13.4.2"
        assert provider.installed_version("not-installed") is None

    def test_missing_expo_raises(self, make_project: ProjectFactory) -> None:
        root = make_project(expo_version=None)
        with pytest.raises(DependencyResolutionError) as exc_info:
            NodeModulesVersionProvider(root).bundled_native_modules("49.0.0")
        assert exc_info.value.hint is not None

    def test_invalid_map_raises(self, make_project: ProjectFactory) -> None:
        root = make_project()
        write_json(root / "node_modules" / "expo" / "bundledNativeModules.json", ["nope"])
        with pytest.raises(DependencyResolutionError, match="JSON object"):
            NodeModulesVersionProvider(root).bundled_native_modules("49.0.0")

    def test_map_is_cached(self, make_project: ProjectFactory) -> None:
        root = make_project()
        provider = NodeModulesVersionProvider(root)
        first = provider.bundled_native_modules("49.0.0")
        (root / "node_modules" / "expo" / "bundledNativeModules.json").unlink()
        assert provider.bundled_native_modules("49.0.0") is first

    def test_end_to_end_audit(self, make_project: ProjectFactory) -> None:
        root = make_project(installed={"expo-image-picker": "13.0.0"})
        svc = DependencyService(NodeModulesVersionProvider(root))
        result = svc.get_versioned_dependencies(_config(), ["expo-image-picker"])
        assert result[0].expected_version_or_range == "~14.3.2"
