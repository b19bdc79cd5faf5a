"""expokit — Expo project helpers for the command line.

Installs SDK-compatible dependency versions, audits installed versions
against the project's SDK, and manages expo-updates code signing.
"""

from expokit.version import __version__

__all__: list[str] = ["__version__"]
