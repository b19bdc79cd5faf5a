"""Exit-code constants used by the CLI layer.

Centralised here so that every exit path uses a well-known, tested
value rather than magic integers scattered across the codebase.
"""

from __future__ import annotations

SUCCESS: int = 0
"""Clean exit — command completed without error, or help was shown."""

GENERAL_ERROR: int = 1
"""Outdated dependencies were left unfixed, or an error was caught."""

USAGE_ERROR: int = 2
"""Missing or malformed command-line arguments (argparse convention)."""

KEYBOARD_INTERRUPT: int = 130
"""User pressed Ctrl+C.  Follows POSIX convention (128 + SIGINT=2)."""
