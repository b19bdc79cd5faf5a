"""Allow ``python -m expokit`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m expokit`` behaves identically to the ``expokit``
console script.
"""

from __future__ import annotations

from expokit.cli.app import cli

if __name__ == "__main__":
    cli()
