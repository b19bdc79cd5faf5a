"""Yes/no confirmation prompt for the CLI layer.

Any failure to prompt — no interactive terminal, prompt cancelled,
prompt library error — counts as "no".
"""

from __future__ import annotations

import logging
import sys
from typing import Any

from expokit.exceptions import EnvironmentError

logger = logging.getLogger(__name__)


def _import_questionary() -> Any:
    """Import questionary lazily for interactive prompts."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "questionary is not installed. Install with: pip install questionary",
        ) from exc
    return questionary


def _is_interactive() -> bool:
    for stream in (sys.stdin, sys.stdout):
        isatty = getattr(stream, "isatty", None)
        if isatty is None or not isatty():
            return False
    return True


def confirm(message: str, *, default: bool = True) -> bool:
    """Ask *message* and return the answer, or ``False`` if asking fails."""
    if not _is_interactive():
        logger.debug("Not prompting %r: no interactive terminal", message)
        return False

    try:
        questionary = _import_questionary()
        answer = questionary.confirm(message, default=default).ask()  # None on Ctrl+C
    except Exception as exc:  # noqa: BLE001
        logger.debug("Prompt %r failed: %s", message, exc)
        return False
    return bool(answer)
