"""Decide whether outdated dependencies get fixed."""

from __future__ import annotations

from expokit.core.models import FixDecision


def should_proceed(*, forced: bool, unattended: bool) -> FixDecision:
    """Map the ``--fix`` flag and CI state to a :class:`FixDecision`.

    ``--fix`` always wins.  Without it an unattended run never prompts
    and declines; an attended run asks the user.
    """
    if forced:
        return FixDecision.PROCEED
    if unattended:
        return FixDecision.DECLINE
    return FixDecision.ASK
