"""Rule-violation exception raised inside the engine.

Engine helpers raise :class:`RuleViolation`; :func:`processor.apply_action`
turns it into a failed :class:`~catan_rules.models.actions.ActionResult`, so
it never reaches callers of the move API.
"""

from __future__ import annotations

from ..models.actions import ErrorKind


class RuleViolation(ValueError):
    """A move broke a game rule."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
