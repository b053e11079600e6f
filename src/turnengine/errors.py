"""Exception taxonomy for turnengine.

Errors are converted into outcome values at the smallest enclosing
fault-isolation boundary (social intent, social actor, economy sub-step,
pipeline phase). None of them escapes ``Simulation.process_all_turn_events``.
"""

from __future__ import annotations


class TurnEngineError(Exception):
    """Base class for all turnengine errors."""


class NotFoundError(TurnEngineError, LookupError):
    """A referenced aggregate (planet, fleet, character, route, ...) is absent."""

    def __init__(self, kind: str, ident: object) -> None:
        super().__init__(f"{kind} {ident!r} not found")
        self.kind = kind
        self.ident = ident


class ValidationError(TurnEngineError, ValueError):
    """Malformed input to a registration call; nothing was registered."""


class TransientPhaseFailure(TurnEngineError):
    """
    Wraps any exception caught at a fault-isolation boundary.

    Attributes
    ----------
    label : str
        Boundary label, e.g. ``"economy"`` or ``"social:actor=7:intent=2"``.
    cause : BaseException
        The original exception.
    """

    def __init__(self, label: str, cause: BaseException) -> None:
        super().__init__(f"[{label}] {type(cause).__name__}: {cause}")
        self.label = label
        self.cause = cause
