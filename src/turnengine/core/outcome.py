"""Structured outcomes of fault-isolated units of work.

Every isolation boundary (pipeline phase, economy sub-step, social actor,
social intent) produces one outcome value instead of letting an exception
escape. The pipeline aggregates phase outcomes into a `TurnReport`; callers
decide how to surface failures.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

from turnengine.errors import TransientPhaseFailure

__all__ = ["StepOutcome", "PhaseOutcome", "TurnReport", "run_isolated"]


@dataclass(slots=True, frozen=True)
class StepOutcome:
    """Result of one unit of work inside a phase."""

    label: str
    succeeded: bool
    error: TransientPhaseFailure | None = None


@dataclass(slots=True, frozen=True)
class PhaseOutcome:
    """
    Result of one pipeline phase.

    A phase can succeed as a whole while some of its inner steps failed
    (the social phase isolates per actor and per intent); those are listed
    in ``steps``.
    """

    phase: str
    succeeded: bool
    error: TransientPhaseFailure | None = None
    steps: tuple[StepOutcome, ...] = ()

    @property
    def failed_steps(self) -> tuple[StepOutcome, ...]:
        return tuple(s for s in self.steps if not s.succeeded)


@dataclass(slots=True)
class TurnReport:
    """Aggregated outcomes of one `Pipeline.execute` call."""

    turn_number: int
    year: int = 0
    month: int = 0
    phases: list[PhaseOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        """True when every phase and every inner step succeeded."""
        return all(p.succeeded and not p.failed_steps for p in self.phases)

    @property
    def phase_names(self) -> list[str]:
        return [p.phase for p in self.phases]

    @property
    def failed_phases(self) -> list[PhaseOutcome]:
        return [p for p in self.phases if not p.succeeded]

    def failures(self) -> Iterator[TransientPhaseFailure]:
        """Every captured error, phase-level and step-level, in run order."""
        for p in self.phases:
            if p.error is not None:
                yield p.error
            for s in p.steps:
                if s.error is not None:
                    yield s.error

    def phase(self, name: str) -> PhaseOutcome:
        for p in self.phases:
            if p.phase == name:
                return p
        raise KeyError(f"Phase '{name}' not in turn report")


def run_isolated(
    label: str,
    fn: Callable[..., Any],
    *args: Any,
    logger: logging.Logger,
    level: int = logging.WARNING,
) -> StepOutcome:
    """
    Call ``fn(*args)`` inside a fault-isolation boundary.

    Any ``Exception`` is logged under ``label`` and returned wrapped in a
    failed `StepOutcome`; effects applied before the failure are kept.
    """
    try:
        fn(*args)
    except Exception as exc:
        failure = TransientPhaseFailure(label, exc)
        logger.log(level, "  %s failed: %s", label, failure, exc_info=exc)
        return StepOutcome(label, False, failure)
    return StepOutcome(label, True)
