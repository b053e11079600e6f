"""Core infrastructure: phase base class, registry, pipeline and outcomes."""

from typing import Any, Callable

from turnengine.core.decorators import phase as phase_decorator
from turnengine.core.outcome import PhaseOutcome, StepOutcome, TurnReport, run_isolated
from turnengine.core.phase import Phase
from turnengine.core.pipeline import Pipeline
from turnengine.core.registry import clear_registry, get_phase, list_phases

# Export the decorator under its intended name.
# This overrides the ``core.phase`` submodule attribute.
phase: Callable[..., Any] = phase_decorator

__all__ = [
    "Phase",
    "phase",
    "Pipeline",
    "PhaseOutcome",
    "StepOutcome",
    "TurnReport",
    "run_isolated",
    "get_phase",
    "list_phases",
    "clear_registry",
]
