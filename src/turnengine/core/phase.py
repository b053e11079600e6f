"""Phase base class definition."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

from turnengine.logging import TurnLogger, getLogger

if TYPE_CHECKING:
    from turnengine.core.outcome import StepOutcome
    from turnengine.simulation import Simulation


def _camel_to_snake(name: str) -> str:
    """Convert CamelCase to snake_case."""
    s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1).lower()


@dataclass(slots=True)
class Phase(ABC):
    """
    Base class for all turn phases.

    A Phase is one named unit of turn processing (advance the clock, run the
    social tick, settle the economy, ...). Phases are executed by the
    Pipeline in the exact order given, once per turn, each inside its own
    fault-isolation boundary.

    Design Guidelines
    -----------------
    - Inherit from Phase and implement `execute()`
    - Use the `name` class variable for unique identification
    - Phases receive the full Simulation instance
    - Return inner step outcomes when the phase isolates its own sub-units

    Notes
    -----
    Phases are registered automatically via the __init_subclass__ hook.
    """

    name: ClassVar[str] = ""

    def __init_subclass__(cls, name: str = "", **kwargs: Any) -> None:
        """
        Auto-register Phase subclasses in the global registry.

        Parameters
        ----------
        name : str, optional
            Custom name for the phase. If not provided, uses the class name
            converted to snake_case.
        """
        super(Phase, cls).__init_subclass__(**kwargs)

        # @dataclass(slots=True) builds a new class and triggers this hook a
        # second time without the custom name; keep the one already set
        if name != "":
            cls.name = name
        elif cls.name == "":
            cls.name = _camel_to_snake(cls.__name__)

        from turnengine.core.registry import _PHASE_REGISTRY

        _PHASE_REGISTRY[cls.name] = cls

    def get_logger(self) -> TurnLogger:
        """
        Get logger for this phase.

        Logger name format: ``turnengine.phases.{phase_name}``. Per-phase
        levels are configured via the ``logging.phases`` config block.
        """
        return getLogger(f"turnengine.phases.{self.name}")

    @abstractmethod
    def execute(self, sim: Simulation) -> Sequence[StepOutcome] | None:
        """
        Execute the phase's logic.

        Mutates simulation state in-place.

        Returns
        -------
        Sequence[StepOutcome] or None
            Outcomes of inner fault-isolated steps, if the phase has any.
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
