"""Turn pipeline with explicit, fault-isolated execution order."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import yaml

from turnengine.core.outcome import PhaseOutcome, TurnReport
from turnengine.core.phase import Phase
from turnengine.core.registry import get_phase
from turnengine.errors import TransientPhaseFailure
from turnengine.logging import getLogger

if TYPE_CHECKING:
    from turnengine.simulation import Simulation

log = getLogger(__name__)


@dataclass(slots=True)
class Pipeline:
    """
    Ordered list of phases executed once per turn.

    Each phase runs inside its own fault-isolation boundary: an exception
    raised by a phase is logged with the phase's name, recorded as a failed
    `PhaseOutcome`, and the next phase runs. Nothing is rolled back. The
    pipeline introduces no randomness; the same state and collaborator
    outputs always give the same result.

    Attributes
    ----------
    phases : list[Phase]
        Ordered list of phase instances to execute.
    _phase_map : dict[str, Phase]
        Internal mapping from phase names to instances for quick lookup.

    See Also
    --------
    Pipeline.from_phase_list : Build pipeline from phase name list
    Pipeline.from_yaml : Build pipeline from a YAML file
    """

    phases: list[Phase] = field(default_factory=list)
    _phase_map: dict[str, Phase] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        self._phase_map = {p.name: p for p in self.phases}

    @classmethod
    def from_phase_list(cls, phase_names: Iterable[str]) -> Pipeline:
        """
        Build pipeline from ordered list of phase names.

        Phases are executed in the exact order provided.

        Raises
        ------
        KeyError
            If a phase name is not found in the registry.
        """
        return cls(phases=[get_phase(name.strip())() for name in phase_names])

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> Pipeline:
        """
        Build pipeline from YAML configuration file.

        The file needs a ``phases`` key holding the ordered list of phase
        names.

        Raises
        ------
        ValueError
            If the YAML has no ``phases`` key.

        Examples
        --------
        >>> pipeline = Pipeline.from_yaml("my_pipeline.yml")
        """
        yaml_path = Path(yaml_path)
        with open(yaml_path) as f:
            config = yaml.safe_load(f)

        if not isinstance(config, dict) or "phases" not in config:
            raise ValueError(f"YAML file must have 'phases' key: {yaml_path}")

        return cls.from_phase_list(config["phases"])

    def execute(self, sim: Simulation, turn_number: int = 0) -> TurnReport:
        """
        Execute all phases in pipeline order.

        Parameters
        ----------
        sim : Simulation
            Simulation instance to operate on.
        turn_number : int
            Identifying token, used for logging only.

        Returns
        -------
        TurnReport
            One outcome per phase, in execution order.
        """
        report = TurnReport(turn_number=turn_number)
        for phase in self.phases:
            report.phases.append(self._run_phase(phase, sim, turn_number))
        report.year, report.month = sim.clock.stamp()
        return report

    @staticmethod
    def _run_phase(phase: Phase, sim: Simulation, turn_number: int) -> PhaseOutcome:
        logger = phase.get_logger()
        try:
            steps = phase.execute(sim)
        except Exception as exc:
            failure = TransientPhaseFailure(phase.name, exc)
            logger.error(
                "Turn %s: phase '%s' failed: %s",
                turn_number,
                phase.name,
                failure,
                exc_info=exc,
            )
            return PhaseOutcome(phase.name, False, failure)
        steps = tuple(steps or ())
        n_failed = sum(1 for s in steps if not s.succeeded)
        if n_failed:
            logger.warning(
                "Turn %s: phase '%s' completed with %d failed step(s)",
                turn_number,
                phase.name,
                n_failed,
            )
        else:
            logger.debug("Turn %s: phase '%s' completed", turn_number, phase.name)
        return PhaseOutcome(phase.name, True, None, steps)

    def insert_after(self, after: str, phase: Phase | str | type[Phase]) -> None:
        """
        Insert phase after specified phase.

        Raises
        ------
        ValueError
            If 'after' phase not found in pipeline.
        """
        if after not in self._phase_map:
            raise ValueError(f"Phase '{after}' not found in pipeline")

        phase = self._instantiate(phase)
        idx = self.phases.index(self._phase_map[after])
        self.phases.insert(idx + 1, phase)
        self._phase_map[phase.name] = phase

    def remove(self, phase_name: str) -> None:
        """
        Remove phase from pipeline.

        Raises
        ------
        ValueError
            If phase not found in pipeline.
        """
        if phase_name not in self._phase_map:
            raise ValueError(f"Phase '{phase_name}' not found in pipeline")

        self.phases.remove(self._phase_map.pop(phase_name))

    def replace(self, old_name: str, new_phase: Phase | str | type[Phase]) -> None:
        """
        Replace phase with another phase, keeping its position.

        Raises
        ------
        ValueError
            If old phase not found in pipeline.
        """
        if old_name not in self._phase_map:
            raise ValueError(f"Phase '{old_name}' not found in pipeline")

        new_phase = self._instantiate(new_phase)
        idx = self.phases.index(self._phase_map[old_name])
        self.phases[idx] = new_phase
        del self._phase_map[old_name]
        self._phase_map[new_phase.name] = new_phase

    @staticmethod
    def _instantiate(phase: Phase | str | type[Phase]) -> Phase:
        if isinstance(phase, str):
            return get_phase(phase)()
        if isinstance(phase, type):
            return phase()
        return phase

    @property
    def phase_names(self) -> list[str]:
        return [p.name for p in self.phases]

    def __len__(self) -> int:
        return len(self.phases)

    def __repr__(self) -> str:
        return f"Pipeline(n_phases={len(self.phases)})"
