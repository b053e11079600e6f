"""Economy phase."""

from __future__ import annotations

from typing import TYPE_CHECKING

from turnengine.core.decorators import phase
from turnengine.core.outcome import StepOutcome

if TYPE_CHECKING:
    from turnengine.simulation import Simulation


@phase
class Economy:
    """
    End-of-turn upkeep, each part isolated as its own step: fleet
    maintenance, infrastructure upkeep, salaries, trade settlement and
    loan servicing.

    See Also
    --------
    turnengine.engine.EconomicEngine.end_of_turn_upkeep
    """

    def execute(self, sim: Simulation) -> tuple[StepOutcome, ...]:
        report = sim.economy.end_of_turn_upkeep()
        self.get_logger().info(
            "Economy settled: %d event(s) logged, %d failed step(s)",
            report.n_events,
            sum(1 for s in report.steps if not s.succeeded),
        )
        return report.steps
