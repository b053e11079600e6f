"""Calendar and delegating phases.

Lifecycle, affection, ransom, morale and intrigue are opaque collaborators;
their phases only call into them. An unwired collaborator makes its phase a
no-op.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from turnengine.core.decorators import phase

if TYPE_CHECKING:
    from turnengine.simulation import Simulation


@phase
class AdvanceClock:
    """
    Advance the calendar by one month.

    Runs first, so every later phase stamps its records with the new month.
    """

    def execute(self, sim: Simulation) -> None:
        sim.clock.advance_turn()
        self.get_logger().debug("Clock advanced to %d-%02d", *sim.clock.stamp())


@phase
class Lifecycle:
    """Aging, births and deaths."""

    def execute(self, sim: Simulation) -> None:
        if sim.services.lifecycle is not None:
            sim.services.lifecycle.process_monthly()


@phase
class Affection:
    def execute(self, sim: Simulation) -> None:
        if sim.services.affection is not None:
            sim.services.affection.update_affection()


@phase
class Ransom:
    def execute(self, sim: Simulation) -> None:
        if sim.services.ransom is not None:
            sim.services.ransom.try_request_ransoms()


@phase
class Morale:
    def execute(self, sim: Simulation) -> None:
        if sim.services.morale is not None:
            sim.services.morale.apply_morale_effects()


@phase
class Intrigue:
    """Plot progression, recruitment and exposure."""

    def execute(self, sim: Simulation) -> None:
        if sim.services.intrigue is not None:
            sim.services.intrigue.tick_plots()
