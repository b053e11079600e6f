"""Social phase: plan and resolve every living character's monthly intents."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from turnengine.core.decorators import phase
from turnengine.core.outcome import StepOutcome, run_isolated
from turnengine.errors import TransientPhaseFailure

if TYPE_CHECKING:
    from turnengine.services import InteractionResolver
    from turnengine.simulation import Simulation


@phase
class Social:
    """
    Plan monthly intents per living actor and resolve each intent alone.

    Rule
    ----
        actors = characters.living()           (snapshot at phase start)
        for actor in actors:
            intents = planner.plan_monthly_intents(actor)
            for intent in intents:
                events = resolver.resolve([intent])
                social_log += events; social_tick.apply_events(events)

    Fault isolation is per actor for planning and per intent for
    resolution; a failure is reported as a failed step and the loop moves
    on to the next intent or actor.
    """

    def execute(self, sim: Simulation) -> list[StepOutcome] | None:
        logger = self.get_logger()
        planner, resolver = sim.services.planner, sim.services.resolver
        if planner is None or resolver is None:
            logger.debug("No intent planner/resolver wired; skipping")
            return None

        actors = sim.characters.living()
        logger.info("--- Social tick for %d living characters ---", len(actors))
        steps: list[StepOutcome] = []
        for actor in actors:
            label = f"social:actor={actor.id}"
            try:
                intents = list(planner.plan_monthly_intents(actor))
            except Exception as exc:
                failure = TransientPhaseFailure(label, exc)
                logger.warning("  %s planning failed: %s", label, failure, exc_info=exc)
                steps.append(StepOutcome(label, False, failure))
                continue

            for i, intent in enumerate(intents):
                steps.append(
                    run_isolated(
                        f"{label}:intent={i}",
                        self._resolve_intent,
                        sim,
                        resolver,
                        intent,
                        logger=logger,
                    )
                )
        return steps

    @staticmethod
    def _resolve_intent(
        sim: Simulation, resolver: InteractionResolver, intent: Any
    ) -> None:
        events = list(resolver.resolve([intent]))
        sim.social_log.extend(events)
        if sim.services.social_tick is not None and events:
            sim.services.social_tick.apply_events(events)
