# src/turnengine/systems/salaries.py
"""
Upkeep step 3: rank-based character salaries.
"""
from __future__ import annotations

from turnengine.clock import GameClock
from turnengine.config import EconomyTuning
from turnengine.economy import EconomyLog, EventKind
from turnengine.ledger import FundsLedger
from turnengine.logging import getLogger
from turnengine.world import Character, CharacterRepository

log = getLogger(__name__)


def salary_for(character: Character, tuning: EconomyTuning) -> int:
    return int(tuning.salary_by_rank.get(character.rank.value, 0))


def pay_salaries(
    characters: CharacterRepository,
    funds: FundsLedger,
    econ_log: EconomyLog,
    clock: GameClock,
    tuning: EconomyTuning,
) -> int:
    """
    Pay every living character's monthly salary from their faction.

    Rule
    ----
        salary = salary_by_rank[rank]
        faction balance ≥ salary → faction −= salary, character += salary
        otherwise                → nothing moves, SalaryUnpaid is logged

    Salaries never push a faction into deficit, whatever
    ``allow_deficit_upkeep`` says. Characters without a faction or with a
    zero salary are skipped.

    Returns the total paid.
    """
    log.info("--- Paying Character Salaries ---")
    stamp = clock.stamp()
    total = 0
    for character in characters.living():
        salary = salary_for(character, tuning)
        if salary <= 0:
            continue
        faction_id = character.faction_id
        if faction_id is None:
            log.trace("  character %s: no faction, salary skipped", character.id)
            continue

        if not funds.can_cover(faction_id, salary):
            econ_log.record(
                stamp,
                EventKind.SALARY_UNPAID,
                character.id,
                0,
                f"Unpaid salary {salary} from faction {faction_id}",
            )
            log.warning(
                "  Faction %s cannot pay %s's salary (%d)",
                faction_id,
                character.id,
                salary,
            )
            continue

        funds.add_balance(faction_id, -salary)
        econ_log.record(
            stamp, EventKind.SALARY, faction_id, -salary, f"Salary for {character.id}"
        )
        character.credit(salary)
        characters.save(character)
        econ_log.record(
            stamp,
            EventKind.SALARY,
            character.id,
            salary,
            f"Paid salary {salary}, faction {faction_id} debited",
        )
        total += salary
        log.trace("  character %s: salary %d", character.id, salary)

    log.info(f"  Total salaries paid: {total:,}")
    return total
