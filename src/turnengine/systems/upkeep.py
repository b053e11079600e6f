# src/turnengine/systems/upkeep.py
"""
Upkeep step 1 and 2: fleet maintenance and infrastructure upkeep.

Both charge the owning faction's treasury and leave one Upkeep event per
charge in the economy log.
"""
from __future__ import annotations

import math

from turnengine.clock import GameClock
from turnengine.config import EconomyTuning
from turnengine.economy import EconomyLog, EventKind
from turnengine.ledger import FundsLedger
from turnengine.logging import getLogger
from turnengine.typing import FactionId
from turnengine.world import Character, CharacterRepository, Fleet, Planet, Repository

_EPS = 1.0e-9

log = getLogger(__name__)


def _ceil(x: float) -> int:
    # absorbs float noise such as 1000 * 0.02 == 20.000000000000004
    return math.ceil(x - _EPS)


def fleet_maintenance_pct(commander: Character | None, tuning: EconomyTuning) -> float:
    """
    pct = base · (1 − military/100 · a − conscientiousness/100 · b), floored at 0
    """
    pct = tuning.base_ship_maint_pct
    if commander is None:
        return pct
    reduction = (
        commander.skills.military / 100.0 * tuning.fleet_maint_skill_reduction
        + commander.personality.conscientiousness
        / 100.0
        * tuning.fleet_maint_consc_reduction
    )
    return pct * max(0.0, 1.0 - reduction)


def infrastructure_upkeep(
    planet: Planet, governor: Character | None, tuning: EconomyTuning
) -> int:
    """
    charge = ⌈level · per_level · (1 − economy/100 · c − conscientiousness/100 · d)⌉
    """
    factor = 1.0
    if governor is not None:
        reduction = (
            governor.skills.economy / 100.0 * tuning.gov_infra_skill_reduction
            + governor.personality.conscientiousness / 100.0 * tuning.gov_consc_reduction
        )
        factor = max(0.0, 1.0 - reduction)
    return _ceil(planet.infrastructure_level * tuning.base_infra_upkeep_per_level * factor)


def _charge_faction(
    funds: FundsLedger,
    econ_log: EconomyLog,
    clock: GameClock,
    faction_id: FactionId,
    amount: int,
    note: str,
    *,
    allow_deficit: bool,
) -> bool:
    if not allow_deficit and not funds.can_cover(faction_id, amount):
        econ_log.record(
            clock.stamp(), EventKind.UPKEEP_UNPAID, faction_id, 0, f"{note} unpaid {amount}"
        )
        log.warning("  Faction %s cannot cover %s (%d)", faction_id, note, amount)
        return False
    funds.add_balance(faction_id, -amount)
    econ_log.record(clock.stamp(), EventKind.UPKEEP, faction_id, -amount, note)
    return True


def charge_fleet_maintenance(
    fleets: Repository[Fleet],
    characters: CharacterRepository,
    funds: FundsLedger,
    econ_log: EconomyLog,
    clock: GameClock,
    tuning: EconomyTuning,
) -> int:
    """
    upkeep_f = ⌈Σ ship.cost · pct(commander_f)⌉, debited from the fleet's faction.

    Returns the total debited. A fleet naming a commander that does not exist
    raises `NotFoundError`.
    """
    log.info("--- Charging Fleet Maintenance ---")
    total = 0
    for fleet in fleets:
        commander = (
            characters.require(fleet.commander_id)
            if fleet.commander_id is not None
            else None
        )
        upkeep = _ceil(fleet.total_cost * fleet_maintenance_pct(commander, tuning))
        if upkeep <= 0:
            continue
        if _charge_faction(
            funds,
            econ_log,
            clock,
            fleet.faction_id,
            upkeep,
            f"Fleet {fleet.id} maintenance",
            allow_deficit=tuning.allow_deficit_upkeep,
        ):
            total += upkeep
        log.trace("  fleet %s: upkeep %d", fleet.id, upkeep)
    log.info(f"  Total fleet maintenance charged: {total:,}")
    return total


def charge_infrastructure_upkeep(
    planets: Repository[Planet],
    characters: CharacterRepository,
    funds: FundsLedger,
    econ_log: EconomyLog,
    clock: GameClock,
    tuning: EconomyTuning,
) -> int:
    """
    Debit each planet's owning faction for its infrastructure level.

    Returns the total debited. A planet naming a governor that does not exist
    raises `NotFoundError`.
    """
    log.info("--- Charging Infrastructure Upkeep ---")
    total = 0
    for planet in planets:
        governor = (
            characters.require(planet.governor_id)
            if planet.governor_id is not None
            else None
        )
        charge = infrastructure_upkeep(planet, governor, tuning)
        if charge <= 0:
            continue
        if _charge_faction(
            funds,
            econ_log,
            clock,
            planet.faction_id,
            charge,
            f"Planet {planet.id} infrastructure",
            allow_deficit=tuning.allow_deficit_upkeep,
        ):
            total += charge
        log.trace("  planet %s: upkeep %d", planet.id, charge)
    log.info(f"  Total infrastructure upkeep charged: {total:,}")
    return total
