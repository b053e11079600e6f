# src/turnengine/systems/trade.py
"""
Upkeep step 4: trade-route settlement.

Route values are computed in one vectorised pass; payouts are then applied
route by route in registration order so the event log order is stable.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

import numpy as np

from turnengine.clock import GameClock
from turnengine.config import EconomyTuning
from turnengine.economy import EconomyLog, EventKind, TariffPolicy, TradeRoute
from turnengine.ledger import BudgetBook, FundsLedger
from turnengine.logging import getLogger
from turnengine.starmap import Starmap
from turnengine.typing import FactionId, Float1D, Int1D
from turnengine.world import Planet, Repository

log = getLogger(__name__)


def route_values(
    capacity: Int1D,
    distance: Float1D,
    *,
    base_unit_value: int,
    distance_scale: float,
) -> Int1D:
    """
    value = round(capacity · base_unit · (1 + distance / scale))

    Longer hauls are worth more per unit of capacity. Rounding is half-up.
    """
    capacity = np.asarray(capacity, dtype=np.float64)
    distance = np.asarray(distance, dtype=np.float64)
    raw = capacity * base_unit_value * (1.0 + distance / distance_scale)
    return np.floor(raw + 0.5).astype(np.int64)


def tariff_amounts(values: Int1D, percents: Int1D) -> Int1D:
    """tariff = ⌊value · percent / 100⌋"""
    return (np.asarray(values, dtype=np.int64) * np.asarray(percents, dtype=np.int64)) // 100


def smuggling_split(
    value: int,
    origin_pirate: FactionId | None,
    destination_pirate: FactionId | None,
) -> dict[FactionId, int]:
    """
    Split a smuggling route's value between the pirates nearest each end.

    The origin side gets ``value // 2``, the destination side the rest. A
    missing pirate forfeits its share; one pirate at both ends gets it all.
    """
    half = value // 2
    payouts: dict[FactionId, int] = {}
    for pirate, share in ((origin_pirate, half), (destination_pirate, value - half)):
        if pirate is None or share <= 0:
            continue
        payouts[pirate] = payouts.get(pirate, 0) + share
    return payouts


def _resolve_endpoints(
    routes: Sequence[TradeRoute], planets: Repository[Planet]
) -> tuple[list[int], list[Planet], list[Planet]]:
    """Indices and endpoints of routes whose planets both still exist."""
    live: list[int] = []
    origins: list[Planet] = []
    destinations: list[Planet] = []
    for i, route in enumerate(routes):
        origin = planets.get(route.origin)
        destination = planets.get(route.destination)
        if origin is None or destination is None:
            missing = route.origin if origin is None else route.destination
            log.warning("  Route %s skipped: planet %r not found", route.id, missing)
            continue
        live.append(i)
        origins.append(origin)
        destinations.append(destination)
    return live, origins, destinations


def settle_trade_routes(
    routes: Sequence[TradeRoute],
    planets: Repository[Planet],
    starmap: Starmap,
    budgets: BudgetBook,
    funds: FundsLedger,
    tariffs: Mapping[FactionId, TariffPolicy],
    econ_log: EconomyLog,
    clock: GameClock,
    tuning: EconomyTuning,
) -> Int1D:
    """
    Settle every registered route for this turn.

    Legitimate routes credit the destination planet's budget with the value
    net of its owning faction's tariff, and the tariff to that faction.
    Smuggling routes bypass budgets and tariffs and pay nearby pirates.

    A route whose origin or destination planet no longer exists is skipped
    with a warning and valued 0; every other route is still paid.

    Returns
    -------
    Int1D
        Gross value per route, in ``routes`` order.
    """
    log.info("--- Settling Trade Routes ---")
    values = np.zeros(len(routes), dtype=np.int64)
    if not routes:
        log.info("  No trade routes registered.")
        return values

    live, origins, destinations = _resolve_endpoints(routes, planets)
    if not live:
        return values
    settled = [routes[i] for i in live]

    capacity = np.array([r.capacity for r in settled], dtype=np.int64)
    distance = np.array(
        [starmap.get_distance(o.system_id, d.system_id) for o, d in zip(origins, destinations)],
        dtype=np.float64,
    )
    smuggling = np.array([r.smuggling for r in settled], dtype=np.bool_)

    live_values = route_values(
        capacity,
        distance,
        base_unit_value=tuning.trade_base_unit_value,
        distance_scale=tuning.trade_distance_scale,
    )
    values[live] = live_values
    percents = np.array(
        [
            0 if (p := tariffs.get(d.faction_id)) is None else p.percent
            for d in destinations
        ],
        dtype=np.int64,
    )
    tariffs_due = np.where(smuggling, 0, tariff_amounts(live_values, percents))

    log.info(
        f"  {int((~smuggling).sum())} legitimate and {int(smuggling.sum())} smuggling "
        f"routes, total value {int(live_values.sum()):,}"
    )
    if log.isEnabledFor(logging.DEBUG):
        log.debug(f"  Route distances:\n{np.array2string(distance, precision=2)}")
        log.debug(f"  Route values:\n{np.array2string(live_values)}")

    stamp = clock.stamp()
    for i, route in enumerate(settled):
        value = int(live_values[i])
        origin, destination = origins[i], destinations[i]
        if not smuggling[i]:
            tariff = int(tariffs_due[i])
            budgets.credit(destination.id, value - tariff)
            econ_log.record(
                stamp,
                EventKind.TRADE,
                destination.id,
                value,
                f"Route {route.id} value {value} ({route.origin}->{route.destination})",
            )
            if tariff > 0:
                funds.add_balance(destination.faction_id, tariff)
                econ_log.record(
                    stamp,
                    EventKind.TARIFF,
                    destination.faction_id,
                    tariff,
                    f"Route {route.id} tariff {int(percents[i])}% = {tariff}",
                )
            continue

        origin_pirate = starmap.get_nearest_pirate_faction(origin.system_id)
        destination_pirate = starmap.get_nearest_pirate_faction(destination.system_id)
        payouts = smuggling_split(value, origin_pirate, destination_pirate)
        for pirate, share in payouts.items():
            funds.add_balance(pirate, share)
            econ_log.record(
                stamp,
                EventKind.SMUGGLING,
                pirate,
                share,
                f"Route {route.id} smuggled {value}, share {share}",
            )
        unpaid = value - sum(payouts.values())
        if unpaid:
            log.debug(
                "  Route %s: %d of %d not paid out (no pirate nearby)",
                route.id,
                unpaid,
                value,
            )

    return values
