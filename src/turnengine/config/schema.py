"""
Configuration dataclasses for simulation parameters.

`Config` groups the calendar parameters and an `EconomyTuning` instance.
Both are created by `Simulation.init()` after merging defaults, user config
and kwargs, and after `ConfigValidator` has checked the merged mapping.

Design Notes
------------
- Immutable (frozen=True) to prevent accidental modification
- Memory-efficient (slots=True)
- No validation logic here; see ConfigValidator

See Also
--------
ConfigValidator : Centralized validation for configuration parameters
turnengine.simulation.Simulation.init : Creates Config from merged parameters
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Mapping

#: Monthly salary per rank name, paid by the character's faction.
DEFAULT_SALARY_BY_RANK: dict[str, int] = {
    "civilian": 0,
    "lieutenant": 20,
    "captain": 40,
    "major": 60,
    "colonel": 90,
    "general": 140,
    "leader": 0,
}


@dataclass(slots=True, frozen=True)
class EconomyTuning:
    """
    Balance knobs for end-of-turn upkeep, trade and loans.

    Parameters
    ----------
    base_ship_maint_pct : float
        Share of a fleet's total ship cost charged per turn.
    base_infra_upkeep_per_level : int
        Credits charged per infrastructure level per turn.
    fleet_maint_skill_reduction : float
        Maintenance reduction at commander Military = 100.
    fleet_maint_consc_reduction : float
        Maintenance reduction at commander Conscientiousness = 100.
    gov_infra_skill_reduction : float
        Infrastructure upkeep reduction at governor Economy = 100.
    gov_consc_reduction : float
        Infrastructure upkeep reduction at governor Conscientiousness = 100.
    trade_base_unit_value : int
        Value of one unit of route capacity over zero distance.
    trade_distance_scale : float
        Distance at which a route's value doubles.
    tariff_min_percent, tariff_max_percent : int
        Clamp applied by `EconomicEngine.set_tariff`.
    loan_payment_pct : float
        Share of the remaining balance due each turn.
    loan_min_payment : int
        Smallest per-turn obligation on an active loan.
    smuggling_loss_at_source : float
        Share of a black-market sale lost to leakage at the source planet.
    smuggling_cut_to_pirates : float
        Share of the post-leakage value paid to the pirate counterparty.
    allow_deficit_upkeep : bool
        Whether upkeep may push a faction's balance below zero. If False,
        uncovered upkeep is logged as unpaid and nothing is debited.
    salary_by_rank : Mapping[str, int]
        Monthly salary per rank name. Ranks missing from the table draw
        nothing.
    """

    base_ship_maint_pct: float = 0.02
    base_infra_upkeep_per_level: int = 3
    fleet_maint_skill_reduction: float = 0.25
    fleet_maint_consc_reduction: float = 0.10
    gov_infra_skill_reduction: float = 0.30
    gov_consc_reduction: float = 0.10
    trade_base_unit_value: int = 5
    trade_distance_scale: float = 1000.0
    tariff_min_percent: int = 0
    tariff_max_percent: int = 75
    loan_payment_pct: float = 0.10
    loan_min_payment: int = 1
    smuggling_loss_at_source: float = 0.15
    smuggling_cut_to_pirates: float = 0.65
    allow_deficit_upkeep: bool = True
    salary_by_rank: Mapping[str, int] = field(
        default_factory=lambda: dict(DEFAULT_SALARY_BY_RANK)
    )

    @classmethod
    def from_mapping(cls, params: Mapping[str, Any]) -> EconomyTuning:
        """Pick the tuning keys out of a flat config mapping."""
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in params.items() if k in names})


@dataclass(slots=True, frozen=True)
class Config:
    """
    Immutable configuration for a turn simulation.

    Parameters
    ----------
    start_year : int
        Calendar year at turn 0.
    start_month : int
        Calendar month at turn 0 (1-based).
    months_per_year : int
        Months in a calendar year.
    economy : EconomyTuning
        Economy balance knobs.

    Examples
    --------
    >>> import turnengine as te
    >>> sim = te.Simulation.init(start_year=3000)
    >>> sim.config.start_year
    3000
    >>> sim.config.economy.trade_base_unit_value
    5
    """

    start_year: int
    start_month: int
    months_per_year: int
    economy: EconomyTuning = field(default_factory=EconomyTuning)
