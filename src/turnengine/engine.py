# src/turnengine/engine.py
"""Economic engine: registries, on-demand economy calls and end-of-turn upkeep."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from numbers import Integral
from typing import Any

from turnengine.accounts import Accounts
from turnengine.clock import GameClock
from turnengine.config import EconomyTuning
from turnengine.core.outcome import StepOutcome, run_isolated
from turnengine.economy import (
    AccountType,
    EconomyLog,
    EventKind,
    Loan,
    TariffPolicy,
    TradeRoute,
)
from turnengine.errors import NotFoundError, ValidationError
from turnengine.ledger import BudgetBook, FundsLedger
from turnengine.logging import getLogger
from turnengine.starmap import Starmap
from turnengine.systems import (
    charge_fleet_maintenance,
    charge_infrastructure_upkeep,
    pay_salaries,
    service_loans,
    settle_trade_routes,
)
from turnengine.typing import FactionId, LoanId, OwnerId, PlanetId, RouteId
from turnengine.world import CharacterRepository, Fleet, Planet, Repository

__all__ = ["EconomicEngine", "UpkeepReport"]

log = getLogger(__name__)

@dataclass(slots=True, frozen=True)
class UpkeepReport:
    """Outcome of each `end_of_turn_upkeep` sub-step, in run order."""

    steps: tuple[StepOutcome, ...]
    n_events: int

    @property
    def succeeded(self) -> bool:
        return all(s.succeeded for s in self.steps)

    def step(self, label: str) -> StepOutcome:
        for s in self.steps:
            if s.label == label:
                return s
        raise KeyError(f"Upkeep step '{label}' not in report")


@dataclass(slots=True)
class EconomicEngine:
    """
    Owner of trade routes, loans, tariff policies and the economy event log.

    The engine is the only writer of those registries and of the faction
    funds it is handed. Route and loan identifiers are allocated
    sequentially, so two identical runs produce identical ids.

    Parameters
    ----------
    clock : GameClock
        Source of (year, month) stamps.
    starmap : Starmap
        Distances and nearest pirate bases.
    funds : FundsLedger
        Faction treasuries.
    planets, fleets : Repository
        World aggregates enumerated by upkeep.
    characters : CharacterRepository
        Commanders and governors; character loan accounts.
    tuning : EconomyTuning
        Balance knobs.

    Examples
    --------
    >>> engine = EconomicEngine(clock, starmap, FundsLedger(), planets, fleets, chars)
    >>> rid = engine.create_trade_route("terra", "luna", capacity=10)
    >>> report = engine.end_of_turn_upkeep()
    >>> len(engine.log.of_kind("Trade"))
    1
    """

    clock: GameClock
    starmap: Starmap
    funds: FundsLedger
    planets: Repository[Planet]
    fleets: Repository[Fleet]
    characters: CharacterRepository
    tuning: EconomyTuning = field(default_factory=EconomyTuning)
    budgets: BudgetBook = field(default_factory=BudgetBook)

    _routes: dict[RouteId, TradeRoute] = field(default_factory=dict, init=False)
    _loans: dict[LoanId, Loan] = field(default_factory=dict, init=False)
    _tariffs: dict[FactionId, TariffPolicy] = field(default_factory=dict, init=False)
    _log: EconomyLog = field(default_factory=EconomyLog, init=False)
    _next_route_id: int = field(default=1, init=False)
    _next_loan_id: int = field(default=1, init=False)

    # read-only views
    # ---------------------------------------------------------------------
    @property
    def log(self) -> EconomyLog:
        return self._log

    @property
    def accounts(self) -> Accounts:
        return Accounts(self.budgets, self.funds, self.planets, self.characters)

    def trade_routes(self) -> list[TradeRoute]:
        return list(self._routes.values())

    def get_trade_route(self, route_id: RouteId) -> TradeRoute:
        try:
            return self._routes[route_id]
        except KeyError:
            raise NotFoundError("trade route", route_id) from None

    def loans(self) -> list[Loan]:
        return list(self._loans.values())

    def get_loan(self, loan_id: LoanId) -> Loan:
        try:
            return self._loans[loan_id]
        except KeyError:
            raise NotFoundError("loan", loan_id) from None

    # trade
    # ---------------------------------------------------------------------
    def create_trade_route(
        self,
        from_planet_id: PlanetId,
        to_planet_id: PlanetId,
        capacity: int,
        smuggling: bool = False,
    ) -> RouteId:
        """
        Register a trade route; it is first settled at the next upkeep.

        Raises
        ------
        ValidationError
            If ``capacity <= 0`` or both endpoints are the same planet.
        """
        if isinstance(capacity, bool) or not isinstance(capacity, Integral) or capacity <= 0:
            raise ValidationError(f"Route capacity must be a positive int, got {capacity!r}")
        capacity = int(capacity)
        if from_planet_id == to_planet_id:
            raise ValidationError(
                f"Route endpoints must differ, got {from_planet_id!r} twice"
            )

        route = TradeRoute(
            self._next_route_id, from_planet_id, to_planet_id, capacity, bool(smuggling)
        )
        self._next_route_id += 1
        self._routes[route.id] = route
        self._log.record(
            self.clock.stamp(),
            EventKind.TRADE_ROUTE_CREATED,
            None,
            0,
            f"Route {route.id}: {from_planet_id}->{to_planet_id}, "
            f"cap={capacity}, smuggling={route.smuggling}",
        )
        log.debug("Registered %s", route)
        return route.id

    def remove_trade_route(self, route_id: RouteId) -> None:
        self.get_trade_route(route_id)
        del self._routes[route_id]
        self._log.record(
            self.clock.stamp(), EventKind.TRADE_ROUTE_REMOVED, None, 0, f"Route {route_id}"
        )

    # tariffs
    # ---------------------------------------------------------------------
    def set_tariff(self, faction_id: FactionId, percent: int) -> TariffPolicy:
        """Set the faction's tariff, clamped to the configured bounds."""
        percent = min(
            max(int(percent), self.tuning.tariff_min_percent),
            self.tuning.tariff_max_percent,
        )
        policy = TariffPolicy(faction_id, percent)
        self._tariffs[faction_id] = policy
        return policy

    def get_tariff(self, faction_id: FactionId) -> int:
        policy = self._tariffs.get(faction_id)
        return 0 if policy is None else policy.percent

    def get_tariff_policy(self, faction_id: FactionId) -> TariffPolicy | None:
        return self._tariffs.get(faction_id)

    # planet budgets
    # ---------------------------------------------------------------------
    def credit_planet_budget(self, planet_id: PlanetId, credits: int) -> None:
        self.planets.require(planet_id)
        self.budgets.credit(planet_id, credits)

    def get_planet_budget(self, planet_id: PlanetId) -> int:
        return self.budgets.get(planet_id)

    # black market
    # ---------------------------------------------------------------------
    def record_black_market_trade(
        self,
        planet_id: PlanetId,
        credits: int,
        pirate_faction_id: FactionId,
        note: str = "Black market trade",
    ) -> int:
        """
        One-off black-market sale at a planet.

        Rule
        ----
            leakage = round(credits · loss_at_source)
            pirates = round((credits − leakage) · cut_to_pirates)

        The planet's budget loses ``leakage + pirates`` if it can cover it,
        logged as a negative ``BlackMarket`` event against the planet. The
        pirate faction is credited ``pirates`` either way. Returns the
        pirates' take.
        """
        planet = self.planets.require(planet_id)
        if credits <= 0:
            return 0
        leakage = round(credits * self.tuning.smuggling_loss_at_source)
        pirates = round((credits - leakage) * self.tuning.smuggling_cut_to_pirates)

        stamp = self.clock.stamp()
        debited = self.budgets.try_debit(planet.id, leakage + pirates)
        if debited:
            self._log.record(
                stamp,
                EventKind.BLACK_MARKET,
                planet.id,
                -(leakage + pirates),
                f"{note} at {planet.id}: leakage={leakage}, pirates={pirates}",
            )
        self.funds.add_balance(pirate_faction_id, pirates)
        self._log.record(
            stamp,
            EventKind.BLACK_MARKET,
            pirate_faction_id,
            pirates,
            f"{note} at {planet.id}: leakage={leakage}, pirates={pirates}, "
            f"planet debited={debited}",
        )
        return pirates

    # loans
    # ---------------------------------------------------------------------
    def create_loan(
        self,
        account_type: AccountType,
        owner_id: OwnerId,
        principal: int,
        monthly_rate: float,
        term_months: int,
    ) -> LoanId:
        """
        Open a loan and disburse the principal to the owner's account.

        Raises
        ------
        ValidationError
            If ``principal <= 0``, ``monthly_rate < 0`` or ``term_months <= 0``.
        """
        if principal <= 0 or monthly_rate < 0 or term_months <= 0:
            raise ValidationError(
                f"Invalid loan parameters: principal={principal}, "
                f"rate={monthly_rate}, term={term_months}"
            )
        accounts = self.accounts
        # existence check before anything is registered
        accounts.balance(account_type, owner_id)

        year, month = self.clock.stamp()
        loan = Loan(
            self._next_loan_id,
            account_type,
            owner_id,
            principal,
            monthly_rate,
            term_months,
            start_year=year,
            start_month=month,
        )
        self._next_loan_id += 1
        self._loans[loan.id] = loan

        accounts.credit(account_type, owner_id, principal)
        self._log.record(
            (year, month),
            EventKind.LOAN_DISBURSED,
            owner_id,
            principal,
            f"Loan {loan.id} ({account_type.value}) principal {principal}",
        )
        return loan.id

    def make_loan_payment(self, loan_id: LoanId, amount: int) -> int:
        """
        Voluntary payment from the owner's account.

        Nothing happens when the owner cannot cover ``amount`` or the loan is
        no longer active. Only the part actually applied is debited.
        """
        loan = self.get_loan(loan_id)
        if amount <= 0 or not loan.is_active:
            return 0
        amount = min(amount, loan.remaining)
        if not self.accounts.debit(loan.account_type, loan.owner_id, amount):
            return 0
        paid = loan.make_payment(amount)
        self._log.record(
            self.clock.stamp(),
            EventKind.LOAN_PAYMENT,
            loan.owner_id,
            -paid,
            f"Loan {loan.id} ({loan.account_type.value}) paid {paid}",
        )
        return paid

    # end of turn
    # ---------------------------------------------------------------------
    def end_of_turn_upkeep(self) -> UpkeepReport:
        """
        Run the five upkeep steps in order, each fault-isolated.

        1. fleet maintenance
        2. infrastructure upkeep
        3. character salaries
        4. trade settlement
        5. loan servicing

        A failing step (e.g. a missing commander raises `NotFoundError`) is
        logged and reported; the following steps still run.
        """
        start = len(self._log)
        steps: list[tuple[str, Callable[..., Any], tuple[Any, ...]]] = [
            (
                "fleet_maintenance",
                charge_fleet_maintenance,
                (self.fleets, self.characters, self.funds, self._log, self.clock, self.tuning),
            ),
            (
                "infrastructure_upkeep",
                charge_infrastructure_upkeep,
                (self.planets, self.characters, self.funds, self._log, self.clock, self.tuning),
            ),
            (
                "character_salaries",
                pay_salaries,
                (self.characters, self.funds, self._log, self.clock, self.tuning),
            ),
            (
                "trade_settlement",
                settle_trade_routes,
                (
                    self.trade_routes(),
                    self.planets,
                    self.starmap,
                    self.budgets,
                    self.funds,
                    self._tariffs,
                    self._log,
                    self.clock,
                    self.tuning,
                ),
            ),
            (
                "loan_servicing",
                service_loans,
                (self.loans(), self.accounts, self._log, self.clock, self.tuning),
            ),
        ]
        outcomes = tuple(
            run_isolated(label, fn, *args, logger=log) for label, fn, args in steps
        )
        return UpkeepReport(outcomes, len(self._log) - start)
