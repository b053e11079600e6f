"""
Economy domain records: trade routes, loans, tariffs and the event log.

These are the entities owned by `turnengine.engine.EconomicEngine`. Nothing
outside the engine mutates them; the engine hands out read-only views.

Design Notes
------------
- `TradeRoute`, `TariffPolicy` and `EconomyEvent` are immutable.
- `Loan` is a small state machine: ACTIVE -> REPAID | DEFAULTED, both terminal.
- `EconomyLog` is append-only. It is the audit trail tests reconcile against.
"""

from __future__ import annotations

import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from enum import Enum, StrEnum
from typing import overload

from turnengine.typing import FactionId, LoanId, OwnerId, PlanetId, RouteId

__all__ = [
    "AccountType",
    "LoanStatus",
    "EventKind",
    "TradeRoute",
    "Loan",
    "TariffPolicy",
    "EconomyEvent",
    "EconomyLog",
]


class AccountType(Enum):
    """Kind of account a loan is drawn on and serviced from."""

    PLANET = "planet"
    FACTION = "faction"
    CHARACTER = "character"


class LoanStatus(Enum):
    ACTIVE = "active"
    REPAID = "repaid"
    DEFAULTED = "defaulted"


class EventKind(StrEnum):
    """Tag of an `EconomyEvent`. Members compare equal to their string value."""

    UPKEEP = "Upkeep"
    UPKEEP_UNPAID = "UpkeepUnpaid"
    SALARY = "Salary"
    SALARY_UNPAID = "SalaryUnpaid"
    TARIFF = "Tariff"
    TRADE = "Trade"
    SMUGGLING = "Smuggling"
    BLACK_MARKET = "BlackMarket"
    LOAN_DISBURSED = "LoanDisbursed"
    LOAN_INTEREST = "LoanInterest"
    LOAN_PAYMENT = "LoanPayment"
    LOAN_DEFAULT = "LoanDefault"
    TRADE_ROUTE_CREATED = "TradeRouteCreated"
    TRADE_ROUTE_REMOVED = "TradeRouteRemoved"


@dataclass(slots=True, frozen=True)
class TradeRoute:
    """
    Directed, capacity-rated link between two planets.

    Attributes
    ----------
    id : int
        Route identifier allocated by the engine.
    origin, destination : PlanetId
        Endpoints; never equal.
    capacity : int
        Abstract throughput per turn (positive).
    smuggling : bool
        Black-market route: proceeds go to nearby pirates instead of
        planet budgets and tariffs.
    """

    id: RouteId
    origin: PlanetId
    destination: PlanetId
    capacity: int
    smuggling: bool = False


@dataclass(slots=True, frozen=True)
class TariffPolicy:
    faction_id: FactionId
    percent: int


@dataclass(slots=True)
class Loan:
    """
    Interest-bearing loan drawn on a planet, faction or character account.

    Rule
    ----
        interest  = ⌈remaining · r⌉          (per turn, while active)
        paid      = min(amount, remaining)   (per payment, while active)

    Once defaulted or fully repaid the loan never changes again.

    Examples
    --------
    >>> loan = Loan(1, AccountType.FACTION, "red", principal=100,
    ...             monthly_rate=0.015, term_months=12)
    >>> loan.accrue_interest()
    2
    >>> loan.make_payment(500)
    102
    >>> loan.status
    <LoanStatus.REPAID: 'repaid'>
    """

    id: LoanId
    account_type: AccountType
    owner_id: OwnerId
    principal: int
    monthly_rate: float
    term_months: int
    start_year: int = 0
    start_month: int = 0
    remaining: int = field(init=False)
    defaulted: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self.remaining = self.principal

    @property
    def is_fully_repaid(self) -> bool:
        return self.remaining <= 0

    @property
    def is_active(self) -> bool:
        return not self.defaulted and self.remaining > 0

    @property
    def status(self) -> LoanStatus:
        if self.defaulted:
            return LoanStatus.DEFAULTED
        if self.remaining <= 0:
            return LoanStatus.REPAID
        return LoanStatus.ACTIVE

    def accrue_interest(self) -> int:
        """Add this turn's interest (rounded up) and return it."""
        if not self.is_active:
            return 0
        interest = math.ceil(self.remaining * self.monthly_rate)
        self.remaining += interest
        return interest

    def make_payment(self, amount: int) -> int:
        """Apply up to ``amount`` against the balance; return what was applied."""
        if not self.is_active or amount <= 0:
            return 0
        paid = min(amount, self.remaining)
        self.remaining -= paid
        return paid

    def mark_default(self) -> None:
        self.defaulted = True


@dataclass(slots=True, frozen=True)
class EconomyEvent:
    """
    Immutable ledger entry.

    ``amount`` is signed: positive when credits were paid in, negative when
    they were paid out, zero for purely informational records.
    """

    year: int
    month: int
    kind: EventKind
    owner_id: OwnerId | None
    amount: int
    note: str = ""


class EconomyLog(Sequence[EconomyEvent]):
    """
    Append-only economic event log.

    Supports ``len``, iteration and indexing; there is no way to remove or
    replace an entry.
    """

    __slots__ = ("_events",)

    def __init__(self) -> None:
        self._events: list[EconomyEvent] = []

    def append(self, event: EconomyEvent) -> None:
        self._events.append(event)

    def record(
        self,
        stamp: tuple[int, int],
        kind: EventKind,
        owner_id: OwnerId | None,
        amount: int,
        note: str = "",
    ) -> EconomyEvent:
        """Build an event stamped ``(year, month)``, append it and return it."""
        event = EconomyEvent(stamp[0], stamp[1], kind, owner_id, int(amount), note)
        self._events.append(event)
        return event

    @overload
    def __getitem__(self, index: int) -> EconomyEvent: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[EconomyEvent, ...]: ...

    def __getitem__(
        self, index: int | slice
    ) -> EconomyEvent | tuple[EconomyEvent, ...]:
        if isinstance(index, slice):
            return tuple(self._events[index])
        return self._events[index]

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[EconomyEvent]:
        return iter(tuple(self._events))

    def of_kind(self, kind: EventKind | str) -> list[EconomyEvent]:
        return [e for e in self._events if e.kind == kind]

    def since(self, index: int) -> tuple[EconomyEvent, ...]:
        """Entries appended at or after position ``index``."""
        return tuple(self._events[index:])

    def __repr__(self) -> str:
        return f"EconomyLog(n_events={len(self._events)})"
