"""Integer balance stores: faction treasuries and planet budgets.

Both stores are plain read-modify-write maps. The turn runs on one thread,
so a single ``dict`` update is the whole atomicity story; the contract that
matters is that a balance always equals the sum of every delta applied to it.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from numbers import Integral

from turnengine.logging import getLogger
from turnengine.typing import FactionId, PlanetId

__all__ = ["FundsLedger", "BudgetBook"]

log = getLogger(__name__)


@dataclass(slots=True)
class FundsLedger:
    """
    Per-faction treasury.

    Unseen factions hold 0. No floor or ceiling is enforced: a negative
    balance is deficit spending.

    Examples
    --------
    >>> ledger = FundsLedger()
    >>> ledger.add_balance("red", 10)
    >>> ledger.add_balance("red", -25)
    >>> ledger.get_balance("red")
    -15
    >>> ledger.get_balance("blue")
    0
    """

    _balances: dict[FactionId, int] = field(default_factory=dict)

    def get_balance(self, faction_id: FactionId) -> int:
        return self._balances.get(faction_id, 0)

    def add_balance(self, faction_id: FactionId, delta: int) -> None:
        """Apply a signed delta to the faction's balance."""
        if not isinstance(delta, Integral):
            raise TypeError(f"delta must be integral, got {type(delta).__name__}")
        delta = int(delta)
        new = self._balances.get(faction_id, 0) + delta
        self._balances[faction_id] = new
        log.trace("  funds[%s] %+d -> %d", faction_id, delta, new)

    def can_cover(self, faction_id: FactionId, amount: int) -> bool:
        return self.get_balance(faction_id) >= amount

    def factions(self) -> Iterator[FactionId]:
        return iter(self._balances)

    def __len__(self) -> int:
        return len(self._balances)


@dataclass(slots=True)
class BudgetBook:
    """Per-planet local budget; debits never take a budget below zero."""

    _budgets: dict[PlanetId, int] = field(default_factory=dict)

    def get(self, planet_id: PlanetId) -> int:
        return self._budgets.get(planet_id, 0)

    def credit(self, planet_id: PlanetId, credits: int) -> None:
        if credits <= 0:
            return
        self._budgets[planet_id] = self._budgets.get(planet_id, 0) + credits

    def try_debit(self, planet_id: PlanetId, credits: int) -> bool:
        """Debit ``credits`` if the budget covers them; report success."""
        current = self._budgets.get(planet_id, 0)
        if credits < 0 or current < credits:
            return False
        self._budgets[planet_id] = current - credits
        return True
