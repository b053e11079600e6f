"""Owner accounts that loans are disbursed to and serviced from.

`AccountType` is a closed set; each member has one explicit handler here.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from turnengine.economy import AccountType
from turnengine.errors import ValidationError
from turnengine.ledger import BudgetBook, FundsLedger
from turnengine.typing import OwnerId
from turnengine.world import CharacterRepository, Planet, Repository

__all__ = ["Accounts"]


@dataclass(slots=True)
class Accounts:
    """
    Balance/credit/debit over planet budgets, faction funds and character purses.

    Planet and character owners must exist (`NotFoundError` otherwise);
    factions are implicit in the funds ledger.
    """

    budgets: BudgetBook
    funds: FundsLedger
    planets: Repository[Planet]
    characters: CharacterRepository

    def balance(self, account_type: AccountType, owner_id: OwnerId) -> int:
        handlers: dict[AccountType, Callable[[OwnerId], int]] = {
            AccountType.PLANET: self._planet_balance,
            AccountType.FACTION: self.funds.get_balance,
            AccountType.CHARACTER: self._character_balance,
        }
        return handlers[account_type](owner_id)

    def available(self, account_type: AccountType, owner_id: OwnerId) -> int:
        """Spendable balance; a faction in deficit has nothing available."""
        return max(0, self.balance(account_type, owner_id))

    def credit(self, account_type: AccountType, owner_id: OwnerId, amount: int) -> None:
        handlers: dict[AccountType, Callable[[OwnerId, int], None]] = {
            AccountType.PLANET: self._credit_planet,
            AccountType.FACTION: self.funds.add_balance,
            AccountType.CHARACTER: self._credit_character,
        }
        handlers[account_type](owner_id, amount)

    def debit(self, account_type: AccountType, owner_id: OwnerId, amount: int) -> bool:
        """Take ``amount`` if the account has it available; report success."""
        if amount < 0:
            raise ValidationError(f"debit amount must be >= 0, got {amount}")
        if self.available(account_type, owner_id) < amount:
            return False
        handlers: dict[AccountType, Callable[[OwnerId, int], None]] = {
            AccountType.PLANET: self._debit_planet,
            AccountType.FACTION: lambda owner, amt: self.funds.add_balance(owner, -amt),
            AccountType.CHARACTER: self._debit_character,
        }
        handlers[account_type](owner_id, amount)
        return True

    # planet -----------------------------------------------------------------

    def _planet_balance(self, planet_id: OwnerId) -> int:
        self.planets.require(planet_id)
        return self.budgets.get(planet_id)

    def _credit_planet(self, planet_id: OwnerId, amount: int) -> None:
        self.planets.require(planet_id)
        self.budgets.credit(planet_id, amount)

    def _debit_planet(self, planet_id: OwnerId, amount: int) -> None:
        self.budgets.try_debit(planet_id, amount)

    # character --------------------------------------------------------------

    def _character_balance(self, character_id: OwnerId) -> int:
        return self.characters.require(character_id).funds

    def _credit_character(self, character_id: OwnerId, amount: int) -> None:
        character = self.characters.require(character_id)
        character.credit(amount)
        self.characters.save(character)

    def _debit_character(self, character_id: OwnerId, amount: int) -> None:
        character = self.characters.require(character_id)
        character.deduct(amount)
        self.characters.save(character)
