"""World aggregates and in-memory repositories.

Planets, fleets and characters live outside the turn kernel; the economy
reads them to enumerate upkeep and writes back only through ``save``. The
classes here carry just the attributes the kernel consumes.
"""

from __future__ import annotations

from collections.abc import Hashable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

from turnengine.errors import NotFoundError
from turnengine.typing import CharacterId, FactionId, FleetId, PlanetId, SystemId

__all__ = [
    "Rank",
    "SkillSet",
    "Personality",
    "Character",
    "Ship",
    "Fleet",
    "Planet",
    "Repository",
    "CharacterRepository",
]

T = TypeVar("T")


class Rank(Enum):
    """Service rank; sets the monthly salary a character draws."""

    CIVILIAN = "civilian"
    LIEUTENANT = "lieutenant"
    CAPTAIN = "captain"
    MAJOR = "major"
    COLONEL = "colonel"
    GENERAL = "general"
    LEADER = "leader"


@dataclass(slots=True, frozen=True)
class SkillSet:
    """Character skills on a 0..100 scale."""

    military: int = 0
    economy: int = 0
    intelligence: int = 0
    research: int = 0


@dataclass(slots=True, frozen=True)
class Personality:
    """Big-five facets on a 0..100 scale."""

    openness: int = 50
    conscientiousness: int = 50
    extraversion: int = 50
    agreeableness: int = 50
    neuroticism: int = 50


@dataclass(slots=True)
class Character:
    id: CharacterId
    name: str = ""
    faction_id: FactionId | None = None
    skills: SkillSet = field(default_factory=SkillSet)
    personality: Personality = field(default_factory=Personality)
    funds: int = 0
    alive: bool = True
    rank: Rank = Rank.CIVILIAN

    def credit(self, amount: int) -> None:
        if amount > 0:
            self.funds += amount

    def deduct(self, amount: int) -> bool:
        """Take ``amount`` from the purse if it covers it."""
        if amount < 0 or self.funds < amount:
            return False
        self.funds -= amount
        return True


@dataclass(slots=True, frozen=True)
class Ship:
    id: Hashable
    cost: float


@dataclass(slots=True)
class Fleet:
    id: FleetId
    faction_id: FactionId
    system_id: SystemId | None = None
    ships: list[Ship] = field(default_factory=list)
    commander_id: CharacterId | None = None

    @property
    def total_cost(self) -> float:
        return sum(ship.cost for ship in self.ships)


@dataclass(slots=True)
class Planet:
    id: PlanetId
    system_id: SystemId
    faction_id: FactionId
    name: str = ""
    infrastructure_level: int = 10
    governor_id: CharacterId | None = None


@dataclass(slots=True)
class Repository(Generic[T]):
    """
    Insertion-ordered in-memory store keyed by each item's ``id``.

    Iteration order is save order, which keeps upkeep deterministic.
    """

    kind: str
    _items: dict[Hashable, T] = field(default_factory=dict)

    def get(self, ident: Hashable) -> T | None:
        return self._items.get(ident)

    def require(self, ident: Hashable) -> T:
        """Return the item or raise `NotFoundError`."""
        item = self._items.get(ident)
        if item is None:
            raise NotFoundError(self.kind, ident)
        return item

    def all(self) -> list[T]:
        return list(self._items.values())

    def save(self, item: T) -> None:
        self._items[item.id] = item  # type: ignore[attr-defined]

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items.values()))

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, ident: object) -> bool:
        return ident in self._items


@dataclass(slots=True)
class CharacterRepository(Repository[Character]):
    kind: str = "character"

    def living(self) -> list[Character]:
        return [c for c in self._items.values() if c.alive]
