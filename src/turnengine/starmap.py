"""Starmap geometry and pirate-base registry.

The economy consumes the `Starmap` protocol only; `InMemoryStarmap` is the
reference implementation used by the simulation facade and the tests.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Protocol

from turnengine.errors import NotFoundError
from turnengine.typing import FactionId, SystemId

__all__ = ["Starmap", "StarSystem", "InMemoryStarmap"]


class Starmap(Protocol):
    """Read-only geometry consumed by trade settlement."""

    def get_distance(self, system_a: SystemId, system_b: SystemId) -> float:
        """Symmetric, non-negative, zero iff ``system_a == system_b``."""
        ...

    def get_nearest_pirate_faction(self, system_id: SystemId) -> FactionId | None:
        """Pirate faction whose base is closest to ``system_id``, if any."""
        ...


@dataclass(slots=True, frozen=True)
class StarSystem:
    id: SystemId
    x: float
    y: float
    name: str = ""


@dataclass(slots=True)
class InMemoryStarmap:
    """
    Euclidean starmap over registered systems.

    Pirate bases are kept in registration order. When two bases are exactly
    equidistant from a system the faction registered first wins; moving an
    existing faction's base keeps its original position in that order.

    Examples
    --------
    >>> sm = InMemoryStarmap()
    >>> sm.add_system(StarSystem("a", 0.0, 0.0))
    >>> sm.add_system(StarSystem("b", 3.0, 4.0))
    >>> sm.get_distance("a", "b")
    5.0
    >>> sm.register_pirate_base("reavers", "b")
    >>> sm.get_nearest_pirate_faction("a")
    'reavers'
    """

    _systems: dict[SystemId, StarSystem] = field(default_factory=dict)
    _pirate_bases: dict[FactionId, SystemId] = field(default_factory=dict)

    def add_system(self, system: StarSystem) -> None:
        self._systems[system.id] = system

    def get_system(self, system_id: SystemId) -> StarSystem:
        try:
            return self._systems[system_id]
        except KeyError:
            raise NotFoundError("system", system_id) from None

    def register_pirate_base(self, faction_id: FactionId, system_id: SystemId) -> None:
        """Register (or move) ``faction_id``'s pirate base."""
        self.get_system(system_id)
        self._pirate_bases[faction_id] = system_id

    def pirate_bases(self) -> dict[FactionId, SystemId]:
        return dict(self._pirate_bases)

    def get_distance(self, system_a: SystemId, system_b: SystemId) -> float:
        if system_a == system_b:
            self.get_system(system_a)
            return 0.0
        a = self.get_system(system_a)
        b = self.get_system(system_b)
        return math.hypot(a.x - b.x, a.y - b.y)

    def get_nearest_pirate_faction(self, system_id: SystemId) -> FactionId | None:
        self.get_system(system_id)
        nearest: FactionId | None = None
        best = math.inf
        # strict "<" keeps the earliest registered faction on ties
        for faction_id, base in self._pirate_bases.items():
            dist = self.get_distance(system_id, base)
            if dist < best:
                best = dist
                nearest = faction_id
        return nearest
