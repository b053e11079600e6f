"""
Type aliases for turnengine.

Identifiers are opaque and hashable; the in-memory collaborators use
strings, tests often use short names like ``"planet-a"``.
"""

from collections.abc import Hashable
from typing import TypeAlias

import numpy as np
from numpy.typing import NDArray

# === Identifiers ===

FactionId: TypeAlias = Hashable
PlanetId: TypeAlias = Hashable
SystemId: TypeAlias = Hashable
FleetId: TypeAlias = Hashable
CharacterId: TypeAlias = Hashable
OwnerId: TypeAlias = Hashable

RouteId: TypeAlias = int
LoanId: TypeAlias = int

# === Vector aliases (trade settlement) ===

Float1D: TypeAlias = NDArray[np.float64]
Int1D: TypeAlias = NDArray[np.int64]
Bool1D: TypeAlias = NDArray[np.bool_]

__all__ = [
    "FactionId",
    "PlanetId",
    "SystemId",
    "FleetId",
    "CharacterId",
    "OwnerId",
    "RouteId",
    "LoanId",
    "Float1D",
    "Int1D",
    "Bool1D",
]
