"""Built-in turn phases.

Importing this package registers every phase used by
``default_pipeline.yml``:

- turn.py → advance_clock, lifecycle, affection, ransom, morale, intrigue
- social.py → social
- economy.py → economy
"""

from turnengine.phases.economy import Economy
from turnengine.phases.social import Social
from turnengine.phases.turn import (
    AdvanceClock,
    Affection,
    Intrigue,
    Lifecycle,
    Morale,
    Ransom,
)

__all__ = [
    "AdvanceClock",
    "Lifecycle",
    "Social",
    "Affection",
    "Ransom",
    "Morale",
    "Intrigue",
    "Economy",
]
