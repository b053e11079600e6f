"""Contracts of the collaborators the pipeline drives as opaque phases.

Only the call surface matters to the turn kernel. Any object with the right
method satisfies a protocol; unwired collaborators (``None``) turn their
phase into a no-op.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from turnengine.world import Character

__all__ = [
    "CharacterLifecycle",
    "IntentPlanner",
    "InteractionResolver",
    "SocialTick",
    "AffectionService",
    "RansomService",
    "MoraleService",
    "IntrigueService",
    "Services",
]


class CharacterLifecycle(Protocol):
    def process_monthly(self) -> None:
        """Aging, births and deaths for the month."""
        ...


class IntentPlanner(Protocol):
    def plan_monthly_intents(self, actor: Character) -> Iterable[Any]: ...


class InteractionResolver(Protocol):
    def resolve(self, intents: Sequence[Any]) -> Iterable[Any]:
        """Turn intents into social events."""
        ...


class SocialTick(Protocol):
    def apply_events(self, events: Sequence[Any]) -> None: ...


class AffectionService(Protocol):
    def update_affection(self) -> None: ...


class RansomService(Protocol):
    def try_request_ransoms(self) -> None: ...


class MoraleService(Protocol):
    def apply_morale_effects(self) -> None: ...


class IntrigueService(Protocol):
    def tick_plots(self) -> None: ...


@dataclass(slots=True)
class Services:
    """Collaborators wired into a `Simulation`; all optional."""

    lifecycle: CharacterLifecycle | None = None
    planner: IntentPlanner | None = None
    resolver: InteractionResolver | None = None
    social_tick: SocialTick | None = None
    affection: AffectionService | None = None
    ransom: RansomService | None = None
    morale: MoraleService | None = None
    intrigue: IntrigueService | None = None
