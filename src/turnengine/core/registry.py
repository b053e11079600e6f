"""Registry of pipeline phases."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from turnengine.core.phase import Phase

# Global registry storage
_PHASE_REGISTRY: dict[str, type[Phase]] = {}


def get_phase(name: str) -> type[Phase]:
    """
    Retrieve a phase class from the registry by name.

    Raises
    ------
    KeyError
        If the phase name is not found in the registry.
    """
    if name not in _PHASE_REGISTRY:
        available = ", ".join(sorted(_PHASE_REGISTRY.keys()))
        raise KeyError(
            f"Phase '{name}' not found in registry. Available phases: {available}"
        )
    return _PHASE_REGISTRY[name]


def list_phases() -> list[str]:
    """Return sorted list of all registered phase names."""
    return sorted(_PHASE_REGISTRY.keys())


def clear_registry() -> None:
    """
    Clear all registrations (useful for testing).

    WARNING: This is a destructive operation. Only use in test teardown.
    """
    _PHASE_REGISTRY.clear()
