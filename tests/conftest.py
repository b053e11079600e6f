"""Pytest configuration and fixtures for turnengine tests."""

import os

import pytest

import turnengine.phases  # noqa: F401 - register all phases
from turnengine import logging
from turnengine.engine import EconomicEngine
from turnengine.simulation import Simulation

from tests.helpers.factories import make_engine


@pytest.fixture
def clean_registry():
    """
    Save registry state, clear it for the test, then restore it.

    Request explicitly from tests that register throwaway phases. DO NOT use
    autouse=True, as integration tests rely on the built-in phases.
    """
    # noinspection PyProtectedMember
    from turnengine.core.registry import _PHASE_REGISTRY, clear_registry

    saved = dict(_PHASE_REGISTRY)
    clear_registry()

    yield

    _PHASE_REGISTRY.clear()
    _PHASE_REGISTRY.update(saved)


@pytest.fixture
def engine() -> EconomicEngine:
    """Two planets 100 apart, no fleets, characters or routes."""
    return make_engine()


@pytest.fixture
def tiny_sim() -> Simulation:
    """A simulation with default config and no world state."""
    return Simulation.init(start_year=3599, start_month=1)


@pytest.fixture(autouse=True)
def mute_turnengine_logs(caplog):
    # CI coverage run executes all logging; everything else stays quiet
    if os.environ.get("COVERAGE_RUN") == "true":
        level = logging.DEBUG
    else:
        level = logging.ERROR

    caplog.set_level(level, logger="turnengine")
    logging.getLogger("turnengine").setLevel(level)


@pytest.fixture
def simple_clock():
    from turnengine.clock import GameClock

    return GameClock(3599, 1, 12)
