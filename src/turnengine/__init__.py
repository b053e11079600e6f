"""
turnengine - Turn Simulation Pipeline and Economic Engine
=========================================================

Per-turn simulation kernel of a persistent strategy game. Each turn runs an
ordered pipeline of phases (calendar, lifecycle, social tick, affection,
ransoms, morale, intrigue, economy), each inside its own fault-isolation
boundary, and the economy phase settles fleet maintenance, infrastructure
upkeep, trade routes and loans against integer faction and planet balances.

Quick Start
-----------
>>> import turnengine as te
>>> sim = te.Simulation.init(start_year=3599, start_month=1)
>>> reports = sim.run(12)
>>> sim.clock.stamp()
(3600, 1)
>>> all(r.succeeded for r in reports)
True

Custom configuration via YAML file:

>>> sim = te.Simulation.init(config="my_config.yml", loan_payment_pct=0.2)

Key Concepts
------------
**Phase Pipeline**
  Phases execute in the exact order of ``default_pipeline.yml`` (or a custom
  ``pipeline_path``). A failing phase is logged and reported; the turn
  continues with the next phase.

**Economy Event Log**
  Every money movement the economy makes is appended to
  ``sim.economy.log`` stamped with the in-game (year, month).

**Deterministic**
  No randomness in the kernel; identical state and collaborator outputs give
  identical balances, logs and ids.

Public API
----------
Simulation
    Facade: build, process turns, inspect state.
EconomicEngine
    Trade routes, tariffs, loans and end-of-turn upkeep.
Phase, phase
    Base class and decorator for defining custom phases.
Pipeline, TurnReport
    Phase ordering and per-turn outcomes.

Notes
-----
- Time scale: 1 turn = 1 month
- Configuration precedence: defaults.yml → user config → kwargs
- Currency is integer credits everywhere
"""

from __future__ import annotations

__version__: str = "0.1.0"

from . import logging  # noqa: E402 (circular‑safe)
from .clock import GameClock  # noqa: E402
from .core import (  # noqa: E402 (circular‑safe)
    Phase,
    PhaseOutcome,
    Pipeline,
    StepOutcome,
    TurnReport,
    get_phase,
    list_phases,
    phase,
)
from .economy import (  # noqa: E402
    AccountType,
    EconomyEvent,
    EventKind,
    Loan,
    LoanStatus,
    TariffPolicy,
    TradeRoute,
)
from .engine import EconomicEngine  # noqa: E402
from .errors import (  # noqa: E402
    NotFoundError,
    TransientPhaseFailure,
    TurnEngineError,
    ValidationError,
)
from .ledger import BudgetBook, FundsLedger  # noqa: E402
from .services import Services  # noqa: E402
from .starmap import InMemoryStarmap, StarSystem  # noqa: E402
from .world import (  # noqa: E402
    Character,
    Fleet,
    Personality,
    Planet,
    Rank,
    Ship,
    SkillSet,
)
from .simulation import Simulation  # noqa: E402  (circular‑safe)

__all__ = [
    "Simulation",
    "__version__",
    # Pipeline
    "Phase",
    "phase",
    "Pipeline",
    "PhaseOutcome",
    "StepOutcome",
    "TurnReport",
    "get_phase",
    "list_phases",
    # Economy
    "EconomicEngine",
    "AccountType",
    "EconomyEvent",
    "EventKind",
    "Loan",
    "LoanStatus",
    "TariffPolicy",
    "TradeRoute",
    "FundsLedger",
    "BudgetBook",
    # World
    "GameClock",
    "InMemoryStarmap",
    "StarSystem",
    "Character",
    "Fleet",
    "Personality",
    "Planet",
    "Rank",
    "Ship",
    "SkillSet",
    "Services",
    # Errors
    "TurnEngineError",
    "NotFoundError",
    "ValidationError",
    "TransientPhaseFailure",
    # Utilities
    "logging",
]
