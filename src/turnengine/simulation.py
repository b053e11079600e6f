# src/turnengine/simulation.py
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Mapping

# noinspection PyPackageRequirements
import yaml

import turnengine.phases  # noqa: F401 - needed to register phases
from turnengine.clock import GameClock
from turnengine.config import Config, ConfigValidator, EconomyTuning
from turnengine.core.default_pipeline import create_default_pipeline
from turnengine.core.outcome import TurnReport
from turnengine.core.phase import Phase
from turnengine.core.pipeline import Pipeline
from turnengine.engine import EconomicEngine
from turnengine.ledger import FundsLedger
from turnengine.logging import getLogger, level_from_name
from turnengine.services import Services
from turnengine.starmap import InMemoryStarmap, Starmap
from turnengine.world import CharacterRepository, Character, Fleet, Planet, Repository

__all__ = ["Simulation"]

log = getLogger(__name__)


# helpers
# ---------------------------------------------------------------------------
def _read_yaml(obj: str | Path | Mapping[str, Any] | None) -> Dict[str, Any]:
    """Return a plain dict, {} if *obj* is None."""
    if obj is None:
        return {}
    if isinstance(obj, Mapping):
        return dict(obj)
    p = Path(obj)
    with p.open("rt", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, Mapping):
        raise TypeError(f"config root must be mapping, got {type(data)!r}")
    return dict(data)


def _package_defaults() -> Dict[str, Any]:
    """Load turnengine/defaults.yml"""
    txt = resources.files("turnengine").joinpath("defaults.yml").read_text()
    return yaml.safe_load(txt) or {}


def _fill(repo: Repository[Any], items: Iterable[Any] | None) -> Repository[Any]:
    for item in items or ():
        repo.save(item)
    return repo


@dataclass(slots=True)
class Simulation:
    """
    One game world plus the pipeline that advances it a month at a time.

    Build with `Simulation.init`; call `process_all_turn_events` (or `run`)
    to advance. A turn always runs every phase in the pipeline; failures
    come back in the returned `TurnReport` instead of being raised.

    Attributes
    ----------
    clock : GameClock
        Calendar; advanced by the ``advance_clock`` phase.
    funds : FundsLedger
        Faction treasuries.
    economy : EconomicEngine
        Trade routes, loans, tariffs and the economy event log.
    planets, fleets : Repository
        World aggregates.
    characters : CharacterRepository
        Every character, living or dead.
    starmap : Starmap
        Distances and pirate bases.
    services : Services
        Opaque collaborators driven by the social and delegating phases.
    social_log : list
        Social events produced by the intent resolver, in resolution order.
    pipeline : Pipeline
        Phase order for each turn.
    config : Config
        Validated configuration.
    turn : int
        Number of turns processed so far.

    Examples
    --------
    >>> import turnengine as te
    >>> sim = te.Simulation.init(start_year=3000, start_month=12)
    >>> report = sim.process_all_turn_events(1)
    >>> report.succeeded, sim.clock.stamp()
    (True, (3001, 1))
    """

    clock: GameClock
    funds: FundsLedger
    economy: EconomicEngine
    planets: Repository[Planet]
    fleets: Repository[Fleet]
    characters: CharacterRepository
    starmap: Starmap
    services: Services
    pipeline: Pipeline
    config: Config
    social_log: list[Any] = field(default_factory=list)
    turn: int = 0

    # Constructor
    # ---------------------------------------------------------------------
    @classmethod
    def init(
        cls,
        config: str | Path | Mapping[str, Any] | None = None,
        *,
        services: Services | None = None,
        starmap: Starmap | None = None,
        planets: Iterable[Planet] | None = None,
        fleets: Iterable[Fleet] | None = None,
        characters: Iterable[Character] | None = None,
        funds: FundsLedger | None = None,
        **overrides: Any,  # anything here wins last
    ) -> Simulation:
        """
        Build a Simulation.

        Order of precedence (later overrides earlier):

            1. package defaults  (turnengine/defaults.yml)
            2. *config*  (Path / str / Mapping / None)
            3. explicit keyword arguments (**overrides)

        World state (``starmap``, ``planets``, ``fleets``, ``characters``,
        ``funds``) and ``services`` are passed as objects, not config.

        Raises
        ------
        ValueError
            If the merged configuration or the pipeline YAML is invalid.
        """
        # 1 + 2 + 3 → one merged dict
        cfg_dict: Dict[str, Any] = _package_defaults()
        cfg_dict.update(_read_yaml(config))
        cfg_dict.update(overrides)

        ConfigValidator.validate_config(cfg_dict)

        pipeline_path = cfg_dict.get("pipeline_path")
        if pipeline_path is not None:
            ConfigValidator.validate_pipeline_path(pipeline_path)
            ConfigValidator.validate_pipeline_yaml(pipeline_path)
            pipeline = Pipeline.from_yaml(pipeline_path)
        else:
            pipeline = create_default_pipeline()

        if "logging" in cfg_dict:
            cls._configure_logging(cfg_dict["logging"])

        cfg = Config(
            start_year=int(cfg_dict["start_year"]),
            start_month=int(cfg_dict["start_month"]),
            months_per_year=int(cfg_dict["months_per_year"]),
            economy=EconomyTuning.from_mapping(cfg_dict),
        )

        clock = GameClock(cfg.start_year, cfg.start_month, cfg.months_per_year)
        funds = funds if funds is not None else FundsLedger()
        starmap = starmap if starmap is not None else InMemoryStarmap()
        planet_repo: Repository[Planet] = _fill(Repository("planet"), planets)
        fleet_repo: Repository[Fleet] = _fill(Repository("fleet"), fleets)
        char_repo = CharacterRepository()
        _fill(char_repo, characters)

        economy = EconomicEngine(
            clock=clock,
            starmap=starmap,
            funds=funds,
            planets=planet_repo,
            fleets=fleet_repo,
            characters=char_repo,
            tuning=cfg.economy,
        )

        log.debug(
            "Simulation ready at %d-%02d: %d planet(s), %d fleet(s), %d character(s)",
            cfg.start_year,
            cfg.start_month,
            len(planet_repo),
            len(fleet_repo),
            len(char_repo),
        )
        return cls(
            clock=clock,
            funds=funds,
            economy=economy,
            planets=planet_repo,
            fleets=fleet_repo,
            characters=char_repo,
            starmap=starmap,
            services=services if services is not None else Services(),
            pipeline=pipeline,
            config=cfg,
        )

    @staticmethod
    def _configure_logging(log_config: Dict[str, Any]) -> None:
        """
        Configure logging levels for turnengine loggers.

        Parameters
        ----------
        log_config : dict
            Logging configuration with keys:
            - default_level: str (e.g., 'INFO', 'DEBUG', 'TRACE')
            - phases: dict[str, str] (per-phase overrides)
        """
        default_level = log_config.get("default_level", "INFO")
        logging.getLogger("turnengine").setLevel(level_from_name(default_level))

        for phase_name, level in (log_config.get("phases") or {}).items():
            logger_name = f"turnengine.phases.{phase_name}"
            logging.getLogger(logger_name).setLevel(level_from_name(level))

    # public API
    # ---------------------------------------------------------------------
    def process_all_turn_events(self, turn_number: int | None = None) -> TurnReport:
        """
        Run every pipeline phase once, in order.

        Parameters
        ----------
        turn_number : int, optional
            Identifying token used in logs and the report. Defaults to the
            next turn count.

        Returns
        -------
        TurnReport
            Per-phase outcomes. Never raises for a phase failure.
        """
        self.turn += 1
        number = self.turn if turn_number is None else turn_number
        log.info("=== Turn %s ===", number)
        report = self.pipeline.execute(self, turn_number=number)
        if not report.succeeded:
            log.warning(
                "Turn %s finished with %d failure(s)",
                number,
                sum(1 for _ in report.failures()),
            )
        return report

    def run(self, n_turns: int) -> list[TurnReport]:
        """Process *n_turns* consecutive turns and return their reports."""
        return [self.process_all_turn_events() for _ in range(int(n_turns))]

    def get_phase(self, name: str) -> Phase:
        """
        Get phase instance from pipeline by name.

        Raises
        ------
        KeyError
            If the phase is not in the pipeline.
        """
        for p in self.pipeline.phases:
            if p.name == name:
                return p
        raise KeyError(
            f"Phase '{name}' not found in pipeline. "
            f"Available: {self.pipeline.phase_names}"
        )
