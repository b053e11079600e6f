"""Centralized configuration validation for turnengine."""

from __future__ import annotations

import warnings
from pathlib import Path
from typing import Any

import yaml

from turnengine.world import Rank


class ConfigValidator:
    """
    Centralized validation for simulation configuration.

    All validation happens once at Simulation.init() to ensure:
    - Type correctness
    - Valid parameter ranges
    - Relationship constraints between parameters
    - Clear error messages with actionable feedback
    """

    VALID_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

    INT_PARAMS = (
        "start_year",
        "start_month",
        "months_per_year",
        "base_infra_upkeep_per_level",
        "trade_base_unit_value",
        "tariff_min_percent",
        "tariff_max_percent",
        "loan_min_payment",
    )

    FLOAT_PARAMS = (
        "base_ship_maint_pct",
        "fleet_maint_skill_reduction",
        "fleet_maint_consc_reduction",
        "gov_infra_skill_reduction",
        "gov_consc_reduction",
        "trade_distance_scale",
        "loan_payment_pct",
        "smuggling_loss_at_source",
        "smuggling_cut_to_pirates",
    )

    BOOL_PARAMS = ("allow_deficit_upkeep",)

    VALID_RANKS = {r.value for r in Rank}

    @staticmethod
    def validate_config(cfg: dict[str, Any]) -> None:
        """
        Validate all configuration parameters.

        Parameters
        ----------
        cfg : dict
            Configuration dictionary to validate.

        Raises
        ------
        ValueError
            If any validation check fails.
        """
        ConfigValidator._validate_types(cfg)
        ConfigValidator._validate_ranges(cfg)
        ConfigValidator._validate_relationships(cfg)

        if "salary_by_rank" in cfg:
            ConfigValidator._validate_salaries(cfg["salary_by_rank"])

        if "logging" in cfg:
            ConfigValidator._validate_logging(cfg["logging"])

    @staticmethod
    def _validate_types(cfg: dict[str, Any]) -> None:
        """
        Ensure correct types for configuration parameters.

        Raises
        ------
        ValueError
            If any parameter has incorrect type.
        """
        for key in ConfigValidator.INT_PARAMS:
            if key not in cfg:
                continue
            val = cfg[key]
            if isinstance(val, bool) or not isinstance(val, int):
                raise ValueError(
                    f"Config parameter '{key}' must be int, got {type(val).__name__}"
                )

        # accept int or float
        for key in ConfigValidator.FLOAT_PARAMS:
            if key not in cfg:
                continue
            val = cfg[key]
            if isinstance(val, bool) or not isinstance(val, (int, float)):
                raise ValueError(
                    f"Config parameter '{key}' must be float, got {type(val).__name__}"
                )

        for key in ConfigValidator.BOOL_PARAMS:
            if key not in cfg:
                continue
            val = cfg[key]
            if not isinstance(val, bool):
                raise ValueError(
                    f"Config parameter '{key}' must be bool, got {type(val).__name__}"
                )

        if "pipeline_path" in cfg:
            val = cfg["pipeline_path"]
            if val is not None and not isinstance(val, (str, Path)):
                raise ValueError(
                    f"Config parameter 'pipeline_path' must be str or None, "
                    f"got {type(val).__name__}"
                )

    @staticmethod
    def _validate_ranges(cfg: dict[str, Any]) -> None:
        """
        Ensure parameters are in valid ranges.

        Raises
        ------
        ValueError
            If any parameter is out of valid range.
        """
        # (min_val, max_val); None means unbounded
        constraints = {
            # Calendar
            "start_month": (1, None),
            "months_per_year": (1, None),
            # Upkeep
            "base_ship_maint_pct": (0.0, 1.0),
            "base_infra_upkeep_per_level": (0, None),
            "fleet_maint_skill_reduction": (0.0, 1.0),
            "fleet_maint_consc_reduction": (0.0, 1.0),
            "gov_infra_skill_reduction": (0.0, 1.0),
            "gov_consc_reduction": (0.0, 1.0),
            # Trade
            "trade_base_unit_value": (1, None),
            "trade_distance_scale": (1e-9, None),
            "tariff_min_percent": (0, 100),
            "tariff_max_percent": (0, 100),
            # Loans
            "loan_payment_pct": (0.0, 1.0),
            "loan_min_payment": (1, None),
            # Black market
            "smuggling_loss_at_source": (0.0, 1.0),
            "smuggling_cut_to_pirates": (0.0, 1.0),
        }

        for key, (min_val, max_val) in constraints.items():
            if key not in cfg:
                continue

            val = cfg[key]

            if min_val is not None and val < min_val:
                raise ValueError(
                    f"Config parameter '{key}' must be >= {min_val}, got {val}"
                )

            if max_val is not None and val > max_val:
                raise ValueError(
                    f"Config parameter '{key}' must be <= {max_val}, got {val}"
                )

    @staticmethod
    def _validate_relationships(cfg: dict[str, Any]) -> None:
        """
        Validate cross-parameter constraints.

        Raises
        ------
        ValueError
            If a hard constraint between parameters is violated.
        """
        start_month = cfg.get("start_month", 1)
        months_per_year = cfg.get("months_per_year", 12)
        if start_month > months_per_year:
            raise ValueError(
                f"start_month ({start_month}) must be <= "
                f"months_per_year ({months_per_year})"
            )

        t_min = cfg.get("tariff_min_percent", 0)
        t_max = cfg.get("tariff_max_percent", 100)
        if t_min > t_max:
            raise ValueError(
                f"tariff_min_percent ({t_min}) must be <= "
                f"tariff_max_percent ({t_max})"
            )

        # Reductions that can sum past 100% zero out upkeep for strong commanders
        fleet_red = cfg.get("fleet_maint_skill_reduction", 0.0) + cfg.get(
            "fleet_maint_consc_reduction", 0.0
        )
        gov_red = cfg.get("gov_infra_skill_reduction", 0.0) + cfg.get(
            "gov_consc_reduction", 0.0
        )
        if fleet_red > 1.0 or gov_red > 1.0:
            warnings.warn(
                "Commander reductions sum past 1.0; upkeep will be free for "
                "top-rated commanders.",
                UserWarning,
                stacklevel=3,
            )

    @staticmethod
    def _validate_salaries(table: Any) -> None:
        """
        Validate the rank -> monthly salary table.

        Raises
        ------
        ValueError
            If the table is not a dict, names an unknown rank, or holds a
            salary that is not a non-negative int.
        """
        if not isinstance(table, dict):
            raise ValueError(
                f"salary_by_rank must be dict, got {type(table).__name__}"
            )

        for rank, salary in table.items():
            if rank not in ConfigValidator.VALID_RANKS:
                raise ValueError(
                    f"Unknown rank '{rank}' in salary_by_rank. "
                    f"Must be one of {sorted(ConfigValidator.VALID_RANKS)}"
                )
            if isinstance(salary, bool) or not isinstance(salary, int):
                raise ValueError(
                    f"Salary for rank '{rank}' must be int, "
                    f"got {type(salary).__name__}"
                )
            if salary < 0:
                raise ValueError(
                    f"Salary for rank '{rank}' must be >= 0, got {salary}"
                )

    @staticmethod
    def _validate_logging(log_config: dict[str, Any]) -> None:
        """
        Validate logging configuration.

        Parameters
        ----------
        log_config : dict
            Logging configuration dictionary with keys:
            - default_level: str (e.g., 'INFO', 'DEBUG')
            - phases: dict[str, str] (per-phase overrides)

        Raises
        ------
        ValueError
            If logging configuration is invalid.
        """
        if not isinstance(log_config, dict):
            raise ValueError(
                f"Logging config must be dict, got {type(log_config).__name__}"
            )

        if "default_level" in log_config:
            level = log_config["default_level"]
            if not isinstance(level, str):
                raise ValueError(
                    f"Logging default_level must be str, got {type(level).__name__}"
                )

            if level.upper() not in ConfigValidator.VALID_LOG_LEVELS:
                raise ValueError(
                    f"Invalid log level '{level}'. "
                    f"Must be one of {ConfigValidator.VALID_LOG_LEVELS}"
                )

        if "phases" in log_config:
            phases = log_config["phases"]
            if not isinstance(phases, dict):
                raise ValueError(
                    f"Logging phases must be dict, got {type(phases).__name__}"
                )

            for phase_name, level in phases.items():
                if not isinstance(phase_name, str):
                    raise ValueError(
                        f"Phase name must be str, got {type(phase_name).__name__}"
                    )

                if not isinstance(level, str):
                    raise ValueError(
                        f"Log level for phase '{phase_name}' must be str, "
                        f"got {type(level).__name__}"
                    )

                if level.upper() not in ConfigValidator.VALID_LOG_LEVELS:
                    raise ValueError(
                        f"Invalid log level '{level}' for phase '{phase_name}'. "
                        f"Must be one of {ConfigValidator.VALID_LOG_LEVELS}"
                    )

    @staticmethod
    def validate_pipeline_path(pipeline_path: str | Path) -> None:
        """
        Validate pipeline path exists and is readable.

        Raises
        ------
        ValueError
            If path does not exist or is not a file.
        """
        path = Path(pipeline_path)

        if not path.exists():
            raise ValueError(f"Pipeline path '{pipeline_path}' does not exist")

        if not path.is_file():
            raise ValueError(f"Pipeline path '{pipeline_path}' is not a file")

        if path.suffix not in (".yml", ".yaml"):
            warnings.warn(
                f"Pipeline path '{pipeline_path}' does not have .yml/.yaml extension",
                UserWarning,
                stacklevel=2,
            )

    @staticmethod
    def validate_pipeline_yaml(yaml_path: str | Path) -> None:
        """
        Validate pipeline YAML file structure and phase references.

        Raises
        ------
        ValueError
            If YAML structure is invalid or references unknown phases.
        """
        from turnengine.core.registry import list_phases

        path = Path(yaml_path)
        with open(path) as f:
            config = yaml.safe_load(f)

        if not isinstance(config, dict):
            raise ValueError(
                f"Pipeline YAML must be a dictionary, got {type(config).__name__}"
            )

        if "phases" not in config:
            raise ValueError(f"Pipeline YAML must have 'phases' key: {yaml_path}")

        specs = config["phases"]
        if not isinstance(specs, list):
            raise ValueError(
                f"Pipeline 'phases' must be a list, got {type(specs).__name__}"
            )

        registered = set(list_phases())
        seen: set[str] = set()
        for i, name in enumerate(specs):
            if not isinstance(name, str):
                raise ValueError(
                    f"Phase entry at index {i} must be str, got {type(name).__name__}"
                )
            name = name.strip()
            if name not in registered:
                raise ValueError(
                    f"Phase '{name}' not found in registry. "
                    f"Available phases: {sorted(registered)}"
                )
            if name in seen:
                raise ValueError(f"Phase '{name}' listed more than once")
            seen.add(name)
