"""Configuration module for turnengine."""

from turnengine.config.schema import Config, EconomyTuning
from turnengine.config.validator import ConfigValidator

__all__ = ["Config", "ConfigValidator", "EconomyTuning"]
