"""
Custom logging configuration for turnengine.

Extends Python's standard logging with a custom TRACE level (5) for very
verbose output (per-route and per-loan bookkeeping). Provides the TurnLogger
class and per-phase log level configuration.

Log Levels
----------
- CRITICAL (50): Critical errors
- ERROR (40): Errors (failed phases)
- WARNING (30): Warnings (failed social steps, unpaid upkeep)
- INFO (20): Informational messages (default)
- DEBUG (10): Debug messages
- TRACE (5): Very verbose messages

Examples
--------
Use logger in phases:

>>> from turnengine import logging
>>> logger = logging.getLogger("turnengine.phases.economy")
>>> logger.info("Phase executing")
>>> logger.trace("Route 3 settled")

Configure per-phase log levels:

>>> import turnengine as te
>>> log_config = {
...     "default_level": "INFO",
...     "phases": {"economy": "DEBUG", "social": "WARNING"},
... }
>>> sim = te.Simulation.init(logging=log_config)

See Also
--------
Phase.get_logger : Get logger for a specific phase
turnengine.config.validator.ConfigValidator : Validates the logging block
"""

import logging
from typing import Any

(CRITICAL, ERROR, WARNING, INFO, DEBUG) = (
    logging.CRITICAL,
    logging.ERROR,
    logging.WARNING,
    logging.INFO,
    logging.DEBUG,
)
TRACE = 5
logging.addLevelName(TRACE, "TRACE")


class TurnLogger(logging.Logger):
    """
    Custom logger with TRACE level support.

    Examples
    --------
    >>> logger = TurnLogger("test")
    >>> logger.setLevel(5)  # TRACE
    >>> logger.trace("Very verbose message")
    """

    def trace(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log message at TRACE level (5)."""
        if self.isEnabledFor(TRACE):
            self._log(TRACE, msg, args, **kwargs)


# Make the logging module hand out our subclass from now on
logging.setLoggerClass(TurnLogger)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)


def getLogger(name: str | None = None) -> TurnLogger:
    """
    Get a TurnLogger instance.

    Parameters
    ----------
    name : str, optional
        Logger name. If None, returns root logger.

    Returns
    -------
    TurnLogger
        Logger instance with trace() method.
    """
    return logging.getLogger(name)  # type: ignore[return-value]


def level_from_name(name: str) -> int:
    """Translate a configured level name (including ``TRACE``) to an int."""
    name = name.upper()
    if name == "TRACE":
        return TRACE
    return int(getattr(logging, name))
