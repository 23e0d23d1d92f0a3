import logging
from typing import TextIO

from sirsim.config import Config, ConfigurationError, get_config
from sirsim.simulation import Report, SimulationDriver, SimulationResult
from sirsim.sir import (
    InvalidStateError,
    PopulationState,
    RateParameters,
    next_infected,
    next_recovered,
    next_susceptible,
    run_sir,
    step,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())


def add_stderr_logger(level: int = logging.INFO) -> "logging.StreamHandler[TextIO]":
    logger = logging.getLogger(__name__)
    handler: "logging.StreamHandler[TextIO]" = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return handler


def remove_stderr_logger(handler: logging.Handler) -> None:
    logger = logging.getLogger(__name__)
    logger.removeHandler(handler)
    handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


__all__ = [
    "add_stderr_logger",
    "Config",
    "ConfigurationError",
    "get_config",
    "InvalidStateError",
    "next_infected",
    "next_recovered",
    "next_susceptible",
    "PopulationState",
    "RateParameters",
    "remove_stderr_logger",
    "Report",
    "run_sir",
    "SimulationDriver",
    "SimulationResult",
    "step",
]
