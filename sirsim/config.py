import argparse
from dataclasses import dataclass, replace

from .sir import MAX_POPULATION, PopulationState, RateParameters


class ConfigurationError(ValueError):
    """Raised for missing, unparsable or out-of-range configuration values."""


@dataclass(frozen=True)
class Config:
    # Initial population
    S0: int = 175000  # Susceptible
    I0: int = 10  # Infected
    R0: int = 0  # Recovered

    # SIR model parameters (common cold)
    beta: float = 0.4  # Infection rate
    gamma: float = 0.04  # Recovery rate

    # Simulation settings
    months: int = 24  # Two years

    def validate(self) -> "Config":
        for flag, name, value in (
            ("-s/--susceptible", "S0", self.S0),
            ("-i/--infected", "I0", self.I0),
            ("-r/--recovered", "R0", self.R0),
            ("-m/--months", "months", self.months),
        ):
            if value < 0:
                raise ConfigurationError(f"{flag}: {name} must be >= 0, got {value}")

        total = self.S0 + self.I0 + self.R0
        if total > MAX_POPULATION:
            raise ConfigurationError(
                f"-s/-i/-r: total population must be <= {MAX_POPULATION}, got {total}"
            )

        for flag, name, value in (
            ("-b/--infection-rate", "beta", self.beta),
            ("-g/--recovery-rate", "gamma", self.gamma),
        ):
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(
                    f"{flag}: {name} must be in [0, 1], got {value}"
                )

        return self

    def initial_state(self) -> PopulationState:
        return PopulationState(susceptible=self.S0, infected=self.I0, recovered=self.R0)

    def rates(self) -> RateParameters:
        return RateParameters(infection_rate=self.beta, recovery_rate=self.gamma)


PRESETS = {
    "default": Config(),
    "reference": Config(S0=100000, I0=25000, R0=500, beta=0.05, gamma=0.02, months=12),
}


def get_config(name: str) -> Config:
    if name not in PRESETS:
        available = ", ".join(PRESETS.keys())
        raise ConfigurationError(
            f"Unknown config: '{name}'. Available configs: {available}"
        )
    return PRESETS[name]


class ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises ConfigurationError instead of exiting."""

    def error(self, message):
        raise ConfigurationError(message)


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="sirsim",
        description="Discrete-time SIR epidemic simulation with monthly reports.",
    )
    defaults = PRESETS["default"]

    parser.add_argument(
        "-s", "--susceptible", type=int, dest="S0",
        help=f"Initial susceptible count (default: {defaults.S0})",
    )
    parser.add_argument(
        "-i", "--infected", type=int, dest="I0",
        help=f"Initial infected count (default: {defaults.I0})",
    )
    parser.add_argument(
        "-r", "--recovered", type=int, dest="R0",
        help=f"Initial recovered count (default: {defaults.R0})",
    )
    parser.add_argument(
        "-b", "--infection-rate", type=float, dest="beta",
        help=f"Infection rate beta in [0, 1] (default: {defaults.beta})",
    )
    parser.add_argument(
        "-g", "--recovery-rate", type=float, dest="gamma",
        help=f"Recovery rate gamma in [0, 1] (default: {defaults.gamma})",
    )
    parser.add_argument(
        "-m", "--months", type=int, dest="months",
        help=f"Number of months to simulate (default: {defaults.months})",
    )
    parser.add_argument(
        "--config",
        type=str,
        default="default",
        help="Which configuration to start from",
    )
    parser.add_argument(
        "--csv",
        action="store_true",
        help="Print reports as 'month, S, I, R' rows",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=0,
        help="Threads used to evaluate the S, I and R rules (0 runs them inline)",
    )
    parser.add_argument(
        "--plot",
        type=str,
        default=None,
        help="Save a plot of the trajectory to this path",
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default=None,
        help="Write a tabular log of the run to this directory",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug output (including total population per month) to stderr",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> Config:
    """
    Builds a validated Config from parsed arguments.

    Flags that were given override the values of the selected preset.
    """
    config = get_config(args.config)
    overrides = {
        name: getattr(args, name)
        for name in ("S0", "I0", "R0", "beta", "gamma", "months")
        if getattr(args, name) is not None
    }
    if args.workers < 0:
        raise ConfigurationError(f"--workers must be >= 0, got {args.workers}")
    return replace(config, **overrides).validate()
