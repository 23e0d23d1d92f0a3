import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Callable, Iterator, List, NamedTuple, Optional

import numpy as np

from .sir import InvalidStateError, PopulationState, RateParameters, step

logger = logging.getLogger(__name__)

MONTHS_PER_YEAR = 12


class Report(NamedTuple):
    year: int
    month: int  # 1-12
    susceptible: int
    infected: int
    recovered: int

    @property
    def month_index(self) -> int:
        """Number of months elapsed at the time of this report."""
        return self.year * MONTHS_PER_YEAR + self.month

    def format(self) -> str:
        return (
            f"Year {self.year}, Month {self.month} - "
            f"Susceptible: {self.susceptible}, "
            f"Infected: {self.infected}, "
            f"Recovered: {self.recovered}"
        )

    def format_csv(self) -> str:
        return f"{self.month_index}, {self.susceptible}, {self.infected}, {self.recovered}"


class SimulationResult:
    def __init__(
        self,
        initial_state: PopulationState,
        rates: RateParameters,
        reports: List[Report],
    ):
        self.initial_state = initial_state
        self.rates = rates
        self.reports = reports

        self.t = np.arange(len(reports) + 1)
        self.S = np.array(
            [initial_state.susceptible] + [r.susceptible for r in reports], dtype=np.int64
        )
        self.I = np.array(
            [initial_state.infected] + [r.infected for r in reports], dtype=np.int64
        )
        self.R = np.array(
            [initial_state.recovered] + [r.recovered for r in reports], dtype=np.int64
        )

    @property
    def final_state(self) -> PopulationState:
        return PopulationState(
            susceptible=int(self.S[-1]),
            infected=int(self.I[-1]),
            recovered=int(self.R[-1]),
        )

    @property
    def peak_infected(self) -> int:
        return int(np.max(self.I))

    @property
    def total_infected(self) -> int:
        return int(self.R[-1] + self.I[-1])

    @property
    def epidemic_duration(self) -> int:
        months_above_one = np.where(self.I >= 1)[0]
        return int(months_above_one[-1]) if len(months_above_one) > 0 else 0


class SimulationDriver:
    """
    Advances a population month by month and emits one report per month.

    The driver owns the current state and replaces it wholesale after every
    step. Every run starts over from the initial state.
    """

    def __init__(
        self,
        initial_state: PopulationState,
        rates: RateParameters,
        total_months: int,
    ):
        if total_months < 0:
            raise ValueError(f"total_months must be >= 0, got {total_months}")

        self.initial_state = initial_state
        self.rates = rates
        self.total_months = total_months
        self.state = initial_state

    def reports(self, executor: Optional[Executor] = None) -> Iterator[Report]:
        """
        Yields the report for each simulated month in chronological order.

        :param executor: Optional executor used to evaluate the three rules
        :raises InvalidStateError: If a step would make a count negative. The
            error carries the 0-based step index.
        """
        self.state = self.initial_state
        population = self.initial_state.total

        for m in range(self.total_months):
            try:
                next_state = step(self.state, self.rates, executor=executor)
            except InvalidStateError as exc:
                raise InvalidStateError(str(exc), step=m) from exc

            self.state = next_state

            logger.debug(
                "Step %d: total population %d (initial %d)",
                m,
                next_state.total,
                population,
            )

            yield Report(
                year=m // MONTHS_PER_YEAR,
                month=m % MONTHS_PER_YEAR + 1,
                susceptible=next_state.susceptible,
                infected=next_state.infected,
                recovered=next_state.recovered,
            )

    def run(
        self,
        on_report: Optional[Callable[[Report], None]] = None,
        workers: int = 0,
    ) -> SimulationResult:
        """
        Runs the simulation to completion.

        :param on_report: Callback receiving each report as it is produced
        :param workers: Threads used to evaluate the transition rules (0 runs them inline)
        :return: SimulationResult with the complete trajectory
        """
        logger.info(
            "Simulating %d months: S=%d, I=%d, R=%d, beta=%s, gamma=%s",
            self.total_months,
            *self.initial_state.as_tuple(),
            self.rates.infection_rate,
            self.rates.recovery_rate,
        )

        if workers > 0:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                reports = self._collect(on_report, executor)
        else:
            reports = self._collect(on_report, None)

        logger.info(
            "Simulation finished: S=%d, I=%d, R=%d", *self.state.as_tuple()
        )
        return SimulationResult(self.initial_state, self.rates, reports)

    def _collect(
        self,
        on_report: Optional[Callable[[Report], None]],
        executor: Optional[Executor],
    ) -> List[Report]:
        reports = []
        for report in self.reports(executor=executor):
            reports.append(report)
            if on_report is not None:
                on_report(report)
        return reports
