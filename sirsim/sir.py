import math
from concurrent.futures import Executor
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

# Largest closed population whose float products stay well inside the exact
# integer range of a double, so truncation loses at most 1 per compartment.
MAX_POPULATION = 2**50


class InvalidStateError(ValueError):
    """Raised when a population count is negative or the total is too large."""

    def __init__(self, message: str, step: Optional[int] = None):
        if step is not None:
            message = f"step {step}: {message}"
        super().__init__(message)
        self.step = step


@dataclass(frozen=True)
class PopulationState:
    susceptible: int
    infected: int
    recovered: int

    def __post_init__(self):
        for name in ("susceptible", "infected", "recovered"):
            value = getattr(self, name)
            if value < 0:
                raise InvalidStateError(f"{name} count must be non-negative, got {value}")
        if self.total > MAX_POPULATION:
            raise InvalidStateError(
                f"total population must be <= {MAX_POPULATION}, got {self.total}"
            )

    @property
    def total(self) -> int:
        return self.susceptible + self.infected + self.recovered

    def as_tuple(self) -> Tuple[int, int, int]:
        return self.susceptible, self.infected, self.recovered


@dataclass(frozen=True)
class RateParameters:
    infection_rate: float  # beta
    recovery_rate: float  # gamma


def next_susceptible(S: int, beta: float) -> int:
    """
    Susceptible count after one month: the pool shrinks by the new infections.

    :param S: Current susceptible count
    :param beta: Infection rate
    :return: floor(S * (1 - beta))
    """
    S_next = math.floor(S * (1 - beta))
    if S_next < 0:
        raise InvalidStateError(
            f"next susceptible would be {S_next} (S={S}, beta={beta})"
        )
    return S_next


def next_infected(S: int, I: int, beta: float, gamma: float) -> int:
    """
    Infected count after one month: gains the new infections, loses recoveries.

    :param S: Current susceptible count
    :param I: Current infected count
    :param beta: Infection rate
    :param gamma: Recovery rate
    :return: floor(I * (1 - gamma) + S * beta)
    """
    I_next = math.floor(I * (1 - gamma) + S * beta)
    if I_next < 0:
        raise InvalidStateError(
            f"next infected would be {I_next} (S={S}, I={I}, beta={beta}, gamma={gamma})"
        )
    return I_next


def next_recovered(I: int, R: int, gamma: float) -> int:
    """
    Recovered count after one month. Only the recovery term is truncated.

    :param I: Current infected count
    :param R: Current recovered count
    :param gamma: Recovery rate
    :return: R + floor(I * gamma)
    """
    R_next = R + math.floor(I * gamma)
    if R_next < 0:
        raise InvalidStateError(
            f"next recovered would be {R_next} (I={I}, R={R}, gamma={gamma})"
        )
    return R_next


def step(
    state: PopulationState,
    rates: RateParameters,
    executor: Optional[Executor] = None,
) -> PopulationState:
    """
    Advances the population by one month.

    All three rules read the current state only. With an executor, the rules
    are submitted as separate tasks and joined before the new state is built.

    :param state: Current population state
    :param rates: Infection and recovery rates
    :param executor: Optional executor used to evaluate the rules concurrently
    :return: New population state
    """
    S, I, R = state.as_tuple()
    beta, gamma = rates.infection_rate, rates.recovery_rate

    if executor is None:
        return PopulationState(
            susceptible=next_susceptible(S, beta),
            infected=next_infected(S, I, beta, gamma),
            recovered=next_recovered(I, R, gamma),
        )

    futures = (
        executor.submit(next_susceptible, S, beta),
        executor.submit(next_infected, S, I, beta, gamma),
        executor.submit(next_recovered, I, R, gamma),
    )
    S_next, I_next, R_next = (future.result() for future in futures)
    return PopulationState(susceptible=S_next, infected=I_next, recovered=R_next)


def run_sir(state: PopulationState, rates: RateParameters, months: int):
    """
    Simulates the SIR model for a given number of months.

    :param state: Initial population state
    :param rates: Infection and recovery rates
    :param months: Number of months to simulate
    :return: Arrays of (S, I, R) for each month (excluding initial state)
    """
    S, I, R = [], [], []
    current = state

    for _ in range(months):
        current = step(current, rates)

        S.append(current.susceptible)
        I.append(current.infected)
        R.append(current.recovered)

    return (
        np.array(S, dtype=np.int64),
        np.array(I, dtype=np.int64),
        np.array(R, dtype=np.int64),
    )
