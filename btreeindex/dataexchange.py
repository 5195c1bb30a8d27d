"""
Contains classes used for data exchange, i.e.
do not have any "compute" methods.
"""
from typing import Any, TypeVar, Generic, Tuple
from dataclasses import dataclass, field
from enum import Enum, auto

from .constants import (
    STRESS_DEGREES,
    STRESS_PERMS_PER_CASE,
    STRESS_PERM_STEP,
    STRESS_SEED,
)

# This is used to parameterize Response type as per: https://stackoverflow.com/a/42989302
T = TypeVar("T")


class RunMode(Enum):
    Stress = auto()
    Help = auto()


@dataclass
class Response(Generic[T]):
    """
    Use as a generic class to encapsulate a response and a body
    """

    # is success
    success: bool
    # if fail, why
    error_message: str = None
    # an enum encoding state
    status: Any = None
    # output of operation
    body: T = None

    def __str__(self):
        if self.error_message:
            return f"Response(fail, {self.error_message})"
        else:
            return f"Response(success, {str(self.body)})"

    def __repr__(self):
        return self.__str__()


@dataclass
class StressConfig:
    """
    Parameters of a stress run
    """

    # degrees each test case is run against
    max_degrees: Tuple[int, ...] = field(default=STRESS_DEGREES)
    # number of delete orders tried per test case
    perms_per_case: int = STRESS_PERMS_PER_CASE
    # permutations are generated in a predictable order; skip this many between picks
    perm_step: int = STRESS_PERM_STEP
    # seed for shuffled delete orders
    seed: int = STRESS_SEED
