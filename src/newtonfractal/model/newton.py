"""
Newton Iteration & Basin Classification
=======================================
This module holds the numerical core: a generic complex Newton solver and its
specialisation to a cubic given by three explicit roots.

Numerical failures are data, not exceptions. A sample that diverges or runs
out of iterations is simply classified as UNKNOWN.

Classes:
    Converged, Diverged, ExhaustedBudget: Possible outcomes of one solve.
    ComplexNewton: Abstract Newton method over f and its derivative.
    CubicNewton: Newton method for (z - r1)(z - r2)(z - r3).
    Basin, BasinInfo: Classification of a single starting point.
"""
from __future__ import annotations

import cmath
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, NamedTuple, Union

from newtonfractal.model.roots import RootSet

ComplexFunction = Callable[[complex], complex]


@dataclass(frozen=True)
class Converged:
    """|f(value)| dropped below epsilon after `iterations` updates."""
    value: complex
    iterations: int


@dataclass(frozen=True)
class Diverged:
    """An update produced a non-finite value."""
    iterations: int


@dataclass(frozen=True)
class ExhaustedBudget:
    """The iteration cap was reached without meeting the tolerance."""
    iterations: int


SolveOutcome = Union[Converged, Diverged, ExhaustedBudget]


def magnitude(z: complex) -> float:
    # abs() on complex raises OverflowError for huge finite parts, hypot returns inf
    return math.hypot(z.real, z.imag)


def validate_parameters(max_iteration: int, epsilon: float) -> None:
    if max_iteration < 0:
        raise ValueError(f"max_iteration must be non-negative, got {max_iteration}.")
    if not epsilon >= 0.0:
        raise ValueError(f"epsilon must be a non-negative number, got {epsilon}.")


def solve(
    z0: complex,
    f: ComplexFunction,
    fd: ComplexFunction,
    max_iteration: int,
    epsilon: float
) -> SolveOutcome:
    """
    Run Newton's method z <- z - f(z)/f'(z) starting at z0.

    Args:
        z0: Initial guess.
        f: Target function, a root of which is searched for.
        fd: Derivative of f.
        max_iteration: Upper bound of Newton updates.
        epsilon: Tolerance on |f(z)|.

    Returns:
        Converged(z, i) as soon as |f(z)| < epsilon, i being the number of
        updates applied so far; Diverged(i) when the i-th update yields a
        non-finite value; ExhaustedBudget(max_iteration) otherwise.
    """
    z = complex(z0)
    for i in range(max_iteration):
        fz = f(z)
        if magnitude(fz) < epsilon:
            return Converged(z, i)
        try:
            z = z - fz / fd(z)
        except ZeroDivisionError:
            # IEEE division by an exact zero derivative is non-finite
            return Diverged(i)
        if not cmath.isfinite(z):
            return Diverged(i)
    return ExhaustedBudget(max_iteration)


class ComplexNewton(ABC):
    """
    Abstract Newton method for complex numbers.
    Derived classes implement f and fd (the derivative of f).
    """

    def __init__(self, max_iteration: int, epsilon: float) -> None:
        validate_parameters(max_iteration, epsilon)
        self.max_iteration = max_iteration
        self.epsilon = epsilon

    @abstractmethod
    def f(self, z: complex) -> complex:
        pass

    @abstractmethod
    def fd(self, z: complex) -> complex:
        pass

    def solve(self, z0: complex) -> SolveOutcome:
        return solve(z0, self.f, self.fd, self.max_iteration, self.epsilon)


class Basin(IntEnum):
    """Which root a starting point is attracted to."""
    UNKNOWN = 0
    FIRST = 1
    SECOND = 2
    THIRD = 3


class BasinInfo(NamedTuple):
    basin: Basin
    depth: int


_ROOT_BASINS = (Basin.FIRST, Basin.SECOND, Basin.THIRD)


class CubicNewton(ComplexNewton):
    """
    Newton method for a cubic equation given explicitly by its three roots.
    """

    def __init__(self, roots: RootSet, max_iteration: int, epsilon: float) -> None:
        super().__init__(max_iteration, epsilon)
        self.roots = roots
        r1, r2, r3 = roots
        self._r1, self._r2, self._r3 = r1, r2, r3
        # Coefficients of f'(z) = 3z^2 - 2(r1 + r2 + r3)z + (r1r2 + r2r3 + r3r1)
        self._two_sum = 2.0 * roots.sum
        self._pair_sum = roots.pairwise_product_sum

    def f(self, z: complex) -> complex:
        return (z - self._r1) * (z - self._r2) * (z - self._r3)

    def fd(self, z: complex) -> complex:
        return 3.0 * z * z - self._two_sum * z + self._pair_sum

    def which_basin(self, z0: complex) -> BasinInfo:
        """
        Find out which root the starting point z0 reaches.

        Roots are checked in order first, second, third; the first one within
        epsilon of the converged value wins.
        """
        outcome = self.solve(z0)
        if isinstance(outcome, Converged):
            s = outcome.value
            for basin, root in zip(_ROOT_BASINS, self.roots):
                if magnitude(s - root) < self.epsilon:
                    return BasinInfo(basin, outcome.iterations)
        return BasinInfo(Basin.UNKNOWN, outcome.iterations)


def classify(z0: complex, roots: RootSet, max_iteration: int, epsilon: float) -> BasinInfo:
    """Classify a single starting point, see CubicNewton.which_basin."""
    return CubicNewton(roots, max_iteration, epsilon).which_basin(z0)
