"""
Configuration & Global Constants
================================
This module serves as the central registry for the sweep parameters.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (iteration caps, tolerances, grid
   sizes) scattered throughout the code.
2. Tuning: Every constant can be overridden through an environment variable,
   e.g. NEWTONFRACTAL_N_TICKS=128 for a quick low-resolution run.

Exports:
    MAX_ITERATION (int): Newton iteration cap per sample.
    EPSILON (float): Convergence tolerance on |f(z)| and |z - root|.
    HALF_RANGE (float): Half extent of the square region centered at 0.
    N_TICKS (int): Ticks per axis, the grid holds (N_TICKS + 1)^2 points.
"""
import os
from typing import Callable, TypeVar

T = TypeVar("T")

ENV_PREFIX = "NEWTONFRACTAL_"


def get_setting(name: str, default: T, cast: Callable[[str], T]) -> T:
    """
    Read an override from the environment, falling back to the default.
    """
    raw = os.environ.get(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw.strip())
    except ValueError as e:
        raise ValueError(f"Invalid value for {ENV_PREFIX + name}: {raw!r}") from e


# Global Constants
MAX_ITERATION: int = get_setting("MAX_ITERATION", 32, int)
EPSILON: float = get_setting("EPSILON", 1e-9, float)

HALF_RANGE: float = get_setting("HALF_RANGE", 2.0, float)
N_TICKS: int = get_setting("N_TICKS", 512, int)
