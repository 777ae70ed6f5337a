"""
Nearest-neighbour resampling of a basin map to a display resolution.

Stateless helpers for a presentation layer; colour mapping is left to the
caller.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from newtonfractal.model.basin_map import BasinMap

if TYPE_CHECKING:
    import numpy.typing as npt


def nearest_indices(n_ticks: int, size: int) -> npt.NDArray[np.intp]:
    """
    Grid index for each of `size` pixels along one axis. The first pixel maps
    to index 0 and the last one to n_ticks.
    """
    if size < 1:
        raise ValueError(f"size must be positive, got {size}.")
    if size == 1:
        return np.zeros(1, dtype=np.intp)
    return np.arange(size, dtype=np.intp) * n_ticks // (size - 1)


def sample(basin_map: BasinMap, width: int, height: int) -> npt.NDArray:
    """
    Copy of the basin map resampled to (height, width) pixels, row y holding
    grid row ii and column x holding grid column ir.
    """
    ir = nearest_indices(basin_map.n_ticks_re, width)
    ii = nearest_indices(basin_map.n_ticks_im, height)
    return basin_map.map[ir[np.newaxis, :], ii[:, np.newaxis]]
