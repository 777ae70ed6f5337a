"""
Basin Map (Sample Grid)
=======================
A rectangular region of the complex plane sampled on a regular grid, and the
sweep that classifies every grid point.

Why is this file needed?
------------------------
1. Storage: The classification of every sample lives in one fixed-size numpy
   buffer indexed by (ir, ii). It is allocated once and overwritten in place by
   every sweep, so a renderer can read it at any time without locking.
2. Orchestration: `compute` walks the grid row by row, polls a cancellation
   token once per row and reports progress per band of rows.

Classes:
    BasinMap: Region, grid buffer and the sweep over it.
"""
from __future__ import annotations

import logging
import math
from typing import Callable, Dict, Optional, Tuple, TYPE_CHECKING

import numpy as np

from newtonfractal.model.cancellation import CancellationToken
from newtonfractal.model.newton import Basin, BasinInfo, CubicNewton
from newtonfractal.model.roots import RootSet

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

# One record per grid point: which root, and after how many iterations
BASIN_INFO_DTYPE = np.dtype([("basin", np.int8), ("depth", np.int32)])

ProgressReporter = Callable[[Optional[float]], None]

# Upper bound on the number of progress reports per sweep
PROGRESS_STEPS = 100


class BasinMap:
    """
    A basin map of a rectangular region [min_re, max_re] x [min_im, max_im].

    Tick counts are one less than the number of points along an axis,
    including both ends, so the grid holds (n_ticks_re + 1) x (n_ticks_im + 1)
    cells.
    """

    def __init__(
        self,
        min_re: float,
        max_re: float,
        min_im: float,
        max_im: float,
        n_ticks_re: int,
        n_ticks_im: int
    ) -> None:
        for name, value in (("min_re", min_re), ("max_re", max_re),
                            ("min_im", min_im), ("max_im", max_im)):
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value}.")
        if not min_re < max_re:
            raise ValueError(f"min_re ({min_re}) must be less than max_re ({max_re}).")
        if not min_im < max_im:
            raise ValueError(f"min_im ({min_im}) must be less than max_im ({max_im}).")
        self._check_ticks(n_ticks_re, n_ticks_im)

        self.min_re = float(min_re)
        self.max_re = float(max_re)
        self.min_im = float(min_im)
        self.max_im = float(max_im)
        self.n_ticks_re = n_ticks_re
        self.n_ticks_im = n_ticks_im

        self._map: npt.NDArray = self._allocate()

    @classmethod
    def square(cls, half_range: float, n_ticks: int) -> BasinMap:
        """A square region centered on the origin."""
        return cls(-half_range, +half_range, -half_range, +half_range, n_ticks, n_ticks)

    @staticmethod
    def _check_ticks(n_ticks_re: int, n_ticks_im: int) -> None:
        if n_ticks_re < 0 or n_ticks_im < 0:
            raise ValueError(
                f"Tick counts must be non-negative, got ({n_ticks_re}, {n_ticks_im})."
            )

    def _allocate(self) -> npt.NDArray:
        grid = np.zeros((self.n_ticks_re + 1, self.n_ticks_im + 1), dtype=BASIN_INFO_DTYPE)
        grid["basin"] = Basin.UNKNOWN
        return grid

    def resize(self, n_ticks_re: int, n_ticks_im: int) -> bool:
        """
        Change the grid resolution. The buffer is reallocated (all cells back
        to UNKNOWN) only if a tick count actually changes.

        Must not be called while a sweep is writing to this map.

        Returns:
            True if the buffer was reallocated.
        """
        self._check_ticks(n_ticks_re, n_ticks_im)
        if (n_ticks_re, n_ticks_im) == (self.n_ticks_re, self.n_ticks_im):
            return False
        self.n_ticks_re = n_ticks_re
        self.n_ticks_im = n_ticks_im
        self._map = self._allocate()
        logger.info(f"Basin map resized to {self.shape[0]} x {self.shape[1]} points.")
        return True

    # --- Read access ---

    @property
    def shape(self) -> Tuple[int, int]:
        return self._map.shape

    @property
    def map(self) -> npt.NDArray:
        """The live structured buffer with fields 'basin' and 'depth'."""
        return self._map

    @property
    def basins(self) -> npt.NDArray[np.int8]:
        return self._map["basin"]

    @property
    def depths(self) -> npt.NDArray[np.int32]:
        return self._map["depth"]

    def __getitem__(self, indices: Tuple[int, int]) -> BasinInfo:
        cell = self._map[indices]
        return BasinInfo(Basin(int(cell["basin"])), int(cell["depth"]))

    def counts(self) -> Dict[Basin, int]:
        """Number of cells per basin."""
        values = np.bincount(self._map["basin"].ravel(), minlength=len(Basin))
        return {basin: int(values[basin]) for basin in Basin}

    # --- Index <-> complex mapping ---

    def index_to_re(self, ir: int) -> float:
        if self.n_ticks_re == 0:
            return self.min_re
        return (self.max_re - self.min_re) * ir / self.n_ticks_re + self.min_re

    def index_to_im(self, ii: int) -> float:
        if self.n_ticks_im == 0:
            return self.min_im
        return (self.max_im - self.min_im) * ii / self.n_ticks_im + self.min_im

    def indices_to_complex(self, ir: int, ii: int) -> complex:
        return complex(self.index_to_re(ir), self.index_to_im(ii))

    def re_to_nearest_index(self, re: float) -> int:
        index = round(self.n_ticks_re * (re - self.min_re) / (self.max_re - self.min_re))
        return min(max(int(index), 0), self.n_ticks_re)

    def im_to_nearest_index(self, im: float) -> int:
        index = round(self.n_ticks_im * (im - self.min_im) / (self.max_im - self.min_im))
        return min(max(int(index), 0), self.n_ticks_im)

    def complex_to_nearest_indices(self, z: complex) -> Tuple[int, int]:
        return self.re_to_nearest_index(z.real), self.im_to_nearest_index(z.imag)

    # --- Sweep ---

    def compute(
        self,
        roots: RootSet,
        max_iteration: int,
        epsilon: float,
        reporter: Optional[ProgressReporter] = None,
        token: Optional[CancellationToken] = None
    ) -> bool:
        """
        Classify every grid point for the cubic with the given roots.

        Rows (fixed ii) are processed in order; the token is checked once
        before each row. Cancelled rows keep their previous contents.

        Args:
            roots: Roots of the target cubic.
            max_iteration: Newton iteration cap per sample.
            epsilon: Convergence tolerance.
            reporter: Called with the fraction of rows done, at most
                PROGRESS_STEPS times, then once with None when the loop exits.
            token: Cooperative cancellation flag.

        Returns:
            True if all rows were processed, False if cancelled.
        """
        cubic_newton = CubicNewton(roots, max_iteration, epsilon)
        n_rows = self.n_ticks_im + 1
        step = math.ceil(n_rows / PROGRESS_STEPS)
        grid = self._map

        completed = True
        for ii in range(n_rows):
            if token is not None and token.is_cancellation_requested:
                logger.debug(f"Sweep cancelled before row {ii} of {n_rows}.")
                completed = False
                break
            if reporter is not None and ii % step == 0:
                reporter(ii / n_rows)
            im = self.index_to_im(ii)
            for ir in range(self.n_ticks_re + 1):
                z0 = complex(self.index_to_re(ir), im)
                basin, depth = cubic_newton.which_basin(z0)
                grid[ir, ii] = (basin, depth)

        if reporter is not None:
            reporter(None)
        return completed
