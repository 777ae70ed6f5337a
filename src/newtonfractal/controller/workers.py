"""
Background Workers (Threading)
==============================
This module contains the QThread subclass that runs a basin sweep.

Why is this file needed?
------------------------
1. Responsiveness: A full sweep classifies hundreds of thousands of points.
   Running it on the main thread would freeze whatever displays the map.
2. Signals: Progress and errors are emitted as Qt Signals. Slots living in the
   main thread receive them through queued connections, so consumers never
   touch the UI from the worker thread.

Classes:
    SweepWorker: Runs BasinMap.compute for one root configuration.
"""
import logging
import time

from PySide6.QtCore import QThread, Signal

from newtonfractal.model.basin_map import BasinMap
from newtonfractal.model.cancellation import CancellationToken
from newtonfractal.model.roots import RootSet
from newtonfractal.utils import format_complex

logger = logging.getLogger(__name__)


class SweepWorker(QThread):
    """
    One sweep, one thread, one cancellation token.

    QThread.finished doubles as the completion notification: it fires once the
    thread has fully terminated, whether the sweep completed, was cancelled or
    failed.
    """
    # Fraction of rows done (float), then None once the sweep loop exits
    progress_updated = Signal(object)
    error_occurred = Signal(str)

    def __init__(
        self,
        basin_map: BasinMap,
        roots: RootSet,
        max_iteration: int,
        epsilon: float
    ) -> None:
        super().__init__()
        self.basin_map = basin_map
        self.roots = roots
        self.max_iteration = max_iteration
        self.epsilon = epsilon
        self.token = CancellationToken()
        self.completed = False

    def cancel(self) -> None:
        """Request cancellation. Does not wait; the sweep stops at the next row."""
        self.token.cancel()

    @property
    def is_cancelled(self) -> bool:
        return self.token.is_cancellation_requested

    def run(self) -> None:
        try:
            labels = ", ".join(format_complex(r) for r in self.roots)
            logger.info(f"Starting sweep in background thread for roots [{labels}]...")
            start = time.perf_counter()

            self.completed = self.basin_map.compute(
                roots=self.roots,
                max_iteration=self.max_iteration,
                epsilon=self.epsilon,
                reporter=self.progress_updated.emit,
                token=self.token,
            )

            elapsed = time.perf_counter() - start
            if self.completed:
                logger.info(f"Sweep finished in {elapsed:.2f} s.")
            else:
                logger.info(f"Sweep cancelled after {elapsed:.2f} s.")

        except Exception as e:
            logger.exception("Error in SweepWorker")
            self.error_occurred.emit(str(e))
