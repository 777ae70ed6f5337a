"""
Session (Orchestration)
=======================
This module owns the current root configuration and the basin map, and keeps
them in sync: every root change cancels the running sweep and starts a new one.

Why is this file needed?
------------------------
1. Decoupling: Views only talk to the Session (entry points + Signals). They
   never see threads or cancellation tokens.
2. Thread Safety: Worker signals are received by slots of this QObject, i.e. on
   the thread that owns the Session. Everything the Session emits is therefore
   safe to use for UI mutation.

Classes:
    Session: Root state, basin map and sweep lifecycle.
"""
from __future__ import annotations

import logging
from typing import Optional, Set

from PySide6.QtCore import QObject, Signal, Slot

from newtonfractal import config
from newtonfractal.controller.workers import SweepWorker
from newtonfractal.model.basin_map import BasinMap
from newtonfractal.model.newton import validate_parameters
from newtonfractal.model.roots import RootSet
from newtonfractal.utils import format_complex

logger = logging.getLogger(__name__)


class Session(QObject):
    """
    Holds the RootSet and the BasinMap.

    At most one sweep is *active*. Starting a new sweep cancels the active one
    without waiting for it; the superseded worker finishes its current row on
    its own and is then released. Its progress and errors are dropped; its
    termination is announced through sweep_retired instead of sweep_finished.
    """
    # Fraction of rows done while sweeping, None when the sweep loop exited
    progress_changed = Signal(object)
    # Active sweep thread terminated; True if every row was processed
    sweep_finished = Signal(bool)
    # Superseded sweep thread terminated; True if it still processed every row
    sweep_retired = Signal(bool)
    sweep_failed = Signal(str)
    roots_changed = Signal(object)

    def __init__(
        self,
        basin_map: Optional[BasinMap] = None,
        max_iteration: int = config.MAX_ITERATION,
        epsilon: float = config.EPSILON,
        parent: Optional[QObject] = None
    ) -> None:
        super().__init__(parent)
        validate_parameters(max_iteration, epsilon)
        self.max_iteration = max_iteration
        self.epsilon = epsilon

        if basin_map is None:
            # a square region centered on the origin
            basin_map = BasinMap.square(config.HALF_RANGE, config.N_TICKS)
        self.basin_map = basin_map

        self._roots = RootSet.cube_roots_of_unity()
        self.progress: Optional[float] = None

        self._worker: Optional[SweepWorker] = None
        self._workers: Set[SweepWorker] = set()

    # --- State ---

    @property
    def roots(self) -> RootSet:
        return self._roots

    @property
    def active_worker(self) -> Optional[SweepWorker]:
        return self._worker

    def is_busy(self) -> bool:
        """True while any sweep thread (active or superseded) is still running."""
        return any(worker.isRunning() for worker in self._workers)

    # --- Root-change entry points ---

    def set_roots(self, roots: RootSet) -> None:
        self.cancel()
        self._roots = roots
        labels = ", ".join(format_complex(r) for r in roots)
        logger.info(f"Roots changed: [{labels}]")
        self.roots_changed.emit(roots)
        self.start()

    def set_root(self, index: int, value: complex) -> None:
        self.set_roots(self._roots.replace_root(index, value))

    def set_root_real(self, index: int, value: float) -> None:
        self.set_roots(self._roots.replace_component(index, real=value))

    def set_root_imag(self, index: int, value: float) -> None:
        self.set_roots(self._roots.replace_component(index, imag=value))

    def restore_defaults(self) -> None:
        """Reset the roots to 1, ω, ω² and sweep again."""
        logger.info("Restoring default roots.")
        self.set_roots(RootSet.cube_roots_of_unity())

    def set_resolution(self, n_ticks_re: int, n_ticks_im: int) -> bool:
        """
        Resize the basin map. Refused while any sweep thread is alive, since the
        buffer must never be reallocated under a running sweep.
        """
        if self.is_busy():
            raise RuntimeError("Cannot resize the basin map while a sweep is running.")
        return self.basin_map.resize(n_ticks_re, n_ticks_im)

    # --- Sweep lifecycle ---

    def start(self) -> SweepWorker:
        """Cancel the active sweep (if any) and start one for the current roots."""
        # The superseded worker stays in self._workers until its thread finishes
        self.cancel()

        worker = SweepWorker(
            basin_map=self.basin_map,
            roots=self._roots,
            max_iteration=self.max_iteration,
            epsilon=self.epsilon,
        )
        worker.progress_updated.connect(self._on_progress)
        worker.error_occurred.connect(self._on_error)
        worker.finished.connect(self._on_worker_finished)

        self._worker = worker
        self._workers.add(worker)
        worker.start()
        return worker

    def cancel(self) -> None:
        """Request cancellation of the active sweep without waiting for it."""
        if self._worker is not None:
            self._worker.cancel()

    def shutdown(self, timeout_ms: int = 5000) -> bool:
        """
        Cancel every sweep and block until the threads exit.
        Meant for application exit; returns False on timeout.
        """
        ok = True
        for worker in list(self._workers):
            worker.cancel()
        for worker in list(self._workers):
            ok = worker.wait(timeout_ms) and ok
        return ok

    # --- Worker slots (run on the Session's thread) ---

    @Slot(object)
    def _on_progress(self, value: Optional[float]) -> None:
        if self.sender() is not self._worker:
            return
        self.progress = value
        self.progress_changed.emit(value)

    @Slot(str)
    def _on_error(self, message: str) -> None:
        if self.sender() is not self._worker:
            logger.warning(f"Superseded sweep failed: {message}")
            return
        self.sweep_failed.emit(message)

    @Slot()
    def _on_worker_finished(self) -> None:
        worker = self.sender()
        self._workers.discard(worker)
        if worker is self._worker:
            self._worker = None
            self.sweep_finished.emit(worker.completed)
        else:
            self.sweep_retired.emit(worker.completed)
        worker.deleteLater()
