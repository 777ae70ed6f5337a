"""
Application Initialization
==========================
This module wires the Session to a Qt event loop and runs one sweep without
any GUI.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root for headless runs. It:
1. Sets up logging.
2. Parses the roots given on the command line.
3. Instantiates the Session and connects its signals.
4. Starts the Qt Event Loop and leaves it when the sweep has finished.

Usage:
    $ python -m newtonfractal                      # roots of z^3 - 1
    $ python -m newtonfractal 2 -1+1.732j -1-1.732j
"""
import logging
import sys
from typing import List, Optional, Sequence

from PySide6.QtCore import QCoreApplication

from newtonfractal.logging_config import setup_logging
from newtonfractal.model.newton import Basin
from newtonfractal.model.roots import RootSet
from newtonfractal.controller.session import Session

logger = logging.getLogger(__name__)


def parse_roots(args: Sequence[str]) -> RootSet:
    """
    Build a RootSet from up to three complex literals; missing roots keep the
    cube-roots-of-unity defaults.
    """
    if len(args) > 3:
        raise ValueError(f"Expected at most 3 roots, got {len(args)}.")
    roots = RootSet.cube_roots_of_unity()
    for index, arg in enumerate(args):
        try:
            value = complex(arg.replace(" ", ""))
        except ValueError as e:
            raise ValueError(f"Invalid complex number: {arg!r}") from e
        roots = roots.replace_root(index, value)
    return roots


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    # 1. Setup Logging
    setup_logging(level=logging.INFO)

    # 2. Parse roots
    try:
        roots = parse_roots(argv)
    except ValueError as e:
        logger.error(str(e))
        return 2

    # 3. Create the Qt Application (no GUI needed)
    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])

    # 4. Initialize the Session
    session = Session()
    last_logged = [-1]

    def on_progress(value: Optional[float]) -> None:
        if value is None:
            return
        percent = int(value * 100)
        if percent // 10 != last_logged[0]:
            last_logged[0] = percent // 10
            logger.info(f"Progress: {percent} %")

    def on_finished(completed: bool) -> None:
        counts = session.basin_map.counts()
        total = sum(counts.values())
        for basin in Basin:
            print(f"{basin.name.lower():>8}: {counts[basin]:>8} ({100.0 * counts[basin] / total:5.1f} %)")
        app.exit(0 if completed else 1)

    def on_failed(message: str) -> None:
        logger.error(f"Sweep failed: {message}")

    session.progress_changed.connect(on_progress)
    session.sweep_finished.connect(on_finished)
    session.sweep_failed.connect(on_failed)

    # 5. Start the sweep and the Event Loop
    session.set_roots(roots)
    code = app.exec()
    session.shutdown()
    return code


if __name__ == "__main__":
    sys.exit(main())
