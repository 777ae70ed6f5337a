import time
from typing import Callable

import pytest
from PySide6.QtCore import QCoreApplication, QEventLoop


@pytest.fixture(scope="session")
def qapp():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def process_until(qapp):
    """Run the Qt event loop until predicate() holds or the timeout expires."""

    def _process_until(predicate: Callable[[], bool], timeout: float = 30.0) -> bool:
        deadline = time.monotonic() + timeout
        while not predicate():
            if time.monotonic() > deadline:
                return False
            qapp.processEvents(QEventLoop.ProcessEventsFlag.AllEvents, 50)
            time.sleep(0.002)
        return True

    return _process_until
