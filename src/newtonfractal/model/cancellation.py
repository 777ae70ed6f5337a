"""
Cooperative cancellation for long-running sweeps.
"""
import threading


class CancellationToken:
    """
    One-shot cancellation flag shared between the thread that requests
    cancellation and the sweep that polls it. Cancellation cannot be undone;
    every sweep gets a fresh token.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancellation_requested(self) -> bool:
        return self._event.is_set()
