"""Cooperative cancellation shared by every stage of a run."""

import threading

from .exceptions import AnalysisCancelled


class CancellationToken:
    """Flag polled at well-defined points of the pipeline.

    Pacing delays go through :meth:`sleep` so that a pending cancel wakes
    the sleeper early; in-flight requests are never interrupted.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise AnalysisCancelled()

    def sleep(self, seconds: float) -> None:
        """Wait up to ``seconds``; returns early once cancelled."""
        if seconds and seconds > 0:
            self._event.wait(seconds)
