"""Elapsed recording time counter."""

import logging
import threading

logger = logging.getLogger(__name__)


class ElapsedTimer:
    """Counts elapsed ticks on a background thread.

    The count increases by one every interval seconds until cancel() is
    called, which also resets it to zero. The timer can be restarted.

    Args:
        interval: Seconds between ticks.
    """

    def __init__(self, interval: float = 1.0) -> None:
        self._interval = interval
        self._seconds = 0
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def seconds(self) -> int:
        """Number of ticks since start()."""
        return self._seconds

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start ticking. Does nothing if already running."""
        if self.is_running:
            return

        self._stop_event = threading.Event()
        self._seconds = 0
        self._thread = threading.Thread(
            target=self._run, args=(self._stop_event,), name="ElapsedTimer", daemon=True
        )
        self._thread.start()

    def cancel(self) -> None:
        """Stop ticking and reset the count to zero."""
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self._interval + 1.0)
            if thread.is_alive():
                logger.warning("Elapsed timer thread did not stop cleanly")
        self._thread = None
        self._seconds = 0

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self._interval):
            self._seconds += 1
