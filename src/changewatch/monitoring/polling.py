"""
Polling listener, the universal fallback backend.

Periodically rescans the watched tree and reports files whose content
changed since the previous pass. Usable on every platform.
"""

import logging
import threading
import time

from changewatch.core.listener import Listener
from changewatch.models import BackendKind, ChangeBatch

logger = logging.getLogger(__name__)


class PollingListener(Listener):
    """
    Listener that detects changes by rescanning the tree.

    ``poll`` runs one synchronous detection pass and can be driven by the
    caller's own loop. ``start`` runs the same pass every
    ``config.polling_latency`` seconds on a daemon worker thread.
    """

    backend_kind = BackendKind.POLLING

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._worker: threading.Thread | None = None
        self._stop_event = threading.Event()
        self._watched_directory: str | None = None

    @classmethod
    def probe_usable(cls) -> bool:
        return True

    def poll(self) -> ChangeBatch:
        """
        Run one detection pass and deliver the result.

        The start time of the pass becomes the new observation timestamp,
        so edits made while the pass was running are seen by the next one.
        A pass that finishes after ``stop`` records nothing, and its edits
        are reported again once the listener is restarted.

        Returns:
            The batch of changed files, possibly empty
        """
        directory = self._watched_directory or self.root_directory
        started_at = time.time()
        paths = self.modified_files([directory], recursive=self.config.recursive)
        return self._deliver(paths, observed_at=started_at)

    def watch(self, directory: str) -> None:
        self._watched_directory = directory
        self._stop_event.clear()
        self._worker = threading.Thread(target=self._run, name="changewatch-polling", daemon=True)
        self._worker.start()
        logger.debug("Polling %s every %.2fs", directory, self.config.polling_latency)

    def _run(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.poll()
            except Exception as e:
                logger.error("Polling pass failed for %s: %s", self._watched_directory, e)
            self._stop_event.wait(self.config.polling_latency)

    def _stop_backend(self) -> None:
        self._stop_event.set()
        worker, self._worker = self._worker, None
        if worker and worker is not threading.current_thread():
            worker.join(timeout=self.config.stop_timeout)
            if worker.is_alive():
                logger.warning("Polling worker still busy after %.1fs", self.config.stop_timeout)
