"""
Native listeners backed by watchdog's OS notification observers.

OS events only tell us which directories to look at. The files in those
directories then go through the same detection pass as polling, so a
native batch is normalized and hash-confirmed exactly like a polling one.
"""

import importlib
import logging
import os
import re
import threading

from watchdog.events import FileSystemEvent, FileSystemEventHandler

from changewatch.core.listener import Listener
from changewatch.models import BackendKind, ChangeBatch

logger = logging.getLogger(__name__)


class NativeListener(Listener, FileSystemEventHandler):
    """
    Base class for listeners driven by a watchdog observer.

    Subclasses name the observer to load and the platforms it serves.
    Events are gathered for ``config.native_latency`` seconds and then
    flushed by a worker thread as a single detection pass. The observation
    timestamp is left where the caller put it, since events already narrow
    the scan to the directories that were touched.
    """

    observer_module: str | None = None
    observer_class_name: str | None = None
    platform_pattern: re.Pattern | None = None

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._observer = None
        self._worker: threading.Thread | None = None
        self._stop_event = threading.Event()
        self._pending_dirs: set[str] = set()
        self._pending_lock = threading.Lock()

    @classmethod
    def matches_platform(cls, system: str) -> bool:
        """Check whether this backend serves the given OS identifier."""
        return cls.platform_pattern is not None and cls.platform_pattern.search(system) is not None

    @classmethod
    def load_observer_class(cls):
        """
        Import the watchdog observer class for this backend.

        Raises:
            ImportError: If the observer is not available on this host
        """
        if cls.observer_module is None or cls.observer_class_name is None:
            raise ImportError(f"{cls.__name__} does not name a watchdog observer")
        module = importlib.import_module(cls.observer_module)
        return getattr(module, cls.observer_class_name)

    @classmethod
    def probe_usable(cls) -> bool:
        try:
            cls.load_observer_class()
        except Exception as e:
            # Missing extensions or OS libraries surface as ImportError, OSError or AttributeError
            logger.debug("%s backend unusable: %s", cls.backend_kind.value, e)
            return False
        return True

    def watch(self, directory: str) -> None:
        observer_class = self.load_observer_class()
        self._observer = observer_class()
        self._observer.schedule(self, directory, recursive=True)
        self._observer.start()

        self._stop_event.clear()
        self._worker = threading.Thread(target=self._run, name=f"changewatch-{self.backend_kind.value}", daemon=True)
        self._worker.start()

    def on_created(self, event: FileSystemEvent) -> None:
        self._queue_event_path(event.src_path, event.is_directory)

    def on_modified(self, event: FileSystemEvent) -> None:
        self._queue_event_path(event.src_path, event.is_directory)

    def on_moved(self, event: FileSystemEvent) -> None:
        self._queue_event_path(event.dest_path, event.is_directory)

    def on_closed(self, event: FileSystemEvent) -> None:
        self._queue_event_path(event.src_path, event.is_directory)

    def _queue_event_path(self, path: str | bytes, is_directory: bool) -> None:
        path = os.fsdecode(path)
        directory = path if is_directory else os.path.dirname(path)
        with self._pending_lock:
            self._pending_dirs.add(directory)

    @property
    def pending_directory_count(self) -> int:
        with self._pending_lock:
            return len(self._pending_dirs)

    def flush(self) -> ChangeBatch:
        """
        Scan every directory touched since the last flush and deliver the result.

        Returns:
            The batch of changed files, possibly empty
        """
        with self._pending_lock:
            dirs = sorted(self._pending_dirs)
            self._pending_dirs.clear()

        if not dirs:
            return self._deliver([])

        logger.debug("Scanning %d touched director(ies)", len(dirs))
        return self._deliver(self.modified_files(dirs))

    def _run(self) -> None:
        while not self._stop_event.wait(self.config.native_latency):
            try:
                self.flush()
            except Exception as e:
                logger.error("Error flushing %s events: %s", self.backend_kind.value, e)

    def _stop_backend(self) -> None:
        self._stop_event.set()

        observer, self._observer = self._observer, None
        if observer is not None and observer.is_alive():
            observer.stop()
            observer.join(timeout=self.config.stop_timeout)

        worker, self._worker = self._worker, None
        if worker and worker is not threading.current_thread():
            worker.join(timeout=self.config.stop_timeout)
            if worker.is_alive():
                logger.warning("%s worker still busy after %.1fs", self.backend_kind.value, self.config.stop_timeout)

        with self._pending_lock:
            self._pending_dirs.clear()


class DarwinListener(NativeListener):
    """macOS listener using FSEvents."""

    backend_kind = BackendKind.DARWIN
    observer_module = "watchdog.observers.fsevents"
    observer_class_name = "FSEventsObserver"
    platform_pattern = re.compile(r"darwin", re.IGNORECASE)


class LinuxListener(NativeListener):
    """Linux listener using inotify."""

    backend_kind = BackendKind.LINUX
    observer_module = "watchdog.observers.inotify"
    observer_class_name = "InotifyObserver"
    platform_pattern = re.compile(r"linux", re.IGNORECASE)


class WindowsListener(NativeListener):
    """Windows listener using ReadDirectoryChangesW."""

    backend_kind = BackendKind.WINDOWS
    observer_module = "watchdog.observers.read_directory_changes"
    observer_class_name = "WindowsApiObserver"
    platform_pattern = re.compile(r"windows|mswin|mingw", re.IGNORECASE)
