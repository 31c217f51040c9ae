"""
Listener base class shared by every change detection backend.

Owns the watch session state: the watched root, the last observation
timestamp, the checksum store and the registered change callback. It also
implements the reference detection algorithm (modification-time filter,
then content-hash confirmation) that native backends reuse so all backends
report identically normalized change batches.
"""

import glob
import hashlib
import logging
import os
import threading
import time
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

from changewatch.config import ListenerConfig, get_config
from changewatch.core.checksums import ChecksumStore
from changewatch.core.interfaces import IChangeDetector
from changewatch.core.paths import PathNormalizer
from changewatch.models import (
    BackendKind,
    BackendNotImplementedError,
    ChangeBatch,
    ListenerError,
    ListenerState,
)

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[ChangeBatch], Any]


class Listener(IChangeDetector):
    """
    Watch session over a single root directory.

    Concrete backends override ``watch`` (and usually ``_stop_backend``).
    Calling ``start`` twice is a no-op while the listener is watching.
    ``stop`` is idempotent and no callback runs once it has returned; a
    detection pass already hashing a large file finishes first, so stop
    may block for the duration of that pass.
    """

    backend_kind: BackendKind = BackendKind.POLLING

    def __init__(
        self,
        root_directory: str | os.PathLike | None = None,
        config: ListenerConfig | None = None,
        relativate_paths: bool | None = None,
    ):
        """
        Initialize the listener.

        Args:
            root_directory: Directory to watch, defaults to the current working directory
            config: Listener configuration, defaults to the global configuration
            relativate_paths: Override for reporting paths relative to the root
        """
        self.config = config or get_config()
        if root_directory is None:
            root_directory = os.getcwd()
        self.root_directory = os.path.abspath(os.fspath(root_directory))

        if relativate_paths is None:
            relativate_paths = self.config.relativate_paths
        self._normalizer = PathNormalizer(self.root_directory, enabled=relativate_paths)

        self.checksums = ChecksumStore()
        self.last_observed_at = 0.0
        self.update_last_observed_at()

        self._callback: ChangeCallback | None = None
        self._state = ListenerState.IDLE
        self._stopped = False

        # One detection pass at a time; deliveries are serialized separately
        self._scan_lock = threading.Lock()
        self._delivery_lock = threading.RLock()

    @classmethod
    def probe_usable(cls) -> bool:
        """Check whether this backend can run on the current host."""
        return False

    @property
    def state(self) -> ListenerState:
        return self._state

    @property
    def is_watching(self) -> bool:
        return self._state is ListenerState.WATCHING

    @property
    def relativate_paths(self) -> bool:
        """Whether reported paths are relative to the watched root."""
        return self._normalizer.enabled

    @relativate_paths.setter
    def relativate_paths(self, enabled: bool) -> None:
        self._normalizer.enabled = bool(enabled)

    def on_change(self, callback: ChangeCallback | None) -> None:
        """Register the change callback, replacing any previous one."""
        self._callback = callback

    def start(self) -> None:
        """
        Start watching the root directory.

        Raises:
            ListenerError: If the root is not a directory or the backend fails to start
            BackendNotImplementedError: If the backend does not implement ``watch``
        """
        if self.is_watching:
            logger.debug("%s listener already watching %s", self.backend_kind.value, self.root_directory)
            return

        root = Path(self.root_directory)
        if not root.exists():
            raise ListenerError(f"Directory does not exist: {root}", path=str(root), operation="start")
        if not root.is_dir():
            raise ListenerError(f"Path is not a directory: {root}", path=str(root), operation="start")

        with self._delivery_lock:
            self._stopped = False
            self._state = ListenerState.WATCHING

        try:
            self.watch(self.root_directory)
        except BackendNotImplementedError:
            self._state = ListenerState.IDLE
            raise
        except Exception as e:
            self._state = ListenerState.IDLE
            logger.error("Failed to start %s listener: %s", self.backend_kind.value, e)
            raise ListenerError(
                f"Failed to start listener: {e}",
                path=self.root_directory,
                operation="start",
                underlying_error=e,
            ) from e

        logger.info("Started %s listener on %s", self.backend_kind.value, self.root_directory)

    def stop(self) -> None:
        """
        Stop watching.

        Raises:
            ListenerError: If the backend fails to release its resources
        """
        # Waits for any in-flight delivery before flipping the flag
        with self._delivery_lock:
            self._stopped = True
            was_watching = self.is_watching
            self._state = ListenerState.IDLE

        if not was_watching:
            return

        try:
            self._stop_backend()
        except Exception as e:
            logger.error("Error stopping %s listener: %s", self.backend_kind.value, e)
            raise ListenerError(
                "Failed to stop listener", path=self.root_directory, operation="stop", underlying_error=e
            ) from e

        logger.info("Stopped %s listener on %s", self.backend_kind.value, self.root_directory)

    def watch(self, directory: str) -> None:
        """Begin delivering change batches for ``directory`` until stopped."""
        raise BackendNotImplementedError(type(self).__name__, "watch")

    def _stop_backend(self) -> None:
        """Release backend resources. Called once per successful stop."""

    def update_last_observed_at(self, at: float | None = None) -> None:
        self.last_observed_at = time.time() if at is None else at

    def modified_files(self, dirs: Iterable[str], recursive: bool = False) -> list[str]:
        """
        Detect files whose content changed under the given directories.

        A candidate must be a regular file whose modification time, truncated
        to the second, is not older than the last observation (also truncated),
        and whose content digest differs from the stored one. The checksum
        store is updated for every confirmed change.

        Args:
            dirs: Directories to scan
            recursive: Whether to scan subdirectories

        Returns:
            Normalized paths of the changed files
        """
        with self._scan_lock:
            changed = [
                path
                for path in self._potentially_modified_files(dirs, recursive)
                if os.path.isfile(path) and self._file_modified(path) and self._file_content_modified(path)
            ]
        return self._normalizer.normalize_all(changed)

    def all_files(self) -> list[str]:
        return self._normalizer.normalize_all(self._regular_files())

    def seed_checksums(self) -> int:
        """
        Reset the checksum store to the current content of every file.

        Subsequent detection passes then only report files edited afterwards.

        Returns:
            Number of files tracked
        """
        with self._scan_lock:
            self.checksums.clear()
            for path in self._regular_files():
                digest = self._checksum(path)
                if digest is not None:
                    self.checksums.update(path, digest)
        logger.debug("Seeded %d checksums under %s", len(self.checksums), self.root_directory)
        return len(self.checksums)

    def _deliver(self, paths: Iterable[str], observed_at: float | None = None) -> ChangeBatch:
        """
        Wrap paths in a batch and hand it to the callback, one batch at a time.

        A batch that arrives after ``stop`` is dropped and its digests are
        forgotten, and ``observed_at`` is not recorded, so the same edits are
        reported again by the first pass after a restart.

        Args:
            paths: Changed file paths, absolute or already normalized
            observed_at: Observation timestamp to record once the batch is accepted
        """
        paths = list(paths)
        batch = ChangeBatch(paths=self._normalizer.normalize_all(paths), backend=self.backend_kind)

        with self._delivery_lock:
            if self._stopped:
                if batch:
                    self._forget_checksums(paths)
                    logger.debug("Dropping %s (listener stopped)", batch)
                return batch

            if observed_at is not None:
                self.update_last_observed_at(observed_at)

            callback = self._callback
            if not batch or callback is None:
                return batch

            logger.debug("Delivering %s", batch)
            try:
                callback(batch)
            except Exception as e:
                logger.error("Error in change callback for %s: %s", batch, e)

        return batch

    def _forget_checksums(self, paths: list[str]) -> None:
        with self._scan_lock:
            for path in paths:
                if not os.path.isabs(path):
                    path = os.path.join(self.root_directory, path)
                self.checksums.remove(path)

    def _regular_files(self) -> list[str]:
        return [path for path in self._potentially_modified_files([self.root_directory], True) if os.path.isfile(path)]

    def _potentially_modified_files(self, dirs: Iterable[str], recursive: bool) -> list[str]:
        if isinstance(dirs, (str, os.PathLike)):
            dirs = [dirs]
        pattern = os.path.join("**", "*") if recursive else "*"

        seen: set[str] = set()
        paths = []
        for directory in dirs:
            for path in glob.glob(os.path.join(glob.escape(os.fspath(directory)), pattern), recursive=recursive):
                if path not in seen:
                    seen.add(path)
                    paths.append(path)
        return paths

    def _file_modified(self, path: str) -> bool:
        # mtime is often only precise to the second, so compare whole seconds
        try:
            return int(os.stat(path).st_mtime) >= int(self.last_observed_at)
        except OSError as e:
            logger.debug("Skipping %s, stat failed: %s", path, e)
            return False

    def _file_content_modified(self, path: str) -> bool:
        digest = self._checksum(path)
        if digest is None:
            return False
        if self.checksums.update(path, digest):
            logger.debug("Content changed: %s", path)
            return True
        return False

    def _checksum(self, path: str) -> str | None:
        hasher = hashlib.new(self.config.hash_algorithm)
        try:
            with open(path, "rb") as f:
                while chunk := f.read(self.config.hash_chunk_size):
                    hasher.update(chunk)
        except OSError as e:
            logger.debug("Skipping %s, read failed: %s", path, e)
            return None
        return hasher.hexdigest()
