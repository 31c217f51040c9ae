"""
Abstract interfaces for the change detection engine.

These interfaces define the contracts every listener backend satisfies,
enabling dependency injection for testing and drop-in backend replacement.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable


class IChangeDetector(ABC):
    """
    Abstract interface for change detection.

    Defines the operations shared by every backend so that callers mixing
    native and polling strategies see identical results.
    """

    @abstractmethod
    def modified_files(self, dirs: Iterable[str], recursive: bool = False) -> list[str]:
        """
        Detect files changed under the given directories.

        Args:
            dirs: Directories to scan
            recursive: Whether to scan subdirectories

        Returns:
            Normalized paths of files whose content changed
        """
        pass

    @abstractmethod
    def all_files(self) -> list[str]:
        """
        List every regular file beneath the watched root.

        Returns:
            Normalized file paths, without change filtering
        """
        pass

    @abstractmethod
    def update_last_observed_at(self, at: float | None = None) -> None:
        """
        Record that the current filesystem state has been observed.

        Args:
            at: Epoch timestamp to record, defaults to now
        """
        pass
