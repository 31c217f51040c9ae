"""
Path normalization for reported changes.

Rewrites absolute paths so callers see them relative to the watched root.
"""

import os
from collections.abc import Iterable


class PathNormalizer:
    """Strips the watched root prefix from reported paths."""

    def __init__(self, root_directory: str, enabled: bool = True):
        """
        Initialize the normalizer.

        Args:
            root_directory: Absolute path of the watched root
            enabled: Whether paths are rewritten at all
        """
        self.root_directory = root_directory
        self.enabled = enabled

        separators = [os.sep]
        if os.altsep:
            separators.append(os.altsep)

        stripped = root_directory.rstrip("".join(separators))
        # Anchored prefixes only, one per separator style
        self._prefixes = tuple(stripped + sep for sep in separators)

    def normalize(self, path: str) -> str:
        """
        Make a single path relative to the root.

        Paths outside the root, or equal to it, are returned unchanged.
        """
        if not self.enabled:
            return path
        for prefix in self._prefixes:
            if path.startswith(prefix) and len(path) > len(prefix):
                return path[len(prefix):]
        return path

    def normalize_all(self, paths: Iterable[str]) -> list[str]:
        """Normalize every path, preserving order."""
        return [self.normalize(path) for path in paths]
