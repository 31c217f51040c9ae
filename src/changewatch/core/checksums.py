"""In-memory store of the last observed content hash per file."""

from collections.abc import Iterator


class ChecksumStore:
    """
    Maps a file path to the last observed content digest.

    The store lives only as long as its listener and is never persisted.
    It does no locking; listeners run one detection pass at a time.
    """

    def __init__(self) -> None:
        self._digests: dict[str, str] = {}

    def get(self, path: str) -> str | None:
        """Get the stored digest for a path, or None if it was never seen."""
        return self._digests.get(path)

    def update(self, path: str, digest: str) -> bool:
        """
        Record a digest for a path.

        Returns:
            True if the digest was absent or differed from the stored one
        """
        if self._digests.get(path) == digest:
            return False
        self._digests[path] = digest
        return True

    def remove(self, path: str) -> None:
        self._digests.pop(path, None)

    def clear(self) -> None:
        self._digests.clear()

    def __contains__(self, path: object) -> bool:
        return path in self._digests

    def __len__(self) -> int:
        return len(self._digests)

    def __iter__(self) -> Iterator[str]:
        return iter(self._digests)
