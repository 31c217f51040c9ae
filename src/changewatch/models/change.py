"""
Data models for change detection results and listener state.
"""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BackendKind(str, Enum):
    """Detection backend enumeration, in selection priority order."""

    DARWIN = "darwin"  # FSEvents
    LINUX = "linux"  # inotify
    WINDOWS = "windows"  # ReadDirectoryChangesW
    POLLING = "polling"


class ListenerState(str, Enum):
    """Lifecycle state of a listener."""

    IDLE = "idle"
    WATCHING = "watching"


class ChangeBatch(BaseModel):
    """
    Set of distinct file paths reported as changed in one detection cycle.

    Every path referred to a readable regular file when it was detected.
    Paths are relative to the watched root unless path relativation is
    disabled on the listener that produced the batch.
    """

    model_config = ConfigDict(frozen=True)

    paths: frozenset[str] = Field(default_factory=frozenset, description="Changed file paths")
    backend: BackendKind = Field(..., description="Backend that detected the changes")
    detected_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Detection timestamp",
    )

    @field_validator('paths', mode='before')
    @classmethod
    def validate_paths(cls, v):
        """Accept any iterable of path strings."""
        if isinstance(v, str):
            raise ValueError("paths must be an iterable of path strings, not a single string")
        return frozenset(str(path) for path in v)

    def __len__(self) -> int:
        return len(self.paths)

    def __contains__(self, path: object) -> bool:
        return path in self.paths

    def __bool__(self) -> bool:
        return bool(self.paths)

    def sorted_paths(self) -> list[str]:
        """Get the batch paths in a stable order for display."""
        return sorted(self.paths)

    def __str__(self) -> str:
        return f"ChangeBatch({self.backend.value}: {len(self.paths)} file(s))"
