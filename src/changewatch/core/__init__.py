"""Core change detection contract and building blocks."""

from changewatch.core.checksums import ChecksumStore
from changewatch.core.interfaces import IChangeDetector
from changewatch.core.listener import ChangeCallback, Listener
from changewatch.core.paths import PathNormalizer

__all__ = [
    "ChangeCallback",
    "ChecksumStore",
    "IChangeDetector",
    "Listener",
    "PathNormalizer",
]
