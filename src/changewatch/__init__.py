"""
changewatch: detects file changes beneath a watched directory tree.

Picks the most capable change notification backend for the host and falls
back to polling, reporting batches of files whose content changed.
"""

from changewatch.config import ListenerConfig, get_config
from changewatch.core import ChecksumStore, Listener, PathNormalizer
from changewatch.models import (
    BackendKind,
    BackendNotImplementedError,
    BaseError,
    ChangeBatch,
    ConfigurationError,
    ListenerError,
    ListenerState,
)
from changewatch.monitoring import PollingListener, select_and_init, select_listener_class

__version__ = "0.1.0"

__all__ = [
    "BackendKind",
    "BackendNotImplementedError",
    "BaseError",
    "ChangeBatch",
    "ChecksumStore",
    "ConfigurationError",
    "Listener",
    "ListenerConfig",
    "ListenerError",
    "ListenerState",
    "PathNormalizer",
    "PollingListener",
    "get_config",
    "select_and_init",
    "select_listener_class",
]
