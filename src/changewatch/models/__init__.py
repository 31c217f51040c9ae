"""Data models and exceptions for the change detection engine."""

from changewatch.models.change import BackendKind, ChangeBatch, ListenerState
from changewatch.models.exceptions import (
    BackendNotImplementedError,
    BaseError,
    ConfigurationError,
    ListenerError,
)

__all__ = [
    "BackendKind",
    "ChangeBatch",
    "ListenerState",
    "BaseError",
    "ConfigurationError",
    "ListenerError",
    "BackendNotImplementedError",
]
