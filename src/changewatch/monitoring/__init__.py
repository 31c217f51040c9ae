"""
Monitoring package with the change detection backends.

Provides the polling fallback, the watchdog-backed native listeners and
the selector that picks the most capable one for the running host.
"""

from .native import DarwinListener, LinuxListener, NativeListener, WindowsListener
from .polling import PollingListener
from .selector import BACKEND_CANDIDATES, select_and_init, select_listener_class

__all__ = [
    "BACKEND_CANDIDATES",
    "DarwinListener",
    "LinuxListener",
    "NativeListener",
    "PollingListener",
    "WindowsListener",
    "select_and_init",
    "select_listener_class",
]
