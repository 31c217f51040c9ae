"""
Backend selection for the current host.

Native backends are tried in a fixed priority order; polling is the
fallback and is always usable, so selection never fails.
"""

import logging
import os
import platform

from changewatch.config import ListenerConfig, get_config
from changewatch.core.listener import Listener
from changewatch.monitoring.native import DarwinListener, LinuxListener, NativeListener, WindowsListener
from changewatch.monitoring.polling import PollingListener

logger = logging.getLogger(__name__)

# Priority order
BACKEND_CANDIDATES: tuple[type[NativeListener], ...] = (
    DarwinListener,
    LinuxListener,
    WindowsListener,
)


def host_system() -> str:
    """Get the lowercase operating system identifier of the host."""
    return platform.system().lower()


def select_listener_class(config: ListenerConfig | None = None, system: str | None = None) -> type[Listener]:
    """
    Pick the most capable listener backend for the host.

    Args:
        config: Listener configuration, defaults to the global configuration
        system: OS identifier override, defaults to the running host

    Returns:
        The first native backend matching the platform whose probe succeeds,
        otherwise PollingListener
    """
    config = config or get_config()
    system = (system or host_system()).lower()

    if config.force_polling:
        logger.info("Using polling (forced by configuration)")
        return PollingListener

    for candidate in BACKEND_CANDIDATES:
        if candidate.matches_platform(system) and candidate.probe_usable():
            logger.debug("Selected %s backend for %s", candidate.backend_kind.value, system)
            return candidate

    logger.info("Using polling (no native change notification backend usable on %s)", system or "unknown system")
    return PollingListener


def select_and_init(
    root_directory: str | os.PathLike | None = None,
    config: ListenerConfig | None = None,
    **options,
) -> Listener:
    """
    Construct a listener with the best backend for the host.

    Only the selected backend is instantiated.

    Args:
        root_directory: Directory to watch, defaults to the current working directory
        config: Listener configuration, defaults to the global configuration
        **options: Extra listener options, e.g. ``relativate_paths``

    Returns:
        An idle listener ready to ``start``
    """
    config = config or get_config()
    listener_class = select_listener_class(config)
    return listener_class(root_directory, config=config, **options)
