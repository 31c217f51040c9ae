"""Unit tests for backend selection."""

import logging
from unittest.mock import patch

import pytest
from changewatch.config import ListenerConfig
from changewatch.monitoring import (
    BACKEND_CANDIDATES,
    DarwinListener,
    LinuxListener,
    PollingListener,
    WindowsListener,
    select_and_init,
    select_listener_class,
)


@pytest.fixture
def config():
    return ListenerConfig(_env_file=None)


@pytest.fixture
def only_usable():
    """Patch probe_usable so only the given backends are usable."""
    patches = []

    def _apply(*classes):
        for candidate in BACKEND_CANDIDATES:
            p = patch.object(candidate, "probe_usable", return_value=candidate in classes)
            p.start()
            patches.append(p)

    yield _apply
    for p in patches:
        p.stop()


class TestSelectListenerClass:
    """Test cases for select_listener_class."""

    def test_priority_order(self):
        assert BACKEND_CANDIDATES == (DarwinListener, LinuxListener, WindowsListener)

    @pytest.mark.parametrize(
        "system, expected",
        [("Darwin", DarwinListener), ("Linux", LinuxListener), ("Windows", WindowsListener)],
    )
    def test_native_backend_for_platform(self, only_usable, config, system, expected):
        """Test that each OS picks its native backend when usable."""
        only_usable(DarwinListener, LinuxListener, WindowsListener)

        assert select_listener_class(config, system=system) is expected

    def test_unusable_native_falls_back_to_polling(self, only_usable, config, caplog):
        """Test the informational fallback notice."""
        only_usable()

        with caplog.at_level(logging.INFO, logger="changewatch"):
            assert select_listener_class(config, system="Linux") is PollingListener

        assert any("Using polling" in record.message for record in caplog.records)
        assert all(record.levelno == logging.INFO for record in caplog.records)

    def test_other_platform_native_ignored(self, only_usable, config):
        """Test that a usable backend for another OS is never picked."""
        only_usable(DarwinListener)

        assert select_listener_class(config, system="Linux") is PollingListener

    def test_unknown_system(self, only_usable, config):
        only_usable(DarwinListener, LinuxListener, WindowsListener)

        assert select_listener_class(config, system="SunOS") is PollingListener

    def test_force_polling(self, only_usable):
        only_usable(LinuxListener)
        config = ListenerConfig(_env_file=None, force_polling=True)

        assert select_listener_class(config, system="Linux") is PollingListener

    def test_uses_host_system_by_default(self, only_usable, config):
        only_usable(LinuxListener)

        with patch("changewatch.monitoring.selector.platform.system", return_value="Linux"):
            assert select_listener_class(config) is LinuxListener

    def test_probe_skipped_for_other_platforms(self, config):
        """Test that only matching candidates are probed."""
        with (
            patch.object(DarwinListener, "probe_usable") as darwin_probe,
            patch.object(LinuxListener, "probe_usable", return_value=True),
        ):
            select_listener_class(config, system="Linux")

        darwin_probe.assert_not_called()


class TestSelectAndInit:
    """Test cases for select_and_init."""

    def test_constructs_selected_backend(self, tmp_path):
        config = ListenerConfig(_env_file=None, force_polling=True)

        listener = select_and_init(tmp_path, config=config, relativate_paths=False)

        assert isinstance(listener, PollingListener)
        assert listener.root_directory == str(tmp_path)
        assert listener.relativate_paths is False
        assert listener.config is config

    def test_always_returns_a_listener(self, tmp_path, config):
        """Test that selection never fails, whatever the host supports."""
        with (
            patch.object(DarwinListener, "probe_usable", return_value=False),
            patch.object(LinuxListener, "probe_usable", return_value=False),
            patch.object(WindowsListener, "probe_usable", return_value=False),
        ):
            listener = select_and_init(tmp_path, config=config)

        assert isinstance(listener, PollingListener)
        assert listener.probe_usable()
