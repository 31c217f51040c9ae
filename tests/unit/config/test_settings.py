"""Unit tests for listener configuration."""

from unittest.mock import patch

import pytest
from changewatch.config import ListenerConfig, LogLevel, get_config, reload_config, set_config
from changewatch.core import Listener
from changewatch.models import ConfigurationError
from pydantic import ValidationError


class TestListenerConfig:
    """Test cases for ListenerConfig."""

    def test_defaults(self):
        config = ListenerConfig(_env_file=None)

        assert config.relativate_paths is True
        assert config.recursive is True
        assert config.force_polling is False
        assert config.hash_algorithm == "sha1"
        assert config.polling_latency == 1.0
        assert config.log_level == LogLevel.INFO

    def test_environment_overrides(self, monkeypatch):
        """Test CHANGEWATCH_ prefixed variables."""
        monkeypatch.setenv("CHANGEWATCH_RELATIVATE_PATHS", "false")
        monkeypatch.setenv("CHANGEWATCH_FORCE_POLLING", "1")
        monkeypatch.setenv("CHANGEWATCH_POLLING_LATENCY", "0.5")

        config = ListenerConfig(_env_file=None)

        assert config.relativate_paths is False
        assert config.force_polling is True
        assert config.polling_latency == 0.5

    def test_hash_algorithm_normalized(self):
        assert ListenerConfig(_env_file=None, hash_algorithm="SHA256").hash_algorithm == "sha256"

    def test_unknown_hash_algorithm(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ListenerConfig(_env_file=None, hash_algorithm="not-a-hash")

        assert exc_info.value.context["config_key"] == "hash_algorithm"

    @pytest.mark.parametrize("name", ["shake_128", "shake_256"])
    def test_variable_length_hash_rejected(self, name):
        """Test that algorithms without a fixed digest size are refused."""
        with pytest.raises(ConfigurationError) as exc_info:
            ListenerConfig(_env_file=None, hash_algorithm=name)

        assert "no fixed digest size" in exc_info.value.message

    def test_listed_but_unbuildable_hash_rejected(self):
        """Test a name hashlib lists but cannot construct."""
        with (
            patch("changewatch.config.settings.hashlib.new", side_effect=ValueError("unsupported hash type md4")),
            pytest.raises(ConfigurationError) as exc_info,
        ):
            ListenerConfig(_env_file=None, hash_algorithm="md4")

        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_accepted_hash_produces_hex_digest(self, tmp_path):
        """Test that a non-default accepted algorithm hashes files during a scan."""
        (tmp_path / "a.txt").write_text("alpha")
        config = ListenerConfig(_env_file=None, hash_algorithm="blake2b")
        listener = Listener(tmp_path, config=config)
        listener.update_last_observed_at(0)

        assert listener.modified_files([str(tmp_path)]) == ["a.txt"]

    def test_latency_bounds(self):
        with pytest.raises(ValidationError):
            ListenerConfig(_env_file=None, polling_latency=0)

    def test_stop_timeout_not_shorter_than_native_latency(self):
        with pytest.raises(ConfigurationError):
            ListenerConfig(_env_file=None, native_latency=10.0, stop_timeout=1.0)

    def test_log_config_stream(self):
        config = ListenerConfig(_env_file=None, log_level=LogLevel.DEBUG)

        log_config = config.get_log_config()

        assert log_config["handlers"]["default"]["class"] == "logging.StreamHandler"
        assert log_config["loggers"]["changewatch"]["level"] == "DEBUG"

    def test_log_config_file(self, tmp_path):
        log_file = tmp_path / "changewatch.log"
        config = ListenerConfig(_env_file=None, log_file=log_file)

        handler = config.get_log_config()["handlers"]["default"]

        assert handler["class"] == "logging.FileHandler"
        assert handler["filename"] == str(log_file)


class TestGlobalConfig:
    """Test cases for the global configuration accessors."""

    @pytest.fixture(autouse=True)
    def reset_global(self):
        set_config(None)
        yield
        set_config(None)

    def test_get_config_is_cached(self):
        assert get_config() is get_config()

    def test_set_config(self):
        custom = ListenerConfig(_env_file=None, force_polling=True)

        set_config(custom)

        assert get_config() is custom

    def test_reload_config(self):
        first = get_config()

        assert reload_config() is not first
        assert get_config() is not first
