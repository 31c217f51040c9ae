"""
Configuration management for the changewatch engine.

Handles environment variables, configuration file loading, and provides
default settings with validation for the listener backends.
"""

import hashlib
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from changewatch.models.exceptions import ConfigurationError


class LogLevel(str, Enum):
    """Logging level enumeration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ListenerConfig(BaseSettings):
    """
    Central configuration class for changewatch listeners.

    Every option can be supplied through a ``CHANGEWATCH_`` prefixed
    environment variable or a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="CHANGEWATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # === Change Detection Configuration ===
    relativate_paths: bool = Field(default=True, description="Report paths relative to the watched root")
    recursive: bool = Field(default=True, description="Polling passes scan the whole tree instead of the root only")
    hash_algorithm: str = Field(default="sha1", description="hashlib algorithm used to confirm content changes")
    hash_chunk_size: int = Field(default=65536, ge=1024, le=16 * 1024 * 1024, description="Read size when hashing")

    # === Backend Configuration ===
    force_polling: bool = Field(default=False, description="Skip native backends and always poll")
    polling_latency: float = Field(default=1.0, ge=0.01, le=60.0, description="Seconds between polling passes")
    native_latency: float = Field(
        default=0.25, ge=0.01, le=30.0, description="Seconds native events are gathered before a detection pass"
    )
    stop_timeout: float = Field(default=5.0, ge=0.1, le=120.0, description="Seconds to wait for worker shutdown")

    # === Logging Configuration ===
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    log_file: Path | None = Field(default=None, description="Log file path (stderr if None)")
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s", description="Log message format"
    )

    @field_validator('hash_algorithm')
    @classmethod
    def validate_hash_algorithm(cls, v):
        """Ensure hashlib can build the algorithm and it has a fixed digest size."""
        name = v.lower()
        try:
            hasher = hashlib.new(name)
        except (ValueError, TypeError) as e:
            raise ConfigurationError(
                f"Unsupported hash algorithm: {v} ({e})",
                config_key="hash_algorithm",
                expected="hashlib algorithm name",
                actual_value=v,
            ) from e

        # shake_* report a zero digest size and need a length for hexdigest()
        if hasher.digest_size == 0:
            raise ConfigurationError(
                f"Hash algorithm has no fixed digest size: {v}",
                config_key="hash_algorithm",
                expected="fixed-length hashlib algorithm",
                actual_value=v,
            )
        return name

    @model_validator(mode='after')
    def validate_latencies(self):
        """Ensure workers can be stopped within one polling interval."""
        if self.stop_timeout < self.native_latency:
            raise ConfigurationError(
                "stop_timeout must not be shorter than native_latency",
                config_key="stop_timeout",
                expected="float >= native_latency",
                actual_value=self.stop_timeout,
            )
        return self

    def get_log_config(self) -> dict[str, Any]:
        """Get logging configuration dictionary."""
        level = self.log_level.value if isinstance(self.log_level, LogLevel) else str(self.log_level)
        config = {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"standard": {"format": self.log_format}},
            "handlers": {
                "default": {
                    "level": level,
                    "formatter": "standard",
                    "class": "logging.StreamHandler" if not self.log_file else "logging.FileHandler",
                }
            },
            "loggers": {"changewatch": {"handlers": ["default"], "level": level, "propagate": False}},
        }

        if self.log_file:
            config["handlers"]["default"]["filename"] = str(self.log_file)

        return config


# Global configuration instance
_config: ListenerConfig | None = None


def get_config() -> ListenerConfig:
    """
    Get the global configuration instance.

    Creates a new instance on first call and reuses it for subsequent calls.
    """
    global _config
    if _config is None:
        _config = ListenerConfig()
    return _config


def reload_config() -> ListenerConfig:
    """Force reload the configuration from environment/files."""
    global _config
    _config = ListenerConfig()
    return _config


def set_config(config: ListenerConfig | None) -> None:
    """
    Set a custom configuration instance.

    Primarily used for testing. Passing None resets to lazy loading.
    """
    global _config
    _config = config
