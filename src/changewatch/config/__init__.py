"""Configuration management and settings."""

from changewatch.config.settings import ListenerConfig, LogLevel, get_config, reload_config, set_config

__all__ = ["ListenerConfig", "LogLevel", "get_config", "reload_config", "set_config"]
