"""Core paths and configuration."""

from .config import Config, ConfigError, ConfigManager, LoggingConfig, ServerConfig
from .global_paths import GlobalPath

__all__ = [
    "Config",
    "ConfigError",
    "ConfigManager",
    "GlobalPath",
    "LoggingConfig",
    "ServerConfig",
]
