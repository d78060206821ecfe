"""Configuration management.

Settings come from ``TODO_API_*`` environment variables layered over the
defaults declared on the pydantic models below. CLI flags are applied on top
by the caller; no configuration file is read.
"""

from __future__ import annotations

import os
from typing import Any, Callable, Dict, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

__all__ = [
    "Config",
    "ConfigError",
    "ConfigManager",
    "LoggingConfig",
    "ServerConfig",
]

ENV_PREFIX = "TODO_API_"


class ConfigError(Exception):
    """Raised when configuration values cannot be parsed."""


class ServerConfig(BaseModel):
    """HTTP server configuration."""
    hostname: str = "127.0.0.1"
    port: int = Field(8000, ge=0, le=65535)
    lock_timeout: Optional[float] = Field(5.0, gt=0)
    access_log: bool = True

    model_config = ConfigDict(extra="forbid")


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "info"
    format: Literal["kv", "json", "pretty"] = "kv"
    console: bool = True
    file: bool = False
    dev_file: bool = False

    model_config = ConfigDict(extra="forbid")

    @field_validator("level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        text = value.strip().lower()
        if text not in {"debug", "info", "warn", "warning", "error"}:
            raise ValueError(f"invalid log level: {value}")
        return text


class Config(BaseModel):
    """Top-level configuration."""
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")


def _parse_bool(value: str) -> bool:
    text = value.strip().lower()
    if text in {"1", "true", "yes", "on"}:
        return True
    if text in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"expected a boolean, got {value!r}")


def _parse_timeout(value: str) -> Optional[float]:
    text = value.strip().lower()
    if text in {"", "none", "off"}:
        return None
    return float(text)


# env suffix -> (section, field, parser)
_ENV_FIELDS: Dict[str, tuple[str, str, Callable[[str], Any]]] = {
    "HOST": ("server", "hostname", str),
    "PORT": ("server", "port", int),
    "LOCK_TIMEOUT": ("server", "lock_timeout", _parse_timeout),
    "ACCESS_LOG": ("server", "access_log", _parse_bool),
    "LOG_LEVEL": ("logging", "level", str),
    "LOG_FORMAT": ("logging", "format", lambda v: v.strip().lower()),
    "LOG_CONSOLE": ("logging", "console", _parse_bool),
    "LOG_FILE": ("logging", "file", _parse_bool),
    "LOG_DEV_FILE": ("logging", "dev_file", _parse_bool),
}


class ConfigManager:
    """Builds :class:`Config` instances from the environment."""

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Dict[str, Dict[str, Any]]:
        env = os.environ if environ is None else environ
        data: Dict[str, Dict[str, Any]] = {"server": {}, "logging": {}}
        for suffix, (section, name, parse) in _ENV_FIELDS.items():
            key = ENV_PREFIX + suffix
            raw = env.get(key)
            if raw is None:
                continue
            try:
                data[section][name] = parse(raw)
            except ValueError as exc:
                raise ConfigError(f"Invalid value for {key}: {exc}") from exc
        return data

    @classmethod
    def load(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        overrides: Optional[Mapping[str, Mapping[str, Any]]] = None,
    ) -> Config:
        """Resolve configuration: defaults, then environment, then ``overrides``.

        ``overrides`` uses the same ``{"section": {"field": value}}`` shape;
        ``None`` values are ignored so CLI options can be passed through as-is.
        """
        data = cls.from_env(environ)
        for section, values in (overrides or {}).items():
            bucket = data.setdefault(section, {})
            bucket.update({k: v for k, v in values.items() if v is not None})
        try:
            return Config.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc
