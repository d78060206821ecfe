"""Runtime logging bootstrap helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.config import LoggingConfig
from ..util.log import Log, LogFormat, LogLevel


@dataclass(frozen=True)
class LogSettings:
    level: LogLevel
    format: LogFormat
    console: bool
    file: bool
    dev_file: bool


def resolve_log_settings(
    cfg: LoggingConfig,
    *,
    level: Optional[str] = None,
    format: Optional[str] = None,
    console: Optional[bool] = None,
    file: Optional[bool] = None,
) -> LogSettings:
    """Merge explicit overrides over the configured logging section."""
    return LogSettings(
        level=LogLevel.parse(level or cfg.level),
        format=LogFormat.parse(format or cfg.format),
        console=cfg.console if console is None else console,
        file=cfg.file if file is None else file,
        dev_file=cfg.dev_file,
    )


def bootstrap_logging(
    cfg: LoggingConfig,
    *,
    level: Optional[str] = None,
    format: Optional[str] = None,
    console: Optional[bool] = None,
    file: Optional[bool] = None,
) -> LogSettings:
    """Resolve settings and initialize the process logger."""
    settings = resolve_log_settings(cfg, level=level, format=format, console=console, file=file)
    Log.configure(
        level=settings.level,
        format=settings.format,
        console=settings.console,
        file=settings.file,
        dev=settings.dev_file,
    )
    return settings
