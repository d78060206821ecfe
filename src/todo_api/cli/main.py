"""CLI entry point for the todo API."""

import json
from typing import Optional

import typer
from rich.console import Console

from .. import __version__
from ..core.config import Config, ConfigError, ConfigManager

app = typer.Typer(
    name="todo-api",
    help="Todo API - in-memory todo records over HTTP",
    no_args_is_help=True,
    add_completion=False,
)

console = Console()


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        console.print(f"todo-api {__version__}")
        raise typer.Exit()


def _load_config(
    server: Optional[dict] = None,
    logging: Optional[dict] = None,
) -> Config:
    try:
        return ConfigManager.load(overrides={"server": server or {}, "logging": logging or {}})
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """Todo API - in-memory todo records over HTTP."""


@app.command()
def serve(
    host: Optional[str] = typer.Option(
        None,
        "--host",
        help="Hostname to bind to (default 127.0.0.1 or TODO_API_HOST)",
    ),
    port: Optional[int] = typer.Option(
        None,
        "--port",
        "-p",
        help="Port to listen on (default 8000 or TODO_API_PORT)",
    ),
    lock_timeout: Optional[float] = typer.Option(
        None,
        "--lock-timeout",
        help="Seconds a request waits for the store lock",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Log level: debug, info, warn, error",
    ),
    log_format: Optional[str] = typer.Option(
        None,
        "--log-format",
        help="Log format: kv, json, pretty",
    ),
    log_file: Optional[bool] = typer.Option(
        None,
        "--log-file/--no-log-file",
        help="Also write logs to a rotated file",
    ),
    access_log: Optional[bool] = typer.Option(
        None,
        "--access-log/--no-access-log",
        help="Log one line per request",
    ),
):
    """Start the HTTP server."""
    from ..runtime.logging import bootstrap_logging
    from .cmd.serve import serve_command

    config = _load_config(
        server={"hostname": host, "port": port, "lock_timeout": lock_timeout, "access_log": access_log},
        logging={"level": log_level, "format": log_format, "file": log_file},
    )
    bootstrap_logging(config.logging)
    serve_command(config)


@app.command()
def config():
    """Show the resolved configuration."""
    cfg = _load_config()
    console.print_json(json.dumps(cfg.model_dump(), indent=2))


if __name__ == "__main__":
    app()
