"""Serve command - run the todo API until interrupted."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

from rich.console import Console

from ...core.config import Config
from ...runtime import AppContext
from ...server.server import Server
from ...util.log import Log

log = Log.create({"service": "cli.serve"})
console = Console()


async def _wait_forever() -> None:
    await asyncio.Future()


async def serve(
    config: Config,
    *,
    wait: Callable[[], Awaitable[None]] | None = None,
) -> None:
    server_cfg = config.server
    ctx = AppContext(lock_timeout=server_cfg.lock_timeout)
    info = await Server.start(
        host=server_cfg.hostname,
        port=server_cfg.port,
        ctx=ctx,
        access_log=server_cfg.access_log,
    )
    console.print(f"[green]Todo API[/green] running at {info.url}")

    block = wait or _wait_forever
    try:
        await block()
    finally:
        await Server.stop()
        log.info("todo api stopped", {"host": info.host, "port": info.port})


def serve_command(config: Config) -> None:
    try:
        asyncio.run(serve(config))
    except KeyboardInterrupt:
        console.print("\nStopping Todo API...")
