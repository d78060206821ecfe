"""HTTP server lifecycle for the todo API.

Example:
    from todo_api.server import Server

    info = await Server.start(port=8000)
    print(f"Server running at {info.url}")
    await Server.stop()
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Optional

from ..runtime import AppContext
from ..util.log import Log
from .app import create_app

log = Log.create({"service": "server"})

DEFAULT_PORT = 8000


@dataclass
class ServerInfo:
    """Information about a running server."""
    host: str
    port: int

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"


class Server:
    """Runs the FastAPI app under uvicorn in a background task."""

    _app: Optional[Any] = None
    _server: Optional[Any] = None
    _task: Optional["asyncio.Task[None]"] = None
    _info: Optional[ServerInfo] = None

    @classmethod
    def _create_app(
        cls,
        ctx: AppContext,
        *,
        manage_lifecycle: bool = False,
        access_log: bool = True,
    ) -> Any:
        return create_app(ctx, manage_lifecycle=manage_lifecycle, access_log=access_log)

    @classmethod
    async def start(
        cls,
        host: str = "127.0.0.1",
        port: int = DEFAULT_PORT,
        *,
        ctx: Optional[AppContext] = None,
        access_log: bool = True,
    ) -> ServerInfo:
        """Start the HTTP server and wait until it accepts connections.

        Args:
            host: Hostname to bind to
            port: Port to listen on
            ctx: Application context; a fresh one is created when omitted
            access_log: Emit one access log line per request
        """
        import uvicorn

        if cls._server is not None:
            raise RuntimeError("Server is already running")

        cls._app = cls._create_app(
            ctx or AppContext(),
            manage_lifecycle=True,
            access_log=access_log,
        )
        config = uvicorn.Config(
            cls._app,
            host=host,
            port=port,
            log_level="warning",
        )
        cls._server = uvicorn.Server(config)
        cls._info = ServerInfo(host=host, port=port)

        log.info("starting server", {"host": host, "port": port})
        cls._task = asyncio.create_task(cls._server.serve())

        while not cls._server.started:
            if cls._task.done():
                # serve() returned without ever accepting connections
                server_task = cls._task
                cls._reset()
                server_task.result()
                raise RuntimeError(f"Server failed to start on {host}:{port}")
            await asyncio.sleep(0.05)

        log.info("server started", {"url": cls._info.url})
        return cls._info

    @classmethod
    async def stop(cls) -> None:
        """Stop the HTTP server."""
        if cls._server is None:
            return
        log.info("stopping server")
        cls._server.should_exit = True
        if cls._task is not None:
            await cls._task
        cls._reset()
        log.info("server stopped")

    @classmethod
    def _reset(cls) -> None:
        cls._server = None
        cls._task = None
        cls._app = None
        cls._info = None

    @classmethod
    def info(cls) -> Optional[ServerInfo]:
        """Information about the running server, if any."""
        return cls._info
