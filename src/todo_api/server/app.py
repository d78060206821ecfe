"""FastAPI application factory."""

from __future__ import annotations

import secrets
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request

from .. import __version__
from ..runtime import AppContext
from ..util.log import Log
from .errors import register_error_handlers
from .routes import system, todos

access = Log.create({"service": "server.access"})


def create_app(
    ctx: AppContext,
    *,
    manage_lifecycle: bool = False,
    access_log: bool = True,
) -> FastAPI:
    """Create a FastAPI application serving the todos held by ``ctx``.

    ``ctx`` owns the record store; every request handler reaches it through
    ``app.state.ctx``. With ``manage_lifecycle`` the app starts and stops the
    context in its lifespan.
    """

    @asynccontextmanager
    async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
        await ctx.startup()
        try:
            yield
        finally:
            await ctx.shutdown()

    app = FastAPI(
        title="Todo API",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=_lifespan if manage_lifecycle else None,
    )
    app.state.ctx = ctx

    @app.middleware("http")
    async def _access_log(request: Request, call_next):
        rid = request.headers.get("x-request-id") or secrets.token_hex(8)
        request.state.request_id = rid
        begin = time.perf_counter()
        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        if not access_log:
            return response
        access.info(
            "request",
            {
                "request_id": rid,
                "method": request.method,
                "path": request.url.path,
                "query": request.url.query or None,
                "status": response.status_code,
                "client_ip": request.client.host if request.client else None,
                "duration_ms": int((time.perf_counter() - begin) * 1000),
            },
        )
        return response

    register_error_handlers(app)

    # /health must be matched before /{todo_id}
    app.include_router(system.router)
    app.include_router(todos.router)
    return app
