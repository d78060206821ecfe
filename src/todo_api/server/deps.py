"""FastAPI dependencies shared across transport handlers."""

from __future__ import annotations

from fastapi import Request

from ..app_services import TodoService
from ..runtime import AppContext


def resolve_app_context(request: Request) -> AppContext:
    ctx = getattr(request.app.state, "ctx", None)
    if not isinstance(ctx, AppContext):
        raise RuntimeError("Application context is not initialized")
    return ctx


def resolve_todo_service(request: Request) -> TodoService:
    return resolve_app_context(request).todos
