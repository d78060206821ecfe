from __future__ import annotations

import pytest
from starlette.testclient import TestClient

from todo_api.core.config import LoggingConfig
from todo_api.runtime import AppContext
from todo_api.runtime.logging import bootstrap_logging, resolve_log_settings
from todo_api.server import create_app
from todo_api.todo import TodoStore
from todo_api.util.log import Log, LogFormat, LogLevel
from tests.helpers import make_todo


@pytest.mark.anyio
async def test_startup_and_shutdown_are_idempotent() -> None:
    ctx = AppContext()
    ctx.store.insert(make_todo(1))

    await ctx.startup()
    await ctx.startup()
    assert ctx.started is True

    await ctx.shutdown()
    await ctx.shutdown()
    assert ctx.started is False
    assert ctx.store.list() == []


def test_context_uses_given_store() -> None:
    store = TodoStore(lock_timeout=None)
    ctx = AppContext(store=store)

    assert ctx.store is store
    assert ctx.todos.store is store


def test_managed_lifespan_starts_and_stops_context() -> None:
    ctx = AppContext()
    app = create_app(ctx, manage_lifecycle=True, access_log=False)

    with TestClient(app) as client:
        assert ctx.started is True
        client.post("/", json={"id": 1, "title": "t", "priority": 1})
        assert len(ctx.store) == 1

    assert ctx.started is False
    assert len(ctx.store) == 0


def test_resolve_log_settings_prefers_overrides() -> None:
    cfg = LoggingConfig(level="warn", format="json", console=False)

    settings = resolve_log_settings(cfg, level="debug", console=True)

    assert settings.level is LogLevel.DEBUG
    assert settings.format is LogFormat.JSON
    assert settings.console is True
    assert settings.file is False


def test_bootstrap_logging_configures_log() -> None:
    bootstrap_logging(LoggingConfig(level="error", file=False))

    assert Log.level() is LogLevel.ERROR
    assert Log.file() == ""
