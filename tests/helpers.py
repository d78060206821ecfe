"""Shared test helpers."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Optional

from todo_api.runtime import AppContext
from todo_api.todo import Priority, Todo


def make_todo(todo_id: int, title: str = "write tests", priority: int = 3) -> Todo:
    return Todo(id=todo_id, priority=Priority.parse(priority), title=title)


@contextmanager
def create_test_app_context(lock_timeout: Optional[float] = 1.0) -> Iterator[AppContext]:
    """Create a started AppContext with an empty store."""
    ctx = AppContext(lock_timeout=lock_timeout)
    ctx.started = True
    try:
        yield ctx
    finally:
        ctx.store.clear()
        ctx.started = False
