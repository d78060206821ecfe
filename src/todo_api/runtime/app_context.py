"""Application runtime context."""

from __future__ import annotations

from typing import Optional

from ..app_services import TodoService
from ..todo import TodoStore
from ..util.log import Log

log = Log.create({"service": "runtime"})


class AppContext:
    """Application-level service container.

    Created once per application lifetime and handed to ``create_app``.
    Owns the single :class:`TodoStore` shared by every request handler and
    the :class:`TodoService` that fronts it.
    """

    __slots__ = ("store", "todos", "started")

    def __init__(self, *, lock_timeout: Optional[float] = 5.0, store: Optional[TodoStore] = None) -> None:
        self.store = store if store is not None else TodoStore(lock_timeout=lock_timeout)
        self.todos = TodoService(self.store)
        self.started = False

    async def startup(self) -> None:
        if self.started:
            return
        self.started = True
        log.info("runtime started", {"lock_timeout": self.store.lock_timeout})

    async def shutdown(self) -> None:
        if not self.started:
            return
        count = len(self.store)
        self.store.clear()
        self.started = False
        log.info("runtime stopped", {"discarded": count})
