"""In-memory todo record store guarded by a single lock."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Optional

from ..util.log import Log
from .models import Todo

log = Log.create({"service": "todo.store"})

__all__ = ["StoreUnavailableError", "TodoStore"]


class StoreUnavailableError(RuntimeError):
    """Raised when the store lock could not be acquired in time."""

    def __init__(self, timeout: Optional[float]):
        self.timeout = timeout
        super().__init__(f"todo store lock not acquired within {timeout}s")


class TodoStore:
    """Mapping of todo id to :class:`Todo`.

    Every operation holds one exclusive, non-reentrant lock for its whole
    duration, so operations are serialized with respect to each other.
    ``lock_timeout`` bounds how long an operation waits for the lock
    (``None`` waits indefinitely); on expiry :class:`StoreUnavailableError`
    is raised and the store stays usable.
    """

    def __init__(self, lock_timeout: Optional[float] = 5.0) -> None:
        self._todos: dict[int, Todo] = {}
        self._lock = threading.Lock()
        self.lock_timeout = lock_timeout

    @contextmanager
    def _locked(self) -> Iterator[dict[int, Todo]]:
        timeout = -1 if self.lock_timeout is None else self.lock_timeout
        if not self._lock.acquire(timeout=timeout):
            log.error("store lock timeout", {"timeout": self.lock_timeout})
            raise StoreUnavailableError(self.lock_timeout)
        try:
            yield self._todos
        finally:
            self._lock.release()

    def list(self) -> list[Todo]:
        with self._locked() as todos:
            return list(todos.values())

    def get(self, todo_id: int) -> Todo | None:
        with self._locked() as todos:
            return todos.get(todo_id)

    def insert(self, todo: Todo) -> None:
        """Store ``todo`` under its id, overwriting any existing record."""
        with self._locked() as todos:
            replaced = todo.id in todos
            todos[todo.id] = todo
        log.debug("todo stored", {"id": todo.id, "replaced": replaced})

    def update(self, todo_id: int, todo: Todo) -> bool:
        """Replace the record at ``todo_id``; ``False`` if there is none."""
        with self._locked() as todos:
            if todo_id not in todos:
                return False
            todos[todo_id] = todo
        log.debug("todo replaced", {"id": todo_id})
        return True

    def delete(self, todo_id: int) -> None:
        """Remove the record at ``todo_id``; absent ids are ignored."""
        with self._locked() as todos:
            removed = todos.pop(todo_id, None) is not None
        log.debug("todo deleted", {"id": todo_id, "removed": removed})

    def clear(self) -> None:
        with self._locked() as todos:
            todos.clear()

    def __len__(self) -> int:
        with self._locked() as todos:
            return len(todos)
