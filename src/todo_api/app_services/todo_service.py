"""Todo application service.

Thin orchestration over :class:`~todo_api.todo.TodoStore`, shared by the HTTP
routes. Results are plain dicts ready for response validation.
"""

from __future__ import annotations

from typing import Any

from ..todo import Todo, TodoStore
from ..util.log import Log
from .errors import NotFoundError

log = Log.create({"service": "todo.service"})

OK: dict[str, Any] = {"status": "ok"}


class TodoService:
    def __init__(self, store: TodoStore) -> None:
        self.store = store

    def list(self) -> list[dict[str, Any]]:
        return [todo.to_dict() for todo in self.store.list()]

    def get(self, todo_id: int) -> dict[str, Any]:
        todo = self.store.get(todo_id)
        if todo is None:
            log.debug("todo not found", {"id": todo_id})
            raise NotFoundError("Todo", todo_id)
        return todo.to_dict()

    def create(self, todo: Todo) -> dict[str, Any]:
        self.store.insert(todo)
        return dict(OK)

    def update(self, todo_id: int, todo: Todo) -> dict[str, Any]:
        """Fully replace the todo at ``todo_id``.

        The body's id must match the path id; the record stays keyed by
        ``todo_id``.
        """
        if todo.id != todo_id:
            raise ValueError(f"Field 'id' ({todo.id}) does not match todo id {todo_id}")
        if not self.store.update(todo_id, todo):
            log.debug("todo not found", {"id": todo_id})
            raise NotFoundError("Todo", todo_id)
        return dict(OK)

    def delete(self, todo_id: int) -> dict[str, Any]:
        self.store.delete(todo_id)
        return dict(OK)
