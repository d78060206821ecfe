"""Todo transport routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import Body, Depends, Path

from ...app_services import TodoService
from ..deps import resolve_todo_service
from ..schemas import StatusResponse, TodoRequest, TodoResponse
from .crud import crud_router, many, one

# non-integer or negative ids fail path validation and are answered as 404
TodoId = Annotated[int, Path(ge=0)]


def list_todos(
    todos: TodoService = Depends(resolve_todo_service),
) -> list[dict[str, object]]:
    return todos.list()


def get_todo(
    todo_id: TodoId,
    todos: TodoService = Depends(resolve_todo_service),
) -> dict[str, object]:
    return todos.get(todo_id)


def create_todo(
    payload: TodoRequest = Body(...),
    todos: TodoService = Depends(resolve_todo_service),
) -> dict[str, object]:
    return todos.create(payload.to_todo())


def update_todo(
    todo_id: TodoId,
    payload: TodoRequest = Body(...),
    todos: TodoService = Depends(resolve_todo_service),
) -> dict[str, object]:
    return todos.update(todo_id, payload.to_todo())


def delete_todo(
    todo_id: TodoId,
    todos: TodoService = Depends(resolve_todo_service),
) -> dict[str, object]:
    return todos.delete(todo_id)


router = crud_router(
    tags=["todos"],
    routes=[
        many("GET", "/", TodoResponse, list_todos),
        one("GET", "/{todo_id}", TodoResponse, get_todo),
        one("POST", "/", StatusResponse, create_todo),
        one("PUT", "/{todo_id}", StatusResponse, update_todo),
        one("DELETE", "/{todo_id}", StatusResponse, delete_todo),
    ],
)
