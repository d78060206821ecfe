"""Application services shared by transport layers."""

from .errors import NotFoundError
from .todo_service import TodoService

__all__ = ["NotFoundError", "TodoService"]
