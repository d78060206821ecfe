"""Todo records, priorities and the in-memory store."""

from .models import Todo
from .priority import Priority, PriorityError
from .store import StoreUnavailableError, TodoStore

__all__ = ["Priority", "PriorityError", "StoreUnavailableError", "Todo", "TodoStore"]
