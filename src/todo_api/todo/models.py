from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .priority import Priority


@dataclass(frozen=True)
class Todo:
    id: int
    priority: Priority
    title: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "priority": self.priority.value, "title": self.title}
