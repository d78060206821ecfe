"""Pydantic schemas for the FastAPI transport layer."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, PlainValidator, WithJsonSchema

from ..todo import Priority, Todo

PriorityField = Annotated[
    Priority,
    PlainValidator(Priority.parse),
    WithJsonSchema({"type": "integer", "minimum": Priority.MIN, "maximum": Priority.MAX}),
]


class ErrorResponse(BaseModel):
    status: Literal["error"] = "error"
    reason: str
    details: dict[str, object] | list[object] | str | None = None


class StatusResponse(BaseModel):
    status: Literal["ok"] = "ok"


class HealthResponse(BaseModel):
    status: str = "ok"
    todos: int


class TodoResponse(BaseModel):
    id: int
    priority: int
    title: str


class TodoRequest(BaseModel):
    """Full todo body accepted by create and update."""

    id: int = Field(ge=0)
    priority: PriorityField
    title: str

    model_config = ConfigDict(extra="ignore")

    def to_todo(self) -> Todo:
        return Todo(id=self.id, priority=self.priority, title=self.title)
