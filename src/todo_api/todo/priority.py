"""Validated todo priority.

A :class:`Priority` can only be obtained through :meth:`Priority.parse`, so
every instance in the process holds a value in ``[MIN, MAX]``.
"""

from __future__ import annotations

from typing import Any

__all__ = ["Priority", "PriorityError"]

_PARSE = object()


class PriorityError(ValueError):
    """Raised when a raw value is not a valid priority."""

    def __init__(self, raw: Any):
        self.raw = raw
        super().__init__(
            f"Priority must be an integer between {Priority.MIN} and {Priority.MAX}, got {raw!r}"
        )


class Priority:
    """Task urgency, an integer in ``[1, 5]``."""

    MIN = 1
    MAX = 5

    __slots__ = ("_value",)

    def __init__(self, value: int, *, _token: object = None) -> None:
        if _token is not _PARSE:
            raise TypeError("Priority instances must be created with Priority.parse()")
        object.__setattr__(self, "_value", value)

    @classmethod
    def parse(cls, raw: Any) -> Priority:
        """Parse ``raw`` (decimal text or int) into a priority.

        Raises:
            PriorityError: ``raw`` is not a non-negative integer in range.
        """
        if isinstance(raw, Priority):
            return raw
        if isinstance(raw, bool):
            raise PriorityError(raw)
        if isinstance(raw, int):
            value = raw
        elif isinstance(raw, str):
            # same grammar as an unsigned integer literal: optional "+", ascii digits
            digits = raw[1:] if raw.startswith("+") else raw
            if not (digits.isascii() and digits.isdigit()):
                raise PriorityError(raw)
            value = int(digits)
        else:
            raise PriorityError(raw)

        if not cls.MIN <= value <= cls.MAX:
            raise PriorityError(raw)
        return cls(value, _token=_PARSE)

    @property
    def value(self) -> int:
        return self._value

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Priority is immutable")

    def __int__(self) -> int:
        return self._value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Priority):
            return self._value == other._value
        return NotImplemented

    def __hash__(self) -> int:
        return hash((Priority, self._value))

    def __repr__(self) -> str:
        return f"Priority({self._value})"
