"""todo-api - in-memory todo records over a small JSON HTTP API."""

__version__ = "0.1.0"

__all__ = ["__version__"]
