"""Runtime context exports."""

from .app_context import AppContext

__all__ = ["AppContext"]
