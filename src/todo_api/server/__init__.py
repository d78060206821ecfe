"""HTTP transport for the todo API."""

from .app import create_app
from .server import Server, ServerInfo

__all__ = ["Server", "ServerInfo", "create_app"]
