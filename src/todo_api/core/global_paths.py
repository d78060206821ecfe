"""Per-user directories for todo-api.

Only logs are written to disk; todo records never are.
"""

from pathlib import Path

from platformdirs import user_data_dir

APP_NAME = "todo-api"


class GlobalPath:
    """Platform-specific application directories."""

    @classmethod
    def data(cls) -> str:
        return user_data_dir(APP_NAME)

    @classmethod
    def log(cls) -> str:
        """Directory holding rotated log files."""
        return str(Path(cls.data()) / "log")
