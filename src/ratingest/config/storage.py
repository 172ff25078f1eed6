"""Database location for imported comments and ratings.

Imports normally write into the database of the discovery application that owns the
comment tables, given as ``DATABASE_URI``. Without one, a SQLite file in the data
directory is used, which suits trial runs.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_flag

APP_DIR_NAME: Final[str] = "ratingest"
DEFAULT_DB_FILENAME: Final[str] = "ratingest.db"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str
    echo: bool = False
    # Shared databases keep the tables of the application that created them
    create_schema: bool = True

    @property
    def is_sqlite(self) -> bool:
        return self.uri.startswith("sqlite")


def default_data_dir() -> Path:
    """``RATINGEST_DATA_DIR``, else the platform's per-user data directory."""

    env_dir = os.getenv("RATINGEST_DATA_DIR")
    if env_dir:
        return Path(env_dir).expanduser().resolve()
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA") or str(Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return (Path(base) / APP_DIR_NAME).expanduser().resolve()


def sqlite_uri(data_dir: Path, filename: str = DEFAULT_DB_FILENAME) -> str:
    data_dir.mkdir(parents=True, exist_ok=True)
    return f"sqlite+pysqlite:///{data_dir / filename}"


def get_database_config() -> DatabaseConfig:
    uri = os.getenv("DATABASE_URI") or sqlite_uri(default_data_dir())
    return DatabaseConfig(
        uri=uri,
        echo=optional_flag("RATINGEST_DB_ECHO", default=False),
        create_schema=optional_flag("RATINGEST_CREATE_SCHEMA", default=uri.startswith("sqlite")),
    )
