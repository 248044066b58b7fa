"""Where the SQL graph store lives when no ``DATABASE_URI`` is given.

Without an override the store is a SQLite file inside the per-user data
directory (``$XDG_DATA_HOME/bulkgraph`` or ``%LOCALAPPDATA%\\bulkgraph``).
``BULKGRAPH_DATA_DIR`` moves that directory; ``DATABASE_URI`` bypasses it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var

APP_DIR_NAME: Final[str] = "bulkgraph"
DEFAULT_DB_FILENAME: Final[str] = "bulkgraph.db"
SQLITE_URI_PREFIX: Final[str] = "sqlite+pysqlite:///"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def database_path(self, *, ensure: bool = True) -> Path:
        """Return the graph database file, creating its directory when ``ensure``."""

        directory = self.resolve_data_dir()
        if ensure:
            directory.mkdir(parents=True, exist_ok=True)
        return directory / self.database_filename

    def database_uri(self) -> str:
        return f"{SQLITE_URI_PREFIX}{self.database_path()}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def _default_data_dir() -> Path:
    if os.name == "nt":
        override, fallback = "LOCALAPPDATA", Path("AppData") / "Local"
    else:
        override, fallback = "XDG_DATA_HOME", Path(".local") / "share"
    base = optional_env_var(override)
    base_path = Path(base) if base else Path.home() / fallback
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def get_storage_config() -> StorageConfig:
    configured = optional_env_var("BULKGRAPH_DATA_DIR")
    return StorageConfig(data_dir=Path(configured) if configured else _default_data_dir())


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    uri = optional_env_var("DATABASE_URI")
    if uri is not None:
        return DatabaseConfig(uri=uri)
    return DatabaseConfig(uri=(storage or get_storage_config()).database_uri())
