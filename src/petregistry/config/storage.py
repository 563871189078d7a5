"""Where the registry database lives.

``DATABASE_URI`` wins outright. Otherwise the SQLite file sits in
``PETREGISTRY_DATA_DIR``, or in the platform's per-user data directory.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "petregistry"
DEFAULT_DB_FILENAME: Final[str] = "petregistry.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME

    @property
    def database_file(self) -> Path:
        return self.data_dir.expanduser().resolve() / self.database_filename

    def sqlite_uri(self) -> str:
        """Return the SQLite URI for the database file, creating its directory."""

        path = self.database_file
        path.parent.mkdir(parents=True, exist_ok=True)
        return f"sqlite+pysqlite:///{path}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def _user_data_root() -> Path:
    if os.name == "nt":
        configured = os.getenv("LOCALAPPDATA")
        fallback = Path.home() / "AppData" / "Local"
    else:
        configured = os.getenv("XDG_DATA_HOME")
        fallback = Path.home() / ".local" / "share"
    return Path(configured) if configured else fallback


def get_storage_config() -> StorageConfig:
    override = os.getenv("PETREGISTRY_DATA_DIR")
    data_dir = Path(override) if override else _user_data_root() / APP_DIR_NAME
    return StorageConfig(data_dir=data_dir.expanduser().resolve())


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    uri = os.getenv("DATABASE_URI")
    if uri:
        return DatabaseConfig(uri=uri)
    return DatabaseConfig(uri=(storage or get_storage_config()).sqlite_uri())


def get_database_uri() -> str:
    return get_database_config().uri
