"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_int_env_var
from .errors import ConfigurationError
from .logging import configure_logging
from .queries import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, QueryConfig, get_query_config
from .storage import (
    DatabaseConfig,
    StorageConfig,
    get_database_config,
    get_database_uri,
    get_storage_config,
)

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "ConfigurationError",
    "DatabaseConfig",
    "QueryConfig",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_database_uri",
    "get_query_config",
    "get_storage_config",
    "optional_int_env_var",
]
