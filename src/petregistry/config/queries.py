"""Defaults for paginated read queries."""

from __future__ import annotations

from dataclasses import dataclass

from petregistry.domain.views import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

from .env import optional_int_env_var
from .errors import ConfigurationError

__all__ = ["DEFAULT_PAGE_SIZE", "MAX_PAGE_SIZE", "QueryConfig", "get_query_config"]


@dataclass(frozen=True, slots=True)
class QueryConfig:
    page_size: int = DEFAULT_PAGE_SIZE


def get_query_config() -> QueryConfig:
    page_size = optional_int_env_var("PETREGISTRY_PAGE_SIZE", default=DEFAULT_PAGE_SIZE)
    if not 1 <= page_size <= MAX_PAGE_SIZE:
        raise ConfigurationError(
            f"PETREGISTRY_PAGE_SIZE must be between 1 and {MAX_PAGE_SIZE}, got {page_size}"
        )
    return QueryConfig(page_size=page_size)
