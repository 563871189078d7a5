"""Typed readers for optional environment overrides."""

from __future__ import annotations

import os

from .errors import ConfigurationError


def optional_int_env_var(name: str, *, default: int) -> int:
    """Read ``name`` as an integer; unset or blank gives ``default``."""

    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc
