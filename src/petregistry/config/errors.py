"""Configuration errors."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """An environment override holds a value petregistry cannot use."""
