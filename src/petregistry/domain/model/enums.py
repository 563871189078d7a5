"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class EntityType(StrEnum):
    """Discriminator used in error reporting and logging."""

    ADDRESS = "address"
    OWNER = "owner"
    PET = "pet"


class Gender(StrEnum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, value: str | Gender) -> Gender:
        """Return the member for ``value``, accepting any letter case."""
        if isinstance(value, Gender):
            return value
        try:
            return cls(value.strip().upper())
        except ValueError as exc:
            raise ValueError(f"Invalid gender value: {value!r}") from exc


class LifecycleState(StrEnum):
    ACTIVE = "active"
    DECEASED = "deceased"
