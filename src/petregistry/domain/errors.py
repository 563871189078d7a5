"""Typed failures raised by the ownership coordinator.

The rules engine never raises; it returns decisions that the coordinator
turns into these exceptions.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

    from petregistry.domain.model import EntityType


class FailureReason(StrEnum):
    ALREADY_ASSIGNED = "already-assigned"
    ADDRESS_MISMATCH = "address-mismatch"
    NOT_ASSIGNED = "not-assigned"
    INVALID_FIELD = "invalid-field"


class OwnershipError(Exception):
    """Base class for every failure surfaced by the ownership services."""


class NotFoundError(OwnershipError):
    """Referenced record does not exist (or is not active where that is required)."""

    def __init__(self, entity_type: EntityType, entity_id: UUID, *, active_only: bool = True):
        self.entity_type = entity_type
        self.entity_id = entity_id
        qualifier = "Active " if active_only else ""
        detail = " (either doesn't exist or is deceased)" if active_only else ""
        super().__init__(f"{qualifier}{entity_type} not found with id: {entity_id}{detail}")


class InvalidOperationError(OwnershipError):
    """A business rule or a field constraint was violated."""

    def __init__(self, reason: FailureReason, message: str) -> None:
        self.reason = reason
        super().__init__(message)


class FieldValidationError(InvalidOperationError):
    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(FailureReason.INVALID_FIELD, message)


class StoreError(OwnershipError):
    """The entity store could not complete the unit of work."""


class StoreConflictError(StoreError):
    """A commit-time consistency check rejected the unit of work."""
