"""
Base building blocks:
identity and the one-way active -> deceased lifecycle.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar
from uuid import UUID, uuid4

from .enums import LifecycleState

if TYPE_CHECKING:
    from .enums import EntityType


def new_id() -> UUID:
    return uuid4()


@dataclass(eq=False, kw_only=True)
class Entity:
    """Internal identity exists immediately in the domain."""

    id: UUID = field(default_factory=new_id)

    # class-level discriminator; subclasses must override
    ENTITY_TYPE: ClassVar[EntityType]

    @property
    def entity_type(self) -> EntityType:
        return self.ENTITY_TYPE


@dataclass(eq=False, kw_only=True)
class MortalEntity(Entity):
    """Entity that is never hard-deleted, only flagged deceased.

    The flag is monotonic: nothing in the domain resets it.
    """

    _deceased: bool = field(default=False, init=False)

    @property
    def deceased(self) -> bool:
        return self._deceased

    @property
    def is_active(self) -> bool:
        return not self._deceased

    @property
    def state(self) -> LifecycleState:
        return LifecycleState.DECEASED if self._deceased else LifecycleState.ACTIVE

    def mark_deceased(self) -> bool:
        """Flag the entity deceased. Returns ``False`` if it already was."""
        if self._deceased:
            return False
        self._deceased = True
        return True
