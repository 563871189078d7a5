"""Ports for persisting domain aggregates.

Each finder documents what it loads eagerly; there is no transparent
lazy-loading contract callers may rely on outside a unit of work.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from petregistry.domain.model import Address, Owner, Pet

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from petregistry.domain.model import AddressLocation, OwnerIdentity
    from petregistry.domain.views import PageRequest


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class AddressRepository(Repository[Address], Protocol):
    """Persistence contract for deduplicated addresses."""

    def find_by_location(self, location: AddressLocation) -> Address | None: ...


@runtime_checkable
class OwnerRepository(Repository[Owner], Protocol):
    """Persistence contract for owners."""

    def get(self, owner_id: UUID) -> Owner | None:
        """Owner by id regardless of its deceased flag."""
        ...

    def find_active(self, owner_id: UUID) -> Owner | None:
        """Active owner by id, address loaded eagerly."""
        ...

    def find_active_by_identity(self, identity: OwnerIdentity) -> Sequence[Owner]:
        """Active owners whose name and first name match exactly (case-sensitive)."""
        ...

    def find_active_by_pet_type_and_city(self, pet_type: str, city: str) -> Sequence[Owner]:
        """Active owners living in ``city`` who own an active pet of ``pet_type``."""
        ...


@runtime_checkable
class PetRepository(Repository[Pet], Protocol):
    """Persistence contract for pets."""

    def get(self, pet_id: UUID) -> Pet | None:
        """Pet by id regardless of its deceased flag; owners load lazily."""
        ...

    def find_active_with_owners(self, pet_id: UUID) -> Pet | None:
        """Active pet by id with its owners and their addresses loaded eagerly."""
        ...

    def find_active_by_owner(self, owner_id: UUID) -> Sequence[Pet]: ...

    def find_active_in_city(self, city: str, page: PageRequest) -> tuple[Sequence[Pet], int]:
        """Page of active pets with an owner in ``city`` (case-sensitive), plus the total."""
        ...

    def find_active_of_women_in_city(
        self, city: str | None, page: PageRequest
    ) -> tuple[Sequence[Pet], int]:
        """Page of active pets with a female owner, optionally in ``city`` (any case)."""
        ...
