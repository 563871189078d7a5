"""Homonym resolution: which active owners share a display identity.

A pure query over current state. An identity held by two or more active
owners is a homonym group; actions taken on behalf of such an identity have
to be anchored to a household (address) as well as a name.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

    from petregistry.domain.model import Owner, OwnerIdentity
    from petregistry.domain.ports.persistence import OwnerRepository


@dataclass(frozen=True, slots=True)
class HomonymGroup:
    identity: OwnerIdentity
    members: tuple[Owner, ...]

    def __len__(self) -> int:
        return len(self.members)

    @property
    def is_ambiguous(self) -> bool:
        return len(self.members) >= 2


@dataclass(frozen=True, slots=True)
class HomonymWarning:
    """Raised alongside (not instead of) an owner creation that duplicates an identity."""

    identity: OwnerIdentity
    existing_owner_ids: tuple[UUID, ...]


def resolve_homonym_group(owners: OwnerRepository, identity: OwnerIdentity) -> HomonymGroup:
    """Return the active owners whose name and first name match ``identity`` exactly."""

    matches = owners.find_active_by_identity(identity)
    members = tuple(
        owner
        for owner in matches
        if owner.is_active
        and owner.name == identity.name
        and owner.first_name == identity.first_name
    )
    return HomonymGroup(identity=identity, members=members)
