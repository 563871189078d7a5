"""Public domain model surface."""

from __future__ import annotations

from petregistry.domain.model.address import Address, AddressLocation
from petregistry.domain.model.entity import Entity, MortalEntity
from petregistry.domain.model.enums import EntityType, Gender, LifecycleState
from petregistry.domain.model.household import Owner, OwnerIdentity, Pet

__all__ = [  # noqa: RUF022
    # base
    "Entity",
    "MortalEntity",
    # addresses
    "Address",
    "AddressLocation",
    # household
    "Owner",
    "OwnerIdentity",
    "Pet",
    # enums
    "EntityType",
    "Gender",
    "LifecycleState",
]
