"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import AddressRepository, OwnerRepository, PetRepository, Repository
from .unit_of_work import (
    OwnershipRepositories,
    OwnershipUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "AddressRepository",
    "OwnerRepository",
    "OwnershipRepositories",
    "OwnershipUnitOfWork",
    "PetRepository",
    "Repository",
    "RepositoryCollection",
    "UnitOfWork",
]
