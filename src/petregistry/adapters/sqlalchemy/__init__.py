"""SQLAlchemy adapter package for petregistry."""

from __future__ import annotations

from .mappings import (
    address_table,
    create_all_tables,
    mapper_registry,
    owner_pet_table,
    owner_table,
    pet_table,
    start_mappers,
)
from .repositories import (
    SqlAlchemyAddressRepository,
    SqlAlchemyOwnerRepository,
    SqlAlchemyPetRepository,
)
from .unit_of_work import (
    SqlAlchemyOwnershipUnitOfWork,
    StartupError,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyAddressRepository",
    "SqlAlchemyOwnerRepository",
    "SqlAlchemyOwnershipUnitOfWork",
    "SqlAlchemyPetRepository",
    "StartupError",
    "address_table",
    "create_all_tables",
    "mapper_registry",
    "owner_pet_table",
    "owner_table",
    "pet_table",
    "shutdown",
    "startup",
]
