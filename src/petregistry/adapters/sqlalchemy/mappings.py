"""SQLAlchemy mapping metadata for the petregistry domain model."""

from __future__ import annotations

import logging
import uuid
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    Column,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    UniqueConstraint,
    Uuid,
    false,
    orm,
)
from sqlalchemy.orm import configure_mappers, relationship

from petregistry.domain.model import Address, Gender, Owner, Pet

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Core tables -----------------------------------------------------------------

address_table = Table(
    "address",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("city", String, nullable=False),
    Column("type", String, nullable=False),
    Column("address_name", String, nullable=False),
    Column("number", String, nullable=False),
    UniqueConstraint("city", "type", "address_name", "number"),
)

owner_table = Table(
    "owner",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("name", String, nullable=False),
    Column("first_name", String, nullable=False),
    Column("age", Integer, nullable=True),
    Column("gender", Enum(Gender, native_enum=False), nullable=False),
    Column(
        "address_id",
        UUIDColumnType,
        ForeignKey("address.id"),
        nullable=False,
    ),
    Column("deceased", Boolean, key="_deceased", nullable=False, server_default=false()),
    Index("ix_owner_identity", "name", "first_name"),
)

pet_table = Table(
    "pet",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("name", String, nullable=False),
    Column("type", String, nullable=False),
    Column("age", Integer, nullable=True),
    Column("deceased", Boolean, key="_deceased", nullable=False, server_default=false()),
    Column("version", Integer, key="_revision", nullable=False, server_default="0"),
)

# One row per link. Competing link changes collide on the pet version column.
owner_pet_table = Table(
    "owner_pet",
    mapper_registry.metadata,
    Column(
        "owner_id", UUIDColumnType, ForeignKey("owner.id", ondelete="CASCADE"), primary_key=True
    ),
    Column("pet_id", UUIDColumnType, ForeignKey("pet.id", ondelete="CASCADE"), primary_key=True),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Address, address_table)

    mapper_registry.map_imperatively(
        Owner,
        owner_table,
        properties={
            "_address": relationship(Address, lazy="joined", innerjoin=True),
            "_pets": relationship(
                Pet,
                secondary=owner_pet_table,
                back_populates="_owners",
                collection_class=set,
            ),
        },
    )

    mapper_registry.map_imperatively(
        Pet,
        pet_table,
        version_id_col=pet_table.c._revision,
        version_id_generator=False,
        properties={
            "_owners": relationship(
                Owner,
                secondary=owner_pet_table,
                back_populates="_pets",
                collection_class=set,
            ),
        },
    )

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
