"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from petregistry.adapters.sqlalchemy.mappings import (
    address_table,
    owner_pet_table,
    owner_table,
    pet_table,
)
from petregistry.domain.model import Address, Gender, Owner, Pet

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from sqlalchemy import Select
    from sqlalchemy.orm import QueryableAttribute, Session

    from petregistry.domain.model import AddressLocation, OwnerIdentity
    from petregistry.domain.views import PageRequest


class SqlAlchemyAddressRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Address) -> None:
        self.session.add(entity)

    def find_by_location(self, location: AddressLocation) -> Address | None:
        stmt = (
            select(Address)
            .where(address_table.c.city == location.city)
            .where(address_table.c.type == location.type)
            .where(address_table.c.address_name == location.address_name)
            .where(address_table.c.number == location.number)
        )
        return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemyOwnerRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Owner) -> None:
        self.session.add(entity)

    def get(self, owner_id: UUID) -> Owner | None:
        return self.session.get(Owner, owner_id)

    def find_active(self, owner_id: UUID) -> Owner | None:
        stmt = (
            select(Owner)
            .where(owner_table.c.id == owner_id)
            .where(owner_table.c._deceased.is_(False))  # noqa: SLF001
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def find_active_by_identity(self, identity: OwnerIdentity) -> Sequence[Owner]:
        stmt = (
            select(Owner)
            .where(owner_table.c.name == identity.name)
            .where(owner_table.c.first_name == identity.first_name)
            .where(owner_table.c._deceased.is_(False))  # noqa: SLF001
            .order_by(owner_table.c.id)
        )
        return self.session.execute(stmt).scalars().all()

    def find_active_by_pet_type_and_city(self, pet_type: str, city: str) -> Sequence[Owner]:
        owners_of_type = (
            select(owner_pet_table.c.owner_id)
            .join(pet_table, pet_table.c.id == owner_pet_table.c.pet_id)
            .where(pet_table.c.type == pet_type)
            .where(pet_table.c._deceased.is_(False))  # noqa: SLF001
        )
        stmt = (
            select(Owner)
            .join(address_table, address_table.c.id == owner_table.c.address_id)
            .where(address_table.c.city == city)
            .where(owner_table.c._deceased.is_(False))  # noqa: SLF001
            .where(owner_table.c.id.in_(owners_of_type))
            .order_by(owner_table.c.name, owner_table.c.first_name, owner_table.c.id)
        )
        return self.session.execute(stmt).scalars().all()


class SqlAlchemyPetRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Pet) -> None:
        self.session.add(entity)

    def get(self, pet_id: UUID) -> Pet | None:
        return self.session.get(Pet, pet_id)

    def find_active_with_owners(self, pet_id: UUID) -> Pet | None:
        owners = cast("QueryableAttribute[Any]", Pet._owners)  # noqa: SLF001
        stmt = (
            select(Pet)
            .where(pet_table.c.id == pet_id)
            .where(pet_table.c._deceased.is_(False))  # noqa: SLF001
            .options(selectinload(owners))
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def find_active_by_owner(self, owner_id: UUID) -> Sequence[Pet]:
        stmt = (
            select(Pet)
            .join(owner_pet_table, owner_pet_table.c.pet_id == pet_table.c.id)
            .where(owner_pet_table.c.owner_id == owner_id)
            .where(pet_table.c._deceased.is_(False))  # noqa: SLF001
            .order_by(pet_table.c.name, pet_table.c.id)
        )
        return self.session.execute(stmt).scalars().all()

    def find_active_in_city(self, city: str, page: PageRequest) -> tuple[Sequence[Pet], int]:
        owned_in_city = _pets_of_active_owners().where(address_table.c.city == city)
        return self._paged(owned_in_city, page)

    def find_active_of_women_in_city(
        self, city: str | None, page: PageRequest
    ) -> tuple[Sequence[Pet], int]:
        owned_by_women = _pets_of_active_owners().where(owner_table.c.gender == Gender.FEMALE)
        if city is not None:
            owned_by_women = owned_by_women.where(func.lower(address_table.c.city) == city.lower())
        return self._paged(owned_by_women, page)

    def _paged(self, pet_ids: Select[Any], page: PageRequest) -> tuple[Sequence[Pet], int]:
        stmt = (
            select(Pet)
            .where(pet_table.c.id.in_(pet_ids))
            .where(pet_table.c._deceased.is_(False))  # noqa: SLF001
        )
        total = self.session.execute(
            select(func.count()).select_from(stmt.subquery())
        ).scalar_one()
        items = (
            self.session.execute(
                stmt.order_by(pet_table.c.name, pet_table.c.id)
                .offset(page.offset)
                .limit(page.size)
            )
            .scalars()
            .all()
        )
        return items, total


def _pets_of_active_owners() -> Select[Any]:
    return (
        select(owner_pet_table.c.pet_id)
        .join(owner_table, owner_table.c.id == owner_pet_table.c.owner_id)
        .join(address_table, address_table.c.id == owner_table.c.address_id)
        .where(owner_table.c._deceased.is_(False))  # noqa: SLF001
    )


if TYPE_CHECKING:
    from petregistry.domain.ports.persistence import (
        AddressRepository,
        OwnerRepository,
        PetRepository,
    )

    _address_check: AddressRepository = SqlAlchemyAddressRepository(cast("Session", None))
    _owner_check: OwnerRepository = SqlAlchemyOwnerRepository(cast("Session", None))
    _pet_check: PetRepository = SqlAlchemyPetRepository(cast("Session", None))
