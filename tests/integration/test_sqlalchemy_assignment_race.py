from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from petregistry.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyOwnershipUnitOfWork,
    shutdown,
    startup,
)
from petregistry.domain.errors import StoreConflictError
from petregistry.domain.model.address import Address
from tests.helpers.ownership import make_location, make_owner, make_pet

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from petregistry.domain.model.household import Owner, Pet


@pytest.fixture
def file_backed_storage(tmp_path: Path) -> Iterator[None]:
    # Two sessions need two connections onto the same database.
    engine = create_engine(f"sqlite+pysqlite:///{tmp_path / 'registry.db'}", future=True)
    startup(engine=engine, force=True)
    try:
        yield
    finally:
        shutdown()


def _seed_neighbours_and_unclaimed_pet() -> tuple[Owner, Owner, Pet]:
    paris = make_owner("Martin", "Alice", address=Address.at(make_location("Paris")))
    lyon = make_owner("Durand", "Bruno", address=Address.at(make_location("Lyon")))
    pet = make_pet()
    with SqlAlchemyOwnershipUnitOfWork() as uow:
        uow.repositories.owners.add(paris)
        uow.repositories.owners.add(lyon)
        uow.repositories.pets.add(pet)
        uow.commit()
    return paris, lyon, pet


def _owner_ids_of(pet: Pet) -> set[object]:
    with SqlAlchemyOwnershipUnitOfWork() as uow:
        loaded = uow.repositories.pets.find_active_with_owners(pet.id)
        assert loaded is not None
        return {owner.id for owner in loaded.owners}


@pytest.mark.usefixtures("file_backed_storage")
def test_second_assignment_from_stale_read_is_rejected() -> None:
    paris, lyon, pet = _seed_neighbours_and_unclaimed_pet()

    with SqlAlchemyOwnershipUnitOfWork() as first, SqlAlchemyOwnershipUnitOfWork() as second:
        first_owner = first.repositories.owners.find_active(paris.id)
        first_pet = first.repositories.pets.find_active_with_owners(pet.id)
        second_owner = second.repositories.owners.find_active(lyon.id)
        second_pet = second.repositories.pets.find_active_with_owners(pet.id)
        assert first_owner is not None
        assert second_owner is not None
        assert first_pet is not None
        assert second_pet is not None
        assert first_pet.is_unclaimed
        assert second_pet.is_unclaimed

        first_owner.adopt(first_pet)
        first.commit()

        second_owner.adopt(second_pet)
        with pytest.raises(StoreConflictError):
            second.commit()

    assert _owner_ids_of(pet) == {paris.id}


@pytest.mark.usefixtures("file_backed_storage")
def test_assignments_in_sequence_both_succeed() -> None:
    paris, lyon, pet = _seed_neighbours_and_unclaimed_pet()
    neighbour = make_owner("Petit", "Chloe", address=paris.address)
    with SqlAlchemyOwnershipUnitOfWork() as uow:
        uow.repositories.owners.add(neighbour)
        uow.commit()

    for owner_id in (paris.id, neighbour.id):
        with SqlAlchemyOwnershipUnitOfWork() as uow:
            owner = uow.repositories.owners.find_active(owner_id)
            loaded = uow.repositories.pets.find_active_with_owners(pet.id)
            assert owner is not None
            assert loaded is not None
            owner.adopt(loaded)
            uow.commit()

    assert _owner_ids_of(pet) == {paris.id, neighbour.id}
    assert lyon.id not in _owner_ids_of(pet)
