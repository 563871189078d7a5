"""End-to-end ownership flows against the migrated SQLite store."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from petregistry.domain.commands import NewOwner, NewPet, OwnerChanges
from petregistry.domain.errors import FailureReason, InvalidOperationError, NotFoundError
from petregistry.domain.homonyms import HomonymWarning
from petregistry.domain.ownership import OwnershipCoordinator
from petregistry.domain.views import PageRequest
from tests.helpers.ownership import make_location

if TYPE_CHECKING:
    from collections.abc import Callable

    from petregistry.adapters.sqlalchemy.unit_of_work import SqlAlchemyOwnershipUnitOfWork


@pytest.fixture
def coordinator(
    sqlite_unit_of_work: Callable[[], SqlAlchemyOwnershipUnitOfWork],
) -> OwnershipCoordinator:
    return OwnershipCoordinator(sqlite_unit_of_work)


def _new_owner(
    *,
    name: str = "Doe",
    first_name: str = "Jane",
    number: str = "1",
    gender: str = "female",
) -> NewOwner:
    return NewOwner(
        name=name,
        first_name=first_name,
        address=make_location(number=number),
        gender=gender,
        age=35,
    )


def test_first_owner_then_housemate_then_stranger(coordinator: OwnershipCoordinator) -> None:
    first = coordinator.create_owner(_new_owner()).owner
    housemate = coordinator.create_owner(
        _new_owner(first_name="John", gender="male")
    ).owner
    stranger = coordinator.create_owner(
        _new_owner(name="Roe", number="2")
    ).owner
    pet = coordinator.create_pet(NewPet(name="Rex", type="dog"))

    view = coordinator.assign_pet(first.id, pet.id)
    assert [p.id for p in view.pets] == [pet.id]

    coordinator.assign_pet(housemate.id, pet.id)

    with pytest.raises(InvalidOperationError) as exc:
        coordinator.assign_pet(stranger.id, pet.id)
    assert exc.value.reason is FailureReason.ADDRESS_MISMATCH

    with pytest.raises(InvalidOperationError) as exc:
        coordinator.assign_pet(first.id, pet.id)
    assert exc.value.reason is FailureReason.ALREADY_ASSIGNED

    assert [p.id for p in coordinator.pets_of_owner(housemate.id)] == [pet.id]


def test_homonym_safe_removal(
    sqlite_unit_of_work: Callable[[], SqlAlchemyOwnershipUnitOfWork],
) -> None:
    warnings: list[HomonymWarning] = []
    coordinator = OwnershipCoordinator(sqlite_unit_of_work, on_homonym=warnings.append)
    owner_1 = coordinator.create_owner(_new_owner(number="1")).owner
    created_2 = coordinator.create_owner(_new_owner(number="2"))
    owner_2 = created_2.owner
    pet = coordinator.create_pet(NewPet(name="Tom", type="cat"))
    coordinator.assign_pet(owner_2.id, pet.id)

    assert created_2.homonym_warning is not None
    assert warnings == [created_2.homonym_warning]

    with pytest.raises(InvalidOperationError) as exc:
        coordinator.remove_pet(owner_1.id, pet.id)
    assert exc.value.reason is FailureReason.ADDRESS_MISMATCH

    coordinator.remove_pet(owner_2.id, pet.id)

    assert coordinator.pets_of_owner(owner_2.id) == ()


def test_deceased_pet_is_still_removable(coordinator: OwnershipCoordinator) -> None:
    owner = coordinator.create_owner(_new_owner()).owner
    pet = coordinator.create_pet(NewPet(name="Rex", type="dog"))
    coordinator.assign_pet(owner.id, pet.id)

    coordinator.mark_pet_deceased(pet.id)
    coordinator.mark_pet_deceased(pet.id)

    with pytest.raises(NotFoundError):
        coordinator.assign_pet(owner.id, pet.id)

    coordinator.remove_pet(owner.id, pet.id)

    with pytest.raises(InvalidOperationError) as exc:
        coordinator.remove_pet(owner.id, pet.id)
    assert exc.value.reason is FailureReason.NOT_ASSIGNED


def test_deceased_owner_keeps_pets_and_is_not_updatable(
    coordinator: OwnershipCoordinator,
) -> None:
    owner = coordinator.create_owner(_new_owner()).owner
    pet = coordinator.create_pet(NewPet(name="Rex", type="dog"))
    coordinator.assign_pet(owner.id, pet.id)

    coordinator.mark_owner_deceased(owner.id)

    with pytest.raises(NotFoundError):
        coordinator.update_owner(owner.id, OwnerChanges(age=50))
    page = coordinator.pets_in_city("Paris", PageRequest())
    assert page.total == 0
    assert [p.id for p in coordinator.pets_of_owner(owner.id)] == [pet.id]


def test_moving_an_owner_reuses_or_creates_addresses(coordinator: OwnershipCoordinator) -> None:
    owner = coordinator.create_owner(_new_owner()).owner
    neighbour = coordinator.create_owner(
        _new_owner(name="Roe", number="2")
    ).owner

    moved = coordinator.update_owner(owner.id, OwnerChanges(address=make_location(number="2")))
    relocated = coordinator.update_owner(
        neighbour.id, OwnerChanges(address=make_location("Lyon"))
    )

    assert moved.address.number == "2"
    assert relocated.address.city == "Lyon"


def test_city_queries_through_coordinator(coordinator: OwnershipCoordinator) -> None:
    woman = coordinator.create_owner(_new_owner()).owner
    man = coordinator.create_owner(
        _new_owner(name="Roe", first_name="John", number="2", gender="male")
    ).owner
    cat = coordinator.create_pet(NewPet(name="Tom", type="cat"))
    dog = coordinator.create_pet(NewPet(name="Rex", type="dog"))
    coordinator.assign_pet(woman.id, cat.id)
    coordinator.assign_pet(man.id, dog.id)

    in_city = coordinator.pets_in_city("Paris", PageRequest(page=0, size=1))
    of_women = coordinator.pets_of_women_in_city("paris")
    dog_owners = coordinator.owners_by_pet_type_and_city("dog", "Paris")

    assert in_city.total == 2
    assert [p.name for p in in_city.items] == ["Rex"]
    assert [p.id for p in of_women.items] == [cat.id]
    assert [o.id for o in dog_owners] == [man.id]
