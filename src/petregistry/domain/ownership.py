"""Ownership coordinator: the service boundary for owners, pets and their links.

Every public operation is one unit of work: load, decide, mutate, persist,
all committed together or not at all. Field validation happens before the
unit of work is opened. Store failures are logged and propagated unchanged;
nothing is retried here.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

from petregistry.domain.addresses import resolve_or_create_address
from petregistry.domain.errors import (
    FailureReason,
    InvalidOperationError,
    NotFoundError,
    StoreError,
)
from petregistry.domain.homonyms import HomonymWarning, resolve_homonym_group
from petregistry.domain.model import EntityType, Gender, Owner, Pet
from petregistry.domain.rules import can_assign, can_remove
from petregistry.domain.validation import (
    require_text,
    validate_new_owner,
    validate_new_pet,
    validate_owner_changes,
    validate_page,
    validate_pet_changes,
)
from petregistry.domain.views import DEFAULT_PAGE_SIZE, Page, PageRequest, owner_view, pet_view

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator
    from uuid import UUID

    from petregistry.domain.commands import NewOwner, NewPet, OwnerChanges, PetChanges
    from petregistry.domain.ports.unit_of_work import OwnershipRepositories, OwnershipUnitOfWork
    from petregistry.domain.rules import Decision
    from petregistry.domain.views import OwnerView, PetView

log = logging.getLogger(__name__)

type UnitOfWorkFactory = Callable[[], OwnershipUnitOfWork]
type HomonymHook = Callable[[HomonymWarning], None]


@dataclass(frozen=True, slots=True)
class CreatedOwner:
    """Result of ``create_owner``: the new owner plus any duplicate-identity warning."""

    owner: OwnerView
    homonym_warning: HomonymWarning | None = None


class OwnershipCoordinator:
    """Orchestrates ownership operations against a unit-of-work factory."""

    def __init__(
        self,
        unit_of_work_factory: UnitOfWorkFactory,
        *,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        on_homonym: HomonymHook | None = None,
    ) -> None:
        self._unit_of_work_factory = unit_of_work_factory
        self._default_page_size = default_page_size
        self._on_homonym = on_homonym

    # Links ---------------------------------------------------------------

    def assign_pet(self, owner_id: UUID, pet_id: UUID) -> OwnerView:
        """Link an active pet to an active owner and return the refreshed owner."""

        log.info("Assign pet %s to owner %s", pet_id, owner_id)
        with self._transaction("assign_pet") as uow:
            repositories = uow.repositories
            owner = self._require_active_owner(repositories, owner_id)
            pet = repositories.pets.find_active_with_owners(pet_id)
            if pet is None:
                raise NotFoundError(EntityType.PET, pet_id)

            self._enforce(can_assign(owner, pet), owner=owner, pet=pet)

            owner.adopt(pet)
            repositories.owners.add(owner)
            uow.commit()
            log.info(
                "Assigned pet %s to owner %s at address %s",
                pet.id,
                owner.id,
                owner.address.id,
            )
            return owner_view(owner)

    def remove_pet(self, owner_id: UUID, pet_id: UUID) -> None:
        """Clear the link between an active owner and a pet, deceased pets included."""

        log.info("Remove pet %s from owner %s", pet_id, owner_id)
        with self._transaction("remove_pet") as uow:
            repositories = uow.repositories
            owner = self._require_active_owner(repositories, owner_id)
            pet = repositories.pets.get(pet_id)
            if pet is None:
                raise NotFoundError(EntityType.PET, pet_id, active_only=False)

            group = resolve_homonym_group(repositories.owners, owner.identity)
            if group.is_ambiguous:
                log.info(
                    "Owner %s shares identity %s with %d active owners; anchoring on address",
                    owner.id,
                    group.identity,
                    len(group) - 1,
                )
            self._enforce(can_remove(owner, pet, group), owner=owner, pet=pet)

            owner.release(pet)
            repositories.owners.add(owner)
            uow.commit()
            log.info("Removed pet %s from owner %s", pet.id, owner.id)

    # Lifecycle -----------------------------------------------------------

    def mark_pet_deceased(self, pet_id: UUID) -> None:
        """Flag a pet deceased. Re-marking an already deceased pet is a silent no-op."""

        log.info("Mark pet %s as deceased", pet_id)
        with self._transaction("mark_pet_deceased") as uow:
            pet = uow.repositories.pets.get(pet_id)
            if pet is None:
                raise NotFoundError(EntityType.PET, pet_id, active_only=False)
            if not pet.mark_deceased():
                log.info("Pet %s is already deceased", pet_id)
                return
            uow.repositories.pets.add(pet)
            uow.commit()

    def mark_owner_deceased(self, owner_id: UUID) -> None:
        """Flag an owner deceased without touching the owner's pets."""

        log.info("Mark owner %s as deceased", owner_id)
        with self._transaction("mark_owner_deceased") as uow:
            owner = uow.repositories.owners.get(owner_id)
            if owner is None:
                raise NotFoundError(EntityType.OWNER, owner_id, active_only=False)
            if not owner.mark_deceased():
                log.info("Owner %s is already deceased", owner_id)
                return
            uow.repositories.owners.add(owner)
            uow.commit()

    # Owners --------------------------------------------------------------

    def create_owner(self, command: NewOwner) -> CreatedOwner:
        """Create an owner at a resolved address.

        Duplicated identities are allowed; they are reported through the
        returned ``homonym_warning`` and the ``on_homonym`` hook.
        """

        command = validate_new_owner(command)
        log.info("Create owner %s %s", command.first_name, command.name)
        warning: HomonymWarning | None = None
        with self._transaction("create_owner") as uow:
            repositories = uow.repositories
            owner = Owner(
                name=command.name,
                first_name=command.first_name,
                gender=Gender.parse(command.gender),
                age=command.age,
                _address=resolve_or_create_address(repositories.addresses, command.address),
            )
            group = resolve_homonym_group(repositories.owners, owner.identity)
            if group.members:
                warning = HomonymWarning(
                    identity=group.identity,
                    existing_owner_ids=tuple(member.id for member in group.members),
                )
                log.warning(
                    "Potential homonym detected for %s (%d active owners already)",
                    group.identity,
                    len(group),
                )
            repositories.owners.add(owner)
            uow.commit()
            view = owner_view(owner)

        if warning is not None and self._on_homonym is not None:
            self._on_homonym(warning)
        return CreatedOwner(owner=view, homonym_warning=warning)

    def update_owner(self, owner_id: UUID, changes: OwnerChanges) -> OwnerView:
        """Apply a partial update to an active owner.

        Moving an owner does not re-check the addresses of pets it co-owns.
        """

        changes = validate_owner_changes(changes)
        log.info("Update owner %s with %s", owner_id, changes)
        with self._transaction("update_owner") as uow:
            repositories = uow.repositories
            owner = self._require_active_owner(repositories, owner_id)
            if changes.name is not None:
                owner.name = changes.name
            if changes.first_name is not None:
                owner.first_name = changes.first_name
            if changes.age is not None:
                owner.age = changes.age
            if changes.gender is not None:
                owner.gender = Gender.parse(changes.gender)
            if changes.address is not None:
                owner.move_to(resolve_or_create_address(repositories.addresses, changes.address))
            repositories.owners.add(owner)
            uow.commit()
            return owner_view(owner)

    # Pets ----------------------------------------------------------------

    def create_pet(self, command: NewPet) -> PetView:
        command = validate_new_pet(command)
        log.info("Create pet %s (%s)", command.name, command.type)
        with self._transaction("create_pet") as uow:
            pet = Pet(name=command.name, type=command.type, age=command.age)
            uow.repositories.pets.add(pet)
            uow.commit()
            return pet_view(pet)

    def update_pet(self, pet_id: UUID, changes: PetChanges) -> PetView:
        changes = validate_pet_changes(changes)
        log.info("Update pet %s with %s", pet_id, changes)
        with self._transaction("update_pet") as uow:
            pet = uow.repositories.pets.get(pet_id)
            if pet is None or not pet.is_active:
                raise NotFoundError(EntityType.PET, pet_id)
            if changes.name is not None:
                pet.name = changes.name
            if changes.type is not None:
                pet.type = changes.type
            if changes.age is not None:
                pet.age = changes.age
            uow.repositories.pets.add(pet)
            uow.commit()
            return pet_view(pet)

    # Queries -------------------------------------------------------------

    def pets_of_owner(self, owner_id: UUID) -> tuple[PetView, ...]:
        """Active pets linked to ``owner_id``."""

        log.info("Retrieving pets for owner %s", owner_id)
        with self._transaction("pets_of_owner") as uow:
            pets = uow.repositories.pets.find_active_by_owner(owner_id)
            return tuple(pet_view(pet) for pet in pets)

    def pets_in_city(self, city: str, page: PageRequest | None = None) -> Page[PetView]:
        require_text("city", city, label="City")
        request = validate_page(page or self._default_page())
        log.info("Retrieving pets by city %s (%s)", city, request)
        with self._transaction("pets_in_city") as uow:
            pets, total = uow.repositories.pets.find_active_in_city(city, request)
            return self._page(pets, request, total)

    def pets_of_women_in_city(
        self, city: str | None = None, page: PageRequest | None = None
    ) -> Page[PetView]:
        """Active pets with at least one female owner, optionally filtered by city."""

        if city is not None:
            require_text("city", city, label="City")
        request = validate_page(page or self._default_page())
        log.info("Retrieving pets of women owners in city %s (%s)", city, request)
        with self._transaction("pets_of_women_in_city") as uow:
            pets, total = uow.repositories.pets.find_active_of_women_in_city(city, request)
            return self._page(pets, request, total)

    def owners_by_pet_type_and_city(self, pet_type: str, city: str) -> tuple[OwnerView, ...]:
        require_text("pet_type", pet_type, label="Pet type")
        require_text("city", city, label="City")
        log.info("Retrieving owners of %s pets in %s", pet_type, city)
        with self._transaction("owners_by_pet_type_and_city") as uow:
            owners = uow.repositories.owners.find_active_by_pet_type_and_city(pet_type, city)
            return tuple(owner_view(owner) for owner in owners)

    # Helpers -------------------------------------------------------------

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[OwnershipUnitOfWork]:
        try:
            with self._unit_of_work_factory() as uow:
                yield uow
        except StoreError:
            log.exception("Store failure during %s", operation)
            raise

    def _default_page(self) -> PageRequest:
        return PageRequest(page=0, size=self._default_page_size)

    @staticmethod
    def _page(pets: Iterable[Pet], request: PageRequest, total: int) -> Page[PetView]:
        items = tuple(pet_view(pet) for pet in pets)
        return Page(items=items, page=request.page, size=request.size, total=total)

    @staticmethod
    def _require_active_owner(repositories: OwnershipRepositories, owner_id: UUID) -> Owner:
        owner = repositories.owners.find_active(owner_id)
        if owner is None:
            raise NotFoundError(EntityType.OWNER, owner_id)
        return owner

    @staticmethod
    def _enforce(decision: Decision, *, owner: Owner, pet: Pet) -> None:
        if decision.allowed or decision.reason is None:
            return
        message = _DENIAL_MESSAGES[decision.reason].format(owner=owner.id, pet=pet.id)
        log.info("Refused: %s", message)
        raise InvalidOperationError(decision.reason, message)


_DENIAL_MESSAGES: dict[FailureReason, str] = {
    FailureReason.ALREADY_ASSIGNED: "Pet {pet} already assigned to owner {owner}",
    FailureReason.ADDRESS_MISMATCH: (
        "Address mismatch: owner {owner} does not live with any current owner of pet {pet}"
    ),
    FailureReason.NOT_ASSIGNED: "Pet {pet} is not assigned to owner {owner}",
}
