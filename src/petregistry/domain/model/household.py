"""Owners, pets and the many-to-many ownership link between them.

Owner is the owning side of the link. Every mutation goes through
``Owner.adopt`` / ``Owner.release`` so both sides always agree.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from .entity import MortalEntity
from .enums import EntityType, Gender

if TYPE_CHECKING:
    from .address import Address


@dataclass(frozen=True, slots=True)
class OwnerIdentity:
    """Display identity of an owner. Not unique: see homonym groups."""

    name: str
    first_name: str

    def __str__(self) -> str:
        return f"{self.first_name} {self.name}"


@dataclass(eq=False, kw_only=True)
class Owner(MortalEntity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.OWNER

    name: str
    first_name: str
    gender: Gender
    age: int | None = None

    _address: Address = field(repr=False)
    _pets: set[Pet] = field(default_factory=set["Pet"], repr=False)

    @property
    def identity(self) -> OwnerIdentity:
        return OwnerIdentity(name=self.name, first_name=self.first_name)

    @property
    def address(self) -> Address:
        return self._address

    @property
    def pets(self) -> frozenset[Pet]:
        return frozenset(self._pets)

    def owns(self, pet: Pet) -> bool:
        return pet in self._pets

    def move_to(self, address: Address) -> None:
        # Existing co-ownerships are not re-checked.
        self._address = address

    def adopt(self, pet: Pet) -> None:
        if pet in self._pets:
            raise ValueError("pet is already owned by this owner")
        self._pets.add(pet)
        pet._attach_owner(self)  # pyright: ignore[reportPrivateUsage] # noqa: SLF001

    def release(self, pet: Pet) -> None:
        if pet not in self._pets:
            raise ValueError("pet is not owned by this owner")
        self._pets.discard(pet)
        pet._detach_owner(self)  # pyright: ignore[reportPrivateUsage] # noqa: SLF001


@dataclass(eq=False, kw_only=True)
class Pet(MortalEntity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.PET

    name: str
    type: str
    age: int | None = None

    # Inverse side; owned by Owner
    _owners: set[Owner] = field(default_factory=set["Owner"], repr=False)
    # Bumped on every link change so concurrent writers to one pet collide
    _revision: int = field(default=0, init=False, repr=False)

    @property
    def owners(self) -> frozenset[Owner]:
        return frozenset(self._owners)

    @property
    def is_unclaimed(self) -> bool:
        return not self._owners

    def is_owned_by(self, owner: Owner) -> bool:
        return owner in self._owners

    def has_owner_at(self, address: Address) -> bool:
        return any(owner.address.same_place_as(address) for owner in self._owners)

    # Friend primitives (called only by Owner)
    def _attach_owner(self, owner: Owner) -> None:
        self._owners.add(owner)
        self._revision += 1

    def _detach_owner(self, owner: Owner) -> None:
        self._owners.discard(owner)
        self._revision += 1
