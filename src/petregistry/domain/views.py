"""Read-side views handed to callers, plus paging value objects."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final
from uuid import UUID  # noqa: TC003  # resolved at runtime by serializers

from petregistry.domain.model import Gender  # noqa: TC001

if TYPE_CHECKING:
    from petregistry.domain.model import Address, Owner, Pet

DEFAULT_PAGE_SIZE: Final[int] = 20
MAX_PAGE_SIZE: Final[int] = 200


@dataclass(frozen=True, slots=True)
class AddressView:
    city: str
    type: str
    address_name: str
    number: str


@dataclass(frozen=True, slots=True)
class PetView:
    id: UUID
    name: str
    type: str
    age: int | None
    deceased: bool


@dataclass(frozen=True, slots=True)
class OwnerView:
    id: UUID
    name: str
    first_name: str
    address: AddressView
    age: int | None
    gender: Gender
    deceased: bool
    pets: tuple[PetView, ...]


@dataclass(frozen=True, slots=True)
class PageRequest:
    """Zero-based page index and page size."""

    page: int = 0
    size: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return self.page * self.size


@dataclass(frozen=True, slots=True)
class Page[T]:
    items: tuple[T, ...]
    page: int
    size: int
    total: int

    @property
    def total_pages(self) -> int:
        if self.size <= 0:
            return 0
        return -(-self.total // self.size)


def address_view(address: Address) -> AddressView:
    return AddressView(
        city=address.city,
        type=address.type,
        address_name=address.address_name,
        number=address.number,
    )


def pet_view(pet: Pet) -> PetView:
    return PetView(
        id=pet.id,
        name=pet.name,
        type=pet.type,
        age=pet.age,
        deceased=pet.deceased,
    )


def owner_view(owner: Owner) -> OwnerView:
    """Snapshot an owner with its full pet set, deceased pets included."""
    pets = sorted(owner.pets, key=lambda pet: (pet.name, str(pet.id)))
    return OwnerView(
        id=owner.id,
        name=owner.name,
        first_name=owner.first_name,
        address=address_view(owner.address),
        age=owner.age,
        gender=owner.gender,
        deceased=owner.deceased,
        pets=tuple(pet_view(pet) for pet in pets),
    )
