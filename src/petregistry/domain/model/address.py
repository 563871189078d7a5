"""Addresses: deduplicated records compared by their structural location."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from .entity import Entity
from .enums import EntityType


@dataclass(frozen=True, slots=True)
class AddressLocation:
    """The (city, type, address_name, number) tuple that identifies a place."""

    city: str
    type: str
    address_name: str
    number: str

    def __str__(self) -> str:
        return f"{self.number} {self.address_name} {self.type}, {self.city}"


@dataclass(eq=False, kw_only=True)
class Address(Entity):
    """Persisted address record.

    Two records describe the same household iff their ``location`` values are
    equal; record identity is irrelevant for ownership rules.
    """

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.ADDRESS

    city: str
    type: str
    address_name: str
    number: str

    @classmethod
    def at(cls, location: AddressLocation) -> Address:
        return cls(
            city=location.city,
            type=location.type,
            address_name=location.address_name,
            number=location.number,
        )

    @property
    def location(self) -> AddressLocation:
        return AddressLocation(
            city=self.city,
            type=self.type,
            address_name=self.address_name,
            number=self.number,
        )

    def same_place_as(self, other: Address) -> bool:
        return self.location == other.location
