"""Input commands accepted by the ownership coordinator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from petregistry.domain.model import AddressLocation, Gender


@dataclass(frozen=True, slots=True, kw_only=True)
class NewOwner:
    name: str
    first_name: str
    address: AddressLocation
    gender: Gender | str
    age: int | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class OwnerChanges:
    """Partial owner update; ``None`` leaves a field untouched."""

    name: str | None = None
    first_name: str | None = None
    address: AddressLocation | None = None
    gender: Gender | str | None = None
    age: int | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class NewPet:
    name: str
    type: str
    age: int | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class PetChanges:
    """Partial pet update; ``None`` leaves a field untouched."""

    name: str | None = None
    type: str | None = None
    age: int | None = None
