"""Field validation for incoming commands.

Runs before any unit of work is opened so a rejected command never touches
the store. Every check raises ``FieldValidationError``.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from petregistry.domain.errors import FieldValidationError
from petregistry.domain.model import Gender
from petregistry.domain.views import MAX_PAGE_SIZE

if TYPE_CHECKING:
    from petregistry.domain.commands import NewOwner, NewPet, OwnerChanges, PetChanges
    from petregistry.domain.model import AddressLocation
    from petregistry.domain.views import PageRequest


def require_text(field: str, value: str | None, *, label: str) -> str:
    if value is None or not value.strip():
        raise FieldValidationError(field, f"{label} is required")
    return value


def require_positive_age(value: int | None) -> int | None:
    if value is not None and value <= 0:
        raise FieldValidationError("age", "Age must be positive")
    return value


def parse_gender(value: Gender | str | None) -> Gender:
    if value is None:
        raise FieldValidationError("gender", "Invalid gender value")
    try:
        return Gender.parse(value)
    except ValueError as exc:
        raise FieldValidationError("gender", "Invalid gender value") from exc


def validate_location(location: AddressLocation) -> AddressLocation:
    require_text("address.city", location.city, label="Address city")
    require_text("address.type", location.type, label="Address type")
    require_text("address.address_name", location.address_name, label="Address name")
    require_text("address.number", location.number, label="Address number")
    return location


def validate_new_owner(command: NewOwner) -> NewOwner:
    """Return ``command`` with its gender normalised, or raise."""
    require_text("name", command.name, label="Owner name")
    require_text("first_name", command.first_name, label="Owner first name")
    require_positive_age(command.age)
    gender = parse_gender(command.gender)
    validate_location(command.address)
    return replace(command, gender=gender)


def validate_owner_changes(changes: OwnerChanges) -> OwnerChanges:
    if changes.name is not None:
        require_text("name", changes.name, label="Owner name")
    if changes.first_name is not None:
        require_text("first_name", changes.first_name, label="Owner first name")
    require_positive_age(changes.age)
    if changes.address is not None:
        validate_location(changes.address)
    if changes.gender is not None:
        return replace(changes, gender=parse_gender(changes.gender))
    return changes


def validate_new_pet(command: NewPet) -> NewPet:
    require_text("name", command.name, label="Pet name")
    require_text("type", command.type, label="Pet type")
    require_positive_age(command.age)
    return command


def validate_pet_changes(changes: PetChanges) -> PetChanges:
    if changes.name is not None:
        require_text("name", changes.name, label="Pet name")
    if changes.type is not None:
        require_text("type", changes.type, label="Pet type")
    require_positive_age(changes.age)
    return changes


def validate_page(page: PageRequest) -> PageRequest:
    if page.page < 0:
        raise FieldValidationError("page", "Page index must not be negative")
    if not 1 <= page.size <= MAX_PAGE_SIZE:
        raise FieldValidationError("size", f"Page size must be between 1 and {MAX_PAGE_SIZE}")
    return page
