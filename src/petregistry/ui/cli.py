from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv
from pydantic import BaseModel, TypeAdapter

from petregistry.app import build_coordinator
from petregistry.config import configure_logging
from petregistry.domain.commands import NewOwner, NewPet, OwnerChanges, PetChanges
from petregistry.domain.errors import (
    FieldValidationError,
    InvalidOperationError,
    NotFoundError,
    OwnershipError,
)
from petregistry.domain.model import AddressLocation
from petregistry.domain.views import OwnerView, PageRequest, PetView

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from petregistry.domain.ownership import OwnershipCoordinator
    from petregistry.domain.views import Page

log = logging.getLogger(__name__)

EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_NOT_FOUND = 3
EXIT_INVALID_OPERATION = 4

_OWNER = TypeAdapter(OwnerView)
_OWNERS = TypeAdapter(tuple[OwnerView, ...])
_PET = TypeAdapter(PetView)
_PETS = TypeAdapter(tuple[PetView, ...])


class PetPage(BaseModel):
    items: tuple[PetView, ...]
    page: int
    size: int
    total: int
    total_pages: int

    @classmethod
    def from_page(cls, page: Page[PetView]) -> PetPage:
        return cls(
            items=page.items,
            page=page.page,
            size=page.size,
            total=page.total,
            total_pages=page.total_pages,
        )


def _add_address_arguments(parser: argparse.ArgumentParser, *, required: bool) -> None:
    parser.add_argument("--city", type=str, required=required, help="City of the address")
    parser.add_argument(
        "--street-type",
        type=str,
        required=required,
        help="Street descriptor, e.g. road, street, avenue",
    )
    parser.add_argument("--address-name", type=str, required=required, help="Street name")
    parser.add_argument("--number", type=str, required=required, help="House number")


def _add_page_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--page", type=int, default=0, help="Zero-based page index")
    parser.add_argument(
        "--size",
        type=int,
        default=None,
        help="Page size (defaults to PETREGISTRY_PAGE_SIZE)",
    )


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage owners, pets and who owns which pet")
    subparsers = parser.add_subparsers(dest="command", required=True)

    owner = subparsers.add_parser("owner", help="Owner commands")
    owner_sub = owner.add_subparsers(dest="owner_command", required=True)

    owner_create = owner_sub.add_parser("create", help="Create an owner")
    owner_create.add_argument("--name", type=str, required=True, help="Family name")
    owner_create.add_argument("--first-name", type=str, required=True, help="First name")
    owner_create.add_argument("--gender", type=str, required=True, help="MALE, FEMALE or OTHER")
    owner_create.add_argument("--age", type=int, help="Age in years")
    _add_address_arguments(owner_create, required=True)

    owner_update = owner_sub.add_parser("update", help="Update an active owner")
    owner_update.add_argument("owner_id", type=str)
    owner_update.add_argument("--name", type=str)
    owner_update.add_argument("--first-name", type=str)
    owner_update.add_argument("--gender", type=str)
    owner_update.add_argument("--age", type=int)
    _add_address_arguments(owner_update, required=False)

    owner_deceased = owner_sub.add_parser("deceased", help="Mark an owner as deceased")
    owner_deceased.add_argument("owner_id", type=str)

    owner_pets = owner_sub.add_parser("pets", help="List the active pets of an owner")
    owner_pets.add_argument("owner_id", type=str)

    owner_search = owner_sub.add_parser(
        "search", help="Active owners of a pet type living in a city"
    )
    owner_search.add_argument("--pet-type", type=str, required=True)
    owner_search.add_argument("--city", type=str, required=True)

    pet = subparsers.add_parser("pet", help="Pet commands")
    pet_sub = pet.add_subparsers(dest="pet_command", required=True)

    pet_create = pet_sub.add_parser("create", help="Create a pet")
    pet_create.add_argument("--name", type=str, required=True)
    pet_create.add_argument("--type", type=str, required=True, help="Species, e.g. cat, dog")
    pet_create.add_argument("--age", type=int)

    pet_update = pet_sub.add_parser("update", help="Update an active pet")
    pet_update.add_argument("pet_id", type=str)
    pet_update.add_argument("--name", type=str)
    pet_update.add_argument("--type", type=str)
    pet_update.add_argument("--age", type=int)

    pet_deceased = pet_sub.add_parser("deceased", help="Mark a pet as deceased")
    pet_deceased.add_argument("pet_id", type=str)

    pet_assign = pet_sub.add_parser("assign", help="Assign a pet to an owner")
    pet_assign.add_argument("owner_id", type=str)
    pet_assign.add_argument("pet_id", type=str)

    pet_remove = pet_sub.add_parser("remove", help="Remove a pet from an owner")
    pet_remove.add_argument("owner_id", type=str)
    pet_remove.add_argument("pet_id", type=str)

    pet_city = pet_sub.add_parser("city", help="Active pets owned in a city")
    pet_city.add_argument("city", type=str)
    _add_page_arguments(pet_city)

    pet_women = pet_sub.add_parser("women", help="Active pets with a female owner")
    pet_women.add_argument("--city", type=str)
    _add_page_arguments(pet_women)

    return parser.parse_args(list(argv))


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def _address_from_args(args: argparse.Namespace) -> AddressLocation | None:
    parts = (args.city, args.street_type, args.address_name, args.number)
    if all(part is None for part in parts):
        return None
    if any(part is None for part in parts):
        raise ValueError("--city, --street-type, --address-name and --number go together")
    return AddressLocation(
        city=args.city,
        type=args.street_type,
        address_name=args.address_name,
        number=args.number,
    )


def _page_from_args(args: argparse.Namespace) -> PageRequest | None:
    if args.size is None and args.page == 0:
        return None
    if args.size is None:
        raise ValueError("--page requires --size")
    return PageRequest(page=args.page, size=args.size)


def _emit(payload: bytes) -> None:
    sys.stdout.write(payload.decode())
    sys.stdout.write("\n")


def _run_owner_command(coordinator: OwnershipCoordinator, args: argparse.Namespace) -> None:
    match args.owner_command:
        case "create":
            address = _address_from_args(args)
            if address is None:  # pragma: no cover - argparse enforces the address
                raise ValueError("An address is required")
            created = coordinator.create_owner(
                NewOwner(
                    name=args.name,
                    first_name=args.first_name,
                    gender=args.gender,
                    age=args.age,
                    address=address,
                )
            )
            if created.homonym_warning is not None:
                log.warning(
                    "Another active owner is already named %s",
                    created.homonym_warning.identity,
                )
            _emit(_OWNER.dump_json(created.owner, indent=2))
        case "update":
            view = coordinator.update_owner(
                _parse_uuid(args.owner_id),
                OwnerChanges(
                    name=args.name,
                    first_name=args.first_name,
                    gender=args.gender,
                    age=args.age,
                    address=_address_from_args(args),
                ),
            )
            _emit(_OWNER.dump_json(view, indent=2))
        case "deceased":
            coordinator.mark_owner_deceased(_parse_uuid(args.owner_id))
        case "pets":
            _emit(_PETS.dump_json(coordinator.pets_of_owner(_parse_uuid(args.owner_id)), indent=2))
        case "search":
            owners = coordinator.owners_by_pet_type_and_city(args.pet_type, args.city)
            _emit(_OWNERS.dump_json(owners, indent=2))
        case _:
            raise ValueError(f"Unsupported owner command: {args.owner_command}")


def _run_pet_command(coordinator: OwnershipCoordinator, args: argparse.Namespace) -> None:
    match args.pet_command:
        case "create":
            view = coordinator.create_pet(NewPet(name=args.name, type=args.type, age=args.age))
            _emit(_PET.dump_json(view, indent=2))
        case "update":
            view = coordinator.update_pet(
                _parse_uuid(args.pet_id),
                PetChanges(name=args.name, type=args.type, age=args.age),
            )
            _emit(_PET.dump_json(view, indent=2))
        case "deceased":
            coordinator.mark_pet_deceased(_parse_uuid(args.pet_id))
        case "assign":
            owner = coordinator.assign_pet(_parse_uuid(args.owner_id), _parse_uuid(args.pet_id))
            _emit(_OWNER.dump_json(owner, indent=2))
        case "remove":
            coordinator.remove_pet(_parse_uuid(args.owner_id), _parse_uuid(args.pet_id))
        case "city":
            page = coordinator.pets_in_city(args.city, _page_from_args(args))
            _emit(PetPage.from_page(page).model_dump_json(indent=2).encode())
        case "women":
            page = coordinator.pets_of_women_in_city(args.city, _page_from_args(args))
            _emit(PetPage.from_page(page).model_dump_json(indent=2).encode())
        case _:
            raise ValueError(f"Unsupported pet command: {args.pet_command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(EXIT_USAGE)

    try:
        coordinator = build_coordinator()
        if parsed_args.command == "owner":
            _run_owner_command(coordinator, parsed_args)
        elif parsed_args.command == "pet":
            _run_pet_command(coordinator, parsed_args)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except (ValueError, FieldValidationError) as exc:
        log.error("Invalid input: %s", exc)  # noqa: TRY400
        sys.exit(EXIT_USAGE)
    except NotFoundError as exc:
        log.error("%s", exc)  # noqa: TRY400
        sys.exit(EXIT_NOT_FOUND)
    except InvalidOperationError as exc:
        log.error("Refused (%s): %s", exc.reason, exc)  # noqa: TRY400
        sys.exit(EXIT_INVALID_OPERATION)
    except OwnershipError:
        log.exception("Store failure")
        sys.exit(EXIT_FAILURE)
    except Exception:
        log.exception("Fatal error")
        sys.exit(EXIT_FAILURE)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console-script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
