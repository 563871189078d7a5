"""Address resolution: one record per distinct location."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from petregistry.domain.model import Address

if TYPE_CHECKING:
    from petregistry.domain.model import AddressLocation
    from petregistry.domain.ports.persistence import AddressRepository

log = logging.getLogger(__name__)


def resolve_or_create_address(addresses: AddressRepository, location: AddressLocation) -> Address:
    """Return the canonical address for ``location``, creating it if absent."""

    existing = addresses.find_by_location(location)
    if existing is not None:
        return existing
    address = Address.at(location)
    addresses.add(address)
    log.info("Created address %s for %s", address.id, location)
    return address
