"""Ownership rules engine.

Pure decision functions over the in-memory relationship graph. Nothing here
performs I/O or raises; callers receive a ``Decision`` and decide what to do
with a denial.

Address comparison is structural (see ``Address.same_place_as``). Age and
gender play no part in eligibility.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from petregistry.domain.errors import FailureReason

if TYPE_CHECKING:
    from petregistry.domain.homonyms import HomonymGroup
    from petregistry.domain.model import Owner, Pet


@dataclass(frozen=True, slots=True)
class Decision:
    reason: FailureReason | None = None

    @property
    def allowed(self) -> bool:
        return self.reason is None

    @classmethod
    def deny(cls, reason: FailureReason) -> Decision:
        return cls(reason=reason)


ALLOW = Decision()


def can_assign(owner: Owner, pet: Pet) -> Decision:
    """Decide whether ``owner`` may become an owner of ``pet``.

    An unclaimed pet can go to anyone. A claimed pet only joins a household
    that already owns it: at least one current owner must live at the same
    address as the candidate.
    """

    if owner.owns(pet) or pet.is_owned_by(owner):
        return Decision.deny(FailureReason.ALREADY_ASSIGNED)
    if not pet.is_unclaimed and not pet.has_owner_at(owner.address):
        return Decision.deny(FailureReason.ADDRESS_MISMATCH)
    return ALLOW


def can_remove(owner: Owner, pet: Pet, homonym_group: HomonymGroup) -> Decision:
    """Decide whether the link between ``owner`` and ``pet`` may be cleared.

    When the owner's identity is shared by other active owners, the pet must
    also be held by someone at this owner's address. That check runs first so
    a name-only match against another household reports the address problem.
    """

    if homonym_group.is_ambiguous and not pet.has_owner_at(owner.address):
        return Decision.deny(FailureReason.ADDRESS_MISMATCH)
    if not owner.owns(pet):
        return Decision.deny(FailureReason.NOT_ASSIGNED)
    return ALLOW
