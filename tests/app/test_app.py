from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from petregistry import app as app_module
from petregistry.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyOwnershipUnitOfWork,
    is_started,
    shutdown,
)
from petregistry.config import QueryConfig
from petregistry.domain.commands import NewPet
from tests.helpers.ownership import FakeUnitOfWorkFactory

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_build_coordinator_uses_explicit_factory() -> None:
    factory = FakeUnitOfWorkFactory()
    coordinator = app_module.build_coordinator(
        unit_of_work_factory=factory, query_config=QueryConfig(page_size=5)
    )

    coordinator.create_pet(NewPet(name="Tom", type="cat"))

    assert factory.last.committed
    assert not is_started()


def test_build_coordinator_starts_sqlalchemy_adapter(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")
    monkeypatch.setenv("PETREGISTRY_PAGE_SIZE", "3")

    coordinator = app_module.build_coordinator()
    view = coordinator.create_pet(NewPet(name="Rex", type="dog"))

    assert is_started()
    with SqlAlchemyOwnershipUnitOfWork() as uow:
        assert uow.repositories.pets.get(view.id) is not None
