from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine, insert, text
from sqlalchemy.exc import OperationalError

from petregistry.adapters.sqlalchemy.mappings import owner_pet_table
from petregistry.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyOwnershipUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from petregistry.domain.errors import StoreConflictError, StoreError
from tests.helpers.ownership import make_owner, make_pet

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_unit_of_work_requires_startup() -> None:
    assert not is_started()
    with pytest.raises(StartupError):
        SqlAlchemyOwnershipUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b


def test_unit_of_work_persists_ownership(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    owner = make_owner()
    pet = make_pet()

    with SqlAlchemyOwnershipUnitOfWork() as uow:
        owner.adopt(pet)
        uow.repositories.owners.add(owner)
        uow.commit()

    with SqlAlchemyOwnershipUnitOfWork() as uow:
        loaded = uow.repositories.pets.find_active_with_owners(pet.id)
        assert loaded is not None
        assert {o.id for o in loaded.owners} == {owner.id}


def test_unit_of_work_rolls_back_without_commit(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    pet = make_pet()

    with pytest.raises(RuntimeError), SqlAlchemyOwnershipUnitOfWork() as uow:
        uow.repositories.pets.add(pet)
        uow.session.flush()
        raise RuntimeError("boom")

    with SqlAlchemyOwnershipUnitOfWork() as uow:
        assert uow.repositories.pets.get(pet.id) is None


def test_duplicate_link_surfaces_as_conflict(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    owner = make_owner()
    pet = make_pet()
    with SqlAlchemyOwnershipUnitOfWork() as uow:
        owner.adopt(pet)
        uow.repositories.owners.add(owner)
        uow.commit()

    with pytest.raises(StoreConflictError), SqlAlchemyOwnershipUnitOfWork() as uow:
        uow.session.execute(insert(owner_pet_table).values(owner_id=owner.id, pet_id=pet.id))
        uow.commit()


def test_sqlalchemy_errors_become_store_errors(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with pytest.raises(StoreError) as exc, SqlAlchemyOwnershipUnitOfWork() as uow:
        uow.session.execute(text("SELECT * FROM missing_table"))

    assert isinstance(exc.value.__cause__, OperationalError)


def test_session_is_closed_after_block(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    uow = SqlAlchemyOwnershipUnitOfWork()

    with uow:
        pass

    with pytest.raises(StartupError):
        _ = uow.session
