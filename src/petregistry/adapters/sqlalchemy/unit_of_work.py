"""SQLAlchemy-backed unit of work for ownership operations."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from petregistry.adapters.sqlalchemy.mappings import start_mappers
from petregistry.adapters.sqlalchemy.migrations import upgrade_head
from petregistry.adapters.sqlalchemy.repositories import (
    SqlAlchemyAddressRepository,
    SqlAlchemyOwnerRepository,
    SqlAlchemyPetRepository,
)
from petregistry.config import get_database_uri
from petregistry.domain.errors import StoreConflictError, StoreError
from petregistry.domain.ports.unit_of_work import OwnershipRepositories, RepositoryCollection

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when a SQLAlchemy unit of work is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    engine: Engine | None = None
    _sessions: sessionmaker[Session] | None = None

    def bind(self, engine: Engine | None) -> None:
        self.engine = engine
        self._sessions = None if engine is None else sessionmaker(
            bind=engine, expire_on_commit=False
        )

    def sessions(self) -> sessionmaker[Session]:
        if self._sessions is None:
            raise StartupError("Storage is not started; call startup() first")
        return self._sessions


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind an engine, bring its schema to head and prepare sessions.

    ``engine`` wins over ``database_uri``; with neither, the configured
    database URI is used. A second call needs ``force=True``.
    """

    if is_started() and not force:
        raise StartupError("Storage already started; pass force=True to rebind")

    target = engine or create_engine(database_uri or get_database_uri(), future=True)
    start_mappers()
    upgrade_head(engine=target)
    _STATE.bind(target)
    log.info("Storage started on %s", target.url)


def configured_engine() -> Engine | None:
    return _STATE.engine


def is_started() -> bool:
    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the bound engine, if any."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.bind(None)


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """Generic SQLAlchemy unit of work with pluggable repository collections.

    SQLAlchemy failures leave the block as ``StoreError``. Integrity violations
    and lost version checks leave it as ``StoreConflictError``. The session is
    rolled back first in both cases.
    """

    def __init__(self) -> None:
        self.session_factory: sessionmaker[Session] = _STATE.sessions()
        self._session: Session | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        self.session = self.session_factory()
        self._repositories = self._build_repositories(self.session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        self.session.close()
        self.session = None
        if isinstance(exc_value, (IntegrityError, StaleDataError)):
            raise StoreConflictError(f"Entity store rejected the change: {exc_value}") from (
                exc_value
            )
        if isinstance(exc_value, SQLAlchemyError):
            raise StoreError(f"Entity store failure: {exc_value}") from exc_value
        return False

    def commit(self) -> None:
        try:
            self.session.commit()
        except IntegrityError as exc:
            log.warning("Commit rejected by a consistency check: %s", exc.orig)
            self.session.rollback()
            raise StoreConflictError(f"Entity store rejected the change: {exc.orig}") from exc
        except StaleDataError as exc:
            log.warning("Commit lost a concurrent update: %s", exc)
            self.session.rollback()
            raise StoreConflictError(f"Entity changed concurrently: {exc}") from exc

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def repositories(self) -> TRepositories:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._repositories

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session

    @session.setter
    def session(self, session: Session | None) -> None:
        if self._session is not None and session is not None:
            raise StartupError("Unit of work session already initialised")
        self._session = session


class SqlAlchemyOwnershipUnitOfWork(BaseSqlAlchemyUnitOfWork[OwnershipRepositories]):
    """Unit of work managing SQLAlchemy sessions for owners, pets and addresses."""

    def _build_repositories(self, session: Session) -> OwnershipRepositories:
        return OwnershipRepositories(
            owners=SqlAlchemyOwnerRepository(session),
            pets=SqlAlchemyPetRepository(session),
            addresses=SqlAlchemyAddressRepository(session),
        )


if TYPE_CHECKING:
    from petregistry.domain.ports.unit_of_work import OwnershipUnitOfWork

    _uow_check: OwnershipUnitOfWork = SqlAlchemyOwnershipUnitOfWork()
