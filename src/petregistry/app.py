"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from petregistry.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyOwnershipUnitOfWork,
    is_started,
    startup,
)
from petregistry.config import get_query_config
from petregistry.domain.ownership import OwnershipCoordinator

if TYPE_CHECKING:
    from petregistry.config import QueryConfig
    from petregistry.domain.ownership import HomonymHook, UnitOfWorkFactory

log = getLogger(__name__)


def build_coordinator(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    query_config: QueryConfig | None = None,
    on_homonym: HomonymHook | None = None,
) -> OwnershipCoordinator:
    """Return a coordinator bound to the configured store.

    Without an explicit factory the SQLAlchemy adapter is started (once) and
    used for every unit of work.
    """

    effective_uow = unit_of_work_factory
    if effective_uow is None:
        if not is_started():
            startup()
        effective_uow = SqlAlchemyOwnershipUnitOfWork
    effective_config = query_config or get_query_config()
    log.debug("Building ownership coordinator (page_size=%s)", effective_config.page_size)
    return OwnershipCoordinator(
        effective_uow,
        default_page_size=effective_config.page_size,
        on_homonym=on_homonym,
    )
