# auth_api/services/_shared/base.py
from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import UTC, datetime

from sqlalchemy.exc import SQLAlchemyError

from auth_api.services._shared.errors import AuthError, ErrorKind
from auth_api.uow.base import UnitOfWork
from auth_api.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)

logger = logging.getLogger(__name__)

UowFactory = Callable[[], UnitOfWork]


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Translate storage failures into the tagged error type, once.
    * Keep services thin, orchestration-only, no web/ORM leakage.

    Notes
    -----
    - Services must never touch the global session; always use a Unit of Work.
    - Unit-of-work factories are injected so tests can substitute fakes.
    """

    def __init__(
        self,
        *,
        uow_factory: UowFactory | None = None,
        ro_uow_factory: UowFactory | None = None,
    ) -> None:
        """
        Initialize the base service.

        :param uow_factory: Callable returning a read-write UoW.
        :type uow_factory: Callable[[], UnitOfWork] | None
        :param ro_uow_factory: Callable returning a read-only UoW.
        :type ro_uow_factory: Callable[[], UnitOfWork] | None
        """
        self._uow_factory = uow_factory or SQLAlchemyUnitOfWork
        self._ro_uow_factory = ro_uow_factory or SQLAlchemyReadOnlyUnitOfWork

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> UnitOfWork:
        """
        Create a read-write Unit of Work.

        :returns: Read-write UoW instance.
        :rtype: UnitOfWork
        """
        return self._uow_factory()

    def ro_uow(self) -> UnitOfWork:
        """
        Create a read-only Unit of Work.

        :returns: Read-only UoW instance.
        :rtype: UnitOfWork
        """
        return self._ro_uow_factory()

    # -------------------------- Error handling ------------------------------

    @contextmanager
    def persistence_guard(self, operation: str) -> Iterator[None]:
        """
        Map storage-layer exceptions raised inside the block to ``PERSISTENCE_FAILURE``.

        Tagged :class:`AuthError` instances pass through unchanged.

        :param operation: Short label used in the log record.
        :type operation: str
        :raises AuthError: With kind ``PERSISTENCE_FAILURE`` on ``SQLAlchemyError``.
        """
        try:
            yield
        except SQLAlchemyError as exc:
            logger.error(
                "Persistence failure during %s", operation, exc_info=True, extra={"kind": "persistence"}
            )
            raise AuthError(ErrorKind.PERSISTENCE_FAILURE) from exc

    @staticmethod
    def now_utc() -> datetime:
        return datetime.now(UTC)
