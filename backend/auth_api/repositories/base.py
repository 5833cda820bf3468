"""Generic repository base for SQLAlchemy 2.x.

Persistence-only concerns shared by repositories:
- Session resolution (injected session or the Flask-scoped one).
- Primary-key lookups that honor soft deletion.
- Whitelisted partial updates issued as a single ``UPDATE``.
- No business logic, no commit/rollback: services own transactions.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Select, select, update
from sqlalchemy.orm import InstrumentedAttribute, Session

from auth_api.core.extensions import db

E = TypeVar("E")  # SQLAlchemy mapped entity type


class BaseRepository(Generic[E]):
    """Persistence-only repository for a single aggregate.

    Subclasses MUST define ``model``. They MAY override ``_updatable_fields``
    to allow :meth:`update_fields` on named columns.

    This class NEVER opens, commits or rolls back transactions.
    """

    #: SQLAlchemy mapped model (must be set by subclasses)
    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        """
        :param session: Session shared across the Unit of Work scope. Falls back
            to the Flask-scoped session when omitted.
        """
        self._session: Session | None = session

    @property
    def session(self) -> Session:
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    # ------------------------------ Extensibility ----------------------------

    def _pk_attr(self) -> InstrumentedAttribute[Any]:
        return cast(InstrumentedAttribute[Any], getattr(self.model, "id"))

    def _updatable_fields(self) -> set[str]:
        """Whitelist of columns :meth:`update_fields` may touch (fail-closed)."""
        return set()

    def _live(self, stmt: Select[Any]) -> Select[Any]:
        """Exclude soft-deleted rows when the model supports it."""
        deleted_at = getattr(self.model, "deleted_at", None)
        if deleted_at is None:
            return stmt
        return stmt.where(deleted_at.is_(None))

    # --------------------------------- CRUD ----------------------------------

    def add(self, instance: E) -> E:
        """Stage ``instance`` and flush so constraint violations surface here."""
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        """Retrieve a live entity by primary key."""
        stmt = self._live(select(self.model).where(self._pk_attr() == entity_id))
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def find_one(self, **filters: Any) -> E | None:
        """Find a single live entity by equality filters."""
        stmt: Select[Any] = select(self.model)
        for key, value in filters.items():
            stmt = stmt.where(getattr(self.model, key) == value)
        return cast(E | None, self.session.execute(self._live(stmt)).scalars().first())

    def update_fields(self, entity_id: Any, fields: Mapping[str, Any]) -> int:
        """Issue a single ``UPDATE`` for whitelisted ``fields`` without loading the row.

        :returns: Number of affected rows (``0`` when the id is unknown).
        :raises ValueError: If any key is not in :meth:`_updatable_fields`.
        """
        allowed = self._updatable_fields()
        unknown = sorted(k for k in fields if k not in allowed)
        if unknown:
            raise ValueError(f"Unknown or non-updatable fields: {unknown}")
        if not fields:
            return 0
        stmt = (
            update(self.model)
            .where(self._pk_attr() == entity_id)
            .values(**fields)
            .execution_options(synchronize_session="evaluate")
        )
        result = self.session.execute(stmt)
        return int(getattr(result, "rowcount", 0) or 0)

    def soft_delete(self, instance: E) -> None:
        """Stamp ``deleted_at`` and flush."""
        setattr(instance, "deleted_at", datetime.now(UTC))
        self.flush()

    def flush(self) -> None:
        self.session.flush()
