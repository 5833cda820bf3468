"""Column mixins for the persisted identity tables."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column


class TimestampMixin:
    """Provide ``created_at``, ``updated_at`` and soft-delete ``deleted_at`` columns.

    Attributes
    ----------
    created_at:
        Set by the database when the row is inserted.
    updated_at:
        Bumped by the database on every ORM update.
    deleted_at:
        Set only when the row is soft-deleted; lookups ignore such rows.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class UUIDPKMixin:
    """Expose an opaque UUID primary key named ``id``, generated client-side."""

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)


class ReprMixin:
    """Identify rows by class and primary key only, never by column values."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={getattr(self, 'id', None)}>"
