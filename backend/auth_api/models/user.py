"""Identity model: the only persisted domain entity."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Text, UniqueConstraint, false
from sqlalchemy.orm import Mapped, mapped_column

from auth_api.core.extensions import db

from .base import ReprMixin, TimestampMixin, UUIDPKMixin


class User(UUIDPKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Authentication identity.

    Fields
    ------
    first_name, last_name : str
        Profile names (validated at the API boundary, min length 2).
    email : str
        Login key. Stored normalized (lowercase, trimmed) and unique.
    password_hash : str
        Salted hash; never serialized or logged. Hashing happens explicitly in
        :meth:`auth_api.repositories.user.UserRepository.save`.
    is_email_verified : bool
        Defaults to ``False``; no flow in this service changes it.
    refresh_token : str | None
        The single refresh token honored for this identity. ``None`` means no
        active session.
    last_login_at : datetime | None
        Timestamp of the most recent successful login.
    """

    __tablename__ = "users"

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(254), nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    is_email_verified: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    refresh_token: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (UniqueConstraint("email", name="uq_users_email"),)
